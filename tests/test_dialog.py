import pytest

from dialogtree import dialog, parser
from dialogtree.core import Condition
from . import OLF_DIALOG

FROG_DIALOG = """1:
  source: The Frog
  content:
  - text: Hello HomeGirl
    condition: null
    exit_state: 2
  - text: KeroKero
    condition: null
    exit_state: 3
  trigger_event: []
2:
  source: Random Frog
  content:
    text:
    - Yo Homie
    exit_state: 4
  trigger_event: []
3:
  source: Random Frog
  content:
    text:
    - KeroKero
    exit_state: 4
  trigger_event: []
"""

def frog_graph() -> dialog.DialogGraph:
    return dialog.DialogGraph({
        1: dialog.GraphNode("The Frog", [
            dialog.DialogChoice("Hello HomeGirl", None, 2),
            dialog.DialogChoice("KeroKero", None, 3),
        ]),
        2: dialog.GraphNode("Random Frog", dialog.Monolog(["Yo Homie"], 4)),
        3: dialog.GraphNode("Random Frog", dialog.Monolog(["KeroKero"], 4)),
    })

def test_dumps_monolog():
    graph = dialog.DialogGraph({
        1: dialog.GraphNode("Le Pape", dialog.Monolog(["Hello Homie"], 2)),
    })
    assert dialog.dumps(graph) == "1:\n  source: Le Pape\n  content:\n    text:\n    - Hello Homie\n    exit_state: 2\n  trigger_event: []\n"

def test_dumps_monologs():
    graph = dialog.DialogGraph({
        1: dialog.GraphNode("The Frog", dialog.Monolog(["Hello Homie", "I mean...", "KeroKero"], 2)),
        2: dialog.GraphNode("Random Frog", dialog.Monolog(["KeroKero"], 3)),
    })
    assert dialog.dumps(graph) == """1:
  source: The Frog
  content:
    text:
    - Hello Homie
    - I mean...
    - KeroKero
    exit_state: 2
  trigger_event: []
2:
  source: Random Frog
  content:
    text:
    - KeroKero
    exit_state: 3
  trigger_event: []
"""

def test_dumps_choices():
    assert dialog.dumps(frog_graph()) == FROG_DIALOG

def test_loads():
    graph = dialog.loads(FROG_DIALOG)

    assert graph == frog_graph()
    assert graph.root_id == 1
    assert graph.nodes[1].is_choices()
    assert not graph.nodes[2].is_choices()
    assert not graph.is_end(3)
    assert graph.is_end(4)

def test_loads_missing_fields():
    graph = dialog.loads("1:\n  source: Le Pape\n  content:\n    text:\n    - Hello Homie\n    exit_state: 2\n")
    assert graph == dialog.DialogGraph({
        1: dialog.GraphNode("Le Pape", dialog.Monolog(["Hello Homie"], 2)),
    })

    graph = dialog.loads("1:\n  source: The Frog\n  content:\n  - text: KeroKero\n    exit_state: 3\n  trigger_event:\n  - FrogTalk\n")
    assert graph.nodes[1].content == [dialog.DialogChoice("KeroKero", None, 3)]
    assert graph.nodes[1].trigger_event == ["FrogTalk"]

def test_loads_condition():
    graph = dialog.loads("""1:
  source: The Frog
  content:
  - text: KeroKero
    condition:
      karma_threshold: [10, -10]
      events: [FrogTalk]
    exit_state: 3
""")
    kero = graph.nodes[1].content[0]

    # bounds are ordered on load
    assert kero.condition == Condition((-10, 10), ["FrogTalk"])
    assert kero.is_verified(0, ["FrogTalk"])
    assert not kero.is_verified(50, ["FrogTalk"])
    assert not kero.is_verified(0, [])

def test_bad_state_id():
    with pytest.raises(ValueError):
        dialog.loadd({"start": {"source": "Olf"}})

def test_bad_content():
    with pytest.raises(ValueError):
        dialog.loadd({1: {"source": "Olf", "content": "Hello"}})

def test_dumpd():
    graph = dialog.DialogGraph({
        2: dialog.GraphNode("Random Frog", dialog.Monolog(["KeroKero"], 3)),
        1: dialog.GraphNode("The Frog", [
            dialog.DialogChoice("Hello HomeGirl", None, 2),
            dialog.DialogChoice("Rich", Condition((0, 100), ["WonTheLottery"]), 3),
        ], ["FrogTalk"]),
    })

    assert dialog.dumpd(graph) == {
        1: {
            "source": "The Frog",
            "content": [
                {"text": "Hello HomeGirl", "condition": None, "exit_state": 2},
                {"text": "Rich", "condition": {"karma_threshold": [0, 100], "events": ["WonTheLottery"]}, "exit_state": 3},
            ],
            "trigger_event": ["FrogTalk"],
        },
        2: {
            "source": "Random Frog",
            "content": {"text": ["KeroKero"], "exit_state": 3},
            "trigger_event": [],
        },
    }
    assert dialog.loads(dialog.dumps(graph)) == graph

def test_from_tree(infos):
    root = parser.loads(OLF_DIALOG, infos)
    graph = dialog.from_tree(root)

    assert sorted(graph.nodes) == [1, 2, 3, 4, 5]
    assert graph.nodes[1] == dialog.GraphNode("Olf", dialog.Monolog([
        "Hello",
        "Do you mind giving me your belongings ?",
        "Or maybe...",
        "You want to fight me ?",
    ], 2))

    morgan = graph.nodes[2]
    assert morgan.source == "Morgan"
    assert [c.exit_state for c in morgan.content] == [3, 4, 5]
    assert morgan.content[0].condition == Condition(None, ["WonTheLottery"])

    assert graph.nodes[3].content == dialog.Monolog(["Thank you very much"], 0)
    assert graph.nodes[4].trigger_event == ["FightEvent"]
    assert graph.is_end(0)

    assert dialog.loads(dialog.dumps(graph)) == graph

def test_from_tree_end_state_collision(infos):
    root = parser.loads(OLF_DIALOG, infos)
    with pytest.raises(ValueError):
        dialog.from_tree(root, end_state=3)

    graph = dialog.from_tree(root, end_state=-1)
    assert graph.nodes[5].content.exit_state == -1
