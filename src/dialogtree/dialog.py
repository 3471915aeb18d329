""" Exit-state indexed dialog graphs

A flat alternative to the markup format: a mapping from integer state id to
node. A node's content is either a Monolog (lines of text and the state to go
to afterwards) or a list of DialogChoice, each with its own exit state. An
exit state that is not a key of the mapping ends the dialog.

Stored as yaml:

    1:
      source: The Frog
      content:
      - text: Hello HomeGirl
        condition: null
        exit_state: 2
      - text: KeroKero
        condition:
          karma_threshold: [-10, 10]
        exit_state: 3
      trigger_event: []
    2:
      source: Random Frog
      content:
        text:
        - Yo Homie
        exit_state: 4
      trigger_event:
      - FrogTalk
"""

from typing import Sequence, Dict, Any, Optional, List, Union, Mapping, MutableMapping

import yaml # type: ignore

from dialogtree import core

class DialogChoice:
    def __init__(self, text:str, condition:Optional[core.Condition], exit_state:int) -> None:
        self.text = text
        self.condition = condition
        self.exit_state = exit_state

    def is_verified(self, karma:Optional[int]=None, active_events:Optional[Sequence[str]]=None) -> bool:
        if self.condition is None:
            return True
        return self.condition.is_verified(karma, active_events)

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, DialogChoice):
            return NotImplemented
        return (self.text, self.condition, self.exit_state) == (other.text, other.condition, other.exit_state)

    def __repr__(self) -> str:
        return f'DialogChoice({self.text!r}, {self.condition!r}, {self.exit_state})'

class Monolog:
    def __init__(self, text:Sequence[str], exit_state:int) -> None:
        self.text = list(text)
        self.exit_state = exit_state

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, Monolog):
            return NotImplemented
        return (self.text, self.exit_state) == (other.text, other.exit_state)

    def __repr__(self) -> str:
        return f'Monolog({self.text!r}, {self.exit_state})'

GraphContent = Union[Monolog, List[DialogChoice]]

class GraphNode:
    def __init__(self, source:str, content:GraphContent, trigger_event:Optional[Sequence[str]]=None) -> None:
        self.source = source
        self.content = content
        self.trigger_event = list(trigger_event) if trigger_event is not None else []

    def is_choices(self) -> bool:
        return isinstance(self.content, list)

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, GraphNode):
            return NotImplemented
        return (self.source, self.content, self.trigger_event) == (other.source, other.content, other.trigger_event)

    def __repr__(self) -> str:
        return f'GraphNode({self.source!r}, {self.content!r}, {self.trigger_event!r})'

class DialogGraph:
    def __init__(self, nodes:Mapping[int, GraphNode], root_id:int=1) -> None:
        self.nodes:Dict[int, GraphNode] = dict(nodes)
        self.root_id = root_id

    def is_end(self, state:int) -> bool:
        return state not in self.nodes

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, DialogGraph):
            return NotImplemented
        return self.root_id == other.root_id and self.nodes == other.nodes

def load_condition(condition_data:Optional[Mapping[str, Any]]) -> Optional[core.Condition]:
    if condition_data is None:
        return None

    karma_threshold = None
    if "karma_threshold" in condition_data:
        low, high = condition_data["karma_threshold"]
        karma_threshold = (min(low, high), max(low, high))

    events = condition_data.get("events")
    if events is not None:
        events = list(events)

    return core.Condition(karma_threshold, events)

def load_graph_node(node_id:int, node_data:Mapping[str, Any]) -> GraphNode:
    if "content" not in node_data:
        content:GraphContent = Monolog([], 0)
    elif isinstance(node_data["content"], list):
        content = [
            DialogChoice(x.get("text", ""), load_condition(x.get("condition")), x.get("exit_state", 0))
            for x in node_data["content"]
        ]
    elif isinstance(node_data["content"], dict):
        content = Monolog(node_data["content"].get("text", []), node_data["content"].get("exit_state", 0))
    else:
        raise ValueError(f'content of node {node_id} must be a mapping or a list of mappings')

    return GraphNode(
        node_data.get("source", ""),
        content,
        node_data.get("trigger_event", []),
    )

def loadd(graph_data:Mapping[Any, Mapping[str, Any]], root_id:int=1) -> DialogGraph:
    nodes:Dict[int, GraphNode] = {}
    for key, node_data in graph_data.items():
        try:
            node_id = int(key)
        except ValueError as e:
            raise ValueError(f'dialog state ids must be integers, got "{key}"') from e
        nodes[node_id] = load_graph_node(node_id, node_data)
    return DialogGraph(nodes, root_id)

def loads(data:str, root_id:int=1) -> DialogGraph:
    return loadd(yaml.safe_load(data) or {}, root_id)

def dump_condition(condition:core.Condition) -> Dict[str, Any]:
    condition_data:Dict[str, Any] = {}
    if condition.karma_threshold is not None:
        condition_data["karma_threshold"] = list(condition.karma_threshold)
    if condition.events is not None:
        condition_data["events"] = list(condition.events)
    return condition_data

def dumpd(graph:DialogGraph) -> Dict[int, Any]:
    graph_data:Dict[int, Any] = {}
    for node_id in sorted(graph.nodes):
        node = graph.nodes[node_id]
        node_data:Dict[str, Any] = {"source": node.source}
        if isinstance(node.content, Monolog):
            node_data["content"] = {"text": list(node.content.text), "exit_state": node.content.exit_state}
        else:
            choices = []
            for choice in node.content:
                choices.append({
                    "text": choice.text,
                    "condition": dump_condition(choice.condition) if choice.condition is not None else None,
                    "exit_state": choice.exit_state,
                })
            node_data["content"] = choices
        node_data["trigger_event"] = list(node.trigger_event)
        graph_data[node_id] = node_data
    return graph_data

def dumps(graph:DialogGraph) -> str:
    return yaml.safe_dump(dumpd(graph), sort_keys=False, allow_unicode=True)

def from_tree(root:core.DialogNode, end_state:int=0) -> DialogGraph:
    """ Flattens a dialog tree into a graph, numbering nodes in preorder
    starting at 1. Leaves exit to end_state, which must not be a node id. """

    node_ids:MutableMapping[int, int] = {}
    nodes = list(root.iter_nodes())
    for i, node in enumerate(nodes, start=1):
        node_ids[id(node)] = i
    if end_state in node_ids.values():
        raise ValueError(f'end state {end_state} collides with a node id')

    graph_nodes:Dict[int, GraphNode] = {}
    for node in nodes:
        exits = [node_ids[id(child)] for child in node.children]
        content:GraphContent
        if node.is_choice():
            content = []
            for i, c in enumerate(node.content):
                assert isinstance(c, core.Choice)
                content.append(DialogChoice(c.text, c.condition, exits[i] if i < len(exits) else end_state))
        else:
            content = Monolog(
                [c.text for c in node.content],
                exits[0] if exits else end_state,
            )
        graph_nodes[node_ids[id(node)]] = GraphNode(
            node.author if node.author is not None else "",
            content,
            node.trigger_event,
        )

    return DialogGraph(graph_nodes, 1)
