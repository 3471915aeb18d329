import enum
from typing import Iterable, Optional, Tuple

from dialogtree import core

KARMA_MAX = 100
KARMA_MIN = -KARMA_MAX

class WorldEvent(enum.Enum):
    BeatTheGame = enum.auto()
    FirstKill = enum.auto()
    AreaCleared = enum.auto()
    HasCharisma = enum.auto()
    HasFriend = enum.auto()
    WonTheLottery = enum.auto()
    FrogTalk = enum.auto()

class ThrowableEvent(enum.Enum):
    FightEvent = enum.auto()
    HasFriend = enum.auto()
    FrogTalk = enum.auto()

def make_infos(
        world_event:Optional[Iterable[str]]=None,
        karma_limits:Optional[Tuple[int, int]]=(KARMA_MIN, KARMA_MAX),
        trigger_event:Optional[Iterable[str]]=None,
) -> core.DialogCustomInfos:
    if world_event is None:
        world_event = [x.name for x in WorldEvent]
    if trigger_event is None:
        trigger_event = [x.name for x in ThrowableEvent]
    return core.DialogCustomInfos(world_event, karma_limits, trigger_event)

FABIEN_DIALOG = """# Fabien

- Hello

## Fabien

- /<3

### Morgan

- Hey | None
- No Hello | None
- Want to share a flat ? | None

#### Fabien

- :)

#### Fabien

- :O

#### Fabien

- Sure
"""

OLF_DIALOG = """# Olf

- Hello
- Do you mind giving me your belongings ?
- Or maybe...
- You want to fight me ?

## Morgan

- Here my money | e: WonTheLottery;
- You will feel my guitar | None
- Call Homie | k: 10,MAX;

### Olf

- Thank you very much

### Olf

- Nice

-> FightEvent

### Olf

- Not Nice

-> FightEvent
"""

MORGAN_DIALOG = "# Morgan\n\n- Bonjour Florian. /\nComment vas/-tu ? /\nJ'ai faim.\n"
