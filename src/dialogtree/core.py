""" Dialog tree data model

A dialog tree is a rooted, ordered tree of DialogNode. Each node is one beat
of a conversation: either a monologue (a sequence of Text) or a set of
Choice, optionally gated by a Condition. Children are ordered, for a Text
node child 0 is the continuation, for a Choice node child i is the
consequence of picking choice i.
"""

import weakref
from dataclasses import dataclass
from typing import Optional, List, Tuple, Union, Iterable, Iterator, Collection, Sequence, Any

import graphviz # type: ignore

from dialogtree import config

@dataclass(eq=True)
class Condition:
    """ Gate on a Choice.

    karma_threshold is an inclusive (min, max) range, events are the names
    that must all be active. None on either axis means no constraint. """

    karma_threshold:Optional[Tuple[int, int]] = None
    events:Optional[List[str]] = None

    def is_karma_verified(self, karma:int) -> bool:
        if self.karma_threshold is None:
            return True
        return self.karma_threshold[0] <= karma <= self.karma_threshold[1]

    def is_events_verified(self, active_events:Collection[str]) -> bool:
        if self.events is None:
            return True
        return all(e in active_events for e in self.events)

    def is_verified(self, karma:Optional[int]=None, active_events:Optional[Collection[str]]=None) -> bool:
        if karma is None:
            karma_verified = self.karma_threshold is None
        else:
            karma_verified = self.is_karma_verified(karma)

        if active_events is None:
            events_verified = self.events is None
        else:
            events_verified = self.is_events_verified(active_events)

        return karma_verified and events_verified

@dataclass(eq=True)
class Text:
    text:str = ""

@dataclass(eq=True)
class Choice:
    text:str = ""
    condition:Optional[Condition] = None

    def is_verified(self, karma:Optional[int]=None, active_events:Optional[Collection[str]]=None) -> bool:
        if self.condition is None:
            return True
        return self.condition.is_verified(karma, active_events)

DialogContent = Union[Text, Choice]

def same_kind(a:DialogContent, b:DialogContent) -> bool:
    """ True if a and b are the same variant, ignoring their payload. """
    return type(a) == type(b)

class DialogCustomInfos:
    """ Per-parse configuration.

    world_event lists the names usable in conditions, trigger_event the names
    usable after "->". karma_limits replaces the MIN/MAX keywords, falling
    back to the configured defaults when None. """

    @classmethod
    def from_settings(cls, settings:Any=None) -> "DialogCustomInfos":
        if settings is None:
            settings = config.Settings
        return cls(
            settings.events.world,
            (settings.karma.min, settings.karma.max),
            settings.events.trigger,
        )

    def __init__(self, world_event:Iterable[str]=(), karma_limits:Optional[Tuple[int, int]]=None, trigger_event:Iterable[str]=()) -> None:
        self.world_event = frozenset(world_event)
        self.karma_limits = karma_limits
        self.trigger_event = frozenset(trigger_event)

    def resolved_karma_limits(self) -> Tuple[int, int]:
        if self.karma_limits is None:
            return (config.Settings.karma.min, config.Settings.karma.max)
        return self.karma_limits

    def __repr__(self) -> str:
        return f'DialogCustomInfos(world_event={sorted(self.world_event)}, karma_limits={self.karma_limits}, trigger_event={sorted(self.trigger_event)})'

class DialogNode:
    def __init__(
            self,
            content:Optional[List[DialogContent]]=None,
            author:Optional[str]=None,
            children:Optional[Sequence["DialogNode"]]=None,
            trigger_event:Optional[List[str]]=None,
    ) -> None:
        self.content:List[DialogContent] = content if content is not None else []
        # None is the narrator
        self.author = author
        self.trigger_event:List[str] = trigger_event if trigger_event is not None else []
        self.children:List[DialogNode] = []
        self._parent:Optional[weakref.ref[DialogNode]] = None

        if children is not None:
            for child in children:
                self.add_child(child)

    @property
    def parent(self) -> Optional["DialogNode"]:
        if self._parent is None:
            return None
        return self._parent()

    def add_child(self, child:"DialogNode") -> None:
        if child.parent is not None:
            raise ValueError(f'{child} already has a parent')
        child._parent = weakref.ref(self)
        self.children.append(child)

    def is_end_node(self) -> bool:
        return len(self.children) == 0

    def is_choice(self) -> bool:
        return len(self.content) > 0 and isinstance(self.content[0], Choice)

    def is_text(self) -> bool:
        return len(self.content) > 0 and isinstance(self.content[0], Text)

    def depth(self) -> int:
        d = 1
        node = self.parent
        while node is not None:
            d += 1
            node = node.parent
        return d

    def iter_nodes(self) -> Iterator["DialogNode"]:
        """ preorder traversal of this subtree """
        stack:List[DialogNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def verified_choices(self, karma:Optional[int]=None, active_events:Optional[Collection[str]]=None) -> List[Tuple[int, Choice]]:
        return [
            (i, c) for i, c in enumerate(self.content)
            if isinstance(c, Choice) and c.is_verified(karma, active_events)
        ]

    def at_least_one_child_is_verified(self, karma:Optional[int]=None, active_events:Optional[Collection[str]]=None) -> bool:
        # only looks at each child's own content, not deeper
        for child in self.children:
            if not child.is_choice():
                return True
            if len(child.verified_choices(karma, active_events)) > 0:
                return True
        return False

    def viz(self) -> graphviz.Digraph:
        g = graphviz.Digraph("dialog_tree", graph_attr={"rankdir": "TB"})

        ids = {id(node): i for i, node in enumerate(self.iter_nodes())}
        for node in self.iter_nodes():
            label_lines = [node.author if node.author is not None else "(narrator)"]
            for c in node.content:
                if isinstance(c, Choice):
                    label_lines.append(f'? {c.text}')
                else:
                    label_lines.append(c.text)
            if node.trigger_event:
                label_lines.append(f'-> {", ".join(node.trigger_event)}')
            shape = "box" if node.is_choice() else "ellipse"
            g.node(f'{ids[id(node)]}', label="\n".join(label_lines), shape=shape)
            for i, child in enumerate(node.children):
                g.edge(f'{ids[id(node)]}', f'{ids[id(child)]}', label=f'{i}')

        return g

    def __eq__(self, other:object) -> bool:
        if not isinstance(other, DialogNode):
            return NotImplemented
        return (
            self.author == other.author
            and self.content == other.content
            and self.trigger_event == other.trigger_event
            and self.children == other.children
        )

    __hash__ = None # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'DialogNode(author={self.author!r}, content={self.content!r}, trigger_event={self.trigger_event!r}, children={len(self.children)})'
