""" Drives a conversation through a dialog tree.

The conversation state is the markup of the current node's subtree. Every step
prints the next node and the following step parses it again, so the state can
be saved and restored as a plain string at any point.
"""

import logging
from typing import Optional, List, Tuple, Iterable

import numpy as np

from dialogtree import core, parser, printer, util, config

class DialogManager:
    def __init__(
            self,
            source:str,
            infos:core.DialogCustomInfos,
            karma:Optional[int]=None,
            active_events:Iterable[str]=(),
            seed:Optional[int]=None,
    ) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.source = source
        self.current:Optional[str] = source
        self.infos = infos
        self.karma = karma
        self.active_events:List[str] = list(active_events)
        self._initial_events = list(self.active_events)

        if seed is None and config.Settings.manager.seed >= 0:
            seed = config.Settings.manager.seed
        self.random = np.random.default_rng(seed)

        self._parsed_text:Optional[str] = None
        self._parsed_node:Optional[core.DialogNode] = None

    @property
    def node(self) -> Optional[core.DialogNode]:
        if self.current is None:
            return None
        if self._parsed_text != self.current:
            self._parsed_node = parser.loads(self.current, self.infos)
            self._parsed_text = self.current
        return self._parsed_node

    def is_finished(self) -> bool:
        return self.current is None

    def choices(self) -> List[Tuple[int, core.Choice]]:
        node = self.node
        if node is None:
            return []
        return node.verified_choices(self.karma, self.active_events)

    def activate(self, events:Iterable[str]) -> None:
        for event in events:
            if event not in self.infos.world_event:
                continue
            if event not in self.active_events:
                self.logger.debug(f'world event {event} is now active')
                self.active_events.append(event)

    def dive(self, child_index:int=0, skip:bool=False) -> List[str]:
        """ Advances the conversation.

        Parameters
        ----------
        child_index : int
            which child to go to, for a choice node the index of the picked
            choice
        skip : bool
            a "continue" request, it advances monologues but never answers a
            choice

        Returns
        -------
        out : list of str
            trigger events fired by leaving the node
        """

        node = self.node
        if node is None:
            raise ValueError("dialog is already finished")

        fired:List[str] = []
        if node.is_choice():
            if skip:
                return fired
            if child_index not in (i for i, _ in self.choices()):
                raise ValueError(f'choice {child_index} is not available in the current node')
            self.current = self._next(node, child_index)
            fired = list(node.trigger_event)
        elif len(node.content) > 1:
            # the monologue goes on
            node.content = node.content[1:]
            self.current = printer.print_file(node)
        else:
            self.current = self._next(node, child_index)
            fired = list(node.trigger_event)

        if fired:
            self.logger.info(f'leaving {node.author} fires {fired}')
            self.activate(fired)

        return fired

    def _next(self, node:core.DialogNode, child_index:int) -> Optional[str]:
        if node.is_end_node():
            self.logger.debug("reached an end node, dialog is over")
            return None
        if child_index < 0 or child_index >= len(node.children):
            raise ValueError(f'no child {child_index}, current node has {len(node.children)}')
        return printer.print_file(node.children[child_index])

    def npc_choice(self) -> Optional[int]:
        """ Picks one of the available choices at random, for NPC speakers. """
        indices = [i for i, _ in self.choices()]
        if len(indices) == 0:
            return None
        return int(self.random.choice(indices))

    def reset(self) -> None:
        self.current = self.source
        self.active_events = list(self._initial_events)
