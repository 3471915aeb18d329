""" Dialog tree source parsing

Converts dialog markup into a tree of DialogNode. The format looks like:

    # Olf

    - Hello
    - Do you mind giving me your belongings ?

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

Headers give the author and, through the number of "#", the depth of the node
in the tree. Lines starting with "-" are the content of the current node,
either plain text or, when a "|" is present, a choice followed by its
condition. Lines starting with "->" list the events triggered when leaving the
node. A "/" makes the next character literal in headers and content.

The source is scanned one character at a time by DialogTreeBuilder, which
keeps an explicit Phase (and ClauseState while reading a condition) so every
transition can be exercised on its own.
"""

import re
import enum
import logging
from typing import Optional, List, Tuple, Callable, Mapping, TextIO

from dialogtree import core, util

logger = logging.getLogger(__name__)

ESCAPE_CHAR = "/"
HEADER_CHAR = "#"
CONTENT_CHAR = "-"
TRIGGER_CHAR = ">"
CONDITION_CHAR = "|"
# characters that change the phase unless escaped
SPECIAL_CHARS = "#-|>\n/"
BLANKS = " \t"

KARMA_MAX_KEYWORDS = ("MAX", "max")
KARMA_MIN_KEYWORDS = ("MIN", "min")
KARMA_NUMBER_RE = re.compile("-?[0-9]+")

class Phase(enum.Enum):
    # at the start of a line, waiting for a marker
    IDLE = enum.auto()
    # reading a "#" header
    AUTHOR = enum.auto()
    # reading the text of a "-" line
    CONTENT = enum.auto()
    # reading the condition after "|"
    CONDITION = enum.auto()
    # reading event names after "->"
    TRIGGER = enum.auto()

class ClauseState(enum.Enum):
    # waiting for the first letter of a clause
    KEYWORD = enum.auto()
    # inside a karma keyword, waiting for ":"
    KARMA_KEY = enum.auto()
    # inside an event keyword, waiting for ":"
    EVENT_KEY = enum.auto()
    # reading karma bounds
    KARMA = enum.auto()
    # reading world event names
    EVENT = enum.auto()
    # "None" or anything else we ignore up to ";"
    SKIP = enum.auto()

class ParseErrorCase(enum.Enum):
    MALFORMED_NUMBER = enum.auto()
    MALFORMED_KARMA = enum.auto()
    MIXED_CONTENT = enum.auto()
    STRUCTURE = enum.auto()
    UNEXPECTED_TEXT = enum.auto()
    UNTERMINATED = enum.auto()

class ParseError(ValueError):
    def __init__(self, case:ParseErrorCase, message:str, position:int, line:int, column:int, text:Optional[str]=None) -> None:
        super().__init__(f'{message} (line {line}, column {column})')
        self.case = case
        self.position = position
        self.line = line
        self.column = column
        self.text = text

class DialogTreeBuilder:
    """ Single pass builder of a dialog tree.

    feed() takes one character at a time, finish() returns the root once the
    whole source has been fed. """

    def __init__(self, infos:core.DialogCustomInfos) -> None:
        self.infos = infos
        self.karma_limits = infos.resolved_karma_limits()

        self.root = core.DialogNode()
        self.current = self.root
        # depth of the last header, 0 until the root gets its header
        self.last_depth = 0

        self.phase = Phase.IDLE
        self.clause = ClauseState.KEYWORD
        self.escaped = False

        self.position = 0
        self.line = 1
        self.column = 1

        self._depth = 0
        self._counting_depth = False
        self._buffer:List[str] = []
        self._choice_text = ""
        self._karma_operands:List[str] = []
        self._karma_threshold:Optional[Tuple[int, int]] = None
        self._events:List[str] = []

        self._handlers:Mapping[Phase, Callable[[str], None]] = {
            Phase.IDLE: self._scan_idle,
            Phase.AUTHOR: self._scan_author,
            Phase.CONTENT: self._scan_content,
            Phase.CONDITION: self._scan_condition,
            Phase.TRIGGER: self._scan_trigger,
        }

    def feed(self, c:str) -> None:
        if self.escaped:
            self.escaped = False
            self._counting_depth = False
            self._buffer.append(c)
        elif c == ESCAPE_CHAR and self.phase in (Phase.AUTHOR, Phase.CONTENT):
            self.escaped = True
        else:
            self._handlers[self.phase](c)

        self.position += 1
        if c == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def finish(self) -> core.DialogNode:
        if self.phase != Phase.IDLE or self.escaped:
            raise self._error(ParseErrorCase.UNTERMINATED, f'source ended inside a {self.phase.name.lower()} line', "".join(self._buffer))
        return self.root

    def _error(self, case:ParseErrorCase, message:str, text:Optional[str]=None) -> ParseError:
        return ParseError(case, message, self.position, self.line, self.column, text)

    def _take_buffer(self) -> str:
        value = "".join(self._buffer)
        self._buffer.clear()
        return value

    # phase handlers

    def _scan_idle(self, c:str) -> None:
        if c == "\n" or c in BLANKS:
            return
        elif c == HEADER_CHAR:
            self._buffer.clear()
            self._depth = 1
            self._counting_depth = True
            self.phase = Phase.AUTHOR
        elif c == CONTENT_CHAR:
            self._buffer.clear()
            self.phase = Phase.CONTENT
        else:
            raise self._error(ParseErrorCase.UNEXPECTED_TEXT, f'expected "#", "-" or "->" at the start of a line, got "{c}"', c)

    def _scan_author(self, c:str) -> None:
        if c == HEADER_CHAR and self._counting_depth:
            self._depth += 1
        elif c == "\n":
            author = self._take_buffer().strip(BLANKS)
            self._open_node(self._depth, author if author else None)
            self.phase = Phase.IDLE
        else:
            self._counting_depth = False
            self._buffer.append(c)

    def _scan_content(self, c:str) -> None:
        if c == "\n":
            self._commit_text()
            self.phase = Phase.IDLE
        elif c == CONDITION_CHAR:
            self._choice_text = self._take_buffer()
            self.clause = ClauseState.KEYWORD
            self.phase = Phase.CONDITION
        elif c == TRIGGER_CHAR and not "".join(self._buffer).strip(BLANKS):
            self._buffer.clear()
            self.phase = Phase.TRIGGER
        else:
            self._buffer.append(c)

    def _scan_condition(self, c:str) -> None:
        if c == "\n":
            self._end_clause()
            self._commit_choice()
            self.phase = Phase.IDLE
            return

        if self.clause == ClauseState.KEYWORD:
            if c in BLANKS or c == ";":
                return
            # only the first letter matters, "k:", "karma:" and "kama:" are
            # all karma clauses
            if c.lower() == "k":
                self.clause = ClauseState.KARMA_KEY
            elif c.lower() == "e":
                self.clause = ClauseState.EVENT_KEY
            else:
                self.clause = ClauseState.SKIP
        elif self.clause in (ClauseState.KARMA_KEY, ClauseState.EVENT_KEY):
            if c == ":":
                self.clause = ClauseState.KARMA if self.clause == ClauseState.KARMA_KEY else ClauseState.EVENT
            elif c == ";":
                self._end_clause()
        elif self.clause == ClauseState.KARMA:
            if c in BLANKS:
                return
            elif c == ",":
                self._karma_operands.append(self._take_buffer())
            elif c == ";":
                self._end_clause()
            else:
                self._buffer.append(c)
        elif self.clause == ClauseState.EVENT:
            if c in BLANKS:
                return
            elif c == ",":
                self._push_event()
            elif c == ";":
                self._end_clause()
            else:
                self._buffer.append(c)
        elif self.clause == ClauseState.SKIP:
            if c == ";":
                self.clause = ClauseState.KEYWORD

    def _scan_trigger(self, c:str) -> None:
        if c in BLANKS:
            return
        elif c == ",":
            self._push_trigger()
        elif c == "\n":
            self._push_trigger()
            self.phase = Phase.IDLE
        else:
            self._buffer.append(c)

    # tree building

    def _open_node(self, depth:int, author:Optional[str]) -> None:
        if self.last_depth == 0:
            # the first header names the root
            self.root.author = author
            self.last_depth = depth
            return

        for _ in range(max(0, self.last_depth - depth + 1)):
            parent = self.current.parent
            if parent is None:
                raise self._error(ParseErrorCase.STRUCTURE, f'header of depth {depth} after depth {self.last_depth} climbs above the root', author)
            self.current = parent

        child = core.DialogNode(author=author)
        self.current.add_child(child)
        self.current = child
        self.last_depth = depth

    def _commit_text(self) -> None:
        text = self._take_buffer().strip(BLANKS)
        if not text:
            return
        if self.current.is_choice():
            raise self._error(ParseErrorCase.MIXED_CONTENT, f'text "{util.elipsis(text, 32)}" in a node holding choices', text)
        self.current.content.append(core.Text(text))

    def _commit_choice(self) -> None:
        text = self._choice_text.strip(BLANKS)
        if self.current.is_text():
            raise self._error(ParseErrorCase.MIXED_CONTENT, f'choice "{util.elipsis(text, 32)}" in a node holding text', text)

        condition:Optional[core.Condition] = None
        if self._karma_threshold is not None or self._events:
            condition = core.Condition(self._karma_threshold, list(self._events) if self._events else None)
        self.current.content.append(core.Choice(text, condition))

        self._choice_text = ""
        self._karma_operands = []
        self._karma_threshold = None
        self._events = []
        self._buffer.clear()
        self.clause = ClauseState.KEYWORD

    def _end_clause(self) -> None:
        if self.clause == ClauseState.KARMA:
            self._karma_operands.append(self._take_buffer())
            self._finish_karma()
        elif self.clause == ClauseState.EVENT:
            self._push_event()
        elif self.clause in (ClauseState.KARMA_KEY, ClauseState.EVENT_KEY):
            logger.warning(f'condition keyword without ":" at line {self.line}, ignoring the clause')
        self.clause = ClauseState.KEYWORD

    def _finish_karma(self) -> None:
        operands = self._karma_operands
        self._karma_operands = []

        if len(operands) == 1:
            logger.warning(f'karma threshold "{operands[0]}" at line {self.line} needs two bounds, ignoring it')
            return
        elif len(operands) != 2:
            raise self._error(ParseErrorCase.MALFORMED_KARMA, f'karma threshold needs two bounds, got {len(operands)}', ",".join(operands))

        low, high = sorted(self._karma_value(x) for x in operands)
        self._karma_threshold = (low, high)

    def _karma_value(self, token:str) -> int:
        if token in KARMA_MAX_KEYWORDS:
            return self.karma_limits[1]
        elif token in KARMA_MIN_KEYWORDS:
            return self.karma_limits[0]

        # int() also takes "1_0", "+1" and non ascii digits
        if not KARMA_NUMBER_RE.fullmatch(token):
            raise self._error(ParseErrorCase.MALFORMED_NUMBER, f'bad karma value "{token}"', token)
        return int(token)

    def _push_event(self) -> None:
        name = self._take_buffer()
        if not name:
            return
        if name not in self.infos.world_event:
            logger.warning(f'unknown world event "{name}" at line {self.line}, dropping it')
            return
        if name not in self._events:
            self._events.append(name)

    def _push_trigger(self) -> None:
        name = self._take_buffer()
        if not name:
            return
        if name not in self.infos.trigger_event:
            logger.warning(f'unknown trigger event "{name}" at line {self.line}, dropping it')
            return
        if name not in self.current.trigger_event:
            self.current.trigger_event.append(name)

def loads(source:str, infos:core.DialogCustomInfos) -> core.DialogNode:
    """
    Parses dialog markup into a dialog tree.

    Parameters
    ----------
    source : str
        dialog markup, should end with a newline. One is assumed if missing.
    infos : DialogCustomInfos
        allowed world and trigger events, karma bounds for MIN/MAX

    Returns
    -------
    out : DialogNode
        the root of the tree

    Raises
    ------
    ParseError
        if the markup is malformed. Unknown event names are not errors, they
        are logged and dropped.
    """

    source = source.replace("\r\n", "\n")
    if not source.endswith("\n"):
        logger.debug("dialog source has no trailing newline, assuming one")
        source += "\n"

    builder = DialogTreeBuilder(infos)
    for c in source:
        builder.feed(c)
    return builder.finish()

def load(f:TextIO, infos:core.DialogCustomInfos) -> core.DialogNode:
    return loads(f.read(), infos)
