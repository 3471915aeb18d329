""" Dialog tree printing, the inverse of parser.loads """

from typing import Optional, List, Iterator

from dialogtree import core, parser

def escape(text:str) -> str:
    """ Escapes every character the parser would treat as structural. """
    return "".join(parser.ESCAPE_CHAR + c if c in parser.SPECIAL_CHARS else c for c in text)

def print_condition(condition:Optional[core.Condition]) -> str:
    if condition is None:
        return "None"

    clauses = []
    if condition.karma_threshold is not None:
        low, high = condition.karma_threshold
        clauses.append(f'karma: {low},{high};')
    if condition.events:
        clauses.append(f'event: {",".join(condition.events)};')

    if not clauses:
        return "None"
    return " ".join(clauses)

def print_content(content:core.DialogContent) -> str:
    if isinstance(content, core.Choice):
        return f'{parser.CONTENT_CHAR} {escape(content.text)} {parser.CONDITION_CHAR} {print_condition(content.condition)}'
    else:
        return f'{parser.CONTENT_CHAR} {escape(content.text)}'

def _print_block(node:core.DialogNode, depth:int) -> str:
    header = parser.HEADER_CHAR * depth
    if node.author is not None:
        header = f'{header} {escape(node.author)}'

    lines:List[str] = [header, ""]
    lines.extend(print_content(c) for c in node.content)
    if node.trigger_event:
        lines.append("")
        lines.append(f'{parser.CONTENT_CHAR}{parser.TRIGGER_CHAR} {", ".join(node.trigger_event)}')

    return "\n".join(lines) + "\n"

def _print_blocks(node:core.DialogNode, depth:int) -> Iterator[str]:
    yield _print_block(node, depth)
    for child in node.children:
        yield from _print_blocks(child, depth+1)

def print_file(node:core.DialogNode) -> str:
    """
    Prints the subtree rooted at node as dialog markup.

    The given node becomes the root (a single "#"), whatever its depth in its
    original tree, so printing a child and parsing the result "dives" into
    that child.
    """

    return "\n".join(_print_blocks(node, 1))
