""" Branching dialog trees for interactive narrative

Dialogs are written in a small markup language. Each "#" header opens a node,
spoken by the author named in the header, nested by the number of "#". A node
is either a monologue (lines of text the speaker says in turn) or a set of
choices. Each choice can be gated by a Condition on the player's karma and on
world events that already happened. A node can also trigger events when the
conversation leaves it.

The usual flow:

    root = dialogtree.loads(source, infos)   # markup -> tree
    root.content, root.children             # what to show, where to go
    dialogtree.print_file(root.children[i]) # tree -> markup, re-rooted

DialogManager wraps that flow for a game loop: it keeps the current node as
markup, filters choices against karma and active world events, follows the
player's (or an NPC's) choice and reports the trigger events fired.

The exit-state indexed graph format in dialogtree.dialog is a flat
alternative to the markup, stored as yaml.
"""

from .core import Condition, Text, Choice, DialogContent, DialogNode, DialogCustomInfos, same_kind
from .parser import loads, load, ParseError, ParseErrorCase
from .printer import print_file
from .manager import DialogManager
