'''
RPN calculator.

An immutable stack machine over floats and exact fractions, with undo and
redo, an input accumulator that builds numbers, mixed fractions and words one
keystroke at a time, and a small library of US customary units.

The core is a set of pure values: every action returns a new state. The
Reactor is the one stateful piece; it holds the current state, saves it, and
hands it to whatever front end renders it. The CLI is one such front end.
'''

# TODO: Let units-aware quantities live on the stack, tagged like numbers.

from .cli import CLI
from .lexer import Lexer
from .machine import Machine
from .history import UndoableMachine, undoable
from .reactor import Reactor


__all__ = 'Machine', 'UndoableMachine', 'undoable', 'Reactor', 'Lexer', 'CLI'
