'''
Arithmetic stack machine (RPN calculator).

The machine is an immutable value. Every action returns a new Machine, which
is what lets the history wrapper keep old states around as snapshots.
'''

from collections import namedtuple
from types import MappingProxyType
import math

import regex

from . import config, rat
from .accumulator import Accumulator
from .dispatch import BUILTINS, Tag, Value
from .logging_config import get_logger
from .util import (NotAWord,
                   StackOverflow,
                   StackUnderflow)


logger = get_logger(__name__)


# Builtin constants every machine starts with.
CONSTANTS = MappingProxyType({
    '\N{GREEK SMALL LETTER PI}': Value.float(math.pi),
    'pi': Value.float(math.pi),
    'e': Value.float(math.e),
})

STORE = '='
EXCH = regex.compile(r'exch\((?<a>\d+), (?<b>\d+)\)')


class Machine(namedtuple('Machine', 'stack tape defs accum showing')):
    '''
    Calculator state: stack, tape, definitions, accumulator, display mode.

    stack holds tagged values only. tape logs every literal pushed and every
    operation applied, in order, so replaying it rebuilds stack and defs.
    '''
    __slots__ = ()

    # Operators on the items of a machine; static, never part of the state.
    OPERATORS = BUILTINS

    # Actions producing a new machine, and read-only queries.
    METHODS = ('digit', 'decimal', 'letter', 'num', 'denom', 'clear',
               'push', 'enter', 'operator', 'exch', 'store', 'show', 'reset')
    PROPERTIES = ('top', 'value', 'display', 'is_empty', 'valid')

    @classmethod
    def initial(cls):
        '''
        Create empty stack machine.
        '''
        return cls(stack=(),
                   tape=(),
                   defs=CONSTANTS,
                   accum=Accumulator(),
                   showing=config.DEFAULT_MODE)

    @classmethod
    def replay(cls, tape):
        '''
        Rebuild a machine by re-running every entry of a tape.
        '''
        machine = cls.initial()
        for entry in tape:
            if isinstance(entry, Value):
                machine = machine.push(entry)
            elif entry == STORE:
                machine = machine.store()
            elif EXCH.fullmatch(entry):
                match = EXCH.fullmatch(entry)
                machine = machine.exch(int(match.group('a')),
                                       int(match.group('b')))
            else:
                machine = machine.operator(entry)
        return machine

    # Accumulator keystrokes
    def digit(self, d):
        return self._replace(accum=self.accum.digit(d))

    def decimal(self):
        return self._replace(accum=self.accum.decimal())

    def letter(self, l):
        return self._replace(accum=self.accum.letter(l))

    def num(self):
        return self._replace(accum=self.accum.num())

    def denom(self):
        return self._replace(accum=self.accum.denom())

    def clear(self):
        return self._replace(accum=self.accum.clear())

    def push(self, value):
        '''
        Push value onto stack, bypassing the accumulator.

        A defined word is replaced by its definition on the stack, but the
        tape records the word itself.
        '''
        if isinstance(value, str):
            value = Value.word(value)
        numeric = value
        if value.tag is Tag.WORD and value.value in self.defs:
            numeric = self.defs[value.value]
        return self._replace(stack=self.stack + (numeric,),
                             tape=self.tape + (value,))

    def enter(self):
        '''
        Transfer accumulator to stack, clearing the accumulator.
        '''
        if self.accum.is_empty():
            return self
        value = self.accum.value()
        # Keep fraction mode exact.
        if self.showing == 'frac' and value.tag is Tag.FLOAT:
            value = Value.rat(rat.from_float(value.value))
        return self.push(value)._replace(accum=self.accum.clear())

    def operator(self, name):
        '''
        Apply operator to stack, entering the accumulator first.
        '''
        machine = self.enter()
        assert machine.accum.is_empty()
        stack = type(self).OPERATORS.apply(machine.stack, name)
        return machine._replace(stack=stack, tape=machine.tape + (name,))

    def _index(self, i):
        length = len(self.stack)
        if i < 0:
            i += length
        if i >= length:
            raise StackOverflow('No stack slot {}'.format(i))
        elif i < 0:
            raise StackUnderflow('No stack slot {}'.format(i))
        return i

    def exch(self, a, b):
        '''
        Swap two stack slots. Negative indices count from the top.
        '''
        machine = self.enter()
        a, b = machine._index(a), machine._index(b)
        stack = list(machine.stack)
        stack[a], stack[b] = stack[b], stack[a]
        return machine._replace(
            stack=tuple(stack),
            tape=machine.tape + ('exch({}, {})'.format(a, b),))

    def store(self):
        '''
        Bind the value under the top of stack to the word on top.

        A word that is already defined sits on the stack as its value, so
        the name comes from the tape when the word was the last thing
        pushed.

        With fewer than two items this does nothing at all.
        '''
        machine = self.enter()
        if len(machine.stack) < 2:
            logger.warning('store needs a value and a name, ignored')
            return self
        value, slot = machine.stack[-2:]
        literal = machine.tape[-1] if machine.tape else None
        if isinstance(literal, Value) and literal.tag is Tag.WORD:
            name = literal.value
        elif slot.tag is Tag.WORD:
            name = slot.value
        else:
            raise NotAWord('Cannot store into {}'.format(slot))
        defs = MappingProxyType({**machine.defs, name: value})
        return machine._replace(stack=machine.stack[:-2],
                                defs=defs,
                                tape=machine.tape + (STORE,))

    def show(self, showing):
        # A bit of a wart: UI state is controlled here.
        return self._replace(showing=showing)

    def reset(self):
        return type(self).initial()

    # Queries
    def top(self):
        '''
        Return the top value of the stack.
        '''
        if not self.stack:
            raise StackUnderflow()
        return self.stack[-1]

    def value(self):
        return self.accum.value()

    def display(self):
        return self.accum.display()

    def is_empty(self):
        return self.accum.is_empty()

    def valid(self):
        '''
        Operators applicable to the current stack.
        '''
        return type(self).OPERATORS.valid(self.stack)
