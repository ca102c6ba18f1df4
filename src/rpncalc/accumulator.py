'''
The calculator's input accumulator.

Parses base 10 numbers, mixed fractions and words one keystroke at a time,
without mutating anything: every method returns a new Accumulator.

The accumulator starts out empty.
If the first token is a digit, the accumulator is in decimal mode.
If the first token is a decimal point, it is in float mode.
If the first token is a letter, it is in word mode.
The num and denom tokens start a mixed number or a plain fraction.

States only move forward; clear() is the only way back to empty.
'''

from collections import namedtuple
import math

from . import rat
from .dispatch import Value
from .util import (DecimalInFraction,
                   DecimalInWord,
                   EmptyAccumulator,
                   ExtraDecimal,
                   ExtraDenominator,
                   ExtraNumerator,
                   FractionInFloat,
                   IllegalToken,
                   IncompleteFraction,
                   InternalError,
                   NotADigit,
                   NotALetter,
                   TooLarge)


EMPTY = 'empty'
DEC = 'dec'
FLOAT = 'float'
VAR = 'var'
NUM = 'num'
DENOM = 'denom'

# places counts the digits typed after the decimal point, so that 4.05 is
# not mistaken for 4.5.
FloatVal = namedtuple('FloatVal', 'integer frac places')
NumVal = namedtuple('NumVal', 'integer num')
DenomVal = namedtuple('DenomVal', 'integer num denom')


def _fold(value, d):
    return value * 10 + d


def _check_digit(d):
    if isinstance(d, str) and len(d) == 1 and d in '0123456789':
        return int(d)
    if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 9:
        return d
    raise IllegalToken('{!r} is not a digit'.format(d))


def _check_letter(l):
    if isinstance(l, str) and len(l) == 1 and l.isalpha():
        return l
    raise IllegalToken('{!r} is not a letter'.format(l))


def _hide_zero(n):
    return '' if n == 0 else str(n)


def _float(typed):
    # Huge ints overflow, huge digit strings silently become inf.
    try:
        value = float(typed)
    except OverflowError:
        raise TooLarge() from None
    if not math.isfinite(value):
        raise TooLarge()
    return Value.float(value)


class Accumulator(namedtuple('Accumulator', 'type val')):
    '''
    Immutable accumulator state: a state name and its payload.
    '''
    __slots__ = ()

    def __new__(cls, type=EMPTY, val=None):
        return super().__new__(cls, type, val)

    def clear(self):
        return type(self)()

    def digit(self, d):
        '''
        Handle an incoming digit.
        '''
        d = _check_digit(d)
        if self.type == EMPTY:
            return type(self)(DEC, d)
        elif self.type == DEC:
            return type(self)(DEC, _fold(self.val, d))
        elif self.type == FLOAT:
            return type(self)(FLOAT, FloatVal(self.val.integer,
                                              _fold(self.val.frac, d),
                                              self.val.places + 1))
        elif self.type == VAR:
            return type(self)(VAR, self.val + str(d))
        elif self.type == NUM:
            return type(self)(NUM, NumVal(self.val.integer,
                                          _fold(self.val.num, d)))
        elif self.type == DENOM:
            return type(self)(DENOM, self.val._replace(
                denom=_fold(self.val.denom, d)))
        raise InternalError(
            'Unknown accumulator state {!r}'.format(self.type))

    def decimal(self):
        '''
        Handle the decimal point.
        '''
        if self.type == EMPTY:
            return type(self)(FLOAT, FloatVal(0, 0, 0))
        elif self.type == DEC:
            return type(self)(FLOAT, FloatVal(self.val, 0, 0))
        elif self.type == FLOAT:
            raise ExtraDecimal()
        elif self.type == VAR:
            raise DecimalInWord()
        raise DecimalInFraction()

    def num(self):
        '''
        Turn what was typed so far into the whole part of a mixed number.
        '''
        if self.type == EMPTY:
            return type(self)(NUM, NumVal(0, 0))
        elif self.type == DEC:
            return type(self)(NUM, NumVal(self.val, 0))
        elif self.type == FLOAT:
            raise FractionInFloat()
        elif self.type == VAR:
            raise NotALetter()
        raise ExtraNumerator()

    def denom(self):
        '''
        Start the denominator; what was typed so far is the numerator.
        '''
        if self.type == EMPTY:
            raise IncompleteFraction()
        elif self.type == DEC:
            return type(self)(DENOM, DenomVal(0, self.val, 0))
        elif self.type == NUM:
            return type(self)(DENOM, DenomVal(self.val.integer,
                                              self.val.num,
                                              0))
        elif self.type == FLOAT:
            raise FractionInFloat()
        elif self.type == VAR:
            raise NotALetter()
        raise ExtraDenominator()

    def letter(self, l):
        '''
        Handle an incoming letter.
        '''
        l = _check_letter(l)
        if self.type == EMPTY:
            return type(self)(VAR, l)
        elif self.type == VAR:
            return type(self)(VAR, self.val + l)
        raise NotADigit()

    def value(self):
        '''
        The finished token as a tagged value.
        '''
        if self.type == EMPTY:
            raise EmptyAccumulator()
        elif self.type == DEC:
            return _float(self.val)
        elif self.type == FLOAT:
            return _float(self.display())
        elif self.type == VAR:
            return Value.word(self.val)
        elif self.type == NUM or self.val.denom == 0:
            raise IncompleteFraction()
        proper = rat.Proper(*self.val)
        return Value.rat(rat.simplify(rat.from_proper(proper)))

    def display(self):
        '''
        Partial input as text. Never raises.
        '''
        if self.type == EMPTY:
            return ''
        elif self.type == DEC:
            return str(self.val)
        elif self.type == FLOAT:
            integer, frac, places = self.val
            if places:
                return '{}.{:0{}d}'.format(integer, frac, places)
            return '{}.'.format(integer)
        elif self.type == VAR:
            return self.val
        elif self.type == NUM:
            whole = _hide_zero(self.val.integer)
            return '{}{}{}/?'.format(whole,
                                     '-' if whole else '',
                                     _hide_zero(self.val.num))
        whole = _hide_zero(self.val.integer)
        return '{}{}{}/{}'.format(whole,
                                  '-' if whole else '',
                                  self.val.num,
                                  _hide_zero(self.val.denom))

    def is_empty(self):
        return self.type == EMPTY
