'''
Tagged values and the operator dispatch table.

Every stack item is a Value carrying a Tag. Operators are looked up by name
and by the tags of their operands, so one operator name can have a float
implementation, a rational one, and nothing at all for words.
'''

from collections import namedtuple
from enum import Enum
from itertools import product
import math
import operator

from . import config, rat
from .logging_config import get_logger
from .util import (InternalError,
                   NotImplementedOperator,
                   StackUnderflow,
                   BadDenominator,
                   NotAnInteger,
                   wrap_user_errors)


logger = get_logger(__name__)


class Tag(str, Enum):
    FLOAT = 'float'
    RAT = 'rat'
    WORD = 'word'


NUMERIC = (Tag.FLOAT, Tag.RAT)


class Value(namedtuple('Value', 'tag value')):
    '''
    A stack item: a tag and the payload it describes.
    '''
    __slots__ = ()

    @classmethod
    def float(cls, value):
        return cls(Tag.FLOAT, float(value))

    @classmethod
    def rat(cls, value):
        return cls(Tag.RAT, rat.promote(value))

    @classmethod
    def word(cls, value):
        return cls(Tag.WORD, value)

    def __str__(self):
        if self.tag is Tag.RAT:
            return rat.to_string(self.value)
        return str(self.value)


Entry = namedtuple('Entry', 'tag func')


def _as_rat(tag, value):
    return value if tag is Tag.RAT else rat.from_float(value)


def _as_float(tag, value):
    return rat.to_float(value) if tag is Tag.RAT else value


class Dispatch:
    '''
    Mapping of (operator name, operand tags) to (result tag, function).

    Lookups are exact: a signature that was never declared is not
    implemented, there is no fallback coercion at call time.
    '''

    def __init__(self):
        self.table = {}
        self.arities = {}

    def define(self, name, tags, result, func, fmt=None):
        '''
        Add one entry. All signatures of a name must have the same arity.
        '''
        tags = tuple(tags)
        arity = self.arities.setdefault(name, len(tags))
        if arity != len(tags):
            raise InternalError(
                'Inconsistent arity for {}: {} and {}'.format(name,
                                                              arity,
                                                              len(tags)))
        fmt = fmt or 'Cannot compute {}'.format(name)
        self.table[name, tags] = Entry(result, wrap_user_errors(fmt)(func))

    def poly_unop(self, name, float_impl, rat_impl):
        '''
        Unary operator over floats and rationals, tag preserved.
        '''
        self.define(name, [Tag.FLOAT], Tag.FLOAT, float_impl)
        self.define(name, [Tag.RAT], Tag.RAT,
                    lambda x: rat.simplify(rat_impl(x)))

    def poly_binop(self, name, float_impl, rat_impl):
        '''
        Binary operator over floats and rationals.

        Two floats give a float. Any rational operand promotes the other one
        and the rational implementation is used.
        '''
        for tags in product(NUMERIC, repeat=2):
            if tags == (Tag.FLOAT, Tag.FLOAT):
                self.define(name, tags, Tag.FLOAT, float_impl)
            else:
                self.define(name, tags, Tag.RAT, self._promoting(tags,
                                                                 rat_impl))

    @staticmethod
    def _promoting(tags, rat_impl):
        def func(*args):
            args = [_as_rat(tag, arg) for tag, arg in zip(tags, args)]
            return rat.simplify(rat_impl(*args))
        return func

    def poly_math(self, name, float_fn):
        '''
        Scientific function; rationals round-trip through float.
        '''
        self.define(name, [Tag.FLOAT], Tag.FLOAT, float_fn)
        self.define(name, [Tag.RAT], Tag.RAT,
                    lambda x: rat.from_float(float_fn(rat.to_float(x))))

    def poly_binmath(self, name, float_fn):
        '''
        Binary scientific function; the first operand's tag wins.
        '''
        for tags in product(NUMERIC, repeat=2):
            self.define(name, tags, tags[0], self._rounding(tags, float_fn))

    @staticmethod
    def _rounding(tags, float_fn):
        def func(x, y):
            result = float_fn(_as_float(tags[0], x), _as_float(tags[1], y))
            return rat.from_float(result) if tags[0] is Tag.RAT else result
        return func

    def divisor(self, d):
        '''
        Define f{d}, dividing by the constant d and always giving a rational.
        '''
        for tag in NUMERIC:
            self.define('f{}'.format(d), [tag], Tag.RAT,
                        lambda x, tag=tag: rat.simplify(
                            rat.div(_as_rat(tag, x), rat.from_int(d))))

    def mono_unop(self, name, arg, result, func):
        self.define(name, [arg], result, func)

    def mono_binop(self, name, args, result, func):
        self.define(name, args, result, func)

    def arity(self, name):
        try:
            return self.arities[name]
        except KeyError:
            raise NotImplementedOperator(
                '{} is not implemented'.format(name)) from None

    def apply(self, stack, name):
        '''
        Pop operands for name off stack, push the result, return new stack.
        '''
        arity = self.arity(name)
        if len(stack) < arity:
            raise StackUnderflow('{} needs {} operand(s)'.format(name, arity))

        pivot = len(stack) - arity
        args = stack[pivot:]
        tags = tuple(arg.tag for arg in args)
        entry = self.table.get((name, tags))
        if entry is None:
            raise NotImplementedOperator(
                '{} is not implemented for {}'.format(
                    name, ', '.join(tag.value for tag in tags)))

        result = entry.func(*[arg.value for arg in args])
        return tuple(stack[:pivot]) + (Value(entry.tag, result),)

    def valid(self, stack):
        '''
        Names of every operator accepting the top of stack as it is.
        '''
        names = set()
        for (name, tags) in self.table:
            arity = len(tags)
            if arity > len(stack):
                continue
            top = stack[len(stack) - arity:]
            if tuple(item.tag for item in top) == tags:
                names.add(name)
        return sorted(names)

    def __contains__(self, name):
        return name in self.arities


def _float_inv(x):
    return 1 / x


def _rat_square(x):
    return rat.mul(x, x)


def _log(x, base):
    return math.log(x) / math.log(base)


def _approx_denom(tag, denom):
    if tag is Tag.RAT:
        denom = rat.simplify(denom)
        if denom.denom != 1:
            raise NotAnInteger('{} is not an integer'.format(
                rat.to_string(denom)))
        denom = denom.num
    denom = rat.assert_int(denom)
    if denom > config.APPROX_MAX_DENOM:
        raise BadDenominator('{} exceeds the approx limit of {}'.format(
            denom, config.APPROX_MAX_DENOM))
    return denom


def _approximating(tags):
    def func(value, denom):
        return rat.approx(_as_rat(tags[0], value),
                          _approx_denom(tags[1], denom))
    return func


# Arithmetic operators on the items of a machine.
ARITHMETIC = {
    'add': (operator.add, rat.add),
    'sub': (operator.sub, rat.sub),
    'mul': (operator.mul, rat.mul),
    'div': (operator.truediv, rat.div),
}

UNARY = {
    'neg': (operator.neg, rat.neg),
    'abs': (abs, rat.abs),
    'floor': (lambda x: float(math.floor(x)), rat.floor),
    'ceil': (lambda x: float(math.ceil(x)), rat.ceil),
    'inv': (_float_inv, rat.inv),
    'square': (lambda x: x * x, _rat_square),
}

MATH = {
    'sqrt': math.sqrt,
    'cbrt': lambda x: math.copysign(abs(x) ** (1 / 3), x),
    'exp': math.exp,
    'expm1': math.expm1,
    'ln': math.log,
    'log10': math.log10,
    'log2': math.log2,
    'log1p': math.log1p,
    'sin': math.sin,
    'cos': math.cos,
    'tan': math.tan,
    'asin': math.asin,
    'acos': math.acos,
    'atan': math.atan,
    'sinh': math.sinh,
    'cosh': math.cosh,
    'tanh': math.tanh,
    'asinh': math.asinh,
    'acosh': math.acosh,
    'atanh': math.atanh,
    'degrees': math.degrees,
    'radians': math.radians,
}

BINMATH = {
    'pow': math.pow,
    'log': _log,
    'atan2': math.atan2,
    'hypot': math.hypot,
}

# Buttons on the fraction keypad share the arithmetic implementations.
ALIASES = {
    'fadd': 'add',
    'fsub': 'sub',
    'fmul': 'mul',
    'fdiv': 'div',
    'finv': 'inv',
}

DIVISORS = 2, 4, 8, 16, 32, 64


def builtins():
    '''
    Build the calculator's standard dispatch table.
    '''
    table = Dispatch()
    for name, (float_impl, rat_impl) in ARITHMETIC.items():
        table.poly_binop(name, float_impl, rat_impl)
    for name, (float_impl, rat_impl) in UNARY.items():
        table.poly_unop(name, float_impl, rat_impl)
    for alias, name in ALIASES.items():
        float_impl, rat_impl = {**ARITHMETIC, **UNARY}[name]
        if table.arity(name) == 1:
            table.poly_unop(alias, float_impl, rat_impl)
        else:
            table.poly_binop(alias, float_impl, rat_impl)
    for name, fn in MATH.items():
        table.poly_math(name, fn)
    for name, fn in BINMATH.items():
        table.poly_binmath(name, fn)
    for d in DIVISORS:
        table.divisor(d)

    table.mono_unop('float', Tag.RAT, Tag.FLOAT, rat.to_float)
    table.mono_unop('frac', Tag.FLOAT, Tag.RAT, rat.from_float)
    for tags in product(NUMERIC, repeat=2):
        table.mono_binop('approx', tags, Tag.RAT, _approximating(tags))

    logger.debug('Built dispatch table: %d entries over %d operators',
                 len(table.table), len(table.arities))
    return table


BUILTINS = builtins()
