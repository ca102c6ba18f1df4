'''
Exact rational arithmetic.

A Rational is an immutable (num, denom) pair of Python ints. Values are not
kept in lowest terms unless simplify() is called, and the sign may sit on
either field, so every operation here tolerates a negative denominator.
'''

from collections import namedtuple
import builtins
import math

from .util import (DivisionByZero,
                   NotAnInteger,
                   NotARatio,
                   BadDenominator)


Rational = namedtuple('Rational', 'num denom')
Proper = namedtuple('Proper', 'integer num denom')
Frexp = namedtuple('Frexp', 'exponent mantissa')


def assert_int(value):
    '''
    Return value as an int, or raise NotAnInteger.

    Integral floats are accepted; bools are not.
    '''
    if isinstance(value, bool):
        raise NotAnInteger('{!r} is not an integer'.format(value))
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise NotAnInteger('{!r} is not an integer'.format(value))


def _normalize(exponent, mantissa):
    # Shift the exponent down until the mantissa has no fractional part.
    while not mantissa.is_integer():
        exponent -= 1
        mantissa *= 2
    return Frexp(exponent, int(mantissa))


def frexp(x):
    '''
    Decompose x into an integer mantissa and exponent, mantissa * 2**exponent.
    '''
    mantissa, exponent = math.frexp(x)
    return _normalize(exponent, mantissa)


def ldexp(parts):
    '''
    Inverse of frexp().
    '''
    return math.ldexp(parts.mantissa, parts.exponent)


def gcd(a, b):
    '''
    Euclid's algorithm. gcd(a, 0) is abs(a).
    '''
    while b != 0:
        a, b = b, a % b
    return builtins.abs(a)


def cons(num, denom):
    '''
    Construct a rational from its parts.
    '''
    num, denom = assert_int(num), assert_int(denom)
    if denom == 0:
        raise DivisionByZero()
    return Rational(num, denom)


def from_int(num):
    return Rational(assert_int(num), 1)


zero = Rational(0, 1)
one = Rational(1, 1)


def simplify(value):
    '''
    Express value in lowest terms, with the sign on the numerator.
    '''
    num, denom = assert_int(value.num), assert_int(value.denom)
    if denom < 0:
        num, denom = -num, -denom
    g = gcd(builtins.abs(num), builtins.abs(denom))
    return cons(num // g, denom // g)


def to_proper(value):
    '''
    Convert to a mixed number, 0 <= num < denom.
    '''
    simplified = simplify(value)
    integer, num = divmod(simplified.num, simplified.denom)
    return Proper(integer, num, simplified.denom)


def from_proper(proper):
    return cons(proper.integer * proper.denom + proper.num, proper.denom)


def to_string(value):
    '''
    Render as "num/denom", "integer-num/denom", or a plain integer.

    Negative values carry a single leading sign: -7/2 is "-3-1/2".
    '''
    if isinstance(value, Proper):
        value = from_proper(value)
    if lt(value, zero):
        return '-' + to_string(abs(value))
    proper = to_proper(value)
    if proper.num == 0:
        return str(proper.integer)
    elif proper.integer == 0:
        return '{}/{}'.format(proper.num, proper.denom)
    return '{}-{}/{}'.format(proper.integer, proper.num, proper.denom)


def to_float(value):
    num, denom = simplify(value)
    return num / denom


def from_float(value):
    '''
    Exact rational equal to a finite float.
    '''
    if isinstance(value, Rational):
        raise NotARatio('{} is already a fraction'.format(to_string(value)))
    if not math.isfinite(value):
        raise NotARatio('{!r} cannot be expressed as a ratio!'.format(value))

    exponent, mantissa = frexp(value)
    if exponent >= 0:
        return cons(mantissa << exponent, 1)
    return simplify(cons(mantissa, 1 << -exponent))


def promote(value):
    '''
    Coerce an int, float or Rational to a Rational.
    '''
    if isinstance(value, Rational):
        return value
    elif isinstance(value, float):
        return from_float(value)
    return from_int(value)


# Arithmetic
def add(a, b):
    return cons(a.num * b.denom + b.num * a.denom, a.denom * b.denom)


def sub(a, b):
    return cons(a.num * b.denom - b.num * a.denom, a.denom * b.denom)


def mul(a, b):
    return cons(a.num * b.num, a.denom * b.denom)


def inv(value):
    if value.num == 0:
        raise DivisionByZero()
    return cons(value.denom, value.num)


def div(a, b):
    return mul(a, inv(b))


def neg(value):
    return cons(-value.num, value.denom)


def abs(value):
    return cons(value.num if value.num >= 0 else -value.num,
                value.denom if value.denom >= 0 else -value.denom)


def floor(value):
    return cons(value.num // value.denom, 1)


def ceil(value):
    return cons(-(-value.num // value.denom), 1)


# Comparisons
def _sign(n):
    return (n > 0) - (n < 0)


def cmp(a, b):
    '''
    -1, 0 or 1 as a is less than, equal to or greater than b.
    '''
    difference = sub(a, b)
    return _sign(difference.num) * _sign(difference.denom)


def lt(a, b):
    return cmp(a, b) < 0


def lte(a, b):
    return cmp(a, b) <= 0


def gt(a, b):
    return cmp(a, b) > 0


def gte(a, b):
    return cmp(a, b) >= 0


def eq(a, b):
    '''
    Equality as rationals, unlike ==, which compares fields.
    '''
    return cmp(a, b) == 0


def approx(value, denom):
    '''
    Nearest rational to value with the given denominator.

    Brute force over every numerator, so O(denom); callers cap denom. Ties go
    to the smallest numerator.
    '''
    denom = assert_int(denom)
    if denom < 1:
        raise BadDenominator('{} is not a valid denominator'.format(denom))

    # Work on the proper fraction so the numerator is always below denom.
    proper = to_proper(promote(value))
    fraction = Rational(proper.num, proper.denom)

    num, best = 0, one
    for i in range(denom + 1):
        error = abs(sub(fraction, Rational(i, denom)))
        if lt(error, best):
            num, best = i, error

    return simplify(cons(proper.integer * denom + num, denom))
