'''
Dimensional analysis for US customary units.

Not aiming for perfection, just something that works in the woodshop,
backyard, job site or kitchen, so only *commonly* used units.

A physical quantity carries a Dimension, a vector of exponents over length,
mass and time, and an exact value in the base unit of its System. A System is
one dimension's chain of convertible units; expressing a quantity in a set of
those units is change counting, largest unit first, with the smallest unit
keeping whatever fraction is left.

Supported arithmetic:
- a + b, a - b: dimensions must match
- a * b, a / b: dimensions combine; unit sets are merged without checking
  that the compound units make sense
'''

from collections import namedtuple
from functools import cmp_to_key

from . import rat
from .util import IncompatibleUnits


class Dimension(namedtuple('Dimension', 'length mass time')):
    '''
    Exponents of each base quantity: mul adds, div subtracts, inv negates.
    '''
    __slots__ = ()

    def mul(self, other):
        return type(self)(*(a + b for a, b in zip(self, other)))

    def div(self, other):
        return type(self)(*(a - b for a, b in zip(self, other)))

    def inv(self):
        return type(self)(*(-a for a in self))

    def eq(self, other):
        return all(a == b for a, b in zip(self, other))


scalar = Dimension(length=0, mass=0, time=0)
length = Dimension(length=1, mass=0, time=0)
mass = Dimension(length=0, mass=1, time=0)
time = Dimension(length=0, mass=0, time=1)
area = length.mul(length)
volume = area.mul(length)
velocity = length.div(time)
acceleration = velocity.div(time)
momentum = velocity.mul(mass)
density = mass.div(volume)


Quantity = namedtuple('Quantity', 'dim value units')
Unit = namedtuple('Unit', 'name factor')


def unit(name, factor):
    return Unit(name, factor)


def count(amount, coin):
    '''
    How many whole coins fit in amount, and what is left over.
    '''
    coins = rat.floor(rat.div(amount, coin)).num
    return coins, rat.sub(amount, rat.mul(rat.from_int(coins), coin))


def change(amount, coins):
    '''
    Greedy change making; coins must be in descending order.

    Returns one count per coin, plus the remainder if it is not zero.
    '''
    counts = []
    for coin in coins:
        coins_used, amount = count(amount, coin)
        counts.append(coins_used)
    if amount.num != 0:
        counts.append(rat.simplify(amount))
    return counts


def _matches(a, b):
    if not a.eq(b):
        raise IncompatibleUnits()
    return a


def _binop(value_fn, dim_fn):
    def op(q1, q2):
        return Quantity(dim=dim_fn(q1.dim, q2.dim),
                        value=rat.simplify(value_fn(q1.value, q2.value)),
                        units=q1.units | q2.units)
    return op


add = _binop(rat.add, _matches)
sub = _binop(rat.sub, _matches)
mul = _binop(rat.mul, Dimension.mul)
div = _binop(rat.div, Dimension.div)


class System:
    '''
    A chain of units along one dimension.

    Every factor is relative to the base unit; ints and floats are promoted
    to rationals. Counting change is only exact and unsurprising when the
    chain is coherent, each unit a whole multiple of the next smaller one
    used with it. That is a constraint on the declarations, not checked.
    '''

    def __init__(self, dim, base, *units):
        self.dim = dim
        self.base = base
        self.conversions = {name: rat.promote(factor)
                            for name, factor in units}
        self.conversions[base] = rat.one

    def __contains__(self, name):
        return name in self.conversions

    def factor(self, name):
        try:
            return self.conversions[name]
        except KeyError:
            raise IncompatibleUnits(
                '{} is not a unit of {}'.format(name, self.base)) from None

    def _compare(self, a, b):
        return rat.cmp(self.factor(a), self.factor(b))

    def with_dim(self, value, name):
        '''
        Quantity of value in the named unit.
        '''
        return Quantity(dim=self.dim,
                        value=rat.simplify(rat.mul(rat.promote(value),
                                                   self.factor(name))),
                        units=frozenset([name]))

    def scalar(self, value):
        return Quantity(dim=scalar, value=rat.promote(value),
                        units=frozenset())

    def using(self, quantity, *names):
        '''
        Express quantity in the given units, largest first.

        All but the smallest unit get whole counts. The smallest one also
        takes the leftover fraction, exactly, as a rational.
        '''
        if not names:
            return {}
        names = sorted(set(names),
                       key=cmp_to_key(self._compare),
                       reverse=True)
        factors = [self.factor(name) for name in names]

        value = quantity.value
        negative = rat.lt(value, rat.zero)
        counted = change(rat.abs(value) if negative else value, factors)

        result = dict(zip(names, counted))
        if len(counted) > len(names):
            smallest, remainder = names[-1], counted[-1]
            whole = rat.from_int(result[smallest])
            last = rat.simplify(rat.add(whole,
                                        rat.div(remainder, factors[-1])))
            result[smallest] = last.num if last.denom == 1 else last
        if negative:
            result = {name: rat.neg(n) if isinstance(n, rat.Rational) else -n
                      for name, n in result.items()}
        return result

    def value_of(self, quantity):
        '''
        Express quantity using its own units.
        '''
        return self.using(quantity, *quantity.units)

    def to_string(self, quantity):
        parts = []
        for name, n in self.value_of(quantity).items():
            if isinstance(n, rat.Rational):
                n = rat.to_string(n)
            parts.append('{}{}'.format(n, name))
        return ' '.join(parts) or rat.to_string(quantity.value)


def system(dim, base, *units):
    return System(dim, base, *units)


# Inch derived units.
inches = system(
    length, 'in',
    unit('hd', 4),
    unit('ft', 12),
    unit('yd', 3 * 12),
    unit('mi', 5280 * 12),
)

# Units based on the fluid ounce.
floz = system(
    volume, 'fl.oz',
    unit('gal', 128),
    unit('qt', 32),
    unit('pt', 16),
    unit('C', 8),
    unit('T', rat.Rational(1, 2)),
    unit('t', rat.Rational(1, 6)),
    unit('fl.dr', rat.Rational(1, 8)),
    unit('ds', rat.Rational(1, 64)),
    unit('pn', rat.Rational(1, 128)),
    unit('smi', rat.Rational(1, 256)),
    unit('dr', rat.Rational(1, 567)),
)

# Weights based on the ounce.
oz = system(
    mass, 'oz',
    unit('lb', 16),
    unit('ton', 2000 * 16),
)

# The usual time abbreviations.
s = system(
    time, 's',
    unit('m', 60),
    unit('h', 60 * 60),
    unit('d', 24 * 60 * 60),
)

SYSTEMS = inches, floz, oz, s
