'''
Operator dispatch tests
'''

import math

from pytest import mark, raises

from rpncalc import config
from rpncalc.dispatch import BUILTINS, Dispatch, Tag, Value
from rpncalc.rat import Rational
from rpncalc.util import (BadDenominator,
                          DivisionByZero,
                          DomainError,
                          InternalError,
                          NotAnInteger,
                          NotImplementedOperator,
                          StackUnderflow)

from conftest import f, r


def test_values_render():
    assert str(f(2.5)) == '2.5'
    assert str(r(5, 4)) == '1-1/4'
    assert str(r(3, 4)) == '3/4'
    assert str(Value.word('x')) == 'x'


def test_value_constructors_coerce():
    assert Value.float(3) == Value(Tag.FLOAT, 3.0)
    assert Value.rat(3) == Value(Tag.RAT, Rational(3, 1))
    assert Value.rat(0.5) == Value(Tag.RAT, Rational(1, 2))


@mark.parametrize('stack, name, expected', [
    ((f(3), f(4)), 'add', f(7)),
    ((f(3), f(4)), 'sub', f(-1)),
    ((f(3), f(4)), 'mul', f(12)),
    ((f(3), f(4)), 'div', f(0.75)),
    ((r(3, 16), r(3, 4)), 'add', r(15, 16)),
    ((r(3, 4), r(1, 4)), 'sub', r(1, 2)),
    ((r(5, 16), r(1, 16)), 'div', r(5)),
    ((r(1, 2), f(0.25)), 'add', r(3, 4)),
    ((f(0.25), r(1, 2)), 'mul', r(1, 8)),
])
def test_arithmetic(stack, name, expected):
    assert BUILTINS.apply(stack, name) == (expected,)


def test_apply_keeps_the_rest_of_the_stack():
    assert BUILTINS.apply((f(1), f(2), f(3)), 'add') == (f(1), f(5))


@mark.parametrize('stack, name, expected', [
    ((f(2),), 'neg', f(-2)),
    ((r(-1, 8),), 'abs', r(1, 8)),
    ((f(2.5),), 'floor', f(2)),
    ((r(-7, 2),), 'ceil', r(-3)),
    ((r(4),), 'inv', r(1, 4)),
    ((r(3, 4),), 'square', r(9, 16)),
    ((f(9),), 'sqrt', f(3)),
    ((r(9, 4),), 'sqrt', r(3, 2)),
    ((r(3),), 'f4', r(3, 4)),
    ((f(0.5),), 'f16', r(1, 32)),
    ((r(2), r(3)), 'fadd', r(5)),
    ((r(2),), 'finv', r(1, 2)),
])
def test_unary(stack, name, expected):
    assert BUILTINS.apply(stack, name) == (expected,)


def test_binary_math_keeps_first_tag():
    assert BUILTINS.apply((f(2), f(10)), 'pow') == (f(1024),)
    assert BUILTINS.apply((r(2), f(3)), 'pow') == (r(8),)
    assert BUILTINS.apply((f(3), f(4)), 'hypot') == (f(5),)


def test_coercions():
    assert BUILTINS.apply((r(1, 4),), 'float') == (f(0.25),)
    assert BUILTINS.apply((f(0.375),), 'frac') == (r(3, 8),)
    with raises(NotImplementedOperator):
        BUILTINS.apply((f(0.25),), 'float')
    with raises(NotImplementedOperator):
        BUILTINS.apply((r(1, 4),), 'frac')


def test_approx():
    assert BUILTINS.apply((f(math.pi), f(7)), 'approx') == (r(22, 7),)
    assert BUILTINS.apply((f(math.pi), r(64)), 'approx') == (r(201, 64),)
    assert BUILTINS.apply((r(127, 10), f(10)), 'approx') == (r(127, 10),)


def test_approx_denominator_checks(monkeypatch):
    with raises(NotAnInteger):
        BUILTINS.apply((f(1.5), r(1, 2)), 'approx')
    with raises(NotAnInteger):
        BUILTINS.apply((f(1.5), f(2.5)), 'approx')
    with raises(BadDenominator):
        BUILTINS.apply((f(1.5), f(0)), 'approx')
    monkeypatch.setattr(config, 'APPROX_MAX_DENOM', 16)
    with raises(BadDenominator, match='exceeds the approx limit of 16'):
        BUILTINS.apply((f(1.5), f(17)), 'approx')


def test_division_by_zero():
    with raises(DivisionByZero):
        BUILTINS.apply((f(1), f(0)), 'div')
    with raises(DivisionByZero):
        BUILTINS.apply((r(1), r(0)), 'div')
    with raises(DivisionByZero):
        BUILTINS.apply((r(0),), 'inv')


def test_math_domain_errors():
    with raises(DomainError):
        BUILTINS.apply((f(-1),), 'sqrt')
    with raises(DomainError):
        BUILTINS.apply((f(0),), 'ln')


def test_underflow():
    with raises(StackUnderflow):
        BUILTINS.apply((), 'add')
    with raises(StackUnderflow):
        BUILTINS.apply((f(1),), 'add')


def test_unknown_operator():
    with raises(NotImplementedOperator, match='frobnicate'):
        BUILTINS.apply((f(1),), 'frobnicate')
    assert 'frobnicate' not in BUILTINS
    assert 'add' in BUILTINS


def test_words_are_not_numbers():
    with raises(NotImplementedOperator, match='add is not implemented'):
        BUILTINS.apply((Value.word('x'), f(1)), 'add')


def test_inconsistent_arity_is_a_bug():
    table = Dispatch()
    table.define('twice', [Tag.FLOAT], Tag.FLOAT, lambda x: 2 * x)
    with raises(InternalError):
        table.define('twice', [Tag.FLOAT, Tag.FLOAT], Tag.FLOAT,
                     lambda x, y: 2 * x)


def test_custom_table():
    table = Dispatch()
    table.mono_binop('join', [Tag.WORD, Tag.WORD], Tag.WORD,
                     lambda a, b: a + b)
    stack = (Value.word('ab'), Value.word('cd'))
    assert table.apply(stack, 'join') == (Value.word('abcd'),)
    assert table.arity('join') == 2


def test_valid_operators():
    assert BUILTINS.valid(()) == []
    unary = BUILTINS.valid((Value.word('x'), f(1)))
    assert 'neg' in unary
    assert 'frac' in unary
    assert 'float' not in unary
    assert 'add' not in unary
    binary = BUILTINS.valid((f(1), r(1, 2)))
    assert 'add' in binary
    assert 'approx' in binary
    assert 'float' in binary
    assert binary == sorted(binary)
