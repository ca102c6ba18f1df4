'''
Input accumulator tests
'''

from pytest import mark, raises

from rpncalc.accumulator import (Accumulator,
                                 DenomVal,
                                 FloatVal,
                                 NumVal,
                                 DEC,
                                 DENOM,
                                 EMPTY,
                                 FLOAT,
                                 NUM,
                                 VAR)
from rpncalc.dispatch import Value
from rpncalc.util import (DecimalInFraction,
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

from conftest import f, r


def type_in(accumulator, keys):
    '''
    Feed keys one at a time: digits, letters, and . _ / for the rest.
    '''
    for key in keys:
        if key == '.':
            accumulator = accumulator.decimal()
        elif key == '_':
            accumulator = accumulator.num()
        elif key == '/':
            accumulator = accumulator.denom()
        elif key.isdigit():
            accumulator = accumulator.digit(key)
        else:
            accumulator = accumulator.letter(key)
    return accumulator


def test_starts_empty(accumulator):
    assert accumulator.type == EMPTY
    assert accumulator.is_empty()
    assert accumulator.display() == ''
    with raises(EmptyAccumulator):
        accumulator.value()


def test_is_immutable(accumulator):
    typed = accumulator.digit(4)
    assert accumulator.is_empty()
    assert typed == Accumulator(DEC, 4)


def test_clear(accumulator):
    assert type_in(accumulator, '1_3/4').clear() == Accumulator()


@mark.parametrize('keys, kind, val, shown, value', [
    ('123', DEC, 123, '123', f(123)),
    ('4.5', FLOAT, FloatVal(4, 5, 1), '4.5', f(4.5)),
    ('4.05', FLOAT, FloatVal(4, 5, 2), '4.05', f(4.05)),
    ('4.', FLOAT, FloatVal(4, 0, 0), '4.', f(4)),
    ('.25', FLOAT, FloatVal(0, 25, 2), '0.25', f(0.25)),
    ('x', VAR, 'x', 'x', Value.word('x')),
    ('ab12', VAR, 'ab12', 'ab12', Value.word('ab12')),
    ('3/4', DENOM, DenomVal(0, 3, 4), '3/4', r(3, 4)),
    ('1_3/4', DENOM, DenomVal(1, 3, 4), '1-3/4', r(7, 4)),
    ('_3/4', DENOM, DenomVal(0, 3, 4), '3/4', r(3, 4)),
    ('6/8', DENOM, DenomVal(0, 6, 8), '6/8', r(3, 4)),
    ('2_0/1', DENOM, DenomVal(2, 0, 1), '2-0/1', r(2)),
])
def test_complete_tokens(accumulator, keys, kind, val, shown, value):
    typed = type_in(accumulator, keys)
    assert typed.type == kind
    assert typed.val == val
    assert typed.display() == shown
    assert typed.value() == value


@mark.parametrize('keys, shown', [
    ('3_', '3-/?'),
    ('3_4', '3-4/?'),
    ('_', '/?'),
    ('3/', '3/'),
    ('1_3/', '1-3/'),
])
def test_partial_fractions_display(accumulator, keys, shown):
    typed = type_in(accumulator, keys)
    assert typed.display() == shown
    with raises(IncompleteFraction):
        typed.value()


def test_mixed_number_state(accumulator):
    assert type_in(accumulator, '3_4').val == NumVal(3, 4)
    assert type_in(accumulator, '3_4').type == NUM


def test_zero_denominator_is_incomplete(accumulator):
    with raises(IncompleteFraction):
        type_in(accumulator, '3/0').value()


@mark.parametrize('keys, error', [
    ('1.2.', ExtraDecimal),
    ('..', ExtraDecimal),
    ('x.', DecimalInWord),
    ('1_.', DecimalInFraction),
    ('1/.', DecimalInFraction),
    ('1.5_', FractionInFloat),
    ('1.5/', FractionInFloat),
    ('x_', NotALetter),
    ('x/', NotALetter),
    ('1__', ExtraNumerator),
    ('1/2_', ExtraNumerator),
    ('1/2/', ExtraDenominator),
    ('/', IncompleteFraction),
    ('1x', NotADigit),
    ('1.x', NotADigit),
    ('1/x', NotADigit),
])
def test_illegal_sequences(accumulator, keys, error):
    with raises(error):
        type_in(accumulator, keys)


def test_illegal_tokens_are_all_illegal(accumulator):
    with raises(IllegalToken):
        type_in(accumulator, '1.2.')
    with raises(IllegalToken):
        type_in(accumulator, 'x_')


def test_rejects_non_keys(accumulator):
    with raises(IllegalToken):
        accumulator.digit(10)
    with raises(IllegalToken):
        accumulator.digit('x')
    with raises(IllegalToken):
        accumulator.letter('1')
    with raises(IllegalToken):
        accumulator.letter('ab')


def test_error_leaves_state_alone(accumulator):
    typed = type_in(accumulator, '1.2')
    with raises(ExtraDecimal):
        typed.decimal()
    assert typed.display() == '1.2'


def test_too_many_digits(accumulator):
    typed = type_in(accumulator, '9' * 400)
    assert typed.display() == '9' * 400
    with raises(TooLarge):
        typed.value()
    with raises(TooLarge):
        type_in(accumulator, '9' * 400 + '.5').value()


def test_unknown_state_is_a_bug():
    with raises(InternalError, match='bogus'):
        Accumulator('bogus').digit(1)
