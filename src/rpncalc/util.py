from functools import wraps


class RPNError(Exception):
    '''
    Base of everything the calculator raises on purpose.
    '''
    message = None

    def __init__(self, *args):
        if not args and self.message is not None:
            args = (self.message,)
        super().__init__(*args)


class InternalError(RPNError):
    '''
    Broken invariant. A bug, never bad input; let it propagate.
    '''


class UserError(RPNError):
    '''
    Recoverable error caused by input, reported and otherwise ignored.
    '''


class StackUnderflow(UserError):
    message = 'Stack underflow'


class StackOverflow(UserError):
    message = 'Stack overflow'


class DivisionByZero(UserError, ZeroDivisionError):
    message = 'Division by zero'


class EmptyAccumulator(UserError):
    message = 'Empty accumulator'


class IncompleteFraction(UserError):
    message = 'Incomplete fraction'


class NotImplementedOperator(UserError):
    message = 'Not implemented'


class IncompatibleUnits(UserError):
    message = 'Incompatible units'


class NotAWord(UserError):
    message = 'Can only store into a word'


class NothingToUndo(UserError):
    message = 'Nothing to undo!'


class NothingToRedo(UserError):
    message = 'Nothing to redo!'


class DomainError(UserError):
    message = 'Math domain error'


class IllegalToken(UserError):
    '''
    Token not accepted in the accumulator's current state.
    '''
    message = 'Illegal token'


class DecimalInWord(IllegalToken):
    message = 'Illegal: decimal point in word.'


class DecimalInFraction(IllegalToken):
    message = 'Illegal: decimal point in fraction.'


class ExtraDecimal(IllegalToken):
    message = 'Illegal: number already has a decimal point.'


class FractionInFloat(IllegalToken):
    message = 'Illegal: fraction in decimal number.'


class NotADigit(IllegalToken):
    message = 'Illegal: letter in numeral.'


class NotALetter(IllegalToken):
    message = 'Illegal: fraction separator in word.'


class ExtraNumerator(IllegalToken):
    message = 'Illegal: fraction already has a numerator.'


class ExtraDenominator(IllegalToken):
    message = 'Illegal: fraction already has a denominator.'


class NumericError(UserError, ValueError):
    '''
    Value outside the numeric domain an operation accepts.
    '''


class NotAnInteger(NumericError):
    pass


class NotARatio(NumericError):
    pass


class BadDenominator(NumericError):
    pass


class TooLarge(NumericError):
    message = 'Number too large'


def wrap_user_errors(fmt):
    '''
    Decorator turning numeric failures inside f into user errors.

    Passes through RPNErrors. Division by zero becomes DivisionByZero, other
    arithmetic and value errors become a DomainError formatted from fmt and
    the call arguments. Anything else is a bug and propagates.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except ZeroDivisionError as e:
                raise DivisionByZero() from e
            except (ArithmeticError, ValueError) as e:
                raise DomainError(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
