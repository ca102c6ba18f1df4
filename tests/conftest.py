from pytest import Item, fixture

from rpncalc import config
from rpncalc.accumulator import Accumulator
from rpncalc.dispatch import Value
from rpncalc.machine import Machine
from rpncalc.rat import Rational


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Excessive in most cases.

    Use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))  # no repr()!)
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture(autouse=True)
def default_mode(monkeypatch):
    '''
    Tests expect the stock display mode, whatever the environment says.
    '''
    monkeypatch.setattr(config, 'DEFAULT_MODE', 'basic')


@fixture
def accumulator():
    return Accumulator()


@fixture
def machine():
    return Machine.initial()


def f(x):
    return Value.float(x)


def r(num, denom=1):
    return Value.rat(Rational(num, denom))
