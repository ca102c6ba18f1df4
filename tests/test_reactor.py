'''
Reactor tests
'''

import logging

from pytest import raises

from rpncalc import storage
from rpncalc.history import UndoableMachine
from rpncalc.reactor import Reactor
from rpncalc.util import NothingToUndo, StackUnderflow, TooLarge

from conftest import f


class Recorder:
    '''
    Render callback keeping every state it was handed.
    '''

    def __init__(self):
        self.states = []

    def __call__(self, state, reactor):
        self.states.append((state, reactor.error))


def test_actions_return_success():
    reactor = Reactor()
    assert reactor.digit(4)
    assert reactor.enter()
    assert reactor.stack == (f(4),)
    assert reactor.error is None


def test_user_errors_are_caught():
    reactor = Reactor()
    reactor.push(f(1))
    before = reactor.state
    assert not reactor.operator('add')
    assert isinstance(reactor.error, StackUnderflow)
    assert reactor.state is before
    assert reactor.undo()
    assert reactor.stack == ()
    assert not reactor.undo()
    assert isinstance(reactor.error, NothingToUndo)


def test_error_clears_on_success():
    reactor = Reactor()
    reactor.operator('add')
    assert reactor.error is not None
    reactor.push(f(1))
    assert reactor.error is None


def test_render_sees_every_action():
    render = Recorder()
    reactor = Reactor(render=render)
    reactor.push(f(1))
    reactor.operator('neg')
    reactor.operator('add')
    assert [state.stack for state, error in render.states] == \
        [(f(1),), (f(-1),), (f(-1),)]
    assert [error is None for state, error in render.states] == \
        [True, True, False]


def test_queries_are_forwarded():
    reactor = Reactor()
    reactor.digit(7)
    assert reactor.display() == '7'
    assert not reactor.is_empty()
    assert reactor.showing == 'basic'
    assert 'neg' not in reactor.valid()


def test_unknown_attribute():
    reactor = Reactor()
    with raises(AttributeError, match='frobnicate'):
        reactor.frobnicate


def test_persists_after_each_action(tmp_path):
    path = str(tmp_path / 'state.json')
    reactor = Reactor(state_file=path)
    reactor.push(f(2))
    reactor.push(f(3))
    reactor.operator('mul')
    assert storage.restore(path).stack == (f(6),)
    reactor.operator('neg')
    assert storage.restore(path).stack == (f(-6),)


def test_restore_starts_without_history(tmp_path):
    path = str(tmp_path / 'state.json')
    first = Reactor(state_file=path)
    first.push(f(2))
    first.push(f(3))

    second = Reactor.restore(path)
    assert isinstance(second.state, UndoableMachine)
    assert second.stack == (f(2), f(3))
    assert second.state.history == ()
    assert not second.undo()


def test_failed_save_is_only_logged(tmp_path, caplog):
    path = str(tmp_path / 'missing' / 'state.json')
    reactor = Reactor(state_file=path)
    with caplog.at_level(logging.WARNING, logger='rpncalc'):
        assert reactor.push(f(1))
    assert reactor.stack == (f(1),)
    assert 'Could not save state' in caplog.text


def test_number_too_large_for_a_float():
    reactor = Reactor()
    for _ in range(400):
        reactor.digit(9)
    assert not reactor.enter()
    assert isinstance(reactor.error, TooLarge)
    assert reactor.stack == ()
    assert reactor.clear()
    assert reactor.is_empty()
