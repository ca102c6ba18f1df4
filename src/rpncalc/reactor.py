'''
The stateful edge of the calculator.

A Reactor owns the current undoable state and exposes the action API to a
presentation layer. After every mutating action it saves the machine and
calls the render callback with the full state and itself.
'''

from functools import partial

from . import storage
from .history import UndoableMachine
from .logging_config import get_logger
from .util import UserError


logger = get_logger(__name__)


class Reactor:
    '''
    Mutable holder for an immutable, undoable calculator state.

    User errors raised by an action are caught here: the state is left as
    it was, no history entry is made, and the error is kept in self.error
    for the renderer. Any other exception is a bug and propagates.
    '''

    STATE = UndoableMachine
    MUTATORS = STATE.METHODS

    def __init__(self, state=None, render=None, state_file=None):
        self.state = state if state is not None else self.STATE.initial()
        self.render = render
        self.state_file = state_file
        self.error = None

    @classmethod
    def restore(cls, state_file, render=None):
        '''
        Start from the machine saved in state_file, with empty history.
        '''
        machine = storage.restore(state_file)
        return cls(cls.STATE.wrap(machine), render, state_file)

    def dispatch(self, name, *args):
        '''
        Run the mutating action name, then save and render.
        '''
        try:
            state = getattr(self.state, name)(*args)
        except UserError as e:
            logger.info('%s%r failed: %s', name, args, e)
            self.error = e
        else:
            self.state = state
            self.error = None
            self.persist()
        if self.render is not None:
            self.render(self.state, self)
        return self.error is None

    def persist(self):
        if not self.state_file:
            return
        try:
            storage.save(self.state_file, self.state.inner)
        except Exception:
            logger.warning('Could not save state to %s', self.state_file,
                           exc_info=True)

    def __getattr__(self, name):
        if name in self.MUTATORS:
            return partial(self.dispatch, name)
        elif name in self.STATE.PROPERTIES or name in self.STATE.FIELDS:
            return getattr(self.state, name)
        raise AttributeError(name)
