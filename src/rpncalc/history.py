'''
Undo and redo for any immutable state type.

undoable() knows nothing about the calculator. It takes a type whose
mutators return new instances, and builds a wrapper type holding the current
state plus two stacks of snapshots.
'''

from collections import namedtuple

from .machine import Machine
from .util import NothingToRedo, NothingToUndo


class History(namedtuple('History', 'inner history undone')):
    '''
    Current inner state, pre-mutation snapshots, and undone states.
    '''
    __slots__ = ()

    @classmethod
    def wrap(cls, inner):
        return cls(inner, (), ())

    def undo(self):
        '''
        Restore state to the top of the undo stack.
        '''
        if not self.history:
            raise NothingToUndo()
        return type(self)(self.history[-1],
                          self.history[:-1],
                          self.undone + (self.inner,))

    def redo(self):
        '''
        Restore state to the top of the redo stack.
        '''
        if not self.undone:
            raise NothingToRedo()
        return type(self)(self.undone[-1],
                          self.history + (self.inner,),
                          self.undone[:-1])


def _update(name):
    # Snapshot the old state, drop the redo stack. If the inner method
    # raises, no new wrapper is built and the history is untouched.
    def method(self, *args):
        inner = getattr(self.inner, name)(*args)
        return type(self)(inner, self.history + (self.inner,), ())
    method.__name__ = name
    return method


def _get(name):
    def query(self, *args):
        return getattr(self.inner, name)(*args)
    query.__name__ = name
    return query


def _field(name):
    return property(lambda self: getattr(self.inner, name))


def undoable(cls, methods=None, properties=None, fields=None):
    '''
    Make the type cls undoable by wrapping its state and methods.

    :param methods: Names of mutators; each returns a new cls.
    :param properties: Names of read-only query methods.
    :param fields: Names of plain attributes to expose read-only.
    '''
    methods = cls.METHODS if methods is None else methods
    properties = cls.PROPERTIES if properties is None else properties
    fields = getattr(cls, '_fields', ()) if fields is None else fields

    namespace = {'__slots__': (),
                 '__doc__': History.__doc__,
                 'METHODS': tuple(methods) + ('undo', 'redo'),
                 'PROPERTIES': tuple(properties),
                 'FIELDS': tuple(fields)}
    namespace.update({name: _field(name) for name in fields})
    namespace.update({name: _get(name) for name in properties})
    namespace.update({name: _update(name) for name in methods})
    if hasattr(cls, 'initial'):
        namespace['initial'] = classmethod(lambda k: k.wrap(cls.initial()))

    return type('Undoable' + cls.__name__, (History,), namespace)


UndoableMachine = undoable(Machine)
