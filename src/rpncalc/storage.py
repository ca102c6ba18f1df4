'''
JSON persistence of the calculator state.

Only the machine is stored, not the undo history. Rational parts are written
as numeric strings, so readers without big integers lose nothing.
'''

from types import MappingProxyType
import json
import os

from . import rat
from .accumulator import (Accumulator,
                          DenomVal,
                          FloatVal,
                          NumVal,
                          DEC,
                          DENOM,
                          EMPTY,
                          FLOAT,
                          NUM,
                          VAR)
from .dispatch import Tag, Value
from .logging_config import get_logger
from .machine import Machine
from .util import RPNError


logger = get_logger(__name__)

VERSION = 1

_PAYLOADS = {
    FLOAT: FloatVal,
    NUM: NumVal,
    DENOM: DenomVal,
}


def _is_count(n):
    return type(n) is int and n >= 0


def dump_value(value):
    if value.tag is Tag.RAT:
        num, denom = value.value
        return {'tag': value.tag.value, 'num': str(num), 'denom': str(denom)}
    return {'tag': value.tag.value, 'value': value.value}


def load_value(data):
    tag, payload = Tag(data['tag']), data.get('value')
    if tag is Tag.RAT:
        return Value(tag, rat.cons(int(data['num']), int(data['denom'])))
    elif tag is Tag.FLOAT and type(payload) in (int, float):
        return Value.float(payload)
    elif tag is Tag.WORD and isinstance(payload, str) and payload:
        return Value.word(payload)
    raise ValueError('Bad {} value {!r}'.format(tag.value, payload))


def dump_entry(entry):
    # Operator names and other tape annotations are plain strings.
    return entry if isinstance(entry, str) else dump_value(entry)


def load_entry(data):
    return data if isinstance(data, str) else load_value(data)


def dump_accum(accum):
    val = accum.val
    if isinstance(val, tuple):
        val = list(val)
    return {'type': accum.type, 'val': val}


def load_accum(data):
    '''
    Accumulator from dump_accum() output, checking state and payload.
    '''
    kind, val = data['type'], data.get('val')
    if kind == EMPTY:
        valid = val is None
    elif kind == DEC:
        valid = _is_count(val)
    elif kind == VAR:
        valid = isinstance(val, str) and val != ''
    elif kind in _PAYLOADS:
        fields = _PAYLOADS[kind]._fields
        valid = isinstance(val, list) and len(val) == len(fields) and \
            all(_is_count(n) for n in val)
    else:
        raise ValueError('Unknown accumulator state {!r}'.format(kind))
    if not valid:
        raise ValueError('Bad {} accumulator {!r}'.format(kind, val))
    if kind in _PAYLOADS:
        val = _PAYLOADS[kind](*val)
    return Accumulator(kind, val)


def dump(machine):
    '''
    Machine as a JSON compatible dict.
    '''
    return {
        'version': VERSION,
        'stack': [dump_value(v) for v in machine.stack],
        'tape': [dump_entry(e) for e in machine.tape],
        'defs': {name: dump_value(v) for name, v in machine.defs.items()},
        'accum': dump_accum(machine.accum),
        'showing': machine.showing,
    }


def load(data):
    '''
    Machine from a dict produced by dump().
    '''
    if data.get('version') != VERSION:
        raise ValueError('Unsupported state version {!r}'.format(
            data.get('version')))
    return Machine(
        stack=tuple(load_value(v) for v in data['stack']),
        tape=tuple(load_entry(e) for e in data['tape']),
        defs=MappingProxyType({name: load_value(v)
                               for name, v in data['defs'].items()}),
        accum=load_accum(data['accum']),
        showing=data['showing'],
    )


def dumps(machine):
    return json.dumps(dump(machine), ensure_ascii=False)


def loads(text):
    return load(json.loads(text))


def save(path, machine):
    '''
    Write machine to path, replacing the file atomically.
    '''
    tmp = path + '.tmp'
    with open(tmp, 'w', encoding='utf-8') as fp:
        fp.write(dumps(machine))
    os.replace(tmp, path)


def restore(path):
    '''
    Read a machine back from path.

    A missing, unreadable or corrupt file gives a fresh machine.
    '''
    try:
        with open(path, encoding='utf-8') as fp:
            machine = loads(fp.read())
    except FileNotFoundError:
        logger.debug('No saved state at %s', path)
        return Machine.initial()
    except (OSError, ValueError, KeyError, TypeError, AttributeError,
            RPNError):
        logger.warning('Ignoring unreadable state file %s', path,
                       exc_info=True)
        return Machine.initial()
    logger.debug('Restored state from %s', path)
    return machine
