'''
Structured logging configuration for rpncalc.
'''

import logging
import sys
from datetime import datetime


ROOT = 'rpncalc'


class StructuredFormatter(logging.Formatter):
    '''
    One line per record: timestamp, level, logger name, message.
    '''

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        line = '{} [{}] {}: {}'.format(timestamp,
                                       record.levelname,
                                       record.name,
                                       record.getMessage())
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(level='WARNING', log_file=None):
    '''
    Configure the rpncalc logger hierarchy.

    :param level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :param log_file: Also log to this file, if given. Otherwise stderr only.
    '''
    logger = logging.getLogger(ROOT)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(StructuredFormatter())
    logger.addHandler(console)

    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

    return logger


def get_logger(name):
    '''
    Logger for a module, as a child of the rpncalc logger.

    Accepts either a bare name or a dotted module __name__.
    '''
    if name == ROOT or name.startswith(ROOT + '.'):
        return logging.getLogger(name)
    return logging.getLogger('{}.{}'.format(ROOT, name))
