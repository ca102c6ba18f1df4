'''
Centralized configuration for rpncalc.

Every setting can be overridden through an environment variable prefixed with
RPNCALC_. The CLI overrides a few of them again from its own flags.
'''

import os


def _path(value):
    '''
    Expand ~ in a configured path; the empty string disables the file.
    '''
    return os.path.expanduser(value) if value else None


# Where the calculator state is persisted between runs.
STATE_FILE = _path(os.getenv('RPNCALC_STATE_FILE', '~/.rpncalc_state.json'))

LOG_LEVEL = os.getenv('RPNCALC_LOG_LEVEL', 'WARNING')
LOG_FILE = _path(os.getenv('RPNCALC_LOG_FILE', ''))

# approx is a linear scan over numerators, so this bounds its latency.
APPROX_MAX_DENOM = int(os.getenv('RPNCALC_APPROX_MAX_DENOM', '4096'))

# Display mode a fresh calculator starts in.
DEFAULT_MODE = os.getenv('RPNCALC_DEFAULT_MODE', 'basic')

PROMPT = os.getenv('RPNCALC_PROMPT', '> ')
