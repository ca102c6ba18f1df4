from os import isatty
import sys
from sys import stdin, stdout, exit
from argparse import ArgumentParser, REMAINDER, OPTIONAL

from prompt_toolkit import PromptSession

from . import config
from .lexer import Lexer, LexError
from .logging_config import setup_logging
from .machine import Machine
from .reactor import Reactor


# Words that run an action instead of naming a variable or an operator.
COMMANDS = {
    'undo': ('undo',),
    'redo': ('redo',),
    'clear': ('clear',),
    'reset': ('reset',),
    'enter': ('enter',),
    'store': ('store',),
    'swap': ('exch', -1, -2),
}

# Keystrokes inside a number lexeme.
KEYS = {
    '.': ('decimal',),
    '_': ('num',),
    '/': ('denom',),
}


def keystrokes(groups):
    '''
    Translate one lexeme into the actions that type it.

    :param groups: Named groups the lexeme matched, as from Lexer.
    '''
    if 'number' in groups:
        for char in groups['number']:
            yield KEYS.get(char, ('digit', char))
    elif 'word' in groups:
        word = groups['word']
        if word in COMMANDS:
            yield COMMANDS[word]
        elif word in Machine.OPERATORS:
            yield ('operator', word)
        else:
            for char in word:
                yield ('digit', char) if char.isdigit() else ('letter', char)
            yield ('enter',)
    elif 'mode' in groups:
        yield ('show', groups['__mode__'])
    elif 'symbol' in groups:
        name = Lexer.SYMBOLS[groups['symbol']]
        yield COMMANDS.get(name, ('operator', name))
    elif 'space' in groups:
        yield ('enter',)


def format_state(state):
    '''
    Stack bottom to top, then the accumulator if anything is typed.
    '''
    lines = [str(value) for value in state.stack]
    if not state.is_empty():
        lines.append(state.display() + '_')
    return '\n'.join(lines)


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = config.PROMPT

    def feed(self, reactor, line):
        '''
        Type one line into the calculator.

        Stops at the first error; the rest of the line is dropped.
        '''
        lexer = Lexer()
        reactor.error = None
        try:
            matches = list(lexer.lex(line))
        except LexError as e:
            return e
        for match in matches:
            for name, *args in keystrokes(lexer.matchedgroups(match)):
                if name == 'enter' and reactor.state.is_empty():
                    continue
                if not reactor.dispatch(name, *args):
                    return reactor.error
        if not reactor.state.is_empty():
            reactor.enter()
        return reactor.error

    def dumper(self):
        '''
        Dump every lexeme with the actions it turns into.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<actions>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(match.group(0)),
                      list(keystrokes(groups)),
                      sep='\t')

    def executor(self):
        '''
        Run the calculator over every input line.
        '''
        if self.args.state_file:
            reactor = Reactor.restore(self.args.state_file)
        else:
            reactor = Reactor()
        for line in self.args.expressions:
            error = self.feed(reactor, line)
            if error is not None:
                print(error.args[0] if error.args else type(error).__name__,
                      file=sys.stderr)
            if self._interactive() or self.args.verbose:
                print(format_state(reactor.state))
        if not self._interactive() and reactor.state.stack:
            print(reactor.state.top())

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin replacement if either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(stdin.fileno()) and isatty(stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('--state-file',
                                          default=config.STATE_FILE)
        self.argument_parser.add_argument('--no-state',
                                          action='store_const',
                                          const=None,
                                          dest='state_file')
        self.argument_parser.add_argument('--log-level',
                                          default=config.LOG_LEVEL)
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=stdin)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        setup_logging('DEBUG' if self.args.verbose else self.args.log_level,
                      config.LOG_FILE)
        if self.args.expressions is stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except KeyboardInterrupt:
            exit(1)
