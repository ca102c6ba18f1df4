from functools import reduce
import operator

import regex

from .util import UserError


class LexError(UserError):
    pass


class Lexer:
    '''
    Lexer for a typed line of calculator input, a *regular* grammar.

    Lexemes are numbers, words, mode switches, single-character symbols and
    whitespace. Numbers and words are later replayed into the accumulator one
    keystroke at a time, so the lexer only has to find where they end.

    For consistency, needs to be instantiated, despite holding no internal
    state.
    '''
    # Number, of any kind supported by the accumulator.
    # Order matters: longest forms first.
    NUMBER = r'''
              (?:
                  # 1_3/4, a mixed number. The denominator may be missing
                  # while typing, which the accumulator rejects on enter.
                  \d+ _ \d* (?: / \d* )?
              )|(?:
                  # 3/4
                  \d+ / \d*
              )|(?:
                  # 4.5, 4., .5
                  \d+ \. \d*
                  |
                  \. \d+
              )|(?:
                  # 12
                  \d+
              )
              '''
    # Identifier: a letter, then letters and digits.
    WORD = r'\p{L} [\p{L}\d]*'
    # :frac, :basic, and so on; switches the display mode.
    MODE = r': (?<__mode__> \w+ )'

    # Shorthand symbols and the action each one stands for.
    SYMBOLS = {
        '+': 'add',
        '-': 'sub',
        '*': 'mul',
        '/': 'div',
        '^': 'pow',
        '=': 'store',
        '#': 'enter',
        '~': 'swap',
    }
    assert not [symbol
                for symbol
                in SYMBOLS
                if len(symbol) != 1]
    # Escape everything; # would otherwise start a verbose-mode comment.
    SYMBOL = r'(?:' + r'|'.join('\\' + symbol for symbol in SYMBOLS) + r')'
    SPACE = r'\s+'

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<word>' + WORD + r')|' \
             r'(?<mode>' + MODE + r')|' \
             r'(?<symbol>' + SYMBOL + r')|' \
             r'(?<space>' + SPACE + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    def lex(self, line):
        '''
        Take a line and yield all lexemes.

        Raises LexError on the first thing that is not a lexeme.
        '''
        while line:
            match = regex.match(type(self).LEXEME, line,
                                flags=type(self).FLAGS)
            if match is None:
                break
            yield match
            line = line[len(match.group(0)):]
        if line:
            raise LexError("Couldn't lex {}".format(line.strip()))

    def matchedgroups(self, match):
        '''
        Return the named groups the lexeme matched.
        '''
        return {key: value
                for key, value
                in match.groupdict().items()
                if value}
