'''
Memory image files.

Binary images are consecutive big-endian signed 32-bit words. Text images
are whitespace separated word literals:

    START 0x0           // optional start address, first thing in the file
    13 'H' 8            // decimal, hex and character literals
    13 0x5 11

There are no mnemonics or labels: a text image is the same word list as
a binary one, only readable.
'''

import struct
import logging as lg
from pathlib import Path

import pyparsing as pp

from sm.common.hwconf import WORD_SIZE, WORD_FMT, START_ADDRESS
from sm.common.errors import ImageError
from sm.common.word import WORD_MIN, WORD_MASK, to_word
from sm.loader.program import Program


BINARY_SUFFIX = '.bin'

ESCAPES = {
    'n': ord('\n'),
    't': ord('\t'),
    'r': ord('\r'),
    '0': 0,
    '\\': ord('\\'),
    "'": ord("'"),
}


def check_word(value: int) -> int:
    # Accept both signed and unsigned spellings of a 32-bit word
    if value < WORD_MIN or value > WORD_MASK:
        raise ImageError(f'Literal {value} does not fit in a word')

    return to_word(value)


def on_char(s: str, loc: int, toks: pp.ParseResults) -> int:
    body = toks[0][1:-1]

    if not body.startswith('\\'):
        return ord(body)

    if body[1] not in ESCAPES:
        raise pp.ParseException(s, loc, f'Unknown escape {body}')

    return ESCAPES[body[1]]


comment = pp.Regex(r'//[^\n]*')

hex_const = pp.Regex(r'[+-]?0[xX][0-9a-fA-F]+').set_parse_action(lambda r: int(r[0], 16))
dec_const = pp.Regex(r'[+-]?[0-9]+').set_parse_action(lambda r: int(r[0]))
char_const = pp.Regex(r"'(\\.|[^\\'\n])'").set_parse_action(on_char)

number = hex_const | dec_const
word = hex_const | char_const | dec_const

start_directive = pp.Suppress(pp.CaselessKeyword('START')) + number

image = pp.Group(pp.Optional(start_directive))('start') \
    + pp.Group(pp.ZeroOrMore(word))('words')

image.ignore(comment)


def parse_text(text: str) -> Program:
    try:
        result = image.parse_string(text, parse_all=True)
    except pp.ParseException as e:
        raise ImageError(f'Bad image at line {e.lineno}, column {e.col}: {e.msg}') from e

    start_tokens = list(result.get('start', []))
    start = start_tokens[0] if start_tokens else START_ADDRESS
    words = [check_word(w) for w in result.get('words', [])]

    return Program(words, start)


def dump_text(program: Program) -> str:
    lines = [f'START {program.start}']
    lines.extend(str(int(w)) for w in program.words)
    return '\n'.join(lines) + '\n'


def load_binary(data: bytes) -> Program:
    if len(data) % WORD_SIZE != 0:
        raise ImageError(
            f'Binary image size {len(data)} is not a multiple of {WORD_SIZE}'
        )

    words = [w for (w,) in struct.iter_unpack(WORD_FMT, data)]
    return Program(words, START_ADDRESS)


def dump_binary(program: Program) -> bytes:
    return b''.join(struct.pack(WORD_FMT, to_word(w)) for w in program.words)


def load_image(path: str | Path) -> Program:
    if isinstance(path, str):
        path = Path(path)

    lg.debug(f'Loading image {path}')

    try:
        if path.suffix == BINARY_SUFFIX:
            program = load_binary(path.read_bytes())
        else:
            program = parse_text(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError) as e:
        raise ImageError(f'Cannot read image {path}: {e}') from e

    lg.info(f'Loaded {len(program)} words from {path}, start at {program.start}')
    return program
