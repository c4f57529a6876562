from dataclasses import dataclass, field

from sm.common.ops import Op
from sm.common.hwconf import START_ADDRESS
from sm.common.word import to_word


DEMO_MESSAGE = 'Hello world!\n'


@dataclass
class Program:
    words: list[int] = field(default_factory=list)
    start: int = START_ADDRESS

    def __len__(self) -> int:
        return len(self.words)


def word_of(elem: Op | int | str) -> int:
    if isinstance(elem, str):
        if len(elem) != 1:
            raise UserWarning(f'Character literal expected, got {elem!r}')

        return ord(elem)

    return to_word(int(elem))


class ProgramBuilder:
    def __init__(self):
        self.words: list[int] = []

    @property
    def offset(self) -> int:
        return len(self.words)

    def emit(self, *elems: Op | int | str):
        for elem in elems:
            self.words.append(word_of(elem))

        return self

    def push(self, value: int | str):
        return self.emit(Op.PUSH, value)

    def halt(self):
        return self.emit(*halt_sequence(self.offset))

    def build(self, start: int = START_ADDRESS) -> Program:
        return Program(list(self.words), start)


def halt_sequence(offset: int) -> list[int]:
    # PUSH takes two words, so the JMP lands right after them
    return [Op.PUSH, offset + 2, Op.JMP]


def demo_program(message: str = DEMO_MESSAGE) -> Program:
    builder = ProgramBuilder()
    i = 0

    while i < len(message):
        char = message[i]
        builder.push(char)

        # Repeated characters reuse the pushed value
        if i + 1 < len(message) and message[i + 1] == char:
            builder.emit(Op.DUP, Op.OUT, Op.OUT)
            i += 2
        else:
            builder.emit(Op.OUT)
            i += 1

    return builder.halt().build()
