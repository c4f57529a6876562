import sys
import logging as lg
from dataclasses import dataclass, field
from typing import BinaryIO

from sm.common.hwconf import EOF
from sm.common.word import low_byte


class InputPort:
    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream if stream is not None else sys.stdin.buffer

    def read_byte(self) -> int:
        buf = self.stream.read(1)

        if not buf:
            lg.debug('Input port: end of stream')
            return EOF

        return buf[0]


class OutputPort:
    def __init__(self, stream: BinaryIO | None = None):
        self.stream = stream if stream is not None else sys.stdout.buffer

    def write_byte(self, value: int):
        self.stream.write(bytes([low_byte(value)]))
        self.stream.flush()


@dataclass
class Peripherals:
    inp: InputPort = field(default_factory=InputPort)
    out: OutputPort = field(default_factory=OutputPort)

    @classmethod
    def from_streams(cls, inp: BinaryIO | None = None, out: BinaryIO | None = None):
        return cls(InputPort(inp), OutputPort(out))
