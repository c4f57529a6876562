# Emulated word-addressed memory
import struct
from typing import Iterable

from sm.common.hwconf import CAPACITY, WORD_SIZE, WORD_FMT
from sm.common.errors import OutOfBounds
from sm.common.word import to_word


class MMU:
    capacity: int
    memory: bytearray

    def __init__(self, capacity: int = CAPACITY):
        self.capacity = capacity
        self.memory = bytearray(capacity * WORD_SIZE)   # Zeroed, i.e. NOP

    def in_bounds(self, addr: int) -> bool:
        return 0 <= addr < self.capacity

    def check(self, addr: int, opcode: str | None = None, ip: int | None = None):
        if not self.in_bounds(addr):
            raise OutOfBounds(addr, opcode, ip)

    def read(self, addr: int) -> int:
        self.check(addr)
        (v,) = struct.unpack_from(WORD_FMT, self.memory, addr * WORD_SIZE)
        return v

    def write(self, addr: int, value: int):
        self.check(addr)
        struct.pack_into(WORD_FMT, self.memory, addr * WORD_SIZE, to_word(value))

    def load(self, words: Iterable[int], base: int = 0):
        words = list(words)

        if words:
            # Both ends of the image must fit
            self.check(base)
            self.check(base + len(words) - 1)

        for offset, word in enumerate(words):
            self.write(base + offset, word)

    def dump(self, base: int, length: int) -> list[int]:
        return [self.read(base + i) for i in range(length)]
