import logging as lg
from enum import Enum
from typing import Callable

import sm.common.ops as ops
from sm.common.ops import Op
from sm.common.errors import StackUnderflow, InvalidOpcode
from sm.runtime.mmu import MMU
from sm.runtime.stack import Stack
from sm.runtime.peripheral import Peripherals

from sm.common.hwconf import START_ADDRESS


class Halt(Exception):
    pass


class State(Enum):
    RUNNING = 'running'
    HALTED = 'halted'


class CPU():
    ip: int  # Instruction pointer
    op: Op   # Opcode being executed
    state: State

    def __init__(self, memory: MMU, pp: Peripherals, start: int = START_ADDRESS):
        self.memory = memory    # Ref. to memory
        self.pp = pp            # Ref. to I/O ports
        self.stack = Stack()

        memory.check(start)

        self.ip = start
        self.op = Op.NOP
        self.state = State.RUNNING

    # - Helpers - #

    def debug_dump(self):
        if not lg.getLogger().isEnabledFor(lg.DEBUG):
            return

        def show(v: int | None) -> str:
            return '-' if v is None else str(v)

        lg.debug(
            f'ip={self.ip} op={self.op.name} stack({len(self.stack)}) = '
            f'{show(self.stack.peek(0))}, {show(self.stack.peek(1))}'
        )

    def advance(self):
        self.ip += 1

        # Running off the end wraps around to the first word
        if self.ip >= self.memory.capacity:
            self.ip = 0

    def push(self, val: int):
        self.stack.push(val)

    def pop(self) -> int:
        return self.stack.pop()

    def check_bounds(self, addr: int):
        # Must run before any memory access on behalf of an operand
        self.memory.check(addr, self.op.name, self.ip)

    def arithm_pair(self, op: Callable[[int, int], int]):
        a = self.pop()
        b = self.pop()
        self.push(op(a, b))
        self.advance()

    # - Operations - #

    def nop(self):
        self.advance()

    def add(self):
        self.arithm_pair(lambda a, b: a + b)

    def sub(self):
        self.arithm_pair(lambda a, b: a - b)

    def band(self):
        self.arithm_pair(lambda a, b: a & b)

    def bor(self):
        self.arithm_pair(lambda a, b: a | b)

    def xor(self):
        self.arithm_pair(lambda a, b: a ^ b)

    def lnot(self):
        a = self.pop()
        self.push(1 if a == 0 else 0)
        self.advance()

    def inp(self):
        self.push(self.pp.inp.read_byte())
        self.advance()

    def out(self):
        a = self.pop()
        self.pp.out.write_byte(a)
        self.advance()

    def load(self):
        a = self.pop()
        self.check_bounds(a)
        self.push(self.memory.read(a))
        self.advance()

    def stor(self):
        a = self.pop()
        b = self.pop()
        self.check_bounds(a)
        self.memory.write(a, b)
        self.advance()

    def jmp(self):
        a = self.pop()
        self.check_bounds(a)

        # Jumping onto itself is the halt signal
        if a == self.ip:
            self.state = State.HALTED
            raise Halt()

        self.ip = a

    def jz(self):
        # The condition doubles as the target, so a taken branch lands on 0
        a = self.pop()

        if a != 0:
            self.advance()
        else:
            self.check_bounds(a)
            self.ip = a

    def psh(self):
        self.advance()
        self.push(self.memory.read(self.ip))
        self.advance()

    def dup(self):
        a = self.pop()
        self.push(a)
        self.push(a)
        self.advance()

    HANDLERS = {
        Op.NOP: nop,
        Op.ADD: add,
        Op.SUB: sub,
        Op.AND: band,
        Op.OR: bor,
        Op.XOR: xor,
        Op.NOT: lnot,
        Op.IN: inp,
        Op.OUT: out,
        Op.LOAD: load,
        Op.STOR: stor,
        Op.JMP: jmp,
        Op.JZ: jz,
        Op.PUSH: psh,
        Op.DUP: dup,
    }

    # -- Implementation -- #

    def fetch(self) -> Op:
        word = self.memory.read(self.ip)
        op = ops.decode(word)

        if op is None:
            raise InvalidOpcode(word, self.ip)

        return op

    def exec_next(self):
        if self.state is State.HALTED:
            raise Halt()

        self.op = self.fetch()
        self.debug_dump()

        needed = ops.ARITY[self.op]

        if len(self.stack) < needed:
            raise StackUnderflow(self.op.name, needed, len(self.stack), self.ip)

        handler = self.HANDLERS[self.op]
        handler(self)


_unhandled = set(Op) - set(CPU.HANDLERS)

if _unhandled:
    raise RuntimeError(f'No handlers for {sorted(op.name for op in _unhandled)}')
