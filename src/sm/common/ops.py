from enum import IntEnum


class Op(IntEnum):
    NOP = 0x00   # do nothing
    ADD = 0x01   # pop a; pop b; push a + b
    SUB = 0x02   # pop a; pop b; push a - b
    AND = 0x03   # pop a; pop b; push a & b
    OR = 0x04    # pop a; pop b; push a | b
    XOR = 0x05   # pop a; pop b; push a ^ b
    NOT = 0x06   # pop a; push !a
    IN = 0x07    # push one byte read from input
    OUT = 0x08   # pop a; write low byte of a to output
    LOAD = 0x09  # pop a; push M[a]
    STOR = 0x0A  # pop a; pop b; b -> M[a]
    JMP = 0x0B   # pop a; goto a (halt if a is this JMP)
    JZ = 0x0C    # pop a; if a == 0 goto a
    PUSH = 0x0D  # push next word
    DUP = 0x0E   # pop a; push a; push a


# Words an opcode needs on the stack before it runs
ARITY = {
    Op.NOP: 0,
    Op.ADD: 2,
    Op.SUB: 2,
    Op.AND: 2,
    Op.OR: 2,
    Op.XOR: 2,
    Op.NOT: 1,
    Op.IN: 0,
    Op.OUT: 1,
    Op.LOAD: 1,
    Op.STOR: 2,
    Op.JMP: 1,
    Op.JZ: 1,
    Op.PUSH: 0,
    Op.DUP: 1,
}


def decode(value: int) -> Op | None:
    try:
        return Op(value)
    except ValueError:
        return None
