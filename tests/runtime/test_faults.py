import pytest

from sm.common.ops import Op
from sm.common.errors import OutOfBounds, StackUnderflow, InvalidOpcode
import sm.runtime.cpu as cpu

from unit_utils import make_cpu, SMALL_CAPACITY


BAD_ADDRESSES = [SMALL_CAPACITY, SMALL_CAPACITY + 1, -1, -SMALL_CAPACITY]


@pytest.mark.parametrize('addr', BAD_ADDRESSES)
@pytest.mark.parametrize('op, below', [
    (Op.LOAD, []),
    (Op.STOR, [123]),
    (Op.JMP, []),
])
def test_address_out_of_bounds(op, below, addr):
    proc, _ = make_cpu([op], stack=below + [addr])

    with pytest.raises(OutOfBounds) as e:
        proc.exec_next()

    assert e.value.address == addr
    assert e.value.opcode == op.name

    # Only the opcode fetch touched memory
    assert proc.memory.reads == [0]
    assert proc.memory.writes == []


def test_jz_nonzero_bad_address_does_not_jump():
    # A non-zero operand is a condition, never used as an address
    proc, _ = make_cpu([Op.JZ], stack=[SMALL_CAPACITY])
    proc.exec_next()
    assert proc.ip == 1


def test_jz_taken_checks_bounds_against_capacity():
    # Zero is the only address JZ can take and it is always in range
    proc, _ = make_cpu([Op.JZ], stack=[0], capacity=1)
    proc.exec_next()
    assert proc.ip == 0


@pytest.mark.parametrize('op', [Op.ADD, Op.SUB, Op.AND, Op.OR, Op.XOR, Op.STOR])
@pytest.mark.parametrize('below', [[], [65]])
def test_two_operand_underflow(op, below):
    proc, out = make_cpu([op], stack=below)

    with pytest.raises(StackUnderflow) as e:
        proc.exec_next()

    assert e.value.opcode == op.name
    assert e.value.needed == 2
    assert proc.stack.items() == below
    assert proc.memory.writes == []
    assert out.getvalue() == b''
    assert proc.ip == 0


@pytest.mark.parametrize('op', [Op.NOT, Op.OUT, Op.LOAD, Op.JMP, Op.JZ, Op.DUP])
def test_one_operand_underflow(op):
    proc, out = make_cpu([op])

    with pytest.raises(StackUnderflow):
        proc.exec_next()

    assert out.getvalue() == b''


@pytest.mark.parametrize('word', [15, 99, -1])
def test_invalid_opcode(word):
    proc, _ = make_cpu([Op.NOP, word], start=1)

    with pytest.raises(InvalidOpcode) as e:
        proc.exec_next()

    assert e.value.value == word
    assert e.value.address == 1


def test_start_out_of_bounds():
    with pytest.raises(OutOfBounds):
        make_cpu([Op.NOP], start=SMALL_CAPACITY)


def test_self_jump_halts():
    proc, out = make_cpu([Op.PUSH, 2, Op.JMP])
    proc.exec_next()

    with pytest.raises(cpu.Halt):
        proc.exec_next()

    assert proc.state is cpu.State.HALTED
    assert proc.ip == 2
    assert out.getvalue() == b''

    # A halted machine stays halted
    with pytest.raises(cpu.Halt):
        proc.exec_next()


def test_jump_elsewhere_keeps_running():
    proc, _ = make_cpu([Op.PUSH, 3, Op.JMP, Op.NOP])
    proc.exec_next()
    proc.exec_next()

    assert proc.state is cpu.State.RUNNING
    assert proc.ip == 3


def test_errors_report_failing_address():
    proc, _ = make_cpu([Op.NOP, Op.NOP, Op.LOAD], start=2, stack=[-5])

    with pytest.raises(OutOfBounds) as e:
        proc.exec_next()

    assert e.value.ip == 2
    assert str(e.value) == 'LOAD at 2: address -5 out of bounds'

    proc, _ = make_cpu([Op.NOP, Op.ADD], start=1)

    with pytest.raises(StackUnderflow) as u:
        proc.exec_next()

    assert u.value.ip == 1
    assert str(u.value) == 'ADD at 1: stack underflow: needs 2, has 0'
