class MachineError(Exception):
    """ Fatal condition raised by the machine; aborts the run """
    pass


def context(opcode: str | None, ip: int | None) -> str:
    if opcode is None:
        return ''

    if ip is None:
        return f'{opcode}: '

    return f'{opcode} at {ip}: '


class OutOfBounds(MachineError):
    address: int
    opcode: str | None
    ip: int | None

    def __init__(self, address: int, opcode: str | None = None, ip: int | None = None):
        self.address = address
        self.opcode = opcode
        self.ip = ip

        super().__init__(f'{context(opcode, ip)}address {address} out of bounds')


class StackUnderflow(MachineError):
    opcode: str | None
    needed: int
    available: int
    ip: int | None

    def __init__(
        self,
        opcode: str | None = None,
        needed: int = 1,
        available: int = 0,
        ip: int | None = None
    ):
        self.opcode = opcode
        self.needed = needed
        self.available = available
        self.ip = ip

        super().__init__(
            f'{context(opcode, ip)}stack underflow: needs {needed}, has {available}'
        )


class InvalidOpcode(MachineError):
    value: int
    address: int

    def __init__(self, value: int, address: int):
        self.value = value
        self.address = address
        super().__init__(f'Invalid opcode 0x{value & 0xFFFFFFFF:X} at {address}')


class ImageError(Exception):
    pass
