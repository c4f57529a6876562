import logging as lg

from sm.common.hwconf import CAPACITY


class RunSettings:
    capacity: int
    trace: bool

    def __init__(self):
        self.capacity = CAPACITY
        self.trace = False

    def update(
        self,
        capacity: int | None = None,
        trace: bool | None = None
    ):
        if capacity is not None:
            if capacity <= 0:
                raise UserWarning(f'Capacity must be positive, got {capacity}')

            self.capacity = capacity

        if trace is not None:
            self.trace = trace

        return self

    def log_level(self) -> int:
        return lg.DEBUG if self.trace else lg.INFO
