from sm.common.errors import StackUnderflow
from sm.common.word import to_word


class Stack:
    def __init__(self):
        self.words: list[int] = []

    def __len__(self) -> int:
        return len(self.words)

    def push(self, value: int):
        self.words.append(to_word(value))

    def pop(self) -> int:
        if not self.words:
            raise StackUnderflow()

        return self.words.pop()

    def peek(self, depth: int = 0) -> int | None:
        """ Value `depth` places below the top, or None if the stack is shallower """
        if depth < 0 or depth >= len(self.words):
            return None

        return self.words[-1 - depth]

    def clear(self):
        self.words.clear()

    def items(self) -> list[int]:
        return list(self.words)
