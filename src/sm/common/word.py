WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1
WORD_MIN = -(1 << (WORD_BITS - 1))
WORD_MAX = (1 << (WORD_BITS - 1)) - 1


def to_word(value: int) -> int:
    # Two's complement wrap into int32
    value &= WORD_MASK

    if value > WORD_MAX:
        value -= 1 << WORD_BITS

    return value


def low_byte(value: int) -> int:
    return value & 0xFF
