from enum import IntEnum


class OptionType(IntEnum):
    """Option sign used throughout the lattice formulas."""

    CALL = 1
    PUT = -1
