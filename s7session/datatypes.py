"""
S7 variable types and data item descriptors.

Provides the byte length a read or write item occupies inside a PDU.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable


class VarType(IntEnum):
    """Type of a variable as seen by the PLC."""

    BIT = 0
    BYTE = 1
    WORD = 2
    DWORD = 3
    INT = 4
    DINT = 5
    REAL = 6
    LREAL = 7
    STRING = 8
    S7STRING = 9
    S7WSTRING = 10
    TIMER = 11
    COUNTER = 12
    DATETIME = 13
    DATETIMELONG = 14
    DATE = 15
    TIME = 16


# Byte size of one element, for the types whose length is a plain multiple
ELEMENT_SIZE = {
    VarType.WORD: 2,
    VarType.INT: 2,
    VarType.TIMER: 2,
    VarType.COUNTER: 2,
    VarType.DATE: 2,
    VarType.DWORD: 4,
    VarType.DINT: 4,
    VarType.REAL: 4,
    VarType.TIME: 4,
    VarType.LREAL: 8,
    VarType.DATETIME: 8,
    VarType.DATETIMELONG: 12,
}

ByteLengthFunc = Callable[[VarType, int], int]


def var_type_byte_length(var_type: VarType, count: int = 1) -> int:
    """Number of bytes ``count`` elements of ``var_type`` occupy in a PDU.

    Args:
        var_type: variable type
        count: number of elements (for strings: number of characters)

    Returns:
        Length in bytes.
    """
    if var_type == VarType.BIT:
        return (count + 7) // 8
    if var_type == VarType.BYTE:
        return 1 if count < 1 else count
    if var_type == VarType.STRING:
        return count
    if var_type == VarType.S7STRING:
        # two header bytes, padded to an even length
        return count + 3 if (count + 2) & 1 else count + 2
    if var_type == VarType.S7WSTRING:
        return count * 2 + 4
    if var_type in ELEMENT_SIZE:
        return ELEMENT_SIZE[var_type] * count
    raise ValueError(f"{var_type} is not a supported variable type")


@dataclass
class DataItem:
    """One read or write target."""

    var_type: VarType
    count: int = 1


def even_length(length: int) -> int:
    """Round an item length up to the next even number."""
    return length + 1 if length & 1 else length
