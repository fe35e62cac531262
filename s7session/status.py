"""
PLC read/write status codes.

The status byte sits at a fixed offset in every read/write response. It is
either a success, one of a closed set of device-reported errors, or a value
the protocol does not define.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class ReadWriteStatus(IntEnum):
    Success = 0x00
    HardwareFault = 0x01
    AccessingObjectNotAllowed = 0x03
    ObjectDoesNotExist = 0x05
    DataTypeNotSupported = 0x06
    DataTypeInconsistent = 0x07
    AddressOutOfRange = 0x0A


class StatusKind(Enum):
    SUCCESS = "success"
    DEVICE_ERROR = "device_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StatusOutcome:
    """Result of classifying a raw status byte.

    ``status`` is None only when ``kind`` is ``StatusKind.UNKNOWN``.
    """

    kind: StatusKind
    raw: int
    status: Optional[ReadWriteStatus] = None

    @property
    def ok(self) -> bool:
        return self.kind is StatusKind.SUCCESS


def classify_status(raw: int) -> StatusOutcome:
    """Map a status byte onto the status vocabulary. Never raises."""
    try:
        status = ReadWriteStatus(raw)
    except ValueError:
        return StatusOutcome(StatusKind.UNKNOWN, raw)

    if status is ReadWriteStatus.Success:
        return StatusOutcome(StatusKind.SUCCESS, raw, status)
    return StatusOutcome(StatusKind.DEVICE_ERROR, raw, status)
