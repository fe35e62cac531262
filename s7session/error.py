"""
S7 session error handling and exception classes.

Maps session error codes and PLC read/write status bytes to Python exceptions
with meaningful messages.
"""

from typing import Optional, Dict, Type
from functools import cache

from .status import ReadWriteStatus


class S7Error(Exception):
    """Base exception for all S7 session errors."""

    def __init__(self, message: str, error_code: Optional[int] = None):
        super().__init__(message)
        self.error_code = error_code


class S7ConnectionError(S7Error):
    """Raised when no connection to the S7 device is available."""

    pass


class S7TimeoutError(S7Error):
    """Raised when an S7 operation times out."""

    pass


class S7ProtocolError(S7Error):
    """Raised when S7 protocol communication fails."""

    pass


class S7PduSizeError(S7ProtocolError):
    """A request or its response would not fit in the negotiated PDU size."""

    def __init__(self, message: str, size: int, limit: int):
        super().__init__(message)
        self.size = size
        self.limit = limit


class S7RequestTooLargeError(S7PduSizeError):
    """Too many items for one request."""

    pass


class S7ResponseTooLargeError(S7PduSizeError):
    """Too much data for one response (or write payload)."""

    pass


class S7ResponseLengthError(S7ProtocolError):
    """Raised when the PLC answer is missing or shorter than expected."""

    def __init__(self, message: str):
        super().__init__(message, ERR_WRONG_NUMBER_RECEIVED_BYTES)


class S7InvalidStatusError(S7ProtocolError):
    """Raised when the PLC answers with a status byte outside the known set."""

    def __init__(self, status: int):
        super().__init__(f"Invalid response from PLC: statusCode={status}.")
        self.status = status


class S7StatusError(S7ProtocolError):
    """Raised when the PLC rejects a read or write item."""

    status: ReadWriteStatus

    def __init__(self, status: ReadWriteStatus):
        super().__init__(f"Received error from PLC: {status_text(status)}.", int(status))
        self.status = status


class S7HardwareFaultError(S7StatusError):
    pass


class S7AccessingObjectNotAllowedError(S7StatusError):
    pass


class S7ObjectDoesNotExistError(S7StatusError):
    pass


class S7DataTypeNotSupportedError(S7StatusError):
    pass


class S7DataTypeInconsistentError(S7StatusError):
    pass


class S7AddressOutOfRangeError(S7StatusError):
    pass


# Session error codes
ERR_CONNECTION = 1
ERR_WRONG_CPU_TYPE = 2
ERR_READ_DATA = 3
ERR_WRITE_DATA = 4
ERR_WRONG_NUMBER_RECEIVED_BYTES = 10

session_errors = {
    0: "NoError",
    ERR_CONNECTION: "ConnectionError",
    ERR_WRONG_CPU_TYPE: "WrongCPU_Type",
    ERR_READ_DATA: "ReadData",
    ERR_WRITE_DATA: "WriteData",
    ERR_WRONG_NUMBER_RECEIVED_BYTES: "WrongNumberReceivedBytes",
}

status_errors: Dict[ReadWriteStatus, Type[S7StatusError]] = {
    ReadWriteStatus.HardwareFault: S7HardwareFaultError,
    ReadWriteStatus.AccessingObjectNotAllowed: S7AccessingObjectNotAllowedError,
    ReadWriteStatus.ObjectDoesNotExist: S7ObjectDoesNotExistError,
    ReadWriteStatus.DataTypeNotSupported: S7DataTypeNotSupportedError,
    ReadWriteStatus.DataTypeInconsistent: S7DataTypeInconsistentError,
    ReadWriteStatus.AddressOutOfRange: S7AddressOutOfRangeError,
}

_status_messages = {
    ReadWriteStatus.Success: "Success",
    ReadWriteStatus.HardwareFault: "Hardware fault",
    ReadWriteStatus.AccessingObjectNotAllowed: "Accessing object not allowed",
    ReadWriteStatus.ObjectDoesNotExist: "Object does not exist",
    ReadWriteStatus.DataTypeNotSupported: "Data type not supported",
    ReadWriteStatus.DataTypeInconsistent: "Data type inconsistent",
    ReadWriteStatus.AddressOutOfRange: "Address out of range",
}


@cache
def error_text(error: int) -> str:
    """Returns a textual explanation of a given session error number.

    Args:
        error: an error integer

    Returns:
        The error name as a string.
    """
    return session_errors.get(error, f"Unknown error: {error:#04x}")


def status_text(status: ReadWriteStatus) -> str:
    """Human readable description of a PLC read/write status."""
    return _status_messages[status]


def status_error(status: ReadWriteStatus) -> S7StatusError:
    """Build the exception matching a device-reported error status.

    Raises:
        ValueError: when called with ``ReadWriteStatus.Success``.
    """
    if status not in status_errors:
        raise ValueError(f"{status!r} is not an error status")
    return status_errors[status](status)
