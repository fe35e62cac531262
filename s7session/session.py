"""
S7 session guard.

Keeps the PDU size budget of a connection to a PLC, checks requests against it
before they are sent, validates the status of every response and records the
exchanged frames.
"""

import logging
from typing import Any, Collection, List, Optional

from .datatypes import ByteLengthFunc, DataItem, even_length, var_type_byte_length
from .error import (
    ERR_CONNECTION,
    S7ConnectionError,
    S7InvalidStatusError,
    S7RequestTooLargeError,
    S7ResponseLengthError,
    S7ResponseTooLargeError,
    status_error,
)
from .frames import DEFAULT_MAX_SIZE, Frame, FrameData, FrameDirection, FrameHistory
from .status import StatusKind, classify_status
from .type import Parameter

logger = logging.getLogger(__name__)

DEFAULT_PORT = 102
DEFAULT_TIMEOUT = 10_000  # milliseconds
DEFAULT_PDU_SIZE = 240

# Offset of the read/write status byte in a response
STATUS_OFFSET = 14

# Bytes in a read response around the requested data
READ_RESPONSE_OVERHEAD = 18


def _hex_dump(data: FrameData) -> str:
    return bytes(data).hex("-").upper()


class Session:
    """
    Guard for a single S7 connection.

    The connection itself is set up by the caller, which hands the connected
    socket over with :meth:`attach` and sets :attr:`max_pdu_size` to the value
    negotiated with the PLC.

    Examples:
        >>> from s7session import Session, DataItem, VarType
        >>> session = Session("192.168.1.10", enable_frame_logging=True)
        >>> session.assert_pdu_size_for_read([DataItem(VarType.WORD)])
        >>> session.get_frame_hex_code()
        ''
    """

    def __init__(
        self,
        host: str = "",
        port: int = DEFAULT_PORT,
        rack: int = 0,
        slot: int = 0,
        max_pdu_size: int = DEFAULT_PDU_SIZE,
        read_timeout: int = DEFAULT_TIMEOUT,
        write_timeout: int = DEFAULT_TIMEOUT,
        max_frame_history_size: int = DEFAULT_MAX_SIZE,
        enable_frame_logging: bool = False,
        byte_length: ByteLengthFunc = var_type_byte_length,
    ):
        """
        Initialize S7 session.

        Args:
            host: PLC IP address
            port: TCP port (default 102)
            rack: Rack number
            slot: Slot number
            max_pdu_size: PDU size negotiated with the PLC
            read_timeout: receive timeout in milliseconds
            write_timeout: send timeout in milliseconds
            max_frame_history_size: number of frames kept in the history
            enable_frame_logging: record exchanged frames
            byte_length: returns the byte length of ``count`` elements of a variable type
        """
        self.host = host
        self.port = port
        self.rack = rack
        self.slot = slot
        self.max_pdu_size = max_pdu_size
        self.byte_length = byte_length

        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._transport: Optional[Any] = None
        self._stream: Optional[Any] = None

        self.frames = FrameHistory(max_frame_history_size, enable_frame_logging)

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Session {self.host}:{self.port} rack {self.rack} slot {self.slot} pdu {self.max_pdu_size}>"

    # Transport

    @property
    def is_connected(self) -> bool:
        return self._transport is not None

    def attach(self, transport: Any, stream: Optional[Any] = None) -> None:
        """Hand a connected transport to the session.

        Args:
            transport: connected socket; the timeouts are applied to it
            stream: object used for the data exchange, defaults to ``transport``
        """
        self._transport = transport
        self._stream = stream if stream is not None else transport
        self._configure_connection()
        logger.info(f"Attached transport to {self.host}:{self.port}, PDU size: {self.max_pdu_size}")

    def close(self) -> None:
        """Close the transport, if any."""
        if self._transport is None:
            return
        try:
            self._transport.close()
        finally:
            self._transport = None
            self._stream = None
            logger.info(f"Disconnected from {self.host}:{self.port}")

    def get_stream(self) -> Any:
        """Stream of the attached transport.

        Raises:
            S7ConnectionError: when no transport is attached.
        """
        if self._stream is None:
            raise S7ConnectionError("Plc is not connected", ERR_CONNECTION)
        return self._stream

    @property
    def read_timeout(self) -> int:
        """Time in milliseconds a read waits for data from the PLC."""
        return self._read_timeout

    @read_timeout.setter
    def read_timeout(self, value: int) -> None:
        self._read_timeout = value
        self._configure_connection()

    @property
    def write_timeout(self) -> int:
        """Time in milliseconds a write waits for the PLC to accept data."""
        return self._write_timeout

    @write_timeout.setter
    def write_timeout(self, value: int) -> None:
        self._write_timeout = value
        self._configure_connection()

    @property
    def socket_timeout(self) -> Optional[float]:
        """Timeout in seconds applied to the transport.

        A socket has a single timeout for both directions, so the shorter of
        the read and write timeouts is used. A value of 0 disables a timeout.
        """
        timeouts = [t for t in (self._read_timeout, self._write_timeout) if t > 0]
        return min(timeouts) / 1000.0 if timeouts else None

    def _configure_connection(self) -> None:
        if self._transport is None:
            return
        self._transport.settimeout(self.socket_timeout)
        logger.debug(f"Transport timeout set to {self.socket_timeout}s")

    def get_param(self, param: Parameter) -> int:
        """Get session parameter.

        Args:
            param: Parameter number

        Returns:
            Parameter value
        """
        if param == Parameter.RemotePort:
            return self.port
        elif param == Parameter.RecvTimeout:
            return self.read_timeout
        elif param == Parameter.SendTimeout:
            return self.write_timeout
        elif param == Parameter.PDURequest:
            return self.max_pdu_size
        raise ValueError(f"Parameter {param} not valid for session")

    def set_param(self, param: Parameter, value: int) -> None:
        """Set session parameter.

        Args:
            param: Parameter number
            value: Parameter value
        """
        if param == Parameter.RemotePort:
            if self.is_connected:
                raise RuntimeError("Cannot change RemotePort while connected")
            self.port = value
        elif param == Parameter.RecvTimeout:
            self.read_timeout = value
        elif param == Parameter.SendTimeout:
            self.write_timeout = value
        elif param == Parameter.PDURequest:
            self.max_pdu_size = value
        else:
            raise ValueError(f"Parameter {param} not valid for session")
        logger.debug(f"Set param {param}={value}")

    # Frame logging

    @property
    def enable_frame_logging(self) -> bool:
        return self.frames.enabled

    @enable_frame_logging.setter
    def enable_frame_logging(self, value: bool) -> None:
        self.frames.enabled = value

    @property
    def max_frame_history_size(self) -> int:
        return self.frames.max_size

    @max_frame_history_size.setter
    def max_frame_history_size(self, value: int) -> None:
        self.frames.set_max_size(value)

    def log_frame(self, direction: FrameDirection, data: Optional[FrameData], operation: str = "") -> None:
        frame = self.frames.record(direction, data, operation)
        if frame is not None:
            logger.debug(f"{direction.name} {operation or 'frame'}: {frame.hex_data}")

    def get_frame_hex_code(self, direction: Optional[FrameDirection] = None) -> str:
        """Hex code of the last frame sent or received.

        Args:
            direction: only consider frames going this way

        Returns:
            Uppercase hex string without separators, empty when there is none.
        """
        return self.frames.last_hex(direction)

    def get_frame_history(self) -> List[Frame]:
        return self.frames.snapshot()

    def clear_frame_history(self) -> None:
        self.frames.clear()

    # PDU budget

    def get_data_length(self, items: Collection[DataItem]) -> int:
        """Bytes needed for the data of ``items``, each item padded to even length."""
        return sum(even_length(self.byte_length(item.var_type, item.count)) for item in items)

    def read_request_size(self, items: Collection[DataItem]) -> int:
        return 19 + len(items) * 12

    def read_response_size(self, items: Collection[DataItem]) -> int:
        return self.get_data_length(items) + len(items) * 4 + 14

    def write_request_size(self, items: Collection[DataItem]) -> int:
        return 12 + len(items) * 18

    def write_payload_size(self, items: Collection[DataItem]) -> int:
        return self.get_data_length(items) + len(items) * 16 + 12

    def assert_pdu_size_for_read(self, items: Collection[DataItem]) -> None:
        """Check that a read of ``items`` fits in the PDU size.

        Raises:
            S7RequestTooLargeError: too many items for one request.
            S7ResponseTooLargeError: the answer would exceed the PDU size.
        """
        request_size = self.read_request_size(items)
        if request_size > self.max_pdu_size:
            logger.warning(f"Read of {len(items)} items rejected, request size {request_size} > {self.max_pdu_size}")
            raise S7RequestTooLargeError(
                f"Too many vars requested for read. Request size ({request_size}) is larger than protocol limit "
                f"({self.max_pdu_size}).",
                request_size,
                self.max_pdu_size,
            )

        response_size = self.read_response_size(items)
        if response_size > self.max_pdu_size:
            logger.warning(f"Read of {len(items)} items rejected, response size {response_size} > {self.max_pdu_size}")
            raise S7ResponseTooLargeError(
                f"Too much data requested for read. Response size ({response_size}) is larger than protocol limit "
                f"({self.max_pdu_size}).",
                response_size,
                self.max_pdu_size,
            )
        logger.debug(f"Read of {len(items)} items fits, request {request_size}, response {response_size}")

    def assert_pdu_size_for_write(self, items: Collection[DataItem]) -> None:
        """Check that a write of ``items`` fits in the PDU size.

        Raises:
            S7RequestTooLargeError: too many items for one request.
            S7ResponseTooLargeError: the data to write exceeds the PDU size.
        """
        request_size = self.write_request_size(items)
        if request_size > self.max_pdu_size:
            logger.warning(f"Write of {len(items)} items rejected, request size {request_size} > {self.max_pdu_size}")
            raise S7RequestTooLargeError(
                f"Too many vars supplied for write. Request size ({request_size}) is larger than protocol limit "
                f"({self.max_pdu_size}).",
                request_size,
                self.max_pdu_size,
            )

        payload_size = self.write_payload_size(items)
        if payload_size > self.max_pdu_size:
            logger.warning(f"Write of {len(items)} items rejected, payload size {payload_size} > {self.max_pdu_size}")
            raise S7ResponseTooLargeError(
                f"Too much data supplied for write. Payload size ({payload_size}) is larger than protocol limit "
                f"({self.max_pdu_size}).",
                payload_size,
                self.max_pdu_size,
            )
        logger.debug(f"Write of {len(items)} items fits, request {request_size}, payload {payload_size}")

    # Response validation

    @staticmethod
    def validate_response_code(status: int) -> None:
        """Raise the error matching a response status byte, if it is not a success.

        Raises:
            S7StatusError: the PLC rejected the item.
            S7InvalidStatusError: the status byte is not a known status.
        """
        outcome = classify_status(status)
        if outcome.kind is StatusKind.SUCCESS:
            return
        if outcome.kind is StatusKind.DEVICE_ERROR and outcome.status is not None:
            raise status_error(outcome.status)
        raise S7InvalidStatusError(outcome.raw)

    @staticmethod
    def assert_read_response(data: Optional[FrameData], data_length: int) -> None:
        """Check a read response for its status and length.

        The status is checked before the total length, so a PLC error is
        reported even when the response is truncated.

        Args:
            data: response PDU
            data_length: number of data bytes requested

        Raises:
            S7ResponseLengthError: no data or too few bytes.
            S7StatusError: the PLC rejected the read.
            S7InvalidStatusError: unknown status byte.
        """
        expected_length = data_length + READ_RESPONSE_OVERHEAD

        if data is None:
            raise S7ResponseLengthError("No s7Data received.")

        received: FrameData = data

        def not_enough_bytes() -> S7ResponseLengthError:
            return S7ResponseLengthError(
                f"Received {len(received)} bytes: '{_hex_dump(received)}', expected {expected_length} bytes."
            )

        if len(data) <= STATUS_OFFSET:
            raise not_enough_bytes()

        Session.validate_response_code(data[STATUS_OFFSET])

        if len(data) < expected_length:
            raise not_enough_bytes()

    @staticmethod
    def assert_write_response(data: Optional[FrameData]) -> None:
        """Check the status of a write response.

        Raises:
            S7ResponseLengthError: no data or too few bytes.
            S7StatusError: the PLC rejected the write.
            S7InvalidStatusError: unknown status byte.
        """
        if data is None:
            raise S7ResponseLengthError("No s7Data received.")
        if len(data) <= STATUS_OFFSET:
            raise S7ResponseLengthError(
                f"Received {len(data)} bytes: '{_hex_dump(data)}', expected {STATUS_OFFSET + 1} bytes."
            )
        Session.validate_response_code(data[STATUS_OFFSET])

    # Dispatch hooks

    def prepare_read(self, items: Collection[DataItem], request: FrameData) -> None:
        """Check a read request and record it, before it is sent."""
        self.assert_pdu_size_for_read(items)
        self.log_frame(FrameDirection.Sent, request, "Read")

    def prepare_write(self, items: Collection[DataItem], request: FrameData) -> None:
        """Check a write request and record it, before it is sent."""
        self.assert_pdu_size_for_write(items)
        self.log_frame(FrameDirection.Sent, request, "Write")

    def accept_read_response(self, response: Optional[FrameData], data_length: int) -> None:
        """Record a read response and validate it."""
        self.log_frame(FrameDirection.Received, response, "Read")
        self.assert_read_response(response, data_length)

    def accept_write_response(self, response: Optional[FrameData]) -> None:
        """Record a write response and validate it."""
        self.log_frame(FrameDirection.Received, response, "Write")
        self.assert_write_response(response)
