"""
Frame capture for S7 sessions.

Every frame handed to a session can be recorded in a bounded history. Once
the history is full the oldest frames are dropped first.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Deque, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000

FrameData = Union[bytes, bytearray, memoryview]

_HEX_DIGITS = "0123456789ABCDEF"


class FrameDirection(Enum):
    Sent = "sent"
    Received = "received"


@dataclass(frozen=True)
class Frame:
    """A single frame exchanged with the PLC.

    Attributes:
        direction: whether the frame was sent to or received from the PLC
        hex_data: frame contents as uppercase hex without separators
        operation: free form label like ``"Read"`` or ``"Write"``
        timestamp: local time the frame was captured
    """

    direction: FrameDirection
    hex_data: str
    operation: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if len(self.hex_data) % 2 or self.hex_data.strip(_HEX_DIGITS):
            raise ValueError(f"Frame data must be uppercase hex with two digits per byte, got {self.hex_data!r}")

    @classmethod
    def from_bytes(cls, direction: FrameDirection, data: FrameData, operation: str = "") -> "Frame":
        return cls(direction, bytes(data).hex().upper(), operation)

    @property
    def byte_count(self) -> int:
        return len(self.hex_data) // 2

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.hex_data)


class FrameHistory:
    """
    Thread safe, size bounded history of frames, oldest first.

    Examples:
        >>> history = FrameHistory(enabled=True)
        >>> frame = history.record(FrameDirection.Sent, b"\\x03\\x00", "Read")
        >>> history.last_hex()
        '0300'
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE, enabled: bool = False):
        _check_size(max_size)
        self._frames: Deque[Frame] = deque()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            self._enabled = bool(value)
        logger.debug(f"Frame logging {'enabled' if self._enabled else 'disabled'}")

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    @property
    def max_size(self) -> int:
        return self._max_size

    @max_size.setter
    def max_size(self, value: int) -> None:
        self.set_max_size(value)

    def set_max_size(self, max_size: int) -> None:
        """Change the capacity, dropping the oldest frames that no longer fit.

        Args:
            max_size: new capacity, a positive integer
        """
        _check_size(max_size)
        with self._lock:
            self._max_size = max_size
            dropped = self._trim()
        if dropped:
            logger.debug(f"Frame history resized to {max_size}, dropped {dropped} frames")

    def record(self, direction: FrameDirection, data: Optional[FrameData], operation: str = "") -> Optional[Frame]:
        """Add a frame to the history.

        Nothing is recorded when logging is disabled or ``data`` is empty.

        Returns:
            The recorded frame, or None.
        """
        if not self._enabled or not data:
            return None

        frame = Frame.from_bytes(direction, data, operation)
        with self._lock:
            if not self._enabled:
                return None
            self._frames.append(frame)
            self._trim()
        return frame

    def last(self, direction: Optional[FrameDirection] = None) -> Optional[Frame]:
        """Most recent frame, optionally restricted to one direction."""
        with self._lock:
            if direction is None:
                return self._frames[-1] if self._frames else None
            for frame in reversed(self._frames):
                if frame.direction == direction:
                    return frame
        return None

    def last_hex(self, direction: Optional[FrameDirection] = None) -> str:
        """Hex code of the most recent frame, or an empty string."""
        frame = self.last(direction)
        return frame.hex_data if frame is not None else ""

    def snapshot(self) -> List[Frame]:
        """Copy of all recorded frames, oldest first."""
        with self._lock:
            return list(self._frames)

    def clear(self) -> None:
        with self._lock:
            self._frames.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.snapshot())

    def _trim(self) -> int:
        # caller holds self._lock
        dropped = 0
        while len(self._frames) > self._max_size:
            self._frames.popleft()
            dropped += 1
        return dropped


def _check_size(max_size: int) -> None:
    if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
        raise ValueError(f"Frame history size must be a positive integer, got {max_size!r}")
