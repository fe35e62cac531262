"""
S7 session guard.

PDU size budgeting, response status validation and frame capture for clients
talking to Siemens S7 PLCs.
"""

from importlib.metadata import version, PackageNotFoundError

from .session import Session
from .frames import Frame, FrameDirection, FrameHistory
from .datatypes import DataItem, VarType
from .status import ReadWriteStatus, StatusKind, StatusOutcome, classify_status
from .type import Parameter

__all__ = [
    "Session",
    "Frame",
    "FrameDirection",
    "FrameHistory",
    "DataItem",
    "VarType",
    "ReadWriteStatus",
    "StatusKind",
    "StatusOutcome",
    "classify_status",
    "Parameter",
]

try:
    __version__ = version("python-s7session")
except PackageNotFoundError:
    __version__ = "0.0rc0"
