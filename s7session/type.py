"""
Python equivalent for the S7 session parameter identifiers.
"""

from enum import IntEnum


class Parameter(IntEnum):
    # // PARAMS LIST
    RemotePort = 2
    SendTimeout = 4
    RecvTimeout = 5
    PDURequest = 10
