import unittest

import pytest

from s7session.error import (
    S7AccessingObjectNotAllowedError,
    S7AddressOutOfRangeError,
    S7DataTypeInconsistentError,
    S7DataTypeNotSupportedError,
    S7HardwareFaultError,
    S7ObjectDoesNotExistError,
    S7StatusError,
    error_text,
    status_error,
)
from s7session.session import Session
from s7session.status import ReadWriteStatus, StatusKind, classify_status


@pytest.mark.status
class TestClassifyStatus(unittest.TestCase):
    def test_success(self) -> None:
        outcome = classify_status(0x00)
        self.assertIs(outcome.kind, StatusKind.SUCCESS)
        self.assertIs(outcome.status, ReadWriteStatus.Success)
        self.assertTrue(outcome.ok)

    def test_device_errors(self) -> None:
        for status in ReadWriteStatus:
            if status is ReadWriteStatus.Success:
                continue
            outcome = classify_status(int(status))
            self.assertIs(outcome.kind, StatusKind.DEVICE_ERROR)
            self.assertIs(outcome.status, status)
            self.assertFalse(outcome.ok)

    def test_unknown(self) -> None:
        for raw in (0x02, 0x04, 0xFF):
            outcome = classify_status(raw)
            self.assertIs(outcome.kind, StatusKind.UNKNOWN)
            self.assertIsNone(outcome.status)
            self.assertEqual(outcome.raw, raw)


@pytest.mark.status
class TestStatusErrors(unittest.TestCase):
    expected = {
        ReadWriteStatus.HardwareFault: (S7HardwareFaultError, "Hardware fault"),
        ReadWriteStatus.AccessingObjectNotAllowed: (S7AccessingObjectNotAllowedError, "Accessing object not allowed"),
        ReadWriteStatus.ObjectDoesNotExist: (S7ObjectDoesNotExistError, "Object does not exist"),
        ReadWriteStatus.DataTypeNotSupported: (S7DataTypeNotSupportedError, "Data type not supported"),
        ReadWriteStatus.DataTypeInconsistent: (S7DataTypeInconsistentError, "Data type inconsistent"),
        ReadWriteStatus.AddressOutOfRange: (S7AddressOutOfRangeError, "Address out of range"),
    }

    def test_each_status_has_its_own_error(self) -> None:
        for status, (error_class, text) in self.expected.items():
            with self.assertRaises(error_class) as cm:
                Session.validate_response_code(int(status))
            self.assertIsInstance(cm.exception, S7StatusError)
            self.assertIs(cm.exception.status, status)
            self.assertEqual(cm.exception.error_code, int(status))
            self.assertEqual(str(cm.exception), f"Received error from PLC: {text}.")

    def test_success_does_not_raise(self) -> None:
        self.assertIsNone(Session.validate_response_code(0x00))

    def test_status_error_rejects_success(self) -> None:
        with self.assertRaises(ValueError):
            status_error(ReadWriteStatus.Success)

    def test_error_text(self) -> None:
        self.assertEqual(error_text(1), "ConnectionError")
        self.assertEqual(error_text(10), "WrongNumberReceivedBytes")
        self.assertEqual(error_text(0x42), "Unknown error: 0x42")


if __name__ == "__main__":
    unittest.main()
