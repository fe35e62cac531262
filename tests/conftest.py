import pytest

from s7session import Session


def pytest_configure(config: pytest.Config) -> None:
    for marker in ("frames", "session", "status", "datatypes"):
        config.addinivalue_line("markers", f"{marker}: tests for the {marker} module")


@pytest.fixture
def session() -> Session:
    return Session("127.0.0.1", enable_frame_logging=True)
