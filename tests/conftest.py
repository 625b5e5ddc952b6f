"""Shared pytest fixtures and configuration."""

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from ticketctl.service import TicketService
from ticketctl.store import TicketStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


@pytest.fixture(autouse=True)
def reset_ticketctl_logger():
    """Undo handler and propagation changes made by setup_logging."""
    yield
    logger = logging.getLogger("ticketctl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 15, 10, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def ticket_root(tmp_path: Path) -> Path:
    """Ticket root directory inside the test's temp dir."""
    return tmp_path / "tickets"


@pytest.fixture
def store(ticket_root: Path) -> TicketStore:
    """TicketStore rooted in a temp directory."""
    return TicketStore(ticket_root)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(store: TicketStore, clock: FakeClock) -> TicketService:
    """TicketService with a fixed reporter and deterministic clock."""
    return TicketService(store, reporter="tester", clock=clock)
