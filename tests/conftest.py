"""Shared pytest fixtures."""

import pytest

from sonos_cli.main import setup_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    # Keep structlog off stdout so command output can be asserted on
    setup_logging("WARNING")
