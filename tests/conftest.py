from __future__ import annotations

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep structlog config (bound to a CliRunner stream) from leaking across tests."""
    yield
    structlog.reset_defaults()
