from __future__ import annotations

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI configures structlog globally, keep tests independent of that."""
    yield
    structlog.reset_defaults()
