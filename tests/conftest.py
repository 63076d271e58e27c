from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from dbfunc.core.cache import DatabaseCache

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def database_cache() -> DatabaseCache:
    """A private handle cache so tests never share the process-wide one."""
    return DatabaseCache()


@pytest.fixture
def dbfunc_logs(caplog: pytest.LogCaptureFixture) -> Generator[pytest.LogCaptureFixture, None, None]:
    """Capture everything logged under the ``dbfunc`` namespace at DEBUG."""
    with caplog.at_level(logging.DEBUG, logger="dbfunc"):
        yield caplog
