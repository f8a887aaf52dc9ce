from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Tuesday; no explicit calendar record unless a test adds one.
    return datetime(2026, 1, 13, 8, 50, 0)
