"""Pytest conftest — path setup plus the shared two-month league engine."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add scripts/ to sys.path so `from scoreboard import ...` works
SCRIPTS_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

# Add tests/ to sys.path so `from helpers import ...` works
TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import league_rows, make_csv  # noqa: E402

from scoreboard.engine import StatsEngine  # noqa: E402


@pytest.fixture
def reference_now():
    """Rolling month for the league fixtures: February 2024."""
    return datetime(2024, 2, 15, tzinfo=timezone.utc)


@pytest.fixture
def league_csv():
    return make_csv(*league_rows())


@pytest.fixture
def engine(league_csv, reference_now):
    e = StatsEngine(now=reference_now)
    e.load(league_csv)
    return e
