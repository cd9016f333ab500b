"""Test configuration and fixtures for the lineup rotation test suite."""

import os
import sys
import pathlib

# Force test-safe defaults before any other imports
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.setdefault('LOG_FORMAT', 'text')

# Ensure tests can import from src/
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest

from lineup_rotation.config import get_settings
from lineup_rotation.models import SquadSnapshot


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so monkeypatched env vars are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def field_ids():
    """Seven starting field players."""
    return ["F1", "F2", "F3", "F4", "F5", "F6", "F7"]


@pytest.fixture
def bench_ids():
    """Five starting bench players."""
    return ["B1", "B2", "B3", "B4", "B5"]


@pytest.fixture
def standard_snapshot(field_ids, bench_ids):
    """7 on field, 5 on the bench, 60 minute match, two subs per round."""
    return SquadSnapshot.from_ids(field_ids, bench_ids, total_match_minutes=60, max_simultaneous_subs=2)


@pytest.fixture
def outfield_positions():
    """Field roles for the seven starters with no goalkeeper among them."""
    return {
        "F1": "defender",
        "F2": "defender",
        "F3": "defender",
        "F4": "midfielder",
        "F5": "midfielder",
        "F6": "forward",
        "F7": "forward",
    }
