"""Pytest configuration and shared fixtures."""

import os
import sys
import tempfile

os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'leaderboard-test-logs'))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest

from leaderboard.database.database import Database


@pytest.fixture
async def db(tmp_path):
    """Fresh sqlite database per test."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'leaderboard_test.db'}")
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
async def players(db):
    """Three registered players: alice, bob and carol, all at 1200."""
    created = {}
    for name, deck in (("alice", "Blue-Eyes White Dragon"), ("bob", "Dark Magician"), ("carol", None)):
        created[name] = await db.create_player({'id': name, 'name': name.title(), 'main_deck': deck})
    return created
