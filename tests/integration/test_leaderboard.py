"""Integration tests for the leaderboard read model."""

import pytest

from leaderboard.operations.match_operations import MatchOperations
from leaderboard.services.leaderboard import LeaderboardService


@pytest.fixture
async def ladder(db):
    """Seven players with distinct ratings, p1 highest"""
    ratings = [2100, 1900, 1750, 1600, 1450, 1300, 1100]
    for index, elo in enumerate(ratings, start=1):
        await db.create_player({'id': f"p{index}", 'name': f"Player {index}", 'elo': elo})
    return ratings


@pytest.mark.asyncio
async def test_standings_are_in_rating_order(db, ladder):
    standings = await LeaderboardService(db).get_standings()

    assert [p.id for p in standings] == ['p1', 'p2', 'p3', 'p4', 'p5', 'p6', 'p7']


@pytest.mark.asyncio
async def test_standings_pagination(db, ladder):
    service = LeaderboardService(db)

    page = await service.get_standings(limit=3, offset=2)

    assert [p.id for p in page] == ['p3', 'p4', 'p5']
    assert await service.get_standings(limit=5, offset=10) == []


@pytest.mark.asyncio
async def test_page_splits_top_featured_and_rest(db, ladder):
    page = await LeaderboardService(db).get_leaderboard_page()

    assert page.top_player.id == 'p1'
    assert [p.id for p in page.featured_players] == ['p2', 'p3', 'p4', 'p5']
    assert [p.id for p in page.players] == ['p6', 'p7']


@pytest.mark.asyncio
async def test_empty_leaderboard(db):
    service = LeaderboardService(db)

    page = await service.get_leaderboard_page()
    stats = await service.get_leaderboard_stats()

    assert page.top_player is None
    assert page.featured_players == [] and page.players == []
    assert stats.total_players == 0
    assert stats.average_elo == 0
    assert stats.top_player_elo == 0
    assert stats.most_played_deck is None


@pytest.mark.asyncio
async def test_leaderboard_stats(db, ladder):
    stats = await LeaderboardService(db).get_leaderboard_stats()

    assert stats.total_players == 7
    assert stats.average_elo == 1600  # 11200 / 7
    assert stats.top_player_elo == 2100
    assert stats.total_matches == 0


@pytest.mark.asyncio
async def test_most_played_deck_ignores_unknown(db, players):
    ops = MatchOperations(db)
    await ops.record_match('alice', 'carol', 'alice', 2, 0)
    await ops.record_match('bob', 'carol', 'carol', 2, 1)
    await ops.record_match('alice', 'carol', 'carol', 2, 1)

    stats = await LeaderboardService(db).get_leaderboard_stats()

    assert stats.total_matches == 3
    assert stats.most_played_deck == 'Blue-Eyes White Dragon'
