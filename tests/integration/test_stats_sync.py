"""Integration tests for stats reconciliation against a real database."""

import pytest

from leaderboard.services.player_stats_sync import PlayerStatsSyncService
from leaderboard.utils.exceptions import BulkOperationError, DatabaseError

from factories import match_fields


DERIVED_FIELDS = ('wins', 'losses', 'total_matches', 'win_rate', 'streak', 'recent_matches', 'rank')


async def snapshot(db):
    return {
        player.id: {name: getattr(player, name) for name in DERIVED_FIELDS + ('elo', 'peak_elo')}
        for player in await db.list_players()
    }


async def seed_seven_three(db):
    """alice beats bob 7 times out of 10; the last two are alice's losses"""
    outcomes = 'WWLWWWWWLL'
    for day, outcome in enumerate(outcomes):
        winner = 'alice' if outcome == 'W' else 'bob'
        await db.create_match(match_fields('alice', 'bob', winner, day=day))


@pytest.mark.asyncio
async def test_sync_rebuilds_counters_from_match_log(db, players):
    await seed_seven_three(db)
    await db.update_player('alice', {'wins': 99, 'losses': 0, 'total_matches': 3, 'win_rate': 12, 'streak': 5})

    updated = await PlayerStatsSyncService(db).sync_player_stats()

    assert updated == 3
    alice = await db.get_player('alice')
    assert (alice.wins, alice.losses, alice.total_matches) == (7, 3, 10)
    assert alice.win_rate == 70
    assert alice.streak == -2
    bob = await db.get_player('bob')
    assert (bob.wins, bob.losses, bob.total_matches) == (3, 7, 10)
    assert bob.win_rate == 30
    assert bob.streak == 2
    carol = await db.get_player('carol')
    assert carol.total_matches == 0 and carol.streak == 0


@pytest.mark.asyncio
async def test_sync_does_not_touch_ratings(db, players):
    await db.update_player('bob', {'elo': 1500, 'peak_elo': 1650})
    await seed_seven_three(db)

    await PlayerStatsSyncService(db).sync_player_stats()

    bob = await db.get_player('bob')
    assert bob.elo == 1500
    assert bob.peak_elo == 1650
    assert bob.rank == 1


@pytest.mark.asyncio
async def test_sync_is_idempotent(db, players):
    await seed_seven_three(db)
    service = PlayerStatsSyncService(db)

    await service.sync_player_stats()
    first = await snapshot(db)
    await service.sync_player_stats()
    second = await snapshot(db)

    assert first == second
    assert await service.find_out_of_sync_players() == {}


@pytest.mark.asyncio
async def test_matches_with_deleted_players_are_skipped(db, players):
    await db.create_match(match_fields('alice', 'ghost', 'alice', day=1))
    await db.create_match(match_fields('ghost', 'carol', 'ghost', day=2))

    await PlayerStatsSyncService(db).sync_player_stats()

    alice = await db.get_player('alice')
    carol = await db.get_player('carol')
    assert (alice.wins, alice.losses) == (1, 0)
    assert (carol.wins, carol.losses, carol.streak) == (0, 1, -1)


@pytest.mark.asyncio
async def test_drift_report_lists_differences_without_writing(db, players):
    await seed_seven_three(db)
    service = PlayerStatsSyncService(db)
    await service.sync_player_stats()
    await db.update_player('alice', {'wins': 2})

    report = await service.find_out_of_sync_players()

    assert list(report) == ['alice']
    assert report['alice'] == {'wins': {'stored': 2, 'expected': 7}}
    assert (await db.get_player('alice')).wins == 2


@pytest.mark.asyncio
async def test_recalculate_rankings_follows_elo(db, players):
    await db.update_player('carol', {'elo': 1900})
    await db.update_player('bob', {'elo': 1000})

    moved = await PlayerStatsSyncService(db).recalculate_rankings()

    assert moved == 3
    ranks = {p.id: p.rank for p in await db.list_players()}
    assert ranks == {'carol': 1, 'alice': 2, 'bob': 3}
    assert await PlayerStatsSyncService(db).recalculate_rankings() == 0


@pytest.mark.asyncio
async def test_failed_player_update_is_reported_and_others_continue(db, players, monkeypatch):
    await seed_seven_three(db)
    original_update = db.update_player

    async def flaky_update(player_id, updates):
        if player_id == 'alice' and 'wins' in updates:
            raise DatabaseError("update_player", "disk I/O error")
        return await original_update(player_id, updates)

    monkeypatch.setattr(db, 'update_player', flaky_update)

    with pytest.raises(BulkOperationError) as exc_info:
        await PlayerStatsSyncService(db).sync_player_stats()

    assert list(exc_info.value.failures) == ['alice']
    assert exc_info.value.updated == 2
    bob = await db.get_player('bob')
    assert bob.total_matches == 10
    assert bob.rank is not None and bob.rank > 0

    # Retrying once the store recovers repairs everything
    monkeypatch.setattr(db, 'update_player', original_update)
    await PlayerStatsSyncService(db).sync_player_stats()
    assert (await db.get_player('alice')).wins == 7


@pytest.mark.asyncio
async def test_rank_pass_continues_past_a_failed_write(db, players, monkeypatch):
    await db.update_player('carol', {'elo': 1900})
    await db.update_player('bob', {'elo': 1000})
    original_update = db.update_player

    async def flaky_update(player_id, updates):
        if player_id == 'alice':
            raise DatabaseError("update_player", "database is locked")
        return await original_update(player_id, updates)

    monkeypatch.setattr(db, 'update_player', flaky_update)

    with pytest.raises(BulkOperationError) as exc_info:
        await PlayerStatsSyncService(db).recalculate_rankings()

    assert exc_info.value.operation == "Rank recalculation"
    assert list(exc_info.value.failures) == ['alice']
    assert exc_info.value.updated == 2
    ranks = {p.id: p.rank for p in await db.list_players()}
    assert ranks == {'carol': 1, 'alice': 0, 'bob': 3}


@pytest.mark.asyncio
async def test_sync_reports_failed_rank_writes(db, players, monkeypatch):
    await seed_seven_three(db)
    original_update = db.update_player

    async def flaky_update(player_id, updates):
        if player_id == 'carol' and set(updates) == {'rank'}:
            raise DatabaseError("update_player", "database is locked")
        return await original_update(player_id, updates)

    monkeypatch.setattr(db, 'update_player', flaky_update)

    with pytest.raises(BulkOperationError) as exc_info:
        await PlayerStatsSyncService(db).sync_player_stats()

    assert exc_info.value.operation == "Stats sync"
    assert list(exc_info.value.failures) == ['carol']
    assert exc_info.value.updated == 3
    alice = await db.get_player('alice')
    bob = await db.get_player('bob')
    assert (alice.rank, bob.rank) == (1, 2)
