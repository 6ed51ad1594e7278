#!/usr/bin/env python3
"""
Leaderboard maintenance tasks for admins.

Runs the bulk operations against the configured database (DATABASE_URL).
Do not run two of these at the same time, and avoid running them while
matches are being recorded: the operations do not lock the player table.

Usage:
    python admin_tasks.py sync          # rebuild player stats from the match log
    python admin_tasks.py rankings      # reassign ranks from current ratings
    python admin_tasks.py check         # list players whose stats drifted
    python admin_tasks.py stats         # print leaderboard headline numbers
    python admin_tasks.py reset --yes   # reset every player to default
    python admin_tasks.py new-season --yes
"""

import argparse
import asyncio
import sys

from leaderboard.config import Config
from leaderboard.database.database import Database
from leaderboard.operations.admin_operations import AdminOperations
from leaderboard.services.leaderboard import LeaderboardService
from leaderboard.services.player_stats_sync import PlayerStatsSyncService
from leaderboard.utils.exceptions import LeaderboardException
from leaderboard.utils.logger import setup_logger

logger = setup_logger(__name__)

DESTRUCTIVE_COMMANDS = ('reset', 'new-season')


async def run_task(db: Database, command: str) -> int:
    """Run one admin command against an initialized database"""
    sync_service = PlayerStatsSyncService(db)

    if command == 'sync':
        updated = await sync_service.sync_player_stats()
        print(f"✅ Player stats synced: {updated} players updated")

    elif command == 'rankings':
        moved = await sync_service.recalculate_rankings()
        print(f"✅ Rankings recalculated: {moved} players moved")

    elif command == 'check':
        report = await sync_service.find_out_of_sync_players()
        if not report:
            print("✅ All players in sync")
        for player_id, differences in report.items():
            print(f"❌ {player_id}")
            for field_name, values in differences.items():
                print(f"    {field_name}: stored={values['stored']} expected={values['expected']}")
        return 1 if report else 0

    elif command == 'stats':
        stats = await LeaderboardService(db).get_leaderboard_stats()
        print(f"Players:          {stats.total_players}")
        print(f"Matches:          {stats.total_matches}")
        print(f"Average Elo:      {stats.average_elo}")
        print(f"Top Elo:          {stats.top_player_elo}")
        print(f"Most played deck: {stats.most_played_deck or '-'}")

    elif command == 'reset':
        result = await AdminOperations(db).reset_all_players_to_default()
        print(f"✅ Reset {result['players_reset']} players to {Config.STARTING_ELO}")

    elif command == 'new-season':
        result = await AdminOperations(db).start_new_season()
        print(f"✅ New season started: {result['players_reset']} players reset")

    else:
        raise ValueError(f"Unknown command: {command}")

    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description='Leaderboard maintenance tasks')
    parser.add_argument('command', choices=['sync', 'rankings', 'check', 'stats', 'reset', 'new-season'],
                        help='Task to run')
    parser.add_argument('--yes', action='store_true',
                        help='Confirm a destructive task (reset, new-season)')
    parser.add_argument('--database-url', default=None,
                        help='Override DATABASE_URL')
    args = parser.parse_args()

    if args.command in DESTRUCTIVE_COMMANDS and not args.yes:
        print(f"⚠️  '{args.command}' resets every player. Re-run with --yes to confirm.")
        return 2

    Config.validate()
    db = Database(args.database_url)
    try:
        await db.initialize()
        return await run_task(db, args.command)
    except LeaderboardException as e:
        logger.error(f"Task '{args.command}' failed: {e}")
        print(f"\n❌ {e.user_message}")
        return 1
    finally:
        await db.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
