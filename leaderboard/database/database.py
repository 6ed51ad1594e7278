from typing import Optional, List, Any, Dict
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy import select, or_
from contextlib import asynccontextmanager

from leaderboard.config import Config
from leaderboard.database.models import Base, Player, Match, apply_player_defaults
from leaderboard.utils.exceptions import DatabaseError, PlayerNotFoundError
from leaderboard.utils.logger import setup_logger

PLAYER_COLUMNS = frozenset(column.key for column in Player.__table__.columns) - {'id'}
MATCH_COLUMNS = frozenset(column.key for column in Match.__table__.columns)


class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = Config.get_async_database_url(database_url)
        self.engine = None
        self.async_session = None

    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")

        engine_options = {'echo': Config.DEBUG}
        if ':memory:' in self.database_url:
            # One shared connection, otherwise every session sees an empty database
            engine_options['poolclass'] = StaticPool
            engine_options['connect_args'] = {'check_same_thread': False}

        self.engine = create_async_engine(self.database_url, **engine_options)

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        # Create all tables
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        self.logger.info("Database initialized successfully")

    @asynccontextmanager
    async def get_session(self):
        """Get a database session"""
        async with self.async_session() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")

    # Player operations
    async def create_player(self, fields: Dict[str, Any]) -> Player:
        """Create a new player, filling registration defaults"""
        values = apply_player_defaults(fields)
        unknown = set(values) - PLAYER_COLUMNS - {'id'}
        if unknown:
            raise ValueError(f"Unknown player fields: {', '.join(sorted(unknown))}")

        try:
            async with self.get_session() as session:
                player = Player(**values)
                session.add(player)
                await session.commit()
                await session.refresh(player)
                return player
        except SQLAlchemyError as e:
            raise DatabaseError("create_player", str(e)) from e

    async def get_player(self, player_id: str) -> Optional[Player]:
        """Get a player by id"""
        try:
            async with self.get_session() as session:
                return await session.get(Player, player_id)
        except SQLAlchemyError as e:
            raise DatabaseError("get_player", str(e)) from e

    async def get_player_by_user_id(self, user_id: str) -> Optional[Player]:
        """Get the player linked to an account id"""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Player).where(Player.user_id == user_id)
                )
                return result.scalars().first()
        except SQLAlchemyError as e:
            raise DatabaseError("get_player_by_user_id", str(e)) from e

    async def list_players(self) -> List[Player]:
        """Get all players, highest rating first"""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Player).order_by(Player.elo.desc(), Player.id)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError("list_players", str(e)) from e

    async def update_player(self, player_id: str, updates: Dict[str, Any]) -> None:
        """
        Apply a partial update to one player record.

        Raises:
            PlayerNotFoundError: If no player has this id
            ValueError: If an update names a field players do not have
            DatabaseError: If the write fails
        """
        unknown = set(updates) - PLAYER_COLUMNS
        if unknown:
            raise ValueError(f"Unknown player fields: {', '.join(sorted(unknown))}")

        try:
            async with self.get_session() as session:
                player = await session.get(Player, player_id)
                if not player:
                    raise PlayerNotFoundError(player_id)
                for field, value in updates.items():
                    setattr(player, field, value)
                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("update_player", str(e)) from e

    # Match operations
    async def create_match(self, fields: Dict[str, Any]) -> str:
        """Store a match record and return its id"""
        unknown = set(fields) - MATCH_COLUMNS
        if unknown:
            raise ValueError(f"Unknown match fields: {', '.join(sorted(unknown))}")

        try:
            async with self.get_session() as session:
                match = Match(**fields)
                session.add(match)
                await session.commit()
                return match.id
        except SQLAlchemyError as e:
            raise DatabaseError("create_match", str(e)) from e

    async def list_matches(self) -> List[Match]:
        """Get every match, newest first"""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Match).order_by(Match.date.desc(), Match.created_at.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError("list_matches", str(e)) from e

    async def get_player_matches(self, player_id: str, limit: int = Config.RECENT_MATCHES_LIMIT) -> List[Match]:
        """Get a player's most recent matches, newest first"""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(Match)
                    .where(or_(Match.player1_id == player_id, Match.player2_id == player_id))
                    .order_by(Match.date.desc(), Match.created_at.desc())
                    .limit(limit)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError("get_player_matches", str(e)) from e
