"""
Session Store
Persists question/answer/score/feedback records with SQLModel on an async
SQLAlchemy engine (aiosqlite by default).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, func
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import Field, SQLModel, select

from interview_coach.utils.metrics import record_session_persisted

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InterviewSessionRecord(SQLModel, table=True):
    """One evaluated answer. Immutable once written."""

    __tablename__ = "interview_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    question: str
    answer: str
    score: int
    feedback: str
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


class SessionStore:
    """Write-once store for practice sessions."""

    def __init__(self, database_url: str, engine: Optional[AsyncEngine] = None):
        self.database_url = database_url
        self.engine: AsyncEngine = engine or create_async_engine(database_url, echo=False, future=True)
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)

    async def init(self) -> None:
        """Create tables if they do not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Session store ready")

    async def close(self) -> None:
        await self.engine.dispose()

    async def create(
        self,
        question: str,
        answer: str,
        score: int,
        feedback: str
    ) -> Optional[InterviewSessionRecord]:
        """
        Persist one record with a server-assigned timestamp.

        Any write failure, database or driver, is logged and swallowed so the
        caller's evaluation result stays available.

        Returns:
            The stored record, or None if the write failed
        """
        record = InterviewSessionRecord(
            question=question,
            answer=answer,
            score=score,
            feedback=feedback,
        )
        try:
            async with self._sessionmaker() as session:
                session.add(record)
                await session.commit()
                await session.refresh(record)
        except Exception as e:
            logger.error(f"Failed to save session to database: {e}", exc_info=True)
            record_session_persisted(False)
            return None

        record_session_persisted(True)
        logger.info(f"Interview session {record.id} saved to database")
        return record

    async def list_all(self) -> List[InterviewSessionRecord]:
        """All records, newest first. Errors propagate to the caller."""
        statement = select(InterviewSessionRecord).order_by(
            InterviewSessionRecord.created_at.desc(),
            InterviewSessionRecord.id.desc(),
        )
        async with self._sessionmaker() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def count(self) -> int:
        async with self._sessionmaker() as session:
            result = await session.execute(select(func.count()).select_from(InterviewSessionRecord))
            return int(result.scalar_one())
