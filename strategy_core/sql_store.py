"""
SQL-backed Strategy Store

One row per strategy holding its canonical JSON. PostgreSQL in production
(URL from config / Secrets Manager), SQLite locally and in tests.
Rows that no longer deserialize are rejected, never partially loaded.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from .config import get_database_url
from .exceptions import MalformedInput, StrategyNotFound
from .models import StrategyDefinition
from .serialization import deserialize, serialize
from .store import Draft, StrategyStore
from .validation import validate_strategy

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class StrategyRecord(Base):
    """Saved strategy row"""

    __tablename__ = 'strategies'
    # Never reuse ids of deleted rows (SQLite)
    __table_args__ = {'sqlite_autoincrement': True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    direction: Mapped[str] = mapped_column(String(10), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<StrategyRecord(id={self.id}, name='{self.name}')>"


class SqlStrategyStore(StrategyStore):
    """Strategy store on any SQLAlchemy database"""

    def __init__(self, url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            engine = create_engine(url or get_database_url())
        self.engine = engine
        Base.metadata.create_all(self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.debug(f"Strategy store ready on {self.engine.url.render_as_string(hide_password=True)}")

    def _load(self, record: StrategyRecord) -> StrategyDefinition:
        try:
            strategy = deserialize(record.payload)
        except MalformedInput as e:
            logger.error(f"Rejecting stored strategy {record.id}: {str(e)}")
            raise
        return strategy.model_copy(update={'id': record.id})

    def create(self, draft: Draft) -> StrategyDefinition:
        strategy = validate_strategy(draft)
        with self._session_factory() as session:
            record = StrategyRecord(name=strategy.name, direction=strategy.direction.value, payload='')
            session.add(record)
            session.flush()
            stored = strategy.model_copy(update={'id': record.id}, deep=True)
            record.payload = serialize(stored)
            session.commit()
        logger.info(f"Created strategy {stored.id} '{stored.name}'")
        return stored

    def get(self, strategy_id: int) -> StrategyDefinition:
        with self._session_factory() as session:
            record = session.get(StrategyRecord, strategy_id)
            if record is None:
                raise StrategyNotFound(strategy_id)
            return self._load(record)

    def list(self) -> List[StrategyDefinition]:
        strategies = []
        with self._session_factory() as session:
            for record in session.scalars(select(StrategyRecord).order_by(StrategyRecord.id)):
                try:
                    strategies.append(self._load(record))
                except MalformedInput:
                    continue
        return strategies

    def replace(self, strategy: StrategyDefinition) -> StrategyDefinition:
        strategy = validate_strategy(strategy)
        with self._session_factory() as session:
            record = session.get(StrategyRecord, strategy.id)
            if record is None:
                raise StrategyNotFound(strategy.id)
            record.name = strategy.name
            record.direction = strategy.direction.value
            record.payload = serialize(strategy)
            session.commit()
        logger.info(f"Saved strategy {strategy.id} '{strategy.name}'")
        return strategy.model_copy(deep=True)

    def delete(self, strategy_id: int) -> None:
        with self._session_factory() as session:
            record = session.get(StrategyRecord, strategy_id)
            if record is None:
                raise StrategyNotFound(strategy_id)
            session.delete(record)
            session.commit()
        logger.info(f"Deleted strategy {strategy_id}")
