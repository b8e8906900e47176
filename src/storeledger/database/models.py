"""SQLAlchemy models for storeledger database.

The ledger is stored the way the application exchanges it: one JSON
document per operator holding that operator's whole Groups map.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    Text,
    DateTime,
    Date,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class LedgerDocument(Base):
    """Serialized Groups map of one operator."""

    __tablename__ = "ledger_documents"

    operator_id = Column(String, primary_key=True)
    data = Column(Text, nullable=False)
    last_updated_by = Column(String, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class DailyCheck(Base):
    """Last calendar day the daily-clear prompt was handled for an operator."""

    __tablename__ = "daily_checks"

    operator_id = Column(String, primary_key=True)
    last_check_date = Column(Date, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
