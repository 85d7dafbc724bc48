"""DB models and helpers for the CardSense statement service."""

import uuid
from collections.abc import Iterator
from functools import lru_cache
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from cardsense.core.models import SpendingTransactionIn
from cardsense.core.utils import get_logger, utcnow

Base = declarative_base()
logger = get_logger("cardsense.db")


def _new_id() -> str:
    return str(uuid.uuid4())


class SpendingTransaction(Base):
    """A spending transaction owned by a user, from a statement upload or manual entry."""

    __tablename__ = "spending_transactions"
    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False, default="other")
    merchant_name = Column(String(255), nullable=True)
    transaction_date = Column(String, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    card_used = Column(String, nullable=True)
    source = Column(String, nullable=False, default="manual")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class UploadedDocument(Base):
    """A statement document and the analysis produced for it."""

    __tablename__ = "uploaded_documents"
    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    document_type = Column(String, nullable=False, default="bank_statement")
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=True)
    file_size_bytes = Column(Integer, nullable=True)
    mime_type = Column(String, nullable=True)
    parsing_status = Column(String, nullable=False, default="completed")
    parsed_data = Column(JSON, nullable=True)
    error = Column(Text, nullable=True)
    parsed_at = Column(DateTime(timezone=True), nullable=True)


def create_db_engine(url: str) -> Engine:
    """Create a SQLAlchemy engine, allowing SQLite connections to cross threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


@lru_cache
def get_engine() -> Engine:
    """Create a SQLAlchemy engine using the configured database URL."""
    from cardsense.core.settings import get_settings

    return create_db_engine(get_settings().database_url)


@lru_cache
def get_session_factory() -> sessionmaker:
    """Return the session factory bound to the configured engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db(engine: Engine | None = None) -> None:
    """Create the tables this service owns if they do not exist."""
    Base.metadata.create_all(engine or get_engine())


def get_session() -> Iterator[Session]:
    """Yield a session and close it when the request is done."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


class SpendingRepository:
    """Helper class for spending transaction storage using SQLAlchemy."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def insert_many(self, rows: list[dict[str, Any]]) -> list[str]:
        """Insert rows in one transaction and return the new row ids."""
        objs = [SpendingTransaction(id=_new_id(), **row) for row in rows]
        try:
            self.session.add_all(objs)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"Inserted {len(objs)} spending transactions")
        return [obj.id for obj in objs]

    def list_for_user(
        self, user_id: str, date_from: str | None = None, date_to: str | None = None
    ) -> list[SpendingTransaction]:
        """List a user's transactions, newest first, optionally bounded by ISO dates."""
        stmt = select(SpendingTransaction).where(SpendingTransaction.user_id == user_id)
        if date_from:
            stmt = stmt.where(SpendingTransaction.transaction_date >= date_from)
        if date_to:
            stmt = stmt.where(SpendingTransaction.transaction_date <= date_to)
        stmt = stmt.order_by(SpendingTransaction.transaction_date.desc())
        return list(self.session.scalars(stmt))

    def create(self, user_id: str, payload: SpendingTransactionIn) -> SpendingTransaction:
        """Insert a single manually entered transaction."""
        obj = SpendingTransaction(id=_new_id(), user_id=user_id, source="manual", **payload.model_dump())
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, user_id: str, transaction_id: str) -> bool:
        """Delete a user's transaction. Returns False when nothing matched."""
        stmt = delete(SpendingTransaction).where(
            SpendingTransaction.id == transaction_id,
            SpendingTransaction.user_id == user_id,
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0


class DocumentRepository:
    """Helper class for uploaded statement documents."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def record_analysis(
        self,
        user_id: str,
        file_name: str,
        analysis: dict[str, Any],
        *,
        file_path: str | None = None,
        file_size_bytes: int | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Store a completed statement analysis and return the document id."""
        doc = UploadedDocument(
            id=_new_id(),
            user_id=user_id,
            file_name=file_name,
            file_path=file_path,
            file_size_bytes=file_size_bytes,
            mime_type=mime_type,
            parsing_status="completed",
            parsed_data=analysis,
            parsed_at=utcnow(),
        )
        self.session.add(doc)
        self.session.commit()
        return doc.id
