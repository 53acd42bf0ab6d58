"""
Database schema and connection management.

Uses SQLAlchemy for joke storage. Any SQLAlchemy-supported database works;
SQLite is the default.
"""

from pathlib import Path
from typing import Union

from sqlalchemy import Column, Integer, String, Text, create_engine, delete, exists, func, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .errors import UnsupportedDatabaseError

Base = declarative_base()


class Joke(Base):
    """Stored joke model."""

    __tablename__ = "jokes"
    # AUTOINCREMENT keeps SQLite ids monotonic and gives us a sequence to reset
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    joke_id = Column(String(40), nullable=False)  # external API id, not unique
    url = Column(String(1024), nullable=False)
    joke = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Joke(id={self.id!r}, joke_id={self.joke_id!r})"


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given database URL.

    For SQLite file databases the parent directory is created if missing.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy engine
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url)


def init_database(target: Union[str, Engine]) -> Engine:
    """
    Initialize database and create tables.

    Args:
        target: Database URL or an existing engine

    Returns:
        The engine the tables were created on
    """
    engine = create_db_engine(target) if isinstance(target, str) else target
    Base.metadata.create_all(engine)
    return engine


def get_session(engine: Engine) -> Session:
    """
    Get database session.

    Args:
        engine: Engine returned by init_database

    Returns:
        SQLAlchemy session
    """
    Session = sessionmaker(bind=engine)
    return Session()


def joke_exists(session: Session, joke_id: str) -> bool:
    """Check whether a joke with this external id is already stored."""
    return bool(session.scalar(select(exists().where(Joke.joke_id == joke_id))))


def count_jokes(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(Joke)) or 0


def delete_all_jokes(session: Session) -> int:
    """Bulk delete every stored joke. Returns the number of deleted rows."""
    result = session.execute(delete(Joke))
    return result.rowcount or 0


def reset_identity(session: Session) -> None:
    """
    Reset the jokes id sequence so the next inserted row gets id 1.

    Only meaningful on an empty table. On SQL Server the identity is
    reseeded only if it was used before; a fresh identity already starts
    at its seed of 1.

    Raises:
        UnsupportedDatabaseError: If the dialect has no known reset statement
    """
    dialect = session.get_bind().dialect.name
    table = Joke.__tablename__

    if dialect == "sqlite":
        # sqlite_sequence only exists once an AUTOINCREMENT table got a row
        has_sequence = session.scalar(
            text("SELECT count(*) FROM sqlite_master WHERE type = 'table' AND name = 'sqlite_sequence'")
        )
        if has_sequence:
            session.execute(text("DELETE FROM sqlite_sequence WHERE name = :name"), {"name": table})
    elif dialect == "postgresql":
        session.execute(
            text("SELECT setval(pg_get_serial_sequence(:table, 'id'), 1, false)"),
            {"table": table},
        )
    elif dialect == "mssql":
        # RESEED 0 on a never-used identity makes the next id 0, so only
        # reseed once the identity has handed out a value
        last_value = session.scalar(
            text("SELECT last_value FROM sys.identity_columns WHERE object_id = OBJECT_ID(:table)"),
            {"table": table},
        )
        if last_value is not None:
            session.execute(text(f"DBCC CHECKIDENT('{table}', RESEED, 0)"))
    elif dialect in ("mysql", "mariadb"):
        session.execute(text(f"ALTER TABLE {table} AUTO_INCREMENT = 1"))
    else:
        raise UnsupportedDatabaseError(f"Cannot reset identity sequence on '{dialect}' databases")
