"""Database connection and schema."""

from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
    text,
)

metadata = MetaData()

urls = Table(
    "urls",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("short_code", String(20), unique=True, nullable=False),
    Column("original_url", Text, nullable=False),
    Column("created_at", DateTime, server_default=func.now()),
    Column("click_count", Integer, server_default=text("0")),
)

Index("idx_short_code", urls.c.short_code)
Index("idx_original_url", urls.c.original_url)


def _normalise(connection_string: str) -> str:
    if connection_string.startswith("postgres://"):
        return "postgresql://" + connection_string[len("postgres://"):]
    return connection_string


def connect(connection_string: str) -> Engine:
    """Create a pooled engine and check that the database answers."""
    url = _normalise(connection_string)
    options = {}
    if not url.startswith("sqlite"):
        options = {"pool_size": 5, "max_overflow": 20, "pool_recycle": 300}
    engine = create_engine(url, **options)
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        raise
    return engine


def migrate(engine: Engine) -> None:
    """Create the ``urls`` table and its indexes if they do not exist."""
    metadata.create_all(engine, checkfirst=True)