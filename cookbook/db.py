"""
Database schema and engine helpers for the relational recipe backend.

This module defines the SQLAlchemy tables used when the catalog runs with
RECIPE_STORAGE=database (or with DATABASE_URL set):
- recipes: one row per recipe, list fields stored as Postgres text[] arrays
- users: present for schema parity, not read by any code path

Tables are created with init_db(); there is no migration tooling.

SQLite is supported for tests and local runs: the array columns fall back to
JSON there (non-ASCII text written unescaped), and the recipes table uses
AUTOINCREMENT so ids are never reused after a delete.
"""

import json
import logging

from sqlalchemy import JSON, Column, DateTime, Integer, Text, create_engine
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

logger = logging.getLogger(__name__)

Base = declarative_base()

# text[] on Postgres, JSON everywhere else
StringList = ARRAY(Text).with_variant(JSON(), "sqlite")


class RecipeRow(Base):
    """Recipes table - one row per recipe."""
    __tablename__ = "recipes"
    # AUTOINCREMENT on SQLite so ids of deleted rows are never handed out again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    ingredients = Column(StringList, nullable=False)
    instructions = Column(StringList, nullable=False)
    image_url = Column(Text, nullable=True)
    prep_time = Column(Integer, nullable=False)
    cook_time = Column(Integer, nullable=False)
    servings = Column(Integer, nullable=False)
    tags = Column(StringList, nullable=False)
    author_id = Column(Integer, nullable=False, index=True)
    rating = Column(Integer, default=0, server_default="0")
    rating_count = Column(Integer, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class UserRow(Base):
    """Users table - kept for schema parity; authentication is disabled."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, unique=True, nullable=False)
    password = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)


def dump_json(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given SQLAlchemy URL.

    In-memory SQLite URLs get a StaticPool so every session sees the same
    database, which is what the tests rely on.

    Args:
        database_url: SQLAlchemy database URL (e.g. postgresql+psycopg2://...)

    Returns:
        SQLAlchemy Engine
    """
    kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,  # Set to True for SQL query logging
        "json_serializer": dump_json,
    }
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    logger.info(f"Database engine created for dialect '{engine.dialect.name}'")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """
    Initialize database tables (create if they don't exist).

    This function is safe to call multiple times - it only creates tables
    that don't already exist.

    Raises:
        Exception: If database connection fails or table creation fails
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized (or already exist)")
    except Exception as e:
        logger.error(f"Failed to initialize database tables: {e}")
        raise


def is_postgres(engine: Engine) -> bool:
    return engine.dialect.name == "postgresql"
