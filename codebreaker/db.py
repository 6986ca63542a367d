"""
Single place to:
- Read DATABASE_URL from settings
- Create a SQLAlchemy Engine (SQLite file by default; any SQLAlchemy URL works)
- Create a Session factory (SessionLocal) for the credential store

Why: the local credential store is the only thing we persist; centralizing
the connection keeps it consistent and testable.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import get_settings

DATABASE_URL = get_settings().database_url

# SQLite connections are handed between the request thread and the
# dispatcher's worker thread.
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    future=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class Base(DeclarativeBase):
    pass

