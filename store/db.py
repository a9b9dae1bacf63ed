import os
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from .errors import StorageError


def _default_sqlite_url() -> str:
	project_root = Path(__file__).resolve().parents[1]
	data_dir = project_root / "data"
	data_dir.mkdir(parents=True, exist_ok=True)
	db_path = data_dir / "app.db"
	return f"sqlite:///{db_path}"


DATABASE_URL = os.getenv("DATABASE_URL") or _default_sqlite_url()
# upper bound on the wait for the terms table guard
LOCK_TIMEOUT_MS = int(os.getenv("TERM_LOCK_TIMEOUT_MS", "10000"))

Base = declarative_base()


def make_engine(url: str, lock_timeout_ms: int = LOCK_TIMEOUT_MS) -> Engine:
	connect_args = {}
	if url.startswith("sqlite"):
		# check_same_thread is needed for SQLite with threads; timeout is the busy wait in seconds
		connect_args = {"check_same_thread": False, "timeout": lock_timeout_ms / 1000.0}
	return create_engine(url, echo=False, future=True, connect_args=connect_args)


def make_sessionmaker(engine: Engine) -> sessionmaker:
	return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


_engine = make_engine(DATABASE_URL)
SessionLocal = make_sessionmaker(_engine)


def get_engine() -> Engine:
	return _engine


def get_session() -> Session:
	return SessionLocal()


def init_db(engine: Engine = None) -> None:
	"""Create missing tables on SQLite. PostgreSQL is migrated with alembic."""
	engine = engine or _engine
	if engine.dialect.name == "sqlite":
		from . import models  # noqa: F401  registers the tables on Base
		Base.metadata.create_all(bind=engine)


def dialect_insert(session: Session):
	"""Return the dialect's insert() construct, the one offering on_conflict_do_update."""
	name = session.get_bind().dialect.name
	if name == "postgresql":
		from sqlalchemy.dialects.postgresql import insert
	elif name == "sqlite":
		from sqlalchemy.dialects.sqlite import insert
	else:
		raise StorageError(f"unsupported database dialect: {name}")
	return insert
