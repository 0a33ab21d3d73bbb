"""Database engine and session management for the local persistent store."""

from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from frontdesk.core.config import settings


def create_local_engine(url: Optional[str] = None) -> Engine:
    """Create the engine backing the local store.

    SQLite needs check_same_thread disabled because FastAPI may touch the
    store from the threadpool; in-memory databases also need a StaticPool so
    every session sees the same connection.
    """
    url = url or settings.local_store_url
    connect_args = {}
    pool_config = {}

    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            pool_config = {"poolclass": StaticPool}
        else:
            db_path = url.split("///", 1)[-1]
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    else:
        pool_config = {"pool_pre_ping": True, "pool_recycle": 3600}

    return create_engine(url, connect_args=connect_args, **pool_config)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
