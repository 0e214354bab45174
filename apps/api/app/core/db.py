"""
DB utilities for the character store.

Defaults:
- DATABASE_URL: sqlite:// (in-memory, shared across threads through a static pool)
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", "sqlite://")


def is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.endswith(":memory:")


def new_engine(url: Optional[str] = None) -> Engine:
    url = url or get_database_url()
    kwargs: Dict[str, Any] = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # one connection, otherwise every checkout would see a fresh empty database
        if is_memory_url(url):
            kwargs["poolclass"] = StaticPool

    eng = create_engine(url, **kwargs)
    # table models must be imported before create_all
    from app.modules.characters import models  # noqa: F401

    SQLModel.metadata.create_all(eng)
    return eng


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    global _engine
    if _engine is not None:
        return _engine
    _engine = new_engine()
    return _engine


def db_health(eng: Engine) -> Dict[str, Any]:
    url = str(eng.url)
    kind = "sqlite" if url.startswith("sqlite") else eng.dialect.name
    try:
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "kind": kind, "in_memory": is_memory_url(url)}
    except Exception as e:
        return {"status": "error", "kind": kind, "error": str(e)}
