# backend/campusconnect/db.py
import json

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from . import config


def dump_json(value) -> str:
    # keep non-ASCII text readable in JSON columns so LIKE filters can match it
    return json.dumps(value, ensure_ascii=False)


def build_engine(url: str, echo: bool = False):
    kwargs = {"echo": echo, "json_serializer": dump_json}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)


def init_db(bind=None):
    # create tables (dev convenience)
    from . import models  # noqa: F401  registers tables on the metadata
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session
