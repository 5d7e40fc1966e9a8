# planner/storage/db.py
from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session

from core.settings import DB_PATH

# Ensure SQLModel metadata is populated
import models.project  # noqa: F401
import models.task  # noqa: F401


def make_engine(url: str, **kwargs):
    engine = create_engine(url, echo=False, **kwargs)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_foreign_keys)
    return engine


def _enable_foreign_keys(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


_engine = make_engine(f"sqlite:///{DB_PATH.as_posix()}", connect_args={"check_same_thread": False})


def init_db(engine=None):
    target = engine or _engine
    if target is _engine:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(target)


def get_session() -> Session:
    return Session(_engine)
