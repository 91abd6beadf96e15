"""Database setup for the activity store.

The store is normally a local SQLite file. Any SQLAlchemy URL is
accepted; the SQLite pragmas are only applied to SQLite connections.
"""

from __future__ import annotations

from sqlalchemy import Engine, create_engine, event, select
from sqlalchemy.orm import Session, sessionmaker

from pipegc.storage.schema import Base, MetaRow

SCHEMA_VERSION = "1"


def create_gc_engine(
    db_path: str = ":memory:",
    *,
    url: str | None = None,
) -> Engine:
    """Return an engine for the activity store at *db_path* (or *url*)."""
    if url is None:
        url = "sqlite://" if db_path == ":memory:" else f"sqlite:///{db_path}"
    engine = create_engine(url, echo=False)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn, connection_record):  # type: ignore[no-untyped-def]
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            # jobs.parent_name cascades rely on this.
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    # Rows are read back after commit.
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create missing tables and stamp a new database with SCHEMA_VERSION."""
    Base.metadata.create_all(engine)

    with create_session_factory(engine)() as session:
        stamped = session.execute(
            select(MetaRow).where(MetaRow.key == "schema_version")
        ).scalar_one_or_none()
        if stamped is None:
            session.add(MetaRow(key="schema_version", value=SCHEMA_VERSION))
            session.commit()
