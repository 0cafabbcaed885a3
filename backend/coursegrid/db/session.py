from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursegrid.core.config import get_settings


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """Let pysqlite honour SAVEPOINT by handing transaction control to SQLAlchemy.

    The driver otherwise defers BEGIN until the first DML statement, which makes
    ``Session.begin_nested()`` release the outer transaction early.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")

    return engine


def build_engine(database_url: str) -> Engine:
    options: dict = {"pool_pre_ping": True}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each thread sees its own empty database.
            options["poolclass"] = StaticPool
    engine = create_engine(database_url, **options)
    return enable_sqlite_savepoints(engine)


engine = build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
