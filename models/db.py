from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()


def use_immediate_transactions(engine):
    """
    SQLite only: start every transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so two admission transactions
    could both read and then deadlock on the upgrade to a write lock. Taking
    the write lock up front makes them queue on the busy timeout instead.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
