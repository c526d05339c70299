# docnum/utils/db.py
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from docnum.errors import NumberingError, StorageError


@contextmanager
def atomic(session, action="transaction"):
    """
    Runs the block as one transaction: commit on success, rollback on any error.

    Domain errors propagate unchanged after the rollback; SQLAlchemy errors are
    re-raised as StorageError carrying only the exception class name.
    """
    try:
        yield session
        session.commit()
    except NumberingError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.error(f"Storage failure during {action}: {e}", exc_info=True)
        raise StorageError(f"Error during {action}", details=type(e).__name__) from e
    except Exception:
        session.rollback()
        raise


def dialect_name(session):
    return session.get_bind().dialect.name


def enable_sqlite_immediate_transactions(engine):
    """
    Makes every transaction on a pysqlite engine start with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first DML statement, so two writers can
    both hold SHARED locks and deadlock on upgrade. Taking the write lock at
    BEGIN lets the busy timeout queue them instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
