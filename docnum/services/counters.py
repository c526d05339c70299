# docnum/services/counters.py
"""
Scope counter store.

Every function takes the active SQLAlchemy session and leaves the commit to
the caller, so several counter operations can share one transaction with the
document writes that depend on them.
"""

from sqlalchemy import insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError

from docnum.errors import NotFound
from docnum.models import ScopeCounter
from docnum.utils.db import dialect_name

SCOPE_COLUMNS = ["department", "document_type", "year"]

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _scope_filter(department, document_type, year):
    return (
        ScopeCounter.department == department,
        ScopeCounter.document_type == document_type,
        ScopeCounter.year == year,
    )


def ensure_scope(session, department, document_type, year):
    """
    Creates the counter row at 0 if it does not exist yet.

    Uses 'INSERT ... ON CONFLICT DO NOTHING' so two requests racing on a new
    scope cannot overwrite each other. Backends without that clause get a
    SAVEPOINT-guarded plain insert.
    """
    values = {
        "department": department,
        "document_type": document_type,
        "year": year,
        "counter": 0,
    }

    dialect_insert = _UPSERT_INSERTS.get(dialect_name(session))
    if dialect_insert is not None:
        stmt = (
            dialect_insert(ScopeCounter)
            .values(**values)
            .on_conflict_do_nothing(index_elements=SCOPE_COLUMNS)
        )
        session.execute(stmt)
        return

    try:
        with session.begin_nested():
            session.execute(insert(ScopeCounter).values(**values))
    except IntegrityError:
        # Another transaction created the scope first
        pass


def get_scope(session, department, document_type, year):
    return session.execute(
        select(ScopeCounter).where(*_scope_filter(department, document_type, year))
    ).scalar_one_or_none()


def peek(session, department, document_type, year) -> int:
    """Current counter value, 0 for a scope that was never allocated. Read-only."""
    value = session.execute(
        select(ScopeCounter.counter).where(
            *_scope_filter(department, document_type, year)
        )
    ).scalar_one_or_none()
    return value or 0


def allocate_next(session, department, document_type, year):
    """
    Atomically increments the scope counter and returns (scope_id, new_value).

    The increment happens in the database ('counter = counter + 1'), which
    takes a row lock held until the surrounding transaction ends, so two
    concurrent callers on the same scope always get consecutive values.
    """
    scope = _scope_filter(department, document_type, year)
    stmt = (
        update(ScopeCounter)
        .where(*scope)
        .values(counter=ScopeCounter.counter + 1)
        .execution_options(synchronize_session=False)
    )

    if session.get_bind().dialect.update_returning:
        row = session.execute(
            stmt.returning(ScopeCounter.id, ScopeCounter.counter)
        ).first()
    else:
        # The row lock from the UPDATE makes the read-back safe
        result = session.execute(stmt)
        row = None
        if result.rowcount:
            row = session.execute(
                select(ScopeCounter.id, ScopeCounter.counter).where(*scope)
            ).first()

    if row is None:
        raise NotFound(
            f"Counter not found for {department}/{document_type}/{year}"
        )
    return row.id, row.counter


def decrement(session, department, document_type, year, expected=None) -> bool:
    """
    Decreases the counter by one, never below 0.

    With `expected`, only decrements while the counter still equals that
    value. Returns True when a row changed.
    """
    stmt = update(ScopeCounter).where(
        *_scope_filter(department, document_type, year),
        ScopeCounter.counter > 0,
    )
    if expected is not None:
        stmt = stmt.where(ScopeCounter.counter == expected)
    stmt = stmt.values(counter=ScopeCounter.counter - 1).execution_options(
        synchronize_session=False
    )
    return session.execute(stmt).rowcount > 0


def reset_one(session, department, document_type, year):
    result = session.execute(
        update(ScopeCounter)
        .where(*_scope_filter(department, document_type, year))
        .values(counter=0)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFound("Counter not found")


def reset_all(session) -> int:
    result = session.execute(
        update(ScopeCounter)
        .values(counter=0)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def list_counters(session):
    return (
        session.execute(
            select(ScopeCounter).order_by(
                ScopeCounter.year.desc(),
                ScopeCounter.department,
                ScopeCounter.document_type,
            )
        )
        .scalars()
        .all()
    )
