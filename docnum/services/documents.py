# docnum/services/documents.py
"""
Document allocator.

Ties counter allocation and document persistence together. Every mutating
operation runs in a single transaction through `atomic`, so a counter never
advances without its document being stored, and vice versa.
"""

from datetime import UTC, datetime, timedelta

from flask import current_app
from sqlalchemy import delete, distinct, func, select

from docnum.errors import NotFound, ValidationError
from docnum.metrics import (
    ALLOCATION_DURATION_SECONDS,
    COUNTER_RESETS_TOTAL,
    DOCUMENTS_DELETED_TOTAL,
    DOCUMENTS_GENERATED_TOTAL,
)
from docnum.models import Document
from docnum.services import counters
from docnum.utils.db import atomic
from docnum.utils.document import DocumentType, format_document_number

MAX_DEPARTMENT_LENGTH = 10
MAX_TYPE_LENGTH = 20
ACTIVE_DEPARTMENT_WINDOW = timedelta(days=30)

# Sentinel: "use DOCUMENT_LIST_LIMIT from the config"
CONFIGURED_LIMIT = object()


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def _require(**fields):
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    for name, value in fields.items():
        if isinstance(value, str):
            continue
        if name == "year" and isinstance(value, int) and not isinstance(value, bool):
            continue
        raise ValidationError(f"Field '{name}' has an invalid type")


def _check_length(name, value, limit):
    if len(value) > limit:
        raise ValidationError(f"Field '{name}' must be at most {limit} characters")


def _organization():
    return current_app.config.get("DOCUMENT_NUMBER_ORGANIZATION", "SINTEL")


def _metric_label(document_type):
    member = DocumentType.from_key(document_type)
    return member.key if member else "other"


def create_document(
    session,
    document_type,
    department,
    subject,
    recipient=None,
    content=None,
    now=None,
):
    """
    Allocates the next number in the (department, type, year) scope and stores
    the document under it.

    Returns:
        {"documentNumber": str, "id": int, "nextNumber": int}

    Raises:
        ValidationError: type, department or subject missing or malformed.
        StorageError: the transaction failed and was rolled back.
    """
    document_type = _clean(document_type)
    department = _clean(department)
    subject = _clean(subject)
    _require(type=document_type, department=department, subject=subject)
    _check_length("department", department, MAX_DEPARTMENT_LENGTH)
    _check_length("type", document_type, MAX_TYPE_LENGTH)

    now = now or datetime.now(UTC)
    year = now.year

    with ALLOCATION_DURATION_SECONDS.time():
        with atomic(session, "document generation"):
            counters.ensure_scope(session, department, document_type, year)
            scope_id, sequence = counters.allocate_next(
                session, department, document_type, year
            )
            document_number = format_document_number(
                document_type, department, sequence, year, _organization()
            )
            document = Document(
                document_number=document_number,
                document_type=document_type,
                department=department,
                subject=subject,
                recipient=recipient or "",
                content=content or "",
                created_date=now,
                scope_id=scope_id,
                sequence=sequence,
            )
            session.add(document)
            session.flush()
            document_id = document.id

    DOCUMENTS_GENERATED_TOTAL.labels(document_type=_metric_label(document_type)).inc()
    current_app.logger.info(
        f"Document generated: number={document_number}, id={document_id}"
    )
    return {
        "documentNumber": document_number,
        "id": document_id,
        "nextNumber": sequence,
    }


def preview_next_number(session, document_type, department, now=None):
    """Number the next create would get. Never writes, not even the scope row."""
    document_type = _clean(document_type)
    department = _clean(department)
    _require(type=document_type, department=department)
    _check_length("department", department, MAX_DEPARTMENT_LENGTH)
    _check_length("type", document_type, MAX_TYPE_LENGTH)

    year = (now or datetime.now(UTC)).year
    next_number = counters.peek(session, department, document_type, year) + 1
    return {
        "documentNumber": format_document_number(
            document_type, department, next_number, year, _organization()
        ),
        "nextNumber": next_number,
    }


def list_documents(session, limit=CONFIGURED_LIMIT):
    """Most recent documents first; `limit=None` returns all of them."""
    if limit is CONFIGURED_LIMIT:
        limit = current_app.config.get("DOCUMENT_LIST_LIMIT", 50)
    if limit is not None and limit < 1:
        raise ValidationError("limit must be a positive integer")

    query = select(Document).order_by(Document.created_date.desc(), Document.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return session.execute(query).scalars().all()


def delete_document(session, document_id):
    """
    Deletes one document.

    The scope counter is decremented only when the document held the scope's
    newest number (and RECLAIM_NUMBER_ON_DELETE is on). Deleting an older
    document leaves the counter untouched so numbers of live documents are
    never issued twice.
    """
    reclaim = current_app.config.get("RECLAIM_NUMBER_ON_DELETE", True)

    with atomic(session, "document deletion"):
        document = session.get(Document, document_id)
        if document is None:
            raise NotFound("Document not found")

        document_number = document.document_number
        scope = document.scope
        sequence = document.sequence
        session.delete(document)
        session.flush()

        reclaimed = False
        if reclaim:
            reclaimed = counters.decrement(
                session,
                scope.department,
                scope.document_type,
                scope.year,
                expected=sequence,
            )

    DOCUMENTS_DELETED_TOTAL.inc()
    current_app.logger.info(
        f"Document deleted: number={document_number}, counter_reclaimed={reclaimed}"
    )
    return {"documentNumber": document_number, "counterReclaimed": reclaimed}


def delete_all(session) -> int:
    """Deletes every document and resets every counter to 0, atomically."""
    with atomic(session, "bulk deletion"):
        total_deleted = session.execute(
            delete(Document).execution_options(synchronize_session=False)
        ).rowcount
        counters.reset_all(session)

    DOCUMENTS_DELETED_TOTAL.inc(total_deleted)
    COUNTER_RESETS_TOTAL.labels(scope="all").inc()
    current_app.logger.warning(
        f"All documents deleted ({total_deleted}) and counters reset"
    )
    return total_deleted


def reset_counter(session, department, document_type, year):
    department = _clean(department)
    document_type = _clean(document_type)
    year = _clean(year)
    _require(department=department, document_type=document_type, year=year)
    try:
        year = int(year)
    except ValueError:
        raise ValidationError("year must be an integer")

    with atomic(session, "counter reset"):
        counters.reset_one(session, department, document_type, year)

    COUNTER_RESETS_TOTAL.labels(scope="one").inc()
    current_app.logger.info(f"Counter reset: {document_type} {department} {year}")


def reset_all_counters(session) -> int:
    with atomic(session, "counter reset"):
        total = counters.reset_all(session)

    COUNTER_RESETS_TOTAL.labels(scope="all").inc()
    current_app.logger.info(f"All counters reset ({total})")
    return total


def counters_snapshot(session):
    return [counter.to_dict() for counter in counters.list_counters(session)]


def get_stats(session, now=None):
    """Totals for the dashboard: all documents, today's, and departments active in 30 days."""
    now = now or datetime.now(UTC)
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    total = session.execute(select(func.count(Document.id))).scalar_one()
    today = session.execute(
        select(func.count(Document.id)).where(Document.created_date >= today_start)
    ).scalar_one()
    active_departments = session.execute(
        select(func.count(distinct(Document.department))).where(
            Document.created_date >= today_start - ACTIVE_DEPARTMENT_WINDOW
        )
    ).scalar_one()

    return {
        "totalDocuments": total,
        "todayDocuments": today,
        "activeDepartments": active_departments,
    }
