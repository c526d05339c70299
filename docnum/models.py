# docnum/models.py
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Index, UniqueConstraint

from docnum.extensions import db


class ScopeCounter(db.Model):
    """Sequence counter for one (department, document_type, year) scope."""

    __tablename__ = "sintel_counters"

    id = db.Column(db.Integer, primary_key=True)
    department = db.Column(db.String(10), nullable=False)
    document_type = db.Column(db.String(20), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    counter = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    documents = db.relationship("Document", backref="scope", lazy="dynamic")

    __table_args__ = (
        UniqueConstraint("department", "document_type", "year", name="uq_counter_scope"),
        CheckConstraint("counter >= 0", name="ck_counter_non_negative"),
    )

    def to_dict(self):
        return {
            "department": self.department,
            "document_type": self.document_type,
            "counter": self.counter,
            "year": self.year,
        }

    def __repr__(self):
        return f"<ScopeCounter {self.department}/{self.document_type}/{self.year}: {self.counter}>"


class Document(db.Model):
    """Generated document with its issued number."""

    __tablename__ = "sintel_documents"

    id = db.Column(db.Integer, primary_key=True)
    document_number = db.Column(db.String(100), unique=True, nullable=False)
    document_type = db.Column(db.String(20), nullable=False)
    department = db.Column(db.String(10), nullable=False)
    subject = db.Column(db.Text, nullable=False)
    recipient = db.Column(db.String(255), default="")
    content = db.Column(db.Text, default="")
    created_date = db.Column(
        db.DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    status = db.Column(db.String(20), default="Activo", nullable=False)

    scope_id = db.Column(
        db.Integer, db.ForeignKey("sintel_counters.id"), nullable=False, index=True
    )
    sequence = db.Column(db.Integer, nullable=False)

    __table_args__ = (Index("idx_document_created", "created_date"),)

    def to_dict(self):
        created = self.created_date
        if created is not None and created.tzinfo is None:
            # SQLite hands timestamps back without an offset; they are stored in UTC
            created = created.replace(tzinfo=UTC)
        return {
            "id": self.id,
            "document_number": self.document_number,
            "document_type": self.document_type,
            "department": self.department,
            "subject": self.subject,
            "recipient": self.recipient,
            "created_date": created.isoformat() if created else None,
            "status": self.status,
        }

    def __repr__(self):
        return f"<Document {self.id}: {self.document_number}>"
