# docnum/api/routes.py

from flask import current_app, jsonify, request
from pydantic import ValidationError

from docnum import errors
from docnum.extensions import cache, db, limiter
from docnum.schemas.document_schema import GenerateDocumentRequest, ResetCounterRequest
from docnum.services import documents

from . import api_bp


def _parse_body(schema):
    """Validates the JSON body against a pydantic schema; errors become 400s."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise errors.ValidationError("Invalid or missing data")
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        current_app.logger.warning(
            f"Invalid data from {request.remote_addr}: {e.errors(include_url=False)}"
        )
        raise errors.ValidationError(
            "Invalid input data", details=e.errors(include_url=False)
        )


def _parse_limit():
    raw = request.args.get("limit")
    if raw is None or raw == "":
        return documents.CONFIGURED_LIMIT
    if raw.lower() == "all":
        return None
    try:
        return int(raw)
    except ValueError:
        raise errors.ValidationError("limit must be a positive integer or 'all'")


@cache.memoize(timeout=30)
def _cached_stats():
    return documents.get_stats(db.session)


def _invalidate_stats():
    cache.delete_memoized(_cached_stats)


# =============================================================================
# NUMBERING
# =============================================================================
@api_bp.route("/next-number/<document_type>/<department>", methods=["GET"])
def next_number(document_type, department):
    """Preview of the next number for the scope; nothing is reserved."""
    preview = documents.preview_next_number(db.session, document_type, department)
    return jsonify(preview), 200


@api_bp.route("/generate-document", methods=["POST"])
@api_bp.route("/documents", methods=["POST"])
@limiter.limit(lambda: current_app.config.get("GENERATE_RATE_LIMIT", "120 per minute"))
def generate_document():
    payload = _parse_body(GenerateDocumentRequest)
    created = documents.create_document(
        db.session,
        payload.document_type,
        payload.department,
        payload.subject,
        recipient=payload.recipient,
        content=payload.content,
    )
    _invalidate_stats()
    return (
        jsonify(
            {
                "success": True,
                "documentNumber": created["documentNumber"],
                "id": created["id"],
                "message": "Document generated successfully",
            }
        ),
        201,
    )


# =============================================================================
# HISTORY & STATS
# =============================================================================
@api_bp.route("/documents", methods=["GET"])
def list_documents():
    """Document history, newest first. `?limit=N` or `?limit=all`."""
    rows = documents.list_documents(db.session, limit=_parse_limit())
    return jsonify([document.to_dict() for document in rows]), 200


@api_bp.route("/stats", methods=["GET"])
def stats():
    return jsonify(_cached_stats()), 200


@api_bp.route("/counters", methods=["GET"])
def list_counters():
    return jsonify(documents.counters_snapshot(db.session)), 200


# =============================================================================
# ADMINISTRATION
# =============================================================================
@api_bp.route("/delete-document/<int:document_id>", methods=["DELETE"])
@api_bp.route("/documents/<int:document_id>", methods=["DELETE"])
def delete_document(document_id):
    deleted = documents.delete_document(db.session, document_id)
    _invalidate_stats()
    return (
        jsonify(
            {
                "success": True,
                "message": f"Document {deleted['documentNumber']} deleted",
            }
        ),
        200,
    )


@api_bp.route("/delete-all-documents", methods=["DELETE"])
@api_bp.route("/documents", methods=["DELETE"])
def delete_all_documents():
    total_deleted = documents.delete_all(db.session)
    _invalidate_stats()
    return (
        jsonify(
            {
                "success": True,
                "message": f"{total_deleted} documents deleted and counters reset",
                "totalDeleted": total_deleted,
            }
        ),
        200,
    )


@api_bp.route("/reset-counter", methods=["POST"])
def reset_counter():
    payload = _parse_body(ResetCounterRequest)
    documents.reset_counter(
        db.session, payload.department, payload.document_type, payload.year
    )
    return (
        jsonify(
            {
                "success": True,
                "message": (
                    f"Counter {payload.document_type} for "
                    f"{payload.department} {payload.year} reset"
                ),
            }
        ),
        200,
    )


@api_bp.route("/reset-counters", methods=["POST"])
@api_bp.route("/reset-all-counters", methods=["POST"])
def reset_all_counters():
    total = documents.reset_all_counters(db.session)
    return (
        jsonify(
            {
                "success": True,
                "message": "All counters reset to 0",
                "totalReset": total,
            }
        ),
        200,
    )
