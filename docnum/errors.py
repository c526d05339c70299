# docnum/errors.py


class NumberingError(Exception):
    """Base class for errors raised by the numbering core."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details

    def to_dict(self):
        payload = {"success": False, "status": "error", "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(NumberingError):
    """Missing or malformed input."""

    status_code = 400
    public_message = "Invalid input data"


class NotFound(NumberingError):
    """Unknown document id or counter scope."""

    status_code = 404
    public_message = "Resource not found"


class StorageError(NumberingError):
    """The store failed; the transaction was rolled back."""

    status_code = 500
    public_message = "Storage error"
