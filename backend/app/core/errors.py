# backend/app/core/errors.py

# Error taxonomy shared by services and routes. Services raise these;
# app.main turns them into {"message": ..., "error": ...} JSON responses.

from typing import Optional


class LedgerError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        if message is not None:
            self.message = message
        self.error = error
        super().__init__(self.message)

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.error is not None:
            payload["error"] = self.error
        return payload


# ---- 400s ----

class ValidationError(LedgerError):
    status_code = 400
    message = "Invalid request"


class InvalidTransactionId(ValidationError):
    message = "Invalid transaction ID"


class InvalidPagination(ValidationError):
    message = "Invalid pagination parameters"


class NoFileProvided(ValidationError):
    message = "No file uploaded"


class NoValidRows(ValidationError):
    message = "No valid transactions to save"


# ---- 404 ----

class NotFoundError(LedgerError):
    status_code = 404
    message = "Transaction not found"


# ---- 500s (ingestion aborts) ----

class StreamError(LedgerError):
    message = "Error processing file"


class PersistenceFailed(LedgerError):
    message = "Error saving transactions"
