"""
Error taxonomy for the add-bookmark pipeline.

Each error knows the HTTP status it maps to and the pipeline stage it came
from, so the Cloud Function can turn it into the standard error contract:

    {"stage": "...", "message": "...", "recoverable": bool}

Scrape failures are NOT represented here. The scraper returns them as the
error half of a (value, error) tuple and the orchestrator substitutes a
fallback, so they never reach the caller.
"""


class BookmarkIngestError(Exception):
    """Base class for every rejection the pipeline can report."""

    status_code = 500
    stage = 'processing'
    recoverable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            'stage': self.stage,
            'message': self.message,
            'recoverable': self.recoverable,
        }


class ValidationError(BookmarkIngestError):
    """Malformed or missing input."""
    status_code = 400
    stage = 'validation'


class UnauthorizedError(BookmarkIngestError):
    """Access token missing or rejected by the auth endpoint."""
    status_code = 401
    stage = 'authentication'


class ForbiddenError(BookmarkIngestError):
    """No write access, or not owner/collaborator of the collection."""
    status_code = 403
    stage = 'authorization'


class ConflictError(BookmarkIngestError):
    """URL already present (not trashed) in the target collection."""
    status_code = 409
    stage = 'duplicate_check'


class StoreLookupError(BookmarkIngestError):
    """A read against the record store failed."""
    status_code = 500
    stage = 'lookup'
    recoverable = True


class StoreError(BookmarkIngestError):
    """The insert failed or the store returned no rows for it."""
    status_code = 500
    stage = 'persist'
    recoverable = True
