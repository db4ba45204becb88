"""
Domain exceptions raised by the store and note operations.

Each carries the HTTP status the API answers with; main.py turns them into
responses shaped like FastAPI's HTTPException ({"detail": ...}).
"""
from typing import Optional


class NotesAdminError(Exception):
    """Base exception for the notes admin backend"""
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFound(NotesAdminError):
    """Raised when the record addressed by a request path does not exist."""
    status_code = 404

    def __init__(self, collection: str, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{_label(collection)} {record_id} not found")


class ReferenceNotFound(NotesAdminError):
    """
    Raised when a note refers to a user or category that does not exist.

    Always raised before anything is written.
    """
    status_code = 404

    def __init__(self, collection: str, record_id):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Referenced {_label(collection).lower()} {record_id} not found")


class StoreUnavailable(NotesAdminError):
    """Raised when the database cannot be reached."""
    status_code = 503

    def __init__(self, message: str = "Data store unavailable"):
        super().__init__(message)


def _label(collection: str) -> str:
    return {"users": "User", "categories": "Category", "notes": "Note"}.get(collection, collection)
