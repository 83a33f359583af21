"""Error taxonomy for marker operations.

Each error carries an ``ErrorKind`` tag and the HTTP status it maps to, so
the API layer can translate any of them with a single handler.
"""

from enum import Enum
from typing import List


class ErrorKind(str, Enum):
    """Kinds of failure a marker operation can report."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class MarkerServiceError(Exception):
    """Base class for expected marker operation failures."""
    kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        """JSON body returned to API clients."""
        return {"error": self.message}


class MarkerValidationError(MarkerServiceError):
    """One or more field rules were violated; nothing was changed."""
    kind = ErrorKind.VALIDATION
    status_code = 400

    def __init__(self, violations: List[str]):
        super().__init__("Validation failed")
        self.violations = list(violations)

    def to_body(self) -> dict:
        return {"error": self.message, "details": self.violations}


class MarkerNotFoundError(MarkerServiceError):
    """The referenced marker id is not in the collection."""
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, marker_id: str):
        super().__init__("Marker not found")
        self.marker_id = marker_id


class MarkerStorageError(MarkerServiceError):
    """The backing file could not be written."""
    kind = ErrorKind.STORAGE
    status_code = 500
