"""
Studio Errors

Domain exception hierarchy. Every error carries the HTTP status it maps to,
so routers raise and main.py renders a uniform {"error": ...} body.
"""
from typing import Any, Dict, List, Optional


class StudioError(Exception):
    """Base exception for studio errors."""
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class PayloadValidationError(StudioError):
    """Payload failed schema rules. Carries field-level issues."""
    status_code = 400
    default_message = "Invalid payload"

    def __init__(self, issues: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.issues = issues

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "issues": self.issues}


class UnauthorizedError(StudioError):
    """Missing or wrong admin token."""
    status_code = 401
    default_message = "Unauthorized"


class AdminNotConfiguredError(StudioError):
    """No admin secret on the server; mutations fail closed."""
    status_code = 503
    default_message = "Admin is not configured. Set ADMIN_TOKEN on the API server."


class ProjectNotFoundError(StudioError):
    """Referenced project id does not exist."""
    status_code = 404
    default_message = "Not found"


class StorageError(StudioError):
    """Underlying read/write failure of a persisted document."""
    status_code = 500
    default_message = "Storage failure"


class UploadRejectedError(StudioError):
    """Upload has the wrong type or is too large."""
    status_code = 400


class ManifestConflictError(StudioError):
    """Gallery manifest changed since the caller loaded it."""
    status_code = 409
    default_message = "Gallery manifest was modified since it was loaded"
