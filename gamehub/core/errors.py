from __future__ import annotations

from typing import Any


class GameServiceError(Exception):
    """Base for errors the API turns into an error envelope."""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(GameServiceError):
    status_code = 400
    error = "validation_error"


class NotFoundError(GameServiceError):
    status_code = 404
    error = "not_found"


class ForbiddenError(GameServiceError):
    status_code = 403
    error = "forbidden"


class StorageError(GameServiceError):
    status_code = 502
    error = "storage_error"


class InternalError(GameServiceError):
    """Deployment/configuration defect, e.g. a missing template row."""

    status_code = 500
    error = "internal_error"
