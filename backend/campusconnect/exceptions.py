"""
Typed errors raised by the domain services.

Services raise these; the API layer (see ``main.py``) is the only place that
turns them into HTTP responses, using ``status_code`` and ``to_dict()``.

Usage:
    from .exceptions import NotFoundError, AuthorizationError

    if not event:
        raise NotFoundError("Event")
"""

from typing import Any, Dict, List, Optional


class CampusConnectError(Exception):
    """Base class for every error the API reports to clients"""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(CampusConnectError):
    """Malformed or missing input, with field level messages"""

    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, errors)


class BadRequestError(CampusConnectError):
    """Well-formed request that breaks a business rule"""

    status_code = 400


class AuthenticationError(CampusConnectError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(CampusConnectError):
    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(CampusConnectError):
    status_code = 404

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


class ConflictError(CampusConnectError):
    """Duplicate row or exhausted capacity"""

    status_code = 409


class UnexpectedError(CampusConnectError):
    """Infrastructure failure. The client only ever sees a generic message."""

    status_code = 500

    def __init__(self, message: str = "Something went wrong"):
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": "Something went wrong"}


class StorageError(UnexpectedError):
    pass


class EmailDeliveryError(UnexpectedError):
    pass
