"""
Service-level error types.

Business faults derive from ``ServiceError`` which itself is a
``ValueError``, so endpoint handlers can keep mapping them with
``except ValueError`` and only the specific subclasses they care about
need distinct status codes.  Each error carries a short
machine-readable ``code`` alongside its message.
"""

from typing import Optional


class ServiceError(ValueError):
    """Base class for expected, caller-recoverable service faults."""

    code = "service_error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidAmount(ServiceError):
    """Delta is not a non-zero whole number of credits."""

    code = "invalid_amount"


class NotFound(ServiceError):
    code = "not_found"

    def __init__(self, kind: str, object_id: str) -> None:
        super().__init__(f"{kind} {object_id} not found")
        self.kind = kind
        self.object_id = object_id


class Conflict(ServiceError):
    """The (event, user) pair is already admitted.

    Internal signal between the registry and the registration service;
    never surfaced to API callers as-is.
    """

    code = "conflict"


class CapacityExceeded(ServiceError):
    code = "capacity_exceeded"


class InvalidTag(ServiceError):
    code = "invalid_tag"


class ValidationFailed(ServiceError):
    code = "validation_failed"


class StorageUnavailable(RuntimeError):
    """The backing store cannot serve the request right now.

    Not a business outcome: it propagates past the endpoint handlers
    and is turned into a 503 by the application exception handler.
    """

    code = "storage_unavailable"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class LockTimeout(StorageUnavailable):
    code = "lock_timeout"
