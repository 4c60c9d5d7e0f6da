"""
Custom exceptions for the order routing engine.
"""

from typing import Any, Dict


class BusinessException(Exception):
    """Base exception for business logic errors."""

    def __init__(self, message: str, code: str = "BUSINESS_ERROR", details: Dict[str, Any] | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(BusinessException):
    """Raised when a referenced order, branch or assignment does not exist."""

    def __init__(self, collection: str, document_id: str):
        message = f"{collection} record '{document_id}' not found"
        super().__init__(message, "NOT_FOUND", {
            "collection": collection,
            "id": document_id,
        })


class ValidationException(BusinessException):
    """Raised when a request is malformed; details carry the corrective value."""

    def __init__(self, message: str, field_errors: Dict[str, Any] | None = None):
        super().__init__(message, "VALIDATION_ERROR", field_errors or {})


class InvalidTransitionException(BusinessException):
    """Raised when attempting a routing transition the state machine does not allow."""

    def __init__(self, current_status: str, attempted_status: str, entity_type: str = "Order"):
        message = f"Invalid transition for {entity_type}: cannot move from {current_status} to {attempted_status}"
        super().__init__(message, "INVALID_TRANSITION", {
            "current_status": current_status,
            "attempted_status": attempted_status,
            "entity_type": entity_type,
        })


class StaleStateException(BusinessException):
    """Raised when a compare-and-swap write finds a newer version than the one read."""

    def __init__(self, collection: str, document_id: str, expected_version: int):
        message = (
            f"{collection} record '{document_id}' changed since version {expected_version}; "
            "re-read and retry"
        )
        super().__init__(message, "STALE_STATE", {
            "collection": collection,
            "id": document_id,
            "expected_version": expected_version,
        })


class StoreUnavailableException(BusinessException):
    """Raised when the document store fails transiently. Not retried here."""

    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        super().__init__(message, "STORE_UNAVAILABLE", details)


class OverrideNotPermittedException(BusinessException):
    """Raised when a caller without override capability requests a classification override."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User {user_id} may not override delivery classifications",
            "OVERRIDE_NOT_PERMITTED",
            {"user_id": user_id},
        )
