"""Exception hierarchy for the UCP bridge.

Every error raised by the mapping core inherits from UCPError so transport
layers can translate it into a protocol-specific envelope:

    try:
        checkout = await checkouts.complete_checkout(checkout_id)
    except UCPError as e:
        return JSONResponse(
            {"status": "canceled", "messages": [e.to_message()]},
            status_code=e.http_status,
        )

All exceptions have:
- code: Machine-readable error code (e.g., "not_found")
- http_status: Suggested HTTP status for REST bindings
- message: Human-readable error message
- details: Optional additional context dictionary
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class UCPError(Exception):
    """Base exception for all UCP bridge errors."""

    code: str = "internal_error"
    http_status: int = 500
    severity: str = "recoverable"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response format."""
        result: Dict[str, Any] = {
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def to_message(self) -> Dict[str, Any]:
        """Render the error as a UCP ``messages[]`` entry."""
        message: Dict[str, Any] = {
            "type": "error",
            "code": self.code,
            "content": self.message,
            "severity": self.severity,
        }
        field = self.details.get("field")
        if field:
            message["field"] = field
        return message


class UCPValidationError(UCPError):
    """The backend (or the bridge itself) rejected the request input."""

    code = "invalid_request"
    http_status = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, code=code, details=details)
        self.field = field


class UCPNotFoundError(UCPError):
    """Requested resource does not resolve to a backend record."""

    code = "not_found"
    http_status = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} {resource_id} not found"
        details = details or {}
        details["resource_type"] = resource_type
        details["resource_id"] = resource_id
        super().__init__(message, details=details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class UCPPreconditionFailedError(UCPError):
    """Checkout completion attempted while required buyer data is missing."""

    code = "checkout_not_ready"
    http_status = 409
    severity = "requires_buyer_input"

    def __init__(self, checkout_id: str, missing: List[str]) -> None:
        super().__init__(
            f"Cannot complete checkout: {' and '.join(missing)} is missing. "
            "Please use update_checkout to provide these details first.",
            details={"checkout_id": checkout_id, "missing": list(missing)},
        )
        self.checkout_id = checkout_id
        self.missing = list(missing)


class UCPBackendError(UCPError):
    """Calling the commerce backend failed (network, HTTP or GraphQL level)."""

    code = "backend_error"
    http_status = 502

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.status_code = status_code


__all__ = [
    "UCPError",
    "UCPValidationError",
    "UCPNotFoundError",
    "UCPPreconditionFailedError",
    "UCPBackendError",
]
