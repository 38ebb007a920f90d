"""Commerce backend port.

The mapping core never talks HTTP itself. It consumes anything implementing
``CommerceBackend``: a single query/mutation execution call returning the
decoded JSON response body.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from ..exceptions import UCPBackendError, UCPValidationError

logger = logging.getLogger(__name__)


class CommerceBackend(Protocol):
    """Protocol for the backend query/mutation executor."""

    async def execute(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL document against the backend.

        Returns:
            The decoded response body, ``{"data": {...}}``

        Raises:
            UCPBackendError: If the round-trip fails
        """
        ...


def response_data(response: Dict[str, Any]) -> Dict[str, Any]:
    """Return the ``data`` object of a response (empty when absent)."""
    data = response.get("data") if isinstance(response, dict) else None
    return data or {}


def mutation_payload(response: Dict[str, Any], operation: str) -> Dict[str, Any]:
    """
    Extract a mutation payload and fail on user errors.

    Raises:
        UCPBackendError: If the payload is missing from the response
        UCPValidationError: If the backend reported user errors
    """
    payload = response_data(response).get(operation)
    if payload is None:
        raise UCPBackendError(f"Backend response is missing {operation} payload")
    raise_for_user_errors(payload, operation)
    return payload


def raise_for_user_errors(payload: Dict[str, Any], operation: str) -> None:
    """Raise UCPValidationError for the first entry of a non-empty ``userErrors``."""
    user_errors = payload.get("userErrors") or []
    if not user_errors:
        return

    first = user_errors[0] or {}
    message = first.get("message") or f"{operation} rejected by backend"
    field_path = first.get("field")
    if isinstance(field_path, list):
        field_path = ".".join(str(part) for part in field_path)

    logger.warning(
        f"Backend rejected {operation}: {message} "
        f"(field={field_path}, errors={len(user_errors)})"
    )
    raise UCPValidationError(
        message,
        field=field_path or None,
        details={"operation": operation, "user_errors": user_errors},
    )


__all__ = [
    "CommerceBackend",
    "response_data",
    "mutation_payload",
    "raise_for_user_errors",
]
