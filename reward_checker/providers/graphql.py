"""GraphQL-over-POST helpers shared by the GraphQL providers."""
from __future__ import annotations

from typing import Any, Dict, Optional

from .errors import ApplicationError


def graphql_payload(
    query: str, variables: Dict[str, Any], operation_name: Optional[str] = None
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"query": query, "variables": variables}
    if operation_name:
        payload["operationName"] = operation_name
    return payload


def raise_for_graphql_errors(data: Any) -> Any:
    """Raise ApplicationError with the first reported message if `errors` is non-empty."""
    if isinstance(data, dict):
        errors = data.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise ApplicationError(f"GraphQL Error: {message or 'unknown error'}")
    return data
