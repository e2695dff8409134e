"""
Error types and helpers for user-facing diagnostics.
"""

from collections.abc import Mapping
from typing import Any, Optional


class RazmetkaError(Exception):
    """Base class for all errors raised by Razmetka."""

    pass


class ConfigurationError(RazmetkaError):
    """Raised when the registry, rule table or classifier settings are invalid."""

    pass


class UnknownPredicate(ConfigurationError):
    """Raised when a condition references a name missing from the registry."""

    def __init__(self, name: str, kind: str = "predicate"):
        self.name = name
        self.kind = kind
        super().__init__(f"Unknown {kind} '{name}'")


class MalformedCondition(ConfigurationError):
    """Raised when a condition tree does not have a valid shape."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)


class AdapterFailure(RazmetkaError):
    """Raised when the external classifier adapter errors or returns garbage."""

    def __init__(self, adapter: Any, message: str):
        self.adapter = repr(adapter)
        super().__init__(f"{message} [adapter={self.adapter}]")


def build_error(
    error: str,
    *,
    details: Optional[str] = None,
    hint: Optional[str] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error}
    if details:
        payload["details"] = details
    if hint:
        payload["hint"] = hint
    return payload


def error_lines(payload: Mapping[str, Any]) -> list[str]:
    lines = []
    error = payload.get("error") or "Unknown error."
    lines.append(f"Error: {error}")
    details = payload.get("details")
    if details:
        lines.append(f"Details: {details}")
    hint = payload.get("hint")
    if hint:
        lines.append(f"Hint: {hint}")
    return lines
