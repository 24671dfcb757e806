"""Error taxonomy and upstream failure translation.

Every failure that reaches a caller is a ``ProxyError`` serialized as
``{"error": message, "details": details}`` with ``status_code``.
"""

from __future__ import annotations

from typing import Any

import httpx


class ProxyError(Exception):
    """Base class for errors returned to API callers."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: str | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class ValidationError(ProxyError):
    """Missing or malformed caller input."""

    status_code = 400


class ConfigurationError(ProxyError):
    """A required credential or endpoint is not configured."""

    status_code = 500


class InternalError(ProxyError):
    """Unexpected failure inside the proxy."""

    status_code = 500


class UpstreamError(ProxyError):
    """Non-2xx, unreachable or malformed upstream response."""

    def __init__(
        self,
        provider: str,
        message: str,
        details: str | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details, status_code=status_code or 500)
        self.provider = provider


class UpstreamTimeoutError(UpstreamError):
    """Upstream did not answer within the adapter timeout."""

    def __init__(self, provider: str, message: str, details: str | None = None) -> None:
        super().__init__(provider, message, details, status_code=504)


def describe_upstream_response(response: httpx.Response) -> str:
    """One-line diagnostic for a failed upstream response.

    Known JSON error shapes are reduced to their message; anything else
    collapses to the status line so raw bodies never reach the caller.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return str(errors[0])
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if isinstance(body.get("message"), str):
            return body["message"]

    reason = response.reason_phrase or "Error"
    return f"{response.status_code} {reason}"


def translate_http_error(exc: Exception, provider: str, message: str) -> ProxyError:
    """Map an httpx failure to the proxy error taxonomy."""
    if isinstance(exc, ProxyError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamTimeoutError(provider, message, f"{provider} request timed out")
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return UpstreamError(
            provider,
            message,
            describe_upstream_response(exc.response),
            status_code=status if status >= 400 else 500,
        )
    if isinstance(exc, httpx.RequestError):
        return UpstreamError(provider, message, str(exc) or type(exc).__name__)
    if isinstance(exc, ValueError):
        # Body was not the JSON shape the adapter expects
        return UpstreamError(provider, message, f"Malformed {provider} response: {exc}")
    return InternalError(message, str(exc))
