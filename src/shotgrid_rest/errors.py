"""
Error taxonomy for the ShotGrid REST client.

ShotGrid reports failures in a handful of shapes: a plain HTTP status, a
JSON:API style `{"errors": [...]}` payload (sometimes with a 200 status, as
the auth endpoint does for bad credentials), a single error object in place
of the array, or a body that is not JSON at all. `classify_error` folds all of
them into the exceptions below so callers only ever deal with one hierarchy.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ValidationError

from .models import ErrorObject, ErrorResponse


class ShotgridClientError(Exception):
    """Base error for client failures."""


class ShotgridConfigError(ShotgridClientError, ValueError):
    """The client is missing configuration needed for the requested operation."""


class ShotgridTransportError(ShotgridClientError):
    """Network-level failure (connection, TLS, timeout) from httpx."""


class ShotgridInvalidFiltersError(ShotgridClientError, ValueError):
    def __init__(
        self,
        message: str = (
            "Invalid Filters: expected `filters` to be an array or object; "
            "was neither."
        ),
    ):
        super().__init__(message)


class ShotgridBuilderConsumedError(ShotgridClientError):
    """A request builder was executed a second time."""


class ShotgridUploadError(ShotgridClientError):
    pass


class ShotgridMultipartNotSupportedError(ShotgridUploadError):
    def __init__(self, message: str = "Multipart uploads not supported by storage service."):
        super().__init__(message)


class ShotgridDecodeError(ShotgridClientError):
    """
    The response could not be decoded into the requested type.
    `locations` lists the dotted paths of the offending fields
    (e.g. `data.0.attributes.code`), empty when the body was not JSON.
    """

    def __init__(self, message: str, *, locations: Optional[List[str]] = None):
        super().__init__(message)
        self.locations = locations or []

    @classmethod
    def from_validation_error(
        cls, exc: ValidationError, *, target: str
    ) -> "ShotgridDecodeError":
        locations = [
            ".".join(str(part) for part in err["loc"]) for err in exc.errors()
        ]
        return cls(
            f"Response did not match {target}: {exc}",
            locations=locations,
        )


class ShotgridResponseError(ShotgridClientError):
    """Base for errors reported by the server itself."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        method: Optional[str] = None,
        url: Optional[str] = None,
        errors: Optional[List[ErrorObject]] = None,
        response_text: Optional[str] = None,
    ):
        prefix = f"{status_code} {method} {url}: " if method and url else ""
        super().__init__(f"{prefix}{message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.errors: List[ErrorObject] = errors or []
        self.response_text = response_text


class ShotgridNotFoundError(ShotgridResponseError):
    def __init__(self, detail: str = "", **kwargs: Any):
        kwargs.setdefault("status_code", 404)
        super().__init__(f"Entity Not Found - `{detail}`", **kwargs)
        self.detail = detail


class ShotgridServerError(ShotgridResponseError):
    def __init__(self, **kwargs: Any):
        errors = kwargs.get("errors") or []
        if errors:
            message = "; ".join(_describe(e) for e in errors)
        else:
            message = (kwargs.get("response_text") or "").strip() or "request failed"
        super().__init__(f"Server Error - {message}", **kwargs)


def _describe(error: ErrorObject) -> str:
    parts = [str(p) for p in (error.status, error.title, error.detail) if p is not None]
    return " ".join(parts) or "unknown error"


def contains_errors(value: Any) -> bool:
    """Checks to see if the value is an object with a top level `errors` key."""
    return isinstance(value, dict) and "errors" in value


def parse_error_objects(value: Any) -> Optional[List[ErrorObject]]:
    """
    Parse the `errors` key of a payload into `ErrorObject`s.
    A single object is accepted in place of the array.
    Returns None when the key is missing or malformed.
    """
    if not contains_errors(value):
        return None
    raw = value["errors"]
    if isinstance(raw, dict):
        raw = [raw]
    try:
        return ErrorResponse.model_validate({"errors": raw}).errors
    except ValidationError:
        return None


def classify_error(
    status_code: int,
    body: Any,
    *,
    text: Optional[str] = None,
    method: Optional[str] = None,
    url: Optional[str] = None,
) -> Optional[ShotgridResponseError]:
    """
    Decide whether an HTTP exchange failed, and how.

    `body` is the parsed JSON payload, or None when the body was empty or not
    JSON; `text` is the raw body used for context when nothing structured is
    available. Returns None for a successful exchange.
    """
    context = {"method": method, "url": url, "response_text": text}

    if status_code == 404:
        errors = parse_error_objects(body) or []
        detail = next((e.detail for e in errors if e.detail), None)
        return ShotgridNotFoundError(
            detail or (text or "").strip(), errors=errors, **context
        )

    if contains_errors(body):
        errors = parse_error_objects(body)
        if errors is None:
            return ShotgridServerError(status_code=status_code, **context)
        not_found = next((e for e in errors if e.status == 404), None)
        if not_found is not None:
            return ShotgridNotFoundError(
                not_found.detail or "",
                status_code=status_code,
                errors=errors,
                **context,
            )
        return ShotgridServerError(status_code=status_code, errors=errors, **context)

    if status_code < 200 or status_code >= 300:
        return ShotgridServerError(status_code=status_code, **context)

    return None


__all__ = [
    "ShotgridClientError",
    "ShotgridConfigError",
    "ShotgridTransportError",
    "ShotgridInvalidFiltersError",
    "ShotgridBuilderConsumedError",
    "ShotgridUploadError",
    "ShotgridMultipartNotSupportedError",
    "ShotgridDecodeError",
    "ShotgridResponseError",
    "ShotgridNotFoundError",
    "ShotgridServerError",
    "contains_errors",
    "parse_error_objects",
    "classify_error",
]
