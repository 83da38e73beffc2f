from __future__ import annotations

import logging
import ssl
import time
from typing import Any, Dict, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import (
    ShotgridConfigError,
    ShotgridDecodeError,
    ShotgridTransportError,
    classify_error,
)
from .models import TokenResponse, to_json_value
from .session import Session

API_PREFIX = "/api/v1"


def _type_name(model: Any) -> str:
    return getattr(model, "__name__", None) or repr(model)


def decode(model: Any, payload: Any) -> Any:
    """
    Validate an already-parsed JSON payload as `model`.
    `model=None` hands the payload back untouched.
    """
    if model is None:
        return payload
    try:
        return TypeAdapter(model).validate_python(payload)
    except ValidationError as exc:
        raise ShotgridDecodeError.from_validation_error(
            exc, target=_type_name(model)
        ) from exc


def load_ca_bundle(path: str) -> ssl.SSLContext:
    """Default trust store plus the PEM bundle at `path`."""
    ctx = ssl.create_default_context()
    try:
        ctx.load_verify_locations(cafile=path)
    except (OSError, ssl.SSLError) as exc:
        raise ShotgridConfigError(f"Unable to load CA bundle {path!r}: {exc}") from exc
    return ctx


class ShotgridClient:
    """
    Shared HTTP client for the ShotGrid REST API.
    - Holds the server URL, optional script credentials and the httpx client
    - Performs the auth handshakes that produce a `Session`
    - Classifies every response and decodes it into the caller's chosen type
    - No retries and no default timeout
    """

    def __init__(
        self,
        *,
        base_url: str,
        script_name: Optional[str] = None,
        script_key: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        ca_bundle: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ShotgridConfigError("base_url must be provided.")

        self.base_url = base_url
        self.script_name = script_name or None
        self.script_key = script_key or None
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("shotgrid_rest.client")

        self._owns_http = http is None
        if http is None:
            verify: Any = load_ca_bundle(ca_bundle) if ca_bundle else True
            http = httpx.AsyncClient(timeout=timeout_seconds, verify=verify)
        self.http = http

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "ShotgridClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def url(self, path: str) -> str:
        """Absolute URLs pass through; anything else is joined to the server."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{path}"

    def api_url(self, path: str) -> str:
        return self.url(f"{API_PREFIX}{path}")

    # --- Transport ---

    async def request_raw(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        content: Any = None,
        content_type: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        token: Optional[str] = None,
        op: Optional[str] = None,
    ) -> httpx.Response:
        """
        Send one request and hand back the unclassified response.
        Raises ShotgridTransportError for anything httpx raises.
        """
        method = method.upper()
        req_url = self.url(url)

        req_headers = {"Accept": "application/json"}
        if token:
            req_headers["Authorization"] = f"Bearer {token}"
        if content_type:
            req_headers["Content-Type"] = content_type
        if headers:
            req_headers.update(headers)

        start = time.perf_counter()
        try:
            resp = await self.http.request(
                method,
                req_url,
                params=params,
                json=to_json_value(json) if json is not None else None,
                content=content,
                data=data,
                headers=req_headers,
            )
        except httpx.HTTPError as exc:
            raise ShotgridTransportError(
                f"HTTPX error calling {method} {req_url}: {exc}"
            ) from exc
        duration_ms = int((time.perf_counter() - start) * 1000)

        # structured-ish log without secrets
        self.log.debug(
            "op.request",
            extra={
                "op": op,
                "method": method,
                "url": str(resp.request.url),
                "status": resp.status_code,
                "duration_ms": duration_ms,
            },
        )
        return resp

    def handle_response(self, resp: httpx.Response, *, model: Any = None) -> Any:
        """
        Classify a response and decode its body.
        - Raises a ShotgridResponseError subclass when the exchange failed
        - Raises ShotgridDecodeError for a non-JSON success body or a body
          that does not fit `model`
        - Returns the raw JSON value (None for an empty body) when `model` is None
        """
        method = resp.request.method
        url = str(resp.request.url)

        body: Any = None
        is_json = False
        if resp.content:
            try:
                body = resp.json()
                is_json = True
            except ValueError:
                body = None

        error = classify_error(
            resp.status_code,
            body,
            text=resp.text if resp.content else None,
            method=method,
            url=url,
        )
        if error is not None:
            raise error

        if resp.content and not is_json:
            snippet = (resp.text or "")[:500]
            raise ShotgridDecodeError(
                f"Expected JSON from {method} {url}, "
                f"got non-JSON body snippet: {snippet!r}"
            )
        return decode(model, body)

    async def request(
        self,
        method: str,
        url: str,
        *,
        model: Any = None,
        **kwargs: Any,
    ) -> Any:
        """
        Core request method. Accepts the same keyword arguments as
        `request_raw` and returns the classified, decoded payload.
        """
        resp = await self.request_raw(method, url, **kwargs)
        return self.handle_response(resp, model=model)

    # --- Auth ---

    async def info(self, *, model: Any = None) -> Any:
        """Server info; needs no credentials."""
        return await self.request("GET", self.api_url("/"), model=model, op="info")

    def _script_credentials(self) -> Dict[str, str]:
        if not self.script_name:
            raise ShotgridConfigError("script_name must be provided for script auth.")
        if not self.script_key:
            raise ShotgridConfigError("script_key must be provided for script auth.")
        return {
            "grant_type": "client_credentials",
            "client_id": self.script_name,
            "client_secret": self.script_key,
        }

    async def fetch_token(self, form: Dict[str, str]) -> TokenResponse:
        return await self.request(
            "POST",
            self.api_url("/auth/access_token"),
            data=form,
            model=TokenResponse,
            op="auth",
        )

    async def authenticate_script(self) -> Session:
        """Run the client credentials flow with the configured script name and key."""
        form = self._script_credentials()
        return Session(self, await self.fetch_token(form))

    async def authenticate_script_as_user(self, login: str) -> Session:
        """
        Script credentials acting on behalf of the human user `login`.
        Records created through this session are attributed to that user.
        """
        form = self._script_credentials()
        form["scope"] = f"sudo_as_login:{login}"
        return Session(self, await self.fetch_token(form), sudo_as_login=login)

    async def authenticate_user(self, username: str, password: str) -> Session:
        form = {"grant_type": "password", "username": username, "password": password}
        return Session(self, await self.fetch_token(form))


__all__ = [
    "API_PREFIX",
    "ShotgridClient",
    "decode",
    "load_ca_bundle",
]
