"""School backend API client — JSON over HTTP with bearer authentication.

Every response is wrapped in ``{ success, data, message }``. Failures are
mapped onto the domain ``ApiError`` family:

- no response at all            → NetworkError
- missing or rejected token     → AuthError
- non-2xx with a message body   → ServerError
- 2xx with a malformed envelope → ParseError
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from schoolboard.application.schemas import ApiEnvelope
from schoolboard.application.services import SessionContext
from schoolboard.domain.exceptions import (
    AuthError,
    NetworkError,
    ParseError,
    ServerError,
)
from schoolboard.infrastructure.http.response_cache import ResponseCache

logger = logging.getLogger(__name__)

_REFRESH_PATH = "/users/refresh-token"


class SchoolApiClient:
    """Infrastructure adapter for the school backend REST API.

    Uses an injected ``httpx.AsyncClient`` when given (tests pass one with a
    mock transport), otherwise opens a short-lived client per call.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: ResponseCache | None = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._http_client = http_client
        self._cache = cache
        self._timeout = timeout
        if cache is not None:
            session.on_logout(cache.clear)

    @property
    def session(self) -> SessionContext:
        return self._session

    # ── Public verbs ─────────────────────────────────────────────────

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        use_cache: bool = True,
    ) -> Any:
        """GET ``path`` and return the envelope's ``data``."""
        key = ResponseCache.key("GET", path, params)
        if use_cache and self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        data = await self._request("GET", path, params=params, require_data=True)
        if self._cache is not None:
            self._cache.set(key, data)
        return data

    async def post(self, path: str, body: dict[str, Any]) -> Any:
        data = await self._request("POST", path, json=body, require_data=True)
        self._invalidate(path)
        return data

    async def patch(self, path: str, body: dict[str, Any]) -> Any:
        """PATCH ``path``; the envelope's ``data`` is optional here."""
        data = await self._request("PATCH", path, json=body, require_data=False)
        self._invalidate(path)
        return data

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path, require_data=False, expect_envelope=False)
        self._invalidate(path)

    # ── Transport ────────────────────────────────────────────────────

    def _get_headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        require_data: bool,
        expect_envelope: bool = True,
    ) -> Any:
        token = self._session.access_token
        if not token:
            raise AuthError()

        url = f"{self._base_url}{path}"
        client = self._get_client()
        should_close = self._http_client is None

        try:
            response = await self._send(client, method, url, token, params, json)

            if response.status_code == 401 and self._session.refresh_token:
                token = await self._refresh_access_token(client)
                response = await self._send(client, method, url, token, params, json)

            if response.status_code in (401, 403):
                raise AuthError(_error_message(response) or "Your session has expired. Please log in again.")
            if not response.is_success:
                self._raise_server_error(response)

            if not expect_envelope:
                return None
            return self._parse_envelope(response, require_data=require_data)

        finally:
            if should_close:
                await client.aclose()

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        token: str,
        params: dict[str, Any] | None,
        json: dict[str, Any] | None,
    ) -> httpx.Response:
        try:
            return await client.request(
                method, url, params=params, json=json, headers=self._get_headers(token)
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Could not reach the server: {exc}") from exc

    async def _refresh_access_token(self, client: httpx.AsyncClient) -> str:
        """Exchange the refresh token for a new access token, once.

        Any failure signs the session out and raises AuthError.
        """
        logger.info("Access token rejected, refreshing")
        try:
            response = await client.post(
                f"{self._base_url}{_REFRESH_PATH}",
                json={"refreshToken": self._session.refresh_token},
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"Could not reach the server: {exc}") from exc

        token = None
        if response.is_success:
            try:
                data = response.json().get("data") or {}
                token = data.get("accessToken")
            except (ValueError, AttributeError):
                token = None

        if not token:
            logger.warning("Token refresh failed with status %d", response.status_code)
            self._session.logout()
            raise AuthError("Your session has expired. Please log in again.")

        self._session.update_access_token(token)
        return token

    # ── Response handling ────────────────────────────────────────────

    def _parse_envelope(self, response: httpx.Response, *, require_data: bool) -> Any:
        if not response.content:
            if require_data:
                raise ParseError("Empty response from server")
            return None
        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ParseError("Unexpected response from server") from exc

        if not envelope.success:
            raise ParseError(envelope.message or "Request was not successful")
        if require_data and envelope.data is None:
            raise ParseError("Response is missing data")
        return envelope.data

    def _raise_server_error(self, response: httpx.Response) -> None:
        message = _error_message(response) or f"Request failed with status {response.status_code}"
        logger.warning(
            "%s %s → %d: %s",
            response.request.method,
            response.request.url,
            response.status_code,
            message,
        )
        raise ServerError(status_code=response.status_code, message=message)

    def _invalidate(self, path: str) -> None:
        if self._cache is None:
            return
        collection = path.strip("/").split("/", 1)[0]
        dropped = self._cache.invalidate_collection(collection)
        if dropped:
            logger.debug("Invalidated %d cached %s response(s)", dropped, collection)


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from an error body: ``message``, ``error`` or raw text."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(data, dict):
        message = data.get("message") or data.get("error")
        if isinstance(message, dict):
            message = message.get("message")
        if message:
            return str(message)
    return ""
