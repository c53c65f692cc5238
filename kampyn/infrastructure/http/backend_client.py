"""
Backend Client

Single entry point for every HTTP call to the KAMPYN backend. Translates
transport failures and error payloads into the client exception hierarchy.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from kampyn.domain.repositories.session_store import SessionStore
from kampyn.infrastructure.http.request_tracker import RequestTracker
from kampyn.infrastructure.logging import PerformanceLogger, get_structured_logger
from kampyn.infrastructure.utilities.exceptions import (
    AuthenticationError,
    BackendError,
    NetworkError,
)

AUTH_FAILURE_STATUSES = (401, 403)


class BackendClient:
    """Async JSON client for the KAMPYN backend"""

    def __init__(
        self,
        base_url: str,
        *,
        session_store: Optional[SessionStore] = None,
        tracker: Optional[RequestTracker] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._session_store = session_store
        self._tracker = tracker or RequestTracker()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._logger = logging.getLogger(self.__class__.__name__)
        self._log = get_structured_logger(__name__)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def tracker(self) -> RequestTracker:
        return self._tracker

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (or bytes when ``raw``).

        Raises:
            NetworkError: connection failure, timeout, or a non-2xx response
                without a backend message
            AuthenticationError: 401/403 responses
            BackendError: ``{success: false, message}`` bodies
        """
        headers = self._auth_headers()
        with self._tracker.track():
            with PerformanceLogger(
                f"{method} {path}", self._logger, {"method": method, "path": path}
            ) as perf:
                try:
                    response = await self._client.request(
                        method, path, json=json, params=params, headers=headers
                    )
                except httpx.TimeoutException as e:
                    self._log.warning("backend_timeout", method=method, path=path)
                    raise NetworkError(f"{method} {path} timed out") from e
                except httpx.HTTPError as e:
                    self._log.warning(
                        "backend_unreachable", method=method, path=path, error=str(e)
                    )
                    raise NetworkError(f"{method} {path} failed: {e}") from e

        self._log.info(
            "backend_request",
            method=method,
            path=path,
            status=response.status_code,
            duration_ms=round(perf.duration_ms, 1),
        )
        return self._handle_response(method, path, response, raw)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        token = self._session_store.get() if self._session_store else None
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _handle_response(
        self, method: str, path: str, response: httpx.Response, raw: bool
    ) -> Any:
        if response.is_success and raw:
            return response.content

        payload = self._decode(response)
        message = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")

        if response.status_code in AUTH_FAILURE_STATUSES:
            self._logger.warning("🔒 AUTH REJECTED: %s %s (%s)", method, path, response.status_code)
            if message:
                raise AuthenticationError(message, response.status_code)
            raise AuthenticationError(status_code=response.status_code)

        if not response.is_success:
            self._logger.warning(
                "❌ BACKEND ERROR: %s %s -> %s %s", method, path, response.status_code, message or ""
            )
            if message:
                raise BackendError(message, response.status_code, payload)
            raise NetworkError(
                f"{method} {path} returned HTTP {response.status_code}",
                response.status_code,
            )

        if isinstance(payload, dict) and payload.get("success") is False:
            raise BackendError(
                message or "Request failed", response.status_code, payload
            )
        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}
