"""HTTP client for the condominium REST backend (/api/v1)."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Iterable

import httpx

from src.api.errors import BackendError, MissingTokenError
from src.services.config import Settings, TokenStore

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Backend request failed."
# Raw (non-JSON) error bodies are cut to this many characters in messages
ERROR_TEXT_LIMIT = 100


class BackendClient:
    """Thin async wrapper around httpx that adds the bearer token and error mapping.

    Every call returns the decoded JSON body, or None for 204/empty/non-JSON
    bodies. Non-2xx responses raise BackendError carrying the backend's
    ``message`` field when there is one.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token_store = token_store
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "BackendClient":
        return cls(
            base_url=settings.backend_url,
            token_store=TokenStore.from_settings(settings),
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        token = self.token_store.get()
        if not token:
            raise MissingTokenError()
        return {"Authorization": f"Bearer {token}"}

    def ensure_token(self) -> None:
        """Fail fast with MissingTokenError when no token is stored."""
        self._auth_headers()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> Any:
        """Send a request and return the decoded body.

        Args:
            method: HTTP method
            path: Path under the backend base URL (e.g. /api/v1/accounts)
            json: Optional JSON body
            error_message: Message used when the backend error has no ``message``

        Raises:
            MissingTokenError: No bearer token stored
            BackendError: Transport failure or non-2xx response
        """
        headers = self._auth_headers()
        start_time = time.time()
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error("backend.%s %s failed: %s", method, path, e)
            raise BackendError(f"{error_message} ({e.__class__.__name__})") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "backend.%s %s status=%d duration_ms=%d",
            method,
            path,
            response.status_code,
            duration_ms,
        )

        if response.is_success:
            return self._decode(response)
        raise self._error_from(response, error_message)

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("DELETE", path, json=json, **kwargs)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(
                "backend response from %s is not JSON, ignoring body", response.request.url.path
            )
            return None

    @staticmethod
    def _error_from(response: httpx.Response, fallback: str) -> BackendError:
        try:
            payload = response.json()
        except ValueError:
            text = response.text
            message = f"{fallback} {text[:ERROR_TEXT_LIMIT]}".strip() if text else fallback
            return BackendError(message, status_code=response.status_code, payload=text)

        message = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("detail")
        if not isinstance(message, str) or not message:
            message = fallback
        return BackendError(message, status_code=response.status_code, payload=payload)


async def gather(*aws: Awaitable[Any]) -> list[Any]:
    """Wait for all awaitables; the first failure propagates."""
    return list(await asyncio.gather(*aws))


async def gather_settled(aws: Iterable[Awaitable[Any]], default: Any = None) -> list[Any]:
    """Wait for all awaitables; a BackendError in one yields ``default`` for that slot.

    Other exceptions (including MissingTokenError) propagate.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    settled = []
    for result in results:
        if isinstance(result, BackendError):
            logger.warning("parallel fetch failed: %s", result.message)
            settled.append(default() if callable(default) else default)
        elif isinstance(result, BaseException):
            raise result
        else:
            settled.append(result)
    return settled


__all__ = ["BackendClient", "gather", "gather_settled"]
