from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


class ChatTransportError(RuntimeError):
    """The backend could not be reached or answered with something unusable."""


class ChatApiClient:
    """Thin async wrapper around the relay's HTTP surface.

    One ``post_chat`` call is exactly one ``POST /api/chat``. There is no
    retry and, unless ``timeout`` is given, no timeout either.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise ChatTransportError(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise ChatTransportError(f"{method} {url} returned a non-JSON body") from exc

        if not isinstance(data, dict):
            raise ChatTransportError(f"{method} {url} returned {type(data).__name__}, expected an object")
        return data

    async def post_chat(self, message: str) -> Optional[str]:
        """Return the reply text, or ``None`` when the payload carries none."""
        data = await self._request("POST", "/api/chat", json={"message": message})
        reply = data.get("response")
        if isinstance(reply, str) and reply:
            return reply
        return None

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/health")
