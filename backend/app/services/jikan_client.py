"""Jikan (unofficial MyAnimeList) API client.

Lookups are pass-through: the JSON body Jikan returns is handed back
unchanged. HTTP and transport failures propagate as ``httpx.HTTPError`` so the
caller decides how to report them.
"""

import logging
from typing import Any

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 3
EMPTY_RESULT: dict[str, Any] = {"data": []}


class JikanClient:
    """Thin async wrapper around the Jikan v4 REST endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.jikan_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.jikan_timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(path, params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.error(f"Jikan request failed for {path}: {e}")
                raise
            return response.json()

    async def search(self, query: str, limit: int = 10) -> dict[str, Any]:
        query = (query or "").strip()
        if not query:
            return dict(EMPTY_RESULT)
        return await self._get("/anime", params={"q": query, "limit": limit})

    async def get_anime(self, anime_id: int) -> dict[str, Any]:
        return await self._get(f"/anime/{anime_id}")

    async def top(self, limit: int = 10) -> dict[str, Any]:
        return await self._get("/top/anime", params={"limit": limit})

    async def recommendations(self, limit: int = 10) -> dict[str, Any]:
        return await self._get("/recommendations/anime", params={"limit": limit})

    async def random(self) -> dict[str, Any]:
        return await self._get("/random/anime")


def get_jikan_client() -> JikanClient:
    """FastAPI dependency; overridden in tests with a mocked transport."""
    return JikanClient()
