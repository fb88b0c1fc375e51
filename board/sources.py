"""Clients for the quote, photo and music endpoints of the board's proxy API.

Each call makes a single request with no retry. Failures never raise: the
quote source falls back to a built-in quote, the others return empty values.
"""

import asyncio
import requests
from board.logging import log_api_request, source_logger
from board.models import Photo, Quote, Track
from board.result import Result
from config import API_URL, DEFAULT_QUOTE_TAG, FALLBACK_QUOTE, REQUEST_TIMEOUT
from eliot import start_action


class ApiClient:
    """Minimal JSON GET client for the proxy API."""

    def __init__(self, base_url: str = API_URL, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _get(self, path: str, params: dict | None = None) -> dict | list:
        response = requests.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def get_json(self, path: str, params: dict | None = None) -> Result[dict | list | None]:
        """GET path and decode the JSON body in a worker thread.

        Returns:
            Result: the decoded body, or a failure carrying None
        """
        with start_action(source_logger, "api_get", path=path):
            try:
                data = await asyncio.to_thread(self._get, path, params)
            except (requests.RequestException, ValueError) as e:
                log_api_request(path, status="failed", error=str(e), description=f"{path} failed: {e}")
                return Result.failure(None, str(e))
            log_api_request(path, status="ok")
            return Result.success(data)


class QuoteSource:
    def __init__(self, client: ApiClient | None = None):
        self.client = client or ApiClient()

    async def random_quote(self, tag: str = DEFAULT_QUOTE_TAG) -> Quote:
        """Fetch a random quote, or the built-in fallback quote on failure."""
        result = await self.client.get_json('/api/quote', {'tag': tag})
        if result.ok and isinstance(result.value, dict) and result.value.get('content'):
            return Quote.from_dict(result.value)
        return Quote.from_dict(FALLBACK_QUOTE)

    async def search_quotes(self, query: str, limit: int = 1) -> list[Quote]:
        """Search quotes by text or author; empty list on failure."""
        result = await self.client.get_json('/api/quote/search', {'query': query, 'limit': limit})
        if not result.ok or not isinstance(result.value, dict):
            return []
        return [Quote.from_dict(item) for item in result.value.get('results') or []]


class PhotoSource:
    def __init__(self, client: ApiClient | None = None):
        self.client = client or ApiClient()

    async def random_photo(self, query: str = '') -> Photo | None:
        """Fetch a random background photo, optionally filtered by query."""
        params = {'query': query} if query else None
        result = await self.client.get_json('/api/photo', params)
        if not result.ok or not isinstance(result.value, dict) or not result.value.get('url'):
            return None
        return Photo.from_dict(result.value)


class TrackSource:
    def __init__(self, client: ApiClient | None = None):
        self.client = client or ApiClient()

    async def fetch_tracks(self) -> Result[list[Track]]:
        """Fetch the preview track list from the music endpoint."""
        result = await self.client.get_json('/api/music')
        if not result.ok:
            return Result.failure([], result.error)
        if not isinstance(result.value, dict):
            return Result.failure([], "unexpected music payload")
        return Result.success([Track.from_dict(item) for item in result.value.get('tracks') or []])
