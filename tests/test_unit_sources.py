"""Unit tests for the proxy API clients with requests mocked out."""

import pytest
import requests
from board.models import Photo, Quote, Track
from board.sources import ApiClient, PhotoSource, QuoteSource, TrackSource
from config import FALLBACK_QUOTE
from unittest.mock import Mock, patch

BASE_URL = "http://api.test"


def json_response(payload, status_code=200):
    """Build a requests.Response stand-in returning payload."""
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Server Error")
    return response


@pytest.fixture
def client():
    return ApiClient(base_url=BASE_URL + "/", timeout=3.0)


class TestApiClient:
    @pytest.mark.asyncio
    async def test_get_json_success(self, client):
        with patch('board.sources.requests.get', return_value=json_response({"ok": 1})) as mock_get:
            result = await client.get_json('/api/quote', {'tag': 'life'})

        assert result.ok is True
        assert result.value == {"ok": 1}
        mock_get.assert_called_once_with(f"{BASE_URL}/api/quote", params={'tag': 'life'}, timeout=3.0)

    @pytest.mark.asyncio
    async def test_http_error_is_failure(self, client):
        with patch('board.sources.requests.get', return_value=json_response({}, status_code=500)):
            result = await client.get_json('/api/music')

        assert result.ok is False
        assert result.value is None
        assert "500" in result.error

    @pytest.mark.asyncio
    async def test_connection_error_is_failure(self, client):
        with patch('board.sources.requests.get', side_effect=requests.ConnectionError("refused")):
            result = await client.get_json('/api/music')
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_invalid_json_is_failure(self, client):
        response = json_response(None)
        response.json.side_effect = ValueError("Expecting value")
        with patch('board.sources.requests.get', return_value=response):
            result = await client.get_json('/api/photo')
        assert result.ok is False
        assert "Expecting value" in result.error


class TestQuoteSource:
    @pytest.mark.asyncio
    async def test_random_quote(self, client):
        payload = {"_id": "abc", "content": "Be yourself.", "author": "Oscar Wilde", "tags": ["life"]}
        with patch('board.sources.requests.get', return_value=json_response(payload)) as mock_get:
            quote = await QuoteSource(client).random_quote('life')

        assert quote == Quote(id="abc", content="Be yourself.", author="Oscar Wilde", tags=["life"])
        assert mock_get.call_args.kwargs['params'] == {'tag': 'life'}

    @pytest.mark.asyncio
    async def test_random_quote_falls_back_on_error(self, client):
        with patch('board.sources.requests.get', side_effect=requests.Timeout("slow")):
            quote = await QuoteSource(client).random_quote()
        assert quote == Quote.from_dict(FALLBACK_QUOTE)

    @pytest.mark.asyncio
    async def test_random_quote_falls_back_on_empty_content(self, client):
        with patch('board.sources.requests.get', return_value=json_response({"id": "x", "content": ""})):
            quote = await QuoteSource(client).random_quote()
        assert quote.author == FALLBACK_QUOTE['author']

    @pytest.mark.asyncio
    async def test_search_quotes(self, client):
        payload = {"results": [{"id": "1", "content": "a", "author": "x"}, {"id": "2", "content": "b", "author": "y"}]}
        with patch('board.sources.requests.get', return_value=json_response(payload)) as mock_get:
            quotes = await QuoteSource(client).search_quotes("wisdom", limit=2)

        assert [q.id for q in quotes] == ["1", "2"]
        assert mock_get.call_args.kwargs['params'] == {'query': 'wisdom', 'limit': 2}

    @pytest.mark.asyncio
    async def test_search_quotes_failure(self, client):
        with patch('board.sources.requests.get', side_effect=requests.ConnectionError()):
            assert await QuoteSource(client).search_quotes("wisdom") == []


class TestPhotoSource:
    @pytest.mark.asyncio
    async def test_random_photo(self, client):
        payload = {
            "id": "p9",
            "url": "https://images.test/full.jpg",
            "thumb": "https://images.test/thumb.jpg",
            "alt": "Lake",
            "photographer": "Ansel",
            "photographerUrl": "https://images.test/@ansel",
            "color": "#112233",
        }
        with patch('board.sources.requests.get', return_value=json_response(payload)) as mock_get:
            photo = await PhotoSource(client).random_photo("nature")

        assert isinstance(photo, Photo)
        assert photo.photographer_url == "https://images.test/@ansel"
        assert mock_get.call_args.kwargs['params'] == {'query': 'nature'}

    @pytest.mark.asyncio
    async def test_no_query_sends_no_params(self, client):
        with patch('board.sources.requests.get', return_value=json_response({"url": "u"})) as mock_get:
            await PhotoSource(client).random_photo()
        assert mock_get.call_args.kwargs['params'] is None

    @pytest.mark.asyncio
    async def test_missing_url_is_none(self, client):
        with patch('board.sources.requests.get', return_value=json_response({"id": "p1"})):
            assert await PhotoSource(client).random_photo() is None

    @pytest.mark.asyncio
    async def test_failure_is_none(self, client):
        with patch('board.sources.requests.get', side_effect=requests.ConnectionError()):
            assert await PhotoSource(client).random_photo() is None


class TestTrackSource:
    @pytest.mark.asyncio
    async def test_fetch_tracks(self, client):
        payload = {
            "tracks": [
                {"id": 1, "title": "Dawn", "artist": "Lumen", "previewUrl": "https://cdn.test/1.mp3"},
                {"id": 2, "title": "Dusk", "artist": "Lumen", "preview": "https://cdn.test/2.mp3", "cover": "c.jpg"},
            ]
        }
        with patch('board.sources.requests.get', return_value=json_response(payload)):
            result = await TrackSource(client).fetch_tracks()

        assert result.ok is True
        assert result.value[0] == Track(id="1", title="Dawn", artist="Lumen", preview_url="https://cdn.test/1.mp3")
        assert result.value[1].preview_url == "https://cdn.test/2.mp3"
        assert result.value[1].cover_url == "c.jpg"
        assert result.value[1].display_name == "Lumen - Dusk"

    @pytest.mark.asyncio
    async def test_missing_tracks_key_is_empty_success(self, client):
        with patch('board.sources.requests.get', return_value=json_response({})):
            result = await TrackSource(client).fetch_tracks()
        assert result.ok is True
        assert result.value == []

    @pytest.mark.asyncio
    async def test_unexpected_payload_is_failure(self, client):
        with patch('board.sources.requests.get', return_value=json_response(["not", "a", "dict"])):
            result = await TrackSource(client).fetch_tracks()
        assert result.ok is False
        assert result.value == []

    @pytest.mark.asyncio
    async def test_network_failure(self, client):
        with patch('board.sources.requests.get', side_effect=requests.ConnectionError("refused")):
            result = await TrackSource(client).fetch_tracks()
        assert result.ok is False
        assert result.value == []
        assert "refused" in result.error
