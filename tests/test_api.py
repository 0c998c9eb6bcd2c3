"""
test_api.py — Tests for the FastAPI web API endpoints.

Uses FastAPI's TestClient (backed by httpx) so tests run in-process without
needing a live server.  The facade dependency is overridden with a mock, so
these tests are fast and don't require network access.
"""

from __future__ import annotations

from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from yt_transcript_scraper.api import app, get_api
from yt_transcript_scraper.errors import (
    NoTranscriptFound,
    RequestBlocked,
    VideoUnavailable,
)

_VIDEO_ID = "dQw4w9WgXcQ"

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_api() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def client(fake_api: MagicMock) -> Iterator[TestClient]:
    """A TestClient whose endpoints receive `fake_api` as their facade."""
    app.dependency_overrides[get_api] = lambda: fake_api
    yield TestClient(app)
    app.dependency_overrides.clear()


_SAMPLE_INFO = {
    "video_id": _VIDEO_ID,
    "has_subtitles": True,
    "languages": [
        {"code": "en", "name": "English", "is_generated": False, "is_translatable": True},
    ],
}
_SAMPLE_SUBTITLES = [
    {"text": "Hello world", "start": 0.0, "duration": 1.5},
    {"text": "Second line", "start": 1.5, "duration": 2.0},
]


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

class TestHealth:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        """Health endpoint returns 200 with status ok."""
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Facade endpoints
# ---------------------------------------------------------------------------

class TestInfoEndpoint:
    """Tests for GET /api/info/{video_id}."""

    def test_info(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_info.return_value = _SAMPLE_INFO

        resp = client.get(f"/api/info/{_VIDEO_ID}")

        assert resp.status_code == 200
        assert resp.json() == _SAMPLE_INFO
        fake_api.get_info.assert_called_once_with(_VIDEO_ID)

    def test_unavailable_is_404(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_info.side_effect = VideoUnavailable(_VIDEO_ID)

        resp = client.get(f"/api/info/{_VIDEO_ID}")

        assert resp.status_code == 404
        assert "no longer available" in resp.json()["error"]

    def test_invalid_id_is_400(self, client: TestClient, fake_api: MagicMock) -> None:
        resp = client.get("/api/info/nope")

        assert resp.status_code == 400
        assert "error" in resp.json()
        fake_api.get_info.assert_not_called()

    def test_blocked_is_503(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_info.side_effect = RequestBlocked(_VIDEO_ID)
        assert client.get(f"/api/info/{_VIDEO_ID}").status_code == 503


class TestSubtitlesEndpoint:
    """Tests for GET /api/subtitles/{video_id}."""

    def test_default_language(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_subtitles.return_value = _SAMPLE_SUBTITLES

        resp = client.get(f"/api/subtitles/{_VIDEO_ID}")

        assert resp.status_code == 200
        assert resp.json() == _SAMPLE_SUBTITLES
        fake_api.get_subtitles.assert_called_once_with(_VIDEO_ID, "en")

    def test_lang_param(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_subtitles.return_value = []

        client.get(f"/api/subtitles/{_VIDEO_ID}?lang=de")

        fake_api.get_subtitles.assert_called_once_with(_VIDEO_ID, "de")

    def test_no_transcript_is_404(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_subtitles.side_effect = NoTranscriptFound(_VIDEO_ID, ["de", "en"], "catalog")
        assert client.get(f"/api/subtitles/{_VIDEO_ID}?lang=de").status_code == 404


class TestTextEndpoint:
    """Tests for GET /api/text/{video_id}."""

    def test_text(self, client: TestClient, fake_api: MagicMock) -> None:
        fake_api.get_text.return_value = "Hello world\nSecond line"

        resp = client.get(f"/api/text/{_VIDEO_ID}?lang=fr")

        assert resp.status_code == 200
        assert resp.json() == {"text": "Hello world\nSecond line"}
        fake_api.get_text.assert_called_once_with(_VIDEO_ID, "fr")


# ---------------------------------------------------------------------------
# Transcript endpoint
# ---------------------------------------------------------------------------

class TestTranscriptEndpoint:
    """Tests for GET /transcript/{video_id} with mocked extraction."""

    @patch("yt_transcript_scraper.api.extract")
    def test_text_format(self, mock_extract: MagicMock, client: TestClient, fake_api: MagicMock) -> None:
        """Default format=text returns plain text with 200."""
        mock_extract.return_value = "Hello world\nSecond line"

        resp = client.get(f"/transcript/{_VIDEO_ID}")

        assert resp.status_code == 200
        assert resp.text == "Hello world\nSecond line"
        assert resp.headers["content-type"].startswith("text/plain")
        mock_extract.assert_called_once_with(
            _VIDEO_ID, languages=None, fmt="text", translate=None, api=fake_api,
        )

    @patch("yt_transcript_scraper.api.extract")
    def test_languages_and_translation(self, mock_extract: MagicMock, client: TestClient, fake_api: MagicMock) -> None:
        mock_extract.return_value = "[]"

        client.get(f"/transcript/{_VIDEO_ID}?format=json&lang=de,en&translate=fr")

        mock_extract.assert_called_once_with(
            _VIDEO_ID, languages=["de", "en"], fmt="json", translate="fr", api=fake_api,
        )

    @patch("yt_transcript_scraper.api.extract")
    def test_json_media_type(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.return_value = '[{"text": "Hello world", "start": 0.0, "duration": 1.5}]'

        resp = client.get(f"/transcript/{_VIDEO_ID}?format=pretty")

        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == [{"text": "Hello world", "start": 0.0, "duration": 1.5}]

    @patch("yt_transcript_scraper.api.extract")
    def test_webvtt_media_type(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.return_value = "WEBVTT\n\n"

        resp = client.get(f"/transcript/{_VIDEO_ID}?format=webvtt")

        assert resp.headers["content-type"].startswith("text/vtt")

    def test_invalid_format_is_422(self, client: TestClient) -> None:
        assert client.get(f"/transcript/{_VIDEO_ID}?format=docx").status_code == 422

    @patch("yt_transcript_scraper.api.extract")
    def test_errors_use_exception_status(self, mock_extract: MagicMock, client: TestClient) -> None:
        mock_extract.side_effect = VideoUnavailable(_VIDEO_ID)

        resp = client.get(f"/transcript/{_VIDEO_ID}")

        assert resp.status_code == 404
        assert "no longer available" in resp.json()["error"]


# ---------------------------------------------------------------------------
# App wiring
# ---------------------------------------------------------------------------

class TestWiring:

    def test_cors_allows_any_origin(self, client: TestClient) -> None:
        resp = client.get("/health", headers={"Origin": "chrome-extension://abcdef"})
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_bad_proxy_environment_is_500(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("YT_TRANSCRIPT_WEBSHARE_PASSWORD", raising=False)
        monkeypatch.setenv("YT_TRANSCRIPT_WEBSHARE_USERNAME", "user")

        resp = TestClient(app).get(f"/api/info/{_VIDEO_ID}")

        assert resp.status_code == 500
        assert "password" in resp.json()["error"]
