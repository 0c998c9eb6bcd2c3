"""
test_extractor.py — Unit and integration tests for the high-level interface.

Unit tests (fast, no network):
    - URL / ID parsing for every supported format
    - The YouTubeTranscriptApi facade over a mocked transport
    - Track selection, translation and formatting through extract()

Integration tests (need network, marked with @pytest.mark.integration):
    - Fetching a transcript from a real YouTube video
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from yt_transcript_scraper.errors import InvalidVideoId, NoTranscriptFound
from yt_transcript_scraper.extractor import (
    YouTubeTranscriptApi,
    extract,
    get_transcript,
    parse_video_id,
)
from yt_transcript_scraper.formatters import UnknownFormatterType

_VIDEO_ID = "dQw4w9WgXcQ"
_WATCH_PAGE = '<script>ytcfg.set({"INNERTUBE_API_KEY": "AIzaKey"})</script>'
_TIMEDTEXT = "https://www.youtube.com/api/timedtext?v=dQw4w9WgXcQ"

_PLAYER_DATA = {
    "playabilityStatus": {"status": "OK"},
    "captions": {
        "playerCaptionsTracklistRenderer": {
            "captionTracks": [
                {
                    "baseUrl": f"{_TIMEDTEXT}&lang=en",
                    "name": {"runs": [{"text": "English"}]},
                    "languageCode": "en",
                    "isTranslatable": True,
                },
                {
                    "baseUrl": f"{_TIMEDTEXT}&lang=en&kind=asr",
                    "name": {"runs": [{"text": "English (auto-generated)"}]},
                    "languageCode": "en",
                    "kind": "asr",
                    "isTranslatable": True,
                },
            ],
            "translationLanguages": [
                {"languageCode": "de", "languageName": {"runs": [{"text": "German"}]}},
            ],
        },
    },
}

# Caption bodies keyed by the query suffix that selects them.
_BODIES = {
    "&lang=en": '<transcript><text start="0" dur="1.5">Hello world</text>'
                '<text start="1.5" dur="2">Second line</text></transcript>',
    "&lang=en&kind=asr": '<transcript><text start="0" dur="2">hello world auto</text></transcript>',
    "&lang=en&tlang=de": '<transcript><text start="0" dur="1.5">Hallo Welt</text></transcript>',
}


# ---------------------------------------------------------------------------
# Helpers: a fake YouTube behind a mocked transport
# ---------------------------------------------------------------------------

def _response(body: str, status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK"
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


def _fake_get(url: str) -> requests.Response:
    if "/watch?v=" in url:
        return _response(_WATCH_PAGE)
    suffix = url[len(_TIMEDTEXT):]
    return _response(_BODIES[suffix])


def _make_api(player_data: dict | None = None) -> YouTubeTranscriptApi:
    client = MagicMock()
    client.get.side_effect = _fake_get
    client.post.return_value = _response(json.dumps(player_data or _PLAYER_DATA))
    client.retries_when_blocked = 0
    client.proxy_config = None
    return YouTubeTranscriptApi(http_client=client)


# ---------------------------------------------------------------------------
# parse_video_id: URL parsing
# ---------------------------------------------------------------------------

class TestParseVideoId:
    """Tests for parse_video_id covering every URL format + bare IDs."""

    def test_standard_watch_url(self) -> None:
        """Standard youtube.com/watch?v= URL."""
        assert parse_video_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_watch_url_with_extra_params(self) -> None:
        """Watch URL with additional query parameters like playlist or timestamp."""
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf&t=42"
        assert parse_video_id(url) == "dQw4w9WgXcQ"

    def test_watch_url_with_v_not_first(self) -> None:
        """The v parameter may come after other query parameters."""
        assert parse_video_id("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_mobile_url(self) -> None:
        assert parse_video_id("https://m.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_short_url(self) -> None:
        """youtu.be short-link format."""
        assert parse_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_embed_url(self) -> None:
        """youtube.com/embed/ URL used in iframes."""
        assert parse_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_shorts_url(self) -> None:
        """youtube.com/shorts/ URL."""
        assert parse_video_id("https://www.youtube.com/shorts/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_old_v_url(self) -> None:
        assert parse_video_id("https://www.youtube.com/v/dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_bare_id(self) -> None:
        """Raw 11-character video ID with no URL wrapper."""
        assert parse_video_id("dQw4w9WgXcQ") == "dQw4w9WgXcQ"

    def test_bare_id_with_whitespace(self) -> None:
        """Bare ID with leading/trailing spaces should be trimmed."""
        assert parse_video_id("  dQw4w9WgXcQ  ") == "dQw4w9WgXcQ"

    def test_invalid_url_raises(self) -> None:
        """Completely unrelated string should raise InvalidVideoId."""
        with pytest.raises(InvalidVideoId):
            parse_video_id("not-a-youtube-url")

    def test_empty_string_raises(self) -> None:
        with pytest.raises(InvalidVideoId):
            parse_video_id("")

    def test_id_with_hyphens_and_underscores(self) -> None:
        """IDs can contain hyphens and underscores (base64url alphabet)."""
        assert parse_video_id("Ab_Cd-Ef_12") == "Ab_Cd-Ef_12"


# ---------------------------------------------------------------------------
# YouTubeTranscriptApi: the facade
# ---------------------------------------------------------------------------

class TestFacade:

    def test_fetch_prefers_manual(self) -> None:
        transcript = _make_api().fetch(_VIDEO_ID)
        assert transcript.is_generated is False
        assert [snippet.text for snippet in transcript] == ["Hello world", "Second line"]

    def test_fetch_unknown_language(self) -> None:
        with pytest.raises(NoTranscriptFound):
            _make_api().fetch(_VIDEO_ID, languages=["ko"])

    def test_list(self) -> None:
        transcript_list = _make_api().list(_VIDEO_ID)
        assert transcript_list.video_id == _VIDEO_ID
        assert len(list(transcript_list)) == 2

    def test_get_info(self) -> None:
        assert _make_api().get_info(_VIDEO_ID) == {
            "video_id": _VIDEO_ID,
            "has_subtitles": True,
            "languages": [
                {"code": "en", "name": "English", "is_generated": False, "is_translatable": True},
                {
                    "code": "en",
                    "name": "English (auto-generated)",
                    "is_generated": True,
                    "is_translatable": True,
                },
            ],
        }

    def test_get_subtitles_falls_back_to_english(self) -> None:
        assert _make_api().get_subtitles(_VIDEO_ID, lang="de") == [
            {"text": "Hello world", "start": 0.0, "duration": 1.5},
            {"text": "Second line", "start": 1.5, "duration": 2.0},
        ]

    def test_get_text(self) -> None:
        assert _make_api().get_text(_VIDEO_ID) == "Hello world\nSecond line"

    def test_builds_own_client(self) -> None:
        api = YouTubeTranscriptApi()
        assert api._http_client.proxy_config is None


# ---------------------------------------------------------------------------
# get_transcript: track selection
# ---------------------------------------------------------------------------

class TestGetTranscript:

    def test_default_language(self) -> None:
        assert get_transcript(_VIDEO_ID, api=_make_api()).language_code == "en"

    def test_exclude_manually_created(self) -> None:
        transcript = get_transcript(_VIDEO_ID, ["en"], exclude_manually_created=True, api=_make_api())
        assert transcript.is_generated is True
        assert transcript[0].text == "hello world auto"

    def test_exclude_generated(self) -> None:
        transcript = get_transcript(_VIDEO_ID, ["en"], exclude_generated=True, api=_make_api())
        assert transcript.is_generated is False

    def test_excluding_both_is_rejected(self) -> None:
        api = MagicMock()
        with pytest.raises(ValueError):
            get_transcript(_VIDEO_ID, exclude_generated=True, exclude_manually_created=True, api=api)
        api.list.assert_not_called()

    def test_translate(self) -> None:
        transcript = get_transcript(_VIDEO_ID, ["en"], translate="de", api=_make_api())
        assert transcript.language == "German"
        assert transcript.language_code == "de"
        assert transcript[0].text == "Hallo Welt"


# ---------------------------------------------------------------------------
# extract: one-call interface
# ---------------------------------------------------------------------------

class TestExtract:

    def test_text_from_url(self) -> None:
        result = extract("https://youtu.be/dQw4w9WgXcQ", api=_make_api())
        assert result == "Hello world\nSecond line"

    def test_json(self) -> None:
        result = extract(_VIDEO_ID, fmt="json", api=_make_api())
        assert json.loads(result)[0] == {"text": "Hello world", "start": 0.0, "duration": 1.5}

    def test_srt(self) -> None:
        result = extract(_VIDEO_ID, fmt="srt", api=_make_api())
        assert result.startswith("1\n00:00:00,000 --> 00:00:01,500\nHello world\n\n2\n")

    def test_unknown_format_before_any_request(self) -> None:
        api = MagicMock()
        with pytest.raises(UnknownFormatterType):
            extract(_VIDEO_ID, fmt="docx", api=api)
        api.list.assert_not_called()

    def test_invalid_id(self) -> None:
        with pytest.raises(InvalidVideoId):
            extract("https://vimeo.com/12345", api=MagicMock())


# ---------------------------------------------------------------------------
# Integration tests (require network)
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestIntegration:
    """
    Integration tests that hit YouTube's servers.

    Run with:  pytest -m integration
    Deselected by default; use the marker to opt in.  Cloud IPs are often
    blocked by YouTube, so these may fail with RequestBlocked in CI.
    """

    # "Never Gonna Give You Up" is one of the most stable videos on YouTube,
    # virtually guaranteed to have English captions.
    VIDEO_ID = "dQw4w9WgXcQ"

    def test_extract_text(self) -> None:
        """Fetching a real video in text format returns non-empty text."""
        result = extract(self.VIDEO_ID, fmt="text")
        assert isinstance(result, str)
        assert len(result) > 100

    def test_get_info(self) -> None:
        info = YouTubeTranscriptApi().get_info(self.VIDEO_ID)
        assert info["has_subtitles"] is True
        assert any(language["code"].startswith("en") for language in info["languages"])
