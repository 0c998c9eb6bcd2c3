"""
extractor.py — High-level interface for fetching YouTube transcripts.

Everything here is built from the catalog, fetcher and formatter
primitives:

    1. Parsing YouTube URLs / IDs   → parse_video_id()
    2. The facade over one client   → YouTubeTranscriptApi
    3. Picking and fetching a track → get_transcript()
    4. One-call convenience         → extract()

Only single-video lookups are supported (no playlists, no fan-out).
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Sequence

from yt_transcript_scraper.errors import InvalidVideoId
from yt_transcript_scraper.fetcher import TranscriptListFetcher
from yt_transcript_scraper.formatters import load_formatter
from yt_transcript_scraper.http_client import HttpClient
from yt_transcript_scraper.models import FetchedTranscript
from yt_transcript_scraper.proxies import ProxyConfig
from yt_transcript_scraper.settings import DEFAULT_LANGUAGES
from yt_transcript_scraper.transcripts import Transcript, TranscriptList

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Regex patterns that cover the most common YouTube URL shapes:
#   - https://www.youtube.com/watch?v=VIDEO_ID
#   - https://youtu.be/VIDEO_ID
#   - https://www.youtube.com/embed/VIDEO_ID
#   - https://www.youtube.com/shorts/VIDEO_ID
#   - https://www.youtube.com/v/VIDEO_ID
# Each pattern captures the 11-character video ID in group "id".
_URL_PATTERNS: list[re.Pattern[str]] = [
    # Standard watch URL; the ID sits in the "v" query parameter
    re.compile(
        r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:.*&)?v=(?P<id>[A-Za-z0-9_-]{11})"
    ),
    # Short share URL; ID is the path segment right after the domain
    re.compile(r"(?:https?://)?youtu\.be/(?P<id>[A-Za-z0-9_-]{11})"),
    # Embed / shorts / old "v/" URLs; ID follows the path prefix
    re.compile(
        r"(?:https?://)?(?:www\.|m\.)?youtube\.com/(?:embed|shorts|v)/(?P<id>[A-Za-z0-9_-]{11})"
    ),
]

# A bare video ID is exactly 11 characters from the base64url alphabet.
_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")


# ---------------------------------------------------------------------------
# URL / ID parsing
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    Accepts all common YouTube URL formats (watch, short, embed, shorts, v/)
    as well as a bare 11-character ID string.

    Args:
        url_or_id: A YouTube URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoId: If the string doesn't match any known format.
    """
    url_or_id = url_or_id.strip()

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group("id")

    if _BARE_ID_PATTERN.match(url_or_id):
        return url_or_id

    raise InvalidVideoId(url_or_id)


# ---------------------------------------------------------------------------
# Facade
# ---------------------------------------------------------------------------

class YouTubeTranscriptApi:
    """
    Entry point for transcript lookups.

    Each instance owns one HttpClient, and with it one cookie jar.  It is
    not safe to share an instance between threads: create one per thread.

    All methods take a bare video ID, not a URL (see parse_video_id()).

    Args:
        proxy_config: Route all requests through this proxy setup.
        http_client:  Use this transport instead of building one; when given,
                      `proxy_config` is ignored.
    """

    def __init__(
        self,
        proxy_config: ProxyConfig | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        self._http_client = http_client if http_client is not None else HttpClient(proxy_config)
        self._fetcher = TranscriptListFetcher(self._http_client)

    def list(self, video_id: str) -> TranscriptList:
        """Return the catalog of caption tracks for a video."""
        return self._fetcher.fetch(video_id)

    def fetch(
        self,
        video_id: str,
        languages: Iterable[str] = DEFAULT_LANGUAGES,
        preserve_formatting: bool = False,
    ) -> FetchedTranscript:
        """
        Fetch the best-matching transcript for a video.

        Shortcut for `list(video_id).find_transcript(languages).fetch(...)`.

        Args:
            video_id:            The 11-character video ID.
            languages:           Language codes in descending priority.
            preserve_formatting: Keep inline styling tags such as <b>.

        Raises:
            NoTranscriptFound:          None of the languages has a track.
            CouldNotRetrieveTranscript: Any other lookup failure.
        """
        return (
            self.list(video_id)
            .find_transcript(languages)
            .fetch(preserve_formatting=preserve_formatting)
        )

    def get_info(self, video_id: str) -> dict[str, Any]:
        """
        Summarize which caption tracks a video offers.

        Returns:
            A dict with keys video_id, has_subtitles and languages.  Each
            language entry has code, name, is_generated and is_translatable.
        """
        languages = [
            {
                "code": transcript.language_code,
                "name": transcript.language,
                "is_generated": transcript.is_generated,
                "is_translatable": transcript.is_translatable,
            }
            for transcript in self.list(video_id)
        ]
        return {
            "video_id": video_id,
            "has_subtitles": len(languages) > 0,
            "languages": languages,
        }

    def get_subtitles(self, video_id: str, lang: str = "en") -> list[dict]:
        """Return `{"text", "start", "duration"}` dicts in `lang`, falling back to English."""
        return self.fetch(video_id, languages=_with_english_fallback(lang)).to_raw_data()

    def get_text(self, video_id: str, lang: str = "en") -> str:
        """Return the transcript in `lang` (or English) as plain text, one snippet per line."""
        transcript = self.fetch(video_id, languages=_with_english_fallback(lang))
        return load_formatter("text").format_transcript(transcript)


def _with_english_fallback(lang: str) -> list[str]:
    return list(dict.fromkeys([lang, "en"]))


# ---------------------------------------------------------------------------
# Track selection
# ---------------------------------------------------------------------------

def _select_transcript(
    transcript_list: TranscriptList,
    languages: Sequence[str],
    exclude_generated: bool,
    exclude_manually_created: bool,
) -> Transcript:
    """Pick a track from a catalog, optionally restricted to one tier."""
    if exclude_generated:
        return transcript_list.find_manually_created_transcript(languages)
    if exclude_manually_created:
        return transcript_list.find_generated_transcript(languages)
    return transcript_list.find_transcript(languages)


def get_transcript(
    video_id: str,
    languages: Sequence[str] | None = None,
    *,
    translate: str | None = None,
    preserve_formatting: bool = False,
    exclude_generated: bool = False,
    exclude_manually_created: bool = False,
    api: YouTubeTranscriptApi | None = None,
) -> FetchedTranscript:
    """
    Fetch one transcript for a single YouTube video.

    Args:
        video_id:                 The 11-character video ID (NOT a full URL).
        languages:                Language codes in descending priority
                                  (e.g. ["de", "en"]).  Defaults to ["en"].
        translate:                Translate the chosen track into this
                                  language before fetching.
        preserve_formatting:      Keep inline styling tags such as <b>.
        exclude_generated:        Only consider manually created tracks.
        exclude_manually_created: Only consider auto-generated tracks.
        api:                      Facade to use; a fresh one by default.

    Returns:
        The FetchedTranscript.

    Raises:
        ValueError:                 Both tiers excluded.
        CouldNotRetrieveTranscript: (or subclass) on any lookup failure.
    """
    if exclude_generated and exclude_manually_created:
        raise ValueError("Excluding both generated and manually created transcripts leaves nothing")

    api = api if api is not None else YouTubeTranscriptApi()
    transcript = _select_transcript(
        api.list(video_id),
        list(languages) if languages else list(DEFAULT_LANGUAGES),
        exclude_generated,
        exclude_manually_created,
    )
    if translate:
        transcript = transcript.translate(translate)
    return transcript.fetch(preserve_formatting=preserve_formatting)


# ---------------------------------------------------------------------------
# High-level convenience function (main public API)
# ---------------------------------------------------------------------------

def extract(
    url_or_id: str,
    languages: Sequence[str] | None = None,
    fmt: str = "text",
    *,
    translate: str | None = None,
    preserve_formatting: bool = False,
    exclude_generated: bool = False,
    exclude_manually_created: bool = False,
    api: YouTubeTranscriptApi | None = None,
) -> str:
    """
    One-call interface: parse URL → fetch transcript → format output.

    This is the recommended entry point for most users.  It chains
    parse_video_id → get_transcript → load_formatter(fmt).

    Args:
        url_or_id: A YouTube URL or raw video ID.
        languages: Optional language priority list (e.g. ["de", "en"]).
        fmt:       One of "json", "pretty", "text", "webvtt", "srt".

    The remaining keyword arguments are those of get_transcript().

    Returns:
        The formatted transcript.

    Raises:
        UnknownFormatterType:       `fmt` isn't a known format (raised
                                    before any network traffic).
        InvalidVideoId:             `url_or_id` isn't a YouTube reference.
        ValueError:                 Both tiers excluded.
        CouldNotRetrieveTranscript: (or subclass) on any lookup failure.
    """
    formatter = load_formatter(fmt)
    video_id = parse_video_id(url_or_id)
    transcript = get_transcript(
        video_id,
        languages,
        translate=translate,
        preserve_formatting=preserve_formatting,
        exclude_generated=exclude_generated,
        exclude_manually_created=exclude_manually_created,
        api=api,
    )
    return formatter.format_transcript(transcript)
