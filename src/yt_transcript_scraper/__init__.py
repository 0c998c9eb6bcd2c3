"""
yt_transcript_scraper — Fetch YouTube video transcripts without an API key.

Public API:
    extract()               High-level one-call interface (URL → formatted output).
    get_transcript()        Pick, optionally translate, and fetch one track.
    parse_video_id()        Parse a YouTube URL or validate a bare video ID.
    YouTubeTranscriptApi    Facade: list(), fetch(), get_info(), get_subtitles(), get_text().
    TranscriptList          The caption catalog of one video.
    Transcript              A lazy handle to one caption track.
    FetchedTranscript       The snippets of a fetched track.
    load_formatter()        Look up a formatter by name (json, pretty, text, srt, webvtt).
    GenericProxyConfig      Route traffic through a plain HTTP/HTTPS proxy.
    WebshareProxyConfig     Route traffic through Webshare's rotating residential pool.

Exception hierarchy (all importable from this package):
    TranscriptError                   Base exception for all package errors.
    ├── InvalidProxyConfig            Proxy settings can't be used.
    └── CouldNotRetrieveTranscript    Any failure while resolving one video.
        ├── InvalidVideoId, VideoUnavailable, VideoUnplayable, AgeRestricted
        ├── TranscriptsDisabled, NoTranscriptFound, PoTokenRequired
        ├── NotTranslatable, TranslationLanguageNotAvailable
        ├── YouTubeRequestFailed, YouTubeDataUnparsable, FailedToCreateConsentCookie
        └── RequestBlocked
            └── IpBlocked

Usage:
    from yt_transcript_scraper import extract
    text = extract("https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    # SRT subtitles in German, falling back to English:
    srt = extract("dQw4w9WgXcQ", languages=["de", "en"], fmt="srt")
"""

from yt_transcript_scraper.errors import (
    AgeRestricted,
    CouldNotRetrieveTranscript,
    FailedToCreateConsentCookie,
    InvalidProxyConfig,
    InvalidVideoId,
    IpBlocked,
    NoTranscriptFound,
    NotTranslatable,
    PoTokenRequired,
    RequestBlocked,
    TranscriptError,
    TranscriptsDisabled,
    TranslationLanguageNotAvailable,
    VideoUnavailable,
    VideoUnplayable,
    YouTubeDataUnparsable,
    YouTubeRequestFailed,
)
from yt_transcript_scraper.extractor import (
    YouTubeTranscriptApi,
    extract,
    get_transcript,
    parse_video_id,
)
from yt_transcript_scraper.formatters import (
    Formatter,
    FormatterLoader,
    JSONFormatter,
    PrettyPrintFormatter,
    SRTFormatter,
    TextFormatter,
    UnknownFormatterType,
    WebVTTFormatter,
    load_formatter,
)
from yt_transcript_scraper.http_client import HttpClient
from yt_transcript_scraper.models import (
    FetchedTranscript,
    FetchedTranscriptSnippet,
    TranslationLanguage,
)
from yt_transcript_scraper.proxies import (
    GenericProxyConfig,
    ProxyConfig,
    WebshareProxyConfig,
    proxy_config_from_env,
)
from yt_transcript_scraper.transcripts import Transcript, TranscriptList

__all__ = [
    "extract",
    "get_transcript",
    "parse_video_id",
    "YouTubeTranscriptApi",
    "HttpClient",
    "Transcript",
    "TranscriptList",
    "FetchedTranscript",
    "FetchedTranscriptSnippet",
    "TranslationLanguage",
    "Formatter",
    "FormatterLoader",
    "JSONFormatter",
    "PrettyPrintFormatter",
    "TextFormatter",
    "SRTFormatter",
    "WebVTTFormatter",
    "load_formatter",
    "UnknownFormatterType",
    "ProxyConfig",
    "GenericProxyConfig",
    "WebshareProxyConfig",
    "proxy_config_from_env",
    "TranscriptError",
    "InvalidProxyConfig",
    "CouldNotRetrieveTranscript",
    "InvalidVideoId",
    "VideoUnavailable",
    "VideoUnplayable",
    "TranscriptsDisabled",
    "AgeRestricted",
    "PoTokenRequired",
    "NoTranscriptFound",
    "NotTranslatable",
    "TranslationLanguageNotAvailable",
    "YouTubeRequestFailed",
    "YouTubeDataUnparsable",
    "FailedToCreateConsentCookie",
    "RequestBlocked",
    "IpBlocked",
]
