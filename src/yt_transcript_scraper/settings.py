"""
settings.py — Fixed endpoints, markers, and defaults.

YouTube has no public captions API, so everything here describes the
internal surface we scrape: the watch page, the player endpoint that the
official apps call, and the page fragments that tell us which state the
watch page is in (consent wall, CAPTCHA, normal).
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
INNERTUBE_API_URL = "https://www.youtube.com/youtubei/v1/player?key={api_key}"

# The player endpoint answers differently depending on which client it
# thinks is calling.  The ANDROID client returns caption tracks without
# requiring a proof-of-origin token for most videos.
INNERTUBE_CONTEXT: dict[str, dict[str, str]] = {
    "client": {
        "clientName": "ANDROID",
        "clientVersion": "20.10.38",
    },
}

# ---------------------------------------------------------------------------
# Page markers
# ---------------------------------------------------------------------------

CONSENT_FORM_MARKER = 'action="https://consent.youtube.com/s"'
CONSENT_COOKIE_NAME = "CONSENT"
CONSENT_COOKIE_DOMAIN = ".youtube.com"
RECAPTCHA_MARKER = 'class="g-recaptcha"'

# Caption URLs carrying this parameter need a PO token we can't produce.
PO_TOKEN_URL_MARKER = "&exp=xpe"

# Forces the classic <transcript><text .../></transcript> dialect.
SRV3_FORMAT_PARAM = "&fmt=srv3"

# ---------------------------------------------------------------------------
# Transport defaults
# ---------------------------------------------------------------------------

DEFAULT_TIMEOUT_SECS = 30.0
DEFAULT_HEADERS: dict[str, str] = {
    "Accept-Language": "en-US",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}

DEFAULT_LANGUAGES: tuple[str, ...] = ("en",)


def format_watch_url(video_id: str) -> str:
    """Return the public watch-page URL for a video ID."""
    return WATCH_URL.format(video_id=video_id)


def format_innertube_url(api_key: str) -> str:
    return INNERTUBE_API_URL.format(api_key=api_key)
