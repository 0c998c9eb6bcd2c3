"""
errors.py — Exception hierarchy for yt-transcript-scraper.

Every exception carries an `http_status` attribute so the FastAPI error
handler can translate library-level errors directly into the correct HTTP
response code without a separate mapping table.

Most failures of a scraping client are environmental (YouTube blocking the
caller, a consent wall, a video that vanished), so the messages are written
for a human: what most likely happened and what to do about it.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidProxyConfig (500)
    └── CouldNotRetrieveTranscript (500)
        ├── InvalidVideoId (400)
        ├── VideoUnavailable (404)
        ├── VideoUnplayable (403)
        ├── TranscriptsDisabled (404)
        ├── AgeRestricted (403)
        ├── PoTokenRequired (403)
        ├── NoTranscriptFound (404)
        ├── NotTranslatable (400)
        ├── TranslationLanguageNotAvailable (400)
        ├── YouTubeRequestFailed (502)
        ├── YouTubeDataUnparsable (502)
        ├── FailedToCreateConsentCookie (502)
        └── RequestBlocked (503)
            └── IpBlocked (503)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from yt_transcript_scraper.settings import format_watch_url

if TYPE_CHECKING:
    from yt_transcript_scraper.proxies import ProxyConfig


# ---------------------------------------------------------------------------
# Base exceptions
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for everything this package raises on purpose.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class InvalidProxyConfig(TranscriptError):
    """Raised synchronously when a proxy configuration can't be used."""

    def __init__(self, message: str) -> None:
        super().__init__(message, http_status=500)


_ISSUE_REFERRAL = (
    "\n\nIf you are sure that the described cause is not responsible for this "
    "error and that a transcript should be retrievable, please report it on the "
    "project's issue tracker. Include the version of yt-transcript-scraper you "
    "are using and the information needed to replicate the error, and check "
    "that no open issue already describes your problem!"
)


class CouldNotRetrieveTranscript(TranscriptError):
    """
    Base class for every failure that happens while resolving one video.

    Subclasses either set the class attribute CAUSE_MESSAGE or override the
    `cause` property when the explanation depends on instance data.  Any
    such data must be assigned before calling this __init__, because the
    final message is rendered exactly once, here.
    """

    CAUSE_MESSAGE = ""
    HTTP_STATUS = 500

    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(self._build_error_message(), http_status=self.HTTP_STATUS)

    @property
    def cause(self) -> str:
        return self.CAUSE_MESSAGE

    def _build_error_message(self) -> str:
        error_message = (
            f"\nCould not retrieve a transcript for the video "
            f"{format_watch_url(self.video_id)}!"
        )
        cause = self.cause
        if cause:
            error_message += f"\nThis is most likely caused by:\n\n{cause}{_ISSUE_REFERRAL}"
        return error_message


# ---------------------------------------------------------------------------
# Input and availability errors
# ---------------------------------------------------------------------------

class InvalidVideoId(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = (
        "You provided an invalid video id. Make sure you are using the video id "
        "and NOT the url!\n\n"
        'Do NOT run: `YouTubeTranscriptApi().fetch("https://www.youtube.com/watch?v=1234")`\n'
        'Instead run: `YouTubeTranscriptApi().fetch("1234")`'
    )
    HTTP_STATUS = 400


class VideoUnavailable(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "The video is no longer available"
    HTTP_STATUS = 404


class VideoUnplayable(CouldNotRetrieveTranscript):
    """
    Raised for any non-OK playability status we have no specific class for.

    Carries YouTube's own reason text plus the sub-reasons shown on the
    player's error screen, since those are usually the only hint as to why
    (region lock, members-only, premiere not started, ...).
    """

    HTTP_STATUS = 403

    def __init__(
        self,
        video_id: str,
        reason: str | None,
        sub_reasons: Sequence[str],
    ) -> None:
        self.reason = reason
        self.sub_reasons = list(sub_reasons)
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        reason = "No reason specified!" if self.reason is None else self.reason
        if self.sub_reasons:
            sub_reasons = "\n".join(f" - {sub_reason}" for sub_reason in self.sub_reasons)
            reason = f"{reason}\n\nAdditional Details:\n{sub_reasons}"
        return f"The video is unplayable for the following reason: {reason}"


class TranscriptsDisabled(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "Subtitles are disabled for this video"
    HTTP_STATUS = 404


class AgeRestricted(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = (
        "This video is age-restricted. Therefore, you are unable to retrieve "
        "transcripts for it without authenticating yourself.\n\n"
        "Authentication is not supported by this client."
    )
    HTTP_STATUS = 403


class PoTokenRequired(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = (
        "The requested video cannot be retrieved without a PO Token. If this "
        "happens, please open an issue!"
    )
    HTTP_STATUS = 403


# ---------------------------------------------------------------------------
# Language errors
# ---------------------------------------------------------------------------

class NoTranscriptFound(CouldNotRetrieveTranscript):
    """
    Raised when none of the requested language codes exist for the video.

    `transcript_data` is the rendered catalog, so the message tells the
    caller which languages *are* available.
    """

    HTTP_STATUS = 404

    def __init__(
        self,
        video_id: str,
        requested_language_codes: Sequence[str],
        transcript_data: object,
    ) -> None:
        self.requested_language_codes = list(requested_language_codes)
        self.transcript_data = transcript_data
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        codes = ", ".join(self.requested_language_codes)
        return (
            f"No transcripts were found for any of the requested language codes: "
            f"{codes}\n\n{self.transcript_data}"
        )


class NotTranslatable(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "The requested language is not translatable"
    HTTP_STATUS = 400


class TranslationLanguageNotAvailable(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "The requested translation language is not available"
    HTTP_STATUS = 400


# ---------------------------------------------------------------------------
# Setup errors
# ---------------------------------------------------------------------------

class YouTubeDataUnparsable(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = (
        "The data required to fetch the transcript is not parsable. This should "
        "not happen, please open an issue (make sure to include the video ID)!"
    )
    HTTP_STATUS = 502


class FailedToCreateConsentCookie(CouldNotRetrieveTranscript):
    CAUSE_MESSAGE = "Failed to automatically give consent to saving cookies"
    HTTP_STATUS = 502


# ---------------------------------------------------------------------------
# Transport and blocking errors
# ---------------------------------------------------------------------------

class YouTubeRequestFailed(CouldNotRetrieveTranscript):
    """
    Raised when a request to YouTube fails outright.

    `status_code` is the HTTP status when YouTube answered, or None when the
    connection itself failed (DNS, TLS, timeout, proxy refused, ...).
    """

    HTTP_STATUS = 502

    def __init__(self, video_id: str, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return f"Request to YouTube failed: {self.reason}"


_BLOCKED_BASE_CAUSE = (
    "YouTube is blocking requests from your IP. This usually is due to one of "
    "the following reasons:\n"
    "- You have done too many requests and your IP has been blocked by YouTube\n"
    "- You are doing requests from an IP belonging to a cloud provider (like "
    "AWS, Google Cloud Platform, Azure, etc.). Unfortunately, most IPs from "
    "cloud providers are blocked by YouTube.\n\n"
)

_WITH_GENERIC_PROXY_CAUSE = (
    "YouTube is blocking your requests, despite you using proxies. Keep in mind "
    "that a proxy is just a way to hide your real IP behind the IP of that "
    "proxy, but there is no guarantee that the IP of that proxy won't be "
    "blocked as well.\n\n"
    "The only truly reliable way to prevent IP blocks is rotating through a "
    "large pool of residential IPs, by using a provider like Webshare "
    "(https://www.webshare.io), which offers a pool of rotating residential "
    'IPs (make sure to purchase "Residential" proxies, NOT "Proxy Server" or '
    '"Static Residential"!). Pass a WebshareProxyConfig to use it.'
)

_WITH_WEBSHARE_PROXY_CAUSE = (
    "YouTube is blocking your requests, despite you using Webshare proxies. "
    'Please make sure that you have purchased "Residential" proxies and NOT '
    '"Proxy Server" or "Static Residential", as those won\'t work as '
    'reliably! The free tier also uses "Proxy Server" and will NOT work!\n\n'
    'The only reliable option is using "Residential" proxies (not "Static '
    'Residential"), as this allows you to rotate through a large pool of IPs, '
    "which means you will always find an IP that hasn't been blocked by "
    "YouTube yet!"
)


def render_blocked_cause(base_cause: str, proxy_config: ProxyConfig | None) -> str:
    """
    Pick the explanation for a blocked request given the proxy in use.

    Args:
        base_cause:   The cause text used when no proxy is configured.
        proxy_config: The proxy configuration the blocked requests went
                      through, or None.

    Returns:
        The cause paragraph to embed in the error message.
    """
    if proxy_config is None:
        return base_cause
    if proxy_config.kind == "webshare":
        return _WITH_WEBSHARE_PROXY_CAUSE
    return _WITH_GENERIC_PROXY_CAUSE


class RequestBlocked(CouldNotRetrieveTranscript):
    """
    Raised when YouTube refuses to serve the caller (bot detection).

    This is the only failure the fetcher retries.  Instances are immutable;
    `with_proxy_config()` produces a copy whose message explains the block
    in the light of the proxy setup that was used.
    """

    CAUSE_MESSAGE = (
        _BLOCKED_BASE_CAUSE
        + "There are two things you can do to work around this:\n"
        "1. Use proxies to hide your IP address (see GenericProxyConfig and "
        "WebshareProxyConfig).\n"
        "2. (NOT RECOMMENDED) If you authenticate your requests using cookies, "
        "you will be able to continue doing requests for a while. However, "
        "YouTube will eventually permanently ban the account that you have used "
        "to authenticate with! So only do this if you don't mind your account "
        "being banned!"
    )
    HTTP_STATUS = 503

    def __init__(self, video_id: str, proxy_config: ProxyConfig | None = None) -> None:
        self.proxy_config = proxy_config
        super().__init__(video_id)

    @property
    def cause(self) -> str:
        return render_blocked_cause(self.CAUSE_MESSAGE, self.proxy_config)

    def with_proxy_config(self, proxy_config: ProxyConfig | None) -> RequestBlocked:
        return type(self)(self.video_id, proxy_config=proxy_config)


class IpBlocked(RequestBlocked):
    """Raised on HTTP 429 or when the watch page serves a reCAPTCHA."""

    CAUSE_MESSAGE = (
        _BLOCKED_BASE_CAUSE
        + "Ways to work around this: route your requests through proxies "
        "(GenericProxyConfig), ideally rotating residential ones "
        "(WebshareProxyConfig).\n"
    )
