"""
fetcher.py — Resolve a video ID into its caption catalog.

The lookup is a fixed sequence of steps:

    fetch watch page -> (maybe) accept consent -> fetch watch page again
      -> extract API key -> POST player request -> check playability
      -> build TranscriptList

If YouTube decides the caller is a bot, the whole sequence is retried from
the top as often as the proxy configuration allows.  With a rotating proxy
each attempt most likely leaves through a different exit IP.  Nothing else
is retried and there is no backoff between attempts.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any

from yt_transcript_scraper.errors import (
    FailedToCreateConsentCookie,
    IpBlocked,
    RequestBlocked,
    TranscriptsDisabled,
    YouTubeDataUnparsable,
)
from yt_transcript_scraper.http_client import HttpClient, send_checked
from yt_transcript_scraper.playability import assert_playability
from yt_transcript_scraper.settings import (
    CONSENT_COOKIE_DOMAIN,
    CONSENT_COOKIE_NAME,
    CONSENT_FORM_MARKER,
    INNERTUBE_CONTEXT,
    RECAPTCHA_MARKER,
    format_innertube_url,
    format_watch_url,
)
from yt_transcript_scraper.transcripts import TranscriptList

logger = logging.getLogger(__name__)

_API_KEY_RE = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')
_CONSENT_VALUE_RE = re.compile(r'name="v" value="(.*?)"')


class TranscriptListFetcher:
    """
    Builds TranscriptList objects through an HttpClient.

    The consent cookie is stored on the client's session, so one fetcher
    (or one client) should not run lookups concurrently.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http_client = http_client

    def fetch(self, video_id: str) -> TranscriptList:
        """
        Look up every caption track available for a video.

        Args:
            video_id: The 11-character video ID.

        Returns:
            A TranscriptList for the video.

        Raises:
            RequestBlocked / IpBlocked: YouTube kept blocking us after the
                retry budget was used up.  The message reflects the proxy
                configuration in use.
            CouldNotRetrieveTranscript: Any other failure, on first occurrence.
        """
        captions_json = self._fetch_captions_json(video_id)
        return TranscriptList.build(self._http_client, video_id, captions_json)

    def _fetch_captions_json(self, video_id: str) -> dict[str, Any]:
        retries = self._http_client.retries_when_blocked
        attempt = 0
        while True:
            try:
                return self._resolve_captions_json(video_id)
            except RequestBlocked as exc:
                if attempt + 1 < retries:
                    attempt += 1
                    logger.info(
                        "Request for %s was blocked, retrying (attempt %d of %d)",
                        video_id,
                        attempt + 1,
                        retries,
                    )
                    continue
                raise exc.with_proxy_config(self._http_client.proxy_config) from None

    def _resolve_captions_json(self, video_id: str) -> dict[str, Any]:
        page = self._fetch_video_html(video_id)
        api_key = self._extract_innertube_api_key(page, video_id)
        innertube_data = self._fetch_innertube_data(video_id, api_key)
        return self._extract_captions_json(innertube_data, video_id)

    # ------------------------------------------------------------------
    # Watch page and consent handshake
    # ------------------------------------------------------------------

    def _fetch_video_html(self, video_id: str) -> str:
        page = self._fetch_html(video_id)
        if CONSENT_FORM_MARKER not in page:
            return page

        logger.info("Consent wall served for %s, accepting it", video_id)
        self._create_consent_cookie(page, video_id)
        page = self._fetch_html(video_id)
        if CONSENT_FORM_MARKER in page:
            raise FailedToCreateConsentCookie(video_id)
        return page

    def _create_consent_cookie(self, page: str, video_id: str) -> None:
        match = _CONSENT_VALUE_RE.search(page)
        if match is None:
            raise FailedToCreateConsentCookie(video_id)
        self._http_client.set_cookie(
            CONSENT_COOKIE_NAME,
            f"YES+{match.group(1)}",
            CONSENT_COOKIE_DOMAIN,
        )

    def _fetch_html(self, video_id: str) -> str:
        response = send_checked(video_id, self._http_client.get, format_watch_url(video_id))
        return html.unescape(response.text)

    # ------------------------------------------------------------------
    # Player API
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_innertube_api_key(page: str, video_id: str) -> str:
        match = _API_KEY_RE.search(page)
        if match is not None:
            return match.group(1)
        if RECAPTCHA_MARKER in page:
            raise IpBlocked(video_id)
        raise YouTubeDataUnparsable(video_id)

    def _fetch_innertube_data(self, video_id: str, api_key: str) -> dict[str, Any]:
        logger.debug("Requesting player data for %s", video_id)
        response = send_checked(
            video_id,
            self._http_client.post,
            format_innertube_url(api_key),
            {"context": INNERTUBE_CONTEXT, "videoId": video_id},
        )
        try:
            data = response.json()
        except ValueError:
            raise YouTubeDataUnparsable(video_id) from None
        if not isinstance(data, dict):
            raise YouTubeDataUnparsable(video_id)
        return data

    @staticmethod
    def _extract_captions_json(innertube_data: dict[str, Any], video_id: str) -> dict[str, Any]:
        assert_playability(innertube_data.get("playabilityStatus") or {}, video_id)

        captions_json = (innertube_data.get("captions") or {}).get("playerCaptionsTracklistRenderer")
        if not captions_json or not captions_json.get("captionTracks"):
            raise TranscriptsDisabled(video_id)
        return captions_json
