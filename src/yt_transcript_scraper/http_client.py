"""
http_client.py — The requests-backed transport used for all YouTube traffic.

Wraps a single requests.Session so that the consent cookie set during the
catalog lookup is sent on every later request, and so proxy settings and
default headers live in one place.

HttpClient itself knows nothing about videos.  Callers go through
send_checked(), passing the video ID that any resulting exception carries.

Not thread-safe: the consent handshake mutates the session's cookie jar in
place, so concurrent lookups sharing one client must serialize themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from yt_transcript_scraper.errors import IpBlocked, YouTubeRequestFailed
from yt_transcript_scraper.proxies import ProxyConfig
from yt_transcript_scraper.settings import DEFAULT_HEADERS, DEFAULT_TIMEOUT_SECS

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Transport collaborator for the fetcher and for Transcript.fetch().

    Args:
        proxy_config: Optional proxy setup; also supplies the retry budget
                      for blocked lookups.
        session:      Pre-built session to use instead of a fresh one.
        timeout:      Per-request timeout in seconds.
    """

    def __init__(
        self,
        proxy_config: ProxyConfig | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECS,
    ) -> None:
        self._session = session if session is not None else requests.Session()
        self._proxy_config = proxy_config
        self._timeout = timeout

        self._session.headers.update(DEFAULT_HEADERS)
        if proxy_config is not None:
            self._session.proxies.update(proxy_config.to_requests_dict())
            if proxy_config.prevent_keeping_connections_alive:
                self._session.headers.update({"Connection": "close"})

    @property
    def proxy_config(self) -> ProxyConfig | None:
        return self._proxy_config

    @property
    def retries_when_blocked(self) -> int:
        if self._proxy_config is None:
            return 0
        return self._proxy_config.retries_when_blocked

    @property
    def session(self) -> requests.Session:
        return self._session

    def get(self, url: str, headers: dict[str, str] | None = None) -> requests.Response:
        logger.debug("GET %s", _strip_query(url))
        return self._session.get(url, headers=headers, timeout=self._timeout)

    def post(
        self,
        url: str,
        json_body: Any,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        logger.debug("POST %s", _strip_query(url))
        return self._session.post(url, json=json_body, headers=headers, timeout=self._timeout)

    def set_cookie(self, name: str, value: str, domain: str) -> None:
        self._session.cookies.set(name, value, domain=domain)


def _strip_query(url: str) -> str:
    # Caption URLs carry signatures and the player URL carries the API key.
    return url.split("?", 1)[0]


# ---------------------------------------------------------------------------
# Response checking
# ---------------------------------------------------------------------------

def raise_http_errors(response: requests.Response, video_id: str) -> requests.Response:
    """
    Map an unsuccessful HTTP status to the library's exceptions.

    Raises:
        IpBlocked:            On HTTP 429.
        YouTubeRequestFailed: On any other status >= 400.
    """
    if response.status_code == 429:
        raise IpBlocked(video_id)
    if response.status_code >= 400:
        raise YouTubeRequestFailed(
            video_id,
            f"HTTP {response.status_code}: {response.reason}",
            status_code=response.status_code,
        )
    return response


def send_checked(
    video_id: str,
    send: Callable[..., requests.Response],
    *args: Any,
    **kwargs: Any,
) -> requests.Response:
    """
    Perform one transport call and check its outcome.

    Connection-level failures have no status code, so they surface as a
    YouTubeRequestFailed with `status_code` None.
    """
    try:
        response = send(*args, **kwargs)
    except requests.RequestException as exc:
        raise YouTubeRequestFailed(video_id, str(exc)) from exc
    return raise_http_errors(response, video_id)
