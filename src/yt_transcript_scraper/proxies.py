"""
proxies.py — Proxy configurations for the HTTP transport.

YouTube blocks most cloud-provider IPs, so serious use of a scraping client
goes through proxies.  Two kinds are supported and the set is closed: a
plain HTTP/HTTPS proxy pair, and Webshare's rotating residential pool.
Each config tells the transport three things: which proxy URLs to use,
whether to avoid keep-alive (so a rotating pool hands out a fresh IP per
request), and how often a blocked catalog lookup may be retried.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import ClassVar, Literal, Mapping, Sequence

from yt_transcript_scraper.errors import InvalidProxyConfig

ProxyKind = Literal["generic", "webshare"]


class ProxyConfig(ABC):
    """Common interface consumed by HttpClient and by blocked-error rendering."""

    kind: ClassVar[ProxyKind]

    @abstractmethod
    def to_requests_dict(self) -> dict[str, str]:
        """Return a `{"http": url, "https": url}` mapping for requests."""

    @property
    def prevent_keeping_connections_alive(self) -> bool:
        return False

    @property
    def retries_when_blocked(self) -> int:
        return 0


class GenericProxyConfig(ProxyConfig):
    """
    Route requests through an arbitrary HTTP/HTTPS proxy.

    If only one of the two URLs is given, it is used for both schemes.

    Raises:
        InvalidProxyConfig: If neither URL is given.
    """

    kind: ClassVar[ProxyKind] = "generic"

    def __init__(self, http_url: str | None = None, https_url: str | None = None) -> None:
        if not http_url and not https_url:
            raise InvalidProxyConfig(
                "GenericProxyConfig requires you to define at least one of the two: "
                "http or https"
            )
        self.http_url = http_url
        self.https_url = https_url

    def to_requests_dict(self) -> dict[str, str]:
        return {
            "http": self.http_url or self.https_url,
            "https": self.https_url or self.http_url,
        }


class WebshareProxyConfig(ProxyConfig):
    """
    Rotating residential proxies from Webshare (https://www.webshare.io).

    The rotating endpoint assigns a new exit IP per connection, so keep-alive
    is disabled and blocked lookups are retried (10 times by default);
    each retry most likely leaves through a different IP.

    Args:
        proxy_username:       "Proxy Username" from the Webshare dashboard.
        proxy_password:       "Proxy Password" from the Webshare dashboard.
        filter_ip_locations:  Country codes (e.g. ["de", "us"]) restricting
                              the exit IPs; empty means any location.
        retries_when_blocked: How often a blocked lookup is retried.
        domain_name:          Override for the proxy host.
        proxy_port:           Override for the proxy port.
    """

    kind: ClassVar[ProxyKind] = "webshare"

    DEFAULT_DOMAIN_NAME = "p.webshare.io"
    DEFAULT_PORT = 80

    def __init__(
        self,
        proxy_username: str,
        proxy_password: str,
        filter_ip_locations: Sequence[str] = (),
        retries_when_blocked: int = 10,
        domain_name: str = DEFAULT_DOMAIN_NAME,
        proxy_port: int = DEFAULT_PORT,
    ) -> None:
        if not proxy_username or not proxy_password:
            raise InvalidProxyConfig(
                "WebshareProxyConfig requires both a proxy username and a proxy password"
            )
        if retries_when_blocked < 0:
            raise InvalidProxyConfig(
                f"retries_when_blocked must not be negative, got {retries_when_blocked}"
            )
        self.proxy_username = proxy_username
        self.proxy_password = proxy_password
        self.domain_name = domain_name
        self.proxy_port = proxy_port
        self._filter_ip_locations = tuple(filter_ip_locations)
        self._retries_when_blocked = retries_when_blocked

    @property
    def url(self) -> str:
        location_codes = "".join(f"-{code.upper()}" for code in self._filter_ip_locations)
        return (
            f"http://{self.proxy_username}{location_codes}-rotate:{self.proxy_password}"
            f"@{self.domain_name}:{self.proxy_port}/"
        )

    def to_requests_dict(self) -> dict[str, str]:
        return {"http": self.url, "https": self.url}

    @property
    def prevent_keeping_connections_alive(self) -> bool:
        return True

    @property
    def retries_when_blocked(self) -> int:
        return self._retries_when_blocked


# ---------------------------------------------------------------------------
# Environment-driven configuration (used by the HTTP service)
# ---------------------------------------------------------------------------

ENV_WEBSHARE_USERNAME = "YT_TRANSCRIPT_WEBSHARE_USERNAME"
ENV_WEBSHARE_PASSWORD = "YT_TRANSCRIPT_WEBSHARE_PASSWORD"
ENV_WEBSHARE_LOCATIONS = "YT_TRANSCRIPT_WEBSHARE_LOCATIONS"
ENV_WEBSHARE_RETRIES = "YT_TRANSCRIPT_WEBSHARE_RETRIES"
ENV_HTTP_PROXY = "YT_TRANSCRIPT_HTTP_PROXY"
ENV_HTTPS_PROXY = "YT_TRANSCRIPT_HTTPS_PROXY"


def proxy_config_from_env(environ: Mapping[str, str] | None = None) -> ProxyConfig | None:
    """
    Build a proxy configuration from YT_TRANSCRIPT_* environment variables.

    Webshare credentials take precedence over a generic proxy URL when both
    are present.

    Args:
        environ: Mapping to read from; defaults to os.environ.

    Returns:
        A ProxyConfig, or None when no proxy variables are set.

    Raises:
        InvalidProxyConfig: If the variables are set but inconsistent
            (e.g. a username without a password, a non-numeric retry count).
    """
    env = os.environ if environ is None else environ

    username = env.get(ENV_WEBSHARE_USERNAME, "")
    password = env.get(ENV_WEBSHARE_PASSWORD, "")
    if username or password:
        locations = [
            code.strip()
            for code in env.get(ENV_WEBSHARE_LOCATIONS, "").split(",")
            if code.strip()
        ]
        raw_retries = env.get(ENV_WEBSHARE_RETRIES, "10")
        try:
            retries = int(raw_retries)
        except ValueError:
            raise InvalidProxyConfig(
                f"{ENV_WEBSHARE_RETRIES} must be an integer, got {raw_retries!r}"
            ) from None
        return WebshareProxyConfig(
            proxy_username=username,
            proxy_password=password,
            filter_ip_locations=locations,
            retries_when_blocked=retries,
        )

    http_url = env.get(ENV_HTTP_PROXY)
    https_url = env.get(ENV_HTTPS_PROXY)
    if http_url or https_url:
        return GenericProxyConfig(http_url=http_url, https_url=https_url)

    return None
