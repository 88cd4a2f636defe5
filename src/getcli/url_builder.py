"""Partial URL handling.

A URL typed on the command line may omit the scheme or even the hostname.
``URLBuilder`` keeps every part separately so that missing ones can be filled
in later from configuration and saved sessions.
"""

import logging
from urllib.parse import urlencode

import httpx

from getcli.errors import URLError

logger = logging.getLogger(__name__)


class URLBuilder:
    """A builder for URLs that allows reading and writing of URL parts."""

    def __init__(
        self,
        scheme: str | None = None,
        hostname: str | None = None,
        port: int | None = None,
        path: str | None = None,
        query: str | None = None,
    ) -> None:
        self.scheme = scheme
        self.hostname = hostname
        self.port = port
        self.path = path
        self.query = query

    @classmethod
    def from_input(cls, text: str, fallback_hostname: str) -> "URLBuilder":
        """Create a URL builder from user input.

        Accepted forms:
        - A complete URL, e.g. "https://example.com/foo?bar"
        - A port with an optional path, e.g. ":8080/foo?bar"
        - A URL with no scheme, e.g. "example.com/foo?bar"

        Only the first form sets the scheme.

        Args:
            text: URL as typed by the user
            fallback_hostname: Hostname used for the port-only form

        Raises:
            URLError: If the URL cannot be parsed or has no host
        """
        if text.startswith(("http://", "https://")):
            url = _parse(text)
            builder = cls(scheme=url.scheme)
        elif text.startswith(":"):
            url = _parse(f"https://{fallback_hostname}{text}")
            builder = cls()
        else:
            url = _parse(f"https://{text}")
            builder = cls()

        if not url.host:
            raise URLError(f"URL has no host: {text}")

        raw_path, _, _ = url.raw_path.decode("ascii").partition("?")
        # IDNA-encoded, so the hostname is always sendable in a Host header
        builder.hostname = url.raw_host.decode("ascii")
        builder.port = url.port
        builder.path = raw_path or "/"
        builder.query = url.query.decode("ascii") or None
        logger.debug(f"Parsed URL input {text!r} (scheme: {builder.scheme})")
        return builder

    def authority(self) -> str:
        """Return the URL authority, e.g. "example.com:8080".

        Raises:
            URLError: If the hostname is missing
        """
        if not self.hostname:
            raise URLError("hostname is required")

        host = f"[{self.hostname}]" if ":" in self.hostname else self.hostname
        if self.port is not None:
            return f"{host}:{self.port}"
        return host

    def append_query(self, pairs: list[tuple[str, str]]) -> None:
        """Form-encode ``pairs`` and append them to the query string."""
        if not pairs:
            return

        encoded = urlencode(pairs)
        if self.query:
            self.query = f"{self.query}&{encoded}"
        else:
            self.query = encoded

    def build(self) -> str:
        """Build the URL from its parts.

        Raises:
            URLError: If the scheme, hostname or path is missing
        """
        if not self.scheme:
            raise URLError("scheme is required")
        authority = self.authority()
        if self.path is None:
            raise URLError("path is required")

        query = f"?{self.query}" if self.query else ""
        return f"{self.scheme}://{authority}{self.path}{query}"


def _parse(text: str) -> httpx.URL:
    try:
        return httpx.URL(text)
    except httpx.InvalidURL as e:
        raise URLError(f"Invalid URL {text!r}: {e}") from e
