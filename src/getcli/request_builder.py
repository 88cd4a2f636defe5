"""Assemble an HTTP request from user input and stored sessions."""

import logging
import re
from collections.abc import Sequence

import httpx

from getcli.config import GetConfig
from getcli.errors import ConflictingBodyError, HeaderEncodingError
from getcli.json_builder import build
from getcli.parser import BodyFragment
from getcli.session import Session, SessionStore
from getcli.url_builder import URLBuilder

logger = logging.getLogger(__name__)

# RFC 7230 token characters
HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

# Tab, space and visible ASCII
HEADER_VALUE_RE = re.compile(r"[\t\x20-\x7e]*")


def validate_header(name: str, value: str) -> None:
    """Check that a header can be sent as-is.

    Raises:
        HeaderEncodingError: If the name is not a token or the value holds
            characters outside tab and visible ASCII
    """
    if not HEADER_NAME_RE.fullmatch(name):
        raise HeaderEncodingError(name, value, "name is not a valid token")
    if not HEADER_VALUE_RE.fullmatch(value):
        raise HeaderEncodingError(name, value, "value contains characters that cannot be sent")


def get_scheme(hostname: str, session: Session, http_hostnames: Sequence[str]) -> str:
    """Pick the scheme for a URL typed without one."""
    if session.scheme:
        return session.scheme
    if hostname in http_hostnames:
        return "http"
    return "https"


class RequestBuilder:
    """Builds an httpx request from a partial URL, a session and parsed components.

    Headers are kept as an ordered list of (name, value) pairs so that a name
    can carry several values and keeps the casing the user typed.
    """

    def __init__(self, url: URLBuilder, headers: list[tuple[str, str]] | None = None) -> None:
        self.url = url
        self.headers: list[tuple[str, str]] = headers if headers is not None else []
        self.body: str | None = None

    @classmethod
    def from_input(cls, url: str, config: GetConfig, sessions: SessionStore | None = None) -> "RequestBuilder":
        """Create a request builder from a URL and configuration.

        Args:
            url: URL as typed by the user
            config: Loaded configuration
            sessions: Session store, loaded from disk when omitted

        Returns:
            Builder seeded with the Host header and the session's headers
        """
        url_builder = URLBuilder.from_input(url, config.fallback_hostname)
        authority = url_builder.authority()

        if sessions is None:
            sessions = SessionStore.load()
        session = sessions.get(authority)
        if session is None:
            session = Session()
        else:
            logger.debug(f"Using saved session for {authority}")

        if url_builder.scheme is None:
            url_builder.scheme = get_scheme(url_builder.hostname or "", session, config.http_hostnames)

        builder = cls(url_builder, [("Host", authority)])
        for name, value in session.header_items():
            validate_header(name, value)
            builder.headers.append((name, value))

        return builder

    def add_query(self, query: list[tuple[str, str]]) -> "RequestBuilder":
        """Add the given query parameters to the request."""
        self.url.append_query(query)
        return self

    def merge_headers(self, headers: list[tuple[str, str]]) -> "RequestBuilder":
        """Merge the given headers into the request.

        Every existing value of a name given here is replaced; several values
        given for the same name are all kept.

        Raises:
            HeaderEncodingError: If a header cannot be sent
        """
        if not headers:
            return self

        for name, value in headers:
            validate_header(name, value)

        replaced = {name.lower() for name, _ in headers}
        kept = [(name, value) for name, value in self.headers if name.lower() not in replaced]
        self.headers = kept + list(headers)
        return self

    def has_header(self, name: str) -> bool:
        return any(existing.lower() == name.lower() for existing, _ in self.headers)

    def add_data(self, fragments: Sequence[BodyFragment], data: str | None = None) -> "RequestBuilder":
        """Set the request body from raw data or from body fragments.

        Raises:
            ConflictingBodyError: If both raw data and fragments are given
            RawValueSyntaxError: If a raw fragment is not valid JSON
            PathTypeConflictError: If fragments disagree on the document shape
        """
        if data is not None and fragments:
            raise ConflictingBodyError("Cannot specify both data and body values")

        if data is not None:
            self.body = data

        if fragments:
            self.body = build(fragments)
            if not self.has_header("Content-Type"):
                self.headers.append(("Content-Type", "application/json"))

        return self

    def build_request(self, method: str) -> httpx.Request:
        """Build the request.

        Raises:
            URLError: If the URL is still incomplete
        """
        return httpx.Request(method.upper(), self.url.build(), headers=self.headers, content=self.body)

    def send(self, method: str, client: httpx.Client) -> httpx.Response:
        """Send the request with ``client``."""
        request = self.build_request(method)
        logger.debug(f"Sending {request.method} {request.url}")
        return client.send(request)
