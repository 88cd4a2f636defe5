"""Saved per-authority request defaults.

Sessions live in ``$XDG_DATA_HOME/get/sessions.json`` (``~/.local/share``
when XDG_DATA_HOME is unset), keyed by URL authority::

    {
      "api.example.com": {
        "headers": {"Authorization": ["Bearer abc"]},
        "scheme": "https"
      },
      "localhost:8080": {"scheme": "http"}
    }
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from getcli.errors import SessionError
from getcli.types import Scheme

logger = logging.getLogger(__name__)

SESSIONS_FILENAME = "sessions.json"


class Session(BaseModel):
    """A saved set of configuration for making requests against an authority."""

    headers: dict[str, list[str]] | None = None
    """Default headers; a header can have more than one value."""

    scheme: Scheme | None = None
    """Scheme to use when the URL does not give one."""

    @classmethod
    def load(cls, authority: str, path: Path | None = None) -> "Session | None":
        """Load the session saved for ``authority``, if any."""
        return SessionStore.load(path).get(authority)

    def header_items(self) -> list[tuple[str, str]]:
        """Flatten the headers into (name, value) pairs."""
        if not self.headers:
            return []
        return [(name, value) for name, values in self.headers.items() for value in values]


class SessionStore(BaseModel):
    """A map of URL authorities to their sessions."""

    sessions: dict[str, Session] = Field(default_factory=dict)

    def get(self, authority: str) -> Session | None:
        return self.sessions.get(authority)

    @classmethod
    def load(cls, path: Path | None = None) -> "SessionStore":
        """Load the session store.

        Args:
            path: Sessions file, defaults to the XDG data location

        Returns:
            The store, empty when the file does not exist

        Raises:
            SessionError: If the file cannot be read or parsed
        """
        if path is None:
            path = get_data_home() / "get" / SESSIONS_FILENAME

        try:
            raw = path.read_text()
        except FileNotFoundError:
            logger.debug(f"No session store at {path}")
            return cls()
        except OSError as e:
            raise SessionError(f"Failed to open session store {path}: {e}") from e

        try:
            store = cls(sessions=json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise SessionError(f"Failed to parse session store {path}: {e}") from e

        logger.debug(f"Loaded {len(store.sessions)} session(s) from {path}")
        return store


def get_data_home() -> Path:
    """Get the XDG data directory."""
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home)
    return Path.home() / ".local" / "share"
