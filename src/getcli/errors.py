"""Exceptions raised by getcli.

Every error is fatal to the invocation: library code raises, and only the
CLI catches and reports.
"""

from typing import Any


class GetError(Exception):
    """Base class for all getcli errors."""


class ClassificationError(GetError):
    """A token matched none of the query, body or header grammars."""

    def __init__(self, token: str) -> None:
        super().__init__("Invalid request component")
        self.token = token


class RawValueSyntaxError(GetError):
    """A raw (``:=``) body value is not valid JSON."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"Invalid JSON value {value!r}: {reason}")
        self.value = value
        self.reason = reason


class PathTypeConflictError(GetError):
    """A path accessor met a node of the wrong container type."""

    def __init__(self, expected: str, found: Any) -> None:
        super().__init__(f"Expected {expected} but found {json_type_name(found)}")
        self.expected = expected
        self.found = found


class HeaderEncodingError(GetError):
    """A header name or value cannot be transmitted."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid header {name!r}: {reason}")
        self.name = name
        self.value = value


class ConflictingBodyError(GetError):
    """Both raw data and body fragments were given."""


class URLError(GetError):
    """The URL could not be parsed or is missing a required part."""


class ConfigError(GetError):
    """The configuration file could not be read or validated."""


class SessionError(GetError):
    """The session store could not be read or validated."""


def json_type_name(value: Any) -> str:
    """Name the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    return "number"
