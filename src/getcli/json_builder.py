"""Fold body fragments into a single JSON document.

The document starts as ``null`` and every fragment is applied in input order.
A fragment's path both navigates and creates structure: ``null`` nodes are
promoted to an object or an array by the first accessor that reaches them,
and later fragments that disagree with that type are rejected.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from getcli.errors import PathTypeConflictError, RawValueSyntaxError
from getcli.parser import ArrayAppend, ArrayIndex, BodyFragment, LiteralBody, ObjectKey, PathAccessor, RawBody

logger = logging.getLogger(__name__)


def put_value(root: Any, path: Sequence[PathAccessor], value: Any) -> Any:
    """Place ``value`` at ``path`` inside ``root``.

    Containers are mutated in place. The return value is the new root, which
    differs from ``root`` when the path is empty or ``root`` was ``null``.

    Args:
        root: Decoded JSON value to write into
        path: Accessors leading from ``root`` to the target location
        value: Decoded JSON value to store

    Returns:
        The updated root

    Raises:
        PathTypeConflictError: If an accessor meets a node of the wrong type
    """
    if not path:
        return value

    accessor, remaining = path[0], path[1:]

    if isinstance(accessor, ObjectKey):
        if root is None:
            root = {}
        if not isinstance(root, dict):
            raise PathTypeConflictError("object", root)
        root[accessor.name] = put_value(root.get(accessor.name), remaining, value)
        return root

    if root is None:
        root = []
    if not isinstance(root, list):
        raise PathTypeConflictError("array", root)

    if isinstance(accessor, ArrayIndex):
        if accessor.index >= len(root):
            root.extend([None] * (accessor.index + 1 - len(root)))
        root[accessor.index] = put_value(root[accessor.index], remaining, value)
    elif isinstance(accessor, ArrayAppend):
        root.append(put_value(None, remaining, value))
    else:
        raise TypeError(f"Unknown path accessor: {accessor!r}")

    return root


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_fragment(fragment: BodyFragment) -> Any:
    """Return the decoded JSON value a fragment assigns.

    Raises:
        RawValueSyntaxError: If a raw fragment's value is not valid JSON
    """
    if isinstance(fragment, LiteralBody):
        return fragment.value
    if isinstance(fragment, RawBody):
        try:
            return json.loads(fragment.value, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise RawValueSyntaxError(fragment.value, str(e)) from e
    raise TypeError(f"Unknown body fragment: {fragment!r}")


def build(fragments: Iterable[BodyFragment]) -> str | None:
    """Fold fragments into one serialized JSON document.

    Args:
        fragments: Body fragments in the order they were given

    Returns:
        Compact JSON text, or None when there are no fragments
    """
    root: Any = None
    count = 0

    for fragment in fragments:
        root = put_value(root, fragment.path, decode_fragment(fragment))
        count += 1

    if not count:
        return None

    logger.debug(f"Built JSON body from {count} fragment(s)")
    return json.dumps(root, separators=(",", ":"), ensure_ascii=False)
