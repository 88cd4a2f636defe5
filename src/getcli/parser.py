"""Request component grammar.

Each command-line token is classified as a query parameter, a header or a
JSON body fragment. The grammar is a PEG, so alternatives are ordered and the
first one that matches wins:

    id==1                 query parameter
    name=john             body fragment, string value
    tags[]=a              body fragment, appended to an array
    user[address].zip=1   body fragment, nested path
    age:=29               body fragment, raw JSON value
    Accept:text/plain     header

Query parameters come first so that ``==`` is never read as an assignment,
and body fragments come before headers so that ``name:=value`` is raw JSON
rather than a header named ``name`` with the value ``=value``.
"""

import logging
from collections.abc import Iterable
from typing import Any, TypeAlias

import attrs
from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from getcli.errors import ClassificationError

logger = logging.getLogger(__name__)

COMPONENT_GRAMMAR = Grammar(
    r"""
    component     = query / body / header

    query         = query_key "==" rest
    query_key     = ~"[^=]+"

    body          = path assign value
    path          = accessor*
    accessor      = array_index / object_key / array_append
    array_index   = bracket_index / dotted_index / index
    bracket_index = "[" index "]"
    dotted_index  = "." index
    object_key    = bracket_key / dotted_key / bare_key
    bracket_key   = "[" ~"[^]]+" "]"
    dotted_key    = "." bare_key
    bare_key      = ~"[^.=:[]+"
    array_append  = "[]"
    assign        = ":=" / "="
    value         = ~".*"s

    header        = header_name ":" rest
    header_name   = ~"[A-Za-z0-9_-]+"

    rest          = ~".+"s

    # A decimal run from 0 to 2**32-1 that is not followed by another digit.
    # Longer runs fail here and are read as object keys instead.
    index         = ~"0*(?:[0-9]{1,9}|[1-3][0-9]{9}|4[01][0-9]{8}|42[0-8][0-9]{7}|429[0-3][0-9]{6}|4294[0-8][0-9]{5}|42949[0-5][0-9]{4}|429496[0-6][0-9]{3}|4294967[01][0-9]{2}|42949672[0-8][0-9]|429496729[0-5])(?![0-9])"
    """
)


@attrs.frozen
class ObjectKey:
    """Navigate to (or create) an object member."""

    name: str


@attrs.frozen
class ArrayIndex:
    """Navigate to (or create) the array element at a fixed position."""

    index: int


@attrs.frozen
class ArrayAppend:
    """Create a new element at the end of an array.

    The position is only known when the fragment is applied to the tree.
    """


PathAccessor: TypeAlias = ObjectKey | ArrayIndex | ArrayAppend


@attrs.frozen
class QueryParam:
    name: str
    value: str


@attrs.frozen
class Header:
    name: str
    value: str


@attrs.frozen
class LiteralBody:
    """Body fragment whose value is inserted as a JSON string."""

    path: tuple[PathAccessor, ...] = attrs.field(converter=tuple)
    value: str


@attrs.frozen
class RawBody:
    """Body fragment whose value is JSON text inserted verbatim."""

    path: tuple[PathAccessor, ...] = attrs.field(converter=tuple)
    value: str


BodyFragment: TypeAlias = LiteralBody | RawBody
RequestComponent: TypeAlias = QueryParam | Header | BodyFragment


class ComponentVisitor(NodeVisitor):
    """Turn a ``component`` parse tree into a request component."""

    grammar = COMPONENT_GRAMMAR

    def visit_component(self, node: Node, visited_children: list[Any]) -> RequestComponent:
        (component,) = visited_children
        return component  # type: ignore[no-any-return]

    def visit_query(self, node: Node, visited_children: list[Any]) -> QueryParam:
        name, _, value = visited_children
        return QueryParam(name, value)

    def visit_header(self, node: Node, visited_children: list[Any]) -> Header:
        name, _, value = visited_children
        return Header(name, value)

    def visit_body(self, node: Node, visited_children: list[Any]) -> BodyFragment:
        path, assign, value = visited_children
        if assign == ":=":
            return RawBody(path, value)
        return LiteralBody(path, value)

    def visit_path(self, node: Node, visited_children: list[Any]) -> list[PathAccessor]:
        return list(visited_children)

    def visit_accessor(self, node: Node, visited_children: list[Any]) -> PathAccessor:
        (accessor,) = visited_children
        return accessor  # type: ignore[no-any-return]

    def visit_array_index(self, node: Node, visited_children: list[Any]) -> ArrayIndex:
        (digits,) = visited_children
        return ArrayIndex(int(digits))

    def visit_bracket_index(self, node: Node, visited_children: list[Any]) -> str:
        return node.text[1:-1]

    def visit_dotted_index(self, node: Node, visited_children: list[Any]) -> str:
        return node.text[1:]

    def visit_object_key(self, node: Node, visited_children: list[Any]) -> ObjectKey:
        (name,) = visited_children
        return ObjectKey(name)

    def visit_bracket_key(self, node: Node, visited_children: list[Any]) -> str:
        return node.text[1:-1]

    def visit_dotted_key(self, node: Node, visited_children: list[Any]) -> str:
        return node.text[1:]

    def visit_array_append(self, node: Node, visited_children: list[Any]) -> ArrayAppend:
        return ArrayAppend()

    def visit_query_key(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_header_name(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_bare_key(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_index(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_assign(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_value(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def visit_rest(self, node: Node, visited_children: list[Any]) -> str:
        return node.text

    def generic_visit(self, node: Node, visited_children: list[Any]) -> Any:
        return visited_children or node


_visitor = ComponentVisitor()


def parse_component(token: str) -> RequestComponent:
    """Classify a single command-line token.

    Args:
        token: One shell token, e.g. ``foo[bar]=baz``

    Returns:
        The query parameter, header or body fragment the token describes

    Raises:
        ClassificationError: If no alternative consumes the whole token
    """
    try:
        tree = COMPONENT_GRAMMAR.parse(token)
    except ParseError as e:
        raise ClassificationError(token) from e

    component: RequestComponent = _visitor.visit(tree)
    logger.debug(f"Parsed {token!r} as {component!r}")
    return component


@attrs.define
class ParsedRequest:
    """Components of one invocation, grouped by kind in input order."""

    query: list[tuple[str, str]] = attrs.field(factory=list)
    headers: list[tuple[str, str]] = attrs.field(factory=list)
    body: list[BodyFragment] = attrs.field(factory=list)

    @classmethod
    def from_inputs(cls, tokens: Iterable[str]) -> "ParsedRequest":
        """Parse every token, failing on the first invalid one."""
        parsed = cls()
        for token in tokens:
            component = parse_component(token)
            if isinstance(component, QueryParam):
                parsed.query.append((component.name, component.value))
            elif isinstance(component, Header):
                parsed.headers.append((component.name, component.value))
            else:
                parsed.body.append(component)
        return parsed
