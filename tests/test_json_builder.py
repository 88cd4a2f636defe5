"""Tests for folding body fragments into a JSON document."""

import json

import pytest

from getcli.errors import PathTypeConflictError, RawValueSyntaxError
from getcli.json_builder import build, decode_fragment, put_value
from getcli.parser import ArrayAppend, ArrayIndex, LiteralBody, ObjectKey, RawBody, parse_component


def build_from(*tokens: str) -> str | None:
    """Parse body tokens and fold them in order."""
    fragments = []
    for token in tokens:
        fragment = parse_component(token)
        assert isinstance(fragment, (LiteralBody, RawBody))
        fragments.append(fragment)
    return build(fragments)


class TestPutValue:
    """Test suite for put_value."""

    def test_empty_path_replaces_root(self) -> None:
        """Test that an empty path overwrites the node wholesale."""
        assert put_value({"a": 1}, [], "x") == "x"

    def test_null_promoted_to_object(self) -> None:
        """Test that an object key turns null into an object."""
        assert put_value(None, [ObjectKey("a")], 1) == {"a": 1}

    def test_null_promoted_to_array(self) -> None:
        """Test that index and append accessors turn null into an array."""
        assert put_value(None, [ArrayIndex(0)], 1) == [1]
        assert put_value(None, [ArrayAppend()], 1) == [1]

    def test_mutates_in_place(self) -> None:
        """Test that existing containers are updated, not copied."""
        root: dict = {"a": {"b": 1}}
        result = put_value(root, [ObjectKey("a"), ObjectKey("c")], 2)

        assert result is root
        assert root == {"a": {"b": 1, "c": 2}}

    def test_sparse_index_padded_with_null(self) -> None:
        """Test that skipped array slots become null."""
        assert put_value([], [ArrayIndex(3)], "x") == [None, None, None, "x"]

    def test_index_within_bounds_overwrites(self) -> None:
        """Test writing to an existing array slot."""
        assert put_value(["a", "b"], [ArrayIndex(0)], "c") == ["c", "b"]

    def test_append_extends(self) -> None:
        """Test that append always adds a new element."""
        assert put_value(["a"], [ArrayAppend(), ObjectKey("k")], "v") == ["a", {"k": "v"}]

    def test_object_key_on_array_conflicts(self) -> None:
        """Test that an object key cannot address an array."""
        with pytest.raises(PathTypeConflictError) as exc_info:
            put_value([], [ObjectKey("a")], 1)

        assert exc_info.value.expected == "object"
        assert "Expected object but found array" in str(exc_info.value)

    @pytest.mark.parametrize("accessor", [ArrayIndex(0), ArrayAppend()])
    def test_array_accessor_on_object_conflicts(self, accessor: ArrayIndex | ArrayAppend) -> None:
        """Test that array accessors cannot address an object."""
        with pytest.raises(PathTypeConflictError) as exc_info:
            put_value({}, [accessor], 1)

        assert exc_info.value.expected == "array"

    def test_scalar_conflicts(self) -> None:
        """Test that scalars are never silently replaced by containers."""
        with pytest.raises(PathTypeConflictError) as exc_info:
            put_value("c", [ArrayAppend()], "e")

        assert exc_info.value.found == "c"
        assert "found string" in str(exc_info.value)


class TestDecodeFragment:
    """Test suite for decode_fragment."""

    def test_literal_is_string(self) -> None:
        """Test that literal values stay strings even when they look like JSON."""
        assert decode_fragment(LiteralBody([], "42")) == "42"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("1", 1), ("1.5", 1.5), ("true", True), ("null", None), ('"s"', "s"), ("[1,2]", [1, 2])],
    )
    def test_raw_values(self, text: str, expected: object) -> None:
        """Test every JSON value kind."""
        assert decode_fragment(RawBody([], text)) == expected

    @pytest.mark.parametrize("text", ["nope", "", "{", "NaN", "Infinity", "[1,]"])
    def test_invalid_raw_values(self, text: str) -> None:
        """Test that invalid or non-standard JSON is rejected."""
        with pytest.raises(RawValueSyntaxError) as exc_info:
            decode_fragment(RawBody([], text))

        assert exc_info.value.value == text

    def test_deeply_nested_raw_value(self) -> None:
        """Test that nesting too deep to decode is a syntax error."""
        text = "[" * 100_000

        with pytest.raises(RawValueSyntaxError) as exc_info:
            decode_fragment(RawBody([ObjectKey("a")], text))

        assert exc_info.value.value == text


class TestBuild:
    """Test suite for folding whole fragment lists."""

    def test_no_fragments(self) -> None:
        """Test that no fragments means no document."""
        assert build([]) is None

    def test_compact_serialization(self) -> None:
        """Test that output has no whitespace between tokens."""
        assert build_from("a=1", "b:=[1, 2]") == '{"a":"1","b":[1,2]}'

    def test_last_write_wins(self) -> None:
        """Test that later fragments overwrite earlier ones."""
        assert build_from("a[b]=c", "a[b]=d") == '{"a":{"b":"d"}}'

    def test_idempotent_literal(self) -> None:
        """Test that repeating a fragment changes nothing."""
        assert build_from("a[b][0]=c", "a[b][0]=c") == build_from("a[b][0]=c")

    def test_overwrite_replaces_subtree(self) -> None:
        """Test that writing a parent path drops its children."""
        assert build_from("a[b][c]=1", "a[b][d]=2", "a[b]=3") == '{"a":{"b":"3"}}'

    def test_sparse_array(self) -> None:
        """Test that unset leading slots are null."""
        assert build_from("[1]=foo") == '[null,"foo"]'

    def test_append_accumulates(self) -> None:
        """Test appends followed by fixed indices into the same array."""
        result = build_from("a[f][]=g", "a[f][1]=h", "a[f][2][i]=j")
        assert result == '{"a":{"f":["g","h",{"i":"j"}]}}'

    def test_mixed_nesting(self) -> None:
        """Test a deep path through arrays and objects."""
        assert build_from("[][foo][bar][][1][baz]=qux") == '[{"foo":{"bar":[[null,{"baz":"qux"}]]}}]'

    def test_raw_values(self) -> None:
        """Test raw JSON insertion."""
        assert build_from('foo:={"bar":"baz"}') == '{"foo":{"bar":"baz"}}'
        assert build_from("foo:=null") == '{"foo":null}'
        assert build_from("foo:=1") == '{"foo":1}'

    def test_raw_root_extended(self) -> None:
        """Test that a raw root document can be extended by later fragments."""
        assert build_from(":=[1,2]", "[]=3") == '[1,2,"3"]'

    def test_type_conflict(self) -> None:
        """Test that a string member cannot become an array."""
        with pytest.raises(PathTypeConflictError) as exc_info:
            build_from("a[b]=c", "a[b][]=e")

        assert exc_info.value.expected == "array"

    def test_root_type_conflict(self) -> None:
        """Test that the root keeps the type its first accessor gave it."""
        with pytest.raises(PathTypeConflictError) as exc_info:
            build_from("a=1", "[0]=x")

        assert exc_info.value.expected == "array"

    def test_raw_syntax_error(self) -> None:
        """Test that invalid raw JSON aborts the build."""
        with pytest.raises(RawValueSyntaxError):
            build_from("a=1", "b:=not json")

    def test_unicode_not_escaped(self) -> None:
        """Test that non-ASCII text is written as-is."""
        assert build_from("name=héllo") == '{"name":"héllo"}'

    def test_insertion_order_kept(self) -> None:
        """Test that object members keep the order they were first written."""
        result = build_from("z=1", "a=2", "m=3")
        assert result is not None
        assert list(json.loads(result)) == ["z", "a", "m"]
