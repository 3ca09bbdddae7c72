"""
Tests for rendering tagged values the way console.log prints them.
"""

import pytest

from jsfeatures.catalog.values import (
    JsValue,
    UnrenderableValueError,
    ValueKind,
    format_number,
    quote_string,
    split_lines,
    render_value,
)


class TestJsValue:
    """Test conversion of plain data into tagged values."""

    def test_scalar_kinds(self):
        """Each scalar maps onto its own kind."""
        assert JsValue.from_python(None).kind == ValueKind.NULL
        assert JsValue.from_python(True).kind == ValueKind.BOOLEAN
        assert JsValue.from_python(3).kind == ValueKind.NUMBER
        assert JsValue.from_python(2.5).kind == ValueKind.NUMBER
        assert JsValue.from_python("x").kind == ValueKind.STRING

    def test_containers(self):
        """Mappings become objects and lists become arrays."""
        obj = JsValue.from_python({"a": 1})
        arr = JsValue.from_python([1, 2])

        assert obj.kind == ValueKind.OBJECT
        assert obj.data == (("a", JsValue(ValueKind.NUMBER, 1)),)
        assert arr.kind == ValueKind.ARRAY
        assert len(arr.data) == 2

    def test_integer_like_keys_come_first(self):
        """Integer-like keys are ordered numerically ahead of string keys."""
        value = JsValue.from_python({"b": 1, "2": "two", "a": 2, "1": "one"})
        assert [key for key, _ in value.data] == ["1", "2", "b", "a"]

    def test_unsupported_type_rejected(self):
        """Values with no JavaScript counterpart are rejected."""
        with pytest.raises(UnrenderableValueError):
            JsValue.from_python({1, 2, 3})


class TestRenderValue:
    """Test console.log-style rendering."""

    def test_objects(self):
        assert render_value({"a": 1, "b": 3, "c": 4}) == ["{ a: 1, b: 3, c: 4 }"]
        assert render_value({"name": "John", "age": 25}) == ["{ name: 'John', age: 25 }"]
        assert render_value({}) == ["{}"]

    def test_arrays(self):
        assert render_value([1, 2, 3]) == ["[ 1, 2, 3 ]"]
        assert render_value(["h", "e", "l", "l", "o"]) == ["[ 'h', 'e', 'l', 'l', 'o' ]"]
        assert render_value([]) == ["[]"]

    def test_nested_containers(self):
        assert render_value([["name", "Alice"], ["age", 30]]) == ["[ [ 'name', 'Alice' ], [ 'age', 30 ] ]"]
        assert render_value({"ok": True, "items": [1, None]}) == ["{ ok: true, items: [ 1, null ] }"]

    def test_depth_limit(self):
        """Containers nested deeper than two levels are abbreviated."""
        assert render_value({"a": {"b": {"c": {"d": 1}}}}) == ["{ a: { b: { c: [Object] } } }"]
        assert render_value([[[[1]]]]) == ["[ [ [ [Array] ] ] ]"]

    def test_non_identifier_keys_are_quoted(self):
        assert render_value({"1": "one", "first-name": "Ann"}) == ["{ '1': 'one', 'first-name': 'Ann' }"]

    def test_top_level_string_printed_raw(self):
        """A string printed on its own is not quoted."""
        assert render_value("plain text") == ["plain text"]
        assert render_value("two\nlines") == ["two", "lines"]
        assert render_value("") == [""]

    def test_top_level_string_splits_only_on_newline(self):
        """Carriage returns and line separators print inside one line."""
        assert render_value("a\rb") == ["a\rb"]
        assert render_value("a\u2028b") == ["a\u2028b"]
        assert render_value("ends\n") == ["ends", ""]

    def test_top_level_scalars(self):
        assert render_value(None) == ["null"]
        assert render_value(True) == ["true"]
        assert render_value(42) == ["42"]

    def test_wide_object_breaks_across_lines(self):
        """Objects wider than the break length print one property per line."""
        value = {"description": "x" * 40, "title": "y" * 40}
        assert render_value(value) == [
            "{",
            f"  description: '{'x' * 40}',",
            f"  title: '{'y' * 40}'",
            "}",
        ]

    def test_long_arrays_rejected(self):
        """Arrays printed in columns by Node cannot be described as values."""
        with pytest.raises(UnrenderableValueError):
            render_value([1, 2, 3, 4, 5, 6, 7])

    def test_six_element_array_allowed(self):
        assert render_value([2, 4, 6, 8, 10, 12]) == ["[ 2, 4, 6, 8, 10, 12 ]"]


class TestQuoting:
    """Test util.inspect string quoting."""

    def test_single_quotes_by_default(self):
        assert quote_string("Alice") == "'Alice'"

    def test_switches_quote_for_apostrophes(self):
        assert quote_string("it's") == '"it\'s"'
        assert quote_string("it's \"quoted\"") == "`it's \"quoted\"`"

    def test_escapes_control_characters(self):
        assert quote_string("a\nb") == "'a\\nb'"
        assert quote_string("tab\there") == "'tab\\there'"


class TestFormatNumber:
    """Test Number.prototype.toString formatting."""

    @pytest.mark.parametrize(
        "number, expected",
        [
            (0, "0"),
            (17, "17"),
            (2.0, "2"),
            (1.5, "1.5"),
            (0.1 + 0.2, "0.30000000000000004"),
            (19.99, "19.99"),
            (1e21, "1e+21"),
            (1e-7, "1e-7"),
            (0.0000015, "0.0000015"),
            (123456789012345680000.0, "123456789012345680000"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            (float("nan"), "NaN"),
        ],
    )
    def test_formatting(self, number, expected):
        assert format_number(number) == expected

    def test_negative_zero(self):
        """console.log distinguishes negative zero."""
        assert format_number(-0.0) == "-0"


class TestSplitLines:
    """Test the line-splitting rule shared with captured output."""

    def test_single_trailing_newline_dropped(self):
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\n\n") == ["a", ""]

    def test_crlf_normalised(self):
        assert split_lines("a\r\nb") == ["a", "b"]

    def test_other_line_breaks_kept(self):
        assert split_lines("a\rb\x0bc\x1cd\x85e\u2029f") == ["a\rb\x0bc\x1cd\x85e\u2029f"]
