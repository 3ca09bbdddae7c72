"""
Tests for the catalog data model.
"""

import pytest

from jsfeatures.catalog.models import (
    Category,
    ErrorKind,
    ExpectedLine,
    FeatureEntry,
    Snippet,
)


class TestCategory:
    """Test category parsing."""

    def test_parse_known_name(self):
        assert Category.parse("spread-rest") is Category.SPREAD_REST
        assert Category.parse(Category.DESTRUCTURING) is Category.DESTRUCTURING

    def test_parse_unknown_name(self):
        assert Category.parse("generators") is None

    def test_fixed_set(self):
        assert len(list(Category)) == 8


class TestErrorKind:
    """Test mapping JavaScript error names onto kinds."""

    @pytest.mark.parametrize(
        "name, kind",
        [
            ("ReferenceError", ErrorKind.REFERENCE),
            ("TypeError", ErrorKind.TYPE),
            ("RangeError", ErrorKind.RANGE),
            ("SyntaxError", ErrorKind.SYNTAX),
            ("URIError", ErrorKind.URI),
            ("Error", ErrorKind.UNCAUGHT),
            ("ValidationError", ErrorKind.UNCAUGHT),
        ],
    )
    def test_from_js_name(self, name, kind):
        assert ErrorKind.from_js_name(name) is kind


class TestExpectedLine:
    """Test documented output items."""

    def test_text_line(self):
        line = ExpectedLine(text="Hello, Alice!")
        assert line.lines == ("Hello, Alice!",)

    def test_multiline_text(self):
        line = ExpectedLine(text="first\nsecond")
        assert line.lines == ("first", "second")

    def test_empty_text_is_one_blank_line(self):
        assert ExpectedLine(text="").lines == ("",)

    def test_carriage_return_and_separators_stay_in_line(self):
        """Only a newline ends a printed line."""
        assert ExpectedLine(text="a\rb").lines == ("a\rb",)
        assert ExpectedLine(text="a\u2028b\x0cc").lines == ("a\u2028b\x0cc",)

    def test_requires_exactly_one_form(self):
        with pytest.raises(ValueError):
            ExpectedLine()

    def test_from_dict_value(self):
        line = ExpectedLine.from_dict({"value": {"a": 1, "b": 2}})
        assert line.lines == ("{ a: 1, b: 2 }",)

    def test_from_dict_rejects_extra_keys(self):
        with pytest.raises(ValueError):
            ExpectedLine.from_dict({"value": 1, "text": "1"})

    def test_bare_scalars_print_as_values(self):
        """YAML numbers and booleans print the way console.log shows them."""
        assert ExpectedLine.from_dict(42).lines == ("42",)
        assert ExpectedLine.from_dict(True).lines == ("true",)
        assert ExpectedLine.from_dict(None).lines == ("null",)


class TestSnippet:
    """Test snippet construction."""

    def test_plain_strings_become_text_lines(self):
        snippet = Snippet(source="console.log(1)", expected_output=("1",))
        assert snippet.expected_output == (ExpectedLine(text="1"),)
        assert snippet.expected_lines == ["1"]

    def test_fails_with_implies_may_throw(self):
        snippet = Snippet(source="x", fails_with=ErrorKind.REFERENCE)
        assert snippet.may_throw is True
        assert snippet.is_well_formed()

    def test_fails_with_accepts_kind_name(self):
        snippet = Snippet(source="x", fails_with="TypeFailure")
        assert snippet.fails_with is ErrorKind.TYPE

    def test_nothing_to_check(self):
        assert not Snippet(source="1 + 1").is_well_formed()

    def test_may_throw_alone_is_well_formed(self):
        assert Snippet(source="maybe()", may_throw=True).is_well_formed()

    def test_from_dict(self):
        snippet = Snippet.from_dict(
            {
                "source": "console.log([1, 2])\n",
                "expected_output": [{"value": [1, 2]}, "done"],
                "note": "arrays",
                "module": True,
                "timeout": 2,
            }
        )
        assert snippet.expected_lines == ["[ 1, 2 ]", "done"]
        assert snippet.note == "arrays"
        assert snippet.module is True
        assert snippet.timeout == 2.0
        assert snippet.fails_with is None

    def test_from_dict_single_output_line(self):
        snippet = Snippet.from_dict({"source": "console.log('x')", "expected_output": "x"})
        assert snippet.expected_lines == ["x"]

    @pytest.mark.parametrize("kind", [ErrorKind.TIMEOUT, ErrorKind.LAUNCH, "Timeout", "LaunchFailure"])
    def test_verifier_only_kinds_rejected(self, kind):
        with pytest.raises(ValueError):
            Snippet(source="x", fails_with=kind)

    @pytest.mark.parametrize("raw, expected", [(0, ["0"]), (False, ["false"]), ("", [""])])
    def test_from_dict_falsy_single_output_line(self, raw, expected):
        """A falsy scalar is still one documented line."""
        snippet = Snippet.from_dict({"source": "console.log(x)", "expected_output": raw})
        assert snippet.expected_lines == expected

    def test_from_dict_null_output_means_none(self):
        snippet = Snippet.from_dict({"source": "x", "expected_output": None, "may_throw": True})
        assert snippet.expected_output == ()

    def test_from_dict_requires_source(self):
        with pytest.raises(KeyError):
            Snippet.from_dict({"expected_output": ["1"]})

    def test_from_dict_unknown_failure_kind(self):
        with pytest.raises(ValueError):
            Snippet.from_dict({"source": "x", "fails_with": "WeirdFailure"})


class TestFeatureEntry:
    """Test feature entries."""

    def _entry(self, **overrides):
        data = {
            "id": "spread-merge-objects",
            "category": "spread-rest",
            "title": "Merging objects with spread",
            "description": "Later keys win.",
            "tags": ["spread", "objects"],
            "snippets": [{"source": "console.log(1)", "expected_output": ["1"]}],
        }
        data.update(overrides)
        return FeatureEntry.from_dict(data)

    def test_from_dict(self):
        entry = self._entry()
        assert entry.category is Category.SPREAD_REST
        assert entry.tags == ("spread", "objects")
        assert len(entry.snippets) == 1
        assert entry.display_title == "Merging objects with spread"

    def test_default_category(self):
        data = {"id": "x", "snippets": []}
        entry = FeatureEntry.from_dict(data, default_category="destructuring")
        assert entry.category is Category.DESTRUCTURING

    def test_missing_category(self):
        with pytest.raises(KeyError):
            FeatureEntry.from_dict({"id": "x", "snippets": []})

    def test_unknown_category_kept_raw(self):
        entry = self._entry(category="generators")
        assert entry.category == "generators"

    def test_display_title_falls_back_to_id(self):
        assert self._entry(title=None).display_title == "spread-merge-objects"

    def test_matches_is_case_insensitive(self):
        entry = self._entry()
        assert entry.matches("MERGE")
        assert entry.matches("later keys")
        assert entry.matches("objects")
        assert not entry.matches("promise")
