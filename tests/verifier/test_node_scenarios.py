"""
End-to-end verification against a real Node.js executable.
"""

import sys
import time

import pytest

from jsfeatures.catalog.loader import default_catalog
from jsfeatures.catalog.models import ErrorKind, ExpectedLine, Snippet
from jsfeatures.verifier import NodeEngine, Outcome, SnippetVerifier


pytestmark = pytest.mark.node


@pytest.fixture(scope="module")
def verifier():
    return SnippetVerifier(NodeEngine(), timeout=10.0, workers=4)


@pytest.fixture(scope="module")
def catalog():
    return default_catalog()


class TestCatalogScenarios:
    """Verify well-known entries of the built-in catalog."""

    def test_const_block_scope(self, verifier, catalog):
        entry = catalog.get("const-block-scope")
        results = [verifier.verify(snippet) for snippet in entry.snippets]

        assert results[0].outcome is Outcome.EXPECTED_FAILURE
        assert results[0].error_kind is ErrorKind.REFERENCE
        assert results[1].outcome is Outcome.MATCH
        assert results[1].actual == ["20", "10"]

    def test_spread_merge_objects(self, verifier, catalog):
        snippet = catalog.get("spread-merge-objects").snippets[0]
        assert verifier.verify(snippet).outcome is Outcome.MATCH

    def test_rest_params_sum(self, verifier, catalog):
        for snippet in catalog.get("rest-params-sum").snippets:
            assert verifier.verify(snippet).outcome is Outcome.MATCH

    def test_async_timeout_order(self, verifier, catalog):
        """Timer callbacks complete before the process exits."""
        result = verifier.verify(catalog.get("async-timeout-order").snippets[0])
        assert result.outcome is Outcome.MATCH
        assert result.actual[-1] == "timeout"

    def test_whole_catalog_verifies(self, verifier, catalog):
        reports = verifier.verify_all(catalog)
        mismatches = [
            f"{r.entry_id}[{r.snippet_index}]: {r.result.reason}"
            for r in reports
            if r.result.outcome is Outcome.MISMATCH
        ]
        assert mismatches == []
        assert len(reports) == catalog.snippet_count()


class TestEngineBehavior:
    """Verify engine edge cases with ad hoc snippets."""

    def test_never_settling_snippet_times_out(self):
        verifier = SnippetVerifier(NodeEngine(), timeout=0.5)
        snippet = Snippet(source="setInterval(() => {}, 1000);\n", expected_output=("x",))

        result = verifier.verify(snippet)

        assert result.outcome is Outcome.MISMATCH
        assert result.error_kind is ErrorKind.TIMEOUT

    def test_module_snippet_uses_top_level_await(self, verifier):
        snippet = Snippet(
            source="const v = await Promise.resolve(42);\nconsole.log(v);\n",
            expected_output=("42",),
            module=True,
        )
        assert verifier.verify(snippet).outcome is Outcome.MATCH

    def test_syntax_error_prevents_any_output(self, verifier):
        snippet = Snippet(
            source="console.log('never');\nlet a = 1;\nlet a = 2;\n",
            fails_with=ErrorKind.SYNTAX,
        )
        result = verifier.verify(snippet)
        assert result.outcome is Outcome.EXPECTED_FAILURE
        assert result.actual == []

    def test_thrown_custom_error(self, verifier):
        snippet = Snippet(
            source="class ValidationError extends Error {}\nthrow new ValidationError('bad');\n",
            fails_with=ErrorKind.UNCAUGHT,
        )
        assert verifier.verify(snippet).outcome is Outcome.EXPECTED_FAILURE

    def test_snippets_do_not_share_state(self, verifier):
        first = Snippet(source="globalThis.shared = 1;\nconsole.log(typeof shared);\n", expected_output=("number",))
        second = Snippet(source="console.log(typeof shared);\n", expected_output=("undefined",))
        assert verifier.verify(first).outcome is Outcome.MATCH
        assert verifier.verify(second).outcome is Outcome.MATCH

    def test_logged_error_text_does_not_decide_the_kind(self, verifier):
        snippet = Snippet(
            source="console.error('TypeError: handled');\nconsole.log(undeclared);\n",
            fails_with=ErrorKind.REFERENCE,
        )
        result = verifier.verify(snippet)
        assert result.outcome is Outcome.EXPECTED_FAILURE
        assert result.error_kind is ErrorKind.REFERENCE

    def test_logged_error_object_before_throw(self, verifier):
        """A logged Error with its own stack precedes the real failure."""
        snippet = Snippet(
            source="console.error(new RangeError('logged'));\nnull.x;\n",
            fails_with=ErrorKind.TYPE,
        )
        result = verifier.verify(snippet)
        assert result.outcome is Outcome.EXPECTED_FAILURE
        assert result.error_kind is ErrorKind.TYPE

    def test_carriage_return_stays_inside_the_line(self, verifier):
        snippet = Snippet(
            source="console.log('a\\rb');\n",
            expected_output=(ExpectedLine(text="a\rb"),),
        )
        assert verifier.verify(snippet).outcome is Outcome.MATCH

    @pytest.mark.skipif(sys.platform == "win32", reason="process groups are POSIX only")
    def test_timeout_kills_spawned_children(self):
        """A child process holding the output pipes does not stall the verifier."""
        verifier = SnippetVerifier(NodeEngine(), timeout=1.0)
        snippet = Snippet(
            source=(
                "const { spawn } = require('child_process');\n"
                "spawn(process.execPath, ['-e', 'setTimeout(() => {}, 30000)'], { stdio: 'inherit' });\n"
                "console.log('started');\n"
            ),
            expected_output=("started",),
        )

        start = time.monotonic()
        result = verifier.verify(snippet)

        assert time.monotonic() - start < 10
        assert result.outcome is Outcome.MISMATCH
        assert result.error_kind is ErrorKind.TIMEOUT
        assert result.actual == ["started"]
