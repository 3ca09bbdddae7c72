import asyncio
import inspect
import shutil
import textwrap
from typing import Callable, Dict, List, Optional, Union

import pytest

from jsfeatures.verifier.engine import Execution, Failure


NODE_EXECUTABLE = shutil.which("node") or shutil.which("nodejs")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run async test functions without requiring external plugins."""
    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            # Filter funcargs to only include parameters the function expects
            sig = inspect.signature(test_function)
            filtered_args = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
            loop.run_until_complete(test_function(**filtered_args))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None


def pytest_configure(config):
    """Register markers for pytest."""
    config.addinivalue_line("markers", "asyncio: mark async tests")
    config.addinivalue_line("markers", "node: mark test as requiring a Node.js executable")


def pytest_collection_modifyitems(config, items):
    if NODE_EXECUTABLE:
        return
    skip_node = pytest.mark.skip(reason="Node.js is not installed")
    for item in items:
        if "node" in item.keywords:
            item.add_marker(skip_node)


Outcome = Union[Execution, Callable[[str], Execution], BaseException]


class FakeEngine:
    """
    Stand-in for NodeEngine that returns canned executions.

    ``outcomes`` maps snippet source to an Execution, a callable producing
    one, or an exception to raise.  Unknown sources print nothing and exit
    cleanly.
    """

    def __init__(self, outcomes: Optional[Dict[str, Outcome]] = None, delay: float = 0.0):
        self.outcomes = dict(outcomes or {})
        self.delay = delay
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0

    def resolve_executable(self) -> str:
        return "/fake/node"

    def version(self) -> str:
        return "v0.0.0-fake"

    async def execute(self, source: str, *, timeout: float, module: bool = False) -> Execution:
        self.calls.append(source)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            outcome = self.outcomes.get(source)
            if isinstance(outcome, BaseException):
                raise outcome
            if callable(outcome):
                return outcome(source)
            if outcome is None:
                return Execution()
            return outcome
        finally:
            self.active -= 1


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def make_fake_engine():
    """Factory for engines with canned outcomes."""
    return FakeEngine


@pytest.fixture
def failed_execution():
    """Build the Execution of a snippet that died with an uncaught error."""
    def _failed(kind, message: str = "boom", *lines: str, name: str = "Error") -> Execution:
        return Execution(
            stdout_lines=list(lines),
            stderr=f"{name}: {message}\n",
            exit_code=1,
            failure=Failure(kind=kind, name=name, message=message),
        )

    return _failed


@pytest.fixture
def write_definition(tmp_path):
    """Write a YAML definition file under tmp_path and return its path."""
    def _write(name: str, content: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
