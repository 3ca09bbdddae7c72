"""
Node.js engine adapter.

Every snippet runs in its own ``node`` process started inside a fresh
temporary directory, so no scope, module cache or pending timer is shared
between snippets.  Node exits on its own once its event loop has no more
scheduled work; process exit is therefore the point at which all of the
snippet's asynchronous activity has settled.

A small hook preloaded with ``--require`` records the uncaught exception
Node is about to report, so the failure kind never depends on what the
snippet itself wrote to stderr.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import shutil
import signal
import subprocess
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from jsfeatures.catalog.models import ErrorKind
from jsfeatures.catalog.values import split_lines


logger = logging.getLogger(__name__)

EXECUTABLE_CANDIDATES = ("node", "nodejs")

# Seconds to wait for output pipes after a timed-out process group is killed.
DRAIN_TIMEOUT = 1.0

FAILURE_HOOK = "report-failure.cjs"
FAILURE_REPORT = "failure.json"

# Observes the uncaught exception without changing Node's own report or exit status.
FAILURE_HOOK_SOURCE = """\
'use strict';
const fs = require('fs');
const path = require('path');

process.on('uncaughtExceptionMonitor', (err, origin) => {
  let name = '';
  let message = '';
  try {
    if (err instanceof Error) {
      name = String(err.name);
      message = String(err.message);
    } else {
      message = String(err);
    }
  } catch (e) {
    message = '<unprintable thrown value>';
  }
  try {
    fs.writeFileSync(
      path.join(__dirname, 'failure.json'),
      JSON.stringify({ name, message, origin })
    );
  } catch (e) {}
});
"""

# "TypeError: x is not a function" or "Error [ERR_CODE]: message"
_ERROR_LINE = re.compile(
    r"^(?P<name>[A-Za-z_$][\w$]*)(?: \[[A-Z0-9_]+\])?(?:: (?P<message>.*))?$"
)


class EngineNotFoundError(RuntimeError):
    """Raised when no usable Node.js executable can be located."""

    code = "ENGINE_NOT_FOUND"
    hint = "Install Node.js or point JSFEATURES_NODE / --node at the executable"


@dataclass(frozen=True)
class Failure:
    """An uncaught failure reported by the engine."""
    kind: ErrorKind
    name: str
    message: str


@dataclass
class Execution:
    """Everything observed while one snippet ran."""
    stdout_lines: List[str] = field(default_factory=list)
    stderr: str = ""
    exit_code: Optional[int] = 0
    failure: Optional[Failure] = None
    timed_out: bool = False
    duration_ms: float = 0.0


def split_output(raw: str) -> List[str]:
    """Split captured stdout into the lines ``console.log`` wrote."""
    return split_lines(raw) if raw else []


def _is_frame(line: str) -> bool:
    return line[:1].isspace() and line.lstrip().startswith("at ")


def _last_stack_header(stderr: str) -> Optional[re.Match]:
    """
    Find the header of the last stack trace in ``stderr``.

    Node prints an uncaught error as ``Name: message`` followed by indented
    ``at`` frames, after anything the snippet wrote itself, so the last
    frame block belongs to the uncaught error.
    """
    lines = stderr.splitlines()
    header = None
    for index, line in enumerate(lines):
        if not _is_frame(line) or (index and _is_frame(lines[index - 1])):
            continue
        for previous in reversed(lines[:index]):
            if _is_frame(previous):
                break
            match = _ERROR_LINE.match(previous.strip())
            if match and match.group("name").endswith("Error"):
                header = match
                break
    return header


def classify_failure(
    stderr: str,
    exit_code: Optional[int],
    report: Optional[dict] = None,
) -> Optional[Failure]:
    """
    Turn the engine's error report into a :class:`Failure`.

    Returns None when the process exited cleanly.  ``report`` is what the
    failure hook recorded for the uncaught exception and decides the kind
    when present.  Without it the header of the last stack trace on stderr
    is used; a nonzero exit with neither (``process.exit(1)``) is an
    uncaught failure.
    """
    if exit_code == 0:
        return None
    if report is not None:
        name = str(report.get("name") or "")
        return Failure(
            kind=ErrorKind.from_js_name(name),
            name=name,
            message=str(report.get("message") or ""),
        )
    match = _last_stack_header(stderr)
    if match is not None:
        name = match.group("name")
        return Failure(
            kind=ErrorKind.from_js_name(name),
            name=name,
            message=(match.group("message") or "").strip(),
        )
    return Failure(
        kind=ErrorKind.UNCAUGHT,
        name="",
        message=f"process exited with status {exit_code}",
    )


def _read_failure_report(path: Path) -> Optional[dict]:
    try:
        report = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.warning(f"Ignoring unreadable failure report {path}: {exc}")
        return None
    return report if isinstance(report, dict) else None


def _kill_process_group(proc: asyncio.subprocess.Process) -> None:
    """Kill the snippet and every process it started."""
    try:
        if hasattr(os, "killpg"):
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass


async def _collect(stream: asyncio.StreamReader, sink: bytearray) -> None:
    while True:
        chunk = await stream.read(65536)
        if not chunk:
            return
        sink.extend(chunk)


class NodeEngine:
    """Runs JavaScript source with a Node.js executable."""

    name = "node"

    def __init__(self, executable: Optional[str] = None) -> None:
        self.executable = executable
        self._resolved: Optional[str] = None

    def resolve_executable(self) -> str:
        """
        Locate the Node.js executable.

        Raises:
            EngineNotFoundError: If the configured or default executable is missing
        """
        if self._resolved:
            return self._resolved
        candidates = (self.executable,) if self.executable else EXECUTABLE_CANDIDATES
        for candidate in candidates:
            found = shutil.which(candidate)
            if found:
                self._resolved = found
                logger.debug(f"Using Node.js executable {found}")
                return found
        raise EngineNotFoundError(
            f"Node.js executable not found (tried: {', '.join(candidates)})"
        )

    def version(self) -> str:
        executable = self.resolve_executable()
        completed = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True,
        )
        return completed.stdout.strip()

    async def execute(self, source: str, *, timeout: float, module: bool = False) -> Execution:
        """
        Run ``source`` to completion and capture what it printed.

        The wait is bounded by ``timeout`` seconds; a process still running
        after that is killed together with anything it started, and the
        execution is marked as timed out.  Output written before the kill is
        kept.

        Raises:
            EngineNotFoundError: If Node.js is not available
            OSError: If the process cannot be started
        """
        executable = self.resolve_executable()
        env = dict(os.environ)
        env["NODE_DISABLE_COLORS"] = "1"
        env.pop("NODE_OPTIONS", None)

        stdout, stderr = bytearray(), bytearray()
        with tempfile.TemporaryDirectory(prefix="jsfeatures-") as workdir:
            root = Path(workdir)
            script = root / ("snippet.mjs" if module else "snippet.js")
            script.write_text(source, encoding="utf-8")
            # Pin the module type so no package.json above the temp dir applies.
            (root / "package.json").write_text(
                json.dumps({"type": "module" if module else "commonjs"}),
                encoding="utf-8",
            )
            (root / FAILURE_HOOK).write_text(FAILURE_HOOK_SOURCE, encoding="utf-8")

            start = time.time()
            proc = await asyncio.create_subprocess_exec(
                executable,
                "--require",
                f"./{FAILURE_HOOK}",
                script.name,
                cwd=workdir,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
            tasks = [
                asyncio.ensure_future(_collect(proc.stdout, stdout)),
                asyncio.ensure_future(_collect(proc.stderr, stderr)),
                asyncio.ensure_future(proc.wait()),
            ]
            _, pending = await asyncio.wait(tasks, timeout=timeout)
            timed_out = bool(pending)
            if timed_out:
                _kill_process_group(proc)
                _, pending = await asyncio.wait(pending, timeout=DRAIN_TIMEOUT)
                if pending:
                    logger.warning(
                        f"Output of a killed snippet still open after {DRAIN_TIMEOUT:g}s; dropping the rest"
                    )
                    for task in pending:
                        task.cancel()
            duration = (time.time() - start) * 1000
            report = _read_failure_report(root / FAILURE_REPORT)

        stderr_text = stderr.decode("utf-8", errors="replace")
        execution = Execution(
            stdout_lines=split_output(stdout.decode("utf-8", errors="replace")),
            stderr=stderr_text,
            exit_code=proc.returncode,
            timed_out=timed_out,
            duration_ms=duration,
        )
        if not timed_out:
            execution.failure = classify_failure(stderr_text, proc.returncode, report)
        return execution


__all__ = [
    "EngineNotFoundError",
    "Execution",
    "Failure",
    "NodeEngine",
    "classify_failure",
    "split_output",
]
