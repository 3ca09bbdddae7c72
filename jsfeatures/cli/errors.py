"""
Error handling for the jsfeatures CLI.

Every fault that reaches the command line is reported through
:func:`handle_cli_exception`, which prints one formatted message and exits
with the status the command chose.
"""

import os
import sys
from typing import Optional


class CLIError(Exception):
    """
    Base exception for all CLI operations.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        hint: Optional suggestion for resolving the error
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class CLIConfigError(CLIError):
    """
    Configuration file or workspace setup errors.

    Raised when:
    - jsfeatures.toml or .jsfeaturesrc cannot be parsed
    - A configured value is out of range
    - An explicit --config path does not exist
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_CONFIG_ERROR')
        super().__init__(message, **kwargs)


class CLIValidationError(CLIError):
    """Invalid command arguments or options."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_VALIDATION_ERROR')
        super().__init__(message, **kwargs)


class CLIRuntimeError(CLIError):
    """Errors during command execution."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_RUNTIME_ERROR')
        super().__init__(message, **kwargs)


class CLIFileNotFoundError(CLIError):
    """A catalog file or directory named on the command line does not exist."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_FILE_NOT_FOUND')
        super().__init__(message, **kwargs)


class CLIDependencyError(CLIError):
    """
    Missing external dependencies.

    Raised when the Node.js executable needed to run snippets is not
    installed or cannot be started.
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('code', 'CLI_DEPENDENCY_ERROR')
        super().__init__(message, **kwargs)


def _cause_chain(exc: BaseException):
    seen = {id(exc)}
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        yield cause
        cause = cause.__cause__ or cause.__context__


def format_cli_error(exc: BaseException, *, verbose: bool = False) -> str:
    """
    Format exception for CLI display with its hint.

    With ``verbose`` the exceptions that led to ``exc`` are listed too.

    Examples:
        >>> try:
        ...     raise CLIValidationError("Invalid timeout", hint="Use a positive number")
        ... except Exception as e:
        ...     print(format_cli_error(e))
        Error [CLI_VALIDATION_ERROR]: Invalid timeout
        Hint: Use a positive number
    """
    lines = []

    formatter = getattr(exc, "format", None)
    if isinstance(exc, CLIError):
        lines.append(f"Error [{exc.code}]: {exc.message}")
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
    elif callable(formatter):
        lines.append(f"Error: {formatter()}")
    else:
        lines.append(f"Error: {exc.__class__.__name__}: {exc}")
        hint = getattr(exc, "hint", None)
        if isinstance(hint, str) and hint:
            lines.append(f"Hint: {hint}")

    if verbose:
        for cause in _cause_chain(exc):
            lines.append(f"Caused by: {cause.__class__.__name__}: {cause}")

    return "\n".join(lines)


def wrap_exception(
    exc: BaseException,
    *,
    message: str,
    error_class: type = CLIRuntimeError,
    hint: Optional[str] = None
) -> CLIError:
    """Wrap a generic exception as a CLI-specific error caused by ``exc``."""
    error = error_class(message, hint=hint)
    error.__cause__ = exc
    return error


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def handle_cli_exception(
    exc: BaseException,
    *,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """
    Print ``exc`` for the user and exit with ``exit_code``.

    JSFEATURES_DEBUG or JSFEATURES_RERAISE re-raise ``exc`` instead;
    JSFEATURES_VERBOSE has the same effect as ``verbose``.

    Note:
        This function calls sys.exit() and does not return.
    """
    if _env_flag("JSFEATURES_RERAISE") or _env_flag("JSFEATURES_DEBUG"):
        raise exc

    verbose = verbose or _env_flag("JSFEATURES_VERBOSE")
    print(format_cli_error(exc, verbose=verbose), file=sys.stderr)
    sys.exit(exit_code)


__all__ = [
    "CLIError",
    "CLIConfigError",
    "CLIValidationError",
    "CLIRuntimeError",
    "CLIFileNotFoundError",
    "CLIDependencyError",
    "format_cli_error",
    "wrap_exception",
    "handle_cli_exception",
]
