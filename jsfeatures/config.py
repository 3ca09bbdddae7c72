"""Workspace configuration support for the jsfeatures verifier."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    tomllib = None  # type: ignore

from jsfeatures.verifier.runner import DEFAULT_TIMEOUT, DEFAULT_WORKERS


CONFIG_FILE_NAMES = ("jsfeatures.toml", ".jsfeaturesrc")

ENV_NODE = "JSFEATURES_NODE"
ENV_TIMEOUT = "JSFEATURES_TIMEOUT"
ENV_WORKERS = "JSFEATURES_WORKERS"


class ConfigError(ValueError):
    """Raised for unreadable configuration files or invalid setting values."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


@dataclass
class VerifierSettings:
    """Resolved settings for a verification run."""

    node: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    workers: int = DEFAULT_WORKERS
    catalog_paths: List[Path] = field(default_factory=list)
    include_builtin: bool = True
    source: Optional[Path] = None

    def with_overrides(
        self,
        *,
        node: Optional[str] = None,
        timeout: Optional[float] = None,
        workers: Optional[int] = None,
        catalog_paths: Optional[List[Path]] = None,
        include_builtin: Optional[bool] = None,
    ) -> "VerifierSettings":
        """Return a copy with every non-None argument applied."""
        return replace(
            self,
            node=node if node is not None else self.node,
            timeout=_positive_float(timeout, "timeout") if timeout is not None else self.timeout,
            workers=_positive_int(workers, "workers") if workers is not None else self.workers,
            catalog_paths=list(self.catalog_paths) + list(catalog_paths or []),
            include_builtin=self.include_builtin if include_builtin is None else include_builtin,
        )


def _positive_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"{name} must be at least 1, got {value!r}")
    return number


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    if tomllib is None:
        raise ConfigError("TOML parsing requires Python 3.11 or later.", path=path)
    with path.open("rb") as handle:
        return tomllib.load(handle)


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILE_NAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def _parse_verifier(section: Mapping[str, Any], root: Path) -> VerifierSettings:
    settings = VerifierSettings()
    if section.get("node"):
        settings.node = str(section["node"])
    if "timeout" in section:
        settings.timeout = _positive_float(section["timeout"], "timeout")
    if "workers" in section:
        settings.workers = _positive_int(section["workers"], "workers")

    raw_paths = section.get("catalog") or []
    if isinstance(raw_paths, str):
        raw_paths = [raw_paths]
    paths: List[Path] = []
    for raw in raw_paths:
        path = Path(str(raw))
        if not path.is_absolute():
            path = (root / path).resolve()
        paths.append(path)
    settings.catalog_paths = paths
    settings.include_builtin = bool(section.get("include_builtin", True))
    return settings


def apply_env_overrides(settings: VerifierSettings, environ: Optional[Mapping[str, str]] = None) -> VerifierSettings:
    env = os.environ if environ is None else environ
    return settings.with_overrides(
        node=env.get(ENV_NODE) or None,
        timeout=env.get(ENV_TIMEOUT) or None,
        workers=env.get(ENV_WORKERS) or None,
    )


def load_settings(
    root: Path,
    explicit: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> VerifierSettings:
    """
    Resolve verifier settings for a workspace.

    Precedence, lowest first: built-in defaults, the workspace file
    (``jsfeatures.toml`` ``[verifier]`` table or ``.jsfeaturesrc`` JSON),
    then ``JSFEATURES_*`` environment variables.  Command-line flags are
    applied by the caller through :meth:`VerifierSettings.with_overrides`.

    Raises:
        ConfigError: If an explicit file is missing, a file cannot be parsed
            or a value is out of range
    """
    root = root.resolve()
    if explicit is not None and not explicit.exists():
        raise ConfigError(f"Configuration file not found: {explicit}", path=explicit)
    config_path = locate_config_file(root, explicit)

    settings = VerifierSettings()
    if config_path is not None:
        try:
            if config_path.suffix == ".toml":
                data = _read_toml_config(config_path)
            else:
                data = _read_json_config(config_path)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read {config_path.name}: {exc}", path=config_path) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path.name} must contain a mapping", path=config_path)
        section = data.get("verifier") or {}
        if not isinstance(section, dict):
            raise ConfigError("[verifier] must be a table", path=config_path)
        settings = _parse_verifier(section, config_path.parent)
        settings.source = config_path

    return apply_env_overrides(settings, environ)


__all__ = [
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "VerifierSettings",
    "apply_env_overrides",
    "load_settings",
    "locate_config_file",
]
