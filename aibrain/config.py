"""Configuration loading: defaults, pyproject [tool.aibrain], .aibrain.toml, env.

Later sources override earlier ones key by key. A missing file is not an
error; a file that parses to wrong value types raises ConfigError.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from aibrain.errors import ConfigError, StorageError

CONFIG_FILE = ".aibrain.toml"
IGNORE_FILE = ".aibrainignore"
DEFAULT_BRAIN_DIR = "AI_BRAIN"

DEFAULT_CONFIG_TEXT = """\
# aibrain configuration
brain_dir = "AI_BRAIN"
include = ["**/*"]
exclude = ["dist/**"]
max_file_kb = 512
max_files = 20000
fail_on_warnings = false

[evidence]
store_snippets = false

# Declared rules are checked alongside synthesized ones, e.g.
# [[rules]]
# id = "web-no-lodash"
# type = "no_import"
# severity = "SOFT"
# params = { scope = "apps/web", forbidden = ["lodash"] }
"""

DEFAULT_IGNORE_TEXT = "# Add patterns to ignore\n"


@dataclass
class BrainConfig:
    brain_dir: str = DEFAULT_BRAIN_DIR
    max_file_kb: int = 512
    max_files: int = 20000
    include: list[str] = field(default_factory=lambda: ["**/*"])
    exclude: list[str] = field(default_factory=list)
    fail_on_warnings: bool = False
    store_snippets: bool = False
    rules: list[Any] = field(default_factory=list)

    def brain_path(self, root: Path) -> Path:
        """Brain directory; relative values are resolved against root."""
        p = Path(self.brain_dir)
        return p if p.is_absolute() else Path(root) / p


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc


def _expect(value: Any, kind: type | tuple[type, ...], key: str, source: Path) -> Any:
    # bool is an int subclass; reject it where a number is expected
    if kind is int and isinstance(value, bool):
        raise ConfigError(f"{source}: '{key}' must be an integer")
    if not isinstance(value, kind):
        raise ConfigError(f"{source}: '{key}' has wrong type {type(value).__name__}")
    return value


def _string_list(value: Any, key: str, source: Path) -> list[str]:
    _expect(value, list, key, source)
    if not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{source}: '{key}' must be a list of strings")
    return list(value)


def _apply(config: BrainConfig, data: dict[str, Any], source: Path) -> None:
    if "brain_dir" in data:
        config.brain_dir = _expect(data["brain_dir"], str, "brain_dir", source)
    for key in ("max_file_kb", "max_files"):
        if key in data:
            value = _expect(data[key], int, key, source)
            if value <= 0:
                raise ConfigError(f"{source}: '{key}' must be positive")
            setattr(config, key, value)
    if "include" in data:
        config.include = _string_list(data["include"], "include", source)
    if "exclude" in data:
        config.exclude = _string_list(data["exclude"], "exclude", source)
    if "fail_on_warnings" in data:
        config.fail_on_warnings = _expect(data["fail_on_warnings"], bool, "fail_on_warnings", source)
    evidence = data.get("evidence")
    if evidence is not None:
        _expect(evidence, dict, "evidence", source)
        if "store_snippets" in evidence:
            config.store_snippets = _expect(
                evidence["store_snippets"], bool, "evidence.store_snippets", source
            )
    if "rules" in data:
        rules = _expect(data["rules"], list, "rules", source)
        # entries are validated later, per rule, so one bad rule does not sink the rest
        config.rules = list(rules)


def load_config(root: Path) -> BrainConfig:
    """Load configuration for a project root."""
    root = Path(root)
    config = BrainConfig()

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        tool = _load_toml(pyproject).get("tool") or {}
        section = tool.get("aibrain")
        if isinstance(section, dict):
            _apply(config, section, pyproject)

    own = root / CONFIG_FILE
    if own.is_file():
        _apply(config, _load_toml(own), own)

    env_dir = os.environ.get("AIBRAIN_BRAIN_DIR", "").strip()
    if env_dir:
        config.brain_dir = env_dir
    return config


def write_default_files(root: Path) -> list[Path]:
    """Create .aibrain.toml and .aibrainignore when absent. Returns written paths."""
    written: list[Path] = []
    for name, text in ((CONFIG_FILE, DEFAULT_CONFIG_TEXT), (IGNORE_FILE, DEFAULT_IGNORE_TEXT)):
        path = Path(root) / name
        if path.exists():
            continue
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc
        written.append(path)
    return written
