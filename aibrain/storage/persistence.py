"""Deterministic JSON serialization and atomic writes.

Output is byte-stable: sorted keys, two-space indent, trailing newline. Files
are written to a temporary sibling and moved into place with os.replace, so
readers never see a half-written artifact.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import Any, Optional

from aibrain.config import BrainConfig
from aibrain.core.logging import get_logger
from aibrain.errors import StorageError
from aibrain.storage.paths import storage_path

_log = get_logger("storage")


def stable_dumps(data: Any) -> str:
    return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path atomically. Raises StorageError on failure."""
    path = Path(path)
    tmp_name: Optional[str] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise StorageError(f"cannot write {path}: {exc}") from exc
    finally:
        if tmp_name is not None:
            with suppress(OSError):
                os.unlink(tmp_name)


def _save(root: Path, config: BrainConfig, name: str, data: dict[str, Any]) -> Path:
    path = storage_path(root, config, name)
    atomic_write_text(path, stable_dumps(data))
    _log.debug("storage: wrote %s", path)
    return path


def _load(root: Path, config: BrainConfig, name: str) -> Optional[dict[str, Any]]:
    path = storage_path(root, config, name)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StorageError(f"cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise StorageError(f"{path} does not hold a JSON object")
    return data


def save_brain(root: Path, config: BrainConfig, data: dict[str, Any]) -> Path:
    return _save(root, config, "brain", data)


def save_baseline(root: Path, config: BrainConfig, data: dict[str, Any]) -> Path:
    return _save(root, config, "baseline", data)


def load_brain(root: Path, config: BrainConfig) -> Optional[dict[str, Any]]:
    """Stored brain.json, or None when it does not exist. Corrupt files raise StorageError."""
    return _load(root, config, "brain")


def load_baseline(root: Path, config: BrainConfig) -> Optional[dict[str, Any]]:
    return _load(root, config, "baseline")
