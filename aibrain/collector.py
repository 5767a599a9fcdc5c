"""Repository snapshot: sorted file list plus a text-read capability.

The rest of the pipeline never walks the filesystem itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from pathspec import GitIgnoreSpec, PathSpec

from aibrain.config import IGNORE_FILE, BrainConfig
from aibrain.core.logging import get_logger
from aibrain.errors import ScanError

SKIP_DIRS = frozenset({"node_modules", ".git", "dist", ".next", "coverage", ".venv", "venv", "__pycache__"})

SOURCE_EXTS = frozenset({".ts", ".tsx", ".mts", ".cts", ".js", ".jsx", ".mjs", ".cjs", ".py"})

# Non-source files the profiler, structure inference and workflow extraction read.
MANIFEST_NAMES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "pnpm-lock.yaml",
        "yarn.lock",
        "poetry.lock",
        "requirements.txt",
        "pyproject.toml",
        "setup.py",
        "setup.cfg",
        "Makefile",
        "next.config.js",
        "next.config.mjs",
        "vite.config.ts",
        "vite.config.js",
    }
)

_log = get_logger("collector")


@dataclass(frozen=True)
class FileEntry:
    path: str  # root-relative, POSIX separators
    size: int


@dataclass
class RepoSnapshot:
    """Ordered, deduplicated file list of one repository state."""

    root: Path
    files: list[FileEntry] = field(default_factory=list)
    ignored: int = 0

    def read_text(self, path: str | Path) -> str:
        """Read a file by root-relative or absolute path. Raises OSError / UnicodeDecodeError."""
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        return p.read_text(encoding="utf-8")

    def paths(self) -> list[str]:
        return [f.path for f in self.files]


@dataclass(frozen=True)
class ScanFilters:
    """Compiled path filters: config include/exclude plus .gitignore and .aibrainignore."""

    include: PathSpec
    exclude: PathSpec
    ignore: GitIgnoreSpec

    def skips(self, rel_posix: str) -> bool:
        if not self.include.match_file(rel_posix):
            return True
        return self.exclude.match_file(rel_posix) or self.ignore.match_file(rel_posix)


def _ignore_lines(root: Path) -> list[str]:
    # .aibrainignore comes last so its negations can re-include gitignored paths
    lines: list[str] = []
    for name in (".gitignore", IGNORE_FILE):
        path = root / name
        if not path.is_file():
            continue
        try:
            lines.extend(path.read_text(encoding="utf-8").splitlines())
        except (OSError, UnicodeDecodeError) as exc:
            _log.debug("collector: cannot read %s: %s", path, exc)
    return lines


def compile_filters(root: Path, config: BrainConfig) -> ScanFilters:
    return ScanFilters(
        include=PathSpec.from_lines("gitwildmatch", config.include),
        exclude=PathSpec.from_lines("gitwildmatch", config.exclude),
        ignore=GitIgnoreSpec.from_lines(_ignore_lines(Path(root))),
    )


def _is_candidate(rel_posix: str) -> bool:
    name = PurePosixPath(rel_posix).name
    return PurePosixPath(rel_posix).suffix in SOURCE_EXTS or name in MANIFEST_NAMES


def collect(root: Path, config: BrainConfig) -> RepoSnapshot:
    """Build a RepoSnapshot for root. Raises ScanError if root cannot be read."""
    root = Path(root).resolve()
    if not root.is_dir():
        raise ScanError(f"not a directory: {root}")
    try:
        next(os.scandir(root), None)
    except OSError as exc:
        raise ScanError(f"cannot read repository root {root}: {exc}") from exc

    filters = compile_filters(root, config)
    brain_rel = None
    brain_dir = config.brain_path(root).resolve()
    if brain_dir.is_relative_to(root):
        brain_rel = brain_dir.relative_to(root).as_posix()

    candidates: list[tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        kept = []
        for d in dirnames:
            rel = d if rel_dir == "." else f"{rel_dir}/{d}"
            if d in SKIP_DIRS or rel == brain_rel:
                continue
            kept.append(d)
        dirnames[:] = sorted(kept)
        for name in filenames:
            rel = name if rel_dir == "." else f"{rel_dir}/{name}"
            if _is_candidate(rel):
                candidates.append((rel, Path(dirpath) / name))

    candidates.sort(key=lambda item: item[0])
    max_bytes = config.max_file_kb * 1024
    files: list[FileEntry] = []
    ignored = 0
    for rel, abs_path in candidates:
        if filters.skips(rel):
            ignored += 1
            continue
        try:
            size = abs_path.stat().st_size
        except OSError as exc:
            _log.debug("collector: cannot stat %s: %s", rel, exc)
            ignored += 1
            continue
        if size > max_bytes:
            _log.debug("collector: skipping %s (%d bytes > %d)", rel, size, max_bytes)
            ignored += 1
            continue
        if len(files) >= config.max_files:
            ignored += 1
            continue
        files.append(FileEntry(path=rel, size=size))

    _log.debug("collector: %d files kept, %d ignored under %s", len(files), ignored, root)
    return RepoSnapshot(root=root, files=files, ignored=ignored)
