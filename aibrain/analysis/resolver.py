"""Turn raw specifiers into canonical, comparable module references.

Resolution is a directory-relative heuristic, not Node or PEP 420 module
resolution. A ModuleResolver only holds immutable data derived once from the
snapshot, so resolve() is a pure function of its arguments.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Iterable

from aibrain.analysis.extractors import PY_FAMILY, TS_EXTS, TS_FAMILY

EXTERNAL = "external"
INTERNAL = "internal"


@dataclass(frozen=True, order=True)
class ModuleRef:
    """Resolved import target.

    Internal targets are root-relative: dotted for Python (`apps.api.utils`),
    slash-separated for JS/TS (`apps/api/y`). External targets keep the
    specifier verbatim and are never resolved further.
    """

    kind: str
    target: str
    family: str = TS_FAMILY

    @classmethod
    def external(cls, specifier: str, family: str = TS_FAMILY) -> "ModuleRef":
        return cls(kind=EXTERNAL, target=specifier, family=family)

    @classmethod
    def internal(cls, target: str, family: str = TS_FAMILY) -> "ModuleRef":
        return cls(kind=INTERNAL, target=target, family=family)

    @property
    def is_internal(self) -> bool:
        return self.kind == INTERNAL

    @property
    def path(self) -> str:
        """Slash form used for project lookup."""
        if self.family == PY_FAMILY and self.is_internal:
            return self.target.replace(".", "/")
        return self.target

    def __str__(self) -> str:
        return self.target


def _strip_ts_suffix(path: str) -> str:
    p = PurePosixPath(path)
    if p.suffix in TS_EXTS:
        path = path[: -len(p.suffix)]
    if path.endswith("/index"):
        path = path[: -len("/index")]
    return path


def _strip_relative_prefix(spec: str) -> str:
    parts = [p for p in spec.split("/") if p not in (".", "..", "")]
    return "/".join(parts)


class ModuleResolver:
    """Resolver bound to one snapshot's directory layout."""

    def __init__(
        self,
        internal_roots: Iterable[str] = (),
        known_dirs: Iterable[str] = (),
        package_roots: dict[str, Iterable[str]] | None = None,
    ) -> None:
        self._roots = frozenset(internal_roots)
        self._dirs = frozenset(known_dirs)
        # importable python package name -> package directories carrying that name
        self._packages = {name: tuple(sorted(set(locs))) for name, locs in (package_roots or {}).items()}

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "ModuleResolver":
        """Derive top-level names, directories and Python package roots from a file list."""
        paths = sorted(set(paths))
        roots: set[str] = set()
        dirs: set[str] = set()
        init_dirs: set[str] = set()
        for rel in paths:
            p = PurePosixPath(rel)
            parts = p.parts
            if len(parts) > 1:
                roots.add(parts[0])
            elif p.suffix == ".py":
                roots.add(p.stem)
            for i in range(1, len(parts)):
                dirs.add("/".join(parts[:i]))
            if p.name == "__init__.py" and len(parts) > 1:
                init_dirs.add(str(p.parent))
        packages: dict[str, list[str]] = {}
        for d in sorted(init_dirs):
            parent = posixpath.dirname(d)
            if parent in init_dirs:
                continue
            name = posixpath.basename(d)
            packages.setdefault(name, []).append(d)
        return cls(internal_roots=roots, known_dirs=dirs, package_roots=packages)

    def resolve(self, specifier: str, dots: int, source_path: str, family: str) -> ModuleRef:
        spec = specifier.replace("\\", "/")
        source = source_path.replace("\\", "/")
        if family == PY_FAMILY:
            return self._resolve_py(spec, dots, source)
        return self._resolve_ts(spec, source)

    def _resolve_py(self, spec: str, dots: int, source: str) -> ModuleRef:
        if dots <= 0:
            first = spec.split(".", 1)[0]
            if first in self._roots:
                return ModuleRef.internal(spec, PY_FAMILY)
            if first in self._packages:
                location = self._package_for(first, source)
                if location is None:
                    return ModuleRef.external(spec, PY_FAMILY)
                return ModuleRef.internal(location.replace("/", ".") + spec[len(first):], PY_FAMILY)
            return ModuleRef.external(spec, PY_FAMILY)

        remainder = spec[dots:]
        segments = [s for s in PurePosixPath(source).parent.parts if s not in (".", "")]
        pops = dots - 1
        if pops > len(segments):
            return ModuleRef.internal(remainder or spec, PY_FAMILY)
        base = segments[: len(segments) - pops]
        joined = [*base, *[s for s in remainder.split(".") if s]]
        if not joined:
            return ModuleRef.internal(remainder or spec, PY_FAMILY)
        return ModuleRef.internal(".".join(joined), PY_FAMILY)

    def _resolve_ts(self, spec: str, source: str) -> ModuleRef:
        if spec in (".", "..") or spec.startswith(("./", "../")):
            source_dir = posixpath.dirname(source)
            normalized = posixpath.normpath(posixpath.join(source_dir, spec)) if source_dir else posixpath.normpath(spec)
            remainder = _strip_relative_prefix(spec)
            escaped = normalized == ".." or normalized.startswith("../")
            if escaped:
                return ModuleRef.internal(_strip_ts_suffix(remainder) or spec, TS_FAMILY)
            if self._dirs and not self._lands_in_known_dir(normalized) and remainder:
                head = remainder.split("/", 1)[0]
                if head in self._dirs:
                    return ModuleRef.internal(_strip_ts_suffix(remainder), TS_FAMILY)
            if normalized == ".":
                return ModuleRef.internal(".", TS_FAMILY)
            return ModuleRef.internal(_strip_ts_suffix(normalized), TS_FAMILY)

        if spec.startswith("/"):
            return ModuleRef.internal(_strip_ts_suffix(posixpath.normpath(spec.lstrip("/"))), TS_FAMILY)
        first = spec.split("/", 1)[0]
        if first in self._dirs and "/" in spec:
            return ModuleRef.internal(_strip_ts_suffix(posixpath.normpath(spec)), TS_FAMILY)
        return ModuleRef.external(spec, TS_FAMILY)

    def _package_for(self, name: str, source: str) -> str | None:
        """Directory of package `name` as seen from source.

        A name shipped by several directories (two services each with an
        `app` package) resolves to the one whose parent is the closest
        ancestor of source; None when no candidate encloses source.
        """
        locations = self._packages[name]
        if len(locations) == 1:
            return locations[0]
        best: str | None = None
        best_len = -1
        for loc in locations:
            parent = posixpath.dirname(loc)
            if parent and not source.startswith(parent + "/"):
                continue
            if len(parent) > best_len:
                best, best_len = loc, len(parent)
        return best

    def _lands_in_known_dir(self, normalized: str) -> bool:
        parent = posixpath.dirname(normalized)
        return normalized in self._dirs or parent == "" or parent in self._dirs
