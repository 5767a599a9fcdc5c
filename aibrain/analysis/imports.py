"""Import graph: per-file import nodes, partitioned by language family."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from aibrain.analysis.extractors import PY_FAMILY, TS_FAMILY, RawSpecifier, extract_specifiers, family_for_path
from aibrain.analysis.resolver import ModuleRef, ModuleResolver
from aibrain.collector import RepoSnapshot
from aibrain.core.logging import get_logger

_log = get_logger("analysis.imports")


@dataclass(frozen=True)
class ImportEdge:
    """Directed source -> target edge; specifier is the first one that produced it."""

    specifier: RawSpecifier
    target: ModuleRef


@dataclass(frozen=True)
class FileImportNode:
    source_path: str
    family: str
    raw_specifiers: tuple[RawSpecifier, ...]
    edges: tuple[ImportEdge, ...]

    @property
    def resolved_targets(self) -> tuple[ModuleRef, ...]:
        return tuple(e.target for e in self.edges)

    @property
    def internal_edges(self) -> tuple[ImportEdge, ...]:
        return tuple(e for e in self.edges if e.target.is_internal)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.source_path,
            "imports": [str(t) for t in self.resolved_targets],
            "specifiers": [s.tagged() for s in self.raw_specifiers],
        }


@dataclass
class ImportGraph:
    """Nodes keyed by source path, one partition per language family."""

    ts: dict[str, FileImportNode] = field(default_factory=dict)
    py: dict[str, FileImportNode] = field(default_factory=dict)
    # source files that could not be read; not serialized
    skipped: list[str] = field(default_factory=list)

    def partition(self, family: str) -> dict[str, FileImportNode]:
        if family == PY_FAMILY:
            return self.py
        if family == TS_FAMILY:
            return self.ts
        raise ValueError(f"unknown language family: {family}")

    def add(self, node: FileImportNode) -> None:
        if node.source_path in self.ts or node.source_path in self.py:
            raise ValueError(f"duplicate import node: {node.source_path}")
        self.partition(node.family)[node.source_path] = node

    def nodes(self) -> Iterator[FileImportNode]:
        """All nodes, TS partition first, each in insertion (collector) order."""
        yield from self.ts.values()
        yield from self.py.values()

    def __len__(self) -> int:
        return len(self.ts) + len(self.py)

    def to_dict(self) -> dict[str, Any]:
        return {
            "imports_ts": {path: node.to_dict() for path, node in self.ts.items()},
            "imports_py": {path: node.to_dict() for path, node in self.py.items()},
        }


def build_node(path: str, content: str, resolver: ModuleResolver) -> FileImportNode | None:
    """Extract and resolve one file. Returns None when the file has no imports."""
    family, specifiers = extract_specifiers(path, content)
    if family is None or not specifiers:
        return None
    edges: list[ImportEdge] = []
    seen: set[ModuleRef] = set()
    for spec in specifiers:
        target = resolver.resolve(spec.text, spec.dots, path, family)
        if target in seen:
            continue
        seen.add(target)
        edges.append(ImportEdge(specifier=spec, target=target))
    return FileImportNode(source_path=path, family=family, raw_specifiers=tuple(specifiers), edges=tuple(edges))


def build_import_graph(snapshot: RepoSnapshot, resolver: ModuleResolver | None = None) -> ImportGraph:
    """Read every source file in snapshot order and build the import graph.

    Unreadable, non-UTF-8 or binary-looking files are skipped.
    """
    if resolver is None:
        resolver = ModuleResolver.from_paths(snapshot.paths())
    graph = ImportGraph()
    for entry in snapshot.files:
        if family_for_path(entry.path) is None:
            continue
        try:
            content = snapshot.read_text(entry.path)
        except (OSError, UnicodeDecodeError) as exc:
            _log.debug("imports: skipping %s: %s", entry.path, exc)
            graph.skipped.append(entry.path)
            continue
        if "\x00" in content:
            _log.debug("imports: skipping binary-like %s", entry.path)
            graph.skipped.append(entry.path)
            continue
        node = build_node(entry.path, content, resolver)
        if node is not None:
            graph.add(node)
    return graph
