"""Project structure inference from manifest files.

Every directory holding a package.json, pyproject.toml or setup.py is a
project. The kind is guessed from its location (apps/, services/ -> app;
packages/, libs/ -> library).
"""

from __future__ import annotations

import json
import posixpath
import tomllib
from dataclasses import dataclass, field
from typing import Any

from aibrain.collector import RepoSnapshot
from aibrain.core.logging import get_logger
from aibrain.evidence import CONFIG, EvidenceIndex, Observation

APP = "app"
LIBRARY = "library"
SERVICE = "service"
PACKAGE = "package"
UNKNOWN = "unknown"
PROJECT_KINDS = frozenset({APP, LIBRARY, SERVICE, PACKAGE, UNKNOWN})

MARKER_FILES = ("package.json", "pyproject.toml", "setup.py")

_APP_SEGMENTS = frozenset({"apps", "services"})
_LIBRARY_SEGMENTS = frozenset({"packages", "libs"})

_log = get_logger("analysis.structure")


@dataclass(frozen=True)
class ProjectDescriptor:
    path: str
    kind: str
    name: str
    evidence: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "type": self.kind, "name": self.name, "evidence": list(self.evidence)}


@dataclass
class ProjectStructure:
    projects: list[ProjectDescriptor] = field(default_factory=list)
    boundaries: list[str] = field(default_factory=list)
    domains: list[str] = field(default_factory=list)

    def paths(self) -> list[str]:
        return [p.path for p in self.projects]

    def to_dict(self) -> dict[str, Any]:
        return {
            "projects": [p.to_dict() for p in self.projects],
            "boundaries": list(self.boundaries),
            "domains": list(self.domains),
        }


def infer_kind(project_dir: str) -> str:
    segments = set(project_dir.split("/"))
    if segments & _APP_SEGMENTS:
        return APP
    if segments & _LIBRARY_SEGMENTS:
        return LIBRARY
    return UNKNOWN


def _manifest_name(snapshot: RepoSnapshot, path: str) -> str | None:
    """Project name declared in a manifest, if it can be read."""
    base = posixpath.basename(path)
    try:
        text = snapshot.read_text(path)
        if base == "package.json":
            name = json.loads(text).get("name")
        elif base == "pyproject.toml":
            name = (tomllib.loads(text).get("project") or {}).get("name")
        else:
            return None
    except (OSError, UnicodeDecodeError, ValueError, AttributeError) as exc:
        _log.debug("structure: cannot read name from %s: %s", path, exc)
        return None
    return name if isinstance(name, str) and name else None


def infer_structure(snapshot: RepoSnapshot, evidence: EvidenceIndex | None = None) -> ProjectStructure:
    """Projects from marker files, in snapshot order; one project per directory."""
    by_dir: dict[str, ProjectDescriptor] = {}
    for entry in snapshot.files:
        base = posixpath.basename(entry.path)
        if base not in MARKER_FILES:
            continue
        project_dir = posixpath.dirname(entry.path) or "."
        refs: tuple[str, ...] = ()
        if evidence is not None:
            refs = (evidence.add(Observation(path=entry.path, kind=CONFIG)),)
        existing = by_dir.get(project_dir)
        if existing is not None:
            by_dir[project_dir] = ProjectDescriptor(
                path=existing.path,
                kind=existing.kind,
                name=existing.name,
                evidence=tuple(sorted(set(existing.evidence + refs))),
            )
            continue
        default_name = posixpath.basename(project_dir) if project_dir != "." else snapshot.root.name
        by_dir[project_dir] = ProjectDescriptor(
            path=project_dir,
            kind=infer_kind(project_dir),
            name=_manifest_name(snapshot, entry.path) or default_name,
            evidence=refs,
        )

    projects = sorted(by_dir.values(), key=lambda p: p.path)
    boundaries = [p.path for p in projects if p.path != "."]
    return ProjectStructure(projects=projects, boundaries=boundaries, domains=[])


def enclosing_project(path: str, project_paths: list[str] | tuple[str, ...] | frozenset[str]) -> str | None:
    """Longest project path containing path, matching on path boundaries.

    "apps/web" contains "apps/web/x.ts" but not "apps/webhooks/x.ts"; "."
    is the repository root and contains everything.
    """
    best: str | None = None
    best_len = -1
    for project in project_paths:
        if project in (".", ""):
            length = 0
        elif path == project or path.startswith(project.rstrip("/") + "/"):
            length = len(project)
        else:
            continue
        if length > best_len:
            best, best_len = project, length
    return best
