"""Repository profile: languages, frameworks, package managers."""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass, field
from typing import Any

from aibrain.collector import RepoSnapshot
from aibrain.core.logging import get_logger

LANGUAGE_BY_EXT = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".py": "Python",
    ".go": "Go",
    ".rs": "Rust",
}

PACKAGE_MANAGER_BY_FILE = {
    "package-lock.json": "npm",
    "pnpm-lock.yaml": "pnpm",
    "yarn.lock": "yarn",
    "poetry.lock": "poetry",
    "requirements.txt": "pip",
}

FRAMEWORK_BY_FILE = {
    "next.config.js": "Next.js",
    "next.config.mjs": "Next.js",
    "vite.config.ts": "Vite",
    "vite.config.js": "Vite",
}

FRAMEWORK_BY_DEPENDENCY = {
    "next": "Next.js",
    "react": "React",
    "vue": "Vue",
    "@angular/core": "Angular",
    "express": "Express",
    "@nestjs/core": "NestJS",
    "vite": "Vite",
}

_log = get_logger("analysis.profile")


@dataclass
class Profile:
    languages: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    package_managers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "languages": list(self.languages),
            "frameworks": list(self.frameworks),
            "package_managers": list(self.package_managers),
        }


def _package_json_frameworks(snapshot: RepoSnapshot, path: str) -> set[str]:
    try:
        data = json.loads(snapshot.read_text(path))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        _log.debug("profile: unreadable %s: %s", path, exc)
        return set()
    if not isinstance(data, dict):
        return set()
    found: set[str] = set()
    for section in ("dependencies", "devDependencies"):
        deps = data.get(section)
        if isinstance(deps, dict):
            found.update(FRAMEWORK_BY_DEPENDENCY[d] for d in deps if d in FRAMEWORK_BY_DEPENDENCY)
    return found


def build_profile(snapshot: RepoSnapshot) -> Profile:
    languages: set[str] = set()
    frameworks: set[str] = set()
    managers: set[str] = set()
    for entry in snapshot.files:
        name = posixpath.basename(entry.path)
        ext = posixpath.splitext(name)[1]
        if ext in LANGUAGE_BY_EXT:
            languages.add(LANGUAGE_BY_EXT[ext])
        if name in PACKAGE_MANAGER_BY_FILE:
            managers.add(PACKAGE_MANAGER_BY_FILE[name])
        if name in FRAMEWORK_BY_FILE:
            frameworks.add(FRAMEWORK_BY_FILE[name])
        if name == "package.json":
            frameworks.update(_package_json_frameworks(snapshot, entry.path))
    return Profile(languages=sorted(languages), frameworks=sorted(frameworks), package_managers=sorted(managers))
