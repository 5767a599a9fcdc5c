"""The Brain: complete generated model of one repository state."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from aibrain import SCHEMA_VERSION, TOOL_NAME, __version__
from aibrain.analysis.imports import ImportGraph
from aibrain.analysis.profile import Profile
from aibrain.analysis.structure import ProjectStructure
from aibrain.analysis.workflows import Workflows
from aibrain.evidence import EvidenceIndex
from aibrain.miner.conventions import Conventions
from aibrain.rules.models import Rules


def read_git_commit(root: Path) -> Optional[str]:
    """HEAD commit sha read from .git without running git; None when unavailable."""
    git_dir = Path(root) / ".git"
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
    except OSError:
        return None
    if not head.startswith("ref:"):
        return head or None
    ref = head[len("ref:"):].strip()
    try:
        sha = (git_dir / ref).read_text(encoding="utf-8").strip()
        return sha or None
    except OSError:
        pass
    try:
        packed = (git_dir / "packed-refs").read_text(encoding="utf-8")
    except OSError:
        return None
    for line in packed.splitlines():
        parts = line.split()
        if len(parts) == 2 and parts[1] == ref:
            return parts[0]
    return None


@dataclass
class RepoInfo:
    root: str
    git_commit: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "root": self.root,
            "generated_with": {"tool": TOOL_NAME, "version": __version__},
        }
        if self.git_commit:
            data["git_commit"] = self.git_commit
        return data


@dataclass
class Brain:
    repo: RepoInfo
    profile: Profile
    structure: ProjectStructure
    graphs: ImportGraph
    conventions: Conventions
    rules: Rules
    workflows: Workflows
    evidence: EvidenceIndex
    files_scanned: int = 0
    files_ignored: int = 0
    schema_version: str = SCHEMA_VERSION
    brain_version: str = __version__

    @property
    def conflicts(self) -> list[str]:
        return sorted(self.conventions.conflicts())

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "brain_version": self.brain_version,
            "repo": self.repo.to_dict(),
            "profile": self.profile.to_dict(),
            "structure": self.structure.to_dict(),
            "graphs": self.graphs.to_dict(),
            "conventions": self.conventions.to_dict(),
            "rules": self.rules.to_dict(),
            "workflows": self.workflows.to_dict(),
            "evidence": self.evidence.to_dict(),
            "status": {
                "coverage": {"files_scanned": self.files_scanned, "files_ignored": self.files_ignored},
                "conflicts": self.conflicts,
            },
        }
