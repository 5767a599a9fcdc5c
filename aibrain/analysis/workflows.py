"""Workflow commands: package.json scripts and Makefile targets."""

from __future__ import annotations

import json
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any

from aibrain.collector import RepoSnapshot
from aibrain.core.logging import get_logger
from aibrain.evidence import CONFIG, EvidenceIndex, Observation

PACKAGE_JSON = "package.json"
MAKEFILE = "makefile"

_MAKE_TARGET_RE = re.compile(r"^(?P<name>[A-Za-z0-9][\w.-]*)\s*:(?!=)")

_log = get_logger("analysis.workflows")


@dataclass(frozen=True)
class WorkflowCommand:
    name: str
    command: str
    cwd: str
    source: str
    confidence: str
    evidence: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "command": self.command,
            "cwd": self.cwd,
            "source": self.source,
            "confidence": self.confidence,
            "evidence": list(self.evidence),
        }


@dataclass
class Workflows:
    commands: list[WorkflowCommand] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"commands": [c.to_dict() for c in self.commands]}


def _find_line(lines: list[str], needle: str) -> int | None:
    for i, line in enumerate(lines, start=1):
        if needle in line:
            return i
    return None


def _record(evidence: EvidenceIndex | None, path: str, line: int | None, excerpt: str | None) -> tuple[str, ...]:
    if evidence is None:
        return ()
    return (evidence.add(Observation(path=path, kind=CONFIG, start_line=line, end_line=line, excerpt=excerpt)),)


def _package_scripts(text: str, path: str, evidence: EvidenceIndex | None) -> list[WorkflowCommand]:
    data = json.loads(text)
    scripts = data.get("scripts") if isinstance(data, dict) else None
    if not isinstance(scripts, dict):
        return []
    lines = text.splitlines()
    cwd = posixpath.dirname(path) or "."
    commands: list[WorkflowCommand] = []
    for name, cmd in scripts.items():
        if not isinstance(cmd, str):
            continue
        line = _find_line(lines, json.dumps(name) + ":")
        excerpt = lines[line - 1].strip() if line else None
        commands.append(
            WorkflowCommand(
                name=name,
                command=cmd,
                cwd=cwd,
                source=PACKAGE_JSON,
                confidence="HIGH",
                evidence=_record(evidence, path, line, excerpt),
            )
        )
    return commands


def _make_targets(text: str, path: str, evidence: EvidenceIndex | None) -> list[WorkflowCommand]:
    cwd = posixpath.dirname(path) or "."
    commands: list[WorkflowCommand] = []
    seen: set[str] = set()
    for i, line in enumerate(text.splitlines(), start=1):
        m = _MAKE_TARGET_RE.match(line)
        if not m or m.group("name") in seen:
            continue
        name = m.group("name")
        seen.add(name)
        commands.append(
            WorkflowCommand(
                name=name,
                command=f"make {name}",
                cwd=cwd,
                source=MAKEFILE,
                confidence="MED",
                evidence=_record(evidence, path, i, line.strip()),
            )
        )
    return commands


def extract_workflows(snapshot: RepoSnapshot, evidence: EvidenceIndex | None = None) -> Workflows:
    commands: list[WorkflowCommand] = []
    for entry in snapshot.files:
        base = posixpath.basename(entry.path)
        if base not in (PACKAGE_JSON, "Makefile"):
            continue
        try:
            text = snapshot.read_text(entry.path)
            if base == PACKAGE_JSON:
                commands.extend(_package_scripts(text, entry.path, evidence))
            else:
                commands.extend(_make_targets(text, entry.path, evidence))
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            _log.debug("workflows: skipping %s: %s", entry.path, exc)
    return Workflows(commands=commands)
