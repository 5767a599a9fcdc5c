"""Convention mining: naming and test placement habits with a confidence label.

Each convention counts how many candidate files follow the dominant habit.
confidence() turns the count into a score and a label; HIGH needs a ratio
above 0.8 and more than two hits, so a repository with two files never
produces a HIGH convention.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Any

from aibrain.analysis.extractors import PY_EXTS, TS_EXTS
from aibrain.collector import RepoSnapshot
from aibrain.evidence import CODE, EvidenceIndex, Observation

HIGH = "HIGH"
MED = "MED"
LOW = "LOW"
CONFLICT = "CONFLICT"

MAX_EXAMPLES = 3

TEST_DIRS = frozenset({"tests", "test", "__tests__", "spec"})

_PY_TEST_RE = re.compile(r"^(test_.+|.+_test)\.py$")
_TS_TEST_RE = re.compile(r"\.(test|spec)\.[cm]?[jt]sx?$")
_SNAKE_RE = re.compile(r"^_{0,2}[a-z][a-z0-9_]*$")

_TS_STYLES = (
    ("kebab-case", re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)+$")),
    ("camelCase", re.compile(r"^[a-z][a-z0-9]*([A-Z][a-z0-9]*)+$")),
    ("PascalCase", re.compile(r"^[A-Z][a-z0-9]+([A-Z][a-z0-9]*)*$")),
    ("snake_case", re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)+$")),
)


def confidence(hits: int, total: int) -> tuple[float, str]:
    if total <= 0:
        return 0.0, LOW
    ratio = hits / total
    if ratio > 0.8 and hits > 2:
        label = HIGH
    elif ratio > 0.5:
        label = MED
    else:
        label = LOW
    return round(ratio, 3), label


@dataclass(frozen=True)
class Convention:
    conv_id: str
    description: str
    confidence: str
    score: float
    examples: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "conv_id": self.conv_id,
            "description": self.description,
            "confidence": self.confidence,
            "score": self.score,
            "examples": list(self.examples),
        }


@dataclass
class Conventions:
    items: list[Convention] = field(default_factory=list)

    def conflicts(self) -> list[str]:
        return [c.conv_id for c in self.items if c.confidence == CONFLICT]

    def to_dict(self) -> dict[str, Any]:
        return {"items": [c.to_dict() for c in self.items]}


def _examples(paths: list[str], evidence: EvidenceIndex | None) -> tuple[str, ...]:
    if evidence is None:
        return ()
    return tuple(evidence.add(Observation(path=p, kind=CODE)) for p in paths[:MAX_EXAMPLES])


def _ext(path: str) -> str:
    return posixpath.splitext(path)[1]


def is_test_file(path: str) -> bool:
    name = posixpath.basename(path)
    if _ext(name) in PY_EXTS:
        return bool(_PY_TEST_RE.match(name))
    return bool(_TS_TEST_RE.search(name))


def mine_test_placement(paths: list[str], evidence: EvidenceIndex | None = None) -> Convention | None:
    tests = [p for p in paths if is_test_file(p)]
    if not tests:
        return None
    dedicated = [p for p in tests if set(p.split("/")[:-1]) & TEST_DIRS]
    colocated = [p for p in tests if p not in dedicated]
    if len(dedicated) == len(colocated):
        return Convention(
            conv_id="tests.placement",
            description="Tests are split evenly between dedicated test directories and colocated files",
            confidence=CONFLICT,
            score=0.5,
            examples=_examples(dedicated[:1] + colocated[:1], evidence),
        )
    if len(dedicated) > len(colocated):
        winners, description = dedicated, "Tests live in dedicated test directories"
    else:
        winners, description = colocated, "Tests are colocated with the code they cover"
    score, label = confidence(len(winners), len(tests))
    return Convention(
        conv_id="tests.placement",
        description=description,
        confidence=label,
        score=score,
        examples=_examples(winners, evidence),
    )


def mine_python_naming(paths: list[str], evidence: EvidenceIndex | None = None) -> Convention | None:
    modules = [p for p in paths if _ext(p) in PY_EXTS]
    if not modules:
        return None
    snake = [p for p in modules if _SNAKE_RE.match(posixpath.splitext(posixpath.basename(p))[0])]
    score, label = confidence(len(snake), len(modules))
    return Convention(
        conv_id="naming.python_modules",
        description="Python modules use snake_case file names",
        confidence=label,
        score=score,
        examples=_examples(snake, evidence),
    )


def _ts_stem(path: str) -> str:
    # "user-card.test.tsx" -> "user-card"
    return posixpath.basename(path).split(".", 1)[0]


def mine_ts_naming(paths: list[str], evidence: EvidenceIndex | None = None) -> Convention | None:
    by_style: dict[str, list[str]] = {name: [] for name, _ in _TS_STYLES}
    total = 0
    for p in paths:
        if _ext(p) not in TS_EXTS:
            continue
        stem = _ts_stem(p)
        for name, pattern in _TS_STYLES:
            if pattern.match(stem):
                by_style[name].append(p)
                total += 1
                break
    if total == 0:
        return None
    # ties go to the earlier style in _TS_STYLES
    style = max(by_style, key=lambda name: len(by_style[name]))
    score, label = confidence(len(by_style[style]), total)
    return Convention(
        conv_id="naming.ts_files",
        description=f"JS/TS files use {style} names",
        confidence=label,
        score=score,
        examples=_examples(by_style[style], evidence),
    )


def mine_conventions(snapshot: RepoSnapshot, evidence: EvidenceIndex | None = None) -> Conventions:
    paths = snapshot.paths()
    items: list[Convention] = []
    for miner in (mine_test_placement, mine_python_naming, mine_ts_naming):
        conv = miner(paths, evidence)
        if conv is not None:
            items.append(conv)
    return Conventions(items=items)
