"""Deterministic evidence records.

The ID of a record depends only on (path, start_line, end_line, kind): the
same location observed on another run, even after its content changed, keeps
its ID. Content drift shows up in excerpt_hash instead.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

CODE = "code"
CONFIG = "config"
DOC = "doc"
KINDS = frozenset({CODE, CONFIG, DOC})

ID_PREFIX = "ev:"
ID_LENGTH = 12


class EvidenceCollisionError(Exception):
    """Two different locations hashed to the same evidence ID."""


@dataclass(frozen=True)
class Observation:
    """Raw observation submitted by a pipeline stage."""

    path: str
    kind: str
    start_line: int | None = None
    end_line: int | None = None
    content_hash: str | None = None
    excerpt: str | None = None


@dataclass(frozen=True)
class EvidenceRecord:
    path: str
    kind: str
    start_line: int | None = None
    end_line: int | None = None
    excerpt_hash: str | None = None
    snippet: str | None = None

    def location(self) -> tuple[str, int, int, str]:
        return (self.path, self.start_line or 0, self.end_line or 0, self.kind)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"path": self.path, "kind": self.kind}
        if self.start_line is not None:
            data["start_line"] = self.start_line
        if self.end_line is not None:
            data["end_line"] = self.end_line
        if self.excerpt_hash is not None:
            data["excerpt_hash"] = self.excerpt_hash
        if self.snippet is not None:
            data["snippet"] = self.snippet
        return data


def evidence_id(path: str, start_line: int | None, end_line: int | None, kind: str) -> str:
    key = f"{path}:{start_line or 0}:{end_line or 0}:{kind}"
    return ID_PREFIX + hashlib.sha256(key.encode("utf-8")).hexdigest()[:ID_LENGTH]


def fingerprint(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class EvidenceIndex:
    """Evidence ID -> record. One index per pipeline run.

    add() returns the ID immediately so producers can store it inline.
    """

    def __init__(self, *, store_snippets: bool = False) -> None:
        self._records: dict[str, EvidenceRecord] = {}
        self._store_snippets = store_snippets

    def add(self, observation: Observation) -> str:
        if observation.kind not in KINDS:
            raise ValueError(f"unknown evidence kind: {observation.kind}")
        eid = evidence_id(observation.path, observation.start_line, observation.end_line, observation.kind)
        excerpt_hash = observation.content_hash
        if excerpt_hash is None and observation.excerpt is not None:
            excerpt_hash = fingerprint(observation.excerpt)
        record = EvidenceRecord(
            path=observation.path,
            kind=observation.kind,
            start_line=observation.start_line,
            end_line=observation.end_line,
            excerpt_hash=excerpt_hash,
            snippet=observation.excerpt if self._store_snippets else None,
        )
        self.put(eid, record)
        return eid

    def put(self, eid: str, record: EvidenceRecord) -> None:
        """Store a record; refuses to overwrite a different location under the same ID."""
        existing = self._records.get(eid)
        if existing is None:
            self._records[eid] = record
            return
        if existing.location() != record.location():
            raise EvidenceCollisionError(
                f"evidence id {eid} already holds {existing.location()}, refusing {record.location()}"
            )
        if existing.excerpt_hash is None and record.excerpt_hash is not None:
            # same evidence re-observed; keep the first fingerprint seen
            self._records[eid] = record

    def get(self, eid: str) -> EvidenceRecord | None:
        return self._records.get(eid)

    def __contains__(self, eid: object) -> bool:
        return eid in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._records))

    def items(self) -> list[tuple[str, EvidenceRecord]]:
        return sorted(self._records.items())

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {eid: record.to_dict() for eid, record in self.items()}


def build_evidence_index(observations: Iterable[Observation], *, store_snippets: bool = False) -> EvidenceIndex:
    """Single-shot build over the complete set of observations."""
    index = EvidenceIndex(store_snippets=store_snippets)
    for obs in observations:
        index.add(obs)
    return index
