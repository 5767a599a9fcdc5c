"""Tests for aibrain.evidence (deterministic evidence ids and the index)."""

import hashlib

import pytest

from aibrain.evidence import (
    CODE,
    CONFIG,
    EvidenceCollisionError,
    EvidenceIndex,
    EvidenceRecord,
    Observation,
    build_evidence_index,
    evidence_id,
    fingerprint,
)


def test_evidence_id_format_and_definition() -> None:
    expected = "ev:" + hashlib.sha256(b"apps/web/package.json:0:0:config").hexdigest()[:12]
    assert evidence_id("apps/web/package.json", None, None, CONFIG) == expected
    assert evidence_id("apps/web/package.json", 0, 0, CONFIG) == expected


def test_evidence_id_is_stable_across_indexes() -> None:
    obs = Observation(path="src/a.ts", kind=CODE, start_line=3, end_line=7)
    assert EvidenceIndex().add(obs) == EvidenceIndex().add(obs)


def test_id_ignores_excerpt_content() -> None:
    index = EvidenceIndex()
    a = index.add(Observation(path="Makefile", kind=CONFIG, start_line=1, end_line=1, excerpt="test:"))
    b = EvidenceIndex().add(Observation(path="Makefile", kind=CONFIG, start_line=1, end_line=1, excerpt="changed:"))
    assert a == b
    assert index.get(a).excerpt_hash == fingerprint("test:")


def test_explicit_content_hash_wins_over_excerpt() -> None:
    index = EvidenceIndex()
    eid = index.add(Observation(path="a.py", kind=CODE, content_hash="abc", excerpt="x"))
    assert index.get(eid).excerpt_hash == "abc"


def test_readding_same_location_merges() -> None:
    index = EvidenceIndex()
    obs = Observation(path="a.py", kind=CODE, start_line=1, end_line=2)
    first = index.add(obs)
    second = index.add(Observation(path="a.py", kind=CODE, start_line=1, end_line=2, excerpt="x = 1"))
    assert first == second
    assert len(index) == 1
    # the first fingerprint seen is kept
    assert index.get(first).excerpt_hash == fingerprint("x = 1")


def test_collision_is_refused_and_original_kept() -> None:
    index = EvidenceIndex()
    eid = index.add(Observation(path="a.py", kind=CODE, start_line=1))
    fabricated = EvidenceRecord(path="b.py", kind=CODE, start_line=9)
    with pytest.raises(EvidenceCollisionError):
        index.put(eid, fabricated)
    assert index.get(eid).path == "a.py"


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        EvidenceIndex().add(Observation(path="a.py", kind="log"))


def test_snippets_only_stored_when_enabled() -> None:
    obs = Observation(path="a.py", kind=CODE, start_line=1, end_line=1, excerpt="import os")
    plain = EvidenceIndex()
    eid = plain.add(obs)
    assert "snippet" not in plain.to_dict()[eid]
    with_snippets = EvidenceIndex(store_snippets=True)
    with_snippets.add(obs)
    assert with_snippets.to_dict()[eid]["snippet"] == "import os"


def test_build_evidence_index_sorted_output() -> None:
    index = build_evidence_index(
        [
            Observation(path="z.py", kind=CODE),
            Observation(path="a.py", kind=CODE, start_line=2, end_line=2),
            Observation(path="z.py", kind=CODE),
        ]
    )
    data = index.to_dict()
    assert len(data) == 2
    assert list(data) == sorted(data)
    assert data[evidence_id("a.py", 2, 2, CODE)] == {"path": "a.py", "kind": "code", "start_line": 2, "end_line": 2}
    assert evidence_id("z.py", None, None, CODE) in index
