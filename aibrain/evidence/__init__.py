"""Evidence index: content-addressed pointers into the repository."""

from .index import (  # noqa: F401
    CODE,
    CONFIG,
    DOC,
    EvidenceCollisionError,
    EvidenceIndex,
    EvidenceRecord,
    Observation,
    build_evidence_index,
    evidence_id,
    fingerprint,
)

__all__ = [
    "CODE",
    "CONFIG",
    "DOC",
    "EvidenceCollisionError",
    "EvidenceIndex",
    "EvidenceRecord",
    "Observation",
    "build_evidence_index",
    "evidence_id",
    "fingerprint",
]
