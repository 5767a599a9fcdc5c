"""Rule DSL types, check verdict and exit-code mapping."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from aibrain.errors import RuleDefinitionError

HARD = "HARD"
SOFT = "SOFT"
UNKNOWN = "UNKNOWN"
SEVERITIES = frozenset({HARD, SOFT, UNKNOWN})

NO_IMPORT = "no_import"
ALLOWED_IMPORTS = "allowed_imports"
LAYER_ORDER = "layer_order"
NO_CROSS_PROJECT_IMPORT = "no_cross_project_import"
MUST_USE_COMMAND = "must_use_command"
NAMING_CONVENTION = "naming_convention"
RULE_TYPES = frozenset(
    {NO_IMPORT, ALLOWED_IMPORTS, LAYER_ORDER, NO_CROSS_PROJECT_IMPORT, MUST_USE_COMMAND, NAMING_CONVENTION}
)

DEFAULT_CONFIDENCE_TO_SEVERITY: Mapping[str, str] = MappingProxyType(
    {"HIGH": HARD, "MED": SOFT, "LOW": UNKNOWN, "CONFLICT": UNKNOWN}
)

EXIT_CLEAN = 0
EXIT_WARNINGS = 1
EXIT_HARD = 2


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(_freeze(v) for v in value))
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def rule_id_for(rule_type: str, scope: Iterable[str]) -> str:
    """Deterministic id from rule type and scope; scope order does not matter."""
    key = "\n".join(sorted(set(scope)))
    return f"{rule_type}:{hashlib.sha256(key.encode('utf-8')).hexdigest()[:10]}"


@dataclass(frozen=True)
class Rule:
    """Immutable once built: params are frozen into read-only mappings and tuples."""

    rule_id: str
    type: str
    severity: str
    params: Mapping[str, Any] = field(default_factory=dict)
    rationale: str = ""
    evidence: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _freeze(dict(self.params)))
        object.__setattr__(self, "evidence", tuple(self.evidence))

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "type": self.type,
            "severity": self.severity,
            "params": _thaw(self.params),
            "rationale": self.rationale,
            "evidence": list(self.evidence),
        }


def rule_from_dict(data: Any) -> Rule:
    """Parse a stored or declared rule. Raises RuleDefinitionError when malformed.

    Unknown types are accepted here; the checker decides what it can evaluate.
    """
    if not isinstance(data, Mapping):
        raise RuleDefinitionError("rule must be a table/object")
    rule_type = data.get("type")
    if not isinstance(rule_type, str) or not rule_type:
        raise RuleDefinitionError("rule has no type")
    params = data.get("params", {})
    if not isinstance(params, Mapping):
        raise RuleDefinitionError(f"rule params must be a mapping ({rule_type})")
    rule_id = data.get("rule_id", data.get("id"))
    if rule_id is None:
        rule_id = rule_id_for(rule_type, [repr(sorted(params.items(), key=lambda kv: kv[0]))])
    if not isinstance(rule_id, str) or not rule_id:
        raise RuleDefinitionError(f"rule id must be a non-empty string ({rule_type})")
    severity = str(data.get("severity", UNKNOWN)).upper()
    if severity not in SEVERITIES:
        raise RuleDefinitionError(f"rule {rule_id}: unknown severity {data.get('severity')!r}")
    evidence = data.get("evidence", [])
    if not isinstance(evidence, (list, tuple)) or not all(isinstance(e, str) for e in evidence):
        raise RuleDefinitionError(f"rule {rule_id}: evidence must be a list of ids")
    rationale = data.get("rationale") or ""
    return Rule(
        rule_id=rule_id,
        type=rule_type,
        severity=severity,
        params=params,
        rationale=str(rationale),
        evidence=tuple(evidence),
    )


@dataclass(frozen=True)
class RulesPolicy:
    fail_on_warnings: bool = False
    confidence_to_severity: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CONFIDENCE_TO_SEVERITY)

    def severity_for(self, confidence: str) -> str:
        return self.confidence_to_severity.get(confidence, UNKNOWN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fail_on_warnings": self.fail_on_warnings,
            "confidence_to_severity": dict(self.confidence_to_severity),
        }


@dataclass(frozen=True)
class Rules:
    policy: RulesPolicy = field(default_factory=RulesPolicy)
    items: tuple[Rule, ...] = ()

    def ids(self) -> list[str]:
        return [r.rule_id for r in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {"policy": self.policy.to_dict(), "items": [r.to_dict() for r in self.items]}


@dataclass(frozen=True)
class Violation:
    rule_id: str
    from_path: str
    to_ref: str
    specifier_text: str
    severity: str
    message: str
    source_project: str | None = None
    target_project: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "from_path": self.from_path,
            "to_ref": self.to_ref,
            "specifier": self.specifier_text,
            "severity": self.severity,
            "message": self.message,
            "source_project": self.source_project,
            "target_project": self.target_project,
        }


def exit_code_for(has_hard_violations: bool, has_warnings: bool) -> int:
    if has_hard_violations:
        return EXIT_HARD
    if has_warnings:
        return EXIT_WARNINGS
    return EXIT_CLEAN


@dataclass(frozen=True)
class CheckResult:
    violations: tuple[Violation, ...] = ()
    skipped_rules: tuple[str, ...] = ()
    unevaluated_rules: tuple[str, ...] = ()

    @property
    def has_hard_violations(self) -> bool:
        return any(v.severity == HARD for v in self.violations)

    @property
    def has_warnings(self) -> bool:
        return any(v.severity == SOFT for v in self.violations)

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.has_hard_violations, self.has_warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "violations": [v.to_dict() for v in self.violations],
            "skipped_rules": list(self.skipped_rules),
            "unevaluated_rules": list(self.unevaluated_rules),
            "has_hard_violations": self.has_hard_violations,
            "has_warnings": self.has_warnings,
            "exit_code": self.exit_code,
        }
