"""Evaluate rules against the import graph.

Each rule type with graph semantics has an evaluator. Types that only
document intent (must_use_command, naming_convention, ...) are reported as
not evaluated. A rule whose params are unusable is skipped with a warning;
it never aborts the check.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from aibrain.analysis.imports import ImportGraph
from aibrain.analysis.structure import enclosing_project
from aibrain.core.logging import get_logger
from aibrain.errors import RuleDefinitionError
from aibrain.rules.models import (
    NO_CROSS_PROJECT_IMPORT,
    NO_IMPORT,
    RULE_TYPES,
    CheckResult,
    Rule,
    Rules,
    Violation,
)

Evaluator = Callable[[Rule, ImportGraph, list[str]], list[Violation]]

_log = get_logger("rules.checker")


def _str_list(params: Mapping[str, Any], key: str, *, required: bool = True) -> tuple[str, ...]:
    if key not in params:
        if required:
            raise RuleDefinitionError(f"missing param '{key}'")
        return ()
    value = params[key]
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise RuleDefinitionError(f"param '{key}' must be a list of strings")
    if not all(isinstance(v, str) for v in value):
        raise RuleDefinitionError(f"param '{key}' must be a list of strings")
    return tuple(value)


def _under(path: str, scope: str) -> bool:
    if scope in (".", ""):
        return True
    scope = scope.rstrip("/")
    return path == scope or path.startswith(scope + "/")


def _excepted(text: str, exceptions: tuple[str, ...]) -> bool:
    return any(exc in text for exc in exceptions)


def check_no_cross_project_import(rule: Rule, graph: ImportGraph, projects: list[str]) -> list[Violation]:
    scope = _str_list(rule.params, "projects")
    if not scope:
        raise RuleDefinitionError("param 'projects' is empty")
    exceptions = _str_list(rule.params, "exceptions", required=False)
    scoped = frozenset(scope)
    # Lookup runs over every known project so a nested library is not
    # attributed to the app around it.
    known = sorted(scoped | set(projects))
    violations: list[Violation] = []
    for node in graph.nodes():
        src = enclosing_project(node.source_path, known)
        if src not in scoped:
            continue
        for edge in node.internal_edges:
            dst = enclosing_project(edge.target.path, known)
            if dst is None or dst == src or dst not in scoped:
                continue
            if _excepted(edge.specifier.text, exceptions):
                continue
            violations.append(
                Violation(
                    rule_id=rule.rule_id,
                    from_path=node.source_path,
                    to_ref=str(edge.target),
                    specifier_text=edge.specifier.text,
                    severity=rule.severity,
                    message=f"{src} must not import from {dst} ('{edge.specifier.text}')",
                    source_project=src,
                    target_project=dst,
                )
            )
    return violations


def check_no_import(rule: Rule, graph: ImportGraph, projects: list[str]) -> list[Violation]:
    scope = rule.params.get("scope", ".")
    if not isinstance(scope, str):
        raise RuleDefinitionError("param 'scope' must be a string")
    forbidden = _str_list(rule.params, "forbidden")
    if not forbidden:
        raise RuleDefinitionError("param 'forbidden' is empty")
    exceptions = _str_list(rule.params, "exceptions", required=False)
    violations: list[Violation] = []
    for node in graph.nodes():
        if not _under(node.source_path, scope):
            continue
        for edge in node.edges:
            text, target = edge.specifier.text, str(edge.target)
            hit = next((f for f in forbidden if text.startswith(f) or target.startswith(f)), None)
            if hit is None or _excepted(text, exceptions):
                continue
            violations.append(
                Violation(
                    rule_id=rule.rule_id,
                    from_path=node.source_path,
                    to_ref=target,
                    specifier_text=text,
                    severity=rule.severity,
                    message=f"{node.source_path} imports forbidden '{hit}' ('{text}')",
                    source_project=enclosing_project(node.source_path, projects) if projects else None,
                    target_project=enclosing_project(edge.target.path, projects)
                    if projects and edge.target.is_internal
                    else None,
                )
            )
    return violations


EVALUATORS: dict[str, Evaluator] = {
    NO_CROSS_PROJECT_IMPORT: check_no_cross_project_import,
    NO_IMPORT: check_no_import,
}


def register_evaluator(rule_type: str, evaluator: Evaluator) -> None:
    EVALUATORS[rule_type] = evaluator


def check_rules(
    rules: Rules | Iterable[Rule],
    graph: ImportGraph,
    projects: Iterable[str] | None = None,
) -> CheckResult:
    """Run every evaluable rule over graph, in rule order."""
    items = rules.items if isinstance(rules, Rules) else tuple(rules)
    project_paths = sorted(set(projects or ()))
    violations: list[Violation] = []
    skipped: list[str] = []
    unevaluated: list[str] = []
    for rule in items:
        evaluator = EVALUATORS.get(rule.type)
        if evaluator is None:
            if rule.type in RULE_TYPES:
                unevaluated.append(rule.rule_id)
            else:
                _log.warning("check: skipping rule %s: unknown type %r", rule.rule_id, rule.type)
                skipped.append(rule.rule_id)
            continue
        try:
            found = evaluator(rule, graph, project_paths)
        except (RuleDefinitionError, KeyError, TypeError, ValueError) as exc:
            _log.warning("check: skipping rule %s: %s", rule.rule_id, exc)
            skipped.append(rule.rule_id)
            continue
        violations.extend(found)
    return CheckResult(
        violations=tuple(violations),
        skipped_rules=tuple(skipped),
        unevaluated_rules=tuple(unevaluated),
    )


__all__ = [
    "EVALUATORS",
    "Evaluator",
    "check_no_cross_project_import",
    "check_no_import",
    "check_rules",
    "register_evaluator",
]
