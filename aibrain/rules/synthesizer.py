"""Rule synthesis from inferred project topology and workflow commands."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from aibrain.analysis.structure import APP, ProjectDescriptor
from aibrain.analysis.workflows import WorkflowCommand
from aibrain.core.logging import get_logger
from aibrain.errors import RuleDefinitionError
from aibrain.rules.models import (
    HARD,
    MUST_USE_COMMAND,
    NO_CROSS_PROJECT_IMPORT,
    Rule,
    Rules,
    RulesPolicy,
    rule_from_dict,
    rule_id_for,
)

# Workflow command names that become must_use_command rules.
CANONICAL_COMMANDS = ("test", "lint", "build", "typecheck", "format")

_log = get_logger("rules.synthesizer")


def synthesize_boundary_rules(projects: Iterable[ProjectDescriptor]) -> list[Rule]:
    """One no_cross_project_import rule over all apps, when there is more than one."""
    apps = sorted((p for p in projects if p.kind == APP), key=lambda p: p.path)
    if len(apps) < 2:
        return []
    paths = [p.path for p in apps]
    evidence = sorted({ref for p in apps for ref in p.evidence})
    return [
        Rule(
            rule_id=rule_id_for(NO_CROSS_PROJECT_IMPORT, paths),
            type=NO_CROSS_PROJECT_IMPORT,
            severity=HARD,
            params={"projects": paths, "exceptions": []},
            rationale="Apps must not import each other directly; share code through a library.",
            evidence=tuple(evidence),
        )
    ]


def synthesize_command_rules(commands: Iterable[WorkflowCommand], policy: RulesPolicy) -> list[Rule]:
    """must_use_command rules for canonical workflow commands; first definition per (cwd, name) wins."""
    seen: set[tuple[str, str]] = set()
    rules: list[Rule] = []
    for cmd in sorted(commands, key=lambda c: (c.cwd, c.name, c.source)):
        if cmd.name not in CANONICAL_COMMANDS or (cmd.cwd, cmd.name) in seen:
            continue
        seen.add((cmd.cwd, cmd.name))
        rules.append(
            Rule(
                rule_id=rule_id_for(MUST_USE_COMMAND, [cmd.cwd, cmd.name]),
                type=MUST_USE_COMMAND,
                severity=policy.severity_for(cmd.confidence),
                params={"name": cmd.name, "command": cmd.command, "cwd": cmd.cwd},
                rationale=f"Run '{cmd.name}' through `{cmd.command}` (from {cmd.source}).",
                evidence=cmd.evidence,
            )
        )
    return rules


def declared_rules(raw: Iterable[Mapping[str, Any]], taken: Iterable[str] = ()) -> list[Rule]:
    """Parse user-declared rules, skipping malformed entries and duplicate ids."""
    ids = set(taken)
    rules: list[Rule] = []
    for i, data in enumerate(raw):
        try:
            rule = rule_from_dict(data)
        except RuleDefinitionError as exc:
            _log.warning("rules: skipping declared rule #%d: %s", i + 1, exc)
            continue
        if rule.rule_id in ids:
            _log.warning("rules: skipping declared rule #%d: duplicate id %s", i + 1, rule.rule_id)
            continue
        ids.add(rule.rule_id)
        rules.append(rule)
    return rules


def synthesize_rules(
    projects: Iterable[ProjectDescriptor],
    workflows: Iterable[WorkflowCommand] = (),
    *,
    policy: RulesPolicy | None = None,
    declared: Iterable[Mapping[str, Any]] = (),
) -> Rules:
    """Build the full rule set: boundary rules, command rules, then declared rules."""
    policy = policy or RulesPolicy()
    items = synthesize_boundary_rules(projects) + synthesize_command_rules(workflows, policy)
    items += declared_rules(declared, taken=[r.rule_id for r in items])
    return Rules(policy=policy, items=tuple(items))


__all__ = [
    "CANONICAL_COMMANDS",
    "declared_rules",
    "synthesize_boundary_rules",
    "synthesize_command_rules",
    "synthesize_rules",
]
