"""Markdown views of a Brain: README, architecture map, conventions, rules."""

from __future__ import annotations

from pathlib import Path
from typing import List

from aibrain.analysis.graph import ProjectGraph
from aibrain.core.brain import Brain
from aibrain.storage.paths import FILES
from aibrain.storage.persistence import atomic_write_text


def _bullets(items: List[str], empty: str) -> List[str]:
    return [f"- {item}" for item in items] if items else [empty]


def render_readme(brain: Brain) -> str:
    name = Path(brain.repo.root).name or brain.repo.root
    profile = brain.profile
    lines = [
        f"# Repo Brain for {name}",
        "",
        "## Profile",
        f"- Languages: {', '.join(profile.languages) or 'none detected'}",
        f"- Frameworks: {', '.join(profile.frameworks) or 'none detected'}",
        f"- Package managers: {', '.join(profile.package_managers) or 'none detected'}",
        "",
        "## Structure",
    ]
    lines += _bullets(
        [f"**{p.name}** ({p.kind}): `{p.path}`" for p in brain.structure.projects],
        "_No projects detected._",
    )
    lines += ["", "## Rules"]
    lines += _bullets(
        [f"**{r.severity}**: {r.type} (`{r.rule_id}`)" for r in brain.rules.items],
        "_No rules generated._",
    )
    lines += ["", "## Workflows"]
    lines += _bullets(
        [f"`{c.command}` ({c.name}, {c.cwd})" for c in brain.workflows.commands],
        "_No workflow commands found._",
    )
    lines += [
        "",
        "## Coverage",
        f"- Files scanned: {brain.files_scanned}",
        f"- Files ignored: {brain.files_ignored}",
        "",
    ]
    return "\n".join(lines)


def render_architecture_map(brain: Brain) -> str:
    graph = ProjectGraph.from_import_graph(brain.graphs, [p for p in brain.structure.paths() if p != "."])
    lines = ["# Architecture Map", "", "## Projects"]
    metrics = graph.metrics()
    lines += _bullets(
        [f"`{m.name}`: fan-in {m.fan_in}, fan-out {m.fan_out}" for m in metrics.values()],
        "_No projects detected._",
    )
    lines += ["", "## Cross-project dependencies"]
    lines += _bullets(
        [f"`{src}` -> `{dst}` ({weight} import{'s' if weight != 1 else ''})" for src, dst, weight in graph.edge_list()],
        "_No cross-project imports._",
    )
    lines += ["", "## Cycles"]
    lines += _bullets([" -> ".join(cycle + [cycle[0]]) for cycle in graph.find_cycles()], "_No cycles._")
    lines += [
        "",
        "## Import graph",
        f"- JS/TS files with imports: {len(brain.graphs.ts)}",
        f"- Python files with imports: {len(brain.graphs.py)}",
        "",
    ]
    return "\n".join(lines)


def render_conventions(brain: Brain) -> str:
    lines = ["# Conventions", ""]
    if not brain.conventions.items:
        lines += ["_No conventions mined._", ""]
        return "\n".join(lines)
    for conv in brain.conventions.items:
        lines.append(f"## {conv.description}")
        lines.append(f"- Id: `{conv.conv_id}`")
        lines.append(f"- Confidence: {conv.confidence} ({conv.score:.2f})")
        for eid in conv.examples:
            record = brain.evidence.get(eid)
            lines.append(f"- Example: `{record.path}` ({eid})" if record else f"- Example: {eid}")
        lines.append("")
    return "\n".join(lines)


def render_rules(brain: Brain) -> str:
    policy = brain.rules.policy
    lines = [
        "# Rules",
        "",
        f"- fail_on_warnings: {str(policy.fail_on_warnings).lower()}",
        "- confidence to severity: "
        + ", ".join(f"{k} -> {v}" for k, v in sorted(policy.confidence_to_severity.items())),
        "",
    ]
    if not brain.rules.items:
        lines += ["_No rules generated._", ""]
        return "\n".join(lines)
    for rule in brain.rules.items:
        lines.append(f"## `{rule.rule_id}`")
        lines.append(f"- Type: {rule.type}")
        lines.append(f"- Severity: {rule.severity}")
        if rule.rationale:
            lines.append(f"- Rationale: {rule.rationale}")
        for key in sorted(rule.params):
            value = rule.params[key]
            shown = ", ".join(map(str, value)) if isinstance(value, tuple) else str(value)
            lines.append(f"- {key}: {shown or '(none)'}")
        if rule.evidence:
            lines.append(f"- Evidence: {', '.join(rule.evidence)}")
        lines.append("")
    return "\n".join(lines)


RENDERERS = (
    ("readme", render_readme),
    ("architecture", render_architecture_map),
    ("conventions", render_conventions),
    ("rules", render_rules),
)


def render_all(brain: Brain, out_dir: Path) -> List[Path]:
    """Write every markdown view into out_dir. Returns written paths."""
    written: List[Path] = []
    for name, renderer in RENDERERS:
        path = Path(out_dir) / FILES[name]
        atomic_write_text(path, renderer(brain))
        written.append(path)
    return written
