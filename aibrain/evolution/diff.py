"""
Brain Diff

Compares a stored baseline brain with the current brain.json and produces an
evolution report: projects, rules, cross-project edges and evidence added or
removed. Both inputs are the JSON dicts written by the storage layer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Set, Tuple

from aibrain.analysis.structure import enclosing_project

_SECTIONS = ("projects", "rules", "cross_project_edges", "evidence")


def _project_paths(brain: Dict[str, Any]) -> List[str]:
    projects = (brain.get("structure") or {}).get("projects") or []
    return sorted(p["path"] for p in projects if isinstance(p, dict) and isinstance(p.get("path"), str))


def _rule_ids(brain: Dict[str, Any]) -> List[str]:
    items = (brain.get("rules") or {}).get("items") or []
    return sorted(r["rule_id"] for r in items if isinstance(r, dict) and isinstance(r.get("rule_id"), str))


def _evidence_ids(brain: Dict[str, Any]) -> List[str]:
    return sorted((brain.get("evidence") or {}).keys())


def cross_project_edges(brain: Dict[str, Any]) -> Set[Tuple[str, str]]:
    """(source project, target project) pairs implied by the stored import graph.

    The repository root project is left out: it would contain every edge.
    """
    projects = [p for p in _project_paths(brain) if p not in (".", "")]
    graphs = brain.get("graphs") or {}
    edges: Set[Tuple[str, str]] = set()
    for section, dotted in (("imports_ts", False), ("imports_py", True)):
        for path, node in (graphs.get(section) or {}).items():
            src = enclosing_project(path, projects)
            if src is None:
                continue
            for target in node.get("imports") or []:
                target_path = target.replace(".", "/") if dotted else target
                dst = enclosing_project(target_path, projects)
                if dst is not None and dst != src:
                    edges.add((src, dst))
    return edges


def _added_removed(old: List[str], new: List[str]) -> Dict[str, List[str]]:
    old_set, new_set = set(old), set(new)
    return {"added": sorted(new_set - old_set), "removed": sorted(old_set - new_set)}


def diff_brains(old: Dict[str, Any], new: Dict[str, Any]) -> Dict[str, Any]:
    old_edges = [f"{s} -> {d}" for s, d in cross_project_edges(old)]
    new_edges = [f"{s} -> {d}" for s, d in cross_project_edges(new)]
    return {
        "projects": _added_removed(_project_paths(old), _project_paths(new)),
        "rules": _added_removed(_rule_ids(old), _rule_ids(new)),
        "cross_project_edges": _added_removed(old_edges, new_edges),
        "evidence": _added_removed(_evidence_ids(old), _evidence_ids(new)),
        "commits": {
            "old": (old.get("repo") or {}).get("git_commit"),
            "new": (new.get("repo") or {}).get("git_commit"),
        },
    }


def is_empty(diff: Dict[str, Any]) -> bool:
    return not any(diff[key]["added"] or diff[key]["removed"] for key in _SECTIONS)


_TITLES = {
    "projects": "1. Projects",
    "rules": "2. Rules",
    "cross_project_edges": "3. Cross-project edges",
    "evidence": "4. Evidence",
}


def diff_to_text(diff: Dict[str, Any]) -> str:
    lines: List[str] = ["BRAIN EVOLUTION REPORT", ""]
    commits = diff.get("commits") or {}
    if commits.get("old") or commits.get("new"):
        lines.append(f"baseline {commits.get('old') or '?'} -> current {commits.get('new') or '?'}")
        lines.append("")
    for key in _SECTIONS:
        _append_section(lines, _TITLES[key], diff[key], show_items=key != "evidence")
    return "\n".join(lines)


def _append_section(lines: List[str], title: str, section: Dict[str, List[str]], show_items: bool) -> None:
    lines.append(title)
    lines.append(f"+ added: {len(section['added'])}")
    if show_items:
        for item in section["added"]:
            lines.append(f"  + {item}")
    lines.append(f"- removed: {len(section['removed'])}")
    if show_items:
        for item in section["removed"]:
            lines.append(f"  - {item}")
    lines.append("")
