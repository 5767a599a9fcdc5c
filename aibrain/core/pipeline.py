"""Brain pipeline: explicit ordered stages over one repository snapshot.

collect -> analyze -> mine -> synthesize -> assemble. Each stage is a plain
function of the ScanContext and earlier results; nothing is written to disk
until the brain is fully assembled.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from aibrain.analysis.imports import ImportGraph, build_import_graph
from aibrain.analysis.profile import Profile, build_profile
from aibrain.analysis.structure import ProjectStructure, infer_structure
from aibrain.analysis.workflows import Workflows, extract_workflows
from aibrain.collector import RepoSnapshot, collect
from aibrain.config import BrainConfig
from aibrain.core.brain import Brain, RepoInfo, read_git_commit
from aibrain.core.logging import get_logger
from aibrain.errors import StorageError
from aibrain.evidence import EvidenceIndex
from aibrain.evolution.diff import diff_brains
from aibrain.miner.conventions import Conventions, mine_conventions
from aibrain.reporting.markdown import render_all
from aibrain.rules.checker import check_rules
from aibrain.rules.models import CheckResult, Rules, RulesPolicy
from aibrain.rules.synthesizer import declared_rules, synthesize_rules
from aibrain.storage import brain_dir, load_baseline, load_brain, save_baseline, save_brain

_log = get_logger("pipeline")


@dataclass
class ScanContext:
    """Per-run state shared by all stages. Exactly one evidence index per run."""

    root: Path
    config: BrainConfig
    snapshot: RepoSnapshot
    evidence: EvidenceIndex


@dataclass
class Analysis:
    profile: Profile
    structure: ProjectStructure
    graph: ImportGraph
    workflows: Workflows


def start_scan(root: Path, config: BrainConfig) -> ScanContext:
    snapshot = collect(root, config)
    return ScanContext(
        root=snapshot.root,
        config=config,
        snapshot=snapshot,
        evidence=EvidenceIndex(store_snippets=config.store_snippets),
    )


def analyze(ctx: ScanContext) -> Analysis:
    return Analysis(
        profile=build_profile(ctx.snapshot),
        structure=infer_structure(ctx.snapshot, ctx.evidence),
        graph=build_import_graph(ctx.snapshot),
        workflows=extract_workflows(ctx.snapshot, ctx.evidence),
    )


def mine(ctx: ScanContext) -> Conventions:
    return mine_conventions(ctx.snapshot, ctx.evidence)


def policy_for(config: BrainConfig) -> RulesPolicy:
    return RulesPolicy(fail_on_warnings=config.fail_on_warnings)


def synthesize(ctx: ScanContext, analysis: Analysis) -> Rules:
    return synthesize_rules(
        analysis.structure.projects,
        analysis.workflows.commands,
        policy=policy_for(ctx.config),
        declared=ctx.config.rules,
    )


def assemble(ctx: ScanContext, analysis: Analysis, conventions: Conventions, rules: Rules) -> Brain:
    return Brain(
        repo=RepoInfo(root=ctx.root.name, git_commit=read_git_commit(ctx.root)),
        profile=analysis.profile,
        structure=analysis.structure,
        graphs=analysis.graph,
        conventions=conventions,
        rules=rules,
        workflows=analysis.workflows,
        evidence=ctx.evidence,
        files_scanned=len(ctx.snapshot.files),
        files_ignored=ctx.snapshot.ignored + len(analysis.graph.skipped),
    )


def build_brain(root: Path, config: BrainConfig) -> Brain:
    """Run every stage in memory; no artifacts are written."""
    ctx = start_scan(root, config)
    analysis = analyze(ctx)
    conventions = mine(ctx)
    rules = synthesize(ctx, analysis)
    brain = assemble(ctx, analysis, conventions, rules)
    _log.debug(
        "pipeline: %d files, %d projects, %d rules, %d evidence records",
        brain.files_scanned,
        len(brain.structure.projects),
        len(brain.rules.items),
        len(brain.evidence),
    )
    return brain


def run_generate(root: Path, config: BrainConfig, *, render: bool = True) -> Brain:
    brain = build_brain(root, config)
    path = save_brain(root, config, brain.to_dict())
    _log.info("aibrain: wrote %s", path)
    if render:
        for written in render_all(brain, brain_dir(root, config)):
            _log.debug("aibrain: wrote %s", written)
    return brain


def run_baseline(root: Path, config: BrainConfig) -> Path:
    brain = build_brain(root, config)
    path = save_baseline(root, config, brain.to_dict())
    _log.info("aibrain: wrote %s", path)
    return path


def stored_rules(data: Dict[str, Any], config: BrainConfig) -> Rules:
    """Rules persisted in a brain.json dict. Config-declared rules replace stored ones with the same id."""
    section = data.get("rules") or {}
    if not isinstance(section, dict):
        raise StorageError("brain.json: 'rules' is not an object")
    raw_items = section.get("items") or []
    if not isinstance(raw_items, list):
        raise StorageError("brain.json: 'rules.items' is not a list")
    stored = declared_rules(raw_items)
    overrides = declared_rules(config.rules)
    override_ids = {r.rule_id for r in overrides}
    items = [r for r in stored if r.rule_id not in override_ids] + overrides
    return Rules(policy=policy_for(config), items=tuple(items))


def run_check(root: Path, config: BrainConfig, *, use_stored: bool = True) -> CheckResult:
    """Rebuild the import graph and check it against stored (or freshly synthesized) rules."""
    ctx = start_scan(root, config)
    analysis = analyze(ctx)
    stored: Optional[Dict[str, Any]] = load_brain(root, config) if use_stored else None
    if stored is not None:
        rules = stored_rules(stored, config)
        _log.debug("check: %d rules loaded from brain.json", len(rules.items))
    else:
        rules = synthesize(ctx, analysis)
        _log.debug("check: %d rules synthesized", len(rules.items))
    return check_rules(rules, analysis.graph, analysis.structure.paths())


def run_diff(root: Path, config: BrainConfig) -> Dict[str, Any]:
    baseline = load_baseline(root, config)
    if baseline is None:
        raise StorageError("no baseline.json; run `aibrain baseline` first")
    current = load_brain(root, config)
    if current is None:
        raise StorageError("no brain.json; run `aibrain generate` first")
    return diff_brains(baseline, current)


__all__: List[str] = [
    "Analysis",
    "ScanContext",
    "analyze",
    "assemble",
    "build_brain",
    "mine",
    "run_baseline",
    "run_check",
    "run_diff",
    "run_generate",
    "start_scan",
    "stored_rules",
    "synthesize",
]
