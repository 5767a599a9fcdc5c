"""Command handlers. Each returns the process exit code."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from aibrain.config import load_config, write_default_files
from aibrain.core.pipeline import run_baseline, run_check, run_diff, run_generate
from aibrain.errors import ScanError
from aibrain.evolution.diff import diff_to_text
from aibrain.rules.models import HARD, SOFT, CheckResult
from aibrain.storage import storage_path


def _root(args: Any) -> Path:
    path = Path(getattr(args, "path", None) or ".").resolve()
    if not path.is_dir():
        raise ScanError(f"not a directory: {path}")
    return path


def handle_help(parser: Any) -> int:
    """Print command overview and detailed argparse help."""
    print("aibrain: repository model generator and architecture rule checker")
    print()
    print("Commands:")
    print("  init [path]          write default .aibrain.toml and .aibrainignore")
    print("  generate [path]      scan and write AI_BRAIN/brain.json plus markdown views")
    print("  check [path]         check imports against rules (exit 0 clean, 1 warnings, 2 hard)")
    print("  baseline [path]      scan and write AI_BRAIN/baseline.json")
    print("  diff [path]          compare brain.json with baseline.json")
    print()
    parser.print_help()
    return 0


def handle_init(args: Any) -> int:
    root = _root(args)
    written = write_default_files(root)
    if not written:
        print(f"Already initialized: {root}")
    for path in written:
        print(f"Created {path}")
    return 0


def handle_generate(args: Any) -> int:
    root = _root(args)
    config = load_config(root)
    brain = run_generate(root, config, render=not getattr(args, "no_render", False))
    print(
        f"Brain written to {storage_path(root, config, 'brain')}: "
        f"{brain.files_scanned} files, {len(brain.structure.projects)} projects, "
        f"{len(brain.rules.items)} rules, {len(brain.evidence)} evidence records"
    )
    return 0


def _format_check(result: CheckResult) -> str:
    lines = [
        f"[{v.severity}] {v.from_path} -> {v.to_ref} ({v.rule_id}): {v.message}" for v in result.violations
    ]
    for rule_id in result.skipped_rules:
        lines.append(f"[SKIPPED] {rule_id}: malformed or unknown rule")
    hard = sum(1 for v in result.violations if v.severity == HARD)
    soft = sum(1 for v in result.violations if v.severity == SOFT)
    lines.append(f"{len(result.violations)} violations ({hard} hard, {soft} soft)")
    return "\n".join(lines)


def handle_check(args: Any) -> int:
    root = _root(args)
    config = load_config(root)
    result = run_check(root, config, use_stored=not getattr(args, "synthesize", False))
    if getattr(args, "json", False):
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(_format_check(result))
    return result.exit_code


def handle_baseline(args: Any) -> int:
    root = _root(args)
    path = run_baseline(root, load_config(root))
    print(f"Baseline written to {path}")
    return 0


def handle_diff(args: Any) -> int:
    root = _root(args)
    diff = run_diff(root, load_config(root))
    if getattr(args, "json", False):
        print(json.dumps(diff, indent=2, ensure_ascii=False))
    else:
        print(diff_to_text(diff))
    return 0
