"""Argument parser for the aibrain command line."""

from __future__ import annotations

import argparse
from pathlib import Path


def build_parser(*, version: str) -> argparse.ArgumentParser:
    """Configure top-level CLI parser and subcommands."""
    parser = argparse.ArgumentParser(
        prog="aibrain",
        description="aibrain: repository model generator and architecture rule checker",
        epilog="Commands: init | generate | check | baseline | diff. Use aibrain help for an overview.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {version}")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors on stderr")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Write default .aibrain.toml and .aibrainignore")
    _add_path(init_parser)

    generate_parser = subparsers.add_parser("generate", help="Scan the repository and write the brain")
    _add_path(generate_parser)
    generate_parser.add_argument("--no-render", action="store_true", help="Write brain.json only, skip markdown")

    check_parser = subparsers.add_parser("check", help="Check the import graph against the rules")
    _add_path(check_parser)
    check_parser.add_argument(
        "--synthesize",
        action="store_true",
        help="Ignore rules stored in brain.json and synthesize them from the current tree",
    )
    check_parser.add_argument("--json", action="store_true", help="Machine-readable output")

    baseline_parser = subparsers.add_parser("baseline", help="Scan the repository and write baseline.json")
    _add_path(baseline_parser)

    diff_parser = subparsers.add_parser("diff", help="Compare brain.json with baseline.json")
    _add_path(diff_parser)
    diff_parser.add_argument("--json", action="store_true", help="Machine-readable output")

    subparsers.add_parser("help", help="Show aibrain command overview")
    return parser


def _add_path(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("path", nargs="?", default=".", type=Path, help="Repository root (default: .)")
