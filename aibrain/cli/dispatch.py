"""CLI command dispatch."""

from __future__ import annotations

import argparse
from typing import Any, Callable

from aibrain.cli import handlers
from aibrain.core.logging import configure_cli_logging, get_logger
from aibrain.errors import BrainError

EXIT_FATAL = 3


def dispatch_command(parser: argparse.ArgumentParser, args: Any) -> int:
    """Dispatch parsed CLI args to the matching command handler."""
    configure_cli_logging(quiet=getattr(args, "quiet", False), verbose=getattr(args, "verbose", False))

    if args.command is None:
        return handlers.handle_help(parser)

    dispatch: dict[str, Callable[[], int]] = {
        "help": lambda: handlers.handle_help(parser),
        "init": lambda: handlers.handle_init(args),
        "generate": lambda: handlers.handle_generate(args),
        "check": lambda: handlers.handle_check(args),
        "baseline": lambda: handlers.handle_baseline(args),
        "diff": lambda: handlers.handle_diff(args),
    }
    try:
        return dispatch[args.command]()
    except BrainError as exc:
        get_logger("cli").error("aibrain: %s", exc)
        return EXIT_FATAL
