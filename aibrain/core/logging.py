"""Logger tree for aibrain.

Every module logs through a child of ROOT_LOGGER. The parent owns the single
stderr handler and does not propagate, so embedding applications keep their
own root configuration untouched.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "aibrain"
LEVEL_ENV = "AIBRAIN_LOG_LEVEL"

_level_pinned = False


def level_from_env(default: int = logging.INFO) -> int:
    """Level named by AIBRAIN_LOG_LEVEL (DEBUG, WARNING, ...); default when unset or unknown."""
    name = os.environ.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def _parent() -> logging.Logger:
    parent = logging.getLogger(ROOT_LOGGER)
    if not parent.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        parent.addHandler(handler)
        parent.propagate = False
        if not _level_pinned:
            parent.setLevel(level_from_env())
    return parent


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Pin the aibrain level for one CLI run. --verbose wins over --quiet, both win over the env."""
    global _level_pinned
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = level_from_env()
    _level_pinned = True
    _parent().setLevel(level)


def get_logger(name: str) -> logging.Logger:
    _parent()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
