"""Artifact paths under the brain directory.

All generated artifacts live under <root>/<brain_dir>/ (default AI_BRAIN/).
"""

from __future__ import annotations

from pathlib import Path

from aibrain.config import BrainConfig

# Logical artifact name -> filename under the brain directory
FILES = {
    "brain": "brain.json",
    "baseline": "baseline.json",
    "readme": "README.md",
    "architecture": "ARCHITECTURE_MAP.md",
    "conventions": "CONVENTIONS.md",
    "rules": "RULES.md",
}


def brain_dir(root: Path, config: BrainConfig) -> Path:
    return config.brain_path(Path(root).resolve())


def storage_path(root: Path, config: BrainConfig, name: str) -> Path:
    """Return root/<brain_dir>/<filename> for a logical artifact name."""
    return brain_dir(root, config) / FILES[name]
