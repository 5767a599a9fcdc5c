"""Brain artifact storage: paths, deterministic JSON, atomic writes."""

from aibrain.storage.paths import FILES, brain_dir, storage_path
from aibrain.storage.persistence import (
    atomic_write_text,
    load_baseline,
    load_brain,
    save_baseline,
    save_brain,
    stable_dumps,
)

__all__ = [
    "FILES",
    "atomic_write_text",
    "brain_dir",
    "load_baseline",
    "load_brain",
    "save_baseline",
    "save_brain",
    "stable_dumps",
    "storage_path",
]
