"""Convention mining."""

from aibrain.miner.conventions import Convention, Conventions, confidence, mine_conventions

__all__ = ["Convention", "Conventions", "confidence", "mine_conventions"]
