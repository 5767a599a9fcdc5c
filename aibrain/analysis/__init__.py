"""Analysis layer: imports, resolution, structure, workflows, profile, project graph."""

from . import extractors, resolver, imports, structure, workflows, profile, graph  # noqa: F401

__all__ = ["extractors", "resolver", "imports", "structure", "workflows", "profile", "graph"]
