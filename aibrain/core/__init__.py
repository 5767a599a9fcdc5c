"""Core orchestration layer: brain model, pipeline stages, logging.

Kept import side-effect free so `aibrain.core.logging` can be used from any
layer without pulling in the pipeline.
"""

__all__ = []
