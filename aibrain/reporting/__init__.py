"""Markdown rendering of the brain."""

from aibrain.reporting.markdown import render_all

__all__ = ["render_all"]
