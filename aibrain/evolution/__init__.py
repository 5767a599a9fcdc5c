"""Brain evolution: baseline vs. current comparison."""
