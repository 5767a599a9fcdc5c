"""aibrain package.

Layout:

- aibrain/analysis   import extraction, resolution, structure, workflows
- aibrain/evidence   deterministic evidence index
- aibrain/miner      convention mining
- aibrain/rules      rule synthesis and checking
- aibrain/core       brain model, pipeline, logging
- aibrain/storage    artifact paths and deterministic persistence
- aibrain/evolution  brain vs. baseline diff
- aibrain/reporting  markdown rendering
- aibrain/cli        argument parsing and dispatch
"""

__version__ = "0.1.0"

TOOL_NAME = "aibrain"
SCHEMA_VERSION = "1.0.0"
