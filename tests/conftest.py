"""Pytest configuration. Ensures project root is in sys.path so `aibrain` imports without installation."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def write_tree(root: Path, files: dict) -> Path:
    """Create files under root from a {relative path: text} mapping."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    """Two apps, one shared library, one cross-app import."""
    return write_tree(
        tmp_path / "repo",
        {
            "package.json": '{\n  "name": "mono",\n  "scripts": {\n    "test": "vitest",\n    "lint": "eslint ."\n  }\n}\n',
            "pnpm-lock.yaml": "lockfileVersion: 6\n",
            "apps/web/package.json": '{\n  "name": "web",\n  "dependencies": {"react": "18", "next": "14"}\n}\n',
            "apps/web/src/x.ts": 'import { z } from "../../apps/api/y";\nimport React from "react";\n',
            "apps/web/src/page.tsx": 'import { Button } from "../../../packages/ui/button";\nconst lazy = import("./lazy-panel");\n',
            "apps/web/src/lazy-panel.tsx": "export const Panel = 1;\n",
            "apps/api/package.json": '{\n  "name": "api"\n}\n',
            "apps/api/y.ts": "export const z = 1;\n",
            "apps/api/server.ts": 'const express = require("express");\nimport { z } from "./y";\n',
            "packages/ui/package.json": '{\n  "name": "ui"\n}\n',
            "packages/ui/button.ts": "export const Button = 1;\n",
        },
    )


@pytest.fixture
def write_files():
    return write_tree
