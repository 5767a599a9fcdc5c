"""Tests for aibrain.analysis.extractors (lexical import extraction)."""

from aibrain.analysis import extractors
from aibrain.analysis.extractors import (
    DYNAMIC,
    FROM_IMPORT,
    PLAIN_IMPORT,
    PY_FAMILY,
    REQUIRE,
    STATIC,
    TS_FAMILY,
    ImportExtractor,
    PyImportExtractor,
    RawSpecifier,
    TsImportExtractor,
    extract_specifiers,
    family_for_path,
    register_extractor,
)


def _texts(specs):
    return [s.text for s in specs]


def test_family_for_path_by_extension() -> None:
    assert family_for_path("apps/web/a.tsx") == TS_FAMILY
    assert family_for_path("lib/b.mjs") == TS_FAMILY
    assert family_for_path("pkg/c.py") == PY_FAMILY
    assert family_for_path("README.md") is None


def test_ts_static_dynamic_require_in_source_order() -> None:
    content = (
        'import React from "react";\n'
        "const fs = require('fs');\n"
        'const lazy = import("./lazy");\n'
        "import './side-effect.css';\n"
    )
    specs = TsImportExtractor().extract(content)
    assert _texts(specs) == ["react", "fs", "./lazy", "./side-effect.css"]
    assert [s.kind for s in specs] == [STATIC, REQUIRE, DYNAMIC, STATIC]
    assert [s.line for s in specs] == [1, 2, 3, 4]


def test_ts_multiline_type_and_reexport_clauses() -> None:
    content = (
        "import {\n"
        "  a,\n"
        "  b as c,\n"
        '} from "./multi";\n'
        'import type { T } from "./types";\n'
        'export * from "./barrel";\n'
        "export { x } from '../x';\n"
        "export const notAnImport = 'value';\n"
    )
    assert _texts(TsImportExtractor().extract(content)) == ["./multi", "./types", "./barrel", "../x"]


def test_ts_ignores_template_and_computed_specifiers() -> None:
    content = "const a = import(`./pages/${name}`);\nconst b = require(modName);\n"
    assert TsImportExtractor().extract(content) == []


def test_dynamic_specifier_is_tagged() -> None:
    spec = TsImportExtractor().extract('await import("./chart")')[0]
    assert spec.dynamic
    assert spec.tagged() == "import(./chart)"


def test_ts_duplicates_are_kept() -> None:
    content = 'import a from "x";\nimport b from "x";\n'
    assert _texts(TsImportExtractor().extract(content)) == ["x", "x"]


def test_py_plain_imports_with_aliases() -> None:
    specs = PyImportExtractor().extract("import os, sys as system\nimport a.b.c\n")
    assert _texts(specs) == ["os", "sys", "a.b.c"]
    assert all(s.kind == PLAIN_IMPORT and s.dots == 0 for s in specs)


def test_py_relative_from_import_counts_dots() -> None:
    specs = PyImportExtractor().extract("from ..pkg.mod import thing\nfrom ...deep import x\n")
    assert _texts(specs) == ["..pkg.mod", "...deep"]
    assert [s.dots for s in specs] == [2, 3]
    assert specs[0].remainder == "pkg.mod"
    assert all(s.kind == FROM_IMPORT for s in specs)


def test_py_bare_relative_import_yields_one_specifier_per_name() -> None:
    specs = PyImportExtractor().extract("from . import utils, helpers as h\n")
    assert _texts(specs) == [".utils", ".helpers"]
    assert [s.dots for s in specs] == [1, 1]


def test_py_parenthesized_multiline_names() -> None:
    content = "from . import (\n    alpha,\n    beta,  # trailing comment\n)\nfrom .. import *\n"
    assert _texts(PyImportExtractor().extract(content)) == [".alpha", ".beta"]


def test_py_absolute_from_passes_module_through() -> None:
    specs = PyImportExtractor().extract("from apps.api.utils import helper\nfrom os.path import *\n")
    assert _texts(specs) == ["apps.api.utils", "os.path"]
    assert [s.dots for s in specs] == [0, 0]


def test_py_malformed_lines_are_skipped() -> None:
    content = "from import x\nimport\nfrom a..b import c\nimport ok\n"
    assert _texts(PyImportExtractor().extract(content)) == ["ok"]


def test_extract_specifiers_unsupported_file() -> None:
    assert extract_specifiers("notes.txt", 'import "x"') == (None, [])


def test_extractors_satisfy_protocol() -> None:
    assert isinstance(TsImportExtractor(), ImportExtractor)
    assert isinstance(PyImportExtractor(), ImportExtractor)


class _ConstantPyExtractor:
    family = PY_FAMILY

    def extract(self, content: str) -> list[RawSpecifier]:
        return [RawSpecifier(text="always", kind=PLAIN_IMPORT, line=1)]


def test_register_extractor_replaces_family_matcher(monkeypatch) -> None:
    monkeypatch.setattr(extractors, "_EXTRACTORS", dict(extractors._EXTRACTORS))
    register_extractor(_ConstantPyExtractor())
    family, specs = extract_specifiers("pkg/a.py", "import os\n")
    assert family == PY_FAMILY
    assert _texts(specs) == ["always"]
    # other families keep their matcher
    assert _texts(extract_specifiers("a.ts", 'import "x";\n')[1]) == ["x"]
