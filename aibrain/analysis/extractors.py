"""Lexical import extraction per language family.

This is a best-effort scan, not a parser: only literal quoted specifiers are
seen, and malformed import syntax is skipped rather than reported. Each
family sits behind ImportExtractor so a real parser can replace one matcher
without touching resolution or checking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Protocol, runtime_checkable

TS_FAMILY = "ts"
PY_FAMILY = "py"

TS_EXTS = frozenset({".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".mts", ".cts"})
PY_EXTS = frozenset({".py"})

# static / dynamic / require kinds for JS-like; import / from for Python
STATIC = "static"
DYNAMIC = "dynamic"
REQUIRE = "require"
PLAIN_IMPORT = "import"
FROM_IMPORT = "from"


@dataclass(frozen=True)
class RawSpecifier:
    """One import occurrence as written in the source."""

    text: str
    kind: str
    dots: int = 0
    line: int = 0

    @property
    def dynamic(self) -> bool:
        return self.kind == DYNAMIC

    @property
    def remainder(self) -> str:
        """Specifier without its leading Python dots."""
        return self.text[self.dots:] if self.dots else self.text

    def tagged(self) -> str:
        """Serialized form; dynamic imports are marked so they stay distinguishable."""
        return f"import({self.text})" if self.dynamic else self.text


@runtime_checkable
class ImportExtractor(Protocol):
    family: str

    def extract(self, content: str) -> list[RawSpecifier]:
        """Return specifiers in source order, duplicates kept."""
        ...


def _line_number(text: str, idx: int) -> int:
    return text.count("\n", 0, idx) + 1


_TS_STATIC_RE = re.compile(
    r"""
    \b(?:import|export)\s+
    (?:type\s+)?
    (?:[\w*\s{},$]*?\s*from\s*)?
    (?P<q>['"])(?P<spec>[^'"\n]+)(?P=q)
    """,
    re.VERBOSE,
)
_TS_DYNAMIC_RE = re.compile(r"""\bimport\s*\(\s*(?P<q>['"])(?P<spec>[^'"\n]+)(?P=q)\s*\)""")
_TS_REQUIRE_RE = re.compile(r"""\brequire\s*\(\s*(?P<q>['"])(?P<spec>[^'"\n]+)(?P=q)\s*\)""")


class TsImportExtractor:
    """JS/TS: static import/export-from, dynamic import(), require()."""

    family = TS_FAMILY

    def extract(self, content: str) -> list[RawSpecifier]:
        found: list[tuple[int, RawSpecifier]] = []
        for regex, kind in ((_TS_STATIC_RE, STATIC), (_TS_DYNAMIC_RE, DYNAMIC), (_TS_REQUIRE_RE, REQUIRE)):
            for m in regex.finditer(content):
                if kind == STATIC and m.group(0).lstrip().startswith("export") and "from" not in m.group(0):
                    # `export "x"` is not a module reference
                    continue
                start = m.start("spec")
                found.append((start, RawSpecifier(text=m.group("spec"), kind=kind, line=_line_number(content, start))))
        found.sort(key=lambda item: item[0])
        return [spec for _pos, spec in found]


_PY_IMPORT_RE = re.compile(
    r"^[ \t]*import[ \t]+(?P<names>[\w.]+(?:[ \t]+as[ \t]+\w+)?(?:[ \t]*,[ \t]*[\w.]+(?:[ \t]+as[ \t]+\w+)?)*)",
    re.MULTILINE,
)
_PY_FROM_RE = re.compile(
    r"^[ \t]*from[ \t]+(?P<dots>\.*)(?P<module>[\w.]*)[ \t]+import[ \t]+(?P<names>\([^)]*\)|[^\n#;]+)",
    re.MULTILINE,
)
_PY_NAME_RE = re.compile(r"^[A-Za-z_]\w*$")


def _split_names(raw: str) -> list[str]:
    raw = raw.strip().strip("()").replace("\\\n", " ")
    names: list[str] = []
    for part in raw.replace("\n", " ").split(","):
        name = part.split("#", 1)[0].strip().split(" as ", 1)[0].strip()
        if name and _PY_NAME_RE.match(name):
            names.append(name)
    return names


class PyImportExtractor:
    """Python: `import a, b` and `from X import ...` including relative forms."""

    family = PY_FAMILY

    def extract(self, content: str) -> list[RawSpecifier]:
        found: list[tuple[int, int, RawSpecifier]] = []
        for m in _PY_IMPORT_RE.finditer(content):
            line = _line_number(content, m.start("names"))
            for order, part in enumerate(m.group("names").split(",")):
                module = part.strip().split()[0] if part.strip() else ""
                if module and not module.startswith(".") and not module.endswith("."):
                    found.append((m.start(), order, RawSpecifier(text=module, kind=PLAIN_IMPORT, line=line)))
        for m in _PY_FROM_RE.finditer(content):
            dots = len(m.group("dots"))
            module = m.group("module")
            line = _line_number(content, m.start())
            if module.endswith(".") or ".." in module:
                continue
            if dots and not module:
                # `from . import a, b`: each name is a sibling module
                for order, name in enumerate(_split_names(m.group("names"))):
                    text = "." * dots + name
                    found.append((m.start(), order, RawSpecifier(text=text, kind=FROM_IMPORT, dots=dots, line=line)))
                continue
            if not module and not dots:
                continue
            found.append((m.start(), 0, RawSpecifier(text="." * dots + module, kind=FROM_IMPORT, dots=dots, line=line)))
        found.sort(key=lambda item: (item[0], item[1]))
        return [spec for _pos, _order, spec in found]


_EXTRACTORS: dict[str, ImportExtractor] = {
    TS_FAMILY: TsImportExtractor(),
    PY_FAMILY: PyImportExtractor(),
}


def family_for_path(path: str) -> str | None:
    suffix = PurePosixPath(path).suffix
    if suffix in TS_EXTS:
        return TS_FAMILY
    if suffix in PY_EXTS:
        return PY_FAMILY
    return None


def extractor_for_path(path: str) -> ImportExtractor | None:
    family = family_for_path(path)
    return _EXTRACTORS.get(family) if family else None


def register_extractor(extractor: ImportExtractor) -> None:
    """Replace the matcher for one family (e.g. with a parser-backed one)."""
    _EXTRACTORS[extractor.family] = extractor


def extract_specifiers(path: str, content: str) -> tuple[str | None, list[RawSpecifier]]:
    """Return (family, specifiers) for a file; (None, []) for unsupported files."""
    extractor = extractor_for_path(path)
    if extractor is None:
        return None, []
    return extractor.family, extractor.extract(content)
