"""Tests for aibrain.collector (repository snapshot)."""

import pytest

from aibrain.collector import collect, compile_filters
from aibrain.config import BrainConfig
from aibrain.errors import ScanError


def test_collect_sorts_and_filters(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {
            "b.ts": "",
            "a/z.py": "",
            "a/readme.md": "# not collected",
            "package.json": "{}",
            "node_modules/dep/index.js": "",
            "dist/bundle.js": "",
            "AI_BRAIN/brain.json": "{}",
            "AI_BRAIN/old.py": "",
        },
    )
    snapshot = collect(root, BrainConfig())
    assert snapshot.paths() == ["a/z.py", "b.ts", "package.json"]
    assert snapshot.root == root.resolve()


def test_gitignore_and_aibrainignore_patterns(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {
            ".gitignore": "# build output\nbuild/\n*.gen.ts\n",
            ".aibrainignore": "legacy/old\n",
            "build/out.js": "",
            "src/a.gen.ts": "",
            "src/a.ts": "",
            "legacy/old/x.py": "",
            "legacy/new/y.py": "",
        },
    )
    snapshot = collect(root, BrainConfig())
    assert snapshot.paths() == ["legacy/new/y.py", "src/a.ts"]
    assert snapshot.ignored == 3


def test_include_exclude_and_size_limits(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {"src/a.ts": "", "src/b.ts": "", "scripts/c.py": "", "src/big.ts": "x" * 2048},
    )
    config = BrainConfig(include=["src/**"], exclude=["src/b.ts"], max_file_kb=1)
    snapshot = collect(root, config)
    assert snapshot.paths() == ["src/a.ts"]
    assert snapshot.ignored == 3


def test_max_files_stops_collection(write_files, tmp_path) -> None:
    root = write_files(tmp_path, {f"m{i}.py": "" for i in range(5)})
    snapshot = collect(root, BrainConfig(max_files=2))
    assert snapshot.paths() == ["m0.py", "m1.py"]
    assert snapshot.ignored == 3


def test_read_text_relative_and_absolute(write_files, tmp_path) -> None:
    root = write_files(tmp_path, {"a.py": "import os\n"})
    snapshot = collect(root, BrainConfig())
    assert snapshot.read_text("a.py") == "import os\n"
    assert snapshot.read_text(root / "a.py") == "import os\n"


def test_missing_root_raises_scan_error(tmp_path) -> None:
    with pytest.raises(ScanError):
        collect(tmp_path / "missing", BrainConfig())


def test_ignore_pattern_semantics(write_files, tmp_path) -> None:
    write_files(tmp_path, {".gitignore": "# c\n\nfoo/\n*.log\n/docs\n"})
    filters = compile_filters(tmp_path, BrainConfig())
    assert filters.skips("a/foo/b.py")
    assert not filters.skips("a/foo")
    assert filters.skips("x/debug.log")
    assert filters.skips("docs/api/a.py")
    assert not filters.skips("mydocs/api/a.py")


def test_gitignore_negation_reincludes_file(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {".gitignore": "gen/*.py\n!gen/keep.py\n", "gen/keep.py": "", "gen/drop.py": ""},
    )
    snapshot = collect(root, BrainConfig())
    assert snapshot.paths() == ["gen/keep.py"]
    assert snapshot.ignored == 1


def test_single_star_stays_within_one_segment(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {".gitignore": "docs/*.py\n", "docs/top.py": "", "docs/sub/real.py": ""},
    )
    assert collect(root, BrainConfig()).paths() == ["docs/sub/real.py"]


def test_aibrainignore_can_negate_gitignore(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {".gitignore": "*.gen.py\n", ".aibrainignore": "!keep.gen.py\n", "a.gen.py": "", "keep.gen.py": ""},
    )
    assert collect(root, BrainConfig()).paths() == ["keep.gen.py"]


def test_include_and_exclude_globs(write_files, tmp_path) -> None:
    filters = compile_filters(tmp_path, BrainConfig(include=["**/*.py"], exclude=["tests/**"]))
    assert not filters.skips("a.py")
    assert not filters.skips("pkg/deep/a.py")
    assert filters.skips("pkg/a.ts")
    assert filters.skips("tests/test_a.py")


def test_collect_picks_up_mts_and_cts(write_files, tmp_path) -> None:
    root = write_files(tmp_path, {"lib/a.mts": 'import "./b";\n', "lib/b.cts": ""})
    assert collect(root, BrainConfig()).paths() == ["lib/a.mts", "lib/b.cts"]
