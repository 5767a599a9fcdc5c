"""Tests for structure inference, workflow extraction and profiling."""

from aibrain.analysis.profile import build_profile
from aibrain.analysis.structure import APP, LIBRARY, UNKNOWN, enclosing_project, infer_kind, infer_structure
from aibrain.analysis.workflows import extract_workflows
from aibrain.collector import collect
from aibrain.config import BrainConfig
from aibrain.evidence import CONFIG, EvidenceIndex, evidence_id


def test_infer_kind_from_segments() -> None:
    assert infer_kind("apps/web") == APP
    assert infer_kind("services/billing") == APP
    assert infer_kind("packages/ui") == LIBRARY
    assert infer_kind("libs/core") == LIBRARY
    assert infer_kind("tools") == UNKNOWN
    assert infer_kind(".") == UNKNOWN


def test_infer_structure_monorepo(monorepo) -> None:
    index = EvidenceIndex()
    structure = infer_structure(collect(monorepo, BrainConfig()), index)
    assert [(p.path, p.kind, p.name) for p in structure.projects] == [
        (".", UNKNOWN, "mono"),
        ("apps/api", APP, "api"),
        ("apps/web", APP, "web"),
        ("packages/ui", LIBRARY, "ui"),
    ]
    assert structure.boundaries == ["apps/api", "apps/web", "packages/ui"]
    web = structure.projects[2]
    assert web.evidence == (evidence_id("apps/web/package.json", None, None, CONFIG),)
    assert web.evidence[0] in index
    assert structure.to_dict()["projects"][1]["type"] == APP


def test_duplicate_markers_collapse_to_one_project(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {
            "services/billing/pyproject.toml": '[project]\nname = "billing"\n',
            "services/billing/setup.py": "",
        },
    )
    structure = infer_structure(collect(root, BrainConfig()), EvidenceIndex())
    assert len(structure.projects) == 1
    project = structure.projects[0]
    assert (project.path, project.kind, project.name) == ("services/billing", APP, "billing")
    assert len(project.evidence) == 2


def test_unreadable_manifest_falls_back_to_directory_name(write_files, tmp_path) -> None:
    root = write_files(tmp_path, {"packages/broken/package.json": "{not json"})
    structure = infer_structure(collect(root, BrainConfig()))
    assert structure.projects[0].name == "broken"
    assert structure.projects[0].evidence == ()


def test_enclosing_project_longest_match() -> None:
    projects = [".", "apps/web", "apps/web/legacy"]
    assert enclosing_project("apps/web/legacy/a.ts", projects) == "apps/web/legacy"
    assert enclosing_project("apps/web/a.ts", projects) == "apps/web"
    assert enclosing_project("apps/webhooks/a.ts", projects) == "."
    assert enclosing_project("apps/webhooks/a.ts", ["apps/web"]) is None
    assert enclosing_project("apps/web", ["apps/web"]) == "apps/web"


def test_workflows_from_package_json_and_makefile(write_files, tmp_path) -> None:
    root = write_files(
        tmp_path,
        {
            "package.json": '{\n  "scripts": {\n    "build": "tsc -b",\n    "test": "vitest"\n  }\n}\n',
            "tools/Makefile": "VAR := 1\nlint: deps\n\truff check .\ntest:\n\tpytest\nlint:\n",
        },
    )
    index = EvidenceIndex()
    workflows = extract_workflows(collect(root, BrainConfig()), index)
    assert [(c.name, c.command, c.cwd, c.source, c.confidence) for c in workflows.commands] == [
        ("build", "tsc -b", ".", "package.json", "HIGH"),
        ("test", "vitest", ".", "package.json", "HIGH"),
        ("lint", "make lint", "tools", "makefile", "MED"),
        ("test", "make test", "tools", "makefile", "MED"),
    ]
    build = workflows.commands[0]
    assert build.evidence == (evidence_id("package.json", 3, 3, CONFIG),)
    assert index.get(build.evidence[0]).excerpt_hash is not None


def test_profile_of_monorepo(monorepo) -> None:
    profile = build_profile(collect(monorepo, BrainConfig()))
    assert profile.to_dict() == {
        "languages": ["TypeScript"],
        "frameworks": ["Next.js", "React"],
        "package_managers": ["pnpm"],
    }
