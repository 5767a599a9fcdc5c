"""Tests for aibrain.core.pipeline: generate, check, baseline and diff over a monorepo."""

from pathlib import Path

import pytest

from aibrain.config import BrainConfig
from aibrain.core.pipeline import build_brain, run_baseline, run_check, run_diff, run_generate, stored_rules
from aibrain.errors import StorageError
from aibrain.evolution.diff import is_empty
from aibrain.rules.models import HARD, NO_CROSS_PROJECT_IMPORT, SOFT, rule_id_for
from aibrain.storage import load_brain, save_brain, storage_path

BOUNDARY_ID = rule_id_for(NO_CROSS_PROJECT_IMPORT, ["apps/api", "apps/web"])


def test_build_brain_sections(monorepo: Path) -> None:
    data = build_brain(monorepo, BrainConfig()).to_dict()
    assert list(data) == [
        "schema_version",
        "brain_version",
        "repo",
        "profile",
        "structure",
        "graphs",
        "conventions",
        "rules",
        "workflows",
        "evidence",
        "status",
    ]
    assert data["repo"]["root"] == "repo"
    assert "git_commit" not in data["repo"]
    assert [p["path"] for p in data["structure"]["projects"]] == [".", "apps/api", "apps/web", "packages/ui"]
    assert data["rules"]["items"][0]["rule_id"] == BOUNDARY_ID
    assert data["status"]["conflicts"] == []


def test_every_evidence_reference_resolves(monorepo: Path) -> None:
    data = build_brain(monorepo, BrainConfig()).to_dict()
    evidence = data["evidence"]
    refs = [ref for rule in data["rules"]["items"] for ref in rule["evidence"]]
    refs += [ref for cmd in data["workflows"]["commands"] for ref in cmd["evidence"]]
    refs += [ref for p in data["structure"]["projects"] for ref in p["evidence"]]
    assert refs
    assert all(ref in evidence for ref in refs)


def test_generate_is_byte_identical_across_runs(monorepo: Path) -> None:
    config = BrainConfig()
    run_generate(monorepo, config)
    path = storage_path(monorepo, config, "brain")
    first = path.read_bytes()
    run_generate(monorepo, config)
    assert path.read_bytes() == first
    assert first.endswith(b"\n")


def test_generate_renders_markdown(monorepo: Path) -> None:
    run_generate(monorepo, BrainConfig())
    out = monorepo / "AI_BRAIN"
    assert sorted(p.name for p in out.iterdir()) == [
        "ARCHITECTURE_MAP.md",
        "CONVENTIONS.md",
        "README.md",
        "RULES.md",
        "brain.json",
    ]


def test_generate_without_render(monorepo: Path) -> None:
    run_generate(monorepo, BrainConfig(), render=False)
    assert [p.name for p in (monorepo / "AI_BRAIN").iterdir()] == ["brain.json"]


def test_check_finds_cross_app_import(monorepo: Path) -> None:
    result = run_check(monorepo, BrainConfig())
    assert len(result.violations) == 1
    v = result.violations[0]
    assert v.from_path == "apps/web/src/x.ts"
    assert v.source_project == "apps/web"
    assert v.target_project == "apps/api"
    assert v.severity == HARD
    assert result.exit_code == 2
    # must_use_command rules document intent only
    assert len(result.unevaluated_rules) == 2


def test_check_uses_stored_rules(monorepo: Path) -> None:
    config = BrainConfig()
    run_generate(monorepo, config, render=False)
    data = load_brain(monorepo, config)
    data["rules"]["items"] = []
    save_brain(monorepo, config, data)

    assert run_check(monorepo, config).exit_code == 0
    assert run_check(monorepo, config, use_stored=False).exit_code == 2


def test_config_rule_overrides_stored_rule(monorepo: Path) -> None:
    run_generate(monorepo, BrainConfig(), render=False)
    config = BrainConfig(
        rules=[
            {
                "id": BOUNDARY_ID,
                "type": NO_CROSS_PROJECT_IMPORT,
                "severity": "SOFT",
                "params": {"projects": ["apps/api", "apps/web"]},
            }
        ]
    )
    result = run_check(monorepo, config)
    assert [v.severity for v in result.violations] == [SOFT]
    assert result.exit_code == 1


def test_declared_no_import_rule(monorepo: Path) -> None:
    config = BrainConfig(
        rules=[
            {
                "id": "api-no-express",
                "type": "no_import",
                "severity": "SOFT",
                "params": {"scope": "apps/api", "forbidden": ["express"]},
            }
        ]
    )
    result = run_check(monorepo, config, use_stored=False)
    by_rule = {v.rule_id: v for v in result.violations}
    assert set(by_rule) == {BOUNDARY_ID, "api-no-express"}
    assert by_rule["api-no-express"].from_path == "apps/api/server.ts"
    assert result.exit_code == 2


def test_stored_rules_skip_malformed_entries() -> None:
    data = {
        "rules": {
            "items": [
                {"rule_id": "ok", "type": "no_import", "severity": "HARD", "params": {"forbidden": ["x"]}},
                {"rule_id": "bad", "severity": "HARD"},
                "not a rule",
            ]
        }
    }
    rules = stored_rules(data, BrainConfig())
    assert rules.ids() == ["ok"]


def test_diff_requires_baseline(monorepo: Path) -> None:
    with pytest.raises(StorageError, match="baseline"):
        run_diff(monorepo, BrainConfig())


def test_baseline_then_diff_is_empty(monorepo: Path) -> None:
    config = BrainConfig()
    run_baseline(monorepo, config)
    run_generate(monorepo, config, render=False)
    assert is_empty(run_diff(monorepo, config))


def test_diff_reports_new_project(monorepo: Path, write_files) -> None:
    config = BrainConfig()
    run_baseline(monorepo, config)
    write_files(
        monorepo,
        {
            "apps/admin/package.json": '{"name": "admin"}\n',
            "apps/admin/main.ts": 'import { Button } from "../../packages/ui/button";\n',
        },
    )
    run_generate(monorepo, config, render=False)
    diff = run_diff(monorepo, config)
    assert diff["projects"]["added"] == ["apps/admin"]
    assert diff["cross_project_edges"]["added"] == ["apps/admin -> packages/ui"]
    # a third app changes the boundary rule's scope and so its id
    assert diff["rules"]["removed"] == [BOUNDARY_ID]
    assert len(diff["rules"]["added"]) == 1
