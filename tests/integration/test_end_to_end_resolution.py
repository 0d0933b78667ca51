from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from stylevars.cli import main
from stylevars.config import ScopeConfig, ScopeMode, load_effective_config
from stylevars.resolution import CancellationToken, ResolutionCancelled
from stylevars.service import ProjectService

THEME_CSS = """\
:root {
  /**
   * @name Primary
   * @description Brand color
   */
  --primary: #3498db;
}
@media (prefers-color-scheme: dark) {
  :root {
    --primary: #1a5276;
  }
}
"""


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _library_project(root: Path) -> None:
    _write(
        root / "src" / "main.scss",
        '@import "@acme/tokens/colors";\n:root { --brand: var(--acme-blue); }\n',
    )
    _write(
        root / "node_modules" / "@acme" / "tokens" / "colors.scss",
        ":root { --acme-blue: #0000ff; }\n",
    )
    _write(root / "node_modules" / "other" / "unused.css", ":root { --unused: 1px; }\n")


def _with_mode(service: ProjectService, mode: ScopeMode) -> None:
    config = service.config
    scope = ScopeConfig(mode=mode, max_import_depth=config.scope.max_import_depth)
    service.update_config(replace(config, scope=scope))


def test_theme_contexts_rank_and_document(tmp_path: Path) -> None:
    _write(tmp_path / "theme.css", THEME_CSS)
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()

    resolution = service.resolve("--primary")

    assert resolution is not None
    payload = resolution.to_dict()
    assert [entry["context"] for entry in payload["entries"]] == [
        "default",
        "prefers-color-scheme: dark",
    ]
    assert payload["doc_context"] == "default"
    assert payload["doc"]["name"] == "Primary"
    assert payload["doc"]["description"] == "Brand color"
    assert service.hint("--primary") == "--primary -> #3498db"


def test_library_variables_join_the_scope_through_imports(tmp_path: Path) -> None:
    _library_project(tmp_path)
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()

    before = service.resolve("--brand")
    imported = service.register_imports(Path("src/main.scss"))
    after = service.resolve("--brand")

    assert before is not None
    assert before.entries[0].info.resolved == "var(--acme-blue)"
    assert imported == ["node_modules/@acme/tokens/colors.scss"]
    assert after is not None
    assert after.entries[0].info.resolved == "#0000ff"
    assert service.resolve("--unused") is None


def test_scope_modes_control_library_visibility(tmp_path: Path) -> None:
    _library_project(tmp_path)
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()
    service.register_imports(Path("src/main.scss"))

    _with_mode(service, ScopeMode.PROJECT_ONLY)
    project_only = service.resolve("--brand")
    _with_mode(service, ScopeMode.GLOBAL)
    global_brand = service.resolve("--brand")
    global_unused = service.resolve("--unused")

    assert project_only is not None
    assert project_only.entries[0].info.resolved == "var(--acme-blue)"
    assert global_brand is not None
    assert global_brand.entries[0].info.resolved == "#0000ff"
    assert global_unused is not None


def test_list_variables_orders_by_value_type(tmp_path: Path) -> None:
    _write(
        tmp_path / "tokens.css",
        ":root { --gap: 16px; --brand: #3498db; --ratio: 1.5; --font: serif; --sm: 4px; }\n",
    )
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()

    listing = service.list_variables()

    assert [(item["name"], item["type"]) for item in listing] == [
        ("--sm", "size"),
        ("--gap", "size"),
        ("--brand", "color"),
        ("--ratio", "number"),
        ("--font", "other"),
    ]
    assert [item["name"] for item in service.list_variables(prefix="--g")] == ["--gap"]


def test_refresh_picks_up_edited_values(tmp_path: Path) -> None:
    tokens = tmp_path / "vars.less"
    _write(tokens, "@base: 8px;\n@gap: (@base * 2);\n")
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()

    first = service.resolve("@gap")
    tokens.write_text("@base: 10.5px;\n@gap: (@base * 2);\n", encoding="utf-8")
    service.refresh_index()
    second = service.resolve("@gap")

    assert first is not None
    assert first.entries[0].info.resolved == "16px"
    assert second is not None
    assert second.entries[0].info.resolved == "21px"
    assert service.hint("@gap") == "Resolution: (@base * 2) -> @base -> 21px"


def test_persisted_index_is_reused_by_a_new_service(tmp_path: Path) -> None:
    _write(tmp_path / "theme.css", THEME_CSS)
    ProjectService(load_effective_config(tmp_path)).refresh_index()

    service = ProjectService(load_effective_config(tmp_path))
    loaded = service.load_index()

    assert loaded == 1
    resolution = service.resolve("--primary")
    assert resolution is not None
    assert resolution.doc.name == "Primary"


def test_operations_are_audited(tmp_path: Path) -> None:
    _write(tmp_path / "theme.css", THEME_CSS)
    service = ProjectService(load_effective_config(tmp_path))
    service.refresh_index()
    service.resolve("--missing")
    token = CancellationToken()
    token.cancel()
    with pytest.raises(ResolutionCancelled):
        service.resolve("--primary", token)

    entries = service.audit_entries()

    assert [entry["operation"] for entry in entries] == ["refresh_index", "resolve", "resolve"]
    assert entries[1]["error_code"] == "UNKNOWN_VARIABLE"
    assert entries[1]["ok"] is False
    assert entries[2]["error_code"] == "CANCELLED"
    assert entries[0]["request_id"] == "req-000001"
    assert service.audit_logger.path == tmp_path.resolve() / ".stylevars" / "audit.jsonl"


def test_cli_resolve_prints_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "vars.less", "@base: 8px;\n@gap: (@base * 2);\n")

    exit_code = main(["--project-root", str(tmp_path), "resolve", "@gap"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["name"] == "@gap"
    assert payload["entries"][0]["resolved"] == "16px"
    assert payload["hint"] == "Resolution: (@base * 2) -> @base -> 16px"
    audit_path = tmp_path / ".stylevars" / "audit.jsonl"
    audit_lines = audit_path.read_text(encoding="utf-8").splitlines()
    operations = [json.loads(line)["operation"] for line in audit_lines]
    assert operations.count("resolve") == 1


def test_cli_unknown_variable_exits_nonzero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(tmp_path / "vars.less", "@base: 8px;\n")

    exit_code = main(["--project-root", str(tmp_path), "resolve", "@missing"])

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out) == {"error": "unknown variable", "name": "@missing"}


def test_cli_status_and_imports(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _library_project(tmp_path)

    status_code = main(["--project-root", str(tmp_path), "status"])
    status = json.loads(capsys.readouterr().out)
    imports_code = main(["--project-root", str(tmp_path), "imports", "src/main.scss"])
    tree = json.loads(capsys.readouterr().out)

    assert status_code == 0
    assert status["index"]["index_status"] == "not_indexed"
    assert status["config"]["scope"]["mode"] == "project_with_imports"
    assert imports_code == 0
    assert tree["path"].endswith("src/main.scss")
    assert [child["path"] for child in tree["imports"]] == [
        (tmp_path.resolve() / "node_modules" / "@acme" / "tokens" / "colors.scss").as_posix()
    ]


def test_cli_reports_invalid_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "stylevars.toml", '[scope]\nmode = "sideways"\n')

    exit_code = main(["--project-root", str(tmp_path), "status"])

    assert exit_code == 2
    assert "scope.mode" in capsys.readouterr().err
