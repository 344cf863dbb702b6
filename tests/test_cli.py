"""Tests for the config-sync command line.

Covers:
- get/set/delete/edit against a file-backed active store
- status/diff output formats
- export/import with explicit directories and labels
- --yes / --no / interactive confirmation
- init writes a starter settings file
- Error reporting and exit codes
"""

from __future__ import annotations

import io
import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from config_sync import cli
from config_sync.storage import MISSING, FileStorage

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def dirs(tmp_path):
    active = tmp_path / "active"
    sync = tmp_path / "sync"
    FileStorage(active).write(
        "system.site", {"name": "Example", "page": {"front": "/node"}}
    )
    FileStorage(active).write("user.role.admin", {"weight": 0})
    FileStorage(sync).write(
        "system.site", {"name": "Example", "page": {"front": "/home"}}
    )
    FileStorage(sync).write("user.settings", {"anonymous": "Anonymous"})
    return active, sync


def _run(capsys, dirs, *argv):
    active, sync = dirs
    code = cli.main(["--active-dir", str(active), "--sync-dir", str(sync), *argv])
    out, err = capsys.readouterr()
    return code, out, err


# ---------------------------------------------------------------------------
# get / set / delete / edit
# ---------------------------------------------------------------------------


class TestGet:
    def test_whole_object(self, capsys, dirs):
        code, out, _ = _run(capsys, dirs, "get", "system.site")
        assert code == 0
        assert out == "name: Example\npage:\n  front: /node\n"

    def test_key_as_json(self, capsys, dirs):
        code, out, _ = _run(
            capsys, dirs, "get", "system.site", "page.front", "--format", "json"
        )
        assert code == 0
        assert json.loads(out) == {"system.site:page.front": "/node"}

    def test_missing_object(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "get", "nope")
        assert code == 1
        assert "Error: Config nope does not exist" in err


class TestSet:
    def test_yes(self, capsys, dirs):
        code, _, _ = _run(
            capsys, dirs, "--yes", "set", "system.site", "page.front", "/front"
        )
        assert code == 0
        assert FileStorage(dirs[0]).read("system.site")["page"]["front"] == "/front"

    def test_no_cancels(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "--no", "set", "system.site", "name", "X")
        assert code == 0
        assert "Cancelled." in err
        assert FileStorage(dirs[0]).read("system.site")["name"] == "Example"

    def test_interactive_prompt(self, capsys, dirs, monkeypatch):
        questions: list[str] = []

        def fake_input(prompt):
            questions.append(prompt)
            return "y"

        monkeypatch.setattr("builtins.input", fake_input)
        code, _, _ = _run(capsys, dirs, "set", "system.site", "slogan", "Hi")
        assert code == 0
        assert questions == [
            "slogan key does not exist in system.site config. "
            "Do you want to create a new config key? (y/n): "
        ]
        assert FileStorage(dirs[0]).read("system.site")["slogan"] == "Hi"

    def test_yaml_from_stdin(self, capsys, dirs, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("- a\n- b\n"))
        code, _, _ = _run(
            capsys,
            dirs,
            "-y",
            "set",
            "user.role.admin",
            "permissions",
            "-",
            "--format",
            "yaml",
        )
        assert code == 0
        assert FileStorage(dirs[0]).read("user.role.admin")["permissions"] == [
            "a",
            "b",
        ]

    def test_missing_value(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "-y", "set", "system.site", "name")
        assert code == 1
        assert "No config value specified." in err

    def test_type_mismatch(self, capsys, dirs):
        code, _, err = _run(
            capsys, dirs, "-y", "set", "system.site", "name.first", "A"
        )
        assert code == 1
        assert "not a mapping" in err


class TestDelete:
    def test_key(self, capsys, dirs):
        code, _, _ = _run(capsys, dirs, "-y", "delete", "system.site", "page")
        assert code == 0
        assert FileStorage(dirs[0]).read("system.site") == {"name": "Example"}

    def test_object(self, capsys, dirs):
        code, _, _ = _run(capsys, dirs, "-y", "delete", "user.role.admin")
        assert code == 0
        assert FileStorage(dirs[0]).read("user.role.admin") is MISSING

    def test_missing_key(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "-y", "delete", "system.site", "x.y")
        assert code == 1
        assert "Configuration key 'x.y' not found in 'system.site'" in err


class TestEdit:
    def test_edit_imports_changes(self, capsys, dirs, monkeypatch):
        def fake_editor(path: Path) -> None:
            path.write_text("name: Edited\n", encoding="utf-8")

        monkeypatch.setattr(cli, "launch_editor", fake_editor)
        code, out, _ = _run(capsys, dirs, "-y", "edit", "system.site")
        assert code == 0
        assert "system.site" in out and "update" in out
        assert FileStorage(dirs[0]).read("system.site") == {"name": "Edited"}
        assert FileStorage(dirs[0]).read("user.role.admin") == {"weight": 0}

    def test_editor_failure(self, capsys, dirs, monkeypatch):
        monkeypatch.setattr(
            cli,
            "launch_editor",
            MagicMock(side_effect=subprocess.CalledProcessError(2, "vi")),
        )
        code, _, err = _run(capsys, dirs, "-y", "edit", "system.site")
        assert code == 1
        assert "editor exited with status 2" in err


# ---------------------------------------------------------------------------
# status / diff
# ---------------------------------------------------------------------------


class TestStatus:
    def test_table(self, capsys, dirs):
        code, out, _ = _run(capsys, dirs, "status")
        assert code == 0
        lines = out.splitlines()
        assert lines[0].split() == ["Name", "State"]
        assert lines[2].split() == ["system.site", "Different"]
        assert lines[3].split() == ["user.role.admin", "Only", "in", "DB"]
        assert lines[4].split() == ["user.settings", "Only", "in", "sync", "dir"]

    def test_no_differences_printed_once(self, capsys, dirs, caplog):
        _run(capsys, dirs, "export")
        with caplog.at_level("DEBUG"):
            code, out, err = _run(capsys, dirs, "status")
        message = "No differences between DB and sync directory."
        assert code == 0
        assert out == message + "\n"
        assert message not in err
        assert message not in caplog.text

    def test_json_with_filters(self, capsys, dirs):
        code, out, _ = _run(
            capsys, dirs, "status", "--state", "Any", "--prefix", "user.", "--format", "json"
        )
        assert code == 0
        assert [r["name"] for r in json.loads(out)["rows"]] == [
            "user.role.admin",
            "user.settings",
        ]

    def test_list(self, capsys, dirs):
        code, out, _ = _run(
            capsys, dirs, "status", "--state", "Only in sync dir", "--format", "list"
        )
        assert code == 0
        assert out == "user.settings\n"

    def test_unknown_state(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "status", "--state", "Bogus")
        assert code == 1
        assert "Unknown state 'Bogus'" in err

    def test_unknown_label(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "status", "--label", "prod")
        assert code == 1
        assert "Unknown config directory label 'prod'" in err

    def test_settings_file_defaults(self, capsys, dirs, tmp_path):
        settings = tmp_path / ".config_sync" / "config.yml"
        settings.parent.mkdir()
        settings.write_text("status:\n  state: Any\n  prefix: system.\n")
        code, out, _ = _run(capsys, dirs, "status", "--format", "list")
        assert code == 0
        assert out == "system.site\n"


class TestDiff:
    def test_json(self, capsys, dirs):
        code, out, _ = _run(capsys, dirs, "diff", "--format", "json")
        assert code == 0
        data = json.loads(out)
        assert data["collections"][""] == {
            "create": ["user.role.admin"],
            "update": ["system.site"],
            "delete": ["user.settings"],
        }

    def test_explicit_directory(self, capsys, dirs, tmp_path):
        code, out, _ = _run(
            capsys, dirs, "diff", "--directory", str(tmp_path / "empty")
        )
        assert code == 0
        assert "create" in out and "delete" not in out


# ---------------------------------------------------------------------------
# export / import
# ---------------------------------------------------------------------------


class TestExportImport:
    def test_export_to_destination(self, capsys, dirs, tmp_path):
        dest = tmp_path / "snapshot"
        code, out, _ = _run(capsys, dirs, "export", "--destination", str(dest))
        assert code == 0
        assert f"Configuration successfully exported to {dest}." in out
        assert FileStorage(dest).list_all() == ["system.site", "user.role.admin"]

    def test_export_clean_and_no_clean(self, capsys, dirs):
        code, _, _ = _run(capsys, dirs, "export", "--no-clean")
        assert code == 0
        assert FileStorage(dirs[1]).read("user.settings") is not MISSING
        _run(capsys, dirs, "export")
        assert FileStorage(dirs[1]).read("user.settings") is MISSING

    def test_import(self, capsys, dirs):
        code, out, _ = _run(capsys, dirs, "-y", "import")
        assert code == 0
        assert "The configuration was imported successfully." in out
        active = FileStorage(dirs[0])
        assert active.list_all() == ["system.site", "user.settings"]

    def test_partial_import(self, capsys, dirs):
        code, _, _ = _run(capsys, dirs, "-y", "import", "--partial")
        assert code == 0
        assert FileStorage(dirs[0]).list_all() == [
            "system.site",
            "user.role.admin",
            "user.settings",
        ]

    def test_dry_run(self, capsys, dirs):
        code, out, _ = _run(capsys, dirs, "import", "--dry-run")
        assert code == 0
        assert "update" in out
        assert "imported successfully" not in out
        assert FileStorage(dirs[0]).read("user.settings") is MISSING

    def test_import_declined(self, capsys, dirs):
        code, _, err = _run(capsys, dirs, "--no", "import")
        assert code == 1
        assert "Import cancelled." in err
        assert FileStorage(dirs[0]).read("user.settings") is MISSING

    def test_nothing_to_import(self, capsys, dirs):
        _run(capsys, dirs, "export")
        code, out, _ = _run(capsys, dirs, "import")
        assert code == 0
        assert "There are no changes." in out

    def test_import_by_label(self, capsys, dirs, tmp_path):
        staging = tmp_path / "staging"
        FileStorage(staging).write("staged.config", {"a": 1})
        settings = tmp_path / ".config_sync" / "config.yml"
        settings.parent.mkdir()
        settings.write_text(f"storage:\n  directories:\n    staging: {staging}\n")

        code, _, _ = _run(capsys, dirs, "-y", "import", "--label", "staging", "--partial")
        assert code == 0
        assert FileStorage(dirs[0]).read("staged.config") == {"a": 1}


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


class TestInit:
    def test_writes_starter_file(self, capsys, dirs, tmp_path):
        code, out, _ = _run(capsys, dirs, "init")
        target = tmp_path / ".config_sync" / "config.yml"
        assert code == 0
        assert out.startswith("Settings file: ")
        assert Path(out.split(": ", 1)[1].strip()).resolve() == target.resolve()
        assert "storage:" in target.read_text(encoding="utf-8")

    def test_existing_file_kept(self, capsys, dirs, tmp_path):
        target = tmp_path / ".config_sync" / "config.yml"
        target.parent.mkdir()
        target.write_text("status:\n  state: Any\n", encoding="utf-8")

        code, out, _ = _run(capsys, dirs, "init")

        assert code == 0
        assert Path(out.split(": ", 1)[1].strip()).resolve() == target.resolve()
        assert target.read_text(encoding="utf-8") == "status:\n  state: Any\n"

    def test_explicit_path(self, capsys, dirs, tmp_path):
        target = tmp_path / "etc" / "config-sync.yml"
        code, _, _ = _run(capsys, dirs, "init", "--path", str(target))
        assert code == 0
        assert target.exists()


# ---------------------------------------------------------------------------
# Parser and collaborators
# ---------------------------------------------------------------------------


class TestParser:
    def test_yes_and_no_exclusive(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser().parse_args(["--yes", "--no", "status"])
        assert exc_info.value.code == 2

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_env_directories(self, capsys, dirs, monkeypatch):
        monkeypatch.setenv("CONFIG_SYNC_ACTIVE_DIR", str(dirs[0]))
        monkeypatch.setenv("CONFIG_SYNC_SYNC_DIR", str(dirs[1]))
        code = cli.main(["status", "--format", "list"])
        out, _ = capsys.readouterr()
        assert code == 0
        assert "user.settings" in out


class TestCollaborators:
    def test_prompt_confirm_eof_declines(self, monkeypatch):
        monkeypatch.setattr("builtins.input", MagicMock(side_effect=EOFError))
        assert cli.prompt_confirm("Proceed?") is False

    @pytest.mark.parametrize("answer, expected", [("y", True), ("YES", True), ("n", False), ("", False)])
    def test_prompt_confirm_answers(self, monkeypatch, answer, expected):
        monkeypatch.setattr("builtins.input", lambda prompt: answer)
        assert cli.prompt_confirm("Proceed?") is expected

    def test_launch_editor_uses_env(self, monkeypatch, tmp_path):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "code --wait")
        with patch("config_sync.cli.subprocess.run") as mock_run:
            cli.launch_editor(tmp_path / "a.yml")
        mock_run.assert_called_once_with(
            ["code", "--wait", str(tmp_path / "a.yml")], check=True
        )
