"""Smoke tests for the ladder typer app against SQLite."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
from typer.testing import CliRunner

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "ladder.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("ladder_cli", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def invoke(cli, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(cli, "setup_logging", lambda level=None: None)
    runner = CliRunner()
    env = {"LADDER_DB_URL": f"sqlite:///{tmp_path / 'cli.db'}"}

    def run(*args: str):
        return runner.invoke(cli.app, list(args), env=env)

    return run


def test_submit_and_standings(invoke) -> None:
    assert invoke("add-player", "Xavier", "--id", "x").exit_code == 0
    assert invoke("add-player", "Yara", "--id", "y", "--rating", "1100").exit_code == 0

    submitted = invoke("submit", "x", "y", "21", "19")
    assert submitted.exit_code == 0, submitted.output
    assert "Xavier def Yara" in submitted.stdout

    standings = invoke("standings")
    assert standings.exit_code == 0
    lines = standings.stdout.strip().splitlines()
    assert "Yara" in lines[1]
    assert "Xavier" in lines[2]

    verified = invoke("verify")
    assert verified.exit_code == 0
    assert "ok players=2 matches=1" in verified.stdout


def test_invalid_submission_exits_with_error(invoke) -> None:
    invoke("add-player", "Xavier", "--id", "x")

    result = invoke("submit", "x", "x", "21", "10")

    assert result.exit_code == 1


def test_delete_unknown_match_exits_with_error(invoke) -> None:
    result = invoke("delete", "missing")
    assert result.exit_code == 1


def test_list_systems_shows_shipped_config(invoke) -> None:
    result = invoke("list-systems")
    assert result.exit_code == 0
    assert "ladder_default" in result.stdout


def test_missing_config_dir_is_reported_as_usage_error(invoke, tmp_path: Path) -> None:
    result = invoke("list-systems", "--config-dir", str(tmp_path / "absent"))

    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)


def test_invalid_config_is_reported_as_usage_error(invoke, tmp_path: Path) -> None:
    config_dir = tmp_path / "configs"
    config_dir.mkdir()
    (config_dir / "broken.toml").write_text('[rating]\nk_factor = 8.0\n')

    result = invoke("add-player", "Xavier", "--config-dir", str(config_dir))

    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
