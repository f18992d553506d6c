"""Tests for the click command line."""

from __future__ import annotations

import json
import os

import pytest
from click.testing import CliRunner

from conftest import FakeRunner
from pswitch import cli as cli_module
from pswitch.cli import cli


@pytest.fixture()
def fake_runner(monkeypatch) -> FakeRunner:
    runner = FakeRunner()
    monkeypatch.setattr(cli_module, "CommandRunner", lambda *args, **kwargs: runner)
    return runner


def _read(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class TestSwitchCommand:
    def test_switch_with_yes(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        target = os.path.join(fixtures_copy, "target", "Scrutor.sln")

        result = CliRunner().invoke(
            cli, ["switch", work, target, "-p", "Scrutor", "-t", "src/Scrutor/Scrutor.csproj", "--yes"]
        )

        assert result.exit_code == 0, result.output
        assert "Summary of changes" in result.output
        assert "Done!" in result.output
        assert len(fake_runner.calls_for("add")) == 2
        app = _read(os.path.join(fixtures_copy, "work", "src", "App", "App.csproj")).decode("utf-8")
        assert "'$(PSWITCH)' != 'Scrutor'" in app

    def test_declining_changes_nothing(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        target = os.path.join(fixtures_copy, "target", "Scrutor.sln")
        app_path = os.path.join(fixtures_copy, "work", "src", "App", "App.csproj")
        before = _read(app_path)

        result = CliRunner().invoke(
            cli, ["switch", work, target, "-p", "Scrutor", "-t", "Scrutor"], input="n\n"
        )

        assert result.exit_code == 1
        assert "Cancelled" in result.output
        assert _read(app_path) == before
        assert fake_runner.calls_for("add") == []

    def test_unknown_target_project(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        target = os.path.join(fixtures_copy, "target", "Scrutor.sln")

        result = CliRunner().invoke(cli, ["switch", work, target, "-p", "Scrutor", "-t", "Nope", "--yes"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "Nope" in result.output


class TestRestoreCommand:
    def test_switch_then_restore(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        target = os.path.join(fixtures_copy, "target", "Scrutor.sln")
        app_path = os.path.join(fixtures_copy, "work", "src", "App", "App.csproj")
        before = _read(app_path)

        runner = CliRunner()
        runner.invoke(cli, ["switch", work, target, "-p", "Scrutor", "-t", "Scrutor", "--yes"])
        result = runner.invoke(cli, ["restore", work, "-p", "Scrutor", "--yes"])

        assert result.exit_code == 0, result.output
        assert _read(app_path) == before
        assert len(fake_runner.calls_for("remove")) == 2

    def test_restore_without_switch(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        result = CliRunner().invoke(cli, ["restore", work, "-p", "Scrutor", "--yes"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestListingCommands:
    def test_packages(self, fixtures_copy, fake_runner):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        result = CliRunner().invoke(cli, ["packages", work])

        assert result.exit_code == 0, result.output
        assert "Scrutor" in result.output
        assert "Serilog" in result.output

    def test_projects_json(self, fixtures_copy, fake_runner, tmp_path):
        work = os.path.join(fixtures_copy, "work", "Work.sln")
        out = tmp_path / "out" / "graph.json"

        result = CliRunner().invoke(cli, ["projects", work, "--json", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["name"] == "Work"
        assert len(data["members"]) == 3
        app = next(p for p in data["projects"] if p["name"] == "App")
        assert [r["name"] for r in app["package_references"]] == ["Newtonsoft.Json", "Scrutor"]
