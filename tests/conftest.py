"""Shared fixtures: fixture trees copied to tmp_path and a fake dotnet CLI."""

from __future__ import annotations

import os
import shutil

import pytest

from pswitch.errors import ExternalToolFailure
from pswitch.process import CommandResult

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

# What `dotnet sln <sln> list` prints for each fixture solution
SOLUTION_LISTINGS = {
    "Work.sln": ["src\\App\\App.csproj", "src\\Lib\\Lib.csproj", "src\\Legacy\\Legacy.csproj"],
    "Scrutor.sln": ["src/Scrutor/Scrutor.csproj", "src/Scrutor.Abstractions/Scrutor.Abstractions.csproj"],
}


class FakeRunner:
    """Stands in for CommandRunner; answers `sln list` and records the rest."""

    def __init__(self, listings: dict[str, list[str]] | None = None, fail_on: str | None = None) -> None:
        self.listings = dict(SOLUTION_LISTINGS if listings is None else listings)
        self.fail_on = fail_on
        self.calls: list[list[str]] = []

    def run(self, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        if self.fail_on and any(a.endswith(self.fail_on) for a in args):
            raise ExternalToolFailure(args, f"failed on {self.fail_on}", 1)
        if args[1:2] == ["sln"] and args[-1] == "list":
            lines = self.listings.get(os.path.basename(args[2]), [])
            stdout = "Project(s)\n----------\n" + "\n".join(lines) + "\n"
            return CommandResult(args=list(args), returncode=0, stdout=stdout, stderr="")
        return CommandResult(args=list(args), returncode=0, stdout="", stderr="")

    def dotnet(self, *args: str) -> CommandResult:
        return self.run(["dotnet", *args])

    def calls_for(self, action: str) -> list[list[str]]:
        return [c for c in self.calls if len(c) > 3 and c[3] == action]


@pytest.fixture()
def fixtures_copy(tmp_path) -> str:
    """A writable copy of tests/fixtures."""
    dest = tmp_path / "fixtures"
    shutil.copytree(FIXTURES_DIR, dest)
    return str(dest)


@pytest.fixture()
def runner() -> FakeRunner:
    return FakeRunner()
