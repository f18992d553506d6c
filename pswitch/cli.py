"""pswitch CLI - switch NuGet package references to source project references."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from pswitch.config import SwitchConfig
from pswitch.dotnet.solution import parse_solution
from pswitch.errors import PswitchError
from pswitch.output import (
    packages_table,
    projects_table,
    render_restore_plan,
    render_switch_plan,
    write_json,
)
from pswitch.pipeline import find_project, plan_restore, plan_switch, run_restore, run_switch
from pswitch.process import CommandRunner

console = Console()

_EVENT_LABELS = {
    "added": "Added",
    "removed": "Removed",
    "switched": "Switched",
    "restored": "Restored",
}


def _on_progress(event: str, message: str) -> None:
    console.print(f"  {_EVENT_LABELS.get(event, event)}: {escape(message)}")


def _make_config(folder: str, dotnet: str) -> SwitchConfig:
    return SwitchConfig(solution_folder=folder, dotnet_path=dotnet)


def _confirm(yes: bool) -> None:
    """Last point where the run can be cancelled; no file is changed yet."""
    if yes:
        return
    console.print("")
    if not click.confirm("Do you want to continue?", default=False):
        console.print("\n[red]Cancelled[/red]")
        sys.exit(1)


def _fail(error: PswitchError) -> None:
    console.print("\n[red]Error[/red]:")
    console.print(escape(str(error)))
    sys.exit(1)


@click.group()
@click.option("--verbose", is_flag=True, help="Show debug logging, including dotnet commands")
def cli(verbose: bool) -> None:
    """pswitch - Switch a package reference to its source project and back."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@cli.command("switch")
@click.argument("work_solution", type=click.Path(exists=True, dir_okay=False))
@click.argument("target_solution", type=click.Path(exists=True, dir_okay=False))
@click.option("-p", "--package", "package_name", required=True, help="Package to replace")
@click.option("-t", "--project", "target_key", required=True,
              help="Target project in TARGET_SOLUTION (path as listed, absolute path or name)")
@click.option("--folder", default="ExternalProjects", show_default=True, help="Solution folder for added projects")
@click.option("--dotnet", default="dotnet", show_default=True, help="dotnet executable")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def switch_cmd(
    work_solution: str,
    target_solution: str,
    package_name: str,
    target_key: str,
    folder: str,
    dotnet: str,
    yes: bool,
) -> None:
    """Replace PACKAGE in WORK_SOLUTION with a project from TARGET_SOLUTION."""
    config = _make_config(folder, dotnet)
    runner = CommandRunner(config.dotnet_path, config.command_timeout)
    try:
        work = parse_solution(work_solution, runner, config)
        target_sln = parse_solution(target_solution, runner, config)
        target = find_project(target_sln, target_key)
        plan = plan_switch(work, package_name, target, target_sln.graph)

        render_switch_plan(console, plan, config.solution_folder)
        _confirm(yes)

        console.print("\n[green]Proceeding...[/green]")
        run_switch(plan, runner, config, progress_callback=_on_progress)
    except PswitchError as e:
        _fail(e)

    console.print("\n[green]Done![/green]")


@cli.command("restore")
@click.argument("work_solution", type=click.Path(exists=True, dir_okay=False))
@click.option("-p", "--package", "package_name", required=True, help="Package to restore")
@click.option("--dotnet", default="dotnet", show_default=True, help="dotnet executable")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def restore_cmd(work_solution: str, package_name: str, dotnet: str, yes: bool) -> None:
    """Restore PACKAGE in WORK_SOLUTION and remove its external projects."""
    config = _make_config("ExternalProjects", dotnet)
    runner = CommandRunner(config.dotnet_path, config.command_timeout)
    try:
        work = parse_solution(work_solution, runner, config)
        plan = plan_restore(work, package_name)

        render_restore_plan(console, plan)
        _confirm(yes)

        console.print("\n[green]Proceeding...[/green]")
        run_restore(plan, runner, config, progress_callback=_on_progress)
    except PswitchError as e:
        _fail(e)

    console.print("\n[green]Done![/green]")


@cli.command("packages")
@click.argument("solution", type=click.Path(exists=True, dir_okay=False))
@click.option("--dotnet", default="dotnet", show_default=True, help="dotnet executable")
def packages_cmd(solution: str, dotnet: str) -> None:
    """List the packages referenced by SOLUTION and their switch state."""
    config = _make_config("ExternalProjects", dotnet)
    try:
        sln = parse_solution(solution, CommandRunner(config.dotnet_path, config.command_timeout), config)
    except PswitchError as e:
        _fail(e)
    console.print(packages_table(sln))


@cli.command("projects")
@click.argument("solution", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "json_path", default=None, help="Also write the project graph to this JSON file")
@click.option("--dotnet", default="dotnet", show_default=True, help="dotnet executable")
def projects_cmd(solution: str, json_path: str | None, dotnet: str) -> None:
    """List the projects of SOLUTION with their project dependencies."""
    config = _make_config("ExternalProjects", dotnet)
    try:
        sln = parse_solution(solution, CommandRunner(config.dotnet_path, config.command_timeout), config)
    except PswitchError as e:
        _fail(e)
    console.print(projects_table(sln))

    if json_path:
        write_json(sln, json_path)
        console.print(f"[green]Output written to:[/green] {escape(json_path)}")


if __name__ == "__main__":
    cli()
