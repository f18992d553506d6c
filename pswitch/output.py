"""Console rendering and JSON serialisation of solutions and plans."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pswitch.config import Solution
from pswitch.pipeline import RestorePlan, SwitchPlan, distinct_versions, package_versions

_RULE = "[dim]--------------------------------------------------------------[/dim]"


def render_switch_plan(console: Console, plan: SwitchPlan, solution_folder: str) -> None:
    console.print(f"\n{_RULE}")
    console.print("Summary of changes to be performed:\n")
    console.print(
        f"Adding external projects to [green]{escape(plan.solution.name)}[/green]"
        f"/[cyan]{escape(solution_folder)}[/cyan] solution folder:"
    )
    for project in plan.projects_to_add:
        console.print(f"  [bright_cyan]{escape(project.name)}[/bright_cyan] [dim]({escape(project.absolute_path)})[/dim]")

    console.print("\nSwitching package to project reference in projects:")
    for project, version in plan.projects_to_switch:
        console.print(
            f"  [blue]{escape(project.name)}[/blue]: [magenta]{escape(plan.package_name)}[/magenta] "
            f"[dim]({escape(version)})[/dim] => [bright_cyan]{escape(plan.target.name)}[/bright_cyan] "
            f"[dim]({escape(plan.target.absolute_path)})[/dim]"
        )


def render_restore_plan(console: Console, plan: RestorePlan) -> None:
    console.print(f"\n{_RULE}")
    console.print("Summary of changes to be performed:\n")
    console.print("Restoring package references in projects:")
    for project, reference in plan.projects_to_restore:
        console.print(
            f"  [blue]{escape(project.name)}[/blue]: [magenta]{escape(plan.package_name)}[/magenta] "
            f"[dim](removing => {escape(reference)})[/dim]"
        )

    console.print(f"\nRemoving external projects from [green]{escape(plan.solution.name)}[/green]:")
    for project in plan.projects_to_remove:
        console.print(f"  [bright_cyan]{escape(project.name)}[/bright_cyan] [dim]({escape(project.absolute_path)})[/dim]")


def packages_table(solution: Solution) -> Table:
    table = Table(title=f"Packages: {solution.name}", show_edge=False)
    table.add_column("Package", style="bold")
    table.add_column("Versions")
    table.add_column("Projects", justify="right")
    table.add_column("Switched")

    for name, refs in sorted(package_versions(solution).items()):
        switched = sorted({r.switch_reference for r in refs if r.is_switched})
        table.add_row(
            name,
            ", ".join(v for v in distinct_versions(refs) if v),
            str(len(refs)),
            ", ".join(switched),
        )
    return table


def projects_table(solution: Solution) -> Table:
    table = Table(title=f"Projects: {solution.name}", show_edge=False)
    table.add_column("Project", style="bold")
    table.add_column("Path")
    table.add_column("Dependencies")

    for project in solution.projects:
        references = [p.name for p in solution.graph.references(project)]
        table.add_row(project.name, project.specified_path, ", ".join(references))
    return table


def solution_to_dict(solution: Solution) -> dict:
    """Describe the solution members and every project in its graph."""
    return {
        "name": solution.name,
        "path": solution.absolute_path,
        "members": [p.absolute_path for p in solution.projects],
        "projects": [
            {
                "name": p.name,
                "path": p.absolute_path,
                "specified_path": p.specified_path,
                "is_switched": p.is_switched,
                "switch_reference": p.switch_reference,
                "project_references": [
                    {
                        "path": r.absolute_path,
                        "specified_path": r.specified_path,
                        "is_switched": r.is_switched,
                        "switch_reference": r.switch_reference,
                    }
                    for r in p.project_references
                ],
                "package_references": [
                    {
                        "name": r.name,
                        "version": r.version,
                        "is_switched": r.is_switched,
                        "switch_reference": r.switch_reference,
                    }
                    for r in p.package_references
                ],
            }
            for p in solution.graph.projects()
        ],
    }


def write_json(solution: Solution, output_path: str) -> None:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(solution_to_dict(solution), indent=2))
