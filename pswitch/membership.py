"""Add and remove external projects in a solution manifest."""

from __future__ import annotations

import logging

from pswitch.config import Project, Solution, SwitchConfig
from pswitch.graph.project_graph import ProjectGraph
from pswitch.process import CommandRunner

logger = logging.getLogger(__name__)


def closure_with(project: Project, graph: ProjectGraph) -> list[Project]:
    """The project followed by its transitive references."""
    return [project, *graph.transitive_references(project)]


class SolutionMembership:
    """Runs ``dotnet sln add/remove`` against one solution file.

    Each project is one invocation.  A failure stops the sequence but
    earlier invocations are not undone.
    """

    def __init__(self, sln_path: str, runner: CommandRunner, config: SwitchConfig | None = None) -> None:
        self.sln_path = sln_path
        self.runner = runner
        self.config = config or SwitchConfig()

    def add_project(self, project: Project) -> None:
        self.runner.dotnet(
            "sln", self.sln_path, "add",
            "--solution-folder", self.config.solution_folder,
            project.absolute_path,
        )
        logger.info(f"Added: {project.name} ({project.absolute_path})")

    def remove_project(self, project: Project) -> None:
        self.runner.dotnet("sln", self.sln_path, "remove", project.absolute_path)
        logger.info(f"Removed: {project.name} ({project.absolute_path})")

    def add_external_projects(self, target: Project, target_graph: ProjectGraph, progress_callback=None) -> list[Project]:
        """Add ``target`` and everything it references, in closure order."""
        added = []
        for project in closure_with(target, target_graph):
            self.add_project(project)
            added.append(project)
            if progress_callback:
                progress_callback("added", f"{project.name} ({project.absolute_path})")
        return added

    def remove_external_projects(self, solution: Solution, package_name: str, progress_callback=None) -> list[Project]:
        """Remove the projects that replaced ``package_name`` and their references.

        Derived from the graph in ``solution``, which reflects the files as
        they were when the solution was parsed.
        """
        removed = []
        for project in external_projects(solution, package_name):
            self.remove_project(project)
            removed.append(project)
            if progress_callback:
                progress_callback("removed", f"{project.name} ({project.absolute_path})")
        return removed


def external_projects(solution: Solution, package_name: str) -> list[Project]:
    """Projects switched in for ``package_name`` plus their closures, each once."""
    seen: set[str] = set()
    result = []
    for switched in solution.graph.switched_to(package_name):
        for project in closure_with(switched, solution.graph):
            if project.absolute_path in seen:
                continue
            seen.add(project.absolute_path)
            result.append(project)
    return result
