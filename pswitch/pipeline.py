"""Plan and run a switch or restore across a solution."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from pswitch.config import PackageReference, Project, Solution, SwitchConfig
from pswitch.errors import PackageNotFound, ProjectNotFound, SwitchStateNotFound
from pswitch.graph.project_graph import ProjectGraph
from pswitch.membership import SolutionMembership, closure_with, external_projects
from pswitch.process import CommandRunner
from pswitch.switch import Change, restore_package, switch_conflict, switch_package


@dataclass
class SwitchPlan:
    solution: Solution
    package_name: str
    target: Project
    target_graph: ProjectGraph
    projects_to_add: list[Project] = field(default_factory=list)
    # (project, version currently referenced)
    projects_to_switch: list[tuple[Project, str]] = field(default_factory=list)


@dataclass
class RestorePlan:
    solution: Solution
    package_name: str
    # (project, relative path of the project reference being removed)
    projects_to_restore: list[tuple[Project, str]] = field(default_factory=list)
    projects_to_remove: list[Project] = field(default_factory=list)


def package_versions(solution: Solution) -> dict[str, list[PackageReference]]:
    """Package references of all members grouped by package name."""
    packages: dict[str, list[PackageReference]] = {}
    for project in solution.projects:
        for ref in project.package_references:
            packages.setdefault(ref.name, []).append(ref)
    return packages


def distinct_versions(refs: list[PackageReference]) -> list[str]:
    return list(dict.fromkeys(r.version for r in refs))


def find_project(solution: Solution, key: str) -> Project:
    """Select a member by specified path, absolute path or name."""
    normalised = key.replace("\\", "/")
    for project in solution.projects:
        if project.specified_path.replace("\\", "/") == normalised:
            return project
    absolute = os.path.abspath(key)
    for project in solution.projects:
        if project.absolute_path == absolute:
            return project
    for project in solution.projects:
        if project.name == key or os.path.basename(project.absolute_path) == key:
            return project
    raise ProjectNotFound(key, solution.name)


def plan_switch(
    solution: Solution,
    package_name: str,
    target: Project,
    target_graph: ProjectGraph,
) -> SwitchPlan:
    """Collect the projects to add and the projects to switch.

    Raises ``SwitchConflict`` before anything is changed when a project
    declares the package in a way the switch cannot reverse.
    """
    plan = SwitchPlan(
        solution=solution, package_name=package_name, target=target, target_graph=target_graph,
    )
    plan.projects_to_add = closure_with(target, target_graph)
    for project in solution.projects:
        refs = [r for r in project.package_references if r.name == package_name]
        if not refs or refs[0].is_switched:
            continue
        conflict = switch_conflict(project, package_name, [r.condition for r in refs])
        if conflict is not None:
            raise conflict
        plan.projects_to_switch.append((project, refs[0].version))
    if not plan.projects_to_switch:
        raise PackageNotFound(package_name, solution.absolute_path)
    return plan


def run_switch(
    plan: SwitchPlan,
    runner: CommandRunner,
    config: SwitchConfig | None = None,
    progress_callback=None,
) -> list[Change]:
    """Add the external projects to the solution, then switch each project.

    Args:
        plan: Result of ``plan_switch``.
        runner: Runs the dotnet CLI.
        config: Solution folder and tool settings.
        progress_callback: Optional callable(event, message) invoked after
            each step. Used by the CLI to print progress.
    """
    membership = SolutionMembership(plan.solution.absolute_path, runner, config)
    membership.add_external_projects(plan.target, plan.target_graph, progress_callback)

    changes = []
    for project, _ in plan.projects_to_switch:
        change = switch_package(project, plan.package_name, plan.target)
        changes.append(change)
        if progress_callback:
            progress_callback(
                "switched",
                f"{project.name} package {plan.package_name} => {plan.target.name} ({plan.target.absolute_path})",
            )
    return changes


def plan_restore(solution: Solution, package_name: str) -> RestorePlan:
    """Find switched projects and the external projects to remove.

    Computed before any file changes, since restoring removes the
    references the removal set is derived from.
    """
    plan = RestorePlan(solution=solution, package_name=package_name)
    for project in solution.projects:
        ref = project.find_package(package_name)
        if ref is not None and ref.is_switched:
            plan.projects_to_restore.append((project, ref.switch_reference))
    if not plan.projects_to_restore:
        raise SwitchStateNotFound(package_name, solution.absolute_path, "no project is switched")
    plan.projects_to_remove = external_projects(solution, package_name)
    return plan


def run_restore(
    plan: RestorePlan,
    runner: CommandRunner,
    config: SwitchConfig | None = None,
    progress_callback=None,
) -> list[Change]:
    """Restore each switched project, then remove the external projects."""
    changes = []
    for project, _ in plan.projects_to_restore:
        change = restore_package(project, plan.package_name)
        changes.append(change)
        if progress_callback:
            progress_callback("restored", f"{project.name} package {plan.package_name} (removed: => {change.target_path})")

    membership = SolutionMembership(plan.solution.absolute_path, runner, config)
    for project in plan.projects_to_remove:
        membership.remove_project(project)
        if progress_callback:
            progress_callback("removed", f"{project.name} ({project.absolute_path})")
    return changes
