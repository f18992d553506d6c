"""Parse solution manifests (.sln/.slnx) through the dotnet CLI."""

from __future__ import annotations

import logging
import os

from pswitch.config import Solution, SwitchConfig
from pswitch.errors import ManifestNotFound
from pswitch.graph.project_graph import build_project_graph
from pswitch.process import CommandRunner

logger = logging.getLogger(__name__)


def list_solution_projects(
    sln_path: str,
    runner: CommandRunner,
    extensions: tuple[str, ...] = SwitchConfig.project_extensions,
) -> list[str]:
    """Return member project paths as listed by ``dotnet sln list``.

    Header lines and anything not ending in a project extension are ignored.
    """
    result = runner.dotnet("sln", sln_path, "list")
    paths = []
    for line in result.stdout.splitlines():
        line = line.strip()
        if line.lower().endswith(extensions):
            paths.append(line)
    return paths


def parse_solution(
    sln_path: str,
    runner: CommandRunner | None = None,
    config: SwitchConfig | None = None,
) -> Solution:
    """Parse a solution and build the graph of its member projects.

    Members missing on disk are logged and left out.
    """
    config = config or SwitchConfig()
    runner = runner or CommandRunner(config.dotnet_path, config.command_timeout)

    absolute_path = os.path.abspath(sln_path)
    if not os.path.isfile(absolute_path):
        raise ManifestNotFound(absolute_path)

    name = os.path.splitext(os.path.basename(absolute_path))[0]
    solution_dir = os.path.dirname(absolute_path)

    entries = []
    for specified in list_solution_projects(absolute_path, runner, config.project_extensions):
        # Normalise path separators
        project_path = os.path.abspath(os.path.join(solution_dir, specified.replace("\\", "/")))
        if not os.path.isfile(project_path):
            logger.warning(f"Project '{specified}' not found at '{project_path}'")
            continue
        entries.append((project_path, specified.replace("\\", "/")))

    graph, projects = build_project_graph(entries)
    logger.debug(f"Parsed solution {name}: {len(projects)} projects, {len(graph)} in graph")

    return Solution(
        name=name,
        absolute_path=absolute_path,
        projects=tuple(projects),
        graph=graph,
    )
