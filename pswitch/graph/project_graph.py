"""Project reference graph backed by networkx.DiGraph.

Nodes are keyed by absolute project path and carry a frozen ``Project``;
edges carry the ``ProjectReference`` that declared them.  The graph is
built in one pass by ``build_project_graph`` and never mutated afterwards.
"""

from __future__ import annotations

import logging
import os

import networkx as nx

from pswitch.config import Project, ProjectReference
from pswitch.dotnet.project import ProjectInfo, parse_project_file
from pswitch.errors import ProjectNotFound, ProjectParseError

logger = logging.getLogger(__name__)


class ProjectGraph:
    """Wrapper around networkx.DiGraph with typed project accessors."""

    def __init__(self) -> None:
        self.graph = nx.DiGraph()

    # --- Construction ---

    def add_project(self, project: Project) -> None:
        self.graph.add_node(project.absolute_path, project=project)

    def add_reference(self, project: Project, ref: ProjectReference) -> None:
        self.graph.add_edge(project.absolute_path, ref.absolute_path, reference=ref)

    # --- Queries ---

    def __contains__(self, absolute_path: str) -> bool:
        return absolute_path in self.graph

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def get(self, absolute_path: str) -> Project | None:
        if absolute_path not in self.graph:
            return None
        return self.graph.nodes[absolute_path]["project"]

    def projects(self) -> list[Project]:
        return [data["project"] for _, data in self.graph.nodes(data=True)]

    def references(self, project: Project) -> list[Project]:
        """Directly referenced projects, in declaration order, each once."""
        paths = dict.fromkeys(r.absolute_path for r in project.project_references)
        return [self.graph.nodes[path]["project"] for path in paths]

    def transitive_references(self, project: Project) -> list[Project]:
        """All projects reachable from ``project``, depth-first, each once.

        The start project is excluded even when a cycle leads back to it.
        """
        seen = {project.absolute_path}
        result: list[Project] = []
        # Reversed so the first declared reference is visited first
        stack = [r.absolute_path for r in reversed(project.project_references)]
        while stack:
            path = stack.pop()
            if path in seen:
                continue
            seen.add(path)
            node = self.graph.nodes[path]["project"]
            result.append(node)
            stack.extend(r.absolute_path for r in reversed(node.project_references))
        return result

    def switched_to(self, package_name: str) -> list[Project]:
        """Projects referenced in place of ``package_name``."""
        return [p for p in self.projects() if p.is_switched and p.switch_reference == package_name]


def _display_name(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def build_project_graph(entries: list[tuple[str, str]]) -> tuple[ProjectGraph, list[Project]]:
    """Parse entry projects and everything they reference.

    ``entries`` are (absolute_path, specified_path) pairs that must exist.
    Entry projects that fail to parse raise ``ProjectParseError``; referenced
    projects that are missing or malformed are logged and left out along
    with the edges leading to them.

    Returns the graph and the entry projects in the given order.
    """
    infos: dict[str, ProjectInfo] = {}
    specified: dict[str, str] = {}
    for path, specified_path in entries:
        specified.setdefault(path, specified_path)

    # Depth-first walk with an explicit stack
    stack = [(path, specified_path, True) for path, specified_path in reversed(entries)]
    while stack:
        path, specified_path, is_entry = stack.pop()
        if path in infos:
            continue
        try:
            info = parse_project_file(path)
        except ProjectParseError as e:
            if is_entry:
                raise
            logger.warning(f"Skipping referenced project: {e}")
            continue

        infos[path] = info
        specified.setdefault(path, specified_path)

        for ref in reversed(info.project_references):
            if ref.absolute_path in infos:
                continue
            if not os.path.isfile(ref.absolute_path):
                logger.warning(
                    f"Project '{path}' reference to '{ref.specified_path}' "
                    f"not found at '{ref.absolute_path}'"
                )
                continue
            stack.append((ref.absolute_path, ref.specified_path, False))

    # Incoming switched edges mark the referenced node as switched
    switched_by: dict[str, str] = {}
    for info in infos.values():
        for ref in info.project_references:
            if ref.is_switched and ref.absolute_path in infos:
                switched_by.setdefault(ref.absolute_path, ref.switch_reference)

    kg = ProjectGraph()
    for path, info in infos.items():
        refs = tuple(r for r in info.project_references if r.absolute_path in infos)
        kg.add_project(Project(
            name=_display_name(path),
            specified_path=specified[path],
            absolute_path=path,
            project_references=refs,
            package_references=tuple(info.package_references),
            is_switched=path in switched_by,
            switch_reference=switched_by.get(path, ""),
        ))
    for path in infos:
        project = kg.get(path)
        for ref in project.project_references:
            kg.add_reference(project, ref)

    members = []
    seen_entries = set()
    for path, _ in entries:
        if path in seen_entries:
            continue
        seen_entries.add(path)
        members.append(kg.get(path))
    return kg, members


def parse_project(project_path: str, specified_path: str | None = None) -> tuple[Project, ProjectGraph]:
    """Parse one project and its references into a fresh graph."""
    absolute = os.path.abspath(project_path)
    if not os.path.isfile(absolute):
        raise ProjectNotFound(absolute)
    kg, members = build_project_graph([(absolute, specified_path or project_path)])
    return members[0], kg
