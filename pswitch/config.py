"""Core data types and configuration for pswitch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pswitch.graph.project_graph import ProjectGraph


@dataclass(frozen=True)
class PackageReference:
    name: str
    version: str = ""
    is_switched: bool = False
    switch_reference: str = ""  # relative path of the target project
    condition: str = ""


@dataclass(frozen=True)
class ProjectReference:
    """An edge to another project; the node lives in the graph under absolute_path."""
    specified_path: str
    absolute_path: str
    is_switched: bool = False
    switch_reference: str = ""  # package name for a synthetic reference


@dataclass(frozen=True)
class Project:
    name: str
    specified_path: str
    absolute_path: str
    project_references: tuple[ProjectReference, ...] = ()
    package_references: tuple[PackageReference, ...] = ()
    is_switched: bool = False
    switch_reference: str = ""

    def find_package(self, name: str) -> PackageReference | None:
        """Return the first package reference declared with this name."""
        return next((p for p in self.package_references if p.name == name), None)


@dataclass(frozen=True)
class Solution:
    name: str
    absolute_path: str
    projects: tuple[Project, ...]
    graph: ProjectGraph = field(repr=False, compare=False)


@dataclass
class SwitchConfig:
    solution_folder: str = "ExternalProjects"
    dotnet_path: str = "dotnet"
    project_extensions: tuple[str, ...] = (".csproj", ".vbproj", ".fsproj")
    command_timeout: float = 300.0
