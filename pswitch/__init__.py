"""pswitch - Switch NuGet package references to source project references and back."""

from pswitch.dotnet.project import parse_condition
from pswitch.dotnet.solution import parse_solution
from pswitch.graph.project_graph import ProjectGraph, parse_project
from pswitch.switch import restore_package, switch_package

__version__ = "0.1.0"
__all__ = [
    "ProjectGraph",
    "parse_condition",
    "parse_project",
    "parse_solution",
    "restore_package",
    "switch_package",
]
