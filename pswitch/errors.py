"""Exception hierarchy raised by pswitch."""

from __future__ import annotations


class PswitchError(Exception):
    """Base class for errors reported to the user."""


class NotFoundError(PswitchError):
    pass


class ManifestNotFound(NotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Solution file not found '{path}'")
        self.path = path


class ProjectNotFound(NotFoundError):
    def __init__(self, key: str, solution: str | None = None) -> None:
        if solution:
            super().__init__(f"Project '{key}' not found in solution '{solution}'")
        else:
            super().__init__(f"Project file not found '{key}'")
        self.key = key
        self.solution = solution


class PackageNotFound(NotFoundError):
    def __init__(self, package_name: str, project_path: str) -> None:
        super().__init__(f"Package reference '{package_name}' not found in '{project_path}'")
        self.package_name = package_name
        self.project_path = project_path


class SwitchStateNotFound(NotFoundError):
    def __init__(self, package_name: str, project_path: str, detail: str) -> None:
        super().__init__(
            f"No switched reference for package '{package_name}' in '{project_path}': {detail}"
        )
        self.package_name = package_name
        self.project_path = project_path


class ProjectParseError(PswitchError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to parse '{path}': {reason}")
        self.path = path
        self.reason = reason


class ExternalToolFailure(PswitchError):
    def __init__(self, command: list[str], stderr: str, returncode: int | None = None) -> None:
        cmdline = " ".join(command)
        super().__init__(f"Error executing command: {cmdline}\nError: {stderr}")
        self.command = list(command)
        self.stderr = stderr
        self.returncode = returncode


class SwitchConflict(PswitchError):
    """The package reference is in a state the switch cannot reverse later."""
