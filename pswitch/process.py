"""Run external commands (the dotnet CLI) and capture their output."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from pswitch.errors import ExternalToolFailure

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    """Blocking command execution; any error output fails the command."""

    def __init__(self, dotnet_path: str = "dotnet", timeout: float = 300.0) -> None:
        self.dotnet_path = dotnet_path
        self.timeout = timeout

    def run(self, args: list[str]) -> CommandResult:
        logger.debug(f"Running: {' '.join(args)}")
        try:
            proc = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExternalToolFailure(args, f"Executable not found: {e.filename}") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolFailure(args, f"Timed out after {self.timeout}s") from e

        stderr = proc.stderr.strip()
        if proc.returncode != 0 or stderr:
            raise ExternalToolFailure(args, stderr or proc.stdout.strip(), proc.returncode)

        return CommandResult(args=list(args), returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    def dotnet(self, *args: str) -> CommandResult:
        return self.run([self.dotnet_path, *args])
