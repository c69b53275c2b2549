"""Thin wrapper around the container runtime CLI.

Every runtime call goes through a single ``runner`` callable that takes an
argument list and returns a :class:`CommandResult`. The default runner shells
out with :func:`subprocess.run`; tests pass a recording double instead.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence


LOGGER = logging.getLogger(__name__)

DEFAULT_DOCKER_BIN = "docker"
COMMAND_NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def detail(self) -> str:
        return self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"


CommandRunner = Callable[[Sequence[str]], CommandResult]


def run_command(args: Sequence[str]) -> CommandResult:
    cmd = [str(arg) for arg in args]
    try:
        result = subprocess.run(cmd, check=False, text=True, capture_output=True)
    except OSError as exc:
        return CommandResult(args=tuple(cmd), returncode=COMMAND_NOT_FOUND_EXIT_CODE, stderr=str(exc))
    return CommandResult(
        args=tuple(cmd),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


class DockerRuntime:
    """Runtime adapter for the Docker CLI."""

    def __init__(self, binary: str = DEFAULT_DOCKER_BIN, runner: CommandRunner | None = None) -> None:
        self.binary = binary
        self._runner = runner or run_command

    def _call(self, *args: str) -> CommandResult:
        cmd = [self.binary, *args]
        LOGGER.debug("Running: %s", " ".join(cmd))
        return self._runner(cmd)

    def run(self, run_args: Sequence[str]) -> CommandResult:
        return self._call(*run_args)

    def ps(self, name: str) -> CommandResult:
        return self._call(
            "ps",
            "--all",
            "--filter",
            f"name=^/{name}$",
            "--format",
            "{{.ID}} {{.Names}} {{.Status}}",
        )

    def inspect_status(self, name: str) -> CommandResult:
        return self._call("inspect", "--format", "{{.State.Status}}", name)

    def logs(self, name: str) -> CommandResult:
        return self._call("logs", name)

    def exec_shell(self, name: str, script: str) -> CommandResult:
        return self._call("exec", name, "sh", "-c", script)

    def stop(self, name: str) -> CommandResult:
        return self._call("stop", name)

    def remove(self, name: str) -> CommandResult:
        return self._call("rm", name)
