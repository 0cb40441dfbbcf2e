"""Running external commands and collecting their output."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence


class CommandError(Exception):
    """Raised when a command cannot be started or exits unsuccessfully."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


def _run(command: str, args: Sequence[str], directory: str | None, with_output: bool) -> str:
    prefix = f"Error executing command {command} {' '.join(args)}"
    try:
        completed = subprocess.run(
            [command, *args], cwd=directory, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
    except OSError as exc:
        raise CommandError(f"{prefix}: {exc}" + ("\n" if with_output else "")) from exc

    output = completed.stdout.decode("utf-8", errors="replace")
    code = completed.returncode
    if code:
        reason = f"exit status {code}" if code > 0 else f"signal: {-code}"
        raise CommandError(f"{prefix}: {reason}" + (f"\n{output}" if with_output else ""), output)
    return output


def execute_command(command: str, args: Sequence[str]) -> str:
    """Run the command and return its combined stdout and stderr."""
    return _run(command, args, None, with_output=True)


def execute_command_in_directory(command: str, args: Sequence[str], directory: str) -> str:
    """Run the command in the given directory and return its combined output."""
    return _run(command, args, directory, with_output=False)