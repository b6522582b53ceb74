"""External command execution for cargo-teensy."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass

import click

from cargo_teensy.errors import CommandFailed


@dataclass
class CommandResult:
    command: str
    returncode: int
    stdout: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(args: list[str]) -> str:
    """Return a shell-style printable command line."""
    return shlex.join(args)


def execute(args: list[str], verbose: bool = False, capture: bool = False) -> CommandResult:
    """Run a command to completion and return its status.

    The child inherits stdin/stdout/stderr unless ``capture`` is set, in
    which case stdout is collected as text. A command that cannot be
    started is reported like any other failure: exit code 127 when it is
    not on PATH, 126 for any other launch error (e.g. not executable).
    """
    cmd_str = format_command(args)
    if verbose:
        click.echo(f">> {cmd_str}")
    try:
        proc = subprocess.run(args, capture_output=capture, text=capture)
    except FileNotFoundError:
        click.echo(f"Error: {args[0]} not found on PATH", err=True)
        return CommandResult(command=cmd_str, returncode=127)
    except OSError as e:
        click.echo(f"Error: could not run {args[0]}: {e}", err=True)
        return CommandResult(command=cmd_str, returncode=126)
    return CommandResult(
        command=cmd_str,
        returncode=proc.returncode,
        stdout=proc.stdout if capture else None,
    )


def exit_on_fail(result: CommandResult) -> None:
    """Raise CommandFailed unless the command succeeded.

    A child killed by a signal has a negative return code and no exit
    status of its own; that is reported as 1.
    """
    if result.ok:
        return
    code = result.returncode if result.returncode > 0 else 1
    raise CommandFailed(result.command, code)


def run_checked(args: list[str], verbose: bool = False, capture: bool = False) -> CommandResult:
    """Execute a command and raise CommandFailed on non-zero exit."""
    result = execute(args, verbose=verbose, capture=capture)
    exit_on_fail(result)
    return result
