"""Error types for cargo-teensy."""

from __future__ import annotations


class TeensyError(Exception):
    """Structured error with exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def to_dict(self) -> dict:
        return {"error": self.message, "exit_code": self.exit_code}


class CommandFailed(TeensyError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int):
        super().__init__(f"Failed command: {command}", exit_code=exit_code)
        self.command = command


class ManifestError(TeensyError):
    """Cargo.toml could not be read, parsed or written."""


class ConfigError(TeensyError):
    """teensy.toml could not be read."""


class FetchError(TeensyError):
    """The remote toolchain document could not be fetched."""


class VersionParseError(TeensyError):
    """No version token could be extracted."""


class VersionMismatch(TeensyError):
    """Installed toolchain differs from the required one."""

    def __init__(self, required: str, installed: str, fix_command: str):
        super().__init__(
            f"Rust version mismatch: zinc requires {required}, but {installed} is installed.\n"
            f"Run: {fix_command}\n"
            "Or pass --ignore-version to continue anyway.",
            exit_code=-1,
        )
        self.required = required
        self.installed = installed
        self.fix_command = fix_command
