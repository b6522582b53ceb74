"""Build, convert and upload pipeline for cargo-teensy."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click

from cargo_teensy.config import ProjectConfig
from cargo_teensy.manifest import load_manifest, package_name
from cargo_teensy.process import run_checked


@dataclass(frozen=True)
class UploadOptions:
    """teensy_loader_cli reboot flags plus verbosity."""
    hard_reboot: bool = False
    soft_reboot: bool = False
    no_reboot: bool = False
    verbose: bool = False


def _profile_dir(profile: str) -> str:
    """cargo writes the dev profile to debug/, every other profile to its own name."""
    if profile in ("dev", "debug"):
        return "debug"
    return profile


def artifact_dir(config: ProjectConfig) -> Path:
    return Path("target") / config.build.target / _profile_dir(config.build.profile)


def build_command(config: ProjectConfig) -> list[str]:
    cmd = ["cargo", "build", "--verbose"]
    profile = config.build.profile
    if profile == "release":
        cmd.append("--release")
    elif profile not in ("dev", "debug"):
        cmd += ["--profile", profile]
    cmd.append(f"--target={config.build.target}")
    if config.build.features:
        cmd += ["--features", " ".join(config.build.features)]
    return cmd


def hex_command(config: ProjectConfig, binname: str) -> tuple[list[str], str]:
    """Return the objcopy command and the path of the HEX file it writes."""
    elf = str(artifact_dir(config) / binname)
    hexfile = f"{elf}.hex"
    cmd = ["arm-none-eabi-objcopy", "-O", "ihex", "-R", ".eeprom", elf, hexfile]
    return cmd, hexfile


def upload_command(config: ProjectConfig, options: UploadOptions, hexfile: str) -> list[str]:
    cmd = ["teensy_loader_cli", "-w", "--mcu", config.board.mcu]
    if options.no_reboot:
        cmd.append("-n")
    if options.hard_reboot:
        cmd.append("-r")
    if options.soft_reboot:
        cmd.append("-s")
    cmd.append(hexfile)
    return cmd


def run_upload(config: ProjectConfig, options: UploadOptions, project_dir: Path | str = ".") -> str:
    """Compile, convert to HEX and flash. Returns the HEX file path.

    Stops at the first failing stage by raising CommandFailed.
    """
    binname = package_name(load_manifest(project_dir))

    run_checked(build_command(config), verbose=options.verbose)

    cmd, hexfile = hex_command(config, binname)
    run_checked(cmd, verbose=options.verbose)

    click.echo("UPLOAD (waiting for reset)")
    run_checked(upload_command(config, options, hexfile), verbose=options.verbose)

    click.echo("Upload successful")
    return hexfile
