"""New project scaffolding for cargo-teensy."""

from __future__ import annotations

import os
from pathlib import Path

from cargo_teensy.errors import TeensyError
from cargo_teensy.manifest import update_manifest
from cargo_teensy.process import run_checked
from cargo_teensy.templates import MANIFEST_ADDITIONS, scaffold_files


def cargo_new(name: str, verbose: bool = False) -> None:
    """Create a binary crate via cargo new."""
    run_checked(["cargo", "new", name, "--bin"], verbose=verbose)


def write_templates(project_dir: Path | str = ".") -> list[Path]:
    """Write the target JSON, example main.rs and .cargo/config."""
    project_dir = Path(project_dir)
    written = []
    for rel_path, content in scaffold_files().items():
        path = project_dir / rel_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        except OSError as e:
            raise TeensyError(f"Could not write {path}: {e}") from e
        written.append(path)
    return written


def scaffold_project(name: str, verbose: bool = False) -> Path:
    """Create project ``name`` and make it the working directory.

    Nothing is cleaned up if a step fails part way.
    """
    cargo_new(name, verbose=verbose)
    project_dir = Path(name)
    try:
        os.chdir(project_dir)
    except OSError as e:
        raise TeensyError(f"Could not enter {project_dir}: {e}") from e

    write_templates(".")
    update_manifest(".", MANIFEST_ADDITIONS)
    return Path.cwd()
