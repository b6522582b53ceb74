"""Shared fixtures."""

from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest


def _fake_cargo_new(args, **kwargs):
    """Stand-in for `cargo new <name> --bin` run in the current directory."""
    name = args[2]
    src = Path(name) / "src"
    src.mkdir(parents=True)
    (Path(name) / "Cargo.toml").write_text(f'[package]\nname = "{name}"\nversion = "0.1.0"\n\n[dependencies]\n')
    (src / "main.rs").write_text('fn main() {\n    println!("Hello, world!");\n}\n')
    return MagicMock(returncode=0)


@pytest.fixture
def cargo_new_run():
    """Patch subprocess.run so that `cargo new` creates a crate on disk."""
    with patch("cargo_teensy.process.subprocess.run", side_effect=_fake_cargo_new) as mock_run:
        yield mock_run
