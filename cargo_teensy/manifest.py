"""Cargo.toml handling for cargo-teensy."""

from __future__ import annotations

from pathlib import Path

from cargo_teensy.errors import ManifestError
from cargo_teensy.tomledit import format_value, set_key

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]


MANIFEST_FILE = "Cargo.toml"


def _manifest_path(project_dir: Path | str) -> Path:
    return Path(project_dir) / MANIFEST_FILE


def load_manifest(project_dir: Path | str = ".") -> dict:
    """Read and parse Cargo.toml."""
    path = _manifest_path(project_dir)
    try:
        text = path.read_text()
    except OSError as e:
        raise ManifestError(f"Could not read {path}: {e}") from e
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Could not parse {path}: {e}") from e


def package_name(manifest: dict) -> str:
    """Return [package] name, which is also the binary name."""
    name = manifest.get("package", {}).get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError("Cargo.toml has no [package] name")
    return name


def merge_additions(manifest_text: str, additions: str) -> str:
    """Merge the tables in ``additions`` into ``manifest_text``.

    Tables missing from the manifest are appended; keys missing from an
    existing table are added to it. Keys already present are kept as they
    are.
    """
    try:
        existing = tomllib.loads(manifest_text)
        extra = tomllib.loads(additions)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Could not parse Cargo.toml: {e}") from e

    lines = manifest_text.splitlines(keepends=True)
    for section, values in extra.items():
        if not isinstance(values, dict):
            raise ManifestError(f"Manifest additions must be tables, got top-level key: {section}")
        present = existing.get(section, {})
        for key, value in values.items():
            if isinstance(present, dict) and key in present:
                continue
            set_key(lines, section, key, format_value(value), overwrite=False)

    merged = "".join(lines)
    try:
        tomllib.loads(merged)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Merged Cargo.toml is not valid TOML: {e}") from e
    return merged


def update_manifest(project_dir: Path | str, additions: str) -> dict:
    """Merge ``additions`` into Cargo.toml on disk and return the result."""
    path = _manifest_path(project_dir)
    try:
        text = path.read_text()
    except OSError as e:
        raise ManifestError(f"Could not read {path}: {e}") from e

    merged = merge_additions(text, additions)
    try:
        path.write_text(merged)
    except OSError as e:
        raise ManifestError(f"Could not write {path}: {e}") from e
    return tomllib.loads(merged)
