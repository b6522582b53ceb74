"""Rust toolchain version check against the version zinc is built with.

The required version is read from a YAML document (zinc's CI config by
default) and the installed one from ``rustup show``. Both are reduced to a
version token: the text itself when it names the stable channel, otherwise
the first ``YYYY-MM-DD`` date found in it.
"""

from __future__ import annotations

import re
import urllib.error
import urllib.request

import click
import yaml

from cargo_teensy.config import ToolchainConfig
from cargo_teensy.errors import FetchError, VersionMismatch, VersionParseError
from cargo_teensy.process import run_checked

ACTIVE_TOOLCHAIN_MARKER = "active toolchain"

_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")


def extract_version(text: str) -> str:
    """Return the version token for ``text``.

    Raises VersionParseError when the text names neither the stable channel
    nor a date.
    """
    if "stable" in text:
        return text
    match = _DATE_RE.search(text)
    if not match:
        raise VersionParseError(f"No toolchain version found in: {text!r}")
    return match.group(1)


def fetch_required_version(url: str, field: str) -> str:
    """Download the YAML document at ``url`` and return ``field`` as text."""
    try:
        with urllib.request.urlopen(url) as response:
            body = response.read()
    except (urllib.error.URLError, OSError) as e:
        raise FetchError(f"Could not fetch {url}: {e}") from e

    # Bytes go straight to the YAML reader; bad encodings surface as YAMLError
    try:
        data = yaml.safe_load(body)
    except yaml.YAMLError as e:
        raise VersionParseError(f"Could not parse {url}: {e}") from e

    if not isinstance(data, dict) or field not in data:
        raise VersionParseError(f"Field '{field}' not found in {url}")

    value = data[field]
    # travis allows a list of toolchains; the first one is the primary
    if isinstance(value, list):
        if not value:
            raise VersionParseError(f"Field '{field}' in {url} is empty")
        value = value[0]
    return str(value)


def _toolchain_name(line: str) -> str:
    """Reduce an active toolchain line to the toolchain name.

    Handles both ``nightly-2016-03-01-x86_64-unknown-linux-gnu (default)``
    and the newer ``name: stable-x86_64-unknown-linux-gnu`` form. Any stable
    toolchain collapses to ``stable``.
    """
    if line.startswith("name:"):
        line = line[len("name:"):]
    name = line.split()[0] if line.split() else line
    if name.startswith("stable"):
        return "stable"
    return name


def parse_active_toolchain(output: str) -> str:
    """Find the active toolchain in ``rustup show`` output."""
    idx = output.find(ACTIVE_TOOLCHAIN_MARKER)
    if idx != -1:
        for line in output[idx + len(ACTIVE_TOOLCHAIN_MARKER):].splitlines():
            stripped = line.strip()
            if not stripped or set(stripped) <= {"-"}:
                continue
            return _toolchain_name(stripped)
    else:
        # Single-toolchain installs of older rustup print no section headers
        for line in output.splitlines():
            if line.strip().endswith("(default)"):
                return _toolchain_name(line.strip())
    raise VersionParseError("Could not find the active toolchain in `rustup show` output")


def installed_version(verbose: bool = False) -> str:
    """Return the active toolchain name reported by rustup."""
    result = run_checked(["rustup", "show"], verbose=verbose, capture=True)
    return parse_active_toolchain(result.stdout or "")


def fix_command(required: str) -> str:
    """Return the rustup command that installs the required toolchain here."""
    if "stable" in required:
        return "rustup override set stable"
    return f"rustup override set nightly-{required}"


def check_version(config: ToolchainConfig, ignore: bool = False, verbose: bool = False) -> str:
    """Compare the installed toolchain with the required one.

    Returns the required version token. On mismatch, warns when ``ignore``
    is set and raises VersionMismatch otherwise.
    """
    required = extract_version(fetch_required_version(config.version_url, config.version_field))
    installed = extract_version(installed_version(verbose=verbose))

    if required == installed:
        return required

    if ignore:
        click.echo(
            f"Warning: Rust version mismatch (required {required}, installed {installed}). "
            "Continuing because --ignore-version was given.",
            err=True,
        )
        return required

    raise VersionMismatch(required, installed, fix_command(required))
