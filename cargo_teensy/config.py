"""Project configuration for cargo-teensy."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cargo_teensy.errors import ConfigError
from cargo_teensy.tomledit import format_value, set_key

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]


CONFIG_FILE = "teensy.toml"

DEFAULT_MCU = "mk20dx256"
DEFAULT_TARGET = "thumbv7em-none-eabi"
DEFAULT_FEATURES = ["mcu_k20"]
DEFAULT_VERSION_URL = "https://raw.githubusercontent.com/hackndev/zinc/master/.travis.yml"
DEFAULT_VERSION_FIELD = "rust"


@dataclass
class BoardConfig:
    mcu: str = DEFAULT_MCU


@dataclass
class BuildConfig:
    target: str = DEFAULT_TARGET
    features: list[str] = field(default_factory=lambda: list(DEFAULT_FEATURES))
    profile: str = "release"


@dataclass
class ToolchainConfig:
    version_url: str = DEFAULT_VERSION_URL
    version_field: str = DEFAULT_VERSION_FIELD


@dataclass
class ProjectConfig:
    board: BoardConfig = field(default_factory=BoardConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)


def _read_toml(toml_path: Path) -> dict:
    try:
        with open(toml_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Could not parse {toml_path.name}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {toml_path.name}: {e}") from e


# Keys teensy.toml understands, by section
KNOWN_KEYS = {
    "board": ("mcu",),
    "build": ("target", "features", "profile"),
    "toolchain": ("version_url", "version_field"),
}


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] in {CONFIG_FILE} must be a table")
    return section


def _str_value(section: dict, section_name: str, key: str, default: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{section_name}.{key} in {CONFIG_FILE} must be a string, got: {value!r}")
    return value


def load_project_config(project_dir: Path | str) -> ProjectConfig:
    """Parse teensy.toml and return a typed ProjectConfig.

    A missing file yields the defaults for a Teensy 3.1/3.2. Values of the
    wrong type raise ConfigError before anything is run.
    """
    toml_path = Path(project_dir) / CONFIG_FILE
    if not toml_path.exists():
        return ProjectConfig()

    data = _read_toml(toml_path)
    board_data = _section(data, "board")
    build_data = _section(data, "build")
    toolchain_data = _section(data, "toolchain")

    features = build_data.get("features", DEFAULT_FEATURES)
    if isinstance(features, str):
        features = [features]
    if not isinstance(features, list) or not all(isinstance(f, str) for f in features):
        raise ConfigError(f"build.features in {CONFIG_FILE} must be a list of strings, got: {features!r}")

    return ProjectConfig(
        board=BoardConfig(mcu=_str_value(board_data, "board", "mcu", DEFAULT_MCU)),
        build=BuildConfig(
            target=_str_value(build_data, "build", "target", DEFAULT_TARGET),
            features=list(features),
            profile=_str_value(build_data, "build", "profile", "release"),
        ),
        toolchain=ToolchainConfig(
            version_url=_str_value(toolchain_data, "toolchain", "version_url", DEFAULT_VERSION_URL),
            version_field=_str_value(toolchain_data, "toolchain", "version_field", DEFAULT_VERSION_FIELD),
        ),
    )


def get_config_value(project_dir: Path | str, key: str):
    """Dotted key lookup, e.g. 'board.mcu', 'build.target'."""
    toml_path = Path(project_dir) / CONFIG_FILE
    if not toml_path.exists():
        return None

    data = _read_toml(toml_path)
    parts = key.split(".", 1)
    if len(parts) == 2:
        section, k = parts
        values = data.get(section, {})
        return values.get(k) if isinstance(values, dict) else None
    return data.get(key)


def _split_key(key: str) -> tuple[str, str]:
    """Split and check a dotted key against KNOWN_KEYS."""
    parts = key.split(".", 1)
    if len(parts) != 2:
        raise ConfigError(f"Key must be dotted (section.key), got: {key}")
    section, k = parts
    if section not in KNOWN_KEYS:
        raise ConfigError(f"Unknown section '{section}'. Known sections: {', '.join(KNOWN_KEYS)}")
    if k not in KNOWN_KEYS[section]:
        raise ConfigError(f"Unknown key '{key}'. Keys in [{section}]: {', '.join(KNOWN_KEYS[section])}")
    return section, k


def default_value(key: str):
    """Return the built-in value used when ``key`` is not in teensy.toml."""
    section, k = _split_key(key)
    return getattr(getattr(ProjectConfig(), section), k)


def set_config_value(project_dir: Path | str, key: str, value: str) -> None:
    """Write a value to teensy.toml using line-based editing.

    Values are always stored as strings; build.features takes a comma
    separated list.
    """
    toml_path = Path(project_dir) / CONFIG_FILE
    section, k = _split_key(key)

    if (section, k) == ("build", "features"):
        stored = [f.strip() for f in value.split(",") if f.strip()]
    else:
        stored = value

    if toml_path.exists():
        lines = toml_path.read_text().splitlines(keepends=True)
    else:
        lines = []

    set_key(lines, section, k, format_value(stored))
    toml_path.write_text("".join(lines))


def list_config(project_dir: Path | str) -> dict:
    """Return a flat dotted-key dict of all config values."""
    toml_path = Path(project_dir) / CONFIG_FILE
    if not toml_path.exists():
        return {}

    data = _read_toml(toml_path)
    result = {}
    for section, values in data.items():
        if isinstance(values, dict):
            for k, v in values.items():
                result[f"{section}.{k}"] = v
        else:
            result[section] = values
    return result
