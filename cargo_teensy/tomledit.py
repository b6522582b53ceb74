"""Line-based TOML editing shared by teensy.toml and Cargo.toml handling.

Files are edited in place as lists of lines so that comments, ordering and
formatting of everything not touched survive the rewrite.
"""

from __future__ import annotations

import re

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def format_key(key: str) -> str:
    if _BARE_KEY.match(key):
        return key
    return format_value(key)


def format_value(value) -> str:
    """Format a Python value as a TOML value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = ", ".join(f"{format_key(k)} = {format_value(v)}" for k, v in value.items())
        return "{ " + items + " }"
    raise TypeError(f"Cannot format {type(value).__name__} as TOML")


def set_key(lines: list[str], section: str, key: str, value_str: str, overwrite: bool = True) -> bool:
    """Set ``key = value_str`` under ``[section]``.

    Returns True if ``lines`` was changed. With ``overwrite=False`` an
    existing key is left as it is.
    """
    section_header = f"[{section}]"
    section_idx = None
    key_idx = None
    next_section_idx = None
    key_pattern = re.compile(rf"^{re.escape(format_key(key))}\s*=")

    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped == section_header:
            section_idx = i
        elif section_idx is not None and next_section_idx is None:
            if stripped.startswith("[") and stripped.endswith("]"):
                next_section_idx = i
            elif key_pattern.match(stripped):
                key_idx = i

    new_line = f"{format_key(key)} = {value_str}\n"

    if key_idx is not None:
        if not overwrite:
            return False
        lines[key_idx] = new_line
    elif section_idx is not None:
        # Insert after the last non-blank line of the section
        end = next_section_idx if next_section_idx is not None else len(lines)
        insert_at = end
        while insert_at > section_idx + 1 and not lines[insert_at - 1].strip():
            insert_at -= 1
        if insert_at > 0 and not lines[insert_at - 1].endswith("\n"):
            lines[insert_at - 1] += "\n"
        lines.insert(insert_at, new_line)
    else:
        if lines and not lines[-1].endswith("\n"):
            lines[-1] += "\n"
        if lines:
            lines.append("\n")
        lines.append(f"{section_header}\n")
        lines.append(new_line)
    return True
