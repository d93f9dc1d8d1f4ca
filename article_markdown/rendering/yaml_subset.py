"""Minimal YAML writer for front matter.

Only what front matter needs: quoted scalars and block lists of quoted
scalars. Values are always written on a single line.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

FrontMatterValue = Optional[Union[str, Sequence[str]]]


def esc_yaml(value: Any) -> str:
    return str(value).replace('"', '\\"').replace("\n", " ").replace("\r", " ")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def yaml_encode(data: Mapping[str, FrontMatterValue], indent: int = 0) -> str:
    """Encode ``data`` in insertion order, skipping empty values."""
    space = "  " * indent
    lines = []
    for key, value in data.items():
        if _is_sequence(value):
            if not value:
                continue
            lines.append(f"{space}{key}:")
            for item in value:
                lines.append(f'{space}  - "{esc_yaml(item)}"')
        else:
            if value is None or value == "":
                continue
            lines.append(f'{space}{key}: "{esc_yaml(value)}"')
    return "".join(line + "\n" for line in lines)
