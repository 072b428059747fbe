"""
Render options and their YAML loader.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class RenderOptions:
    """
    Options that tune rendering without changing template syntax.

    Attributes:
        missing_condition_false: Treat an {{ if }} whose path cannot be
            resolved as false instead of failing the render. Identifier and
            range lookups stay strict.
        none_as_empty: Render an identifier that resolves to None as an
            empty string instead of "None".
    """
    missing_condition_false: bool = False
    none_as_empty: bool = False

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> RenderOptions:
        """
        Builds options from a plain mapping (e.g. a parsed YAML document).

        Raises:
            ConfigError: On unknown keys or non-boolean values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown render option(s): {', '.join(map(str, unknown))}")

        values: Dict[str, Any] = {}
        for name, value in raw.items():
            if not isinstance(value, bool):
                raise ConfigError(f"{name}: expected bool, got {type(value).__name__}")
            values[name] = value
        return cls(**values)


DEFAULT_OPTIONS = RenderOptions()


def _read_yaml(path: Path) -> Any:
    try:
        return _yaml.load(path.read_text(encoding="utf-8"))
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def load_options(path: Path) -> RenderOptions:
    """
    Loads render options from a YAML file.

    An empty file yields the default options.

    Raises:
        ConfigError: If the document is not a mapping or holds invalid options
        OSError: If the file cannot be read
    """
    raw = _read_yaml(path)
    if raw is None:
        return DEFAULT_OPTIONS
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return RenderOptions.from_dict(raw)


def load_context(path: Path) -> Any:
    """
    Loads a context value from a YAML or JSON document.

    JSON is valid YAML, so both go through the same safe loader.

    Raises:
        ConfigError: If the document cannot be parsed
        OSError: If the file cannot be read
    """
    data = _read_yaml(path)
    return {} if data is None else data


__all__ = ["RenderOptions", "DEFAULT_OPTIONS", "load_options", "load_context"]
