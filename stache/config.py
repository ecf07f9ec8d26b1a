from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

DEFAULT_CFG_FILE = "stache.yaml"

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class RenderOptions:
    escape: bool = True                     # HTML-escape {{name}} substitutions
    max_partial_depth: int = 32             # nesting limit for {{> partial}}
    partials_dir: Optional[Path] = None
    partials_suffix: str = ".mustache"


_FIELD_TYPES = {
    "escape": bool,
    "max_partial_depth": int,
    "partials_dir": str,
    "partials_suffix": str,
}


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _read_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return _yaml.load(f)
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"{path}: cannot read file: {e}") from e


def _check_types(raw: Dict[str, Any], path: Path) -> None:
    known = {f.name for f in fields(RenderOptions)}
    for key, val in raw.items():
        if key not in known:
            raise ConfigError(f"{path}: unknown option '{key}'")
        expected = _FIELD_TYPES[key]
        # bool is a subclass of int
        if expected is int and isinstance(val, bool) or not isinstance(val, expected):
            raise ConfigError(
                f"{path}: option '{key}' expects {expected.__name__}, got {type(val).__name__}"
            )
    if raw.get("max_partial_depth", 1) < 1:
        raise ConfigError(f"{path}: option 'max_partial_depth' must be at least 1")


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> RenderOptions:
    """
    Load render options from a YAML file.

    • If the file does not exist, return the defaults.
    • Unknown keys and wrong value types are errors.
    • A relative partials_dir is resolved against the config file's directory.
    """
    if not path.exists():
        return RenderOptions()

    raw = _read_yaml(path) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    _check_types(raw, path)

    opts = RenderOptions(**{k: v for k, v in raw.items() if k != "partials_dir"})
    if "partials_dir" in raw:
        partials_dir = Path(raw["partials_dir"])
        if not partials_dir.is_absolute():
            partials_dir = path.parent / partials_dir
        opts = replace(opts, partials_dir=partials_dir)
    return opts


def load_data(path: Path) -> Any:
    """Load template data from a YAML or JSON file. An empty file is an empty mapping."""
    if not path.exists():
        raise ConfigError(f"Data file not found: {path}")
    data = _read_yaml(path)
    return {} if data is None else data


__all__ = ["RenderOptions", "load_config", "load_data", "DEFAULT_CFG_FILE"]
