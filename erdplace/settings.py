"""
Layout Settings

Flat configuration record read by every pipeline stage. Defaults are loaded
from layout_defaults.yaml next to this module; callers override individual
values with a shallow merge, either in code (LayoutEngine.update_settings)
or from a YAML file of their own (load_settings).

Keys are accepted in the camelCase form used by the layout contract
(``minTableDistance``) as well as in Python snake_case
(``min_table_distance``).
"""

import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class LayoutSettings:
    """Configuration for one layout call. Read-only while a call is running."""
    # Spacing (px)
    min_table_distance: float = 60.0
    min_connection_distance: float = 40.0
    boundary_padding: float = 50.0
    cluster_separation: float = 90.0
    orphan_padding: float = 100.0
    orphan_column_width: float = 200.0

    # Force simulation
    max_iterations: int = 100
    damping_factor: float = 0.85
    repulsion_force: float = 5000.0
    attraction_force: float = 0.1
    boundary_force: float = 0.1
    centering_force: float = 0.0
    convergence_threshold: float = 0.1
    max_velocity: float = 100.0  # px per iteration, 0 disables the clamp

    # Overlap resolution
    overlap_max_passes: int = 200

    # Statistics
    count_crossings: bool = False

    # Reserved
    grid_size: float = 20.0
    force_strength: float = 0.9

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]],
                  base: Optional['LayoutSettings'] = None) -> 'LayoutSettings':
        """Merge ``data`` shallowly over ``base`` (or the built-in defaults).

        Raises:
            ValueError: On unknown keys or values of the wrong type
        """
        settings = base if base is not None else cls()
        if not data:
            return replace(settings)
        return replace(settings, **_normalize_overrides(data))

    def merged(self, overrides: Optional[Dict[str, Any]]) -> 'LayoutSettings':
        """Return a copy with ``overrides`` applied."""
        return LayoutSettings.from_dict(overrides, base=self)

    def to_dict(self) -> Dict[str, Any]:
        """Export with camelCase keys."""
        return {_snake_to_camel(f.name): getattr(self, f.name) for f in fields(self)}


_INT_FIELDS = {"max_iterations", "overlap_max_passes"}
_BOOL_FIELDS = {"count_crossings"}
_FIELD_NAMES = {f.name for f in fields(LayoutSettings)}


def _camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _coerce_value(field_name: str, value: Any) -> Any:
    """Validate and convert a single setting value."""
    if field_name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ValueError(f"Setting '{field_name}' must be a boolean, got {value!r}")
        return value

    # bool is an int subclass; reject it for numeric settings
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Setting '{field_name}' must be numeric, got {value!r}")

    if field_name in _INT_FIELDS:
        if value != int(value) or value < 0:
            raise ValueError(
                f"Setting '{field_name}' must be a non-negative integer, got {value!r}"
            )
        return int(value)

    return float(value)


def _normalize_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase/snake_case keys onto LayoutSettings field names."""
    if not isinstance(data, dict):
        raise ValueError(f"Settings overrides must be a mapping, got {type(data).__name__}")

    normalized: Dict[str, Any] = {}
    unknown = []
    for key, value in data.items():
        field_name = key if key in _FIELD_NAMES else _camel_to_snake(str(key))
        if field_name not in _FIELD_NAMES:
            unknown.append(key)
            continue
        normalized[field_name] = _coerce_value(field_name, value)

    if unknown:
        raise ValueError(f"Unknown layout settings: {sorted(str(k) for k in unknown)}")
    return normalized


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    return data


DEFAULTS_PATH = Path(__file__).parent / "layout_defaults.yaml"

# Cached defaults, loaded on first use
_default_settings: Optional[LayoutSettings] = None


def get_default_settings() -> LayoutSettings:
    """
    Get the packaged default settings.

    Every key of LayoutSettings must be present in layout_defaults.yaml.

    Returns:
        A fresh copy of the cached defaults
    """
    global _default_settings

    if _default_settings is None:
        data = _read_yaml(DEFAULTS_PATH)
        missing = sorted(
            _snake_to_camel(name) for name in _FIELD_NAMES
            if _snake_to_camel(name) not in data and name not in data
        )
        if missing:
            raise ValueError(f"Default settings file missing required keys: {missing}")
        _default_settings = LayoutSettings.from_dict(data)

    return replace(_default_settings)


def load_settings(path: Optional[str] = None) -> LayoutSettings:
    """
    Load settings, optionally merging a YAML file of overrides.

    Args:
        path: Optional path to a YAML mapping of setting overrides.
              If None, returns the packaged defaults.

    Returns:
        LayoutSettings instance
    """
    settings = get_default_settings()
    if path is None:
        return settings
    return settings.merged(_read_yaml(Path(path)))


def reload_defaults():
    """Drop the cached defaults so the YAML file is read again."""
    global _default_settings
    _default_settings = None
