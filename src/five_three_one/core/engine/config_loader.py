"""
YAML → typed program defaults loader.

Loads default program settings from program.yaml (bundled with the package)
and optionally merges user overrides from ~/.five-three-one/program.yaml.

Usage:
    from five_three_one.core.engine.config_loader import load_program_defaults
    defaults = load_program_defaults()
    defaults.warmup.sets[0].percentage   # 40.0

If the bundled YAML cannot be parsed, the Python constants from config.py
are used (no crash).  If the user override file exists but has parse
errors or unusable values, a warning is issued and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import math
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DEFAULT_BBB_PERCENTAGE,
    DEFAULT_PROGRESSION,
    DEFAULT_TM_PERCENTAGE,
    DEFAULT_WARMUP,
    LIFTS,
    UNITS,
)
from ..models import AssistanceConfig, WarmupConfig, WarmupSet

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; raise on I/O or parse errors."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgramDefaults:
    """Typed view of program.yaml."""

    training_max_percentage: float
    progression: dict[str, float]
    warmup: WarmupConfig
    assistance: AssistanceConfig
    unit: str


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled program.yaml, or None if not found."""
    ref = importlib.resources.files("five_three_one").joinpath("program.yaml")
    if ref.is_file():
        with importlib.resources.as_file(ref) as p:
            return p
    candidate = Path(__file__).parent.parent.parent / "program.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.five-three-one/program.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".five-three-one" / "program.yaml"
    return p if p.exists() else None


def _load_bundled_config() -> dict[str, Any]:
    bundled = get_bundled_yaml_path()
    if bundled is None:
        return {}
    try:
        return _load_yaml_file(bundled)
    except (OSError, yaml.YAMLError):
        return {}


def _load_user_config() -> dict[str, Any]:
    user = get_user_yaml_path()
    if user is None:
        return {}
    try:
        return _load_yaml_file(user)
    except (OSError, yaml.YAMLError) as e:
        warnings.warn(f"Ignoring {user}: {e}", stacklevel=3)
        return {}


def load_model_config() -> dict[str, Any]:
    """
    Load and merge program configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/five_three_one/program.yaml
    2. User override at ~/.five-three-one/program.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    return _deep_merge(_load_bundled_config(), _load_user_config())


def _finite(value: Any, name: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return number


def _warmup_from_config(section: dict[str, Any]) -> WarmupConfig:
    raw_sets = section.get("sets")
    if raw_sets is None:
        steps = tuple(WarmupSet(percentage=p, reps=r) for p, r in DEFAULT_WARMUP)
    else:
        steps = tuple(
            WarmupSet(percentage=_finite(s["percentage"], "warmup percentage"), reps=int(s["reps"]))
            for s in raw_sets
        )
    return WarmupConfig(enabled=bool(section.get("enabled", True)), sets=steps)


def _build_defaults(config: dict[str, Any]) -> ProgramDefaults:
    tm_section = config.get("training_max", {}) or {}
    progression_cfg = config.get("progression", {}) or {}
    assistance_cfg = config.get("assistance", {}) or {}
    unit = (config.get("display", {}) or {}).get("unit", "kg")
    if unit not in UNITS:
        warnings.warn(f"Unknown unit {unit!r} in program.yaml; using kg", stacklevel=3)
        unit = "kg"

    return ProgramDefaults(
        training_max_percentage=_finite(
            tm_section.get("percentage", DEFAULT_TM_PERCENTAGE), "training_max percentage"
        ),
        progression={
            lift: _finite(progression_cfg.get(lift, DEFAULT_PROGRESSION[lift]), f"progression {lift}")
            for lift in LIFTS
        },
        warmup=_warmup_from_config(config.get("warmup", {}) or {}),
        assistance=AssistanceConfig(
            enabled=bool(assistance_cfg.get("enabled", True)),
            percentage=_finite(
                assistance_cfg.get("percentage", DEFAULT_BBB_PERCENTAGE), "assistance percentage"
            ),
        ),
        unit=unit,
    )


def load_program_defaults(config: dict[str, Any] | None = None) -> ProgramDefaults:
    """
    Build typed defaults from the merged YAML config.

    When no config is passed and the user override holds values that cannot
    be used (wrong types, non-numbers, too many warm-up sets), a warning is
    issued and the defaults are built from the bundled file alone.

    Args:
        config: Pre-loaded config dict (default: bundled merged with user)

    Returns:
        ProgramDefaults with every missing key filled from config.py

    Raises:
        ValueError, TypeError, KeyError, AttributeError: If an explicitly
            passed config holds unusable values
    """
    if config is not None:
        return _build_defaults(config)

    bundled = _load_bundled_config()
    user_cfg = _load_user_config()
    if user_cfg:
        try:
            return _build_defaults(_deep_merge(bundled, user_cfg))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            warnings.warn(f"Ignoring {get_user_yaml_path()}: {e}", stacklevel=2)
    return _build_defaults(bundled)
