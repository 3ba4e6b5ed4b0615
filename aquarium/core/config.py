"""
Configuration system for the Aquarium Simulator.

Provides a hierarchical dataclass-based config with JSON serialization,
validation, and sensible defaults for all simulation parameters.
"""

from __future__ import annotations

import json
import warnings
from copy import deepcopy
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Sub-config dataclasses (grouped by domain)
# ---------------------------------------------------------------------------

@dataclass
class CanvasConfig:
    """Canvas size and random seed."""
    width: int = 144
    height: int = 168
    seed: int = 42

    def validate(self) -> list[str]:
        errors = []
        if self.width < 64:
            errors.append(f"canvas.width must be >= 64, got {self.width}")
        if self.height < 96:
            errors.append(f"canvas.height must be >= 96, got {self.height}")
        if self.width > 4096:
            errors.append(f"canvas.width must be <= 4096, got {self.width}")
        if self.height > 4096:
            errors.append(f"canvas.height must be <= 4096, got {self.height}")
        return errors


@dataclass
class PopulationConfig:
    """Fixed pool capacity per species."""
    fish: int = 8
    large_fish_pct: int = 25        # chance a (re)initialized fish is large
    seaweed: int = 5
    bubbles: int = 12
    plankton: int = 10
    octopus: int = 1
    turtle: int = 1
    jellyfish: int = 2
    seahorse: int = 1
    crab: int = 1
    clam: int = 1

    def validate(self) -> list[str]:
        errors = []
        for name in ("fish", "seaweed", "bubbles", "plankton", "octopus",
                     "turtle", "jellyfish", "seahorse", "crab", "clam"):
            count = getattr(self, name)
            if count < 0:
                errors.append(f"population.{name} must be >= 0, got {count}")
            if count > 256:
                errors.append(f"population.{name} must be <= 256, got {count}")
        if not (0 <= self.large_fish_pct <= 100):
            errors.append(f"population.large_fish_pct must be in [0, 100], got {self.large_fish_pct}")
        return errors


@dataclass
class SpawnConfig:
    """Per-tick spawn probabilities (percent) and burst size."""
    fish_respawn_pct: int = 2
    bubble_spawn_pct: int = 3
    plankton_spawn_pct: int = 1
    burst_max: int = 3              # bubbles per predation event

    def validate(self) -> list[str]:
        errors = []
        for name in ("fish_respawn_pct", "bubble_spawn_pct", "plankton_spawn_pct"):
            value = getattr(self, name)
            if not (0 <= value <= 100):
                errors.append(f"spawn.{name} must be in [0, 100], got {value}")
        if self.burst_max < 0:
            errors.append(f"spawn.burst_max must be >= 0, got {self.burst_max}")
        return errors


@dataclass
class CollisionConfig:
    """Spatial grid resolution and predator/prey geometry."""
    grid_cols: int = 3
    grid_rows: int = 3
    large_fish_radius: int = 7
    small_fish_radius: int = 4
    shark_half_width: int = 20
    shark_half_height: int = 12
    shark_max_eats_per_tick: int = 2

    def validate(self) -> list[str]:
        errors = []
        if self.grid_cols < 1:
            errors.append(f"collision.grid_cols must be >= 1, got {self.grid_cols}")
        if self.grid_rows < 1:
            errors.append(f"collision.grid_rows must be >= 1, got {self.grid_rows}")
        if self.large_fish_radius < 1:
            errors.append(f"collision.large_fish_radius must be >= 1, got {self.large_fish_radius}")
        if self.small_fish_radius < 1:
            errors.append(f"collision.small_fish_radius must be >= 1, got {self.small_fish_radius}")
        if self.shark_half_width < 1 or self.shark_half_height < 1:
            errors.append("collision.shark_half_width and shark_half_height must be >= 1")
        if self.shark_max_eats_per_tick < 0:
            errors.append(f"collision.shark_max_eats_per_tick must be >= 0, got {self.shark_max_eats_per_tick}")
        return errors


@dataclass
class SharkConfig:
    """Shark appearance timing (in ticks) and motion."""
    initial_delay_min: int = 150
    initial_delay_max: int = 450
    rearm_delay_min: int = 600      # used after each departure; longer than the first wait
    rearm_delay_max: int = 1200
    speed: int = 4
    margin: int = 30                # off-screen distance for entry and departure

    def validate(self) -> list[str]:
        errors = []
        if not (1 <= self.initial_delay_min <= self.initial_delay_max):
            errors.append("shark: need 1 <= initial_delay_min <= initial_delay_max")
        if not (1 <= self.rearm_delay_min <= self.rearm_delay_max):
            errors.append("shark: need 1 <= rearm_delay_min <= rearm_delay_max")
        if self.speed < 1:
            errors.append(f"shark.speed must be >= 1, got {self.speed}")
        if self.margin < 0:
            errors.append(f"shark.margin must be >= 0, got {self.margin}")
        return errors


@dataclass
class SchedulerConfig:
    """Tick cadence presets and the low-power switch."""
    default_interval_ms: int = 100
    low_power_interval_ms: int = 300
    low_battery_threshold: int = 20     # percent; below this and not charging -> low power

    def validate(self) -> list[str]:
        errors = []
        if self.default_interval_ms < 1:
            errors.append(f"scheduler.default_interval_ms must be >= 1, got {self.default_interval_ms}")
        if self.low_power_interval_ms < self.default_interval_ms:
            errors.append("scheduler.low_power_interval_ms must be >= default_interval_ms")
        if not (0 <= self.low_battery_threshold <= 100):
            errors.append(f"scheduler.low_battery_threshold must be in [0, 100], got {self.low_battery_threshold}")
        return errors


@dataclass
class VizConfig:
    """Run mode and output settings."""
    mode: str = "headless"              # "headless" or "realtime"
    output_dir: str = "runs"
    metrics_every_n_ticks: int = 10

    def validate(self) -> list[str]:
        errors = []
        if self.mode not in ("headless", "realtime"):
            errors.append(f"viz.mode must be 'headless' or 'realtime', got '{self.mode}'")
        if self.metrics_every_n_ticks < 1:
            errors.append(f"viz.metrics_every_n_ticks must be >= 1, got {self.metrics_every_n_ticks}")
        return errors


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class SimConfig:
    """
    Top-level simulation configuration.

    All parameters are adjustable. Nested dataclasses group related settings.
    Load from JSON with `load_config()`, validate with `validate()`.
    """
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    shark: SharkConfig = field(default_factory=SharkConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    viz: VizConfig = field(default_factory=VizConfig)

    def validate(self) -> list[str]:
        """Validate all config sections. Returns list of error messages (empty = valid)."""
        errors = []
        for f in fields(self):
            sub = getattr(self, f.name)
            if hasattr(sub, "validate"):
                errors.extend(sub.validate())
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimConfig:
        """Create SimConfig from nested dict, merging with defaults."""
        config = cls()
        _merge_into_dataclass(config, data)
        return config

    def copy(self) -> SimConfig:
        """Deep copy of this config."""
        return deepcopy(self)


# ---------------------------------------------------------------------------
# JSON I/O helpers
# ---------------------------------------------------------------------------

def _merge_into_dataclass(target: Any, source: dict[str, Any]) -> None:
    """
    Recursively merge a dict into a dataclass instance.
    Unknown keys emit a warning but don't raise.
    """
    if not isinstance(source, dict):
        return

    known_fields = {f.name for f in fields(target)}
    for key, value in source.items():
        if key not in known_fields:
            warnings.warn(
                f"Unknown config key '{key}' in section {type(target).__name__}, ignored.",
                UserWarning,
                stacklevel=3,
            )
            continue

        current = getattr(target, key)

        # If the current field is a dataclass, recurse
        if hasattr(current, "__dataclass_fields__") and isinstance(value, dict):
            _merge_into_dataclass(current, value)
        else:
            setattr(target, key, value)


def load_config(path: str | Path) -> SimConfig:
    """
    Load config from a JSON file. Missing fields use defaults.

    Args:
        path: Path to JSON config file.

    Returns:
        Validated SimConfig instance.

    Raises:
        FileNotFoundError: If path doesn't exist.
        json.JSONDecodeError: If JSON is malformed.
        ValueError: If config values are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = SimConfig.from_dict(data)

    errors = config.validate()
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)

    return config


def save_config(config: SimConfig, path: str | Path) -> None:
    """Save config to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def get_default_config() -> SimConfig:
    """Return a fresh default config (all defaults, validated)."""
    config = SimConfig()
    errors = config.validate()
    assert not errors, f"Default config is invalid: {errors}"
    return config


def apply_param_override(config: SimConfig, dotted_key: str, value: Any) -> None:
    """
    Apply a single parameter override using dot notation.

    Example:
        apply_param_override(config, "population.fish", 12)
        apply_param_override(config, "shark.speed", 5)

    Args:
        config: SimConfig to modify in-place.
        dotted_key: Dot-separated path like "canvas.width" or "scheduler.low_battery_threshold"
        value: New value to set.

    Raises:
        KeyError: If the path doesn't exist.
    """
    parts = dotted_key.split(".")
    obj = config
    for part in parts[:-1]:
        if not hasattr(obj, part):
            raise KeyError(f"Config path '{dotted_key}' invalid: '{part}' not found in {type(obj).__name__}")
        obj = getattr(obj, part)

    final_key = parts[-1]
    if not hasattr(obj, final_key):
        raise KeyError(f"Config path '{dotted_key}' invalid: '{final_key}' not found in {type(obj).__name__}")

    setattr(obj, final_key, value)
