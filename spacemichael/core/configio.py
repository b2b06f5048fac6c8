# configio.py — config save/load and the typed run configuration
from __future__ import annotations

import json, tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..drivers.output_driver import ConfigurationError
from .logger import APP_LOGGER
from .pinmap import DEFAULT_PINS, PinMap
from .presets import demo_sequences, demo_states
from .states import State

DEFAULT_PATH = Path.home() / ".spacemichael" / "config.json"
DEFAULT_COOLDOWN_MS = 100
DEFAULT_PERIOD_MS = 250
DRIVERS = ("memory", "gpio", "serial")
DEFAULT_DRIVER = "memory"
DEFAULT_BAUD = 9600


def ensure_dir(p: Path) -> Path:
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    except PermissionError:
        # Fallback to temp dir if home is not writable
        tmp = Path(tempfile.gettempdir()) / ".spacemichael" / p.name
        APP_LOGGER.warning(f"Permission denied for {p}, falling back to {tmp}")
        tmp.parent.mkdir(parents=True, exist_ok=True)
        return tmp


def save_config(cfg: dict, path: Path = DEFAULT_PATH) -> Path | None:
    """Write cfg as JSON; returns the path actually written, or None on failure."""
    target_path = ensure_dir(path)
    try:
        with open(target_path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)
    except OSError as e:
        APP_LOGGER.error(f"Failed to save config to {target_path}: {e}")
        return None
    return target_path


def load_config(path: Path = DEFAULT_PATH) -> dict | None:
    if not path.exists():
        # Check temp fallback
        tmp = Path(tempfile.gettempdir()) / ".spacemichael" / path.name
        if tmp.exists():
            path = tmp
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        APP_LOGGER.warning(f"Failed to load config from {path}: {e}")
        return None


def _number(raw: dict, key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigurationError(f"{key} must be a non-negative number, got {value!r}")
    return value


def _object(raw: dict, key: str) -> dict:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{key} must be a JSON object, got {type(value).__name__}")
    return value


@dataclass
class RunConfig:
    pins: PinMap = field(default_factory=PinMap.default)
    cooldown_ms: float = DEFAULT_COOLDOWN_MS
    period_ms: float = DEFAULT_PERIOD_MS
    driver: str = DEFAULT_DRIVER
    serial_port: Optional[str] = None
    baudrate: int = DEFAULT_BAUD
    active_high: bool = True
    states: dict[str, State] = field(default_factory=dict)
    sequences: dict[str, tuple[State, ...]] = field(default_factory=dict)

    def __post_init__(self):
        if self.driver not in DRIVERS:
            raise ConfigurationError(f"driver must be one of {', '.join(DRIVERS)}, got {self.driver!r}")
        builtin_states = demo_states(self.pins.outputs)
        builtin_sequences = demo_sequences(self.pins.outputs)
        self.states = {**builtin_states, **self.states}
        self.sequences = {**builtin_sequences, **self.sequences}
        for name, state in self.states.items():
            try:
                state.check_outputs(self.pins.outputs)
            except ConfigurationError as e:
                raise ConfigurationError(f"State {name}: {e}") from e
        for name, steps in self.sequences.items():
            for idx, state in enumerate(steps):
                try:
                    state.check_outputs(self.pins.outputs)
                except ConfigurationError as e:
                    raise ConfigurationError(f"Sequence {name} step {idx}: {e}") from e

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RunConfig":
        if not isinstance(raw, dict):
            raise ConfigurationError("Config root must be a JSON object")
        pins = PinMap(raw.get("pins", DEFAULT_PINS))
        states = {}
        for name, values in _object(raw, "states").items():
            if not isinstance(values, dict):
                raise ConfigurationError(f"State {name} must be a JSON object, got {type(values).__name__}")
            states[name] = State(values)
        known = {**demo_states(pins.outputs), **states}

        def resolve(seq_name: str, entry) -> State:
            if isinstance(entry, str):
                if entry not in known:
                    raise ConfigurationError(f"Sequence {seq_name} refers to unknown state {entry!r}")
                return known[entry]
            if isinstance(entry, dict):
                return State(entry)
            raise ConfigurationError(f"Sequence {seq_name} entries must be state names or objects")

        sequences = {}
        for name, steps in _object(raw, "sequences").items():
            if not isinstance(steps, list):
                raise ConfigurationError(f"Sequence {name} must be a JSON list, got {type(steps).__name__}")
            sequences[name] = tuple(resolve(name, entry) for entry in steps)
        baudrate = raw.get("baudrate", DEFAULT_BAUD)
        if isinstance(baudrate, bool) or not isinstance(baudrate, int) or baudrate <= 0:
            raise ConfigurationError(f"baudrate must be a positive int, got {baudrate!r}")
        serial_port = raw.get("serial_port")
        if serial_port is not None and not isinstance(serial_port, str):
            raise ConfigurationError(f"serial_port must be a string, got {serial_port!r}")
        active_high = raw.get("active_high", True)
        if not isinstance(active_high, bool):
            raise ConfigurationError(f"active_high must be true or false, got {active_high!r}")
        return cls(
            pins=pins,
            cooldown_ms=_number(raw, "cooldown_ms", DEFAULT_COOLDOWN_MS),
            period_ms=_number(raw, "period_ms", DEFAULT_PERIOD_MS),
            driver=raw.get("driver", DEFAULT_DRIVER),
            serial_port=serial_port,
            baudrate=baudrate,
            active_high=active_high,
            states=states,
            sequences=sequences,
        )

    def to_dict(self) -> dict[str, Any]:
        builtin_states = demo_states(self.pins.outputs)
        builtin_sequences = demo_sequences(self.pins.outputs)
        return {
            "pins": dict(self.pins),
            "cooldown_ms": self.cooldown_ms,
            "period_ms": self.period_ms,
            "driver": self.driver,
            "serial_port": self.serial_port,
            "baudrate": self.baudrate,
            "active_high": self.active_high,
            "states": {
                name: state.to_dict() for name, state in self.states.items()
                if builtin_states.get(name) != state
            },
            "sequences": {
                name: [state.to_dict() for state in steps] for name, steps in self.sequences.items()
                if builtin_sequences.get(name) != steps
            },
        }


def load_run_config(path: Optional[Path] = None) -> RunConfig:
    """Load a RunConfig; a missing or unreadable file yields the defaults."""
    raw = load_config(path or DEFAULT_PATH)
    if raw is None:
        return RunConfig()
    return RunConfig.from_dict(raw)
