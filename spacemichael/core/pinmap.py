"""Logical output name to physical pin number table."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Iterator, Union

from ..drivers.output_driver import ConfigurationError

# BCM numbers of a four-channel relay HAT.
DEFAULT_PINS = {
    "out1": 17,
    "out2": 27,
    "out3": 22,
    "out4": 23,
}


def _pairs(pins):
    if isinstance(pins, (str, bytes)):
        raise ConfigurationError(f"Pin map must be a mapping of name to pin, got {pins!r}")
    try:
        return list(pins)
    except TypeError:
        raise ConfigurationError(f"Pin map must be a mapping of name to pin, got {pins!r}") from None


class PinMap(Mapping):
    """Ordered, read-only ``name -> pin`` mapping, fixed at start-up."""

    def __init__(self, pins: Union[Mapping[str, int], Iterable[tuple[str, int]]]):
        table: dict[str, int] = {}
        seen: dict[int, str] = {}
        for entry in (pins.items() if isinstance(pins, Mapping) else _pairs(pins)):
            if not isinstance(entry, (tuple, list)) or len(entry) != 2:
                raise ConfigurationError(f"Pin map entries must be (name, pin) pairs, got {entry!r}")
            name, pin = entry
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Output names must be non-empty strings, got {name!r}")
            if name in table:
                raise ConfigurationError(f"Duplicate output name {name!r}")
            if isinstance(pin, bool) or not isinstance(pin, int) or pin < 0:
                raise ConfigurationError(f"Pin for {name} must be a non-negative int, got {pin!r}")
            if pin in seen:
                raise ConfigurationError(f"Pin {pin} mapped to both {seen[pin]} and {name}")
            table[name] = pin
            seen[pin] = name
        if not table:
            raise ConfigurationError("Pin map must define at least one output")
        self._pins = table

    def __getitem__(self, name: str) -> int:
        try:
            return self._pins[name]
        except KeyError:
            raise ConfigurationError(f"Unknown output {name!r}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._pins)

    def __len__(self) -> int:
        return len(self._pins)

    def __repr__(self) -> str:
        return f"PinMap({self._pins!r})"

    @property
    def outputs(self) -> tuple[str, ...]:
        return tuple(self._pins)

    @classmethod
    def default(cls) -> "PinMap":
        return cls(DEFAULT_PINS)
