"""State and sequence types.

A State is an immutable assignment of binary values to a subset of named
outputs. A sequence is an ordered tuple of States.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Iterator, Sequence, Union

from ..drivers.output_driver import ConfigurationError, as_bit


class State(Mapping):
    """Immutable ``output name -> 0|1`` mapping."""

    __slots__ = ("_values",)

    def __init__(self, values: Union[Mapping[str, int], Iterable[tuple[str, int]], None] = None, **kwargs: int):
        if values is None or isinstance(values, Mapping):
            items = dict(values or {})
        else:
            try:
                items = dict(values)
            except (TypeError, ValueError):
                raise ConfigurationError(f"A state must map output names to 0/1, got {values!r}") from None
        items.update(kwargs)
        normalised = {}
        for name, value in items.items():
            if not isinstance(name, str) or not name:
                raise ConfigurationError(f"Output names must be non-empty strings, got {name!r}")
            normalised[name] = as_bit(value)
        self._values = normalised

    def __getitem__(self, name: str) -> int:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"State({self._values!r})"

    def check_outputs(self, outputs: Iterable[str]) -> None:
        known = set(outputs)
        unknown = [name for name in self._values if name not in known]
        if unknown:
            raise ConfigurationError(f"Unknown output(s) {', '.join(sorted(unknown))}")

    def to_dict(self) -> dict[str, int]:
        return dict(self._values)


def as_state(value: Union[State, Mapping[str, int]]) -> State:
    return value if isinstance(value, State) else State(value)


def as_sequence(states: Iterable[Union[State, Mapping[str, int]]]) -> tuple[State, ...]:
    return tuple(as_state(s) for s in states)


def all_off(outputs: Iterable[str]) -> State:
    return State({name: 0 for name in outputs})


def all_on(outputs: Iterable[str]) -> State:
    return State({name: 1 for name in outputs})


def check_sequence(sequence: Sequence[State], outputs: Iterable[str]) -> None:
    known = tuple(outputs)
    for idx, state in enumerate(sequence):
        try:
            state.check_outputs(known)
        except ConfigurationError as e:
            raise ConfigurationError(f"Step {idx}: {e}") from e
