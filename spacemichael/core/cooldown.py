"""Static cooldown check for planned sequences.

Every output must hold its last value for ``cooldown_ms`` before it may change
to a different value. Time advances by exactly ``period_ms`` per step; write
latency is not accounted for. Re-asserting the held value is never a
violation, but it restarts the output's cooldown window.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Violation:
    output: str
    step: int
    remaining_ms: Number

    def describe(self) -> str:
        return (f"Output {self.output} at step {self.step} still needs "
                f"{self.remaining_ms:g} millisecond(s) of cooldown.")


@dataclass(frozen=True)
class ValidationResult:
    violations: tuple[Violation, ...] = ()

    @property
    def clean(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.clean

    def messages(self) -> list[str]:
        return [v.describe() for v in self.violations]


@dataclass
class _Hold:
    remaining: Number
    value: int


def validate_sequence(sequence: Sequence[Mapping[str, int]], period_ms: Number, cooldown_ms: Number) -> ValidationResult:
    if period_ms < 0:
        raise ValueError("period_ms must be >= 0")
    if cooldown_ms < 0:
        raise ValueError("cooldown_ms must be >= 0")

    holds: dict[str, _Hold] = {}
    violations: list[Violation] = []
    for step, state in enumerate(sequence):
        for name in list(holds):
            holds[name].remaining -= period_ms
            if holds[name].remaining <= 0:
                del holds[name]

        for name, value in state.items():
            hold = holds.get(name)
            if hold is None or hold.value == value:
                holds[name] = _Hold(cooldown_ms, value)
            else:
                violations.append(Violation(name, step, hold.remaining))
                # Report each toggle once; the window itself is not restarted.
                hold.value = value

    return ValidationResult(tuple(violations))
