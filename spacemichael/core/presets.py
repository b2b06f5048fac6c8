"""Demo states and sequences, built for whatever outputs are configured."""
from __future__ import annotations

from typing import Sequence

from .states import State, all_off, all_on

ALL_ON = "allOn"
ALL_OFF = "allOff"


def one_hot(outputs: Sequence[str], active: str) -> State:
    return State({name: int(name == active) for name in outputs})


def demo_states(outputs: Sequence[str]) -> dict[str, State]:
    states = {
        ALL_ON: all_on(outputs),
        ALL_OFF: all_off(outputs),
    }
    for name in outputs:
        states[name] = one_hot(outputs, name)
    return states


def nightrider(outputs: Sequence[str]) -> tuple[State, ...]:
    """Sweep one lit output forward, then back, without repeating the ends."""
    forward = [one_hot(outputs, name) for name in outputs]
    back = forward[-2:0:-1]
    return tuple(forward + back)


def demo_sequences(outputs: Sequence[str]) -> dict[str, tuple[State, ...]]:
    return {
        "nightrider": nightrider(outputs),
        "allonoff": (all_on(outputs), all_off(outputs)),
        "one": (),
    }
