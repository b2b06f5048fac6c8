import pytest

from spacemichael.core.cooldown import validate_sequence
from spacemichael.core.configio import DEFAULT_COOLDOWN_MS, DEFAULT_PERIOD_MS
from spacemichael.core.pinmap import PinMap
from spacemichael.core.presets import demo_sequences, demo_states, nightrider, one_hot
from spacemichael.drivers.output_driver import ConfigurationError

OUTPUTS = ("out1", "out2", "out3", "out4")


def test_one_hot():
    assert one_hot(OUTPUTS, "out3") == {"out1": 0, "out2": 0, "out3": 1, "out4": 0}


def test_nightrider_sweeps_forward_and_back():
    lit = [next(name for name, value in state.items() if value) for state in nightrider(OUTPUTS)]
    assert lit == ["out1", "out2", "out3", "out4", "out3", "out2"]
    assert len(nightrider(("solo",))) == 1


def test_demo_states_cover_each_output():
    states = demo_states(OUTPUTS)
    assert set(states) == {"allOn", "allOff", *OUTPUTS}


def test_demo_sequences_are_clean_at_default_timing():
    for name, steps in demo_sequences(OUTPUTS).items():
        assert validate_sequence(steps, DEFAULT_PERIOD_MS, DEFAULT_COOLDOWN_MS), name


def test_nightrider_rejected_when_cooldown_exceeds_period():
    result = validate_sequence(nightrider(OUTPUTS), period_ms=100, cooldown_ms=150)
    assert not result
    assert result.violations[0].step == 1


def test_pin_map_default_and_errors():
    pins = PinMap.default()
    assert dict(pins) == {"out1": 17, "out2": 27, "out3": 22, "out4": 23}
    with pytest.raises(ConfigurationError):
        pins["out9"]
    with pytest.raises(ConfigurationError):
        PinMap([("a", 1), ("a", 2)])
    with pytest.raises(ConfigurationError):
        PinMap({"a": -1})
