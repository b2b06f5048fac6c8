import copy

import pytest

from spacemichael.core.cooldown import ValidationResult, Violation, validate_sequence


def test_toggle_inside_cooldown_is_reported():
    result = validate_sequence([{"A": 1}, {"A": 0}], period_ms=100, cooldown_ms=500)
    assert not result
    assert result.violations == (Violation("A", 1, 400),)
    assert result.messages() == ["Output A at step 1 still needs 400 millisecond(s) of cooldown."]


def test_same_value_reassertion_is_clean():
    assert validate_sequence([{"A": 1}, {"A": 1}], period_ms=10, cooldown_ms=10_000)
    assert validate_sequence([{"A": 0}, {"A": 0}, {"A": 0}], period_ms=0, cooldown_ms=1)


def test_reassertion_restarts_the_window():
    # Holding A at 1 keeps pushing the earliest allowed toggle back.
    result = validate_sequence([{"A": 1}, {"A": 1}, {"A": 1}, {"A": 0}], period_ms=100, cooldown_ms=300)
    assert result.violations == (Violation("A", 3, 200),)


def test_toggle_after_cooldown_elapsed_is_clean():
    seq = [{"A": 1}, {}, {}, {"A": 0}]
    assert validate_sequence(seq, period_ms=100, cooldown_ms=300)
    # One step earlier is still inside the window.
    result = validate_sequence([{"A": 1}, {}, {"A": 0}], period_ms=100, cooldown_ms=300)
    assert result.violations == (Violation("A", 2, 100),)


def test_violation_reported_once_per_transition():
    result = validate_sequence([{"A": 1}, {"A": 0}, {"A": 0}], period_ms=100, cooldown_ms=500)
    assert [v.step for v in result.violations] == [1]

    result = validate_sequence([{"A": 1}, {"A": 0}, {"A": 1}], period_ms=100, cooldown_ms=500)
    assert result.violations == (Violation("A", 1, 400), Violation("A", 2, 300))


def test_violations_are_step_major():
    seq = [{"A": 1, "B": 1}, {"B": 0, "A": 0}, {"C": 1}]
    result = validate_sequence(seq, period_ms=50, cooldown_ms=200)
    assert [(v.output, v.step) for v in result.violations] == [("B", 1), ("A", 1)]


def test_outputs_are_independent():
    seq = [{"A": 1}, {"B": 1}, {"B": 1}, {"A": 0}]
    assert validate_sequence(seq, period_ms=100, cooldown_ms=300)


def test_empty_sequence_is_clean():
    result = validate_sequence([], period_ms=100, cooldown_ms=500)
    assert result.clean
    assert result == ValidationResult()


def test_validation_does_not_mutate_inputs():
    seq = [{"A": 1, "B": 0}, {"A": 0}, {"B": 1}]
    before = copy.deepcopy(seq)
    first = validate_sequence(seq, 100, 250)
    second = validate_sequence(seq, 100, 250)
    assert seq == before
    assert first == second


def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        validate_sequence([{"A": 1}], period_ms=-1, cooldown_ms=10)
    with pytest.raises(ValueError):
        validate_sequence([{"A": 1}], period_ms=10, cooldown_ms=-5)
