"""Timed, cooldown-checked sequencing of binary outputs."""

from .core.cooldown import ValidationResult, Violation, validate_sequence
from .core.sequencer import INFINITE, CooldownViolationError, Sequencer, SequencerBusyError, SequencerError
from .core.states import State
from .drivers.output_driver import ConfigurationError, OutputDriver, OutputDriverError

__all__ = [
    "INFINITE",
    "ConfigurationError",
    "CooldownViolationError",
    "OutputDriver",
    "OutputDriverError",
    "Sequencer",
    "SequencerBusyError",
    "SequencerError",
    "State",
    "ValidationResult",
    "Violation",
    "validate_sequence",
]
