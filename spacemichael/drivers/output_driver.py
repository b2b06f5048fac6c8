"""Common interfaces and exceptions for digital output drivers."""

from __future__ import annotations

from typing import Iterable


class OutputDriverError(RuntimeError):
    """Raised when writing a single output fails."""

    def __init__(self, message: str, output: str | None = None):
        super().__init__(message)
        self.output = output


class ConfigurationError(ValueError):
    """Raised for an output name with no known mapping or a non-binary value."""


def as_bit(value) -> int:
    """Normalise 0/1/False/True to an int, rejecting anything else."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and value in (0, 1):
        return value
    raise ConfigurationError(f"Output value must be 0 or 1, got {value!r}")


class OutputDriver:
    """Abstract interface for banks of binary outputs.

    Concrete drivers (memory, gpiozero GPIO, serial relay board) inherit from this
    class. ``write`` is a coroutine and must be safe to call concurrently for
    different output names.
    """

    def __init__(self, outputs: Iterable[str]):
        self._outputs = tuple(outputs)

    @property
    def outputs(self) -> tuple[str, ...]:
        return self._outputs

    def open(self):
        pass

    def close(self):
        pass

    def is_open(self) -> bool:  # pragma: no cover - interface placeholder
        raise NotImplementedError

    def check_output(self, output: str, value) -> int:
        if output not in self._outputs:
            raise ConfigurationError(f"Unknown output {output!r}")
        return as_bit(value)

    async def write(self, output: str, value: int) -> None:  # pragma: no cover - interface placeholder
        raise NotImplementedError
