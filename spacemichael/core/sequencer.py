"""Sequencer: validate once, step through a sequence, repeat, then rest.

Only one run may be active per Sequencer; the driver's outputs are shared
state and cooldown accounting assumes nothing else writes them mid-run.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Mapping, Optional, Union

from ..drivers.output_driver import OutputDriver
from .applier import StateApplier
from .cooldown import ValidationResult, Violation, validate_sequence
from .logger import AppLogSink, LogSink
from .states import State, all_off, as_sequence, as_state, check_sequence

INFINITE = -1
MS_PER_SEC = 1000.0

StateLike = Union[State, Mapping[str, int]]


class SequencerError(RuntimeError):
    """Base class for errors raised by the sequencer itself."""


class CooldownViolationError(SequencerError):
    """The planned sequence would toggle an output inside its cooldown."""

    def __init__(self, violations: Iterable[Violation]):
        self.violations = tuple(violations)
        lines = [v.describe() for v in self.violations]
        super().__init__(f"{len(lines)} cooldown violation(s): " + " ".join(lines))


class SequencerBusyError(SequencerError):
    """A run is already active on this sequencer."""


def check_repeat(repeat: int) -> int:
    if isinstance(repeat, bool) or not isinstance(repeat, int):
        raise ValueError(f"repeat must be an int or INFINITE, got {repeat!r}")
    if repeat < 0 and repeat != INFINITE:
        raise ValueError("repeat must be >= 0 or INFINITE")
    return repeat


class Sequencer:
    """
    Drives a sequence of States through a StateApplier.

    ``run`` validates the whole sequence against the cooldown before writing
    anything, then applies each step and waits ``period_ms`` after it. After
    ``repeat`` additional passes (or forever, for ``INFINITE``) the terminal
    state is applied once. A driver failure aborts the run without applying
    the terminal state; ``reset`` applies it on request.
    """

    def __init__(
        self,
        driver: OutputDriver,
        cooldown_ms: float,
        sink: Optional[LogSink] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if cooldown_ms < 0:
            raise ValueError("cooldown_ms must be >= 0")
        self.driver = driver
        self.cooldown_ms = cooldown_ms
        self.sink = sink or AppLogSink()
        self.applier = StateApplier(driver, self.sink)
        self._sleep = sleep
        self._active = False
        self._cancel_event: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._active

    def default_terminal(self) -> State:
        return all_off(self.driver.outputs)

    def validate(self, sequence: Iterable[StateLike], period_ms: float) -> ValidationResult:
        return validate_sequence(as_sequence(sequence), period_ms, self.cooldown_ms)

    def cancel(self) -> bool:
        """Ask the active run to stop at its next wait or repeat boundary."""
        if not self._active or self._cancel_event is None:
            return False
        self.sink.record("debug", {}, "cancel requested")
        self._cancel_event.set()
        return True

    async def reset(self, terminal: Optional[StateLike] = None) -> None:
        if self._active:
            raise SequencerBusyError("Cannot reset outputs while a run is active")
        state = self.default_terminal() if terminal is None else as_state(terminal)
        state.check_outputs(self.driver.outputs)
        await self.applier.apply(state)

    async def run(
        self,
        sequence: Iterable[StateLike],
        period_ms: float,
        repeat: int = 0,
        terminal: Optional[StateLike] = None,
    ) -> None:
        """Run ``sequence`` ``repeat + 1`` times, or until cancel() for INFINITE.

        An empty sequence applies the terminal state and returns at once, even
        with ``repeat=INFINITE``.
        """
        if self._active:
            raise SequencerBusyError("A sequence is already running")
        if period_ms < 0:
            raise ValueError("period_ms must be >= 0")
        check_repeat(repeat)
        steps = as_sequence(sequence)
        rest = self.default_terminal() if terminal is None else as_state(terminal)
        check_sequence(steps, self.driver.outputs)
        rest.check_outputs(self.driver.outputs)

        self._active = True
        self._cancel_event = asyncio.Event()
        try:
            await self._run(steps, period_ms, repeat, rest)
        finally:
            self._active = False
            self._cancel_event = None

    async def _run(self, steps: tuple[State, ...], period_ms: float, repeat: int, rest: State) -> None:
        ctx = {"steps": len(steps), "period_ms": period_ms, "repeat": repeat}
        result = validate_sequence(steps, period_ms, self.cooldown_ms)
        if not result:
            for message in result.messages():
                self.sink.record("error", ctx, message)
            raise CooldownViolationError(result.violations)
        self.sink.record("debug", ctx, "sequence validated")

        remaining = repeat
        passes = 0
        # An empty sequence has no wait boundary, so it goes straight to rest.
        while steps:
            self.sink.record("debug", {"pass": passes}, "pass start")
            for idx, state in enumerate(steps):
                self.sink.record("trace", {"pass": passes, "step": idx}, "step")
                await self.applier.apply(state)
                await self._wait(period_ms)
                if self._cancelled():
                    break
            passes += 1
            if self._cancelled():
                self.sink.record("debug", {"passes": passes}, "run cancelled")
                break
            if remaining == INFINITE:
                continue
            if remaining == 0:
                break
            remaining -= 1

        self.sink.record("debug", {"passes": passes, "terminal": rest.to_dict()}, "applying terminal state")
        await self.applier.apply(rest)

    def _cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    async def _wait(self, period_ms: float) -> None:
        """Sleep for one period; a cancel request ends the wait early."""
        if self._cancelled():
            return
        sleeper = asyncio.ensure_future(self._sleep(period_ms / MS_PER_SEC))
        canceller = asyncio.ensure_future(self._cancel_event.wait())
        try:
            await asyncio.wait({sleeper, canceller}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, canceller):
                if not task.done():
                    task.cancel()
            await asyncio.gather(sleeper, canceller, return_exceptions=True)
        if sleeper.done() and not sleeper.cancelled():
            sleeper.result()
