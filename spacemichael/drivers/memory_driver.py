"""In-process output driver.

Nothing is actuated; every write is recorded so dry runs and tests can see
exactly what the sequencer did. Individual outputs can be made to fail, and
writes can be slowed down to exercise the fan-in barrier.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional

from .output_driver import OutputDriver, OutputDriverError


class MemoryOutputDriver(OutputDriver):

    def __init__(
        self,
        outputs: Iterable[str],
        fail: Iterable[str] = (),
        delays_s: Optional[dict[str, float]] = None,
    ):
        super().__init__(outputs)
        self.values: dict[str, int] = {}
        self.writes: list[tuple[str, int]] = []
        self.completed: list[tuple[str, int]] = []
        self.fail = set(fail)
        self.delays_s = dict(delays_s or {})
        self._opened = False

    def open(self):
        self._opened = True

    def close(self):
        self._opened = False

    def is_open(self) -> bool:
        return self._opened

    async def write(self, output: str, value: int) -> None:
        value = self.check_output(output, value)
        self.writes.append((output, value))
        delay = self.delays_s.get(output, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if output in self.fail:
            raise OutputDriverError(f"Simulated write failure on {output}", output=output)
        self.values[output] = value
        self.completed.append((output, value))
