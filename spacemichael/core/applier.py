"""Parallel application of one State through an output driver."""
from __future__ import annotations

import asyncio
from typing import Optional

from ..drivers.output_driver import OutputDriver, OutputDriverError
from .logger import AppLogSink, LogSink
from .states import State


class StateApplier:
    """Fan out one write per output, then wait for all of them.

    If any write fails, the first failure to complete is raised once every
    write has settled. Already-applied outputs are not rolled back.
    """

    def __init__(self, driver: OutputDriver, sink: Optional[LogSink] = None):
        self.driver = driver
        self.sink = sink or AppLogSink()

    async def apply(self, state: State) -> None:
        self.sink.record("debug", {"state": state.to_dict()}, "apply")
        failures: list[OutputDriverError] = []

        async def _write(name: str, value: int) -> None:
            self.sink.record("trace", {"output": name, "value": value}, "write")
            try:
                await self.driver.write(name, value)
            except OutputDriverError as e:
                failures.append(e)
                raise

        results = await asyncio.gather(
            *(_write(name, value) for name, value in state.items()),
            return_exceptions=True,
        )
        if failures:
            self.sink.record("error", {"output": failures[0].output}, f"write failed: {failures[0]}")
            raise failures[0]
        for result in results:
            if isinstance(result, BaseException):
                raise result
