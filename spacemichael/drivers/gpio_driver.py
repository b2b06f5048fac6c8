# gpio_driver.py — gpiozero-backed output driver
from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from gpiozero import GPIOZeroError, OutputDevice

from ..core.logger import APP_LOGGER
from .output_driver import OutputDriver, OutputDriverError


class GpioOutputDriver(OutputDriver):
    """
    One gpiozero OutputDevice per output, created on open() and released on
    close(). ``pin_factory`` is passed through to gpiozero; tests use its
    MockFactory.
    """
    def __init__(self, pins: Mapping[str, int], active_high: bool = True, pin_factory=None):
        super().__init__(pins.keys())
        self._pins = dict(pins)
        self._active_high = active_high
        self._pin_factory = pin_factory
        self._devices: dict[str, OutputDevice] = {}

    @property
    def devices(self) -> dict[str, OutputDevice]:
        return dict(self._devices)

    def is_open(self) -> bool:
        return bool(self._devices)

    def open(self):
        if self.is_open():
            return
        for name, pin in self._pins.items():
            try:
                self._devices[name] = OutputDevice(
                    pin,
                    active_high=self._active_high,
                    initial_value=False,
                    pin_factory=self._pin_factory,
                )
            except GPIOZeroError as e:
                self.close()
                raise OutputDriverError(f"Failed to configure GPIO{pin} for {name}: {e}", output=name) from e
            APP_LOGGER.debug(f"GPIO{pin} configured as output for {name}")

    def close(self):
        while self._devices:
            name, device = self._devices.popitem()
            try:
                device.close()
            except GPIOZeroError as e:
                APP_LOGGER.warning(f"Failed to release {name}: {e}")

    async def write(self, output: str, value: int) -> None:
        value = self.check_output(output, value)
        device: Optional[OutputDevice] = self._devices.get(output)
        if device is None:
            raise OutputDriverError(f"GPIO driver not open, cannot write {output}", output=output)
        try:
            await asyncio.to_thread(device.on if value else device.off)
        except GPIOZeroError as e:
            raise OutputDriverError(f"Write to GPIO{self._pins[output]} ({output}) failed: {e}", output=output) from e
