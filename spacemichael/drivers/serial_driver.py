# serial_driver.py — pyserial driver for relay/IO boards speaking "<pin>=<value>"
from __future__ import annotations

import asyncio
import threading
from typing import Mapping, Optional

import serial

from ..core.logger import APP_LOGGER
from .output_driver import OutputDriver, OutputDriverError

DEFAULT_BAUD = 9600
DEFAULT_TIMEOUT_S = 1.0
LINE_ENDING = "\n"


class SerialOutputDriver(OutputDriver):
    """
    Sends one ASCII line per output write, e.g. ``66=1``.
    Writes from concurrent tasks are serialised on the port by a lock.
    """
    def __init__(self, pins: Mapping[str, int], port: Optional[str] = None,
                 baudrate: int = DEFAULT_BAUD, timeout: float = DEFAULT_TIMEOUT_S):
        super().__init__(pins.keys())
        self._pins = dict(pins)
        self.ser: Optional[serial.Serial] = None
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._lock = threading.Lock()

    def open(self, port: Optional[str] = None, baudrate: Optional[int] = None):
        port = port or self._port
        if port is None:
            raise OutputDriverError("No serial port configured")
        if self.is_open() and self._port == port:
            return

        self.close() # Ensure clean state
        self._port = port
        if baudrate is not None:
            self._baudrate = baudrate
        try:
            APP_LOGGER.info(f"Connecting to {self._port}...")
            self.ser = serial.Serial(port=self._port, baudrate=self._baudrate, timeout=self._timeout)
        except (OSError, serial.SerialException) as e:
            raise OutputDriverError(f"Failed to open {self._port}: {e}") from e
        APP_LOGGER.info(f"Connected to {self._port}")

    def is_open(self) -> bool:
        return bool(self.ser and self.ser.is_open)

    def close(self):
        if self.ser:
            try:
                self.ser.close()
            except (OSError, serial.SerialException) as e:
                APP_LOGGER.warning(f"Failed to close {self._port}: {e}")
            self.ser = None

    def _send_line(self, output: str, text: str) -> None:
        with self._lock:
            if not self.is_open():
                raise OutputDriverError(f"Serial port not open, cannot write {output}", output=output)
            try:
                self.ser.write((text + LINE_ENDING).encode("ascii"))
                self.ser.flush()
            except (OSError, serial.SerialException) as e:
                APP_LOGGER.error(f"Write failed: {e}")
                self.close()
                raise OutputDriverError(f"Write to {output} failed: {e}", output=output) from e

    async def write(self, output: str, value: int) -> None:
        value = self.check_output(output, value)
        await asyncio.to_thread(self._send_line, output, f"{self._pins[output]}={value}")
