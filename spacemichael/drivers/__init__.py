"""Digital output drivers for spacemichael."""

from .output_driver import OutputDriver, OutputDriverError, ConfigurationError
from .memory_driver import MemoryOutputDriver
from .gpio_driver import GpioOutputDriver
from .serial_driver import SerialOutputDriver

__all__ = [
    "OutputDriver",
    "OutputDriverError",
    "ConfigurationError",
    "MemoryOutputDriver",
    "GpioOutputDriver",
    "SerialOutputDriver",
]
