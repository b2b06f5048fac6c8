"""Sequencing core: states, cooldown validation, parallel apply and the run loop."""

from . import logger, states, cooldown, applier, sequencer, pinmap, presets, configio, version

__all__ = [
    "logger",
    "states",
    "cooldown",
    "applier",
    "sequencer",
    "pinmap",
    "presets",
    "configio",
    "version",
]
