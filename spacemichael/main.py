"""Command line front end: run, check or list configured sequences.

    python run.py --list
    python run.py --sequence nightrider --repeat forever
    python run.py --sequence allonoff --period-ms 500 --check

SIGINT/SIGTERM stop a running sequence at the next step boundary; the terminal
state is still applied.
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

from .core.configio import DEFAULT_PATH, DRIVERS, RunConfig, load_run_config, save_config
from .core.logger import APP_LOGGER, configure_file_logging, set_verbosity
from .core.sequencer import INFINITE, CooldownViolationError, Sequencer, SequencerError
from .core.version import APP_VERSION
from .drivers import ConfigurationError, MemoryOutputDriver, OutputDriver, OutputDriverError, GpioOutputDriver, SerialOutputDriver

EXIT_OK = 0
EXIT_DRIVER_FAILURE = 1
EXIT_INVALID = 2
FOREVER_WORDS = ("forever", "inf", "infinite")


def parse_repeat(text: str) -> int:
    if text.strip().lower() in FOREVER_WORDS:
        return INFINITE
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"repeat must be a non-negative integer or 'forever', got {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError("repeat must be >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spacemichael", description="Run timed sequences on a bank of binary outputs.")
    parser.add_argument("--config", type=Path, default=None, help=f"Config JSON (default: {DEFAULT_PATH})")
    parser.add_argument("--list", action="store_true", help="List known states and sequences, then exit")
    parser.add_argument("--save-config", type=Path, default=None, metavar="PATH",
                        help="Write the loaded configuration (user states and sequences only) to PATH, then exit")
    parser.add_argument("--sequence", default=None, help="Name of the sequence to run")
    parser.add_argument("--period-ms", type=float, default=None, help="Time between steps (default: from config)")
    parser.add_argument("--repeat", type=parse_repeat, default=0, help="Extra passes after the first, or 'forever'")
    parser.add_argument("--terminal", default=None, help="State to rest in afterwards (default: all outputs off)")
    parser.add_argument("--driver", choices=DRIVERS, default=None, help="Output driver (default: from config)")
    parser.add_argument("--dry-run", action="store_true", help="Shorthand for --driver memory")
    parser.add_argument("--port", default=None, help="Serial port for the serial driver")
    parser.add_argument("--check", action="store_true", help="Validate cooldowns only; touch no outputs")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for debug, -vv for per-write trace")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return parser


def make_driver(cfg: RunConfig, driver: Optional[str] = None, port: Optional[str] = None) -> OutputDriver:
    kind = driver or cfg.driver
    if kind == "memory":
        return MemoryOutputDriver(cfg.pins.outputs)
    if kind == "gpio":
        return GpioOutputDriver(cfg.pins, active_high=cfg.active_high)
    if kind == "serial":
        return SerialOutputDriver(cfg.pins, port=port or cfg.serial_port, baudrate=cfg.baudrate)
    raise ConfigurationError(f"Unknown driver {kind!r}")


def list_presets(cfg: RunConfig) -> None:
    print("Outputs:")
    for name, pin in cfg.pins.items():
        print(f"  {name:<12} pin {pin}")
    print("States:")
    for name, state in cfg.states.items():
        print(f"  {name:<12} {state.to_dict()}")
    print("Sequences:")
    for name, steps in cfg.sequences.items():
        print(f"  {name:<12} {len(steps)} step(s)")


def _install_cancel_handlers(sequencer: Sequencer) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, sequencer.cancel)
        except (NotImplementedError, RuntimeError):
            # Not available on this platform/loop; Ctrl+C will abort without a terminal state.
            APP_LOGGER.debug(f"Signal handler for {sig!r} unavailable")


async def run_sequence(sequencer: Sequencer, steps, period_ms: float, repeat: int, terminal) -> int:
    _install_cancel_handlers(sequencer)
    try:
        await sequencer.run(steps, period_ms, repeat=repeat, terminal=terminal)
    except OutputDriverError as e:
        APP_LOGGER.error(f"Output write failed, run aborted: {e}")
        try:
            await sequencer.reset(terminal)
            APP_LOGGER.info("Outputs reset to terminal state")
        except (OutputDriverError, SequencerError) as reset_error:
            APP_LOGGER.error(f"Reset after failure also failed: {reset_error}")
        return EXIT_DRIVER_FAILURE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbosity(args.verbose)
    if args.log_file:
        configure_file_logging(args.log_file)

    if args.config is not None and not args.config.exists():
        APP_LOGGER.error(f"Config file not found: {args.config}")
        return EXIT_INVALID
    try:
        cfg = load_run_config(args.config)
    except ConfigurationError as e:
        APP_LOGGER.error(f"Invalid configuration: {e}")
        return EXIT_INVALID

    if args.list:
        list_presets(cfg)
        return EXIT_OK
    if args.save_config is not None:
        written = save_config(cfg.to_dict(), args.save_config)
        if written is None:
            return EXIT_INVALID
        print(f"Wrote {written}")
        return EXIT_OK
    if not args.sequence:
        APP_LOGGER.error("No sequence given (use --sequence NAME, or --list)")
        return EXIT_INVALID
    if args.sequence not in cfg.sequences:
        APP_LOGGER.error(f"Unknown sequence {args.sequence!r}")
        return EXIT_INVALID
    if args.terminal is not None and args.terminal not in cfg.states:
        APP_LOGGER.error(f"Unknown terminal state {args.terminal!r}")
        return EXIT_INVALID

    steps = cfg.sequences[args.sequence]
    terminal = cfg.states[args.terminal] if args.terminal else None
    period_ms = cfg.period_ms if args.period_ms is None else args.period_ms
    if period_ms < 0:
        APP_LOGGER.error("period must be >= 0")
        return EXIT_INVALID

    driver = make_driver(cfg, "memory" if args.dry_run else args.driver, args.port)
    sequencer = Sequencer(driver, cfg.cooldown_ms)

    if args.check:
        result = sequencer.validate(steps, period_ms)
        if result:
            print(f"{args.sequence}: clean ({len(steps)} step(s), period {period_ms:g} ms, cooldown {cfg.cooldown_ms:g} ms)")
            return EXIT_OK
        for message in result.messages():
            print(message)
        return EXIT_INVALID

    try:
        try:
            driver.open()
        except OutputDriverError as e:
            APP_LOGGER.error(f"Failed to open output driver: {e}")
            return EXIT_DRIVER_FAILURE
        APP_LOGGER.info(f"Running {args.sequence} ({len(steps)} step(s), period {period_ms:g} ms, repeat {'forever' if args.repeat == INFINITE else args.repeat})")
        return asyncio.run(run_sequence(sequencer, steps, period_ms, args.repeat, terminal))
    except CooldownViolationError as e:
        for violation in e.violations:
            APP_LOGGER.error(violation.describe())
        return EXIT_INVALID
    finally:
        driver.close()


if __name__ == "__main__":
    sys.exit(main())
