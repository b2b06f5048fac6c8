#!/usr/bin/env python3
"""Check every configured sequence against the cooldown, without hardware.

Usage:

    python tools/check_sequences.py --config ~/.spacemichael/config.json --period-ms 100

Prints one line per sequence and every violation found. Exit status is 1 if
any sequence would be rejected.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_ensure_repo_root_on_path()

from spacemichael.core.configio import load_run_config  # noqa: E402
from spacemichael.core.cooldown import validate_sequence  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--config", type=Path, default=None, help="Config JSON (default: ~/.spacemichael/config.json)")
    parser.add_argument("--period-ms", type=float, default=None, help="Override the configured period")
    parser.add_argument("--cooldown-ms", type=float, default=None, help="Override the configured cooldown")
    args = parser.parse_args(argv)

    cfg = load_run_config(args.config)
    period_ms = cfg.period_ms if args.period_ms is None else args.period_ms
    cooldown_ms = cfg.cooldown_ms if args.cooldown_ms is None else args.cooldown_ms

    failed = 0
    for name, steps in cfg.sequences.items():
        result = validate_sequence(steps, period_ms, cooldown_ms)
        status = "clean" if result else f"{len(result.violations)} violation(s)"
        print(f"{name:<16} {len(steps):>3} step(s)  {status}")
        for message in result.messages():
            print(f"    {message}")
        if not result:
            failed += 1
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
