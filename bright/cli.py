#!/usr/bin/env python3
"""bright demo CLI.

Runs the counter example: a counter is incremented once per cycle and a
lazy step keyed on ``counter // 10`` recomputes a memo only when the
counter crosses a multiple of ten.

Usage examples:
    # Ten increments with default config
    python -m bright.cli

    # Twenty-five increments, logging every step decision
    python -m bright.cli --cycles 25 --verbose

    # Generate default config
    python -m bright.cli --init-config > bright.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

import yaml

from .config import EngineConfig, create_default_config
from .effects import Effect
from .event_bus import SimpleEventBus
from .monitors import RecomputeMonitor
from .runtime import Runtime
from .session import Session, init

logger = logging.getLogger(__name__)

INCREMENT = "increment"


@dataclass(frozen=True)
class Counter:
    counter: int = 0


@dataclass(frozen=True)
class Memo:
    memo: Optional[int] = None
    parity: str = "even"


def _transition(msg: Any):
    def apply(raw: Counter) -> Tuple[Counter, Effect]:
        if msg == INCREMENT:
            return replace(raw, counter=raw.counter + 1), Effect.none()
        return raw, Effect.none()
    return apply


def _steps(session: Session) -> Session:
    return (
        session
        .compute(lambda raw, d: replace(d, parity="even" if raw.counter % 2 == 0 else "odd"))
        .lazy_compute(
            lambda raw: raw.counter // 10,
            lambda raw, d, tens: replace(d, memo=raw.counter * 1000),
        )
        .lazy_schedule(
            lambda raw: raw.counter // 10,
            lambda raw, d, tens: ("milestone", tens),
        )
    )


def update(session: Session, msg: Any) -> Tuple[Session, Effect]:
    return session.start(_transition(msg), _steps)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bright-demo",
        description="Incremental counter demo for the bright engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --cycles 25
  %(prog)s --config bright.yaml --verbose
  %(prog)s --init-config > bright.yaml
        """,
    )

    parser.add_argument(
        "--cycles", "-n",
        type=int,
        default=10,
        help="Number of increment messages to dispatch (default: 10)",
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to YAML config file",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every lazy step decision",
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Print a default config file and exit",
    )

    return parser


def setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def run_demo(cycles: int, config: EngineConfig, out=None) -> Session:
    """Run the counter demo and print one line per cycle."""
    if out is None:
        out = sys.stdout
    bus = SimpleEventBus()
    monitor = RecomputeMonitor().attach(bus)
    runtime: Runtime[Session] = Runtime(init(Counter(), Memo(), config=config, event_bus=bus), update)

    for _ in range(cycles):
        runtime.dispatch(INCREMENT)
        session = runtime.model
        raw, derived = session.unwrap()
        recomputed = bool(monitor.computed.get(session.cycle_id))
        effects = runtime.drain_outbox()
        print(
            f"cycle {session.cycle_id:>4}  counter={raw.counter:<5} memo={derived.memo!s:<8} "
            f"parity={derived.parity:<4} recomputed={'yes' if recomputed else 'no':<3} "
            f"effects={list(effects)}",
            file=out,
        )

    print(
        f"{cycles} cycle(s), {monitor.recompute_count(slot=0)} memo recompute(s)",
        file=out,
    )
    return runtime.model


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.init_config:
        print(create_default_config())
        return 0

    if args.cycles < 0:
        parser.error("--cycles must be >= 0")

    try:
        config = EngineConfig.load(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, args.verbose)
    logger.info("Running %d cycle(s)", args.cycles)
    run_demo(args.cycles, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
