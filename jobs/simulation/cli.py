"""CLI entry point for the simulation runner."""

from __future__ import annotations

import argparse
import logging

from common.config import get_settings

from .config import RunnerConfig
from .runner import build_session, run

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> RunnerConfig:
    settings = get_settings()

    p = argparse.ArgumentParser(description="ICU device telemetry simulator (headless)")
    p.add_argument("--interval", type=float, default=settings.tick_seconds, help="seconds between ticks")
    p.add_argument("--ticks", type=int, default=None, help="stop after N ticks (default: run forever)")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--notify", action="store_true", help="send technician notifications on alert")
    p.add_argument("--once", action="store_true", help="run a single tick and exit")
    args = p.parse_args(argv)

    return RunnerConfig(
        interval_seconds=args.interval,
        ticks=args.ticks,
        seed=args.seed,
        notify=bool(args.notify),
        once=bool(args.once),
    )


def main(argv=None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    cfg = parse_args(argv)
    logger.info("Simulation runner started")
    logger.info("Config: interval=%.1fs, ticks=%s, seed=%s", cfg.interval_seconds, cfg.ticks, cfg.seed)

    session = build_session(cfg, get_settings())
    try:
        ticks = run(cfg, session)
    except KeyboardInterrupt:
        logger.info("Interrumpido por el usuario")
        return
    logger.info("Simulation finished after %d ticks", ticks)


if __name__ == "__main__":
    main()
