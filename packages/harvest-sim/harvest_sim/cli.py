"""Command line entry point: ``harvest-sim run`` and ``harvest-sim batch``."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from harvest.types import HarvestError

from harvest_sim.batch import run_batch
from harvest_sim.profile import PRESETS
from harvest_sim.simulation import run_simulation

logger = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> dict[str, Any]:
    config: dict[str, Any] = {}
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            config = json.load(f)
    if args.profile:
        config["profile"] = {**config.get("profile", {}), "preset": args.profile}
    if args.days is not None:
        config["max_days"] = args.days
    config["include_state"] = False
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harvest-sim",
        description="Play an idle farming game autonomously and report how it went.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    def common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", help="JSON run configuration")
        p.add_argument("--profile", choices=sorted(PRESETS), help="Behavior profile preset")
        p.add_argument("--days", type=int, help="Override max simulated days")

    run = sub.add_parser("run", help="Run one simulation")
    common(run)
    run.add_argument("--seed", type=int, default=0, help="RNG seed (default: 0)")

    batch = sub.add_parser("batch", help="Run a Monte Carlo batch")
    common(batch)
    batch.add_argument("--runs", type=int, default=10, help="Number of runs (default: 10)")
    batch.add_argument("--base-seed", type=int, default=0, help="First seed (default: 0)")
    batch.add_argument("--processes", type=int, default=None,
                       help="Worker processes (default: one per CPU)")
    batch.add_argument("--summaries", action="store_true", help="Include every run summary")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    try:
        config = _load_config(args)
        if args.command == "run":
            summary = run_simulation(config, args.seed).to_dict()
            if summary["error"] is not None:
                summary["error"].pop("last_good_state", None)
            output: dict[str, Any] = summary
        else:
            seeds = range(args.base_seed, args.base_seed + args.runs)
            output = run_batch(config, seeds, args.processes).to_dict()
            if not args.summaries:
                output.pop("summaries")
    except (OSError, json.JSONDecodeError, HarvestError) as exc:
        logger.error("%s", exc)
        return 2
    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
