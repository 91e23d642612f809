"""Monte Carlo batches - many independent runs of one configuration."""
from __future__ import annotations

import logging
import multiprocessing
import statistics
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from harvest_sim.config import SimulationConfig
from harvest_sim.simulation import Simulation

logger = logging.getLogger(__name__)


def _run_one(args: tuple[dict[str, Any], int]) -> dict[str, Any]:
    """Top-level worker so it pickles; each run builds its own config."""
    raw, seed = args
    config = SimulationConfig.from_dict({**raw, "include_state": False})
    summary = Simulation(config, seed).run().to_dict()
    if summary["error"] is not None:
        summary["error"].pop("last_good_state", None)
    return summary


@dataclass
class BatchReport:
    """Summaries of a batch, in seed order, plus aggregates."""

    summaries: list[dict[str, Any]] = field(default_factory=list)

    @property
    def runs(self) -> int:
        return len(self.summaries)

    def reasons(self) -> dict[str, int]:
        return dict(Counter(s["reason"] for s in self.summaries))

    def phases(self) -> dict[str, int]:
        return dict(Counter(s["final_phase"] for s in self.summaries))

    def victory_rate(self) -> float:
        if not self.summaries:
            return 0.0
        return sum(1 for s in self.summaries if s["reason"] == "victory") / self.runs

    def mean_days(self, reason: str | None = None) -> float | None:
        days = [s["days"] for s in self.summaries if reason is None or s["reason"] == reason]
        return statistics.fmean(days) if days else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "runs": self.runs,
            "reasons": self.reasons(),
            "phases": self.phases(),
            "victory_rate": self.victory_rate(),
            "mean_days": self.mean_days(),
            "mean_days_to_victory": self.mean_days("victory"),
            "summaries": self.summaries,
        }


def run_batch(
    config: dict[str, Any],
    seeds: Iterable[int],
    processes: int | None = 1,
) -> BatchReport:
    """Run one simulation per seed.

    ``processes=1`` runs in this process; anything else fans out over a
    ``multiprocessing.Pool`` (None uses one worker per CPU). Runs share
    nothing, so the result does not depend on the worker count.
    """
    work = [(config, seed) for seed in seeds]
    if processes == 1 or len(work) <= 1:
        return BatchReport([_run_one(item) for item in work])
    logger.info("Running %d simulations on %s workers", len(work), processes or "all")
    with multiprocessing.Pool(processes=processes) as pool:
        return BatchReport(pool.map(_run_one, work))
