"""Execution Host - runs a simulation in its own process.

The consumer and the worker share no memory; they exchange plain dicts over
two queues. Control messages in::

    {"type": "start", "config": {...}, "seed": int, "speed": int,
     "log_level": str, "paused": bool}
    {"type": "pause"} {"type": "resume"} {"type": "set_speed", "speed": int}
    {"type": "stop"} {"type": "step"}

Messages out::

    {"type": "ready", "seed": int, "max_ticks": int}
    {"type": "tick", "tick_index", "state", "executed_action", "events", "completed", "stuck"}
    {"type": "summary", ...}
    {"type": "error", "message": str, "fatal": bool}

The worker drains control messages between tick batches, blocks on its inbox
while paused, and always finishes with a ``summary``.
"""
from __future__ import annotations

import logging
import multiprocessing
import queue
from typing import Any, Iterator

from harvest.types import HarvestError

from harvest_sim.config import SimulationConfig
from harvest_sim.scheduler import Scheduler
from harvest_sim.simulation import Simulation

logger = logging.getLogger(__name__)

_IDLE_TIMEOUT = 0.1


# --- Worker side ---

def _send_ticks(outbox: Any, results: list) -> None:
    for result in results:
        outbox.put({"type": "tick", **result.to_dict()})


def _handle(message: Any, scheduler: Scheduler, outbox: Any) -> None:
    kind = message.get("type") if isinstance(message, dict) else None
    if kind == "pause":
        scheduler.pause()
    elif kind == "resume":
        scheduler.resume()
    elif kind == "set_speed":
        try:
            scheduler.set_speed(message.get("speed"))
        except HarvestError as exc:
            outbox.put({"type": "error", "message": str(exc), "fatal": False})
    elif kind == "stop":
        scheduler.stop()
    elif kind == "step":
        result = scheduler.step()
        if result is not None:
            _send_ticks(outbox, [result])
    else:
        logger.warning("Unknown control message %r ignored", message)
        outbox.put({"type": "error", "message": f"unknown message {message!r}", "fatal": False})


def _control(inbox: Any, scheduler: Scheduler, outbox: Any) -> None:
    """Apply pending control messages; wait for one while paused."""
    while True:
        block = scheduler.paused and not scheduler.done
        try:
            message = inbox.get(timeout=_IDLE_TIMEOUT) if block else inbox.get_nowait()
        except queue.Empty:
            if block:
                continue
            return
        _handle(message, scheduler, outbox)
        if scheduler.done:
            return


def _failure_summary(message: str) -> dict[str, Any]:
    return {
        "type": "summary",
        "reason": "error",
        "final_phase": None,
        "total_ticks": 0,
        "metrics": {},
        "error": {"subsystem": "host", "message": message, "last_good_state": None},
    }


def run_worker(inbox: Any, outbox: Any) -> None:
    """Worker process entry point."""
    start = inbox.get()
    if not isinstance(start, dict) or start.get("type") != "start":
        outbox.put({"type": "error", "message": "expected a start message", "fatal": True})
        outbox.put(_failure_summary("expected a start message"))
        return
    if start.get("log_level"):
        logging.basicConfig(level=start["log_level"])

    try:
        config = SimulationConfig.from_dict(start.get("config"))
        sim = Simulation(config, start.get("seed"))
        scheduler = Scheduler(sim, start.get("speed", 1))
    except Exception as exc:
        logger.exception("Could not build the simulation")
        outbox.put({"type": "error", "message": str(exc), "fatal": True})
        outbox.put(_failure_summary(str(exc)))
        return

    outbox.put({"type": "ready", "seed": sim.seed, "max_ticks": sim.max_ticks})
    scheduler.start()
    if start.get("paused"):
        scheduler.pause()
    try:
        while not scheduler.done:
            _control(inbox, scheduler, outbox)
            _send_ticks(outbox, scheduler.advance())
    except Exception as exc:
        logger.exception("Worker loop failed")
        outbox.put({"type": "error", "message": str(exc), "fatal": True})
        sim.stop()
    summary = sim.summary().to_dict()
    if sim.reason == "error" and summary["error"] is not None:
        outbox.put({"type": "error", "message": summary["error"]["message"], "fatal": True})
    outbox.put({"type": "summary", **summary})


# --- Consumer side ---

class SimulationHost:
    """Owns one worker process and its two message queues."""

    def __init__(self, context: str | None = None) -> None:
        self._ctx = multiprocessing.get_context(context)
        self._inbox = self._ctx.Queue()
        self._outbox = self._ctx.Queue()
        self._process: multiprocessing.process.BaseProcess | None = None
        self._finished = False

    @property
    def alive(self) -> bool:
        return self._process is not None and self._process.is_alive()

    @property
    def finished(self) -> bool:
        return self._finished

    def start(
        self,
        config: dict[str, Any],
        seed: int | None = None,
        speed: int = 1,
        log_level: str | None = None,
        paused: bool = False,
    ) -> None:
        if self._process is not None:
            raise RuntimeError("host already started")
        self._process = self._ctx.Process(
            target=run_worker, args=(self._inbox, self._outbox), daemon=True,
        )
        self._process.start()
        self.send({
            "type": "start", "config": config, "seed": seed,
            "speed": speed, "log_level": log_level, "paused": paused,
        })

    def send(self, message: dict[str, Any]) -> None:
        self._inbox.put(message)

    def pause(self) -> None:
        self.send({"type": "pause"})

    def resume(self) -> None:
        self.send({"type": "resume"})

    def set_speed(self, speed: int) -> None:
        self.send({"type": "set_speed", "speed": speed})

    def stop(self) -> None:
        self.send({"type": "stop"})

    def step(self) -> None:
        self.send({"type": "step"})

    def receive(self, timeout: float | None = None) -> dict[str, Any] | None:
        """Next outgoing message, or None on timeout."""
        try:
            message = self._outbox.get(timeout=timeout)
        except queue.Empty:
            if not self.alive and not self._finished:
                self._finished = True
                return _failure_summary("worker exited without a summary")
            return None
        if message.get("type") == "summary":
            self._finished = True
        return message

    def messages(self, timeout: float = 1.0) -> Iterator[dict[str, Any]]:
        """Yield messages until (and including) the final summary."""
        while not self._finished:
            message = self.receive(timeout)
            if message is not None:
                yield message

    def join(self, timeout: float | None = None) -> None:
        if self._process is not None:
            self._process.join(timeout)

    def close(self) -> None:
        if self._process is not None and self._process.is_alive():
            self._process.terminate()
            self._process.join()
        self._inbox.close()
        self._outbox.close()

    def __enter__(self) -> SimulationHost:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
