"""harvest-sim - Profiles, monitoring, the tick pipeline, scheduling, and hosting."""

from harvest_sim.batch import BatchReport, run_batch
from harvest_sim.config import InitialState, SimulationConfig
from harvest_sim.defaults import DEFAULT_DEFINITIONS, default_game_data
from harvest_sim.guard import fingerprint, guard_call, guarded
from harvest_sim.host import SimulationHost, run_worker
from harvest_sim.monitor import Bottleneck, MonitorReport, ProgressMonitor, is_victory, phase_index
from harvest_sim.profile import PRESETS, BehaviorProfile
from harvest_sim.schedule import PresenceSchedule, plan_checkins
from harvest_sim.scheduler import Scheduler
from harvest_sim.simulation import REASONS, RunSummary, Simulation, TickResult, run_simulation

__all__ = [
    "BatchReport",
    "BehaviorProfile",
    "Bottleneck",
    "DEFAULT_DEFINITIONS",
    "InitialState",
    "MonitorReport",
    "PRESETS",
    "PresenceSchedule",
    "ProgressMonitor",
    "REASONS",
    "RunSummary",
    "Scheduler",
    "Simulation",
    "SimulationConfig",
    "SimulationHost",
    "TickResult",
    "default_game_data",
    "fingerprint",
    "guard_call",
    "guarded",
    "is_victory",
    "phase_index",
    "plan_checkins",
    "run_batch",
    "run_simulation",
    "run_worker",
]
