"""harvest-ai - Candidate generation, scoring, selection, and action execution."""

from harvest_ai.actions import (
    ACTION_KINDS,
    Action,
    AssignHelper,
    CatchSeeds,
    ChangeContext,
    Cleanup,
    Craft,
    Harvest,
    Plant,
    Pump,
    Purchase,
    RescueHelper,
    StartEncounter,
    StartExtraction,
    Stoke,
    StopExtraction,
    TrainHelper,
    Water,
    action_from_dict,
    action_to_dict,
)
from harvest_ai.candidates import generate_candidates
from harvest_ai.decision import Decision, DecisionEngine, select
from harvest_ai.eligibility import ineligible_reason, legality_problem
from harvest_ai.executor import ActionOutcome, execute
from harvest_ai.scoring import FEATURES, ScoreBreakdown, Scorer
from harvest_ai.traits import AgentTraits

__all__ = [
    "ACTION_KINDS",
    "Action",
    "ActionOutcome",
    "AgentTraits",
    "AssignHelper",
    "CatchSeeds",
    "ChangeContext",
    "Cleanup",
    "Craft",
    "Decision",
    "DecisionEngine",
    "FEATURES",
    "Harvest",
    "Plant",
    "Pump",
    "Purchase",
    "RescueHelper",
    "ScoreBreakdown",
    "Scorer",
    "StartEncounter",
    "StartExtraction",
    "Stoke",
    "StopExtraction",
    "TrainHelper",
    "Water",
    "action_from_dict",
    "action_to_dict",
    "execute",
    "generate_candidates",
    "ineligible_reason",
    "legality_problem",
    "select",
]
