"""Decision Engine - generate, filter, score, select.

Selection keeps the first candidate with the strictly highest score, so ties
go to generation order and the same state always yields the same choice.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from harvest_farm.diagnostics import WarnOnce
from harvest_farm.params import Parameters
from harvest_farm.registry import GameData
from harvest_farm.state import GameState

from harvest_ai.actions import Action
from harvest_ai.candidates import generate_candidates
from harvest_ai.eligibility import ineligible_reason
from harvest_ai.scoring import ScoreBreakdown, Scorer
from harvest_ai.traits import AgentTraits

logger = logging.getLogger(__name__)


@dataclass
class Decision:
    """Outcome of one decision cycle.

    ``alternatives`` are the next best scored candidates, best first.
    ``filtered`` maps a rejection reason to how many candidates hit it.
    """

    chosen: ScoreBreakdown | None
    alternatives: list[ScoreBreakdown] = field(default_factory=list)
    considered: int = 0
    filtered: dict[str, int] = field(default_factory=dict)

    @property
    def action(self) -> Action | None:
        return self.chosen.action if self.chosen is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "chosen": self.chosen.to_dict() if self.chosen is not None else None,
            "alternatives": [a.to_dict() for a in self.alternatives],
            "considered": self.considered,
            "filtered": dict(self.filtered),
        }


def select(scored: list[ScoreBreakdown]) -> ScoreBreakdown | None:
    best: ScoreBreakdown | None = None
    for candidate in scored:
        if best is None or candidate.score > best.score:
            best = candidate
    return best


class DecisionEngine:
    """Chooses at most one action per agent-present tick."""

    def __init__(
        self,
        data: GameData,
        params: Parameters,
        traits: AgentTraits,
        alternatives: int = 3,
    ) -> None:
        self._data = data
        self._params = params
        self._traits = traits
        self._alternatives = alternatives
        self._warn = WarnOnce(logger)

    @property
    def traits(self) -> AgentTraits:
        return self._traits

    @property
    def warn(self) -> WarnOnce:
        return self._warn

    def eligible(self, state: GameState, actions: list[Action], filtered: dict[str, int]) -> list[Action]:
        kept: list[Action] = []
        for action in actions:
            reason = ineligible_reason(
                action, state, self._data, self._params, self._traits, self._warn,
            )
            if reason is None:
                kept.append(action)
            else:
                filtered[reason] = filtered.get(reason, 0) + 1
        return kept

    def opportunity(self, state: GameState, scorer: Scorer, context: str) -> float:
        """Best non-move score available in ``context``, floored at zero."""
        actions = generate_candidates(state, self._data, self._params, context, include_moves=False)
        best = 0.0
        for action in self.eligible(state, actions, {}):
            best = max(best, scorer.score(action).score)
        return best

    def decide(self, state: GameState, tick: int) -> Decision:
        candidates = generate_candidates(state, self._data, self._params)
        filtered: dict[str, int] = {}
        eligible = self.eligible(state, candidates, filtered)
        scorer = Scorer(state, self._data, self._params, self._traits, tick)

        scored: list[ScoreBreakdown] = []
        for order, action in enumerate(eligible):
            opportunity = 0.0
            if action.kind == "change_context":
                opportunity = self.opportunity(state, scorer, action.target)
            scored.append(scorer.score(action, order, opportunity))

        chosen = select(scored)
        rest = sorted(
            (s for s in scored if s is not chosen),
            key=lambda s: (-s.score, s.order),
        )
        return Decision(
            chosen=chosen,
            alternatives=rest[: self._alternatives],
            considered=len(candidates),
            filtered=filtered,
        )
