"""Agent traits - the slice of a behavior profile the Decision Engine reads."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AgentTraits:
    """How the simulated player weighs its options.

    Attributes:
        multipliers: Action kind -> multiplier on the ``priority`` feature.
        risk_tolerance: 0 avoids any predicted loss; 1 accepts long odds.
        optimization: 0-1, how strongly value and progress features count.
    """

    multipliers: dict[str, float] = field(default_factory=dict)
    risk_tolerance: float = 0.5
    optimization: float = 0.5

    def multiplier(self, kind: str) -> float:
        return self.multipliers.get(kind, 1.0)

    @property
    def value_scale(self) -> float:
        return 0.5 + self.optimization
