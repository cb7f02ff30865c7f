"""
ArmyCompositionPlanner — pick this turn's army strategy and barracks caps.

Evaluated fresh every turn; there is no lockout or confirmation gate, so
the strategy can flip back and forth between turns. That is accepted: a
barracks already built keeps producing either way.

Priority table
--------------
Rules are checked in order; the first match wins.
RUSH is always last and always matches (default fallback).

  1. RUSH          — enemy queen is nearly dead, swarm her
  2. BUILD_RANGED  — we have fewer archers than the floor
  3. BUILD_RANGED  — enemy is spamming creeps and we are below the archer ceiling
  4. BUILD_HEAVY   — enemy turtles behind towers and we lack healthy giants
  5. RUSH          — default

Barracks caps
-------------
    cap(type) = BASE_BARRACKS[type] + (profile.barracks_bonus if type is focus)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from RoyaleBot.logger import get_logger
from RoyaleBot.manifests.strategy import Strategy
from RoyaleBot.world import Owner, StructureType, UnitType, WorldSnapshot

log = get_logger()


# ── Tuning constants ──────────────────────────────────────────────────────────

# Enemy queen at or below this health → go for the kill
RUSH_QUEEN_HEALTH: int = 25

# Always keep at least this many archers alive
MIN_ARCHERS: int = 2

# Enemy creeps above this count is a swarm worth answering with archers...
ENEMY_SWARM_THRESHOLD: int = 6
# ...until we have this many archers
MAX_ARCHERS: int = 6

# Enemy towers above this count means they turtle
ENEMY_TOWER_THRESHOLD: int = 3
# Giants we want against a turtle, counting only those not about to expire
MAX_GIANTS: int = 2
GIANT_MIN_HEALTH: int = 20

# Barracks of each type we always want
BASE_BARRACKS: dict[UnitType, int] = {
    UnitType.KNIGHT: 1,
    UnitType.ARCHER: 1,
    UnitType.GIANT:  0,
}

# Order in which unsatisfied barracks types are requested after the focus type
_BARRACKS_ORDER: tuple[UnitType, ...] = (UnitType.KNIGHT, UnitType.ARCHER, UnitType.GIANT)


# ── Inputs / outputs ──────────────────────────────────────────────────────────

@dataclass
class PlannerInputs:
    """The counts the priority table looks at."""
    friendly_creeps: Counter = field(default_factory=Counter)
    enemy_creeps: Counter = field(default_factory=Counter)
    healthy_giants: int = 0
    enemy_tower_count: int = 0
    enemy_queen_health: int = 100

    @property
    def enemy_creep_total(self) -> int:
        return sum(self.enemy_creeps.values())

    @classmethod
    def from_snapshot(cls, snapshot: WorldSnapshot) -> "PlannerInputs":
        return cls(
            friendly_creeps=snapshot.creep_counts(Owner.FRIENDLY),
            enemy_creeps=snapshot.creep_counts(Owner.ENEMY),
            healthy_giants=len(snapshot.units_of(
                Owner.FRIENDLY, UnitType.GIANT, min_health=GIANT_MIN_HEALTH,
            )),
            enemy_tower_count=len(snapshot.sites_of(Owner.ENEMY, StructureType.TOWER)),
            enemy_queen_health=snapshot.enemy_queen.health,
        )


@dataclass(frozen=True)
class ProductionPlan:
    strategy: Strategy
    barracks_caps: Mapping[UnitType, int]

    @property
    def target_unit(self) -> UnitType:
        return self.strategy.focus_unit

    def wanted_barracks(self, owned: Mapping[UnitType, int]) -> Optional[UnitType]:
        """First barracks type still below its cap, focus type first."""
        order = (self.target_unit,) + tuple(t for t in _BARRACKS_ORDER if t != self.target_unit)
        for unit_type in order:
            if owned.get(unit_type, 0) < self.barracks_caps.get(unit_type, 0):
                return unit_type
        return None

    @classmethod
    def for_strategy(cls, strategy: Strategy) -> "ProductionPlan":
        profile = strategy.profile()
        caps = dict(BASE_BARRACKS)
        caps[profile.focus_unit] = caps.get(profile.focus_unit, 0) + profile.barracks_bonus
        return cls(strategy=strategy, barracks_caps=caps)


# ── Rule table ────────────────────────────────────────────────────────────────

@dataclass
class _CompositionRule:
    """enter(inputs) → True means this strategy applies."""
    name: str
    strategy: Strategy
    enter: Callable[[PlannerInputs], bool]


_RULES: list[_CompositionRule] = [
    _CompositionRule(
        name="finish_queen",
        strategy=Strategy.RUSH,
        enter=lambda c: c.enemy_queen_health <= RUSH_QUEEN_HEALTH,
    ),
    _CompositionRule(
        name="archer_floor",
        strategy=Strategy.BUILD_RANGED,
        enter=lambda c: c.friendly_creeps[UnitType.ARCHER] < MIN_ARCHERS,
    ),
    _CompositionRule(
        name="anti_swarm",
        strategy=Strategy.BUILD_RANGED,
        enter=lambda c: (
            c.enemy_creep_total > ENEMY_SWARM_THRESHOLD
            and c.friendly_creeps[UnitType.ARCHER] < MAX_ARCHERS
        ),
    ),
    _CompositionRule(
        name="anti_tower",
        strategy=Strategy.BUILD_HEAVY,
        enter=lambda c: (
            c.enemy_tower_count > ENEMY_TOWER_THRESHOLD
            and c.healthy_giants < MAX_GIANTS
        ),
    ),
    _CompositionRule(
        name="default",
        strategy=Strategy.RUSH,
        enter=lambda c: True,
    ),
]


class ArmyCompositionPlanner:
    """
    Stateless strategy selection.

    ``forced`` locks the planner to one strategy for the whole game, which
    is handy for testing a single army composition against an opponent.
    """

    def __init__(self, forced: Optional[Strategy] = None) -> None:
        self.forced = forced

    def plan(self, inputs: PlannerInputs) -> ProductionPlan:
        return ProductionPlan.for_strategy(self.select_strategy(inputs))

    def select_strategy(self, inputs: PlannerInputs) -> Strategy:
        if self.forced is not None:
            return self.forced
        for rule in _RULES:
            if rule.enter(inputs):
                log.debug("Planner rule %s → %s", rule.name, rule.strategy.value)
                return rule.strategy
        return Strategy.RUSH
