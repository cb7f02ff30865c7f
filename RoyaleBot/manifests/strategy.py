"""
Named army strategies and their production profiles.

At any turn the bot runs exactly one Strategy. A strategy publishes a
ProductionProfile: which creep it focuses on and how many extra barracks of
that type it wants on top of the base allotment. The queen engine and the
train dispatcher only ever look at the resulting ProductionPlan, never at
the enum itself.

Creep roster
------------
    KNIGHT  cheap melee swarm, kills mines and harasses the queen
    ARCHER  ranged, shreds knight swarms
    GIANT   slow siege unit, only targets towers
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from RoyaleBot.world import UnitType


@dataclass(frozen=True)
class ProductionProfile:
    """
    focus_unit:      creep type this strategy trains and wants barracks for.
    barracks_bonus:  extra barracks of focus_unit beyond the base allotment.
    """
    focus_unit: UnitType
    barracks_bonus: int = 1


class Strategy(Enum):
    RUSH         = "Rush"
    BUILD_RANGED = "Build Ranged"
    BUILD_HEAVY  = "Build Heavy"

    @property
    def focus_unit(self) -> UnitType:
        return self.profile().focus_unit

    def profile(self) -> ProductionProfile:
        return _PROFILES[self]


_PROFILES: dict[Strategy, ProductionProfile] = {
    # Pile knights on a wounded queen
    Strategy.RUSH: ProductionProfile(focus_unit=UnitType.KNIGHT),

    # Answer a knight swarm with archers
    Strategy.BUILD_RANGED: ProductionProfile(focus_unit=UnitType.ARCHER),

    # Crack a turtle with giants
    Strategy.BUILD_HEAVY: ProductionProfile(focus_unit=UnitType.GIANT),
}
