"""
TrainDispatcher — which barracks start training this turn.

Two picks per turn at most:
  1. A ready barracks of the planner's target type, if we can pay for it.
  2. A ready barracks of the cheapest type (knights), if gold still covers
     one more batch, whether or not the first pick happened.

An empty TRAIN is a normal answer, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from RoyaleBot.commands import Train
from RoyaleBot.logger import get_logger
from RoyaleBot.world import Owner, Site, StructureType, UnitType, WorldSnapshot

log = get_logger()


# ── Costs (gold per batch) ────────────────────────────────────────────────────

UNIT_COSTS: dict[UnitType, int] = {
    UnitType.KNIGHT: 80,
    UnitType.ARCHER: 100,
    UnitType.GIANT:  140,
}

CHEAPEST_UNIT: UnitType = min(UNIT_COSTS, key=UNIT_COSTS.get)


@dataclass(frozen=True)
class TrainResult:
    command: Train
    gold_left: int


def _ready_barracks(
    snapshot: WorldSnapshot,
    unit_type: UnitType,
    exclude: tuple[int, ...] = (),
) -> Optional[Site]:
    for site in snapshot.sites_of(Owner.FRIENDLY, StructureType.BARRACKS):
        if site.site_id in exclude:
            continue
        if site.barracks.unit_type == unit_type and site.barracks.is_ready:
            return site
    return None


def dispatch_training(snapshot: WorldSnapshot, target: UnitType) -> TrainResult:
    gold = snapshot.gold
    if target not in UNIT_COSTS:
        log.warning("Cannot train %r — not a creep type", target, turn=snapshot.turn)
        return TrainResult(Train(), gold)

    picked: tuple[int, ...] = ()

    if gold >= UNIT_COSTS[target]:
        site = _ready_barracks(snapshot, target)
        if site is not None:
            picked += (site.site_id,)
            gold -= UNIT_COSTS[target]

    if gold >= UNIT_COSTS[CHEAPEST_UNIT]:
        site = _ready_barracks(snapshot, CHEAPEST_UNIT, exclude=picked)
        if site is not None:
            picked += (site.site_id,)
            gold -= UNIT_COSTS[CHEAPEST_UNIT]

    return TrainResult(Train(picked), gold)
