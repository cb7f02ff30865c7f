"""
ConstructionOrder — what the queen intends to build on a site.

Responsibility
--------------
The queen cannot build at a distance. Planning steps decide "put a tower on
site 7" several turns before she arrives, and the claim step must remember
that decision when contact is finally made. Each Site carries at most one
ConstructionOrder for this purpose.

Lifecycle of a ConstructionOrder
---------------------------------
  PLANNED  → created by a planning rule when the queen is sent toward the
             site (Site.plan)
  PLACED   → the claim step issued the BUILD command (Site.consume_order).
             Tower and mine orders stay PLACED so the in-place upgrade
             rules know this site was explicitly targeted.
  (cleared)→ barracks orders are dropped as soon as they are consumed.
             Any order is dropped by Site.observe when the site turns enemy,
             a different structure kind shows up on it, or a placed
             structure disappears again.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from RoyaleBot.world import StructureType, UnitType


class OrderStatus(Enum):
    PLANNED = auto()   # Queen dispatched, nothing built yet
    PLACED  = auto()   # BUILD issued; kept for upgrade targeting


@dataclass
class ConstructionOrder:
    """
    A single pending or placed build request.

    Fields
    ------
    kind : StructureType
        What to build (TOWER, MINE or BARRACKS).
    unit_type : UnitType | None
        Barracks subtype; None for towers and mines.
    status : OrderStatus
        Current lifecycle state.
    created_turn : int
        Turn on which the order was planned. Used for logging only.
    """
    kind: "StructureType"
    unit_type: Optional["UnitType"] = None
    status: OrderStatus = OrderStatus.PLANNED
    created_turn: int = 0

    @property
    def is_planned(self) -> bool:
        return self.status == OrderStatus.PLANNED

    @property
    def is_placed(self) -> bool:
        return self.status == OrderStatus.PLACED

    def mark_placed(self) -> None:
        """BUILD command issued for this order."""
        self.status = OrderStatus.PLACED

    def __str__(self) -> str:
        subtype = f"-{self.unit_type.name}" if self.unit_type is not None else ""
        return f"Order({self.kind.name}{subtype} | {self.status.name} since turn {self.created_turn})"
