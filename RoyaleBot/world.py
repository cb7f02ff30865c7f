"""
World model — sites, units and the per-turn snapshot.

Sites are created once from the startup block and live for the whole game;
every turn the protocol reader pushes the latest observation into them via
Site.observe(). Units carry no identity across turns and are rebuilt from
scratch each turn.

The wire format overloads two integers per site (cooldown / health /
income, and range / unit type). Here each structure kind is its own small
frozen dataclass carrying only the fields that mean something for it, so
callers never have to remember which interpretation applies.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union

from sc2.position import Point2

from RoyaleBot.construction.construction_order import ConstructionOrder


# ---------------------------------------------------------------------------
# Enumerations (values are the wire codes)
# ---------------------------------------------------------------------------

class Owner(IntEnum):
    NEUTRAL  = -1
    FRIENDLY = 0
    ENEMY    = 1


class StructureType(IntEnum):
    NONE     = -1
    MINE     = 0
    TOWER    = 1
    BARRACKS = 2


class UnitType(IntEnum):
    QUEEN  = -1
    KNIGHT = 0   # melee creep
    ARCHER = 1   # ranged creep
    GIANT  = 2   # siege / heavy creep

    @property
    def is_creep(self) -> bool:
        return self != UnitType.QUEEN


# ---------------------------------------------------------------------------
# Structure variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tower:
    health: int
    attack_radius: int

    kind = StructureType.TOWER

    def covers(self, location: Point2, point: Point2, tolerance: float = 0.0) -> bool:
        """True if a tower standing at ``location`` can hit ``point``."""
        return location.distance_to(point) <= self.attack_radius + tolerance


@dataclass(frozen=True)
class Barracks:
    cooldown: int
    unit_type: UnitType

    kind = StructureType.BARRACKS

    @property
    def is_ready(self) -> bool:
        return self.cooldown == 0


@dataclass(frozen=True)
class Mine:
    income_rate: int

    kind = StructureType.MINE


Structure = Union[Tower, Barracks, Mine]


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Unit:
    location: Point2
    owner: Owner
    unit_type: UnitType
    health: int

    @property
    def is_queen(self) -> bool:
        return self.unit_type == UnitType.QUEEN


# ---------------------------------------------------------------------------
# Sites
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Site:
    """
    A buildable map location.

    ``location`` and ``radius`` never change. ``gold`` and ``max_mine_size``
    are -1 while unknown. ``start_distance`` is filled in once by the site
    topology and only used for its ranking. ``cooldown_until`` is the first
    turn on which the mine search may pick this site again.
    """
    site_id: int
    location: Point2
    radius: int
    gold: int = -1
    max_mine_size: int = -1
    owner: Owner = Owner.NEUTRAL
    structure: Optional[Structure] = None
    order: Optional[ConstructionOrder] = None
    cooldown_until: int = 0
    start_distance: Optional[float] = field(default=None, repr=False)

    # ── Derived views ─────────────────────────────────────────────────────────

    @property
    def structure_type(self) -> StructureType:
        return self.structure.kind if self.structure is not None else StructureType.NONE

    @property
    def tower(self) -> Optional[Tower]:
        return self.structure if isinstance(self.structure, Tower) else None

    @property
    def barracks(self) -> Optional[Barracks]:
        return self.structure if isinstance(self.structure, Barracks) else None

    @property
    def mine(self) -> Optional[Mine]:
        return self.structure if isinstance(self.structure, Mine) else None

    @property
    def is_neutral(self) -> bool:
        return self.owner == Owner.NEUTRAL

    @property
    def is_friendly(self) -> bool:
        return self.owner == Owner.FRIENDLY

    @property
    def is_enemy(self) -> bool:
        return self.owner == Owner.ENEMY

    def on_cooldown(self, turn: int) -> bool:
        return self.cooldown_until > turn

    def has_gold_above(self, floor: int) -> bool:
        """Unknown gold (-1) counts as available."""
        return self.gold < 0 or self.gold > floor

    # ── Per-turn observation ─────────────────────────────────────────────────

    def observe(
        self,
        gold: int,
        max_mine_size: int,
        owner: Owner,
        structure: Optional[Structure],
    ) -> None:
        """Apply this turn's observation and drop orders it invalidates."""
        self.gold = gold
        self.max_mine_size = max_mine_size
        self.owner = owner
        self.structure = structure

        order = self.order
        if order is None:
            return
        if owner == Owner.ENEMY:
            self.order = None
        elif structure is None:
            if order.is_placed:
                self.order = None   # built, then destroyed
        elif structure.kind != order.kind:
            self.order = None

    # ── Construction orders ──────────────────────────────────────────────────

    def plan(
        self,
        kind: StructureType,
        turn: int,
        unit_type: Optional[UnitType] = None,
    ) -> ConstructionOrder:
        """Earmark this site for ``kind``; replaces any previous plan."""
        current = self.order
        if (
            current is not None
            and current.kind == kind
            and current.unit_type == unit_type
        ):
            return current
        self.order = ConstructionOrder(kind=kind, unit_type=unit_type, created_turn=turn)
        return self.order

    def target_upgrade(self, turn: int) -> ConstructionOrder:
        """Mark our existing structure here for in-place upgrades."""
        order = self.plan(self.structure_type, turn)
        order.mark_placed()
        return order

    def consume_order(self) -> Optional[ConstructionOrder]:
        """
        Hand the order to the claim step. Barracks orders are cleared,
        tower and mine orders stay behind as PLACED.
        """
        order = self.order
        if order is None:
            return None
        if order.kind == StructureType.BARRACKS:
            self.order = None
        else:
            order.mark_placed()
        return order

    def __str__(self) -> str:
        return f"[Site {self.site_id} {int(self.location.x)},{int(self.location.y)}]"


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------

@dataclass
class WorldSnapshot:
    """Everything the decision layer may look at for one turn."""
    turn: int
    gold: int
    touched_site_id: Optional[int]
    sites: list[Site]
    units: list[Unit]

    @property
    def queen(self) -> Unit:
        return self._find_queen(Owner.FRIENDLY)

    @property
    def enemy_queen(self) -> Unit:
        return self._find_queen(Owner.ENEMY)

    @property
    def touched_site(self) -> Optional[Site]:
        if self.touched_site_id is None:
            return None
        return self.sites[self.touched_site_id]

    def sites_of(self, owner: Owner, kind: Optional[StructureType] = None) -> list[Site]:
        return [
            s for s in self.sites
            if s.owner == owner and (kind is None or s.structure_type == kind)
        ]

    def units_of(
        self,
        owner: Owner,
        unit_type: Optional[UnitType] = None,
        min_health: int = 0,
    ) -> list[Unit]:
        return [
            u for u in self.units
            if u.owner == owner
            and (unit_type is None or u.unit_type == unit_type)
            and u.health >= min_health
        ]

    def creep_counts(self, owner: Owner, min_health: int = 0) -> Counter:
        """Creep count per UnitType (queens excluded)."""
        return Counter(
            u.unit_type for u in self.units_of(owner, min_health=min_health)
            if u.unit_type.is_creep
        )

    def barracks_counts(self, owner: Owner) -> Counter:
        """Barracks count per trained UnitType."""
        return Counter(
            s.barracks.unit_type for s in self.sites_of(owner, StructureType.BARRACKS)
        )

    def _find_queen(self, owner: Owner) -> Unit:
        for unit in self.units:
            if unit.is_queen and unit.owner == owner:
                return unit
        raise LookupError(f"No {owner.name.lower()} queen in snapshot for turn {self.turn}")
