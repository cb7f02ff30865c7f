"""
QueenDecisionEngine — one queen command per turn.

The queen is our only way to touch the map: she walks, and when she is in
contact with a site she can build on it. Everything she does is chosen by
an ordered list of rules; the first rule that returns a command wins.

Priority table
--------------
  Contact rules (the queen is touching a site)
    1. claim_touched_site       neutral site → build what was planned there,
                                or a barracks / tower if nothing was
    2. upgrade_touched_mine     our targeted mine below its max rate
    3. repair_touched_tower     our targeted tower below repair health

  Planning rules
    4. secure_minimum_mines     fewer than MIN_MINES mines → go claim one
    5. take_central_tower       central site still neutral → go claim it
    6. build_wanted_barracks    planner wants another barracks → safe site
    7. expand_mines             fewer than MAX_MINES mines → go claim one
    8. reinforce_central_tower  upgrade central tower CENTRAL_TOWER_UPGRADES times
    9. add_support_tower        neutral site inside central tower range
   10. kite                     knights closing in → back to start
   11. repair_damaged_tower     our tower in central range below repair health
   12. hold_position            stay at the central tower

Planning rules only ever emit MOVE. They leave a ConstructionOrder on the
target site so that rule 1 knows what to build once contact happens on a
later turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from RoyaleBot.commands import Build, Move, QueenCommand, build_command
from RoyaleBot.geometry import distance
from RoyaleBot.logger import get_logger
from RoyaleBot.manifests.army_planner import ProductionPlan
from RoyaleBot.manifests.site_topology import SiteTopology
from RoyaleBot.manifests.threat_assessment import ThreatAssessment
from RoyaleBot.world import Owner, Site, StructureType, Unit, WorldSnapshot

log = get_logger()


# ── Tuning constants ──────────────────────────────────────────────────────────

MIN_MINES: int = 2
MAX_MINES: int = 4

# Sites with this much gold or less are not worth a mine
MINE_GOLD_FLOOR: int = 30

# Turns before a claimed mine site may be picked again by the mine search
MINE_RETRY_DELAY: int = 20

# BUILD TOWER commands spent on the central tower once it stands
CENTRAL_TOWER_UPGRADES: int = 7

# Towers below this health are worth a repair trip
TOWER_REPAIR_HEALTH: int = 400


# ── Per-game memory and per-turn context ─────────────────────────────────────

@dataclass
class QueenMemory:
    """What the engine has to remember between turns of one game."""
    central_upgrades: int = 0


@dataclass
class QueenContext:
    snapshot: WorldSnapshot
    topology: SiteTopology
    threats: ThreatAssessment
    plan: ProductionPlan
    memory: QueenMemory
    use_safest_spot: bool = False

    @property
    def turn(self) -> int:
        return self.snapshot.turn

    @property
    def queen(self) -> Unit:
        return self.snapshot.queen

    @property
    def touched(self) -> Optional[Site]:
        return self.snapshot.touched_site

    @property
    def central(self) -> Site:
        return self.snapshot.sites[self.topology.central_site_id]

    @property
    def mine_count(self) -> int:
        return len(self.snapshot.sites_of(Owner.FRIENDLY, StructureType.MINE))

    def ranked(self, safe_only: bool) -> list[Site]:
        return self.topology.ranked(self.snapshot.sites, safe_only=safe_only)


@dataclass(frozen=True)
class QueenDecision:
    rule: str
    command: QueenCommand


# ── Search helpers ────────────────────────────────────────────────────────────

def _nearest_to_queen(ctx: QueenContext, sites: list[Site]) -> Optional[Site]:
    if not sites:
        return None
    here = ctx.queen.location
    return min(sites, key=lambda s: distance(s.location, here))


def _find_mine_site(ctx: QueenContext) -> Optional[Site]:
    def usable(site: Site) -> bool:
        return (
            site.is_neutral
            and site.site_id != ctx.topology.central_site_id
            and not site.on_cooldown(ctx.turn)
            and site.has_gold_above(MINE_GOLD_FLOOR)
            and not ctx.threats.in_range_of_enemy_tower(site.location)
        )

    for safe_only in (True, False):
        site = _nearest_to_queen(ctx, [s for s in ctx.ranked(safe_only) if usable(s)])
        if site is not None:
            return site
    return None


def _find_support_tower_site(ctx: QueenContext) -> Optional[Site]:
    central = ctx.central
    tower = central.tower
    for safe_only in (True, False):
        for site in ctx.ranked(safe_only):
            if not site.is_neutral or site.structure is not None:
                continue
            if ctx.threats.in_range_of_enemy_tower(site.location):
                continue
            if tower.covers(central.location, site.location):
                return site
    return None


def _go_build_mine(ctx: QueenContext, reason: str) -> Optional[QueenCommand]:
    site = _find_mine_site(ctx)
    if site is None:
        log.warning("No free mine site (%s, own %d mines)", reason, ctx.mine_count, turn=ctx.turn)
        return None
    site.plan(StructureType.MINE, ctx.turn)
    return Move(site.location)


def _central_is_our_tower(ctx: QueenContext) -> bool:
    central = ctx.central
    return central.is_friendly and central.tower is not None


# ── Contact rules ─────────────────────────────────────────────────────────────

def _claim_touched_site(ctx: QueenContext) -> Optional[QueenCommand]:
    site = ctx.touched
    if site is None or not site.is_neutral:
        return None

    order = site.consume_order()
    if order is not None:
        kind, unit_type = order.kind, order.unit_type
        if kind == StructureType.MINE:
            site.cooldown_until = ctx.turn + MINE_RETRY_DELAY
    else:
        log.debug("Happened to touch %s on the way", site, turn=ctx.turn)
        unit_type = ctx.plan.wanted_barracks(ctx.snapshot.barracks_counts(Owner.FRIENDLY))
        kind = StructureType.BARRACKS if unit_type is not None else StructureType.TOWER

    return build_command(site.site_id, kind, unit_type, turn=ctx.turn)


def _upgrade_touched_mine(ctx: QueenContext) -> Optional[QueenCommand]:
    site = ctx.touched
    if site is None or not site.is_friendly or site.mine is None:
        return None
    if site.order is None or site.order.kind != StructureType.MINE:
        return None
    if site.mine.income_rate >= site.max_mine_size or not site.has_gold_above(0):
        return None
    return Build(site.site_id, StructureType.MINE)


def _repair_touched_tower(ctx: QueenContext) -> Optional[QueenCommand]:
    site = ctx.touched
    if site is None or not site.is_friendly or site.tower is None:
        return None
    if site.order is None or site.order.kind != StructureType.TOWER:
        return None
    if site.tower.health >= TOWER_REPAIR_HEALTH:
        return None
    return Build(site.site_id, StructureType.TOWER)


# ── Planning rules ────────────────────────────────────────────────────────────

def _secure_minimum_mines(ctx: QueenContext) -> Optional[QueenCommand]:
    if ctx.mine_count >= MIN_MINES:
        return None
    return _go_build_mine(ctx, "minimum")


def _take_central_tower(ctx: QueenContext) -> Optional[QueenCommand]:
    central = ctx.central
    if not central.is_neutral:
        return None
    central.plan(StructureType.TOWER, ctx.turn)
    return Move(central.location)


def _build_wanted_barracks(ctx: QueenContext) -> Optional[QueenCommand]:
    wanted = ctx.plan.wanted_barracks(ctx.snapshot.barracks_counts(Owner.FRIENDLY))
    if wanted is None:
        return None
    site = _nearest_to_queen(ctx, [s for s in ctx.ranked(safe_only=True) if s.is_neutral])
    if site is None:
        log.warning("No safe site left for a %s barracks", wanted.name, turn=ctx.turn)
        return None
    site.plan(StructureType.BARRACKS, ctx.turn, unit_type=wanted)
    return Move(site.location)


def _expand_mines(ctx: QueenContext) -> Optional[QueenCommand]:
    if ctx.mine_count >= MAX_MINES:
        return None
    return _go_build_mine(ctx, "expansion")


def _reinforce_central_tower(ctx: QueenContext) -> Optional[QueenCommand]:
    if not _central_is_our_tower(ctx):
        return None
    if ctx.memory.central_upgrades >= CENTRAL_TOWER_UPGRADES:
        return None
    central = ctx.central
    if ctx.snapshot.touched_site_id != central.site_id:
        return Move(central.location)
    ctx.memory.central_upgrades += 1
    return Build(central.site_id, StructureType.TOWER)


def _add_support_tower(ctx: QueenContext) -> Optional[QueenCommand]:
    if not _central_is_our_tower(ctx):
        return None
    site = _find_support_tower_site(ctx)
    if site is None:
        return None
    site.plan(StructureType.TOWER, ctx.turn)
    return Move(site.location)


def _kite(ctx: QueenContext) -> Optional[QueenCommand]:
    retreat = ctx.threats.should_kite(ctx.queen.location)
    if retreat is None:
        return None
    return Move(retreat)


def _repair_damaged_tower(ctx: QueenContext) -> Optional[QueenCommand]:
    if not _central_is_our_tower(ctx):
        return None
    central = ctx.central
    for site in ctx.ranked(safe_only=False):
        tower = site.tower
        if not site.is_friendly or tower is None or tower.health >= TOWER_REPAIR_HEALTH:
            continue
        if not central.tower.covers(central.location, site.location):
            continue
        if ctx.threats.in_range_of_enemy_tower(site.location):
            continue
        site.target_upgrade(ctx.turn)
        return Move(site.location)
    return None


def _hold_position(ctx: QueenContext) -> Optional[QueenCommand]:
    anchor = ctx.central.location
    if ctx.use_safest_spot:
        anchor = ctx.threats.safest_spot(anchor)
    return Move(anchor)


# ── Rule table ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class _QueenRule:
    name: str
    fire: Callable[[QueenContext], Optional[QueenCommand]]


_RULES: list[_QueenRule] = [
    _QueenRule("claim_touched_site",      _claim_touched_site),
    _QueenRule("upgrade_touched_mine",    _upgrade_touched_mine),
    _QueenRule("repair_touched_tower",    _repair_touched_tower),
    _QueenRule("secure_minimum_mines",    _secure_minimum_mines),
    _QueenRule("take_central_tower",      _take_central_tower),
    _QueenRule("build_wanted_barracks",   _build_wanted_barracks),
    _QueenRule("expand_mines",            _expand_mines),
    _QueenRule("reinforce_central_tower", _reinforce_central_tower),
    _QueenRule("add_support_tower",       _add_support_tower),
    _QueenRule("kite",                    _kite),
    _QueenRule("repair_damaged_tower",    _repair_damaged_tower),
    _QueenRule("hold_position",           _hold_position),
]

RULE_NAMES: tuple[str, ...] = tuple(r.name for r in _RULES)


class QueenDecisionEngine:
    """
    Walks the rule table once per turn.

    Holds the only cross-turn engine state (QueenMemory); everything else
    is read from the snapshot and the topology handed in each turn.
    """

    def __init__(self, use_safest_spot: bool = False) -> None:
        self.memory = QueenMemory()
        self.use_safest_spot = use_safest_spot

    def decide(
        self,
        snapshot: WorldSnapshot,
        topology: SiteTopology,
        threats: ThreatAssessment,
        plan: ProductionPlan,
    ) -> QueenDecision:
        ctx = QueenContext(
            snapshot=snapshot,
            topology=topology,
            threats=threats,
            plan=plan,
            memory=self.memory,
            use_safest_spot=self.use_safest_spot,
        )
        for rule in _RULES:
            command = rule.fire(ctx)
            if command is not None:
                log.decision(rule.name, command, turn=snapshot.turn)
                return QueenDecision(rule.name, command)
        # hold_position always answers; reaching this is a broken table
        raise RuntimeError("queen rule table produced no command")
