"""Small builders for hand-made game states."""
from typing import Optional

from sc2.position import Point2

from RoyaleBot.world import (
    Barracks,
    Mine,
    Owner,
    Site,
    Structure,
    Tower,
    Unit,
    UnitType,
    WorldSnapshot,
)


def make_site(
    site_id: int,
    x: float,
    y: float,
    radius: int = 60,
    owner: Owner = Owner.NEUTRAL,
    structure: Optional[Structure] = None,
    gold: int = -1,
    max_mine_size: int = -1,
) -> Site:
    return Site(
        site_id=site_id,
        location=Point2((x, y)),
        radius=radius,
        gold=gold,
        max_mine_size=max_mine_size,
        owner=owner,
        structure=structure,
    )


def make_unit(
    x: float,
    y: float,
    owner: Owner = Owner.FRIENDLY,
    unit_type: UnitType = UnitType.QUEEN,
    health: int = 100,
) -> Unit:
    return Unit(location=Point2((x, y)), owner=owner, unit_type=unit_type, health=health)


def tower(health: int = 800, attack_radius: int = 300) -> Tower:
    return Tower(health=health, attack_radius=attack_radius)


def barracks(unit_type: UnitType = UnitType.KNIGHT, cooldown: int = 0) -> Barracks:
    return Barracks(cooldown=cooldown, unit_type=unit_type)


def mine(income_rate: int = 1) -> Mine:
    return Mine(income_rate=income_rate)


def make_snapshot(
    sites: list[Site],
    units: Optional[list[Unit]] = None,
    gold: int = 100,
    touched: Optional[int] = None,
    turn: int = 0,
    queen_at: tuple = (100, 500),
    enemy_queen_at: tuple = (1800, 500),
) -> WorldSnapshot:
    """Snapshot with both queens present unless ``units`` already has them."""
    units = list(units or [])
    if not any(u.is_queen and u.owner == Owner.FRIENDLY for u in units):
        units.append(make_unit(*queen_at))
    if not any(u.is_queen and u.owner == Owner.ENEMY for u in units):
        units.append(make_unit(*enemy_queen_at, owner=Owner.ENEMY))
    return WorldSnapshot(
        turn=turn,
        gold=gold,
        touched_site_id=touched,
        sites=sites,
        units=units,
    )
