"""
Line protocol between the referee and the bot.

Startup block (read once)
-------------------------
    numSites
    siteId x y radius                       × numSites

Turn block (read every turn)
----------------------------
    gold touchedSite                        (touchedSite = -1 when none)
    siteId gold maxMineSize structureType owner param1 param2   × numSites
    numUnits
    x y owner unitType health               × numUnits

param1/param2 are decoded per structure kind:
    tower    → health, attack radius
    barracks → turns until it can train again, trained unit type
    mine     → income rate, (unused)
"""

from __future__ import annotations

from typing import IO, Optional, Sequence

from sc2.position import Point2

from RoyaleBot.world import (
    Barracks,
    Mine,
    Owner,
    Site,
    Structure,
    StructureType,
    Tower,
    Unit,
    UnitType,
    WorldSnapshot,
)

NO_TOUCHED_SITE = -1


class EndOfGame(Exception):
    """The referee closed our input; the match is over."""


class ProtocolError(ValueError):
    """A line did not match the expected format."""


def decode_structure(structure_code: int, param1: int, param2: int) -> Optional[Structure]:
    """Turn the overloaded wire fields into a structure variant."""
    try:
        kind = StructureType(structure_code)
        if kind == StructureType.NONE:
            return None
        if kind == StructureType.TOWER:
            return Tower(health=param1, attack_radius=param2)
        if kind == StructureType.BARRACKS:
            return Barracks(cooldown=param1, unit_type=UnitType(param2))
        return Mine(income_rate=param1)
    except ValueError as exc:
        raise ProtocolError(
            f"bad structure fields ({structure_code}, {param1}, {param2})"
        ) from exc


class GameReader:
    """Reads the startup block and then one turn block per call."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream

    def read_sites(self) -> list[Site]:
        (count,) = self._ints(1)
        sites: list[Optional[Site]] = [None] * count
        for _ in range(count):
            site_id, x, y, radius = self._ints(4)
            if not 0 <= site_id < count:
                raise ProtocolError(f"site id {site_id} outside 0..{count - 1}")
            sites[site_id] = Site(site_id=site_id, location=Point2((x, y)), radius=radius)
        if any(s is None for s in sites):
            raise ProtocolError("site ids are not dense")
        return sites

    def read_turn(self, sites: list[Site], turn: int) -> WorldSnapshot:
        gold, touched = self._ints(2)
        if touched != NO_TOUCHED_SITE and not 0 <= touched < len(sites):
            raise ProtocolError(f"touched site {touched} does not exist")

        for _ in range(len(sites)):
            site_id, site_gold, max_size, structure_code, owner, param1, param2 = self._ints(7)
            try:
                site = sites[site_id]
                site_owner = Owner(owner)
            except (IndexError, ValueError) as exc:
                raise ProtocolError(f"bad site line for id {site_id}") from exc
            site.observe(
                gold=site_gold,
                max_mine_size=max_size,
                owner=site_owner,
                structure=decode_structure(structure_code, param1, param2),
            )

        (unit_count,) = self._ints(1)
        units = []
        for _ in range(unit_count):
            x, y, owner, unit_type, health = self._ints(5)
            try:
                units.append(Unit(
                    location=Point2((x, y)),
                    owner=Owner(owner),
                    unit_type=UnitType(unit_type),
                    health=health,
                ))
            except ValueError as exc:
                raise ProtocolError(f"bad unit line {x} {y} {owner} {unit_type} {health}") from exc

        return WorldSnapshot(
            turn=turn,
            gold=gold,
            touched_site_id=None if touched == NO_TOUCHED_SITE else touched,
            sites=sites,
            units=units,
        )

    # ── Internal ──────────────────────────────────────────────────────────────

    def _ints(self, expected: int) -> list[int]:
        line = self._stream.readline()
        if not line:
            raise EndOfGame()
        fields = line.split()
        if len(fields) != expected:
            raise ProtocolError(f"expected {expected} fields, got {line.strip()!r}")
        try:
            return [int(f) for f in fields]
        except ValueError as exc:
            raise ProtocolError(f"non-integer field in {line.strip()!r}") from exc


def write_commands(stream: IO[str], commands: Sequence[object]) -> None:
    """Print one line per command and flush so the referee sees them now."""
    for command in commands:
        stream.write(f"{command}\n")
    stream.flush()
