"""
Turn commands and their wire text.

Every turn the bot prints exactly two lines: one queen command (MOVE or
BUILD, or SANITYCHECKFAILED when the decision layer produced something it
cannot express) and one TRAIN command. Each command renders itself via
str().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sc2.position import Point2

from RoyaleBot.logger import get_logger
from RoyaleBot.world import StructureType, UnitType

log = get_logger()


_BARRACKS_SUFFIX: dict[UnitType, str] = {
    UnitType.KNIGHT: "BARRACKS-KNIGHT",
    UnitType.ARCHER: "BARRACKS-ARCHER",
    UnitType.GIANT:  "BARRACKS-GIANT",
}


@dataclass(frozen=True)
class Move:
    target: Point2

    def __str__(self) -> str:
        return f"MOVE {int(round(self.target.x))} {int(round(self.target.y))}"


@dataclass(frozen=True)
class Build:
    site_id: int
    structure: StructureType
    unit_type: Optional[UnitType] = None

    def __str__(self) -> str:
        if self.structure == StructureType.BARRACKS:
            return f"BUILD {self.site_id} {_BARRACKS_SUFFIX[self.unit_type]}"
        return f"BUILD {self.site_id} {self.structure.name}"


@dataclass(frozen=True)
class SanityCheckFailed:
    reason: str = ""

    def __str__(self) -> str:
        return "SANITYCHECKFAILED"


@dataclass(frozen=True)
class Train:
    site_ids: tuple[int, ...] = ()

    def __str__(self) -> str:
        if not self.site_ids:
            return "TRAIN"
        return "TRAIN " + " ".join(str(i) for i in self.site_ids)


QueenCommand = Union[Move, Build, SanityCheckFailed]


def build_command(
    site_id: int,
    structure: StructureType,
    unit_type: Optional[UnitType] = None,
    turn: Optional[int] = None,
) -> QueenCommand:
    """
    Validated BUILD factory.

    Anything outside the known structure / barracks enumeration becomes a
    SanityCheckFailed command plus a warning rather than a guessed build.
    """
    if structure in (StructureType.TOWER, StructureType.MINE):
        return Build(site_id, structure)
    if structure == StructureType.BARRACKS and unit_type in _BARRACKS_SUFFIX:
        return Build(site_id, structure, unit_type)

    reason = f"cannot build {structure!r} / {unit_type!r} on site {site_id}"
    log.warning("Sanity check failed: %s", reason, turn=turn)
    return SanityCheckFailed(reason)
