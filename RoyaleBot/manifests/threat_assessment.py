"""
ThreatAssessment — what can hurt the queen this turn.

Rebuilt every turn from the snapshot. Answers three questions:

  1. in_range_of_enemy_tower(point)
     Would an enemy tower hit something standing at ``point``?

  2. should_kite(queen_location)
     Are KITE_THRESHOLD or more enemy knights within KITE_DISTANCE of the
     queen? If so, return our starting point as a retreat target. No path
     planning, just a fixed fallback destination.

  3. safest_spot(anchor)
     Optional refinement of "go home": among the anchor point and every
     pairwise intersection of friendly tower ranges, pick the one covered by
     the most friendly towers and by no enemy tower.
"""

from __future__ import annotations

from itertools import combinations
from typing import Optional

from sc2.position import Point2

from RoyaleBot.geometry import circle_intersections, distance
from RoyaleBot.world import Owner, Site, StructureType, UnitType, WorldSnapshot


# ── Tuning constants ──────────────────────────────────────────────────────────

# Knights this close to the queen count toward a retreat
KITE_DISTANCE: float = 300.0

# Retreat once at least this many knights are close
KITE_THRESHOLD: int = 2

# Intersection points sit exactly on range edges; absorb float round-off
_EDGE_TOLERANCE: float = 1e-6


class ThreatAssessment:

    def __init__(self, snapshot: WorldSnapshot, start: Point2) -> None:
        self.start = start
        self._enemy_towers: list[Site] = snapshot.sites_of(Owner.ENEMY, StructureType.TOWER)
        self._friendly_towers: list[Site] = snapshot.sites_of(Owner.FRIENDLY, StructureType.TOWER)
        self._enemy_knights = [
            u.location for u in snapshot.units_of(Owner.ENEMY, UnitType.KNIGHT)
        ]

    # ── Tower coverage ────────────────────────────────────────────────────────

    def in_range_of_enemy_tower(self, point: Point2) -> bool:
        return any(s.tower.covers(s.location, point) for s in self._enemy_towers)

    def friendly_coverage(self, point: Point2) -> int:
        """Number of friendly towers whose range reaches ``point``."""
        return sum(
            1 for s in self._friendly_towers
            if s.tower.covers(s.location, point, tolerance=_EDGE_TOLERANCE)
        )

    # ── Melee pressure ────────────────────────────────────────────────────────

    def knights_near(self, point: Point2, radius: float = KITE_DISTANCE) -> int:
        return sum(1 for loc in self._enemy_knights if distance(loc, point) <= radius)

    def should_kite(self, queen_location: Point2) -> Optional[Point2]:
        if self.knights_near(queen_location) >= KITE_THRESHOLD:
            return self.start
        return None

    # ── Safe spot ─────────────────────────────────────────────────────────────

    def safest_spot(self, anchor: Point2) -> Point2:
        candidates = [anchor]
        for a, b in combinations(self._friendly_towers, 2):
            candidates.extend(circle_intersections(
                a.location, a.tower.attack_radius,
                b.location, b.tower.attack_radius,
            ))

        best, best_cover = anchor, self.friendly_coverage(anchor)
        for point in candidates[1:]:
            if self.in_range_of_enemy_tower(point):
                continue
            cover = self.friendly_coverage(point)
            if cover > best_cover:
                best, best_cover = point, cover
        return best
