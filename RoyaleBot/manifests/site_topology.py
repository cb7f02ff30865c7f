"""
SiteTopology — one-time ranking of the map from our starting point.

Computed on the first turn from the two queens' starting positions and
fixed for the rest of the game.

Central tower
-------------
The farthest site we can reach no later than the enemy queen:

    argmax  our_distance(site)   over sites with our_distance <= enemy_distance

Ties go to the first site in input order.

Safe perimeter
--------------
All sites sorted by our_distance (stable). Everything ranked before the
central tower is "inside" our half and preferred for new construction.

Degenerate maps
---------------
If no site can be out-raced the site nearest our start becomes the
central tower (safe perimeter is then empty). A map without any site at
all raises TopologyError.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sc2.position import Point2

from RoyaleBot.logger import get_logger
from RoyaleBot.world import Site

log = get_logger()


class TopologyError(RuntimeError):
    """The map offers no site to anchor our base on."""


@dataclass(frozen=True)
class SiteTopology:
    start: Point2
    enemy_start: Point2
    central_site_id: int
    sites_by_distance: tuple[int, ...]
    safe_index: int

    @classmethod
    def compute(
        cls,
        sites: list[Site],
        start: Point2,
        enemy_start: Point2,
    ) -> "SiteTopology":
        if not sites:
            raise TopologyError("map has no buildable sites")

        xs = np.array([s.location.x for s in sites], dtype=np.float64)
        ys = np.array([s.location.y for s in sites], dtype=np.float64)
        ours = np.hypot(xs - start.x, ys - start.y)
        theirs = np.hypot(xs - enemy_start.x, ys - enemy_start.y)

        for site, dist in zip(sites, ours):
            site.start_distance = float(dist)

        order = np.argsort(ours, kind="stable")

        reachable = ours <= theirs
        if reachable.any():
            # argmax returns the first maximum, which keeps input order on ties
            masked = np.where(reachable, ours, -np.inf)
            central_pos = int(np.argmax(masked))
        else:
            central_pos = int(order[0])
            log.error(
                "No site can be reached before the enemy queen — "
                "falling back to nearest site %s as central tower",
                sites[central_pos],
            )

        sites_by_distance = tuple(sites[int(i)].site_id for i in order)
        central_id = sites[central_pos].site_id
        safe_index = sites_by_distance.index(central_id)

        topology = cls(
            start=start,
            enemy_start=enemy_start,
            central_site_id=central_id,
            sites_by_distance=sites_by_distance,
            safe_index=safe_index,
        )
        log.info(
            "Topology: central tower %s at %.0f from start, %d safe sites",
            sites[central_pos], ours[central_pos], safe_index,
        )
        return topology

    # ── Query API ─────────────────────────────────────────────────────────────

    @property
    def safe_site_ids(self) -> tuple[int, ...]:
        """Sites inside our perimeter, nearest to start first."""
        return self.sites_by_distance[:self.safe_index]

    def is_safe(self, site_id: int) -> bool:
        return site_id in self.safe_site_ids

    def ranked(self, sites: list[Site], safe_only: bool = False) -> list[Site]:
        """Sites in start-distance order, optionally restricted to the perimeter."""
        ids = self.safe_site_ids if safe_only else self.sites_by_distance
        return [sites[i] for i in ids]
