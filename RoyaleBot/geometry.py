"""
Plane geometry on python-sc2 Point2 coordinates.

Only two primitives are needed by the decision layer: the Euclidean
distance between two points and the intersection of two circles (used to
find spots covered by more than one friendly tower).
"""

from __future__ import annotations

import math

from sc2.position import Point2


def distance(a: Point2, b: Point2) -> float:
    """Euclidean distance. Symmetric, never negative."""
    return a.distance_to(b)


def circle_intersections(c0: Point2, r0: float, c1: Point2, r1: float) -> list[Point2]:
    """
    Intersection points of two circles.

    Returns an empty list when the circles are too far apart, when one
    contains the other, and when they are identical (infinitely many
    solutions). A single point is returned only for exact tangency; near
    tangency yields two points that almost coincide.
    """
    d = distance(c0, c1)
    if d == 0:
        return []
    if d > r0 + r1:
        return []
    if d < abs(r0 - r1):
        return []

    # Distance from c0 to the chord midpoint along the centre line
    a = (r0 ** 2 - r1 ** 2 + d ** 2) / (2 * d)
    h_sq = r0 ** 2 - a ** 2
    h = math.sqrt(h_sq) if h_sq > 0 else 0.0

    ux = (c1.x - c0.x) / d
    uy = (c1.y - c0.y) / d
    mid = Point2((c0.x + a * ux, c0.y + a * uy))

    if h == 0.0:
        return [mid]

    return [
        Point2((mid.x + h * uy, mid.y - h * ux)),
        Point2((mid.x - h * uy, mid.y + h * ux)),
    ]
