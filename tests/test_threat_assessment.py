"""Tower coverage, kiting and the safest-spot search."""
import pytest
from sc2.position import Point2

from RoyaleBot.manifests.threat_assessment import ThreatAssessment
from RoyaleBot.world import Owner, UnitType
from factories import make_site, make_snapshot, make_unit, tower

START = Point2((100, 500))


def assess(sites, units=None):
    return ThreatAssessment(make_snapshot(sites, units), start=START)


def test_enemy_tower_range():
    sites = [make_site(0, 1000, 0, owner=Owner.ENEMY, structure=tower(attack_radius=300))]
    threats = assess(sites)
    assert threats.in_range_of_enemy_tower(Point2((800, 0)))
    assert threats.in_range_of_enemy_tower(Point2((700, 0)))
    assert not threats.in_range_of_enemy_tower(Point2((600, 0)))


def test_friendly_towers_are_not_threats():
    sites = [make_site(0, 1000, 0, owner=Owner.FRIENDLY, structure=tower())]
    threats = assess(sites)
    assert not threats.in_range_of_enemy_tower(Point2((1000, 0)))
    assert threats.friendly_coverage(Point2((1000, 0))) == 1


def test_kite_when_enough_knights_are_close():
    knights = [
        make_unit(150, 500, owner=Owner.ENEMY, unit_type=UnitType.KNIGHT),
        make_unit(300, 500, owner=Owner.ENEMY, unit_type=UnitType.KNIGHT),
    ]
    threats = assess([], knights)
    assert threats.knights_near(Point2((200, 500))) == 2
    assert threats.should_kite(Point2((200, 500))) == START


def test_no_kite_below_threshold():
    units = [
        make_unit(150, 500, owner=Owner.ENEMY, unit_type=UnitType.KNIGHT),
        make_unit(160, 500, owner=Owner.ENEMY, unit_type=UnitType.ARCHER),
        make_unit(170, 500, owner=Owner.FRIENDLY, unit_type=UnitType.KNIGHT),
        make_unit(1500, 500, owner=Owner.ENEMY, unit_type=UnitType.KNIGHT),
    ]
    threats = assess([], units)
    assert threats.should_kite(Point2((200, 500))) is None


def test_kite_threshold_is_read_at_call_time(monkeypatch):
    import RoyaleBot.manifests.threat_assessment as module

    monkeypatch.setattr(module, "KITE_THRESHOLD", 1)
    threats = assess([], [make_unit(150, 500, owner=Owner.ENEMY, unit_type=UnitType.KNIGHT)])
    assert threats.should_kite(Point2((200, 500))) == START


def two_overlapping_towers():
    return [
        make_site(0, 0, 0, owner=Owner.FRIENDLY, structure=tower(attack_radius=300)),
        make_site(1, 400, 0, owner=Owner.FRIENDLY, structure=tower(attack_radius=300)),
    ]


def test_safest_spot_prefers_double_coverage():
    threats = assess(two_overlapping_towers())
    spot = threats.safest_spot(Point2((0, 0)))
    assert spot.x == pytest.approx(200.0)
    assert abs(spot.y) == pytest.approx(223.6068, abs=1e-3)
    assert threats.friendly_coverage(spot) == 2


def test_safest_spot_skips_points_under_enemy_fire():
    sites = two_overlapping_towers() + [
        make_site(2, 200, -600, owner=Owner.ENEMY, structure=tower(attack_radius=400)),
    ]
    threats = assess(sites)
    spot = threats.safest_spot(Point2((0, 0)))
    assert spot.y == pytest.approx(223.6068, abs=1e-3)


def test_safest_spot_without_towers_is_the_anchor():
    anchor = Point2((700, 300))
    assert assess([]).safest_spot(anchor) == anchor
