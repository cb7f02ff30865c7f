"""Site state, construction orders and command rendering."""
import pytest
from sc2.position import Point2

from RoyaleBot.commands import Build, Move, SanityCheckFailed, Train, build_command
from RoyaleBot.construction import ConstructionOrder, OrderStatus
from RoyaleBot.world import Owner, StructureType, UnitType
from factories import barracks, make_site, make_snapshot, make_unit, mine, tower


# ── Construction orders ───────────────────────────────────────────────────────

def test_plan_keeps_an_identical_order():
    site = make_site(0, 0, 0)
    first = site.plan(StructureType.TOWER, turn=1)
    assert site.plan(StructureType.TOWER, turn=5) is first
    assert first.created_turn == 1

    replaced = site.plan(StructureType.MINE, turn=6)
    assert replaced is not first
    assert site.order.kind == StructureType.MINE


def test_consume_keeps_tower_and_mine_orders_as_placed():
    site = make_site(0, 0, 0)
    site.plan(StructureType.MINE, turn=0)
    order = site.consume_order()
    assert order.status is OrderStatus.PLACED
    assert site.order is order


def test_consume_clears_barracks_orders():
    site = make_site(0, 0, 0)
    site.plan(StructureType.BARRACKS, turn=0, unit_type=UnitType.GIANT)
    order = site.consume_order()
    assert order.unit_type == UnitType.GIANT
    assert site.order is None
    assert site.consume_order() is None


def test_observe_keeps_planned_order_on_empty_site():
    site = make_site(0, 0, 0)
    site.plan(StructureType.TOWER, turn=0)
    site.observe(gold=-1, max_mine_size=-1, owner=Owner.NEUTRAL, structure=None)
    assert site.order is not None


def test_observe_drops_order_when_site_turns_enemy():
    site = make_site(0, 0, 0)
    site.plan(StructureType.TOWER, turn=0)
    site.observe(gold=-1, max_mine_size=-1, owner=Owner.ENEMY, structure=tower())
    assert site.order is None


def test_observe_drops_placed_order_when_structure_is_destroyed():
    site = make_site(0, 0, 0)
    site.plan(StructureType.MINE, turn=0)
    site.consume_order()
    site.observe(gold=50, max_mine_size=3, owner=Owner.FRIENDLY, structure=mine())
    assert site.order is not None
    site.observe(gold=50, max_mine_size=3, owner=Owner.NEUTRAL, structure=None)
    assert site.order is None


def test_observe_drops_order_for_a_different_structure():
    site = make_site(0, 0, 0)
    site.plan(StructureType.TOWER, turn=0)
    site.observe(gold=-1, max_mine_size=-1, owner=Owner.FRIENDLY, structure=barracks())
    assert site.order is None


def test_order_str():
    order = ConstructionOrder(StructureType.BARRACKS, UnitType.ARCHER, created_turn=12)
    assert str(order) == "Order(BARRACKS-ARCHER | PLANNED since turn 12)"


# ── Site and snapshot views ───────────────────────────────────────────────────

def test_unknown_gold_counts_as_available():
    assert make_site(0, 0, 0, gold=-1).has_gold_above(30)
    assert not make_site(0, 0, 0, gold=30).has_gold_above(30)
    assert make_site(0, 0, 0, gold=31).has_gold_above(30)


def test_structure_views():
    site = make_site(0, 0, 0, structure=barracks(UnitType.ARCHER, cooldown=2))
    assert site.structure_type == StructureType.BARRACKS
    assert site.barracks.unit_type == UnitType.ARCHER
    assert not site.barracks.is_ready
    assert site.tower is None and site.mine is None
    assert make_site(1, 0, 0).structure_type == StructureType.NONE


def test_tower_range_edge():
    t = tower(attack_radius=100)
    assert t.covers(Point2((0, 0)), Point2((100, 0)))
    assert not t.covers(Point2((0, 0)), Point2((100.5, 0)))
    assert t.covers(Point2((0, 0)), Point2((100.5, 0)), tolerance=1)


def test_snapshot_requires_both_queens():
    snapshot = make_snapshot([])
    snapshot.units = [u for u in snapshot.units if u.owner == Owner.FRIENDLY]
    assert snapshot.queen.is_queen
    with pytest.raises(LookupError):
        snapshot.enemy_queen


def test_snapshot_counts():
    sites = [
        make_site(0, 0, 0, owner=Owner.FRIENDLY, structure=barracks(UnitType.KNIGHT)),
        make_site(1, 0, 0, owner=Owner.FRIENDLY, structure=barracks(UnitType.KNIGHT)),
        make_site(2, 0, 0, owner=Owner.ENEMY, structure=barracks(UnitType.GIANT)),
    ]
    units = [
        make_unit(0, 0, unit_type=UnitType.ARCHER, health=3),
        make_unit(0, 0, unit_type=UnitType.ARCHER, health=30),
    ]
    snapshot = make_snapshot(sites, units)
    assert snapshot.barracks_counts(Owner.FRIENDLY) == {UnitType.KNIGHT: 2}
    assert snapshot.barracks_counts(Owner.ENEMY) == {UnitType.GIANT: 1}
    assert snapshot.creep_counts(Owner.FRIENDLY) == {UnitType.ARCHER: 2}
    assert snapshot.creep_counts(Owner.FRIENDLY, min_health=10) == {UnitType.ARCHER: 1}


# ── Commands ──────────────────────────────────────────────────────────────────

def test_command_text():
    assert str(Move(Point2((99.5, 10.4)))) == "MOVE 100 10"
    assert str(Build(3, StructureType.MINE)) == "BUILD 3 MINE"
    assert str(Build(3, StructureType.BARRACKS, UnitType.GIANT)) == "BUILD 3 BARRACKS-GIANT"
    assert str(SanityCheckFailed("why")) == "SANITYCHECKFAILED"
    assert str(Train()) == "TRAIN"
    assert str(Train((4, 2))) == "TRAIN 4 2"


def test_build_command_rejects_unknown_requests():
    assert build_command(1, StructureType.TOWER) == Build(1, StructureType.TOWER)
    assert isinstance(build_command(1, StructureType.BARRACKS), SanityCheckFailed)
    assert isinstance(build_command(1, StructureType.BARRACKS, UnitType.QUEEN), SanityCheckFailed)
    assert isinstance(build_command(1, StructureType.NONE), SanityCheckFailed)
