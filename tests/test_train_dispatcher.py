"""Barracks selection for the TRAIN line."""
from RoyaleBot.manifests.train_dispatcher import UNIT_COSTS, dispatch_training
from RoyaleBot.world import Owner, UnitType
from factories import barracks, make_site, make_snapshot

K, A, G = UnitType.KNIGHT, UnitType.ARCHER, UnitType.GIANT


def snapshot_with(*structures, gold):
    sites = [
        make_site(i, 100 + 100 * i, 500, owner=Owner.FRIENDLY, structure=s)
        for i, s in enumerate(structures)
    ]
    sites.append(make_site(len(sites), 900, 900, owner=Owner.ENEMY, structure=barracks(K)))
    return make_snapshot(sites, gold=gold)


def test_ready_knight_barracks_trains_and_pays():
    result = dispatch_training(snapshot_with(barracks(K), gold=100), K)
    assert str(result.command) == "TRAIN 0"
    assert result.gold_left == 100 - UNIT_COSTS[K]


def test_target_then_cheapest_when_gold_allows():
    result = dispatch_training(snapshot_with(barracks(K), barracks(A), gold=200), A)
    assert result.command.site_ids == (1, 0)
    assert result.gold_left == 200 - UNIT_COSTS[A] - UNIT_COSTS[K]


def test_two_knight_barracks_both_train():
    result = dispatch_training(snapshot_with(barracks(K), barracks(K), gold=200), K)
    assert result.command.site_ids == (0, 1)
    assert result.gold_left == 40


def test_busy_target_barracks_does_not_block_knights():
    snapshot = snapshot_with(barracks(K), barracks(A, cooldown=3), gold=300)
    result = dispatch_training(snapshot, A)
    assert str(result.command) == "TRAIN 0"
    assert result.gold_left == 300 - UNIT_COSTS[K]


def test_missing_target_barracks_still_trains_knights():
    result = dispatch_training(snapshot_with(barracks(K), gold=100), G)
    assert result.command.site_ids == (0,)
    assert result.gold_left == 20


def test_not_enough_gold():
    result = dispatch_training(snapshot_with(barracks(K), gold=UNIT_COSTS[K] - 1), K)
    assert str(result.command) == "TRAIN"


def test_enemy_barracks_are_never_used():
    result = dispatch_training(snapshot_with(gold=500), K)
    assert result.command.site_ids == ()


def test_queen_is_not_trainable():
    result = dispatch_training(snapshot_with(barracks(K), gold=500), UnitType.QUEEN)
    assert str(result.command) == "TRAIN"
    assert result.gold_left == 500
