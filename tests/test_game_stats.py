"""End-of-game statistics."""
import logging

from sc2.position import Point2

from RoyaleBot.commands import Move, SanityCheckFailed, Train
from RoyaleBot.game_stats import GameStatsTracker, infer_result
from RoyaleBot.manifests.queen_engine import QueenDecision
from RoyaleBot.world import Owner, UnitType
from factories import barracks, make_site, make_snapshot, make_unit, mine


def test_peaks_and_counters():
    stats = GameStatsTracker()
    rich = make_snapshot(
        [make_site(0, 0, 0, owner=Owner.FRIENDLY, structure=mine()),
         make_site(1, 0, 0, owner=Owner.FRIENDLY, structure=barracks())],
        [make_unit(0, 0, unit_type=UnitType.KNIGHT)] * 4,
        gold=400,
    )
    poor = make_snapshot([make_site(0, 0, 0)], gold=10, turn=1)

    stats.update(rich, QueenDecision("hold_position", Move(Point2((1, 1)))), Train((1,)))
    stats.update(poor, QueenDecision("claim_touched_site", SanityCheckFailed("x")), Train())
    stats.record_pivot()

    assert stats.turns_played == 2
    assert stats.peak_gold == 400
    assert stats.peak_creeps == 4
    assert stats.peak_mines == 1
    assert stats.peak_barracks == 1
    assert stats.peak_towers == 0
    assert stats.units_queued == 1
    assert stats.sanity_failures == 1
    assert stats.strategy_switches == 1
    assert stats.rule_counts == {"hold_position": 1, "claim_touched_site": 1}


def test_finalize_logs_report(caplog):
    stats = GameStatsTracker()
    last = make_snapshot([], [make_unit(1800, 500, owner=Owner.ENEMY, health=0)], turn=99)
    stats.update(last, QueenDecision("kite", Move(Point2((0, 0)))), Train())

    with caplog.at_level(logging.DEBUG, logger="royale"):
        result = stats.finalize(last, "Rush")

    assert result == "victory"
    report = caplog.text
    assert "GAME_STATS" in report
    assert "END-OF-GAME STATS" in report
    assert "Final Strategy" in report and "Rush" in report
    assert "kite" in report


def test_infer_result():
    alive = make_snapshot([])
    assert infer_result(alive) == "unknown"
    assert infer_result(None) == "unknown"
    dead = make_snapshot([], [make_unit(100, 500, health=0)])
    assert infer_result(dead) == "defeat"
