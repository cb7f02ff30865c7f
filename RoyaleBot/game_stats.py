"""
GameStatsTracker — end-of-game performance metrics.

Accumulates statistics throughout the match and writes a formatted summary
to the log at game end. The summary is emitted as a GAME_STATS game-event
so it appears at GAME level in the log file and is easy to grep.

Tracked statistics
------------------
Peaks (best values seen at any single turn):
  peak_gold           Largest gold bank.
  peak_creeps         Most friendly creeps alive at once.
  peak_mines          Most mines owned at once.
  peak_towers         Most towers owned at once.
  peak_barracks       Most barracks owned at once.

Activity:
  strategy_switches   Number of PIVOT events.
  rule_counts         How often each queen rule fired.
  sanity_failures     SANITYCHECKFAILED commands emitted.
  units_queued        Site ids sent in TRAIN commands.

Result (inferred from the last snapshot):
  victory   enemy queen dead,  defeat  our queen dead,  otherwise unknown.

Integration
-----------
    # __init__
    self.game_stats = GameStatsTracker()

    # every turn
    self.game_stats.update(snapshot, decision, train)

    # once, when input ends
    self.game_stats.finalize(last_snapshot, final_strategy)
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Optional

from RoyaleBot.commands import SanityCheckFailed
from RoyaleBot.logger import get_logger
from RoyaleBot.world import Owner, StructureType, WorldSnapshot

log = get_logger()

if TYPE_CHECKING:
    from RoyaleBot.commands import Train
    from RoyaleBot.manifests.queen_engine import QueenDecision


class GameStatsTracker:
    """
    Lightweight accumulator for all end-game statistics.

    Call update()   every turn.
    Call record_pivot() whenever the strategy changes.
    Call finalize() once when the game is over.
    """

    def __init__(self) -> None:
        # ── Peak stats ─────────────────────────────────────────────────────
        self.peak_gold: int = 0
        self.peak_creeps: int = 0
        self.peak_mines: int = 0
        self.peak_towers: int = 0
        self.peak_barracks: int = 0

        # ── Activity counters ──────────────────────────────────────────────
        self.turns_played: int = 0
        self.strategy_switches: int = 0
        self.rule_counts: Counter = Counter()
        self.sanity_failures: int = 0
        self.units_queued: int = 0

    # ── Per-turn sampling ─────────────────────────────────────────────────────

    def update(
        self,
        snapshot: WorldSnapshot,
        decision: "QueenDecision",
        train: "Train",
    ) -> None:
        self.turns_played += 1

        self.peak_gold = max(self.peak_gold, snapshot.gold)
        creeps = sum(snapshot.creep_counts(Owner.FRIENDLY).values())
        self.peak_creeps = max(self.peak_creeps, creeps)
        self.peak_mines = max(
            self.peak_mines, len(snapshot.sites_of(Owner.FRIENDLY, StructureType.MINE)))
        self.peak_towers = max(
            self.peak_towers, len(snapshot.sites_of(Owner.FRIENDLY, StructureType.TOWER)))
        self.peak_barracks = max(
            self.peak_barracks, len(snapshot.sites_of(Owner.FRIENDLY, StructureType.BARRACKS)))

        self.rule_counts[decision.rule] += 1
        if isinstance(decision.command, SanityCheckFailed):
            self.sanity_failures += 1
        self.units_queued += len(train.site_ids)

    def record_pivot(self) -> None:
        self.strategy_switches += 1

    # ── Finalization ──────────────────────────────────────────────────────────

    def finalize(self, last: Optional[WorldSnapshot], final_strategy: str) -> str:
        """Log the full report and return the inferred result."""
        result = infer_result(last)
        report = self._format_report(result, final_strategy)
        turn = last.turn if last is not None else None
        log.game_event("GAME_STATS", "\n" + report, turn=turn)
        return result

    def _format_report(self, result: str, final_strategy: str) -> str:
        W = 52

        def row(label: str, value: str) -> str:
            return f"  {label:<24} : {value}"

        sep_thick = "═" * W
        sep_thin  = "─" * W

        lines = [
            sep_thick,
            "  END-OF-GAME STATS",
            sep_thick,
            row("Result",            result),
            row("Turns",             str(self.turns_played)),
            row("Final Strategy",    final_strategy),
            row("Strategy Switches", str(self.strategy_switches)),
        ]

        lines += [
            sep_thin,
            "  PEAKS  (best values achieved during match)",
            row("Peak Gold",         str(self.peak_gold)),
            row("Peak Creeps",       str(self.peak_creeps)),
            row("Peak Mines",        str(self.peak_mines)),
            row("Peak Towers",       str(self.peak_towers)),
            row("Peak Barracks",     str(self.peak_barracks)),
        ]

        lines += [
            sep_thin,
            "  QUEEN  (rules fired)",
        ]
        for rule, count in self.rule_counts.most_common():
            lines.append(row(rule, str(count)))

        lines += [
            sep_thin,
            row("Units Queued",      str(self.units_queued)),
            row("Sanity Failures",   str(self.sanity_failures)),
            sep_thick,
        ]
        return "\n".join(lines)


# ── Module-level helpers ───────────────────────────────────────────────────────

def infer_result(last: Optional[WorldSnapshot]) -> str:
    if last is None:
        return "unknown"
    queens = {u.owner: u.health for u in last.units if u.is_queen}
    if queens.get(Owner.FRIENDLY, 0) <= 0:
        return "defeat"
    if queens.get(Owner.ENEMY, 0) <= 0:
        return "victory"
    return "unknown"
