"""
Royale Bot - Main Bot Class

The per-turn loop:
- Site topology (first turn only)
- Threat assessment
- Army composition planner (named strategy)
- Queen decision engine (priority rule table)
- Train dispatcher
"""

from __future__ import annotations

from typing import Optional

from RoyaleBot.commands import QueenCommand, Train
from RoyaleBot.game_stats import GameStatsTracker
from RoyaleBot.logger import get_logger
from RoyaleBot.manifests.army_planner import ArmyCompositionPlanner, PlannerInputs
from RoyaleBot.manifests.queen_engine import QueenDecisionEngine
from RoyaleBot.manifests.site_topology import SiteTopology
from RoyaleBot.manifests.strategy import Strategy
from RoyaleBot.manifests.threat_assessment import ThreatAssessment
from RoyaleBot.manifests.train_dispatcher import dispatch_training
from RoyaleBot.world import WorldSnapshot


log = get_logger()


class RoyaleBot:
    """
    Owns everything that lives for one game and turns each snapshot into
    the two commands the referee expects.
    """

    def __init__(
        self,
        force_strategy: Optional[Strategy] = None,
        use_safest_spot: bool = False,
    ) -> None:
        self.topology: Optional[SiteTopology] = None
        self.planner = ArmyCompositionPlanner(forced=force_strategy)
        self.queen_engine = QueenDecisionEngine(use_safest_spot=use_safest_spot)
        self.game_stats = GameStatsTracker()

        self.current_strategy: Optional[Strategy] = None
        self.last_snapshot: Optional[WorldSnapshot] = None

    def on_step(self, snapshot: WorldSnapshot) -> tuple[QueenCommand, Train]:
        if self.topology is None:
            self._on_start(snapshot)

        threats = ThreatAssessment(snapshot, start=self.topology.start)

        plan = self.planner.plan(PlannerInputs.from_snapshot(snapshot))
        self.change_strategy(plan.strategy, turn=snapshot.turn)

        decision = self.queen_engine.decide(snapshot, self.topology, threats, plan)
        training = dispatch_training(snapshot, plan.target_unit)

        self.game_stats.update(snapshot, decision, training.command)
        self.last_snapshot = snapshot
        return decision.command, training.command

    def change_strategy(self, new_strategy: Strategy, turn: Optional[int] = None) -> None:
        if new_strategy == self.current_strategy:
            return

        old_strategy = self.current_strategy
        self.current_strategy = new_strategy
        if old_strategy is None:
            return

        log.game_event("PIVOT", f"{old_strategy.value} → {new_strategy.value}", turn=turn)
        self.game_stats.record_pivot()

    def on_end(self) -> str:
        """Clean shutdown once the referee stops talking to us."""
        final = self.current_strategy.value if self.current_strategy else "none"
        result = self.game_stats.finalize(self.last_snapshot, final)
        turn = self.last_snapshot.turn if self.last_snapshot is not None else None
        log.game_event("GAME_END", f"result={result} | final_strategy={final}", turn=turn)
        return result

    # ── Private ──────────────────────────────────────────────────────────────

    def _on_start(self, snapshot: WorldSnapshot) -> None:
        start = snapshot.queen.location
        enemy_start = snapshot.enemy_queen.location
        log.info("Our queen starts at %s, enemy at %s", start, enemy_start, turn=snapshot.turn)
        self.topology = SiteTopology.compute(snapshot.sites, start, enemy_start)

        plan = self.planner.plan(PlannerInputs.from_snapshot(snapshot))
        self.current_strategy = plan.strategy
        log.game_event("GAME_START", f"Strategy: {plan.strategy.value}", turn=snapshot.turn)
