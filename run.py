"""
Run script for Royale Bot using config.py settings.

Reads the referee's protocol from stdin and answers on stdout, two lines
per turn, until the input ends.
"""

import logging
import subprocess
import sys
from pathlib import Path

from RoyaleBot.logger import get_logger, setup_logging
from RoyaleBot.manifests.strategy import Strategy
from RoyaleBot.protocol import EndOfGame, GameReader, write_commands
from RoyaleBot.royale_bot import RoyaleBot
from config import (
    BOT_NAME,
    CONSOLE_LOG_LEVEL,
    FORCE_STRATEGY,
    LOG_DIR,
    LOG_TO_FILE,
    RUN_LOG_ANALYZER,
    USE_SAFEST_SPOT,
)

log = get_logger()


def _forced_strategy():
    if FORCE_STRATEGY is None:
        return None
    try:
        return Strategy[FORCE_STRATEGY]
    except KeyError:
        log.warning("Invalid FORCE_STRATEGY: %s. Using the planner.", FORCE_STRATEGY)
        return None


def main():
    """Play one game on stdin/stdout"""
    console_level = logging.getLevelName(CONSOLE_LOG_LEVEL)
    if not isinstance(console_level, int):
        console_level = logging.INFO
    setup_logging(to_file=LOG_TO_FILE, log_dir=Path(LOG_DIR), console_level=console_level)

    log.info("=" * 50)
    log.info("%s", BOT_NAME)
    log.info("=" * 50)

    reader = GameReader(sys.stdin)
    bot = RoyaleBot(force_strategy=_forced_strategy(), use_safest_spot=USE_SAFEST_SPOT)

    sites = reader.read_sites()
    log.info("Map has %d sites", len(sites))

    turn = 0
    try:
        while True:
            snapshot = reader.read_turn(sites, turn)
            write_commands(sys.stdout, bot.on_step(snapshot))
            turn += 1
    except EndOfGame:
        log.info("Input closed after %d turns", turn)

    bot.on_end()
    log.info("Game finished!")

    if RUN_LOG_ANALYZER and LOG_TO_FILE:
        analyzer = Path(__file__).parent / "royale_log_analyzer.py"
        log.info("Running post-game log analyzer...")
        result = subprocess.run(
            [sys.executable, str(analyzer), "--log-dir", LOG_DIR],
            cwd=str(Path(__file__).parent),
            stdout=sys.stderr,
        )
        if result.returncode != 0:
            log.warning("Log analyzer exited with code %d", result.returncode)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        log.info("Game stopped by user")
    except Exception as e:
        log.exception("Unexpected error in main: %s", e)
        raise
