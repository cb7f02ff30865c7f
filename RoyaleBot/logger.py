"""
RoyaleBot Logger - levelled logging that never touches stdout.

stdout is the command channel to the game referee, so everything the bot
wants to say about itself goes to stderr and, optionally, to a rotating
log file you can review after the match.

Usage
-----
    from RoyaleBot.logger import get_logger

    log = get_logger()          # module-level logger
    log.info("Game started")
    log.debug("Topology: %s", topology)
    log.warning("No free mine site, falling through")

    # Game-specific helpers
    log.game_event("PIVOT", "Rush → Build Ranged", turn=42)
    log.decision("take_central_tower", "MOVE 540 310", turn=3)

Handlers are attached once by run.py through setup_logging(). Until then
the logger has no handlers and Python's last-resort handler prints
warnings and errors to stderr, which is what the test suite relies on.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# ── Configuration ────────────────────────────────────────────────────────────

LOG_DIR          = Path("logs")         # Relative to CWD (i.e. project root)
LOG_LEVEL        = logging.DEBUG        # File log level  (very verbose)
CONSOLE_LEVEL    = logging.INFO         # Console level   (INFO and above)
LOG_BACKUP_COUNT = 10                   # How many old log files to keep
MAX_BYTES        = 5 * 1024 * 1024      # 5 MB per file before rotating


# ── Custom log levels ─────────────────────────────────────────────────────────

GAME_EVENT_LEVEL = 25   # between INFO (20) and WARNING (30)
DECISION_LEVEL   = 15   # between DEBUG (10) and INFO (20)

logging.addLevelName(GAME_EVENT_LEVEL, "GAME")
logging.addLevelName(DECISION_LEVEL,   "DECISION")


# ── Custom formatter ──────────────────────────────────────────────────────────

class RoyaleFormatter(logging.Formatter):
    """
    Adds a [turn] column when a 'turn' extra field is present, so log lines
    can be correlated directly to a specific game turn.

    Example output:
        2026-10-17 21:14:03.412 | INFO    |        - | Logger initialised
        2026-10-17 21:14:05.001 | GAME    |       42 | PIVOT | Rush → Build Ranged
        2026-10-17 21:14:05.002 | DECISIO |       42 | add_support_tower | MOVE 410 560
    """

    BASE_FMT  = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(turn_col)8s | %(message)s"
    DATE_FMT  = "%Y-%m-%d %H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        turn = getattr(record, "turn", None)
        record.turn_col = "-" if turn is None else str(turn)
        record.levelname = record.levelname[:7]  # keep column width fixed
        return super().format(record)


# ── Logger factory ────────────────────────────────────────────────────────────

_logger_instance: Optional["RoyaleLogger"] = None


def get_logger(name: str = "royale") -> "RoyaleLogger":
    """
    Return the singleton RoyaleLogger, creating it on first call.

    Call this once at module level in each file that needs logging:

        log = get_logger()
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = RoyaleLogger(name)
    return _logger_instance


def setup_logging(
    to_file: bool = False,
    log_dir: Path = LOG_DIR,
    console_level: int = CONSOLE_LEVEL,
) -> Optional[Path]:
    """
    Attach the console (stderr) handler and, if asked, the rotating file
    handler. Returns the log file path when one was created.
    """
    return get_logger().attach_handlers(
        to_file=to_file,
        log_dir=Path(log_dir),
        console_level=console_level,
    )


class RoyaleLogger:
    """
    Thin wrapper around Python's standard logging that adds game-specific
    helpers and knows how to wire up its own handlers.
    """

    def __init__(self, name: str = "royale") -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(LOG_LEVEL)
        self.log_file: Optional[Path] = None

    # ── Setup ─────────────────────────────────────────────────────────────────

    def attach_handlers(
        self,
        to_file: bool,
        log_dir: Path,
        console_level: int,
    ) -> Optional[Path]:
        # Avoid adding duplicate handlers if setup runs twice
        if self._logger.handlers:
            return self.log_file

        formatter = RoyaleFormatter(
            fmt     = RoyaleFormatter.BASE_FMT,
            datefmt = RoyaleFormatter.DATE_FMT,
        )

        # ── Console (stderr) handler ───────────────────────────────────────
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        self._logger.addHandler(console_handler)

        # ── Rotating file handler ──────────────────────────────────────────
        if to_file:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = log_dir / f"royale_{timestamp}.log"

            file_handler = logging.handlers.RotatingFileHandler(
                filename    = self.log_file,
                maxBytes    = MAX_BYTES,
                backupCount = LOG_BACKUP_COUNT,
                encoding    = "utf-8",
            )
            file_handler.setLevel(LOG_LEVEL)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

            self._logger.info(
                "Logger initialised — writing to %s",
                self.log_file.resolve(),
            )

        return self.log_file

    # ── Standard log levels ───────────────────────────────────────────────────

    def debug(self, msg: str, *args, turn: Optional[int] = None, **kwargs) -> None:
        self._logger.debug(msg, *args, extra={"turn": turn}, **kwargs)

    def info(self, msg: str, *args, turn: Optional[int] = None, **kwargs) -> None:
        self._logger.info(msg, *args, extra={"turn": turn}, **kwargs)

    def warning(self, msg: str, *args, turn: Optional[int] = None, **kwargs) -> None:
        self._logger.warning(msg, *args, extra={"turn": turn}, **kwargs)

    def error(self, msg: str, *args, turn: Optional[int] = None, **kwargs) -> None:
        self._logger.error(msg, *args, extra={"turn": turn}, **kwargs)

    def exception(self, msg: str, *args, turn: Optional[int] = None, **kwargs) -> None:
        self._logger.exception(msg, *args, extra={"turn": turn}, **kwargs)

    # ── Game-specific helpers ─────────────────────────────────────────────────

    def game_event(
        self,
        event_type: str,
        detail: str,
        turn: Optional[int] = None,
    ) -> None:
        """
        Log a significant named game event (strategy pivots, game start/end, etc.).

        Example:
            log.game_event("PIVOT", "Rush → Build Heavy", turn=120)
            log.game_event("GAME_END", "result=victory | final_strategy=Rush", turn=210)
        """
        self._logger.log(
            GAME_EVENT_LEVEL,
            "%s | %s",
            event_type.upper(),
            detail,
            extra={"turn": turn},
        )

    def decision(
        self,
        rule_name: str,
        command: object,
        turn: Optional[int] = None,
    ) -> None:
        """
        Log which queen rule fired and the command it produced.

        Example:
            log.decision("claim_touched_site", "BUILD 4 TOWER", turn=17)
        """
        self._logger.log(
            DECISION_LEVEL,
            "%s | %s",
            rule_name,
            command,
            extra={"turn": turn},
        )
