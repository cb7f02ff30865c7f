# ===== BOT SETTINGS =====
BOT_NAME = "Royale Queen Bot"

# ===== LOGGING =====
# Console logging always goes to stderr; stdout carries the game commands.
CONSOLE_LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR

# Set to True to also write logs/royale_<timestamp>.log next to run.py.
# Leave False on servers that do not allow file writes.
LOG_TO_FILE = False
LOG_DIR = "logs"

# ===== STRATEGY PLANNER =====
# Set to None to let the planner pick a strategy every turn (recommended).
# Set to a Strategy name string to lock the army composition for the entire
# game — useful for testing one composition against a specific opponent.
#
# Valid values (use the exact string):
#   None            — normal planner (default)
#   "RUSH"          — knights
#   "BUILD_RANGED"  — archers
#   "BUILD_HEAVY"   — giants
FORCE_STRATEGY = None

# ===== QUEEN =====
# When True the queen idles on the point covered by the most friendly towers
# instead of standing on the central tower.
USE_SAFEST_SPOT = False

# ===== POST-GAME LOG ANALYSIS =====
# When True (and LOG_TO_FILE is True), royale_log_analyzer.py runs after the
# game. It parses the session logs, generates charts (requires matplotlib),
# and appends a row to baseline.csv so you can track performance over time.
RUN_LOG_ANALYZER = False
