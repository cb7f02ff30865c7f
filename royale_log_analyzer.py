#!/usr/bin/env python3
"""
Royale Bot Log Analyzer
Reads logs from ./logs, detects new sessions, generates charts, and
updates a baseline CSV.

Queen rules and end-of-game stat rows are discovered from the logs, so
adding a rule or a stat line to the bot needs no change here.
"""

import argparse
import csv
import json
import os
import re
from collections import defaultdict
from datetime import datetime
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker

# ─────────────────────────────────────────────────────────────────────────────
# CONFIGURATION
# ─────────────────────────────────────────────────────────────────────────────
_HERE              = Path(__file__).parent
DEFAULT_LOG_DIR    = str(_HERE / "logs")
BASELINE_FILE      = str(_HERE / "baseline.csv")
SEEN_SESSIONS_FILE = str(_HERE / "seen_sessions.json")
CHARTS_DIR         = str(_HERE / "charts")

# ── Core log-line structure (timestamp | level | turn | message) ──────────────
LOG_LINE_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d+)"   # timestamp
    r"\s*\|\s*(\w+)"                                    # level
    r"\s*\|\s*(\S+)"                                    # turn
    r"\s*\|(.*)"                                        # message
)

# The formatter clips level names to 7 characters
DECISION_LEVEL = "DECISIO"

GAME_START_RE = re.compile(r"GAME_START \| Strategy: (.+)")
PIVOT_RE      = re.compile(r"PIVOT \| (.+?) → (.+)")
GAME_END_RE   = re.compile(r"GAME_END \| result=(\S+) \| final_strategy=(.+)")

# ── End-of-game stats block: capture "  Label  : value" ─────────────────────
STAT_LINE_RE = re.compile(
    r"^\s{1,6}"                         # leading indent (stats lines are indented)
    r"([A-Za-z][A-Za-z0-9_ /()%\-]+?)"  # label
    r"\s*:\s*"                           # colon separator
    r"(.+?)\s*$"                         # value
)

# Decorative lines and section headers inside the stats block
STAT_NOISE_RE = re.compile(r"^[\s═─\-=]+$|END-OF-GAME STATS|^\s*(PEAKS|QUEEN)\s*")


def _label_to_key(label: str) -> str:
    """Convert a human-readable stat label to a safe CSV column key.
    e.g. 'Peak Gold'          → 'stat_peak_gold'
         'take_central_tower' → 'stat_take_central_tower'
    """
    key = label.lower()
    key = re.sub(r"[^a-z0-9]+", "_", key)
    key = key.strip("_")
    return f"stat_{key}"

# ─────────────────────────────────────────────────────────────────────────────
# FILE GROUPING
# ─────────────────────────────────────────────────────────────────────────────

def group_log_files(log_dir: Path) -> dict[str, list[Path]]:
    """Group log files by session key (basename without .N suffix)."""
    groups: dict[str, list[Path]] = defaultdict(list)
    for f in sorted(log_dir.glob("royale_*.log*")):
        m = re.match(r"(royale_\d{8}_\d{6}\.log)", f.name)
        if m:
            groups[m.group(1)].append(f)
    # rotated backups hold older lines: .log.3 < .log.2 < .log.1 < .log
    for key in groups:
        groups[key].sort(key=lambda p: (
            -int(p.suffix.lstrip(".")) if re.match(r"\.\d+$", p.suffix) else 0
        ))
    return dict(groups)


def load_seen_sessions(path: str) -> set:
    if os.path.exists(path):
        with open(path) as f:
            return set(json.load(f))
    return set()


def save_seen_sessions(seen: set, path: str):
    with open(path, "w") as f:
        json.dump(sorted(seen), f, indent=2)


# ─────────────────────────────────────────────────────────────────────────────
# LOG PARSING
# ─────────────────────────────────────────────────────────────────────────────

def parse_lines(lines_raw: list[str]) -> dict:
    """Parse raw log lines of one session into structured data."""
    rule_by_turn:   dict[int, str]   = {}
    strategy_by_turn: dict[int, str] = {}
    rule_totals:    dict[str, int]   = defaultdict(int)
    level_counts:   dict[str, int]   = defaultdict(int)
    end_stats:      dict[str, str]   = {}

    exit_condition: str = "crash_or_incomplete"
    strategy:       str = ""
    final_strategy: str = ""
    pivots:         int = 0
    in_stats_block: bool = False

    for raw in lines_raw:
        line = raw.rstrip("\n")
        m = LOG_LINE_RE.match(line)

        if not m:
            # Continuation line — only relevant inside the stats block
            if in_stats_block:
                _try_parse_stat_line(line, end_stats)
            continue

        level, turn_str, msg = m.group(2), m.group(3).strip(), m.group(4).strip()
        in_stats_block = False
        level_counts[level] += 1

        try:
            turn = int(turn_str)
        except ValueError:
            turn = None

        gs = GAME_START_RE.search(msg)
        if gs:
            strategy = gs.group(1).strip()
            if turn is not None:
                strategy_by_turn[turn] = strategy

        pv = PIVOT_RE.search(msg)
        if pv:
            pivots += 1
            if turn is not None:
                strategy_by_turn[turn] = pv.group(2).strip()

        ge = GAME_END_RE.search(msg)
        if ge:
            exit_condition = ge.group(1)
            final_strategy = ge.group(2).strip()

        if level == DECISION_LEVEL and turn is not None:
            # message format: "rule_name | COMMAND"
            rule_name = msg.split("|")[0].strip()
            rule_totals[rule_name] += 1
            rule_by_turn[turn] = rule_name

        if "GAME_STATS" in msg:
            in_stats_block = True

    return {
        "strategy":         strategy or final_strategy,
        "final_strategy":   final_strategy,
        "exit_condition":   exit_condition,
        "pivots":           pivots,
        "end_stats":        end_stats,
        "rule_totals":      dict(rule_totals),
        "rule_by_turn":     rule_by_turn,
        "strategy_by_turn": strategy_by_turn,
        "level_counts":     dict(level_counts),
    }


def parse_session(files: list[Path]) -> dict:
    lines_raw = []
    for f in files:
        with open(f, encoding="utf-8", errors="replace") as fh:
            lines_raw.extend(fh.readlines())
    return parse_lines(lines_raw)


def _try_parse_stat_line(line: str, stats: dict):
    """Extract a 'Label : Value' pair from a stats-block line."""
    if STAT_NOISE_RE.search(line):
        return
    m = STAT_LINE_RE.match(line)
    if not m:
        return
    label, value = m.group(1).strip(), m.group(2).strip()
    if not label or not value:
        return
    key = _label_to_key(label)
    if key not in stats:          # first occurrence wins
        stats[key] = value


# ─────────────────────────────────────────────────────────────────────────────
# CHARTS
# ─────────────────────────────────────────────────────────────────────────────

def make_charts(session_key: str, data: dict, charts_dir: Path):
    charts_dir.mkdir(parents=True, exist_ok=True)
    session_label = session_key.replace(".log", "")

    # ── 1. Cumulative rule usage ─────────────────────────────────────────────
    rbt = data["rule_by_turn"]
    if rbt:
        rules = sorted(set(rbt.values()))
        turns = sorted(rbt)
        running = defaultdict(int)
        cum: dict[str, list] = {r: [] for r in rules}
        for t in turns:
            running[rbt[t]] += 1
            for r in rules:
                cum[r].append(running[r])

        fig, ax = plt.subplots(figsize=(14, 6))
        for r in rules:
            ax.plot(turns, cum[r], label=r)
        ax.set_title(f"Cumulative Queen Rule Usage\n{session_label}")
        ax.set_xlabel("Turn")
        ax.set_ylabel("Cumulative Count")
        ax.legend(loc="upper left", fontsize=7, ncol=2)
        ax.xaxis.set_major_formatter(mticker.FuncFormatter(lambda x, _: f"{int(x):,}"))
        fig.tight_layout()
        out = charts_dir / f"{session_label}_rules.png"
        fig.savefig(out, dpi=120)
        plt.close(fig)
        print(f"  Chart: {out}")

    # ── 2. Rule totals ───────────────────────────────────────────────────────
    totals = data["rule_totals"]
    if totals:
        names = sorted(totals, key=totals.get, reverse=True)
        values = [totals[n] for n in names]
        fig, ax = plt.subplots(figsize=(max(8, len(names) * 0.7), 5))
        bars = ax.bar(range(len(names)), values, color="steelblue")
        ax.set_xticks(range(len(names)))
        ax.set_xticklabels(names, rotation=45, ha="right", fontsize=8)
        ax.set_title(f"Total Queen Rule Usage\n{session_label}")
        ax.set_ylabel("Count")
        for bar, v in zip(bars, values):
            ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.5,
                    str(v), ha="center", va="bottom", fontsize=7)
        fig.tight_layout()
        out = charts_dir / f"{session_label}_rule_totals.png"
        fig.savefig(out, dpi=120)
        plt.close(fig)
        print(f"  Chart: {out}")

    # ── 3. Strategy timeline ─────────────────────────────────────────────────
    sbt = data["strategy_by_turn"]
    if sbt:
        turns = sorted(sbt)
        names = sorted(set(sbt.values()))
        levels = [names.index(sbt[t]) for t in turns]
        fig, ax = plt.subplots(figsize=(14, 3))
        ax.step(turns, levels, where="post", color="darkorange")
        ax.set_yticks(range(len(names)))
        ax.set_yticklabels(names)
        ax.set_xlabel("Turn")
        ax.set_title(f"Army Strategy Over Time\n{session_label}")
        fig.tight_layout()
        out = charts_dir / f"{session_label}_strategy.png"
        fig.savefig(out, dpi=120)
        plt.close(fig)
        print(f"  Chart: {out}")


# ─────────────────────────────────────────────────────────────────────────────
# BASELINE CSV
# ─────────────────────────────────────────────────────────────────────────────

BASELINE_PREFIX_COLS = [
    "session_key", "datetime", "strategy", "final_strategy", "exit_condition", "pivots",
]


def load_baseline(path: str) -> list[dict]:
    if not os.path.exists(path):
        return []
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def save_baseline(rows: list[dict], path: str):
    """Write baseline CSV; unknown columns are appended in first-seen order."""
    ordered: list[str] = list(BASELINE_PREFIX_COLS)
    seen_cols: set[str] = set(ordered)
    for row in rows:
        for col in row:
            if col not in seen_cols:
                ordered.append(col)
                seen_cols.add(col)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=ordered, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def session_to_row(session_key: str, data: dict) -> dict:
    m = re.search(r"royale_(\d{8})_(\d{6})", session_key)
    dt_str = ""
    if m:
        dt_str = datetime.strptime(m.group(1) + m.group(2), "%Y%m%d%H%M%S").isoformat()

    row: dict = {
        "session_key":    session_key,
        "datetime":       dt_str,
        "strategy":       data["strategy"],
        "final_strategy": data["final_strategy"],
        "exit_condition": data["exit_condition"],
        "pivots":         data["pivots"],
    }
    row.update(data["end_stats"])
    row["rule_totals"] = json.dumps(data["rule_totals"])
    for lvl, cnt in data.get("level_counts", {}).items():
        row[f"level_count_{lvl}"] = cnt
    return row


# ─────────────────────────────────────────────────────────────────────────────
# MAIN
# ─────────────────────────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(description="Royale Bot Log Analyzer")
    parser.add_argument("--log-dir",    default=DEFAULT_LOG_DIR,      help="Path to log directory")
    parser.add_argument("--baseline",   default=BASELINE_FILE,        help="Baseline CSV path")
    parser.add_argument("--seen",       default=SEEN_SESSIONS_FILE,   help="Seen-sessions JSON path")
    parser.add_argument("--charts-dir", default=CHARTS_DIR,           help="Output directory for charts")
    parser.add_argument("--force-all",  action="store_true",          help="Re-process all sessions (ignore seen)")
    args = parser.parse_args()

    log_dir = Path(args.log_dir)
    if not log_dir.exists():
        print(f"[ERROR] Log directory not found: {log_dir}")
        return

    charts_dir = Path(args.charts_dir)
    seen = set() if args.force_all else load_seen_sessions(args.seen)
    baseline_rows = load_baseline(args.baseline)

    groups = group_log_files(log_dir)
    new_sessions = [k for k in groups if k not in seen]

    if not new_sessions:
        print("No new sessions to process.")
        return

    print(f"Found {len(new_sessions)} new session(s) to process.")

    for session_key in sorted(new_sessions):
        print(f"\n── Processing: {session_key} ──")
        data = parse_session(groups[session_key])

        print(f"  Exit condition : {data['exit_condition']}")
        print(f"  Strategy       : {data['strategy']} → {data['final_strategy']}")
        print(f"  Pivots         : {data['pivots']}")
        print(f"  Rules fired    : {len(data['rule_totals'])}")
        print(f"  Stat fields    : {sorted(data['end_stats'].keys())}")

        make_charts(session_key, data, charts_dir)

        baseline_rows = [r for r in baseline_rows if r["session_key"] != session_key]
        baseline_rows.append(session_to_row(session_key, data))
        seen.add(session_key)

    save_baseline(baseline_rows, args.baseline)
    save_seen_sessions(seen, args.seen)

    print(f"\n✓ Baseline updated → {args.baseline}  ({len(baseline_rows)} total rows)")
    print(f"✓ Seen sessions  → {args.seen}")
    print(f"✓ Charts saved   → {charts_dir}/")


if __name__ == "__main__":
    main()
