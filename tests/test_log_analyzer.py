"""Session log parsing for the post-game analyzer."""
import royale_log_analyzer as analyzer

SESSION = """\
2026-10-17 21:14:03.412 | INFO    |        - | Royale Queen Bot
2026-10-17 21:14:03.500 | GAME    |        0 | GAME_START | Strategy: Build Ranged
2026-10-17 21:14:03.501 | DECISIO |        0 | secure_minimum_mines | MOVE 200 500
2026-10-17 21:14:03.600 | DECISIO |        1 | secure_minimum_mines | MOVE 200 500
2026-10-17 21:14:03.700 | DECISIO |        2 | claim_touched_site | BUILD 0 MINE
2026-10-17 21:14:03.800 | GAME    |        3 | PIVOT | Build Ranged → Rush
2026-10-17 21:14:03.801 | DECISIO |        3 | take_central_tower | MOVE 900 500
2026-10-17 21:14:03.802 | WARNING |        3 | No free mine site (expansion, own 4 mines)
2026-10-17 21:14:09.000 | GAME    |        3 | GAME_STATS |
════════════════════════════════════════════════════
  END-OF-GAME STATS
════════════════════════════════════════════════════
  Result                   : victory
  Turns                    : 4
  Final Strategy           : Rush
────────────────────────────────────────────────────
  PEAKS  (best values achieved during match)
  Peak Gold                : 250
────────────────────────────────────────────────────
  QUEEN  (rules fired)
  secure_minimum_mines     : 2
════════════════════════════════════════════════════
2026-10-17 21:14:09.001 | GAME    |        3 | GAME_END | result=victory | final_strategy=Rush
"""


def test_parse_session_lines():
    data = analyzer.parse_lines(SESSION.splitlines(keepends=True))

    assert data["strategy"] == "Build Ranged"
    assert data["final_strategy"] == "Rush"
    assert data["exit_condition"] == "victory"
    assert data["pivots"] == 1
    assert data["rule_totals"] == {
        "secure_minimum_mines": 2,
        "claim_touched_site": 1,
        "take_central_tower": 1,
    }
    assert data["rule_by_turn"][2] == "claim_touched_site"
    assert data["strategy_by_turn"] == {0: "Build Ranged", 3: "Rush"}
    assert data["level_counts"]["WARNING"] == 1

    stats = data["end_stats"]
    assert stats["stat_result"] == "victory"
    assert stats["stat_peak_gold"] == "250"
    assert stats["stat_secure_minimum_mines"] == "2"
    assert not any("peaks" in key for key in stats)


def test_incomplete_session():
    data = analyzer.parse_lines(SESSION.splitlines(keepends=True)[:4])
    assert data["exit_condition"] == "crash_or_incomplete"
    assert data["end_stats"] == {}


def test_session_row_and_grouping(tmp_path):
    (tmp_path / "royale_20261017_211403.log").write_text(SESSION, encoding="utf-8")
    (tmp_path / "royale_20261017_211403.log.1").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    groups = analyzer.group_log_files(tmp_path)
    assert list(groups) == ["royale_20261017_211403.log"]
    files = groups["royale_20261017_211403.log"]
    assert [f.name for f in files] == ["royale_20261017_211403.log.1", "royale_20261017_211403.log"]

    data = analyzer.parse_session(files)
    row = analyzer.session_to_row("royale_20261017_211403.log", data)
    assert row["datetime"] == "2026-10-17T21:14:03"
    assert row["exit_condition"] == "victory"
    assert row["stat_turns"] == "4"

    baseline = tmp_path / "baseline.csv"
    analyzer.save_baseline([row], str(baseline))
    loaded = analyzer.load_baseline(str(baseline))
    assert loaded[0]["session_key"] == "royale_20261017_211403.log"
    assert loaded[0]["final_strategy"] == "Rush"
