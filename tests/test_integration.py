"""Integration test — full end-to-end schedule generation and validation."""

import sys
from collections import Counter
from pathlib import Path

import pytest

from courtsched import schedule as schedule_cli
from courtsched import verify as verify_cli
from courtsched.clashes import build_clash_edges
from courtsched.config import load_config
from courtsched.constraints import validate_schedule
from courtsched.ids import teams_by_division
from courtsched.models import BYE
from courtsched.scheduler import schedule
from courtsched.slots import capacity_per_week
from courtsched.stats import compute_stats, format_stats_report

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class TestEndToEnd:
    def test_generate_and_validate(self):
        config = load_config(CONFIG_PATH)
        matches = schedule(config)
        result = validate_schedule(matches, config)
        assert result["valid"], f"Validation failed: {result['errors']}"
        assert result["unassigned"] == []

    def test_match_counts(self):
        config = load_config(CONFIG_PATH)
        matches = schedule(config)
        per_week = Counter(m.week for m in matches if m.away != BYE)
        byes = Counter(m.week for m in matches if m.away == BYE)
        # 4 + 4 + 5 + 7 + 4 games, one BYE per odd division
        assert per_week == {w: 24 for w in range(1, 6)}
        assert byes == {w: 5 for w in range(1, 6)}

    def test_clashing_teams_never_share_a_time(self):
        config = load_config(CONFIG_PATH)
        matches = schedule(config)
        when = {}
        for m in matches:
            if m.is_placed:
                when[(m.week, m.home)] = m.time
                when[(m.week, m.away)] = m.time
        for a, b in build_clash_edges(config["clash_rows"]):
            for week in range(1, 6):
                # a team on a BYE has no time that week
                if (week, a) in when and (week, b) in when:
                    assert when[(week, a)] != when[(week, b)]

    def test_within_capacity(self):
        config = load_config(CONFIG_PATH)
        capacity = capacity_per_week(config["venues"], config["timeslots"])
        assert capacity == 32
        placed = Counter(m.week for m in schedule(config) if m.is_placed)
        assert max(placed.values()) <= capacity

    def test_first_slot_is_first_in_catalogue(self):
        config = load_config(CONFIG_PATH)
        first = next(m for m in schedule(config) if m.week == 1 and m.division == "D0"
                     and m.home == "D0-02")
        # DCC sorts before Mullum; D0 games are claimed first
        assert (first.venue, first.court, first.time) == ("DCC", "DC1", "18:00")

    def test_deterministic(self):
        config = load_config(CONFIG_PATH)
        assert schedule(config) == schedule(config)

    def test_stats_report_runs(self):
        config = load_config(CONFIG_PATH)
        matches = schedule(config)
        stats = compute_stats(matches, teams_by_division(config["divisions"]),
                              capacity_per_week(config["venues"], config["timeslots"]))
        assert stats["unplaced_count"] == 0
        report = format_stats_report(stats)
        assert "DIVISIONS" in report
        assert "OPPONENT VARIETY" in report


class TestCli:
    def test_generate_then_verify(self, tmp_path, monkeypatch, capsys):
        out_dir = tmp_path / "out"
        monkeypatch.setattr(sys, "argv", ["courtsched", str(CONFIG_PATH),
                                          "-o", str(out_dir)])
        schedule_cli.main()
        for name in ("schedule.txt", "schedule.csv", "clashes.csv",
                     "snapshot.json", "stats.txt"):
            assert (out_dir / name).exists()
        assert "Schedule generated successfully!" in capsys.readouterr().out

        monkeypatch.setattr(sys, "argv", ["courtsched-verify",
                                          str(out_dir / "schedule.csv"),
                                          str(CONFIG_PATH)])
        with pytest.raises(SystemExit) as exc:
            verify_cli.main()
        assert exc.value.code == 0

    def test_invalid_config_exits(self, tmp_path, monkeypatch):
        bad = tmp_path / "bad.yaml"
        bad.write_text(
            "season: {weeks: 0}\n"
            "timeslots: ['19:00']\n"
            "venues: [{name: X, courts: [A]}]\n"
            "divisions: [{code: D1, teams: 4}]\n"
        )
        monkeypatch.setattr(sys, "argv", ["courtsched", str(bad),
                                          "-o", str(tmp_path / "out")])
        with pytest.raises(SystemExit) as exc:
            schedule_cli.main()
        assert exc.value.code == 1
        assert not (tmp_path / "out").exists()

    def test_shortfall_exits_after_writing(self, tmp_path, monkeypatch, capsys):
        tight = tmp_path / "tight.yaml"
        tight.write_text(
            "season: {weeks: 1}\n"
            "timeslots: ['19:00']\n"
            "venues: [{name: X, courts: [A]}]\n"
            "divisions: [{code: D1, teams: 4}]\n"
        )
        out_dir = tmp_path / "out"
        monkeypatch.setattr(sys, "argv", ["courtsched", str(tight),
                                          "-o", str(out_dir)])
        with pytest.raises(SystemExit) as exc:
            schedule_cli.main()
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "RESULT: VALID" in out
        assert "1 games found no slot." in out
        assert (out_dir / "schedule.csv").exists()

    def test_verbose_traces_placements(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["courtsched", str(CONFIG_PATH),
                                          "-o", str(tmp_path), "--verbose"])
        schedule_cli.main()
        assert "[ok]" in capsys.readouterr().out
