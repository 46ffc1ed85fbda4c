"""Tests for roundrobin.py — circle-method rounds and weekly pairings."""

from collections import Counter, defaultdict

from courtsched.models import BYE, Division
from courtsched.roundrobin import build_rounds, generate_pairings, verify_round_robin


class TestBuildRounds:
    def test_even_teams(self):
        rounds = build_rounds(["A", "B", "C", "D"])
        assert len(rounds) == 3
        for r in rounds:
            assert len(r) == 2

    def test_circle_method_order(self):
        rounds = build_rounds(["A", "B", "C", "D"])
        assert rounds == [
            [("A", "D"), ("B", "C")],
            [("A", "C"), ("D", "B")],
            [("A", "B"), ("C", "D")],
        ]

    def test_odd_teams_padded_with_bye(self):
        teams = ["T1", "T2", "T3", "T4", "T5"]
        rounds = build_rounds(teams)
        # 5 teams + BYE = 6, N-1 = 5 rounds of 3 pairs
        assert len(rounds) == 5
        for r in rounds:
            assert len(r) == 3
            assert sum(1 for a, b in r if BYE in (a, b)) == 1

    def test_first_two_rounds_of_five(self):
        rounds = build_rounds(["T1", "T2", "T3", "T4", "T5"])
        assert rounds[0] == [("T1", BYE), ("T2", "T5"), ("T3", "T4")]
        assert rounds[1] == [("T1", "T5"), (BYE, "T4"), ("T2", "T3")]

    def test_first_team_fixed(self):
        for r in build_rounds([f"T{i}" for i in range(8)]):
            assert r[0][0] == "T0"

    def test_every_pair_plays_once_even(self):
        teams = [f"T{i}" for i in range(10)]
        result = verify_round_robin(build_rounds(teams), teams)
        assert result["valid"], result["errors"]
        for t in teams:
            assert result["games_per_team"][t] == 9

    def test_every_pair_plays_once_odd(self):
        teams = [f"T{i}" for i in range(15)]
        result = verify_round_robin(build_rounds(teams), teams)
        assert result["valid"], result["errors"]
        for t in teams:
            assert result["games_per_team"][t] == 14
            assert result["bye_counts"][t] == 1

    def test_two_teams(self):
        assert build_rounds(["A", "B"]) == [[("A", "B")]]

    def test_one_team(self):
        # A lone team is padded with BYE: one round, a BYE for it
        assert build_rounds(["A"]) == [[("A", BYE)]]

    def test_empty(self):
        assert build_rounds([]) == []


class TestGeneratePairings:
    def test_scenario_five_teams_two_weeks(self):
        matches = generate_pairings(2, [Division("D1", 5)])
        week1 = [(m.home, m.away) for m in matches if m.week == 1]
        week2 = [(m.home, m.away) for m in matches if m.week == 2]
        assert week1 == [("D1-01", BYE), ("D1-02", "D1-05"), ("D1-03", "D1-04")]
        assert week2 == [("D1-01", "D1-05"), ("D1-04", BYE), ("D1-02", "D1-03")]

    def test_unplaced_fields(self):
        for m in generate_pairings(1, [Division("D1", 4)]):
            assert (m.venue, m.court, m.time) == ("", "", "")
            assert m.division == "D1"

    def test_round_robin_completeness(self):
        n = 6
        matches = generate_pairings(n - 1, [Division("D1", n)])
        pairs = Counter(tuple(sorted((m.home, m.away))) for m in matches)
        assert len(pairs) == n * (n - 1) // 2
        assert set(pairs.values()) == {1}

    def test_cyclic_reuse(self):
        n = 6
        matches = generate_pairings(2 * (n - 1) + 1, [Division("D1", n)])
        by_week = defaultdict(list)
        for m in matches:
            by_week[m.week].append((m.home, m.away))
        assert by_week[n] == by_week[1]
        assert by_week[2 * (n - 1) + 1] == by_week[1]
        assert by_week[n + 1] == by_week[2]

    def test_bye_parity(self):
        count = 7
        weeks = count  # padded size 8 -> 7 rounds per cycle
        matches = generate_pairings(weeks, [Division("D3", count)])
        byes_per_week = Counter(m.week for m in matches if m.away == BYE)
        assert all(byes_per_week[w] == 1 for w in range(1, weeks + 1))
        byes_per_team = Counter(m.home for m in matches if m.away == BYE)
        assert len(byes_per_team) == count
        assert set(byes_per_team.values()) == {1}

    def test_no_repeat_opponents_within_cycle(self):
        matches = generate_pairings(8, [Division("D2", 9)])
        seen = set()
        for m in matches:
            if m.away == BYE:
                continue
            key = tuple(sorted((m.home, m.away)))
            assert key not in seen
            seen.add(key)

    def test_multiple_divisions_stay_separate(self):
        matches = generate_pairings(3, [Division("A", 4), Division("B", 3)])
        for m in matches:
            assert m.home.startswith(m.division + "-")
            if m.away != BYE:
                assert m.away.startswith(m.division + "-")

    def test_small_divisions_produce_nothing(self):
        assert generate_pairings(3, [Division("A", 1), Division("B", 0)]) == []

    def test_zero_weeks(self):
        assert generate_pairings(0, [Division("D1", 4)]) == []
        assert generate_pairings(-2, [Division("D1", 4)]) == []

    def test_deterministic(self):
        divs = [Division("D1", 7), Division("D2", 4)]
        assert generate_pairings(6, divs) == generate_pairings(6, divs)


class TestVerifyRoundRobin:
    def test_detects_missing_matchup(self):
        rounds = [[("A", "B")], [("A", "C")]]
        result = verify_round_robin(rounds, ["A", "B", "C"])
        assert not result["valid"]
        assert any("B vs C" in e for e in result["errors"])

    def test_detects_duplicate_matchup(self):
        rounds = [[("A", "B")], [("A", "C")], [("B", "C")], [("A", "B")]]
        result = verify_round_robin(rounds, ["A", "B", "C"])
        assert not result["valid"]

    def test_detects_team_playing_twice_in_round(self):
        rounds = [[("A", "B"), ("A", "C")]]
        result = verify_round_robin(rounds, ["A", "B", "C"])
        assert not result["valid"]
        assert any("A" in e and "twice" in e for e in result["errors"])
