"""Statistics and read-only views over a placed schedule."""

from collections import defaultdict

from courtsched.ids import division_of
from courtsched.models import BYE, DivisionStats, Match, WeeklyStats


def build_division_grid(matches: list[Match]) -> dict:
    """Group a schedule by division and week.

    Returns dict with:
    - by_div: division -> week -> {"by_slot": {slot_key: Match}, "bye": team|None}
    - unassigned: division -> week -> [(home, away), ...]
    """
    by_div: dict[str, dict[int, dict]] = {}
    unassigned: dict[str, dict[int, list[tuple[str, str]]]] = {}

    for m in matches:
        weeks = by_div.setdefault(m.division, {})
        unassigned.setdefault(m.division, {})
        cell = weeks.setdefault(m.week, {"by_slot": {}, "bye": None})

        if m.is_bye:
            cell["bye"] = m.home
            continue
        if not m.is_placed:
            unassigned[m.division].setdefault(m.week, []).append((m.home, m.away))
            continue
        cell["by_slot"][m.slot_key] = m

    return {"by_div": by_div, "unassigned": unassigned}


def build_division_stats(matches: list[Match]) -> dict[str, DivisionStats]:
    stats: dict[str, DivisionStats] = {}
    for m in matches:
        s = stats.setdefault(m.division, DivisionStats())
        if m.is_bye:
            s.byes += 1
        else:
            s.games += 1
            if not m.is_placed:
                s.unassigned += 1
    return stats


def compute_weekly_stats(matches: list[Match], capacity: int) -> dict[int, WeeklyStats]:
    """Per-week game, placement and BYE counts against weekly capacity."""
    weekly: dict[int, WeeklyStats] = {}
    for m in matches:
        w = weekly.setdefault(m.week, WeeklyStats(week=m.week, capacity=capacity))
        if m.is_bye:
            w.byes += 1
            continue
        w.games += 1
        if m.is_placed:
            w.placed += 1
        else:
            w.unplaced += 1
    return dict(sorted(weekly.items()))


def compute_opponent_variety(matches: list[Match],
                             teams_by_division: dict[str, list[str]]) -> dict:
    """How many distinct opponents each team meets relative to what is possible.

    varietyRatio = unique opponents / min(games, division size - 1), or 1.0
    when a team has nothing to compare against. BYEs are not games.

    Returns dict with:
    - teams: list of per-team dicts, sorted by division then team
    - by_division: list of per-division summaries, sorted by division
    """
    base: dict[str, dict] = {}
    for div, ids in teams_by_division.items():
        for tid in ids:
            base[tid] = {"division": div, "games": 0, "opponents": defaultdict(int)}

    for m in matches:
        if m.away == BYE or not m.home or not m.away:
            continue
        for t in (m.home, m.away):
            if t not in base:
                div = division_of(t) or m.division
                base[t] = {"division": div, "games": 0,
                           "opponents": defaultdict(int)}
            base[t]["games"] += 1
            base[t]["opponents"][m.opponent(t)] += 1

    teams = []
    for tid, st in base.items():
        div = st["division"]
        possible = max(0, len(teams_by_division.get(div, [])) - 1)
        games = st["games"]
        unique = len(st["opponents"])
        max_unique = min(games, possible)
        ratio = unique / max_unique if max_unique > 0 else 1.0
        opponent_counts = sorted(st["opponents"].items(),
                                 key=lambda kv: (-kv[1], kv[0]))
        teams.append({
            "team": tid,
            "division": div,
            "games": games,
            "unique_opponents": unique,
            "possible_opponents": possible,
            "max_unique_possible": max_unique,
            "variety_ratio": ratio,
            "repeat_games": max(0, games - unique),
            "opponent_counts": opponent_counts,
        })
    teams.sort(key=lambda t: (t["division"], t["team"]))

    by_div_rows: dict[str, list[dict]] = defaultdict(list)
    for t in teams:
        by_div_rows[t["division"]].append(t)

    by_division = []
    for div in sorted(by_div_rows):
        ratios = [t["variety_ratio"] for t in by_div_rows[div]]
        count = len(teams_by_division.get(div, []))
        by_division.append({
            "division": div,
            "teams": count,
            "possible_opponents": max(0, count - 1),
            "avg_variety_ratio": sum(ratios) / len(ratios) if ratios else 1.0,
            "min_variety_ratio": min(ratios) if ratios else 1.0,
            "max_variety_ratio": max(ratios) if ratios else 1.0,
        })

    return {"teams": teams, "by_division": by_division}


def compute_stats(matches: list[Match], teams_by_division: dict[str, list[str]],
                  capacity: int) -> dict:
    """Everything the stats report needs, in one dict."""
    unplaced = [m for m in matches if m.is_unplaced]
    return {
        "divisions": build_division_stats(matches),
        "weekly": compute_weekly_stats(matches, capacity),
        "variety": compute_opponent_variety(matches, teams_by_division),
        "capacity": capacity,
        "unplaced_count": len(unplaced),
        "unplaced_games": unplaced,
    }


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 70)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 70)

    lines.append("\n--- DIVISIONS ---")
    lines.append(f"{'Division':<10} {'Games':>6} {'Byes':>6} {'Unasg':>6}")
    lines.append("-" * 31)
    for div in sorted(stats["divisions"]):
        s = stats["divisions"][div]
        flag = " ***" if s.unassigned else ""
        lines.append(f"{div:<10} {s.games:>6} {s.byes:>6} {s.unassigned:>6}{flag}")

    lines.append(f"\n--- WEEKS (capacity {stats['capacity']}/week) ---")
    lines.append(f"{'Week':<6} {'Games':>6} {'Placed':>7} {'Unplc':>6} {'Byes':>5} {'Util':>6}")
    lines.append("-" * 41)
    for week, w in stats["weekly"].items():
        lines.append(f"W{week:<5} {w.games:>6} {w.placed:>7} {w.unplaced:>6} "
                     f"{w.byes:>5} {w.utilization:>6.0%}")

    lines.append("\n--- OPPONENT VARIETY ---")
    lines.append(f"{'Division':<10} {'Teams':>6} {'Avg':>6} {'Min':>6} {'Max':>6}")
    lines.append("-" * 38)
    for row in stats["variety"]["by_division"]:
        lines.append(f"{row['division']:<10} {row['teams']:>6} "
                     f"{row['avg_variety_ratio']:>6.2f} "
                     f"{row['min_variety_ratio']:>6.2f} "
                     f"{row['max_variety_ratio']:>6.2f}")

    if stats["unplaced_games"]:
        lines.append(f"\n--- UNASSIGNED GAMES ({stats['unplaced_count']}) ---")
        for m in stats["unplaced_games"]:
            lines.append(f"  Week {m.week:>2}  {m.division:<6} {m.home} vs {m.away}")

    return "\n".join(lines)
