"""Round-robin pairing generation for courtsched."""

from courtsched.ids import teams_by_division
from courtsched.models import BYE, Division, Match


def build_rounds(teams: list[str]) -> list[list[tuple[str, str]]]:
    """Build one full round-robin cycle using the circle method.

    For N teams (padded with BYE when odd): N-1 rounds of N/2 pairs, every
    team appears once per round and every pair meets exactly once per cycle.

    Position 0 stays fixed; the other N-1 teams form a ring which is
    rotated one step right each round. Round r uses the ring read from
    offset -r, so no list is rebuilt between rounds.
    """
    padded = list(teams)
    if len(padded) % 2 == 1:
        padded.append(BYE)
    n = len(padded)
    if n < 2:
        return []

    fixed = padded[0]
    ring = padded[1:]
    size = len(ring)

    rounds = []
    for r in range(n - 1):
        order = [fixed] + [ring[(i - r) % size] for i in range(size)]
        rounds.append([(order[i], order[n - 1 - i]) for i in range(n // 2)])
    return rounds


def generate_pairings(weeks: int, divisions: list[Division]) -> list[Match]:
    """Unplaced matches for every division and week.

    Week w plays round (w - 1) mod (N - 1), so rounds repeat once the season
    is longer than one cycle. A pair involving BYE becomes a Match with the
    real team at home and BYE away. Divisions with fewer than two teams
    have nobody to play and produce no matches, not even BYEs.
    """
    matches = []
    if weeks <= 0:
        return matches

    for div, div_teams in teams_by_division(divisions).items():
        if len(div_teams) < 2:
            continue
        rounds = build_rounds(div_teams)
        if not rounds:
            continue
        for w in range(1, weeks + 1):
            for a, b in rounds[(w - 1) % len(rounds)]:
                if a == BYE and b == BYE:
                    continue
                if a == BYE or b == BYE:
                    team = b if a == BYE else a
                    matches.append(Match(week=w, division=div, home=team, away=BYE))
                else:
                    matches.append(Match(week=w, division=div, home=a, away=b))
    return matches


def verify_round_robin(rounds: list[list[tuple[str, str]]],
                       teams: list[str]) -> dict:
    """Verify a round-robin cycle is valid and complete.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of (team_a, team_b) -> count
    - games_per_team: dict of team -> game count
    - bye_counts: dict of team -> BYE count
    """
    errors = []
    matchup_counts: dict[tuple[str, str], int] = {}
    games_per_team: dict[str, int] = {t: 0 for t in teams}
    bye_counts: dict[str, int] = {t: 0 for t in teams}

    for number, pairs in enumerate(rounds, 1):
        teams_in_round = set()
        for a, b in pairs:
            for t in (a, b):
                if t == BYE:
                    continue
                if t in teams_in_round:
                    errors.append(f"Round {number}: {t} appears twice")
                teams_in_round.add(t)

            if a == BYE or b == BYE:
                team = b if a == BYE else a
                bye_counts[team] = bye_counts.get(team, 0) + 1
                continue

            key = tuple(sorted([a, b]))
            matchup_counts[key] = matchup_counts.get(key, 0) + 1
            games_per_team[a] = games_per_team.get(a, 0) + 1
            games_per_team[b] = games_per_team.get(b, 0) + 1

    for i, t1 in enumerate(teams):
        for t2 in teams[i + 1:]:
            key = tuple(sorted([t1, t2]))
            count = matchup_counts.get(key, 0)
            if count != 1:
                errors.append(f"{t1} vs {t2}: played {count} times (expected 1)")

    if len(teams) % 2 == 1:
        for t in teams:
            if bye_counts.get(t, 0) != 1:
                errors.append(f"{t}: {bye_counts.get(t, 0)} byes (expected 1)")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_team": games_per_team,
        "bye_counts": bye_counts,
    }
