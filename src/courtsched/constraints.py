"""Constraint validation for courtsched.

Can validate either the in-memory match list or a re-imported CSV.
"""

from collections import defaultdict

from courtsched.clashes import ClashGraph, build_clash_edges
from courtsched.ids import build_teams
from courtsched.models import BYE, BYE_COURT, BYE_VENUE, Match
from courtsched.slots import capacity_per_week


def validate_schedule(matches: list[Match], config: dict) -> dict:
    """Validate a schedule against the hard constraints.

    Checks, per week: no slot used twice, no team twice at one time, no
    clashing teams at one time, placed games within weekly capacity. BYEs
    must carry the BYE placeholders. Unplaced games are a capacity
    shortfall rather than a violation and are listed under `unassigned`.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft issues
    - unassigned: list of games that found no slot
    """
    errors = []
    warnings = []
    unassigned = []

    known_teams = set(build_teams(config["divisions"]))
    clashes = ClashGraph(build_clash_edges(config.get("clash_rows", [])))
    capacity = capacity_per_week(config["venues"], config["timeslots"])
    timeslots = set(config["timeslots"])

    for m in matches:
        if m.is_unplaced:
            unassigned.append(
                f"UNASSIGNED: {m.home} vs {m.away} "
                f"(week {m.week}, division {m.division})"
            )

    slot_users: dict[tuple[int, tuple], list[Match]] = defaultdict(list)
    team_times: dict[tuple[int, str, str], int] = defaultdict(int)
    games_at_time: dict[tuple[int, str], list[Match]] = defaultdict(list)
    placed_per_week: dict[int, int] = defaultdict(int)

    for m in matches:
        for t in (m.home, m.away):
            if t != BYE and t not in known_teams:
                errors.append(f"Unknown team {t} in week {m.week}")

        if m.is_bye:
            if m.venue != BYE_VENUE or m.court != BYE_COURT or m.time:
                errors.append(
                    f"BYE for {m.home} in week {m.week} has a location "
                    f"({m.venue}/{m.court}/{m.time})"
                )
            continue
        if not m.is_placed:
            continue

        if m.time not in timeslots:
            warnings.append(
                f"{m.home} vs {m.away} in week {m.week} uses unknown "
                f"timeslot {m.time}"
            )

        placed_per_week[m.week] += 1
        slot_users[(m.week, m.slot_key)].append(m)
        team_times[(m.week, m.time, m.home)] += 1
        team_times[(m.week, m.time, m.away)] += 1
        games_at_time[(m.week, m.time)].append(m)

    for (week, key), users in sorted(slot_users.items()):
        if len(users) > 1:
            games = ", ".join(f"{u.home} vs {u.away}" for u in users)
            errors.append(
                f"Week {week}: slot {key[0]}/{key[1]}/{key[2]} "
                f"double-booked ({games})"
            )

    for (week, time, team), count in sorted(team_times.items()):
        if count > 1:
            errors.append(f"Week {week}: {team} plays {count} games at {time}")

    # Only teams from different games at the same time can clash.
    for (week, time), games in sorted(games_at_time.items()):
        found = set()
        for i, g in enumerate(games):
            for other in games[i + 1:]:
                for a in (g.home, g.away):
                    for b in (other.home, other.away):
                        if clashes.is_clash_pair(a, b):
                            found.add(tuple(sorted((a, b))))
        for a, b in sorted(found):
            errors.append(
                f"Week {week}: clashing teams {a} and {b} both play at {time}"
            )

    for week, placed in sorted(placed_per_week.items()):
        if placed > capacity:
            errors.append(
                f"Week {week}: {placed} games placed but capacity is {capacity}"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "unassigned": unassigned,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    unassigned = result.get("unassigned", [])
    if unassigned:
        lines.append(f"\n--- CAPACITY SHORTFALL ({len(unassigned)} games) ---")
        for u in unassigned:
            lines.append(f"  {u}")

    return "\n".join(lines)
