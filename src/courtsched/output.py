"""Output formatters for courtsched."""

import csv
from io import StringIO
from pathlib import Path

from courtsched.clashes import format_clash_csv
from courtsched.models import BYE, Match
from courtsched.slots import format_time_label

CSV_FIELDS = ["week", "division", "home", "away", "venue", "court", "time"]


def display_name(team_id: str, team_names: dict[str, str] | None = None) -> str:
    if team_id == BYE:
        return BYE
    if team_names:
        return team_names.get(team_id) or team_id
    return team_id


def format_schedule(matches: list[Match],
                    team_names: dict[str, str] | None = None,
                    title: str = "") -> str:
    """Format schedule as human-readable text, organized by week then time."""
    lines = []
    lines.append("=" * 80)
    lines.append(title.upper() if title else "LEAGUE SCHEDULE")
    lines.append("=" * 80)

    def name(t):
        return display_name(t, team_names)

    by_week: dict[int, list[Match]] = {}
    for m in matches:
        by_week.setdefault(m.week, []).append(m)

    for week in sorted(by_week):
        week_matches = by_week[week]
        placed = sorted((m for m in week_matches if m.is_placed),
                        key=lambda m: (m.time, m.venue, m.court))
        unplaced = [m for m in week_matches if m.is_unplaced]
        byes = [m for m in week_matches if m.is_bye]

        lines.append(f"\n--- WEEK {week} ---")
        current_time = None
        for m in placed:
            if m.time != current_time:
                current_time = m.time
                lines.append(f"\n  {format_time_label(m.time)}")
            lines.append(
                f"    {m.venue:<10} {m.court:<5} [{m.division:<4}] "
                f"{name(m.home)} vs {name(m.away)}"
            )
        if unplaced:
            lines.append("\n  UNASSIGNED")
            for m in unplaced:
                lines.append(f"    [{m.division:<4}] {name(m.home)} vs {name(m.away)}")
        if byes:
            lines.append("\n  BYES: " + ", ".join(
                f"{name(m.home)} ({m.division})" for m in byes))

    return "\n".join(lines)


def format_schedule_csv(matches: list[Match]) -> str:
    """Format schedule as a flat CSV, one row per match (BYEs included)."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_FIELDS)
    for m in matches:
        writer.writerow([m.week, m.division, m.home, m.away,
                         m.venue, m.court, m.time])
    return output.getvalue()


def parse_schedule_csv(text: str) -> list[Match]:
    """Parse CSV written by format_schedule_csv() back into matches."""
    matches = []
    reader = csv.DictReader(StringIO(text))
    for row in reader:
        week_str = (row.get("week") or "").strip()
        home = (row.get("home") or "").strip()
        away = (row.get("away") or "").strip()
        if not week_str or not home or not away:
            continue
        matches.append(Match(
            week=int(week_str),
            division=(row.get("division") or "").strip(),
            home=home,
            away=away,
            venue=(row.get("venue") or "").strip(),
            court=(row.get("court") or "").strip(),
            time=(row.get("time") or "").strip(),
        ))
    return matches


def write_schedule(matches: list[Match], config: dict,
                   clash_edges: list[tuple[str, str]] | None = None,
                   output_prefix: str = "output"):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_text = format_schedule(matches, config.get("team_names"),
                                    title=config["season"].get("name", ""))
    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(schedule_text)
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(matches))
    print(f"Written: {csv_path}")

    if clash_edges:
        clash_path = out_dir / "clashes.csv"
        clash_path.write_text(format_clash_csv(clash_edges))
        print(f"Written: {clash_path}")
