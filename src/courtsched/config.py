"""Config loading and validation for courtsched."""

import re
from pathlib import Path

import yaml

from courtsched.clashes import build_clash_edges
from courtsched.ids import build_teams
from courtsched.models import ClashRow, Division, Venue
from courtsched.slots import capacity_per_week, total_courts

TIMESLOT_RE = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


class _ConfigLoader(yaml.SafeLoader):
    """SafeLoader that reads unquoted H:MM / HH:MM scalars as strings.

    Plain YAML 1.1 would turn 19:00 into the base-60 integer 1140.
    """


_ConfigLoader.yaml_implicit_resolvers = {
    first: list(resolvers)
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
for _digit in "0123456789":
    _ConfigLoader.yaml_implicit_resolvers.setdefault(_digit, []).insert(
        0, ("tag:yaml.org,2002:str", re.compile(r"^\d{1,2}:[0-5]\d$")))


class ConfigError(ValueError):
    """Config file cannot be read into the expected shape."""


def parse_timeslot(value) -> str:
    """Normalise a timeslot to 'HH:MM'.

    Anything that is not a valid time, bare numbers included, is returned
    as trimmed text for validate_config() to report.
    """
    s = str(value if value is not None else "").strip()
    if TIMESLOT_RE.match(s):
        h, m = s.split(":")
        return f"{int(h):02d}:{m}"
    return s


def _as_number(value, cast, fallback):
    try:
        return cast(value)
    except (TypeError, ValueError):
        return fallback


def _parse_division(raw: dict) -> Division:
    # Unreadable numbers are kept as 0 / NaN so validate_config() reports them
    return Division(
        code=str(raw.get("code", "") or "").strip(),
        teams=_as_number(raw.get("teams", 0), int, 0),
        net_height_m=_as_number(raw.get("net_height_m", 2.43), float, float("nan")),
    )


def _parse_venue(raw: dict) -> Venue:
    return Venue(
        name=str(raw.get("name", "") or "").strip(),
        courts=[str(c) for c in raw.get("courts", []) or []],
    )


def _parse_clash_row(raw) -> ClashRow:
    # A row is either a bare list of teams or {teams: [...]}
    if isinstance(raw, dict):
        raw = raw.get("teams", [])
    return ClashRow(teams=[str(t) for t in raw or []])


def parse_config(raw: dict) -> dict:
    """Turn a raw config mapping (e.g. from YAML) into the config dict.

    Returns dict with:
    - season: {name, weeks}
    - timeslots: list of 'HH:MM'
    - venues: list of Venue
    - divisions: list of Division
    - clash_rows: list of ClashRow
    - team_names: dict team id -> display name
    - venue_aliases: dict substring -> venue label, or None for the default
    """
    if not isinstance(raw, dict):
        raise ConfigError("config must be a mapping at the top level")
    for section in ("timeslots", "venues", "divisions"):
        if section not in raw:
            raise ConfigError(f"config is missing required section '{section}'")

    season_raw = raw.get("season", {}) or {}
    season = {
        "name": season_raw.get("name", ""),
        "weeks": _as_number(season_raw.get("weeks", raw.get("weeks", 0)), int, 0),
    }

    return {
        "season": season,
        "timeslots": [parse_timeslot(t) for t in raw["timeslots"] or []],
        "venues": [_parse_venue(v) for v in raw["venues"] or []],
        "divisions": [_parse_division(d) for d in raw["divisions"] or []],
        "clash_rows": [_parse_clash_row(r) for r in raw.get("clashes", []) or []],
        "team_names": {str(k): str(v) for k, v in (raw.get("team_names", {}) or {}).items()},
        "venue_aliases": raw.get("venue_aliases"),
    }


def load_config(path: str | Path) -> dict:
    """Load config YAML, returning structured data (see parse_config)."""
    path = Path(path)
    with open(path) as f:
        raw = yaml.load(f, Loader=_ConfigLoader)
    return parse_config(raw)


def validate_config(config: dict) -> dict:
    """Check a config before generating a schedule.

    Returns dict with:
    - valid: bool (True if no errors)
    - errors: list of problems that must be fixed first
    - infos: list of informational lines (capacity, team total)
    """
    errors = []
    infos = []

    venues = config["venues"]
    timeslots = [t for t in config["timeslots"] if str(t).strip()]
    divisions = config["divisions"]
    teams = build_teams(divisions)

    courts = total_courts(venues)
    capacity = capacity_per_week(venues, timeslots)
    infos.append(
        f"Capacity per week: {courts} courts x {len(timeslots)} timeslots "
        f"= {capacity} match-slots/week"
    )
    infos.append(f"Teams total: {len(teams)}")
    infos.append("Placement is greedy first-fit (no clash optimisation).")

    codes = set()
    for d in divisions:
        if not d.code:
            errors.append("Division code missing.")
        elif d.code in codes:
            errors.append(f"Division {d.code}: duplicate code")
        codes.add(d.code)
        if d.teams <= 0:
            errors.append(f"Division {d.code or '?'}: team count must be > 0")
        if not isinstance(d.net_height_m, (int, float)) or not d.net_height_m > 0:
            errors.append(f"Division {d.code or '?'}: net height must be a valid number")

    for v in venues:
        if not v.name:
            errors.append("Venue name missing.")
        labels = v.court_labels()
        if not labels:
            errors.append(f"Venue {v.name or '?'}: add at least 1 court name")
        if len(set(labels)) != len(labels):
            errors.append(f"Venue {v.name or '?'}: duplicate court names")

    if not timeslots:
        errors.append("Add at least 1 timeslot.")
    if len(set(timeslots)) != len(timeslots):
        errors.append("Timeslots: duplicate values")
    for t in timeslots:
        if not TIMESLOT_RE.match(t):
            errors.append(f"Timeslots: invalid '{t}' (use HH:MM)")

    if config["season"]["weeks"] <= 0:
        errors.append("Weeks must be > 0.")

    known = set(teams)
    for a, b in build_clash_edges(config.get("clash_rows", [])):
        for t in (a, b):
            if t not in known:
                errors.append(f"Clashes: unknown team '{t}'")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "infos": infos,
    }


def format_config_report(result: dict) -> str:
    lines = []
    for info in result["infos"]:
        lines.append(f"  {info}")
    if result["errors"]:
        lines.append(f"\nConfig validation errors ({len(result['errors'])}):")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")
    return "\n".join(lines)
