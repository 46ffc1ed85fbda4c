"""Versioned JSON snapshot of a config plus its generated schedule.

Envelope:
    {"schemaVersion": 1, "createdAt": "<ISO8601>",
     "state": {"seasonName", "weeks", "timeslots", "venues", "divisions",
               "clashRows", "teamNames", "venueAliases", "teamTimePrefs",
               "schedule"}}
"""

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from courtsched.config import parse_timeslot
from courtsched.models import ClashRow, Division, Match, Venue

SCHEMA_VERSION = 1


class SnapshotError(ValueError):
    """Snapshot is not an object or uses an unsupported schema version."""


def build_snapshot(config: dict, matches: list[Match],
                   team_time_prefs: dict | None = None,
                   created_at: str | None = None) -> dict:
    if created_at is None:
        created_at = datetime.now(timezone.utc).isoformat()
    return {
        "schemaVersion": SCHEMA_VERSION,
        "createdAt": created_at,
        "state": {
            "seasonName": config["season"].get("name", ""),
            "weeks": config["season"]["weeks"],
            "timeslots": list(config["timeslots"]),
            "venues": [{"name": v.name, "courts": list(v.courts)}
                       for v in config["venues"]],
            "divisions": [{"code": d.code, "teams": d.teams,
                           "netHeightM": d.net_height_m}
                          for d in config["divisions"]],
            "clashRows": [{"teams": list(r.teams)}
                          for r in config.get("clash_rows", [])],
            "teamNames": dict(config.get("team_names", {})),
            "venueAliases": config.get("venue_aliases"),
            "teamTimePrefs": dict(team_time_prefs or {}),
            "schedule": [asdict(m) for m in matches],
        },
    }


def _match_from_dict(raw: dict) -> Match:
    return Match(
        week=int(raw["week"]),
        division=str(raw.get("division", "")),
        home=str(raw.get("home", "")),
        away=str(raw.get("away", "")),
        venue=str(raw.get("venue") or ""),
        court=str(raw.get("court") or ""),
        time=str(raw.get("time") or ""),
    )


def parse_snapshot(raw) -> dict:
    """Turn a decoded snapshot into a config dict plus schedule.

    Older snapshots without the envelope (state at the top level) are
    accepted. Returns dict with: created_at, config (as config.parse_config
    returns it), schedule, team_time_prefs.
    """
    if not isinstance(raw, dict):
        raise SnapshotError("Invalid snapshot: expected an object at the top level")
    version = raw.get("schemaVersion", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported snapshot schemaVersion: {version}")

    state = raw.get("state", raw)
    if not isinstance(state, dict):
        raise SnapshotError("Invalid snapshot: missing 'state' object")

    # Early exports called the timeslot list timeslotsArr
    timeslots = state.get("timeslots", state.get("timeslotsArr", []))

    config = {
        "season": {"name": str(state.get("seasonName", "") or ""),
                   "weeks": int(state.get("weeks", 0) or 0)},
        "timeslots": [parse_timeslot(t) for t in timeslots or []],
        "venues": [Venue(name=str(v.get("name", "")),
                         courts=[str(c) for c in v.get("courts", [])])
                   for v in state.get("venues", []) or []],
        "divisions": [Division(code=str(d.get("code", "")),
                               teams=int(d.get("teams", 0) or 0),
                               net_height_m=float(d.get("netHeightM", 2.43)))
                      for d in state.get("divisions", []) or []],
        "clash_rows": [ClashRow(teams=[str(t) for t in r.get("teams", [])])
                       for r in state.get("clashRows", []) or []],
        "team_names": dict(state.get("teamNames", {}) or {}),
        "venue_aliases": state.get("venueAliases"),
    }
    return {
        "created_at": str(raw.get("createdAt", "")),
        "config": config,
        "schedule": [_match_from_dict(m) for m in state.get("schedule", []) or []],
        "team_time_prefs": dict(state.get("teamTimePrefs", {}) or {}),
    }


def write_snapshot(path: str | Path, config: dict, matches: list[Match],
                   team_time_prefs: dict | None = None) -> Path:
    path = Path(path)
    snap = build_snapshot(config, matches, team_time_prefs)
    path.write_text(json.dumps(snap, indent=2))
    return path


def load_snapshot(path: str | Path) -> dict:
    with open(path) as f:
        raw = json.load(f)
    return parse_snapshot(raw)
