"""Slot catalogue: every (venue, court, timeslot) a game can be placed in.

The catalogue order is the placement priority. place_matches() walks it
front to back and takes the first slot that passes every check, so any
change to slot_sort_key() changes scheduling outcomes.
"""

import re

from courtsched.models import Slot, Venue

DEFAULT_VENUE_ALIASES = {"mullum": "Mullum"}

_NUM_ALPHA = re.compile(r"^([0-9]+)([A-Za-z]+)$")  # 3A
_ALPHA_NUM = re.compile(r"^([A-Za-z]+)([0-9]+)$")  # DC1


def short_venue_name(name: str, aliases: dict[str, str] | None = None) -> str:
    """Display label for a venue.

    A venue whose name contains an alias key (case-insensitive) is shown by
    the alias label, e.g. "Mullum Mullum Stadium" -> "Mullum".
    """
    s = str(name or "").strip()
    if not s:
        return s
    if aliases is None:
        aliases = DEFAULT_VENUE_ALIASES
    lower = s.lower()
    for needle, label in aliases.items():
        if needle.lower() in lower:
            return label
    return s


def court_sort_key(court: str) -> tuple[int, int, str]:
    """Natural sort key: '3A' style first, then 'DC1' style, then the rest."""
    s = str(court or "").strip()
    m = _NUM_ALPHA.match(s)
    if m:
        return (0, int(m.group(1)), m.group(2).upper())
    m = _ALPHA_NUM.match(s)
    if m:
        return (1, int(m.group(2)), m.group(1).upper())
    return (2, 0, s.upper())


def time_to_minutes(hhmm: str) -> int:
    """Minutes past midnight for 'HH:MM'; unparseable values sort last."""
    parts = str(hhmm or "").strip().split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        return 24 * 60
    return int(parts[0]) * 60 + int(parts[1])


def format_time_label(hhmm: str) -> str:
    """'19:00' -> '7:00pm'. Values not in HH:MM form are returned trimmed."""
    s = str(hhmm or "").strip()
    parts = s.split(":")
    if len(parts) != 2 or not parts[0].isdigit() or len(parts[1]) != 2:
        return s
    hh = int(parts[0])
    suffix = "pm" if hh >= 12 else "am"
    h = hh % 12
    if h == 0:
        h = 12
    return f"{h}:{parts[1]}{suffix}"


def slot_sort_key(slot: Slot) -> tuple:
    return (slot.venue, court_sort_key(slot.court), time_to_minutes(slot.time_raw),
            slot.time_raw, slot.court)


def build_slot_catalogue(venues: list[Venue], timeslots: list[str],
                         venue_aliases: dict[str, str] | None = None,
                         ) -> list[Slot]:
    """All slots for one week in canonical order.

    Order: venue display label, court natural sort, time ascending.
    Empty court labels and empty timeslots are skipped.
    """
    times = [t for t in (str(t or "").strip() for t in timeslots) if t]
    slots = []
    for v in venues:
        venue = short_venue_name(v.name, venue_aliases)
        for court in v.court_labels():
            for t in times:
                slots.append(Slot(venue=venue, court=court, time_raw=t,
                                  time=format_time_label(t)))
    slots.sort(key=slot_sort_key)
    return slots


def total_courts(venues: list[Venue]) -> int:
    return sum(len(v.court_labels()) for v in venues)


def capacity_per_week(venues: list[Venue], timeslots: list[str]) -> int:
    """Games that fit in one week: courts x timeslots."""
    times = [t for t in timeslots if str(t or "").strip()]
    return total_courts(venues) * len(times)
