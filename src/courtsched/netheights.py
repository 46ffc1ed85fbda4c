"""Net height changes: how often a court's net must be raised or lowered.

Divisions play at different net heights. Whenever consecutive games on the
same court in the same week belong to divisions with different heights,
someone has to adjust the net between them.
"""

import math
from dataclasses import dataclass

from courtsched.models import Division, Match

_UNKNOWN_SLOT = 9999


@dataclass
class NetHeightChange:
    week: int
    venue: str
    court: str
    from_time: str
    to_time: str
    from_division: str
    to_division: str
    from_height_m: float
    to_height_m: float


def compute_net_height_changes(matches: list[Match], divisions: list[Division],
                               timeslots: list[str]) -> dict:
    """Find every net height change across the schedule.

    Games are grouped by (week, venue, court) and walked in timeslot order.
    Games with no placement, no time, or a division without a usable height
    are skipped.

    Returns dict with:
    - total: number of changes
    - by_week: week -> number of changes
    - events: list of NetHeightChange, sorted by week, venue/court, time
    """
    height_by_div = {str(d.code).strip(): d.net_height_m for d in divisions}
    slot_index = {str(t or "").strip(): i for i, t in enumerate(timeslots)}

    def _idx(t: str) -> int:
        return slot_index.get(str(t or "").strip(), _UNKNOWN_SLOT)

    groups: dict[tuple[int, str, str], list[Match]] = {}
    for m in matches:
        venue = (m.venue or "").strip()
        court = (m.court or "").strip()
        if not m.week or not venue or not court or m.is_bye:
            continue
        groups.setdefault((m.week, venue, court), []).append(m)

    events = []
    by_week: dict[int, int] = {}
    for (week, venue, court), group in groups.items():
        prev = None
        for m in sorted(group, key=lambda x: _idx(x.time)):
            t = (m.time or "").strip()
            div = (m.division or "").strip()
            height = height_by_div.get(div)
            if not t or not div or height is None or not math.isfinite(height):
                continue
            if prev is not None and prev[2] != height:
                events.append(NetHeightChange(
                    week=week, venue=venue, court=court,
                    from_time=prev[0], to_time=t,
                    from_division=prev[1], to_division=div,
                    from_height_m=prev[2], to_height_m=height,
                ))
                by_week[week] = by_week.get(week, 0) + 1
            prev = (t, div, height)

    events.sort(key=lambda e: (e.week, e.venue + "||" + e.court, _idx(e.to_time)))
    return {"total": len(events), "by_week": by_week, "events": events}
