"""Main scheduling engine for courtsched.

Two phases:
1. Pairings: round-robin rotation per division (roundrobin.py)
2. Placement: greedy first-fit of each week's games into the slot catalogue

Placement is deterministic: games are claimed in division+home+away order
and each takes the first slot, in catalogue order, that is free, where
neither team is already playing at that time, and where neither team
clashes with anyone already playing at that time. There is no backtracking.
A game with no acceptable slot is kept with empty venue/court/time so the
caller can report it.
"""

from collections import defaultdict
from typing import Callable, Optional

from courtsched.clashes import ClashGraph, build_clash_edges
from courtsched.models import (
    BYE, BYE_COURT, BYE_VENUE, Match, PlacementEvent, Slot,
)
from courtsched.roundrobin import generate_pairings
from courtsched.slots import build_slot_catalogue

EventSink = Callable[[PlacementEvent], None]


def _game_order_key(m: Match) -> str:
    return m.division + m.home + m.away


def display_sort_key(m: Match) -> tuple:
    """Presentation order: week, division, venue, time, home+away."""
    return (m.week, m.division, m.venue or "", m.time or "", m.home + m.away)


def _place_week(week: int, games: list[Match], slots: list[Slot],
                clashes: ClashGraph,
                on_event: Optional[EventSink]) -> list[Match]:
    """Place one week's games. State here never outlives the week."""
    used_slot_keys: set[tuple[str, str, str]] = set()
    playing_at_time: dict[str, set[str]] = defaultdict(set)

    def emit(kind, g, slot=None, reason="", other=""):
        if on_event is None:
            return
        on_event(PlacementEvent(
            kind=kind, week=week, division=g.division, home=g.home, away=g.away,
            venue=slot.venue if slot else "", court=slot.court if slot else "",
            time=slot.time_raw if slot else "", reason=reason, other=other,
        ))

    out = []
    for g in sorted(games, key=_game_order_key):
        placed = None
        for slot in slots:
            t = slot.time_raw
            if not t:
                continue
            if slot.key in used_slot_keys:
                continue

            playing = playing_at_time[t]
            if g.home in playing or g.away in playing:
                emit("reject", g, slot, reason="team_busy")
                continue

            others = sorted(playing)
            other = (clashes.clashes_with_any(g.home, others)
                     or clashes.clashes_with_any(g.away, others))
            if other is not None:
                emit("reject", g, slot, reason="clash", other=other)
                continue

            placed = slot
            break

        if placed is None:
            emit("unplaced", g)
            out.append(Match(week=week, division=g.division,
                             home=g.home, away=g.away))
            continue

        playing_at_time[placed.time_raw].update((g.home, g.away))
        used_slot_keys.add(placed.key)
        emit("placed", g, placed)
        out.append(Match(week=week, division=g.division, home=g.home,
                         away=g.away, venue=placed.venue, court=placed.court,
                         time=placed.time_raw))
    return out


def place_matches(pairings: list[Match], slots: list[Slot],
                  clash_edges: list[tuple[str, str]] | None = None,
                  on_event: Optional[EventSink] = None) -> list[Match]:
    """Assign every non-BYE pairing to a slot, week by week.

    Returns new Match objects (the input list is not modified), sorted for
    display. BYEs get the BYE/'-' placeholders and use no capacity; games
    that fit nowhere come back with empty venue/court/time.

    on_event, when given, receives a PlacementEvent for every rejected slot,
    every placement and every game left unplaced.
    """
    clashes = ClashGraph(clash_edges)

    by_week: dict[int, list[Match]] = defaultdict(list)
    for m in pairings:
        by_week[m.week].append(m)

    out = []
    for week in sorted(by_week):
        week_matches = by_week[week]
        games = [m for m in week_matches if m.away != BYE]
        byes = [m for m in week_matches if m.away == BYE]

        out.extend(_place_week(week, games, slots, clashes, on_event))
        for b in byes:
            out.append(Match(week=week, division=b.division, home=b.home,
                             away=BYE, venue=BYE_VENUE, court=BYE_COURT, time=""))

    out.sort(key=display_sort_key)
    return out


def schedule(config: dict, on_event: Optional[EventSink] = None) -> list[Match]:
    """Run the full pipeline on a loaded config (see config.load_config)."""
    season = config["season"]
    divisions = config["divisions"]

    pairings = generate_pairings(season["weeks"], divisions)
    slots = build_slot_catalogue(config["venues"], config["timeslots"],
                                 venue_aliases=config.get("venue_aliases"))
    edges = build_clash_edges(config.get("clash_rows", []))
    return place_matches(pairings, slots, edges, on_event=on_event)


def print_event(event: PlacementEvent) -> None:
    """Event sink that traces placement decisions to stdout."""
    prefix = f"[week {event.week}]"
    game = f"{event.home} vs {event.away}"
    if event.kind == "placed":
        print(f"{prefix} [ok] {game} @ {event.venue} {event.court} {event.time}")
    elif event.kind == "reject":
        if event.reason == "clash":
            why = f"clash with {event.other}"
        else:
            why = "team already playing"
        print(f"{prefix} [reject] {game} @ {event.time}: {why}")
    else:
        print(f"{prefix} [unassigned] {event.division} {game}: no valid slot")
