"""Data models for the courtsched league scheduler."""

from dataclasses import dataclass, field
from typing import Optional

BYE = "BYE"

# Placeholders carried by BYE matches in place of a real location.
BYE_VENUE = "BYE"
BYE_COURT = "-"


@dataclass
class Division:
    """A named group of teams that only play each other."""
    code: str
    teams: int
    net_height_m: float = 2.43

    @property
    def team_count(self) -> int:
        return max(0, int(self.teams or 0))


@dataclass
class Venue:
    """A venue with one or more parallel courts."""
    name: str
    courts: list[str] = field(default_factory=list)

    def court_labels(self) -> list[str]:
        """Trimmed, non-empty court labels in configured order."""
        return [c for c in (str(c or "").strip() for c in self.courts) if c]


@dataclass
class ClashRow:
    """A group of teams that share players and must not play at the same time."""
    teams: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Slot:
    """One unit of weekly capacity: a venue, a court and a timeslot."""
    venue: str
    court: str
    time_raw: str  # "19:00"
    time: str  # "7:00pm"

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.venue, self.court, self.time_raw)


@dataclass
class Match:
    """A pairing for one week, placed or not.

    venue/court/time are empty until placement. After placement a game with
    empty location fields could not be scheduled; a BYE carries the
    BYE_VENUE/BYE_COURT placeholders.
    """
    week: int
    division: str
    home: str
    away: str
    venue: str = ""
    court: str = ""
    time: str = ""

    @property
    def is_bye(self) -> bool:
        return self.away == BYE

    @property
    def is_placed(self) -> bool:
        return not self.is_bye and bool(self.venue and self.court and self.time)

    @property
    def is_unplaced(self) -> bool:
        return not self.is_bye and not self.is_placed

    @property
    def slot_key(self) -> Optional[tuple[str, str, str]]:
        if not self.is_placed:
            return None
        return (self.venue, self.court, self.time)

    def opponent(self, team_id: str) -> str:
        if team_id == self.home:
            return self.away
        return self.home


@dataclass
class PlacementEvent:
    """A single accept/reject decision made while placing a week's games."""
    kind: str  # "reject", "placed" or "unplaced"
    week: int
    division: str
    home: str
    away: str
    venue: str = ""
    court: str = ""
    time: str = ""
    reason: str = ""  # "team_busy" or "clash" for rejects
    other: str = ""  # the team already playing that caused a clash


@dataclass
class DivisionStats:
    games: int = 0
    byes: int = 0
    unassigned: int = 0


@dataclass
class WeeklyStats:
    week: int
    games: int = 0
    placed: int = 0
    unplaced: int = 0
    byes: int = 0
    capacity: int = 0

    @property
    def utilization(self) -> float:
        if self.capacity <= 0:
            return 0.0
        return self.placed / self.capacity
