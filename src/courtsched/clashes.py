"""Clash graph: teams that share players and must not play at the same time."""

import csv
from io import StringIO

from courtsched.models import ClashRow

ClashEdge = tuple[str, str]


def pair_key(a: str, b: str) -> tuple[str, str]:
    """Order-independent key for an unordered team pair."""
    x = str(a or "").strip()
    y = str(b or "").strip()
    return (x, y) if x < y else (y, x)


def build_clash_edges(rows: list[ClashRow]) -> list[ClashEdge]:
    """Expand each row into every unordered pair of its teams.

    Blank entries and self-pairs are skipped. Each pair is emitted once even
    when several rows repeat it; the first occurrence keeps its orientation.
    """
    seen: set[tuple[str, str]] = set()
    edges: list[ClashEdge] = []
    for row in rows or []:
        ts = [t for t in (str(x or "").strip() for x in row.teams) if t]
        for i, a in enumerate(ts):
            for b in ts[i + 1:]:
                if a == b:
                    continue
                key = pair_key(a, b)
                if key in seen:
                    continue
                seen.add(key)
                edges.append((a, b))
    return edges


class ClashGraph:
    """Undirected clash edges with constant-time pair lookup."""

    def __init__(self, edges: list[ClashEdge] | None = None):
        self._pairs: set[tuple[str, str]] = set()
        for a, b in edges or []:
            a = str(a or "").strip()
            b = str(b or "").strip()
            if not a or not b or a == b:
                continue
            self._pairs.add(pair_key(a, b))

    def __len__(self) -> int:
        return len(self._pairs)

    def is_clash_pair(self, a: str, b: str) -> bool:
        return pair_key(a, b) in self._pairs

    def clashes_with_any(self, team: str, others) -> str | None:
        """First team in `others` that clashes with `team`, or None."""
        for other in others:
            if self.is_clash_pair(team, other):
                return other
        return None


def clash_groups(edges: list[ClashEdge]) -> list[list[str]]:
    """Connected components of the clash graph, for diagnostics.

    Each group is sorted; groups are ordered largest first, then by first
    member.
    """
    adj: dict[str, set[str]] = {}
    for a, b in edges or []:
        a = str(a or "").strip()
        b = str(b or "").strip()
        if not a or not b or a == b:
            continue
        adj.setdefault(a, set()).add(b)
        adj.setdefault(b, set()).add(a)

    seen: set[str] = set()
    groups = []
    for start in adj:
        if start in seen:
            continue
        seen.add(start)
        stack = [start]
        comp = []
        while stack:
            cur = stack.pop()
            comp.append(cur)
            for nxt in adj[cur]:
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        groups.append(sorted(comp))

    groups.sort(key=lambda g: (-len(g), g[0]))
    return groups


def format_clash_csv(edges: list[ClashEdge]) -> str:
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["team", "clash_team"])
    for a, b in edges:
        writer.writerow([a, b])
    return output.getvalue()
