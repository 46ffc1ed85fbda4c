"""Team identifiers derived from division definitions."""

from courtsched.models import BYE, Division


def pad2(n: int) -> str:
    return str(n).zfill(2)


def team_id(code: str, seq: int) -> str:
    return f"{code}-{pad2(seq)}"


def build_teams(divisions: list[Division]) -> list[str]:
    """Team IDs grouped by division in list order, ascending within a division.

    Non-positive team counts contribute no teams.
    """
    out = []
    for d in divisions:
        code = str(d.code or "").strip()
        for i in range(1, d.team_count + 1):
            out.append(team_id(code, i))
    return out


def teams_by_division(divisions: list[Division]) -> dict[str, list[str]]:
    """Ordered mapping of division code -> team IDs."""
    out: dict[str, list[str]] = {}
    for d in divisions:
        code = str(d.code or "").strip()
        out[code] = [team_id(code, i) for i in range(1, d.team_count + 1)]
    return out


def division_of(tid: str) -> str:
    """Division code part of a team ID ('' for BYE)."""
    if not tid or tid == BYE:
        return ""
    return tid.rsplit("-", 1)[0]
