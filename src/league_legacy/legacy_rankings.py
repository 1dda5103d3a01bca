from typing import Any, Dict, List, Optional

from .career import aggregate_careers
from .legacy_types import CareerTotals, LeagueHistory, RankingRow

TITLE_WEIGHT = 10.0
PLAYOFF_WEIGHT = 3.0
WIN_WEIGHT = 0.5

SORT_FIELDS = (
    "legacy_score",
    "wins",
    "win_pct",
    "points_for",
    "titles",
    "avg_rank",
    "playoff_pct",
)

# Lower average finish is better, so it is the only field ranked ascending by default.
ASCENDING_BY_DEFAULT = {"avg_rank"}


def legacy_score(titles: int, playoff_appearances: int, wins: int) -> float:
    return titles * TITLE_WEIGHT + playoff_appearances * PLAYOFF_WEIGHT + wins * WIN_WEIGHT


def _ranking_row(totals: CareerTotals) -> RankingRow:
    return RankingRow(
        manager_id=totals.manager_id,
        name=totals.name,
        avatar=totals.avatar,
        legacy_score=legacy_score(totals.titles, totals.playoff_appearances, totals.wins),
        titles=totals.titles,
        wins=totals.wins,
        losses=totals.losses,
        win_pct=totals.win_pct,
        points_for=totals.points_for,
        seasons=totals.seasons,
        playoff_appearances=totals.playoff_appearances,
        playoff_pct=totals.playoff_pct,
        avg_rank=totals.avg_rank,
        sackos=totals.sackos,
    )


def default_descending(sort_field: str) -> bool:
    return sort_field not in ASCENDING_BY_DEFAULT


def sort_rankings(rows: List[RankingRow], sort_field: str = "legacy_score", descending: Optional[bool] = None) -> List[RankingRow]:
    if sort_field not in SORT_FIELDS:
        raise ValueError(f"unknown sort field '{sort_field}', expected one of {', '.join(SORT_FIELDS)}")
    if descending is None:
        descending = default_descending(sort_field)

    # Python's sort is stable in both directions, so the id order survives as the tie-break.
    ordered = sorted(rows, key=lambda row: row.manager_id)
    return sorted(ordered, key=lambda row: getattr(row, sort_field), reverse=bool(descending))


def rank_managers(
    history: LeagueHistory,
    sort_field: str = "legacy_score",
    descending: Optional[bool] = None,
) -> List[RankingRow]:
    rows = [_ranking_row(totals) for totals in aggregate_careers(history)]
    return sort_rankings(rows, sort_field=sort_field, descending=descending)


def ranking_table(history: LeagueHistory, sort_field: str = "legacy_score", descending: Optional[bool] = None) -> List[Dict[str, Any]]:
    rows = rank_managers(history, sort_field=sort_field, descending=descending)
    return [
        {
            "position": position,
            "manager_id": row.manager_id,
            "name": row.name,
            "legacy_score": row.legacy_score,
            "titles": row.titles,
            "wins": row.wins,
            "win_pct": row.win_pct,
            "playoff_pct": row.playoff_pct,
            "avg_rank": row.avg_rank,
            "points_for": row.points_for,
        }
        for position, row in enumerate(rows, start=1)
    ]
