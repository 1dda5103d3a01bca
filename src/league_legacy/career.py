from typing import Dict, List, Optional

from .legacy_types import CareerTotals, LeagueHistory, Manager, SeasonStanding
from .league_model import build_manager_index


def _apply_standing(totals: CareerTotals, standing: SeasonStanding, year: int, league_size: int) -> None:
    totals.wins += standing.wins
    totals.losses += standing.losses
    totals.ties += standing.ties
    totals.points_for += standing.points_for
    totals.points_against += standing.points_against
    totals.seasons += 1
    totals.ranks.append(standing.rank)
    totals.years.append(year)
    if standing.is_champion:
        totals.titles += 1
    if standing.is_playoff:
        totals.playoff_appearances += 1
    if standing.rank <= 2:
        totals.finals += 1
    # Last place is judged per season; league size can change year to year.
    if standing.rank == league_size:
        totals.sackos += 1


def aggregate_careers(
    history: LeagueHistory,
    index: Optional[Dict[str, Manager]] = None,
    include_empty: bool = False,
) -> List[CareerTotals]:
    """Fold every season's standings into one CareerTotals per manager.

    Standings whose manager id is missing from the manager list are skipped.
    Managers without any recorded season are dropped unless include_empty is
    set; their rate properties then fall back to a floored denominator of 1.
    """
    index = index if index is not None else build_manager_index(history)
    totals: Dict[str, CareerTotals] = {
        manager.id: CareerTotals(manager_id=manager.id, name=manager.name, avatar=manager.avatar)
        for manager in history.managers
    }

    for season in history.seasons:
        league_size = len(season.standings)
        for standing in season.standings:
            slot = totals.get(standing.manager_id)
            if slot is None:
                continue
            _apply_standing(slot, standing, season.year, league_size)

    return [item for item in totals.values() if include_empty or item.seasons > 0]


def career_for(history: LeagueHistory, manager_id: str, index: Optional[Dict[str, Manager]] = None) -> Optional[CareerTotals]:
    for totals in aggregate_careers(history, index=index, include_empty=True):
        if totals.manager_id == manager_id:
            return totals
    return None
