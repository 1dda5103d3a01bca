from typing import Any, Dict, List, Optional

from .career import aggregate_careers
from .legacy_types import (
    LeagueHistory,
    Manager,
    PlayoffEfficiencyRow,
    RecordBook,
    RecordHolder,
    SeasonChampion,
)
from .league_model import build_manager_index, to_engine_config


def _holder(manager: Manager, value: float, year: Optional[int] = None) -> RecordHolder:
    return RecordHolder(manager_id=manager.id, name=manager.name, avatar=manager.avatar, value=float(value), year=year)


def build_record_book(history: LeagueHistory, index: Optional[Dict[str, Manager]] = None) -> RecordBook:
    """Single-season scoring extremes, best average finish and most last-place finishes."""
    index = index if index is not None else build_manager_index(history)
    book = RecordBook()

    for season in history.seasons:
        for standing in season.standings:
            manager = index.get(standing.manager_id)
            if manager is None:
                continue
            high = book.highest_season_points
            if high is None or standing.points_for > high.value:
                book.highest_season_points = _holder(manager, standing.points_for, season.year)
            low = book.lowest_season_points
            # Zero-point seasons are unplayed placeholders, not record lows.
            if standing.points_for > 0 and (low is None or standing.points_for < low.value):
                book.lowest_season_points = _holder(manager, standing.points_for, season.year)

    for totals in aggregate_careers(history, index=index):
        manager = index[totals.manager_id]
        best = book.best_avg_rank
        if best is None or totals.avg_rank < best.value:
            book.best_avg_rank = _holder(manager, totals.avg_rank)
        most = book.most_sackos
        if totals.sackos > 0 and (most is None or totals.sackos > most.value):
            book.most_sackos = _holder(manager, totals.sackos)

    return book


def playoff_efficiency(history: LeagueHistory, config: Optional[Any] = None) -> List[PlayoffEfficiencyRow]:
    cfg = to_engine_config(config)
    rows = [
        PlayoffEfficiencyRow(
            manager_id=totals.manager_id,
            name=totals.name,
            seasons=totals.seasons,
            playoffs=totals.playoff_appearances,
            finals=totals.finals,
            titles=totals.titles,
            conversion_rate=(totals.titles / totals.playoff_appearances * 100.0) if totals.playoff_appearances > 0 else 0.0,
        )
        for totals in aggregate_careers(history)
    ]
    rows.sort(key=lambda row: (-row.titles, -row.playoffs, row.manager_id))
    return rows[: int(cfg.playoff_efficiency_limit)]


def season_champions(history: LeagueHistory, index: Optional[Dict[str, Manager]] = None) -> List[SeasonChampion]:
    index = index if index is not None else build_manager_index(history)
    champions: List[SeasonChampion] = []
    for season in history.seasons:
        champion_id = next((standing.manager_id for standing in season.standings if standing.rank == 1), None)
        if champion_id is None:
            champion_id = season.champion_id
        manager = index.get(champion_id) if champion_id is not None else None
        champions.append(
            SeasonChampion(
                year=season.year,
                key=season.key,
                champion_id=champion_id,
                champion_name=manager.name if manager is not None else None,
            )
        )
    return champions


def points_history(history: LeagueHistory, index: Optional[Dict[str, Manager]] = None) -> List[Dict[str, Any]]:
    """One row per season mapping manager name to points-for, for trend charts."""
    index = index if index is not None else build_manager_index(history)
    rows: List[Dict[str, Any]] = []
    for season in history.seasons:
        entry: Dict[str, Any] = {"year": season.year}
        for standing in season.standings:
            manager = index.get(standing.manager_id)
            if manager is not None:
                entry[manager.name] = standing.points_for
        rows.append(entry)
    return rows
