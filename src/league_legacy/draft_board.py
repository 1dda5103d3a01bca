from dataclasses import replace
from typing import Dict, List, Optional

from .legacy_types import UNKNOWN_PLAYER_NAME, DraftPick, LeagueHistory, Manager, Season, Transaction
from .league_model import build_manager_index


def season_for_year(history: LeagueHistory, year: int) -> Optional[Season]:
    for season in history.seasons:
        if season.year == int(year):
            return season
    return None


def search_draft(
    history: LeagueHistory,
    year: int,
    term: str = "",
    index: Optional[Dict[str, Manager]] = None,
) -> List[DraftPick]:
    """Picks of one season whose manager name, player name or overall pick number match term."""
    season = season_for_year(history, year)
    if season is None or not season.draft:
        return []

    index = index if index is not None else build_manager_index(history)
    needle = str(term or "").strip().lower()
    matches: List[DraftPick] = []
    for pick in sorted(season.draft, key=lambda item: item.pick):
        manager = index.get(pick.manager_id)
        manager_label = manager.name.lower() if manager is not None else ""
        player_label = (pick.player or UNKNOWN_PLAYER_NAME).lower()
        if needle in manager_label or needle in player_label or str(pick.pick) == needle:
            matches.append(pick)
    return matches


def picks_for_manager(history: LeagueHistory, manager_id: str) -> Dict[int, List[DraftPick]]:
    return {
        season.year: [pick for pick in season.draft if pick.manager_id == manager_id]
        for season in history.seasons
        if season.draft
    }


def resolve_player_names(history: LeagueHistory, name_map: Dict[str, str]) -> LeagueHistory:
    """Return a copy of history with placeholder draft names filled from a player_key map."""
    seasons: List[Season] = []
    for season in history.seasons:
        if season.draft is None:
            seasons.append(season)
            continue
        draft = [
            replace(pick, player=name_map[pick.player_key]) if pick.player_key and name_map.get(pick.player_key) else pick
            for pick in season.draft
        ]
        seasons.append(replace(season, draft=draft))
    return replace(history, seasons=seasons)


def unresolved_player_keys(history: LeagueHistory) -> List[str]:
    keys = {
        pick.player_key
        for season in history.seasons
        for pick in season.draft or []
        if pick.player_key and pick.player == UNKNOWN_PLAYER_NAME
    }
    return sorted(keys)


def transactions_for_manager(history: LeagueHistory, manager_id: str, year: Optional[int] = None) -> List[Transaction]:
    out: List[Transaction] = []
    for season in history.seasons:
        if year is not None and season.year != int(year):
            continue
        for txn in season.transactions or []:
            if manager_id in txn.manager_ids:
                out.append(txn)
    out.sort(key=lambda txn: txn.date)
    return out
