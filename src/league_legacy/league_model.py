from typing import Any, Dict, List, Optional

from .legacy_types import (
    UNKNOWN_MANAGER_NAME,
    UNKNOWN_PLAYER_NAME,
    DraftPick,
    EngineConfig,
    Game,
    GameSide,
    LeagueHistory,
    Manager,
    ManagerCandidate,
    Season,
    SeasonStanding,
    Transaction,
    TransactionPlayer,
)


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        return float(value)
    except Exception:
        return default


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except Exception:
        return default


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def to_engine_config(config: Any = None) -> EngineConfig:
    if config is None:
        return EngineConfig()
    if isinstance(config, EngineConfig):
        return config
    if not isinstance(config, dict):
        raise ValueError("engine config must be a dict or EngineConfig")

    payload = EngineConfig()
    for key, value in config.items():
        if hasattr(payload, key):
            setattr(payload, key, value)
    return payload


def build_manager_index(history: LeagueHistory) -> Dict[str, Manager]:
    return {manager.id: manager for manager in history.managers}


def manager_name(index: Dict[str, Manager], manager_id: Optional[str]) -> str:
    manager = index.get(manager_id) if manager_id is not None else None
    return manager.name if manager is not None else UNKNOWN_MANAGER_NAME


def manager_avatar(index: Dict[str, Manager], manager_id: Optional[str]) -> str:
    manager = index.get(manager_id) if manager_id is not None else None
    return manager.avatar if manager is not None else ""


def is_played(game: Game) -> bool:
    return not (game.team_a.points == 0 and game.team_b.points == 0)


def is_tie(points_a: float, points_b: float, epsilon: float) -> bool:
    return abs(points_a - points_b) < epsilon


def outcome(points_for: float, points_against: float, epsilon: float) -> str:
    if is_tie(points_for, points_against, epsilon):
        return "T"
    return "W" if points_for > points_against else "L"


def played_games(season: Season) -> List[Game]:
    """Non-empty games of one season in week order."""
    games = [game for game in (season.games or []) if is_played(game)]
    return sorted(games, key=lambda game: game.week)


def has_game_data(history: LeagueHistory) -> bool:
    return any(played_games(season) for season in history.seasons)


def find_standing(season: Season, manager_id: str) -> Optional[SeasonStanding]:
    for standing in season.standings:
        if standing.manager_id == manager_id:
            return standing
    return None


def merge_manager(
    existing: Optional[ManagerCandidate],
    incoming: Manager,
    incoming_year: int,
    incoming_is_placeholder: bool = False,
) -> ManagerCandidate:
    """Pick the display identity to keep when a manager is seen again.

    A real name always replaces a placeholder one. Between two names of the
    same placeholder status the more recent season wins.
    """
    candidate = ManagerCandidate(manager=incoming, year=int(incoming_year), is_placeholder=bool(incoming_is_placeholder))
    if existing is None:
        return candidate
    if existing.is_placeholder and not candidate.is_placeholder:
        return candidate
    if candidate.year > existing.year and existing.is_placeholder == candidate.is_placeholder:
        return candidate
    return existing


def validate_history(history: LeagueHistory) -> List[str]:
    warnings: List[str] = []
    index = build_manager_index(history)

    for season in history.seasons:
        ranks = sorted(standing.rank for standing in season.standings)
        if ranks != list(range(1, len(ranks) + 1)):
            warnings.append(f"rank_sequence_broken:year={season.year}:ranks={ranks}")

        referenced = [standing.manager_id for standing in season.standings]
        for game in season.games or []:
            referenced.extend([game.team_a.manager_id, game.team_b.manager_id])
        for pick in season.draft or []:
            referenced.append(pick.manager_id)
        for manager_id in sorted(set(referenced)):
            if manager_id not in index:
                warnings.append(f"dangling_manager:year={season.year}:id={manager_id}")

        if not played_games(season):
            warnings.append(f"no_game_data:year={season.year}")

    return warnings


def _standing_from_dict(data: Dict[str, Any]) -> SeasonStanding:
    stats = data.get("stats") if isinstance(data.get("stats"), dict) else data
    rank = _safe_int(stats.get("rank"))
    return SeasonStanding(
        manager_id=str(data.get("managerId", "")),
        team_key=str(data.get("teamKey", "") or ""),
        rank=rank,
        wins=_safe_int(stats.get("wins")),
        losses=_safe_int(stats.get("losses")),
        ties=_safe_int(stats.get("ties")),
        points_for=_safe_float(stats.get("pointsFor")),
        points_against=_safe_float(stats.get("pointsAgainst")),
        is_champion=bool(stats.get("isChampion", rank == 1)),
        is_playoff=bool(stats.get("isPlayoff", False)),
    )


def _side_from_dict(data: Any) -> GameSide:
    data = data if isinstance(data, dict) else {}
    return GameSide(
        manager_id=str(data.get("managerId", "")),
        points=_safe_float(data.get("points")),
        team_key=str(data.get("teamKey", "") or ""),
    )


def _game_from_dict(data: Dict[str, Any]) -> Game:
    return Game(
        week=_safe_int(data.get("week")),
        is_playoffs=bool(data.get("isPlayoffs", False)),
        team_a=_side_from_dict(data.get("teamA")),
        team_b=_side_from_dict(data.get("teamB")),
    )


def _pick_from_dict(data: Dict[str, Any]) -> DraftPick:
    return DraftPick(
        round=_safe_int(data.get("round")),
        pick=_safe_int(data.get("pick")),
        player=str(data.get("player") or UNKNOWN_PLAYER_NAME),
        player_key=data.get("playerKey"),
        manager_id=str(data.get("managerId", "")),
        team_key=str(data.get("teamKey", "") or ""),
    )


def _transaction_from_dict(data: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(data.get("id", "")),
        type=str(data.get("type", "")),
        date=_safe_int(data.get("date")),
        manager_ids=[str(value) for value in _as_list(data.get("managerIds"))],
        players=[
            TransactionPlayer(
                name=str(player.get("name", "")),
                type=str(player.get("type", "")),
                manager_id=str(player.get("managerId", "") or ""),
            )
            for player in _as_list(data.get("players"))
            if isinstance(player, dict)
        ],
    )


def _optional_list(data: Dict[str, Any], key: str, builder) -> Optional[List[Any]]:
    if key not in data or data[key] is None:
        return None
    return [builder(item) for item in _as_list(data[key]) if isinstance(item, dict)]


def history_from_payload(payload: Optional[Dict[str, Any]]) -> LeagueHistory:
    """Rebuild a LeagueHistory from its stored document form.

    Missing or mistyped fields fall back to zero values; optional season
    collections stay None when the document never carried them.
    """
    payload = payload if isinstance(payload, dict) else {}
    managers = [
        Manager(id=str(item.get("id", "")), name=str(item.get("name", "")), avatar=str(item.get("avatar", "") or ""))
        for item in _as_list(payload.get("managers"))
        if isinstance(item, dict)
    ]

    seasons: List[Season] = []
    for item in _as_list(payload.get("seasons")):
        if not isinstance(item, dict):
            continue
        champion = item.get("championId")
        seasons.append(
            Season(
                year=_safe_int(item.get("year")),
                key=str(item.get("key", "")),
                champion_id=str(champion) if champion is not None else None,
                standings=[_standing_from_dict(row) for row in _as_list(item.get("standings")) if isinstance(row, dict)],
                draft=_optional_list(item, "draft", _pick_from_dict),
                games=_optional_list(item, "games", _game_from_dict),
                transactions=_optional_list(item, "transactions", _transaction_from_dict),
            )
        )

    seasons.sort(key=lambda season: season.year)
    return LeagueHistory(managers=managers, seasons=seasons)


def _side_to_dict(side: GameSide) -> Dict[str, Any]:
    return {"managerId": side.manager_id, "teamKey": side.team_key, "points": side.points}


def history_to_payload(history: LeagueHistory) -> Dict[str, Any]:
    seasons: List[Dict[str, Any]] = []
    for season in history.seasons:
        entry: Dict[str, Any] = {
            "year": season.year,
            "key": season.key,
            "championId": season.champion_id,
            "standings": [
                {
                    "managerId": standing.manager_id,
                    "teamKey": standing.team_key,
                    "stats": {
                        "rank": standing.rank,
                        "wins": standing.wins,
                        "losses": standing.losses,
                        "ties": standing.ties,
                        "pointsFor": standing.points_for,
                        "pointsAgainst": standing.points_against,
                        "isChampion": standing.is_champion,
                        "isPlayoff": standing.is_playoff,
                    },
                }
                for standing in season.standings
            ],
        }
        if season.draft is not None:
            entry["draft"] = [
                {
                    "round": pick.round,
                    "pick": pick.pick,
                    "player": pick.player,
                    "playerKey": pick.player_key,
                    "managerId": pick.manager_id,
                    "teamKey": pick.team_key,
                }
                for pick in season.draft
            ]
        if season.games is not None:
            entry["games"] = [
                {
                    "week": game.week,
                    "isPlayoffs": game.is_playoffs,
                    "teamA": _side_to_dict(game.team_a),
                    "teamB": _side_to_dict(game.team_b),
                }
                for game in season.games
            ]
        if season.transactions is not None:
            entry["transactions"] = [
                {
                    "id": txn.id,
                    "type": txn.type,
                    "date": txn.date,
                    "managerIds": list(txn.manager_ids),
                    "players": [
                        {"name": player.name, "type": player.type, "managerId": player.manager_id}
                        for player in txn.players
                    ],
                }
                for txn in season.transactions
            ]
        seasons.append(entry)

    return {
        "managers": [{"id": m.id, "name": m.name, "avatar": m.avatar} for m in history.managers],
        "seasons": seasons,
    }
