from typing import Any, Callable, Dict, List, Optional, Tuple

from .legacy_types import (
    UNKNOWN_PLAYER_NAME,
    DraftPick,
    Game,
    GameSide,
    LeagueHistory,
    Manager,
    ManagerCandidate,
    Season,
    SeasonStanding,
    SyncConfig,
    Transaction,
    TransactionPlayer,
)
from .league_model import merge_manager

ADD_ACTIONS = {"FA ADDED", "WAIVER ADDED", "ADDED"}
DROP_ACTIONS = {"DROPPED"}
TRADE_ACTIONS = {"TRADED"}


def _to_sync_config(config: Any) -> SyncConfig:
    if isinstance(config, SyncConfig):
        return config
    if not isinstance(config, dict):
        raise ValueError("fetch_league_history requires a config dict or SyncConfig")
    if config.get("league_id") is None:
        raise ValueError("fetch_league_history requires config['league_id']")

    years = config.get("years") or []
    return SyncConfig(
        league_id=int(config["league_id"]),
        league_name=str(config.get("league_name", "") or ""),
        years=[int(value) for value in years],
        year=int(config["year"]) if config.get("year") is not None else None,
        start_year=config.get("start_year"),
        end_year=config.get("end_year"),
        lookback_seasons=int(config.get("lookback_seasons", 0) or 0),
        swid=config.get("swid"),
        espn_s2=config.get("espn_s2"),
        playoff_team_count=int(config.get("playoff_team_count", 4) or 4),
        activity_page_size=int(config.get("activity_page_size", 100) or 100),
    )


def resolve_sync_years(config: SyncConfig) -> List[int]:
    if config.years:
        return sorted(set(int(year) for year in config.years))
    if config.start_year is not None or config.end_year is not None:
        start = int(config.start_year if config.start_year is not None else config.end_year)
        end = int(config.end_year if config.end_year is not None else config.start_year)
        if start > end:
            start, end = end, start
        return list(range(start, end + 1))
    if config.year is None:
        raise ValueError("fetch_league_history requires years, start_year/end_year, or year")
    lookback = max(0, int(config.lookback_seasons))
    return list(range(int(config.year) - lookback, int(config.year) + 1))


def _owner_identity(team: Any) -> Tuple[str, str, bool]:
    team_id = int(getattr(team, "team_id", -1))
    team_name = str(getattr(team, "team_name", "") or f"Team {team_id}")
    owners = list(getattr(team, "owners", []) or [])
    owner = owners[0] if owners else None

    if isinstance(owner, dict):
        owner_id = str(owner.get("id") or f"team-{team_id}")
        display = str(owner.get("displayName") or "").strip()
        if not display:
            display = " ".join(part for part in (owner.get("firstName"), owner.get("lastName")) if part).strip()
    elif owner:
        owner_id = str(owner)
        display = ""
    else:
        owner_id = f"team-{team_id}"
        display = ""

    if not display or display.lower() in {"--hidden--", "hidden"}:
        return owner_id, team_name, True
    return owner_id, display, False


def _team_rank(team: Any) -> int:
    for attr in ("final_standing", "standing"):
        value = int(getattr(team, attr, 0) or 0)
        if value > 0:
            return value
    return 0


def _build_standings(
    teams: List[Any], year: int, team_to_manager: Dict[int, str], playoff_team_count: int
) -> List[SeasonStanding]:
    ordered = sorted(
        teams,
        key=lambda team: (-int(getattr(team, "wins", 0) or 0), -float(getattr(team, "points_for", 0.0) or 0.0)),
    )
    fallback_rank = {int(getattr(team, "team_id")): position for position, team in enumerate(ordered, start=1)}
    reported = {int(getattr(team, "team_id")): _team_rank(team) for team in teams}
    # One rank source per season; partial or duplicate ESPN standings fall back to wins/points.
    use_reported = all(reported.values()) and sorted(reported.values()) == list(range(1, len(teams) + 1))

    standings: List[SeasonStanding] = []
    for team in teams:
        team_id = int(getattr(team, "team_id"))
        rank = reported[team_id] if use_reported else fallback_rank[team_id]
        standings.append(
            SeasonStanding(
                manager_id=team_to_manager[team_id],
                team_key=f"{year}.t.{team_id}",
                rank=rank,
                wins=int(getattr(team, "wins", 0) or 0),
                losses=int(getattr(team, "losses", 0) or 0),
                ties=int(getattr(team, "ties", 0) or 0),
                points_for=float(getattr(team, "points_for", 0.0) or 0.0),
                points_against=float(getattr(team, "points_against", 0.0) or 0.0),
                is_champion=rank == 1,
                is_playoff=rank <= playoff_team_count,
            )
        )
    standings.sort(key=lambda standing: standing.rank)
    return standings


def _score_at(team: Any, idx: int) -> float:
    scores = list(getattr(team, "scores", []) or [])
    if idx >= len(scores) or scores[idx] is None:
        return 0.0
    return float(scores[idx])


def _build_games(teams: List[Any], year: int, team_to_manager: Dict[int, str], reg_weeks: int) -> List[Game]:
    teams_by_id = {int(getattr(team, "team_id")): team for team in teams}
    seen = set()
    games: List[Game] = []

    for team in teams:
        team_id = int(getattr(team, "team_id"))
        for idx, opponent_ref in enumerate(getattr(team, "schedule", []) or []):
            opponent_id = int(getattr(opponent_ref, "team_id", opponent_ref))
            if opponent_id == team_id or opponent_id not in teams_by_id:
                continue
            week = idx + 1
            pair = (week, min(team_id, opponent_id), max(team_id, opponent_id))
            if pair in seen:
                continue
            seen.add(pair)

            opponent = teams_by_id[opponent_id]
            games.append(
                Game(
                    week=week,
                    is_playoffs=week > reg_weeks,
                    team_a=GameSide(team_to_manager[team_id], _score_at(team, idx), f"{year}.t.{team_id}"),
                    team_b=GameSide(team_to_manager[opponent_id], _score_at(opponent, idx), f"{year}.t.{opponent_id}"),
                )
            )

    games.sort(key=lambda game: (game.week, game.team_a.team_key))
    return games


def _build_draft(league: Any, year: int, team_to_manager: Dict[int, str]) -> List[DraftPick]:
    team_count = max(1, len(team_to_manager))
    picks: List[DraftPick] = []
    for pick in list(getattr(league, "draft", []) or []):
        team_id = int(getattr(getattr(pick, "team", None), "team_id", -1))
        round_num = int(getattr(pick, "round_num", 0) or 0)
        round_pick = int(getattr(pick, "round_pick", 0) or 0)
        player_id = getattr(pick, "playerId", None)
        picks.append(
            DraftPick(
                round=round_num,
                pick=(round_num - 1) * team_count + round_pick,
                player=str(getattr(pick, "playerName", "") or UNKNOWN_PLAYER_NAME),
                player_key=str(player_id) if player_id is not None else None,
                manager_id=team_to_manager.get(team_id, "unknown"),
                team_key=f"{year}.t.{team_id}",
            )
        )
    picks.sort(key=lambda item: item.pick)
    return picks


def _build_transactions(
    league: Any, year: int, team_to_manager: Dict[int, str], page_size: int, warnings: List[str]
) -> List[Transaction]:
    transactions: List[Transaction] = []
    offset = 0
    while True:
        try:
            activities = list(league.recent_activity(size=page_size, offset=offset))
        except Exception as exc:
            warnings.append(f"year={year}:recent_activity_failed:{exc}")
            break
        if not activities:
            break

        for position, activity in enumerate(activities):
            date_ms = int(getattr(activity, "date", 0) or 0)
            players: List[TransactionPlayer] = []
            involved: List[str] = []
            kinds = set()
            for action in getattr(activity, "actions", []) or []:
                if len(action) < 3:
                    continue
                team, action_name, player = action[0], str(action[1]).upper(), action[2]
                manager_id = team_to_manager.get(int(getattr(team, "team_id", -1)), "")
                if action_name in ADD_ACTIONS:
                    direction = "add"
                elif action_name in DROP_ACTIONS:
                    direction = "drop"
                elif action_name in TRADE_ACTIONS:
                    direction = "add"
                    kinds.add("trade")
                else:
                    continue
                players.append(TransactionPlayer(name=str(getattr(player, "name", "") or "Unknown"), type=direction, manager_id=manager_id))
                if manager_id and manager_id not in involved:
                    involved.append(manager_id)

            if players:
                transactions.append(
                    Transaction(
                        id=f"{year}-{offset + position}",
                        type="trade" if "trade" in kinds else "add/drop",
                        date=date_ms,
                        manager_ids=involved,
                        players=players,
                    )
                )

        if len(activities) < page_size:
            break
        offset += page_size

    transactions.sort(key=lambda txn: txn.date, reverse=True)
    return transactions


def season_from_league(
    league: Any,
    year: int,
    config: SyncConfig,
    warnings: List[str],
) -> Tuple[Season, List[Tuple[Manager, bool]]]:
    teams = list(getattr(league, "teams", []) or [])
    settings = getattr(league, "settings", None)
    reg_weeks = int(getattr(settings, "reg_season_count", 14) or 14)
    playoff_team_count = int(getattr(settings, "playoff_team_count", 0) or config.playoff_team_count)

    team_to_manager: Dict[int, str] = {}
    identities: List[Tuple[Manager, bool]] = []
    for team in teams:
        owner_id, display, is_placeholder = _owner_identity(team)
        team_to_manager[int(getattr(team, "team_id"))] = owner_id
        identities.append((Manager(id=owner_id, name=display, avatar=str(getattr(team, "logo_url", "") or "")), is_placeholder))

    standings = _build_standings(teams, year, team_to_manager, playoff_team_count)
    games = _build_games(teams, year, team_to_manager, reg_weeks)
    if not games:
        warnings.append(f"year={year}:no_games")

    try:
        draft = _build_draft(league, year, team_to_manager)
    except Exception as exc:
        warnings.append(f"year={year}:draft_failed:{exc}")
        draft = []

    transactions = _build_transactions(league, year, team_to_manager, config.activity_page_size, warnings)

    season = Season(
        year=year,
        key=f"{config.league_id}.{year}",
        champion_id=standings[0].manager_id if standings else None,
        standings=standings,
        draft=draft,
        games=games,
        transactions=transactions,
    )
    return season, identities


def _default_loader(config: SyncConfig) -> Callable[[int], Any]:
    from espn_api.football import League

    def league_loader(load_year: int):
        return League(
            league_id=config.league_id,
            year=load_year,
            swid=config.swid,
            espn_s2=config.espn_s2,
        )

    return league_loader


def fetch_league_history(
    config: Any,
    league_loader: Optional[Callable[[int], Any]] = None,
) -> Tuple[LeagueHistory, List[str]]:
    """Load every requested season and fold them into one LeagueHistory.

    A season that fails to load or to convert is skipped with a warning. Manager display
    names are merged across seasons with merge_manager.
    """
    cfg = _to_sync_config(config)
    if league_loader is None and isinstance(config, dict):
        league_loader = config.get("league_loader")
    if league_loader is None:
        league_loader = _default_loader(cfg)

    warnings: List[str] = []
    seasons: List[Season] = []
    candidates: Dict[str, ManagerCandidate] = {}

    for year in resolve_sync_years(cfg):
        try:
            league = league_loader(year)
        except Exception as exc:
            warnings.append(f"year={year}:league_load_failed:{exc}")
            continue

        try:
            season, identities = season_from_league(league, year, cfg, warnings)
        except Exception as exc:
            warnings.append(f"year={year}:season_build_failed:{exc}")
            continue
        seasons.append(season)
        for manager, is_placeholder in identities:
            candidates[manager.id] = merge_manager(candidates.get(manager.id), manager, year, is_placeholder)

    seasons.sort(key=lambda season: season.year)
    managers = [candidate.manager for candidate in candidates.values()]
    return LeagueHistory(managers=managers, seasons=seasons), warnings
