from typing import Any, Dict, List, Optional, Tuple

from .career import career_for
from .game_stats import summarize_streaks
from .legacy_types import (
    STATUS_OK,
    STATUS_UNAVAILABLE,
    CareerTotals,
    ComparisonSide,
    Game,
    GameSide,
    LeagueHistory,
    Manager,
    ManagerComparison,
    MatchupRecord,
    RivalryRecord,
    RivalryReport,
    SeasonComparison,
)
from .league_model import (
    build_manager_index,
    find_standing,
    manager_avatar,
    manager_name,
    outcome,
    played_games,
    to_engine_config,
)


def _sides_for(game: Game, manager_id: str) -> Optional[Tuple[GameSide, GameSide]]:
    if game.team_a.manager_id == manager_id:
        return game.team_a, game.team_b
    if game.team_b.manager_id == manager_id:
        return game.team_b, game.team_a
    return None


def _apply_matchup(record: RivalryRecord, matchup: MatchupRecord) -> None:
    record.points_for += matchup.points_for
    record.points_against += matchup.points_against
    if matchup.result == "W":
        record.wins += 1
    elif matchup.result == "L":
        record.losses += 1
    else:
        record.ties += 1
    record.history.append(matchup)


def select_nemesis_and_pigeon(
    rivalries: List[RivalryRecord],
    min_games: int = 5,
    nemesis_max_win_pct: float = 45.0,
    pigeon_min_win_pct: float = 55.0,
) -> Tuple[Optional[RivalryRecord], Optional[RivalryRecord]]:
    qualified = [record for record in rivalries if record.games >= min_games]
    if not qualified:
        return None, None

    by_win_pct = sorted(qualified, key=lambda record: record.win_pct)
    lowest, highest = by_win_pct[0], by_win_pct[-1]
    nemesis = lowest if lowest.win_pct < nemesis_max_win_pct else None
    pigeon = highest if highest.win_pct > pigeon_min_win_pct else None
    return nemesis, pigeon


def build_rivalries(
    history: LeagueHistory,
    subject_id: str,
    config: Optional[Any] = None,
    index: Optional[Dict[str, Manager]] = None,
) -> RivalryReport:
    """Career record of one manager against every opponent they have faced.

    Opponents are ordered by games played (most first). Opponent ids that
    are not in the manager list are ignored.
    """
    cfg = to_engine_config(config)
    index = index if index is not None else build_manager_index(history)
    if subject_id not in index:
        return RivalryReport(status=STATUS_UNAVAILABLE, subject_id=subject_id, subject_name=manager_name(index, subject_id))

    records: Dict[str, RivalryRecord] = {
        manager.id: RivalryRecord(opponent_id=manager.id, opponent_name=manager.name, opponent_avatar=manager.avatar)
        for manager in history.managers
        if manager.id != subject_id
    }

    for season in history.seasons:
        for game in played_games(season):
            sides = _sides_for(game, subject_id)
            if sides is None:
                continue
            mine, theirs = sides
            record = records.get(theirs.manager_id)
            if record is None:
                continue
            _apply_matchup(
                record,
                MatchupRecord(
                    year=season.year,
                    week=game.week,
                    result=outcome(mine.points, theirs.points, cfg.tie_epsilon),
                    points_for=mine.points,
                    points_against=theirs.points,
                    is_playoffs=bool(game.is_playoffs),
                ),
            )

    rivalries = [record for record in records.values() if record.games > 0]
    for record in rivalries:
        streak = summarize_streaks([item.result for item in record.history])
        record.current_streak_type = streak.current_type
        record.current_streak_length = streak.current_length
    rivalries.sort(key=lambda record: (-record.games, record.opponent_id))

    nemesis, pigeon = select_nemesis_and_pigeon(
        rivalries,
        min_games=int(cfg.rivalry_min_games),
        nemesis_max_win_pct=float(cfg.nemesis_max_win_pct),
        pigeon_min_win_pct=float(cfg.pigeon_min_win_pct),
    )
    return RivalryReport(
        status=STATUS_OK if rivalries else STATUS_UNAVAILABLE,
        subject_id=subject_id,
        subject_name=manager_name(index, subject_id),
        rivalries=rivalries,
        nemesis=nemesis,
        pigeon=pigeon,
    )


def _comparison_side(totals: Optional[CareerTotals], manager_id: str, index: Dict[str, Manager]) -> ComparisonSide:
    if totals is None:
        totals = CareerTotals(manager_id=manager_id, name=manager_name(index, manager_id), avatar=manager_avatar(index, manager_id))
    avg_rank = sum(totals.ranks) / len(totals.ranks) if totals.ranks else 0.0
    return ComparisonSide(
        manager_id=totals.manager_id,
        name=totals.name,
        avatar=totals.avatar,
        seasons=totals.seasons,
        wins=totals.wins,
        losses=totals.losses,
        ties=totals.ties,
        points_for=totals.points_for,
        titles=totals.titles,
        playoff_appearances=totals.playoff_appearances,
        best_rank=totals.best_rank,
        avg_rank=avg_rank,
        win_pct=totals.win_pct * 100.0,
    )


def _edge(value_a: float, value_b: float, lower_is_better: bool = False) -> str:
    if value_a == value_b:
        return "T"
    a_better = value_a < value_b if lower_is_better else value_a > value_b
    return "A" if a_better else "B"


def compare_managers(
    history: LeagueHistory,
    manager_a_id: str,
    manager_b_id: str,
    config: Optional[Any] = None,
    index: Optional[Dict[str, Manager]] = None,
) -> ManagerComparison:
    """Side-by-side career totals plus the direct matchup history of two managers."""
    cfg = to_engine_config(config)
    index = index if index is not None else build_manager_index(history)

    side_a = _comparison_side(career_for(history, manager_a_id, index=index), manager_a_id, index)
    side_b = _comparison_side(career_for(history, manager_b_id, index=index), manager_b_id, index)

    h2h = {"W": 0, "L": 0, "T": 0}
    matchups: List[MatchupRecord] = []
    seasons: List[SeasonComparison] = []
    has_matchup_data = False

    for season in history.seasons:
        games = played_games(season)
        season_has_data = bool(games)
        has_matchup_data = has_matchup_data or season_has_data

        season_matchups: List[MatchupRecord] = []
        for game in games:
            sides = _sides_for(game, manager_a_id)
            if sides is None or sides[1].manager_id != manager_b_id:
                continue
            mine, theirs = sides
            matchup = MatchupRecord(
                year=season.year,
                week=game.week,
                result=outcome(mine.points, theirs.points, cfg.tie_epsilon),
                points_for=mine.points,
                points_against=theirs.points,
                is_playoffs=bool(game.is_playoffs),
            )
            h2h[matchup.result] += 1
            season_matchups.append(matchup)

        matchups.extend(season_matchups)
        standing_a = find_standing(season, manager_a_id)
        standing_b = find_standing(season, manager_b_id)
        if standing_a is not None or standing_b is not None or season_matchups:
            seasons.append(
                SeasonComparison(
                    year=season.year,
                    points_for_a=standing_a.points_for if standing_a is not None else None,
                    points_for_b=standing_b.points_for if standing_b is not None else None,
                    has_game_data=season_has_data,
                    matchups=season_matchups,
                )
            )

    edges = {
        "titles": _edge(side_a.titles, side_b.titles),
        "win_pct": _edge(side_a.win_pct, side_b.win_pct),
        "playoff_appearances": _edge(side_a.playoff_appearances, side_b.playoff_appearances),
        "avg_rank": _edge(side_a.avg_rank, side_b.avg_rank, lower_is_better=True),
        "points_for": _edge(side_a.points_for, side_b.points_for),
    }

    return ManagerComparison(
        manager_a=side_a,
        manager_b=side_b,
        h2h_wins=h2h["W"],
        h2h_losses=h2h["L"],
        h2h_ties=h2h["T"],
        has_matchup_data=has_matchup_data,
        matchups=matchups,
        seasons=seasons,
        edges=edges,
    )
