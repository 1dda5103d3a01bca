from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .legacy_types import (
    STATUS_INSUFFICIENT_SAMPLE,
    STATUS_OK,
    STATUS_UNAVAILABLE,
    ConsistencyRow,
    GameMargin,
    GameStatistics,
    LeagueHistory,
    Manager,
    ScheduleLuckRow,
    StatSection,
    StreakRow,
    StreakSummary,
    WeeklyHighRow,
)
from .league_model import (
    build_manager_index,
    manager_avatar,
    manager_name,
    outcome,
    played_games,
    to_engine_config,
)


def summarize_streaks(outcomes: Sequence[str]) -> StreakSummary:
    """Walk chronological W/L/T outcomes.

    A tie clears both running counters. The current streak is the run of
    identical results at the end of the sequence, ties included.
    """
    summary = StreakSummary()
    current_win = 0
    current_loss = 0
    for result in outcomes:
        if result == "W":
            current_win += 1
            current_loss = 0
            summary.max_win = max(summary.max_win, current_win)
        elif result == "L":
            current_loss += 1
            current_win = 0
            summary.max_loss = max(summary.max_loss, current_loss)
        else:
            current_win = 0
            current_loss = 0

    if outcomes:
        last = outcomes[-1]
        length = 0
        for result in reversed(outcomes):
            if result != last:
                break
            length += 1
        summary.current_type = last
        summary.current_length = length
    return summary


def _pct(wins: int, losses: int) -> float:
    return wins / max(1, wins + losses) * 100.0


class _ManagerGameLog:
    """Per-manager accumulator filled while walking every played game."""

    def __init__(self) -> None:
        self.scores: List[float] = []
        self.outcomes: List[Tuple[int, int, str]] = []
        self.actual_wins = 0
        self.actual_losses = 0
        self.all_play_wins = 0
        self.all_play_losses = 0
        self.weekly_highs = 0

    def record_game(self, year: int, week: int, points_for: float, points_against: float, epsilon: float) -> None:
        result = outcome(points_for, points_against, epsilon)
        self.scores.append(points_for)
        self.outcomes.append((year, week, result))
        if result == "W":
            self.actual_wins += 1
        elif result == "L":
            self.actual_losses += 1

    def ordered_outcomes(self) -> List[str]:
        return [result for _, _, result in sorted(self.outcomes, key=lambda item: (item[0], item[1]))]


def all_play_week(scores: Sequence[Tuple[str, float]]) -> Dict[str, Tuple[int, int]]:
    """All-play wins and losses for one week of (manager_id, points) entries.

    Every entry is compared with every other entry; equal scores count for
    neither side. Cost is quadratic in the number of teams that week.
    """
    totals: Dict[str, Tuple[int, int]] = {}
    for i, (manager_id, points) in enumerate(scores):
        wins, losses = totals.get(manager_id, (0, 0))
        for j, (_, other_points) in enumerate(scores):
            if i == j:
                continue
            if points > other_points:
                wins += 1
            elif points < other_points:
                losses += 1
        totals[manager_id] = (wins, losses)
    return totals


def _unavailable_statistics() -> GameStatistics:
    return GameStatistics(
        status=STATUS_UNAVAILABLE,
        games_counted=0,
        closest=StatSection(STATUS_UNAVAILABLE),
        blowouts=StatSection(STATUS_UNAVAILABLE),
        consistency=StatSection(STATUS_UNAVAILABLE),
        streaks=StatSection(STATUS_UNAVAILABLE),
        weekly_highs=StatSection(STATUS_UNAVAILABLE),
        schedule_luck=StatSection(STATUS_UNAVAILABLE),
    )


def _margin_entry(year: int, game: Any, index: Dict[str, Manager]) -> GameMargin:
    a, b = game.team_a, game.team_b
    winner, loser = (a, b) if a.points >= b.points else (b, a)
    return GameMargin(
        year=year,
        week=game.week,
        is_playoffs=bool(game.is_playoffs),
        margin=abs(a.points - b.points),
        winner_id=winner.manager_id,
        winner_name=manager_name(index, winner.manager_id),
        loser_id=loser.manager_id,
        loser_name=manager_name(index, loser.manager_id),
        winner_points=winner.points,
        loser_points=loser.points,
        score=f"{winner.points:.1f} - {loser.points:.1f}",
    )


def _consistency_rows(logs: Dict[str, _ManagerGameLog], index: Dict[str, Manager], min_games: int) -> List[ConsistencyRow]:
    rows: List[ConsistencyRow] = []
    for manager_id, log in logs.items():
        if len(log.scores) < min_games:
            continue
        values = np.asarray(log.scores, dtype=float)
        rows.append(
            ConsistencyRow(
                manager_id=manager_id,
                name=manager_name(index, manager_id),
                games=len(log.scores),
                mean=float(np.mean(values)),
                std_dev=float(np.std(values)),
            )
        )
    rows.sort(key=lambda row: (row.std_dev, row.manager_id))
    return rows


def _streak_rows(logs: Dict[str, _ManagerGameLog], index: Dict[str, Manager]) -> List[StreakRow]:
    rows: List[StreakRow] = []
    for manager_id, log in logs.items():
        if not log.outcomes:
            continue
        summary = summarize_streaks(log.ordered_outcomes())
        rows.append(
            StreakRow(
                manager_id=manager_id,
                name=manager_name(index, manager_id),
                avatar=manager_avatar(index, manager_id),
                games=len(log.outcomes),
                max_win_streak=summary.max_win,
                max_loss_streak=summary.max_loss,
                current_type=summary.current_type,
                current_length=summary.current_length,
            )
        )
    rows.sort(key=lambda row: (-row.max_win_streak, row.manager_id))
    return rows


def _luck_rows(logs: Dict[str, _ManagerGameLog], index: Dict[str, Manager]) -> List[ScheduleLuckRow]:
    rows: List[ScheduleLuckRow] = []
    for manager_id, log in logs.items():
        if log.all_play_wins + log.all_play_losses == 0:
            continue
        actual_pct = _pct(log.actual_wins, log.actual_losses)
        all_play_pct = _pct(log.all_play_wins, log.all_play_losses)
        rows.append(
            ScheduleLuckRow(
                manager_id=manager_id,
                name=manager_name(index, manager_id),
                avatar=manager_avatar(index, manager_id),
                actual_wins=log.actual_wins,
                actual_losses=log.actual_losses,
                all_play_wins=log.all_play_wins,
                all_play_losses=log.all_play_losses,
                actual_pct=actual_pct,
                all_play_pct=all_play_pct,
                luck_factor=actual_pct - all_play_pct,
                weekly_highs=log.weekly_highs,
                actual_record=f"{log.actual_wins}-{log.actual_losses}",
                all_play_record=f"{log.all_play_wins}-{log.all_play_losses}",
            )
        )
    rows.sort(key=lambda row: (-row.luck_factor, row.manager_id))
    return rows


def _weekly_high_rows(logs: Dict[str, _ManagerGameLog], index: Dict[str, Manager]) -> List[WeeklyHighRow]:
    rows = [
        WeeklyHighRow(
            manager_id=manager_id,
            name=manager_name(index, manager_id),
            avatar=manager_avatar(index, manager_id),
            weekly_highs=log.weekly_highs,
        )
        for manager_id, log in logs.items()
        if log.outcomes
    ]
    rows.sort(key=lambda row: (-row.weekly_highs, row.manager_id))
    return rows


def compute_game_statistics(
    history: LeagueHistory,
    config: Optional[Any] = None,
    index: Optional[Dict[str, Manager]] = None,
) -> GameStatistics:
    """Margins, consistency, streaks, weekly highs and all-play luck over every played game.

    Only managers present in the manager list accumulate per-manager
    statistics; unknown ids still count as opponents and appear as "Unknown"
    in margin listings. When no season carries a played game, every section
    is reported as unavailable.
    """
    cfg = to_engine_config(config)
    index = index if index is not None else build_manager_index(history)

    logs: Dict[str, _ManagerGameLog] = {manager.id: _ManagerGameLog() for manager in history.managers}
    margins: List[GameMargin] = []
    games_counted = 0

    for season in history.seasons:
        games = played_games(season)
        if not games:
            continue

        weeks: Dict[int, List[Tuple[str, float]]] = {}
        for game in games:
            games_counted += 1
            a, b = game.team_a, game.team_b
            weeks.setdefault(game.week, []).extend([(a.manager_id, a.points), (b.manager_id, b.points)])
            margins.append(_margin_entry(season.year, game, index))

            if a.manager_id in logs:
                logs[a.manager_id].record_game(season.year, game.week, a.points, b.points, cfg.tie_epsilon)
            if b.manager_id in logs:
                logs[b.manager_id].record_game(season.year, game.week, b.points, a.points, cfg.tie_epsilon)

        for week in sorted(weeks):
            week_scores = weeks[week]
            if len(week_scores) < 2:
                continue

            top_score = max(points for _, points in week_scores)
            for manager_id, points in week_scores:
                if points == top_score and manager_id in logs:
                    logs[manager_id].weekly_highs += 1

            for manager_id, (wins, losses) in all_play_week(week_scores).items():
                log = logs.get(manager_id)
                if log is None:
                    continue
                log.all_play_wins += wins
                log.all_play_losses += losses

    if games_counted == 0:
        return _unavailable_statistics()

    closest = sorted(margins, key=lambda item: item.margin)[: cfg.margin_list_size]
    blowouts = sorted(margins, key=lambda item: item.margin, reverse=True)[: cfg.margin_list_size]
    consistency = _consistency_rows(logs, index, int(cfg.min_consistency_games))

    return GameStatistics(
        status=STATUS_OK,
        games_counted=games_counted,
        closest=StatSection(STATUS_OK, closest),
        blowouts=StatSection(STATUS_OK, blowouts),
        consistency=StatSection(STATUS_OK if consistency else STATUS_INSUFFICIENT_SAMPLE, consistency),
        streaks=StatSection(STATUS_OK, _streak_rows(logs, index)[: cfg.streak_leaders]),
        weekly_highs=StatSection(STATUS_OK, _weekly_high_rows(logs, index)[: cfg.weekly_high_leaders]),
        schedule_luck=StatSection(STATUS_OK, _luck_rows(logs, index)),
    )
