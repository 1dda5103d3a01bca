"""Deterministic demo league used by the dashboard's --demo flag and the tests."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import numpy as np

from .legacy_types import (
    DraftPick,
    Game,
    GameSide,
    LeagueHistory,
    Manager,
    Season,
    SeasonStanding,
    Transaction,
    TransactionPlayer,
)
from .league_model import is_tie

MANAGER_NAMES = [
    "The Commissioner", "Touchdown Tom", "Waiver Wire Wizard",
    "Draft Day Disaster", "Monday Night Miracle", "The Armchair QB",
    "Gridiron Guru", "Fantasy Factory", "Hail Mary Heroes",
    "The Underdogs", "Show Me The Money", "Blitz Brigade",
]

PLAYOFF_TEAMS = 4
TIE_EPSILON = 0.01


def round_robin(manager_ids: List[str]) -> List[List[Tuple[str, str]]]:
    """Circle-method rounds; every manager meets every other once per cycle."""
    ids = list(manager_ids)
    if len(ids) % 2:
        ids.append("")
    rounds: List[List[Tuple[str, str]]] = []
    for _ in range(len(ids) - 1):
        half = len(ids) // 2
        pairs = [(ids[i], ids[-1 - i]) for i in range(half) if ids[i] and ids[-1 - i]]
        rounds.append(pairs)
        ids = [ids[0]] + [ids[-1]] + ids[1:-1]
    return rounds


def _score(rng: np.random.Generator, mean: float) -> float:
    return round(max(40.0, float(rng.normal(mean, 22.0))), 2)


def _play(rng, week, a, b, strength, team_keys, is_playoffs=False) -> Game:
    return Game(
        week=week,
        is_playoffs=is_playoffs,
        team_a=GameSide(a, _score(rng, strength[a]), team_keys[a]),
        team_b=GameSide(b, _score(rng, strength[b]), team_keys[b]),
    )


def _winner_loser(game: Game) -> Tuple[str, str]:
    # team_a advances on a tie; brackets list the higher seed first.
    if game.team_a.points >= game.team_b.points:
        return game.team_a.manager_id, game.team_b.manager_id
    return game.team_b.manager_id, game.team_a.manager_id


def _generate_season(
    rng: np.random.Generator,
    managers: List[Manager],
    year: int,
    regular_weeks: int,
    draft_rounds: int,
) -> Season:
    key = f"sample.l.{year}"
    ids = [manager.id for manager in managers]
    team_keys = {manager_id: f"{key}.t.{position}" for position, manager_id in enumerate(ids)}
    strength = {manager_id: float(rng.normal(115.0, 10.0)) for manager_id in ids}

    rounds = round_robin(ids)
    games: List[Game] = []
    tally: Dict[str, Dict[str, float]] = {
        manager_id: {"wins": 0, "losses": 0, "ties": 0, "pf": 0.0, "pa": 0.0} for manager_id in ids
    }
    for week in range(1, regular_weeks + 1):
        for a, b in rounds[(week - 1) % len(rounds)]:
            game = _play(rng, week, a, b, strength, team_keys)
            games.append(game)
            pa, pb = game.team_a.points, game.team_b.points
            tally[a]["pf"] += pa
            tally[a]["pa"] += pb
            tally[b]["pf"] += pb
            tally[b]["pa"] += pa
            if is_tie(pa, pb, TIE_EPSILON):
                tally[a]["ties"] += 1
                tally[b]["ties"] += 1
            elif pa > pb:
                tally[a]["wins"] += 1
                tally[b]["losses"] += 1
            else:
                tally[b]["wins"] += 1
                tally[a]["losses"] += 1

    seeded = sorted(ids, key=lambda manager_id: (-tally[manager_id]["wins"], -tally[manager_id]["pf"], manager_id))
    final_order = list(seeded)
    if len(seeded) >= PLAYOFF_TEAMS:
        semi_week = regular_weeks + 1
        semi_one = _play(rng, semi_week, seeded[0], seeded[3], strength, team_keys, is_playoffs=True)
        semi_two = _play(rng, semi_week, seeded[1], seeded[2], strength, team_keys, is_playoffs=True)
        win_one, lose_one = _winner_loser(semi_one)
        win_two, lose_two = _winner_loser(semi_two)

        final_week = regular_weeks + 2
        final = _play(rng, final_week, win_one, win_two, strength, team_keys, is_playoffs=True)
        third = _play(rng, final_week, lose_one, lose_two, strength, team_keys, is_playoffs=True)
        games.extend([semi_one, semi_two, final, third])

        champion, runner_up = _winner_loser(final)
        third_place, fourth_place = _winner_loser(third)
        final_order = [champion, runner_up, third_place, fourth_place] + seeded[PLAYOFF_TEAMS:]

    standings = [
        SeasonStanding(
            manager_id=manager_id,
            team_key=team_keys[manager_id],
            rank=rank,
            wins=int(tally[manager_id]["wins"]),
            losses=int(tally[manager_id]["losses"]),
            ties=int(tally[manager_id]["ties"]),
            points_for=round(tally[manager_id]["pf"], 2),
            points_against=round(tally[manager_id]["pa"], 2),
            is_champion=rank == 1,
            is_playoff=rank <= PLAYOFF_TEAMS,
        )
        for rank, manager_id in enumerate(final_order, start=1)
    ]

    # Snake draft in reverse order of the final standings.
    order = list(reversed(final_order))
    draft: List[DraftPick] = []
    overall = 0
    for round_num in range(1, draft_rounds + 1):
        round_order = order if round_num % 2 else list(reversed(order))
        for manager_id in round_order:
            overall += 1
            draft.append(
                DraftPick(
                    round=round_num,
                    pick=overall,
                    player=f"Sample Player {overall}",
                    player_key=f"sample.p.{year}.{overall}",
                    manager_id=manager_id,
                    team_key=team_keys[manager_id],
                )
            )

    season_start = datetime(year, 9, 1, tzinfo=timezone.utc)
    transactions: List[Transaction] = []
    for number in range(int(rng.integers(5, 15))):
        manager_id = ids[int(rng.integers(0, len(ids)))]
        stamp = season_start + timedelta(days=int(rng.integers(0, 7 * regular_weeks)))
        transactions.append(
            Transaction(
                id=f"{key}.tx.{number}",
                type="add/drop",
                date=int(stamp.timestamp() * 1000),
                manager_ids=[manager_id],
                players=[
                    TransactionPlayer(name=f"Waiver Add {year}-{number}", type="add", manager_id=manager_id),
                    TransactionPlayer(name=f"Waiver Drop {year}-{number}", type="drop", manager_id=manager_id),
                ],
            )
        )
    transactions.sort(key=lambda txn: txn.date, reverse=True)

    return Season(
        year=year,
        key=key,
        champion_id=final_order[0] if final_order else None,
        standings=standings,
        draft=draft,
        games=games,
        transactions=transactions,
    )


def generate_sample_league(
    seed: int = 2011,
    start_year: int = 2011,
    num_seasons: int = 15,
    regular_weeks: int = 14,
    draft_rounds: int = 15,
    manager_names: Optional[List[str]] = None,
) -> LeagueHistory:
    """Build a complete league history from a fixed seed.

    Standings are tallied from the generated regular-season games, the top
    four seeds play a two-week bracket, and final ranks 1..N are distinct.
    """
    names = list(manager_names or MANAGER_NAMES)
    managers = [
        Manager(id=f"mgr_{position}", name=name, avatar=f"https://picsum.photos/seed/{position}/200/200")
        for position, name in enumerate(names)
    ]
    rng = np.random.default_rng(seed)
    seasons = [
        _generate_season(rng, managers, start_year + offset, regular_weeks, draft_rounds)
        for offset in range(int(num_seasons))
    ]
    return LeagueHistory(managers=managers, seasons=seasons)
