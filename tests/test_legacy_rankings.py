from unittest import TestCase

from league_legacy.career import aggregate_careers, career_for
from league_legacy.legacy_rankings import legacy_score, rank_managers, ranking_table
from league_legacy.legacy_types import EngineConfig, LeagueHistory, Manager, Season, SeasonStanding
from league_legacy.league_model import to_engine_config, validate_history
from league_legacy.sample_data import generate_sample_league


def _standing(manager_id, rank, wins=0, losses=0, points_for=0.0, champion=False, playoff=False):
    return SeasonStanding(
        manager_id=manager_id,
        rank=rank,
        wins=wins,
        losses=losses,
        points_for=points_for,
        points_against=points_for,
        is_champion=champion,
        is_playoff=playoff,
    )


class LegacyRankingTest(TestCase):
    def test_legacy_score_weights_titles_playoffs_and_wins(self):
        seasons = [
            Season(
                year=2019 + offset,
                key=f"k{offset}",
                standings=[
                    _standing("a", 1 if offset < 2 else 3, wins=8, losses=6, champion=offset < 2, playoff=True),
                    _standing("b", 2 if offset < 2 else 1, wins=6, losses=8),
                    _standing("c", 3 if offset < 2 else 2, wins=5, losses=9),
                ],
            )
            for offset in range(5)
        ]
        history = LeagueHistory(
            managers=[Manager("a", "Alpha"), Manager("b", "Bravo"), Manager("c", "Charlie")],
            seasons=seasons,
        )
        rows = rank_managers(history)
        top = rows[0]
        self.assertEqual(top.manager_id, "a")
        self.assertEqual(top.titles, 2)
        self.assertEqual(top.playoff_appearances, 5)
        self.assertEqual(top.wins, 40)
        self.assertEqual(top.legacy_score, 55.0)
        self.assertEqual(legacy_score(2, 5, 40), 55.0)

    def test_career_totals_count_sackos_finals_and_rates(self):
        history = LeagueHistory(
            managers=[Manager("a", "Alpha"), Manager("b", "Bravo")],
            seasons=[
                Season(2020, "k1", standings=[_standing("a", 1, 10, 4, champion=True, playoff=True), _standing("b", 2, 4, 10)]),
                Season(2021, "k2", standings=[_standing("b", 1, 9, 5, playoff=True), _standing("a", 2, 5, 9)]),
            ],
        )
        careers = {totals.manager_id: totals for totals in aggregate_careers(history)}
        alpha = careers["a"]
        self.assertEqual(alpha.seasons, 2)
        self.assertEqual(alpha.finals, 2)
        self.assertEqual(alpha.sackos, 1)
        self.assertEqual(alpha.avg_rank, 1.5)
        self.assertAlmostEqual(alpha.win_pct, 15 / 28)
        self.assertEqual(alpha.playoff_pct, 0.5)
        self.assertEqual(alpha.best_rank, 1)
        self.assertEqual(careers["b"].sackos, 1)

    def test_managers_without_seasons_are_dropped_and_rates_floor(self):
        history = LeagueHistory(
            managers=[Manager("a", "Alpha"), Manager("idle", "Idle")],
            seasons=[Season(2020, "k1", standings=[_standing("a", 1, 0, 0)])],
        )
        self.assertEqual([row.manager_id for row in rank_managers(history)], ["a"])
        idle = career_for(history, "idle")
        self.assertEqual(idle.seasons, 0)
        self.assertEqual(idle.win_pct, 0.0)
        self.assertEqual(idle.avg_rank, 0.0)
        self.assertEqual(aggregate_careers(history)[0].win_pct, 0.0)

    def test_dangling_standings_are_skipped(self):
        history = LeagueHistory(
            managers=[Manager("a", "Alpha")],
            seasons=[Season(2020, "k1", standings=[_standing("a", 1, 9, 5), _standing("ghost", 2, 5, 9)])],
        )
        rows = rank_managers(history)
        self.assertEqual(len(rows), 1)
        self.assertTrue(any("dangling_manager" in warning for warning in validate_history(history)))

    def test_ties_break_by_manager_id_in_both_directions(self):
        history = LeagueHistory(
            managers=[Manager("b", "Bravo"), Manager("a", "Alpha"), Manager("c", "Charlie")],
            seasons=[
                Season(2020, "k1", standings=[_standing("b", 1, 7, 7), _standing("a", 2, 7, 7), _standing("c", 3, 3, 11)]),
            ],
        )
        descending = [row.manager_id for row in rank_managers(history, sort_field="wins")]
        ascending = [row.manager_id for row in rank_managers(history, sort_field="wins", descending=False)]
        self.assertEqual(descending, ["a", "b", "c"])
        self.assertEqual(ascending, ["c", "a", "b"])

    def test_avg_rank_sorts_ascending_by_default(self):
        history = LeagueHistory(
            managers=[Manager("a", "Alpha"), Manager("b", "Bravo")],
            seasons=[Season(2020, "k1", standings=[_standing("a", 2), _standing("b", 1)])],
        )
        table = ranking_table(history, sort_field="avg_rank")
        self.assertEqual([row["manager_id"] for row in table], ["b", "a"])
        self.assertEqual([row["position"] for row in table], [1, 2])

    def test_unknown_sort_field_raises(self):
        with self.assertRaises(ValueError):
            rank_managers(LeagueHistory(), sort_field="luck")

    def test_sample_league_ranks_are_complete(self):
        history = generate_sample_league(seed=3, num_seasons=4)
        for season in history.seasons:
            ranks = sorted(standing.rank for standing in season.standings)
            self.assertEqual(ranks, list(range(1, len(season.standings) + 1)))
        self.assertEqual(validate_history(history), [])
        self.assertEqual(len(rank_managers(history)), 12)

    def test_config_coercion_copies_known_keys(self):
        cfg = to_engine_config({"tie_epsilon": 0.5, "rivalry_min_games": 3, "not_a_field": 1})
        self.assertEqual(cfg.tie_epsilon, 0.5)
        self.assertEqual(cfg.rivalry_min_games, 3)
        self.assertFalse(hasattr(cfg, "not_a_field"))
        self.assertIsInstance(to_engine_config(None), EngineConfig)
        with self.assertRaises(ValueError):
            to_engine_config("strict")
