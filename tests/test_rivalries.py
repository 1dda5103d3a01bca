from unittest import TestCase

from league_legacy.legacy_types import Game, GameSide, LeagueHistory, Manager, Season, SeasonStanding
from league_legacy.luck_quadrants import GLASS_CANNON, JUGGERNAUT, SACKO, SLEEPER, classify_luck_quadrants, classify_quadrant
from league_legacy.rivalries import build_rivalries, compare_managers


def _game(week, a, a_points, b, b_points):
    return Game(week=week, team_a=GameSide(a, a_points), team_b=GameSide(b, b_points))


def _managers(*ids):
    return [Manager(manager_id, manager_id.title()) for manager_id in ids]


class LuckQuadrantTest(TestCase):
    def test_manager_on_league_average_takes_favorable_side(self):
        history = LeagueHistory(
            managers=_managers("a", "b", "c"),
            seasons=[
                Season(
                    2020,
                    "k",
                    standings=[
                        SeasonStanding("a", 1, wins=6, losses=4, points_for=1200.0, points_against=1000.0),
                        SeasonStanding("b", 2, wins=5, losses=5, points_for=1100.0, points_against=1000.0),
                        SeasonStanding("c", 3, wins=4, losses=6, points_for=1000.0, points_against=1000.0),
                    ],
                )
            ],
        )
        report = classify_luck_quadrants(history)
        self.assertEqual(report.status, "ok")
        self.assertEqual(report.league_avg_points_for, 110.0)
        quadrants = {point.manager_id: point.quadrant for point in report.points}
        self.assertEqual(quadrants["b"], JUGGERNAUT)
        self.assertEqual(quadrants["c"], SLEEPER)

    def test_quadrant_labels(self):
        self.assertEqual(classify_quadrant(120, 90, 110, 100), JUGGERNAUT)
        self.assertEqual(classify_quadrant(120, 110, 110, 100), GLASS_CANNON)
        self.assertEqual(classify_quadrant(100, 90, 110, 100), SLEEPER)
        self.assertEqual(classify_quadrant(100, 110, 110, 100), SACKO)

    def test_managers_without_games_are_excluded(self):
        history = LeagueHistory(
            managers=_managers("a", "b"),
            seasons=[Season(2020, "k", standings=[SeasonStanding("a", 1, wins=1, points_for=100.0), SeasonStanding("b", 2)])],
        )
        report = classify_luck_quadrants(history)
        self.assertEqual([point.manager_id for point in report.points], ["a"])
        self.assertEqual(classify_luck_quadrants(LeagueHistory()).status, "unavailable")


class RivalryTest(TestCase):
    def _history(self, games):
        return LeagueHistory(managers=_managers("a", "b", "c"), seasons=[Season(2020, "k", games=games)])

    def test_four_game_sweep_is_not_enough_for_nemesis(self):
        games = [_game(week, "a", 80.0, "b", 120.0) for week in range(1, 5)]
        games += [_game(week, "a", 120.0, "c", 80.0) for week in range(1, 5)]
        report = build_rivalries(self._history(games), "a")
        self.assertEqual(report.status, "ok")
        self.assertIsNone(report.nemesis)
        self.assertIsNone(report.pigeon)

        games += [_game(5, "a", 80.0, "b", 120.0), _game(6, "a", 120.0, "c", 80.0)]
        report = build_rivalries(self._history(games), "a")
        self.assertEqual(report.nemesis.opponent_id, "b")
        self.assertEqual(report.pigeon.opponent_id, "c")

    def test_min_games_follows_config(self):
        games = [_game(week, "a", 80.0, "b", 120.0) for week in range(1, 5)]
        report = build_rivalries(self._history(games), "a", config={"rivalry_min_games": 4})
        self.assertEqual(report.nemesis.opponent_id, "b")

    def test_even_records_get_no_label(self):
        games = [_game(week, "a", 100.0 if week % 2 else 90.0, "b", 95.0) for week in range(1, 7)]
        report = build_rivalries(self._history(games), "a")
        self.assertIsNone(report.nemesis)
        self.assertIsNone(report.pigeon)

    def test_rivalry_records_streak_and_order(self):
        games = [
            _game(1, "b", 90.0, "a", 100.0),
            _game(2, "a", 80.0, "b", 80.005),
            _game(3, "a", 0.0, "b", 0.0),
            _game(4, "a", 70.0, "c", 90.0),
            _game(5, "a", 70.0, "b", 95.0),
            _game(6, "a", 70.0, "b", 99.0),
        ]
        report = build_rivalries(self._history(games), "a")
        self.assertEqual([record.opponent_id for record in report.rivalries], ["b", "c"])
        rival = report.rivalries[0]
        self.assertEqual(rival.games, 4)
        self.assertEqual(rival.record, "1-2-1")
        self.assertEqual(rival.current_streak_type, "L")
        self.assertEqual(rival.current_streak_length, 2)
        self.assertEqual(rival.win_pct, 25.0)
        self.assertEqual(rival.history[0].points_for, 100.0)

    def test_unknown_subject_is_unavailable(self):
        report = build_rivalries(self._history([_game(1, "a", 1.0, "b", 2.0)]), "nobody")
        self.assertEqual(report.status, "unavailable")
        self.assertEqual(report.subject_name, "Unknown")
        self.assertEqual(report.rivalries, [])


class CompareManagersTest(TestCase):
    def test_head_to_head_and_edges(self):
        history = LeagueHistory(
            managers=_managers("a", "b", "c"),
            seasons=[
                Season(
                    2020,
                    "k1",
                    standings=[
                        SeasonStanding("a", 1, wins=9, losses=5, points_for=1500.0, is_champion=True, is_playoff=True),
                        SeasonStanding("b", 2, wins=8, losses=6, points_for=1400.0, is_playoff=True),
                        SeasonStanding("c", 3, wins=4, losses=10, points_for=1100.0),
                    ],
                    games=[
                        _game(1, "a", 100.0, "b", 90.0),
                        _game(2, "b", 80.005, "a", 80.0),
                        _game(3, "a", 0.0, "b", 0.0),
                        _game(4, "a", 110.0, "c", 100.0),
                    ],
                ),
                Season(
                    2021,
                    "k2",
                    standings=[
                        SeasonStanding("b", 1, wins=10, losses=4, points_for=1250.0, is_champion=True, is_playoff=True),
                        SeasonStanding("c", 2, wins=7, losses=7, points_for=1300.0, is_playoff=True),
                        SeasonStanding("a", 3, wins=5, losses=9, points_for=1200.0),
                    ],
                ),
            ],
        )
        comparison = compare_managers(history, "a", "b")
        self.assertEqual((comparison.h2h_wins, comparison.h2h_losses, comparison.h2h_ties), (1, 0, 1))
        self.assertTrue(comparison.has_matchup_data)
        self.assertEqual([season.year for season in comparison.seasons], [2020, 2021])
        self.assertTrue(comparison.seasons[0].has_game_data)
        self.assertFalse(comparison.seasons[1].has_game_data)
        self.assertEqual(len(comparison.seasons[0].matchups), 2)

        self.assertEqual(comparison.edges["titles"], "T")
        self.assertEqual(comparison.edges["win_pct"], "B")
        self.assertEqual(comparison.edges["playoff_appearances"], "B")
        self.assertEqual(comparison.edges["avg_rank"], "B")
        self.assertEqual(comparison.edges["points_for"], "A")
        self.assertAlmostEqual(comparison.manager_b.win_pct, 18 / 28 * 100.0)

    def test_missing_game_data_is_flagged(self):
        history = LeagueHistory(
            managers=_managers("a", "b"),
            seasons=[Season(2020, "k", standings=[SeasonStanding("a", 1), SeasonStanding("b", 2)])],
        )
        comparison = compare_managers(history, "a", "b")
        self.assertFalse(comparison.has_matchup_data)
        self.assertEqual(comparison.matchups, [])
