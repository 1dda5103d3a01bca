import json
from unittest import TestCase

from league_legacy.game_stats import all_play_week, compute_game_statistics, summarize_streaks
from league_legacy.legacy_types import Game, GameSide, LeagueHistory, Manager, Season, SeasonStanding
from league_legacy.league_model import history_to_payload, outcome
from league_legacy.league_report import build_league_report
from league_legacy.sample_data import generate_sample_league


def _game(week, a, a_points, b, b_points, is_playoffs=False):
    return Game(week=week, team_a=GameSide(a, a_points), team_b=GameSide(b, b_points), is_playoffs=is_playoffs)


def _history(games_by_year, manager_ids=("a", "b", "c", "d")):
    return LeagueHistory(
        managers=[Manager(manager_id, manager_id.upper()) for manager_id in manager_ids],
        seasons=[Season(year=year, key=str(year), games=games) for year, games in sorted(games_by_year.items())],
    )


class StreakTest(TestCase):
    def test_streak_walk_reports_longest_runs_and_trailing_streak(self):
        summary = summarize_streaks(["W", "W", "L", "W", "W", "W", "T", "L", "L"])
        self.assertEqual(summary.max_win, 3)
        self.assertEqual(summary.max_loss, 2)
        self.assertEqual(summary.current_type, "L")
        self.assertEqual(summary.current_length, 2)

    def test_trailing_ties_form_the_current_streak(self):
        summary = summarize_streaks(["W", "T", "T"])
        self.assertEqual(summary.max_win, 1)
        self.assertEqual(summary.current_type, "T")
        self.assertEqual(summary.current_length, 2)

    def test_empty_sequence_has_no_current_streak(self):
        summary = summarize_streaks([])
        self.assertIsNone(summary.current_type)
        self.assertEqual(summary.current_length, 0)


class AllPlayTest(TestCase):
    def test_all_play_week_compares_every_pair(self):
        totals = all_play_week([("a", 100.0), ("b", 90.0), ("c", 80.0)])
        self.assertEqual(totals["a"], (2, 0))
        self.assertEqual(totals["b"], (1, 1))
        self.assertEqual(totals["c"], (0, 2))
        self.assertEqual(sum(wins for wins, _ in totals.values()), sum(losses for _, losses in totals.values()))

    def test_equal_scores_count_for_neither_side(self):
        totals = all_play_week([("a", 100.0), ("b", 100.0)])
        self.assertEqual(totals["a"], (0, 0))
        self.assertEqual(totals["b"], (0, 0))

    def test_winning_with_a_low_score_is_lucky(self):
        history = _history({2020: [_game(1, "a", 80.0, "b", 70.0), _game(1, "c", 100.0, "d", 90.0)]})
        stats = compute_game_statistics(history)
        luck = {row.manager_id: row for row in stats.schedule_luck.rows}
        self.assertGreater(luck["a"].luck_factor, 0)
        self.assertLess(luck["d"].luck_factor, 0)
        self.assertEqual(luck["a"].actual_record, "1-0")
        self.assertEqual(luck["a"].all_play_record, "1-2")
        self.assertAlmostEqual(luck["a"].all_play_pct, 100.0 / 3)
        self.assertEqual(stats.schedule_luck.rows[0].manager_id, "a")


class GameStatisticsTest(TestCase):
    def test_no_games_marks_every_section_unavailable(self):
        stats = compute_game_statistics(_history({2020: None}))
        self.assertEqual(stats.status, "unavailable")
        self.assertEqual(stats.games_counted, 0)
        for section in (stats.closest, stats.blowouts, stats.consistency, stats.streaks, stats.weekly_highs, stats.schedule_luck):
            self.assertFalse(section.available)
            self.assertEqual(section.rows, [])

    def test_zero_zero_games_are_not_counted(self):
        history = _history({2020: [_game(1, "a", 0.0, "b", 0.0), _game(2, "a", 101.0, "b", 99.0)]})
        stats = compute_game_statistics(history)
        self.assertEqual(stats.games_counted, 1)
        streaks = {row.manager_id: row for row in stats.streaks.rows}
        self.assertEqual(streaks["a"].games, 1)

    def test_scores_within_epsilon_are_ties(self):
        self.assertEqual(outcome(100.004, 100.0, 0.01), "T")
        self.assertEqual(outcome(100.02, 100.0, 0.01), "W")
        history = _history({2020: [_game(1, "a", 100.004, "b", 100.0)]})
        stats = compute_game_statistics(history)
        luck = {row.manager_id: row for row in stats.schedule_luck.rows}
        self.assertEqual(luck["a"].actual_wins + luck["a"].actual_losses, 0)

    def test_consistency_requires_minimum_sample(self):
        nine = [_game(week, "a", 100.0 + week, "b", 90.0) for week in range(1, 10)]
        stats = compute_game_statistics(_history({2020: nine}))
        self.assertEqual(stats.consistency.status, "insufficient_sample")
        self.assertEqual(stats.consistency.rows, [])

        ten = [_game(week, "a", 100.0 if week <= 5 else 120.0, "b", 90.0) for week in range(1, 11)]
        stats = compute_game_statistics(_history({2020: ten}))
        self.assertEqual(stats.consistency.status, "ok")
        rows = {row.manager_id: row for row in stats.consistency.rows}
        self.assertAlmostEqual(rows["a"].mean, 110.0)
        self.assertAlmostEqual(rows["a"].std_dev, 10.0)
        self.assertAlmostEqual(rows["b"].std_dev, 0.0)
        self.assertEqual(stats.consistency.rows[0].manager_id, "b")

    def test_margins_and_weekly_highs(self):
        history = _history(
            {
                2020: [
                    _game(1, "a", 120.0, "b", 119.5),
                    _game(1, "c", 150.0, "d", 80.0),
                    _game(2, "a", 130.0, "c", 100.0),
                    _game(2, "b", 130.0, "d", 90.0),
                ]
            }
        )
        stats = compute_game_statistics(history)
        self.assertEqual(stats.closest.rows[0].winner_id, "a")
        self.assertAlmostEqual(stats.closest.rows[0].margin, 0.5)
        self.assertEqual(stats.closest.rows[0].score, "120.0 - 119.5")
        self.assertEqual(stats.blowouts.rows[0].winner_id, "c")
        self.assertAlmostEqual(stats.blowouts.rows[0].margin, 70.0)

        highs = {row.manager_id: row.weekly_highs for row in stats.weekly_highs.rows}
        # Week 2 top score is shared, both managers are credited.
        self.assertEqual(highs["a"], 1)
        self.assertEqual(highs["b"], 1)
        self.assertEqual(highs["c"], 1)

    def test_unknown_opponents_appear_by_placeholder_name_only(self):
        history = _history({2020: [_game(1, "a", 90.0, "ghost", 110.0)]}, manager_ids=("a",))
        stats = compute_game_statistics(history)
        self.assertEqual(stats.closest.rows[0].winner_name, "Unknown")
        self.assertEqual([row.manager_id for row in stats.streaks.rows], ["a"])

    def test_streak_leaders_are_capped(self):
        history = generate_sample_league(seed=5, num_seasons=2)
        stats = compute_game_statistics(history, config={"streak_leaders": 3, "weekly_high_leaders": 2})
        self.assertEqual(len(stats.streaks.rows), 3)
        self.assertEqual(len(stats.weekly_highs.rows), 2)
        self.assertEqual(len(stats.schedule_luck.rows), 12)
        maxes = [row.max_win_streak for row in stats.streaks.rows]
        self.assertEqual(maxes, sorted(maxes, reverse=True))


class IdempotenceTest(TestCase):
    def test_report_is_stable_and_input_untouched(self):
        history = generate_sample_league(seed=11, num_seasons=3)
        before = history_to_payload(history)
        first = build_league_report(history)
        second = build_league_report(history)
        self.assertEqual(first, second)
        self.assertEqual(history_to_payload(history), before)


class MalformedInputTest(TestCase):
    def test_out_of_range_ranks_and_negative_points_are_reported_not_raised(self):
        history = LeagueHistory(
            managers=[Manager("a", "A"), Manager("b", "B")],
            seasons=[
                Season(
                    2020,
                    "k",
                    standings=[SeasonStanding("a", 0, points_for=-5.0), SeasonStanding("b", 7)],
                    games=[_game(1, "a", -10.0, "b", 0.0)],
                )
            ],
        )
        report = build_league_report(history)
        self.assertEqual(len(report["rankings"]), 2)
        self.assertEqual(report["game_statistics"]["games_counted"], 1)
        self.assertTrue(any(warning.startswith("rank_sequence_broken:year=2020") for warning in report["warnings"]))
        json.dumps(report)
