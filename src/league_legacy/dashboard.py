#!/usr/bin/env python3
"""
League Legacy Dashboard CLI

Career rankings, luck metrics, rivalries and record books for a fantasy
football league's full history.

Usage:
    league-legacy --league-id YOUR_LEAGUE_ID --years 2019,2020,2021 --sync

For private leagues, you'll need to provide ESPN cookies:
    league-legacy --league-id ID --years 2023 --sync --swid "YOUR_SWID" --espn-s2 "YOUR_ESPN_S2"
"""

import argparse
import json
import os
from typing import Any, Dict, List, Optional

import pandas as pd

from .draft_board import search_draft
from .game_stats import compute_game_statistics
from .legacy_rankings import SORT_FIELDS, ranking_table
from .legacy_types import EngineConfig, LeagueHistory, StoreConfig
from .league_model import build_manager_index, manager_name, to_engine_config, validate_history
from .league_records import build_record_book, playoff_efficiency, season_champions
from .league_report import build_league_report
from .league_store import load_league_history, save_league_history
from .league_sync import fetch_league_history
from .luck_quadrants import classify_luck_quadrants
from .rivalries import build_rivalries, compare_managers
from .sample_data import generate_sample_league

VIEWS = ("rankings", "stats", "quadrants", "rivalries", "compare", "records", "draft", "all")


class LeagueDashboard:
    """Prints each analytics view of one league history"""

    def __init__(
        self,
        history: LeagueHistory,
        config: Optional[Any] = None,
        sort_field: str = "legacy_score",
        descending: Optional[bool] = None,
    ):
        self.history = history
        self.config: EngineConfig = to_engine_config(config)
        self.sort_field = sort_field
        self.descending = descending
        self.index = build_manager_index(history)

    def _print_frame(self, rows: List[Dict[str, Any]], empty_message: str) -> None:
        if not rows:
            print(f"   {empty_message}")
            return
        print(pd.DataFrame(rows).to_string(index=False))

    def show_rankings(self):
        """Career legacy leaderboard"""
        print("=" * 80)
        print(f"🏆 LEGACY RANKINGS (sorted by {self.sort_field})")
        print("=" * 80)
        rows = ranking_table(self.history, sort_field=self.sort_field, descending=self.descending)
        display = [
            {
                "#": row["position"],
                "Manager": row["name"],
                "Legacy": f"{row['legacy_score']:.1f}",
                "Titles": row["titles"],
                "Wins": row["wins"],
                "Win %": f"{row['win_pct'] * 100:.1f}",
                "Playoff %": f"{row['playoff_pct'] * 100:.1f}",
                "Avg Rank": f"{row['avg_rank']:.2f}",
                "PF": f"{row['points_for']:.1f}",
            }
            for row in rows
        ]
        self._print_frame(display, "No managers with completed seasons")
        print()

    def show_game_stats(self):
        """Margins, consistency, streaks and schedule luck"""
        print("=" * 80)
        print("📈 GAME STATISTICS")
        print("=" * 80)
        stats = compute_game_statistics(self.history, config=self.config, index=self.index)
        if not stats.closest.available:
            print("   ⚠️ No game-level data available for this league")
            print()
            return

        print(f"\nGames counted: {stats.games_counted}")

        print("\n😬 Closest games")
        self._print_frame(
            [
                {"Year": m.year, "Week": m.week, "Winner": m.winner_name, "Loser": m.loser_name, "Score": m.score, "Margin": f"{m.margin:.2f}"}
                for m in stats.closest.rows
            ],
            "None",
        )

        print("\n💥 Biggest blowouts")
        self._print_frame(
            [
                {"Year": m.year, "Week": m.week, "Winner": m.winner_name, "Loser": m.loser_name, "Score": m.score, "Margin": f"{m.margin:.2f}"}
                for m in stats.blowouts.rows
            ],
            "None",
        )

        print("\n🎯 Consistency (lowest std dev first)")
        if stats.consistency.available:
            self._print_frame(
                [
                    {"Manager": row.name, "Games": row.games, "Mean": f"{row.mean:.1f}", "Std Dev": f"{row.std_dev:.1f}"}
                    for row in stats.consistency.rows
                ],
                "None",
            )
        else:
            print(f"   Not enough games per manager (need {self.config.min_consistency_games})")

        print("\n🔥 Streaks")
        self._print_frame(
            [
                {
                    "Manager": row.name,
                    "Longest W": row.max_win_streak,
                    "Longest L": row.max_loss_streak,
                    "Current": f"{row.current_type or '-'}{row.current_length}",
                }
                for row in stats.streaks.rows
            ],
            "None",
        )

        print("\n🎲 Schedule luck (actual vs all-play)")
        self._print_frame(
            [
                {
                    "Manager": row.name,
                    "Actual": row.actual_record,
                    "All-Play": row.all_play_record,
                    "Luck": f"{row.luck_factor:+.1f}",
                    "Weekly Highs": row.weekly_highs,
                }
                for row in stats.schedule_luck.rows
            ],
            "None",
        )
        print()

    def show_quadrants(self):
        """Points-for vs points-against luck quadrants"""
        print("=" * 80)
        print("🧭 LUCK QUADRANTS")
        print("=" * 80)
        report = classify_luck_quadrants(self.history, index=self.index)
        if report.status != "ok":
            print("   ⚠️ No standings with games played")
            print()
            return
        print(f"\nLeague avg PF/game: {report.league_avg_points_for:.1f}")
        print(f"League avg PA/game: {report.league_avg_points_against:.1f}\n")
        self._print_frame(
            [
                {
                    "Manager": point.name,
                    "PF/G": f"{point.avg_points_for:.1f}",
                    "PA/G": f"{point.avg_points_against:.1f}",
                    "Quadrant": point.quadrant,
                }
                for point in report.points
            ],
            "None",
        )
        print()

    def show_rivalries(self, manager_id: str):
        """Head-to-head records of one manager"""
        print("=" * 80)
        print(f"⚔️ RIVALRIES: {manager_name(self.index, manager_id)}")
        print("=" * 80)
        report = build_rivalries(self.history, manager_id, config=self.config, index=self.index)
        if report.status != "ok":
            print("   ⚠️ No head-to-head games for this manager")
            print()
            return

        self._print_frame(
            [
                {
                    "Opponent": record.opponent_name,
                    "Record": record.record,
                    "Win %": f"{record.win_pct:.1f}",
                    "PF": f"{record.points_for:.1f}",
                    "PA": f"{record.points_against:.1f}",
                    "Streak": f"{record.current_streak_type or '-'}{record.current_streak_length}",
                }
                for record in report.rivalries
            ],
            "None",
        )
        if report.nemesis is not None:
            print(f"\n😈 Nemesis: {report.nemesis.opponent_name} ({report.nemesis.record}, {report.nemesis.win_pct:.0f}%)")
        if report.pigeon is not None:
            print(f"🐦 Pigeon:  {report.pigeon.opponent_name} ({report.pigeon.record}, {report.pigeon.win_pct:.0f}%)")
        print()

    def show_comparison(self, manager_a: str, manager_b: str):
        """Side-by-side career comparison with direct matchups"""
        comparison = compare_managers(self.history, manager_a, manager_b, config=self.config, index=self.index)
        side_a, side_b = comparison.manager_a, comparison.manager_b
        print("=" * 80)
        print(f"🆚 {side_a.name} vs {side_b.name}")
        print("=" * 80)

        rows = []
        for label, attr, fmt in (
            ("Titles", "titles", "{}"),
            ("Win %", "win_pct", "{:.1f}"),
            ("Playoffs", "playoff_appearances", "{}"),
            ("Avg Rank", "avg_rank", "{:.2f}"),
            ("Points For", "points_for", "{:.1f}"),
        ):
            edge = comparison.edges.get(attr, "T")
            rows.append(
                {
                    "Stat": label,
                    side_a.name: fmt.format(getattr(side_a, attr)),
                    side_b.name: fmt.format(getattr(side_b, attr)),
                    "Edge": {"A": side_a.name, "B": side_b.name}.get(edge, "Even"),
                }
            )
        self._print_frame(rows, "None")

        if comparison.has_matchup_data:
            record = f"{comparison.h2h_wins}-{comparison.h2h_losses}"
            if comparison.h2h_ties:
                record += f"-{comparison.h2h_ties}"
            print(f"\nHead-to-head ({side_a.name} first): {record}")
        else:
            print("\n   ⚠️ No game-level data to compare head-to-head")
        print()

    def show_records(self):
        """Record book, playoff efficiency and champions"""
        print("=" * 80)
        print("📜 LEAGUE RECORDS")
        print("=" * 80)
        book = build_record_book(self.history, index=self.index)
        for label, holder, fmt in (
            ("Highest season PF", book.highest_season_points, "{:.1f}"),
            ("Lowest season PF", book.lowest_season_points, "{:.1f}"),
            ("Best avg finish", book.best_avg_rank, "{:.2f}"),
            ("Most sackos", book.most_sackos, "{:.0f}"),
        ):
            if holder is None:
                print(f"  {label:<20} -")
                continue
            year = f" ({holder.year})" if holder.year is not None else ""
            print(f"  {label:<20} {holder.name}: {fmt.format(holder.value)}{year}")

        print("\n🎟️ Playoff efficiency")
        self._print_frame(
            [
                {
                    "Manager": row.name,
                    "Seasons": row.seasons,
                    "Playoffs": row.playoffs,
                    "Finals": row.finals,
                    "Titles": row.titles,
                    "Conversion %": f"{row.conversion_rate:.1f}",
                }
                for row in playoff_efficiency(self.history, config=self.config)
            ],
            "None",
        )

        print("\n👑 Champions")
        for champion in season_champions(self.history, index=self.index):
            print(f"  {champion.year}: {champion.champion_name or '-'}")
        print()

    def show_draft(self, year: Optional[int] = None, term: str = ""):
        """Draft board of one season, filtered by term"""
        if year is None:
            year = self.history.seasons[-1].year if self.history.seasons else None
        print("=" * 80)
        print(f"📋 DRAFT BOARD {year if year is not None else ''}".rstrip())
        print("=" * 80)
        if year is None:
            print("   No seasons loaded")
            print()
            return
        picks = search_draft(self.history, year, term, index=self.index)
        self._print_frame(
            [
                {"Pick": pick.pick, "Round": pick.round, "Player": pick.player, "Manager": manager_name(self.index, pick.manager_id)}
                for pick in picks
            ],
            "No draft picks match",
        )
        print()

    def run(self, view: str = "all", manager_id: Optional[str] = None, versus_id: Optional[str] = None):
        if view in ("rankings", "all"):
            self.show_rankings()
        if view in ("stats", "all"):
            self.show_game_stats()
        if view in ("quadrants", "all"):
            self.show_quadrants()
        if view in ("rivalries", "all"):
            subject = manager_id or (self.history.managers[0].id if self.history.managers else None)
            if subject is not None:
                self.show_rivalries(subject)
        if view in ("compare", "all"):
            if manager_id and versus_id:
                self.show_comparison(manager_id, versus_id)
            elif view == "compare":
                print("❌ --manager and --versus are required for the compare view")
        if view in ("records", "all"):
            self.show_records()
        if view == "draft":
            self.show_draft()


def load_config(config_path: str) -> dict:
    """Load configuration from JSON file"""
    with open(config_path, 'r') as f:
        return json.load(f)


def _parse_years(value: Optional[str]) -> List[int]:
    if not value:
        return []
    return [int(part) for part in str(value).split(",") if part.strip()]


def sync_from_cli(league_config: Dict[str, Any], store: StoreConfig) -> LeagueHistory:
    print("=" * 80)
    print("🔄 SYNCING LEAGUE HISTORY")
    print("=" * 80)
    history, warnings = fetch_league_history(league_config)
    result = save_league_history(
        store.store_dir,
        league_config["league_id"],
        league_config.get("league_name", ""),
        history,
        write_tables=store.write_tables,
    )
    warnings = warnings + result["warnings"]

    print(f"\nLeague Root:   {result['league_root']}")
    print(f"Seasons:       {result['meta']['season_count']}")
    print(f"Latest Season: {result['meta']['latest_season']}")
    for name, count in result["record_counts"].items():
        print(f"  {name:<10} {count} rows")
    if warnings:
        print(f"\n⚠️ Warnings ({len(warnings)}):")
        for warning in warnings[:20]:
            print(f"  - {warning}")
    print()
    return history


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='League Legacy - career rankings, luck and rivalries across a league\'s history',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Demo league, every view
  league-legacy --demo

  # Sync a public league and show rankings
  league-legacy --league-id 123456 --years 2019,2020,2021 --sync --view rankings

  # Use a stored league, head-to-head between two managers
  league-legacy --league-id 123456 --view compare --manager ABC --versus DEF

  # Full report as JSON
  league-legacy --config config.json --output-json report.json
        """
    )

    parser.add_argument('--config', type=str, default=None,
                        help='Path to config JSON file with league/engine/store sections')
    parser.add_argument('--league-id', type=int, default=None,
                        help='ESPN League ID')
    parser.add_argument('--years', type=str, default=None,
                        help='Comma separated seasons to sync, e.g. 2019,2020')
    parser.add_argument('--swid', type=str, default=None,
                        help='ESPN SWID cookie (for private leagues)')
    parser.add_argument('--espn-s2', type=str, default=None,
                        help='ESPN S2 cookie (for private leagues)')
    parser.add_argument('--store-dir', type=str, default=None,
                        help='Root directory for stored leagues (default: data/league_store)')
    parser.add_argument('--sync', action='store_true',
                        help='Fetch seasons from ESPN and save them before reporting')
    parser.add_argument('--demo', action='store_true',
                        help='Use a generated sample league instead of real data')
    parser.add_argument('--view', type=str, default='all', choices=VIEWS,
                        help='Which view to print (default: all)')
    parser.add_argument('--sort-field', type=str, default='legacy_score', choices=SORT_FIELDS,
                        help='Rankings sort column (default: legacy_score)')
    parser.add_argument('--order', type=str, default=None, choices=['asc', 'desc'],
                        help='Rankings sort direction (default: natural order of the sort column)')
    parser.add_argument('--manager', type=str, default=None,
                        help='Manager id for the rivalries and compare views')
    parser.add_argument('--versus', type=str, default=None,
                        help='Second manager id for the compare view')
    parser.add_argument('--output-json', type=str, default=None,
                        help='Optional JSON path for the full report')

    args = parser.parse_args()

    config: Dict[str, Any] = {}
    if args.config:
        if not os.path.exists(args.config):
            print(f"❌ Error: Config file not found: {args.config}")
            return 1
        try:
            config = load_config(args.config)
            print(f"📄 Loaded config from: {args.config}")
        except json.JSONDecodeError as e:
            print(f"❌ Error: Invalid JSON in config file: {e}")
            return 1

    league_config = dict(config.get('league', {}))
    engine_config = dict(config.get('engine', {}))
    store_config = config.get('store', {})

    # CLI args override file values
    if args.league_id is not None:
        league_config['league_id'] = args.league_id
    if args.years:
        league_config['years'] = _parse_years(args.years)
    if args.swid:
        league_config['swid'] = args.swid
    if args.espn_s2:
        league_config['espn_s2'] = args.espn_s2
    store = StoreConfig(
        store_dir=args.store_dir or store_config.get('store_dir', StoreConfig.store_dir),
        write_tables=bool(store_config.get('write_tables', True)),
    )

    if not args.demo and league_config.get('league_id') is None:
        print("❌ Error: --league-id is required (or specify --config or --demo)")
        return 1

    try:
        if args.demo:
            print("🎲 Generating sample league...")
            history = generate_sample_league()
        elif args.sync:
            history = sync_from_cli(league_config, store)
        else:
            history = load_league_history(store.store_dir, league_config['league_id'])
            if history is None:
                print(f"❌ Error: League {league_config['league_id']} not found in {store.store_dir} (run with --sync)")
                return 1

        print(f"✅ Loaded {len(history.managers)} managers across {len(history.seasons)} seasons\n")
        issues = validate_history(history)
        if issues:
            print(f"⚠️ Data issues ({len(issues)}):")
            for issue in issues[:20]:
                print(f"  - {issue}")
            print()

        descending = None if args.order is None else args.order == 'desc'
        dashboard = LeagueDashboard(history, config=engine_config, sort_field=args.sort_field, descending=descending)
        dashboard.run(view=args.view, manager_id=args.manager, versus_id=args.versus)

        if args.output_json:
            report = build_league_report(history, config=engine_config, sort_field=args.sort_field, descending=descending)
            with open(args.output_json, 'w') as f:
                json.dump(report, f, indent=2)
            print(f"💾 Report written to {args.output_json}")

    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == '__main__':
    exit(main())
