from .career import aggregate_careers, career_for
from .draft_board import resolve_player_names, search_draft, transactions_for_manager
from .game_stats import all_play_week, compute_game_statistics, summarize_streaks
from .legacy_rankings import legacy_score, rank_managers, ranking_table
from .league_model import history_from_payload, history_to_payload, merge_manager, validate_history
from .league_records import build_record_book, playoff_efficiency, points_history, season_champions
from .league_report import build_league_report
from .league_store import list_leagues, load_league_history, save_league_history
from .league_sync import fetch_league_history
from .luck_quadrants import classify_luck_quadrants
from .rivalries import build_rivalries, compare_managers
from .sample_data import generate_sample_league
from .legacy_types import (
    DraftPick,
    EngineConfig,
    Game,
    GameSide,
    LeagueHistory,
    Manager,
    Season,
    SeasonStanding,
    StoreConfig,
    SyncConfig,
    Transaction,
    TransactionPlayer,
)

__all__ = [
    "Manager",
    "SeasonStanding",
    "DraftPick",
    "GameSide",
    "Game",
    "Transaction",
    "TransactionPlayer",
    "Season",
    "LeagueHistory",
    "EngineConfig",
    "SyncConfig",
    "StoreConfig",
    "aggregate_careers",
    "career_for",
    "legacy_score",
    "rank_managers",
    "ranking_table",
    "compute_game_statistics",
    "summarize_streaks",
    "all_play_week",
    "classify_luck_quadrants",
    "build_rivalries",
    "compare_managers",
    "build_record_book",
    "playoff_efficiency",
    "season_champions",
    "points_history",
    "search_draft",
    "resolve_player_names",
    "transactions_for_manager",
    "merge_manager",
    "validate_history",
    "history_from_payload",
    "history_to_payload",
    "build_league_report",
    "fetch_league_history",
    "save_league_history",
    "load_league_history",
    "list_leagues",
    "generate_sample_league",
]
