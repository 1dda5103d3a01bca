from dataclasses import asdict
from typing import Any, Dict, Optional

from .game_stats import compute_game_statistics
from .legacy_rankings import rank_managers
from .legacy_types import LeagueHistory, RivalryRecord, RivalryReport
from .league_model import build_manager_index, has_game_data, to_engine_config, validate_history
from .league_records import build_record_book, playoff_efficiency, points_history, season_champions
from .luck_quadrants import classify_luck_quadrants
from .rivalries import build_rivalries


def _rivalry_payload(record: Optional[RivalryRecord]) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    payload = asdict(record)
    payload.update({"games": record.games, "win_pct": record.win_pct, "record": record.record})
    return payload


def rivalry_report_payload(report: RivalryReport) -> Dict[str, Any]:
    return {
        "status": report.status,
        "subject_id": report.subject_id,
        "subject_name": report.subject_name,
        "rivalries": [_rivalry_payload(record) for record in report.rivalries],
        "nemesis": _rivalry_payload(report.nemesis),
        "pigeon": _rivalry_payload(report.pigeon),
    }


def build_league_report(
    history: LeagueHistory,
    config: Optional[Any] = None,
    sort_field: str = "legacy_score",
    descending: Optional[bool] = None,
) -> Dict[str, Any]:
    """Every derived view of a league history as plain, JSON-ready dicts."""
    cfg = to_engine_config(config)
    index = build_manager_index(history)

    rankings = rank_managers(history, sort_field=sort_field, descending=descending)
    rivalries = {
        manager.id: rivalry_report_payload(build_rivalries(history, manager.id, config=cfg, index=index))
        for manager in history.managers
    }

    return {
        "summary": {
            "managers": len(history.managers),
            "seasons": len(history.seasons),
            "years": [season.year for season in history.seasons],
            "has_game_data": has_game_data(history),
        },
        "config": asdict(cfg),
        "rankings": [asdict(row) for row in rankings],
        "game_statistics": asdict(compute_game_statistics(history, config=cfg, index=index)),
        "luck_quadrants": asdict(classify_luck_quadrants(history, index=index)),
        "rivalries": rivalries,
        "record_book": asdict(build_record_book(history, index=index)),
        "playoff_efficiency": [asdict(row) for row in playoff_efficiency(history, config=cfg)],
        "season_champions": [asdict(row) for row in season_champions(history, index=index)],
        "points_history": points_history(history, index=index),
        "warnings": validate_history(history),
    }
