import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .legacy_types import LeagueHistory
from .league_model import history_from_payload, history_to_payload

TABLE_NAMES = ("standings", "games", "draft")


def _utcnow_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _json_scalar(value: Any) -> Any:
    # Frames and dataclass payloads may carry numpy scalars.
    if isinstance(value, np.generic):
        return value.item()
    return str(value)


def _write_document(path: Path, document: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.partial")
    staging.write_text(json.dumps(document, indent=2, sort_keys=True, default=_json_scalar))
    staging.replace(path)


def _read_document(path: Path) -> Optional[Dict[str, Any]]:
    """Return the stored dict, or None when the file is absent, corrupt or not an object."""
    if not path.is_file():
        return None
    try:
        document = json.loads(path.read_text())
    except (OSError, ValueError):
        return None
    return document if isinstance(document, dict) else None


def clean_league_id(league_id: Any) -> str:
    # Document keys may not contain dots.
    return str(league_id).replace(".", "_")


def league_root(store_dir: str, league_id: Any) -> Path:
    return Path(store_dir) / clean_league_id(league_id)


def _write_history_table(table_root: Path, name: str, frame: pd.DataFrame, warnings: List[str]) -> int:
    table_root.mkdir(parents=True, exist_ok=True)
    parquet_path = table_root / f"{name}.parquet"
    try:
        frame.to_parquet(parquet_path, index=False)
    except (ImportError, TypeError, ValueError) as exc:
        frame.to_json(table_root / f"{name}.json", orient="records", indent=2)
        warnings.append(f"table_fallback_json:{name}:{exc}")
    return len(frame.index)


def _read_history_table(table_root: Path, name: str) -> pd.DataFrame:
    parquet_path = table_root / f"{name}.parquet"
    if parquet_path.exists():
        return pd.read_parquet(parquet_path)
    json_path = table_root / f"{name}.json"
    if json_path.exists():
        return pd.DataFrame(json.loads(json_path.read_text()))
    return pd.DataFrame()


def history_frames(history: LeagueHistory) -> Dict[str, pd.DataFrame]:
    """Flatten standings, games and draft picks into one row per record.

    Unplayed 0-0 games are kept so the tables mirror the stored document.
    """
    standings: List[Dict[str, Any]] = []
    games: List[Dict[str, Any]] = []
    draft: List[Dict[str, Any]] = []

    for season in history.seasons:
        for standing in season.standings:
            standings.append(
                {
                    "year": season.year,
                    "manager_id": standing.manager_id,
                    "rank": standing.rank,
                    "wins": standing.wins,
                    "losses": standing.losses,
                    "ties": standing.ties,
                    "points_for": standing.points_for,
                    "points_against": standing.points_against,
                    "is_champion": standing.is_champion,
                    "is_playoff": standing.is_playoff,
                }
            )
        for game in season.games or []:
            games.append(
                {
                    "year": season.year,
                    "week": game.week,
                    "is_playoffs": game.is_playoffs,
                    "team_a_manager_id": game.team_a.manager_id,
                    "team_a_points": game.team_a.points,
                    "team_b_manager_id": game.team_b.manager_id,
                    "team_b_points": game.team_b.points,
                }
            )
        for pick in season.draft or []:
            draft.append(
                {
                    "year": season.year,
                    "round": pick.round,
                    "pick": pick.pick,
                    "player": pick.player,
                    "player_key": pick.player_key,
                    "manager_id": pick.manager_id,
                }
            )

    return {
        "standings": pd.DataFrame(standings),
        "games": pd.DataFrame(games),
        "draft": pd.DataFrame(draft),
    }


def save_league_history(
    store_dir: str,
    league_id: Any,
    league_name: str,
    history: LeagueHistory,
    write_tables: bool = True,
) -> Dict[str, Any]:
    root = league_root(store_dir, league_id)
    warnings: List[str] = []

    meta = {
        "id": str(league_id),
        "name": str(league_name or league_id),
        "last_updated": _utcnow_ms(),
        "season_count": len(history.seasons),
        "latest_season": history.seasons[-1].year if history.seasons else None,
    }
    _write_document(root / "data.json", history_to_payload(history))
    _write_document(root / "meta.json", meta)

    record_counts: Dict[str, int] = {}
    if write_tables:
        frames = history_frames(history)
        for name in TABLE_NAMES:
            record_counts[name] = _write_history_table(root / "tables", name, frames[name], warnings)

    return {"league_root": str(root), "meta": meta, "record_counts": record_counts, "warnings": warnings}


def load_league_history(store_dir: str, league_id: Any) -> Optional[LeagueHistory]:
    payload = _read_document(league_root(store_dir, league_id) / "data.json")
    return history_from_payload(payload) if payload is not None else None


def load_league_meta(store_dir: str, league_id: Any) -> Optional[Dict[str, Any]]:
    return _read_document(league_root(store_dir, league_id) / "meta.json")


def list_leagues(store_dir: str) -> List[Dict[str, Any]]:
    root = Path(store_dir)
    if not root.exists():
        return []
    leagues: List[Dict[str, Any]] = []
    for meta_path in sorted(root.glob("*/meta.json")):
        meta = _read_document(meta_path)
        if meta is not None:
            leagues.append({"key": meta.get("id", meta_path.parent.name), **meta})
    leagues.sort(key=lambda item: int(item.get("last_updated") or 0), reverse=True)
    return leagues


def load_league_tables(store_dir: str, league_id: Any) -> Dict[str, pd.DataFrame]:
    table_root = league_root(store_dir, league_id) / "tables"
    return {name: _read_history_table(table_root, name) for name in TABLE_NAMES}
