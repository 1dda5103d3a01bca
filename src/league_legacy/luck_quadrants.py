from typing import Dict, List, Optional, Tuple

from .career import aggregate_careers
from .legacy_types import STATUS_OK, STATUS_UNAVAILABLE, LeagueHistory, Manager, QuadrantPoint, QuadrantReport

JUGGERNAUT = "Juggernaut"
GLASS_CANNON = "Glass Cannon"
SLEEPER = "Sleeper"
SACKO = "Sacko"

QUADRANT_DESCRIPTIONS = {
    JUGGERNAUT: "Good & Lucky",
    GLASS_CANNON: "Good but Unlucky",
    SLEEPER: "Bad but Lucky",
    SACKO: "Bad & Unlucky",
}


def classify_quadrant(avg_points_for: float, avg_points_against: float, league_avg_for: float, league_avg_against: float) -> str:
    # Ties with the league average fall to the favorable side on both axes.
    if avg_points_for >= league_avg_for:
        return JUGGERNAUT if avg_points_against <= league_avg_against else GLASS_CANNON
    return SLEEPER if avg_points_against <= league_avg_against else SACKO


def classify_luck_quadrants(history: LeagueHistory, index: Optional[Dict[str, Manager]] = None) -> QuadrantReport:
    averages: List[Tuple[str, str, str, int, float, float]] = []
    for totals in aggregate_careers(history, index=index):
        games = totals.wins + totals.losses + totals.ties
        if games == 0:
            continue
        averages.append(
            (
                totals.manager_id,
                totals.name,
                totals.avatar,
                games,
                totals.points_for / games,
                totals.points_against / games,
            )
        )

    if not averages:
        return QuadrantReport(status=STATUS_UNAVAILABLE, league_avg_points_for=0.0, league_avg_points_against=0.0)

    # Mean of per-manager means, not a per-game league mean.
    league_avg_for = sum(item[4] for item in averages) / len(averages)
    league_avg_against = sum(item[5] for item in averages) / len(averages)

    points: List[QuadrantPoint] = []
    for manager_id, name, avatar, games, avg_for, avg_against in averages:
        quadrant = classify_quadrant(avg_for, avg_against, league_avg_for, league_avg_against)
        points.append(
            QuadrantPoint(
                manager_id=manager_id,
                name=name,
                avatar=avatar,
                games=games,
                avg_points_for=avg_for,
                avg_points_against=avg_against,
                quadrant=quadrant,
                description=QUADRANT_DESCRIPTIONS[quadrant],
            )
        )

    points.sort(key=lambda point: point.manager_id)
    return QuadrantReport(
        status=STATUS_OK,
        league_avg_points_for=league_avg_for,
        league_avg_points_against=league_avg_against,
        points=points,
    )
