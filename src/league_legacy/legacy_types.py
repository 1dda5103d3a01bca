from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "unavailable"
STATUS_INSUFFICIENT_SAMPLE = "insufficient_sample"

UNKNOWN_MANAGER_NAME = "Unknown"
UNKNOWN_PLAYER_NAME = "Unknown Player"


@dataclass
class Manager:
    id: str
    name: str
    avatar: str = ""


@dataclass
class SeasonStanding:
    manager_id: str
    rank: int
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    is_champion: bool = False
    is_playoff: bool = False
    team_key: str = ""

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.ties


@dataclass
class DraftPick:
    round: int
    pick: int
    player: str
    manager_id: str
    player_key: Optional[str] = None
    team_key: str = ""


@dataclass
class GameSide:
    manager_id: str
    points: float = 0.0
    team_key: str = ""


@dataclass
class Game:
    week: int
    team_a: GameSide
    team_b: GameSide
    is_playoffs: bool = False


@dataclass
class TransactionPlayer:
    name: str
    type: str
    manager_id: str = ""


@dataclass
class Transaction:
    id: str
    type: str
    date: int
    manager_ids: List[str] = field(default_factory=list)
    players: List[TransactionPlayer] = field(default_factory=list)


@dataclass
class Season:
    year: int
    key: str
    champion_id: Optional[str] = None
    standings: List[SeasonStanding] = field(default_factory=list)
    draft: Optional[List[DraftPick]] = None
    games: Optional[List[Game]] = None
    transactions: Optional[List[Transaction]] = None


@dataclass
class LeagueHistory:
    managers: List[Manager] = field(default_factory=list)
    seasons: List[Season] = field(default_factory=list)


@dataclass
class ManagerCandidate:
    manager: Manager
    year: int
    is_placeholder: bool = False


@dataclass
class EngineConfig:
    tie_epsilon: float = 0.01
    min_consistency_games: int = 10
    margin_list_size: int = 5
    streak_leaders: int = 6
    weekly_high_leaders: int = 5
    rivalry_min_games: int = 5
    nemesis_max_win_pct: float = 45.0
    pigeon_min_win_pct: float = 55.0
    playoff_efficiency_limit: int = 10


@dataclass
class SyncConfig:
    league_id: int
    league_name: str = ""
    years: List[int] = field(default_factory=list)
    year: Optional[int] = None
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    lookback_seasons: int = 0
    swid: Optional[str] = None
    espn_s2: Optional[str] = None
    playoff_team_count: int = 4
    activity_page_size: int = 100


@dataclass
class StoreConfig:
    store_dir: str = "data/league_store"
    write_tables: bool = True


@dataclass
class CareerTotals:
    manager_id: str
    name: str
    avatar: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    seasons: int = 0
    titles: int = 0
    playoff_appearances: int = 0
    finals: int = 0
    sackos: int = 0
    ranks: List[int] = field(default_factory=list)
    years: List[int] = field(default_factory=list)

    @property
    def win_pct(self) -> float:
        return self.wins / max(1, self.wins + self.losses)

    @property
    def avg_rank(self) -> float:
        return sum(self.ranks) / max(1, self.seasons)

    @property
    def playoff_pct(self) -> float:
        return self.playoff_appearances / max(1, self.seasons)

    @property
    def best_rank(self) -> Optional[int]:
        return min(self.ranks) if self.ranks else None


@dataclass
class RankingRow:
    manager_id: str
    name: str
    avatar: str
    legacy_score: float
    titles: int
    wins: int
    losses: int
    win_pct: float
    points_for: float
    seasons: int
    playoff_appearances: int
    playoff_pct: float
    avg_rank: float
    sackos: int


@dataclass
class StatSection:
    status: str
    rows: List[Any] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.status == STATUS_OK


@dataclass
class GameMargin:
    year: int
    week: int
    is_playoffs: bool
    margin: float
    winner_id: str
    winner_name: str
    loser_id: str
    loser_name: str
    winner_points: float
    loser_points: float
    score: str


@dataclass
class ConsistencyRow:
    manager_id: str
    name: str
    games: int
    mean: float
    std_dev: float


@dataclass
class StreakSummary:
    max_win: int = 0
    max_loss: int = 0
    current_type: Optional[str] = None
    current_length: int = 0


@dataclass
class StreakRow:
    manager_id: str
    name: str
    avatar: str
    games: int
    max_win_streak: int
    max_loss_streak: int
    current_type: Optional[str]
    current_length: int


@dataclass
class WeeklyHighRow:
    manager_id: str
    name: str
    avatar: str
    weekly_highs: int


@dataclass
class ScheduleLuckRow:
    manager_id: str
    name: str
    avatar: str
    actual_wins: int
    actual_losses: int
    all_play_wins: int
    all_play_losses: int
    actual_pct: float
    all_play_pct: float
    luck_factor: float
    weekly_highs: int
    actual_record: str
    all_play_record: str


@dataclass
class GameStatistics:
    status: str
    games_counted: int
    closest: StatSection
    blowouts: StatSection
    consistency: StatSection
    streaks: StatSection
    weekly_highs: StatSection
    schedule_luck: StatSection


@dataclass
class QuadrantPoint:
    manager_id: str
    name: str
    avatar: str
    games: int
    avg_points_for: float
    avg_points_against: float
    quadrant: str
    description: str


@dataclass
class QuadrantReport:
    status: str
    league_avg_points_for: float
    league_avg_points_against: float
    points: List[QuadrantPoint] = field(default_factory=list)


@dataclass
class MatchupRecord:
    year: int
    week: int
    result: str
    points_for: float
    points_against: float
    is_playoffs: bool = False


@dataclass
class RivalryRecord:
    opponent_id: str
    opponent_name: str
    opponent_avatar: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    history: List[MatchupRecord] = field(default_factory=list)
    current_streak_type: Optional[str] = None
    current_streak_length: int = 0

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        return self.wins / max(1, self.games) * 100.0

    @property
    def record(self) -> str:
        text = f"{self.wins}-{self.losses}"
        return f"{text}-{self.ties}" if self.ties > 0 else text


@dataclass
class RivalryReport:
    status: str
    subject_id: str
    subject_name: str
    rivalries: List[RivalryRecord] = field(default_factory=list)
    nemesis: Optional[RivalryRecord] = None
    pigeon: Optional[RivalryRecord] = None


@dataclass
class ComparisonSide:
    manager_id: str
    name: str
    avatar: str
    seasons: int
    wins: int
    losses: int
    ties: int
    points_for: float
    titles: int
    playoff_appearances: int
    best_rank: Optional[int]
    avg_rank: float
    win_pct: float


@dataclass
class SeasonComparison:
    year: int
    points_for_a: Optional[float]
    points_for_b: Optional[float]
    has_game_data: bool
    matchups: List[MatchupRecord] = field(default_factory=list)


@dataclass
class ManagerComparison:
    manager_a: ComparisonSide
    manager_b: ComparisonSide
    h2h_wins: int
    h2h_losses: int
    h2h_ties: int
    has_matchup_data: bool
    matchups: List[MatchupRecord] = field(default_factory=list)
    seasons: List[SeasonComparison] = field(default_factory=list)
    edges: Dict[str, str] = field(default_factory=dict)


@dataclass
class RecordHolder:
    manager_id: str
    name: str
    avatar: str
    value: float
    year: Optional[int] = None


@dataclass
class RecordBook:
    highest_season_points: Optional[RecordHolder] = None
    lowest_season_points: Optional[RecordHolder] = None
    best_avg_rank: Optional[RecordHolder] = None
    most_sackos: Optional[RecordHolder] = None


@dataclass
class PlayoffEfficiencyRow:
    manager_id: str
    name: str
    seasons: int
    playoffs: int
    finals: int
    titles: int
    conversion_rate: float


@dataclass
class SeasonChampion:
    year: int
    key: str
    champion_id: Optional[str]
    champion_name: Optional[str]
