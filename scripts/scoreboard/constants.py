"""Scoreboard constants — paths, CSV layout, thresholds, leaderboard sizes."""

from pathlib import Path

# ─── Paths ──────────────────────────────────────────────────────

SCRIPT_DIR = Path(__file__).resolve().parent.parent  # scripts/
PROJECT_DIR = SCRIPT_DIR.parent
DATA_DIR = PROJECT_DIR / "data"
OUTPUT_DIR = PROJECT_DIR / "site" / "data"

# Monthly score sheets, loaded in order (later files are appended)
SCORE_FILES = ["scoresjan.csv", "scoresfeb.csv"]
ACCOLADES_CSV = "tourney_accolades.csv"

# ─── CSV Layout ─────────────────────────────────────────────────

# timestamp, 3 × team-1 player, team-1 score, 3 × team-2 player, team-2 score
MIN_FIELDS = 9
TIMESTAMP_COL = 0
TEAM1_PLAYER_COLS = (1, 2, 3)
TEAM1_SCORE_COL = 4
TEAM2_PLAYER_COLS = (5, 6, 7)
TEAM2_SCORE_COL = 8

# Accepted timestamp layouts (ISO 8601 is tried first)
TIMESTAMP_FORMATS = [
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%d %B %Y %H:%M:%S",
]

# Month labels are English regardless of LC_TIME
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# ─── Keys ───────────────────────────────────────────────────────

PAIR_SEPARATOR = " & "
OPPONENT_SEPARATOR = "|"

# ─── Thresholds & Configuration ─────────────────────────────────

# Leaderboard size for category leaders and top/bottom duos & opponents
TOP_N = 5

# Category key → stat field it ranks by
CATEGORIES = {
    "winrate": "win_rate",
    "wins": "wins",
    "losses": "losses",
    "plusminus": "plus_minus",
}

# Minimum games to appear on the home leaderboards
LEADERBOARD_MIN_GAMES = {"monthly": 10, "all": 50}

GAME_LOG_PAGE_SIZE = 50
MOST_ACTIVE_LIMIT = 15

# Window for the "last N" form record on profiles
LAST_N_GAMES = 10
