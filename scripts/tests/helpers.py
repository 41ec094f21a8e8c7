"""Shared test factories for scoreboard tests.

Provides factory functions for building raw score-sheet rows, whole CSV
sources and clean game dicts with sensible defaults and easy overrides.
"""

import sys
from pathlib import Path

# Add scripts/ to path so we can import scoreboard
SCRIPTS_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from scoreboard.filtering import parse_timestamp  # noqa: E402

HEADER = (
    "Timestamp,Team 1 Keeper,Team 1 Striker,Team 1 Striker,Team 1 Score,"
    "Team 2 Keeper,Team 2 Striker,Team 2 Striker,Team 2 Score"
)


# ─── Raw Row / CSV Factories ─────────────────────────────────────

def make_row(timestamp="2024-01-05T10:00:00", team1=("Alice", "Bob"), score1=5,
             team2=("Carol", "Dave"), score2=3):
    """Build one score-sheet line. Teams are padded to three player slots."""
    t1 = list(team1) + [""] * (3 - len(team1))
    t2 = list(team2) + [""] * (3 - len(team2))
    fields = [timestamp, *t1, str(score1), *t2, str(score2)]
    return ",".join(fields)


def make_csv(*rows, header=HEADER):
    """Join a header and rows into CSV text."""
    return "\n".join([header, *rows]) + "\n"


# ─── Clean Game Factory ──────────────────────────────────────────

def make_game(timestamp="2024-01-05T10:00:00", team1=("Alice", "Bob"), score1=5,
              team2=("Carol", "Dave"), score2=3):
    """Build a clean game dict (output of clean_row())."""
    return {
        "timestamp": timestamp,
        "played_at": parse_timestamp(timestamp),
        "team1": {"players": list(team1), "score": score1},
        "team2": {"players": list(team2), "score": score2},
    }


def make_games(n, team1=("Alice", "Bob"), team2=("Carol", "Dave"), team1_wins=None,
               month="2024-01"):
    """Generate N games between the same two teams.

    Args:
        n: Number of games
        team1, team2: Player lists (first player keeps goal)
        team1_wins: Number of games team 1 wins 5-3 (default: n//2). The rest
            team 2 wins 5-3.
        month: YYYY-MM for all timestamps; each game gets its own day/minute
    """
    if team1_wins is None:
        team1_wins = n // 2

    games = []
    for i in range(n):
        t1_won = i < team1_wins
        games.append(make_game(
            timestamp=f"{month}-{(i % 28) + 1:02d}T12:{i % 60:02d}:00",
            team1=team1,
            team2=team2,
            score1=5 if t1_won else 3,
            score2=3 if t1_won else 5,
        ))
    return games


# ─── Two-Month League ────────────────────────────────────────────

def league_rows():
    """Twelve score-sheet rows across January and February 2024.

    Jan: Alice & Bob v Carol & Dave x6 (4-2), Alice & Carol v Bob & Eve x2 (2-0)
    Feb: Alice & Dave v Bob & Carol x3 (1-2), Eve & Finn v Carol & Dave (2-2 tie)
    """
    rows = []
    for i, day in enumerate(range(2, 8)):
        won = i < 4
        rows.append(make_row(f"2024-01-{day:02d}T12:00:00", ("Alice", "Bob"), 5 if won else 3,
                             ("Carol", "Dave"), 3 if won else 5))
    for day in (10, 11):
        rows.append(make_row(f"2024-01-{day:02d}T12:00:00", ("Alice", "Carol"), 5, ("Bob", "Eve"), 1))
    for i, day in enumerate(range(1, 4)):
        won = i == 0
        rows.append(make_row(f"2024-02-{day:02d}T12:00:00", ("Alice", "Dave"), 5 if won else 3,
                             ("Bob", "Carol"), 3 if won else 5))
    rows.append(make_row("2024-02-05T18:00:00", ("Eve", "Finn"), 2, ("Carol", "Dave"), 2))
    return rows
