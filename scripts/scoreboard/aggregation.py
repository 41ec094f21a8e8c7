"""Aggregation functions — turn clean games into stat maps.

All functions take a list of clean game dicts and return freshly built
maps. No I/O, no side effects.
"""

from collections import defaultdict
from datetime import datetime, timezone

from scoreboard.constants import LAST_N_GAMES, PAIR_SEPARATOR, OPPONENT_SEPARATOR
from scoreboard.filtering import is_in_month, plays_in


def _new_player():
    return {
        "wins": 0, "losses": 0, "ties": 0,
        "goals_for": 0, "goals_against": 0, "plus_minus": 0,
        "games_as_keeper": 0, "games_as_striker": 0,
    }


def _new_pair():
    return {"wins": 0, "losses": 0, "games": 0}


def pair_key(player, teammate):
    """Unordered teammate key: 'Alice & Bob' regardless of argument order."""
    return PAIR_SEPARATOR.join(sorted([player, teammate]))


def opponent_key(player, opponent):
    """Directed, case-insensitive matchup key: 'alice|carol'."""
    return f"{player.lower()}{OPPONENT_SEPARATOR}{opponent.lower()}"


# ─── Per-game updates ───────────────────────────────────────────

def record_player(stats, player, won, lost, goals_for, goals_against, is_keeper):
    """Add one game to a player's record."""
    s = stats[player]
    if won:
        s["wins"] += 1
    elif lost:
        s["losses"] += 1
    else:
        s["ties"] += 1
    s["goals_for"] += goals_for
    s["goals_against"] += goals_against
    s["plus_minus"] = s["goals_for"] - s["goals_against"]
    if is_keeper:
        s["games_as_keeper"] += 1
    else:
        s["games_as_striker"] += 1


def record_teammates(stats, player, teammates, won, lost):
    """Add one game to every pair the player forms with a teammate.

    A pair is only updated from its alphabetically first member, so each
    pair counts once per game even though both members are iterated.
    """
    for teammate in teammates:
        if teammate == player:
            continue
        first, _ = sorted([player, teammate])
        if player != first:
            continue
        s = stats[pair_key(player, teammate)]
        s["games"] += 1
        if won:
            s["wins"] += 1
        if lost:
            s["losses"] += 1


def record_opponent(stats, player, opponent, won, lost):
    """Add one game to the directed player → opponent record."""
    key = opponent_key(player, opponent)
    if key not in stats:
        stats[key] = {"player": player, "opponent": opponent, **_new_pair()}
    s = stats[key]
    s["games"] += 1
    if won:
        s["wins"] += 1
    if lost:
        s["losses"] += 1


def apply_game(game, players=None, teammates=None, opponents=None):
    """Fold one game into whichever maps are given (None = skip that map)."""
    t1, t2 = game["team1"], game["team2"]
    team1_won = t1["score"] > t2["score"]
    team2_won = t2["score"] > t1["score"]

    sides = (
        (t1, t2, team1_won, team2_won),
        (t2, t1, team2_won, team1_won),
    )
    for team, other, won, lost in sides:
        for i, player in enumerate(team["players"]):
            if players is not None:
                record_player(players, player, won, lost, team["score"], other["score"], i == 0)
            if teammates is not None:
                record_teammates(teammates, player, team["players"], won, lost)
            if opponents is not None:
                for opponent in other["players"]:
                    record_opponent(opponents, player, opponent, won, lost)


# ─── Full rebuild ───────────────────────────────────────────────

def aggregate_all(games, now=None):
    """Rebuild every stat map from scratch.

    Monthly maps only hold games from the calendar month of `now`
    (default: the current UTC time).
    """
    if now is None:
        now = datetime.now(timezone.utc)

    players = defaultdict(_new_player)
    teammates = defaultdict(_new_pair)
    opponents = {}
    monthly_players = defaultdict(_new_player)
    monthly_teammates = defaultdict(_new_pair)
    monthly_opponents = {}

    for game in games:
        apply_game(game, players, teammates, opponents)
        if is_in_month(game, now.month, now.year):
            apply_game(game, monthly_players, monthly_teammates, monthly_opponents)

    return {
        "players": dict(players),
        "teammates": dict(teammates),
        "opponents": opponents,
        "monthly_players": dict(monthly_players),
        "monthly_teammates": dict(monthly_teammates),
        "monthly_opponents": monthly_opponents,
    }


def aggregate_player_stats(games):
    """Per-player records for an arbitrary set of games."""
    players = defaultdict(_new_player)
    for game in games:
        apply_game(game, players=players)
    return dict(players)


def aggregate_teammate_stats(games):
    """Per-pair teammate records for an arbitrary set of games."""
    teammates = defaultdict(_new_pair)
    for game in games:
        apply_game(game, teammates=teammates)
    return dict(teammates)


def aggregate_opponent_stats(games):
    """Directed opponent records for an arbitrary set of games."""
    opponents = {}
    for game in games:
        apply_game(game, opponents=opponents)
    return opponents


# ─── Form ───────────────────────────────────────────────────────

def compute_form(games, name, last_n=LAST_N_GAMES):
    """Longest win streak and last-N record for one player.

    `games` must already be in chronological order. A tie ends a streak and
    counts as neither a win nor a loss in the last-N record.
    """
    longest = 0
    current = 0
    results = []

    for game in games:
        side = plays_in(game, name)
        if side is None:
            continue
        other = "team2" if side == "team1" else "team1"
        ours, theirs = game[side]["score"], game[other]["score"]
        if ours > theirs:
            current += 1
            longest = max(longest, current)
            results.append("W")
        else:
            current = 0
            results.append("L" if ours < theirs else "T")

    recent = results[-last_n:] if last_n > 0 else []
    wins = recent.count("W")
    losses = recent.count("L")
    return {
        "longest_win_streak": longest,
        "current_win_streak": current,
        "last_n": len(recent),
        "last_n_wins": wins,
        "last_n_losses": losses,
        "last_n_ties": recent.count("T"),
        "last_n_record": f"{wins}-{losses}",
    }
