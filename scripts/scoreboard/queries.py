"""Derived queries — turn stat maps into display rows and leaderboards.

Every function builds new dicts and lists; the maps passed in are never
modified. Win rates are floats on a 0-100 scale with one decimal.
"""

import math

from scoreboard.constants import CATEGORIES, PAIR_SEPARATOR, TOP_N
from scoreboard.filtering import plays_in


def win_rate(wins, losses):
    """wins / (wins + losses) * 100, one decimal. 0 when nothing was decided."""
    decided = wins + losses
    if decided == 0:
        return 0.0
    return round(wins / decided * 100, 1)


def player_row(name, s):
    games = s["wins"] + s["losses"] + s["ties"]
    return {
        "name": name,
        "wins": s["wins"],
        "losses": s["losses"],
        "ties": s["ties"],
        "games": games,
        "win_rate": win_rate(s["wins"], s["losses"]),
        "goals_for": s["goals_for"],
        "goals_against": s["goals_against"],
        "plus_minus": s["plus_minus"],
        "games_as_keeper": s["games_as_keeper"],
        "games_as_striker": s["games_as_striker"],
    }


def rank_by_win_rate(rows):
    """Win rate descending, then games played descending."""
    return sorted(rows, key=lambda r: (-r["win_rate"], -r["games"]))


# ─── Tables ─────────────────────────────────────────────────────

def player_table(player_stats, min_games=1):
    """All player rows with at least min_games, ranked by win rate."""
    rows = [player_row(name, s) for name, s in player_stats.items()]
    return rank_by_win_rate([r for r in rows if r["games"] >= min_games])


def teammate_table(teammate_stats, min_games=1):
    """All teammate-pair rows with at least min_games, ranked by win rate."""
    rows = []
    for pair, s in teammate_stats.items():
        if s["games"] < min_games:
            continue
        rows.append({
            "pair": pair,
            "wins": s["wins"],
            "losses": s["losses"],
            "games": s["games"],
            "win_rate": win_rate(s["wins"], s["losses"]),
        })
    return rank_by_win_rate(rows)


def plus_minus_leaders(rows):
    return sorted(rows, key=lambda r: -r["plus_minus"])


def category_leaders(rows, category, limit=TOP_N):
    """Top `limit` rows for one leaderboard category. Unknown category → []."""
    field = CATEGORIES.get(category)
    if field is None:
        return []
    if category == "winrate":
        ranked = rank_by_win_rate(rows)
    else:
        ranked = sorted(rows, key=lambda r: -r[field])
    return ranked[:limit]


def most_active(rows, limit):
    return sorted(rows, key=lambda r: -r["games"])[:limit]


def search_rows(rows, term):
    """Rows whose player name contains `term`, case-insensitive."""
    term = (term or "").lower()
    return [r for r in rows if term in r["name"].lower()]


# ─── Profiles ───────────────────────────────────────────────────

def find_player(player_stats, name):
    """Case-insensitive lookup. Returns (stored name, stats) or None."""
    name_lower = name.lower()
    for stored, s in player_stats.items():
        if stored.lower() == name_lower:
            return stored, s
    return None


def profile_from_games(name, games):
    """Recompute one player's record from the games they played in."""
    name_lower = name.lower()
    s = {
        "wins": 0, "losses": 0, "ties": 0,
        "goals_for": 0, "goals_against": 0, "plus_minus": 0,
        "games_as_keeper": 0, "games_as_striker": 0,
    }
    for game in games:
        side = plays_in(game, name)
        if side is None:
            continue
        other = "team2" if side == "team1" else "team1"
        ours, theirs = game[side]["score"], game[other]["score"]
        if ours > theirs:
            s["wins"] += 1
        elif ours < theirs:
            s["losses"] += 1
        else:
            s["ties"] += 1
        s["goals_for"] += ours
        s["goals_against"] += theirs

        players = [p.lower() for p in game[side]["players"]]
        if players.index(name_lower) == 0:
            s["games_as_keeper"] += 1
        else:
            s["games_as_striker"] += 1
    s["plus_minus"] = s["goals_for"] - s["goals_against"]
    return player_row(name, s)


# ─── Duos & Opponents ───────────────────────────────────────────

def duo_rows(teammate_stats, name, min_games=1):
    """Every teammate of `name` with the pair's record."""
    name_lower = name.lower()
    rows = []
    for pair, s in teammate_stats.items():
        first, second = pair.split(PAIR_SEPARATOR, 1)
        if first.lower() == name_lower:
            teammate = second
        elif second.lower() == name_lower:
            teammate = first
        else:
            continue
        if s["games"] < min_games:
            continue
        rows.append({
            "teammate": teammate,
            "wins": s["wins"],
            "losses": s["losses"],
            "games": s["games"],
            "win_rate": win_rate(s["wins"], s["losses"]),
        })
    return rows


def opponent_rows(opponent_stats, name, min_games=1):
    """Every opponent `name` has faced, from `name`'s side of the matchup."""
    name_lower = name.lower()
    rows = []
    for s in opponent_stats.values():
        if s["player"].lower() != name_lower or s["games"] < min_games:
            continue
        rows.append({
            "opponent": s["opponent"],
            "wins": s["wins"],
            "losses": s["losses"],
            "games": s["games"],
            "win_rate": win_rate(s["wins"], s["losses"]),
        })
    return rows


def top_rows(rows, limit=TOP_N):
    """Best win rates first; more games wins a tie."""
    return sorted(rows, key=lambda r: (-r["win_rate"], -r["games"]))[:limit]


def bottom_rows(rows, limit=TOP_N):
    """Worst win rates first; more games wins a tie."""
    return sorted(rows, key=lambda r: (r["win_rate"], -r["games"]))[:limit]


def find_row(rows, field, name):
    name_lower = name.lower()
    for row in rows:
        if row[field].lower() == name_lower:
            return row
    return None


# ─── Game Log ───────────────────────────────────────────────────

def paginate(games, page=1, per_page=50):
    """One page of an already-sorted game list (pages are 1-based)."""
    total = len(games)
    pages = math.ceil(total / per_page) if per_page > 0 else 0
    if page < 1 or per_page <= 0:
        items = []
    else:
        start = (page - 1) * per_page
        items = games[start:start + per_page]
    return {"games": items, "page": page, "pages": pages, "total": total}
