"""Date handling and game filtering — months, players, chronological order."""

from datetime import datetime, timezone

from scoreboard.constants import MONTH_NAMES, TIMESTAMP_FORMATS

# Sort key stand-in for games whose timestamp did not parse
_EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(ts):
    """Parse a score-sheet timestamp into an aware datetime. None if unparseable.

    Naive values are taken as UTC so that every parsed date compares cleanly.
    """
    if not ts:
        return None
    ts = ts.strip()
    if ts.endswith(("Z", "z")):
        ts = ts[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(ts)
    except ValueError:
        dt = None
        for fmt in TIMESTAMP_FORMATS:
            try:
                dt = datetime.strptime(ts, fmt)
                break
            except ValueError:
                continue
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def game_datetime(game):
    """Parsed date of a game, reusing the value computed at parse time."""
    if "played_at" in game:
        return game["played_at"]
    return parse_timestamp(game.get("timestamp", ""))


def is_in_month(game, month, year):
    """True if the game's date falls in the given calendar month (1-12)."""
    dt = game_datetime(game)
    if dt is None:
        return False
    return dt.month == month and dt.year == year


def filter_games_by_month(games, month, year):
    """Filter games to one calendar month. month=None or year=None = all games."""
    if month is None or year is None:
        return list(games)
    return [g for g in games if is_in_month(g, month, year)]


def plays_in(game, name):
    """Return 'team1', 'team2' or None for a case-insensitive player name."""
    name_lower = name.lower()
    for side in ("team1", "team2"):
        if any(p.lower() == name_lower for p in game[side]["players"]):
            return side
    return None


def filter_games_by_player(games, name):
    """Filter games to those the player took part in (case-insensitive)."""
    return [g for g in games if plays_in(g, name)]


def _sort_key(game):
    dt = game_datetime(game)
    return (dt is not None, dt or _EPOCH_MIN)


def sort_newest_first(games):
    """Newest first; games with an unparseable timestamp go last."""
    return sorted(games, key=_sort_key, reverse=True)


def sort_oldest_first(games):
    """Oldest first; games with an unparseable timestamp go last."""
    dated = [g for g in games if game_datetime(g) is not None]
    undated = [g for g in games if game_datetime(g) is None]
    return sorted(dated, key=game_datetime) + undated


def available_months(games):
    """Distinct (year, month) pairs present in the games, newest first."""
    months = {}
    for g in games:
        dt = game_datetime(g)
        if dt is None:
            continue
        key = (dt.year, dt.month)
        if key not in months:
            months[key] = {
                "year": dt.year,
                "month": dt.month,
                "label": f"{MONTH_NAMES[dt.month - 1]} {dt.year}",
            }
    return [months[k] for k in sorted(months, reverse=True)]
