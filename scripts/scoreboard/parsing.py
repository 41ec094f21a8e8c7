"""Parsing & cleaning — turn raw score-sheet CSV text into clean game dicts.

Rows that fail validation are dropped, never raised. The only fatal input
is a source with no text at all (EmptySourceError).
"""

import re

from scoreboard.constants import (
    MIN_FIELDS, TIMESTAMP_COL,
    TEAM1_PLAYER_COLS, TEAM1_SCORE_COL,
    TEAM2_PLAYER_COLS, TEAM2_SCORE_COL,
)
from scoreboard.filtering import parse_timestamp

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class EmptySourceError(ValueError):
    """A score source was missing or contained no text."""


# ─── Line Splitting ─────────────────────────────────────────────

def parse_line(line):
    """Split one CSV line into trimmed fields.

    A double quote toggles quoted mode; commas inside quotes are kept.
    Escaped quotes ("") are not supported.
    """
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def parse_score(value):
    """Parse the leading integer of a score cell. Unparseable → 0."""
    match = _INT_PREFIX.match(value or "")
    if not match:
        return 0
    return int(match.group(1))


# ─── Row Cleaning ───────────────────────────────────────────────

def _team(fields, player_cols, score_col):
    players = [fields[i].strip() for i in player_cols if fields[i] and fields[i].strip()]
    return {"players": players, "score": parse_score(fields[score_col])}


def clean_row(fields, skip_log=None):
    """Build a clean game dict from parsed CSV fields. Returns None if invalid."""
    if len(fields) < MIN_FIELDS:
        if skip_log is not None:
            skip_log.append("too few fields")
        return None

    team1 = _team(fields, TEAM1_PLAYER_COLS, TEAM1_SCORE_COL)
    team2 = _team(fields, TEAM2_PLAYER_COLS, TEAM2_SCORE_COL)

    if not team1["players"] or not team2["players"]:
        if skip_log is not None:
            skip_log.append("empty team")
        return None

    if team1["score"] < 0 or team2["score"] < 0:
        if skip_log is not None:
            skip_log.append("negative score")
        return None

    timestamp = fields[TIMESTAMP_COL] or ""
    return {
        "timestamp": timestamp,
        "played_at": parse_timestamp(timestamp),
        "team1": team1,
        "team2": team2,
    }


def game_signatures(game):
    """Both order-invariant duplicate keys for a game (as played, teams swapped)."""
    t1 = ",".join(sorted(game["team1"]["players"]))
    t2 = ",".join(sorted(game["team2"]["players"]))
    s1, s2 = game["team1"]["score"], game["team2"]["score"]
    ts = game["timestamp"]
    return f"{ts}|{t1}|{s1}|{t2}|{s2}", f"{ts}|{t2}|{s2}|{t1}|{s1}"


# ─── Source Parsing ─────────────────────────────────────────────

class RecordParser:
    """Accumulates games from one or more score sheets without duplicates."""

    def __init__(self):
        self.games = []
        self.seen = set()
        self.dropped = 0
        self.duplicates = 0

    def reset(self):
        self.games = []
        self.seen = set()
        self.dropped = 0
        self.duplicates = 0

    def parse_source(self, text, append=False, skip_log=None):
        """Parse one CSV source. Line 0 is the header and is discarded.

        With append=False the game list and seen-signature set are cleared
        first; with append=True both carry over, so a second sheet cannot
        re-add a game already read from the first.

        Returns a diagnostics report for this source.
        """
        if text is None or not text.strip():
            raise EmptySourceError("score source is empty")

        if not append:
            self.reset()

        report = {"rows": 0, "accepted": 0, "dropped": 0, "duplicates": 0}
        lines = text.strip().splitlines()

        for line in lines[1:]:
            if not line.strip():
                continue
            report["rows"] += 1

            game = clean_row(parse_line(line), skip_log=skip_log)
            if game is None:
                report["dropped"] += 1
                continue

            key1, key2 = game_signatures(game)
            if key1 in self.seen or key2 in self.seen:
                report["duplicates"] += 1
                if skip_log is not None:
                    skip_log.append("duplicate game")
                continue

            self.seen.add(key1)
            self.seen.add(key2)
            self.games.append(game)
            report["accepted"] += 1

        self.dropped += report["dropped"]
        self.duplicates += report["duplicates"]
        return report


# ─── Accolades ──────────────────────────────────────────────────

def parse_accolades(text):
    """Parse the tournament accolades sheet into lowercase name → awards.

    Header row: (ignored), tournament 1, tournament 2, ...
    Data rows:  award name, winner in tournament 1, winner in tournament 2, ...

    Blank or header-only input yields an empty mapping.
    """
    if not text or not text.strip():
        return {}

    lines = text.strip().splitlines()
    if len(lines) < 2:
        return {}

    header = parse_line(lines[0])
    accolades = {}
    for line in lines[1:]:
        values = parse_line(line)
        award = values[0]
        if not award:
            continue
        for j in range(1, len(values)):
            player = values[j]
            if not player:
                continue
            accolades.setdefault(player.lower(), []).append({
                "award": award,
                "tournament": j,
                "tournament_name": header[j] if j < len(header) else "",
            })
    return accolades
