"""StatsEngine — owns parsed games and stat maps, answers read-only queries.

Typical use:

    engine = StatsEngine()
    engine.load(jan_csv, feb_csv)
    engine.get_leaders_by_category("winrate", is_monthly=True, min_games=10)

`load` is all-or-nothing: if no source is given or any source is empty the
previous games and maps are left untouched. Games handed out are copies.
Months are 1-12.
"""

from datetime import datetime, timezone

from scoreboard.aggregation import (
    aggregate_all,
    aggregate_player_stats,
    aggregate_teammate_stats,
    aggregate_opponent_stats,
    compute_form,
)
from scoreboard.constants import GAME_LOG_PAGE_SIZE, MOST_ACTIVE_LIMIT, TOP_N
from scoreboard.filtering import (
    available_months,
    filter_games_by_month,
    filter_games_by_player,
    sort_newest_first,
    sort_oldest_first,
)
from scoreboard.parsing import EmptySourceError, RecordParser, parse_accolades
from scoreboard.queries import (
    bottom_rows,
    category_leaders,
    duo_rows,
    find_player,
    find_row,
    most_active,
    opponent_rows,
    paginate,
    player_row,
    player_table,
    plus_minus_leaders,
    profile_from_games,
    search_rows,
    teammate_table,
    top_rows,
)


def _explicit_month(is_monthly, month, year):
    return is_monthly and month is not None and year is not None


def _copy_game(game):
    return {
        **game,
        "team1": {**game["team1"], "players": list(game["team1"]["players"])},
        "team2": {**game["team2"], "players": list(game["team2"]["players"])},
    }


class StatsEngine:
    """In-memory stats for one set of score sheets."""

    def __init__(self, now=None):
        self.now = now
        self.parser = RecordParser()
        self.accolades = {}
        self.last_report = None
        self._maps = aggregate_all([], now=self.reference_now())

    def reference_now(self):
        return self.now or datetime.now(timezone.utc)

    @property
    def games(self):
        """Copies of the parsed games, in load order."""
        return [_copy_game(g) for g in self.parser.games]

    # ─── Loading ────────────────────────────────────────────────

    def parse_source(self, text, append=False, skip_log=None):
        """Parse one score sheet into the game list (see RecordParser)."""
        self.last_report = self.parser.parse_source(text, append=append, skip_log=skip_log)
        return self.last_report

    def rebuild_aggregates(self, now=None):
        """Clear and rebuild every stat map from the current game list."""
        if now is not None:
            self.now = now
        self._maps = aggregate_all(self.parser.games, now=self.reference_now())

    def load(self, *sources, now=None, skip_log=None):
        """Parse all sources (first replaces, rest append) and rebuild.

        Nothing is committed unless every source parses. Returns a combined
        diagnostics report.
        """
        if not sources:
            raise EmptySourceError("no score sources given")
        parser = RecordParser()
        totals = {"rows": 0, "accepted": 0, "dropped": 0, "duplicates": 0}
        for i, text in enumerate(sources):
            report = parser.parse_source(text, append=i > 0, skip_log=skip_log)
            for key in totals:
                totals[key] += report[key]

        reference = now or self.reference_now()
        maps = aggregate_all(parser.games, now=reference)

        self.parser = parser
        self._maps = maps
        if now is not None:
            self.now = now
        self.last_report = totals
        return totals

    def load_accolades(self, text):
        """Replace tournament accolades. Unusable text leaves no accolades."""
        self.accolades = parse_accolades(text)
        return len(self.accolades)

    # ─── Leaderboards ───────────────────────────────────────────

    def get_player_stats(self, min_games=1):
        return player_table(self._maps["players"], min_games)

    def get_teammate_stats(self, min_games=1):
        return teammate_table(self._maps["teammates"], min_games)

    def get_plus_minus_leaders(self, min_games=1):
        return plus_minus_leaders(self.get_player_stats(min_games))

    def get_monthly_player_stats(self, min_games=1):
        """Player rows for the rolling month (the month of `now`)."""
        return player_table(self._maps["monthly_players"], min_games)

    def get_player_stats_for_month(self, month, year, min_games=1):
        """Player rows recomputed for an explicit month."""
        games = filter_games_by_month(self.parser.games, month, year)
        return player_table(aggregate_player_stats(games), min_games)

    def get_leaders_by_category(self, category, is_monthly=False, min_games=1):
        """Top 5 for 'winrate', 'wins', 'losses' or 'plusminus'."""
        rows = self.get_monthly_player_stats(min_games) if is_monthly else self.get_player_stats(min_games)
        return category_leaders(rows, category, TOP_N)

    def get_most_active_players(self, limit=MOST_ACTIVE_LIMIT, is_monthly=False):
        rows = self.get_monthly_player_stats(1) if is_monthly else self.get_player_stats(1)
        return most_active(rows, limit)

    def search_players(self, term, min_games=1):
        return search_rows(self.get_player_stats(min_games), term)

    # ─── Profiles ───────────────────────────────────────────────

    def get_player_profile(self, name, is_monthly=False, month=None, year=None):
        """One player's record, lifetime or for an explicit month. None if unknown."""
        found = find_player(self._maps["players"], name)
        if found is None:
            return None
        stored, stats = found

        if _explicit_month(is_monthly, month, year):
            games = filter_games_by_player(filter_games_by_month(self.parser.games, month, year), name)
            return profile_from_games(stored, games)
        return player_row(stored, stats)

    def get_player_games(self, name, month=None, year=None):
        """A player's games, oldest first, optionally limited to one month."""
        games = filter_games_by_player(filter_games_by_month(self.parser.games, month, year), name)
        return [_copy_game(g) for g in sort_oldest_first(games)]

    def get_player_form(self, name, month=None, year=None):
        """Longest win streak and last-10 record. None if the player is unknown."""
        if find_player(self._maps["players"], name) is None:
            return None
        return compute_form(self.get_player_games(name, month, year), name)

    def get_player_accolades(self, name):
        return list(self.accolades.get(name.lower(), []))

    def get_all_player_names(self):
        return sorted(self._maps["players"])

    # ─── Duos ───────────────────────────────────────────────────

    def _teammate_map(self, is_monthly, month, year):
        if _explicit_month(is_monthly, month, year):
            return aggregate_teammate_stats(filter_games_by_month(self.parser.games, month, year))
        if is_monthly:
            return self._maps["monthly_teammates"]
        return self._maps["teammates"]

    def get_player_duo_stats(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return duo_rows(self._teammate_map(is_monthly, month, year), name, min_games)

    def get_top_duos(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return top_rows(self.get_player_duo_stats(name, min_games, is_monthly, month, year), TOP_N)

    def get_bottom_duos(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return bottom_rows(self.get_player_duo_stats(name, min_games, is_monthly, month, year), TOP_N)

    def get_duo_win_rate(self, player, teammate, min_games=1, is_monthly=False, month=None, year=None):
        """The pair record for player + teammate (order irrelevant), or None."""
        rows = self.get_player_duo_stats(player, min_games, is_monthly, month, year)
        return find_row(rows, "teammate", teammate)

    # ─── Opponents ──────────────────────────────────────────────

    def _opponent_map(self, is_monthly, month, year):
        if _explicit_month(is_monthly, month, year):
            return aggregate_opponent_stats(filter_games_by_month(self.parser.games, month, year))
        if is_monthly:
            return self._maps["monthly_opponents"]
        return self._maps["opponents"]

    def get_opponent_stats(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return opponent_rows(self._opponent_map(is_monthly, month, year), name, min_games)

    def get_top_opponents(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return top_rows(self.get_opponent_stats(name, min_games, is_monthly, month, year), TOP_N)

    def get_bottom_opponents(self, name, min_games=1, is_monthly=False, month=None, year=None):
        return bottom_rows(self.get_opponent_stats(name, min_games, is_monthly, month, year), TOP_N)

    def get_opponent_win_rate(self, player, opponent, min_games=1, is_monthly=False, month=None, year=None):
        """Player's directed record against opponent, or None."""
        rows = self.get_opponent_stats(player, min_games, is_monthly, month, year)
        return find_row(rows, "opponent", opponent)

    # ─── Game Log ───────────────────────────────────────────────

    def get_all_games(self):
        """All games, newest first."""
        return [_copy_game(g) for g in sort_newest_first(self.parser.games)]

    def get_game_log_page(self, page=1, per_page=GAME_LOG_PAGE_SIZE):
        return paginate(self.get_all_games(), page, per_page)

    def get_available_months(self):
        return available_months(self.parser.games)
