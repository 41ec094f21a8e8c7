"""Category E: Pipeline Output Tests

Runs the full pipeline (score sheets on disk → JSON files) in a temp
directory and validates the contract with the static site.
"""

import json

import pytest
from helpers import HEADER, league_rows, make_csv

from scoreboard.constants import CATEGORIES
from scoreboard.io_helpers import read_optional, read_source, write_json
from scoreboard.main import build_and_write_all, main
from scoreboard.parsing import EmptySourceError

OUTPUT_FILES = [
    "metadata.json",
    "leaderboards.json",
    "players.json",
    "teammates.json",
    "months.json",
    "games.json",
]

ACCOLADES = "Award,Spring Cup,Summer Cup\nMVP,Alice,Carol\nGolden Boot,alice,\n"


def load(out_dir, filename):
    with open(out_dir / filename) as f:
        return json.load(f)


@pytest.fixture
def sheets(tmp_path):
    """January and February sheets plus an accolades sheet on disk."""
    rows = league_rows()
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "jan.csv").write_text(make_csv(*rows[:8]), encoding="utf-8")
    (data_dir / "feb.csv").write_text(make_csv(*rows[8:]), encoding="utf-8")
    (data_dir / "accolades.csv").write_text(ACCOLADES, encoding="utf-8")
    return data_dir


def run(sheets, out_dir, *extra):
    argv = [
        "--scores", str(sheets / "jan.csv"), str(sheets / "feb.csv"),
        "--accolades", str(sheets / "accolades.csv"),
        "--out", str(out_dir),
        "--month", "2024-02",
        *extra,
    ]
    main(argv)


# ─── E1: Full run ────────────────────────────────────────────────

class TestE1_FullRun:
    """Every output file is written and agrees with the sheets."""

    @pytest.fixture
    def out_dir(self, sheets, tmp_path):
        out = tmp_path / "site" / "data"
        run(sheets, out, "--min-games", "1")
        return out

    @pytest.mark.parametrize("filename", OUTPUT_FILES)
    def test_file_written(self, out_dir, filename):
        assert (out_dir / filename).exists()

    def test_metadata(self, out_dir):
        meta = load(out_dir, "metadata.json")
        assert meta["total_games"] == 12
        assert meta["total_players"] == 6
        assert meta["reference_month"] == "2024-02"
        assert meta["load_report"] == {"rows": 12, "accepted": 12, "dropped": 0, "duplicates": 0}
        assert meta["last_updated"]

    def test_leaderboards_shape(self, out_dir):
        boards = load(out_dir, "leaderboards.json")
        assert set(boards) == {"monthly", "all"}
        for period in boards.values():
            assert set(period) == set(CATEGORIES)
            for rows in period.values():
                assert len(rows) <= 5

    def test_leaderboard_leaders(self, out_dir):
        boards = load(out_dir, "leaderboards.json")
        assert boards["all"]["winrate"][0]["name"] == "Alice"
        assert boards["monthly"]["winrate"][0]["name"] == "Carol"

    def test_players_carry_accolades(self, out_dir):
        players = {p["name"]: p for p in load(out_dir, "players.json")}
        assert [a["award"] for a in players["Alice"]["accolades"]] == ["MVP", "Golden Boot"]
        assert players["Carol"]["accolades"][0]["tournament_name"] == "Summer Cup"
        assert players["Finn"]["accolades"] == []

    def test_teammates(self, out_dir):
        pairs = load(out_dir, "teammates.json")
        assert len(pairs) == 7
        assert all(" & " in p["pair"] for p in pairs)

    def test_months(self, out_dir):
        assert [m["label"] for m in load(out_dir, "months.json")] == ["February 2024", "January 2024"]

    def test_games_newest_first_without_datetimes(self, out_dir):
        games = load(out_dir, "games.json")
        assert len(games) == 12
        assert games[0]["timestamp"] == "2024-02-05T18:00:00"
        assert all(set(g) == {"timestamp", "team1", "team2"} for g in games)


# ─── E2: Default thresholds ──────────────────────────────────────

class TestE2_Thresholds:
    """Without --min-games the 10 / 50 game minimums apply."""

    def test_small_league_has_empty_boards(self, sheets, tmp_path):
        out = tmp_path / "out"
        run(sheets, out)
        boards = load(out, "leaderboards.json")
        assert all(rows == [] for rows in boards["all"].values())
        assert all(rows == [] for rows in boards["monthly"].values())
        # Tables are not thresholded
        assert len(load(out, "players.json")) == 6


# ─── E3: Failure modes ───────────────────────────────────────────

class TestE3_Failures:
    """Missing score sheets are fatal; a missing accolades sheet is not."""

    def test_missing_accolades(self, sheets, tmp_path, capsys):
        (sheets / "accolades.csv").unlink()
        out = tmp_path / "out"
        run(sheets, out, "--min-games", "1")
        assert "Warning" in capsys.readouterr().out
        assert all(p["accolades"] == [] for p in load(out, "players.json"))

    def test_missing_score_sheet(self, sheets, tmp_path):
        (sheets / "feb.csv").unlink()
        with pytest.raises(FileNotFoundError):
            run(sheets, tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_empty_score_sheet(self, sheets, tmp_path):
        (sheets / "feb.csv").write_text("", encoding="utf-8")
        with pytest.raises(EmptySourceError):
            run(sheets, tmp_path / "out")

    def test_bad_month_argument(self, sheets, tmp_path):
        with pytest.raises(SystemExit):
            run(sheets, tmp_path / "out", "--month", "Feb")


# ─── E4: Helpers ─────────────────────────────────────────────────

class TestE4_IOHelpers:

    def test_read_source(self, tmp_path):
        path = tmp_path / "s.csv"
        path.write_text(HEADER + "\n", encoding="utf-8")
        assert read_source(path).startswith("Timestamp")

    def test_read_optional_missing(self, tmp_path):
        assert read_optional(tmp_path / "nope.csv") == ""

    def test_write_json_compact(self, tmp_path):
        path = write_json("x.json", {"a": [1, 2]}, tmp_path, compact=True)
        assert path.read_text() == '{"a":[1,2]}'

    def test_build_and_write_all(self, engine, tmp_path):
        build_and_write_all(engine, tmp_path, min_games=3)
        boards = load(tmp_path, "leaderboards.json")
        assert "Finn" not in [r["name"] for r in boards["all"]["winrate"]]
        assert load(tmp_path, "metadata.json")["total_games"] == 12
