"""Pipeline orchestration — build_and_write_all and main entry point."""

from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path

from scoreboard.constants import (
    ACCOLADES_CSV, CATEGORIES, DATA_DIR, LEADERBOARD_MIN_GAMES,
    OUTPUT_DIR, SCORE_FILES,
)
from scoreboard.engine import StatsEngine
from scoreboard.io_helpers import read_optional, read_source, write_json


def build_and_write_all(engine, out_dir=OUTPUT_DIR, min_games=None):
    """Write every leaderboard and table the static site reads.

    min_games overrides both leaderboard thresholds when given.
    """
    leaderboards = {}
    for period, is_monthly in (("monthly", True), ("all", False)):
        threshold = LEADERBOARD_MIN_GAMES[period] if min_games is None else min_games
        leaderboards[period] = {
            category: engine.get_leaders_by_category(category, is_monthly, threshold)
            for category in CATEGORIES
        }

    players = engine.get_player_stats(1)
    for row in players:
        row["accolades"] = engine.get_player_accolades(row["name"])

    games = [
        {"timestamp": g["timestamp"], "team1": g["team1"], "team2": g["team2"]}
        for g in engine.get_all_games()
    ]

    write_json("metadata.json", {
        "last_updated": datetime.now(timezone.utc).isoformat(),
        "reference_month": engine.reference_now().strftime("%Y-%m"),
        "total_games": len(games),
        "total_players": len(players),
        "load_report": engine.last_report,
    }, out_dir)
    write_json("leaderboards.json", leaderboards, out_dir)
    write_json("players.json", players, out_dir)
    write_json("teammates.json", engine.get_teammate_stats(1), out_dir)
    write_json("months.json", engine.get_available_months(), out_dir)
    write_json("games.json", games, out_dir, compact=True)


def _parse_month(value):
    return datetime.strptime(value, "%Y-%m").replace(tzinfo=timezone.utc)


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(description="Scoreboard Stats Pipeline")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR,
                        help="Directory holding the score sheets")
    parser.add_argument("--scores", type=Path, nargs="+",
                        help="Score sheet CSVs, in load order (default: monthly sheets in --data-dir)")
    parser.add_argument("--accolades", type=Path,
                        help="Tournament accolades CSV (default: --data-dir/tourney_accolades.csv)")
    parser.add_argument("--out", type=Path, default=OUTPUT_DIR,
                        help="Directory for the JSON output")
    parser.add_argument("--month", type=_parse_month,
                        help="Reference month YYYY-MM for the monthly boards (default: this month)")
    parser.add_argument("--min-games", type=int,
                        help="Override the leaderboard minimum-games thresholds")
    args = parser.parse_args(argv)

    score_paths = args.scores or [args.data_dir / name for name in SCORE_FILES]
    accolades_path = args.accolades or args.data_dir / ACCOLADES_CSV

    print("Scoreboard Stats Pipeline")
    print("=" * 50)

    print("\n[1/4] Reading score sheets...")
    sources = [read_source(path) for path in score_paths]

    print("\n[2/4] Parsing and aggregating...")
    engine = StatsEngine(now=args.month)
    skip_log = []
    report = engine.load(*sources, skip_log=skip_log)
    print(f"  Accepted {report['accepted']} games, dropped {report['dropped']}, "
          f"skipped {report['duplicates']} duplicates")
    if skip_log:
        skip_counts = defaultdict(int)
        for reason in skip_log:
            skip_counts[reason] += 1
        for reason, count in sorted(skip_counts.items(), key=lambda x: -x[1]):
            print(f"    {reason}: {count}")

    print("\n[3/4] Loading accolades...")
    n = engine.load_accolades(read_optional(accolades_path))
    print(f"  Loaded accolades for {n} players")

    print("\n[4/4] Writing data files...")
    build_and_write_all(engine, args.out, args.min_games)

    print(f"\nDone! {len(engine.games)} games processed → {args.out}")


if __name__ == "__main__":
    main()
