#!/usr/bin/env python3
"""
MenuMines - terminal front end.

Usage:
    python main.py play [--seed N] [--random] [--continuous]
    python main.py seed [--date YYYY-MM-DD]
    python main.py stats
    python main.py share
"""
import argparse
import logging
from datetime import date
from pathlib import Path

from src.menumines import (
    Board,
    BoardConfig,
    Direction,
    PuzzleType,
    Session,
    SnapshotStore,
    StatsStore,
    random_seed,
    restore_session,
    save_session,
    seed_from_date,
    today_seed,
)
from src.menumines.environment import render_ansi
from src.menumines.share import format_elapsed


DEFAULT_STATE_DIR = Path.home() / ".menumines"

MOVES = {
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}

HELP_TEXT = """Commands:
  r ROW COL   reveal a cell        f ROW COL   toggle a flag
  c ROW COL   chord reveal         w/a/s/d     move the cursor
  x           reveal at cursor     m           flag at cursor
  n           new game             q           quit"""


def open_stores(state_dir: Path):
    """Open the snapshot and stats stores under a state directory."""
    return (
        SnapshotStore(state_dir / "snapshot.json"),
        StatsStore(state_dir / "stats.json"),
    )


def build_session(args: argparse.Namespace, snapshots, stats) -> Session:
    """Create the session requested on the command line."""
    config = BoardConfig(args.rows, args.cols, args.mines)

    if args.seed is not None:
        return Session(
            Board(seed=args.seed, config=config),
            puzzle_type=PuzzleType.RANDOM,
            on_complete=stats.record,
        )
    if args.random:
        return Session(
            Board(seed=random_seed(), config=config),
            puzzle_type=PuzzleType.RANDOM,
            on_complete=stats.record,
        )
    return restore_session(
        snapshots,
        stats,
        continuous_play=args.continuous,
        config=config,
        on_complete=stats.record,
    )


def start_new_game(session: Session, args: argparse.Namespace) -> None:
    """Reset, honouring the one-daily-puzzle-per-day rule."""
    if session.puzzle_type == PuzzleType.RANDOM:
        session.reset(seed=random_seed())
    elif not session.is_over:
        session.reset()
    elif args.continuous:
        session.reset(seed=random_seed(), puzzle_type=PuzzleType.RANDOM)
    else:
        print("Today's puzzle is done. Use --continuous to keep playing.")


def handle_command(session: Session, tokens, args: argparse.Namespace) -> bool:
    """Apply one command line; returns False to quit."""
    command = tokens[0]
    coords = [int(token) for token in tokens[1:3]] if len(tokens) >= 3 else None

    if command == "q":
        return False
    if command in MOVES:
        session.move_selection(MOVES[command])
    elif command == "x":
        session.reveal_selected()
    elif command == "m":
        session.toggle_flag_selected()
    elif command == "n":
        start_new_game(session, args)
    elif command in ("r", "f", "c") and coords:
        row, col = coords
        if command == "r":
            session.reveal(row, col)
        elif command == "f":
            session.toggle_flag(row, col)
        else:
            session.chord_reveal(row, col)
    else:
        print(HELP_TEXT)
    return True


def play(args: argparse.Namespace) -> None:
    """Play interactively in the terminal."""
    snapshots, stats = open_stores(args.state_dir)
    session = build_session(args, snapshots, stats)
    session.resume_timer()

    print(f"Puzzle {session.seed} ({session.puzzle_type.value})")
    print(HELP_TEXT)

    running = True
    while running:
        print()
        print(render_ansi(session, show_selection=True))
        print(
            f"Status: {session.status.name} | "
            f"Flags: {session.flag_count}/{session.board.config.mine_count} | "
            f"Time: {format_elapsed(session.elapsed_time)}"
        )
        if session.is_over:
            print(session.share_text())

        try:
            line = input("> ").strip().lower()
        except EOFError:
            break
        if not line:
            continue
        try:
            running = handle_command(session, line.split(), args)
        except ValueError:
            print(HELP_TEXT)

    session.pause_timer()
    save_session(session, snapshots)


def seed(args: argparse.Namespace) -> None:
    """Print the daily seed for a UTC date."""
    if args.date:
        print(seed_from_date(date.fromisoformat(args.date)))
    else:
        print(today_seed())


def show_stats(args: argparse.Namespace) -> None:
    """Print recorded statistics."""
    _, stats = open_stores(args.state_dir)
    if not stats.results:
        print("No games played yet.")
        return

    def fmt_time(value):
        return format_elapsed(value) if value is not None else "-"

    def fmt_rate(value):
        return f"{value}%" if value is not None else "-"

    print(f"{'Games played':<16} {stats.games_played:>8}")
    print(f"{'Wins':<16} {stats.wins:>8}")
    print(f"{'Win rate':<16} {fmt_rate(stats.win_rate):>8}")
    print(f"{'Best time':<16} {fmt_time(stats.best_time):>8}")
    print(f"{'Average time':<16} {fmt_time(stats.average_time):>8}")
    print(f"{'Daily win rate':<16} {fmt_rate(stats.daily_win_rate):>8}")
    print(f"{'Current streak':<16} {stats.current_streak:>8}")
    print(f"{'Longest streak':<16} {stats.longest_streak:>8}")


def share(args: argparse.Namespace) -> None:
    """Print share text for today's completed puzzle."""
    snapshots, stats = open_stores(args.state_dir)
    session = restore_session(snapshots, stats)
    text = session.share_text()
    if text is None:
        print("Finish today's puzzle first.")
        return
    print(text)


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="MenuMines - a daily Minesweeper puzzle"
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=DEFAULT_STATE_DIR,
        help="Directory for the saved game and statistics",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Play a specific board seed"
    )
    play_parser.add_argument(
        "--random", action="store_true", help="Play a random puzzle"
    )
    play_parser.add_argument(
        "--continuous",
        action="store_true",
        help="Keep playing random puzzles after the daily one",
    )
    play_parser.add_argument("--rows", type=int, default=9, help="Board rows")
    play_parser.add_argument("--cols", type=int, default=9, help="Board columns")
    play_parser.add_argument("--mines", type=int, default=15, help="Mine count")

    # Seed command
    seed_parser = subparsers.add_parser("seed", help="Print a daily seed")
    seed_parser.add_argument(
        "--date", default=None, help="UTC date as YYYY-MM-DD (default: today)"
    )

    subparsers.add_parser("stats", help="Show statistics")
    subparsers.add_parser("share", help="Show share text for today's puzzle")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "play":
        play(args)
    elif args.command == "seed":
        seed(args)
    elif args.command == "stats":
        show_stats(args)
    elif args.command == "share":
        share(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
