#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty {easy,medium,hard}] [--load FILE]
    python main.py play --rows R --columns C --mines M
    python main.py summary FILE
"""
import argparse
import logging

from src.sweeper import (
    Command,
    ConfigurationError,
    DeserializationError,
    Difficulty,
    GameController,
    GameStatus,
    Move,
    load_game,
)
from src.sweeper.environment import render_ansi

COMMANDS = {
    "r": Command.REVEAL,
    "f": Command.FLAG,
    "c": Command.CHORD,
}

HELP = "Commands: r ROW COL | f ROW COL | c ROW COL | new | save FILE | quit"


def print_board(controller: GameController) -> None:
    """Print the board and counters."""
    print(render_ansi(controller))
    print(
        f"Mines left: {controller.remaining_mines} | "
        f"Time: {controller.game_time}s | "
        f"Status: {controller.status.value}"
    )


def play(args: argparse.Namespace) -> None:
    """Play a game in the terminal."""
    controller = GameController(Difficulty.from_name(args.difficulty), seed=args.seed)

    if args.load:
        if not controller.load_or_default(args.load):
            print(f"Could not load {args.load}, starting a new Easy game")
    elif args.rows or args.columns or args.mines:
        controller.new_game(
            rows=args.rows or 10, columns=args.columns or 10, mines=args.mines or 10
        )

    print(HELP)
    print_board(controller)

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue

        parts = line.split()
        word = parts[0].lower()

        if word in ("q", "quit", "exit"):
            break
        if word == "new":
            controller.dispatch(Move(Command.NEW_GAME))
        elif word == "save" and len(parts) == 2:
            print(f"Saved to {controller.save(parts[1])}")
            continue
        elif word in COMMANDS and len(parts) == 3:
            try:
                row, col = int(parts[1]), int(parts[2])
            except ValueError:
                print(HELP)
                continue
            controller.dispatch(Move(COMMANDS[word], row, col))
            # Each command counts as one second of play
            controller.tick()
        else:
            print(HELP)
            continue

        print_board(controller)
        if controller.status == GameStatus.WON:
            print("*** WIN! ***")
        elif controller.status == GameStatus.LOST:
            print("*** LOST (hit mine) ***")


def summary(args: argparse.Namespace) -> None:
    """Print a summary of a saved game."""
    try:
        saved = load_game(args.file)
    except DeserializationError as exc:
        logging.getLogger(__name__).error(str(exc))
        raise SystemExit(1)

    board = saved.board
    print(f"Board: {board.rows}x{board.columns} with {board.mine_count} mines")
    print(f"Status: {board.status.value}")
    print(f"Flagged: {board.flagged_count} | Remaining mines: {board.remaining_mines}")
    print(f"Revealed: {board.cells_revealed} cells | Time: {saved.game_time}s")
    print(render_ansi(board))


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minesweeper")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument(
        "--difficulty",
        choices=[difficulty.value.lower() for difficulty in Difficulty],
        default="easy",
        help="Board preset",
    )
    play_parser.add_argument("--rows", type=int, help="Custom number of rows")
    play_parser.add_argument("--columns", type=int, help="Custom number of columns")
    play_parser.add_argument("--mines", type=int, help="Custom number of mines")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    play_parser.add_argument("--load", help="Resume a saved game")

    # Summary command
    summary_parser = subparsers.add_parser("summary", help="Describe a saved game")
    summary_parser.add_argument("file", help="Saved game JSON file")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    if args.command == "play":
        try:
            play(args)
        except ConfigurationError as exc:
            parser.error(str(exc))
    elif args.command == "summary":
        summary(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
