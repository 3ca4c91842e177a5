# Area: Shared
"""
quiz_battle.cli — Command-line interface
========================================

Provides the CLI entry point for the battle engine.

Usage:
    python -m quiz_battle demo --players 4 --mode adaptive --seed 7
    python -m quiz_battle lobby --players 6 --ticks 200
    python -m quiz_battle init-db --db battles.db
    python -m quiz_battle --config config.json demo

Configuration is read from the JSON file given with --config, then
from .env / QUIZ_BATTLE_* environment variables.
"""

import argparse
import json
import random
import sys
from typing import List, Optional

from ._lobby import LobbySimulator
from ._shared import disable_quiet_mode, enable_quiet_mode, log_battle_error, setup_logging
from ._storage import init_database
from .config import load_config
from .demo import run_demo_battle
from .error_formatter import format_battle_error
from .errors import BattleError, ConfigError, QuizBattleError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="quiz_battle",
        description="Quiz battle engine - run a demo battle or inspect the lobby simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m quiz_battle demo
  python -m quiz_battle demo --players 4 --mode casual --seed 3
  python -m quiz_battle lobby --players 5 --ticks 100
  QUIZ_BATTLE_DB_PATH=battles.db python -m quiz_battle init-db
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--verbose", action="store_true", help="Show INFO logs in the terminal")

    sub = parser.add_subparsers(dest="command", required=True)

    demo = sub.add_parser("demo", help="Run a full in-memory battle and print the leaderboard")
    demo.add_argument("--players", type=int, default=3, help="Participants including the host")
    demo.add_argument("--mode", choices=["normal", "casual", "adaptive"], default="normal")
    demo.add_argument("--seed", type=int, default=None)
    demo.add_argument("--json", action="store_true", help="Print the results view as JSON")

    lobby = sub.add_parser("lobby", help="Run the lobby avatar simulation")
    lobby.add_argument("--players", type=int, default=4)
    lobby.add_argument("--ticks", type=int, default=100)
    lobby.add_argument("--seed", type=int, default=None)

    init_db = sub.add_parser("init-db", help="Create the SQLite schema for the durable store")
    init_db.add_argument("--db", type=str, help="Database path (default: config db_path)")

    return parser.parse_args(argv)


def print_results(view: dict) -> None:
    title = view.get("quiz_title") or "Battle"
    print(f"\n{title}: battle {view['join_code']}")
    if view["is_tie"]:
        print("It's a tie!")
    print(f"{'#':>3}  {'Player':<12} {'Score':>5}  Reward")
    for row in view["rows"]:
        reward = f"+{row['points_earned']} pts / +{row['exp_earned']} exp" if row["is_winner"] else ""
        flag = " (forfeited)" if row["forfeited"] else ""
        print(f"{row['rank']:>3}  {row['display_name']:<12} {row['score']:>5}  {reward}{flag}")
    if view["source"] != "store":
        print("(results not yet confirmed by the server)")


def run_lobby(players: int, ticks: int, seed: Optional[int]) -> None:
    simulator = LobbySimulator(rng=random.Random(seed))
    simulator.sync_presence(f"player{n}" for n in range(1, players + 1))
    for _ in range(ticks):
        simulator.step()
    for participant_id, (x, y) in simulator.positions().items():
        print(f"{participant_id:<10} x={x:6.2f} y={y:6.2f}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_file)
    if args.verbose:
        disable_quiet_mode()
    else:
        enable_quiet_mode()

    try:
        if args.command == "demo":
            view = run_demo_battle(args.players, args.mode, args.seed, config)
            if args.json:
                print(json.dumps(view, indent=2))
            else:
                print_results(view)
        elif args.command == "lobby":
            run_lobby(args.players, args.ticks, args.seed)
        elif args.command == "init-db":
            db_path = args.db or config.db_path
            init_database(db_path)
            print(f"Database ready at {db_path}")
    except BattleError as e:
        log_battle_error(e)
        print(f"Error: {format_battle_error(e)}", file=sys.stderr)
        return 1
    except QuizBattleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
