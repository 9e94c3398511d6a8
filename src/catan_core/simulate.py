"""Random self-play games, for smoke-testing the rules engine.

Usage::

    catan-core-simulate --games 50 --players 4 --seed 7
"""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from typing import Callable, List, Optional

from tqdm import tqdm

from catan_core.agents.random_agent import RandomAgent
from catan_core.engine.board import generate_board
from catan_core.engine.constants import PLAYER_COLORS
from catan_core.engine.game_state import GameState, create_player, initial_game_state
from catan_core.engine.rng import GameRNG
from catan_core.engine.rules import acting_player, apply_action, legal_actions
from catan_core.engine.types import PlayerKind

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 3000


def run_random_game(
    num_players: int = 4,
    seed: int | None = None,
    max_steps: int = DEFAULT_MAX_STEPS,
    on_step: Optional[Callable[[GameState], None]] = None,
) -> GameState:
    """Play one game between random agents and return the final state.

    The game stops at a winner or after ``max_steps`` actions. ``on_step``
    is called with every intermediate state.
    """
    rng = GameRNG(seed)
    players = [
        create_player(
            f"p{i}", f"Bot {i + 1}", PLAYER_COLORS[i % len(PLAYER_COLORS)], PlayerKind.AI
        )
        for i in range(num_players)
    ]
    state = initial_game_state(players, generate_board(rng), rng)
    agents = {
        p.player_id: RandomAgent(p.player_id, seed=None if seed is None else seed + i)
        for i, p in enumerate(players)
    }

    for _ in range(max_steps):
        if state.winner is not None:
            break
        actor = acting_player(state)
        actions = legal_actions(state, actor)
        if not actions:
            raise RuntimeError(f"No legal actions for {actor} in {state.phase.value}")
        action = agents[actor].select_action(state, actions)
        state = apply_action(state, action, rng)
        if on_step is not None:
            on_step(state)

    logger.debug(
        "Game finished after %d turns, winner %s", state.turn_number, state.winner or "none"
    )
    return state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run random self-play Catan games")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument(
        "--players", type=int, default=4, choices=[2, 3, 4], help="Players per game"
    )
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")
    parser.add_argument(
        "--max-steps", type=int, default=DEFAULT_MAX_STEPS, help="Action cap per game"
    )
    parser.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    winners: Counter = Counter()
    turns: List[int] = []
    for game in tqdm(range(args.games), desc="games", unit="game"):
        seed = None if args.seed is None else args.seed + game
        state = run_random_game(args.players, seed, args.max_steps)
        winners[state.winner or "none"] += 1
        turns.append(state.turn_number)

    logger.info("Winners: %s", dict(winners))
    print(f"Played {args.games} games, average {sum(turns) / max(len(turns), 1):.1f} turns")
    for player_id, count in sorted(winners.items()):
        print(f"  {player_id}: {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
