from __future__ import annotations

import logging
from typing import Optional, Tuple

from .calculators import resource_production, victory_points
from .errors import ValidationRejected
from .game_state import GameState, clone_state
from .rng import GameRNG
from .robber import pending_discards_for
from .types import GamePhase, TurnPhase
from .validators import check_turn

logger = logging.getLogger(__name__)


def refresh_victory_points(state: GameState) -> None:
    for player in state.players:
        player.victory_points = victory_points(player, state)


def check_victory(state: GameState) -> Optional[str]:
    """First player at or above the target, starting with the current player."""
    count = len(state.players)
    for offset in range(count):
        player = state.players[(state.current_player_index + offset) % count]
        if player.victory_points >= state.config.victory_points_to_win:
            return player.player_id
    return None


def advance_initial_placement(state: GameState) -> None:
    """Pass the placement turn on in snake order: 0..N-1, then N-1..0."""
    count = len(state.players)
    placed = len(state.buildings)
    if placed >= 2 * count:
        state.phase = GamePhase.MAIN_GAME
        state.turn_phase = TurnPhase.DICE_ROLL
        state.current_player_index = 0
        logger.info("Initial placement complete, main game begins")
    elif state.setup_round == 1:
        if placed == count:
            # The last player places twice in a row.
            state.setup_round = 2
            logger.info("Initial placement round 2")
        else:
            state.current_player_index += 1
    else:
        state.current_player_index -= 1


def roll_dice(
    state: GameState,
    player_id: str,
    rng: GameRNG | None = None,
    dice: Tuple[int, int] | None = None,
) -> GameState:
    violation = check_turn(state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.DICE_ROLL])
    if violation:
        raise ValidationRejected.from_violation(violation)
    if dice is None:
        dice = (rng or GameRNG()).roll_dice()
    elif len(dice) != 2 or not all(1 <= die <= 6 for die in dice):
        raise ValidationRejected(f"Invalid dice: {dice!r}")

    next_state = clone_state(state)
    next_state.last_roll = (int(dice[0]), int(dice[1]))
    total = sum(next_state.last_roll)
    logger.debug("Player %s rolled %d", player_id, total)

    if total == state.config.robber_roll:
        next_state.turn_phase = TurnPhase.ROBBER_ACTIVATION
        next_state.pending_discards = pending_discards_for(next_state)
        logger.info(
            "Robber activated by %s, %d player(s) must discard",
            player_id,
            len(next_state.pending_discards),
        )
        return next_state

    for pid, award in resource_production(next_state, total).items():
        player = next_state.player(pid)
        for resource, amount in award.items():
            player.resources[resource] += amount
    next_state.turn_phase = TurnPhase.ACTIONS
    return next_state


def end_turn(state: GameState, player_id: str) -> GameState:
    violation = check_turn(state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ACTIONS])
    if violation:
        raise ValidationRejected.from_violation(violation)

    next_state = clone_state(state)
    refresh_victory_points(next_state)
    winner = check_victory(next_state)
    if winner is not None:
        next_state.phase = GamePhase.GAME_OVER
        next_state.winner = winner
        next_state.trade_offer = None
        logger.info("Player %s wins on turn %d", winner, next_state.turn_number)
        return next_state

    player = next_state.current_player
    player.dev_cards.extend(player.new_dev_cards)
    player.new_dev_cards = []

    next_state.current_player_index = (next_state.current_player_index + 1) % len(
        next_state.players
    )
    next_state.turn_phase = TurnPhase.DICE_ROLL
    next_state.turn_number += 1
    next_state.played_dev_card_this_turn = False
    next_state.trade_offer = None
    next_state.last_roll = None
    return next_state
