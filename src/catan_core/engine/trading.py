from __future__ import annotations

import logging
from typing import Mapping

from .errors import ValidationRejected
from .game_state import GameState, clone_state
from .types import GamePhase, ResourceType, TradeOffer, TurnPhase
from .validators import can_accept_trade, can_bank_trade, can_propose_trade, check_turn

logger = logging.getLogger(__name__)


def _nonzero(bundle: Mapping[ResourceType, int]) -> dict:
    return {resource: amount for resource, amount in bundle.items() if amount}


def bank_trade(
    state: GameState,
    player_id: str,
    giving: Mapping[ResourceType, int],
    receiving: Mapping[ResourceType, int],
) -> GameState:
    """Trade with the bank at the player's best rate for each resource given."""
    violation = check_turn(state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ACTIONS])
    if violation is None:
        violation = can_bank_trade(state, state.player(player_id), giving, receiving)
    if violation:
        raise ValidationRejected.from_violation(violation)

    next_state = clone_state(state)
    player = next_state.player(player_id)
    for resource, amount in giving.items():
        player.resources[resource] -= amount
    for resource, amount in receiving.items():
        player.resources[resource] += amount
    logger.debug("Player %s traded with the bank", player_id)
    return next_state


def propose_trade(
    state: GameState,
    player_id: str,
    offering: Mapping[ResourceType, int],
    requesting: Mapping[ResourceType, int],
) -> GameState:
    violation = check_turn(state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ACTIONS])
    if violation is None:
        violation = can_propose_trade(state, state.player(player_id), offering, requesting)
    if violation:
        raise ValidationRejected.from_violation(violation)

    next_state = clone_state(state)
    next_state.trade_offer = TradeOffer(
        proposer_id=player_id, offering=_nonzero(offering), requesting=_nonzero(requesting)
    )
    logger.debug("Player %s proposed a trade", player_id)
    return next_state


def accept_trade(state: GameState, player_id: str) -> GameState:
    violation = check_turn(
        state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ACTIONS], current_player_only=False
    )
    if violation is None:
        violation = can_accept_trade(state, state.player(player_id))
    if violation:
        raise ValidationRejected.from_violation(violation)

    next_state = clone_state(state)
    offer = next_state.trade_offer
    proposer = next_state.player(offer.proposer_id)
    acceptor = next_state.player(player_id)
    for resource, amount in offer.offering.items():
        proposer.resources[resource] -= amount
        acceptor.resources[resource] += amount
    for resource, amount in offer.requesting.items():
        acceptor.resources[resource] -= amount
        proposer.resources[resource] += amount
    next_state.trade_offer = None
    logger.debug("Player %s accepted the trade from %s", player_id, offer.proposer_id)
    return next_state


def decline_trade(state: GameState, player_id: str) -> GameState:
    """Withdraw (proposer) or refuse (anyone else) the pending offer."""
    violation = check_turn(
        state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ACTIONS], current_player_only=False
    )
    if violation:
        raise ValidationRejected.from_violation(violation)
    if state.trade_offer is None:
        raise ValidationRejected("No trade offer is pending")

    next_state = clone_state(state)
    next_state.trade_offer = None
    logger.debug("Player %s declined the trade", player_id)
    return next_state
