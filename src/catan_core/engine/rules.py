"""Action-record surface over the engine's command functions.

``apply_action`` dispatches an :class:`Action` to the matching command and
``legal_actions`` enumerates the actions a player may take right now. Agents
and simulations drive games through these two functions.
"""

from __future__ import annotations

from itertools import combinations_with_replacement
from typing import Callable, Dict, List, Mapping

from . import handlers, robber, trading, turns
from .calculators import bank_trade_ratio
from .errors import ValidationRejected
from .game_state import GameState
from .rng import GameRNG
from .types import RESOURCES, Action, ActionType, DevCardType, GamePhase, ResourceType, TurnPhase
from .validators import (
    available_road_sites,
    available_settlement_sites,
    can_accept_trade,
    can_build_city,
    can_buy_dev_card,
    can_play_dev_card,
)


def _resource(value: object) -> ResourceType:
    try:
        return ResourceType(value)
    except ValueError:
        raise ValidationRejected(f"Unknown resource: {value!r}") from None


def _bundle(payload: Mapping[str, object], key: str) -> Dict[ResourceType, int]:
    raw = payload.get(key, {})
    if not isinstance(raw, Mapping):
        raise ValidationRejected(f"Payload field {key!r} must be a mapping")
    return {_resource(res): int(amount) for res, amount in raw.items()}


def _required(payload: Mapping[str, object], key: str) -> object:
    if key not in payload:
        raise ValidationRejected(f"Payload is missing {key!r}")
    return payload[key]


def _optional_id(payload: Mapping[str, object], key: str) -> str | None:
    value = payload.get(key)
    return None if value is None else str(value)


_Dispatch = Callable[[GameState, str, Mapping[str, object], GameRNG | None], GameState]

_DISPATCH: Dict[ActionType, _Dispatch] = {
    ActionType.ROLL_DICE: lambda s, p, a, rng: turns.roll_dice(
        s, p, rng, tuple(a["dice"]) if a.get("dice") is not None else None
    ),
    ActionType.BUILD_ROAD: lambda s, p, a, rng: handlers.build_road(
        s, p, int(_required(a, "edge_id"))
    ),
    ActionType.BUILD_SETTLEMENT: lambda s, p, a, rng: handlers.build_settlement(
        s, p, int(_required(a, "vertex_id"))
    ),
    ActionType.BUILD_CITY: lambda s, p, a, rng: handlers.build_city(
        s, p, int(_required(a, "vertex_id"))
    ),
    ActionType.BUY_DEV_CARD: lambda s, p, a, rng: handlers.buy_dev_card(s, p),
    ActionType.PLAY_KNIGHT: lambda s, p, a, rng: handlers.play_knight(
        s, p, int(_required(a, "hex_id")), _optional_id(a, "victim_id"), rng
    ),
    ActionType.PLAY_YEAR_OF_PLENTY: lambda s, p, a, rng: handlers.play_year_of_plenty(
        s, p, [_resource(r) for r in _required(a, "resources")]
    ),
    ActionType.PLAY_MONOPOLY: lambda s, p, a, rng: handlers.play_monopoly(
        s, p, _resource(_required(a, "resource"))
    ),
    ActionType.PLAY_ROAD_BUILDING: lambda s, p, a, rng: handlers.play_road_building(
        s, p, [int(e) for e in _required(a, "edge_ids")]
    ),
    ActionType.MOVE_ROBBER: lambda s, p, a, rng: robber.move_robber(
        s, p, int(_required(a, "hex_id")), _optional_id(a, "victim_id"), rng
    ),
    ActionType.DISCARD: lambda s, p, a, rng: robber.discard_resources(
        s, p, _bundle(a, "resources")
    ),
    ActionType.END_TURN: lambda s, p, a, rng: turns.end_turn(s, p),
    ActionType.TRADE_BANK: lambda s, p, a, rng: trading.bank_trade(
        s, p, _bundle(a, "give"), _bundle(a, "receive")
    ),
    ActionType.PROPOSE_TRADE: lambda s, p, a, rng: trading.propose_trade(
        s, p, _bundle(a, "offering"), _bundle(a, "requesting")
    ),
    ActionType.ACCEPT_TRADE: lambda s, p, a, rng: trading.accept_trade(s, p),
    ActionType.DECLINE_TRADE: lambda s, p, a, rng: trading.decline_trade(s, p),
}


def apply_action(state: GameState, action: Action, rng: GameRNG | None = None) -> GameState:
    player_id = action.player_id or state.current_player_id
    return _DISPATCH[action.action_type](state, player_id, action.payload, rng)


def acting_player(state: GameState) -> str:
    """The player whose input the game is waiting for."""
    for player in state.players:
        if player.player_id in state.pending_discards:
            return player.player_id
    return state.current_player_id


def _robber_moves(
    state: GameState, player_id: str, action_type: ActionType
) -> List[Action]:
    actions: List[Action] = []
    for hex_id in state.board.hexes:
        if hex_id == state.robber_hex:
            continue
        victims = robber.eligible_robber_victims(state, hex_id, player_id) or [None]
        for victim_id in victims:
            actions.append(
                Action(action_type, {"hex_id": hex_id, "victim_id": victim_id}, player_id)
            )
    return actions


def _dev_card_actions(state: GameState, player_id: str) -> List[Action]:
    player = state.player(player_id)
    actions: List[Action] = []
    if state.turn_phase == TurnPhase.ACTIONS:
        if can_play_dev_card(state, player, DevCardType.YEAR_OF_PLENTY) is None:
            for pair in combinations_with_replacement(RESOURCES, 2):
                actions.append(
                    Action(
                        ActionType.PLAY_YEAR_OF_PLENTY,
                        {"resources": [r.value for r in pair]},
                        player_id,
                    )
                )
        if can_play_dev_card(state, player, DevCardType.MONOPOLY) is None:
            for resource in RESOURCES:
                actions.append(
                    Action(ActionType.PLAY_MONOPOLY, {"resource": resource.value}, player_id)
                )
        if can_play_dev_card(state, player, DevCardType.ROAD_BUILDING) is None and player.roads:
            for edge_id in available_road_sites(player_id, state, free=True):
                actions.append(
                    Action(ActionType.PLAY_ROAD_BUILDING, {"edge_ids": [edge_id]}, player_id)
                )
    if can_play_dev_card(state, player, DevCardType.KNIGHT) is None:
        actions.extend(_robber_moves(state, player_id, ActionType.PLAY_KNIGHT))
    return actions


def _bank_trades(state: GameState, player_id: str) -> List[Action]:
    player = state.player(player_id)
    actions: List[Action] = []
    for give in RESOURCES:
        ratio = bank_trade_ratio(player_id, give, state)
        if player.resources[give] < ratio:
            continue
        for receive in RESOURCES:
            if receive == give:
                continue
            actions.append(
                Action(
                    ActionType.TRADE_BANK,
                    {"give": {give.value: ratio}, "receive": {receive.value: 1}},
                    player_id,
                )
            )
    return actions


def legal_actions(state: GameState, player_id: str | None = None) -> List[Action]:
    if state.phase == GamePhase.GAME_OVER:
        return []
    if player_id is None:
        player_id = acting_player(state)
    player = state.player(player_id)

    if player_id in state.pending_discards:
        # Which cards to give up is left to the caller.
        return [
            Action(
                ActionType.DISCARD, {"amount": state.pending_discards[player_id]}, player_id
            )
        ]

    if state.phase == GamePhase.INITIAL_PLACEMENT:
        if player_id != state.current_player_id:
            return []
        if state.pending_setup_vertex is None:
            return [
                Action(ActionType.BUILD_SETTLEMENT, {"vertex_id": vertex_id}, player_id)
                for vertex_id in available_settlement_sites(player_id, state, initial=True)
            ]
        return [
            Action(ActionType.BUILD_ROAD, {"edge_id": edge_id}, player_id)
            for edge_id in available_road_sites(player_id, state)
        ]

    offer = state.trade_offer
    if player_id != state.current_player_id:
        if offer is None or state.turn_phase != TurnPhase.ACTIONS:
            return []
        actions = [Action(ActionType.DECLINE_TRADE, {}, player_id)]
        if can_accept_trade(state, player) is None:
            actions.append(Action(ActionType.ACCEPT_TRADE, {}, player_id))
        return actions

    if state.turn_phase == TurnPhase.DICE_ROLL:
        return [Action(ActionType.ROLL_DICE, {}, player_id)] + _dev_card_actions(
            state, player_id
        )

    if state.turn_phase == TurnPhase.ROBBER_ACTIVATION:
        if state.pending_discards:
            return []
        return _robber_moves(state, player_id, ActionType.MOVE_ROBBER)

    actions: List[Action] = [Action(ActionType.END_TURN, {}, player_id)]
    if offer is not None:
        actions.append(Action(ActionType.DECLINE_TRADE, {}, player_id))
    for edge_id in available_road_sites(player_id, state):
        actions.append(Action(ActionType.BUILD_ROAD, {"edge_id": edge_id}, player_id))
    for vertex_id in available_settlement_sites(player_id, state):
        actions.append(Action(ActionType.BUILD_SETTLEMENT, {"vertex_id": vertex_id}, player_id))
    for vertex_id in state.buildings_of(player_id):
        if can_build_city(state, player, vertex_id) is None:
            actions.append(Action(ActionType.BUILD_CITY, {"vertex_id": vertex_id}, player_id))
    if can_buy_dev_card(state, player) is None:
        actions.append(Action(ActionType.BUY_DEV_CARD, {}, player_id))
    actions.extend(_dev_card_actions(state, player_id))
    actions.extend(_bank_trades(state, player_id))
    return actions
