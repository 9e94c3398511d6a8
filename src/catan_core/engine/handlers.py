from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from .calculators import largest_army_winner, longest_road_winner
from .constants import COSTS, TERRAIN_RESOURCES
from .errors import RuleViolation, ValidationRejected
from .game_state import GameState, Player, clone_state
from .rng import GameRNG
from .robber import relocate_robber
from .turns import advance_initial_placement, refresh_victory_points
from .types import (
    ActionType,
    Building,
    BuildingType,
    DevCardType,
    GamePhase,
    ResourceBank,
    ResourceType,
    TurnPhase,
)
from .validators import (
    can_build_city,
    can_build_road,
    can_build_settlement,
    can_buy_dev_card,
    can_place_initial_road,
    can_play_dev_card,
    check_turn,
)

logger = logging.getLogger(__name__)

_MAIN_ACTIONS = ([GamePhase.MAIN_GAME], [TurnPhase.ACTIONS])
_BUILD_PHASES = ([GamePhase.INITIAL_PLACEMENT, GamePhase.MAIN_GAME], [TurnPhase.ACTIONS])


def _reject_if(violation: RuleViolation | None) -> None:
    if violation:
        raise ValidationRejected.from_violation(violation)


def _apply_cost(resources: ResourceBank, cost: Mapping[ResourceType, int]) -> None:
    for resource, amount in cost.items():
        resources[resource] -= amount


def update_longest_road(state: GameState) -> None:
    holder = longest_road_winner(state)
    if holder == state.longest_road_holder:
        return
    logger.info("Longest road badge: %s -> %s", state.longest_road_holder, holder)
    state.longest_road_holder = holder
    for player in state.players:
        player.has_longest_road = player.player_id == holder


def update_largest_army(state: GameState) -> None:
    holder = largest_army_winner(state)
    if holder == state.largest_army_holder:
        return
    logger.info("Largest army badge: %s -> %s", state.largest_army_holder, holder)
    state.largest_army_holder = holder
    for player in state.players:
        player.has_largest_army = player.player_id == holder


def _place_road(state: GameState, player: Player, edge_id: int) -> None:
    state.roads[edge_id] = player.player_id
    player.roads -= 1


def build_road(state: GameState, player_id: str, edge_id: int) -> GameState:
    _reject_if(check_turn(state, player_id, *_BUILD_PHASES))
    player = state.player(player_id)

    if state.phase == GamePhase.INITIAL_PLACEMENT:
        _reject_if(can_place_initial_road(state, player, edge_id))
        next_state = clone_state(state)
        _place_road(next_state, next_state.player(player_id), edge_id)
        next_state.pending_setup_vertex = None
        logger.debug("Player %s placed initial road on edge %d", player_id, edge_id)
        advance_initial_placement(next_state)
        refresh_victory_points(next_state)
        return next_state

    _reject_if(can_build_road(state, player, edge_id))
    next_state = clone_state(state)
    player = next_state.player(player_id)
    _apply_cost(player.resources, COSTS[ActionType.BUILD_ROAD])
    _place_road(next_state, player, edge_id)
    logger.debug("Player %s built a road on edge %d", player_id, edge_id)
    update_longest_road(next_state)
    refresh_victory_points(next_state)
    return next_state


def _collect_initial_resources(state: GameState, player: Player, vertex_id: int) -> None:
    for hex_id in state.board.hexes_for_vertex(vertex_id):
        resource = TERRAIN_RESOURCES[state.board.hexes[hex_id].terrain]
        if resource is not None:
            player.resources[resource] += 1


def build_settlement(state: GameState, player_id: str, vertex_id: int) -> GameState:
    _reject_if(check_turn(state, player_id, *_BUILD_PHASES))
    player = state.player(player_id)
    initial = state.phase == GamePhase.INITIAL_PLACEMENT
    _reject_if(can_build_settlement(state, player, vertex_id, initial=initial))

    next_state = clone_state(state)
    player = next_state.player(player_id)
    if initial:
        next_state.pending_setup_vertex = vertex_id
        if next_state.setup_round == 2:
            _collect_initial_resources(next_state, player, vertex_id)
    else:
        _apply_cost(player.resources, COSTS[ActionType.BUILD_SETTLEMENT])
    next_state.buildings[vertex_id] = Building(BuildingType.SETTLEMENT, player_id)
    player.settlements -= 1
    logger.debug("Player %s built a settlement on vertex %d", player_id, vertex_id)

    # A new settlement can split an opponent's road.
    update_longest_road(next_state)
    refresh_victory_points(next_state)
    return next_state


def build_city(state: GameState, player_id: str, vertex_id: int) -> GameState:
    _reject_if(check_turn(state, player_id, *_MAIN_ACTIONS))
    player = state.player(player_id)
    _reject_if(can_build_city(state, player, vertex_id))

    next_state = clone_state(state)
    player = next_state.player(player_id)
    _apply_cost(player.resources, COSTS[ActionType.BUILD_CITY])
    next_state.buildings[vertex_id] = Building(BuildingType.CITY, player_id)
    player.settlements += 1
    player.cities -= 1
    logger.debug("Player %s upgraded vertex %d to a city", player_id, vertex_id)
    refresh_victory_points(next_state)
    return next_state


def buy_dev_card(state: GameState, player_id: str) -> GameState:
    _reject_if(check_turn(state, player_id, *_MAIN_ACTIONS))
    player = state.player(player_id)
    _reject_if(can_buy_dev_card(state, player))

    next_state = clone_state(state)
    player = next_state.player(player_id)
    _apply_cost(player.resources, COSTS[ActionType.BUY_DEV_CARD])
    card = next_state.dev_deck.pop()
    player.new_dev_cards.append(card)
    logger.debug(
        "Player %s bought a development card (%d left)", player_id, len(next_state.dev_deck)
    )
    refresh_victory_points(next_state)
    return next_state


def _start_card_play(
    state: GameState, player_id: str, card: DevCardType, turn_phases: List[TurnPhase]
) -> GameState:
    """Validate a card play and return a clone with the card moved to the played pile."""
    _reject_if(check_turn(state, player_id, [GamePhase.MAIN_GAME], turn_phases))
    _reject_if(can_play_dev_card(state, state.player(player_id), card))

    next_state = clone_state(state)
    player = next_state.player(player_id)
    if card in player.dev_cards:
        player.dev_cards.remove(card)
    else:
        player.new_dev_cards.remove(card)
    player.played_dev_cards.append(card)
    next_state.played_dev_card_this_turn = True
    logger.debug("Player %s played %s", player_id, card.value)
    return next_state


def play_knight(
    state: GameState,
    player_id: str,
    hex_id: int,
    victim_id: str | None = None,
    rng: GameRNG | None = None,
) -> GameState:
    next_state = _start_card_play(
        state, player_id, DevCardType.KNIGHT, [TurnPhase.DICE_ROLL, TurnPhase.ACTIONS]
    )
    relocate_robber(next_state, player_id, hex_id, victim_id, rng)
    next_state.player(player_id).knights_played += 1
    update_largest_army(next_state)
    refresh_victory_points(next_state)
    return next_state


def play_year_of_plenty(
    state: GameState, player_id: str, resources: Sequence[ResourceType]
) -> GameState:
    if len(resources) != 2 or not all(isinstance(r, ResourceType) for r in resources):
        raise ValidationRejected("Year of plenty takes exactly two resources")
    next_state = _start_card_play(
        state, player_id, DevCardType.YEAR_OF_PLENTY, [TurnPhase.ACTIONS]
    )
    player = next_state.player(player_id)
    for resource in resources:
        player.resources[resource] += 1
    return next_state


def play_monopoly(state: GameState, player_id: str, resource: ResourceType) -> GameState:
    if not isinstance(resource, ResourceType):
        raise ValidationRejected("Monopoly needs a resource type")
    next_state = _start_card_play(state, player_id, DevCardType.MONOPOLY, [TurnPhase.ACTIONS])
    player = next_state.player(player_id)
    collected = 0
    for opponent in next_state.opponents(player_id):
        collected += opponent.resources[resource]
        opponent.resources[resource] = 0
    player.resources[resource] += collected
    logger.debug("Player %s collected %d %s by monopoly", player_id, collected, resource.value)
    return next_state


def play_road_building(state: GameState, player_id: str, edge_ids: Sequence[int]) -> GameState:
    edge_ids = list(edge_ids)
    if not 1 <= len(edge_ids) <= 2:
        raise ValidationRejected("Road building places one or two roads")
    if len(set(edge_ids)) != len(edge_ids):
        raise ValidationRejected("Road building edges must be different")
    next_state = _start_card_play(
        state, player_id, DevCardType.ROAD_BUILDING, [TurnPhase.ACTIONS]
    )
    player = next_state.player(player_id)
    if player.roads <= 0:
        raise ValidationRejected("No roads left in stock")

    # Each road is checked against the board as it stands after the previous one.
    for edge_id in edge_ids[: player.roads]:
        _reject_if(can_build_road(next_state, player, edge_id, free=True))
        _place_road(next_state, player, edge_id)
    update_longest_road(next_state)
    refresh_victory_points(next_state)
    return next_state
