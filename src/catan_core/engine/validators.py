from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .calculators import bank_trade_ratio
from .constants import COSTS
from .errors import RuleViolation
from .game_state import GameState, Player
from .types import (
    ActionType,
    BuildingType,
    DevCardType,
    GamePhase,
    ResourceBank,
    ResourceType,
    TurnPhase,
)


def has_resources(resources: ResourceBank, bundle: Mapping[ResourceType, int]) -> bool:
    return all(resources.get(res, 0) >= amount for res, amount in bundle.items())


def _bundle_is_valid(bundle: Mapping[ResourceType, int]) -> bool:
    return all(
        isinstance(res, ResourceType) and isinstance(amount, int) and amount >= 0
        for res, amount in bundle.items()
    )


def check_turn(
    state: GameState,
    player_id: str,
    phases: Iterable[GamePhase],
    turn_phases: Optional[Iterable[TurnPhase]] = None,
    current_player_only: bool = True,
) -> Optional[RuleViolation]:
    """Gate a command on game phase, turn phase and turn ownership."""
    state.player(player_id)
    if state.phase == GamePhase.GAME_OVER:
        return RuleViolation("The game is over")
    if state.phase not in phases:
        return RuleViolation(f"Not allowed during {state.phase.value}")
    if (
        turn_phases is not None
        and state.phase == GamePhase.MAIN_GAME
        and state.turn_phase not in turn_phases
    ):
        return RuleViolation(f"Not allowed during the {state.turn_phase.value} step")
    if current_player_only and state.current_player_id != player_id:
        return RuleViolation("It is not your turn")
    return None


def _owns_building(state: GameState, player_id: str, vertex_id: int) -> bool:
    building = state.buildings.get(vertex_id)
    return building is not None and building.player_id == player_id


def _has_road_at(state: GameState, player_id: str, vertex_id: int) -> bool:
    return any(state.roads.get(eid) == player_id for eid in state.board.edges_for_vertex(vertex_id))


def _road_reaches(state: GameState, player_id: str, vertex_id: int) -> bool:
    """Whether the player's network can be extended from ``vertex_id``."""
    return _owns_building(state, player_id, vertex_id) or _has_road_at(state, player_id, vertex_id)


def distance_rule_ok(state: GameState, vertex_id: int) -> bool:
    if vertex_id in state.buildings:
        return False
    return not any(n in state.buildings for n in state.board.vertices_adjacent_to(vertex_id))


def can_build_road(
    state: GameState, player: Player, edge_id: int, free: bool = False
) -> Optional[RuleViolation]:
    edge = state.board.edge(edge_id)
    if not free and not has_resources(player.resources, COSTS[ActionType.BUILD_ROAD]):
        return RuleViolation("Not enough resources to build a road")
    if player.roads <= 0:
        return RuleViolation("No roads left in stock")
    if edge_id in state.roads:
        return RuleViolation("Edge already has a road")
    if not any(_road_reaches(state, player.player_id, v) for v in edge.vertex_ids):
        return RuleViolation("Road must be adjacent to your road or building")
    return None


def can_place_initial_road(
    state: GameState, player: Player, edge_id: int
) -> Optional[RuleViolation]:
    edge = state.board.edge(edge_id)
    if state.pending_setup_vertex is None:
        return RuleViolation("Place a settlement before its road")
    if player.roads <= 0:
        return RuleViolation("No roads left in stock")
    if edge_id in state.roads:
        return RuleViolation("Edge already has a road")
    if state.pending_setup_vertex not in edge.vertex_ids:
        return RuleViolation("Initial road must touch the settlement just placed")
    return None


def can_build_settlement(
    state: GameState, player: Player, vertex_id: int, initial: bool = False
) -> Optional[RuleViolation]:
    state.board.vertex(vertex_id)
    if initial and state.pending_setup_vertex is not None:
        return RuleViolation("Place a road next to your new settlement first")
    if not initial and not has_resources(player.resources, COSTS[ActionType.BUILD_SETTLEMENT]):
        return RuleViolation("Not enough resources to build a settlement")
    if player.settlements <= 0:
        return RuleViolation("No settlements left in stock")
    if vertex_id in state.buildings:
        return RuleViolation("Vertex already has a building")
    if not distance_rule_ok(state, vertex_id):
        return RuleViolation("Settlement must be at least 2 edges away from other settlements")
    if initial and all(eid in state.roads for eid in state.board.edges_for_vertex(vertex_id)):
        return RuleViolation("No free edge left for the initial road")
    if not initial and not _has_road_at(state, player.player_id, vertex_id):
        return RuleViolation("Settlement must be adjacent to your road")
    return None


def can_build_city(state: GameState, player: Player, vertex_id: int) -> Optional[RuleViolation]:
    state.board.vertex(vertex_id)
    if not has_resources(player.resources, COSTS[ActionType.BUILD_CITY]):
        return RuleViolation("Not enough resources to build a city")
    if player.cities <= 0:
        return RuleViolation("No cities left in stock")
    building = state.buildings.get(vertex_id)
    if building is None or building.player_id != player.player_id:
        return RuleViolation("You must have a settlement on this vertex to build a city")
    if building.building_type == BuildingType.CITY:
        return RuleViolation("This vertex already has a city")
    return None


def can_buy_dev_card(state: GameState, player: Player) -> Optional[RuleViolation]:
    if not has_resources(player.resources, COSTS[ActionType.BUY_DEV_CARD]):
        return RuleViolation("Not enough resources to buy a development card")
    if not state.dev_deck:
        return RuleViolation("Development card deck is empty")
    return None


def can_play_dev_card(
    state: GameState, player: Player, card: DevCardType
) -> Optional[RuleViolation]:
    if card == DevCardType.VICTORY_POINT:
        return RuleViolation("Victory point cards are not played")
    if state.config.one_dev_card_per_turn and state.played_dev_card_this_turn:
        return RuleViolation("Only one development card may be played per turn")
    playable = list(player.dev_cards)
    if not state.config.lock_new_dev_cards:
        playable += player.new_dev_cards
    if card not in playable:
        if card in player.new_dev_cards:
            return RuleViolation("Cards bought this turn cannot be played until your next turn")
        return RuleViolation(f"You do not have a {card.value} card")
    return None


def can_bank_trade(
    state: GameState,
    player: Player,
    giving: Mapping[ResourceType, int],
    receiving: Mapping[ResourceType, int],
) -> Optional[RuleViolation]:
    giving = {res: n for res, n in giving.items() if n}
    receiving = {res: n for res, n in receiving.items() if n}
    if not giving or not receiving:
        return RuleViolation("A trade must give and receive resources")
    if not _bundle_is_valid(giving) or not _bundle_is_valid(receiving):
        return RuleViolation("Trade amounts must be non-negative resource counts")
    if set(giving) & set(receiving):
        return RuleViolation("Cannot trade a resource for itself")
    if not has_resources(player.resources, giving):
        return RuleViolation("Not enough resources for this trade")
    credits = 0
    for resource, amount in giving.items():
        ratio = bank_trade_ratio(player.player_id, resource, state)
        if amount % ratio:
            return RuleViolation(f"Trade ratio must be {ratio}:1")
        credits += amount // ratio
    if sum(receiving.values()) != credits:
        return RuleViolation(f"Trade gives {credits} resource(s), not {sum(receiving.values())}")
    return None


def can_propose_trade(
    state: GameState,
    player: Player,
    offering: Mapping[ResourceType, int],
    requesting: Mapping[ResourceType, int],
) -> Optional[RuleViolation]:
    if state.trade_offer is not None:
        return RuleViolation("A trade offer is already pending")
    if not _bundle_is_valid(offering) or not _bundle_is_valid(requesting):
        return RuleViolation("Trade amounts must be non-negative resource counts")
    if not any(offering.values()) or not any(requesting.values()):
        return RuleViolation("A trade must give and receive resources")
    if not has_resources(player.resources, offering):
        return RuleViolation("Not enough resources for this trade")
    return None


def can_accept_trade(state: GameState, player: Player) -> Optional[RuleViolation]:
    offer = state.trade_offer
    if offer is None:
        return RuleViolation("No trade offer is pending")
    if offer.proposer_id == player.player_id:
        return RuleViolation("You cannot accept your own trade offer")
    if not has_resources(state.player(offer.proposer_id).resources, offer.offering):
        return RuleViolation("The proposer no longer has the offered resources")
    if not has_resources(player.resources, offer.requesting):
        return RuleViolation("Not enough resources to accept this trade")
    return None


def can_discard(
    state: GameState, player: Player, resources: Mapping[ResourceType, int]
) -> Optional[RuleViolation]:
    required = state.pending_discards.get(player.player_id)
    if required is None:
        return RuleViolation("You do not need to discard")
    if not _bundle_is_valid(resources):
        return RuleViolation("Discard amounts must be non-negative resource counts")
    total = sum(resources.values())
    if total != required:
        return RuleViolation(f"You must discard exactly {required} resources, not {total}")
    if not has_resources(player.resources, resources):
        return RuleViolation("You cannot discard resources you do not have")
    return None


def can_move_robber(state: GameState, hex_id: int) -> Optional[RuleViolation]:
    state.board.hex(hex_id)
    if hex_id == state.robber_hex:
        return RuleViolation("The robber must move to a different hex")
    return None


def available_settlement_sites(
    player_id: str, state: GameState, initial: bool | None = None
) -> List[int]:
    player = state.player(player_id)
    if initial is None:
        initial = state.phase == GamePhase.INITIAL_PLACEMENT
    return [
        vertex_id
        for vertex_id in state.board.vertices
        if can_build_settlement(state, player, vertex_id, initial=initial) is None
    ]


def available_road_sites(player_id: str, state: GameState, free: bool = False) -> List[int]:
    player = state.player(player_id)
    if state.phase == GamePhase.INITIAL_PLACEMENT:
        return [
            edge_id
            for edge_id in state.board.edges
            if can_place_initial_road(state, player, edge_id) is None
        ]
    return [
        edge_id
        for edge_id in state.board.edges
        if can_build_road(state, player, edge_id, free=free) is None
    ]
