"""Derived values computed from a game state snapshot.

Nothing here mutates its arguments; handlers decide what to do with the
results.
"""

from __future__ import annotations

from typing import Dict, Optional, Set

import networkx as nx

from .constants import (
    BANK_TRADE_RATIO,
    CITY_POINTS,
    GENERIC_PORT_RATIO,
    LARGEST_ARMY_POINTS,
    LONGEST_ROAD_POINTS,
    RESOURCE_PORT_RATIO,
    SETTLEMENT_POINTS,
    TERRAIN_RESOURCES,
    VICTORY_CARD_POINTS,
)
from .game_state import GameState, Player, empty_resources
from .types import BuildingType, DevCardType, PortType, ResourceBank, ResourceType


def victory_points(player: Player, state: GameState) -> int:
    points = 0
    for building in state.buildings.values():
        if building.player_id != player.player_id:
            continue
        if building.building_type == BuildingType.CITY:
            points += CITY_POINTS
        else:
            points += SETTLEMENT_POINTS
    if state.longest_road_holder == player.player_id:
        points += LONGEST_ROAD_POINTS
    if state.largest_army_holder == player.player_id:
        points += LARGEST_ARMY_POINTS
    points += VICTORY_CARD_POINTS * player.all_dev_cards().count(DevCardType.VICTORY_POINT)
    return points


def road_network(player_id: str, state: GameState) -> nx.Graph:
    graph = nx.Graph()
    for edge_id, owner in state.roads.items():
        if owner != player_id:
            continue
        a, b = state.board.edges[edge_id].vertex_ids
        graph.add_edge(a, b, edge_id=edge_id)
    return graph


def longest_road_length(player_id: str, state: GameState) -> int:
    """Length in edges of the longest trail through the player's roads.

    A trail may end on a vertex holding an opponent's building but never
    passes through one. Every owned edge is tried as a start in both
    directions; edges are visited at most once per trail.
    """
    state.player(player_id)
    graph = road_network(player_id, state)
    if graph.number_of_edges() == 0:
        return 0

    def passable(vertex_id: int) -> bool:
        building = state.buildings.get(vertex_id)
        return building is None or building.player_id == player_id

    best = 0

    def extend(vertex_id: int, visited: Set[int], length: int) -> None:
        nonlocal best
        best = max(best, length)
        if not passable(vertex_id):
            return
        for _, neighbor, data in graph.edges(vertex_id, data=True):
            edge_id = data["edge_id"]
            if edge_id in visited:
                continue
            visited.add(edge_id)
            extend(neighbor, visited, length + 1)
            visited.discard(edge_id)

    for a, b, data in graph.edges(data=True):
        for end in (a, b):
            extend(end, {data["edge_id"]}, 1)
    return best


def longest_road_lengths(state: GameState) -> Dict[str, int]:
    return {p.player_id: longest_road_length(p.player_id, state) for p in state.players}


def _badge_holder(
    counts: Dict[str, int], current_holder: Optional[str], minimum: int
) -> Optional[str]:
    # A holder keeps the badge on a tie; a newcomer needs a strict lead.
    best = max(counts.values(), default=0)
    if current_holder is not None and counts.get(current_holder, 0) >= minimum:
        if counts[current_holder] == best:
            return current_holder
    leaders = [pid for pid, count in counts.items() if count == best]
    if best >= minimum and len(leaders) == 1:
        return leaders[0]
    return None


def longest_road_winner(state: GameState) -> Optional[str]:
    return _badge_holder(
        longest_road_lengths(state), state.longest_road_holder, state.config.longest_road_min
    )


def largest_army_winner(state: GameState) -> Optional[str]:
    knights = {p.player_id: p.knights_played for p in state.players}
    return _badge_holder(knights, state.largest_army_holder, state.config.largest_army_min)


def qualifies_for_longest_road(player_id: str, state: GameState) -> bool:
    lengths = longest_road_lengths(state)
    mine = lengths[player_id]
    return mine >= state.config.longest_road_min and all(
        mine > length for pid, length in lengths.items() if pid != player_id
    )


def qualifies_for_largest_army(player_id: str, state: GameState) -> bool:
    mine = state.player(player_id).knights_played
    return mine >= state.config.largest_army_min and all(
        mine > p.knights_played for p in state.opponents(player_id)
    )


def resource_production(state: GameState, dice_sum: int) -> Dict[str, ResourceBank]:
    """Resources each player collects for a roll of ``dice_sum``."""
    production = {p.player_id: empty_resources() for p in state.players}
    for hex_tile in state.board.hexes.values():
        if hex_tile.number != dice_sum or hex_tile.hex_id == state.robber_hex:
            continue
        resource = TERRAIN_RESOURCES[hex_tile.terrain]
        if resource is None:
            continue
        for vertex_id in hex_tile.vertex_ids:
            building = state.buildings.get(vertex_id)
            if building is None:
                continue
            amount = 2 if building.building_type == BuildingType.CITY else 1
            production[building.player_id][resource] += amount
    return production


def player_ports(player_id: str, state: GameState) -> Set[PortType]:
    ports: Set[PortType] = set()
    for vertex_id, building in state.buildings.items():
        if building.player_id != player_id:
            continue
        port = state.board.vertices[vertex_id].port
        if port is not None:
            ports.add(port)
    return ports


def trade_ratio(resource: ResourceType, ports: Set[PortType]) -> int:
    if PortType(resource.value) in ports:
        return RESOURCE_PORT_RATIO
    if PortType.GENERIC in ports:
        return GENERIC_PORT_RATIO
    return BANK_TRADE_RATIO


def bank_trade_ratio(player_id: str, resource: ResourceType, state: GameState) -> int:
    return trade_ratio(resource, player_ports(player_id, state))
