"""Shared builders for engine tests."""

from __future__ import annotations

from typing import List

from catan_core.engine.board import Board, standard_board
from catan_core.engine.config import GameConfig
from catan_core.engine.game_state import GameState, create_player, initial_game_state
from catan_core.engine.rng import GameRNG
from catan_core.engine.types import (
    Building,
    BuildingType,
    GamePhase,
    Hex,
    PlayerKind,
    ResourceType,
    TurnPhase,
)

PLAYER_IDS = ["p0", "p1", "p2", "p3"]


class ScriptedRNG(GameRNG):
    """Serves queued ``randint`` results before falling back to a seeded generator."""

    def __init__(self, values=(), seed: int = 0):
        super().__init__(seed)
        self.values = list(values)

    def randint(self, a: int, b: int) -> int:
        if self.values:
            value = self.values.pop(0)
            assert a <= value <= b
            return value
        return super().randint(a, b)


def new_game(
    seed: int = 1, num_players: int = 4, config: GameConfig | None = None
) -> GameState:
    players = [
        create_player(pid, f"Player {pid}", "#000000", PlayerKind.HUMAN)
        for pid in PLAYER_IDS[:num_players]
    ]
    rng = GameRNG(seed)
    return initial_game_state(players, standard_board(seed=seed), rng, config)


def main_game(seed: int = 1, num_players: int = 4, config: GameConfig | None = None) -> GameState:
    """A game past initial placement, waiting on p0's actions."""
    state = new_game(seed, num_players, config)
    state.phase = GamePhase.MAIN_GAME
    state.turn_phase = TurnPhase.ACTIONS
    return state


def give(state: GameState, player_id: str, **amounts: int) -> None:
    player = state.player(player_id)
    for name, amount in amounts.items():
        player.resources[ResourceType(name)] = amount


def place_building(
    state: GameState,
    player_id: str,
    vertex_id: int,
    building_type: BuildingType = BuildingType.SETTLEMENT,
) -> None:
    state.buildings[vertex_id] = Building(building_type, player_id)
    player = state.player(player_id)
    if building_type == BuildingType.CITY:
        player.cities -= 1
    else:
        player.settlements -= 1


def place_road(state: GameState, player_id: str, edge_id: int) -> None:
    state.roads[edge_id] = player_id
    state.player(player_id).roads -= 1


def center_hex(board: Board) -> Hex:
    return next(h for h in board.hexes.values() if h.axial == (0, 0))


def ring_edges(hex_tile: Hex) -> List[int]:
    """Edges around a hex; edge ``i`` joins corners ``i`` and ``i + 1``."""
    return list(hex_tile.edge_ids)


def producing_hex(board: Board) -> Hex:
    return next(h for h in board.hexes.values() if h.number is not None)


def dice_for(total: int) -> tuple:
    if total <= 7:
        return (1, total - 1)
    return (total - 6, 6)
