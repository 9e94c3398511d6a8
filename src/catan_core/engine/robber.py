from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .errors import ValidationRejected
from .game_state import GameState, Player, clone_state
from .rng import GameRNG
from .types import RESOURCES, GamePhase, ResourceType, TurnPhase
from .validators import can_discard, can_move_robber, check_turn

logger = logging.getLogger(__name__)


def needs_discard(player: Player, threshold: int = 7) -> bool:
    return player.resource_count > threshold


def discard_amount(player: Player) -> int:
    return player.resource_count // 2


def pending_discards_for(state: GameState) -> Dict[str, int]:
    threshold = state.config.discard_threshold
    return {
        p.player_id: discard_amount(p) for p in state.players if needs_discard(p, threshold)
    }


def eligible_robber_victims(
    state: GameState, hex_id: int, excluding_player_id: str | None = None
) -> List[str]:
    """Players with a building on ``hex_id`` who hold at least one resource."""
    hex_tile = state.board.hex(hex_id)
    owners = set()
    for vertex_id in hex_tile.vertex_ids:
        building = state.buildings.get(vertex_id)
        if building is not None:
            owners.add(building.player_id)
    return [
        p.player_id
        for p in state.players
        if p.player_id in owners
        and p.player_id != excluding_player_id
        and p.resource_count > 0
    ]


def steal_random_resource(
    state: GameState, thief_id: str, victim_id: str, rng: GameRNG
) -> Optional[ResourceType]:
    """Move one resource unit, chosen uniformly, from victim to thief in place."""
    victim = state.player(victim_id)
    units: List[ResourceType] = []
    for resource in RESOURCES:
        units.extend([resource] * victim.resources[resource])
    if not units:
        return None
    stolen = rng.choice(units)
    victim.resources[stolen] -= 1
    state.player(thief_id).resources[stolen] += 1
    logger.debug("Player %s stole %s from %s", thief_id, stolen.value, victim_id)
    return stolen


def relocate_robber(
    state: GameState,
    player_id: str,
    hex_id: int,
    victim_id: str | None,
    rng: GameRNG | None,
) -> None:
    """Validate and apply a robber move plus optional theft on ``state`` in place."""
    violation = can_move_robber(state, hex_id)
    if violation:
        raise ValidationRejected.from_violation(violation)
    if victim_id is not None:
        state.player(victim_id)
        if victim_id not in eligible_robber_victims(state, hex_id, player_id):
            raise ValidationRejected(f"Player {victim_id} cannot be robbed on hex {hex_id}")

    state.robber_hex = hex_id
    logger.info("Player %s moved the robber to hex %d", player_id, hex_id)
    if victim_id is not None:
        steal_random_resource(state, player_id, victim_id, rng or GameRNG())


def move_robber(
    state: GameState,
    player_id: str,
    hex_id: int,
    victim_id: str | None = None,
    rng: GameRNG | None = None,
) -> GameState:
    violation = check_turn(
        state, player_id, [GamePhase.MAIN_GAME], [TurnPhase.ROBBER_ACTIVATION]
    )
    if violation:
        raise ValidationRejected.from_violation(violation)
    if state.pending_discards:
        waiting = ", ".join(sorted(state.pending_discards))
        raise ValidationRejected(f"Waiting for discards from: {waiting}")

    next_state = clone_state(state)
    relocate_robber(next_state, player_id, hex_id, victim_id, rng)
    next_state.turn_phase = TurnPhase.ACTIONS
    return next_state


def discard_resources(
    state: GameState, player_id: str, resources: Mapping[ResourceType, int]
) -> GameState:
    violation = check_turn(
        state,
        player_id,
        [GamePhase.MAIN_GAME],
        [TurnPhase.ROBBER_ACTIVATION],
        current_player_only=False,
    )
    if violation:
        raise ValidationRejected.from_violation(violation)
    player = state.player(player_id)
    violation = can_discard(state, player, resources)
    if violation:
        raise ValidationRejected.from_violation(violation)

    next_state = clone_state(state)
    player = next_state.player(player_id)
    for resource, amount in resources.items():
        player.resources[resource] = max(0, player.resources[resource] - amount)
    del next_state.pending_discards[player_id]
    logger.debug("Player %s discarded %d resources", player_id, sum(resources.values()))
    return next_state
