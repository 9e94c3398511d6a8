"""Random agent for smoke-testing the engine."""

from __future__ import annotations

import random
from typing import Dict, List

from catan_core.engine.game_state import GameState
from catan_core.engine.types import RESOURCES, Action, ActionType


class RandomAgent:
    """An agent that picks uniformly among the legal actions."""

    def __init__(self, player_id: str, seed: int | None = None):
        self.player_id = player_id
        self.rng = random.Random(seed)

    def select_action(self, state: GameState, legal_actions: List[Action]) -> Action:
        """Select a random legal action."""
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)

        # Discard templates only carry the amount owed.
        if action.action_type == ActionType.DISCARD:
            action = self._generate_discard_action(state, action)

        return action

    def _generate_discard_action(self, state: GameState, template_action: Action) -> Action:
        """Pick which resources to give up, uniformly over the cards held."""
        player = state.player(self.player_id)
        required = int(template_action.payload["amount"])

        available = []
        for resource in RESOURCES:
            available.extend([resource] * player.resources[resource])

        discard_counts: Dict[str, int] = {}
        for resource in self.rng.sample(available, required):
            discard_counts[resource.value] = discard_counts.get(resource.value, 0) + 1

        return Action(
            action_type=ActionType.DISCARD,
            payload={"resources": discard_counts},
            player_id=self.player_id,
        )
