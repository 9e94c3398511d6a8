from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class GameConfig:
    """Tunable rule constants carried on every game state."""

    victory_points_to_win: int = 10
    discard_threshold: int = 7
    robber_roll: int = 7
    longest_road_min: int = 5
    largest_army_min: int = 3
    lock_new_dev_cards: bool = True
    one_dev_card_per_turn: bool = True

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)
