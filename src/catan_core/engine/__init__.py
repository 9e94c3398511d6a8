"""Core rules engine for Catan."""

from .board import Board, NumberShuffleConstraints, generate_board, standard_board
from .calculators import (
    bank_trade_ratio,
    longest_road_length,
    player_ports,
    resource_production,
    trade_ratio,
    victory_points,
)
from .config import GameConfig
from .errors import CatanError, NotFound, RuleViolation, ValidationRejected
from .game_state import GameState, Player, clone_state, create_player, initial_game_state
from .handlers import (
    build_city,
    build_road,
    build_settlement,
    buy_dev_card,
    play_knight,
    play_monopoly,
    play_road_building,
    play_year_of_plenty,
)
from .rng import GameRNG
from .robber import (
    discard_amount,
    discard_resources,
    eligible_robber_victims,
    move_robber,
    needs_discard,
)
from .rules import acting_player, apply_action, legal_actions
from .trading import accept_trade, bank_trade, decline_trade, propose_trade
from .turns import end_turn, roll_dice
from .types import (
    Action,
    ActionType,
    BuildingType,
    DevCardType,
    GamePhase,
    PlayerKind,
    PortType,
    ResourceType,
    TerrainType,
    TurnPhase,
)
from .validators import available_road_sites, available_settlement_sites

__all__ = [
    "Action",
    "ActionType",
    "Board",
    "BuildingType",
    "CatanError",
    "DevCardType",
    "GameConfig",
    "GamePhase",
    "GameRNG",
    "GameState",
    "NotFound",
    "NumberShuffleConstraints",
    "Player",
    "PlayerKind",
    "PortType",
    "ResourceType",
    "RuleViolation",
    "TerrainType",
    "TurnPhase",
    "ValidationRejected",
    "accept_trade",
    "acting_player",
    "apply_action",
    "available_road_sites",
    "available_settlement_sites",
    "bank_trade",
    "bank_trade_ratio",
    "build_city",
    "build_road",
    "build_settlement",
    "buy_dev_card",
    "clone_state",
    "create_player",
    "decline_trade",
    "discard_amount",
    "discard_resources",
    "eligible_robber_victims",
    "end_turn",
    "generate_board",
    "initial_game_state",
    "legal_actions",
    "longest_road_length",
    "move_robber",
    "needs_discard",
    "play_knight",
    "play_monopoly",
    "play_road_building",
    "play_year_of_plenty",
    "player_ports",
    "propose_trade",
    "resource_production",
    "roll_dice",
    "standard_board",
    "trade_ratio",
    "victory_points",
]
