from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class ResourceType(str, Enum):
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"


RESOURCES: Tuple[ResourceType, ...] = tuple(ResourceType)


class TerrainType(str, Enum):
    FOREST = "forest"
    HILLS = "hills"
    PASTURE = "pasture"
    FIELDS = "fields"
    MOUNTAINS = "mountains"
    DESERT = "desert"


class BuildingType(str, Enum):
    SETTLEMENT = "settlement"
    CITY = "city"


class DevCardType(str, Enum):
    KNIGHT = "knight"
    VICTORY_POINT = "victory_point"
    ROAD_BUILDING = "road_building"
    YEAR_OF_PLENTY = "year_of_plenty"
    MONOPOLY = "monopoly"


class PortType(str, Enum):
    GENERIC = "generic"
    WOOD = "wood"
    BRICK = "brick"
    SHEEP = "sheep"
    WHEAT = "wheat"
    ORE = "ore"

    @property
    def resource(self) -> Optional[ResourceType]:
        if self == PortType.GENERIC:
            return None
        return ResourceType(self.value)


class PlayerKind(str, Enum):
    HUMAN = "human"
    AI = "ai"


class GamePhase(str, Enum):
    INITIAL_PLACEMENT = "initial_placement"
    MAIN_GAME = "main_game"
    GAME_OVER = "game_over"


class TurnPhase(str, Enum):
    DICE_ROLL = "dice_roll"
    ROBBER_ACTIVATION = "robber_activation"
    ACTIONS = "actions"


class ActionType(str, Enum):
    ROLL_DICE = "roll_dice"
    BUILD_ROAD = "build_road"
    BUILD_SETTLEMENT = "build_settlement"
    BUILD_CITY = "build_city"
    BUY_DEV_CARD = "buy_dev_card"
    PLAY_KNIGHT = "play_knight"
    PLAY_YEAR_OF_PLENTY = "play_year_of_plenty"
    PLAY_MONOPOLY = "play_monopoly"
    PLAY_ROAD_BUILDING = "play_road_building"
    MOVE_ROBBER = "move_robber"
    DISCARD = "discard"
    END_TURN = "end_turn"
    TRADE_BANK = "trade_bank"
    PROPOSE_TRADE = "propose_trade"
    ACCEPT_TRADE = "accept_trade"
    DECLINE_TRADE = "decline_trade"


ResourceBank = Dict[ResourceType, int]


@dataclass(frozen=True)
class Action:
    action_type: ActionType
    payload: Dict[str, object] = field(default_factory=dict)
    player_id: Optional[str] = None


@dataclass(frozen=True)
class Hex:
    hex_id: int
    axial: Tuple[int, int]
    terrain: TerrainType
    number: Optional[int]
    vertex_ids: Tuple[int, ...]
    edge_ids: Tuple[int, ...]


@dataclass(frozen=True)
class Vertex:
    vertex_id: int
    coord: Tuple[int, int]
    hex_ids: Tuple[int, ...]
    neighbor_vertex_ids: Tuple[int, ...]
    edge_ids: Tuple[int, ...]
    port: Optional[PortType] = None


@dataclass(frozen=True)
class Edge:
    edge_id: int
    vertex_ids: Tuple[int, int]
    hex_ids: Tuple[int, ...]

    def other_end(self, vertex_id: int) -> int:
        a, b = self.vertex_ids
        return b if vertex_id == a else a


@dataclass(frozen=True)
class Building:
    building_type: BuildingType
    player_id: str


@dataclass(frozen=True)
class TradeOffer:
    proposer_id: str
    offering: ResourceBank
    requesting: ResourceBank
