from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .types import ActionType, DevCardType, PortType, ResourceBank, ResourceType, TerrainType

HEX_GRID_ROWS: Tuple[int, ...] = (3, 4, 5, 4, 3)

TERRAIN_COUNTS: Dict[TerrainType, int] = {
    TerrainType.FOREST: 4,
    TerrainType.HILLS: 3,
    TerrainType.PASTURE: 4,
    TerrainType.FIELDS: 4,
    TerrainType.MOUNTAINS: 3,
    TerrainType.DESERT: 1,
}

TERRAIN_RESOURCES: Dict[TerrainType, Optional[ResourceType]] = {
    TerrainType.FOREST: ResourceType.WOOD,
    TerrainType.HILLS: ResourceType.BRICK,
    TerrainType.PASTURE: ResourceType.SHEEP,
    TerrainType.FIELDS: ResourceType.WHEAT,
    TerrainType.MOUNTAINS: ResourceType.ORE,
    TerrainType.DESERT: None,
}

NUMBER_TOKENS: List[int] = [2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]

DEV_CARD_COUNTS: Dict[DevCardType, int] = {
    DevCardType.KNIGHT: 14,
    DevCardType.VICTORY_POINT: 5,
    DevCardType.ROAD_BUILDING: 2,
    DevCardType.YEAR_OF_PLENTY: 2,
    DevCardType.MONOPOLY: 2,
}

PORT_COUNTS: Dict[PortType, int] = {
    PortType.GENERIC: 4,
    PortType.WOOD: 1,
    PortType.BRICK: 1,
    PortType.SHEEP: 1,
    PortType.WHEAT: 1,
    PortType.ORE: 1,
}

# Gaps between consecutive ports when walking the coastline.
PORT_SPACING: Tuple[int, ...] = (3, 3, 4)

INITIAL_SETTLEMENTS = 5
INITIAL_CITIES = 4
INITIAL_ROADS = 15

SETTLEMENT_POINTS = 1
CITY_POINTS = 2
LONGEST_ROAD_POINTS = 2
LARGEST_ARMY_POINTS = 2
VICTORY_CARD_POINTS = 1

BANK_TRADE_RATIO = 4
GENERIC_PORT_RATIO = 3
RESOURCE_PORT_RATIO = 2

COSTS: Dict[ActionType, ResourceBank] = {
    ActionType.BUILD_ROAD: {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
    },
    ActionType.BUILD_SETTLEMENT: {
        ResourceType.WOOD: 1,
        ResourceType.BRICK: 1,
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
    },
    ActionType.BUILD_CITY: {
        ResourceType.WHEAT: 2,
        ResourceType.ORE: 3,
    },
    ActionType.BUY_DEV_CARD: {
        ResourceType.SHEEP: 1,
        ResourceType.WHEAT: 1,
        ResourceType.ORE: 1,
    },
}

PLAYER_COLORS: List[str] = ["#FF6B6B", "#4ECDC4", "#45B7D1", "#FFA07A"]
