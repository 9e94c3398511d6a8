from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .board import Board
from .config import GameConfig
from .constants import DEV_CARD_COUNTS, INITIAL_CITIES, INITIAL_ROADS, INITIAL_SETTLEMENTS
from .errors import NotFound
from .rng import GameRNG
from .types import (
    RESOURCES,
    Action,
    Building,
    BuildingType,
    DevCardType,
    GamePhase,
    PlayerKind,
    ResourceBank,
    TradeOffer,
    TurnPhase,
)


def empty_resources() -> ResourceBank:
    return {resource: 0 for resource in RESOURCES}


@dataclass
class Player:
    player_id: str
    name: str
    color: str
    kind: PlayerKind
    resources: ResourceBank = field(default_factory=empty_resources)
    settlements: int = INITIAL_SETTLEMENTS
    cities: int = INITIAL_CITIES
    roads: int = INITIAL_ROADS
    dev_cards: List[DevCardType] = field(default_factory=list)
    new_dev_cards: List[DevCardType] = field(default_factory=list)
    played_dev_cards: List[DevCardType] = field(default_factory=list)
    knights_played: int = 0
    victory_points: int = 0
    has_longest_road: bool = False
    has_largest_army: bool = False

    @property
    def resource_count(self) -> int:
        return sum(self.resources.values())

    def all_dev_cards(self) -> List[DevCardType]:
        return self.dev_cards + self.new_dev_cards


@dataclass
class GameState:
    board: Board
    players: List[Player]
    config: GameConfig
    phase: GamePhase
    turn_phase: TurnPhase
    current_player_index: int
    dev_deck: List[DevCardType]
    robber_hex: int
    buildings: Dict[int, Building] = field(default_factory=dict)
    roads: Dict[int, str] = field(default_factory=dict)
    last_roll: Optional[Tuple[int, int]] = None
    longest_road_holder: Optional[str] = None
    largest_army_holder: Optional[str] = None
    turn_number: int = 1
    winner: Optional[str] = None
    setup_round: int = 1
    pending_setup_vertex: Optional[int] = None
    pending_discards: Dict[str, int] = field(default_factory=dict)
    played_dev_card_this_turn: bool = False
    trade_offer: Optional[TradeOffer] = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def current_player_id(self) -> str:
        return self.players[self.current_player_index].player_id

    def player(self, player_id: str) -> Player:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise NotFound("player", player_id)

    def opponents(self, player_id: str) -> Iterable[Player]:
        return (p for p in self.players if p.player_id != player_id)

    def hex_has_robber(self, hex_id: int) -> bool:
        return self.board.hex(hex_id).hex_id == self.robber_hex

    def building_at(self, vertex_id: int) -> Optional[Building]:
        self.board.vertex(vertex_id)
        return self.buildings.get(vertex_id)

    def road_owner(self, edge_id: int) -> Optional[str]:
        self.board.edge(edge_id)
        return self.roads.get(edge_id)

    def buildings_of(self, player_id: str, building_type: BuildingType | None = None) -> List[int]:
        return [
            vertex_id
            for vertex_id, building in self.buildings.items()
            if building.player_id == player_id
            and (building_type is None or building.building_type == building_type)
        ]

    def roads_of(self, player_id: str) -> List[int]:
        return [edge_id for edge_id, owner in self.roads.items() if owner == player_id]

    def legal_actions(self, player_id: str | None = None) -> List[Action]:
        from .rules import legal_actions

        return legal_actions(self, player_id)

    def apply(self, action: Action, rng: GameRNG | None = None) -> "GameState":
        from .rules import apply_action

        return apply_action(self, action, rng)


def create_player(
    player_id: str, name: str, color: str, kind: PlayerKind = PlayerKind.HUMAN
) -> Player:
    return Player(player_id=player_id, name=name, color=color, kind=kind)


def new_dev_deck(rng: GameRNG) -> List[DevCardType]:
    deck: List[DevCardType] = []
    for card, count in DEV_CARD_COUNTS.items():
        deck.extend([card] * count)
    rng.shuffle(deck)
    return deck


def initial_game_state(
    players: List[Player],
    board: Board,
    rng: GameRNG | None = None,
    config: GameConfig | None = None,
) -> GameState:
    if not players:
        raise ValueError("A game needs at least one player")
    if len({p.player_id for p in players}) != len(players):
        raise ValueError("Player ids must be unique")
    if rng is None:
        rng = GameRNG()

    return GameState(
        board=board,
        players=list(players),
        config=config or GameConfig(),
        phase=GamePhase.INITIAL_PLACEMENT,
        turn_phase=TurnPhase.ACTIONS,
        current_player_index=0,
        dev_deck=new_dev_deck(rng),
        robber_hex=board.desert_hex_id,
    )


def clone_player(player: Player) -> Player:
    return Player(
        player_id=player.player_id,
        name=player.name,
        color=player.color,
        kind=player.kind,
        resources=dict(player.resources),
        settlements=player.settlements,
        cities=player.cities,
        roads=player.roads,
        dev_cards=list(player.dev_cards),
        new_dev_cards=list(player.new_dev_cards),
        played_dev_cards=list(player.played_dev_cards),
        knights_played=player.knights_played,
        victory_points=player.victory_points,
        has_longest_road=player.has_longest_road,
        has_largest_army=player.has_largest_army,
    )


def clone_state(state: GameState) -> GameState:
    # The board is immutable and shared between snapshots.
    return GameState(
        board=state.board,
        players=[clone_player(player) for player in state.players],
        config=state.config,
        phase=state.phase,
        turn_phase=state.turn_phase,
        current_player_index=state.current_player_index,
        dev_deck=list(state.dev_deck),
        robber_hex=state.robber_hex,
        buildings=dict(state.buildings),
        roads=dict(state.roads),
        last_roll=state.last_roll,
        longest_road_holder=state.longest_road_holder,
        largest_army_holder=state.largest_army_holder,
        turn_number=state.turn_number,
        winner=state.winner,
        setup_round=state.setup_round,
        pending_setup_vertex=state.pending_setup_vertex,
        pending_discards=dict(state.pending_discards),
        played_dev_card_this_turn=state.played_dev_card_this_turn,
        trade_offer=state.trade_offer,
    )
