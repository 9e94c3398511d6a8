from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Tuple

import networkx as nx

from .constants import NUMBER_TOKENS, PORT_COUNTS, PORT_SPACING, TERRAIN_COUNTS
from .errors import NotFound
from .rng import GameRNG
from .types import Edge, Hex, PortType, TerrainType, Vertex

logger = logging.getLogger(__name__)

AXIAL_RADIUS = 2

CORNER_OFFSETS = [
    (0, 4),
    (2, 2),
    (2, -2),
    (0, -4),
    (-2, -2),
    (-2, 2),
]

AXIAL_DIRECTIONS = [
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
]


@dataclass(frozen=True)
class NumberShuffleConstraints:
    no_adjacent_six_eight: bool = False
    no_adjacent_same_number: bool = False
    no_adjacent_two_twelve: bool = False
    max_attempts: int = 5000


@dataclass(frozen=True)
class Board:
    hexes: Dict[int, Hex]
    vertices: Dict[int, Vertex]
    edges: Dict[int, Edge]
    hex_neighbors: Dict[int, List[int]]

    def hex(self, hex_id: int) -> Hex:
        try:
            return self.hexes[hex_id]
        except KeyError:
            raise NotFound("hex", hex_id) from None

    def vertex(self, vertex_id: int) -> Vertex:
        try:
            return self.vertices[vertex_id]
        except KeyError:
            raise NotFound("vertex", vertex_id) from None

    def edge(self, edge_id: int) -> Edge:
        try:
            return self.edges[edge_id]
        except KeyError:
            raise NotFound("edge", edge_id) from None

    def vertices_adjacent_to(self, vertex_id: int) -> Tuple[int, ...]:
        return self.vertex(vertex_id).neighbor_vertex_ids

    def edges_for_vertex(self, vertex_id: int) -> Tuple[int, ...]:
        return self.vertex(vertex_id).edge_ids

    def hexes_for_vertex(self, vertex_id: int) -> Tuple[int, ...]:
        return self.vertex(vertex_id).hex_ids

    @property
    def desert_hex_id(self) -> int:
        return next(h.hex_id for h in self.hexes.values() if h.terrain == TerrainType.DESERT)

    def coastal_edge_ids(self) -> List[int]:
        return [e.edge_id for e in self.edges.values() if len(e.hex_ids) == 1]

    def port_vertices(self) -> Dict[int, PortType]:
        return {v.vertex_id: v.port for v in self.vertices.values() if v.port is not None}

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(self.vertices)
        for edge in self.edges.values():
            graph.add_edge(*edge.vertex_ids, edge_id=edge.edge_id)
        return graph


class BoardTopology(NamedTuple):
    """Id-based adjacency produced once per layout, before terrain is known."""

    hex_vertices: Dict[int, List[int]]
    hex_edges: Dict[int, List[int]]
    vertex_coords: Dict[int, Tuple[int, int]]
    edge_vertices: Dict[int, Tuple[int, int]]


def axial_coords(radius: int = AXIAL_RADIUS) -> List[Tuple[int, int]]:
    """Hex slots row by row, top to bottom (3, 4, 5, 4, 3 for radius 2)."""
    coords: List[Tuple[int, int]] = []
    for r in range(-radius, radius + 1):
        for q in range(max(-radius, -r - radius), min(radius, -r + radius) + 1):
            coords.append((q, r))
    return coords


def axial_center(q: int, r: int) -> Tuple[int, int]:
    size = 2
    return (size * (2 * q + r), size * (3 * r))


def build_hex_neighbors(coords: List[Tuple[int, int]]) -> Dict[int, List[int]]:
    coord_to_id = {coord: hex_id for hex_id, coord in enumerate(coords)}
    neighbors: Dict[int, List[int]] = {}
    for hex_id, (q, r) in enumerate(coords):
        hex_neighbors: List[int] = []
        for dq, dr in AXIAL_DIRECTIONS:
            neighbor_coord = (q + dq, r + dr)
            if neighbor_coord in coord_to_id:
                hex_neighbors.append(coord_to_id[neighbor_coord])
        neighbors[hex_id] = hex_neighbors
    return neighbors


def build_topology(coords: List[Tuple[int, int]]) -> BoardTopology:
    # Corners shared by neighbouring hexes land on the same lattice point, so
    # the point itself is the merge key. Edges merge on the sorted vertex pair.
    vertex_map: Dict[Tuple[int, int], int] = {}
    edge_map: Dict[Tuple[int, int], int] = {}
    hex_vertices: Dict[int, List[int]] = {}
    hex_edges: Dict[int, List[int]] = {}

    def vertex_id_for(coord: Tuple[int, int]) -> int:
        if coord not in vertex_map:
            vertex_map[coord] = len(vertex_map)
        return vertex_map[coord]

    for hex_id, (q, r) in enumerate(coords):
        cx, cy = axial_center(q, r)
        vertex_ids = [vertex_id_for((cx + ox, cy + oy)) for ox, oy in CORNER_OFFSETS]
        hex_vertices[hex_id] = vertex_ids

        edge_ids: List[int] = []
        for i in range(6):
            a = vertex_ids[i]
            b = vertex_ids[(i + 1) % 6]
            edge_key = (min(a, b), max(a, b))
            if edge_key not in edge_map:
                edge_map[edge_key] = len(edge_map)
            edge_ids.append(edge_map[edge_key])
        hex_edges[hex_id] = edge_ids

    return BoardTopology(
        hex_vertices=hex_vertices,
        hex_edges=hex_edges,
        vertex_coords={vid: coord for coord, vid in vertex_map.items()},
        edge_vertices={eid: pair for pair, eid in edge_map.items()},
    )


def _numbers_valid(
    numbers_by_hex: Dict[int, int],
    neighbors: Dict[int, List[int]],
    constraints: NumberShuffleConstraints,
) -> bool:
    for hex_id, value in numbers_by_hex.items():
        for neighbor_id in neighbors[hex_id]:
            if neighbor_id not in numbers_by_hex:
                continue
            other = numbers_by_hex[neighbor_id]
            if constraints.no_adjacent_six_eight and value in (6, 8) and other in (6, 8):
                return False
            if constraints.no_adjacent_same_number and value == other:
                return False
            if constraints.no_adjacent_two_twelve and value in (2, 12) and other in (2, 12):
                return False
    return True


def _assign_numbers(
    hex_ids: List[int],
    numbers: List[int],
    neighbors: Dict[int, List[int]],
    rng: GameRNG,
    constraints: NumberShuffleConstraints,
) -> Dict[int, int]:
    for attempt in range(constraints.max_attempts):
        rng.shuffle(numbers)
        numbers_by_hex = {hex_id: numbers[idx] for idx, hex_id in enumerate(hex_ids)}
        if _numbers_valid(numbers_by_hex, neighbors, constraints):
            if attempt:
                logger.debug("Number tokens placed after %d reshuffles", attempt)
            return numbers_by_hex
    raise RuntimeError("Failed to assign numbers within constraints")


def coastline(topology: BoardTopology, edge_hexes: Dict[int, List[int]]) -> List[int]:
    """Coastal edge ids in walking order around the board."""
    coast = nx.Graph()
    for edge_id, (a, b) in topology.edge_vertices.items():
        if len(edge_hexes[edge_id]) == 1:
            coast.add_edge(a, b, edge_id=edge_id)
    cycle = nx.find_cycle(coast, source=min(coast.nodes))
    return [coast.edges[u, v]["edge_id"] for u, v in cycle]


def _assign_ports(coast: List[int], rng: GameRNG) -> Dict[int, PortType]:
    port_types: List[PortType] = []
    for port_type, count in PORT_COUNTS.items():
        port_types.extend([port_type] * count)
    rng.shuffle(port_types)

    ports_by_edge: Dict[int, PortType] = {}
    position = 0
    for index, port_type in enumerate(port_types):
        ports_by_edge[coast[position % len(coast)]] = port_type
        position += PORT_SPACING[index % len(PORT_SPACING)]
    return ports_by_edge


def _invert(mapping: Dict[int, Iterable[int]], keys: Iterable[int]) -> Dict[int, List[int]]:
    inverted: Dict[int, List[int]] = {key: [] for key in keys}
    for owner, members in mapping.items():
        for member in members:
            inverted[member].append(owner)
    return inverted


def generate_board(
    rng: GameRNG | None = None, constraints: NumberShuffleConstraints | None = None
) -> Board:
    if rng is None:
        rng = GameRNG()
    if constraints is None:
        constraints = NumberShuffleConstraints()

    coords = axial_coords()
    terrains: List[TerrainType] = []
    for terrain, count in TERRAIN_COUNTS.items():
        terrains.extend([terrain] * count)
    rng.shuffle(terrains)

    neighbors = build_hex_neighbors(coords)
    producing = [hex_id for hex_id, terrain in enumerate(terrains) if terrain != TerrainType.DESERT]
    numbers_by_hex = _assign_numbers(producing, list(NUMBER_TOKENS), neighbors, rng, constraints)

    topology = build_topology(coords)
    vertex_hexes = _invert(topology.hex_vertices, topology.vertex_coords)
    edge_hexes = _invert(topology.hex_edges, topology.edge_vertices)
    vertex_edges = _invert(topology.edge_vertices, topology.vertex_coords)

    ports_by_vertex: Dict[int, PortType] = {}
    for edge_id, port_type in _assign_ports(coastline(topology, edge_hexes), rng).items():
        for vertex_id in topology.edge_vertices[edge_id]:
            ports_by_vertex[vertex_id] = port_type

    hexes: Dict[int, Hex] = {}
    for hex_id, (q, r) in enumerate(coords):
        hexes[hex_id] = Hex(
            hex_id=hex_id,
            axial=(q, r),
            terrain=terrains[hex_id],
            number=numbers_by_hex.get(hex_id),
            vertex_ids=tuple(topology.hex_vertices[hex_id]),
            edge_ids=tuple(topology.hex_edges[hex_id]),
        )

    vertices: Dict[int, Vertex] = {}
    for vertex_id, coord in topology.vertex_coords.items():
        edge_ids = vertex_edges[vertex_id]
        neighbor_ids = [
            b if a == vertex_id else a
            for a, b in (topology.edge_vertices[eid] for eid in edge_ids)
        ]
        vertices[vertex_id] = Vertex(
            vertex_id=vertex_id,
            coord=coord,
            hex_ids=tuple(vertex_hexes[vertex_id]),
            neighbor_vertex_ids=tuple(neighbor_ids),
            edge_ids=tuple(edge_ids),
            port=ports_by_vertex.get(vertex_id),
        )

    edges: Dict[int, Edge] = {
        edge_id: Edge(edge_id=edge_id, vertex_ids=pair, hex_ids=tuple(edge_hexes[edge_id]))
        for edge_id, pair in topology.edge_vertices.items()
    }

    board = Board(hexes=hexes, vertices=vertices, edges=edges, hex_neighbors=neighbors)
    logger.debug(
        "Generated board: %d hexes, %d vertices, %d edges, %d port vertices",
        len(hexes),
        len(vertices),
        len(edges),
        len(ports_by_vertex),
    )
    return board


def standard_board(
    seed: int | None = None, constraints: NumberShuffleConstraints | None = None
) -> Board:
    return generate_board(GameRNG(seed), constraints)
