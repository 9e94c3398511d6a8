from collections import Counter

import networkx as nx

from catan_core.engine.board import (
    NumberShuffleConstraints,
    axial_coords,
    generate_board,
    standard_board,
)
from catan_core.engine.constants import HEX_GRID_ROWS, NUMBER_TOKENS, TERRAIN_COUNTS
from catan_core.engine.rng import GameRNG
from catan_core.engine.types import PortType, TerrainType

from helpers import new_game


def test_standard_board_counts():
    board = standard_board(seed=1)
    assert len(board.hexes) == 19
    assert len(board.vertices) == 54
    assert len(board.edges) == 72


def test_one_desert_without_number():
    board = standard_board(seed=2)
    deserts = [h for h in board.hexes.values() if h.terrain == TerrainType.DESERT]
    assert len(deserts) == 1
    assert deserts[0].number is None
    assert board.desert_hex_id == deserts[0].hex_id


def test_number_tokens_match_standard_set():
    board = standard_board(seed=3)
    numbers = [h.number for h in board.hexes.values() if h.number is not None]
    assert len(numbers) == 18
    assert 7 not in numbers
    assert sorted(numbers) == sorted(NUMBER_TOKENS)


def test_terrain_distribution():
    board = standard_board(seed=4)
    assert Counter(h.terrain for h in board.hexes.values()) == Counter(TERRAIN_COUNTS)


def test_rows_are_laid_out_three_four_five_four_three():
    rows = Counter(r for _, r in axial_coords())
    assert tuple(rows[r] for r in sorted(rows)) == HEX_GRID_ROWS


def test_graph_shape():
    board = standard_board(seed=5)
    for vertex in board.vertices.values():
        assert 2 <= len(vertex.edge_ids) <= 3
        assert 1 <= len(vertex.hex_ids) <= 3
        assert len(vertex.neighbor_vertex_ids) == len(vertex.edge_ids)
        for neighbor in vertex.neighbor_vertex_ids:
            assert vertex.vertex_id in board.vertices[neighbor].neighbor_vertex_ids
    for edge in board.edges.values():
        a, b = edge.vertex_ids
        assert a != b
        assert 1 <= len(edge.hex_ids) <= 2
        assert edge.edge_id in board.vertices[a].edge_ids
        assert edge.edge_id in board.vertices[b].edge_ids
    for hex_tile in board.hexes.values():
        assert len(set(hex_tile.vertex_ids)) == 6
        assert len(set(hex_tile.edge_ids)) == 6


def test_hex_edges_join_consecutive_corners():
    board = standard_board(seed=6)
    for hex_tile in board.hexes.values():
        for i, edge_id in enumerate(hex_tile.edge_ids):
            corners = {hex_tile.vertex_ids[i], hex_tile.vertex_ids[(i + 1) % 6]}
            assert set(board.edges[edge_id].vertex_ids) == corners


def test_board_graph_is_connected():
    graph = standard_board(seed=7).to_networkx()
    assert graph.number_of_nodes() == 54
    assert graph.number_of_edges() == 72
    assert nx.is_connected(graph)


def test_ports_sit_on_the_coast():
    board = standard_board(seed=8)
    port_vertices = board.port_vertices()
    assert len(port_vertices) == 18
    assert len(board.coastal_edge_ids()) == 30

    counts = Counter(port_vertices.values())
    assert counts[PortType.GENERIC] == 8
    for port_type in PortType:
        if port_type != PortType.GENERIC:
            assert counts[port_type] == 2

    port_edges = [
        edge
        for edge in board.edges.values()
        if all(v in port_vertices for v in edge.vertex_ids)
        and port_vertices[edge.vertex_ids[0]] == port_vertices[edge.vertex_ids[1]]
    ]
    assert len(port_edges) == 9
    for edge in port_edges:
        assert len(edge.hex_ids) == 1


def test_same_seed_same_board():
    first = standard_board(seed=11)
    second = standard_board(seed=11)
    assert first.hexes == second.hexes
    assert first.port_vertices() == second.port_vertices()


def test_topology_does_not_depend_on_seed():
    first = standard_board(seed=1)
    second = generate_board(GameRNG(99))
    assert [h.vertex_ids for h in first.hexes.values()] == [
        h.vertex_ids for h in second.hexes.values()
    ]
    assert {e.vertex_ids for e in first.edges.values()} == {
        e.vertex_ids for e in second.edges.values()
    }


def test_no_adjacent_six_eight_constraint():
    constraints = NumberShuffleConstraints(no_adjacent_six_eight=True)
    for seed in range(5):
        board = standard_board(seed=seed, constraints=constraints)
        for hex_id, neighbors in board.hex_neighbors.items():
            if board.hexes[hex_id].number in (6, 8):
                for neighbor in neighbors:
                    assert board.hexes[neighbor].number not in (6, 8)


def test_robber_starts_on_desert():
    state = new_game(seed=12)
    assert state.robber_hex == state.board.desert_hex_id
    assert state.hex_has_robber(state.board.desert_hex_id)
