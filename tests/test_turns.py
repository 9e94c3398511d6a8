import pytest

from catan_core.engine.constants import TERRAIN_RESOURCES
from catan_core.engine.errors import ValidationRejected
from catan_core.engine.handlers import build_road, build_settlement
from catan_core.engine.turns import end_turn, roll_dice
from catan_core.engine.types import BuildingType, DevCardType, GamePhase, TurnPhase
from catan_core.engine.validators import available_road_sites, available_settlement_sites

from helpers import (
    ScriptedRNG,
    dice_for,
    give,
    main_game,
    new_game,
    place_building,
    producing_hex,
)


def _place_initial_pair(state):
    player_id = state.current_player_id
    vertex_id = available_settlement_sites(player_id, state)[0]
    state = build_settlement(state, player_id, vertex_id)
    edge_id = available_road_sites(player_id, state)[0]
    return build_road(state, player_id, edge_id), player_id, vertex_id


def test_initial_placement_follows_snake_order():
    state = new_game(seed=1)
    order = []
    for _ in range(8):
        state, player_id, _ = _place_initial_pair(state)
        order.append(player_id)

    assert order == ["p0", "p1", "p2", "p3", "p3", "p2", "p1", "p0"]
    assert state.phase == GamePhase.MAIN_GAME
    assert state.turn_phase == TurnPhase.DICE_ROLL
    assert state.current_player_id == "p0"
    assert len(state.buildings) == 8
    assert len(state.roads) == 8
    for player in state.players:
        assert player.settlements == 3
        assert player.roads == 13
        assert player.victory_points == 2


def test_second_settlement_collects_resources():
    state = new_game(seed=2)
    for _ in range(4):
        state, _, _ = _place_initial_pair(state)
    assert all(p.resource_count == 0 for p in state.players)
    assert state.setup_round == 2

    state, player_id, vertex_id = _place_initial_pair(state)
    expected = sum(
        1
        for hex_id in state.board.vertices[vertex_id].hex_ids
        if TERRAIN_RESOURCES[state.board.hexes[hex_id].terrain] is not None
    )
    assert player_id == "p3"
    assert state.player("p3").resource_count == expected


def test_initial_road_must_touch_new_settlement():
    state = new_game(seed=3)
    vertex_id = available_settlement_sites("p0", state)[0]
    state = build_settlement(state, "p0", vertex_id)
    far_edge = next(
        e.edge_id for e in state.board.edges.values() if vertex_id not in e.vertex_ids
    )
    with pytest.raises(ValidationRejected, match="settlement just placed"):
        build_road(state, "p0", far_edge)


def test_two_settlements_before_road_rejected():
    state = new_game(seed=3)
    sites = available_settlement_sites("p0", state)
    state = build_settlement(state, "p0", sites[0])
    with pytest.raises(ValidationRejected, match="road"):
        build_settlement(state, "p0", sites[-1])


def test_initial_placement_is_free():
    state = new_game(seed=3)
    state, _, _ = _place_initial_pair(state)
    assert all(count == 0 for count in state.player("p0").resources.values())


def test_roll_distributes_resources():
    state = main_game(seed=3)
    state.turn_phase = TurnPhase.DICE_ROLL
    hex_tile = producing_hex(state.board)
    resource = TERRAIN_RESOURCES[hex_tile.terrain]
    place_building(state, "p1", hex_tile.vertex_ids[0])

    new_state = roll_dice(state, "p0", dice=dice_for(hex_tile.number))

    assert new_state.player("p1").resources[resource] >= 1
    assert new_state.turn_phase == TurnPhase.ACTIONS
    assert sum(new_state.last_roll) == hex_tile.number


def test_roll_uses_injected_rng():
    state = main_game(seed=3)
    state.turn_phase = TurnPhase.DICE_ROLL
    new_state = roll_dice(state, "p0", ScriptedRNG([2, 3]))
    assert new_state.last_roll == (2, 3)


def test_rolling_seven_collects_discards():
    """A seven puts everyone above seven cards on the discard list."""
    state = main_game(seed=4)
    state.turn_phase = TurnPhase.DICE_ROLL
    give(state, "p1", wood=3, brick=2, sheep=2, wheat=1, ore=1)
    give(state, "p2", wood=7)

    new_state = roll_dice(state, "p0", ScriptedRNG([3, 4]))

    assert new_state.turn_phase == TurnPhase.ROBBER_ACTIVATION
    assert new_state.pending_discards == {"p1": 4}
    # Nobody is paid on a seven
    assert new_state.player("p1").resource_count == 9


def test_roll_rejected_out_of_turn_and_phase():
    state = main_game(seed=4)
    state.turn_phase = TurnPhase.DICE_ROLL
    with pytest.raises(ValidationRejected, match="not your turn"):
        roll_dice(state, "p1", dice=(1, 1))

    state.turn_phase = TurnPhase.ACTIONS
    with pytest.raises(ValidationRejected):
        roll_dice(state, "p0", dice=(1, 1))


def test_invalid_dice_rejected():
    state = main_game(seed=4)
    state.turn_phase = TurnPhase.DICE_ROLL
    with pytest.raises(ValidationRejected):
        roll_dice(state, "p0", dice=(0, 7))


def test_end_turn_passes_to_next_player():
    state = main_game(seed=5)
    state.player("p0").new_dev_cards.append(DevCardType.KNIGHT)
    state.played_dev_card_this_turn = True

    new_state = end_turn(state, "p0")

    assert new_state.current_player_id == "p1"
    assert new_state.turn_phase == TurnPhase.DICE_ROLL
    assert new_state.turn_number == 2
    assert new_state.played_dev_card_this_turn is False
    assert new_state.player("p0").dev_cards == [DevCardType.KNIGHT]
    assert new_state.player("p0").new_dev_cards == []


def test_end_turn_wraps_around():
    state = main_game(seed=5)
    state.current_player_index = 3
    new_state = end_turn(state, "p3")
    assert new_state.current_player_id == "p0"


def test_end_turn_only_after_rolling():
    state = main_game(seed=5)
    state.turn_phase = TurnPhase.DICE_ROLL
    with pytest.raises(ValidationRejected):
        end_turn(state, "p0")


def test_reaching_ten_points_ends_the_game():
    state = main_game(seed=6)
    board = state.board
    spots = []
    for vertex_id in board.vertices:
        if vertex_id in spots or any(n in spots for n in board.vertices_adjacent_to(vertex_id)):
            continue
        spots.append(vertex_id)
        if len(spots) == 4:
            break
    for vertex_id in spots:
        place_building(state, "p0", vertex_id, BuildingType.CITY)
    state.player("p0").dev_cards.extend([DevCardType.VICTORY_POINT] * 2)

    new_state = end_turn(state, "p0")

    assert new_state.phase == GamePhase.GAME_OVER
    assert new_state.winner == "p0"
    assert new_state.player("p0").victory_points == 10
    with pytest.raises(ValidationRejected, match="game is over"):
        end_turn(new_state, "p0")


def test_nine_points_does_not_win():
    state = main_game(seed=6)
    state.player("p0").dev_cards.extend([DevCardType.VICTORY_POINT] * 9)
    new_state = end_turn(state, "p0")
    assert new_state.phase == GamePhase.MAIN_GAME
    assert new_state.winner is None
