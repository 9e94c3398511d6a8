from collections import Counter

import pytest

from catan_core.engine.calculators import longest_road_length
from catan_core.engine.constants import (
    DEV_CARD_COUNTS,
    INITIAL_CITIES,
    INITIAL_ROADS,
    INITIAL_SETTLEMENTS,
)
from catan_core.engine.types import BuildingType, GamePhase
from catan_core.simulate import build_parser, main, run_random_game


def check_invariants(state):
    board = state.board
    for player in state.players:
        pid = player.player_id
        assert all(count >= 0 for count in player.resources.values())
        settlements = state.buildings_of(pid, BuildingType.SETTLEMENT)
        cities = state.buildings_of(pid, BuildingType.CITY)
        assert player.settlements + len(settlements) == INITIAL_SETTLEMENTS
        assert player.cities + len(cities) == INITIAL_CITIES
        assert player.roads + len(state.roads_of(pid)) == INITIAL_ROADS
        assert longest_road_length(pid, state) == longest_road_length(pid, state)

    for vertex_id in state.buildings:
        assert not any(n in state.buildings for n in board.vertices_adjacent_to(vertex_id))

    assert sum(p.has_longest_road for p in state.players) <= 1
    assert sum(p.has_largest_army for p in state.players) <= 1
    if state.longest_road_holder is not None:
        assert state.player(state.longest_road_holder).has_longest_road

    cards = list(state.dev_deck)
    for player in state.players:
        cards += player.dev_cards + player.new_dev_cards + player.played_dev_cards
    assert Counter(cards) == Counter(DEV_CARD_COUNTS)


def test_random_game_keeps_invariants():
    steps = []

    def on_step(state):
        check_invariants(state)
        steps.append(state.phase)

    final = run_random_game(num_players=4, seed=11, max_steps=800, on_step=on_step)

    assert steps
    assert final.phase in (GamePhase.MAIN_GAME, GamePhase.GAME_OVER)
    assert len(final.buildings) >= 8


@pytest.mark.parametrize("num_players", [2, 3])
def test_smaller_games_leave_setup(num_players):
    final = run_random_game(num_players=num_players, seed=5, max_steps=200)
    assert len(final.players) == num_players
    assert final.phase != GamePhase.INITIAL_PLACEMENT


def test_seeded_games_repeat():
    first = run_random_game(seed=21, max_steps=300)
    second = run_random_game(seed=21, max_steps=300)
    assert first.buildings == second.buildings
    assert first.roads == second.roads
    assert first.turn_number == second.turn_number
    assert [p.resources for p in first.players] == [p.resources for p in second.players]


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.games == 10
    assert args.players == 4
    assert args.seed is None


def test_main_prints_summary(capsys):
    assert main(["--games", "1", "--seed", "3", "--max-steps", "150"]) == 0
    assert "Played 1 games" in capsys.readouterr().out
