import json
import random

import pytest

from app import create_app, normalize_direction, tile_color
from config import TestingConfig
from storage import GRID_KEY, HIGH_SCORE_KEY

GAME_OVER_BOARD = [
    [2, 4, 8, 16],
    [32, 64, 128, 256],
    [512, 1024, 2048, 4096],
    [8192, 16384, 32768, 65536],
]


class SkipNoopConfig(TestingConfig):
    SKIP_NOOP_MOVES = True


def count_tiles(board) -> int:
    return sum(1 for row in board for value in row if value)


@pytest.fixture
def client():
    flask_app = create_app(TestingConfig, rng=random.Random(42))
    with flask_app.test_client() as test_client:
        yield test_client


def set_board(client, board, high_score=None) -> None:
    with client.session_transaction() as sess:
        sess[GRID_KEY] = json.dumps(board)
        if high_score is not None:
            sess[HIGH_SCORE_KEY] = json.dumps(high_score)


def get_state(client):
    response = client.get("/state")
    assert response.status_code == 200
    return response.get_json()


def test_normalize_direction() -> None:
    assert normalize_direction("left") == "left"
    assert normalize_direction("ArrowUp") == "up"
    assert normalize_direction(" DOWN ") == "down"
    assert normalize_direction("diagonal") is None
    assert normalize_direction(None) is None


def test_tile_color_falls_back_for_large_tiles() -> None:
    assert tile_color(2) != tile_color(4096)
    assert tile_color(4096) == tile_color(8192)


def test_first_visit_starts_game_with_two_tiles(client) -> None:
    state = get_state(client)
    assert count_tiles(state["grid"]) == 2
    assert state["score"] == sum(sum(row) for row in state["grid"])
    assert state["game_over"] is False

    # 同一个 session 再次访问时棋盘不变
    assert get_state(client)["grid"] == state["grid"]


def test_index_renders_board(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert b"2048" in response.data


def test_move_merges_spawns_and_updates_high_score(client) -> None:
    board = [[0] * 4 for _ in range(4)]
    board[0][0] = 2
    board[0][1] = 2
    set_board(client, board)

    response = client.post("/move", data={"direction": "left"})
    assert response.status_code == 302

    state = get_state(client)
    assert state["grid"][0][0] == 4
    assert count_tiles(state["grid"]) == 2
    assert state["score"] == sum(sum(row) for row in state["grid"])
    assert state["high_score"] == state["score"]


def test_move_accepts_key_names(client) -> None:
    board = [[0] * 4 for _ in range(4)]
    board[3][3] = 2
    set_board(client, board)

    client.post("/move", data={"direction": "ArrowUp"})
    assert get_state(client)["grid"][0][3] == 2


def test_unknown_direction_is_ignored(client) -> None:
    board = [[0] * 4 for _ in range(4)]
    board[1][1] = 2
    set_board(client, board)

    response = client.post("/move", data={"direction": "sideways"})
    assert response.status_code == 302
    assert get_state(client)["grid"] == board


def test_high_score_is_not_lowered(client) -> None:
    board = [[0] * 4 for _ in range(4)]
    board[0][0] = 2
    set_board(client, board, high_score=1000)

    client.post("/move", data={"direction": "right"})
    assert get_state(client)["high_score"] == 1000


def test_noop_move_still_spawns_by_default(client) -> None:
    board = [[0] * 4 for _ in range(4)]
    board[0] = [2, 4, 8, 16]
    set_board(client, board)

    client.post("/move", data={"direction": "left"})
    assert count_tiles(get_state(client)["grid"]) == 5


def test_noop_move_skipped_when_configured() -> None:
    flask_app = create_app(SkipNoopConfig, rng=random.Random(1))
    board = [[0] * 4 for _ in range(4)]
    board[0] = [2, 4, 8, 16]
    with flask_app.test_client() as test_client:
        set_board(test_client, board)
        test_client.post("/move", data={"direction": "left"})
        assert get_state(test_client)["grid"] == board


def test_game_over_board_ignores_moves(client) -> None:
    set_board(client, GAME_OVER_BOARD)

    client.post("/move", data={"direction": "up"})
    state = get_state(client)
    assert state["grid"] == GAME_OVER_BOARD
    assert state["game_over"] is True


def test_reset_keeps_high_score_and_seeds_one_tile(client) -> None:
    set_board(client, GAME_OVER_BOARD, high_score=4096)

    response = client.post("/reset")
    assert response.status_code == 302

    state = get_state(client)
    assert count_tiles(state["grid"]) == 1
    assert state["high_score"] == 4096


def test_corrupt_saved_board_starts_new_game(client) -> None:
    with client.session_transaction() as sess:
        sess[GRID_KEY] = "{broken"

    state = get_state(client)
    assert count_tiles(state["grid"]) == 2
