import logging
import random
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, redirect, render_template, request, session, url_for

from config import Config
from game2048 import (
    DIRECTIONS,
    Board,
    board_score,
    get_max_tile,
    is_game_over,
    play_move,
    random_start_board,
)
from storage import clear_board, load_board, load_high_score, save_board, update_high_score

RNG_EXTENSION = "game2048_rng"

# 键盘按键名 -> 方向
KEY_DIRECTIONS = {
    "ArrowUp": "up",
    "ArrowRight": "right",
    "ArrowDown": "down",
    "ArrowLeft": "left",
}

# 每个数字对应的格子颜色
TILE_COLORS = {
    0: "#cdc1b4",
    2: "#fef3c7",
    4: "#fde68a",
    8: "#fdba74",
    16: "#fb923c",
    32: "#fca5a5",
    64: "#f87171",
    128: "#86efac",
    256: "#4ade80",
    512: "#93c5fd",
    1024: "#60a5fa",
    2048: "#c084fc",
}
DEFAULT_TILE_COLOR = "#3c3a32"


def normalize_direction(token: Optional[str]) -> Optional[str]:
    """把表单或按键传来的方向统一成 up/right/down/left，无法识别返回 None。"""
    if not token:
        return None
    token = KEY_DIRECTIONS.get(token, token).strip().lower()
    return token if token in DIRECTIONS else None


def tile_color(value: int) -> str:
    return TILE_COLORS.get(value, DEFAULT_TILE_COLOR)


def get_rng() -> Any:
    return current_app.extensions[RNG_EXTENSION]


def start_new_game(tiles: int) -> Board:
    """初始化一局新游戏并保存。"""
    board = random_start_board(get_rng(), tiles)
    save_board(session, board)
    current_app.logger.info("Started new game with %d tile(s)", tiles)
    return board


def get_board() -> Board:
    """读取当前棋盘，没有保存（或已损坏）时开新局。"""
    board = load_board(session)
    if board is None:
        board = start_new_game(current_app.config["START_TILES"])
    return board


def get_game_state() -> Dict[str, Any]:
    """获取当前游戏状态。"""
    board = get_board()
    return {
        "grid": board,
        "score": board_score(board),
        "high_score": load_high_score(session),
        "max_tile": get_max_tile(board),
        "game_over": is_game_over(board),
    }


def index():
    """游戏主页面。"""
    state = get_game_state()
    return render_template(
        "index.html",
        board=state["grid"],
        score=state["score"],
        high_score=state["high_score"],
        max_tile=state["max_tile"],
        game_over=state["game_over"],
        directions=DIRECTIONS,
        tile_color=tile_color,
    )


def state():
    """以 JSON 返回当前游戏状态。"""
    return jsonify(get_game_state())


def move():
    """处理移动操作。"""
    direction = normalize_direction(request.form.get("direction"))
    if direction is None:
        current_app.logger.debug("Ignoring unknown direction %r", request.form.get("direction"))
        return redirect(url_for("index"))

    board = get_board()
    if is_game_over(board):
        return redirect(url_for("index"))

    new_board, changed = play_move(
        board,
        direction,
        get_rng(),
        skip_noop=current_app.config["SKIP_NOOP_MOVES"],
    )
    score = board_score(new_board)
    save_board(session, new_board)
    update_high_score(session, score)
    current_app.logger.debug("Moved %s (changed=%s), score %d", direction, changed, score)

    if is_game_over(new_board):
        current_app.logger.info("Game over with score %d", score)

    return redirect(url_for("index"))


def reset():
    """重新开始一局游戏（保留最高分）。"""
    clear_board(session)
    start_new_game(current_app.config["RESET_TILES"])
    return redirect(url_for("index"))


def create_app(config_object: Any = None, rng: Any = None) -> Flask:
    """创建 Flask 应用；rng 为随机数来源，测试时可传入固定种子的 random.Random。"""
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_object or Config)
    flask_app.logger.setLevel(flask_app.config["LOG_LEVEL"])
    flask_app.extensions[RNG_EXTENSION] = rng if rng is not None else random.Random()

    flask_app.add_url_rule("/", "index", index)
    flask_app.add_url_rule("/state", "state", state)
    flask_app.add_url_rule("/move", "move", move, methods=["POST"])
    flask_app.add_url_rule("/reset", "reset", reset, methods=["POST"])
    return flask_app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.run(debug=True)
