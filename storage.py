"""棋盘与最高分的持久化（键值存储，默认用 Flask session）。"""

import json
import logging
from typing import MutableMapping, Optional

from game2048 import Board, is_valid_board

logger = logging.getLogger(__name__)

GRID_KEY = "grid"
HIGH_SCORE_KEY = "high_score"

Store = MutableMapping[str, str]


def load_board(store: Store) -> Optional[Board]:
    """读取保存的棋盘；没有或已损坏时返回 None。"""
    raw = store.get(GRID_KEY)
    if raw is None:
        return None

    try:
        board = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable saved board: %r", raw)
        return None

    if not is_valid_board(board):
        logger.warning("Discarding malformed saved board: %r", board)
        return None
    return board


def save_board(store: Store, board: Board) -> None:
    store[GRID_KEY] = json.dumps(board)


def clear_board(store: Store) -> None:
    """删除保存的棋盘，最高分保留。"""
    store.pop(GRID_KEY, None)


def load_high_score(store: Store) -> int:
    raw = store.get(HIGH_SCORE_KEY)
    if raw is None:
        return 0

    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable high score: %r", raw)
        return 0

    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        logger.warning("Discarding malformed high score: %r", value)
        return 0
    return value


def save_high_score(store: Store, value: int) -> None:
    store[HIGH_SCORE_KEY] = json.dumps(value)


def update_high_score(store: Store, score: int) -> int:
    """分数不低于最高分时写回，返回更新后的最高分。"""
    high_score = load_high_score(store)
    if score >= high_score:
        if score > high_score:
            logger.info("New high score: %d", score)
        save_high_score(store, score)
        return score
    return high_score
