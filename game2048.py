import random
from typing import Any, List, Optional, Tuple

SIZE = 4  # 棋盘大小：4x4
Board = List[List[int]]
Row = List[int]
Position = Tuple[int, int]

DIRECTIONS = ("up", "right", "down", "left")

# 顺时针旋转多少次后，目标方向对齐到"左"
ROTATIONS = {"up": 3, "right": 2, "down": 1, "left": 0}

NEW_TILE_TWO_CHANCE = 0.9


def new_board() -> Board:
    """创建一个空棋盘。"""
    return [[0] * SIZE for _ in range(SIZE)]


def copy_board(board: Board) -> Board:
    """深拷贝棋盘，避免行对象共享。"""
    return [row[:] for row in board]


def rotate(board: Board) -> Board:
    """顺时针旋转 90 度：先转置，再把每一行反转。"""
    return [list(reversed(col)) for col in zip(*board)]


def slide(row: Row) -> Row:
    """
    把非 0 数字按原顺序挤到左边，右侧补 0。
    例如: [0, 2, 0, 4] -> [2, 4, 0, 0]
    """
    tiles = [x for x in row if x != 0]
    return tiles + [0] * (len(row) - len(tiles))


def combine(row: Row) -> Row:
    """
    向左挤压并合并一行。
    只从左到右扫描一遍，合并出的格子本轮不再参与合并：
    [2, 2, 2, 0] -> [4, 2, 0, 0]
    [0, 2, 0, 2] -> [4, 0, 0, 0]
    """
    new_row = slide(row)
    for i in range(len(new_row) - 1):
        if new_row[i] != 0 and new_row[i] == new_row[i + 1]:
            new_row[i] *= 2
            new_row[i + 1] = 0
    return slide(new_row)


def move(board: Board, direction: str) -> Board:
    """
    整盘向某个方向移动，返回新棋盘（不生成新数字）。
    先旋转到"向左"，逐行合并，再旋转回来。
    """
    if direction not in ROTATIONS:
        raise ValueError(f"Unknown direction: {direction!r}")

    turns = ROTATIONS[direction]
    grid = copy_board(board)
    for _ in range(turns):
        grid = rotate(grid)
    grid = [combine(row) for row in grid]
    for _ in range((4 - turns) % 4):
        grid = rotate(grid)
    return grid


def add_random_tile(board: Board, rng: Any = random) -> Optional[Position]:
    """
    在空格随机生成一个 2 或 4（直接修改传入的棋盘）
    返回生成的位置 (r, c)，如果棋盘已满返回 None
    """
    empty_cells = [
        (r, c)
        for r in range(SIZE)
        for c in range(SIZE)
        if board[r][c] == 0
    ]
    if not empty_cells:
        return None

    index = min(int(rng.random() * len(empty_cells)), len(empty_cells) - 1)
    r, c = empty_cells[index]
    board[r][c] = 2 if rng.random() < NEW_TILE_TWO_CHANCE else 4
    return r, c


def random_start_board(rng: Any = random, tiles: int = 2) -> Board:
    """新游戏初始棋盘：默认随机出现两个数字。"""
    board = new_board()
    for _ in range(tiles):
        add_random_tile(board, rng)
    return board


def play_move(
    board: Board,
    direction: str,
    rng: Any = random,
    skip_noop: bool = False,
) -> Tuple[Board, bool]:
    """
    执行一次完整的玩家操作：移动 + 生成新数字。
    返回 (新棋盘, 棋盘是否因移动而改变)。

    skip_noop=False 时即使移动没有改变棋盘也会生成新数字。
    """
    moved = move(board, direction)
    changed = moved != board
    if skip_noop and not changed:
        return copy_board(board), False
    add_random_tile(moved, rng)
    return moved, changed


def is_game_over(board: Board) -> bool:
    """没有空格，且上下左右相邻格子都不相等时游戏结束。"""
    for r in range(SIZE):
        for c in range(SIZE):
            value = board[r][c]
            if value == 0:
                return False
            # 相等关系是对称的，只看右边和下边即可
            if c + 1 < SIZE and board[r][c + 1] == value:
                return False
            if r + 1 < SIZE and board[r + 1][c] == value:
                return False
    return True


def board_score(board: Board) -> int:
    """分数为棋盘上所有数字之和。"""
    return sum(sum(row) for row in board)


def get_max_tile(board: Board) -> int:
    """取得当前最大的数字。"""
    return max(max(row) for row in board)


def is_valid_board(value: Any) -> bool:
    """检查反序列化得到的数据是否是合法棋盘。"""
    if not isinstance(value, list) or len(value) != SIZE:
        return False
    for row in value:
        if not isinstance(row, list) or len(row) != SIZE:
            return False
        for cell in row:
            if isinstance(cell, bool) or not isinstance(cell, int):
                return False
            if cell != 0 and (cell < 2 or cell & (cell - 1)):
                return False
    return True
