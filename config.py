"""
2048 网页游戏配置
所有参数都可以通过环境变量覆盖
"""

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    return int(value)


class Config:
    """默认配置"""

    SECRET_KEY = os.environ.get("GAME2048_SECRET_KEY", "change_this_to_a_random_secret_key")

    # 新游戏初始数字个数 / 重新开始时的数字个数
    START_TILES = _env_int("GAME2048_START_TILES", 2)
    RESET_TILES = _env_int("GAME2048_RESET_TILES", 1)

    # 移动没有改变棋盘时是否跳过生成新数字
    SKIP_NOOP_MOVES = _env_bool("GAME2048_SKIP_NOOP_MOVES", False)

    LOG_LEVEL = os.environ.get("GAME2048_LOG_LEVEL", "INFO")


class TestingConfig(Config):
    """测试配置"""

    TESTING = True
    SECRET_KEY = "testing"
    START_TILES = 2
    RESET_TILES = 1
    SKIP_NOOP_MOVES = False
    LOG_LEVEL = "DEBUG"
