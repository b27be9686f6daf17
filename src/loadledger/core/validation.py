"""输入形状校验 -- UUID 形状判断与增量解析"""

import re
from typing import Any

from .config import MAX_ABS_DELTA, UNDO_DELTA
from .errors import ExecutionError

# RFC 4122 版本 1-5，变体位 8/9/a/b
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# 十进制数字面量：可选符号、可选小数部分、可选指数
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


def is_uuid(value: Any) -> bool:
    """判断是否为规范 UUID 字符串"""
    return isinstance(value, str) and _UUID_RE.match(value) is not None


def parse_delta(raw: Any) -> int:
    """将原始增量解析为整数

    接受 int、整数值 float、以及值为整数的 ASCII 十进制字符串（"7"、"2.0"、"1e3"）；
    bool、None、下划线分隔与非 ASCII 数字拒绝。

    Raises:
        ExecutionError: CONFLICT，无法解析为整数
    """
    if raw is None or isinstance(raw, bool):
        raise ExecutionError.conflict("delta must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise ExecutionError.conflict("delta must be an integer")
    if isinstance(raw, str):
        text = raw.strip()
        # int()/float() 还接受 "1_000"、全角与其他 Unicode 数字，先按 ASCII 十进制过滤
        if _DECIMAL_RE.fullmatch(text) is None:
            raise ExecutionError.conflict("delta must be an integer")
        number = float(text)
        if number.is_integer():
            return int(number)
    raise ExecutionError.conflict("delta must be an integer")


def check_delta_bounds(delta: int) -> None:
    """合法集合为 {-1} ∪ [1, MAX_ABS_DELTA]

    Raises:
        ExecutionError: CONFLICT，增量越界
    """
    if delta == 0:
        raise ExecutionError.conflict("delta cannot be 0")
    if delta < UNDO_DELTA:
        raise ExecutionError.conflict("negative delta not allowed (except -1)")
    if abs(delta) > MAX_ABS_DELTA:
        raise ExecutionError.conflict("delta too large")
