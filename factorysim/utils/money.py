"""
金额计算工具
所有金额均使用Decimal定点数，禁止浮点运算

功能:
- 数值 → Decimal 转换
- 按时长计费
- 金额格式化
"""

from datetime import timedelta
from decimal import Decimal
from typing import Union

from factorysim.utils.time_converter import duration_to_hours


CENT = Decimal("0.01")

MoneyLike = Union[Decimal, int, str, float]


def to_decimal(value: MoneyLike) -> Decimal:
    """
    转换为Decimal

    浮点数先转为字符串再转换，避免引入二进制误差（2.1 → Decimal("2.1")）

    Args:
        value: 数值

    Returns:
        Decimal金额
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def cost_for_duration(duration: timedelta, hourly_rate: Decimal) -> Decimal:
    """
    计算按小时计费的成本

    Args:
        duration: 时长
        hourly_rate: 每小时费率

    Returns:
        成本 = 小时数 × 费率
    """
    return duration_to_hours(duration) * hourly_rate


def format_currency(amount: Decimal) -> str:
    """
    格式化金额（保留两位小数）

    Example:
        >>> format_currency(Decimal("12.5"))
        '$12.50'
    """
    return f"${amount.quantize(CENT):,}"
