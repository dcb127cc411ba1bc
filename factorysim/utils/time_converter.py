"""
时间转换工具
提供仿真时间、时长与时刻之间的换算

功能:
- 时长 → 精确小时数（Decimal，避免浮点误差）
- 时刻格式化
- 剩余时间计算
"""

from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP


MICROSECONDS_PER_HOUR = Decimal(3_600_000_000)
MICROSECONDS_PER_MINUTE = Decimal(60_000_000)


def duration_to_hours(duration: timedelta) -> Decimal:
    """
    将时长转换为精确小时数

    以微秒为单位做整数运算，再除以每小时微秒数，
    因此30分钟精确等于 Decimal("0.5")

    Args:
        duration: 时长

    Returns:
        小时数（Decimal）

    Example:
        >>> duration_to_hours(timedelta(minutes=30))
        Decimal('0.5')
    """
    micros = duration // timedelta(microseconds=1)
    return Decimal(micros) / MICROSECONDS_PER_HOUR


def duration_to_minutes(duration: timedelta) -> Decimal:
    """
    将时长转换为精确分钟数

    Args:
        duration: 时长

    Returns:
        分钟数（Decimal）
    """
    micros = duration // timedelta(microseconds=1)
    return Decimal(micros) / MICROSECONDS_PER_MINUTE


def remaining_minutes(until: datetime, now: datetime) -> int:
    """
    计算剩余整分钟数（四舍五入）

    Args:
        until: 结束时刻
        now: 当前时刻

    Returns:
        剩余分钟数，已过期返回0
    """
    if until <= now:
        return 0
    return int(duration_to_minutes(until - now).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_duration(duration: timedelta) -> str:
    """
    格式化时长

    Args:
        duration: 时长

    Returns:
        格式化字符串，如 "45 min" 或 "1h 30m"

    Example:
        >>> format_duration(timedelta(minutes=45))
        '45 min'
        >>> format_duration(timedelta(minutes=90))
        '1h 30m'
    """
    total_minutes = int(duration.total_seconds() // 60)
    if total_minutes < 60:
        return f"{total_minutes} min"
    hours, mins = divmod(total_minutes, 60)
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_clock(moment: datetime) -> str:
    """
    格式化仿真时钟显示

    Args:
        moment: 时刻

    Returns:
        如 "Oct 19, 08:00"
    """
    return moment.strftime("%b %d, %H:%M")


def format_short_time(moment: datetime) -> str:
    """格式化为 HH:MM"""
    return moment.strftime("%H:%M")
