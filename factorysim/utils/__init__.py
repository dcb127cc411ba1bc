"""
工具函数包
提供各种辅助功能

模块说明:
- time_converter.py: 时间与时长换算
- money.py: Decimal金额计算
- statistics.py: 效率统计
- validators.py: 场景与工序目录验证（依赖引擎，需单独导入）
- config_loader.py: YAML场景加载（依赖引擎，需单独导入）
"""

from factorysim.utils.time_converter import (
    duration_to_hours,
    duration_to_minutes,
    remaining_minutes,
    format_duration,
    format_clock,
    format_short_time,
)

from factorysim.utils.money import (
    to_decimal,
    cost_for_duration,
    format_currency,
)

from factorysim.utils.statistics import (
    calculate_efficiency,
    summarize_efficiency,
    count_by_operation,
)

__all__ = [
    # 时间换算
    "duration_to_hours",
    "duration_to_minutes",
    "remaining_minutes",
    "format_duration",
    "format_clock",
    "format_short_time",
    # 金额
    "to_decimal",
    "cost_for_duration",
    "format_currency",
    # 统计
    "calculate_efficiency",
    "summarize_efficiency",
    "count_by_operation",
]
