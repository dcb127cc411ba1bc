"""
KPI统计计算工具
提供效率与工序次数的统计分析功能

功能:
- 效率计算（忙碌资源占比）
- 效率采样序列汇总
- 工序次数统计
"""

from typing import Dict, List, Sequence
import numpy as np


def calculate_efficiency(busy_resources: int, total_resources: int) -> float:
    """
    计算效率百分比

    Args:
        busy_resources: 忙碌资源数
        total_resources: 资源总数

    Returns:
        效率（0-100），资源总数为0时返回0
    """
    if total_resources <= 0:
        return 0.0
    return busy_resources / total_resources * 100


def summarize_efficiency(samples: Sequence[float]) -> Dict[str, float]:
    """
    汇总效率采样

    Args:
        samples: 每步采样的效率（%）

    Returns:
        包含 avg / peak / min / std 的字典，无采样时全部为0
    """
    if len(samples) == 0:
        return {"avg": 0.0, "peak": 0.0, "min": 0.0, "std": 0.0}

    data = np.asarray(samples, dtype=float)
    return {
        "avg": float(np.mean(data)),
        "peak": float(np.max(data)),
        "min": float(np.min(data)),
        "std": float(np.std(data)),
    }


def count_by_operation(operation_names: List[str]) -> Dict[str, int]:
    """
    统计各工序出现次数

    Args:
        operation_names: 工序名称列表

    Returns:
        工序名 -> 次数（按次数降序）
    """
    if not operation_names:
        return {}
    names, counts = np.unique(np.asarray(operation_names, dtype=object), return_counts=True)
    pairs = sorted(zip(names.tolist(), counts.tolist()), key=lambda p: (-p[1], p[0]))
    return {name: int(count) for name, count in pairs}
