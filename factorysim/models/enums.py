"""
枚举定义
包含系统中使用的所有枚举类型

枚举类:
- ResourceState: 资源状态（空闲/忙碌/休息）
- ResourceType: 资源类型
- NotificationType: 通知通道类型
- SelectionPolicy: 驱动器自动选择工序的策略
"""

from enum import Enum


class ResourceState(str, Enum):
    """
    资源状态枚举

    休息状态是推导出来的，只在资源不忙碌时才会判断

    Values:
        IDLE: 空闲
        BUSY: 忙碌
        ON_BREAK: 休息中
    """
    IDLE = "idle"
    BUSY = "busy"
    ON_BREAK = "on_break"


class ResourceType(str, Enum):
    """
    资源类型枚举

    Values:
        WORKER: 工人
        MACHINE: 设备
    """
    WORKER = "WORKER"
    MACHINE = "MACHINE"


class NotificationType(str, Enum):
    """
    通知通道枚举

    Values:
        OPERATION_STARTED: 工序开始
        OPERATION_COMPLETED: 工序完成
        MATERIAL_LOW_STOCK: 物料库存不足
        GENERAL_ALERT: 一般警报
    """
    OPERATION_STARTED = "operation_started"
    OPERATION_COMPLETED = "operation_completed"
    MATERIAL_LOW_STOCK = "material_low_stock"
    GENERAL_ALERT = "general_alert"


class SelectionPolicy(str, Enum):
    """
    自动选择策略枚举

    Values:
        RANDOM: 在可执行工序中随机选择
        PRIORITY: 按优先级数值从大到小选择
    """
    RANDOM = "random"
    PRIORITY = "priority"


# 状态标签（任务标签的哨兵值）
IDLE_LABEL = "Idle"
ON_BREAK_LABEL = "On Break"

SENTINEL_TASK_LABELS = frozenset({IDLE_LABEL, ON_BREAK_LABEL})


# ============ 通知类型元数据 ============

NOTIFICATION_TYPE_META = {
    NotificationType.OPERATION_STARTED: {
        "zh": "工序开始",
        "en": "Operation Started",
        "icon": "▶️",
    },
    NotificationType.OPERATION_COMPLETED: {
        "zh": "工序完成",
        "en": "Operation Completed",
        "icon": "✅",
    },
    NotificationType.MATERIAL_LOW_STOCK: {
        "zh": "库存不足",
        "en": "Low Stock",
        "icon": "⚠️",
    },
    NotificationType.GENERAL_ALERT: {
        "zh": "警报",
        "en": "Alert",
        "icon": "🔔",
    },
}


def get_notification_info(notification_type: NotificationType) -> dict:
    """
    获取通知类型的详细信息

    Args:
        notification_type: 通知类型枚举值

    Returns:
        包含中英文名称、图标的字典
    """
    return NOTIFICATION_TYPE_META.get(notification_type, {
        "zh": "未知",
        "en": "Unknown",
        "icon": "❓",
    })
