"""
事件收集器
订阅引擎的全部通知通道，记录事件并维护活动日志

功能:
- 收集工序开始/完成、低库存、警报事件
- 维护有容量上限的活动日志（超出时丢弃最早的条目）
- 事件筛选和查询
- 统计汇总
"""

from collections import deque
from decimal import Decimal
from typing import Any, Deque, Dict, List, Optional

from factorysim.core.notifications import NotificationBus
from factorysim.models.enums import NotificationType, get_notification_info
from factorysim.models.event_model import OperationEvent
from factorysim.utils.statistics import count_by_operation


class EventCollector:
    """
    事件收集器

    收集仿真过程中的所有通知事件
    提供事件查询和统计功能
    """

    def __init__(self, log_limit: int = 100, event_limit: Optional[int] = None):
        """
        初始化事件收集器

        Args:
            log_limit: 活动日志最多保留条数
            event_limit: 事件记录最多保留条数，超出时丢弃最早的事件；
                None为不限，长时间运行时事件列表会持续增长
        """
        self.events: Deque[Any] = deque(maxlen=event_limit)
        self.activity_log: Deque[str] = deque(maxlen=log_limit)
        self._bus: Optional[NotificationBus] = None

        # 统计计数器
        self.started_cost_total = Decimal(0)

    def attach(self, bus: NotificationBus):
        """订阅通知总线的全部通道"""
        self.detach()
        self._bus = bus
        for channel in NotificationType:
            bus.subscribe(channel, self.add_event)

    def detach(self):
        """取消订阅"""
        if self._bus is None:
            return
        for channel in NotificationType:
            self._bus.unsubscribe(channel, self.add_event)
        self._bus = None

    def add_event(self, event: Any):
        """
        添加事件

        Args:
            event: 通知事件负载（OperationEvent/LowStockEvent/AlertEvent）
        """
        self.events.append(event)

        if event.event_type == NotificationType.OPERATION_STARTED:
            self.started_cost_total += event.cost
            self.log(event.message)
        elif event.event_type == NotificationType.OPERATION_COMPLETED:
            self.log(event.message)
        else:
            icon = get_notification_info(event.event_type)["icon"]
            label = "LOW STOCK" if event.event_type == NotificationType.MATERIAL_LOW_STOCK else "ALERT"
            self.log(f"{icon} {label}: {event.message}")

    def log(self, message: str):
        """追加一条活动日志"""
        self.activity_log.append(message)

    def get_activity_log(self) -> List[str]:
        return list(self.activity_log)

    def clear_activity_log(self):
        """清空活动日志"""
        self.activity_log.clear()
        self.log("Activity log cleared")

    def get_all_events(self) -> List[Any]:
        """获取所有保留的事件"""
        return list(self.events)

    def get_events_by_type(self, event_type: NotificationType) -> List[Any]:
        """
        获取指定类型的事件

        Args:
            event_type: 通知类型

        Returns:
            该类型的所有事件
        """
        return [e for e in self.events if e.event_type == event_type]

    def get_events_by_worker(self, worker_name: str) -> List[OperationEvent]:
        """获取指定工人相关的工序事件"""
        return [
            e for e in self.events
            if isinstance(e, OperationEvent) and e.worker.name == worker_name
        ]

    def get_events_by_machine(self, machine_name: str) -> List[OperationEvent]:
        """获取指定设备相关的工序事件"""
        return [
            e for e in self.events
            if isinstance(e, OperationEvent)
            and e.machine is not None
            and e.machine.name == machine_name
        ]

    def get_event_count(self) -> int:
        """获取事件总数"""
        return len(self.events)

    def get_event_type_counts(self) -> Dict[str, int]:
        """
        获取各类型事件数量统计

        Returns:
            事件类型 -> 数量 映射
        """
        counts = {}
        for event_type in NotificationType:
            counts[event_type.value] = len(self.get_events_by_type(event_type))
        return counts

    def get_completed_operation_counts(self) -> Dict[str, int]:
        """各工序完成次数"""
        return count_by_operation([
            e.operation.name
            for e in self.get_events_by_type(NotificationType.OPERATION_COMPLETED)
        ])

    def clear(self):
        """清空所有事件"""
        self.events.clear()
        self.activity_log.clear()
        self.started_cost_total = Decimal(0)

    def get_summary(self) -> Dict[str, Any]:
        """
        获取事件汇总

        Returns:
            汇总信息字典
        """
        return {
            "total_events": len(self.events),
            "event_type_counts": self.get_event_type_counts(),
            "completed_by_operation": self.get_completed_operation_counts(),
            "started_cost_total": str(self.started_cost_total),
        }
