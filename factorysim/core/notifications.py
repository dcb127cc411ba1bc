"""
通知总线
引擎把状态变化推送到四个通知通道，由外部订阅者消费

通道:
- OPERATION_STARTED: 工序开始
- OPERATION_COMPLETED: 工序完成
- MATERIAL_LOW_STOCK: 物料库存不足
- GENERAL_ALERT: 一般警报

设计要点:
- 状态变更与展示刷新解耦，引擎只负责发布
- 单个订阅者抛出异常只记录日志，不影响引擎和其他订阅者
"""

import logging
from typing import Any, Callable, Dict, List

from factorysim.models.enums import NotificationType


logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class NotificationBus:
    """
    通知总线

    每个通道维护一个按订阅顺序调用的处理函数列表
    """

    def __init__(self):
        self._handlers: Dict[NotificationType, List[Handler]] = {
            channel: [] for channel in NotificationType
        }

    def subscribe(self, channel: NotificationType, handler: Handler):
        """
        订阅通道，重复订阅同一处理函数会被忽略

        Args:
            channel: 通知通道
            handler: 处理函数，接收事件负载
        """
        handlers = self._handlers[channel]
        if handler not in handlers:
            handlers.append(handler)

    def subscribe_all(self, handler: Handler):
        """订阅全部通道"""
        for channel in NotificationType:
            self.subscribe(channel, handler)

    def unsubscribe(self, channel: NotificationType, handler: Handler) -> bool:
        """
        取消订阅

        Returns:
            是否找到并移除了该处理函数
        """
        handlers = self._handlers[channel]
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def publish(self, channel: NotificationType, payload: Any):
        """
        发布事件

        Args:
            channel: 通知通道
            payload: 事件负载
        """
        for handler in list(self._handlers[channel]):
            try:
                handler(payload)
            except Exception:
                logger.exception("通知处理函数执行失败 (channel=%s)", channel.value)

    def handler_count(self, channel: NotificationType) -> int:
        return len(self._handlers[channel])
