"""
通知事件模型
定义引擎通过通知通道推送的事件负载

模型:
- OperationEvent: 工序开始/完成事件
- LowStockEvent: 物料库存不足事件
- AlertEvent: 一般警报事件
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from dataclasses import dataclass, field

from factorysim.models.enums import NotificationType
from factorysim.models.operation_model import Operation
from factorysim.models.resource_model import Worker, Machine
from factorysim.utils.money import format_currency
from factorysim.utils.time_converter import format_short_time


@dataclass
class OperationEvent:
    """
    工序事件

    Attributes:
        event_type: OPERATION_STARTED 或 OPERATION_COMPLETED
        operation: 工序
        worker: 执行工人
        machine: 使用设备
        cost: 本次执行的总成本（开工时已计入）
        timestamp: 事件发生的仿真时刻
    """

    event_type: NotificationType
    operation: Operation
    worker: Worker
    machine: Optional[Machine]
    cost: Decimal
    timestamp: datetime

    @property
    def message(self) -> str:
        stamp = format_short_time(self.timestamp)
        if self.event_type == NotificationType.OPERATION_STARTED:
            machine_name = self.machine.name if self.machine else "-"
            return (
                f"[{stamp}] Started '{self.operation.name}' - Worker: {self.worker.name}, "
                f"Machine: {machine_name}, Cost: {format_currency(self.cost)}"
            )
        return f"[{stamp}] Completed '{self.operation.name}' by {self.worker.name}"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "operation": self.operation.name,
            "worker": self.worker.name,
            "machine": self.machine.name if self.machine else None,
            "cost": str(self.cost),
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class LowStockEvent:
    """
    库存不足事件

    Attributes:
        material_name: 物料名称
        quantity: 剩余库存
        minimum_stock: 最低库存阈值
        timestamp: 事件发生的仿真时刻
    """

    material_name: str
    quantity: int
    minimum_stock: int
    timestamp: datetime
    event_type: NotificationType = field(default=NotificationType.MATERIAL_LOW_STOCK)

    @property
    def message(self) -> str:
        return f"{self.material_name} is low on stock ({self.quantity} units remaining)"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "material": self.material_name,
            "quantity": self.quantity,
            "minimum_stock": self.minimum_stock,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class AlertEvent:
    """一般警报事件"""

    message: str
    timestamp: datetime
    event_type: NotificationType = field(default=NotificationType.GENERAL_ALERT)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
