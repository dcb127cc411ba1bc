"""
结果模型
定义引擎对外返回的结构化结果

模型:
- OperationResult: 工序执行结果（失败以数据形式返回，不抛异常）
- FactoryStatus: 工厂状态快照
- SimulationSummary: 驱动器运行汇总
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from dataclasses import dataclass, field

from factorysim.models.operation_model import Operation
from factorysim.models.resource_model import Worker, Machine
from factorysim.utils.money import format_currency


@dataclass
class OperationResult:
    """
    工序执行结果

    Attributes:
        operation: 工序
        success: 是否成功开工
        failure_reason: 失败原因（多项原因以 "; " 连接）
        assigned_worker: 分配的工人
        assigned_machine: 分配的设备
        cost: 本次执行总成本
        start_time: 开工时刻
        estimated_end_time: 预计完工时刻
    """

    operation: Operation
    success: bool = False
    failure_reason: str = ""
    assigned_worker: Optional[Worker] = None
    assigned_machine: Optional[Machine] = None
    cost: Decimal = field(default_factory=Decimal)
    start_time: Optional[datetime] = None
    estimated_end_time: Optional[datetime] = None

    @classmethod
    def failed(cls, operation: Operation, reason: str) -> "OperationResult":
        """构造失败结果"""
        return cls(operation=operation, success=False, failure_reason=reason)

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "operation": self.operation.name,
            "success": self.success,
            "failure_reason": self.failure_reason,
            "assigned_worker": self.assigned_worker.name if self.assigned_worker else None,
            "assigned_machine": self.assigned_machine.name if self.assigned_machine else None,
            "cost": str(self.cost),
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "estimated_end_time": (
                self.estimated_end_time.isoformat() if self.estimated_end_time else None
            ),
        }


@dataclass(frozen=True)
class FactoryStatus:
    """
    工厂状态快照

    纯投影，生成时不修改任何状态
    """

    timestamp: datetime
    total_workers: int
    busy_workers: int
    workers_on_break: int
    total_machines: int
    busy_machines: int
    total_materials: int
    low_stock_materials: int
    operations_completed: int
    operations_in_progress: int
    total_cost: Decimal
    efficiency: float = 0.0

    @property
    def idle_workers(self) -> int:
        """空闲工人数（不含休息中）"""
        return self.total_workers - self.busy_workers - self.workers_on_break

    @property
    def idle_machines(self) -> int:
        return self.total_machines - self.busy_machines

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "total_workers": self.total_workers,
            "busy_workers": self.busy_workers,
            "workers_on_break": self.workers_on_break,
            "idle_workers": self.idle_workers,
            "total_machines": self.total_machines,
            "busy_machines": self.busy_machines,
            "idle_machines": self.idle_machines,
            "total_materials": self.total_materials,
            "low_stock_materials": self.low_stock_materials,
            "operations_completed": self.operations_completed,
            "operations_in_progress": self.operations_in_progress,
            "total_cost": str(self.total_cost),
            "efficiency": self.efficiency,
        }


@dataclass
class SimulationSummary:
    """
    驱动器运行汇总

    Attributes:
        ticks: 已执行的步数
        start_time: 起始仿真时刻
        end_time: 结束仿真时刻
        operations_started: 驱动器成功启动的工序数
        operations_blocked: 驱动器尝试但被拒绝的次数
        final_status: 结束时的状态快照
        efficiency_samples: 每步结束后的效率采样（%）
        avg_efficiency: 平均效率（%）
        peak_efficiency: 峰值效率（%）
    """

    ticks: int
    start_time: datetime
    end_time: datetime
    operations_started: int
    operations_blocked: int
    final_status: FactoryStatus
    efficiency_samples: List[float] = field(default_factory=list)
    avg_efficiency: float = 0.0
    peak_efficiency: float = 0.0

    def get_kpi_summary(self) -> dict:
        """获取KPI摘要"""
        return {
            "time": {
                "ticks": self.ticks,
                "start": self.start_time.isoformat(),
                "end": self.end_time.isoformat(),
            },
            "production": {
                "operations_started": self.operations_started,
                "operations_blocked": self.operations_blocked,
                "operations_completed": self.final_status.operations_completed,
                "operations_in_progress": self.final_status.operations_in_progress,
            },
            "efficiency": {
                "avg": f"{self.avg_efficiency:.1f}%",
                "peak": f"{self.peak_efficiency:.1f}%",
            },
            "cost": {
                "total": format_currency(self.final_status.total_cost),
            },
        }
