"""
数据模型包
包含系统中使用的所有数据模型

模块说明:
- enums.py: 枚举定义（ResourceState, NotificationType等）
- resource_model.py: 工人/设备模型及忙碌计时器、休息时间表
- material_model.py: 物料模型
- operation_model.py: 工序模型（Pydantic，不可变）
- config_model.py: 全局配置模型
- event_model.py: 通知事件模型
- result_model.py: 执行结果与状态快照
- scenario_model.py: 场景文件模型
"""

from factorysim.models.enums import (
    ResourceState,
    ResourceType,
    NotificationType,
    SelectionPolicy,
    IDLE_LABEL,
    ON_BREAK_LABEL,
    NOTIFICATION_TYPE_META,
)
from factorysim.models.resource_model import (
    Schedulable,
    BreakWindow,
    BreakSchedule,
    BusyTimer,
    Worker,
    Machine,
    default_break_windows,
)
from factorysim.models.material_model import Material
from factorysim.models.operation_model import Operation
from factorysim.models.config_model import FactoryConfig, BreakWindowConfig
from factorysim.models.event_model import OperationEvent, LowStockEvent, AlertEvent
from factorysim.models.result_model import (
    OperationResult,
    FactoryStatus,
    SimulationSummary,
)
from factorysim.models.scenario_model import (
    WorkerSpec,
    MachineSpec,
    MaterialSpec,
    OperationSpec,
    ScenarioDefinition,
)

__all__ = [
    # 枚举
    "ResourceState",
    "ResourceType",
    "NotificationType",
    "SelectionPolicy",
    "IDLE_LABEL",
    "ON_BREAK_LABEL",
    "NOTIFICATION_TYPE_META",
    # 资源
    "Schedulable",
    "BreakWindow",
    "BreakSchedule",
    "BusyTimer",
    "Worker",
    "Machine",
    "default_break_windows",
    # 物料与工序
    "Material",
    "Operation",
    # 配置
    "FactoryConfig",
    "BreakWindowConfig",
    # 事件
    "OperationEvent",
    "LowStockEvent",
    "AlertEvent",
    # 结果
    "OperationResult",
    "FactoryStatus",
    "SimulationSummary",
    # 场景
    "WorkerSpec",
    "MachineSpec",
    "MaterialSpec",
    "OperationSpec",
    "ScenarioDefinition",
]
