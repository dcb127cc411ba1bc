"""
场景模型
定义YAML场景文件的结构（工人/设备/物料/工序目录）

模型:
- WorkerSpec / MachineSpec / MaterialSpec / OperationSpec: 单项定义
- ScenarioDefinition: 完整场景
"""

from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from factorysim.models.config_model import FactoryConfig
from factorysim.models.material_model import Material
from factorysim.models.operation_model import Operation
from factorysim.models.resource_model import BreakSchedule, BreakWindow, Machine, Worker


class WorkerSpec(BaseModel):
    """工人定义"""

    name: str = Field(description="工人姓名")
    hourly_rate: Decimal = Field(ge=0, description="时薪")
    skills: List[str] = Field(default=[], description="技能列表")

    def to_worker(self, break_windows: Optional[List[BreakWindow]] = None) -> Worker:
        breaks = BreakSchedule(break_windows) if break_windows is not None else BreakSchedule()
        return Worker(self.name, self.hourly_rate, list(self.skills), breaks=breaks)


class MachineSpec(BaseModel):
    """设备定义"""

    name: str = Field(description="设备名称")
    machine_type: str = Field(description="设备类型")
    processing_minutes: float = Field(ge=0, description="标准加工时长（分钟）")
    operating_cost_per_hour: Decimal = Field(ge=0, description="每小时运行成本")

    def to_machine(self) -> Machine:
        return Machine(
            self.name,
            self.machine_type,
            timedelta(minutes=self.processing_minutes),
            self.operating_cost_per_hour,
        )


class MaterialSpec(BaseModel):
    """物料定义"""

    name: str = Field(description="物料名称")
    quantity: int = Field(ge=0, description="初始库存")
    cost_per_unit: Decimal = Field(ge=0, description="单价")
    minimum_stock: int = Field(default=0, ge=0, description="最低库存阈值")

    def to_material(self) -> Material:
        return Material(self.name, self.quantity, self.cost_per_unit, self.minimum_stock)


class OperationSpec(BaseModel):
    """工序定义"""

    name: str = Field(description="工序名称")
    required_skill: str = Field(description="所需技能")
    required_machine_type: str = Field(description="所需设备类型")
    duration_minutes: float = Field(ge=0, description="工序时长（分钟）")
    materials: Dict[str, int] = Field(default={}, description="物料需求")
    priority: int = Field(default=1, description="优先级")
    description: str = Field(default="", description="描述")

    def to_operation(self) -> Operation:
        return Operation(
            name=self.name,
            required_skill=self.required_skill,
            required_machine_type=self.required_machine_type,
            duration=timedelta(minutes=self.duration_minutes),
            required_materials=dict(self.materials),
            priority=self.priority,
            description=self.description,
        )


class ScenarioDefinition(BaseModel):
    """
    场景定义

    Attributes:
        name: 场景名称
        config: 工厂配置
        workers: 工人列表
        machines: 设备列表
        materials: 物料列表
        operations: 工序目录
    """

    name: str = Field(default="Factory", description="场景名称")
    config: FactoryConfig = Field(default_factory=FactoryConfig, description="工厂配置")
    workers: List[WorkerSpec] = Field(default=[], description="工人列表")
    machines: List[MachineSpec] = Field(default=[], description="设备列表")
    materials: List[MaterialSpec] = Field(default=[], description="物料列表")
    operations: List[OperationSpec] = Field(default=[], description="工序目录")
