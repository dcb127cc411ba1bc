"""
工序模型
定义可重复使用的工序配方（不可变值对象）

功能:
- 所需技能、设备类型、时长、物料需求、优先级、描述
- 物料可用性检查
- 物料成本计算
- 缺料诊断
"""

from datetime import timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, List, Mapping
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from factorysim.models.material_model import Material
from factorysim.utils.time_converter import format_duration


class Operation(BaseModel):
    """
    工序模型

    创建后不可修改；一个工序可以被执行任意多次

    Attributes:
        name: 工序名称
        required_skill: 工人所需技能
        required_machine_type: 所需设备类型
        duration: 工序时长
        required_materials: 物料需求（物料名 -> 正整数数量）
        priority: 优先级（数值越大优先级越高）
        description: 描述
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Machine Steel Part",
                "required_skill": "Machining",
                "required_machine_type": "Machining",
                "duration": "PT45M",
                "required_materials": {"Steel Rod": 2, "Screws": 2},
                "priority": 2,
                "description": "Machine a steel rod into a precision part",
            }
        },
    )

    name: str = Field(
        min_length=1,
        description="工序名称"
    )
    required_skill: str = Field(
        description="工人所需技能"
    )
    required_machine_type: str = Field(
        description="所需设备类型"
    )
    duration: timedelta = Field(
        description="工序时长"
    )
    required_materials: Mapping[str, int] = Field(
        default_factory=dict,
        validate_default=True,
        description="物料需求（物料名 -> 数量）"
    )
    priority: int = Field(
        default=1,
        description="优先级（数值越大优先级越高）"
    )
    description: str = Field(
        default="",
        description="工序描述"
    )

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("工序时长不能为负数")
        return value

    @field_validator("required_materials")
    @classmethod
    def _check_materials(cls, value: Mapping[str, int]) -> Mapping[str, int]:
        for material_name, quantity in value.items():
            if quantity <= 0:
                raise ValueError(
                    f"物料 '{material_name}' 的需求数量必须大于0，当前为 {quantity}"
                )
        # 只读视图，创建后无法再修改需求
        return MappingProxyType(dict(value))

    @field_serializer("required_materials")
    def _dump_materials(self, value: Mapping[str, int]) -> Dict[str, int]:
        return dict(value)

    def get_material_requirement(self, material_name: str) -> int:
        """获取指定物料的需求数量，不需要则返回0"""
        return self.required_materials.get(material_name, 0)

    def with_material(self, material_name: str, quantity: int) -> "Operation":
        """
        返回增加（或覆盖）一项物料需求后的新工序

        Args:
            material_name: 物料名称
            quantity: 需求数量（必须大于0）

        Returns:
            新的工序对象
        """
        materials = dict(self.required_materials)
        materials[material_name] = quantity
        return self._replace(required_materials=materials)

    def without_material(self, material_name: str) -> "Operation":
        """返回移除一项物料需求后的新工序"""
        materials = {
            k: v for k, v in self.required_materials.items() if k != material_name
        }
        return self._replace(required_materials=materials)

    def clone(self) -> "Operation":
        """复制工序（物料需求字典独立）"""
        return self._replace(required_materials=dict(self.required_materials))

    def _replace(self, **changes) -> "Operation":
        data = self.model_dump()
        data.update(changes)
        return Operation(**data)

    def are_all_materials_available(self, ledger: Mapping[str, Material]) -> bool:
        """
        检查所有物料是否充足

        没有物料需求的工序总是满足

        Args:
            ledger: 物料台账（物料名 -> 物料）

        Returns:
            是否全部满足
        """
        for material_name, quantity in self.required_materials.items():
            material = ledger.get(material_name)
            if material is None or not material.is_available(quantity):
                return False
        return True

    def calculate_material_cost(self, ledger: Mapping[str, Material]) -> Decimal:
        """
        计算物料成本

        台账中不存在的物料不计成本，只有在可用性确认后结果才有意义

        Args:
            ledger: 物料台账

        Returns:
            Σ 数量 × 单价
        """
        total = Decimal(0)
        for material_name, quantity in self.required_materials.items():
            material = ledger.get(material_name)
            if material is not None:
                total += material.calculate_cost(quantity)
        return total

    def get_missing_materials(self, ledger: Mapping[str, Material]) -> List[str]:
        """
        缺料诊断

        区分"台账中没有该物料"与"数量不足"两种情况

        Args:
            ledger: 物料台账

        Returns:
            诊断信息列表，全部满足时为空
        """
        missing = []
        for material_name, quantity in self.required_materials.items():
            material = ledger.get(material_name)
            if material is None:
                missing.append(f"{material_name}: Not available")
            elif not material.is_available(quantity):
                shortfall = material.get_shortfall(quantity)
                missing.append(
                    f"{material_name}: Need {shortfall} more "
                    f"(have {material.quantity}, need {quantity})"
                )
        return missing

    def requirements_summary(self) -> str:
        """需求摘要，用于日志"""
        return (
            f"Skill: {self.required_skill} | Machine: {self.required_machine_type} "
            f"| Duration: {format_duration(self.duration)}"
        )

    def __str__(self) -> str:
        return f"{self.name} ({format_duration(self.duration)})"
