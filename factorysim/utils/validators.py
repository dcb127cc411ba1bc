"""
数据验证工具
提供场景与工序目录的验证功能

功能:
- 工序目录验证（技能/设备类型/物料是否有对应资源）
- 场景定义验证（名称唯一性、配置有效性）
"""

from typing import List, Set, Tuple

from factorysim.core.factory_engine import Factory
from factorysim.models.operation_model import Operation
from factorysim.models.scenario_model import ScenarioDefinition


def _duplicates(names: List[str]) -> Set[str]:
    seen: Set[str] = set()
    dups: Set[str] = set()
    for name in names:
        if name in seen:
            dups.add(name)
        seen.add(name)
    return dups


def validate_operation_catalog(
    operations: List[Operation],
    factory: Factory
) -> Tuple[bool, List[str], List[str]]:
    """
    验证工序目录能否在工厂中执行

    检查内容:
    - 工序名称唯一性
    - 是否有工人具备所需技能
    - 是否有对应类型的设备
    - 所需物料是否在台账中

    Args:
        operations: 工序目录
        factory: 工厂引擎

    Returns:
        (是否有效, 错误列表, 警告列表)
    """
    errors = []
    warnings = []

    for name in sorted(_duplicates([op.name for op in operations])):
        errors.append(f"重复的工序名称: {name}")

    for op in operations:
        if not any(w.has_skill(op.required_skill) for w in factory.workers):
            warnings.append(f"工序'{op.name}'需要的技能'{op.required_skill}'没有工人具备")
        if not any(m.can_perform(op.required_machine_type) for m in factory.machines):
            warnings.append(f"工序'{op.name}'需要的设备类型'{op.required_machine_type}'不存在")
        for material_name in op.required_materials:
            if material_name not in factory.materials:
                warnings.append(f"工序'{op.name}'需要的物料'{material_name}'不在台账中")

    return len(errors) == 0, errors, warnings


def validate_scenario(scenario: ScenarioDefinition) -> Tuple[bool, List[str], List[str]]:
    """
    验证场景定义

    检查内容:
    - 配置有效性
    - 工人/设备/物料/工序名称唯一性

    Args:
        scenario: 场景定义

    Returns:
        (是否有效, 错误列表, 警告列表)
    """
    valid, errors, warnings = scenario.config.validate_config()
    errors = list(errors)
    warnings = list(warnings)

    groups = {
        "工人": [w.name for w in scenario.workers],
        "设备": [m.name for m in scenario.machines],
        "工序": [o.name for o in scenario.operations],
    }
    for label, names in groups.items():
        for name in sorted(_duplicates(names)):
            errors.append(f"重复的{label}名称: {name}")

    # 物料同名时以最后一次为准，只给出警告
    for name in sorted(_duplicates([m.name for m in scenario.materials])):
        warnings.append(f"重复的物料名称: {name}（以最后一次定义为准）")

    if not scenario.workers:
        warnings.append("场景中没有工人")
    if not scenario.machines:
        warnings.append("场景中没有设备")

    return len(errors) == 0, errors, warnings
