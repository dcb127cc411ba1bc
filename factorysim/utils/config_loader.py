"""
场景加载工具
从YAML文件加载工厂配置与场景，并构建工厂引擎

功能:
- 加载YAML文件
- 解析为场景模型（Pydantic校验）
- 构建已填充的工厂与工序目录
"""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple
import yaml

from factorysim.core.factory_engine import Factory
from factorysim.models.config_model import FactoryConfig
from factorysim.models.operation_model import Operation
from factorysim.models.scenario_model import ScenarioDefinition


logger = logging.getLogger(__name__)

DEFAULT_SCENARIO_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "config", "default_factory.yaml"
)


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    加载YAML文件

    Args:
        file_path: 文件路径

    Returns:
        配置字典（空文件返回空字典）
    """
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_scenario(file_path: Optional[str] = None) -> ScenarioDefinition:
    """
    加载场景定义

    Args:
        file_path: 场景文件路径，缺省使用内置默认场景

    Returns:
        场景定义

    Raises:
        FileNotFoundError: 指定的文件不存在
        pydantic.ValidationError: 内容不符合场景模型
    """
    path = file_path or DEFAULT_SCENARIO_PATH
    scenario = ScenarioDefinition(**load_yaml(path))
    logger.info(
        "已加载场景 '%s': %d 名工人, %d 台设备, %d 种物料, %d 个工序",
        scenario.name,
        len(scenario.workers),
        len(scenario.machines),
        len(scenario.materials),
        len(scenario.operations)
    )
    return scenario


def load_factory_config(file_path: Optional[str] = None) -> FactoryConfig:
    """
    加载工厂配置

    文件不存在或无法解析时回退为默认配置

    Args:
        file_path: 场景文件路径

    Returns:
        工厂配置
    """
    path = file_path or DEFAULT_SCENARIO_PATH
    if not os.path.exists(path):
        return FactoryConfig()
    try:
        data = load_yaml(path)
        return FactoryConfig(**(data.get("config") or {}))
    except (yaml.YAMLError, ValueError) as e:
        logger.warning("配置文件 %s 无法解析，使用默认配置: %s", path, e)
        return FactoryConfig()


def build_factory(scenario: ScenarioDefinition) -> Tuple[Factory, List[Operation]]:
    """
    根据场景构建工厂

    Args:
        scenario: 场景定义

    Returns:
        (工厂引擎, 工序目录)
    """
    factory = Factory(scenario.config)
    break_windows = scenario.config.get_break_windows()

    for spec in scenario.workers:
        factory.add_worker(spec.to_worker(list(break_windows)))
    for spec in scenario.machines:
        factory.add_machine(spec.to_machine())
    for spec in scenario.materials:
        factory.add_material(spec.to_material())

    operations = [spec.to_operation() for spec in scenario.operations]
    return factory, operations
