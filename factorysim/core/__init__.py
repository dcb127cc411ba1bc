"""
核心仿真模块包
包含工厂调度与执行引擎的核心组件

模块说明:
- clock.py: 仿真时钟
- material_ledger.py: 物料台账
- notifications.py: 通知总线（四个通知通道）
- factory_engine.py: 工厂引擎（可执行性检查/原子执行/时间推进/完工检测）
- event_collector.py: 事件收集器（活动日志）
- simulation_driver.py: 仿真驱动器（SimPy周期步进与自动选择）
"""

from factorysim.core.clock import SimulationClock
from factorysim.core.material_ledger import MaterialLedger
from factorysim.core.notifications import NotificationBus
from factorysim.core.factory_engine import Factory, ActiveExecution
from factorysim.core.event_collector import EventCollector
from factorysim.core.simulation_driver import SimulationDriver

__all__ = [
    "SimulationClock",
    "MaterialLedger",
    "NotificationBus",
    "Factory",
    "ActiveExecution",
    "EventCollector",
    "SimulationDriver",
]
