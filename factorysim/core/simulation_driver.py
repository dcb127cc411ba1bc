"""
仿真驱动器
周期性推进工厂时间并自动选择工序执行

功能:
- 单步推进（step）：推进一个步长后自动执行若干可执行工序
- 连续运行（run）：以SimPy进程驱动若干步
- 自动选择策略：随机（numpy随机数发生器，可设种子）或按优先级
- 每步采样工厂效率，运行结束后汇总

设计要点:
- SimPy环境的时间单位为分钟，只用来调度步进；
  工厂自身的时钟仍由 Factory.advance_time 推进
- 选出的工序逐个提交给引擎，前一个工序占用资源后，
  后续工序可能被引擎拒绝，拒绝次数单独统计
"""

import logging
from typing import Generator, Iterable, List, Optional
import numpy as np
import simpy

from factorysim.core.event_collector import EventCollector
from factorysim.core.factory_engine import Factory
from factorysim.models.config_model import FactoryConfig
from factorysim.models.enums import SelectionPolicy
from factorysim.models.material_model import Material
from factorysim.models.operation_model import Operation
from factorysim.models.result_model import OperationResult, SimulationSummary
from factorysim.utils.statistics import summarize_efficiency


logger = logging.getLogger(__name__)


class SimulationDriver:
    """
    仿真驱动器

    只通过 advance_time / can_execute_operation / execute_operation
    与工厂引擎交互
    """

    def __init__(
        self,
        factory: Factory,
        operations: Iterable[Operation],
        config: Optional[FactoryConfig] = None,
        collector: Optional[EventCollector] = None
    ):
        """
        初始化驱动器

        Args:
            factory: 工厂引擎
            operations: 可供自动选择的工序目录
            config: 驱动配置，缺省使用工厂配置
            collector: 事件收集器，缺省新建并订阅工厂通知
        """
        self.factory = factory
        self.operations: List[Operation] = list(operations)
        self.config = config or factory.config
        self.rng = np.random.default_rng(self.config.random_seed)

        self.collector = collector or EventCollector(
            self.config.activity_log_limit,
            self.config.event_history_limit
        )
        self.collector.attach(factory.notifications)

        # 运行统计
        self.ticks = 0
        self.operations_started = 0
        self.operations_blocked = 0
        self.efficiency_samples: List[float] = []
        self._start_time = factory.current_time

    @property
    def is_running(self) -> bool:
        return self.factory.clock.is_running

    def start(self):
        """开始仿真"""
        self.factory.clock.is_running = True
        self.collector.log("Simulation started")

    def stop(self):
        """停止仿真"""
        self.factory.clock.is_running = False
        self.collector.log("Simulation stopped")

    def restock_low_stock(self, amount: int = 50) -> Optional[Material]:
        """
        为第一个低库存物料补货

        Args:
            amount: 补货数量

        Returns:
            被补货的物料，没有低库存物料时返回None
        """
        low = self.factory.materials.low_stock()
        if not low:
            return None
        material = low[0]
        material.add_quantity(amount)
        self.collector.log(f"Restocked {material.name} (+{amount} units)")
        return material

    def select_operations(self) -> List[Operation]:
        """
        按策略选出本步要尝试执行的工序

        Returns:
            最多 max_operations_per_tick 个当前可执行的工序
        """
        executable = [op for op in self.operations if self.factory.can_execute_operation(op)]
        if not executable:
            return []

        if self.config.selection_policy == SelectionPolicy.PRIORITY:
            # 稳定排序：优先级相同时保持目录顺序
            ordered = sorted(executable, key=lambda op: -op.priority)
        else:
            order = self.rng.permutation(len(executable))
            ordered = [executable[i] for i in order]

        return ordered[:self.config.max_operations_per_tick]

    def try_execute_automatic_operations(self) -> List[OperationResult]:
        """
        自动执行选出的工序

        Returns:
            每个尝试的执行结果
        """
        results = []
        for operation in self.select_operations():
            result = self.factory.execute_operation(operation)
            if result.success:
                self.operations_started += 1
            else:
                self.operations_blocked += 1
                self.collector.log(f"Cannot execute {operation.name}: {result.failure_reason}")
            results.append(result)
        return results

    def step(self) -> List[OperationResult]:
        """
        单步推进

        推进一个步长，再自动执行工序，最后采样效率

        Returns:
            本步的执行结果
        """
        self.factory.advance_time(self.config.tick_duration)
        self.ticks += 1
        results = self.try_execute_automatic_operations()
        self.efficiency_samples.append(self.factory.calculate_efficiency())
        logger.debug(
            "第 %d 步完成: %s, 启动 %d 个工序",
            self.ticks,
            self.factory.clock.formatted_time(),
            sum(1 for r in results if r.success)
        )
        return results

    def _tick_process(self, env: simpy.Environment, ticks: int) -> Generator:
        for _ in range(ticks):
            yield env.timeout(self.config.tick_minutes)
            self.step()

    def run(self, ticks: Optional[int] = None, minutes: Optional[int] = None) -> SimulationSummary:
        """
        连续运行

        Args:
            ticks: 运行步数
            minutes: 运行分钟数（按步长取整，与ticks二选一）

        Returns:
            运行汇总

        Raises:
            ValueError: ticks与minutes都未给出或同时给出
        """
        if (ticks is None) == (minutes is None):
            raise ValueError("ticks 与 minutes 必须且只能指定一个")
        if minutes is not None:
            ticks = minutes // self.config.tick_minutes
        if ticks < 0:
            raise ValueError("运行步数不能为负数")

        env = simpy.Environment()
        self.start()
        env.process(self._tick_process(env, ticks))
        try:
            env.run()
        finally:
            self.stop()

        logger.info(
            "仿真结束: %d 步, 启动 %d, 拒绝 %d",
            self.ticks, self.operations_started, self.operations_blocked
        )
        return self.summary()

    def summary(self) -> SimulationSummary:
        """生成运行汇总"""
        stats = summarize_efficiency(self.efficiency_samples)
        return SimulationSummary(
            ticks=self.ticks,
            start_time=self._start_time,
            end_time=self.factory.current_time,
            operations_started=self.operations_started,
            operations_blocked=self.operations_blocked,
            final_status=self.factory.get_status(),
            efficiency_samples=list(self.efficiency_samples),
            avg_efficiency=stats["avg"],
            peak_efficiency=stats["peak"],
        )
