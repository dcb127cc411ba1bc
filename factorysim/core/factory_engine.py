"""
工厂引擎
调度与执行的核心控制器

功能:
- 资源管理：工人、设备、物料的增删
- 可执行性检查（仅供参考，不做预留）
- 工序执行：重新校验 → 选取资源 → 计算成本 → 扣减物料 → 标记忙碌
- 时间推进：刷新全部资源状态并检测工序完成
- 状态快照与效率统计
- 通过通知总线发布事件

设计要点:
- 资源选择采用确定性的"首个匹配"：按工人/设备列表的现有顺序，
  取第一个满足条件者；这只是平局规则，不是负载均衡或优化
- 物料与成本在开工时一次性扣除，不存在回滚路径
- 每个进行中的执行按工人记录（工序、设备、成本），完工事件据此携带完整信息
- 引擎是单线程同步的；若改为并发调用，"校验 → 选取 → 扣减 → 标记忙碌"
  必须作为一个原子单元执行
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from dataclasses import dataclass

from factorysim.core.clock import SimulationClock
from factorysim.core.material_ledger import MaterialLedger
from factorysim.core.notifications import NotificationBus
from factorysim.models.config_model import FactoryConfig
from factorysim.models.enums import NotificationType, SENTINEL_TASK_LABELS
from factorysim.models.event_model import OperationEvent, LowStockEvent, AlertEvent
from factorysim.models.material_model import Material
from factorysim.models.operation_model import Operation
from factorysim.models.resource_model import BreakSchedule, Worker, Machine
from factorysim.models.result_model import OperationResult, FactoryStatus
from factorysim.utils.money import format_currency
from factorysim.utils.statistics import calculate_efficiency


logger = logging.getLogger(__name__)


@dataclass
class ActiveExecution:
    """
    进行中的工序执行记录

    Attributes:
        operation: 工序
        worker: 执行工人
        machine: 使用设备
        cost: 开工时计入的总成本
        start_time: 开工时刻
        estimated_end_time: 预计完工时刻
    """

    operation: Operation
    worker: Worker
    machine: Machine
    cost: Decimal
    start_time: datetime
    estimated_end_time: datetime


class Factory:
    """
    工厂引擎

    负责协调工人、设备、物料与工序的执行
    """

    def __init__(
        self,
        config: Optional[FactoryConfig] = None,
        notifications: Optional[NotificationBus] = None
    ):
        """
        初始化工厂

        Args:
            config: 工厂配置，缺省使用默认配置
            notifications: 通知总线，缺省新建
        """
        self.config = config or FactoryConfig()
        self.clock = SimulationClock(
            self.config.start_time,
            self.config.work_day_start,
            self.config.work_day_end,
        )
        self.notifications = notifications or NotificationBus()

        self.workers: List[Worker] = []
        self.machines: List[Machine] = []
        self.materials = MaterialLedger(on_low_stock=self._publish_low_stock)

        # 累计统计
        self.operations_completed = 0
        self.operations_in_progress = 0
        self.total_cost = Decimal(0)

        # 进行中的执行（工人 -> 执行记录）
        self._active: Dict[Worker, ActiveExecution] = {}

    @property
    def current_time(self) -> datetime:
        return self.clock.current_time

    # ============ 资源管理 ============

    def create_worker(self, name: str, hourly_rate, skills: Optional[List[str]] = None) -> Worker:
        """
        按配置的休息时间表创建并添加工人

        Returns:
            新工人
        """
        worker = Worker(
            name,
            hourly_rate,
            list(skills or []),
            breaks=BreakSchedule(self.config.get_break_windows()),
        )
        self.add_worker(worker)
        return worker

    def add_worker(self, worker: Worker):
        """添加工人，重复添加同一对象不做任何事"""
        if worker is not None and worker not in self.workers:
            self.workers.append(worker)

    def add_machine(self, machine: Machine):
        """添加设备，重复添加同一对象不做任何事"""
        if machine is not None and machine not in self.machines:
            self.machines.append(machine)

    def add_material(self, material: Material):
        """添加物料，同名物料以最后一次为准"""
        if material is not None:
            self.materials.add(material)

    def remove_worker(self, name: str) -> bool:
        """
        按名称移除工人（第一个同名者）

        正在执行任务的工人被移除后，其工序不会再被报告完成，进行中计数同时减一

        Returns:
            是否找到并移除
        """
        worker = self.get_worker(name)
        if worker is None:
            return False
        self.workers.remove(worker)
        if self._active.pop(worker, None) is not None:
            self.operations_in_progress = max(0, self.operations_in_progress - 1)
            logger.warning("移除了正在执行任务的工人: %s", name)
        return True

    def remove_machine(self, name: str) -> bool:
        """按名称移除设备（第一个同名者）"""
        machine = self.get_machine(name)
        if machine is None:
            return False
        self.machines.remove(machine)
        return True

    def remove_material(self, name: str) -> bool:
        """按名称移除物料"""
        return self.materials.remove(name)

    def get_worker(self, name: str) -> Optional[Worker]:
        return next((w for w in self.workers if w.name == name), None)

    def get_machine(self, name: str) -> Optional[Machine]:
        return next((m for m in self.machines if m.name == name), None)

    def get_material(self, name: str) -> Optional[Material]:
        return self.materials.get(name)

    # ============ 工序执行 ============

    def _find_worker(self, operation: Operation) -> Optional[Worker]:
        now = self.current_time
        return next(
            (w for w in self.workers
             if w.has_skill(operation.required_skill) and w.is_available(now)),
            None
        )

    def _find_machine(self, operation: Operation) -> Optional[Machine]:
        now = self.current_time
        return next(
            (m for m in self.machines
             if m.can_perform(operation.required_machine_type) and m.is_available(now)),
            None
        )

    def can_execute_operation(self, operation: Operation) -> bool:
        """
        检查工序当前能否执行

        仅作参考，不预留任何资源

        Args:
            operation: 工序

        Returns:
            存在可用工人、可用设备且物料充足
        """
        return (
            self._find_worker(operation) is not None
            and self._find_machine(operation) is not None
            and operation.are_all_materials_available(self.materials)
        )

    def get_operation_blocking_reasons(self, operation: Operation) -> str:
        """
        列出工序无法执行的全部原因

        Args:
            operation: 工序

        Returns:
            以 "; " 连接的原因，可执行时为空字符串
        """
        reasons = []
        skill = operation.required_skill
        machine_type = operation.required_machine_type

        if self._find_worker(operation) is None:
            if any(w.has_skill(skill) for w in self.workers):
                reasons.append(f"All '{skill}' workers are busy or on break")
            else:
                reasons.append(f"No workers with '{skill}' skill")

        if self._find_machine(operation) is None:
            if any(m.can_perform(machine_type) for m in self.machines):
                reasons.append(f"All '{machine_type}' machines are busy")
            else:
                reasons.append(f"No '{machine_type}' machines available")

        missing = operation.get_missing_materials(self.materials)
        if missing:
            reasons.append(f"Insufficient materials: {', '.join(missing)}")

        return "; ".join(reasons)

    def execute_operation(self, operation: Operation) -> OperationResult:
        """
        执行工序

        不信任调用方之前的检查结果，重新校验后一次性提交：
        扣减物料、标记工人和设备忙碌、累计成本

        Args:
            operation: 工序

        Returns:
            执行结果，失败时 success=False 并附带原因
        """
        now = self.current_time
        worker = self._find_worker(operation)
        machine = self._find_machine(operation)

        if (
            worker is None
            or machine is None
            or not operation.are_all_materials_available(self.materials)
        ):
            reason = self.get_operation_blocking_reasons(operation)
            logger.debug("工序无法执行: %s (%s)", operation.name, reason)
            return OperationResult.failed(operation, reason)

        # 成本计算（物料成本需在扣减前计算）
        worker_cost = worker.calculate_cost(operation.duration)
        machine_cost = machine.calculate_operating_cost(operation.duration)
        material_cost = operation.calculate_material_cost(self.materials)
        total_cost = worker_cost + machine_cost + material_cost

        # 开工即扣减物料，扣减被拒绝则不提交
        if not self.materials.consume(operation.required_materials):
            reason = self.get_operation_blocking_reasons(operation) or "Material deduction refused"
            logger.warning("物料扣减失败，工序未开始: %s", operation.name)
            return OperationResult.failed(operation, reason)

        worker.start_task(operation.name, operation.duration, now)
        machine.start_operation(operation.name, now, operation.duration)

        self.total_cost += total_cost
        self.operations_in_progress += 1

        end_time = now + operation.duration
        self._active[worker] = ActiveExecution(
            operation=operation,
            worker=worker,
            machine=machine,
            cost=total_cost,
            start_time=now,
            estimated_end_time=end_time,
        )

        logger.info(
            "工序开始: %s (工人=%s, 设备=%s, 成本=%s)",
            operation.name, worker.name, machine.name, format_currency(total_cost)
        )
        self.notifications.publish(
            NotificationType.OPERATION_STARTED,
            OperationEvent(
                event_type=NotificationType.OPERATION_STARTED,
                operation=operation,
                worker=worker,
                machine=machine,
                cost=total_cost,
                timestamp=now,
            )
        )

        return OperationResult(
            operation=operation,
            success=True,
            assigned_worker=worker,
            assigned_machine=machine,
            cost=total_cost,
            start_time=now,
            estimated_end_time=end_time,
        )

    # ============ 时间推进 ============

    def advance_time(self, duration: timedelta):
        """
        推进仿真时间并刷新全部资源

        Args:
            duration: 推进时长
        """
        was_working_hours = self.clock.is_working_hours()
        self.clock.advance_time(duration)
        self.update_all_resources()

        is_working_hours = self.clock.is_working_hours()
        if is_working_hours != was_working_hours:
            self.raise_alert("Work day started" if is_working_hours else "Work day ended")

    def update_all_resources(self):
        """
        刷新全部工人和设备状态，并检测刚完成的工序

        完工判断: 刷新前忙碌、刷新后空闲，且该工人有引擎记录的执行；
        没有执行记录时（任务不是经由引擎启动的），退回按刷新前的任务标签判断，
        哨兵标签不算完工
        """
        now = self.current_time
        previously_busy = [(w, w.current_task) for w in self.workers if w.is_busy]

        for worker in self.workers:
            worker.update_status(now)
        for machine in self.machines:
            machine.update_status(now)

        for worker, task_label in previously_busy:
            if worker.is_busy:
                continue
            if worker not in self._active and task_label in SENTINEL_TASK_LABELS:
                continue
            self._complete(worker, task_label, now)

    def _complete(self, worker: Worker, task_label: str, now: datetime):
        execution = self._active.pop(worker, None)
        if execution is not None:
            operation = execution.operation
            machine = execution.machine
            cost = execution.cost
        else:
            # 任务不是经由引擎启动的，只能按名称重建
            operation = Operation(
                name=task_label or "Unnamed task",
                required_skill="",
                required_machine_type="",
                duration=timedelta(0),
            )
            machine = None
            cost = Decimal(0)

        self.operations_completed += 1
        self.operations_in_progress = max(0, self.operations_in_progress - 1)

        logger.info("工序完成: %s (工人=%s)", operation.name, worker.name)
        self.notifications.publish(
            NotificationType.OPERATION_COMPLETED,
            OperationEvent(
                event_type=NotificationType.OPERATION_COMPLETED,
                operation=operation,
                worker=worker,
                machine=machine,
                cost=cost,
                timestamp=now,
            )
        )

    # ============ 通知 ============

    def _publish_low_stock(self, material: Material):
        self.notifications.publish(
            NotificationType.MATERIAL_LOW_STOCK,
            LowStockEvent(
                material_name=material.name,
                quantity=material.quantity,
                minimum_stock=material.minimum_stock,
                timestamp=self.current_time,
            )
        )

    def raise_alert(self, message: str):
        """发布一般警报"""
        logger.info("警报: %s", message)
        self.notifications.publish(
            NotificationType.GENERAL_ALERT,
            AlertEvent(message=message, timestamp=self.current_time)
        )

    # ============ 统计 ============

    def get_active_executions(self) -> List[ActiveExecution]:
        """进行中的执行记录"""
        return list(self._active.values())

    def calculate_efficiency(self) -> float:
        """
        计算工厂效率

        Returns:
            忙碌资源数 / 资源总数 × 100；没有任何资源时为0
        """
        busy = sum(1 for w in self.workers if w.is_busy) + sum(1 for m in self.machines if m.is_busy)
        return calculate_efficiency(busy, len(self.workers) + len(self.machines))

    def get_status(self) -> FactoryStatus:
        """
        获取当前状态快照（无副作用）

        Returns:
            状态快照
        """
        now = self.current_time
        return FactoryStatus(
            timestamp=now,
            total_workers=len(self.workers),
            busy_workers=sum(1 for w in self.workers if w.is_busy),
            workers_on_break=sum(
                1 for w in self.workers if not w.is_busy and w.is_on_break(now)
            ),
            total_machines=len(self.machines),
            busy_machines=sum(1 for m in self.machines if m.is_busy),
            total_materials=len(self.materials),
            low_stock_materials=len(self.materials.low_stock()),
            operations_completed=self.operations_completed,
            operations_in_progress=self.operations_in_progress,
            total_cost=self.total_cost,
            efficiency=self.calculate_efficiency(),
        )
