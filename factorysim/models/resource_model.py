"""
资源模型
定义工人与设备两类可调度资源

功能:
- 忙碌计时器（BusyTimer）：忙碌标记与结束时刻
- 休息时间表（BreakSchedule）：按每日时刻判断是否处于休息窗口
- 工人（Worker）：技能、时薪、当前任务
- 设备（Machine）：设备类型、标准加工时长、运行成本、当前工序

设计要点:
- 工人和设备不共享基类，而是各自组合BusyTimer/BreakSchedule，
  并共同满足Schedulable协议
- 休息窗口只影响新任务的分配资格，不会打断进行中的任务
- 设备不受休息窗口约束
"""

from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Protocol, runtime_checkable
from dataclasses import dataclass, field

from factorysim.models.enums import (
    ResourceState,
    ResourceType,
    IDLE_LABEL,
    ON_BREAK_LABEL,
)
from factorysim.utils.money import to_decimal, cost_for_duration
from factorysim.utils.time_converter import remaining_minutes


@runtime_checkable
class Schedulable(Protocol):
    """
    可调度资源协议

    工人和设备都实现该协议，引擎只通过这些方法操作资源
    """

    name: str

    @property
    def is_busy(self) -> bool: ...

    def is_available(self, now: datetime) -> bool: ...

    def set_busy(self, duration: timedelta, now: datetime) -> None: ...

    def update_status(self, now: datetime) -> None: ...

    def status_label(self, now: datetime) -> str: ...


@dataclass
class BreakWindow:
    """
    休息窗口

    按每日时刻比较（忽略日期），起止时刻都包含在内；
    起始晚于结束时视为跨越午夜

    Attributes:
        start: 开始时刻
        end: 结束时刻
    """

    start: time
    end: time

    def contains(self, moment: time) -> bool:
        """
        判断时刻是否落在窗口内

        Args:
            moment: 每日时刻

        Returns:
            是否在窗口内
        """
        if self.start <= self.end:
            return self.start <= moment <= self.end
        return moment >= self.start or moment <= self.end

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


def default_break_windows() -> List[BreakWindow]:
    """
    默认休息时间表

    Returns:
        上午茶歇、午餐、下午茶歇三个窗口
    """
    return [
        BreakWindow(time(10, 0), time(10, 15)),
        BreakWindow(time(12, 0), time(12, 30)),
        BreakWindow(time(15, 0), time(15, 15)),
    ]


@dataclass
class BreakSchedule:
    """休息时间表"""

    windows: List[BreakWindow] = field(default_factory=default_break_windows)

    def is_on_break(self, now: datetime) -> bool:
        """判断当前时刻是否处于任一休息窗口"""
        moment = now.time()
        return any(w.contains(moment) for w in self.windows)


@dataclass
class BusyTimer:
    """
    忙碌计时器

    不变式: is_busy 为 True 时 busy_until 一定有值；
    恢复空闲时 busy_until 同时清空

    Attributes:
        is_busy: 是否忙碌
        busy_until: 忙碌结束时刻
    """

    is_busy: bool = False
    busy_until: Optional[datetime] = None

    def set_busy(self, duration: timedelta, now: datetime):
        """
        标记为忙碌

        调用方需事先确认资源可用，这里不做检查

        Args:
            duration: 忙碌时长
            now: 当前时刻
        """
        self.is_busy = True
        self.busy_until = now + duration

    def update(self, now: datetime) -> bool:
        """
        按当前时刻刷新状态

        Args:
            now: 当前时刻

        Returns:
            本次刷新是否从忙碌转为空闲
        """
        if self.is_busy and self.busy_until is not None and now >= self.busy_until:
            self.is_busy = False
            self.busy_until = None
            return True
        return False

    def remaining_minutes(self, now: datetime) -> int:
        """剩余忙碌分钟数（空闲时为0）"""
        if not self.is_busy or self.busy_until is None:
            return 0
        return remaining_minutes(self.busy_until, now)

    def reset(self):
        """重置为空闲"""
        self.is_busy = False
        self.busy_until = None


def _status_label(timer: BusyTimer, on_break: bool, now: datetime) -> str:
    if timer.is_busy and timer.busy_until is not None:
        return f"Busy ({timer.remaining_minutes(now)}m left)"
    if on_break:
        return ON_BREAK_LABEL
    return IDLE_LABEL


@dataclass(eq=False)
class Worker:
    """
    工人模型

    Attributes:
        name: 工人姓名
        hourly_rate: 时薪（Decimal）
        skills: 技能列表（比较时不区分大小写）
        breaks: 休息时间表
        timer: 忙碌计时器
        current_task: 当前任务标签，空闲时为 "Idle"/"On Break"
        current_status: 最近一次 update_status 计算的状态标签

    Example:
        >>> worker = Worker("Alice Johnson", Decimal("25"), ["Assembly"])
        >>> worker.has_skill("assembly")
        True
    """

    name: str
    hourly_rate: Decimal
    skills: List[str] = field(default_factory=list)
    breaks: BreakSchedule = field(default_factory=BreakSchedule)
    timer: BusyTimer = field(default_factory=BusyTimer)
    current_task: str = field(default=IDLE_LABEL)
    current_status: str = field(default=IDLE_LABEL)

    def __post_init__(self):
        self.hourly_rate = to_decimal(self.hourly_rate)
        if self.hourly_rate < 0:
            raise ValueError(f"工人 '{self.name}' 时薪不能为负数")
        self.skills = list(self.skills)

    resource_type = ResourceType.WORKER

    @property
    def is_busy(self) -> bool:
        return self.timer.is_busy

    @property
    def busy_until(self) -> Optional[datetime]:
        return self.timer.busy_until

    def is_on_break(self, now: datetime) -> bool:
        """判断当前是否处于休息窗口"""
        return self.breaks.is_on_break(now)

    def is_available(self, now: datetime) -> bool:
        """
        判断能否接受新任务

        Returns:
            不忙碌且不在休息窗口内
        """
        return not self.is_busy and not self.is_on_break(now)

    def set_busy(self, duration: timedelta, now: datetime):
        self.timer.set_busy(duration, now)

    def update_status(self, now: datetime):
        """
        刷新状态

        忙碌到期则恢复空闲，并把任务标签重置为哨兵值

        Args:
            now: 当前时刻
        """
        self.timer.update(now)
        if not self.is_busy:
            self.current_task = ON_BREAK_LABEL if self.is_on_break(now) else IDLE_LABEL
        self.current_status = self.status_label(now)

    def status_label(self, now: datetime) -> str:
        """状态标签，如 "Busy (15m left)"、"On Break"、"Idle" """
        return _status_label(self.timer, not self.is_busy and self.is_on_break(now), now)

    def state(self, now: datetime) -> ResourceState:
        """当前资源状态"""
        if self.is_busy:
            return ResourceState.BUSY
        if self.is_on_break(now):
            return ResourceState.ON_BREAK
        return ResourceState.IDLE

    def has_skill(self, skill: str) -> bool:
        """判断是否具备技能（不区分大小写）"""
        target = skill.casefold()
        return any(s.casefold() == target for s in self.skills)

    def add_skill(self, skill: str):
        """添加技能，已存在则忽略"""
        if not self.has_skill(skill):
            self.skills.append(skill)

    def remove_skill(self, skill: str) -> bool:
        """
        移除技能（不区分大小写，移除所有匹配项）

        Returns:
            是否有技能被移除
        """
        target = skill.casefold()
        kept = [s for s in self.skills if s.casefold() != target]
        removed = len(kept) != len(self.skills)
        self.skills = kept
        return removed

    def start_task(self, task_name: str, duration: timedelta, now: datetime):
        """
        开始执行任务

        Args:
            task_name: 任务名称
            duration: 任务时长
            now: 当前时刻
        """
        self.set_busy(duration, now)
        self.current_task = task_name
        self.current_status = self.status_label(now)

    def calculate_cost(self, duration: timedelta) -> Decimal:
        """人工成本 = 小时数 × 时薪"""
        return cost_for_duration(duration, self.hourly_rate)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "resource_type": self.resource_type.value,
            "hourly_rate": str(self.hourly_rate),
            "skills": list(self.skills),
            "is_busy": self.is_busy,
            "busy_until": self.busy_until.isoformat() if self.busy_until else None,
            "current_task": self.current_task,
            "current_status": self.current_status,
        }

    def __str__(self) -> str:
        return f"Worker({self.name}, task={self.current_task})"


@dataclass(eq=False)
class Machine:
    """
    设备模型

    设备没有休息时间表，只要不忙碌即可用

    Attributes:
        name: 设备名称
        machine_type: 设备类型标签（比较时不区分大小写）
        processing_time: 标准加工时长
        operating_cost_per_hour: 每小时运行成本（Decimal）
        timer: 忙碌计时器
        current_operation: 当前工序标签，空闲时为 "Idle"
        current_status: 最近一次 update_status 计算的状态标签
    """

    name: str
    machine_type: str
    processing_time: timedelta
    operating_cost_per_hour: Decimal
    timer: BusyTimer = field(default_factory=BusyTimer)
    current_operation: str = field(default=IDLE_LABEL)
    current_status: str = field(default=IDLE_LABEL)

    def __post_init__(self):
        self.operating_cost_per_hour = to_decimal(self.operating_cost_per_hour)
        if self.operating_cost_per_hour < 0:
            raise ValueError(f"设备 '{self.name}' 运行成本不能为负数")
        if self.processing_time < timedelta(0):
            raise ValueError(f"设备 '{self.name}' 加工时长不能为负数")

    resource_type = ResourceType.MACHINE

    @property
    def is_busy(self) -> bool:
        return self.timer.is_busy

    @property
    def busy_until(self) -> Optional[datetime]:
        return self.timer.busy_until

    def is_on_break(self, now: datetime) -> bool:
        return False

    def is_available(self, now: datetime) -> bool:
        """设备不休息，不忙碌即可用"""
        return not self.is_busy

    def set_busy(self, duration: timedelta, now: datetime):
        self.timer.set_busy(duration, now)

    def update_status(self, now: datetime):
        self.timer.update(now)
        if not self.is_busy:
            self.current_operation = IDLE_LABEL
        self.current_status = self.status_label(now)

    def status_label(self, now: datetime) -> str:
        return _status_label(self.timer, False, now)

    def state(self, now: datetime) -> ResourceState:
        return ResourceState.BUSY if self.is_busy else ResourceState.IDLE

    def can_perform(self, machine_type: str) -> bool:
        """判断设备类型是否匹配（不区分大小写）"""
        return self.machine_type.casefold() == machine_type.casefold()

    def start_operation(
        self,
        operation_name: str,
        now: datetime,
        duration: Optional[timedelta] = None
    ):
        """
        开始执行工序

        Args:
            operation_name: 工序名称
            now: 当前时刻
            duration: 自定义时长，缺省使用设备的标准加工时长
        """
        self.set_busy(duration if duration is not None else self.processing_time, now)
        self.current_operation = operation_name
        self.current_status = self.status_label(now)

    def calculate_operating_cost(self, duration: timedelta) -> Decimal:
        """运行成本 = 小时数 × 每小时运行成本"""
        return cost_for_duration(duration, self.operating_cost_per_hour)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "resource_type": self.resource_type.value,
            "machine_type": self.machine_type,
            "processing_minutes": self.processing_time.total_seconds() / 60,
            "operating_cost_per_hour": str(self.operating_cost_per_hour),
            "is_busy": self.is_busy,
            "busy_until": self.busy_until.isoformat() if self.busy_until else None,
            "current_operation": self.current_operation,
            "current_status": self.current_status,
        }

    def __str__(self) -> str:
        return f"Machine({self.name}, type={self.machine_type})"
