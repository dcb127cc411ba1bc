"""
全局配置模型
定义工厂仿真的配置参数

配置项:
- 仿真起始时刻与工作日时段
- 工人休息时间表
- 驱动器步长、每步自动执行上限、选择策略、随机种子
- 活动日志容量
"""

from datetime import datetime, time, timedelta
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from factorysim.models.enums import SelectionPolicy
from factorysim.models.resource_model import BreakWindow


def _today_at_eight() -> datetime:
    return datetime.combine(datetime.today().date(), time(8, 0))


class BreakWindowConfig(BaseModel):
    """休息窗口配置（HH:MM）"""

    start: time = Field(description="开始时刻")
    end: time = Field(description="结束时刻")

    def to_window(self) -> BreakWindow:
        return BreakWindow(self.start, self.end)


def _default_breaks() -> List[BreakWindowConfig]:
    return [
        BreakWindowConfig(start=time(10, 0), end=time(10, 15)),
        BreakWindowConfig(start=time(12, 0), end=time(12, 30)),
        BreakWindowConfig(start=time(15, 0), end=time(15, 15)),
    ]


class FactoryConfig(BaseModel):
    """
    工厂配置模型

    Attributes:
        start_time: 仿真起始时刻（默认当天08:00）
        work_day_start: 工作日开始时刻
        work_day_end: 工作日结束时刻
        break_windows: 工人休息时间表
        tick_minutes: 驱动器每步推进的分钟数
        max_operations_per_tick: 每步最多自动执行的工序数
        selection_policy: 自动选择策略（random/priority）
        random_seed: 随机种子（None为随机）
        activity_log_limit: 活动日志最多保留条数
        event_history_limit: 事件记录最多保留条数（None为不限）
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "start_time": "2024-01-01T08:00:00",
                "work_day_start": "08:00",
                "work_day_end": "17:00",
                "break_windows": [
                    {"start": "10:00", "end": "10:15"},
                    {"start": "12:00", "end": "12:30"},
                    {"start": "15:00", "end": "15:15"}
                ],
                "tick_minutes": 15,
                "max_operations_per_tick": 3,
                "selection_policy": "random",
                "random_seed": 42,
                "activity_log_limit": 100,
                "event_history_limit": 5000
            }
        }
    )

    start_time: datetime = Field(
        default_factory=_today_at_eight,
        description="仿真起始时刻"
    )
    work_day_start: time = Field(
        default=time(8, 0),
        description="工作日开始时刻"
    )
    work_day_end: time = Field(
        default=time(17, 0),
        description="工作日结束时刻"
    )
    break_windows: List[BreakWindowConfig] = Field(
        default_factory=_default_breaks,
        description="工人休息时间表"
    )

    # 驱动器配置
    tick_minutes: int = Field(
        default=15,
        ge=1,
        description="每步推进的分钟数"
    )
    max_operations_per_tick: int = Field(
        default=3,
        ge=0,
        description="每步最多自动执行的工序数"
    )
    selection_policy: SelectionPolicy = Field(
        default=SelectionPolicy.RANDOM,
        description="自动选择策略"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="随机种子（用于复现结果，None为随机）"
    )

    activity_log_limit: int = Field(
        default=100,
        ge=1,
        description="活动日志最多保留条数"
    )
    event_history_limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="事件记录最多保留条数（超出时丢弃最早的事件，None为不限）"
    )

    @computed_field
    @property
    def tick_duration(self) -> timedelta:
        """每步推进的时长"""
        return timedelta(minutes=self.tick_minutes)

    @computed_field
    @property
    def work_day_hours(self) -> float:
        """工作日时长（小时）"""
        start = datetime.combine(datetime.min.date(), self.work_day_start)
        end = datetime.combine(datetime.min.date(), self.work_day_end)
        return max(0.0, (end - start).total_seconds() / 3600)

    def get_break_windows(self) -> List[BreakWindow]:
        """转换为休息窗口列表（每次返回新对象）"""
        return [w.to_window() for w in self.break_windows]

    def validate_config(self) -> tuple:
        """
        验证配置有效性

        Returns:
            (是否有效, 错误列表, 警告列表)
        """
        errors = []
        warnings = []

        if self.work_day_end <= self.work_day_start:
            errors.append("工作日结束时刻必须晚于开始时刻")

        for window in self.break_windows:
            if window.start == window.end:
                warnings.append(f"休息窗口 {window.start:%H:%M} 起止相同")
            elif window.start < window.end and not (
                self.work_day_start <= window.start and window.end <= self.work_day_end
            ):
                warnings.append(
                    f"休息窗口 {window.start:%H:%M}-{window.end:%H:%M} 不在工作时段内"
                )

        if self.tick_minutes > 60:
            warnings.append(f"步长 {self.tick_minutes} 分钟可能跳过较短的工序")

        if self.max_operations_per_tick == 0:
            warnings.append("每步自动执行上限为0，驱动器不会启动任何工序")

        return len(errors) == 0, errors, warnings
