"""
仿真时钟
持有并推进仿真当前时刻

功能:
- 时间只能向前推进
- 工作时段判断（仅供参考，不参与调度约束）
- 运行标记（由驱动器启停）
"""

from datetime import datetime, time, timedelta

from factorysim.utils.time_converter import format_clock


class SimulationClock:
    """
    仿真时钟

    Attributes:
        current_time: 当前仿真时刻
        is_running: 是否运行中
        work_day_start: 工作日开始时刻
        work_day_end: 工作日结束时刻
    """

    def __init__(
        self,
        start_time: datetime,
        work_day_start: time = time(8, 0),
        work_day_end: time = time(17, 0)
    ):
        self._current_time = start_time
        self.is_running = False
        self.work_day_start = work_day_start
        self.work_day_end = work_day_end

    @property
    def current_time(self) -> datetime:
        return self._current_time

    def advance_time(self, duration: timedelta):
        """
        推进仿真时间

        Args:
            duration: 推进时长（不能为负）

        Raises:
            ValueError: 时长为负时抛出
        """
        if duration < timedelta(0):
            raise ValueError("仿真时间只能向前推进")
        self._current_time = self._current_time + duration

    def is_working_hours(self) -> bool:
        """判断当前是否处于工作时段（边界包含）"""
        moment = self._current_time.time()
        return self.work_day_start <= moment <= self.work_day_end

    def formatted_time(self) -> str:
        return format_clock(self._current_time)

    def __str__(self) -> str:
        return f"SimulationClock({self.formatted_time()})"
