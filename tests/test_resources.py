"""
资源模型单元测试
测试Worker/Machine及其组合的计时器与休息时间表

测试内容:
- 忙碌计时器的设置与到期
- 休息窗口判断（边界包含、跨午夜）
- 工人技能（不区分大小写）与可用性
- 设备不受休息窗口影响
- 状态标签
- 成本计算（Decimal精确）
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

import pytest

from factorysim.models.enums import ResourceState, IDLE_LABEL, ON_BREAK_LABEL
from factorysim.models.resource_model import (
    BreakSchedule,
    BreakWindow,
    BusyTimer,
    Machine,
    Schedulable,
    Worker,
)


DAY = datetime(2024, 1, 1)


def at(hour: int, minute: int = 0) -> datetime:
    """构造当天指定时刻"""
    return DAY.replace(hour=hour, minute=minute)


def create_worker(name: str = "Alice", rate: str = "25", skills=None) -> Worker:
    return Worker(name, Decimal(rate), skills if skills is not None else ["Assembly"])


def create_machine(name: str = "Station-1", machine_type: str = "Assembly") -> Machine:
    return Machine(name, machine_type, timedelta(minutes=30), Decimal("20"))


class TestBusyTimer:
    """忙碌计时器测试类"""

    def test_set_busy(self):
        """测试标记忙碌"""
        timer = BusyTimer()
        timer.set_busy(timedelta(minutes=30), at(8))

        assert timer.is_busy
        assert timer.busy_until == at(8, 30)

    def test_update_before_and_after_expiry(self):
        """测试到期前后刷新"""
        timer = BusyTimer()
        timer.set_busy(timedelta(minutes=30), at(8))

        assert timer.update(at(8, 29)) is False
        assert timer.is_busy

        assert timer.update(at(8, 30)) is True
        assert not timer.is_busy
        assert timer.busy_until is None

    def test_update_when_idle(self):
        """测试空闲时刷新不产生转换"""
        timer = BusyTimer()
        assert timer.update(at(9)) is False

    def test_remaining_minutes(self):
        """测试剩余分钟数"""
        timer = BusyTimer()
        timer.set_busy(timedelta(minutes=45), at(8))
        assert timer.remaining_minutes(at(8, 10)) == 35
        assert BusyTimer().remaining_minutes(at(8)) == 0


class TestBreakSchedule:
    """休息时间表测试类"""

    def test_default_windows(self):
        """测试默认休息时间表"""
        schedule = BreakSchedule()
        assert len(schedule.windows) == 3
        assert schedule.is_on_break(at(10, 5))
        assert schedule.is_on_break(at(12, 15))
        assert schedule.is_on_break(at(15, 10))
        assert not schedule.is_on_break(at(9, 0))
        assert not schedule.is_on_break(at(14, 0))

    def test_boundaries_inclusive(self):
        """测试窗口边界包含"""
        schedule = BreakSchedule()
        assert schedule.is_on_break(at(10, 0))
        assert schedule.is_on_break(at(10, 15))
        assert not schedule.is_on_break(at(10, 16))

    def test_ignores_date(self):
        """测试只按每日时刻比较"""
        schedule = BreakSchedule()
        assert schedule.is_on_break(datetime(2030, 6, 15, 12, 10))

    def test_window_across_midnight(self):
        """测试跨午夜窗口"""
        window = BreakWindow(time(23, 30), time(0, 30))
        assert window.contains(time(23, 45))
        assert window.contains(time(0, 15))
        assert not window.contains(time(1, 0))

    def test_empty_schedule(self):
        """测试无休息窗口"""
        assert not BreakSchedule([]).is_on_break(at(10, 5))


class TestWorker:
    """工人测试类"""

    def test_implements_protocol(self):
        """测试满足可调度协议"""
        assert isinstance(create_worker(), Schedulable)
        assert isinstance(create_machine(), Schedulable)

    def test_rate_converted_to_decimal(self):
        """测试时薪转换为Decimal"""
        worker = Worker("Bob", 30, ["Machining"])
        assert isinstance(worker.hourly_rate, Decimal)
        assert worker.hourly_rate == Decimal("30")

    def test_negative_rate_rejected(self):
        """测试负时薪被拒绝"""
        with pytest.raises(ValueError):
            Worker("Bob", Decimal("-1"))

    def test_has_skill_case_insensitive(self):
        """测试技能不区分大小写"""
        worker = create_worker(skills=["Quality Control"])
        assert worker.has_skill("quality control")
        assert worker.has_skill("QUALITY CONTROL")
        assert not worker.has_skill("Assembly")

    def test_add_and_remove_skill(self):
        """测试增删技能"""
        worker = create_worker(skills=["Assembly"])
        worker.add_skill("assembly")
        assert worker.skills == ["Assembly"]

        worker.add_skill("Packaging")
        assert worker.has_skill("packaging")

        assert worker.remove_skill("ASSEMBLY") is True
        assert not worker.has_skill("Assembly")
        assert worker.remove_skill("Welding") is False

    def test_available_when_idle(self):
        """测试空闲且不在休息时可用"""
        worker = create_worker()
        assert worker.is_available(at(9))
        assert worker.state(at(9)) == ResourceState.IDLE

    def test_not_available_on_break(self):
        """测试休息窗口内不可用"""
        worker = create_worker()
        assert not worker.is_available(at(10, 5))
        assert worker.state(at(10, 5)) == ResourceState.ON_BREAK

    def test_start_task(self):
        """测试开始任务"""
        worker = create_worker()
        worker.start_task("Assemble", timedelta(minutes=30), at(8))

        assert worker.is_busy
        assert worker.busy_until == at(8, 30)
        assert worker.current_task == "Assemble"
        assert not worker.is_available(at(8, 10))
        assert worker.state(at(8, 10)) == ResourceState.BUSY

    def test_task_completes_on_update(self):
        """测试任务到期后恢复空闲"""
        worker = create_worker()
        worker.start_task("Assemble", timedelta(minutes=30), at(8))

        worker.update_status(at(8, 30))

        assert not worker.is_busy
        assert worker.busy_until is None
        assert worker.current_task == IDLE_LABEL
        assert worker.current_status == IDLE_LABEL

    def test_break_does_not_preempt_task(self):
        """测试休息窗口不会打断进行中的任务"""
        worker = create_worker()
        worker.start_task("Machine Part", timedelta(minutes=30), at(9, 50))

        worker.update_status(at(10, 5))
        assert worker.is_busy
        assert worker.current_task == "Machine Part"

        worker.update_status(at(10, 20))
        assert not worker.is_busy
        assert worker.current_task == IDLE_LABEL

    def test_task_label_on_break_after_completion(self):
        """测试完工时处于休息窗口则标记为休息"""
        worker = create_worker()
        worker.start_task("Assemble", timedelta(minutes=30), at(9, 40))

        worker.update_status(at(10, 10))

        assert worker.current_task == ON_BREAK_LABEL
        assert worker.current_status == ON_BREAK_LABEL

    def test_status_label_busy(self):
        """测试忙碌状态标签"""
        worker = create_worker()
        worker.start_task("Assemble", timedelta(minutes=30), at(8))

        worker.update_status(at(8, 10))
        assert worker.current_status == "Busy (20m left)"
        assert worker.status_label(at(8, 25)) == "Busy (5m left)"

    def test_calculate_cost_exact(self):
        """测试人工成本精确计算"""
        worker = create_worker(rate="25")
        assert worker.calculate_cost(timedelta(minutes=30)) == Decimal("12.5")
        assert worker.calculate_cost(timedelta(minutes=45)) == Decimal("18.75")
        assert worker.calculate_cost(timedelta(0)) == Decimal(0)

    def test_identity_equality(self):
        """测试同名工人按对象区分"""
        a = create_worker("Same")
        b = create_worker("Same")
        assert a != b
        assert a == a


class TestMachine:
    """设备测试类"""

    def test_can_perform_case_insensitive(self):
        """测试设备类型不区分大小写"""
        machine = create_machine(machine_type="Quality Control")
        assert machine.can_perform("quality control")
        assert not machine.can_perform("Assembly")

    def test_ignores_break_windows(self):
        """测试设备不受休息窗口影响"""
        machine = create_machine()
        assert machine.is_available(at(10, 5))
        assert not machine.is_on_break(at(12, 10))

        machine.update_status(at(12, 10))
        assert machine.current_status == IDLE_LABEL

    def test_start_operation_default_duration(self):
        """测试使用标准加工时长开工"""
        machine = create_machine()
        machine.start_operation("Assemble", at(8))

        assert machine.busy_until == at(8, 30)
        assert machine.current_operation == "Assemble"

    def test_start_operation_custom_duration(self):
        """测试自定义时长开工"""
        machine = create_machine()
        machine.start_operation("Assemble", at(8), timedelta(minutes=50))

        assert machine.busy_until == at(8, 50)
        assert not machine.is_available(at(8, 49))

        machine.update_status(at(8, 50))
        assert machine.is_available(at(8, 50))
        assert machine.current_operation == IDLE_LABEL

    def test_operating_cost(self):
        """测试运行成本"""
        machine = create_machine()
        assert machine.calculate_operating_cost(timedelta(minutes=90)) == Decimal("30")

    def test_negative_processing_time_rejected(self):
        """测试负加工时长被拒绝"""
        with pytest.raises(ValueError):
            Machine("Bad", "Assembly", timedelta(minutes=-1), Decimal("1"))
