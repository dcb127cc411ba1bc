"""
仿真驱动器单元测试

测试内容:
- 按优先级选择工序
- 随机选择（固定种子可复现）
- 单步推进与连续运行
- 补货与活动日志
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from factorysim.core.factory_engine import Factory
from factorysim.core.simulation_driver import SimulationDriver
from factorysim.models.config_model import FactoryConfig
from factorysim.models.enums import SelectionPolicy
from factorysim.models.material_model import Material
from factorysim.models.operation_model import Operation
from factorysim.models.resource_model import Machine


DAY = datetime(2024, 1, 1)


def create_config(**overrides) -> FactoryConfig:
    data = dict(start_time=DAY.replace(hour=9), random_seed=7)
    data.update(overrides)
    return FactoryConfig(**data)


def create_operation(name: str, skill: str = "Assembly", minutes: int = 30, priority: int = 1) -> Operation:
    return Operation(
        name=name,
        required_skill=skill,
        required_machine_type=skill,
        duration=timedelta(minutes=minutes),
        priority=priority,
    )


def create_factory(config: FactoryConfig, skills=("Assembly",)) -> Factory:
    """每种技能一名工人、一台设备"""
    factory = Factory(config)
    for i, skill in enumerate(skills):
        factory.create_worker(f"W{i}", 20, [skill])
        factory.add_machine(Machine(f"M{i}", skill, timedelta(minutes=30), Decimal("10")))
    return factory


def create_catalog():
    return [
        create_operation("Low", priority=1),
        create_operation("High", priority=5),
        create_operation("Medium", priority=3),
    ]


class TestSelection:
    """工序选择测试类"""

    def test_priority_order(self):
        """测试按优先级从高到低选择"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY)
        driver = SimulationDriver(create_factory(config), create_catalog())

        names = [op.name for op in driver.select_operations()]
        assert names == ["High", "Medium", "Low"]

    def test_priority_ties_keep_catalog_order(self):
        """测试优先级相同时保持目录顺序"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY)
        catalog = [create_operation("A", priority=2), create_operation("B", priority=2)]
        driver = SimulationDriver(create_factory(config), catalog)

        assert [op.name for op in driver.select_operations()] == ["A", "B"]

    def test_limit_per_tick(self):
        """测试每步选择数量上限"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY, max_operations_per_tick=2)
        driver = SimulationDriver(create_factory(config), create_catalog())

        assert [op.name for op in driver.select_operations()] == ["High", "Medium"]

    def test_zero_limit_selects_nothing(self):
        """测试上限为0时不选择任何工序"""
        config = create_config(max_operations_per_tick=0)
        driver = SimulationDriver(create_factory(config), create_catalog())
        assert driver.select_operations() == []

    def test_only_executable_selected(self):
        """测试只选择当前可执行的工序"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY)
        catalog = create_catalog() + [create_operation("Weld", skill="Welding", priority=9)]
        driver = SimulationDriver(create_factory(config), catalog)

        assert "Weld" not in [op.name for op in driver.select_operations()]

    def test_random_reproducible_with_seed(self):
        """测试相同种子得到相同的选择顺序"""
        first = SimulationDriver(create_factory(create_config(random_seed=3)), create_catalog())
        second = SimulationDriver(create_factory(create_config(random_seed=3)), create_catalog())

        for _ in range(5):
            assert (
                [op.name for op in first.select_operations()]
                == [op.name for op in second.select_operations()]
            )

    def test_random_selects_each_executable_once(self):
        """测试随机选择不重复"""
        driver = SimulationDriver(create_factory(create_config()), create_catalog())
        names = [op.name for op in driver.select_operations()]
        assert sorted(names) == ["High", "Low", "Medium"]


class TestExecution:
    """自动执行测试类"""

    def test_later_selections_blocked(self):
        """测试同一步中后续工序因资源被占用而被拒绝"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY)
        driver = SimulationDriver(create_factory(config), create_catalog())

        results = driver.try_execute_automatic_operations()

        assert [r.success for r in results] == [True, False, False]
        assert results[0].operation.name == "High"
        assert driver.operations_started == 1
        assert driver.operations_blocked == 2
        assert any(
            line.startswith("Cannot execute Medium:")
            for line in driver.collector.get_activity_log()
        )

    def test_step(self):
        """测试单步推进"""
        config = create_config(selection_policy=SelectionPolicy.PRIORITY)
        factory = create_factory(config, skills=("Assembly", "Machining"))
        catalog = [create_operation("Assemble"), create_operation("Turn", skill="Machining")]
        driver = SimulationDriver(factory, catalog)

        results = driver.step()

        assert factory.current_time == DAY.replace(hour=9, minute=15)
        assert driver.ticks == 1
        assert len(results) == 2
        assert all(r.success for r in results)
        assert driver.efficiency_samples == [pytest.approx(100.0)]

    def test_started_events_collected(self):
        """测试开工事件写入活动日志"""
        driver = SimulationDriver(create_factory(create_config()), [create_operation("Assemble")])
        driver.step()

        log = driver.collector.get_activity_log()
        assert log[-1] == "[09:15] Started 'Assemble' - Worker: W0, Machine: M0, Cost: $15.00"


class TestRun:
    """连续运行测试类"""

    def test_running_flag_cleared_when_tick_fails(self, monkeypatch):
        """测试某一步出错时运行标记仍会复位"""
        driver = SimulationDriver(create_factory(create_config()), create_catalog())

        def failing_step():
            raise RuntimeError("tick failed")

        monkeypatch.setattr(driver, "step", failing_step)

        with pytest.raises(RuntimeError):
            driver.run(ticks=2)
        assert not driver.is_running
        assert driver.collector.get_activity_log()[-1] == "Simulation stopped"

    def test_event_history_limit_from_config(self):
        """测试事件记录上限取自配置"""
        config = create_config(event_history_limit=2)
        driver = SimulationDriver(create_factory(config), [create_operation("Assemble", minutes=15)])

        driver.run(ticks=4)

        assert driver.collector.get_event_count() == 2

    def test_run_ticks(self):
        """测试按步数运行"""
        factory = create_factory(create_config())
        driver = SimulationDriver(factory, create_catalog())

        summary = driver.run(ticks=4)

        assert summary.ticks == 4
        assert summary.start_time == DAY.replace(hour=9)
        assert summary.end_time == DAY.replace(hour=10)
        assert len(summary.efficiency_samples) == 4
        assert not driver.is_running

    def test_run_minutes(self):
        """测试按分钟运行（按步长取整）"""
        driver = SimulationDriver(create_factory(create_config()), create_catalog())
        assert driver.run(minutes=60).ticks == 4

        other = SimulationDriver(create_factory(create_config()), create_catalog())
        assert other.run(minutes=50).ticks == 3

    def test_run_requires_exactly_one_bound(self):
        """测试ticks与minutes必须且只能指定一个"""
        driver = SimulationDriver(create_factory(create_config()), create_catalog())
        with pytest.raises(ValueError):
            driver.run()
        with pytest.raises(ValueError):
            driver.run(ticks=1, minutes=15)

    def test_run_completes_operations(self):
        """测试运行过程中工序会完成并再次开工"""
        driver = SimulationDriver(
            create_factory(create_config()),
            [create_operation("Assemble", minutes=30)]
        )

        summary = driver.run(ticks=4)

        assert summary.final_status.operations_completed >= 1
        assert driver.operations_started == 2
        counts = driver.collector.get_completed_operation_counts()
        assert counts["Assemble"] == summary.final_status.operations_completed

    def test_start_stop_logged(self):
        """测试启停写入活动日志"""
        driver = SimulationDriver(create_factory(create_config()), [])
        driver.run(ticks=1)

        log = driver.collector.get_activity_log()
        assert log[0] == "Simulation started"
        assert log[-1] == "Simulation stopped"

    def test_summary_kpis(self):
        """测试运行汇总指标"""
        driver = SimulationDriver(create_factory(create_config()), create_catalog())
        summary = driver.run(ticks=2)

        kpis = summary.get_kpi_summary()
        assert kpis["time"]["ticks"] == 2
        assert summary.peak_efficiency >= summary.avg_efficiency


class TestRestock:
    """补货测试类"""

    def test_restock_first_low_material(self):
        """测试为第一个低库存物料补货"""
        factory = create_factory(create_config())
        factory.add_material(Material("Screws", 500, Decimal("0.10"), 50))
        factory.add_material(Material("Bolts", 10, Decimal("0.25"), 30))
        driver = SimulationDriver(factory, [])

        material = driver.restock_low_stock()

        assert material.name == "Bolts"
        assert material.quantity == 60
        assert driver.collector.get_activity_log()[-1] == "Restocked Bolts (+50 units)"

    def test_restock_nothing_low(self):
        """测试没有低库存物料时不补货"""
        factory = create_factory(create_config())
        factory.add_material(Material("Screws", 500, Decimal("0.10"), 50))
        driver = SimulationDriver(factory, [])

        assert driver.restock_low_stock() is None
