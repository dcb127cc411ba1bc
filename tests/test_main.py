"""
演示入口测试
"""

from factorysim.main import main, run_demo
from factorysim.models.enums import SelectionPolicy


class TestDemo:
    """演示运行测试类"""

    def test_run_demo(self):
        """测试默认场景运行"""
        driver = run_demo(ticks=8)
        summary = driver.summary()

        assert summary.ticks == 8
        assert summary.final_status.total_workers == 4
        assert summary.final_status.total_machines == 6
        assert driver.operations_started > 0
        assert driver.collector.get_activity_log()[0] == (
            "Factory initialized with sample workers, machines, and materials"
        )

    def test_run_demo_reproducible(self):
        """测试相同种子结果一致"""
        first = run_demo(ticks=8, seed=1).collector.get_activity_log()
        second = run_demo(ticks=8, seed=1).collector.get_activity_log()
        assert first == second

    def test_priority_policy(self):
        """测试按优先级运行"""
        driver = run_demo(ticks=4, policy=SelectionPolicy.PRIORITY)
        assert driver.config.selection_policy == SelectionPolicy.PRIORITY

    def test_cli(self, capsys):
        """测试命令行入口"""
        main(["--ticks", "2", "--seed", "3"])
        out = capsys.readouterr().out
        assert "2 步" in out
