"""
演示入口
加载场景并运行仿真驱动器，输出活动日志与状态汇总

运行方式: python -m factorysim [--ticks N] [--scenario PATH] [--policy random|priority]
"""

import argparse
import logging
from typing import List, Optional

from factorysim.core.simulation_driver import SimulationDriver
from factorysim.models.enums import SelectionPolicy
from factorysim.utils.config_loader import build_factory, load_scenario
from factorysim.utils.money import format_currency
from factorysim.utils.validators import validate_operation_catalog, validate_scenario


logger = logging.getLogger(__name__)


def run_demo(
    ticks: int = 16,
    scenario_path: Optional[str] = None,
    policy: Optional[SelectionPolicy] = None,
    seed: Optional[int] = None
) -> SimulationDriver:
    """
    运行演示仿真

    Args:
        ticks: 运行步数
        scenario_path: 场景文件路径，缺省使用内置默认场景
        policy: 覆盖场景中的选择策略
        seed: 覆盖场景中的随机种子

    Returns:
        运行结束后的驱动器
    """
    scenario = load_scenario(scenario_path)
    overrides = {}
    if policy is not None:
        overrides["selection_policy"] = policy
    if seed is not None:
        overrides["random_seed"] = seed
    if overrides:
        scenario = scenario.model_copy(
            update={"config": scenario.config.model_copy(update=overrides)}
        )

    valid, errors, warnings = validate_scenario(scenario)
    for message in warnings:
        logger.warning(message)
    if not valid:
        raise ValueError("; ".join(errors))

    factory, operations = build_factory(scenario)
    _, catalog_errors, catalog_warnings = validate_operation_catalog(operations, factory)
    for message in catalog_errors + catalog_warnings:
        logger.warning(message)

    driver = SimulationDriver(factory, operations)
    driver.collector.log("Factory initialized with sample workers, machines, and materials")
    driver.run(ticks=ticks)
    return driver


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Run the factory simulation demo.")
    parser.add_argument('-t', '--ticks', type=int, default=16, help="Number of ticks to run.")
    parser.add_argument('-s', '--scenario', type=str, default=None, help="Path to a scenario YAML file.")
    parser.add_argument('-p', '--policy', choices=[p.value for p in SelectionPolicy], default=None,
                        help="Operation selection policy.")
    parser.add_argument('--seed', type=int, default=None, help="Random seed.")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    policy = SelectionPolicy(args.policy) if args.policy else None
    driver = run_demo(args.ticks, args.scenario, policy, args.seed)
    summary = driver.summary()

    print("🏭 工厂仿真运行完成")
    print("=" * 60)
    for line in driver.collector.get_activity_log():
        print(line)
    print("=" * 60)
    status = summary.final_status
    print(f"⏱️  仿真时刻: {driver.factory.clock.formatted_time()} ({summary.ticks} 步)")
    print(f"👷 工人: {status.busy_workers}/{status.total_workers} 忙碌, {status.workers_on_break} 休息")
    print(f"⚙️  设备: {status.busy_machines}/{status.total_machines} 忙碌")
    print(f"📦 物料: {status.low_stock_materials}/{status.total_materials} 低库存")
    print(f"✅ 完成 {status.operations_completed}, 进行中 {status.operations_in_progress}")
    print(f"💰 总成本: {format_currency(status.total_cost)}")
    print(f"📈 平均效率: {summary.avg_efficiency:.1f}%, 峰值: {summary.peak_efficiency:.1f}%")


if __name__ == "__main__":
    main()
