"""
工厂仿真系统 - Factory Simulation
工人、设备与物料的资源调度与工序执行引擎

子包说明:
- models: 数据模型（工人/设备/物料/工序/配置/事件）
- core: 核心引擎（时钟/物料台账/通知/工厂引擎/驱动器）
- utils: 工具函数（时间与金额换算/统计/验证/场景加载）
"""

__version__ = "1.0.0"
