"""
物料模型
定义生产所用物料及其库存管理

功能:
- 库存数量、单价、最低库存阈值
- 领用（不允许出现负库存）与补货
- 低库存判断（数量 ≤ 阈值，边界包含）
- 低库存穿越时通知监听者
"""

from decimal import Decimal
from typing import Callable, List
from dataclasses import dataclass, field

from factorysim.utils.money import to_decimal, format_currency


LowStockListener = Callable[["Material"], None]


@dataclass(eq=False)
class Material:
    """
    物料模型

    Attributes:
        name: 物料名称（台账中的唯一键）
        quantity: 当前库存（≥0）
        cost_per_unit: 单价（Decimal）
        minimum_stock: 最低库存阈值

    Example:
        >>> steel = Material("Steel Rod", 100, Decimal("5.50"), 20)
        >>> steel.use_quantity(2)
        True
        >>> steel.quantity
        98
    """

    name: str
    quantity: int
    cost_per_unit: Decimal
    minimum_stock: int = 0
    _listeners: List[LowStockListener] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        self.cost_per_unit = to_decimal(self.cost_per_unit)
        if self.quantity < 0:
            raise ValueError(f"物料 '{self.name}' 库存不能为负数")
        if self.cost_per_unit < 0:
            raise ValueError(f"物料 '{self.name}' 单价不能为负数")

    @property
    def is_low_stock(self) -> bool:
        """库存不足: 数量 ≤ 最低库存阈值"""
        return self.quantity <= self.minimum_stock

    @property
    def total_value(self) -> Decimal:
        """库存总价值"""
        return self.quantity * self.cost_per_unit

    def add_low_stock_listener(self, listener: LowStockListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_low_stock_listener(self, listener: LowStockListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_quantity(self, value: int):
        was_low = self.is_low_stock
        self.quantity = value
        if self.is_low_stock and not was_low:
            for listener in list(self._listeners):
                listener(self)

    def is_available(self, required_quantity: int) -> bool:
        """判断库存是否足够"""
        return required_quantity <= self.quantity

    def use_quantity(self, amount: int) -> bool:
        """
        领用物料

        库存不足（或数量为负）时不修改库存，直接返回失败

        Args:
            amount: 领用数量

        Returns:
            是否领用成功
        """
        if amount < 0 or not self.is_available(amount):
            return False
        if amount:
            self._set_quantity(self.quantity - amount)
        return True

    def add_quantity(self, amount: int):
        """
        补货，非正数量直接忽略

        Args:
            amount: 补货数量
        """
        if amount > 0:
            self._set_quantity(self.quantity + amount)

    def calculate_cost(self, quantity: int) -> Decimal:
        """计算指定数量的物料成本"""
        return quantity * self.cost_per_unit

    def get_shortfall(self, required_quantity: int) -> int:
        """
        计算缺口

        Returns:
            max(0, 需求 - 库存)
        """
        return max(0, required_quantity - self.quantity)

    def describe(self) -> str:
        """一行描述，用于日志"""
        suffix = " (LOW STOCK)" if self.is_low_stock else ""
        return f"{self.name}: {self.quantity} units @ {format_currency(self.cost_per_unit)}/unit{suffix}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "quantity": self.quantity,
            "cost_per_unit": str(self.cost_per_unit),
            "minimum_stock": self.minimum_stock,
            "is_low_stock": self.is_low_stock,
            "total_value": str(self.total_value),
        }

    def __str__(self) -> str:
        return self.describe()
