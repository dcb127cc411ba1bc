"""
物料台账
按名称索引的物料库存

功能:
- 物料的添加（同名覆盖）与移除
- 多项物料需求的整体校验与扣减
- 低库存监听（库存穿越阈值时回调）
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Callable, Dict, Iterator, List, Optional

from factorysim.models.material_model import Material


logger = logging.getLogger(__name__)


class MaterialLedger(Mapping):
    """
    物料台账

    以只读映射的形式暴露（物料名 -> 物料），修改必须通过台账方法
    """

    def __init__(self, on_low_stock: Optional[Callable[[Material], None]] = None):
        """
        初始化物料台账

        Args:
            on_low_stock: 任一物料库存穿越到低库存时的回调
        """
        self._materials: Dict[str, Material] = {}
        self._on_low_stock = on_low_stock

    def __getitem__(self, name: str) -> Material:
        return self._materials[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def _handle_low_stock(self, material: Material):
        logger.warning(
            "物料库存不足: %s (剩余 %d, 阈值 %d)",
            material.name, material.quantity, material.minimum_stock
        )
        if self._on_low_stock is not None:
            self._on_low_stock(material)

    def add(self, material: Material):
        """
        添加物料，同名物料以最后一次添加为准

        Args:
            material: 物料
        """
        previous = self._materials.get(material.name)
        if previous is material:
            return
        if previous is not None:
            previous.remove_low_stock_listener(self._handle_low_stock)
        self._materials[material.name] = material
        material.add_low_stock_listener(self._handle_low_stock)

    def remove(self, name: str) -> bool:
        """
        移除物料

        Returns:
            是否存在并被移除
        """
        material = self._materials.pop(name, None)
        if material is None:
            return False
        material.remove_low_stock_listener(self._handle_low_stock)
        return True

    def can_supply(self, requirements: Mapping) -> bool:
        """判断是否能满足全部物料需求（需求数量必须为正）"""
        return all(
            quantity > 0
            and name in self._materials
            and self._materials[name].is_available(quantity)
            for name, quantity in requirements.items()
        )

    def consume(self, requirements: Mapping) -> bool:
        """
        扣减物料

        先整体校验，全部满足才逐项扣减；任一不足则不修改任何库存

        Args:
            requirements: 物料名 -> 数量

        Returns:
            是否扣减成功
        """
        if not self.can_supply(requirements):
            return False
        for name, quantity in requirements.items():
            if not self._materials[name].use_quantity(quantity):
                logger.error("物料扣减被拒绝: %s x %s", name, quantity)
                return False
        return True

    def restock(self, name: str, amount: int) -> bool:
        """
        补货

        Returns:
            物料是否存在
        """
        material = self._materials.get(name)
        if material is None:
            return False
        material.add_quantity(amount)
        return True

    def low_stock(self) -> List[Material]:
        """所有低库存物料"""
        return [m for m in self._materials.values() if m.is_low_stock]

    def total_value(self) -> Decimal:
        """库存总价值"""
        return sum((m.total_value for m in self._materials.values()), Decimal(0))
