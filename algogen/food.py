"""
Food resource pool.

FoodPool owns every food item. The pool size never changes: eating an item
deactivates it, moves it to a fresh valid position and reactivates it in a
single call, so food density stays constant.

Nearest-food lookup is an O(n) scan by default. With use_kdtree=True a
scipy cKDTree over active items answers the query instead; the tree is
rebuilt lazily after any relocation.
"""

import numpy as np
from typing import Callable, List, Optional, Tuple
from scipy.spatial import cKDTree

from .data_types import FoodItem
from .constants import CKDTREE_LEAFSIZE


# Returns (x, z, height) of a valid ground position
PositionSampler = Callable[[], Tuple[float, float, float]]


class FoodPool:
    """
    Fixed-size pool of food items on the ground plane.

    Attributes:
        items: Food items, index-stable for the lifetime of the pool
        consumed_total: Items eaten since the pool was created
    """

    def __init__(
        self,
        count: int,
        sampler: PositionSampler,
        use_kdtree: bool = False,
        leafsize: int = CKDTREE_LEAFSIZE
    ):
        """
        Args:
            count: Number of food items (constant)
            sampler: Callable giving a fresh valid (x, z, height)
            use_kdtree: Answer nearest() with a cKDTree instead of a linear scan
            leafsize: cKDTree leaf size
        """
        if count < 0:
            raise ValueError(f"food count must be >= 0, got {count}")

        self._sampler = sampler
        self._use_kdtree = use_kdtree
        self._leafsize = leafsize
        self.consumed_total = 0

        self.items: List[FoodItem] = []
        self._positions = np.empty((count, 2), dtype=np.float64)
        for i in range(count):
            x, z, height = sampler()
            self.items.append(FoodItem(x=x, z=z, height=height, active=True))
            self._positions[i] = (x, z)

        # cKDTree over active items (rows -> item indices)
        self._tree: Optional[cKDTree] = None
        self._tree_rows: np.ndarray = np.empty(0, dtype=np.int64)
        self._tree_dirty = True

    def __len__(self) -> int:
        return len(self.items)

    @property
    def use_kdtree(self) -> bool:
        return self._use_kdtree

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def nearest(self, x: float, z: float) -> Optional[Tuple[int, float]]:
        """
        Find the nearest active food item.

        Args:
            x: Ground X
            z: Ground Z

        Returns:
            (item_index, distance), or None when no item is active
        """
        if self._use_kdtree:
            return self._nearest_kdtree(x, z)
        return self._nearest_linear(x, z)

    def _nearest_linear(self, x: float, z: float) -> Optional[Tuple[int, float]]:
        """O(n) scan, first minimum wins on ties"""
        if not self.items:
            return None

        active = np.fromiter((item.active for item in self.items), dtype=bool, count=len(self.items))
        if not active.any():
            return None

        diff = self._positions - np.array([x, z], dtype=np.float64)
        dist = np.sqrt(np.sum(diff * diff, axis=1))
        dist[~active] = np.inf

        best = int(np.argmin(dist))
        return best, self._distance(best, x, z)

    def _nearest_kdtree(self, x: float, z: float) -> Optional[Tuple[int, float]]:
        if self._tree_dirty:
            self._rebuild_tree()
        if self._tree is None:
            return None

        _, row = self._tree.query([x, z], k=1)
        best = int(self._tree_rows[row])
        return best, self._distance(best, x, z)

    def _distance(self, index: int, x: float, z: float) -> float:
        """Distance to item `index`, computed identically for both backends"""
        dx = self._positions[index, 0] - x
        dz = self._positions[index, 1] - z
        return float(np.sqrt(dx * dx + dz * dz))

    def _rebuild_tree(self):
        rows = np.array([i for i, item in enumerate(self.items) if item.active], dtype=np.int64)
        self._tree_rows = rows
        if len(rows) > 0:
            self._tree = cKDTree(self._positions[rows], leafsize=self._leafsize)
        else:
            self._tree = None
        self._tree_dirty = False

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def consume_and_relocate(self, index: int) -> FoodItem:
        """
        Eat item `index` and respawn it elsewhere.

        Deactivate, relocate and reactivate happen as one operation; callers
        never observe the item inactive. The new position is sampled first,
        so a failing sampler leaves the item untouched.

        Returns:
            The relocated item
        """
        item = self.items[index]
        if not item.active:
            raise ValueError(f"Food item {index} is not active")

        x, z, height = self._sampler()
        item.active = False
        item.x, item.z, item.height = x, z, height
        self._positions[index] = (x, z)
        item.active = True

        self._tree_dirty = True
        self.consumed_total += 1
        return item

    def move_item(self, index: int, x: float, z: float, height: float = 0.0) -> FoodItem:
        """Place item `index` at a host-chosen position (scenario setup, level layouts)"""
        item = self.items[index]
        item.x, item.z, item.height = float(x), float(z), float(height)
        self._positions[index] = (item.x, item.z)
        self._tree_dirty = True
        return item

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def active_count(self) -> int:
        return sum(1 for item in self.items if item.active)

    def positions(self) -> np.ndarray:
        """(n, 2) copy of item (x, z) positions"""
        return self._positions.copy()

    def snapshot(self) -> List[dict]:
        """Builtin-typed copy of every item"""
        return [item.to_dict() for item in self.items]
