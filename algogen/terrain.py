"""
Terrain boundary contract.

The simulation only needs two queries from the host terrain: ground height
and biome classification at a ground (X, Z) point. Procedural terrain
generation lives outside this package; FlatTerrain and GridTerrain are
small adapters for headless runs and tests.
"""

import numpy as np
from typing import Optional, Protocol


# Biome names returned by biome_at()
MOUNTAIN = 'mountain'
PLAINS = 'plains'
TRANSITION = 'transition'
BIOMES = (MOUNTAIN, PLAINS, TRANSITION)

# Biome factor thresholds (factor < MOUNTAIN_BELOW -> mountain, > PLAINS_ABOVE -> plains)
MOUNTAIN_BELOW = 0.3
PLAINS_ABOVE = 0.7


class TerrainLike(Protocol):
    """Anything exposing ground height and biome queries"""

    def height_at(self, x: float, z: float) -> float:
        ...

    def biome_at(self, x: float, z: float) -> str:
        ...


def classify_biome(factor: float) -> str:
    """Map a biome factor in [0, 1] to a biome name"""
    if factor < MOUNTAIN_BELOW:
        return MOUNTAIN
    if factor > PLAINS_ABOVE:
        return PLAINS
    return TRANSITION


class FlatTerrain:
    """Uniform terrain: constant height, single biome everywhere"""

    def __init__(self, height: float = 0.0, biome: str = PLAINS):
        if biome not in BIOMES:
            raise ValueError(f"Unknown biome '{biome}', expected one of {BIOMES}")
        self.height = float(height)
        self.biome = biome

    def height_at(self, x: float, z: float) -> float:
        return self.height

    def biome_at(self, x: float, z: float) -> str:
        return self.biome


class GridTerrain:
    """
    Terrain sampled from square grids covering [-size/2, size/2]^2.

    Grid node (row, col) sits at ground x = (col / R - 0.5) * size and
    z = (row / R - 0.5) * size, so rows run along Z and columns along X.
    Heights interpolate bilinearly between nodes; biomes use the cell
    containing the point (floor of the normalized coordinate). Points outside
    the grid report plains and the height of the clamped edge.
    """

    def __init__(self, size: float, heights: np.ndarray, biome_factors: Optional[np.ndarray] = None):
        """
        Args:
            size: World extent covered by the grid
            heights: (R, R) ground heights
            biome_factors: Optional (R, R) biome factors in [0, 1] (None = plains everywhere)
        """
        heights = np.asarray(heights, dtype=np.float64)
        if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
            raise ValueError(f"heights must be a square 2D array, got shape {heights.shape}")
        if biome_factors is not None:
            biome_factors = np.asarray(biome_factors, dtype=np.float64)
            if biome_factors.shape != heights.shape:
                raise ValueError(
                    f"biome_factors shape {biome_factors.shape} != heights shape {heights.shape}"
                )
        if size <= 0:
            raise ValueError(f"size must be > 0, got {size}")

        self.size = float(size)
        self.resolution = heights.shape[0]
        self._heights = heights
        self._biome_factors = biome_factors

    def _cell(self, x: float, z: float):
        """Grid (row, col) for a ground point, None when outside"""
        col = int(np.floor((x / self.size + 0.5) * self.resolution))
        row = int(np.floor((z / self.size + 0.5) * self.resolution))
        if 0 <= col < self.resolution and 0 <= row < self.resolution:
            return row, col
        return None

    def height_at(self, x: float, z: float) -> float:
        """Bilinear height between the four surrounding grid nodes"""
        last = self.resolution - 1
        gx = min(max((x / self.size + 0.5) * self.resolution, 0.0), last)
        gz = min(max((z / self.size + 0.5) * self.resolution, 0.0), last)

        x0 = int(np.floor(gx))
        z0 = int(np.floor(gz))
        x1 = min(x0 + 1, last)
        z1 = min(z0 + 1, last)
        fx = gx - x0
        fz = gz - z0

        h = self._heights
        h0 = h[z0, x0] * (1.0 - fx) + h[z0, x1] * fx
        h1 = h[z1, x0] * (1.0 - fx) + h[z1, x1] * fx
        return float(h0 * (1.0 - fz) + h1 * fz)

    def biome_at(self, x: float, z: float) -> str:
        if self._biome_factors is None:
            return PLAINS
        cell = self._cell(x, z)
        if cell is None:
            return PLAINS
        return classify_biome(float(self._biome_factors[cell]))
