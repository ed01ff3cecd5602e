"""
Data types shared across the evolution simulation.

SimulationConfig mirrors the YAML configuration schema and is populated by
loader.py. The remaining dataclasses are runtime records owned by Genetic
(Individual), NeuralNetwork (BrainGenome) and FoodPool (FoodItem).
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional, Dict, Any

import numpy as np

from .constants import (
    POPULATION_SIZE_DEFAULT,
    GENE_COUNT,
    MUTATION_RATE_DEFAULT,
    MUTATION_AMOUNT_DEFAULT,
    WORLD_SIZE_DEFAULT,
    FOOD_COUNT_DEFAULT,
    PICKUP_RADIUS,
    FOOD_ENERGY,
    TIME_SCALE_DEFAULT,
    SPAWN_MARGIN,
    SPAWN_ATTEMPTS,
    MAX_SPEED_DEFAULT,
    USE_FOOD_KDTREE,
)


# ============================================================================
# Genotypes
# ============================================================================

@dataclass
class BrainGenome:
    """
    Weight matrices of a NeuralNetwork.

    Attributes:
        w1: (inputs + 1, hidden) input-to-hidden weights, last row is the bias
        w2: (hidden, outputs) hidden-to-output weights
    """
    w1: np.ndarray
    w2: np.ndarray

    def copy(self) -> 'BrainGenome':
        """Deep copy, no matrix is shared with the original"""
        return BrainGenome(w1=np.array(self.w1, dtype=np.float64, copy=True),
                           w2=np.array(self.w2, dtype=np.float64, copy=True))

    def to_dict(self) -> Dict[str, list]:
        return {'w1': self.w1.tolist(), 'w2': self.w2.tolist()}


@dataclass
class Individual:
    """
    Genotype plus fitness record, owned by Genetic.

    Attributes:
        genes: Appearance genes, each in [0, 1]
        fitness: Food items eaten during the current generation
        brain_genome: Optional weights; None means the brain is re-randomized at spawn
    """
    genes: List[float]
    fitness: int = 0
    brain_genome: Optional[BrainGenome] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'genes': [float(g) for g in self.genes],
            'fitness': int(self.fitness),
            'has_brain_genome': self.brain_genome is not None
        }


# ============================================================================
# Food Resource
# ============================================================================

@dataclass
class FoodItem:
    """
    Single food item on the ground plane.

    Attributes:
        x: Ground X coordinate
        z: Ground Z coordinate
        height: Ground elevation at (x, z), for renderers
        active: False only while the item is being relocated
    """
    x: float
    z: float
    height: float = 0.0
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': float(self.x),
            'z': float(self.z),
            'height': float(self.height),
            'active': bool(self.active)
        }


# ============================================================================
# Phenotype
# ============================================================================

@dataclass
class Phenotype:
    """Visual traits decoded from the first six appearance genes"""
    size: float
    squish: float
    hue: float
    roughness: float
    nucleus_count: int
    tentacle_length: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'size': float(self.size),
            'squish': float(self.squish),
            'hue': float(self.hue),
            'roughness': float(self.roughness),
            'nucleus_count': int(self.nucleus_count),
            'tentacle_length': float(self.tentacle_length)
        }


# ============================================================================
# Simulation Configuration
# ============================================================================

@dataclass
class SimulationConfig:
    """Simulation parameters (see schemas/simulation_config.schema.json)"""
    population_size: int = POPULATION_SIZE_DEFAULT
    gene_count: int = GENE_COUNT
    mutation_rate: float = MUTATION_RATE_DEFAULT
    mutation_amount: float = MUTATION_AMOUNT_DEFAULT
    world_size: float = WORLD_SIZE_DEFAULT
    food_count: int = FOOD_COUNT_DEFAULT
    pickup_radius: float = PICKUP_RADIUS
    food_energy: float = FOOD_ENERGY
    time_scale: float = TIME_SCALE_DEFAULT
    spawn_margin: float = SPAWN_MARGIN
    spawn_attempts: int = SPAWN_ATTEMPTS
    max_speed: Optional[float] = MAX_SPEED_DEFAULT
    use_food_kdtree: bool = USE_FOOD_KDTREE
    seed: Optional[int] = None
    description: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        """Reject values the simulation cannot run with"""
        if self.population_size < 1:
            raise ValueError(f"population_size must be >= 1, got {self.population_size}")
        if self.gene_count < 1:
            raise ValueError(f"gene_count must be >= 1, got {self.gene_count}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.mutation_amount < 0.0:
            raise ValueError(f"mutation_amount must be >= 0, got {self.mutation_amount}")
        if self.world_size <= 0.0:
            raise ValueError(f"world_size must be > 0, got {self.world_size}")
        if self.food_count < 0:
            raise ValueError(f"food_count must be >= 0, got {self.food_count}")
        if self.spawn_attempts < 1:
            raise ValueError(f"spawn_attempts must be >= 1, got {self.spawn_attempts}")
        if self.max_speed is not None and self.max_speed < 0.0:
            raise ValueError(f"max_speed must be >= 0 or None, got {self.max_speed}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Build config from a dict of overrides.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
