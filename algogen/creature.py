"""
Creature runtime representation.

A creature is the embodiment of one Individual for one generation: its
genes, a neural brain, and 2D physical state (x, y, heading, speed,
energy). It knows nothing about terrain or food; CreatureSystem fills the
sensor fields before each update and handles the world side.
"""

import math
import numpy as np
from typing import List, Optional, Sequence

from .neural_network import NeuralNetwork
from .data_types import BrainGenome
from .constants import (
    GENE_COUNT,
    BRAIN_INPUTS,
    BRAIN_HIDDEN,
    BRAIN_OUTPUTS,
    ENERGY_INITIAL,
    TURN_RATE,
    ACCELERATION_RATE,
    ENERGY_DRAIN_BASE,
    ENERGY_DRAIN_SPEED,
)


def random_genes(rng: Optional[np.random.Generator] = None, count: int = GENE_COUNT) -> List[float]:
    """Uniform [0, 1] gene vector"""
    if rng is None:
        rng = np.random.default_rng()
    return rng.random(count).tolist()


class Creature:
    """
    Brain-driven agent in the creature plane.

    Attributes:
        index: Index of the source Individual in Genetic.individuals
        genes: Copy of the appearance genes
        brain: NeuralNetwork(5, 4, 2)
        x, y: Position in the creature plane (y maps to ground Z)
        angle: Heading in radians
        speed: Signed scalar speed (unbounded unless max_speed is set)
        energy: Remaining energy; <= 0 deactivates the creature
        fitness: Food items eaten this generation
        active: False once energy ran out
        distance_food, distance_wall, speed_x, speed_y: Sensor fields
    """

    def __init__(
        self,
        genes: Sequence[float],
        brain_genome: Optional[BrainGenome] = None,
        index: int = 0,
        rng: Optional[np.random.Generator] = None,
        max_speed: Optional[float] = None
    ):
        self.index = index
        self.genes = [float(g) for g in genes]
        self.max_speed = max_speed

        self.energy = ENERGY_INITIAL
        self.speed = 0.0
        self.angle = 0.0
        self.x = 0.0
        self.y = 0.0
        self.fitness = 0
        self.active = True

        self.brain = NeuralNetwork(BRAIN_INPUTS, BRAIN_HIDDEN, BRAIN_OUTPUTS, genome=brain_genome, rng=rng)

        # Environment values, written by CreatureSystem before each update
        self.distance_food = 0.0
        self.distance_wall = 0.0
        self.speed_x = 0.0
        self.speed_y = 0.0

    def sensors(self) -> List[float]:
        """Brain input vector, in network input order"""
        return [self.distance_food, self.distance_wall, self.speed_x, self.speed_y, self.energy]

    def update(self, dt: float):
        """
        Sense, decide, move, and spend energy for one step.

        Args:
            dt: Integration step (already time-scaled by the caller)
        """
        if not self.active:
            return

        outputs = self.brain.compute(self.sensors())

        self.angle += float(outputs[0]) * TURN_RATE
        self.speed += float(outputs[1]) * ACCELERATION_RATE
        if self.max_speed is not None and abs(self.speed) > self.max_speed:
            self.speed = math.copysign(self.max_speed, self.speed)

        vx = math.cos(self.angle) * self.speed
        vy = math.sin(self.angle) * self.speed

        # Explicit Euler
        self.x += vx * dt
        self.y += vy * dt

        self.speed_x = vx
        self.speed_y = vy

        self.energy -= ENERGY_DRAIN_BASE + abs(self.speed) * ENERGY_DRAIN_SPEED
        if self.energy <= 0:
            self.active = False

    def feed(self, energy_bonus: float):
        """Apply the reward for one eaten food item"""
        self.energy += energy_bonus
        self.fitness += 1

    def to_dict(self) -> dict:
        """
        Serialize creature state to JSON-compatible dict.

        Returns:
            Dict with builtin-typed fields (brain weights excluded)
        """
        return {
            'index': self.index,
            'genes': list(self.genes),
            'x': float(self.x),
            'y': float(self.y),
            'angle': float(self.angle),
            'speed': float(self.speed),
            'energy': float(self.energy),
            'fitness': int(self.fitness),
            'active': bool(self.active)
        }


def create_creature_from_genes(
    genes: Sequence[float],
    brain_genome: Optional[BrainGenome] = None,
    index: int = 0,
    rng: Optional[np.random.Generator] = None,
    max_speed: Optional[float] = None
) -> Creature:
    """Build a creature, reproducing brain_genome when given"""
    return Creature(genes, brain_genome=brain_genome, index=index, rng=rng, max_speed=max_speed)
