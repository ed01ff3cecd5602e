"""
Feed-forward neural network used as a creature brain.

Fixed topology with a single hidden layer:

    inputs (N) + bias (1) -> hidden (H) -> outputs (M)

tanh activation at both layers, so every output lies in (-1, 1). Weights
are plain float64 matrices with explicit shapes; no ML framework involved.
"""

import numpy as np
from typing import Optional, Sequence

from .data_types import BrainGenome
from .constants import WEIGHT_RANGE


class NeuralNetwork:
    """
    Small MLP brain.

    Attributes:
        n_inputs: Number of sensor inputs (bias excluded)
        n_hidden: Hidden layer width
        n_outputs: Number of outputs
        w1: (n_inputs + 1, n_hidden) weights, last row multiplies the bias unit
        w2: (n_hidden, n_outputs) weights
        error_count: Number of compute() calls rejected for bad input length
    """

    def __init__(
        self,
        n_inputs: int,
        n_hidden: int,
        n_outputs: int,
        genome: Optional[BrainGenome] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Args:
            n_inputs: Sensor count
            n_hidden: Hidden units
            n_outputs: Output count
            genome: Weights to reproduce an existing brain (copied, never shared)
            rng: Generator for fresh weights (ignored when genome is given)

        Raises:
            ValueError: If genome matrices do not match the topology
        """
        self.n_inputs = n_inputs
        self.n_hidden = n_hidden
        self.n_outputs = n_outputs
        self.error_count = 0

        w1_shape = (n_inputs + 1, n_hidden)
        w2_shape = (n_hidden, n_outputs)

        if genome is not None:
            genome = genome.copy()
            if genome.w1.shape != w1_shape or genome.w2.shape != w2_shape:
                raise ValueError(
                    f"Genome shapes w1={genome.w1.shape}, w2={genome.w2.shape} "
                    f"do not match topology w1={w1_shape}, w2={w2_shape}"
                )
            self.w1 = genome.w1
            self.w2 = genome.w2
        else:
            if rng is None:
                rng = np.random.default_rng()
            self.w1 = rng.uniform(-WEIGHT_RANGE, WEIGHT_RANGE, size=w1_shape)
            self.w2 = rng.uniform(-WEIGHT_RANGE, WEIGHT_RANGE, size=w2_shape)

    def compute(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Run one forward pass.

        A wrong input count is reported and answered with zeros rather than
        raised, so one malformed tick cannot halt the population.

        Args:
            inputs: N sensor values

        Returns:
            (M,) outputs in (-1, 1), or zeros if len(inputs) != N
        """
        if len(inputs) != self.n_inputs:
            self.error_count += 1
            print(f"[ERROR] NeuralNetwork expected {self.n_inputs} inputs, got {len(inputs)}")
            return np.zeros(self.n_outputs, dtype=np.float64)

        input_layer = np.empty(self.n_inputs + 1, dtype=np.float64)
        input_layer[:self.n_inputs] = inputs
        input_layer[self.n_inputs] = 1.0  # bias

        hidden = np.tanh(input_layer @ self.w1)
        return np.tanh(hidden @ self.w2)

    def export_genome(self) -> BrainGenome:
        """Deep copy of both weight matrices"""
        return BrainGenome(w1=self.w1.copy(), w2=self.w2.copy())
