"""
Genetic algorithm over appearance genes.

Genetic owns the population of Individuals and produces each new
generation by elitism, single-point crossover and clamped mutation.
Brain genomes are not touched by these operators.
"""

import numpy as np
from typing import Iterable, List, Optional, Sequence

from .data_types import Individual
from .constants import (
    POPULATION_SIZE_DEFAULT,
    GENE_COUNT,
    MUTATION_RATE_DEFAULT,
    MUTATION_AMOUNT_DEFAULT,
    FALLBACK_PARENT_COUNT,
)


class Genetic:
    """
    Population holder and evolution operators.

    Attributes:
        population_size: Individuals per generation (constant across generations)
        gene_count: Genes per individual (constant)
        generation: Generation counter, starts at 0
        individuals: Current population
    """

    def __init__(
        self,
        population_size: int = POPULATION_SIZE_DEFAULT,
        gene_count: int = GENE_COUNT,
        rng: Optional[np.random.Generator] = None
    ):
        self.population_size = population_size
        self.gene_count = gene_count
        self.generation = 0
        self.individuals: List[Individual] = []
        self.rng = rng if rng is not None else np.random.default_rng()
        self.init_random()

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def init_random(self):
        """Replace the population with fresh uniform [0, 1] genomes"""
        self.individuals = [
            Individual(genes=self.rng.random(self.gene_count).tolist(), fitness=0)
            for _ in range(self.population_size)
        ]

    def set_population_size(self, n: int):
        """Change population size and re-randomize everyone"""
        if n < 1:
            raise ValueError(f"population size must be >= 1, got {n}")
        self.population_size = n
        self.init_random()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def crossover(self, a_genes: Sequence[float], b_genes: Sequence[float], cut: Optional[int] = None) -> List[float]:
        """
        Single-point crossover.

        Child takes A's genes before the cut and B's from the cut on.
        cut=0 copies B, cut=gene_count copies A.

        Args:
            a_genes: Parent A genes
            b_genes: Parent B genes
            cut: Cut index; drawn uniformly from [0, gene_count) when None

        Returns:
            New child gene list
        """
        if cut is None:
            cut = int(self.rng.integers(0, self.gene_count))
        if not 0 <= cut <= self.gene_count:
            raise ValueError(f"cut must be in [0, {self.gene_count}], got {cut}")

        return [float(a_genes[i]) if i < cut else float(b_genes[i]) for i in range(self.gene_count)]

    def mutate(
        self,
        genes: Sequence[float],
        rate: float = MUTATION_RATE_DEFAULT,
        amount: float = MUTATION_AMOUNT_DEFAULT
    ) -> List[float]:
        """
        Perturb each gene with probability `rate` by U[-amount, amount], clamped to [0, 1].

        Returns a new list; the input is left untouched.
        """
        out = [float(g) for g in genes]
        for i in range(len(out)):
            if self.rng.random() < rate:
                delta = self.rng.uniform(-amount, amount)
                out[i] = min(1.0, max(0.0, out[i] + delta))
        return out

    # ------------------------------------------------------------------
    # Generational replacement
    # ------------------------------------------------------------------

    def selection_from_fitness(self) -> List[int]:
        """Indices of individuals that ate at least once"""
        return [i for i, ind in enumerate(self.individuals) if ind.fitness > 0]

    def next_generation(
        self,
        selected_indices: Iterable[int],
        rate: float = MUTATION_RATE_DEFAULT,
        amount: float = MUTATION_AMOUNT_DEFAULT
    ) -> List[Individual]:
        """
        Breed a full new population from the selected parents.

        An empty selection falls back to FALLBACK_PARENT_COUNT parents drawn
        at random, so evolution never stalls. One elite is copied verbatim,
        the rest are crossover + mutation children of parents sampled
        uniformly with replacement.

        Args:
            selected_indices: Indices into the current population
            rate: Per-gene mutation probability
            amount: Max mutation perturbation

        Returns:
            The new population (also stored in self.individuals)

        Raises:
            IndexError: If a selected index is outside the population
        """
        selection = list(dict.fromkeys(int(i) for i in selected_indices))
        for i in selection:
            if not 0 <= i < len(self.individuals):
                raise IndexError(f"Selected index {i} outside population of {len(self.individuals)}")

        if not selection:
            selection = [int(i) for i in self.rng.integers(0, len(self.individuals), size=FALLBACK_PARENT_COUNT)]

        pool = [self.individuals[i].genes for i in selection]

        # Elitism: one parent survives unchanged
        elite = pool[int(self.rng.integers(0, len(pool)))]
        new_genes = [list(elite)]

        while len(new_genes) < self.population_size:
            a = pool[int(self.rng.integers(0, len(pool)))]
            b = pool[int(self.rng.integers(0, len(pool)))]
            child = self.crossover(a, b)
            child = self.mutate(child, rate, amount)
            new_genes.append(child)

        self.individuals = [Individual(genes=g, fitness=0) for g in new_genes]
        self.generation += 1
        return self.individuals
