"""
Creature evolution kernel.

CreatureSystem owns the food pool and the live creatures, runs per-frame
ticks and generational transitions, and links every creature to its
Individual in Genetic by a stable index.

State machine:

    SPAWNING -> ACTIVE -> TRANSITIONING -> SPAWNING -> ...
"""

import time
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .creature import Creature, create_creature_from_genes
from .data_types import SimulationConfig
from .food import FoodPool
from .genetic import Genetic
from .geometry import plane_to_ground, ground_to_plane, clamp_to_arena, distance_to_wall
from .loader import load_config
from .phenotype import decode_phenotype, PHENOTYPE_GENES
from .rng import make_rng, random_world_seed
from .terrain import TerrainLike, FlatTerrain, MOUNTAIN
from .constants import NO_FOOD_DISTANCE, TICK_TIME_WINDOW


class SystemState(Enum):
    SPAWNING = 'spawning'
    ACTIVE = 'active'
    TRANSITIONING = 'transitioning'


class CreatureSystem:
    """
    Orchestrates creatures, food and evolution.

    The host calls update(dt) once per frame and next_generation() whenever
    it wants to advance evolution. The two are mutually exclusive: calling
    either while the other is running raises RuntimeError. Population
    resizing goes through set_population_size(), never Genetic directly.

    Environment hooks (all optional, looked up by name on `environment`):
        on_generation_spawned(generation, creatures, phenotypes)
        on_creatures_cleared(generation)
        on_food_moved(index, item)
        on_generation_advanced(generation, stats)
    Hooks receive builtin-typed copies, never live simulation objects, and
    run only after the tick or transition that produced them has completed.
    """

    def __init__(
        self,
        environment: Any = None,
        terrain: Optional[TerrainLike] = None,
        config: Union[SimulationConfig, Dict[str, Any], None] = None
    ):
        """
        Initialize food pool, population and the first generation.

        Args:
            environment: Optional observer with hook methods (see class doc)
            terrain: Height/biome provider (default: flat plains)
            config: SimulationConfig, dict of overrides, or None for defaults
        """
        if config is None:
            config = SimulationConfig()
        elif isinstance(config, dict):
            config = SimulationConfig.from_dict(config)

        self.config: SimulationConfig = config
        self.environment = environment
        self.terrain: TerrainLike = terrain if terrain is not None else FlatTerrain()

        self.seed: int = config.seed if config.seed is not None else random_world_seed()
        self._spawn_rng = make_rng(self.seed, "spawn")
        self._food_rng = make_rng(self.seed, "food")

        # Simulation state
        self.state = SystemState.SPAWNING
        self.creatures: List[Creature] = []
        self.tick_count: int = 0
        self.generation_ticks: int = 0
        self._busy = False

        # Bookkeeping
        self.spawn_fallbacks: int = 0
        self.fallback_transitions: int = 0
        self.last_selection: List[int] = []
        self.deaths_this_generation: int = 0
        self.eaten_this_generation: int = 0

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

        self.genetic = Genetic(
            population_size=config.population_size,
            gene_count=config.gene_count,
            rng=make_rng(self.seed, "genetic")
        )

        print(f"Spawning food (count={config.food_count}, kdtree={config.use_food_kdtree})...")
        self.food = FoodPool(
            config.food_count,
            sampler=self._sample_food_position,
            use_kdtree=config.use_food_kdtree
        )

        self.state = SystemState.SPAWNING
        self._commit_generation(self._build_generation())
        self._notify_spawned()

        print(f"[OK] CreatureSystem initialized: {len(self.creatures)} creatures, "
              f"{len(self.food)} food, world_size={config.world_size}, seed={self.seed}")

    @classmethod
    def from_config_file(
        cls,
        config_path: Path,
        environment: Any = None,
        terrain: Optional[TerrainLike] = None,
        schema_dir: Optional[Path] = None
    ) -> 'CreatureSystem':
        """Build a system from a YAML config file"""
        print(f"Loading config {config_path}...")
        config = load_config(config_path, schema_dir)
        return cls(environment=environment, terrain=terrain, config=config)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self.genetic.generation

    @property
    def half_extent(self) -> float:
        return self.config.world_size / 2.0

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def _random_ground_position(self, rng) -> tuple:
        """
        Sample a ground position away from mountains.

        Rejection sampling with a bounded number of attempts; when every attempt lands
        on a mountain the last sample is used.

        Returns:
            (x, z, height)
        """
        spawn_range = max(0.0, self.half_extent - self.config.spawn_margin)

        for _ in range(self.config.spawn_attempts):
            x = float(rng.uniform(-spawn_range, spawn_range))
            z = float(rng.uniform(-spawn_range, spawn_range))
            if self.terrain.biome_at(x, z) != MOUNTAIN:
                return x, z, float(self.terrain.height_at(x, z))

        self.spawn_fallbacks += 1
        print(f"[WARN] No non-mountain position after {self.config.spawn_attempts} attempts, "
              f"using ({x:.1f}, {z:.1f})")
        return x, z, float(self.terrain.height_at(x, z))

    def _sample_food_position(self) -> tuple:
        return self._random_ground_position(self._food_rng)

    def _build_generation(self) -> List[Creature]:
        """One placed creature per Individual; system state is not touched"""
        brain_rng = make_rng(self.seed, "brain", self.generation)
        creatures = []

        for index, individual in enumerate(self.genetic.individuals):
            creature = create_creature_from_genes(
                individual.genes,
                brain_genome=individual.brain_genome,
                index=index,
                rng=brain_rng,
                max_speed=self.config.max_speed
            )

            x, z, _ = self._random_ground_position(self._spawn_rng)
            creature.x, creature.y = ground_to_plane(x, z)
            creatures.append(creature)

        return creatures

    def _commit_generation(self, creatures: List[Creature]):
        """Install a fully built generation and reset fitness and counters"""
        self.creatures = creatures
        for individual in self.genetic.individuals:
            individual.fitness = 0

        self.generation_ticks = 0
        self.deaths_this_generation = 0
        self.eaten_this_generation = 0
        self.state = SystemState.ACTIVE

    def _notify_spawned(self):
        hook = getattr(self.environment, 'on_generation_spawned', None)
        if hook is not None:
            phenotypes = [
                decode_phenotype(c.genes).to_dict() if len(c.genes) >= PHENOTYPE_GENES else None
                for c in self.creatures
            ]
            hook(self.generation, [c.to_dict() for c in self.creatures], phenotypes)

    def _genetic_checkpoint(self) -> Tuple[int, int, list]:
        return self.genetic.population_size, self.genetic.generation, self.genetic.individuals

    def _genetic_restore(self, checkpoint: Tuple[int, int, list]):
        self.genetic.population_size, self.genetic.generation, self.genetic.individuals = checkpoint

    def set_population_size(self, n: int):
        """
        Resize the population and respawn a fresh random generation.

        The generation counter is kept. Food is left in place.

        Raises:
            ValueError: If n < 1 (nothing is changed)
            RuntimeError: If called during a tick or a transition
        """
        config = replace(self.config, population_size=n)

        self._enter()
        checkpoint = self._genetic_checkpoint()
        try:
            self.state = SystemState.SPAWNING
            self.genetic.set_population_size(n)
            creatures = self._build_generation()
        except Exception:
            self._genetic_restore(checkpoint)
            self.state = SystemState.ACTIVE
            raise
        else:
            self.config = config
            self._commit_generation(creatures)
        finally:
            self._exit()

        self._notify_spawned()
        print(f"[OK] Population resized to {n} (generation {self.generation})")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, dt: float):
        """
        Advance simulation by one frame.

        For each active creature: nearest-food and wall sensors, brain and
        physics update with dt * time_scale, arena clamp, then consumption
        if the food it was sensing lay within the pickup radius.
        on_food_moved is dispatched once the whole tick has been applied.

        Args:
            dt: Host frame delta time in seconds

        Raises:
            RuntimeError: If called during another tick or a transition
        """
        self._enter()
        start_time = time.perf_counter()
        moved = []
        try:
            step = dt * self.config.time_scale
            half = self.half_extent

            for creature in self.creatures:
                if not creature.active:
                    continue

                # Sense (ground plane)
                gx, gz = plane_to_ground(creature.x, creature.y)
                target = self.food.nearest(gx, gz)
                creature.distance_food = target[1] if target is not None else NO_FOOD_DISTANCE
                creature.distance_wall = distance_to_wall(creature.x, creature.y, half)

                # Decide + integrate
                creature.update(step)
                creature.x, creature.y = clamp_to_arena(creature.x, creature.y, half)

                if not creature.active:
                    self.deaths_this_generation += 1
                    continue

                # Eat
                if target is not None and target[1] < self.config.pickup_radius:
                    moved.append((target[0], self._consume(target[0], creature)))

            self.tick_count += 1
            self.generation_ticks += 1
        finally:
            self._exit()

        self._record_tick_time(time.perf_counter() - start_time)

        hook = getattr(self.environment, 'on_food_moved', None)
        if hook is not None:
            for food_index, item in moved:
                hook(food_index, item)

    def _consume(self, food_index: int, creature: Creature) -> dict:
        """Eat a food item: relocate it and reward the creature and its Individual"""
        item = self.food.consume_and_relocate(food_index)

        creature.feed(self.config.food_energy)
        self.genetic.individuals[creature.index].fitness += 1
        self.eaten_this_generation += 1
        return item.to_dict()

    # ------------------------------------------------------------------
    # Generational transition
    # ------------------------------------------------------------------

    def next_generation(self) -> int:
        """
        Evolve the population and respawn every creature.

        Parents are the Individuals that ate at least once. With no eaters
        Genetic falls back to random parents. The new generation is built
        completely before it replaces the old one; if building fails the
        finished generation stays in place and the error propagates.

        Returns:
            The new generation number

        Raises:
            RuntimeError: If called during a tick or another transition
        """
        self._enter()
        checkpoint = self._genetic_checkpoint()
        try:
            self.state = SystemState.TRANSITIONING
            finished = self.generation
            stats = self.get_generation_stats()

            selection = self.genetic.selection_from_fitness()
            self.genetic.next_generation(
                selection,
                rate=self.config.mutation_rate,
                amount=self.config.mutation_amount
            )

            self.state = SystemState.SPAWNING
            creatures = self._build_generation()
        except Exception:
            self._genetic_restore(checkpoint)
            self.state = SystemState.ACTIVE
            raise
        else:
            self.last_selection = selection
            if not selection:
                self.fallback_transitions += 1
            self._commit_generation(creatures)
        finally:
            self._exit()

        hook = getattr(self.environment, 'on_creatures_cleared', None)
        if hook is not None:
            hook(finished)
        self._notify_spawned()

        hook = getattr(self.environment, 'on_generation_advanced', None)
        if hook is not None:
            hook(self.generation, stats)

        print(f"[OK] Generation {self.generation} started "
              f"({len(selection)} parents selected, best fitness {stats['max_fitness']})")
        return self.generation

    def _enter(self):
        if self._busy:
            raise RuntimeError("CreatureSystem is already running a tick or generation transition")
        self._busy = True

    def _exit(self):
        self._busy = False

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def get_fitness(self) -> List[int]:
        """Per-creature fitness, in Individual index order"""
        return [c.fitness for c in self.creatures]

    def get_population_snapshot(self) -> List[dict]:
        return [ind.to_dict() for ind in self.genetic.individuals]

    def get_food_snapshot(self) -> List[dict]:
        return self.food.snapshot()

    def get_generation_stats(self) -> dict:
        """
        Summary of the running generation.

        Returns:
            Dict with generation, population, alive, deaths, eaten, and fitness/energy aggregates
        """
        fitness = self.get_fitness()
        alive = [c for c in self.creatures if c.active]
        return {
            'generation': self.generation,
            'ticks': self.generation_ticks,
            'population': len(self.creatures),
            'alive': len(alive),
            'deaths': self.deaths_this_generation,
            'eaten': self.eaten_this_generation,
            'total_fitness': int(sum(fitness)),
            'max_fitness': int(max(fitness)) if fitness else 0,
            'mean_fitness': float(sum(fitness)) / len(fitness) if fitness else 0.0,
            'mean_energy': float(sum(c.energy for c in alive)) / len(alive) if alive else 0.0,
        }

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        avg_time = self._tick_time_sum / len(self._tick_times)
        last_time = self._tick_times[-1]

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': avg_time * 1000.0,
            'last_tick_time_ms': last_time * 1000.0
        }

    def _record_tick_time(self, elapsed: float):
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with generation, state, creatures, population, food, stats and timing
        """
        return {
            'generation': self.generation,
            'state': self.state.value,
            'tick_count': self.tick_count,
            'creatures': [c.to_dict() for c in self.creatures],
            'population': self.get_population_snapshot(),
            'food': self.get_food_snapshot(),
            'stats': self.get_generation_stats(),
            'timing': self.get_tick_stats()
        }

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        gen = self.get_generation_stats()
        print(f"Gen {gen['generation']:4d} | Tick {stats['tick_count']:6d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Alive: {gen['alive']:3d}/{gen['population']:3d} | "
              f"Eaten: {gen['eaten']:4d}")
