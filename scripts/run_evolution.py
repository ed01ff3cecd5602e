"""
Headless evolution run.

Drives a CreatureSystem with a fixed frame delta for a number of
generations and prints one summary line per generation.

Usage:
    python scripts/run_evolution.py --config data/config/default.yaml --generations 20
"""

import argparse
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from algogen.creature_system import CreatureSystem
from algogen.loader import load_config
from algogen.terrain import GridTerrain, FlatTerrain


REPO_ROOT = Path(__file__).parent.parent


def build_terrain(world_size: float, resolution: int, seed: int, mountains: bool):
    """Flat plains, or a random grid with some mountain cells"""
    if not mountains:
        return FlatTerrain()

    rng = np.random.default_rng(seed)
    heights = rng.uniform(0.0, 5.0, size=(resolution, resolution))
    biome_factors = rng.uniform(0.0, 1.0, size=(resolution, resolution))
    return GridTerrain(world_size, heights, biome_factors)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless creature evolution")
    parser.add_argument('--config', type=Path, default=REPO_ROOT / "data" / "config" / "default.yaml")
    parser.add_argument('--schema-dir', type=Path, default=REPO_ROOT / "schemas")
    parser.add_argument('--generations', type=int, default=10)
    parser.add_argument('--ticks', type=int, default=600, help="Frames per generation")
    parser.add_argument('--dt', type=float, default=1.0 / 60.0, help="Frame delta time (s)")
    parser.add_argument('--mountains', action='store_true', help="Use a random grid terrain with mountains")
    args = parser.parse_args(argv)

    config = load_config(args.config, args.schema_dir)
    terrain_seed = config.seed if config.seed is not None else 0
    terrain = build_terrain(config.world_size, 64, terrain_seed, args.mountains)
    system = CreatureSystem(terrain=terrain, config=config)

    print("=" * 60)
    print(f"Running {args.generations} generations x {args.ticks} ticks (dt={args.dt:.4f}s)")
    print("=" * 60)

    for _ in range(args.generations):
        for _ in range(args.ticks):
            system.update(args.dt)

        stats = system.get_generation_stats()
        print(f"Gen {stats['generation']:4d} | eaten={stats['eaten']:4d} | "
              f"best={stats['max_fitness']:3d} | mean={stats['mean_fitness']:5.2f} | "
              f"alive={stats['alive']:3d}/{stats['population']:3d}")
        system.next_generation()

    system.print_tick_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
