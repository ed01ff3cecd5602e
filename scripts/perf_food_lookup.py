"""
Tick timing for the two nearest-food backends.

Runs CreatureSystem.update() at several food counts with the linear scan
and with the cKDTree, and reports median/p90 per tick.
"""

# Pin threading for stable measurement
import os
os.environ.update({
    'OPENBLAS_NUM_THREADS': '1',
    'MKL_NUM_THREADS': '1',
    'NUMEXPR_NUM_THREADS': '1',
    'OMP_NUM_THREADS': '1'
})

import gc
import sys
import time
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from algogen.creature_system import CreatureSystem


def run_tick_perf_test(food_count: int, use_kdtree: bool, population: int = 50, runs: int = 50) -> dict:
    """
    Time `runs` ticks of a fresh system.

    Returns:
        Dict with p50, p90, min, max (ms) and food eaten during the runs
    """
    system = CreatureSystem(config={
        'population_size': population,
        'food_count': food_count,
        'world_size': 400.0,
        'use_food_kdtree': use_kdtree,
        'seed': 42,
    })

    # Warmup
    system.update(1.0 / 60.0)

    gc.collect()
    gc.disable()

    times_ns = []
    try:
        for _ in range(runs):
            start = time.perf_counter_ns()
            system.update(1.0 / 60.0)
            times_ns.append(time.perf_counter_ns() - start)
    finally:
        gc.enable()

    times_ms = np.array(times_ns) / 1_000_000
    return {
        'food_count': food_count,
        'backend': 'kdtree' if use_kdtree else 'linear',
        'p50_ms': float(np.percentile(times_ms, 50)),
        'p90_ms': float(np.percentile(times_ms, 90)),
        'min_ms': float(np.min(times_ms)),
        'max_ms': float(np.max(times_ms)),
        'eaten': system.eaten_this_generation,
    }


def main():
    print("=" * 72)
    print("Nearest-food backend tick timing")
    print("=" * 72)
    print()

    results = []
    for food_count in [40, 400, 2000]:
        for use_kdtree in (False, True):
            result = run_tick_perf_test(food_count, use_kdtree)
            print(f"[food = {food_count}, {result['backend']}]")
            print(f"  p50: {result['p50_ms']:.3f}ms  p90: {result['p90_ms']:.3f}ms")
            print(f"  min: {result['min_ms']:.3f}ms, max: {result['max_ms']:.3f}ms, eaten: {result['eaten']}")
            results.append(result)
        print()

    print("| Food | Backend | p50 (ms) | p90 (ms) | Eaten |")
    print("|------|---------|----------|----------|-------|")
    for r in results:
        print(f"| {r['food_count']:4d} | {r['backend']:7s} | {r['p50_ms']:8.3f} | {r['p90_ms']:8.3f} | {r['eaten']:5d} |")


if __name__ == '__main__':
    main()
