"""
Central configuration constants for the creature evolution simulation.

Defines default values, thresholds, and tuning parameters used across
multiple modules. SimulationConfig takes its defaults from here.
"""

# ============================================================================
# Genome Configuration
# ============================================================================

GENE_COUNT = 10  # Appearance genes per individual, each in [0, 1]
POPULATION_SIZE_DEFAULT = 24

# Mutation defaults (per-gene probability and max perturbation)
MUTATION_RATE_DEFAULT = 0.08
MUTATION_AMOUNT_DEFAULT = 0.12

# Parents drawn at random when no individual was selected
FALLBACK_PARENT_COUNT = 3


# ============================================================================
# Brain Topology
# ============================================================================

BRAIN_INPUTS = 5   # [distance_food, distance_wall, speed_x, speed_y, energy]
BRAIN_HIDDEN = 4
BRAIN_OUTPUTS = 2  # [turn, acceleration]

# Fresh weights are sampled uniformly from [-WEIGHT_RANGE, WEIGHT_RANGE]
WEIGHT_RANGE = 2.0


# ============================================================================
# Creature Physics and Metabolism
# ============================================================================

ENERGY_INITIAL = 100.0
TURN_RATE = 0.1            # radians per unit of output[0]
ACCELERATION_RATE = 0.01   # speed units per unit of output[1]
ENERGY_DRAIN_BASE = 0.02   # per update call
ENERGY_DRAIN_SPEED = 0.002 # per unit |speed| per update call

# Optional cap on |speed| (None = disabled, accumulated speed is unbounded)
MAX_SPEED_DEFAULT = None


# ============================================================================
# World and Foraging Configuration
# ============================================================================

WORLD_SIZE_DEFAULT = 200.0
FOOD_COUNT_DEFAULT = 40
PICKUP_RADIUS = 1.5        # Consumption distance (ground plane units)
FOOD_ENERGY = 30.0         # Energy granted per item eaten

# Sensor value when no active food exists
NO_FOOD_DISTANCE = 100.0

# Simulation time multiplier applied to host dt before integration
TIME_SCALE_DEFAULT = 20.0


# ============================================================================
# Spawning Configuration
# ============================================================================

# Spawn positions are sampled within +/-(world_size / 2 - SPAWN_MARGIN)
SPAWN_MARGIN = 10.0

# Rejection sampling attempts against mountain biomes
SPAWN_ATTEMPTS = 10


# ============================================================================
# Spatial Indexing Configuration
# ============================================================================

# Use scipy.cKDTree for nearest-food queries instead of the O(n) scan
USE_FOOD_KDTREE = False
CKDTREE_LEAFSIZE = 16


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100
