import numpy as np
import pytest

from algogen.geometry import (
    plane_to_ground,
    ground_to_plane,
    distance_2d,
    clamp_to_arena,
    distance_to_wall,
)
from algogen.terrain import (
    FlatTerrain,
    GridTerrain,
    classify_biome,
    MOUNTAIN,
    PLAINS,
    TRANSITION,
)
from algogen.phenotype import decode_phenotype


# ----------------------------------------------------------------------------
# Plane <-> ground mapping
# ----------------------------------------------------------------------------

def test_plane_y_maps_to_ground_z():
    assert plane_to_ground(3.0, -4.0) == (3.0, -4.0)
    assert ground_to_plane(3.0, -4.0) == (3.0, -4.0)


def test_mapping_round_trip():
    x, y = 12.5, -7.25
    assert ground_to_plane(*plane_to_ground(x, y)) == (x, y)


def test_distance_2d():
    assert distance_2d(0.0, 0.0, 3.0, 4.0) == pytest.approx(5.0)


# ----------------------------------------------------------------------------
# Arena
# ----------------------------------------------------------------------------

def test_clamp_inside_is_noop():
    assert clamp_to_arena(5.0, -5.0, 10.0) == (5.0, -5.0)


def test_clamp_each_axis_independently():
    assert clamp_to_arena(15.0, -3.0, 10.0) == (10.0, -3.0)
    assert clamp_to_arena(-15.0, 30.0, 10.0) == (-10.0, 10.0)


def test_distance_to_wall():
    assert distance_to_wall(0.0, 0.0, 50.0) == 50.0
    assert distance_to_wall(45.0, 0.0, 50.0) == pytest.approx(5.0)
    assert distance_to_wall(0.0, -48.0, 50.0) == pytest.approx(2.0)
    assert distance_to_wall(60.0, 0.0, 50.0) == 0.0


# ----------------------------------------------------------------------------
# Terrain adapters
# ----------------------------------------------------------------------------

def test_classify_biome_thresholds():
    assert classify_biome(0.1) == MOUNTAIN
    assert classify_biome(0.3) == TRANSITION
    assert classify_biome(0.5) == TRANSITION
    assert classify_biome(0.7) == TRANSITION
    assert classify_biome(0.9) == PLAINS


def test_flat_terrain():
    terrain = FlatTerrain(height=2.0)
    assert terrain.height_at(10.0, -10.0) == 2.0
    assert terrain.biome_at(10.0, -10.0) == PLAINS


def test_flat_terrain_rejects_unknown_biome():
    with pytest.raises(ValueError):
        FlatTerrain(biome='swamp')


def test_grid_terrain_lookup():
    heights = np.arange(16, dtype=np.float64).reshape(4, 4)
    factors = np.full((4, 4), 0.5)
    factors[0, 0] = 0.0
    terrain = GridTerrain(40.0, heights, factors)

    # Nodes every 10 units from -20; row along Z, column along X
    assert terrain.height_at(-20.0, -20.0) == 0.0
    assert terrain.height_at(10.0, -20.0) == 3.0
    assert terrain.height_at(-20.0, 10.0) == 12.0

    # Bilinear between nodes
    assert terrain.height_at(-15.0, -20.0) == pytest.approx(0.5)
    assert terrain.height_at(-15.0, -15.0) == pytest.approx(2.5)
    assert terrain.height_at(0.0, 0.0) == pytest.approx(10.0)

    # Biome comes from the containing cell
    assert terrain.biome_at(-15.0, -15.0) == MOUNTAIN
    assert terrain.biome_at(5.0, 5.0) == TRANSITION


def test_grid_terrain_outside_is_plains_with_edge_height():
    heights = np.arange(4, dtype=np.float64).reshape(2, 2)
    terrain = GridTerrain(10.0, heights, np.zeros((2, 2)))
    assert terrain.biome_at(100.0, 0.0) == PLAINS
    assert terrain.height_at(100.0, -100.0) == 1.0


def test_grid_terrain_shape_validation():
    with pytest.raises(ValueError):
        GridTerrain(10.0, np.zeros((2, 3)))
    with pytest.raises(ValueError):
        GridTerrain(10.0, np.zeros((2, 2)), np.zeros((3, 3)))


# ----------------------------------------------------------------------------
# Phenotype
# ----------------------------------------------------------------------------

def test_phenotype_extremes():
    low = decode_phenotype([0.0] * 10)
    high = decode_phenotype([1.0] * 10)

    assert (low.size, high.size) == (0.5, 1.8)
    assert (low.squish, high.squish) == (pytest.approx(0.6), pytest.approx(1.4))
    assert (low.roughness, high.roughness) == (0.0, pytest.approx(0.6))
    assert (low.nucleus_count, high.nucleus_count) == (1, 6)
    assert (low.tentacle_length, high.tentacle_length) == (0.0, 1.5)


def test_phenotype_hue_is_gene_two():
    genes = [0.5] * 10
    genes[2] = 0.37
    assert decode_phenotype(genes).hue == 0.37


def test_phenotype_needs_six_genes():
    with pytest.raises(ValueError):
        decode_phenotype([0.5] * 5)


def test_phenotype_nucleus_count_reaches_six_only_at_one():
    counts = [decode_phenotype([0.5, 0.5, 0.5, 0.5, g, 0.5]).nucleus_count for g in (0.0, 0.5, 0.999, 1.0)]
    assert counts == [1, 3, 5, 6]
