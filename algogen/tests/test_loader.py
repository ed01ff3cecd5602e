"""
Test configuration loading

Verifies YAML -> SimulationConfig conversion and schema validation.
"""

from pathlib import Path

import pytest

from algogen.loader import load_config, load_yaml, ConfigLoadError
from algogen.data_types import SimulationConfig
from algogen.creature_system import CreatureSystem
from algogen.terrain import FlatTerrain


REPO_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = REPO_ROOT / "data" / "config"
SCHEMA_DIR = REPO_ROOT / "schemas"


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_load_default_config():
    config = load_config(CONFIG_DIR / "default.yaml", SCHEMA_DIR)

    assert config.population_size == 24
    assert config.gene_count == 10
    assert config.mutation_rate == 0.08
    assert config.mutation_amount == 0.12
    assert config.world_size == 200.0
    assert config.food_count == 40
    assert config.max_speed is None
    assert config.use_food_kdtree is False
    assert config.seed == 12345
    assert config.description.startswith("Bloomfall")


def test_load_partial_config_keeps_defaults():
    config = load_config(CONFIG_DIR / "small_arena.yaml", SCHEMA_DIR)

    assert config.population_size == 8
    assert config.max_speed == 0.5
    assert config.use_food_kdtree is True
    assert config.pickup_radius == 1.5, "Unset fields fall back to constants"
    assert config.time_scale == 20.0


def test_empty_file_gives_defaults(tmp_path):
    config = load_config(write(tmp_path, ""), SCHEMA_DIR)
    assert config == SimulationConfig()


def test_missing_file():
    with pytest.raises(ConfigLoadError, match="File not found"):
        load_config(CONFIG_DIR / "does-not-exist.yaml")


def test_yaml_parse_error(tmp_path):
    with pytest.raises(ConfigLoadError, match="YAML parse error"):
        load_yaml(write(tmp_path, "simulation: [unclosed"))


def test_schema_rejects_bad_value(tmp_path):
    path = write(tmp_path, "simulation:\n  population_size: 0\n")
    with pytest.raises(ConfigLoadError, match="Validation error"):
        load_config(path, SCHEMA_DIR)


def test_schema_rejects_unknown_key(tmp_path):
    path = write(tmp_path, "simulation:\n  populationSize: 12\n")
    with pytest.raises(ConfigLoadError, match="Validation error"):
        load_config(path, SCHEMA_DIR)


def test_unknown_key_rejected_without_schema(tmp_path):
    path = write(tmp_path, "simulation:\n  food_cnt: 12\n")
    with pytest.raises(ConfigLoadError, match="Unknown config keys"):
        load_config(path)


def test_invalid_value_rejected_without_schema(tmp_path):
    path = write(tmp_path, "simulation:\n  mutation_rate: 1.5\n")
    with pytest.raises(ConfigLoadError, match="mutation_rate"):
        load_config(path)


def test_missing_schema_is_an_error(tmp_path):
    path = write(tmp_path, "simulation:\n  food_count: 3\n")
    with pytest.raises(ConfigLoadError, match="Schema not found"):
        load_config(path, tmp_path)


def test_system_from_config_file():
    system = CreatureSystem.from_config_file(
        CONFIG_DIR / "small_arena.yaml",
        terrain=FlatTerrain(),
        schema_dir=SCHEMA_DIR
    )

    assert len(system.creatures) == 8
    assert len(system.food) == 12
    assert system.food.use_kdtree
    assert system.seed == 7
