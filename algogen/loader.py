"""
YAML configuration loader with schema validation.

Loads simulation configuration from YAML files and validates it against
the JSON schema in schemas/simulation_config.schema.json.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import SimulationConfig


SCHEMA_FILENAME = "simulation_config.schema.json"


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ConfigLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"YAML parse error in {file_path}: {e}")

    # Empty file means "all defaults"
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping at top level of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        raise ConfigLoadError(f"Schema not found: {schema_path}")

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise ConfigLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON schema {schema_path}: {e}")


def load_config(file_path: Path, schema_dir: Optional[Path] = None) -> SimulationConfig:
    """
    Load simulation configuration from YAML.

    The file holds a `simulation` mapping of SimulationConfig fields; any
    field left out keeps its default from constants.py.

    Args:
        file_path: Path to YAML config file
        schema_dir: Optional directory holding simulation_config.schema.json

    Returns:
        SimulationConfig instance

    Raises:
        ConfigLoadError: If the file is missing, malformed, or invalid
    """
    file_path = Path(file_path)
    data = load_yaml(file_path)

    if schema_dir:
        schema_path = Path(schema_dir) / SCHEMA_FILENAME
        validate_against_schema(data, schema_path, file_path)

    sim_data = data.get('simulation', {}) or {}
    if not isinstance(sim_data, dict):
        raise ConfigLoadError(f"'simulation' must be a mapping in {file_path}")

    # Top-level description is carried for display only
    if 'description' in data and 'description' not in sim_data:
        sim_data = dict(sim_data, description=data['description'])

    try:
        return SimulationConfig.from_dict(sim_data)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Invalid configuration in {file_path}: {e}")
