"""
Configuration management system.
Handles loading, saving, and validation of configurations.
"""
import copy
import json
import math
import os
from typing import Dict, Any
from pathlib import Path

from loguru import logger

from antipredator.errors import ConfigError
from antipredator.simulation.entities import Action

MIN_STEPS_PER_TICK = 1
MAX_STEPS_PER_TICK = 50

REQUIRED_SECTIONS = ['simulation', 'state', 'rewards', 'qlearning', 'visualization']


def steps_per_tick_error(value):
    """Return a message if value is not a valid steps-per-tick, else None."""
    if isinstance(value, bool) or not isinstance(value, int) \
            or not MIN_STEPS_PER_TICK <= value <= MAX_STEPS_PER_TICK:
        return (f"steps_per_tick must be an integer in "
                f"[{MIN_STEPS_PER_TICK}, {MAX_STEPS_PER_TICK}], got {value!r}")
    return None


def check_steps_per_tick(value):
    """
    Raises:
        ConfigError: If value is not an integer in [1, 50]
    """
    error = steps_per_tick_error(value)
    if error:
        raise ConfigError(error)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


class ConfigManager:
    """
    Manages Q-learning simulation configurations.
    Handles JSON load/save and validation.
    """

    def __init__(self):
        self.config_dir = Path(__file__).parent / 'defaults'
        self.current_config = None

    def load_default(self) -> Dict[str, Any]:
        """
        Load the default configuration shipped with the package.

        Returns:
            dict: Configuration dictionary
        """
        config_file = self.config_dir / "qlearning_default.json"

        if not config_file.exists():
            raise FileNotFoundError(f"Default config not found: {config_file}")

        with open(config_file, 'r') as f:
            config = json.load(f)

        self.current_config = config
        return config

    def load_from_file(self, path: str) -> Dict[str, Any]:
        """
        Load configuration from a JSON file.

        Missing keys are filled in from the defaults.

        Args:
            path: Path to JSON file

        Returns:
            dict: Configuration dictionary

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        try:
            with open(path, 'r') as f:
                overrides = json.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

        if not isinstance(overrides, dict):
            raise ConfigError(f"Config file {path} must hold a JSON object")

        config = self.merge(self.create_default_config(), overrides)
        logger.info("Loaded configuration from {}", path)

        self.current_config = config
        return config

    def save_to_file(self, config: Dict[str, Any], path: str):
        """
        Save configuration to a JSON file.

        Args:
            config: Configuration dictionary
            path: Path to save to
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(config, f, indent=2)

    def merge(self, base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration dictionaries (deep merge).

        Args:
            base: Base configuration
            overrides: Override values

        Returns:
            dict: Merged configuration
        """
        result = copy.deepcopy(base)

        for key, value in overrides.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def validate(self, config: Dict[str, Any]) -> list:
        """
        Validate configuration.

        Args:
            config: Configuration to validate

        Returns:
            list: List of error messages (empty if valid)
        """
        errors = []

        for key in REQUIRED_SECTIONS:
            if key not in config or not isinstance(config[key], dict):
                errors.append(f"Missing required section: {key}")
        if errors:
            return errors

        sim = config['simulation']
        for key in ['arena_width', 'arena_height', 'fish_radius', 'predator_radius',
                    'fish_speed', 'predator_speed']:
            if not _is_number(sim.get(key)):
                errors.append(f"Missing or non-numeric simulation parameter: {key}")
            elif sim[key] <= 0:
                errors.append(f"{key} must be positive")

        for key in ['spawn_jitter', 'corner_margin']:
            if key in sim and (not _is_number(sim[key]) or sim[key] < 0):
                errors.append(f"{key} must be a non-negative number")

        slowdown = sim.get('predator_obstacle_slowdown', 0.5)
        if not _is_number(slowdown) or not 0 <= slowdown <= 1:
            errors.append("predator_obstacle_slowdown must be in [0, 1]")

        if _is_number(sim.get('arena_width')) and _is_number(sim.get('fish_radius')):
            if 2 * sim['fish_radius'] > sim['arena_width']:
                errors.append("arena_width must fit the fish")
        if _is_number(sim.get('arena_height')) and _is_number(sim.get('fish_radius')):
            if 2 * sim['fish_radius'] > sim['arena_height']:
                errors.append("arena_height must fit the fish")

        errors.extend(self._validate_actions(sim.get('actions')))
        errors.extend(self._validate_obstacles(sim.get('obstacles', [])))

        state = config['state']
        for key in ['critical_distance', 'close_distance', 'wall_margin']:
            if not _is_number(state.get(key)) or state[key] < 0:
                errors.append(f"state.{key} must be a non-negative number")
        if _is_number(state.get('critical_distance')) and _is_number(state.get('close_distance')) \
                and state['critical_distance'] > state['close_distance']:
            errors.append("critical_distance must not exceed close_distance")

        for key in ['survival', 'hiding_bonus', 'capture']:
            if not _is_number(config['rewards'].get(key)):
                errors.append(f"rewards.{key} must be a number")

        ql = config['qlearning']
        for key in ['alpha', 'gamma', 'epsilon_start', 'epsilon_decay', 'epsilon_min']:
            if not _is_number(ql.get(key)):
                errors.append(f"qlearning.{key} must be a number")
            elif not 0 <= ql[key] <= 1:
                errors.append(f"qlearning.{key} must be in [0, 1]")
        if _is_number(ql.get('epsilon_start')) and _is_number(ql.get('epsilon_min')):
            if ql['epsilon_min'] > ql['epsilon_start']:
                errors.append("epsilon_min must not exceed epsilon_start")

        max_gen = ql.get('max_generations')
        if max_gen is not None and (isinstance(max_gen, bool) or not isinstance(max_gen, int) or max_gen <= 0):
            errors.append("max_generations must be a positive integer or null")
        seed = ql.get('seed')
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
            errors.append("seed must be a non-negative integer or null")

        vis = config['visualization']
        speed_error = steps_per_tick_error(vis.get('steps_per_tick'))
        if speed_error:
            errors.append(speed_error)
        if not _is_number(vis.get('fps', 60)) or vis.get('fps', 60) <= 0:
            errors.append("fps must be positive")
        if not isinstance(vis.get('show_sensors', True), bool):
            errors.append("show_sensors must be a boolean")

        return errors

    def _validate_actions(self, actions) -> list:
        errors = []
        if not isinstance(actions, list) or len(actions) != len(Action):
            return [f"actions must list exactly {len(Action)} entries"]

        for index, action in enumerate(actions):
            if not isinstance(action, dict) or not _is_number(action.get('dx')) \
                    or not _is_number(action.get('dy')):
                errors.append(f"action {index} needs numeric dx and dy")
            elif action.get('name', Action(index).name) != Action(index).name:
                errors.append(f"action {index} must be {Action(index).name}")
        return errors

    def _validate_obstacles(self, obstacles) -> list:
        errors = []
        if not isinstance(obstacles, list):
            return ["obstacles must be a list"]

        for index, obs in enumerate(obstacles):
            if not isinstance(obs, dict):
                errors.append(f"obstacle {index} must be an object")
                continue
            for key in ['x', 'y', 'w', 'h']:
                if not _is_number(obs.get(key)):
                    errors.append(f"obstacle {index} needs numeric {key}")
            if (_is_number(obs.get('w')) and obs['w'] <= 0) or (_is_number(obs.get('h')) and obs['h'] <= 0):
                errors.append(f"obstacle {index} must have positive size")
            if obs.get('type', 'algae') not in ('algae', 'rock'):
                errors.append(f"obstacle {index} type must be 'algae' or 'rock'")
        return errors

    def create_default_config(self) -> Dict[str, Any]:
        """
        Create a default configuration from the bundled defaults.

        Returns:
            dict: Default configuration (fresh copy)
        """
        manager = ConfigManager()
        return manager.load_default()
