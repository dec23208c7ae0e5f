"""
Configuration loading, validation and typed settings.
"""
from .config_manager import ConfigManager
from .settings import (
    ArenaConfig,
    DisplayConfig,
    EncoderConfig,
    Hyperparameters,
    RewardConfig,
    SimulationSettings,
    MIN_STEPS_PER_TICK,
    MAX_STEPS_PER_TICK,
)

__all__ = [
    "ConfigManager",
    "ArenaConfig",
    "DisplayConfig",
    "EncoderConfig",
    "Hyperparameters",
    "RewardConfig",
    "SimulationSettings",
    "MIN_STEPS_PER_TICK",
    "MAX_STEPS_PER_TICK",
]
