import numpy as np
import pytest

from antipredator.config.config_manager import ConfigManager
from antipredator.config.settings import SimulationSettings
from antipredator.simulation.entities import EpisodeState, Fish, Obstacle, Predator
from antipredator.simulation.state_encoder import StateEncoder
from antipredator.simulation.world import World


@pytest.fixture
def config():
    return ConfigManager().create_default_config()


@pytest.fixture
def settings(config):
    return SimulationSettings.from_config(config)


@pytest.fixture
def world(settings):
    return World(settings.arena)


@pytest.fixture
def encoder(settings):
    return StateEncoder(settings.arena.width, settings.arena.height, settings.encoder)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_state(world, settings):
    """Build an episode state with the fish and predator at given points."""

    def _make(fish_xy=(300.0, 200.0), predator_xy=(20.0, 20.0), obstacles=None):
        arena = settings.arena
        return EpisodeState(
            fish=Fish(fish_xy[0], fish_xy[1], arena.fish_radius),
            predator=Predator(predator_xy[0], predator_xy[1], arena.predator_radius),
            obstacles=world.obstacles if obstacles is None else tuple(obstacles),
        )

    return _make


@pytest.fixture
def hideout():
    return Obstacle(100, 100, 80, 80, "algae")
