import numpy as np
import pytest

from antipredator.envs.fish_env import FishEvasionEnv
from antipredator.errors import EpisodeTerminatedError


@pytest.fixture
def env():
    return FishEvasionEnv(max_steps=300, render_mode="ansi")


class TestFishEvasionEnv:

    def test_spaces(self, env):
        assert env.action_space.n == 5
        assert list(env.observation_space.nvec) == [8, 3, 2, 2, 2, 2, 2]

    def test_reset(self, env):
        obs, info = env.reset(seed=0)
        assert env.observation_space.contains(obs)
        assert info["time_alive"] == 0
        assert info["state_key"].count("|") == 3

    def test_seeded_reset_is_reproducible(self, env):
        _, a = env.reset(seed=11)
        _, b = env.reset(seed=11)
        assert a["fish"] == b["fish"]
        assert a["predator"] == b["predator"]

    def test_random_rollout(self, env):
        env.reset(seed=1)
        env.action_space.seed(1)
        rewards = set()
        for _ in range(300):
            obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
            assert env.observation_space.contains(obs)
            rewards.add(reward)
            if terminated or truncated:
                break
        assert terminated or truncated
        assert rewards <= {1.0, 1.5, -100.0}

    def test_staying_still_gets_caught(self, env):
        env.reset(seed=2)
        terminated = False
        for _ in range(300):
            _, reward, terminated, truncated, _ = env.step(0)
            if terminated:
                break
        assert terminated
        assert reward == -100.0
        with pytest.raises(EpisodeTerminatedError):
            env.step(0)

    def test_truncation(self):
        env = FishEvasionEnv(max_steps=1)
        env.reset(seed=0)
        _, _, terminated, truncated, _ = env.step(0)
        assert not terminated
        assert truncated

    def test_invalid_action(self, env):
        env.reset(seed=0)
        with pytest.raises(ValueError):
            env.step(7)

    def test_render_ansi(self, env):
        env.reset(seed=0)
        frame = env.render()
        assert frame.startswith("t=0 ")
        assert FishEvasionEnv().render() is None

    def test_observation_dtype(self, env):
        obs, _ = env.reset(seed=0)
        assert obs.dtype == np.int64
