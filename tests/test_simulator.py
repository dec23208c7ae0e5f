import math

import numpy as np
import pytest

from antipredator.brains.policy import EpsilonGreedyPolicy
from antipredator.brains.q_table import QTable
from antipredator.config.settings import Hyperparameters
from antipredator.errors import EpisodeTerminatedError
from antipredator.simulation.entities import Action
from antipredator.simulation.simulator import Simulator


@pytest.fixture
def simulator(world, encoder, settings, rng):
    return Simulator(
        world, encoder, EpsilonGreedyPolicy(5, rng=rng),
        settings.rewards, settings.encoder.close_distance,
    )


class TestPhysics:

    def test_fish_moves_by_action_vector(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(20.0, 20.0))
        simulator.advance(state, Action.UP)
        assert state.fish.position == (300.0, 196.5)
        simulator.advance(state, Action.RIGHT)
        assert state.fish.position == (303.5, 196.5)

    def test_fish_is_clamped_to_arena(self, simulator, make_state):
        state = make_state(fish_xy=(15.0, 200.0), predator_xy=(580.0, 20.0))
        simulator.advance(state, Action.LEFT)
        assert state.fish.x == 12.0
        simulator.advance(state, Action.LEFT)
        assert state.fish.x == 12.0

    def test_predator_pursues_fish(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(300.0 - 30.0, 200.0 - 40.0))
        simulator.advance(state, Action.STAY)
        assert state.predator.x == pytest.approx(270.0 + 2.0 * 0.6)
        assert state.predator.y == pytest.approx(160.0 + 2.0 * 0.8)

    def test_predator_slowed_inside_obstacle(self, simulator, make_state):
        state = make_state(fish_xy=(400.0, 140.0), predator_xy=(170.0, 140.0))
        simulator.advance(state, Action.STAY)
        assert state.predator.x == pytest.approx(171.0)

    def test_slowdown_uses_position_before_move(self, simulator, make_state):
        """A predator leaving an obstacle this tick still moves at half speed."""
        state = make_state(fish_xy=(400.0, 140.0), predator_xy=(179.5, 140.0))
        simulator.advance(state, Action.STAY)
        assert state.predator.x == pytest.approx(180.5)

        outside = make_state(fish_xy=(400.0, 140.0), predator_xy=(181.0, 140.0))
        simulator.advance(outside, Action.STAY)
        assert outside.predator.x == pytest.approx(183.0)

    def test_tick_counter(self, simulator, make_state):
        state = make_state()
        for _ in range(3):
            simulator.advance(state, Action.STAY)
        assert state.time_alive == 3


class TestRewards:

    def test_survival_reward(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(20.0, 20.0))
        reward, terminated = simulator.advance(state, Action.STAY)
        assert reward == 1.0
        assert not terminated

    def test_hiding_bonus_when_threatened(self, simulator, make_state):
        state = make_state(fish_xy=(140.0, 140.0), predator_xy=(240.0, 140.0))
        reward, terminated = simulator.advance(state, Action.STAY)
        assert reward == 1.5
        assert not terminated

    def test_no_hiding_bonus_when_predator_far(self, simulator, make_state):
        state = make_state(fish_xy=(140.0, 140.0), predator_xy=(500.0, 140.0))
        reward, _ = simulator.advance(state, Action.STAY)
        assert reward == 1.0

    def test_capture_overrides_hiding_bonus(self, simulator, make_state):
        state = make_state(fish_xy=(140.0, 140.0), predator_xy=(150.0, 140.0))
        reward, terminated = simulator.advance(state, Action.STAY)
        assert reward == -100.0
        assert terminated
        assert state.game_over

    def test_capture_threshold_is_sum_of_radii(self, simulator, make_state):
        # predator ends 33 away: just outside 12 + 20
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(335.0, 200.0))
        _, terminated = simulator.advance(state, Action.STAY)
        assert not terminated

        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(333.0, 200.0))
        _, terminated = simulator.advance(state, Action.STAY)
        assert terminated

    def test_coincident_positions_stay_numeric(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(300.0, 200.0))
        reward, terminated = simulator.advance(state, Action.STAY)
        assert terminated and reward == -100.0
        assert all(math.isfinite(v) for v in state.predator.position + state.fish.position)


class TestLearningStep:

    def test_step_updates_q_value(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(20.0, 20.0))
        table = QTable(5)
        outcome = simulator.step(state, table, Hyperparameters(epsilon_start=0.0))

        assert not outcome.terminated
        assert outcome.survival_ticks is None
        assert outcome.reward == 1.0
        assert table.get(outcome.state_key, outcome.action) == pytest.approx(0.1)

    def test_terminal_step_reports_survival(self, simulator, make_state):
        state = make_state(fish_xy=(300.0, 200.0), predator_xy=(310.0, 200.0))
        table = QTable(5)
        for _ in range(4):
            state.time_alive += 1
        outcome = simulator.step(state, table, Hyperparameters())

        assert outcome.terminated
        assert outcome.survival_ticks == 5
        assert table.get(outcome.state_key, outcome.action) == pytest.approx(-10.0)

    def test_step_after_capture_is_rejected(self, simulator, make_state):
        state = make_state()
        state.game_over = True
        with pytest.raises(EpisodeTerminatedError):
            simulator.step(state, QTable(5), Hyperparameters())
        with pytest.raises(EpisodeTerminatedError):
            simulator.advance(state, Action.STAY)

    def test_fish_stays_in_bounds_under_random_play(self, simulator, make_state, settings):
        state = make_state()
        table = QTable(5)
        hyper = Hyperparameters()
        r = settings.arena.fish_radius
        for _ in range(2000):
            if state.game_over:
                state = make_state(fish_xy=(float(np.random.uniform(100, 500)), 200.0))
            simulator.step(state, table, hyper)
            assert r <= state.fish.x <= settings.arena.width - r
            assert r <= state.fish.y <= settings.arena.height - r
