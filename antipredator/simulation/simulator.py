"""
Per-tick physics and learning step.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from loguru import logger

from antipredator.errors import EpisodeTerminatedError
from .entities import EpisodeState
from .utils import get_distance


@dataclass(frozen=True)
class StepOutcome:
    """Result of a single simulation tick."""

    terminated: bool
    survival_ticks: Optional[int]
    reward: float
    action: int
    state_key: str
    next_state_key: str


class Simulator:
    """
    Advances an episode by one tick: encode, act, move, reward, learn.
    """

    def __init__(self, world, encoder, policy, rewards, close_distance):
        """
        Args:
            world: World with the movement rules
            encoder: StateEncoder
            policy: EpsilonGreedyPolicy
            rewards: RewardConfig
            close_distance: Distance under which hiding earns the bonus
        """
        self.world = world
        self.encoder = encoder
        self.policy = policy
        self.rewards = rewards
        self.close_distance = close_distance

    def encode(self, state: EpisodeState) -> str:
        return self.encoder.encode(state.fish.position, state.predator.position, state.obstacles)

    def advance(self, state: EpisodeState, action: int) -> Tuple[float, bool]:
        """
        Apply one tick of physics for a chosen action, without learning.

        Args:
            state: Episode to advance (mutated in place)
            action: Fish action index

        Returns:
            tuple: (reward, terminated)
        """
        if state.game_over:
            raise EpisodeTerminatedError("episode is over; reset it before stepping")

        fish, predator = state.fish, state.predator

        self.world.move_fish(fish, action)
        # Speed depends on where the predator was before moving
        self.world.move_predator(predator, fish)
        state.time_alive += 1

        distance = get_distance(fish.x, fish.y, predator.x, predator.y)
        reward = self.rewards.survival

        hiding = any(obs.contains(fish.x, fish.y) for obs in state.obstacles)
        if hiding and distance < self.close_distance:
            reward += self.rewards.hiding_bonus

        if self.world.is_capture(fish, predator):
            state.game_over = True
            reward = self.rewards.capture

        return reward, state.game_over

    def step(self, state: EpisodeState, q_table, hyperparams) -> StepOutcome:
        """
        Run one learning tick.

        Args:
            state: Episode state (mutated in place)
            q_table: QTable updated with the transition
            hyperparams: Hyperparameters (alpha, gamma, epsilon)

        Returns:
            StepOutcome

        Raises:
            EpisodeTerminatedError: If the episode already ended
        """
        if state.game_over:
            raise EpisodeTerminatedError("episode is over; reset it before stepping")

        key = self.encode(state)
        action = self.policy.choose_action(key, hyperparams.epsilon, q_table)

        reward, terminated = self.advance(state, action)
        next_key = self.encode(state)

        q_table.learn(key, action, reward, next_key, hyperparams.alpha, hyperparams.gamma)

        if terminated:
            logger.debug("Fish caught after {} ticks in state {}", state.time_alive, key)

        return StepOutcome(
            terminated=terminated,
            survival_ticks=state.time_alive if terminated else None,
            reward=reward,
            action=action,
            state_key=key,
            next_state_key=next_key,
        )
