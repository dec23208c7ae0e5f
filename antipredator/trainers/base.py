"""
Abstract base class for all trainers.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any


class TrainerBase(ABC):
    """
    Base class for all training algorithms.
    Defines the interface that all trainers must implement.
    """

    def __init__(self, config):
        """
        Initialize trainer with configuration.

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.is_training = False
        self.metrics = {}
        self.max_generations = None

    @property
    @abstractmethod
    def current_generation(self) -> int:
        """Number of completed episodes."""

    @abstractmethod
    def train_step(self) -> Dict[str, Any]:
        """
        Execute one training tick (a batch of simulation steps).

        Returns:
            dict: Metrics from this tick
        """
        pass

    @abstractmethod
    def get_metrics(self) -> Dict[str, float]:
        """
        Get current training metrics.

        Returns:
            dict: Current metrics
        """
        pass

    @abstractmethod
    def reset(self):
        """
        Reset trainer to initial state.
        """
        pass

    def is_finished(self) -> bool:
        """
        Check if training is complete.

        Returns:
            bool: True if training should stop
        """
        if self.max_generations is None:
            return False
        return self.current_generation >= self.max_generations
