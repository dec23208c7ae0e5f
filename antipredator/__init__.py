"""
Anti-predator fish: tabular Q-learning evasion in a bounded arena.
"""
from .trainers.q_trainer import QLearningTrainer
from .controller.simulation_controller import SimulationController

__all__ = ["QLearningTrainer", "SimulationController"]
__version__ = "1.0.0"
