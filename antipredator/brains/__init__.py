"""
Tabular Q-learning brains.
"""
from .q_table import QTable, q_update
from .policy import EpsilonGreedyPolicy

__all__ = ["QTable", "q_update", "EpsilonGreedyPolicy"]
