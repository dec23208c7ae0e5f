from .fish_env import FishEvasionEnv

__all__ = ["FishEvasionEnv"]
