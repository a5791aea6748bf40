from .architecture import EcoScoreNetwork

__all__ = ["EcoScoreNetwork"]
