"""Predictor interface definitions."""

from abc import ABC, abstractmethod
from typing import List

import numpy as np


class IScoreModel(ABC):
    """Interface for the opaque eco-score model: vector in, scalar out."""

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Whether the model artifacts are available for inference."""
        raise NotImplementedError

    @property
    @abstractmethod
    def feature_names(self) -> List[str]:
        """Ordered feature names the model was trained on."""
        raise NotImplementedError

    @abstractmethod
    def invoke(self, feature_vector: np.ndarray) -> float:
        """Return the raw (unclamped) score for one feature vector."""
        raise NotImplementedError
