"""Concrete eco-score model backed by a trained torch network."""

import math
from typing import List, Optional, Sequence

import numpy as np
import torch

from ecoscore.core.errors import ModelInvocationError, ModelUnavailableError
from ecoscore.core.interfaces.services.predictor import IScoreModel
from ecoscore.core.prediction.model.architecture import EcoScoreNetwork
from ecoscore.core.prediction.model.load import load_artifacts
from ecoscore.settings import Settings


class EcoScoreModel(IScoreModel):
    """Read-only model handle, constructed once at startup and shared by requests.

    An instance without a network is valid: it reports ``is_loaded`` as False
    and every ``invoke`` raises ``ModelUnavailableError``.
    """

    def __init__(
        self,
        network: Optional[EcoScoreNetwork] = None,
        feature_names: Optional[Sequence[str]] = None,
    ) -> None:
        self._network = network
        self._feature_names = list(feature_names) if feature_names else []

    @classmethod
    def from_settings(cls, settings: Settings) -> "EcoScoreModel":
        """Load artifacts from the configured directory; never raises."""
        loaded = load_artifacts(
            settings.model_dir,
            settings.model_filename,
            settings.features_filename,
            settings.model_hidden_sizes,
        )
        if loaded is None:
            return cls()
        network, feature_names = loaded
        return cls(network, feature_names)

    @property
    def is_loaded(self) -> bool:
        return self._network is not None and bool(self._feature_names)

    @property
    def feature_names(self) -> List[str]:
        return list(self._feature_names)

    def invoke(self, feature_vector: np.ndarray) -> float:
        if not self.is_loaded:
            raise ModelUnavailableError()
        if feature_vector.shape[-1] != len(self._feature_names):
            raise ModelInvocationError(
                f"expected {len(self._feature_names)} features, "
                f"got {feature_vector.shape[-1]}"
            )

        tensor = torch.from_numpy(
            feature_vector.astype(np.float32).reshape(1, -1)
        )
        try:
            with torch.no_grad():
                score = float(self._network(tensor).item())
        except RuntimeError as exc:
            raise ModelInvocationError(f"model inference failed: {exc}") from exc

        if not math.isfinite(score):
            raise ModelInvocationError(f"model returned a non-finite score: {score}")
        return score
