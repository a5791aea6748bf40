"""Utilities for loading eco-score model artifacts."""

import logging
import os
from typing import List, Optional, Sequence, Tuple

import torch

from .architecture import EcoScoreNetwork

logger = logging.getLogger(__name__)


def load_feature_names(features_path: str) -> List[str]:
    """Read the ordered feature-name list; blank lines are skipped."""
    with open(features_path, "r", encoding="utf-8") as handle:
        return [line.strip() for line in handle if line.strip()]


def build_network(
    weights_path: str, input_dimension: int, hidden_sizes: Sequence[int]
) -> EcoScoreNetwork:
    """Instantiate and hydrate the trained network from its state dict."""
    network = EcoScoreNetwork(input_dimension, list(hidden_sizes))
    state_dict = torch.load(weights_path, map_location="cpu", weights_only=True)
    network.load_state_dict(state_dict)
    network.eval()
    return network


def load_artifacts(
    model_dir: str,
    model_filename: str,
    features_filename: str,
    hidden_sizes: Sequence[int],
) -> Optional[Tuple[EcoScoreNetwork, List[str]]]:
    """Load ``(network, feature_names)`` from ``model_dir``.

    Returns None when either file is missing or cannot be loaded; callers
    treat that as "model unavailable" rather than a startup failure.
    """
    model_path = os.path.join(model_dir, model_filename)
    features_path = os.path.join(model_dir, features_filename)

    if not os.path.isfile(model_path):
        logger.warning("Eco-score model not found at %s", model_path)
        return None
    if not os.path.isfile(features_path):
        logger.warning("Feature names not found at %s", features_path)
        return None

    try:
        feature_names = load_feature_names(features_path)
        if not feature_names:
            raise ValueError(f"feature list {features_path} is empty")
        network = build_network(model_path, len(feature_names), hidden_sizes)
    except Exception:
        logger.exception("Failed to load eco-score model from %s", model_dir)
        return None

    logger.info("Eco-score model loaded (%d features)", len(feature_names))
    return network, feature_names
