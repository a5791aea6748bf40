"""Shared test fixtures for eco-score tests."""

from datetime import datetime, timezone
from typing import List, Optional

import numpy as np
import pytest
import torch

from ecoscore.core.interfaces.services.predictor import IScoreModel
from ecoscore.core.prediction.model.architecture import EcoScoreNetwork
from ecoscore.core.prediction.model.feature_pipeline import all_feature_names
from ecoscore.core.prediction.services.orchestrator import PredictionOrchestrator
from ecoscore.core.storage.database import EcoDatabase
from ecoscore.core.storage.repository import EcoRepository
from ecoscore.settings import Settings

# A Saturday in spring.
FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MODEL_DIR", "DB_PATH", "MODEL_HIDDEN_SIZES", "MODEL_VERSION"):
        monkeypatch.delenv(name, raising=False)


class StubScoreModel(IScoreModel):
    """Score model returning a fixed raw score and remembering its inputs."""

    def __init__(
        self,
        raw_score: float = 72.5,
        feature_names: Optional[List[str]] = None,
        loaded: bool = True,
    ) -> None:
        self.raw_score = raw_score
        self._feature_names = feature_names or all_feature_names()
        self._loaded = loaded
        self.vectors: List[np.ndarray] = []

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def feature_names(self) -> List[str]:
        return list(self._feature_names)

    def invoke(self, feature_vector: np.ndarray) -> float:
        self.vectors.append(feature_vector)
        return self.raw_score

    def last_feature(self, name: str) -> float:
        return float(self.vectors[-1][self._feature_names.index(name)])


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def eco_db():
    """Create an in-memory EcoDatabase for testing."""
    db = EcoDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def repository(eco_db) -> EcoRepository:
    return EcoRepository(eco_db)


@pytest.fixture
def stub_model() -> StubScoreModel:
    return StubScoreModel()


@pytest.fixture
def orchestrator(stub_model, repository, fixed_clock) -> PredictionOrchestrator:
    return PredictionOrchestrator.from_repository(
        stub_model, repository, model_version="test-v1", clock=fixed_clock
    )


@pytest.fixture
def model_settings(tmp_path) -> Settings:
    """Write a small trained-looking network and its feature list to ``tmp_path``."""
    torch.manual_seed(7)
    feature_names = all_feature_names()
    network = EcoScoreNetwork(len(feature_names), [8, 4])
    torch.save(network.state_dict(), tmp_path / "eco_score_mlp.pt")
    (tmp_path / "model_features.txt").write_text(
        "\n".join(feature_names) + "\n\n", encoding="utf-8"
    )
    return Settings(
        model_dir=str(tmp_path),
        model_hidden_sizes=[8, 4],
        db_path=":memory:",
    )
