"""Typed errors raised by the eco-score prediction core."""


class EcoScoreError(Exception):
    """Base class for prediction core errors."""

    code = "eco_score_error"


class ModelUnavailableError(EcoScoreError):
    """Raised when a prediction is requested but the model artifacts are not loaded."""

    code = "model_unavailable"

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message
            or "ML model is not loaded. Ensure model files are in the models directory."
        )


class ModelInvocationError(EcoScoreError):
    """Raised when the loaded model fails or returns a non-finite score."""

    code = "model_invocation_failed"


class ProfileMissingError(EcoScoreError):
    """Raised when an authenticated prediction is requested without an eco-profile."""

    code = "profile_missing"

    def __init__(self, user_id: int) -> None:
        super().__init__(
            f"No eco-profile found for user {user_id}. "
            "Create a profile first via POST /predictions/profile."
        )
        self.user_id = user_id


class StorageError(EcoScoreError):
    """Raised when the backing database is unusable."""

    code = "storage_error"
