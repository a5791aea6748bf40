"""This file contains global application settings."""

from os import path
from typing import List

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

DOTENV_FILE = ".env" if path.isfile(".env") else None


class Settings(BaseSettings):
    """Application settings."""

    # Application
    environment: str = "local"
    application_name: str = "eco_score_engine"
    log_level: str = "info"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Model artifacts
    model_dir: str = "models"
    model_filename: str = "eco_score_mlp.pt"
    features_filename: str = "model_features.txt"
    model_hidden_sizes: List[int] = [64, 32]
    model_version: str = "v1.0"

    # Storage
    db_path: str = "~/.ecoscore/eco.db"
    history_limit: int = 20

    model_config = ConfigDict(env_file=DOTENV_FILE, protected_namespaces=())


settings = Settings()
