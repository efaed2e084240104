"""Configuration loading from YAML + environment variables + .env."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MedAssessConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Vision model (from env / .env)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1"
    gemini_timeout_seconds: float = 45.0
    gemini_temperature: float = 0.1
    gemini_max_output_tokens: int = 1000

    # Uploads
    upload_max_bytes: int = 10 * 1024 * 1024
    upload_dir: str = ""

    @classmethod
    def from_yaml(cls, path: str | Path = "medassess.yaml") -> MedAssessConfig:
        """Load config from YAML file, with env vars taking precedence."""
        yaml_path = Path(path)
        yaml_data: dict[str, Any] = {}

        if yaml_path.exists():
            with yaml_path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            yaml_data = _flatten_yaml(raw.get("medassess", {}))

        config = cls(**yaml_data)
        # Init kwargs outrank env in pydantic-settings; re-apply whatever env set.
        env = cls()
        return config.model_copy(update={k: getattr(env, k) for k in env.model_fields_set})


def _flatten_yaml(data: dict, prefix: str = "") -> dict:
    """Flatten nested YAML (``gemini: {model: ...}``) into ``gemini_model``."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(_flatten_yaml(value, full_key))
        else:
            flat[full_key] = value
    return flat
