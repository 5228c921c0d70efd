from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings.

    Notes:
    - Defaults point at the vocabulary file shipped inside the package.
    - Override via env vars (``MAINT_AUTHZ_*``) so the UI-side and server-side
      deployments can share one vocabulary file.
    """

    model_config = SettingsConfigDict(env_prefix="MAINT_AUTHZ_", extra="ignore")

    vocabulary_path: str | None = None
    log_level: str = "INFO"

    def resolved_vocabulary_path(self) -> Path:
        if self.vocabulary_path:
            return Path(self.vocabulary_path)

        package_root = Path(__file__).resolve().parent
        return package_root / "config" / "vocabulary.yaml"


@lru_cache
def get_settings() -> Settings:
    return Settings()
