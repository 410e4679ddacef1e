"""Runtime settings loaded from TOML and validated with pydantic."""
from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")
SETTINGS_ENV_VAR = "GEOTYPE_SETTINGS"


class AppSettings(BaseModel):
    """Locations of the taxonomy, schemas and run artefacts."""

    taxonomy_path: Path = Path("config/taxonomy.yaml")
    schema_dir: Path = Path("config/schemas")
    quarantine_dir: Path = Path("data/quarantine")
    metrics_dir: Path = Path("data/metrics")
    logging_config: Path = Path("config/logging.yaml")

    @field_validator("taxonomy_path", "schema_dir", "quarantine_dir", "metrics_dir", "logging_config", mode="before")
    @classmethod
    def _to_path(cls, value: str | Path) -> Path:
        if isinstance(value, Path):
            return value
        return Path(value)


class ClassifierSettings(BaseModel):
    """Tunables of the classification run."""

    max_types_count: int = Field(default=7, gt=0)
    max_path_depth: int = Field(default=3, ge=1, le=4)
    affirmative_keys: List[str] = Field(default_factory=lambda: ["capital"])
    numeric_keys: List[str] = Field(default_factory=lambda: ["admin_level"])


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)


def settings_path(explicit: Optional[str] = None) -> Path:
    """Pick the settings file: explicit argument, then environment, then default."""
    if explicit:
        return Path(explicit)
    return Path(os.environ.get(SETTINGS_ENV_VAR) or DEFAULT_SETTINGS_PATH)


def load_settings(path: Path) -> Settings:
    """Read the TOML configuration file; a missing file yields defaults."""
    if not path.exists():
        return Settings()
    with path.open("rb") as handle:
        return Settings(**tomllib.load(handle))
