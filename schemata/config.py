# schemata/config.py
"""
schemata configuration — single source of truth via Pydantic Settings.

Resolution order: CLI flags > env vars (SCHEMATA_*) > .env file > defaults.
Build-wide callables (naming function, filters, type mappings) cannot come
from the environment; they are attached to :class:`schemata.options.SchemaOptions`.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemataConfig(BaseSettings):
    """Central configuration for schema builds."""

    model_config = SettingsConfigDict(
        env_prefix="SCHEMATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Enums ---
    describe_all_enums_as_strings: bool = False
    camel_case_enum_strings: bool = False

    # --- Schema ids ---
    use_full_type_names: bool = False
    ref_prefix: str = "#/definitions/"

    # --- Properties ---
    ignore_obsolete_properties: bool = False
    # "derived": a redeclared property replaces the inherited one outright.
    # "merge": constraints unset on the derived declaration come from the base.
    property_precedence: Literal["derived", "merge"] = "derived"

    # --- Logging ---
    log_level: str = "INFO"

    # --- Paths ---
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".schemata")

    @property
    def log_dir(self) -> Path:
        return self.home_dir / "logs"


@lru_cache(maxsize=1)
def get_config() -> SchemataConfig:
    """Return the global config singleton."""
    return SchemataConfig()
