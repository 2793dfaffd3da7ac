"""
Grid defaults and limits.

Values can be overridden through ``SHEETCORE_``-prefixed environment variables,
e.g. ``SHEETCORE_DEFAULT_ROWS=100``.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GridSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHEETCORE_")

    # Initial sheet bounds
    default_rows: int = Field(22, ge=1)
    default_cols: int = Field(14, ge=1)

    # Layout sizes (pixels)
    default_row_height: int = Field(34, ge=1)
    default_column_width: int = Field(126, ge=1)
    group_header_height: int = Field(34, ge=1)
    min_row_height: int = Field(20, ge=1)
    min_column_width: int = Field(50, ge=1)

    # Auto-expansion: grow by growth_step once an edit lands within
    # growth_margin of the current bound
    growth_step: int = Field(10, ge=1)
    growth_margin: int = Field(2, ge=0)

    overscan: int = Field(5, ge=0)

    max_recalc_passes: int = Field(1000, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> GridSettings:
    """Return the process-wide settings, read once from the environment."""
    return GridSettings()
