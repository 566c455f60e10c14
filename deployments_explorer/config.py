"""
Runtime settings, read from DEPLOYMENTS_* environment variables or a `.env`
file in the working directory.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .loader import DEFAULT_TIMEOUT

DEFAULT_SOURCE = "./deployments.md"


class Settings(BaseSettings):
    """Where to find the deployments document and how long to wait for it.

    Invalid values (e.g. a non-numeric or non-positive timeout) raise
    pydantic.ValidationError on construction.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEPLOYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    source: str = DEFAULT_SOURCE
    fallback: Optional[str] = None
    fetch_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
