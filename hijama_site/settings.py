"""Environment-sourced settings.

Only this module reads the environment; everything else receives values
explicitly (the verification site key in particular).
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

_DEFAULT_CONTENT = Path(__file__).resolve().parent.parent / "content" / "pages.json"


class Settings(BaseModel):
    verification_site_key: str | None = Field(default=None)
    content_path: Path = _DEFAULT_CONTENT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            verification_site_key=os.getenv("RECAPTCHA_SITE_KEY") or None,
            content_path=Path(os.getenv("SITE_CONTENT_PATH", str(_DEFAULT_CONTENT))),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
