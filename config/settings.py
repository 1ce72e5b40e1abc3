from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _read_key_file(path: str) -> Optional[str]:
    if not path or not os.path.exists(path):
        return None
    try:
        # utf-8-sig drops the BOM some editors write
        with open(path, "r", encoding="utf-8-sig") as fh:
            return fh.read().strip() or None
    except (OSError, UnicodeDecodeError):
        return None


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    app_env: str = os.getenv("APP_ENV", "development")
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY") or _read_key_file(
        os.getenv("OPENAI_API_KEY_FILE", ".openai-key")
    )
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.6"))
    openai_api_url: str = os.getenv(
        "OPENAI_API_URL", "https://api.openai.com/v1/responses"
    )
    bulletin_path: str = os.getenv(
        "BULLETIN_TXT_PATH", os.path.join(os.getcwd(), "bulletin.txt")
    )
    static_dir: str = os.getenv("STATIC_DIR", os.getcwd())
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
