from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    openrouter_api_key: str = ""

    # Visual analyzer
    vision_provider: str = "anthropic"  # "anthropic" or "openrouter"
    vision_model: str = "claude-sonnet-4-5-20250929"
    openrouter_model: str = "openai/gpt-4o"
    vision_max_tokens: int = 4000
    vision_timeout: float = 90.0  # seconds

    # Acquisition
    page_load_timeout: int = 30000  # milliseconds, network-idle wait
    fallback_load_timeout: int = 10000  # milliseconds, domcontentloaded retry
    settle_delay: int = 2000  # milliseconds
    viewport_width: int = 1920
    viewport_height: int = 1080
    max_full_page_height: int = 12000
    max_concurrent_scrapes: int = 3

    # Screenshot compression before the vision call
    screenshot_max_width: int = 1280
    screenshot_quality: int = 75
    screenshot_max_dim: int = 7000  # longest side in px after resize

    clone_timeout: int = 180  # seconds

    class Config:
        # Look for .env in the repo root (two levels up from backend/landing_cloner/)
        # In production env vars are injected directly, .env is optional
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
