from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    scraper_api_key: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""

    # Scraping (ScraperAPI)
    scraper_api_url: str = "https://api.scraperapi.com/"
    scrape_timeout: int = 70  # seconds
    max_content_chars: int = 200000

    # Component generation
    generation_provider: str = "gemini"  # "gemini" | "anthropic"
    gemini_model: str = "gemini-2.0-flash"
    claude_model: str = "claude-sonnet-4-5-20250929"
    prompt_html_chars: int = 10000
    generation_timeout: int = 120  # seconds

    # Preview host page
    react_url: str = "https://unpkg.com/react@18/umd/react.production.min.js"
    react_dom_url: str = "https://unpkg.com/react-dom@18/umd/react-dom.production.min.js"
    babel_url: str = "https://unpkg.com/@babel/standalone/babel.min.js"
    lucide_url: str = "https://unpkg.com/lucide-react@0.460.0/dist/umd/lucide-react.min.js"
    clsx_url: str = "https://esm.sh/clsx@2.1.1"
    tailwind_merge_url: str = "https://esm.sh/tailwind-merge@2.5.5"
    tailwind_url: str = "https://cdn.tailwindcss.com"
    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 800
    compiler_retry_delay: float = 0.1  # seconds between Babel readiness polls

    default_example: str = "button"

    class Config:
        # .env lives in the repo root (two levels up from backend/livepreview/)
        _env_path = os.path.join(os.path.dirname(__file__), "..", "..", ".env")
        env_file = _env_path if os.path.exists(_env_path) else None
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings():
    return Settings()
