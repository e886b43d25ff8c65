from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Target
    TARGET_URL: str = "https://news.ycombinator.com/newest"
    RESPONSE_URL_FRAGMENT: str = "news.ycombinator.com"

    # Checking
    ITEMS_TO_CHECK: int = 100
    ITEMS_PER_PAGE: int = 30

    # Selectors ({index} is the 0-based position of the item on the page)
    TIMESTAMP_SELECTOR: str = "#hnmain .subtext span.age >> nth={index}"
    NEXT_PAGE_SELECTOR: str = "a.morelink"

    # Navigation behaviour
    RATE_LIMIT_STATUS: int = 403
    NAVIGATION_DELAY: float = 0.0

    # Browser
    HEADLESS: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
