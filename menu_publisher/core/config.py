import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    # Source page
    MENU_URL: str = os.getenv("MENU_URL", "https://tullin.munu.shop/meny")
    MENU_SITE_NAME: str = os.getenv("MENU_SITE_NAME", "Smaus")
    MENU_CONTAINER_SELECTOR: str = os.getenv("MENU_CONTAINER_SELECTOR", ".static-container")
    MENU_TIMEZONE: str = os.getenv("MENU_TIMEZONE", "Europe/Oslo")
    MENU_LANGUAGE: str = os.getenv("MENU_LANGUAGE", "Norwegian")

    # Language model
    GOOGLE_API_KEY: Optional[str] = os.getenv("GOOGLE_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    LLM_MAX_OUTPUT_TOKENS: int = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "800"))
    LLM_EXTRACT_MAX_TOKENS: int = int(os.getenv("LLM_EXTRACT_MAX_TOKENS", "250"))

    # Image generation
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "dall-e-3")
    IMAGE_SIZE: str = os.getenv("IMAGE_SIZE", "1024x1024")
    IMAGE_RESPONSE_FORMAT: str = os.getenv("IMAGE_RESPONSE_FORMAT", "b64_json")
    IMAGE_FILENAME: str = os.getenv("IMAGE_FILENAME", "menu-image.png")

    # Object storage (Cloudflare R2, S3 API)
    R2_ACCOUNT_ID: Optional[str] = os.getenv("R2_ACCOUNT_ID")
    R2_ACCESS_KEY_ID: Optional[str] = os.getenv("R2_ACCESS_KEY_ID")
    R2_SECRET_ACCESS_KEY: Optional[str] = os.getenv("R2_SECRET_ACCESS_KEY")
    R2_BUCKET_NAME: Optional[str] = os.getenv("R2_BUCKET_NAME")
    R2_PUBLIC_DOMAIN: Optional[str] = os.getenv("R2_PUBLIC_DOMAIN") or None
    SIGNED_URL_TTL_SECONDS: int = int(os.getenv("SIGNED_URL_TTL_SECONDS", "432000"))

    # Slack
    SLACK_BOT_TOKEN: Optional[str] = os.getenv("SLACK_BOT_TOKEN") or None
    SLACK_CHANNEL_ID: Optional[str] = os.getenv("SLACK_CHANNEL_ID") or None
    SLACK_WEBHOOK_URL: Optional[str] = os.getenv("SLACK_WEBHOOK_URL") or None
    SLACK_FOOTER_TEXT: str = os.getenv("SLACK_FOOTER_TEXT", "*Vil du bidra? Ta kontakt*")
    SLACK_PROMPT_CHAR_BUDGET: int = int(os.getenv("SLACK_PROMPT_CHAR_BUDGET", "2900"))

    # Playwright / JS rendering
    PLAYWRIGHT_HEADLESS: bool = _flag("PLAYWRIGHT_HEADLESS", "1")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
    JS_WAIT_TIMEOUT_MS: int = int(os.getenv("JS_WAIT_TIMEOUT_MS", "10000"))
    USER_AGENT: str = os.getenv("USER_AGENT", "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
