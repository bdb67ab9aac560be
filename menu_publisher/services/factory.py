"""Turn Settings into the client objects the pipeline runs with."""

import functools

import boto3
import httpx
from openai import OpenAI

from menu_publisher.core.config import Settings
from menu_publisher.fetch.renderer import fetch_rendered_html
from menu_publisher.fetch.utils import now_local
from menu_publisher.images.publisher import ImagePublisher
from menu_publisher.llm.client import GeminiClient
from menu_publisher.notify.slack import SlackNotifier
from menu_publisher.services.pipeline import PipelineDeps


def build_storage_client(settings: Settings):
    """S3 client pointed at the Cloudflare R2 endpoint of the account."""
    if not (settings.R2_ACCOUNT_ID and settings.R2_ACCESS_KEY_ID and settings.R2_SECRET_ACCESS_KEY):
        raise ValueError("R2_ACCOUNT_ID, R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY must be set")
    return boto3.client(
        "s3",
        region_name="auto",
        endpoint_url=f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
    )


def build_dependencies(settings: Settings, http_client: httpx.Client, url: str = None) -> PipelineDeps:
    if not settings.OPENAI_API_KEY:
        raise ValueError("OPENAI_API_KEY not set")
    if not settings.R2_BUCKET_NAME:
        raise ValueError("R2_BUCKET_NAME not set")

    url = url or settings.MENU_URL
    fetch_html = functools.partial(
        fetch_rendered_html,
        headless=settings.PLAYWRIGHT_HEADLESS,
        timeout_sec=settings.REQUEST_TIMEOUT,
        wait_selector=settings.MENU_CONTAINER_SELECTOR,
        wait_timeout_ms=settings.JS_WAIT_TIMEOUT_MS,
        user_agent=settings.USER_AGENT,
    )

    publisher = ImagePublisher(
        OpenAI(api_key=settings.OPENAI_API_KEY),
        build_storage_client(settings),
        settings.R2_BUCKET_NAME,
        public_domain=settings.R2_PUBLIC_DOMAIN,
        signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS,
        model=settings.IMAGE_MODEL,
        size=settings.IMAGE_SIZE,
        response_format=settings.IMAGE_RESPONSE_FORMAT or None,
        filename=settings.IMAGE_FILENAME,
        http_client=http_client,
    )

    notifier = SlackNotifier(
        http_client,
        site_url=url,
        site_name=settings.MENU_SITE_NAME,
        bot_token=settings.SLACK_BOT_TOKEN,
        channel=settings.SLACK_CHANNEL_ID,
        webhook_url=settings.SLACK_WEBHOOK_URL,
        footer_text=settings.SLACK_FOOTER_TEXT or None,
        prompt_char_budget=settings.SLACK_PROMPT_CHAR_BUDGET,
    )

    return PipelineDeps(
        url=url,
        fetch_html=fetch_html,
        llm=GeminiClient(settings.GOOGLE_API_KEY, settings.GEMINI_MODEL),
        image_publisher=publisher,
        notifier=notifier,
        now=functools.partial(now_local, settings.MENU_TIMEZONE),
        selector=settings.MENU_CONTAINER_SELECTOR,
        language=settings.MENU_LANGUAGE,
        max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        extract_max_tokens=settings.LLM_EXTRACT_MAX_TOKENS,
    )
