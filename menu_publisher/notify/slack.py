"""
Slack delivery of the daily menu.

Two transports are supported. With a bot token and channel the message goes
through chat.postMessage, which returns a message `ts` so the image prompt can
be posted as a thread reply. With only an incoming webhook the prompt follows
as a separate top-level message. Delivery is best effort: every failure is
logged and recorded on the NotificationResult, nothing is raised.
"""

from typing import Any, Dict, List, Optional

import httpx

from menu_publisher.core.errors import NotificationFailure
from menu_publisher.core.logging import get_logger
from menu_publisher.schemas import NotificationResult

logger = get_logger(__name__)

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"
TRUNCATION_MARKER = "… (forkortet)"
EMPTY_MENU_TEXT = "_Ingen meny funnet for i dag._"
_FENCE_OPEN = "```\n"
_FENCE_CLOSE = "\n```"
# Smallest budget that still fits the fences and a cut marker
MIN_PROMPT_BUDGET = len(_FENCE_OPEN) + len(_FENCE_CLOSE) + len(TRUNCATION_MARKER)


def truncate_prompt(prompt: str, budget: int = 2900) -> str:
    """Cut `prompt` to at most `budget` characters, ending with a marker when cut."""
    if budget <= 0:
        return ""
    if len(prompt) <= budget:
        return prompt
    keep = max(budget - len(TRUNCATION_MARKER), 0)
    return (prompt[:keep] + TRUNCATION_MARKER)[:budget]


def prompt_block_text(prompt: str, budget: int = 2900) -> str:
    """
    The prompt inside a code block; the whole string stays within `budget`.
    A budget too small for the fences yields an empty string.
    """
    inner_budget = budget - len(_FENCE_OPEN) - len(_FENCE_CLOSE)
    if inner_budget < 0:
        return ""
    return f"{_FENCE_OPEN}{truncate_prompt(prompt, inner_budget)}{_FENCE_CLOSE}"


def _section(text: str) -> Dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def build_primary_blocks(
    summary: str,
    image_url: str,
    site_url: str,
    site_name: str,
    footer_text: Optional[str] = None,
) -> List[Dict[str, Any]]:
    blocks = [
        _section(f"*Dagens meny hos <{site_url}|{site_name}>:*"),
        _section(summary.strip() or EMPTY_MENU_TEXT),
        {"type": "image", "image_url": image_url, "alt_text": "Cafeteria menu image"},
    ]
    if footer_text:
        blocks.append(_section(footer_text))
    return blocks


def build_prompt_blocks(prompt: str, budget: int = 2900) -> List[Dict[str, Any]]:
    return [_section(prompt_block_text(prompt, budget))]


class SlackNotifier:
    def __init__(
        self,
        http_client: httpx.Client,
        *,
        site_url: str,
        site_name: str,
        bot_token: Optional[str] = None,
        channel: Optional[str] = None,
        webhook_url: Optional[str] = None,
        footer_text: Optional[str] = None,
        prompt_char_budget: int = 2900,
    ):
        if prompt_char_budget < MIN_PROMPT_BUDGET:
            raise ValueError(f"SLACK_PROMPT_CHAR_BUDGET must be at least {MIN_PROMPT_BUDGET}, got {prompt_char_budget}")
        self.http = http_client
        self.site_url = site_url
        self.site_name = site_name
        self.bot_token = bot_token
        self.channel = channel
        self.webhook_url = webhook_url
        self.footer_text = footer_text
        self.prompt_char_budget = prompt_char_budget

    @property
    def has_api(self) -> bool:
        return bool(self.bot_token and self.channel)

    def _post_api(self, text: str, blocks: List[Dict[str, Any]], thread_ts: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {"channel": self.channel, "text": text, "blocks": blocks}
        if thread_ts:
            payload["thread_ts"] = thread_ts
        try:
            response = self.http.post(
                SLACK_POST_MESSAGE_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.bot_token}"},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise NotificationFailure(f"chat.postMessage failed: {e}") from e
        if not body.get("ok"):
            raise NotificationFailure(f"chat.postMessage returned error: {body.get('error', 'unknown')}")
        return body.get("ts")

    def _post_webhook(self, text: str, blocks: List[Dict[str, Any]]) -> None:
        try:
            response = self.http.post(self.webhook_url, json={"text": text, "blocks": blocks})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationFailure(f"Webhook post failed: {e}") from e

    def notify(self, summary: str, image_url: str, prompt: Optional[str] = None) -> NotificationResult:
        result = NotificationResult()
        text = f"Dagens meny hos {self.site_name}"
        blocks = build_primary_blocks(summary, image_url, self.site_url, self.site_name, self.footer_text)

        if self.has_api:
            try:
                result.message_ts = self._post_api(text, blocks)
                result.channel = "api"
                result.delivered = True
            except NotificationFailure as e:
                logger.error("Error sending message to Slack API: %s", e)
                result.errors.append(str(e))

        if not result.delivered and self.webhook_url:
            try:
                self._post_webhook(text, blocks)
                result.channel = "webhook"
                result.delivered = True
            except NotificationFailure as e:
                logger.error("Error sending message to Slack webhook: %s", e)
                result.errors.append(str(e))

        if not result.delivered:
            if not (self.has_api or self.webhook_url):
                result.errors.append("No Slack channel configured")
                logger.warning("No Slack bot token/channel or webhook configured, skipping notification")
            return result

        logger.info("Posted menu to Slack via %s", result.channel)
        if prompt and prompt.strip():
            self._post_prompt(result, prompt)
        return result

    def _post_prompt(self, result: NotificationResult, prompt: str) -> None:
        blocks = build_prompt_blocks(prompt, self.prompt_char_budget)
        text = "Bildeprompt"
        try:
            if result.channel == "api" and result.message_ts:
                self._post_api(text, blocks, thread_ts=result.message_ts)
                result.threaded = True
            elif result.channel == "api":
                self._post_api(text, blocks)
            else:
                self._post_webhook(text, blocks)
        except NotificationFailure as e:
            logger.error("Error sending prompt to Slack: %s", e)
            result.errors.append(str(e))
