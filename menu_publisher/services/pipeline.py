import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from menu_publisher.core.logging import get_logger, preview
from menu_publisher.fetch.extractor import DEFAULT_SELECTOR, extract_for_day
from menu_publisher.fetch.utils import weekday_label
from menu_publisher.images.prompts import select_prompt
from menu_publisher.llm.extract import extract_with_model
from menu_publisher.llm.normalize import normalize_menu
from menu_publisher.schemas import RunReport

logger = get_logger(__name__)


class Phase(Enum):
    FETCH = (1, "Fetching website...")
    EXTRACT = (2, "Extracting and normalizing menu...")
    PROMPT = (3, "Choosing image prompt...")
    PUBLISH = (4, "Generating and storing image...")
    NOTIFY = (5, "Sending to Slack...")

    def __init__(self, number: int, description: str):
        self.number = number
        self.description = description


def _enter(phase: Phase) -> None:
    logger.info("[%d/%d] %s", phase.number, len(Phase), phase.description)


@dataclass
class PipelineDeps:
    """Everything a run needs, injected so tests can pass fakes."""
    url: str
    fetch_html: Callable[[str], Awaitable[str]]
    llm: object
    image_publisher: object
    notifier: object
    now: Callable[[], datetime]
    selector: str = DEFAULT_SELECTOR
    language: str = "Norwegian"
    max_output_tokens: int = 800
    extract_max_tokens: int = 250
    rng: random.Random = field(default_factory=random.Random)


def resolve_menu_text(deps: PipelineDeps, html: str, now: datetime) -> Tuple[str, str]:
    """
    Return (summary, source) from the first extraction tier that yields text:
    schema normalization, structural day slice, free-text model extraction.

    A normalization that succeeds with no items for today is final; the lower
    tiers only run when normalization failed.
    """
    result = normalize_menu(
        deps.llm,
        html,
        now,
        selector=deps.selector,
        language=deps.language,
        max_output_tokens=deps.max_output_tokens,
    )
    if result.ok:
        if not result.summary:
            logger.warning("Normalization found no menu for today")
        return result.summary, "schema"
    logger.warning("Normalization unavailable (%s), trying structural extraction", result.error)

    day_text = extract_for_day(html, weekday_label(now), deps.selector)
    if day_text:
        return day_text, "structural"
    logger.warning("No section for %s in menu container, trying AI extraction", weekday_label(now) or "weekend")

    ai_text = extract_with_model(
        deps.llm,
        html,
        now,
        selector=deps.selector,
        language=deps.language,
        max_output_tokens=deps.extract_max_tokens,
    )
    if ai_text:
        return ai_text, "ai"

    logger.warning("All extraction tiers came back empty, continuing with an empty menu")
    return "", "none"


async def run_pipeline(deps: PipelineDeps) -> RunReport:
    """
    Fetch -> Extract/Normalize -> Prompt -> Generate/Publish -> Notify.

    Fetch and image failures propagate. Extraction and notification degrade.
    """
    now = deps.now()

    _enter(Phase.FETCH)
    html = await deps.fetch_html(deps.url)
    logger.info("HTML received: %d characters", len(html))

    _enter(Phase.EXTRACT)
    summary, source = resolve_menu_text(deps, html, now)
    logger.info("Menu text (%s): %s", source, preview(summary))

    _enter(Phase.PROMPT)
    prompt = select_prompt(summary, deps.rng)
    logger.info("Image prompt: %s", preview(prompt, 200))

    _enter(Phase.PUBLISH)
    image = deps.image_publisher.publish(prompt)
    logger.info("Image URL: %s", image.url)

    _enter(Phase.NOTIFY)
    notification = deps.notifier.notify(summary, image.url, prompt)
    if not notification.delivered:
        logger.warning("Menu was not delivered to Slack: %s", "; ".join(notification.errors))

    return RunReport(
        weekday=weekday_label(now),
        summary=summary,
        source=source,
        prompt=prompt,
        image=image,
        notification=notification,
    )
