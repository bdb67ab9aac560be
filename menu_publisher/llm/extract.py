from datetime import datetime
from typing import Optional

from menu_publisher.core.logging import get_logger, preview
from menu_publisher.fetch.extractor import DEFAULT_SELECTOR, extract_section
from menu_publisher.fetch.utils import weekday_name

logger = get_logger(__name__)

def build_extraction_prompt(weekday: str, menu_text: str, language: str = "Norwegian") -> str:
    return (
        f"Extract {weekday}'s cafeteria menu from the text below:\n\n"
        f"{menu_text} - output in {language}"
    )

def extract_with_model(
    llm,
    html: str,
    now: datetime,
    *,
    selector: str = DEFAULT_SELECTOR,
    language: str = "Norwegian",
    max_output_tokens: int = 250,
) -> Optional[str]:
    """
    Ask the language model for today's items as free text.

    Used when the container's structure cannot be sliced by weekday headings.
    Returns None when the container is empty or the model call fails.
    """
    menu_text = extract_section(html, selector)
    if not menu_text:
        logger.warning("Menu container %r is empty, skipping free-text extraction", selector)
        return None

    prompt = build_extraction_prompt(weekday_name(now), menu_text, language)
    try:
        text = llm.generate(prompt, max_output_tokens=max_output_tokens)
    except Exception as e:
        logger.error("Error extracting menu with AI: %s", e)
        return None

    text = (text or "").strip()
    logger.info("AI extraction: %s", preview(text))
    return text or None
