"""
Schema-constrained normalization of the raw menu text.

The container text on the source page is often half Norwegian, half English,
with broken encoding and the whole week in one block. The model translates,
repairs and itemizes it, preferring today's section, and returns JSON matching
MENU_SCHEMA together with a ready-to-post summary.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from pydantic import ValidationError

from menu_publisher.core.errors import NormalizationFailure
from menu_publisher.core.logging import get_logger, preview
from menu_publisher.fetch.extractor import DEFAULT_SELECTOR, extract_section
from menu_publisher.fetch.utils import weekday_label
from menu_publisher.llm.client import strip_code_fences
from menu_publisher.schemas import MenuItem, NormalizationResult, NormalizedMenu

logger = get_logger(__name__)

ALLERGENS = [
    "gluten", "skalldyr", "egg", "fisk", "peanøtter", "soya", "melk",
    "nøtter", "selleri", "sennep", "sesam", "sulfitt", "lupin", "bløtdyr",
]

_ALLERGEN_SYNONYMS = {
    "hvete": "gluten", "wheat": "gluten", "bygg": "gluten", "rug": "gluten", "havre": "gluten",
    "crustaceans": "skalldyr", "shellfish": "skalldyr", "reker": "skalldyr",
    "eggs": "egg", "fish": "fisk", "peanuts": "peanøtter", "peanut": "peanøtter",
    "soy": "soya", "soja": "soya",
    "milk": "melk", "laktose": "melk", "lactose": "melk", "dairy": "melk", "melkeprotein": "melk",
    "nuts": "nøtter", "tree nuts": "nøtter", "mandler": "nøtter", "hasselnøtter": "nøtter",
    "celery": "selleri", "mustard": "sennep", "sesame": "sesam", "sesamfrø": "sesam",
    "sulphites": "sulfitt", "sulfites": "sulfitt", "sulfitter": "sulfitt",
    "svoveldioksid": "sulfitt", "svoveldioksid og sulfitter": "sulfitt",
    "lupine": "lupin", "molluscs": "bløtdyr", "mollusks": "bløtdyr", "skjell": "bløtdyr",
}

MENU_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["language", "items", "pretty_text"],
    "properties": {
        "language": {"type": "string"},
        "weekday": {"type": "string"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["title"],
                "properties": {
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                    "allergens": {"type": "array", "items": {"type": "string"}},
                    "dietary": {"type": "array", "items": {"type": "string"}},
                    "notes": {"type": "string"},
                },
            },
        },
        "pretty_text": {"type": "string"},
    },
}


def build_system_instruction(language: str, weekday: Optional[str]) -> str:
    day_rule = (
        f"- The text may contain the whole week. Prefer the section for {weekday} and ignore other days.\n"
        if weekday
        else "- Today is a weekend day. Only include items the text explicitly offers for today.\n"
    )
    return (
        f"You normalize cafeteria menus. Translate the menu text into {language}, "
        "repair broken characters and spelling, and split it into individual dishes.\n"
        "Rules:\n"
        f"{day_rule}"
        f"- Allergens must use exactly these names: {', '.join(ALLERGENS)}.\n"
        "- Dietary flags are short lower-case words such as vegetar, vegansk, glutenfri, laktosefri.\n"
        "- Do not invent dishes, ingredients or allergens that the text does not state or clearly imply.\n"
        "- If the text has no menu for today, return an empty items list.\n"
        "- pretty_text is a short Slack-ready list, one line per dish starting with '• '.\n"
        "- Return only JSON matching the schema."
    )


def normalize_allergen(name: str) -> str:
    key = " ".join((name or "").lower().split())
    return _ALLERGEN_SYNONYMS.get(key, key)


def _normalize_allergens(names: Iterable[str]) -> List[str]:
    seen = []
    for name in names:
        value = normalize_allergen(name)
        if value and value not in seen:
            seen.append(value)
    return seen


def fallback_summary(items: List[MenuItem]) -> str:
    """Bullet rendering used when the model leaves pretty_text blank."""
    lines = []
    for item in items:
        line = f"• {item.title}"
        if item.allergens:
            line += f" (allergens: {', '.join(item.allergens)})"
        lines.append(line)
    return "\n".join(lines)


def parse_menu(raw: str) -> NormalizedMenu:
    content = strip_code_fences(raw)
    if not content:
        raise NormalizationFailure("Empty response from language model")
    try:
        menu = NormalizedMenu.model_validate_json(content)
    except ValidationError as e:
        raise NormalizationFailure(f"Response does not match menu schema: {e.error_count()} error(s)") from e

    items = [item.model_copy(update={"allergens": _normalize_allergens(item.allergens)}) for item in menu.items]
    return menu.model_copy(update={"items": items})


def normalize_menu(
    llm,
    html: str,
    now: datetime,
    *,
    selector: str = DEFAULT_SELECTOR,
    language: str = "Norwegian",
    max_output_tokens: int = 800,
) -> NormalizationResult:
    """
    Normalize the menu container into a NormalizedMenu plus summary text.

    Never raises: any call or parse failure comes back as a result with an
    empty summary, no menu and `error` set.
    """
    raw_text = extract_section(html, selector)
    if not raw_text:
        logger.warning("Menu container %r not found or empty, nothing to normalize", selector)
        return NormalizationResult(error="menu container is empty")

    system_instruction = build_system_instruction(language, weekday_label(now))
    try:
        response = llm.generate(
            raw_text,
            system_instruction=system_instruction,
            max_output_tokens=max_output_tokens,
            temperature=0,
            response_schema=MENU_SCHEMA,
        )
        menu = parse_menu(response)
    except Exception as e:
        logger.warning("Menu normalization failed: %s", e)
        return NormalizationResult(error=str(e))

    summary = menu.pretty_text.strip()
    if not summary:
        summary = fallback_summary(menu.items)
        logger.info("Model returned no pretty_text, built summary from %d item(s)", len(menu.items))

    logger.info("Normalized %d item(s) for %s: %s", len(menu.items), menu.weekday or "unknown day", preview(summary))
    return NormalizationResult(summary=summary, menu=menu)
