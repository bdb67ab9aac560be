"""
Structural extraction of the menu container.

The page keeps the whole week inside one container element whose direct
children are either weekday headings ("Mandag", "Tirsdag", ...) or menu lines.
"""

from bs4 import BeautifulSoup
from typing import Optional

from menu_publisher.fetch.utils import NO_WEEKDAYS, clean_text

DEFAULT_SELECTOR = ".static-container"


def _find_container(html: str, selector: str):
    if not html:
        return None
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style", "noscript"]):
        element.decompose()
    return soup.select_one(selector)


def extract_section(html: str, selector: str = DEFAULT_SELECTOR) -> str:
    """
    Return the flattened text of the menu container, one line per text node.
    Empty string if the container is missing.
    """
    container = _find_container(html, selector)
    if container is None:
        return ""
    return clean_text(container.get_text("\n", strip=True))


def extract_for_day(html: str, weekday: Optional[str], selector: str = DEFAULT_SELECTOR) -> str:
    """
    Return the lines between the heading equal to `weekday` and the next
    weekday heading, joined by newlines.

    A label outside the five weekday headings (weekends, typos) or a page
    without the heading yields an empty string.
    """
    if weekday not in NO_WEEKDAYS:
        return ""
    container = _find_container(html, selector)
    if container is None:
        return ""

    lines = []
    in_day = False
    for child in container.find_all(recursive=False):
        text = child.get_text(" ", strip=True)
        if text == weekday:
            in_day = True
        elif text in NO_WEEKDAYS:
            in_day = False
        elif in_day and text:
            lines.append(text)

    return "\n".join(lines).strip()
