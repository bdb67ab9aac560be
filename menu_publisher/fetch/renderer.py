from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeout

from menu_publisher.core.errors import FetchError
from menu_publisher.core.logging import get_logger

logger = get_logger(__name__)

async def fetch_rendered_html(
    url: str,
    *,
    headless: bool = True,
    timeout_sec: int = 30,
    wait_selector: str = None,
    wait_timeout_ms: int = 10000,
    user_agent: str = None,
) -> str:
    """
    Fetch HTML from a URL using Playwright so client-side scripts have run.

    Args:
        url: The URL to fetch
        wait_selector: Optional selector to wait for after network idle

    Returns:
        Rendered HTML string

    The browser is always closed before returning, also on failure.
    """
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=headless,
                args=[
                    '--no-sandbox',
                    '--disable-dev-shm-usage',
                    '--disable-gpu',
                ]
            )
            try:
                page = await browser.new_page()
                if user_agent:
                    await page.set_extra_http_headers({"User-Agent": user_agent})

                await page.goto(url, timeout=timeout_sec * 1000, wait_until="domcontentloaded")
                # The menu is rendered after the API calls settle
                try:
                    await page.wait_for_load_state("networkidle", timeout=timeout_sec * 1000)
                except PlaywrightTimeout:
                    logger.warning("Network did not go idle for %s, using current DOM", url)

                if wait_selector:
                    try:
                        await page.wait_for_selector(wait_selector, timeout=wait_timeout_ms)
                    except PlaywrightTimeout:
                        logger.warning("Selector %r not found on %s", wait_selector, url)

                html = await page.content()
            finally:
                await browser.close()

    except PlaywrightTimeout as e:
        raise FetchError(f"Timeout while fetching {url}") from e
    except Exception as e:
        raise FetchError(f"Failed to fetch {url} with JavaScript: {str(e)}") from e

    if not html:
        raise FetchError(f"No content received from {url}")
    return html
