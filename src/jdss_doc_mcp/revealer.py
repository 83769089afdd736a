"""Reveal client-rendered documentation content with a headless browser.

The ZIP download ships a static HTML page whose operation details are
hidden until toggles are clicked in a browser. The Playwright revealer loads
the page, injects the bundled jQuery library, clicks every toggle and forces
the known content wrappers visible before serializing the document.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .archive import extract_primary
from .exceptions import ProcessingError
from .models import DocsConfig

# Try to import playwright for browser-based processing
try:
    from playwright.async_api import async_playwright
    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    PLAYWRIGHT_AVAILABLE = False


logger = logging.getLogger(__name__)

TOGGLE_SELECTOR = '.toggleOperation'

WRAPPER_SELECTORS = (
    'div[style*="display: none"]',
    '.content.func_doc',
    '.content.func_src',
    '.operation',
    '.endpoint',
)

_SHOW_ELEMENTS_JS = """
(selector) => {
    let shown = 0;
    document.querySelectorAll(selector).forEach((el) => {
        el.style.removeProperty('display');
        if (window.getComputedStyle(el).display === 'none') {
            el.style.display = 'block';
        }
        shown += 1;
    });
    return shown;
}
"""

_STRIP_HIDDEN_JS = """
() => {
    let stripped = 0;
    document.querySelectorAll('[style*="display: none"], [style*="display:none"]').forEach((el) => {
        el.style.removeProperty('display');
        stripped += 1;
    });
    return stripped;
}
"""


class HtmlRevealer(ABC):
    """Takes HTML and a script library and returns the expanded HTML."""

    @abstractmethod
    async def reveal(self, html: str, script_library: Optional[str]) -> str:
        """Return ``html`` with hidden content made visible."""


class PassthroughRevealer(HtmlRevealer):
    """Revealer for environments without a browser; returns the input unchanged."""

    async def reveal(self, html: str, script_library: Optional[str]) -> str:
        return html


class PlaywrightRevealer(HtmlRevealer):
    """
    Reveals hidden content in a disposable headless Chromium page.

    Timing is a fixed settle delay after script injection rather than
    completion detection, so the result is best-effort.
    """

    def __init__(
        self,
        settle_delay: float = 1.0,
        toggle_selector: str = TOGGLE_SELECTOR,
        wrapper_selectors: Sequence[str] = WRAPPER_SELECTORS
    ):
        self.settle_delay = settle_delay
        self.toggle_selector = toggle_selector
        self.wrapper_selectors = tuple(wrapper_selectors)

    async def reveal(self, html: str, script_library: Optional[str]) -> str:
        """
        Load ``html``, inject ``script_library`` and expand all hidden content.

        Args:
            html: Documentation page markup
            script_library: JavaScript source to inject before revealing

        Returns:
            Serialized document after the reveal steps

        Raises:
            ProcessingError: If Playwright or the browser is unavailable
        """
        if not PLAYWRIGHT_AVAILABLE:
            raise ProcessingError(
                "Playwright is required for content reveal: "
                "pip install playwright && playwright install chromium"
            )

        try:
            async with async_playwright() as p:
                try:
                    browser = await p.chromium.launch(headless=True)
                except Exception as e:
                    raise ProcessingError(f"Could not launch headless browser: {e}") from e

                try:
                    page = await browser.new_page()
                    await page.set_content(html, wait_until="domcontentloaded")

                    if script_library:
                        await self._inject_script(page, script_library)

                    # Give the injected library time to initialize
                    await page.wait_for_timeout(self.settle_delay * 1000)

                    await self._reveal_all_content(page)
                    return await page.content()
                finally:
                    await browser.close()
        except ProcessingError:
            raise
        except Exception as e:
            raise ProcessingError(f"Content reveal failed: {e}") from e

    async def _inject_script(self, page, script_library: str) -> None:
        try:
            await page.add_script_tag(content=script_library)
        except Exception as e:
            logger.warning(f"Script library injection failed: {e}")

    async def _reveal_all_content(self, page) -> None:
        """Click every toggle, then force wrappers visible and strip hidden styles."""
        toggles = await page.query_selector_all(self.toggle_selector)
        clicked = 0
        for toggle in toggles:
            try:
                await toggle.dispatch_event('click')
                clicked += 1
            except Exception as e:
                logger.debug(f"Ignoring failed toggle click: {e}")
        logger.info(f"Clicked {clicked}/{len(toggles)} toggles")

        for selector in self.wrapper_selectors:
            try:
                await page.evaluate(_SHOW_ELEMENTS_JS, selector)
            except Exception as e:
                logger.warning(f"Could not show elements matching '{selector}': {e}")

        try:
            await page.evaluate(_STRIP_HIDDEN_JS)
        except Exception as e:
            logger.warning(f"Could not strip hidden display styles: {e}")


def create_revealer(config: DocsConfig) -> HtmlRevealer:
    """Create the revealer selected by configuration."""
    if config.revealer == 'none':
        return PassthroughRevealer()
    if config.revealer == 'playwright':
        return PlaywrightRevealer(settle_delay=config.settle_delay)
    raise ValueError(f"Invalid revealer: {config.revealer}. Must be 'playwright' or 'none'")


async def reveal_archive(zip_bytes: bytes, revealer: HtmlRevealer) -> str:
    """
    Extract the documentation page from a ZIP archive and reveal its content.

    When the archive has no script library the HTML is returned unprocessed.

    Raises:
        ExtractionError: If the archive has no HTML document
        ProcessingError: If the revealer environment is unavailable
    """
    contents = extract_primary(zip_bytes)

    if not contents.script_library:
        logger.warning("No jQuery found in ZIP, returning unprocessed HTML")
        return contents.html

    return await revealer.reveal(contents.html, contents.script_library)
