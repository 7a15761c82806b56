"""Print rendered report HTML to PDF with headless Chromium (Playwright)."""

from __future__ import annotations

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from casestatus.core.errors import CollaboratorError
from casestatus.core.logging import get_logger

logger = get_logger(__name__)

PAGE_LABELS = {"es": ("Página", "de"), "en": ("Page", "of")}


def page_footer(locale: str) -> str:
    """Footer template with localized "Page X of Y"."""
    page_label, of_label = PAGE_LABELS.get(locale, PAGE_LABELS["es"])
    return (
        '<div style="font-size:9px; width:100%; text-align:right; padding-right:15mm;">'
        f'{page_label} <span class="pageNumber"></span> {of_label} '
        '<span class="totalPages"></span>'
        "</div>"
    )


async def render_pdf_from_html(
    *,
    html: str,
    locale: str = "es",
    footer_template: Optional[str] = None,
) -> bytes:
    """Load the report markup into a blank page and print it as A4.

    Raises:
        CollaboratorError: Chromium could not be launched or printing failed
    """
    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )
            try:
                context = await browser.new_context(locale="es-ES" if locale == "es" else "en-US")
                page = await context.new_page()
                await page.set_content(html, wait_until="load")
                await page.emulate_media(media="print")
                return await page.pdf(
                    format="A4",
                    print_background=True,
                    display_header_footer=True,
                    header_template="<div></div>",
                    footer_template=footer_template or page_footer(locale),
                    margin={"top": "15mm", "bottom": "18mm", "left": "15mm", "right": "15mm"},
                )
            finally:
                await browser.close()
    except PlaywrightError as exc:
        logger.error("report_pdf.render_failed", error=str(exc))
        raise CollaboratorError("pdf_renderer", "Report could not be rendered") from exc
