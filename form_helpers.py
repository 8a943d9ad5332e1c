"""
Form Helpers Module - Page preparation and form-state normalization
Shared by the UI tests for the DemoQA practice form and web tables.
"""

import logging
from typing import Dict, List, Optional

from playwright.sync_api import Page, Route

logger = logging.getLogger(__name__)

DEFAULT_TEXT_FIELDS = {
    "First Name": "Mehedi",
    "Last Name": "Hasan",
    "Mobile Number": "1234567890",
}
DEFAULT_GENDER_RADIO = "gender-radio-1"  # Male


def _abort_ads(route: Route) -> None:
    if "ads" in route.request.url:
        route.abort()
    else:
        route.continue_()


def block_ads(page: Page) -> None:
    """Abort every request whose URL mentions ads."""
    page.route("**/*", _abort_ads)


def remove_overlays(page: Page) -> None:
    """Remove the fixed banner and footer, which can cover the submit button."""
    page.evaluate(
        """() => {
            const ad = document.getElementById('fixedban');
            if (ad) ad.remove();
            const footer = document.querySelector('footer');
            if (footer) footer.remove();
        }"""
    )


def open_page(page: Page, path: str) -> None:
    block_ads(page)
    page.goto(path, wait_until="domcontentloaded")
    remove_overlays(page)


def ensure_form_fields_filled(page: Page, defaults: Optional[Dict[str, str]] = None,
                              gender_radio: str = DEFAULT_GENDER_RADIO) -> List[str]:
    """
    Fill the practice form's required fields that are still blank.

    Values already present are left alone, and fields missing from the page
    are skipped, so calling this twice changes nothing the second time.

    Args:
        page: Page showing the practice form
        defaults: Textbox accessible name -> value to fill when blank
        gender_radio: id of the radio input to select when unchecked

    Returns:
        list: names of the fields that were filled
    """
    if defaults is None:
        defaults = DEFAULT_TEXT_FIELDS
    filled = []

    for name, value in defaults.items():
        textbox = page.get_by_role("textbox", name=name)
        if textbox.count() == 0:
            continue
        if not textbox.input_value().strip():
            textbox.fill(value)
            filled.append(name)

    radio = page.locator(f"input#{gender_radio}")
    if radio.count() > 0 and not radio.is_checked():
        # the input itself is hidden behind its label
        page.locator(f'label[for="{gender_radio}"]').click()
        filled.append(gender_radio)

    if filled:
        logger.info("Filled blank form fields: %s", ", ".join(filled))
    return filled
