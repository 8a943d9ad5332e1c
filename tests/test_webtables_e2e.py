# End-to-End CRUD tests for the DemoQA Web Tables page
# Tests simulate real user behavior using Playwright

import re

import pytest
from playwright.sync_api import Page, expect

from form_helpers import open_page

pytestmark = pytest.mark.e2e


@pytest.fixture(autouse=True)
def webtables(page: Page):
    open_page(page, "/webtables")
    return page


def _data_rows(page: Page):
    # every filled row has an email
    return page.locator(".rt-tr-group").filter(has_text="@")


def test_add_new_record(page: Page):
    """
    Add a record through the registration form and find its row by content.
    """
    page.get_by_role("button", name="Add").click()
    page.get_by_placeholder("First Name").fill("Mehedi")
    page.get_by_placeholder("Last Name").fill("Hasan")
    page.get_by_placeholder("name@example.com").fill("mehedi.doe@example.com")
    page.get_by_placeholder("Age").fill("30")
    page.get_by_placeholder("Salary").fill("105000")
    page.get_by_placeholder("Department").fill("QA")
    page.get_by_role("button", name="Submit").click()

    new_row = page.locator('.rt-tr-group:has-text("Mehedi"):has-text("Hasan")')
    expect(new_row).to_contain_text("Mehedi")
    expect(new_row).to_contain_text("Hasan")
    expect(new_row).to_contain_text("mehedi.doe@example.com")


def test_view_existing_record(page: Page):
    first_row = page.locator(".rt-tbody .rt-tr-group").first
    expect(first_row).to_contain_text(re.compile(r"\w+"))


def test_update_existing_record(page: Page):
    page.locator('span[title="Edit"]').first.click()
    page.get_by_placeholder("name@example.com").fill("updated.email@example.com")
    page.get_by_role("button", name="Submit").click()

    expect(page.locator(".rt-tbody")).to_contain_text("updated.email@example.com")


def test_delete_existing_record(page: Page):
    rows_before = _data_rows(page).count()
    assert rows_before > 0

    page.locator('span[title="Delete"]').first.click()

    expect(_data_rows(page)).to_have_count(rows_before - 1)
