import pytest

from credentials import settings


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args):
    """Point every browser context at DemoQA."""
    return {
        **browser_context_args,
        "base_url": settings.base_url,
        "ignore_https_errors": True,
        "permissions": ["geolocation"],
        "java_script_enabled": True,
    }


@pytest.fixture(scope="module")
def api_request_context(playwright):
    """Isolated API context, disposed once the module is done."""
    context = playwright.request.new_context(ignore_https_errors=True)
    yield context
    context.dispose()
