"""
Credentials Module - Shared test configuration
Holds the base URL, the Book Store test user and the form test data used by
every test file. Values come from environment variables with defaults.
"""

import os
import uuid
from dataclasses import dataclass
from typing import Dict

DEFAULT_BASE_URL = "https://demoqa.com"
DEFAULT_PASSWORD = "Test@12345"
DEFAULT_FORM_EMAIL = "demo.doe@example.com"


@dataclass(frozen=True)
class Settings:
    """Concrete set of credentials + host for one test run."""

    base_url: str
    username: str
    password: str
    form_email: str = DEFAULT_FORM_EMAIL

    @property
    def test_user(self) -> Dict[str, str]:
        """Payload accepted by the Account endpoints."""
        return {"userName": self.username, "password": self.password}


def load_settings() -> Settings:
    """
    Build settings from the environment.

    DemoQA rejects a second user with the same name, so unless
    DEMOQA_USERNAME is set each process gets a fresh username.

    Returns:
        Settings: the loaded configuration
    """
    base_url = os.getenv("DEMOQA_BASE_URL") or DEFAULT_BASE_URL
    username = os.getenv("DEMOQA_USERNAME") or f"qa_user_{uuid.uuid4().hex[:8]}"

    return Settings(
        base_url=base_url.rstrip("/"),
        username=username,
        password=os.getenv("DEMOQA_PASSWORD") or DEFAULT_PASSWORD,
        form_email=os.getenv("DEMOQA_FORM_EMAIL") or DEFAULT_FORM_EMAIL,
    )


settings = load_settings()
