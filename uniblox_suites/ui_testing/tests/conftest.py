"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for the browser-driven App Selector tests.

Key Features:
- One browser per suite (session scope), fresh context + page per test
- Page object fixture wired to the shared configuration
- Test data from config/config.yaml

Browser selection: ``browser`` from config (``UNIBLOX_BROWSER`` overrides it).
Failure screenshots are taken by the report plugin from the ``page`` fixture.

================================================================================
"""

from typing import Generator

import pytest
from playwright.sync_api import Page

from uniblox_tools.common import ConfigLoader
from uniblox_suites.ui_testing.framework.browser_manager import BrowserManager
from uniblox_suites.ui_testing.pages.app_selector_page import AppSelectorPage


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture(scope="session")
def browser_name(config: ConfigLoader) -> str:
    return config.browser


@pytest.fixture(scope="session")
def browser_manager(browser_name: str, config: ConfigLoader) -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    The browser is started once and shared across all tests in the session.
    """
    manager = BrowserManager.create_driver(browser_name, config)
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def page(browser_manager: BrowserManager) -> Generator[Page, None, None]:
    """
    Function-scoped page, already navigated to the application.
    """
    page = browser_manager.new_page()
    browser_manager.open_app(page)
    yield page
    browser_manager.close_context(page.context)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def app_page(page: Page, config: ConfigLoader) -> AppSelectorPage:
    """
    Provides AppSelectorPage instance.
    """
    return AppSelectorPage(page, config=config)


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def test_data(config: ConfigLoader) -> dict:
    """
    Provides form data for UI tests.
    """
    return {
        "valid_user": {
            "name": config.get("test.user.name", "Test User"),
            "email": config.get("test.user.email", "test@example.com"),
        },
        "invalid_email": "invalid-email",
        "dropdown_option": "option1",
        "message": "This is a test message for automation testing.",
    }
