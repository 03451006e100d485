"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Browser selection by name (chrome, firefox, edge)
    - Chrome launch flags from configuration (headless, images, load strategy)
    - One browser per suite, isolated context per page
    - Context manager support

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    sync_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from uniblox_tools.common import ConfigLoader


SUPPORTED_BROWSERS = ("chrome", "firefox", "edge")

# Selenium-style page load strategies mapped to Playwright load states
LOAD_STATES: Dict[str, str] = {
    "eager": "domcontentloaded",
    "normal": "load",
    "none": "commit",
}


class UnsupportedBrowserError(ValueError):
    """Raised when a browser name is not one of SUPPORTED_BROWSERS."""

    def __init__(self, browser_name: str):
        self.browser_name = browser_name
        super().__init__(
            f"Unsupported browser: {browser_name} "
            f"(expected one of {', '.join(SUPPORTED_BROWSERS)})"
        )


class BrowserManager:
    """
    Manages the browser instance and its contexts for a test suite.

    Usage:
        with BrowserManager.create_driver("chrome") as manager:
            page = manager.new_page()
            manager.open_app(page)
    """

    COMMON_ARGS: List[str] = [
        "--start-maximized",
        "--disable-notifications",
        "--disable-popup-blocking",
    ]

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        browser_name: str = "chrome",
        config: Optional[ConfigLoader] = None,
    ):
        """
        Initialize browser manager. The browser is not launched yet.

        Args:
            browser_name: "chrome", "firefox" or "edge" (case-insensitive)
            config: Configuration source, defaults to the shared ConfigLoader

        Raises:
            UnsupportedBrowserError: unknown browser name
        """
        normalized = (browser_name or "").strip().lower()
        if normalized not in SUPPORTED_BROWSERS:
            raise UnsupportedBrowserError(browser_name)

        self.browser_name = normalized
        self.config = config or ConfigLoader()

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def create_driver(
        cls,
        browser_name: str,
        config: Optional[ConfigLoader] = None,
    ) -> "BrowserManager":
        """Validate the browser name, then launch it."""
        manager = cls(browser_name, config)
        manager.start()
        return manager

    def __enter__(self) -> "BrowserManager":
        if self._browser is None:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def load_state(self) -> str:
        return LOAD_STATES.get(self.config.page_load_strategy.lower(), "load")

    def launch_options(self) -> Dict[str, Any]:
        """Build the launch options for the selected browser."""
        options: Dict[str, Any] = {"headless": self.config.headless}

        if self.browser_name == "firefox":
            if self.config.disable_images:
                options["firefox_user_prefs"] = {"permissions.default.image": 2}
            return options

        args = list(self.COMMON_ARGS)
        if self.config.disable_images:
            args.append("--blink-settings=imagesEnabled=false")
        options["args"] = args
        if self.browser_name == "edge":
            options["channel"] = "msedge"
        return options

    def start(self) -> None:
        """Start Playwright and launch the browser."""
        self._playwright = sync_playwright().start()

        if self.browser_name == "firefox":
            launcher = self._playwright.firefox
        else:
            launcher = self._playwright.chromium

        options = self.launch_options()
        try:
            self._browser = launcher.launch(**options)
        except Exception as e:
            logger.error(f"Browser launch failed: {self.browser_name}: {e}")
            self._playwright.stop()
            self._playwright = None
            raise
        logger.info(
            f"Browser started: {self.browser_name} "
            f"(headless={options['headless']}, load_state={self.load_state})"
        )

    def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = self._browser.new_context(**{**self.DEFAULT_CONTEXT_OPTIONS, **options})
        context.set_default_timeout(self.config.implicit_wait * 1000)
        self._contexts.append(context)
        return context

    def close_context(self, context: BrowserContext) -> None:
        """Close one context and stop tracking it."""
        if context in self._contexts:
            self._contexts.remove(context)
        try:
            context.close()
        except Exception as e:
            logger.debug(f"Context already closed: {e}")

    def new_page(self, context: Optional[BrowserContext] = None) -> Page:
        """Create new page in a new or existing context."""
        if context is None:
            context = self.new_context()
        return context.new_page()

    def open_app(self, page: Page, url: Optional[str] = None) -> None:
        """Navigate to the application under test."""
        target = url or self.config.app_url
        page.goto(target, wait_until=self.load_state)
        logger.info(f"Opened: {target}")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
    "UnsupportedBrowserError",
    "SUPPORTED_BROWSERS",
    "LOAD_STATES",
]
