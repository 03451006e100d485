"""
================================================================================
App Selector Page Object (Sync / Playwright)
================================================================================

Page object for the App Selector page under test.

Design goals:
  - Composition: holds an InteractionWaiter and a LocatorResolver
  - Every role is described by a LocatorChain (most specific markup first)
  - Optional fields are silent no-ops when the page variant does not render them
  - Toggles only click when the state must change

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from uniblox_tools.common import ConfigLoader
from uniblox_suites.ui_testing.framework.browser_manager import LOAD_STATES
from uniblox_suites.ui_testing.framework.interaction_waiter import InteractionWaiter
from uniblox_suites.ui_testing.framework.locator_resolver import (
    LocatorChain,
    LocatorResolver,
    LocatorResult,
    by_class_hint,
    by_css,
    by_role,
    by_tag,
)


HEADER = LocatorChain.of(
    "header",
    by_tag("h1"),
    by_tag("h2"),
    by_role("heading"),
    by_class_hint("header"),
    by_class_hint("title"),
    title_fallback=True,
)

SUB_HEADER = LocatorChain.of(
    "sub_header",
    by_tag("h2"),
    by_tag("h3"),
    by_class_hint("subtitle"),
    by_class_hint("sub-header"),
    by_css("p.lead"),
)

PRIMARY_ACTION = LocatorChain.of(
    "primary_action",
    by_css("button[type='submit']"),
    by_css("input[type='submit']"),
    by_role("button"),
    by_tag("button"),
)

NAME_FIELD = LocatorChain.of(
    "name_field",
    by_css("input[name='name']"),
    by_css("#name"),
    by_css("input[placeholder*='name' i]"),
    by_css("input[type='text']"),
)

EMAIL_FIELD = LocatorChain.of(
    "email_field",
    by_css("input[type='email']"),
    by_css("input[name='email']"),
    by_css("#email"),
    by_css("input[placeholder*='email' i]"),
)

TEXT_AREA = LocatorChain.of(
    "text_area",
    by_tag("textarea"),
    by_role("textbox", name="Message"),
)

DROPDOWN = LocatorChain.of(
    "dropdown",
    by_tag("select"),
    by_role("combobox"),
)

CHECKBOX = LocatorChain.of(
    "checkbox",
    by_css("input[type='checkbox']"),
    by_role("checkbox"),
)

RADIO_BUTTON = LocatorChain.of(
    "radio_button",
    by_css("input[type='radio']"),
    by_role("radio"),
)

SUBMIT_BUTTON = LocatorChain.of(
    "submit_button",
    by_css("button[type='submit']"),
    by_css("input[type='submit']"),
    by_css("button:has-text('Submit')"),
    by_role("button", name="Submit"),
)

RESET_BUTTON = LocatorChain.of(
    "reset_button",
    by_css("button[type='reset']"),
    by_css("input[type='reset']"),
    by_css("button:has-text('Reset')"),
    by_css("button:has-text('Clear')"),
)

START_BUTTON = LocatorChain.of(
    "start_button",
    by_css("button:has-text('Start')"),
    by_css("button:has-text('Get Started')"),
    by_css("a:has-text('Start')"),
    by_tag("button"),
)

ERROR_MESSAGE_SELECTOR = (
    ".error, .error-message, .alert-danger, .invalid-feedback, [role='alert']"
)

ERROR_MESSAGE = LocatorChain.of(
    "error_message",
    by_css(".error-message"),
    by_css(".error"),
    by_css(".alert-danger"),
    by_css(".invalid-feedback"),
    by_role("alert"),
)


class AppSelectorPage:
    """App Selector page object (sync)."""

    PAGE_TITLE = "App Selector"

    def __init__(
        self,
        page: Page,
        config: Optional[ConfigLoader] = None,
        waiter: Optional[InteractionWaiter] = None,
        resolver: Optional[LocatorResolver] = None,
    ):
        """
        Args:
            page: Playwright Page object
            config: Configuration source, defaults to the shared ConfigLoader
            waiter: Interaction waiter, built from config.timeout when omitted
            resolver: Locator resolver, built from config.implicit_wait when omitted
        """
        self.page = page
        self.config = config or ConfigLoader()
        load_state = LOAD_STATES.get(self.config.page_load_strategy.lower(), "load")
        self.waiter = waiter or InteractionWaiter(self.config.timeout, load_state=load_state)
        self.resolver = resolver or LocatorResolver(
            page, self.waiter, lookup_timeout_seconds=self.config.implicit_wait
        )

    # =========================================================================
    # Navigation
    # =========================================================================

    @allure.step("Open App Selector page")
    def open(self) -> "AppSelectorPage":
        """Navigate to the configured application URL and wait for readiness."""
        return self.navigate_to(self.config.app_url)

    def navigate_to(self, url: str) -> "AppSelectorPage":
        self.page.goto(url, wait_until=self.waiter.load_state)
        self.waiter.wait_for_document_ready(self.page)
        logger.debug(f"Navigated to: {url}")
        return self

    def get_page_title(self) -> str:
        return self.page.title()

    def get_current_url(self) -> str:
        return self.page.url

    # =========================================================================
    # Readiness
    # =========================================================================

    @allure.step("Verify page loaded")
    def is_page_loaded(self) -> bool:
        """
        Layered readiness check. Each layer is tried in order and the first
        success wins:
            1. header and primary action control both visible
            2. either header variant (h1 / h2) visible
            3. any interactive control (button or input) present
            4. non-empty document title
            5. a body element present
        """
        layers = [
            ("header and primary action", self._header_and_action_visible),
            ("header variant", self._any_header_visible),
            ("interactive control", self._has_interactive_control),
            ("document title", self._has_title),
            ("body element", self._has_body),
        ]
        for name, check in layers:
            try:
                if check():
                    logger.info(f"Page loaded ({name})")
                    return True
            except Exception as e:
                logger.debug(f"Readiness layer '{name}' errored: {e}")
        logger.warning("Page did not reach any readiness layer")
        return False

    def _header_and_action_visible(self) -> bool:
        header = self.resolver.resolve_element(HEADER)
        if not self._visible(header):
            return False
        return self._visible(self.resolver.resolve_element(PRIMARY_ACTION))

    def _any_header_visible(self) -> bool:
        return any(
            self.waiter.is_visible(self.page.locator(tag).first)
            for tag in ("h1", "h2")
        )

    def _has_interactive_control(self) -> bool:
        return self.page.locator("button, input").count() > 0

    def _has_title(self) -> bool:
        return bool((self.page.title() or "").strip())

    def _has_body(self) -> bool:
        return self.page.locator("body").count() > 0

    def _visible(self, result: LocatorResult) -> bool:
        return bool(result) and self.waiter.is_visible(result.locator)

    # =========================================================================
    # Text
    # =========================================================================

    def get_header_text(self) -> str:
        return self.resolver.resolve_text(HEADER)

    def get_sub_header_text(self) -> str:
        return self.resolver.resolve_text(SUB_HEADER)

    def get_error_message_text(self) -> str:
        return self.resolver.resolve_text(ERROR_MESSAGE)

    # =========================================================================
    # Field entry
    # =========================================================================

    @allure.step("Enter name: {name}")
    def enter_name(self, name: str) -> bool:
        return self._enter(NAME_FIELD, name)

    @allure.step("Enter email: {email}")
    def enter_email(self, email: str) -> bool:
        return self._enter(EMAIL_FIELD, email)

    @allure.step("Enter text area")
    def enter_text_area(self, text: str) -> bool:
        return self._enter(TEXT_AREA, text)

    @allure.step("Select dropdown option: {value}")
    def select_dropdown_option(self, value: str) -> bool:
        """Select an option by value. No-op when the dropdown or option is absent."""
        result = self.resolver.resolve_element(DROPDOWN)
        if not self._visible(result):
            logger.debug("Dropdown not present, skipping selection")
            return False
        try:
            has_option = result.locator.locator(f"option[value='{value}']").count() > 0
        except PlaywrightError as e:
            logger.debug(f"Could not inspect dropdown options: {e}")
            return False
        if not has_option:
            logger.debug(f"Dropdown has no option '{value}', skipping selection")
            return False
        self.waiter.select(result.locator, value, description=DROPDOWN.role)
        return True

    def _enter(self, chain: LocatorChain, text: str) -> bool:
        result = self.resolver.resolve_element(chain)
        if not self._visible(result):
            logger.debug(f"'{chain.role}' not present, skipping entry")
            return False
        self.waiter.type_into(result.locator, text, description=chain.role)
        return True

    # =========================================================================
    # Toggles
    # =========================================================================

    @allure.step("Check checkbox")
    def check_checkbox(self) -> bool:
        return self._set_toggle(CHECKBOX, True)

    @allure.step("Uncheck checkbox")
    def uncheck_checkbox(self) -> bool:
        return self._set_toggle(CHECKBOX, False)

    @allure.step("Select radio button")
    def select_radio_button(self) -> bool:
        return self._set_toggle(RADIO_BUTTON, True)

    def _set_toggle(self, chain: LocatorChain, checked: bool) -> bool:
        """Click the toggle only when its state differs. Returns True if clicked."""
        result = self.resolver.resolve_element(chain)
        if not self._visible(result):
            logger.debug(f"'{chain.role}' not present, skipping toggle")
            return False
        try:
            current = result.locator.is_checked()
        except PlaywrightError as e:
            logger.debug(f"Could not read '{chain.role}' state: {e}")
            return False
        if current == checked:
            logger.debug(f"'{chain.role}' already {'checked' if checked else 'unchecked'}")
            return False
        self.waiter.click(result.locator, description=chain.role)
        return True

    # =========================================================================
    # Buttons
    # =========================================================================

    @allure.step("Click submit button")
    def click_submit_button(self) -> bool:
        return self._click(SUBMIT_BUTTON)

    @allure.step("Click reset button")
    def click_reset_button(self) -> bool:
        return self._click(RESET_BUTTON)

    @allure.step("Click start button")
    def click_start_button(self) -> bool:
        return self._click(START_BUTTON)

    def _click(self, chain: LocatorChain) -> bool:
        result = self.resolver.resolve_element(chain)
        if not result:
            logger.debug(f"'{chain.role}' not present, skipping click")
            return False
        self.waiter.click(result.locator, description=chain.role)
        return True

    # =========================================================================
    # Composite flows
    # =========================================================================

    @allure.step("Fill and submit form")
    def fill_and_submit_form(
        self,
        name: str,
        email: str,
        option_value: str,
        text: str,
    ) -> bool:
        """
        Fill every form control that is present, then submit. Absent controls
        are skipped; there is no rollback.

        Returns:
            True if the submit button was clicked
        """
        self.enter_name(name)
        self.enter_email(email)
        self.select_dropdown_option(option_value)
        self.enter_text_area(text)
        self.check_checkbox()
        self.select_radio_button()
        return self.click_submit_button()

    # =========================================================================
    # Direct queries
    # =========================================================================

    def get_button_count(self) -> int:
        return self.page.locator("button").count()

    def get_input_field_count(self) -> int:
        return self.page.locator("input").count()

    def get_link_count(self) -> int:
        return self.page.locator("a").count()

    def is_error_message_displayed(self) -> bool:
        """Direct lookup, no wait: True if any error banner is visible now."""
        try:
            errors = self.page.locator(ERROR_MESSAGE_SELECTOR)
            return any(errors.nth(i).is_visible() for i in range(errors.count()))
        except PlaywrightError as e:
            logger.debug(f"Error banner lookup failed: {e}")
            return False

    def get_locator_health_report(self) -> str:
        return self.resolver.get_health_report()


__all__ = [
    "AppSelectorPage",
]
