# ================================================================================
# Interaction Waiter Module
# ================================================================================
#
# Bounded-wait wrappers around raw element actions. Every action first waits
# for the element to reach the state it needs, so page verbs never race the
# page's asynchronous rendering.
#
# Key Features:
#   - One timeout per session, applied to every wait
#   - click / read_text / type_into / select raise on timeout
#   - is_visible is a guard: it never raises
#
# ================================================================================

from typing import Optional

from loguru import logger
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page


class InteractionError(Exception):
    """Base class for synchronized interaction failures."""

    def __init__(self, action: str, target: str, reason: str = ""):
        self.action = action
        self.target = target
        self.reason = reason
        message = f"{action} failed on {target}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotInteractableError(InteractionError):
    """Element did not become clickable within the timeout."""
    pass


class NotVisibleError(InteractionError):
    """Element did not become visible within the timeout."""
    pass


class InteractionWaiter:
    """
    Synchronizes element actions against the page.

    Example:
        waiter = InteractionWaiter(timeout_seconds=10)
        if waiter.is_visible(page.locator("#name")):
            waiter.type_into(page.locator("#name"), "Test User")
    """

    def __init__(self, timeout_seconds: float = 10, load_state: str = "load"):
        """
        Args:
            timeout_seconds: Wait budget for every action, in seconds
            load_state: Playwright load state that counts as "document ready"
        """
        self.timeout_seconds = timeout_seconds
        self.load_state = load_state

    @property
    def timeout_ms(self) -> float:
        return self.timeout_seconds * 1000

    def click(self, element: Locator, description: str = "") -> None:
        """
        Wait until the element is clickable, then click it.

        Raises:
            NotInteractableError: element not visible, enabled and stable in time
        """
        target = description or self._describe(element)
        try:
            element.wait_for(state="visible", timeout=self.timeout_ms)
            # Playwright's click waits for enabled + stable + receives events
            element.click(timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise NotInteractableError("click", target, self._short(e)) from e
        logger.debug(f"Clicked: {target}")

    def read_text(self, element: Locator, description: str = "") -> str:
        """
        Wait until the element is visible and return its rendered text.

        Raises:
            NotVisibleError: element not visible in time
        """
        target = description or self._describe(element)
        try:
            element.wait_for(state="visible", timeout=self.timeout_ms)
            text = element.inner_text(timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise NotVisibleError("read_text", target, self._short(e)) from e
        logger.debug(f"Got text from {target}: '{text}'")
        return text

    def type_into(self, element: Locator, text: str, description: str = "") -> None:
        """
        Wait until the element is visible, clear it, then enter text.

        Raises:
            NotVisibleError: element not visible in time
        """
        target = description or self._describe(element)
        try:
            element.wait_for(state="visible", timeout=self.timeout_ms)
            element.clear(timeout=self.timeout_ms)
            element.fill(text, timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise NotVisibleError("type_into", target, self._short(e)) from e
        logger.debug(f"Typed into {target}: '{text[:50]}'")

    def select(self, element: Locator, value: str, description: str = "") -> None:
        """
        Wait until a <select> is visible, then choose the option by value.

        Raises:
            NotVisibleError: element not visible in time
        """
        target = description or self._describe(element)
        try:
            element.wait_for(state="visible", timeout=self.timeout_ms)
            element.select_option(value=value, timeout=self.timeout_ms)
        except PlaywrightError as e:
            raise NotVisibleError("select", target, self._short(e)) from e
        logger.debug(f"Selected '{value}' in {target}")

    def is_visible(self, element: Optional[Locator]) -> bool:
        """
        Wait for the element to become visible.

        Returns:
            True if visible within the timeout, False on any failure
        """
        if element is None:
            return False
        try:
            element.wait_for(state="visible", timeout=self.timeout_ms)
            return True
        except Exception:
            return False

    def wait_for_document_ready(self, page: Page) -> bool:
        """Wait for the configured load state. Never raises."""
        try:
            page.wait_for_load_state(self.load_state, timeout=self.timeout_ms)
            return True
        except Exception as e:
            logger.debug(f"Document not ready after {self.timeout_seconds}s: {e}")
            return False

    @staticmethod
    def _describe(element: Locator) -> str:
        try:
            return repr(element)
        except Exception:
            return "<element>"

    @staticmethod
    def _short(error: Exception) -> str:
        return str(error).splitlines()[0][:120] if str(error) else type(error).__name__


__all__ = [
    "InteractionWaiter",
    "InteractionError",
    "NotInteractableError",
    "NotVisibleError",
]
