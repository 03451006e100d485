"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the App Selector page.

Components:
    - interaction_waiter: Bounded-wait wrappers around element actions
    - locator_resolver: Ordered fallback chains of locator strategies
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .interaction_waiter import (
    InteractionWaiter,
    InteractionError,
    NotInteractableError,
    NotVisibleError,
)
from .locator_resolver import (
    LocatorChain,
    LocatorResolver,
    LocatorResult,
    LocatorStrategy,
    NOT_FOUND,
    by_class_hint,
    by_css,
    by_role,
    by_tag,
)
from .browser_manager import BrowserManager, UnsupportedBrowserError

__all__ = [
    "InteractionWaiter",
    "InteractionError",
    "NotInteractableError",
    "NotVisibleError",
    "LocatorChain",
    "LocatorResolver",
    "LocatorResult",
    "LocatorStrategy",
    "NOT_FOUND",
    "by_class_hint",
    "by_css",
    "by_role",
    "by_tag",
    "BrowserManager",
    "UnsupportedBrowserError",
]
