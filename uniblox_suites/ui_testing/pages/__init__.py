"""
================================================================================
Page Objects
================================================================================

Page Object Model implementation for the App Selector page.

The page class encapsulates:
    - Locator chains per logical role
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .app_selector_page import AppSelectorPage

__all__ = [
    "AppSelectorPage",
]
