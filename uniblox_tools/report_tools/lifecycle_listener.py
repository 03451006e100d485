"""
================================================================================
Test Lifecycle Listener
================================================================================

Adapts test-runner lifecycle events (suite start, test start, pass, fail,
skip, suite finish) into ReportSession calls.

Key Features:
    - Entries tracked by test id, passed explicitly to the session
    - Failure screenshots via an explicit browser-provider callback
    - No hook ever raises: reporting problems become warnings

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Optional

from loguru import logger

from .report_session import ReportSession, ReportSettings, TestEntry, TestStatus


DEFAULT_SKIP_REASON = "Test was skipped"


@dataclass
class FailureContext:
    """
    What the harness hands over when a test fails.

    Attributes:
        error_message: Message of the failing assertion/exception
        cause: The exception itself, when available
        browser_provider: Returns the live page/browser for a screenshot
    """
    error_message: str = ""
    cause: Optional[BaseException] = None
    browser_provider: Optional[Callable[[], Any]] = None


def never_raises(func: Callable) -> Callable:
    """Log any exception from a lifecycle hook as a warning and swallow it."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.warning(f"Reporting hook {func.__name__} failed: {e}")
            return None
    return wrapper


class TestLifecycleListener:
    """
    Feeds lifecycle events into the report session.

    Usage:
        listener = TestLifecycleListener()
        listener.on_suite_start("ui")
        listener.on_test_start("t1", "test_login")
        listener.on_test_failure("t1", FailureContext("timeout", browser_provider=lambda: page))
        listener.on_suite_finish("ui")
    """
    __test__ = False

    def __init__(
        self,
        settings: Optional[ReportSettings] = None,
        session_factory: Callable[..., ReportSession] = ReportSession.get_instance,
    ):
        self._settings = settings
        self._session_factory = session_factory
        self._entries: Dict[str, TestEntry] = {}

    @property
    def session(self) -> ReportSession:
        return self._session_factory(self._settings)

    def entry_for(self, test_id: str) -> Optional[TestEntry]:
        return self._entries.get(test_id)

    @never_raises
    def on_suite_start(self, suite_name: str) -> None:
        session = self.session
        logger.info(f"Test suite started: {suite_name} (report: {session.report_path})")

    @never_raises
    def on_test_start(
        self,
        test_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[TestEntry]:
        name = name or test_id
        entry = self.session.create_test(name, description)
        self._entries[test_id] = entry
        self.session.log_info(entry, f"Starting test: {name}")
        return entry

    @never_raises
    def on_test_success(self, test_id: str) -> None:
        entry = self._entries.get(test_id)
        self.session.log_pass(entry, f"Test passed: {self._name(test_id)}")
        self.session.update_test_result(entry, TestStatus.PASS)

    @never_raises
    def on_test_failure(self, test_id: str, failure: Optional[FailureContext] = None) -> None:
        failure = failure or FailureContext()
        entry = self._entries.get(test_id)
        name = self._name(test_id)
        session = self.session

        session.log_fail(entry, f"Test failed: {name}")
        session.log_fail(entry, f"Error: {failure.error_message}")

        page = self._live_browser(entry, failure)
        if page is not None:
            session.add_screenshot(entry, page, f"failure_{name}")

        session.update_test_result(entry, TestStatus.FAIL, failure.error_message)

    @never_raises
    def on_test_skip(self, test_id: str, reason: Optional[str] = None) -> None:
        entry = self._entries.get(test_id)
        reason = reason or DEFAULT_SKIP_REASON
        self.session.log_skip(entry, f"Test skipped: {self._name(test_id)}")
        self.session.log_skip(entry, f"Reason: {reason}")
        self.session.update_test_result(entry, TestStatus.SKIP, reason)

    @never_raises
    def on_suite_finish(self, suite_name: str) -> None:
        path = self.session.flush()
        logger.info(f"Test suite completed: {suite_name} (report: {path})")

    def _live_browser(self, entry: Optional[TestEntry], failure: FailureContext) -> Any:
        if failure.browser_provider is None:
            self.session.log_warning(entry, "Could not capture screenshot: no browser available")
            return None
        try:
            page = failure.browser_provider()
        except Exception as e:
            self.session.log_warning(entry, f"Could not capture screenshot: {e}")
            return None
        if page is None:
            self.session.log_warning(entry, "Could not capture screenshot: no browser available")
        return page

    def _name(self, test_id: str) -> str:
        entry = self._entries.get(test_id)
        return entry.name if entry else test_id


__all__ = [
    "TestLifecycleListener",
    "FailureContext",
    "never_raises",
]
