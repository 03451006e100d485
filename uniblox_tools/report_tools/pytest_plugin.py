"""
================================================================================
Pytest Report Plugin
================================================================================

Feeds pytest's run lifecycle into TestLifecycleListener so every run started
with ``--ui-report`` produces an HTML report with failure screenshots.

Enable:
    pytest uniblox_suites/ui_testing --run-ui --ui-report

The live page for failure screenshots is taken from the test's ``page``
fixture value.

================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from .lifecycle_listener import FailureContext, TestLifecycleListener


BROWSER_FIXTURE = "page"


def pytest_addoption(parser):
    group = parser.getgroup("ui-report", "App Selector HTML report")
    group.addoption(
        "--ui-report",
        action="store_true",
        default=False,
        help="Write the HTML test report and failure screenshots for this run.",
    )


def pytest_configure(config):
    if config.getoption("--ui-report", default=False):
        config.pluginmanager.register(ReportLifecyclePlugin(), "ui-report-lifecycle")


def _description(item) -> Optional[str]:
    doc = getattr(getattr(item, "obj", None), "__doc__", None)
    if not doc:
        return None
    return doc.strip().splitlines()[0]


def _error_message(call) -> str:
    if call is None or call.excinfo is None:
        return ""
    message = str(call.excinfo.value).strip()
    return message or call.excinfo.typename


def _skip_reason(report) -> Optional[str]:
    if hasattr(report, "wasxfail"):
        return f"Expected failure: {report.wasxfail}" if report.wasxfail else "Expected failure"
    longrepr = report.longrepr
    if isinstance(longrepr, tuple) and len(longrepr) == 3:
        reason = str(longrepr[2])
        return reason[len("Skipped: "):] if reason.startswith("Skipped: ") else reason
    return None


def _browser_provider(item) -> Callable[[], Any]:
    def provide():
        funcargs = getattr(item, "funcargs", {}) or {}
        if BROWSER_FIXTURE not in funcargs:
            raise LookupError(f"test does not use the '{BROWSER_FIXTURE}' fixture")
        return funcargs[BROWSER_FIXTURE]
    return provide


class ReportLifecyclePlugin:
    """Pytest hook implementations bound to one listener."""

    def __init__(self, listener: Optional[TestLifecycleListener] = None):
        self.listener = listener or TestLifecycleListener()

    def pytest_sessionstart(self, session):
        self.listener.on_suite_start(session.name)

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_setup(self, item):
        self.listener.on_test_start(item.nodeid, item.name, _description(item))

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item, call):
        outcome = yield
        report = outcome.get_result()
        self.dispatch(item, report, call)

    def dispatch(self, item, report, call) -> None:
        """Map one phase report to a listener event."""
        if report.when not in ("setup", "call"):
            return
        if report.skipped:
            self.listener.on_test_skip(item.nodeid, _skip_reason(report))
        elif report.failed:
            self.listener.on_test_failure(
                item.nodeid,
                FailureContext(
                    error_message=_error_message(call),
                    cause=call.excinfo.value if call and call.excinfo else None,
                    browser_provider=_browser_provider(item),
                ),
            )
        elif report.when == "call":
            self.listener.on_test_success(item.nodeid)

    def pytest_sessionfinish(self, session, exitstatus):
        self.listener.on_suite_finish(session.name)


__all__ = [
    "ReportLifecyclePlugin",
    "pytest_addoption",
    "pytest_configure",
]
