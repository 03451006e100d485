from pathlib import Path
from unittest.mock import MagicMock

import pytest

from uniblox_tools.report_tools.lifecycle_listener import (
    FailureContext,
    TestLifecycleListener,
    never_raises,
)
from uniblox_tools.report_tools.report_session import (
    LogLevel,
    ReportSession,
    ReportSettings,
    TestStatus,
)


@pytest.fixture(autouse=True)
def fresh_session():
    ReportSession.reset()
    yield
    ReportSession.reset()


@pytest.fixture
def listener(tmp_path):
    settings = ReportSettings(
        report_dir=tmp_path / "reports",
        screenshot_dir=tmp_path / "screenshots",
        app_url="https://example.test/app-selector",
    )
    return TestLifecycleListener(settings=settings)


def live_page():
    page = MagicMock()
    page.screenshot.side_effect = lambda path, full_page: Path(path).write_bytes(b"\x89PNG")
    return page


def messages(entry, level=None):
    return [line.message for line in entry.logs if level is None or line.level == level]


def test_passing_test_is_recorded(listener):
    listener.on_suite_start("ui")
    entry = listener.on_test_start("t1", "test_header", "Header is shown")
    listener.on_test_success("t1")

    assert entry.description == "Header is shown"
    assert messages(entry)[0] == "Starting test: test_header"
    assert "Test passed: test_header" in messages(entry, LogLevel.PASS)
    assert entry.status == TestStatus.PASS


def test_failure_with_live_browser_attaches_screenshot(listener):
    entry = listener.on_test_start("t1", "Login")

    listener.on_test_failure("t1", FailureContext("timeout", browser_provider=live_page))

    assert entry.status == TestStatus.FAIL
    assert entry.status_message == "timeout"
    assert len(entry.screenshots) == 1
    assert entry.screenshots[0].name.startswith("failure_Login_")
    assert entry.logs[-1].message == "Test failed: timeout"
    assert "Error: timeout" in messages(entry, LogLevel.FAIL)


def test_failure_when_browser_is_gone_still_records_fail(listener):
    entry = listener.on_test_start("t1", "Login")

    def closed():
        raise RuntimeError("Browser has been closed")

    listener.on_test_failure("t1", FailureContext("timeout", browser_provider=closed))

    assert entry.status == TestStatus.FAIL
    assert entry.screenshots == []
    assert any("Browser has been closed" in w for w in entry.warnings())


def test_failure_without_browser_provider(listener):
    entry = listener.on_test_start("t1", "Login")

    listener.on_test_failure("t1", FailureContext("boom"))

    assert entry.status == TestStatus.FAIL
    assert "Could not capture screenshot: no browser available" in entry.warnings()


def test_skip_uses_default_reason(listener):
    entry = listener.on_test_start("t1", "test_optional")

    listener.on_test_skip("t1")

    assert entry.status == TestStatus.SKIP
    assert "Reason: Test was skipped" in messages(entry, LogLevel.SKIP)


def test_events_for_unknown_test_are_tolerated(listener):
    listener.on_test_success("never-started")
    listener.on_test_failure("never-started", FailureContext("boom"))

    assert listener.session.entries == []


def test_suite_finish_writes_report(listener):
    listener.on_test_start("t1", "test_header")
    listener.on_test_success("t1")

    listener.on_suite_finish("ui")

    report = listener.session.report_path
    assert report.exists()
    assert "test_header" in report.read_text(encoding="utf-8")


def test_hooks_never_raise_when_session_is_broken():
    def broken(settings):
        raise OSError("read-only file system")

    listener = TestLifecycleListener(session_factory=broken)

    assert listener.on_test_start("t1", "x") is None
    listener.on_suite_start("ui")
    listener.on_test_failure("t1", FailureContext("boom"))
    listener.on_suite_finish("ui")


def test_never_raises_passes_through_return_value():
    @never_raises
    def hook(value):
        return value * 2

    assert hook(21) == 42
