import re
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from uniblox_tools.report_tools import report_session as report_session_module
from uniblox_tools.report_tools.report_session import (
    LogLevel,
    ReportSession,
    ReportSettings,
    TestStatus,
)


@pytest.fixture
def settings(tmp_path):
    return ReportSettings(
        report_dir=tmp_path / "reports",
        screenshot_dir=tmp_path / "screenshots",
        app_name="Uniblox",
        app_url="https://example.test/app-selector",
        browser="chrome",
    )


@pytest.fixture(autouse=True)
def fresh_session():
    ReportSession.reset()
    yield
    ReportSession.reset()


def fake_page():
    page = MagicMock()
    page.screenshot.side_effect = lambda path, full_page: Path(path).write_bytes(b"\x89PNG")
    return page


# =============================================================================
# Initialization
# =============================================================================

def test_first_use_wipes_old_artifacts(settings):
    (settings.report_dir / "old" / "nested").mkdir(parents=True)
    (settings.report_dir / "old_report.html").write_text("old")
    settings.screenshot_dir.mkdir(parents=True)
    (settings.screenshot_dir / "old.png").write_bytes(b"old")

    ReportSession.get_instance(settings)

    assert settings.report_dir.is_dir()
    assert settings.screenshot_dir.is_dir()
    assert list(settings.report_dir.iterdir()) == []
    assert list(settings.screenshot_dir.iterdir()) == []


def test_second_get_instance_does_not_wipe_again(settings):
    first = ReportSession.get_instance(settings)
    keep = settings.report_dir / "keep.txt"
    keep.write_text("written during the run")

    second = ReportSession.get_instance(settings)

    assert second is first
    assert keep.exists()


def test_concurrent_first_use_initializes_once(settings, monkeypatch):
    cleaned = []
    monkeypatch.setattr(
        report_session_module, "clean_directory", lambda path: cleaned.append(path) or 0
    )
    barrier = threading.Barrier(8)
    sessions = []

    def worker():
        barrier.wait()
        sessions.append(ReportSession.get_instance(settings))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(s) for s in sessions}) == 1
    assert cleaned == [settings.report_dir, settings.screenshot_dir]


def test_report_file_name_and_metadata(settings):
    session = ReportSession.get_instance(settings)

    assert session.report_path.parent == settings.report_dir
    assert re.fullmatch(
        r"Uniblox_Test_Report_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.html", session.report_path.name
    )
    assert session.metadata["Test URL"] == "https://example.test/app-selector"
    assert session.metadata["Browser"] == "chrome"
    assert {"Application", "Python Version", "OS", "User"} <= set(session.metadata)


# =============================================================================
# Entries and logging
# =============================================================================

def test_create_test_supplies_default_description(settings):
    session = ReportSession.get_instance(settings)

    entry = session.create_test("test_login")

    assert entry.description == "Test method: test_login"
    assert session.entries == [entry]


def test_logging_without_entry_is_tolerated(settings):
    session = ReportSession.get_instance(settings)

    session.log_info(None, "before any test")

    assert session.entries == []


def test_log_lines_keep_their_level(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("test_login", "Login works")

    session.log_info(entry, "opened")
    session.log_warning(entry, "slow page")

    assert [(line.level, line.message) for line in entry.logs] == [
        (LogLevel.INFO, "opened"),
        (LogLevel.WARNING, "slow page"),
    ]


def test_finalized_entry_is_never_reopened(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("test_login")

    session.update_test_result(entry, TestStatus.PASS)
    session.update_test_result(entry, TestStatus.FAIL, "late failure")
    session.log_info(entry, "after the end")

    assert entry.status == TestStatus.PASS
    assert all(line.message != "after the end" for line in entry.logs)


@pytest.mark.parametrize(
    "status, expected",
    [
        ("pass", TestStatus.PASS),
        ("FAIL", TestStatus.FAIL),
        (TestStatus.SKIP, TestStatus.SKIP),
    ],
)
def test_update_test_result_accepts_status_names(settings, status, expected):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("t")

    session.update_test_result(entry, status, "why")

    assert entry.status == expected
    assert entry.finished_at is not None


def test_unknown_status_is_recorded_as_info(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("t")

    session.update_test_result(entry, 16, "odd")

    assert entry.status is None
    assert entry.logs[-1].level == LogLevel.INFO
    assert entry.logs[-1].message == "Test status: 16"


def test_fail_result_message(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("Login")

    session.update_test_result(entry, TestStatus.FAIL, "timeout")

    assert entry.status_message == "timeout"
    assert entry.logs[-1].message == "Test failed: timeout"


# =============================================================================
# Screenshots
# =============================================================================

def test_add_screenshot_saves_and_attaches(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("Login")

    path = session.add_screenshot(entry, fake_page(), "failure_Login")

    assert path is not None and path.exists()
    assert path.parent == settings.screenshot_dir
    assert re.fullmatch(r"failure_Login_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.png", path.name)
    assert entry.screenshots == [path]
    assert entry.logs[-1].message == "Screenshot captured: failure_Login"


def test_screenshot_failure_is_a_warning_and_keeps_outcome(settings):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("Login")
    page = MagicMock()
    page.screenshot.side_effect = RuntimeError("Target page has been closed")

    assert session.add_screenshot(entry, page, "failure_Login") is None
    session.update_test_result(entry, TestStatus.PASS)

    assert entry.status == TestStatus.PASS
    assert entry.screenshots == []
    assert any("Target page has been closed" in w for w in entry.warnings())


def test_placeholder_screenshot_is_empty_file(settings):
    settings.placeholder_screenshots = True
    session = ReportSession.get_instance(settings)
    entry = session.create_test("Login")
    page = MagicMock()

    path = session.add_screenshot(entry, page, "failure_Login")

    assert path.exists() and path.stat().st_size == 0
    page.screenshot.assert_not_called()


# =============================================================================
# Flush
# =============================================================================

def test_flush_without_entries_writes_valid_empty_report(settings):
    session = ReportSession.get_instance(settings)

    path = session.flush()

    html = path.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert html.rstrip().endswith("</html>")
    assert "No tests were recorded" in html
    assert "Total: 0" in html


def test_flush_renders_entries_metadata_and_screenshot_links(settings):
    session = ReportSession.get_instance(settings)
    passed = session.create_test("test_header", "Header <h1> is shown")
    session.update_test_result(passed, TestStatus.PASS)
    failed = session.create_test("Login")
    shot = session.add_screenshot(failed, fake_page(), "failure_Login")
    session.update_test_result(failed, TestStatus.FAIL, "timeout")

    html = session.flush().read_text(encoding="utf-8")

    assert "https://example.test/app-selector" in html
    assert "Header &lt;h1&gt; is shown" in html
    assert "Test failed: timeout" in html
    assert f"../screenshots/{shot.name}" in html
    assert "Passed: 1" in html and "Failed: 1" in html


def test_flush_is_effective_once(settings):
    session = ReportSession.get_instance(settings)
    first = session.flush()
    first.write_text("sentinel")

    assert session.flush() == first
    assert first.read_text() == "sentinel"


def test_summary_counts_statuses(settings):
    session = ReportSession.get_instance(settings)
    for name, status in [("a", TestStatus.PASS), ("b", TestStatus.FAIL), ("c", TestStatus.SKIP)]:
        session.update_test_result(session.create_test(name), status)
    session.create_test("d")

    summary = session.summary()

    assert (summary.total, summary.passed, summary.failed, summary.skipped, summary.pending) == (
        4, 1, 1, 1, 1,
    )
    assert summary.to_dict()["pass_rate"] == "25.00%"


def test_failed_flush_can_be_retried(settings, monkeypatch):
    session = ReportSession.get_instance(settings)
    original_write = Path.write_text
    calls = []

    def flaky_write(self, *args, **kwargs):
        calls.append(self)
        if len(calls) == 1:
            raise OSError("disk full")
        return original_write(self, *args, **kwargs)

    monkeypatch.setattr(Path, "write_text", flaky_write)

    assert session.flush() is None
    assert not session.flushed
    assert not session.report_path.exists()

    path = session.flush()

    assert path == session.report_path
    assert path.exists()
    assert session.flushed


def test_allure_attach_error_keeps_captured_screenshot(settings, monkeypatch):
    session = ReportSession.get_instance(settings)
    entry = session.create_test("Login")

    def broken_attach(*args, **kwargs):
        raise RuntimeError("allure listener crashed")

    monkeypatch.setattr(report_session_module.allure.attach, "file", broken_attach)

    path = session.add_screenshot(entry, fake_page(), "failure_Login")

    assert path is not None and path.exists()
    assert entry.screenshots == [path]
    assert "Screenshot captured: failure_Login" in [line.message for line in entry.logs]
    assert not any("Failed to capture screenshot" in w for w in entry.warnings())
    assert any("allure listener crashed" in w for w in entry.warnings())
