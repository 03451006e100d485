"""
================================================================================
Report Session
================================================================================

Process-wide reporting state for one UI test run.

Features:
    - Lazy, thread-safe singleton; output directories wiped once per run
    - Explicit TestEntry handles for per-test routing (no implicit "current test")
    - Leveled log lines, screenshot attachments, single finalization per entry
    - Best-effort evidence capture: reporting problems become warnings
    - HTML report written once at suite end

================================================================================
"""

from __future__ import annotations

import getpass
import platform
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import allure
from jinja2 import TemplateError
from loguru import logger

from uniblox_tools.common import ConfigLoader, clean_directory, ensure_directory


TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class TestStatus(str, Enum):
    """Final status of a test entry."""
    __test__ = False

    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"

    @classmethod
    def parse(cls, value: Any) -> Optional["TestStatus"]:
        """Return the matching status, or None for anything unrecognized."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                return None
        return None


class LogLevel(str, Enum):
    INFO = "INFO"
    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"
    WARNING = "WARNING"


@dataclass
class LogLine:
    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class TestEntry:
    """
    One test case within the report.

    Created at test start, mutated by log/attach calls, finalized exactly once.
    """
    __test__ = False

    name: str
    description: str
    started_at: datetime = field(default_factory=datetime.now)
    status: Optional[TestStatus] = None
    status_message: str = ""
    finished_at: Optional[datetime] = None
    logs: List[LogLine] = field(default_factory=list)
    screenshots: List[Path] = field(default_factory=list)

    @property
    def finalized(self) -> bool:
        return self.status is not None

    def warnings(self) -> List[str]:
        return [line.message for line in self.logs if line.level == LogLevel.WARNING]


@dataclass
class ReportSummary:
    """Summary of test execution results."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    pending: int = 0

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "pending": self.pending,
            "pass_rate": f"{self.pass_rate:.2f}%",
        }


@dataclass
class ReportSettings:
    """Where and how the session writes its artifacts."""
    report_dir: Path
    screenshot_dir: Path
    app_name: str = "Uniblox"
    app_url: str = ""
    browser: str = "chrome"
    placeholder_screenshots: bool = False

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "ReportSettings":
        config = config or ConfigLoader()
        return cls(
            report_dir=config.report_dir,
            screenshot_dir=config.screenshot_dir,
            app_name=config.app_name,
            app_url=config.app_url,
            browser=config.browser,
            placeholder_screenshots=config.placeholder_screenshots,
        )


class ReportSession:
    """
    Coordinates one run's test entries and output artifacts.

    Usage:
        session = ReportSession.get_instance()
        entry = session.create_test("test_page_loads", "Page loads")
        session.log_info(entry, "Opened page")
        session.update_test_result(entry, TestStatus.PASS)
        session.flush()
    """

    _instance: Optional["ReportSession"] = None
    _instance_lock = threading.Lock()

    def __init__(self, settings: ReportSettings):
        self.settings = settings
        self.started_at = datetime.now()
        self.report_path = (
            Path(settings.report_dir)
            / f"{settings.app_name}_Test_Report_{self.started_at.strftime(TIMESTAMP_FORMAT)}.html"
        )
        self.metadata: Dict[str, str] = {}
        self.entries: List[TestEntry] = []
        self.flushed = False
        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()

        self._prepare_directories()
        self._record_metadata()

    @classmethod
    def get_instance(cls, settings: Optional[ReportSettings] = None) -> "ReportSession":
        """
        Return the process-wide session, creating it on first use.

        The first call wipes the report and screenshot directories. Later calls
        return the same session and ignore ``settings``.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls(settings or ReportSettings.from_config())
                    logger.info(f"Report session started: {cls._instance.report_path}")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (used by tests)."""
        with cls._instance_lock:
            cls._instance = None

    # =========================================================================
    # Setup
    # =========================================================================

    def _prepare_directories(self) -> None:
        for directory in (self.settings.report_dir, self.settings.screenshot_dir):
            try:
                removed = clean_directory(directory)
                ensure_directory(directory)
                logger.debug(f"Prepared {directory} (removed {removed} old entries)")
            except OSError as e:
                logger.warning(f"Could not prepare output directory {directory}: {e}")

    def _record_metadata(self) -> None:
        try:
            user = getpass.getuser()
        except Exception:
            user = "unknown"
        self.metadata = {
            "Application": f"{self.settings.app_name} App Selector",
            "Test URL": self.settings.app_url,
            "Browser": self.settings.browser,
            "Python Version": platform.python_version(),
            "OS": platform.platform(),
            "User": user,
        }

    # =========================================================================
    # Entries
    # =========================================================================

    def create_test(self, name: str, description: Optional[str] = None) -> TestEntry:
        """Open a new entry for a test case."""
        entry = TestEntry(name=name, description=description or f"Test method: {name}")
        with self._lock:
            if self.flushed:
                logger.warning(f"Test '{name}' created after the report was flushed")
            self.entries.append(entry)
        return entry

    def log(self, entry: Optional[TestEntry], level: LogLevel, message: str) -> None:
        """
        Append a leveled line to an entry. Logging without an entry is a no-op.
        """
        if entry is None:
            logger.debug(f"[no test] {level.value}: {message}")
            return
        with self._lock:
            if entry.finalized:
                logger.warning(f"Dropped log for finished test '{entry.name}': {message}")
                return
            entry.logs.append(LogLine(level=level, message=message))
        logger.debug(f"[{entry.name}] {level.value}: {message}")

    def log_info(self, entry: Optional[TestEntry], message: str) -> None:
        self.log(entry, LogLevel.INFO, message)

    def log_pass(self, entry: Optional[TestEntry], message: str) -> None:
        self.log(entry, LogLevel.PASS, message)

    def log_fail(self, entry: Optional[TestEntry], message: str) -> None:
        self.log(entry, LogLevel.FAIL, message)

    def log_skip(self, entry: Optional[TestEntry], message: str) -> None:
        self.log(entry, LogLevel.SKIP, message)

    def log_warning(self, entry: Optional[TestEntry], message: str) -> None:
        self.log(entry, LogLevel.WARNING, message)

    # =========================================================================
    # Evidence
    # =========================================================================

    def add_screenshot(self, entry: Optional[TestEntry], page: Any, label: str) -> Optional[Path]:
        """
        Capture a screenshot and attach it to the entry. Best-effort: any
        failure is logged as a warning on the entry and None is returned.
        """
        if entry is None or page is None:
            return None
        try:
            path = self._capture(page, label)
        except Exception as e:
            self.log_warning(entry, f"Failed to capture screenshot: {e}")
            logger.warning(f"Screenshot '{label}' failed: {e}")
            return None
        with self._lock:
            entry.screenshots.append(path)
        self.log_info(entry, f"Screenshot captured: {label}")

        try:
            self._attach_to_allure(path, label)
        except Exception as e:
            self.log_warning(entry, f"Screenshot saved but not attached to allure: {e}")
            logger.warning(f"Allure attachment for '{label}' failed: {e}")
        return path

    def _capture(self, page: Any, label: str) -> Path:
        directory = ensure_directory(self.settings.screenshot_dir)
        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        path = directory / f"{_safe_label(label)}_{timestamp}.png"
        if self.settings.placeholder_screenshots:
            path.touch()
        else:
            page.screenshot(path=str(path), full_page=True)
        return path

    @staticmethod
    def _attach_to_allure(path: Path, label: str) -> None:
        if path.stat().st_size == 0:
            return
        allure.attach.file(str(path), name=label, attachment_type=allure.attachment_type.PNG)

    # =========================================================================
    # Results
    # =========================================================================

    def update_test_result(
        self,
        entry: Optional[TestEntry],
        status: Union[TestStatus, str, Any],
        message: str = "",
    ) -> None:
        """
        Finalize an entry as PASS, FAIL or SKIP. Unrecognized statuses are
        recorded as an info line and leave the entry open.
        """
        if entry is None:
            return
        parsed = TestStatus.parse(status)
        if parsed is None:
            self.log_info(entry, f"Test status: {status}")
            return

        if parsed == TestStatus.PASS:
            line = LogLine(LogLevel.PASS, message or "Test passed successfully")
        elif parsed == TestStatus.FAIL:
            line = LogLine(LogLevel.FAIL, f"Test failed: {message}")
        else:
            line = LogLine(LogLevel.SKIP, f"Test skipped: {message}")

        with self._lock:
            if entry.finalized:
                logger.warning(
                    f"Test '{entry.name}' already finalized as {entry.status.value}; "
                    f"ignoring {parsed.value}"
                )
                return
            entry.logs.append(line)
            entry.status = parsed
            entry.status_message = message
            entry.finished_at = datetime.now()
        logger.info(f"[{entry.name}] {parsed.value} {message}".rstrip())

    def summary(self) -> ReportSummary:
        with self._lock:
            entries = list(self.entries)
        result = ReportSummary(total=len(entries))
        for entry in entries:
            if entry.status == TestStatus.PASS:
                result.passed += 1
            elif entry.status == TestStatus.FAIL:
                result.failed += 1
            elif entry.status == TestStatus.SKIP:
                result.skipped += 1
            else:
                result.pending += 1
        return result

    def flush(self) -> Optional[Path]:
        """
        Write the HTML report. Effective once a write succeeds; later calls
        return the existing path. Render and I/O problems are logged, None is
        returned and the next call tries again.
        """
        from .report_renderer import render_report

        with self._flush_lock:
            if self.flushed:
                logger.warning(f"Report already flushed: {self.report_path}")
                return self.report_path

            try:
                html = render_report(self)
                ensure_directory(self.report_path.parent)
                self.report_path.write_text(html, encoding="utf-8")
            except (OSError, TemplateError) as e:
                logger.warning(f"Could not write report {self.report_path}: {e}")
                return None

            with self._lock:
                self.flushed = True

        summary = self.summary()
        logger.info(
            f"Report written: {self.report_path} "
            f"({summary.passed} passed, {summary.failed} failed, {summary.skipped} skipped)"
        )
        return self.report_path


def _safe_label(label: str) -> str:
    cleaned = "".join(c if c.isalnum() or c in "-_." else "_" for c in label.strip())
    return cleaned or "screenshot"


__all__ = [
    "ReportSession",
    "ReportSettings",
    "ReportSummary",
    "TestEntry",
    "TestStatus",
    "LogLevel",
    "LogLine",
]
