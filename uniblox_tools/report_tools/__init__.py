"""
================================================================================
Report Tools
================================================================================

HTML reporting for UI test runs.

Exports:
    - ReportSession: process-wide report state (entries, screenshots, flush)
    - TestLifecycleListener: maps test lifecycle events onto the session
    - FailureContext: failure details handed from the harness to the listener

================================================================================
"""

from .report_session import (
    LogLevel,
    ReportSession,
    ReportSettings,
    ReportSummary,
    TestEntry,
    TestStatus,
)
from .lifecycle_listener import FailureContext, TestLifecycleListener

__all__ = [
    "LogLevel",
    "ReportSession",
    "ReportSettings",
    "ReportSummary",
    "TestEntry",
    "TestStatus",
    "FailureContext",
    "TestLifecycleListener",
]
