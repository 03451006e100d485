"""
================================================================================
Uniblox Tools
================================================================================

Shared infrastructure for the App Selector UI automation harness.

Modules:
    - common: Configuration loading and logging setup
    - report_tools: HTML report session, lifecycle listener and pytest plugin

Example:
    from uniblox_tools.common import init_logger
    from uniblox_tools.report_tools import ReportSession

    init_logger()
    session = ReportSession.get_instance()
    entry = session.create_test("test_page_loads")
    session.log_info(entry, "Page opened")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
