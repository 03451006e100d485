"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers, tags tests by directory and skips the
browser-driven suite unless ``--run-ui`` is given.

================================================================================
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser-driven tests against the App Selector page"
    )
    config.addinivalue_line(
        "markers", "unit: Offline tests of the framework and report tools"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by directory; skip UI tests unless --run-ui was given.
    """
    run_ui = config.getoption("--run-ui", default=False)
    skip_ui = pytest.mark.skip(reason="browser tests need --run-ui")

    for item in items:
        parts = Path(str(item.fspath)).parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            if not run_ui:
                item.add_marker(skip_ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Uniblox App Selector UI Automation",
        "=" * 60,
        "",
    ]
