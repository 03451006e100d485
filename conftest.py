"""
Repository-level pytest configuration.

Why this exists:
  - Register the HTML report plugin (enabled with ``--ui-report``)
  - Gate the browser-driven suite behind ``--run-ui`` so unit runs stay offline
  - Initialize loguru once per run from config/config.yaml
"""

from __future__ import annotations

from pathlib import Path

import pytest

from uniblox_tools.common import init_logger


pytest_plugins = ["uniblox_tools.report_tools.pytest_plugin"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-ui",
        action="store_true",
        default=False,
        help="Run the browser-driven App Selector tests (needs Playwright browsers).",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    init_logger()
