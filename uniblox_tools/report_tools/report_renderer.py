"""
HTML rendering for a ReportSession.

Produces a single self-contained document: run metadata, summary counts and
one section per test entry with its log lines and screenshot links. The
document is a Jinja2 template rendered with autoescaping.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from jinja2 import BaseLoader, Environment

if TYPE_CHECKING:
    from .report_session import ReportSession, TestEntry


DISPLAY_TIME = "%b %d, %Y %H:%M:%S"

STYLE = """
body { font-family: -apple-system, Segoe UI, Helvetica, Arial, sans-serif; margin: 2em; color: #222; }
h1 { margin-bottom: 0.2em; }
table.meta td { padding: 2px 12px 2px 0; }
.summary span { margin-right: 1.5em; font-weight: bold; }
section.test { border: 1px solid #ddd; border-radius: 4px; margin: 1em 0; padding: 0.8em 1em; }
.badge { display: inline-block; padding: 1px 8px; border-radius: 3px; color: #fff; font-size: 0.85em; }
.PASS { background: #2e7d32; } .FAIL { background: #c62828; }
.SKIP { background: #f9a825; } .PENDING { background: #757575; }
.INFO { color: #1565c0; } .WARNING { color: #ef6c00; }
li.log .level { display: inline-block; width: 6em; font-weight: bold; }
li.log.PASS, li.log.FAIL, li.log.SKIP { background: none; }
li.log.PASS .level { color: #2e7d32; } li.log.FAIL .level { color: #c62828; }
li.log.SKIP .level { color: #f9a825; }
"""

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ settings.app_name }} Automation Test Report</title>
<style>{{ style | safe }}</style>
</head>
<body>
<h1>{{ settings.app_name }} Application Test Results</h1>
<p>Run started {{ started_at | display_time }}</p>
<table class="meta">
{% for key, value in metadata.items() %}
<tr><td><b>{{ key }}</b></td><td>{{ value }}</td></tr>
{% endfor %}
</table>
<div class="summary">
<span>Total: {{ summary.total }}</span>
<span>Passed: {{ summary.passed }}</span>
<span>Failed: {{ summary.failed }}</span>
<span>Skipped: {{ summary.skipped }}</span>
<span>Pass rate: {{ "%.2f" | format(summary.pass_rate) }}%</span>
</div>
{% for entry in entries %}
{% set status = entry.status.value if entry.status else "PENDING" %}
<section class="test" id="{{ entry.name }}">
<h2>{{ entry.name }} <span class="badge {{ status }}">{{ status }}</span></h2>
<p>{{ entry.description }}</p>
<p><small>Started {{ entry.started_at | display_time }}
{%- if entry.finished_at %} &middot; finished {{ entry.finished_at | display_time }}{% endif %}</small></p>
<ul>
{% for line in entry.logs %}
<li class="log {{ line.level.value }}"><span class="level">{{ line.level.value }}</span> <small>{{ line.timestamp.strftime("%H:%M:%S") }}</small> {{ line.message }}</li>
{% endfor %}
</ul>
{% if entry.screenshots %}
<div class="screenshots">
{% for path in entry.screenshots %}
{% set href = path | relative_to_report %}
<p><a href="{{ href }}"><img src="{{ href }}" alt="{{ path.name }}" width="480"></a></p>
{% endfor %}
</div>
{% endif %}
</section>
{% else %}
<p class="empty">No tests were recorded in this run.</p>
{% endfor %}
</body>
</html>
"""


def _display_time(value: Optional[datetime]) -> str:
    return value.strftime(DISPLAY_TIME) if value else ""


def _relative_link(path: Path, base: Path) -> str:
    try:
        return os.path.relpath(os.path.abspath(path), os.path.abspath(base)).replace(os.sep, "/")
    except ValueError:
        # Different drive on Windows
        return str(path)


def _build_environment(report_dir: Path) -> Environment:
    env = Environment(loader=BaseLoader(), autoescape=True)
    env.filters["display_time"] = _display_time
    env.filters["relative_to_report"] = lambda path: _relative_link(path, report_dir)
    return env


def render_report(session: "ReportSession") -> str:
    """Build the HTML document for a session."""
    env = _build_environment(session.report_path.parent)
    template = env.from_string(REPORT_TEMPLATE)
    entries: List["TestEntry"] = list(session.entries)
    return template.render(
        settings=session.settings,
        style=STYLE,
        started_at=session.started_at,
        metadata=session.metadata,
        summary=session.summary(),
        entries=entries,
    )


__all__ = [
    "render_report",
]
