"""
Test suites package.

Kept importable to support:
  - IDE navigation
  - the shared page objects and framework under ``ui_testing``
  - CI/CD module imports
"""
