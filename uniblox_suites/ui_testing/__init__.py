"""App Selector UI testing: framework, page objects and browser-driven tests."""
