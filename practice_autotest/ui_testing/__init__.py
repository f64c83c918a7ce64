"""UI automation: page objects, browser lifecycle and browser-driven tests."""
