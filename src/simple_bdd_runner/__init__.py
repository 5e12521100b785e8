"""Option resolution and rerun tracking core for a behavior-driven test runner."""
