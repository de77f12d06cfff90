"""Test-runner integration for fixturize."""
