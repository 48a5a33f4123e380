"""Path and byte conversion helpers."""
