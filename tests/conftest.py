"""Pytest configuration and fixtures for srcmap tests."""

import json
from pathlib import Path

import pytest

from srcmap.processors import load_processor_registry


@pytest.fixture
def base_dir():
    """Synthetic root used by most normalization tests."""
    return "base"


@pytest.fixture
def registry():
    """Processor registry loaded from the bundled table."""
    return load_processor_registry()


@pytest.fixture
def ldefs_file(tmp_path):
    """Factory writing an .ldefs file with the given <language> elements."""
    def _write(*languages: str) -> Path:
        path = tmp_path / "test.ldefs"
        body = "\n".join(languages)
        path.write_text(
            f'<?xml version="1.0" encoding="UTF-8"?>\n<language_definitions>\n{body}\n</language_definitions>\n',
            encoding="utf-8",
        )
        return path
    return _write


@pytest.fixture
def entries_file(tmp_path):
    """Source map entries for two files written as JSON."""
    entries = [
        {"path": "/src/main.c", "lineNumber": 12, "baseAddress": "0x1000", "length": 4},
        {"path": "/src/main.c", "lineNumber": 3, "baseAddress": "0x1004", "length": 8},
        {"path": "/src/main.c", "lineNumber": 40, "baseAddress": 4108, "length": 2},
        {"path": "/src/util.c", "lineNumber": 7, "baseAddress": "0x2000", "length": 4},
    ]
    path = tmp_path / "entries.json"
    path.write_text(json.dumps({"entries": entries}), encoding="utf-8")
    return path
