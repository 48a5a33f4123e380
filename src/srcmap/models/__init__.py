"""Data models for source file keys and source map entries."""

from srcmap.models.source_file import (
    SourceFile,
    SourceFileIdType,
    source_file_from_dwarf_path,
    source_file_from_path,
)
from srcmap.models.source_map import SourceLineBounds, SourceMapEntry, get_source_line_bounds

__all__ = [
    "SourceFile",
    "SourceFileIdType",
    "source_file_from_path",
    "source_file_from_dwarf_path",
    "SourceMapEntry",
    "SourceLineBounds",
    "get_source_line_bounds",
]
