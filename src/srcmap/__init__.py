"""srcmap - Canonical source-file keys for binary analysis.

srcmap turns source paths recorded in debug info into stable absolute keys,
converts source file identifiers between bytes, hex and integers, and ships
a declarative table of processor targets.
"""

__version__ = "0.1.0"
__author__ = "srcmap developers"
__description__ = "Canonical source-file keys for debug-info paths in binary analysis"

from srcmap.errors import InvalidArgument, Result
from srcmap.utils.conversion import bytes_to_hex, bytes_to_long, hex_to_bytes, long_to_bytes
from srcmap.utils.paths import (
    base_dir_from_name,
    normalize_dwarf_path,
    normalize_native_path,
    try_normalize_dwarf_path,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "InvalidArgument",
    "Result",
    "normalize_dwarf_path",
    "normalize_native_path",
    "try_normalize_dwarf_path",
    "base_dir_from_name",
    "long_to_bytes",
    "bytes_to_long",
    "hex_to_bytes",
    "bytes_to_hex",
]
