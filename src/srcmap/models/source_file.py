"""Source file keys: a canonical path plus an optional content identifier."""

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from srcmap.errors import InvalidIdentifierError
from srcmap.utils.conversion import bytes_to_hex, bytes_to_long
from srcmap.utils.paths import normalize_dwarf_path, normalize_native_path, resolve_dot_segments


class SourceFileIdType(str, Enum):
    """Kinds of identifier that can accompany a source file path."""
    NONE = "none"
    UNKNOWN = "unknown"
    TIMESTAMP_64 = "timestamp_64"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def byte_length(self) -> Optional[int]:
        """Required identifier length in bytes, or None if any length is allowed."""
        return _ID_LENGTHS[self]

    @classmethod
    def parse(cls, value: Union[str, "SourceFileIdType"]) -> "SourceFileIdType":
        """Look up an id type by value or name, case-insensitively."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        valid = ", ".join(m.value for m in cls)
        raise InvalidIdentifierError(f"unknown id type '{value}'. Must be one of: {valid}", value)


_ID_LENGTHS = {
    SourceFileIdType.NONE: 0,
    SourceFileIdType.UNKNOWN: None,
    SourceFileIdType.TIMESTAMP_64: 8,
    SourceFileIdType.MD5: 16,
    SourceFileIdType.SHA1: 20,
    SourceFileIdType.SHA256: 32,
    SourceFileIdType.SHA512: 64,
}


@dataclass(frozen=True)
class SourceFile:
    """Immutable source file key.

    Two instances are equal when path, id type and identifier all match, so
    a ``SourceFile`` can be used directly as a dictionary key.
    """
    path: str
    id_type: SourceFileIdType = SourceFileIdType.NONE
    identifier: bytes = field(default=b"")

    def __post_init__(self):
        object.__setattr__(self, "path", resolve_dot_segments(normalize_native_path(self.path)))
        id_type = SourceFileIdType.parse(self.id_type)
        object.__setattr__(self, "id_type", id_type)
        identifier = bytes(self.identifier) if self.identifier else b""
        object.__setattr__(self, "identifier", identifier)

        expected = id_type.byte_length
        if expected is not None and len(identifier) != expected:
            if expected == 0:
                message = f"identifier must be empty for id type {id_type.value}"
            else:
                message = (
                    f"identifier for id type {id_type.value} must have length {expected}, "
                    f"got {len(identifier)}"
                )
            raise InvalidIdentifierError(message, identifier)

    @property
    def filename(self) -> str:
        """Final path component."""
        return posixpath.basename(self.path)

    @property
    def identifier_hex(self) -> str:
        return bytes_to_hex(self.identifier)

    @property
    def timestamp(self) -> Optional[int]:
        """Identifier decoded as a 64-bit timestamp for TIMESTAMP_64 keys."""
        if self.id_type is not SourceFileIdType.TIMESTAMP_64:
            return None
        return bytes_to_long(self.identifier)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "idType": self.id_type.value,
            "identifier": self.identifier_hex,
        }

    def __str__(self) -> str:
        if self.id_type is SourceFileIdType.NONE:
            return self.path
        return f"{self.path} [{self.id_type.value}={self.identifier_hex}]"


def source_file_from_path(
    path: str,
    id_type: Union[str, SourceFileIdType] = SourceFileIdType.NONE,
    identifier: Optional[bytes] = None,
) -> SourceFile:
    """Create a SourceFile from a native path such as a Windows path.

    The path is converted to forward slashes and dot segments are resolved.
    """
    return SourceFile(path, SourceFileIdType.parse(id_type), identifier or b"")


def source_file_from_dwarf_path(
    path: str,
    base_dir: str,
    id_type: Union[str, SourceFileIdType] = SourceFileIdType.NONE,
    identifier: Optional[bytes] = None,
) -> SourceFile:
    """Create a SourceFile from a path recorded in DWARF debug info.

    Relative and escaping paths are rebased under ``/{base_dir}`` as
    described in ``normalize_dwarf_path``.
    """
    return source_file_from_path(normalize_dwarf_path(path, base_dir), id_type, identifier)
