"""Source map entries and the line range they cover."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from srcmap.errors import InvalidArgument, InvalidBoundsError
from srcmap.models.source_file import SourceFile
from srcmap.utils.conversion import hex_to_bytes


@dataclass(frozen=True)
class SourceMapEntry:
    """A mapping from an address range to a line of a source file."""
    source_file: SourceFile
    line_number: int
    base_address: int = 0
    length: int = 0

    def __post_init__(self):
        if self.line_number < 0:
            raise InvalidArgument("line_number must be greater than or equal to 0", self.line_number)
        if self.length < 0:
            raise InvalidArgument("length must be greater than or equal to 0", self.length)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceMapEntry":
        """Build an entry from its JSON form.

        Expected keys: ``path``, ``lineNumber`` and optionally ``idType``,
        ``identifier`` (hex), ``baseAddress`` and ``length``.
        """
        try:
            source_file = SourceFile(
                data["path"],
                data.get("idType", "none"),
                hex_to_bytes(data.get("identifier")),
            )
            return cls(
                source_file=source_file,
                line_number=int(data["lineNumber"]),
                base_address=_parse_address(data.get("baseAddress", 0)),
                length=int(data.get("length", 0)),
            )
        except KeyError as e:
            raise InvalidArgument(f"source map entry missing field {e}", data) from e
        except InvalidArgument:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"source map entry not valid: {e}", data) from e


@dataclass(frozen=True)
class SourceLineBounds:
    """Minimum and maximum mapped line numbers."""
    min: int
    max: int

    def __post_init__(self):
        if self.min < 0:
            raise InvalidBoundsError("min must be greater than or equal to 0", self.min)
        if self.max < 0:
            raise InvalidBoundsError("max must be greater than or equal to 0", self.max)
        if self.max < self.min:
            raise InvalidBoundsError("max must be greater than or equal to min", (self.min, self.max))

    def to_dict(self) -> Dict[str, int]:
        return {"min": self.min, "max": self.max}


def get_source_line_bounds(
    entries: Iterable[SourceMapEntry],
    source_file: Optional[SourceFile] = None,
) -> Optional[SourceLineBounds]:
    """Return the minimum and maximum mapped line over ``entries``.

    Args:
        entries: Source map entries to scan
        source_file: Only consider entries for this file (default: all)

    Returns:
        SourceLineBounds, or None if no entry matched
    """
    lines = [
        entry.line_number
        for entry in entries
        if source_file is None or entry.source_file == source_file
    ]
    if not lines:
        return None
    return SourceLineBounds(min(lines), max(lines))


def _parse_address(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 0)
    return int(value)
