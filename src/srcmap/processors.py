"""Processor target registry loaded from a language definition table.

The table is declarative: each ``<language>`` element names a processor,
its endianness, its address width and the specification files that
describe it. Nothing here interprets those files.
"""

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError
from defusedxml.ElementTree import parse as defused_parse
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from srcmap.errors import InvalidArgument, InvalidRecordError

logger = logging.getLogger(__name__)

DEFAULT_LDEFS = Path(__file__).parent / "data" / "processors.ldefs"

_ENDIAN_CODES = {"little": "LE", "big": "BE"}


class Endian(str, Enum):
    """Byte order of a processor target."""
    LITTLE = "little"
    BIG = "big"

    @property
    def code(self) -> str:
        return _ENDIAN_CODES[self.value]


class CompilerSpec(BaseModel):
    """Compiler specification reference attached to a processor target."""
    id: str
    name: str
    spec: str

    model_config = ConfigDict(frozen=True)


class ProcessorTarget(BaseModel):
    """One row of the processor target table."""
    id: str
    processor: str
    endian: Endian
    size: int
    variant: str = "default"
    version: str | None = None
    sla_file: str = Field(alias="slafile")
    processor_spec: str = Field(alias="processorspec")
    manual_index: str | None = Field(alias="manualindexfile", default=None)
    description: str = ""
    compilers: tuple[CompilerSpec, ...] = ()

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("size")
    @classmethod
    def validate_size(cls, v):
        if v <= 0 or v % 8:
            raise ValueError(f"size must be a positive multiple of 8, got: {v}")
        return v

    @model_validator(mode="after")
    def validate_id(self):
        """The id must spell out processor, endian, size and variant."""
        expected = f"{self.processor}:{self.endian.code}:{self.size}:{self.variant}"
        if self.id != expected:
            raise ValueError(f"id '{self.id}' does not match attributes (expected '{expected}')")
        return self


class ProcessorRegistry:
    """Read-only collection of processor targets keyed by id."""

    def __init__(self, targets: List[ProcessorTarget], source: Optional[Path] = None):
        by_id = {}
        for target in targets:
            if target.id in by_id:
                raise InvalidRecordError(
                    f"duplicate processor id '{target.id}'", source, record_id=target.id
                )
            by_id[target.id] = target
        self._targets: Mapping[str, ProcessorTarget] = MappingProxyType(by_id)
        self.source = source

    def get(self, target_id: str) -> Optional[ProcessorTarget]:
        return self._targets.get(target_id)

    def find(
        self,
        processor: Optional[str] = None,
        endian: Optional[str] = None,
        size: Optional[int] = None,
    ) -> List[ProcessorTarget]:
        """Return targets matching every given criterion.

        ``processor`` is compared case-insensitively; ``endian`` accepts
        ``little``/``big`` or ``LE``/``BE``.
        """
        wanted_endian = _parse_endian(endian) if endian else None
        matches = []
        for target in self._targets.values():
            if processor and target.processor.lower() != processor.lower():
                continue
            if wanted_endian and target.endian is not wanted_endian:
                continue
            if size is not None and target.size != size:
                continue
            matches.append(target)
        return matches

    def __getitem__(self, target_id: str) -> ProcessorTarget:
        return self._targets[target_id]

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._targets

    def __iter__(self) -> Iterator[ProcessorTarget]:
        return iter(self._targets.values())

    def __len__(self) -> int:
        return len(self._targets)


def load_processor_registry(path: str | Path | None = None) -> ProcessorRegistry:
    """Load processor targets from an ``.ldefs`` XML file.

    Args:
        path: Definition file (default: the table bundled with srcmap)

    Returns:
        ProcessorRegistry with one entry per ``<language>`` element

    Raises:
        InvalidRecordError: If the file cannot be parsed or a record is invalid
    """
    ldefs_path = Path(path) if path is not None else DEFAULT_LDEFS
    try:
        root = defused_parse(str(ldefs_path)).getroot()
    except (ParseError, DefusedXmlException, OSError) as e:
        raise InvalidRecordError(f"cannot read processor definitions {ldefs_path}: {e}", ldefs_path) from e

    targets = [_parse_language(elem, ldefs_path) for elem in root.iter("language")]
    logger.debug(f"Loaded {len(targets)} processor targets from {ldefs_path}")
    return ProcessorRegistry(targets, source=ldefs_path)


@lru_cache(maxsize=1)
def default_registry() -> ProcessorRegistry:
    """Bundled processor registry, loaded once per process."""
    return load_processor_registry()


def _parse_language(elem, source: Path) -> ProcessorTarget:
    attrs = dict(elem.attrib)
    description = elem.findtext("description", default="").strip()
    compilers = tuple(
        CompilerSpec(id=c.get("id", ""), name=c.get("name", ""), spec=c.get("spec", ""))
        for c in elem.iter("compiler")
    )
    try:
        return ProcessorTarget(**attrs, description=description, compilers=compilers)
    except (ValidationError, TypeError) as e:
        record_id = attrs.get("id")
        raise InvalidRecordError(
            f"invalid processor definition '{record_id}' in {source}: {e}", attrs, record_id=record_id
        ) from e


def _parse_endian(value: str) -> Endian:
    key = value.strip().lower()
    for endian in Endian:
        if key in (endian.value, endian.code.lower()):
            return endian
    raise InvalidArgument(f"unknown endian '{value}'. Must be one of: little, big, LE, BE", value)
