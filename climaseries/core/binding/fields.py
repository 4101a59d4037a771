"""Declarative field tables describing how a record is bound."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class FieldKind(str, Enum):
    """How the raw string of a field is turned into a value."""

    STRING = "string"
    FLOAT = "float"
    ENUM = "enum"
    NESTED = "nested"
    PLANT = "plant"
    SOIL = "soil"
    CLIMATE = "climate"
    IRRIGATION_TYPE = "irrigation_type"
    VALUE = "value"  # generic conversion through ``FieldSpec.target``


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One bindable field of a record.

    ``target`` is the enum class for ``ENUM``, the record class for
    ``NESTED`` and the value type (``int``, ``bool``, ``datetime``, ...) for
    ``VALUE``. ``external_name`` is the column name used by record sources
    when it differs from ``name``.
    """

    name: str
    kind: FieldKind
    target: Any = None
    external_name: str | None = None

    def __post_init__(self) -> None:
        if self.kind in (FieldKind.ENUM, FieldKind.NESTED, FieldKind.VALUE) and self.target is None:
            raise ValueError(f"field '{self.name}' of kind {self.kind.value} needs a target type")


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field table of a record type, built once per type."""

    fields: tuple[FieldSpec, ...]
    by_name: Mapping[str, FieldSpec] = field(init=False, compare=False, repr=False)
    name_map: Mapping[str, str] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        by_name = {spec.name: spec for spec in self.fields}
        if len(by_name) != len(self.fields):
            raise ValueError("duplicate field names in record schema")
        name_map = {spec.name: spec.external_name for spec in self.fields if spec.external_name}
        object.__setattr__(self, "by_name", MappingProxyType(by_name))
        object.__setattr__(self, "name_map", MappingProxyType(name_map))

    @classmethod
    def of(cls, *specs: FieldSpec) -> RecordSchema:
        return cls(fields=tuple(specs))

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.by_name)

    def __contains__(self, name: object) -> bool:
        return name in self.by_name

    def __iter__(self):
        return iter(self.fields)


def float_fields(*names: str) -> tuple[FieldSpec, ...]:
    """Shorthand for a run of plain float fields."""
    return tuple(FieldSpec(name, FieldKind.FLOAT) for name in names)


__all__ = ["FieldKind", "FieldSpec", "RecordSchema", "float_fields"]
