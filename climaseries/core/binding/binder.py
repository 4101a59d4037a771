"""Binds flat string-keyed rows onto typed records.

Rows come from CSV exports and web service responses. Every record type
declares a :class:`~climaseries.core.binding.fields.RecordSchema`; binding
walks that table instead of inspecting the record class.

The binder is lenient about structure and strict about values:

* unknown keys are ignored,
* absent, blank and ``#NV`` values leave the field unset (``None``),
* dotted keys ``"<field>.<subfield>"`` fill nested records; groups that do
  not name a nested field are dropped and reported as :class:`BindingIssue`,
* a malformed number or other scalar raises :class:`MalformedValueError`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from climaseries.core.binding.culture import INVARIANT, Culture
from climaseries.core.binding.fields import FieldKind, FieldSpec, RecordSchema
from climaseries.core.exceptions import MalformedValueError
from climaseries.core.models.irrigation import get_irrigation_type

if TYPE_CHECKING:
    from climaseries.core.records.base import BoundRecord

R = TypeVar("R", bound="BoundRecord")

NO_VALUE_MARKER = "#NV"
ITERATOR_PREFIX = "_iterator"

Resolver = Callable[[str], Any]


@dataclass(frozen=True, slots=True)
class Resolvers:
    """Optional name lookups for referenced plants, soils and climates.

    A resolver returns ``None`` when the name is unknown. A missing resolver
    means fields of that kind are not bound at all.
    """

    plant: Resolver | None = None
    soil: Resolver | None = None
    climate: Resolver | None = None

    def for_kind(self, kind: FieldKind) -> Resolver | None:
        if kind is FieldKind.PLANT:
            return self.plant
        if kind is FieldKind.SOIL:
            return self.soil
        if kind is FieldKind.CLIMATE:
            return self.climate
        return None


@dataclass(slots=True, frozen=True)
class BindingIssue:
    """A part of the input that could not be bound and was dropped."""

    key: str
    code: str
    message: str


@dataclass
class BindingResult(Generic[R]):
    """Bound record plus the diagnostics collected while binding it."""

    record: R
    issues: list[BindingIssue] = field(default_factory=list)


_UNSET = object()
_REFERENCE_KINDS = frozenset({FieldKind.PLANT, FieldKind.SOIL, FieldKind.CLIMATE})
_TRUE_WORDS = frozenset({"true"})
_FALSE_WORDS = frozenset({"false"})


def _is_empty(value: str | None) -> bool:
    return value is None or not value.strip() or value.startswith(NO_VALUE_MARKER)


def _lookup_enum(enum_type: type[Enum], raw: str) -> Enum | None:
    member = enum_type.__members__.get(raw)
    if member is not None:
        return member
    for candidate in enum_type:
        if candidate.value == raw:
            return candidate
    return None


def _convert_value(target: Any, raw: str, culture: Culture) -> Any:
    if target is bool:
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if target is datetime:
        return culture.parse_datetime(raw)
    if target is date:
        return culture.parse_datetime(raw).date()
    if target is int:
        return int(raw.strip())
    if target is float:
        return culture.parse_float(raw)
    return target(raw)


def _parse_field(
    spec: FieldSpec,
    raw: str,
    path: str,
    resolvers: Resolvers,
    culture: Culture,
    issues: list[BindingIssue],
) -> Any:
    kind = spec.kind
    if kind is FieldKind.STRING:
        return raw

    if kind is FieldKind.FLOAT:
        try:
            return culture.parse_float(raw)
        except ValueError as exc:
            raise MalformedValueError(
                f"invalid number for '{path}': {raw!r}", field=path, value=raw
            ) from exc

    if kind is FieldKind.ENUM:
        member = _lookup_enum(spec.target, raw)
        if member is None:
            issues.append(
                BindingIssue(
                    key=path,
                    code="UNKNOWN_ENUM_MEMBER",
                    message=f"{raw!r} is not a member of {spec.target.__name__}",
                )
            )
        return member

    if kind in _REFERENCE_KINDS:
        resolver = resolvers.for_kind(kind)
        if resolver is None:
            return _UNSET
        return resolver(raw)

    if kind is FieldKind.IRRIGATION_TYPE:
        irrigation_type = get_irrigation_type(raw)
        if irrigation_type is None:
            issues.append(
                BindingIssue(
                    key=path,
                    code="UNKNOWN_IRRIGATION_TYPE",
                    message=f"{raw!r} is not a known irrigation type",
                )
            )
            return _UNSET
        return irrigation_type

    if kind is FieldKind.NESTED:
        issues.append(
            BindingIssue(
                key=path,
                code="NESTED_FIELD_VALUE",
                message="nested records are bound from dotted keys only",
            )
        )
        return _UNSET

    try:
        return _convert_value(spec.target, raw, culture)
    except (ValueError, TypeError, OverflowError) as exc:
        target_name = getattr(spec.target, "__name__", str(spec.target))
        raise MalformedValueError(
            f"invalid {target_name} for '{path}': {raw!r}", field=path, value=raw
        ) from exc


def _group_nested_keys(
    values: Mapping[str, str],
    schema: RecordSchema,
    direct_keys: frozenset[str],
    prefix: str,
    issues: list[BindingIssue],
) -> dict[str, dict[str, str]]:
    groups: dict[str, dict[str, str]] = {}
    for key, value in values.items():
        if key in direct_keys or "." not in key:
            continue
        head, tail = key.split(".", 1)
        if head == ITERATOR_PREFIX:
            continue
        if not head.strip() or not tail.strip():
            issues.append(BindingIssue(prefix + key, "INVALID_NESTED_KEY", "empty part in dotted key"))
            continue
        spec = schema.by_name.get(head)
        if spec is None:
            issues.append(BindingIssue(prefix + key, "UNKNOWN_NESTED_FIELD", f"'{head}' is not a field"))
            continue
        if spec.kind is not FieldKind.NESTED:
            issues.append(BindingIssue(prefix + key, "NOT_NESTED_FIELD", f"'{head}' is not a nested record"))
            continue
        groups.setdefault(head, {})[tail] = value
    return groups


def _bind_values(
    schema: RecordSchema,
    values: Mapping[str, str],
    name_map: Mapping[str, str],
    resolvers: Resolvers,
    culture: Culture,
    issues: list[BindingIssue],
    prefix: str,
) -> dict[str, Any]:
    translated = {spec.name: name_map.get(spec.name, spec.name) for spec in schema}
    direct_keys = frozenset(schema.names) | frozenset(translated.values())

    assigned: dict[str, Any] = {}
    groups = _group_nested_keys(values, schema, direct_keys, prefix, issues)
    for name, sub_values in groups.items():
        nested_type = schema.by_name[name].target
        assigned[name] = nested_type(
            **_bind_values(
                nested_type.FIELDS,
                sub_values,
                {**nested_type.FIELDS.name_map, **name_map},
                resolvers,
                culture,
                issues,
                prefix=f"{prefix}{name}.",
            )
        )

    for spec in schema:
        external = translated[spec.name]
        raw = values.get(external)
        if _is_empty(raw):
            continue
        if spec.kind is FieldKind.NESTED and spec.name in assigned:
            continue
        value = _parse_field(spec, raw, prefix + spec.name, resolvers, culture, issues)
        if value is not _UNSET:
            assigned[spec.name] = value
    return assigned


def bind_record(
    record_type: type[R],
    values: Mapping[str, str],
    *,
    name_map: Mapping[str, str] | None = None,
    resolvers: Resolvers | None = None,
    culture: Culture | None = None,
) -> BindingResult[R]:
    """Bind ``values`` onto a new ``record_type`` instance.

    Args:
        record_type: record class declaring a ``FIELDS`` schema
        values: flat row, nested fields as ``"<field>.<subfield>"`` keys
        name_map: field name to column name overrides, merged over the
            record type's own map
        resolvers: lookups for plant/soil/climate references
        culture: number and date conventions, invariant by default

    Raises:
        MalformedValueError: a scalar value does not parse
    """
    schema = record_type.FIELDS
    issues: list[BindingIssue] = []
    assigned = _bind_values(
        schema,
        values,
        {**schema.name_map, **(name_map or {})},
        resolvers or Resolvers(),
        culture or INVARIANT,
        issues,
        prefix="",
    )
    return BindingResult(record=record_type(**assigned), issues=issues)


__all__ = [
    "ITERATOR_PREFIX",
    "NO_VALUE_MARKER",
    "BindingIssue",
    "BindingResult",
    "Resolver",
    "Resolvers",
    "bind_record",
]
