"""Generic binding of flat rows onto typed records."""

from climaseries.core.binding.binder import (
    ITERATOR_PREFIX,
    NO_VALUE_MARKER,
    BindingIssue,
    BindingResult,
    Resolver,
    Resolvers,
    bind_record,
)
from climaseries.core.binding.culture import INVARIANT, Culture
from climaseries.core.binding.fields import FieldKind, FieldSpec, RecordSchema, float_fields

__all__ = [
    "INVARIANT",
    "ITERATOR_PREFIX",
    "NO_VALUE_MARKER",
    "BindingIssue",
    "BindingResult",
    "Culture",
    "FieldKind",
    "FieldSpec",
    "RecordSchema",
    "Resolver",
    "Resolvers",
    "bind_record",
    "float_fields",
]
