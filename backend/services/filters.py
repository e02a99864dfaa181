"""
Typed filter expressions for ayah queries.

Each filter is a small frozen dataclass. FilterBuilder validates field names
and value shapes before anything reaches the database, then compiles the
filters to SQLAlchemy clauses.
"""
from dataclasses import dataclass
from typing import Any
from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement
from models import QuranAyah


class InvalidFilter(ValueError):
    pass


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    field: str
    min: Any = None
    max: Any = None


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match (portable stand-in for $regex)."""
    field: str
    pattern: str


@dataclass(frozen=True)
class InSet:
    field: str
    values: tuple


@dataclass(frozen=True)
class AnyOf:
    filters: tuple


Filter = Equals | Range | Contains | InSet | AnyOf

_TEXT_FIELDS = {"sura_name_arabic", "sura_name_english", "ayah_text_arabic", "ayah_text_english", "quarter_hizb_segment", "sajda_type"}


def _column(field: str):
    try:
        return QuranAyah.__table__.columns[field]
    except KeyError:
        raise InvalidFilter(f"Unknown field: {field}")


def _escape_like(pattern: str) -> str:
    return pattern.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def validate(f: Filter) -> None:
    if isinstance(f, AnyOf):
        if not f.filters:
            raise InvalidFilter("any_of needs at least one filter")
        for inner in f.filters:
            validate(inner)
        return

    _column(f.field)
    if isinstance(f, Range):
        if f.min is None and f.max is None:
            raise InvalidFilter(f"Range on {f.field} needs a lower or upper bound")
        if f.min is not None and f.max is not None and f.min > f.max:
            raise InvalidFilter(f"Range on {f.field}: min {f.min} > max {f.max}")
    elif isinstance(f, Contains):
        if f.field not in _TEXT_FIELDS:
            raise InvalidFilter(f"Substring match is only allowed on text fields, not {f.field}")
        if not f.pattern or not f.pattern.strip():
            raise InvalidFilter("Empty search pattern")
    elif isinstance(f, InSet):
        if not f.values:
            raise InvalidFilter(f"in_set on {f.field} needs at least one value")


def to_clause(f: Filter) -> ColumnElement[bool]:
    if isinstance(f, AnyOf):
        return or_(*(to_clause(inner) for inner in f.filters))

    column = _column(f.field)
    if isinstance(f, Equals):
        return column == f.value
    if isinstance(f, Range):
        clauses = []
        if f.min is not None:
            clauses.append(column >= f.min)
        if f.max is not None:
            clauses.append(column <= f.max)
        return and_(*clauses)
    if isinstance(f, Contains):
        return column.ilike(f"%{_escape_like(f.pattern.strip())}%", escape="\\")
    if isinstance(f, InSet):
        return column.in_(f.values)
    raise InvalidFilter(f"Unsupported filter: {f!r}")


class FilterBuilder:
    def __init__(self):
        self.filters: list[Filter] = []

    def add(self, f: Filter) -> "FilterBuilder":
        validate(f)
        self.filters.append(f)
        return self

    def equals(self, field: str, value: Any) -> "FilterBuilder":
        return self.add(Equals(field, value))

    def between(self, field: str, min: Any = None, max: Any = None) -> "FilterBuilder":
        return self.add(Range(field, min, max))

    def contains(self, field: str, pattern: str) -> "FilterBuilder":
        return self.add(Contains(field, pattern))

    def in_set(self, field: str, values) -> "FilterBuilder":
        return self.add(InSet(field, tuple(values)))

    def any_of(self, *filters: Filter) -> "FilterBuilder":
        return self.add(AnyOf(tuple(filters)))

    def build(self) -> list[ColumnElement[bool]]:
        return [to_clause(f) for f in self.filters]
