"""
Typed building blocks shared by the encoder, compiler and schema decoder.

This module defines three families of structures:

1. ``Value`` - the closed set of literal variants the Literal Encoder knows
   how to render (``Null``, ``Boolean``, ``Integer``, ... ``RawLiteral``)
2. Expression nodes - the tree handed over by the query builder
   (``Literal``, ``ColumnRef``, ``QualifiedRef``, ``FunctionCall``,
   ``ComplexExpression``, ``IntervalExpression``)
3. Catalog descriptors - ``ColumnDescriptor`` and ``IndexDescriptor``,
   independent of the row format of the engine's catalog views

All structures are immutable (except the descriptors, which are plain
records) and carry no behaviour beyond construction and serialization.
"""
import datetime
import decimal
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any

__all__ = [
    'Value',
    'Null',
    'Boolean',
    'Integer',
    'BigInteger',
    'Float',
    'Decimal',
    'String',
    'Blob',
    'Date',
    'Timestamp',
    'Time',
    'RawLiteral',
    'Operator',
    'Literal',
    'ColumnRef',
    'QualifiedRef',
    'FunctionCall',
    'ComplexExpression',
    'IntervalExpression',
    'TypeTag',
    'ColumnDescriptor',
    'IndexDescriptor',
    'value_types',
]


# =============================================================================
# Values
# =============================================================================

class Value:
    """Base class of the literal value union.

    Only the subclasses defined in this module are valid values; the
    Literal Encoder keeps one rendering function per subclass.
    """


@dataclass(frozen=True)
class Null(Value):
    """SQL NULL."""


@dataclass(frozen=True)
class Boolean(Value):
    value: bool


@dataclass(frozen=True)
class Integer(Value):
    value: int


@dataclass(frozen=True)
class BigInteger(Value):
    value: int


@dataclass(frozen=True)
class Float(Value):
    value: float


@dataclass(frozen=True)
class Decimal(Value):
    """Exact numeric with optional precision and scale.

    When ``scale`` is set the value is rendered with exactly that many
    fractional digits.
    """
    value: decimal.Decimal
    precision: int | None = None
    scale: int | None = None


@dataclass(frozen=True)
class String(Value):
    value: str


@dataclass(frozen=True)
class Blob(Value):
    value: bytes


@dataclass(frozen=True)
class Date(Value):
    value: datetime.date


@dataclass(frozen=True)
class Timestamp(Value):
    value: datetime.datetime


@dataclass(frozen=True)
class Time(Value):
    """Time of day.

    Accepts a ``datetime.time`` or a ``datetime.datetime`` paired with the
    sentinel epoch date; only the time of day is rendered.
    """
    value: datetime.time | datetime.datetime


@dataclass(frozen=True)
class RawLiteral(Value):
    """Trusted, pre-rendered SQL emitted verbatim.

    The text is never escaped or quoted. Only wrap SQL that is already
    known to be safe (function calls, computed sub-expressions).
    """
    text: str


def value_types() -> tuple[type[Value], ...]:
    """Return every concrete ``Value`` variant.

    >>> String in value_types() and RawLiteral in value_types()
    True
    """
    return tuple(Value.__subclasses__())


# =============================================================================
# Expressions
# =============================================================================

class Operator(Enum):
    """Operator tags rendered by the core compiler.

    Any other tag on a ``ComplexExpression`` is delegated to the default
    renderer.
    """
    PATTERN_MATCH = 'LIKE'
    NEGATED_PATTERN_MATCH = 'NOT LIKE'
    CASE_INSENSITIVE_MATCH = 'ILIKE'
    NEGATED_CASE_INSENSITIVE_MATCH = 'NOT ILIKE'
    REGEX_MATCH = '~'
    CASE_INSENSITIVE_REGEX_MATCH = '~*'


@dataclass(frozen=True, slots=True)
class Literal:
    """A ``Value`` placed in expression position."""
    value: Value


@dataclass(frozen=True, slots=True)
class ColumnRef:
    name: str


@dataclass(frozen=True, slots=True)
class QualifiedRef:
    table: str
    column: str


@dataclass(frozen=True, slots=True)
class FunctionCall:
    name: str
    args: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, 'args', tuple(self.args))


@dataclass(frozen=True, slots=True)
class ComplexExpression:
    """Operator applied to an ordered list of operands.

    ``op`` is an ``Operator`` member for the core operators, or any other
    hashable tag (usually an operator string such as ``'>'`` or ``'AND'``)
    handled by the default renderer.
    """
    op: Any
    operands: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, 'operands', tuple(self.operands))


@dataclass(frozen=True, slots=True)
class IntervalExpression:
    """Date/interval arithmetic on a base expression.

    ``intervals`` maps a unit name (years, months, days, hours, minutes,
    seconds) to a signed magnitude, either a number or an expression.
    ``cast`` is a ``TypeTag`` or literal type text; ``None`` means the
    dialect default. With ``subtract`` set every magnitude is negated.
    """
    base: Any
    intervals: tuple = ()
    cast: Any = None
    subtract: bool = False

    def __post_init__(self):
        intervals = self.intervals
        if isinstance(intervals, Mapping):
            intervals = intervals.items()
        object.__setattr__(self, 'intervals', tuple(tuple(pair) for pair in intervals))


# =============================================================================
# Catalog descriptors
# =============================================================================

class TypeTag(Enum):
    """Canonical column types independent of the engine's spelling."""
    INTEGER = 'integer'
    BIGINT = 'bigint'
    FLOAT = 'float'
    DECIMAL = 'decimal'
    STRING = 'string'
    BOOLEAN = 'boolean'
    DATE = 'date'
    DATETIME = 'datetime'
    TIME = 'time'
    BLOB = 'blob'
    UUID = 'uuid'


@dataclass(slots=True)
class ColumnDescriptor:
    """One column as reported by the catalog, in canonical form.

    ``default`` holds a parsed ``Value`` for simple literal defaults, the
    catalog's text for computed defaults, or ``None`` when the column has
    no default.
    """
    name: str
    canonical_type: TypeTag
    native_type_text: str
    nullable: bool = True
    default: Value | str | None = None
    primary_key: bool = False
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['canonical_type'] = self.canonical_type.value
        return data


@dataclass(slots=True)
class IndexDescriptor:
    name: str
    columns: list[str] = field(default_factory=list)
    unique: bool = False
    primary: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        return asdict(self)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
