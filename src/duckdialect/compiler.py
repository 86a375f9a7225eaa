"""
Expression compilation for DuckDB.

Renders expression trees into SQL text. Leaves are delegated to the Literal
Encoder and Identifier Renderer of the bound strategy; operator nodes go
through an explicit registry:

- Core operators (pattern match, case-insensitive match, regex) are
  registered in this module with `register_operator`
- Every other tag is handed to the compiler's `DefaultRenderer`
- Without a default renderer, an unregistered tag raises MalformedInput

Every operator rendering is fully parenthesized so it can be embedded in a
larger expression without precedence ambiguity.

Date arithmetic (`date_add`, `date_sub`) chains `INTERVAL` terms onto a base
expression and casts the result:

    CAST((created_at + INTERVAL 1 YEAR + INTERVAL (-5) HOUR) AS TIMESTAMP)
"""
import numbers
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from duckdialect.exceptions import MalformedInput
from duckdialect.types import ColumnRef, ComplexExpression, FunctionCall
from duckdialect.types import IntervalExpression, Literal, Operator
from duckdialect.types import QualifiedRef, TypeTag, Value

if TYPE_CHECKING:
    from duckdialect.strategy.base import DialectStrategy

__all__ = [
    'ExpressionCompiler',
    'DefaultRenderer',
    'InfixRenderer',
    'register_operator',
    'compile_expression',
    'date_add',
    'date_sub',
    'INTERVAL_UNITS',
]

INTERVAL_UNITS = {
    'years': 'YEAR',
    'months': 'MONTH',
    'days': 'DAY',
    'hours': 'HOUR',
    'minutes': 'MINUTE',
    'seconds': 'SECOND',
}

_FUNCTION_NAME = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_TYPE_TEXT = re.compile(r'[A-Za-z_][A-Za-z0-9_ ]*(\(\s*\d+\s*(,\s*\d+\s*)?\))?')

# Registry of operator tag -> render function
_OPERATOR_REGISTRY: dict[Any, Callable[['ExpressionCompiler', ComplexExpression], str]] = {}


def register_operator(tag):
    """Decorator to register a render function for an operator tag.

    Usage:
        @register_operator(Operator.PATTERN_MATCH)
        def _pattern_match(compiler, expr):
            ...
    """
    def decorator(func):
        _OPERATOR_REGISTRY[tag] = func
        return func
    return decorator


def _normalize_tag(op: Any) -> Any:
    """Map operator spellings such as ``'like'`` onto ``Operator`` members.
    """
    if isinstance(op, str):
        try:
            return Operator(' '.join(op.upper().split()))
        except ValueError:
            return op
    return op


class DefaultRenderer(ABC):
    """Renderer for operator tags that have no registered render function.
    """

    @abstractmethod
    def render(self, compiler: 'ExpressionCompiler', expr: ComplexExpression) -> str:
        """Render a delegated operator expression.

        Args:
            compiler: Compiler used to render the operands
            expr: Expression whose tag is not in the registry

        Returns
            Parenthesized SQL fragment
        """


class InfixRenderer(DefaultRenderer):
    """Stock renderer for comparison, arithmetic, boolean and membership tags.

    >>> from duckdialect.strategy import get_strategy
    >>> compiler = get_strategy('duckdb').compiler
    >>> compiler.compile(ComplexExpression('>', [ColumnRef('age'), 18]))
    '(age > 18)'
    >>> compiler.compile(ComplexExpression('IS', [ColumnRef('email'), None]))
    '(email IS NULL)'
    """

    BINARY = frozenset({
        '=', '!=', '<>', '<', '<=', '>', '>=',
        '+', '-', '*', '/', '%', '||',
        'IS', 'IS NOT', 'IS DISTINCT FROM', 'IS NOT DISTINCT FROM',
    })
    CONJUNCTIONS = frozenset({'AND', 'OR'})
    MEMBERSHIP = frozenset({'IN', 'NOT IN'})
    UNARY = frozenset({'NOT', '-'})

    def render(self, compiler: 'ExpressionCompiler', expr: ComplexExpression) -> str:
        op = expr.op.value if isinstance(expr.op, Enum) else expr.op
        if not isinstance(op, str):
            raise MalformedInput(f'Unsupported operator tag: {expr.op!r}')
        op = ' '.join(op.upper().split())
        operands = expr.operands

        if op in self.UNARY and len(operands) == 1:
            return f'({op}{" " if op == "NOT" else ""}{compiler.compile(operands[0])})'

        if op in self.CONJUNCTIONS:
            if not operands:
                raise MalformedInput(f'{op} requires at least one operand')
            return '(' + f' {op} '.join(compiler.compile(o) for o in operands) + ')'

        if op in self.MEMBERSHIP:
            lhs, rhs = _two_operands(op, operands)
            return f'({compiler.compile(lhs)} {op} {compiler.compile_list(rhs)})'

        if op in self.BINARY:
            lhs, rhs = _two_operands(op, operands)
            return f'({compiler.compile(lhs)} {op} {compiler.compile(rhs)})'

        raise MalformedInput(f'Unsupported operator tag: {expr.op!r}')


def _two_operands(op: Any, operands: tuple) -> tuple[Any, Any]:
    if len(operands) != 2:
        name = op.name if isinstance(op, Operator) else op
        raise MalformedInput(f'{name} requires exactly 2 operands, got {len(operands)}')
    return operands[0], operands[1]


class ExpressionCompiler:
    """Render expression nodes into DuckDB SQL.

    Args:
        strategy: Dialect strategy supplying literal, identifier and type rendering
        default_renderer: Renderer for unregistered operator tags, or None
    """

    def __init__(self, strategy: 'DialectStrategy',
                 default_renderer: DefaultRenderer | None = None) -> None:
        self.strategy = strategy
        self.default_renderer = default_renderer

    def compile(self, node: Any) -> str:
        """Render any expression node, ``Value`` or Python scalar.
        """
        match node:
            case ComplexExpression():
                return self.compile_complex(node)
            case IntervalExpression():
                return self.compile_interval(node)
            case Literal():
                return self.strategy.encode(node.value)
            case Value():
                return self.strategy.encode(node)
            case ColumnRef():
                return self.strategy.render_identifier(node.name)
            case QualifiedRef():
                return self.strategy.render_qualified(node.table, node.column)
            case FunctionCall():
                return self.compile_function(node)
            case list() | tuple():
                return self.compile_list(node)
            case _:
                return self.strategy.literal(node)

    def compile_list(self, items: Any) -> str:
        """Render a parenthesized, comma-separated list.
        """
        if not isinstance(items, list | tuple):
            return f'({self.compile(items)})'
        if not items:
            raise MalformedInput('Cannot render an empty list')
        return '(' + ', '.join(self.compile(item) for item in items) + ')'

    def compile_function(self, node: FunctionCall) -> str:
        if not isinstance(node.name, str) or not _FUNCTION_NAME.fullmatch(node.name):
            raise MalformedInput(f'Invalid function name: {node.name!r}')
        return f'{node.name}(' + ', '.join(self.compile(a) for a in node.args) + ')'

    def compile_complex(self, expr: ComplexExpression) -> str:
        """Render an operator expression through the registry.

        Raises
            MalformedInput: Unregistered tag and no default renderer
        """
        tag = _normalize_tag(expr.op)
        render = _OPERATOR_REGISTRY.get(tag)
        if render is not None:
            return render(self, ComplexExpression(tag, expr.operands))
        if self.default_renderer is None:
            raise MalformedInput(f'No renderer for operator tag: {expr.op!r}')
        return self.default_renderer.render(self, expr)

    def compile_interval(self, node: IntervalExpression) -> str:
        """Render date arithmetic as a chain of INTERVAL terms inside a cast.
        """
        terms = [self.compile(node.base)]
        for unit, magnitude in node.intervals:
            term = self._interval_term(unit, magnitude, node.subtract)
            if term is not None:
                terms.append(term)
        body = f'({" + ".join(terms)})' if len(terms) > 1 else terms[0]
        return f'CAST({body} AS {self._cast_target(node.cast)})'

    def _interval_term(self, unit: str, magnitude: Any, subtract: bool) -> str | None:
        keyword = INTERVAL_UNITS.get(unit.lower() if isinstance(unit, str) else unit)
        if keyword is None:
            raise MalformedInput(f'Unsupported interval unit: {unit!r}')

        if isinstance(magnitude, bool):
            raise MalformedInput(f'Invalid interval magnitude: {magnitude!r}')

        if isinstance(magnitude, numbers.Number):
            if magnitude != magnitude:
                raise MalformedInput(f'Invalid interval magnitude: {magnitude!r}')
            if not isinstance(magnitude, numbers.Integral):
                # INTERVAL terms take whole units only
                try:
                    whole = int(magnitude)
                except (OverflowError, TypeError, ValueError) as err:
                    raise MalformedInput(f'Invalid interval magnitude: {magnitude!r}') from err
                if whole != magnitude:
                    raise MalformedInput(f'Fractional interval magnitude: {magnitude!r}')
                magnitude = whole
            if magnitude == 0:
                return None
            if subtract:
                magnitude = -magnitude
            text = self.strategy.literal(magnitude)
            if magnitude < 0:
                text = f'({text})'
            return f'INTERVAL {text} {keyword}'

        text = self.compile(magnitude)
        if subtract:
            text = f'-({text})'
        return f'INTERVAL ({text}) {keyword}'

    def _cast_target(self, cast: Any) -> str:
        if cast is None:
            cast = self.strategy.options.interval_cast
        if isinstance(cast, TypeTag):
            return self.strategy.canonical_to_ddl(cast)
        if isinstance(cast, str):
            if cast.lower() in {t.value for t in TypeTag}:
                return self.strategy.canonical_to_ddl(cast)
            if _TYPE_TEXT.fullmatch(cast.strip()):
                return cast.strip().upper()
        raise MalformedInput(f'Invalid cast target: {cast!r}')


# =============================================================================
# Core operators
# =============================================================================

@register_operator(Operator.PATTERN_MATCH)
@register_operator(Operator.NEGATED_PATTERN_MATCH)
def _pattern_match(compiler: ExpressionCompiler, expr: ComplexExpression) -> str:
    lhs, rhs = _two_operands(expr.op, expr.operands)
    return f'({compiler.compile(lhs)} {expr.op.value} {compiler.compile(rhs)})'


@register_operator(Operator.CASE_INSENSITIVE_MATCH)
@register_operator(Operator.NEGATED_CASE_INSENSITIVE_MATCH)
def _case_insensitive_match(compiler: ExpressionCompiler, expr: ComplexExpression) -> str:
    lhs, rhs = _two_operands(expr.op, expr.operands)
    keyword = 'NOT LIKE' if expr.op is Operator.NEGATED_CASE_INSENSITIVE_MATCH else 'LIKE'
    return f'(UPPER({compiler.compile(lhs)}) {keyword} UPPER({compiler.compile(rhs)}))'


@register_operator(Operator.REGEX_MATCH)
def _regex_match(compiler: ExpressionCompiler, expr: ComplexExpression) -> str:
    lhs, rhs = _two_operands(expr.op, expr.operands)
    return f'(regexp_matches({compiler.compile(lhs)}, {compiler.compile(rhs)}))'


@register_operator(Operator.CASE_INSENSITIVE_REGEX_MATCH)
def _case_insensitive_regex_match(compiler: ExpressionCompiler, expr: ComplexExpression) -> str:
    lhs, rhs = _two_operands(expr.op, expr.operands)
    return f"(regexp_matches({compiler.compile(lhs)}, {compiler.compile(rhs)}, 'i'))"


# =============================================================================
# Public helpers
# =============================================================================

def compile_expression(node: Any, strategy: 'DialectStrategy | None' = None) -> str:
    """Render an expression with the DuckDB strategy (or the one given).

    >>> compile_expression(ComplexExpression(Operator.PATTERN_MATCH, [ColumnRef('name'), '%John%']))
    "(name LIKE '%John%')"
    >>> compile_expression(FunctionCall('count', [ColumnRef('*')]))
    'count(*)'
    """
    if strategy is None:
        from duckdialect.strategy import get_strategy
        strategy = get_strategy('duckdb')
    return strategy.compiler.compile(node)


def _interval_pairs(intervals: Mapping | None, kwargs: dict) -> list[tuple[str, Any]]:
    pairs = list((intervals or {}).items()) + list(kwargs.items())
    for unit, _ in pairs:
        if unit not in INTERVAL_UNITS:
            raise MalformedInput(f'Unsupported interval unit: {unit!r}')
    return pairs


def date_add(base: Any, intervals: Mapping | None = None, cast: Any = None,
             **units) -> IntervalExpression:
    """Build date arithmetic adding intervals to a base expression.

    Args:
        base: Expression (or column name via ColumnRef) to shift
        intervals: Ordered mapping of unit to magnitude
        cast: Cast target (TypeTag or type text), defaults to the dialect's
        units: Additional unit=magnitude pairs, appended after ``intervals``

    >>> compile_expression(date_add(ColumnRef('created_at'), years=1, hours=-5))
    'CAST((created_at + INTERVAL 1 YEAR + INTERVAL (-5) HOUR) AS TIMESTAMP)'
    """
    return IntervalExpression(base, _interval_pairs(intervals, units), cast)


def date_sub(base: Any, intervals: Mapping | None = None, cast: Any = None,
             **units) -> IntervalExpression:
    """Build date arithmetic subtracting intervals from a base expression.

    >>> compile_expression(date_sub(ColumnRef('d'), days=3, cast='date'))
    'CAST((d + INTERVAL (-3) DAY) AS DATE)'
    """
    return IntervalExpression(base, _interval_pairs(intervals, units), cast, subtract=True)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
