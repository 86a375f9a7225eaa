"""
Tests for operator and expression compilation.
"""
import pytest
from duckdialect.compiler import _OPERATOR_REGISTRY, DefaultRenderer
from duckdialect.compiler import ExpressionCompiler, compile_expression
from duckdialect.compiler import register_operator
from duckdialect.exceptions import MalformedInput
from duckdialect.strategy import get_strategy
from duckdialect.types import ColumnRef, ComplexExpression, FunctionCall, Literal
from duckdialect.types import Operator, QualifiedRef, RawLiteral, String


def name_expr(op, pattern):
    return ComplexExpression(op, [ColumnRef('name'), pattern])


def balanced(text):
    depth = 0
    for char in text:
        depth += {'(': 1, ')': -1}.get(char, 0)
        if depth < 0:
            return False
    return depth == 0


class TestCoreOperators:
    """Pattern match, case-insensitive match and regex rendering"""

    def test_pattern_match(self):
        sql = compile_expression(name_expr(Operator.PATTERN_MATCH, '%John%'))
        assert sql == "(name LIKE '%John%')"
        assert 'ESCAPE' not in sql

    def test_negated_pattern_match(self):
        sql = compile_expression(name_expr(Operator.NEGATED_PATTERN_MATCH, '%John%'))
        assert sql == "(name NOT LIKE '%John%')"

    def test_case_insensitive_match(self):
        sql = compile_expression(name_expr(Operator.CASE_INSENSITIVE_MATCH, '%john%'))
        assert sql == "(UPPER(name) LIKE UPPER('%john%'))"

    def test_negated_case_insensitive_match(self):
        sql = compile_expression(name_expr(Operator.NEGATED_CASE_INSENSITIVE_MATCH, '%john%'))
        assert sql == "(UPPER(name) NOT LIKE UPPER('%john%'))"

    def test_regex_match(self):
        sql = compile_expression(name_expr(Operator.REGEX_MATCH, '^John'))
        assert sql == "(regexp_matches(name, '^John'))"

    def test_case_insensitive_regex_match(self):
        sql = compile_expression(name_expr(Operator.CASE_INSENSITIVE_REGEX_MATCH, '^john'))
        assert sql == "(regexp_matches(name, '^john', 'i'))"

    def test_operator_spellings_normalized(self):
        assert compile_expression(name_expr('like', 'J%')) == "(name LIKE 'J%')"
        assert compile_expression(name_expr('ILIKE', 'j%')) == "(UPPER(name) LIKE UPPER('j%'))"
        assert compile_expression(name_expr('~', '^J')) == "(regexp_matches(name, '^J'))"

    def test_pattern_is_escaped(self):
        sql = compile_expression(name_expr(Operator.PATTERN_MATCH, "O'Brien%"))
        assert sql == "(name LIKE 'O''Brien%')"

    def test_operand_count_checked(self):
        with pytest.raises(MalformedInput):
            compile_expression(ComplexExpression(Operator.PATTERN_MATCH, [ColumnRef('name')]))


class TestDefaultRenderer:
    """Delegated tags rendered by the stock infix renderer"""

    def test_comparison(self):
        assert compile_expression(ComplexExpression('>', [ColumnRef('age'), 18])) == '(age > 18)'
        assert compile_expression(ComplexExpression('=', [ColumnRef('id'), 1])) == '(id = 1)'

    def test_is_null(self):
        assert compile_expression(ComplexExpression('IS', [ColumnRef('email'), None])) == '(email IS NULL)'
        assert compile_expression(
            ComplexExpression('is not', [ColumnRef('email'), None])) == '(email IS NOT NULL)'

    def test_in_list(self):
        expr = ComplexExpression('IN', [ColumnRef('name'), ['John', 'Jane', 'Bob']])
        assert compile_expression(expr) == "(name IN ('John', 'Jane', 'Bob'))"
        expr = ComplexExpression('NOT IN', [ColumnRef('id'), (1, 2)])
        assert compile_expression(expr) == '(id NOT IN (1, 2))'

    def test_empty_in_list_rejected(self):
        with pytest.raises(MalformedInput):
            compile_expression(ComplexExpression('IN', [ColumnRef('name'), []]))

    def test_conjunctions_nest(self):
        expr = ComplexExpression('AND', [
            ComplexExpression('>', [ColumnRef('age'), 18]),
            ComplexExpression(Operator.PATTERN_MATCH, [ColumnRef('name'), 'J%']),
        ])
        assert compile_expression(expr) == "((age > 18) AND (name LIKE 'J%'))"

    def test_not_and_negation(self):
        assert compile_expression(ComplexExpression('NOT', [ColumnRef('active')])) == '(NOT active)'
        assert compile_expression(ComplexExpression('-', [ColumnRef('n')])) == '(-n)'

    def test_concatenation(self):
        expr = ComplexExpression('||', [ColumnRef('first'), String(' ')])
        assert compile_expression(expr) == "(first || ' ')"
        with pytest.raises(MalformedInput):
            compile_expression(ComplexExpression('||', [expr]))

    def test_unknown_tag(self):
        with pytest.raises(MalformedInput):
            compile_expression(ComplexExpression('FROBNICATE', [ColumnRef('a'), 1]))

    def test_no_default_renderer_configured(self):
        compiler = ExpressionCompiler(get_strategy('duckdb'))
        with pytest.raises(MalformedInput):
            compiler.compile(ComplexExpression('>', [ColumnRef('age'), 18]))
        assert compiler.compile(name_expr(Operator.PATTERN_MATCH, 'J%')) == "(name LIKE 'J%')"

    def test_custom_default_renderer(self):
        class Between(DefaultRenderer):
            def render(self, compiler, expr):
                value, low, high = (compiler.compile(o) for o in expr.operands)
                return f'({value} BETWEEN {low} AND {high})'

        compiler = ExpressionCompiler(get_strategy('duckdb'), default_renderer=Between())
        expr = ComplexExpression('BETWEEN', [ColumnRef('age'), 18, 65])
        assert compiler.compile(expr) == '(age BETWEEN 18 AND 65)'


def test_register_operator():
    """Test registered render functions take precedence over the default renderer"""
    @register_operator('SIMILAR')
    def _similar(compiler, expr):
        lhs, rhs = expr.operands
        return f'(jaro_similarity({compiler.compile(lhs)}, {compiler.compile(rhs)}) > 0.9)'

    try:
        sql = compile_expression(ComplexExpression('SIMILAR', [ColumnRef('name'), 'Jon']))
        assert sql == "(jaro_similarity(name, 'Jon') > 0.9)"
    finally:
        _OPERATOR_REGISTRY.pop('SIMILAR')


class TestLeaves:
    """Literal, reference and function call rendering"""

    def test_count_star(self):
        assert compile_expression(FunctionCall('count', [ColumnRef('*')])) == 'count(*)'

    def test_function_call(self):
        assert compile_expression(FunctionCall('lower', [ColumnRef('name')])) == 'lower(name)'
        assert compile_expression(FunctionCall('now')) == 'now()'
        assert compile_expression(FunctionCall('coalesce', [ColumnRef('a'), 0])) == 'coalesce(a, 0)'

    def test_function_name_validated(self):
        with pytest.raises(MalformedInput):
            compile_expression(FunctionCall('drop table x; select', []))

    def test_references(self):
        assert compile_expression(ColumnRef('order')) == '"order"'
        assert compile_expression(QualifiedRef('users', 'id')) == 'users.id'

    def test_literals(self):
        assert compile_expression(Literal(RawLiteral('CURRENT_DATE'))) == 'CURRENT_DATE'
        assert compile_expression(Literal(String('x'))) == "'x'"
        assert compile_expression(RawLiteral('now()')) == 'now()'
        assert compile_expression("it's") == "'it''s'"
        assert compile_expression(None) == 'NULL'


@pytest.mark.parametrize('expr', [
    name_expr(Operator.PATTERN_MATCH, '%John%'),
    name_expr(Operator.NEGATED_CASE_INSENSITIVE_MATCH, '%john%'),
    name_expr(Operator.CASE_INSENSITIVE_REGEX_MATCH, '^J'),
    ComplexExpression('OR', [
        ComplexExpression('IS', [ColumnRef('email'), None]),
        ComplexExpression('IN', [ColumnRef('id'), [1, 2, 3]]),
    ]),
    ComplexExpression('NOT', [ComplexExpression(Operator.REGEX_MATCH, [QualifiedRef('u', 'name'), 'x'])]),
])
def test_complex_expressions_fully_parenthesized(expr):
    """Test every operator rendering is wrapped and balanced"""
    sql = compile_expression(expr)
    assert sql.startswith('(') and sql.endswith(')')
    assert balanced(sql)
    assert compile_expression(expr) == sql


if __name__ == '__main__':
    __import__('pytest').main([__file__])
