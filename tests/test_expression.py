import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from zolang.zolang_ast import (
    BooleanLiteral,
    Expression,
    FloatLiteral,
    FunctionCall,
    Identifier,
    IntegerLiteral,
    ListAccess,
    ListLiteral,
    Operation,
    Parentheses,
    Prefix,
    StringLiteral,
    TemplatedString,
)
from zolang.zolang_errors import ErrorKind, ZolangError
from zolang.zolang_expression import classify, interpolation_ranges, parse_expression
from zolang.zolang_lexer import Token, tokenize
from zolang.zolang_scope import ParserContext


def expr(source: str) -> Expression:
    return parse_expression(tokenize(source), ParserContext("test.zolang"))


def expr_error(source: str) -> ZolangError:
    with pytest.raises(ZolangError) as excinfo:
        expr(source)
    return excinfo.value


def one(value: str) -> IntegerLiteral:
    return IntegerLiteral(value)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", IntegerLiteral("42")),
        ("4.2", FloatLiteral("4.2")),
        ('"hi"', StringLiteral("hi")),
        ("true", BooleanLiteral("true")),
        ("name", Identifier("name")),
        ("\n\nname\n", Identifier("name")),
    ],
)
def test_leaf_forms(source: str, expected: Expression) -> None:
    assert expr(source) == expected


@pytest.mark.parametrize("source", ["1 plus 2", "1   plus\n2", "1\nplus 2", "\n1 plus\n\n2\n"])
def test_whitespace_and_newline_insensitive(source: str) -> None:
    assert expr(source) == Operation(one("1"), "plus", one("2"))


def test_chain_is_right_leaning_without_precedence() -> None:
    assert expr("1 plus 2 times 3") == Operation(one("1"), "plus", Operation(one("2"), "times", one("3")))
    assert expr("1 times 2 plus 3") == Operation(one("1"), "times", Operation(one("2"), "plus", one("3")))


def test_parentheses_are_preserved() -> None:
    assert expr("(1 plus 2) times 3") == Operation(
        Parentheses(Operation(one("1"), "plus", one("2"))), "times", one("3")
    )
    assert expr("((x))") == Parentheses(Parentheses(Identifier("x")))


@given(st.lists(st.sampled_from(["plus", "minus", "times", "over", "==", "&&"]), min_size=1, max_size=8))
def test_any_chain_nests_to_the_right(operators: list[str]) -> None:
    source = " ".join(f"{i} {op}" for i, op in enumerate(operators)) + f" {len(operators)}"
    node = expr(source)
    for i, op in enumerate(operators):
        assert isinstance(node, Operation)
        assert node.left == IntegerLiteral(str(i))
        assert node.operator == op
        node = node.right
    assert node == IntegerLiteral(str(len(operators)))


def test_call_and_access_operands() -> None:
    assert expr("foo(1) plus bar[2]") == Operation(
        FunctionCall("foo", [one("1")]), "plus", ListAccess("bar", one("2"))
    )


def test_list_literal_operand() -> None:
    assert expr("[1] plus [2]") == Operation(ListLiteral([one("1")]), "plus", ListLiteral([one("2")]))


def test_boolean_and_float_operations() -> None:
    assert expr("true and false") == Operation(BooleanLiteral("true"), "and", BooleanLiteral("false"))
    assert expr("1.5 over 2") == Operation(FloatLiteral("1.5"), "over", one("2"))


def test_prefix_operand_is_the_whole_rest() -> None:
    assert expr("not a and b") == Prefix("not", Operation(Identifier("a"), "and", Identifier("b")))
    assert expr("!done") == Prefix("!", Identifier("done"))
    assert expr("-1") == Prefix("-", one("1"))
    assert expr("2 times -1") == Operation(one("2"), "times", Prefix("-", one("1")))


def test_empty_list_literal() -> None:
    assert expr("[ ]") == ListLiteral([])
    assert expr("[\n]") == ListLiteral([])


def test_function_call_arguments_in_order() -> None:
    assert expr("foo(1, 2, 3)") == FunctionCall("foo", [one("1"), one("2"), one("3")])
    assert expr("foo()") == FunctionCall("foo", [])


def test_nested_commas_do_not_split() -> None:
    assert expr("foo(bar(1, 2), [3, 4])") == FunctionCall(
        "foo",
        [FunctionCall("bar", [one("1"), one("2")]), ListLiteral([one("3"), one("4")])],
    )


def test_multiline_arguments() -> None:
    assert expr("foo(\n  1,\n  2\n)") == FunctionCall("foo", [one("1"), one("2")])


def test_list_access() -> None:
    assert expr("myList[0]") == ListAccess("myList", one("0"))
    assert expr("myList[i plus 1]") == ListAccess("myList", Operation(Identifier("i"), "plus", one("1")))


def test_single_element_failure_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="zolang.zolang_expression"):
        assert expr("foo(1 2)") == FunctionCall("foo", [])
        assert expr("[1 2]") == ListLiteral([])
    assert "Dropping unparsable single list element" in caplog.text


def test_failure_in_comma_separated_list_propagates() -> None:
    error = expr_error("foo(1, 2 3)")
    assert error.kind is ErrorKind.UNEXPECTED_TOKEN
    assert error.detail == Token("INTEGER", "3")


def test_trailing_comma_is_invalid() -> None:
    assert expr_error("[1, 2,]").kind is ErrorKind.INVALID_EXPRESSION


def test_template_interpolation_ordering() -> None:
    assert expr('"a ${1 plus 2} b"') == TemplatedString(
        [StringLiteral("a "), Operation(one("1"), "plus", one("2")), StringLiteral(" b")]
    )


def test_template_leading_brace() -> None:
    assert expr('"{name} says hi"') == TemplatedString([Identifier("name"), StringLiteral(" says hi")])


def test_template_adjacent_interpolations() -> None:
    assert expr('"${a}${b}"') == TemplatedString([Identifier("a"), Identifier("b")])


def test_template_nested_expression() -> None:
    assert expr('"total: ${sum([1, 2])}"') == TemplatedString(
        [StringLiteral("total: "), FunctionCall("sum", [ListLiteral([one("1"), one("2")])])]
    )


def test_escaped_interpolation_stays_literal() -> None:
    assert expr(r'"cost \${x}"') == StringLiteral(r"cost \${x}")


def test_escaped_backslash_before_interpolation() -> None:
    assert expr(r'"\\${x}"') == TemplatedString([StringLiteral("\\\\"), Identifier("x")])


def test_unclosed_interpolation_stays_literal() -> None:
    assert expr('"a ${b"') == StringLiteral("a ${b")


def test_interpolation_ranges() -> None:
    assert interpolation_ranges("a ${x} b") == [(2, 3, 5)]
    assert interpolation_ranges("{x}") == [(0, 0, 2)]
    assert interpolation_ranges("a {x}") == []


def test_empty_interpolation_is_unknown_error() -> None:
    assert expr_error('"a ${} b"').kind is ErrorKind.UNKNOWN


def test_interpolation_parse_error_propagates() -> None:
    assert expr_error('"${1 plus}"').kind is ErrorKind.UNEXPECTED_TOKEN


@pytest.mark.parametrize(
    "source,kind",
    [
        (",", ErrorKind.INVALID_EXPRESSION),
        ("", ErrorKind.INVALID_EXPRESSION),
        ("()", ErrorKind.INVALID_EXPRESSION),
        ("!", ErrorKind.INVALID_EXPRESSION),
        ("a[]", ErrorKind.INVALID_EXPRESSION),
        ("1 2", ErrorKind.UNEXPECTED_TOKEN),
        ("1 plus", ErrorKind.UNEXPECTED_TOKEN),
        ("foo(1) 2", ErrorKind.UNEXPECTED_TOKEN),
        ("(1 plus 2", ErrorKind.MISSING_MATCHING_PARENS),
        ("foo(1", ErrorKind.MISSING_MATCHING_PARENS),
        ("[1, 2", ErrorKind.MISSING_MATCHING_BRACKET),
        ("a[1", ErrorKind.MISSING_MATCHING_BRACKET),
    ],
)
def test_error_kinds(source: str, kind: ErrorKind) -> None:
    error = expr_error(source)
    assert error.kind is kind
    assert error.file == "test.zolang"


def test_unexpected_token_names_the_leftover() -> None:
    assert expr_error("1 2").detail == Token("INTEGER", "2")


def test_unmatched_parenthesis_line() -> None:
    assert expr_error("\n\n\n\n(1 plus 2").line == 5


def test_right_operand_error_line() -> None:
    assert expr_error("1 plus\n\n(2").line == 3


def test_line_after_multiline_call() -> None:
    assert expr_error("foo(1,\n2) plus\n(3").line == 3


def test_list_element_error_line() -> None:
    assert expr_error("[1,\n\n(2]").line == 3


def test_context_line_advances_past_consumed_newlines() -> None:
    context = ParserContext("test.zolang")
    parse_expression(tokenize("\n1 plus\n2"), context)
    assert context.line == 3


def test_classification_priority() -> None:
    assert classify(tokenize("foo(1)")) == "functionCall"
    assert classify(tokenize("foo[1]")) == "listAccess"
    assert classify(tokenize("foo")) == "identifier"
    assert classify(tokenize("(foo)")) == "parentheses"
    assert classify(tokenize("not foo")) == "prefixOperated"
    assert classify(tokenize(",")) is None
