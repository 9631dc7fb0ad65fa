"""
Tests for Syntax Tree Models — ESTree / Babel JSON conversion and positions.
"""

import pytest

from quality_highlighter.models.syntax import (
    ArrowFunctionExpression,
    BinaryExpression,
    CallExpression,
    ClassDeclaration,
    GenericNode,
    Identifier,
    Literal,
    MethodDefinition,
    Program,
    compute_line_starts,
    from_estree,
    offset_to_position,
)


def _eval_call_program():
    # eval(x);
    return {
        "type": "Program",
        "start": 0,
        "end": 8,
        "body": [{
            "type": "ExpressionStatement",
            "start": 0,
            "end": 8,
            "expression": {
                "type": "CallExpression",
                "start": 0,
                "end": 7,
                "callee": {"type": "Identifier", "name": "eval", "start": 0, "end": 4},
                "arguments": [{"type": "Identifier", "name": "x", "start": 5, "end": 6}],
            },
        }],
    }


def test_estree_program_converts_to_typed_nodes():
    tree = from_estree(_eval_call_program())
    assert isinstance(tree, Program)
    call = tree.body[0].expression
    assert isinstance(call, CallExpression)
    assert call.callee.name == "eval"
    assert [arg.name for arg in call.arguments] == ["x"]
    assert (call.start, call.end) == (0, 7)


def test_loc_computed_from_source_when_missing():
    source = "\n\neval(x);"
    data = _eval_call_program()
    call = data["body"][0]["expression"]
    call["start"], call["end"] = 2, 9
    tree = from_estree(data, source)
    position = tree.body[0].expression.loc.start
    assert (position.line, position.column) == (3, 0)


def test_estree_loc_is_preferred():
    data = {
        "type": "Identifier",
        "name": "a",
        "range": [4, 5],
        "loc": {"start": {"line": 2, "column": 3}, "end": {"line": 2, "column": 4}},
    }
    node = from_estree(data)
    assert (node.start, node.end) == (4, 5)
    assert node.loc.start.line == 2
    assert node.loc.start.column == 3


def test_babel_file_and_literals():
    data = {
        "type": "File",
        "program": {
            "type": "Program",
            "body": [{
                "type": "ExpressionStatement",
                "expression": {
                    "type": "StringLiteral",
                    "value": "hi",
                    "extra": {"raw": "'hi'"},
                },
            }],
        },
    }
    tree = from_estree(data)
    literal = tree.body[0].expression
    assert isinstance(tree, Program)
    assert isinstance(literal, Literal)
    assert literal.value == "hi"
    assert literal.raw == "'hi'"


def test_regex_literal():
    node = from_estree({"type": "Literal", "value": {}, "raw": "/a+/", "regex": {"pattern": "a+", "flags": ""}})
    assert node.regex == "a+"


def test_async_arrow_alias_and_expression_body():
    node = from_estree({
        "type": "ArrowFunctionExpression",
        "async": True,
        "params": [{"type": "Identifier", "name": "x"}],
        "body": {"type": "Identifier", "name": "x"},
    })
    assert isinstance(node, ArrowFunctionExpression)
    assert node.is_async is True
    assert node.expression is True


def test_class_body_is_flattened():
    node = from_estree({
        "type": "ClassExpression",
        "id": None,
        "superClass": {"type": "Identifier", "name": "Base"},
        "body": {
            "type": "ClassBody",
            "body": [{
                "type": "ClassMethod",
                "kind": "method",
                "key": {"type": "Identifier", "name": "run"},
                "params": [],
                "body": {"type": "BlockStatement", "body": []},
            }],
        },
    })
    assert isinstance(node, ClassDeclaration)
    assert node.superclass.name == "Base"
    method = node.body[0]
    assert isinstance(method, MethodDefinition)
    assert method.key.name == "run"
    assert method.value.type == "FunctionExpression"


def test_unknown_kind_becomes_generic_node():
    node = from_estree({
        "type": "TSAsExpression",
        "expression": {"type": "Identifier", "name": "value"},
        "typeAnnotation": {"type": "TSAnyKeyword"},
    })
    assert isinstance(node, GenericNode)
    assert node.type == "TSAsExpression"
    assert isinstance(node.children[0], Identifier)


def test_chain_expression_is_unwrapped():
    node = from_estree({
        "type": "ChainExpression",
        "expression": {
            "type": "CallExpression",
            "optional": True,
            "callee": {"type": "Identifier", "name": "cb"},
            "arguments": [],
        },
    })
    assert isinstance(node, CallExpression)
    assert node.optional is True


def test_jsx_attribute_names_are_flattened():
    node = from_estree({
        "type": "JSXElement",
        "openingElement": {
            "type": "JSXOpeningElement",
            "name": {
                "type": "JSXMemberExpression",
                "object": {"type": "JSXIdentifier", "name": "UI"},
                "property": {"type": "JSXIdentifier", "name": "Row"},
            },
            "attributes": [{
                "type": "JSXAttribute",
                "name": {"type": "JSXIdentifier", "name": "key"},
                "value": {
                    "type": "JSXExpressionContainer",
                    "expression": {"type": "Identifier", "name": "i"},
                },
            }],
        },
        "children": [{"type": "JSXText", "value": "hello"}],
    })
    assert node.name == "UI.Row"
    assert node.attributes[0].name == "key"
    assert node.attributes[0].value.expression.name == "i"
    assert node.children == []


@pytest.mark.parametrize("bad", [None, [], {"name": "x"}, "Program"])
def test_non_node_input_raises(bad):
    with pytest.raises(ValueError):
        from_estree(bad)


def test_offset_to_position():
    starts = compute_line_starts("ab\ncd\n\nef")
    assert starts == [0, 3, 6, 7]
    assert offset_to_position(starts, 0).line == 1
    assert (offset_to_position(starts, 4).line, offset_to_position(starts, 4).column) == (2, 1)
    assert offset_to_position(starts, 6).line == 3
    assert (offset_to_position(starts, 8).line, offset_to_position(starts, 8).column) == (4, 1)


def test_deeply_nested_estree_converts():
    expression = {"type": "Identifier", "name": "p0"}
    for number in range(1, 1500):
        expression = {
            "type": "BinaryExpression",
            "operator": "+",
            "left": expression,
            "right": {"type": "Identifier", "name": f"p{number}"},
        }
    tree = from_estree({
        "type": "Program",
        "body": [{"type": "ExpressionStatement", "expression": expression}],
    })
    node = tree.body[0].expression
    depth = 0
    while isinstance(node, BinaryExpression):
        assert node.operator == "+"
        node = node.left
        depth += 1
    assert depth == 1499
    assert node.name == "p0"
