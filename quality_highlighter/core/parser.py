"""
Source parser — JavaScript / TypeScript (and JSX / TSX) via tree-sitter.

tree-sitter produces a concrete syntax tree; ``SourceParser.parse`` converts
it into the typed ESTree-shaped nodes of ``models.syntax`` so matchers can
pattern-match on node classes instead of probing raw grammar kinds.
"""

from __future__ import annotations

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language as TSLanguage
from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from quality_highlighter.models.rule_models import Language
from quality_highlighter.models.syntax import (
    ArrayExpression,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    AwaitExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ClassDeclaration,
    ConditionalExpression,
    DoWhileStatement,
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    GenericNode,
    Identifier,
    IfStatement,
    JSXAttribute,
    JSXElement,
    JSXExpressionContainer,
    Literal,
    Location,
    LogicalExpression,
    MemberExpression,
    MethodDefinition,
    NewExpression,
    Node,
    ObjectExpression,
    Program,
    Property,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    TemplateLiteral,
    ThisExpression,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
    compute_line_starts,
    offset_to_position,
)

JS_LANGUAGE = TSLanguage(tsjavascript.language())
TS_LANGUAGE = TSLanguage(tstypescript.language_typescript())
TSX_LANGUAGE = TSLanguage(tstypescript.language_tsx())

GRAMMARS: dict[Language, TSLanguage] = {
    Language.JAVASCRIPT: JS_LANGUAGE,
    Language.JAVASCRIPT_REACT: JS_LANGUAGE,
    Language.TYPESCRIPT: TS_LANGUAGE,
    Language.TYPESCRIPT_REACT: TSX_LANGUAGE,
}


class SyntaxParseError(ValueError):
    """Source text could not be parsed without errors."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class UnsupportedLanguageError(ValueError):
    """No grammar is available for the requested language."""


class SourceParser:
    """Thin wrapper around tree-sitter for the supported script languages."""

    def __init__(self) -> None:
        self._parsers = {language: Parser(grammar) for language, grammar in GRAMMARS.items()}

    def parse_tree(self, code: str, language: Language) -> tuple[Tree, bytes]:
        """Parse source and return (tree, source_bytes).

        Raises SyntaxParseError if the code cannot be parsed.
        """
        parser = self._parsers.get(Language(language))
        if parser is None:
            raise UnsupportedLanguageError(f"No parser available for language '{Language(language).value}'")
        source_bytes = _encode(code)
        tree = parser.parse(source_bytes)
        if tree.root_node.has_error:
            error_node = _first_error(tree.root_node)
            line = error_node.start_point[0] + 1 if error_node is not None else None
            where = f" near line {line}" if line is not None else ""
            raise SyntaxParseError(f"Failed to parse {Language(language).value} source{where}", line)
        return tree, source_bytes

    def parse(self, code: str, language: Language) -> Node:
        """Parse source into a typed syntax tree rooted at a Program node."""
        tree, source_bytes = self.parse_tree(code, language)
        return _TreeConverter(code, source_bytes).convert(tree.root_node)


def _first_error(root: TSNode) -> TSNode | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


# Grammar kinds with no syntax content for the engine
_SKIPPED_KINDS = frozenset({
    "comment", "html_comment", "hash_bang_line", "jsx_text", "empty_statement",
    "type_annotation", "type_arguments", "type_parameters", "asserts_annotation",
})

# Wrapper kinds replaced by their single inner node
_UNWRAPPED_KINDS = frozenset({
    "parenthesized_expression", "else_clause", "computed_property_name",
    "non_null_expression", "as_expression", "satisfies_expression",
})

_IDENTIFIER_KINDS = frozenset({
    "identifier", "property_identifier", "shorthand_property_identifier_pattern",
    "private_property_identifier", "statement_identifier", "type_identifier",
})

_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})


def _number_value(text: str) -> int | float | str:
    cleaned = text.replace("_", "").rstrip("n")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return text


def _encode(text: str) -> bytes:
    # JSON request bodies may carry lone surrogates
    return text.encode("utf-8", errors="surrogatepass")


def _byte_to_char_map(source: str) -> list[int]:
    offsets: list[int] = []
    for index, char in enumerate(source):
        offsets.extend([index] * len(_encode(char)))
    offsets.append(len(source))
    return offsets


class _TreeConverter:
    """Converts one tree-sitter tree into typed syntax nodes."""

    def __init__(self, source: str, source_bytes: bytes) -> None:
        self._bytes = source_bytes
        self._line_starts = compute_line_starts(source)
        # Only non-ASCII sources need byte -> character translation
        self._char_offsets = _byte_to_char_map(source) if len(source_bytes) != len(source) else None
        self._converted: dict[int, Node | None] = {}

    # ── helpers ──

    def _offset(self, byte: int) -> int:
        return self._char_offsets[byte] if self._char_offsets is not None else byte

    def _pos(self, ts: TSNode) -> dict:
        start, end = self._offset(ts.start_byte), self._offset(ts.end_byte)
        return {
            "start": start,
            "end": end,
            "loc": Location(
                offset_to_position(self._line_starts, start),
                offset_to_position(self._line_starts, end),
            ),
        }

    def _text(self, ts: TSNode | None) -> str:
        if ts is None:
            return ""
        return self._bytes[ts.start_byte:ts.end_byte].decode("utf-8", errors="replace")

    def _field(self, ts: TSNode, name: str) -> Node | None:
        child = ts.child_by_field_name(name)
        return self._node(child) if child is not None else None

    def _named(self, ts: TSNode | None) -> list[Node]:
        if ts is None:
            return []
        nodes = []
        for child in ts.named_children:
            converted = self._node(child)
            if converted is not None:
                nodes.append(converted)
        return nodes

    def _first_named(self, ts: TSNode) -> Node | None:
        for child in ts.named_children:
            converted = self._node(child)
            if converted is not None:
                return converted
        return None

    def _has_token(self, ts: TSNode, token: str) -> bool:
        return any(not child.is_named and child.type == token for child in ts.children)

    def _node(self, ts: TSNode) -> Node | None:
        return self._converted.get(ts.id)

    # ── dispatch ──

    def convert(self, root: TSNode) -> Node | None:
        """Convert ``root`` and everything below it.

        Children are converted before their parents using an explicit stack,
        so deeply nested expressions do not hit the recursion limit.
        """
        self._converted = {}
        stack: list[tuple[TSNode, bool]] = [(root, False)]
        while stack:
            ts, children_done = stack.pop()
            if children_done:
                self._converted[ts.id] = self._build(ts)
                continue
            stack.append((ts, True))
            if ts.type not in _SKIPPED_KINDS:
                stack.extend((child, False) for child in ts.named_children)
        return self._converted.pop(root.id)

    def _build(self, ts: TSNode) -> Node | None:
        kind = ts.type
        if kind in _SKIPPED_KINDS:
            return None
        if kind in _UNWRAPPED_KINDS:
            return self._first_named(ts)
        if kind in _IDENTIFIER_KINDS:
            return Identifier(name=self._text(ts), **self._pos(ts))
        handler = getattr(self, "_convert_" + kind, None)
        if handler is not None:
            return handler(ts)
        return GenericNode(kind=kind, children=self._named(ts), **self._pos(ts))

    # ── statements ──

    def _convert_program(self, ts: TSNode) -> Node:
        return Program(body=self._named(ts), **self._pos(ts))

    def _convert_expression_statement(self, ts: TSNode) -> Node:
        return ExpressionStatement(expression=self._first_named(ts), **self._pos(ts))

    def _convert_statement_block(self, ts: TSNode) -> Node:
        return BlockStatement(body=self._named(ts), **self._pos(ts))

    def _convert_lexical_declaration(self, ts: TSNode) -> Node:
        kind = self._text(ts.child_by_field_name("kind")) or "let"
        return VariableDeclaration(kind=kind, declarations=self._named(ts), **self._pos(ts))

    def _convert_variable_declaration(self, ts: TSNode) -> Node:
        return VariableDeclaration(kind="var", declarations=self._named(ts), **self._pos(ts))

    def _convert_variable_declarator(self, ts: TSNode) -> Node:
        return VariableDeclarator(
            id=self._field(ts, "name"),
            init=self._field(ts, "value"),
            **self._pos(ts),
        )

    def _for_clause(self, ts: TSNode, name: str) -> Node | None:
        child = ts.child_by_field_name(name)
        if child is None or not child.is_named or child.type == "empty_statement":
            return None
        if child.type == "expression_statement":
            return self._first_named(child)
        return self._node(child)

    def _convert_for_statement(self, ts: TSNode) -> Node:
        return ForStatement(
            init=self._for_clause(ts, "initializer"),
            test=self._for_clause(ts, "condition"),
            update=self._field(ts, "increment"),
            body=self._field(ts, "body"),
            **self._pos(ts),
        )

    def _convert_for_in_statement(self, ts: TSNode) -> Node:
        left_ts = ts.child_by_field_name("left")
        left = self._node(left_ts) if left_ts is not None else None
        declaration_kind = ts.child_by_field_name("kind")
        if declaration_kind is not None and left is not None:
            left_pos = self._pos(left_ts)
            left = VariableDeclaration(
                kind=self._text(declaration_kind),
                declarations=[VariableDeclarator(id=left, **left_pos)],
                **left_pos,
            )
        cls = ForOfStatement if self._text(ts.child_by_field_name("operator")) == "of" else ForInStatement
        return cls(
            left=left,
            right=self._field(ts, "right"),
            body=self._field(ts, "body"),
            **self._pos(ts),
        )

    def _convert_while_statement(self, ts: TSNode) -> Node:
        return WhileStatement(
            test=self._field(ts, "condition"),
            body=self._field(ts, "body"),
            **self._pos(ts),
        )

    def _convert_do_statement(self, ts: TSNode) -> Node:
        return DoWhileStatement(
            body=self._field(ts, "body"),
            test=self._field(ts, "condition"),
            **self._pos(ts),
        )

    def _convert_if_statement(self, ts: TSNode) -> Node:
        return IfStatement(
            test=self._field(ts, "condition"),
            consequent=self._field(ts, "consequence"),
            alternate=self._field(ts, "alternative"),
            **self._pos(ts),
        )

    def _convert_return_statement(self, ts: TSNode) -> Node:
        return ReturnStatement(argument=self._first_named(ts), **self._pos(ts))

    # ── functions and classes ──

    def _params(self, ts: TSNode | None) -> list[Node]:
        if ts is None:
            return []
        params: list[Node] = []
        for child in ts.named_children:
            if child.type in ("required_parameter", "optional_parameter"):
                pattern = self._field(child, "pattern")
                default = self._field(child, "value")
                if pattern is not None and default is not None:
                    params.append(AssignmentPattern(left=pattern, right=default, **self._pos(child)))
                elif pattern is not None:
                    params.append(pattern)
                continue
            converted = self._node(child)
            if converted is not None:
                params.append(converted)
        return params

    def _function_parts(self, ts: TSNode) -> dict:
        return {
            "params": self._params(ts.child_by_field_name("parameters")),
            "body": self._field(ts, "body"),
            "is_async": self._has_token(ts, "async"),
            "generator": self._has_token(ts, "*"),
        }

    def _convert_function_declaration(self, ts: TSNode) -> Node:
        return FunctionDeclaration(id=self._field(ts, "name"), **self._function_parts(ts), **self._pos(ts))

    _convert_generator_function_declaration = _convert_function_declaration

    def _convert_function_expression(self, ts: TSNode) -> Node:
        return FunctionExpression(id=self._field(ts, "name"), **self._function_parts(ts), **self._pos(ts))

    # Older grammar releases name function expressions "function"
    _convert_function = _convert_function_expression
    _convert_generator_function = _convert_function_expression

    def _convert_arrow_function(self, ts: TSNode) -> Node:
        single = ts.child_by_field_name("parameter")
        if single is not None:
            params = [self._node(single)]
        else:
            params = self._params(ts.child_by_field_name("parameters"))
        body_ts = ts.child_by_field_name("body")
        return ArrowFunctionExpression(
            params=[p for p in params if p is not None],
            body=self._node(body_ts) if body_ts is not None else None,
            is_async=self._has_token(ts, "async"),
            expression=body_ts is not None and body_ts.type != "statement_block",
            **self._pos(ts),
        )

    def _convert_method_definition(self, ts: TSNode) -> Node:
        kind = "method"
        for token in ("get", "set"):
            if self._has_token(ts, token):
                kind = token
        key_ts = ts.child_by_field_name("name")
        if self._text(key_ts) == "constructor":
            kind = "constructor"
        position = self._pos(ts)
        return MethodDefinition(
            key=self._node(key_ts) if key_ts is not None else None,
            value=FunctionExpression(**self._function_parts(ts), **position),
            kind=kind,
            computed=key_ts is not None and key_ts.type == "computed_property_name",
            static=self._has_token(ts, "static"),
            **position,
        )

    def _convert_class_declaration(self, ts: TSNode) -> Node:
        superclass = None
        for child in ts.named_children:
            if child.type == "class_heritage":
                superclass = self._first_named(child)
        return ClassDeclaration(
            id=self._field(ts, "name"),
            superclass=superclass,
            body=self._named(ts.child_by_field_name("body")),
            **self._pos(ts),
        )

    _convert_class = _convert_class_declaration
    _convert_abstract_class_declaration = _convert_class_declaration

    # ── expressions ──

    def _convert_call_expression(self, ts: TSNode) -> Node:
        arguments_ts = ts.child_by_field_name("arguments")
        if arguments_ts is not None and arguments_ts.type == "arguments":
            arguments = self._named(arguments_ts)
        else:
            tagged = self._node(arguments_ts) if arguments_ts is not None else None
            arguments = [tagged] if tagged is not None else []
        return CallExpression(
            callee=self._field(ts, "function"),
            arguments=arguments,
            optional=ts.child_by_field_name("optional_chain") is not None,
            **self._pos(ts),
        )

    def _convert_new_expression(self, ts: TSNode) -> Node:
        return NewExpression(
            callee=self._field(ts, "constructor"),
            arguments=self._named(ts.child_by_field_name("arguments")),
            **self._pos(ts),
        )

    def _convert_member_expression(self, ts: TSNode) -> Node:
        return MemberExpression(
            object=self._field(ts, "object"),
            property=self._field(ts, "property"),
            computed=False,
            optional=ts.child_by_field_name("optional_chain") is not None,
            **self._pos(ts),
        )

    def _convert_subscript_expression(self, ts: TSNode) -> Node:
        return MemberExpression(
            object=self._field(ts, "object"),
            property=self._field(ts, "index"),
            computed=True,
            optional=ts.child_by_field_name("optional_chain") is not None,
            **self._pos(ts),
        )

    def _convert_this(self, ts: TSNode) -> Node:
        return ThisExpression(**self._pos(ts))

    def _convert_super(self, ts: TSNode) -> Node:
        return GenericNode(kind="Super", **self._pos(ts))

    def _convert_undefined(self, ts: TSNode) -> Node:
        return Identifier(name="undefined", **self._pos(ts))

    def _convert_string(self, ts: TSNode) -> Node:
        raw = self._text(ts)
        return Literal(value=raw[1:-1], raw=raw, **self._pos(ts))

    def _convert_number(self, ts: TSNode) -> Node:
        raw = self._text(ts)
        return Literal(value=_number_value(raw), raw=raw, **self._pos(ts))

    def _convert_true(self, ts: TSNode) -> Node:
        return Literal(value=True, raw="true", **self._pos(ts))

    def _convert_false(self, ts: TSNode) -> Node:
        return Literal(value=False, raw="false", **self._pos(ts))

    def _convert_null(self, ts: TSNode) -> Node:
        return Literal(value=None, raw="null", **self._pos(ts))

    def _convert_regex(self, ts: TSNode) -> Node:
        return Literal(
            value=None,
            raw=self._text(ts),
            regex=self._text(ts.child_by_field_name("pattern")),
            **self._pos(ts),
        )

    def _convert_template_string(self, ts: TSNode) -> Node:
        quasis: list[str] = []
        expressions: list[Node] = []
        current = ""
        for child in ts.named_children:
            if child.type == "template_substitution":
                quasis.append(current)
                current = ""
                expression = self._first_named(child)
                if expression is not None:
                    expressions.append(expression)
            else:
                current += self._text(child)
        quasis.append(current)
        return TemplateLiteral(quasis=quasis, expressions=expressions, **self._pos(ts))

    def _convert_assignment_expression(self, ts: TSNode) -> Node:
        return AssignmentExpression(
            operator="=",
            left=self._field(ts, "left"),
            right=self._field(ts, "right"),
            **self._pos(ts),
        )

    def _convert_augmented_assignment_expression(self, ts: TSNode) -> Node:
        return AssignmentExpression(
            operator=self._text(ts.child_by_field_name("operator")),
            left=self._field(ts, "left"),
            right=self._field(ts, "right"),
            **self._pos(ts),
        )

    def _convert_binary_expression(self, ts: TSNode) -> Node:
        operator = self._text(ts.child_by_field_name("operator"))
        cls = LogicalExpression if operator in _LOGICAL_OPERATORS else BinaryExpression
        return cls(
            operator=operator,
            left=self._field(ts, "left"),
            right=self._field(ts, "right"),
            **self._pos(ts),
        )

    def _convert_unary_expression(self, ts: TSNode) -> Node:
        return UnaryExpression(
            operator=self._text(ts.child_by_field_name("operator")),
            argument=self._field(ts, "argument"),
            **self._pos(ts),
        )

    def _convert_update_expression(self, ts: TSNode) -> Node:
        operator_ts = ts.child_by_field_name("operator")
        return UpdateExpression(
            operator=self._text(operator_ts),
            argument=self._field(ts, "argument"),
            prefix=operator_ts is not None and operator_ts.start_byte == ts.start_byte,
            **self._pos(ts),
        )

    def _convert_ternary_expression(self, ts: TSNode) -> Node:
        return ConditionalExpression(
            test=self._field(ts, "condition"),
            consequent=self._field(ts, "consequence"),
            alternate=self._field(ts, "alternative"),
            **self._pos(ts),
        )

    def _convert_object(self, ts: TSNode) -> Node:
        return ObjectExpression(properties=self._named(ts), **self._pos(ts))

    def _convert_pair(self, ts: TSNode) -> Node:
        key_ts = ts.child_by_field_name("key")
        return Property(
            key=self._node(key_ts) if key_ts is not None else None,
            value=self._field(ts, "value"),
            computed=key_ts is not None and key_ts.type == "computed_property_name",
            **self._pos(ts),
        )

    def _convert_shorthand_property_identifier(self, ts: TSNode) -> Node:
        name = self._text(ts)
        position = self._pos(ts)
        return Property(
            key=Identifier(name=name, **position),
            value=Identifier(name=name, **position),
            shorthand=True,
            **position,
        )

    def _convert_array(self, ts: TSNode) -> Node:
        return ArrayExpression(elements=self._named(ts), **self._pos(ts))

    def _convert_spread_element(self, ts: TSNode) -> Node:
        return SpreadElement(argument=self._first_named(ts), **self._pos(ts))

    def _convert_await_expression(self, ts: TSNode) -> Node:
        return AwaitExpression(argument=self._first_named(ts), **self._pos(ts))

    def _convert_sequence_expression(self, ts: TSNode) -> Node:
        expressions: list[Node] = []
        for converted in self._named(ts):
            if isinstance(converted, SequenceExpression):
                expressions.extend(converted.expressions)
            else:
                expressions.append(converted)
        return SequenceExpression(expressions=expressions, **self._pos(ts))

    def _convert_assignment_pattern(self, ts: TSNode) -> Node:
        return AssignmentPattern(
            left=self._field(ts, "left"),
            right=self._field(ts, "right"),
            **self._pos(ts),
        )

    # ── JSX ──

    def _jsx_attributes(self, tag: TSNode | None) -> list[Node]:
        attributes: list[Node] = []
        if tag is None:
            return attributes
        for child in tag.named_children:
            if child.type in ("jsx_attribute", "jsx_expression"):
                converted = self._node(child)
                if converted is not None:
                    attributes.append(converted)
        return attributes

    def _convert_jsx_element(self, ts: TSNode) -> Node:
        opening = ts.child_by_field_name("open_tag")
        children: list[Node] = []
        for child in ts.named_children:
            if child.type in ("jsx_opening_element", "jsx_closing_element"):
                continue
            converted = self._node(child)
            if converted is not None:
                children.append(converted)
        return JSXElement(
            name=self._text(opening.child_by_field_name("name")) if opening is not None else "",
            attributes=self._jsx_attributes(opening),
            children=children,
            **self._pos(ts),
        )

    def _convert_jsx_self_closing_element(self, ts: TSNode) -> Node:
        return JSXElement(
            name=self._text(ts.child_by_field_name("name")),
            attributes=self._jsx_attributes(ts),
            **self._pos(ts),
        )

    def _convert_jsx_attribute(self, ts: TSNode) -> Node:
        named = ts.named_children
        value = self._node(named[1]) if len(named) > 1 else None
        return JSXAttribute(
            name=self._text(named[0]) if named else "",
            value=value,
            **self._pos(ts),
        )

    def _convert_jsx_expression(self, ts: TSNode) -> Node:
        return JSXExpressionContainer(expression=self._first_named(ts), **self._pos(ts))
