"""
JSCOMPLETE - Parser Module

Default JavaScript parser: tree-sitter underneath, ESTree on top.

The analysis consumes trees shaped like the SpiderMonkey Parser API / ESTree
(`type`, node fields, `loc` with 1-indexed lines and 0-indexed columns). This
module builds such trees as plain dicts from the tree-sitter JavaScript
grammar. Only the parts of the grammar the analysis cares about get full
fields; any other node becomes a bare `{"type": ...}` node.

Requires: pip install tree-sitter tree-sitter-javascript

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from typing import Any, Callable, Dict, List, Optional

from .config import PARSE_OPTIONS, logger


class JavaScriptSyntaxError(ValueError):
    """Source text that the grammar cannot parse."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at line {line}, column {column}")
        self.line = line
        self.column = column


# tree-sitter node types converted to ESTree with their fields.
# Anything missing here still gets a node, without fields.
_SKIPPED_TYPES = {"comment", "hash_bang_line", "html_comment"}

_FUNCTION_EXPRESSION_TYPES = {"function", "function_expression", "generator_function"}
_FUNCTION_DECLARATION_TYPES = {"function_declaration", "generator_function_declaration"}
_IDENTIFIER_TYPES = {
    "identifier",
    "property_identifier",
    "private_property_identifier",
    "shorthand_property_identifier",
    "shorthand_property_identifier_pattern",
    "statement_identifier",
    "undefined",
}


def _camel_case(ts_type: str) -> str:
    return "".join(part.capitalize() for part in ts_type.split("_"))


def _number_value(text: str) -> Any:
    cleaned = text.replace("_", "").rstrip("n")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return text


_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _unescape(sequence: str) -> str:
    """Decode one string escape sequence, backslash included."""
    body = sequence[1:]
    if body[:1] in ("u", "x") and len(body) > 1:
        digits = body[2:-1] if body.startswith("u{") else body[1:]
        try:
            return chr(int(digits, 16))
        except (ValueError, OverflowError):
            return body
    if body.startswith(("\r\n", "\n", "\r", "\u2028", "\u2029")):
        # Line continuation.
        return ""
    return _SIMPLE_ESCAPES.get(body, body)


class EstreeBuilder:
    """Convert one tree-sitter tree into ESTree dicts."""

    def __init__(self, source: bytes, with_loc: bool = True):
        self.source = source
        self.with_loc = with_loc
        self._lines = source.split(b"\n")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def text(self, node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def column(self, row: int, byte_column: int) -> int:
        """Character column of a byte offset within a line."""
        if row >= len(self._lines):
            return byte_column
        prefix = self._lines[row][:byte_column]
        return len(prefix.decode("utf-8", errors="ignore"))

    def position(self, point) -> Dict[str, int]:
        return {"line": point[0] + 1, "column": self.column(point[0], point[1])}

    def make(self, node, estree_type: str, **fields) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": estree_type}
        result.update(fields)
        if self.with_loc:
            result["loc"] = {
                "start": self.position(node.start_point),
                "end": self.position(node.end_point),
            }
        return result

    @staticmethod
    def named(node) -> List[Any]:
        return [c for c in node.named_children if c.type not in _SKIPPED_TYPES]

    def first(self, node) -> Optional[Dict[str, Any]]:
        children = self.named(node)
        return self.convert(children[0]) if children else None

    def child(self, node, field_name: str) -> Optional[Dict[str, Any]]:
        return self.convert(node.child_by_field_name(field_name))

    def convert_all(self, nodes) -> List[Dict[str, Any]]:
        converted = (self.convert(n) for n in nodes if n.type not in _SKIPPED_TYPES)
        return [c for c in converted if c is not None]

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------
    def convert(self, node) -> Optional[Dict[str, Any]]:
        if node is None or node.type in _SKIPPED_TYPES:
            return None
        kind = node.type
        if kind in _IDENTIFIER_TYPES:
            return self.make(node, "Identifier", name=self.text(node))
        if kind in _FUNCTION_DECLARATION_TYPES:
            return self.function(node, "FunctionDeclaration")
        if kind in _FUNCTION_EXPRESSION_TYPES:
            return self.function(node, "FunctionExpression")
        handler = getattr(self, f"on_{kind}", None)
        if handler is not None:
            return handler(node)
        return self.make(node, _camel_case(kind))

    # -------------------------------------------------------------------------
    # Program and statements
    # -------------------------------------------------------------------------
    def on_program(self, node):
        return self.make(node, "Program", body=self.convert_all(node.named_children))

    def on_statement_block(self, node):
        return self.make(node, "BlockStatement", body=self.convert_all(node.named_children))

    def on_expression_statement(self, node):
        return self.make(node, "ExpressionStatement", expression=self.first(node))

    def on_return_statement(self, node):
        return self.make(node, "ReturnStatement", argument=self.first(node))

    def on_variable_declaration(self, node):
        return self.declaration(node, "var")

    def on_lexical_declaration(self, node):
        kind = self.text(node.children[0]) if node.children else "let"
        return self.declaration(node, kind)

    def declaration(self, node, kind: str):
        declarations = [
            self.convert(c) for c in node.named_children if c.type == "variable_declarator"
        ]
        return self.make(node, "VariableDeclaration", declarations=declarations, kind=kind)

    def on_variable_declarator(self, node):
        return self.make(
            node,
            "VariableDeclarator",
            id=self.child(node, "name"),
            init=self.child(node, "value"),
        )

    def on_if_statement(self, node):
        alternate = node.child_by_field_name("alternative")
        if alternate is not None and alternate.type == "else_clause":
            children = self.named(alternate)
            alternate = children[0] if children else None
        return self.make(
            node,
            "IfStatement",
            test=self.child(node, "condition"),
            consequent=self.child(node, "consequence"),
            alternate=self.convert(alternate),
        )

    def on_try_statement(self, node):
        handler = node.child_by_field_name("handler")
        finalizer = node.child_by_field_name("finalizer")
        return self.make(
            node,
            "TryStatement",
            block=self.child(node, "body"),
            handler=self.on_catch_clause(handler) if handler is not None else None,
            finalizer=self.child(finalizer, "body") if finalizer is not None else None,
        )

    def on_catch_clause(self, node):
        return self.make(
            node,
            "CatchClause",
            param=self.child(node, "parameter"),
            body=self.child(node, "body"),
        )

    def loop(self, node, estree_type: str):
        return self.make(node, estree_type, body=self.child(node, "body"))

    def on_for_statement(self, node):
        return self.loop(node, "ForStatement")

    def on_for_in_statement(self, node):
        operator = node.child_by_field_name("operator")
        is_of = operator is not None and self.text(operator) == "of"
        return self.loop(node, "ForOfStatement" if is_of else "ForInStatement")

    def on_while_statement(self, node):
        return self.loop(node, "WhileStatement")

    def on_do_statement(self, node):
        return self.loop(node, "DoWhileStatement")

    def on_export_statement(self, node):
        declaration = node.child_by_field_name("declaration")
        is_default = any(c.type == "default" for c in node.children)
        if declaration is None:
            declaration = node.child_by_field_name("value")
        return self.make(
            node,
            "ExportDefaultDeclaration" if is_default else "ExportNamedDeclaration",
            declaration=self.convert(declaration),
        )

    # -------------------------------------------------------------------------
    # Functions and classes
    # -------------------------------------------------------------------------
    def params(self, node) -> List[Dict[str, Any]]:
        if node is None:
            return []
        if node.type != "formal_parameters":
            return [self.convert(node)]
        result = []
        for param in self.named(node):
            if param.type == "assignment_pattern":
                result.append(self.make(
                    param,
                    "AssignmentPattern",
                    left=self.child(param, "left"),
                    right=self.child(param, "right"),
                ))
            elif param.type == "rest_pattern":
                result.append(self.make(param, "RestElement", argument=self.first(param)))
            else:
                result.append(self.convert(param))
        return result

    def function(self, node, estree_type: str, with_name: bool = True):
        return self.make(
            node,
            estree_type,
            id=self.child(node, "name") if with_name else None,
            params=self.params(node.child_by_field_name("parameters")),
            body=self.child(node, "body"),
            generator=any(c.type == "*" for c in node.children),
            expression=False,
        )

    def on_arrow_function(self, node):
        parameter = node.child_by_field_name("parameter")
        if parameter is None:
            parameter = node.child_by_field_name("parameters")
        body = self.child(node, "body")
        return self.make(
            node,
            "ArrowFunctionExpression",
            id=None,
            params=self.params(parameter),
            body=body,
            expression=body is not None and body["type"] != "BlockStatement",
        )

    def on_method_definition(self, node):
        return self.make(
            node,
            "MethodDefinition",
            key=self.child(node, "name"),
            value=self.function(node, "FunctionExpression", with_name=False),
            kind="method",
            static=any(c.type == "static" for c in node.children),
        )

    def klass(self, node, estree_type: str):
        heritage = next((c for c in node.named_children if c.type == "class_heritage"), None)
        body = node.child_by_field_name("body")
        members = []
        if body is not None:
            members = self.convert_all(
                c for c in body.named_children if c.type == "method_definition"
            )
        return self.make(
            node,
            estree_type,
            id=self.child(node, "name"),
            superClass=self.first(heritage) if heritage is not None else None,
            body=self.make(body if body is not None else node, "ClassBody", body=members),
        )

    def on_class_declaration(self, node):
        return self.klass(node, "ClassDeclaration")

    def on_class(self, node):
        return self.klass(node, "ClassExpression")

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------
    def on_parenthesized_expression(self, node):
        return self.first(node)

    def on_assignment_expression(self, node):
        return self.make(
            node,
            "AssignmentExpression",
            operator="=",
            left=self.child(node, "left"),
            right=self.child(node, "right"),
        )

    def on_augmented_assignment_expression(self, node):
        operator = node.child_by_field_name("operator")
        return self.make(
            node,
            "AssignmentExpression",
            operator=self.text(operator) if operator is not None else "=",
            left=self.child(node, "left"),
            right=self.child(node, "right"),
        )

    def on_member_expression(self, node):
        return self.make(
            node,
            "MemberExpression",
            object=self.child(node, "object"),
            property=self.child(node, "property"),
            computed=False,
        )

    def on_subscript_expression(self, node):
        return self.make(
            node,
            "MemberExpression",
            object=self.child(node, "object"),
            property=self.child(node, "index"),
            computed=True,
        )

    def arguments(self, node) -> List[Dict[str, Any]]:
        if node is None or node.type != "arguments":
            return []
        return self.convert_all(node.named_children)

    def on_call_expression(self, node):
        return self.make(
            node,
            "CallExpression",
            callee=self.child(node, "function"),
            arguments=self.arguments(node.child_by_field_name("arguments")),
        )

    def on_new_expression(self, node):
        return self.make(
            node,
            "NewExpression",
            callee=self.child(node, "constructor"),
            arguments=self.arguments(node.child_by_field_name("arguments")),
        )

    def on_object(self, node):
        properties = []
        for member in self.named(node):
            if member.type == "pair":
                properties.append(self.pair(member))
            elif member.type in ("shorthand_property_identifier", "identifier"):
                name = self.convert(member)
                properties.append(self.make(
                    member, "Property", key=name, value=dict(name),
                    computed=False, shorthand=True, method=False, kind="init",
                ))
            elif member.type == "method_definition":
                properties.append(self.make(
                    member,
                    "Property",
                    key=self.child(member, "name"),
                    value=self.function(member, "FunctionExpression", with_name=False),
                    computed=False,
                    shorthand=False,
                    method=True,
                    kind="init",
                ))
            elif member.type == "spread_element":
                properties.append(self.make(member, "SpreadElement", argument=self.first(member)))
        return self.make(node, "ObjectExpression", properties=properties)

    def pair(self, node):
        key = node.child_by_field_name("key")
        computed = key is not None and key.type == "computed_property_name"
        return self.make(
            node,
            "Property",
            key=self.first(key) if computed else self.convert(key),
            value=self.child(node, "value"),
            computed=computed,
            shorthand=False,
            method=False,
            kind="init",
        )

    def on_array(self, node):
        return self.make(node, "ArrayExpression", elements=self.convert_all(node.named_children))

    def on_sequence_expression(self, node):
        return self.make(node, "SequenceExpression", expressions=self.convert_all(node.named_children))

    def on_this(self, node):
        return self.make(node, "ThisExpression")

    def on_string(self, node):
        parts = []
        for child in node.children:
            if child.type == "string_fragment":
                parts.append(self.text(child))
            elif child.type == "escape_sequence":
                parts.append(_unescape(self.text(child)))
        return self.make(node, "Literal", value="".join(parts), raw=self.text(node))

    def on_number(self, node):
        text = self.text(node)
        return self.make(node, "Literal", value=_number_value(text), raw=text)

    def on_true(self, node):
        return self.make(node, "Literal", value=True, raw="true")

    def on_false(self, node):
        return self.make(node, "Literal", value=False, raw="false")

    def on_null(self, node):
        return self.make(node, "Literal", value=None, raw="null")

    def on_regex(self, node):
        text = self.text(node)
        return self.make(node, "Literal", value=text, raw=text)


# =============================================================================
# Tree-sitter Parser
# =============================================================================

class TreeSitterParser:
    """
    ESTree parser backed by tree-sitter.
    Requires: pip install tree-sitter tree-sitter-javascript
    """

    _language = None

    @classmethod
    def is_available(cls) -> bool:
        """Check if tree-sitter and the JavaScript grammar are installed."""
        try:
            import tree_sitter  # noqa: F401
            import tree_sitter_javascript  # noqa: F401
            return True
        except ImportError:
            return False

    @classmethod
    def _ensure_language(cls):
        """Load the JavaScript grammar once per process."""
        if cls._language is None:
            import tree_sitter
            import tree_sitter_javascript

            cls._language = tree_sitter.Language(tree_sitter_javascript.language())
            logger.debug("tree-sitter JavaScript grammar loaded")
        return cls._language

    def parse(self, source: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Parse JavaScript source into an ESTree Program dict.

        Raises:
            JavaScriptSyntaxError: If the source does not parse cleanly.
        """
        import tree_sitter

        options = options or {}
        parser = tree_sitter.Parser()
        parser.language = self._ensure_language()

        data = bytes(source, "utf8")
        tree = parser.parse(data)
        builder = EstreeBuilder(data, with_loc=bool(options.get("loc")))

        if tree.root_node.has_error:
            error = self._first_error(tree.root_node)
            position = builder.position(error.start_point)
            raise JavaScriptSyntaxError(
                "Missing token" if error.is_missing else "Unexpected token",
                position["line"],
                position["column"],
            )

        return builder.convert(tree.root_node)

    @staticmethod
    def _first_error(root):
        """Leftmost ERROR or MISSING node in the tree."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node
            stack.extend(c for c in reversed(node.children) if c.has_error or c.is_missing)
        return root


_default_parser = TreeSitterParser()


def parse(
    source: str,
    options: Optional[Dict[str, Any]] = None,
    callback: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> Dict[str, Any]:
    """
    Parse JavaScript source with the default parser.

    Args:
        source: Script text.
        options: Parser options; `{"loc": True}` adds node locations.
        callback: If given, called with the tree before it is returned.

    Returns:
        ESTree Program dict.
    """
    tree = _default_parser.parse(source, options if options is not None else PARSE_OPTIONS)
    if callback is not None:
        callback(tree)
    return tree
