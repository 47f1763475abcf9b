"""
JSCOMPLETE - ESTree Module

Node type names and accessors for ESTree-shaped syntax trees.

Trees may come from any parser following the ESTree / SpiderMonkey Parser API
layout: nodes as plain dicts (our default parser) or as objects exposing the
same fields as attributes.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, List, Optional


class NodeType(str, Enum):
    """ESTree node types the analysis looks at."""
    PROGRAM = "Program"
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"
    THIS = "ThisExpression"

    # Statements
    EXPRESSION_STATEMENT = "ExpressionStatement"
    RETURN_STATEMENT = "ReturnStatement"
    BLOCK_STATEMENT = "BlockStatement"
    IF_STATEMENT = "IfStatement"
    TRY_STATEMENT = "TryStatement"
    CATCH_CLAUSE = "CatchClause"
    FOR_STATEMENT = "ForStatement"
    FOR_IN_STATEMENT = "ForInStatement"
    FOR_OF_STATEMENT = "ForOfStatement"
    WHILE_STATEMENT = "WhileStatement"
    DO_WHILE_STATEMENT = "DoWhileStatement"

    # Declarations
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_BODY = "ClassBody"
    METHOD_DEFINITION = "MethodDefinition"
    EXPORT_NAMED_DECLARATION = "ExportNamedDeclaration"
    EXPORT_DEFAULT_DECLARATION = "ExportDefaultDeclaration"

    # Expressions
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    CLASS_EXPRESSION = "ClassExpression"
    ASSIGNMENT_EXPRESSION = "AssignmentExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    CALL_EXPRESSION = "CallExpression"
    NEW_EXPRESSION = "NewExpression"
    OBJECT_EXPRESSION = "ObjectExpression"
    ARRAY_EXPRESSION = "ArrayExpression"
    PROPERTY = "Property"
    SPREAD_ELEMENT = "SpreadElement"

    # Patterns
    ASSIGNMENT_PATTERN = "AssignmentPattern"
    REST_ELEMENT = "RestElement"


FUNCTION_TYPES = frozenset({
    NodeType.FUNCTION_DECLARATION.value,
    NodeType.FUNCTION_EXPRESSION.value,
    NodeType.ARROW_FUNCTION_EXPRESSION.value,
})

CLASS_TYPES = frozenset({
    NodeType.CLASS_DECLARATION.value,
    NodeType.CLASS_EXPRESSION.value,
})


def field(node: Any, name: str) -> Any:
    """Read a field from a node, whether it is a mapping or an object."""
    if node is None:
        return None
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def node_type(node: Any) -> Optional[str]:
    """Return the node's type tag as a plain string."""
    value = field(node, "type")
    if isinstance(value, Enum):
        return value.value
    return value


def is_type(node: Any, *types: NodeType) -> bool:
    return node_type(node) in {t.value for t in types}


def identifier_name(node: Any) -> Optional[str]:
    """Name of an Identifier node, None for anything else."""
    if is_type(node, NodeType.IDENTIFIER):
        return field(node, "name")
    return None


def key_name(node: Any) -> Optional[str]:
    """
    Name of a property key as written in source.

    Identifiers give their name, literals their value (stringified).
    """
    if node is None:
        return None
    name = identifier_name(node)
    if name is not None:
        return name
    if is_type(node, NodeType.LITERAL):
        value = field(node, "value")
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return None


def parameter_names(params: Optional[List[Any]]) -> List[str]:
    """
    Names bound by a function's parameter list.

    Handles `a`, `a = 1` and `...a`; destructuring patterns bind nothing we
    can complete on and are skipped.
    """
    names: List[str] = []
    for param in params or []:
        if is_type(param, NodeType.ASSIGNMENT_PATTERN):
            param = field(param, "left")
        elif is_type(param, NodeType.REST_ELEMENT):
            param = field(param, "argument")
        name = identifier_name(param)
        if name is not None:
            names.append(name)
    return names
