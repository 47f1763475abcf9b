"""
JSCOMPLETE - Scope Module

Contains: Caret, caret_in_block, nested_nodes, get_static_scope

Gathers variable, parameter and property names of a script as seen from a
caret position. The walk is an explicit stack of (node list, index) frames
instead of recursion, and it only descends into scopes that contain the
caret, so its cost follows the code around the caret rather than the whole
program.

This static scope system is inflexible: it does not resolve shadowing and it
approximates nested scopes by weight. If it can't walk the tree, the caller
keeps whatever it had before.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .config import FUNCTION_TYPE_NAME, logger
from .estree import (
    CLASS_TYPES,
    FUNCTION_TYPES,
    NodeType,
    field,
    identifier_name,
    is_type,
    node_type,
    parameter_names,
)
from .inference import type_from_member, type_from_object
from .store import TypeStore


# Node kinds that only wrap the node carrying the real information.
TRANSPARENT_TYPES = frozenset({
    NodeType.RETURN_STATEMENT.value,
    NodeType.VARIABLE_DECLARATOR.value,
    NodeType.EXPRESSION_STATEMENT.value,
    NodeType.ASSIGNMENT_EXPRESSION.value,
    NodeType.PROPERTY.value,
    NodeType.METHOD_DEFINITION.value,
    NodeType.EXPORT_NAMED_DECLARATION.value,
    NodeType.EXPORT_DEFAULT_DECLARATION.value,
})


@dataclass(frozen=True)
class Caret:
    """Cursor position, line and column both 0-indexed."""
    line: int
    column: int

    @classmethod
    def coerce(cls, value: Any) -> "Caret":
        """
        Build a Caret from a Caret, a (line, column) pair or a mapping.

        Mappings may use `column` or the editor-style `ch` key.
        """
        if isinstance(value, Caret):
            return value
        if isinstance(value, Mapping):
            column = value.get("column", value.get("ch"))
            if column is None:
                raise ValueError(f"Caret needs a column: {value!r}")
            return cls(int(value["line"]), int(column))
        line, column = value
        return cls(int(line), int(column))


# =============================================================================
# Containment
# =============================================================================

def caret_in_block(node: Any, caret: Caret) -> bool:
    """
    Whether the caret is in the piece of code represented by the node.

    Args:
        node: A parse tree node with a `loc` span (1-indexed lines).
        caret: The line and column where the caret is (both 0-indexed).
    """
    loc = field(node, "loc")
    if loc is None:
        return False
    start = field(loc, "start")
    end = field(loc, "end")
    # Note that the AST's line number is 1-indexed.
    start_line = field(start, "line") - 1
    end_line = field(end, "line") - 1
    return (
        # The node starts before the caret.
        (start_line < caret.line
         or (start_line == caret.line and field(start, "column") <= caret.column))
        # The node ends after the caret.
        and (caret.line < end_line
             or (end_line == caret.line and caret.column <= field(end, "column")))
    )


# =============================================================================
# Descent
# =============================================================================

def _statements(node: Any) -> Optional[List[Any]]:
    """Statement list of a block, or the node itself as a one-item list."""
    if node is None:
        return None
    if is_type(node, NodeType.BLOCK_STATEMENT, NodeType.CLASS_BODY):
        return field(node, "body")
    return [node]


def _branch(node: Any, caret: Caret, *names: str) -> Optional[List[Any]]:
    """Statements of the first named branch of `node` holding the caret."""
    for name in names:
        part = field(node, name)
        if part is not None and caret_in_block(part, caret):
            if is_type(part, NodeType.CATCH_CLAUSE):
                part = field(part, "body")
            return _statements(part)
    return None


def nested_nodes(node: Any, caret: Caret) -> Optional[List[Any]]:
    """
    Find the list of child nodes to walk into, or None.

    Bodies that open a scope (functions, blocks, branches, call arguments)
    are only entered when the caret is inside the node. Declaration lists and
    literal contents are always entered: their contents still need indexing.

    Args:
        node: An AST node.
        caret: 0-indexed caret position.
    """
    body = None
    new_scope = True  # Whether we enter a new scope.
    kind = node_type(node)

    if kind == NodeType.IF_STATEMENT.value:
        if caret_in_block(node, caret):
            # An `else if` comes back as a nested IfStatement.
            body = _branch(node, caret, "consequent", "alternate")
    elif kind == NodeType.TRY_STATEMENT.value:
        if caret_in_block(node, caret):
            body = _branch(node, caret, "block", "handler", "finalizer")
    elif field(node, "body") is not None:
        inner = field(node, "body")
        if isinstance(inner, list):
            body = inner
        else:
            # Function and loop bodies, class bodies, arrow expressions.
            body = _statements(inner)
    elif field(node, "declarations") is not None:
        body = field(node, "declarations")  # Variable declarations.
        new_scope = False
    elif field(node, "arguments") is not None:
        body = field(node, "arguments")  # Function calls, eg, f(function(){…});
    elif field(node, "properties") is not None:
        body = field(node, "properties")  # Objects, eg, ({f: function(){…}});
        new_scope = False
    elif field(node, "elements") is not None:
        body = field(node, "elements")  # Array, eg, [function(){…}]
        new_scope = False

    if not body or not isinstance(body, list):
        return None
    # No need to walk a scope in which the caret is not.
    if new_scope and not caret_in_block(node, caret):
        return None
    return body


# =============================================================================
# Walk
# =============================================================================

def _declare_variable(store: TypeStore, node: Any, weight: int) -> None:
    """Record a VariableDeclarator's name and what its initializer tells."""
    name = identifier_name(field(node, "id"))
    if name is None:
        return  # Destructuring pattern.

    init = field(node, "init")
    if is_type(init, NodeType.NEW_EXPRESSION):
        store.add_property(name, identifier_name(field(init, "callee")), weight)
    elif is_type(init, NodeType.OBJECT_EXPRESSION):
        store.add_property(name, None, weight)
        type_from_object(store, [name], init)
    else:
        # Simple object.
        store.add_property(name, None, weight)


def _assign(store: TypeStore, node: Any) -> None:
    """Record what an AssignmentExpression tells about its target."""
    left = field(node, "left")
    symbols: List[str] = []
    if is_type(left, NodeType.MEMBER_EXPRESSION):
        symbols = type_from_member(store, left)
    elif is_type(left, NodeType.IDENTIFIER):
        symbols = [identifier_name(left)]

    if symbols and is_type(field(node, "right"), NodeType.OBJECT_EXPRESSION):
        type_from_object(store, symbols, field(node, "right"))


def _unwrap(store: TypeStore, node: Any, depth: int) -> Any:
    """
    Peel transparent wrappers off a statement, recording what they declare.

    Returns the innermost interesting node, or None if there is nothing left
    to look at.
    """
    while node is not None and node_type(node) in TRANSPARENT_TYPES:
        kind = node_type(node)
        if kind == NodeType.VARIABLE_DECLARATOR.value:
            # Declarators sit inside their declaration's list, one level
            # deeper than the scope they declare into.
            _declare_variable(store, node, depth - 1)
            init = field(node, "init")
            if init is None:
                return node
            node = init
        elif kind == NodeType.RETURN_STATEMENT.value:
            node = field(node, "argument")
        elif kind == NodeType.EXPRESSION_STATEMENT.value:
            node = field(node, "expression")  # Parenthesized expression.
        elif kind == NodeType.ASSIGNMENT_EXPRESSION.value:
            _assign(store, node)
            node = field(node, "right")  # f.g = function(){…};
        elif kind in (NodeType.PROPERTY.value, NodeType.METHOD_DEFINITION.value):
            node = field(node, "value")  # {f: function(){…}};
        else:
            node = field(node, "declaration")  # export function f(){…}
    return node


def _declare_bindings(store: TypeStore, node: Any, caret: Caret, depth: int) -> Any:
    """
    Record a function's name and, if the caret is inside, its parameters.

    Returns the node to look for a body in: the callee of an immediately
    invoked function expression, the node itself otherwise.
    """
    callee = field(node, "callee")
    if is_type(node, NodeType.CALL_EXPRESSION) and node_type(callee) in FUNCTION_TYPES:
        # Expressions, eg, (function(){…}());
        node = callee
    kind = node_type(node)

    if kind in FUNCTION_TYPES:
        name = identifier_name(field(node, "id"))
        if name is not None:
            store.add_property(name, FUNCTION_TYPE_NAME, depth)
        if caret_in_block(node, caret):
            # Parameters are one level deeper than the function's name itself.
            for param in parameter_names(field(node, "params")):
                store.add_property(param, None, depth + 1)
    elif kind in CLASS_TYPES:
        name = identifier_name(field(node, "id"))
        if name is not None:
            store.add_property(name, FUNCTION_TYPE_NAME, depth)
    elif kind == NodeType.TRY_STATEMENT.value:
        handler = field(node, "handler")
        if handler is not None and caret_in_block(handler, caret):
            for param in parameter_names([field(handler, "param")]):
                store.add_property(param, None, depth + 1)
    return node


def get_static_scope(tree: Any, caret: Any, store: Optional[TypeStore] = None) -> Optional[TypeStore]:
    """
    Get all the symbols of a script visible from a caret position.

    Args:
        tree: ESTree Program node.
        caret: 0-indexed caret position (anything Caret.coerce accepts).
        store: Store to fill in. A fresh one is used if omitted.

    Returns:
        The filled store, or None if the tree has no statement list.
        Errors raised while walking propagate to the caller.
    """
    caret = Caret.coerce(caret)
    if store is None:
        store = TypeStore()

    node = field(tree, "body")
    if not isinstance(node, list):
        logger.debug(f"Tree has no statement list: {node_type(tree)!r}")
        return None

    stack: List[Tuple[List[Any], int]] = []
    index = 0
    while True:
        deeper = None
        while index < len(node):
            subnode = _unwrap(store, node[index], len(stack))
            index += 1
            if subnode is None:
                continue
            subnode = _declare_bindings(store, subnode, caret, len(stack))
            deeper = nested_nodes(subnode, caret)
            if deeper:
                # We need to go deeper.
                break

        if deeper:
            stack.append((node, index))
            node = deeper
            index = 0
        elif stack:
            node, index = stack.pop()
        else:
            break

    return store
