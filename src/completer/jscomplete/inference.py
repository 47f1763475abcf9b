"""
JSCOMPLETE - Type Inference Module

Contains: type_from_member, type_from_object

Both helpers put what a syntax fragment tells us into a TypeStore. They never
fail on odd input: whatever part of the fragment can be named is recorded,
the rest is ignored.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from typing import Any, List, Optional, Sequence

from .config import THIS_SYMBOL, logger
from .estree import NodeType, field, identifier_name, is_type, key_name
from .store import TypeStore


def _member_property_name(node: Any) -> Optional[str]:
    """Name of the property accessed by a MemberExpression."""
    prop = field(node, "property")
    if field(node, "computed"):
        # a["b"] names b; a[i] names nothing we know statically.
        if is_type(prop, NodeType.LITERAL):
            return key_name(prop)
        return None
    return identifier_name(prop) or key_name(prop)


def member_symbols(node: Any) -> List[str]:
    """
    Decompose a member chain into symbol names, outermost first.

    `a.b.c` gives ["a", "b", "c"], `this.x` gives ["this", "x"]. A receiver
    that is neither an identifier nor `this` is dropped; an unnamed computed
    access cuts the chain there, keeping the part before it.
    """
    symbols: List[str] = []
    while is_type(node, NodeType.MEMBER_EXPRESSION):
        name = _member_property_name(node)
        if name is None:
            # Everything to the right of this access is unreachable.
            symbols = []
        else:
            symbols.append(name)
        node = field(node, "object")

    if is_type(node, NodeType.THIS):
        symbols.append(THIS_SYMBOL)
    else:
        name = identifier_name(node)
        if name is not None:
            symbols.append(name)
        else:
            # The receiver is a call result or a literal: nothing to anchor
            # the chain on.
            return []

    symbols.reverse()
    return symbols


def type_from_member(store: TypeStore, node: Any) -> List[str]:
    """
    Make sure every step of a member chain exists in the store.

    Args:
        store: Root store to insert into.
        node: A MemberExpression node.

    Returns:
        The chain's symbol names, outermost first.
    """
    symbols = member_symbols(node)
    for symbol in symbols:
        store.add_property(symbol)
        store = store.properties[symbol]
    return symbols


def type_from_object(store: TypeStore, symbols: Sequence[str], node: Any) -> TypeStore:
    """
    Add the keys of an object literal under the path `symbols`.

    Missing nodes along the path are created. Only the literal's own keys are
    added; nested literals in its values are not indexed.

    Returns:
        The store the keys were added to.
    """
    substore = store
    for symbol in symbols:
        next_substore = substore.get(symbol)
        if next_substore is None:
            substore.add_property(symbol)
            next_substore = substore.properties[symbol]
        substore = next_substore

    for prop in field(node, "properties") or []:
        if not is_type(prop, NodeType.PROPERTY):
            continue
        key = field(prop, "key")
        if field(prop, "computed") and not is_type(key, NodeType.LITERAL):
            continue
        name = key_name(key)
        if name is None:
            logger.debug(f"Skipping object key without a static name: {key!r}")
            continue
        substore.add_property(name)
    return substore
