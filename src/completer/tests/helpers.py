"""
Shared helpers for jscomplete tests.

Hand-built ESTree nodes, caret arithmetic and the tree-sitter skip marker.
"""

import pytest

from jscomplete.parser import TreeSitterParser

# Integration tests (require tree-sitter-javascript)
requires_tree_sitter = pytest.mark.skipif(
    not TreeSitterParser.is_available(),
    reason="Requires tree-sitter and tree-sitter-javascript packages",
)


def caret_after(source: str, needle: str):
    """0-indexed (line, column) right after the first occurrence of needle."""
    index = source.index(needle) + len(needle)
    line = source.count("\n", 0, index)
    column = index - (source.rfind("\n", 0, index) + 1)
    return (line, column)


def loc(start_line: int, start_column: int, end_line: int, end_column: int):
    """ESTree location, 1-indexed lines like a parser produces."""
    return {
        "start": {"line": start_line, "column": start_column},
        "end": {"line": end_line, "column": end_column},
    }


def ident(name: str):
    return {"type": "Identifier", "name": name}


def member(obj, prop: str):
    return {"type": "MemberExpression", "object": obj, "property": ident(prop), "computed": False}
