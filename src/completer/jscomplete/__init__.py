"""
JSCOMPLETE - Static analysis for JavaScript autocompletion

Builds a tree of known symbols from a script's syntax tree as seen from the
caret, and answers completion requests against it.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from .cache import StaticCache, UpdateStatus, complete, static_cache, update_static_cache
from .completion import Candidate, Completing, Completion, CompletionContext, static_analysis
from .config import VERSION
from .inference import type_from_member, type_from_object
from .parser import JavaScriptSyntaxError, TreeSitterParser, parse
from .scope import Caret, caret_in_block, get_static_scope, nested_nodes
from .store import TypeStore

__version__ = VERSION

__all__ = [
    "Candidate",
    "Caret",
    "Completing",
    "Completion",
    "CompletionContext",
    "JavaScriptSyntaxError",
    "StaticCache",
    "TreeSitterParser",
    "TypeStore",
    "UpdateStatus",
    "caret_in_block",
    "complete",
    "get_static_scope",
    "nested_nodes",
    "parse",
    "static_analysis",
    "static_cache",
    "type_from_member",
    "type_from_object",
    "update_static_cache",
]
