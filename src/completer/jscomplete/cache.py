"""
JSCOMPLETE - Cache Module

Contains: UpdateStatus, StaticCache, static_cache, update_static_cache

StaticCache owns the last symbol store that was built successfully. Updates
swap in a new store only when parsing and walking both worked; on failure the
previous store stays, since stale candidates beat no candidates.

There is one writer at a time: updates are expected to be serialised by the
host (one editor session, one event loop). Overlapping callback-style or
async updates race and the last one to finish wins.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

import asyncio
import functools
import inspect
from enum import Enum
from typing import Any, Callable, List, Optional

from .completion import CompletionContext, Completion, static_analysis
from .config import PARSE_OPTIONS, logger
from .parser import parse as default_parse
from .scope import Caret, get_static_scope
from .store import TypeStore


class UpdateStatus(str, Enum):
    """Outcome of a cache update."""
    UPDATED = "updated"      # New store in place
    UNCHANGED = "unchanged"  # Walk produced nothing, previous store kept
    PENDING = "pending"      # Callback-style parser has not answered yet
    FAILED = "failed"        # Parse or walk error, previous store kept


def _is_async_callable(func: Any) -> bool:
    """Whether calling `func` gives a coroutine, including `async def __call__`."""
    return (
        inspect.iscoroutinefunction(func)
        or inspect.iscoroutinefunction(getattr(func, "__call__", None))
    )


class StaticCache:
    """
    Holder of the symbol store used to answer completion requests.

    Args:
        parse: Parser used when `update` is not given one. Defaults to the
            tree-sitter based ESTree parser.
    """

    def __init__(self, parse: Optional[Callable[..., Any]] = None):
        self._parse = parse or default_parse
        self._candidates: Optional[TypeStore] = None

    @property
    def candidates(self) -> Optional[TypeStore]:
        return self._candidates

    def get(self) -> Optional[TypeStore]:
        """Current symbol store, or None if no update has succeeded yet."""
        return self._candidates

    def clear(self):
        self._candidates = None

    def complete(self, context: CompletionContext) -> Optional[Completion]:
        """Answer a completion request from the current store."""
        return static_analysis(context, self._candidates)

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------
    def _apply(self, tree: Any, caret: Caret, store: TypeStore) -> UpdateStatus:
        """Walk the tree and swap in the result. Never raises."""
        try:
            result = get_static_scope(tree, caret, store)
        except Exception as e:
            logger.error(f"Static scope walk failed: {e}")
            return UpdateStatus.FAILED

        if result is None:
            logger.debug("Static scope walk gave nothing, keeping previous candidates")
            return UpdateStatus.UNCHANGED
        # If it fails, use the previous version.
        self._candidates = result
        return UpdateStatus.UPDATED

    def update(
        self,
        source: str,
        caret: Any,
        store: Optional[TypeStore] = None,
        parse: Optional[Callable[..., Any]] = None,
        parser_continuation: bool = False,
    ) -> UpdateStatus:
        """
        Rebuild the symbol store for `source` as seen from `caret`.

        Args:
            source: The JS script to parse.
            caret: 0-indexed line and column from which we want the scope.
            store: Store to fill in, to avoid allocation. Fresh if omitted.
            parse: A parser following the ESTree / SpiderMonkey Parser API.
            parser_continuation: If true, the parser takes a callback that
                receives the tree, and the swap happens in that callback.

        Returns:
            The UpdateStatus. Never raises.
        """
        parse = parse or self._parse
        if store is None:
            store = TypeStore()

        outcome: List[UpdateStatus] = []
        try:
            caret = Caret.coerce(caret)
            if parser_continuation:
                def on_tree(tree):
                    outcome.append(self._apply(tree, caret, store))

                parse(source, dict(PARSE_OPTIONS), on_tree)
                return outcome[-1] if outcome else UpdateStatus.PENDING

            tree = parse(source, dict(PARSE_OPTIONS))
        except Exception as e:
            logger.warning(f"Static cache update failed: {e}")
            if outcome:
                # The tree was delivered before the parser raised.
                return outcome[-1]
            return UpdateStatus.FAILED

        return self._apply(tree, caret, store)

    async def update_async(
        self,
        source: str,
        caret: Any,
        store: Optional[TypeStore] = None,
        parse: Optional[Callable[..., Any]] = None,
    ) -> UpdateStatus:
        """
        Like `update`, for use from an event loop.

        A coroutine parser is awaited; a plain parser runs in
        the default executor, and whatever awaitable it returns is awaited.
        The walk and the swap happen on the loop.
        """
        parse = parse or self._parse
        if store is None:
            store = TypeStore()

        try:
            caret = Caret.coerce(caret)
            if _is_async_callable(parse):
                tree = await parse(source, dict(PARSE_OPTIONS))
            else:
                loop = asyncio.get_running_loop()
                tree = await loop.run_in_executor(
                    None, functools.partial(parse, source, dict(PARSE_OPTIONS))
                )
            if inspect.isawaitable(tree):
                # A plain callable that hands back a coroutine or future.
                tree = await tree
        except Exception as e:
            logger.warning(f"Static cache update failed: {e}")
            return UpdateStatus.FAILED

        return self._apply(tree, caret, store)


# =============================================================================
# Global Instance
# =============================================================================

static_cache = StaticCache()


def update_static_cache(source: str, caret: Any, **options: Any) -> UpdateStatus:
    """Update the module-wide cache. See StaticCache.update for options."""
    return static_cache.update(source, caret, **options)


def complete(context: CompletionContext) -> Optional[Completion]:
    """Answer a completion request from the module-wide cache."""
    return static_cache.complete(context)
