"""
JSCOMPLETE - Completion Module

Contains: Completing, CompletionContext, Candidate, Completion, static_analysis

Answers completion requests against a TypeStore built by the scope walker.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .config import PROTOTYPE_PROPERTY
from .store import TypeStore


class Completing(str, Enum):
    """What the token under the caret is."""
    IDENTIFIER = "identifier"
    PROPERTY = "property"


@dataclass
class CompletionContext:
    """
    A completion request.

    `data` is the dotted path typed so far. For identifiers the last item is
    the partial name (`a.b` -> ["a", "b"]); for properties the path names the
    receiver (`a.b.` -> ["a", "b"]).
    """
    completing: Completing
    data: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.completing = Completing(self.completing)


@dataclass
class Candidate:
    """One suggestion: the full name and what to append to the typed text."""
    display: str
    insertion_suffix: str
    weight: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display": self.display,
            "insertion_suffix": self.insertion_suffix,
            "weight": self.weight,
        }


class Completion:
    """Candidates in the order they were found."""

    def __init__(self):
        self.candidates: List[Candidate] = []

    def insert(self, candidate: Candidate) -> None:
        self.candidates.append(candidate)

    def names(self) -> List[str]:
        return [c.display for c in self.candidates]

    def by_weight(self) -> List[Candidate]:
        """Candidates sorted by weight, highest first, ties in found order."""
        return sorted(self.candidates, key=lambda c: -c.weight)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)

    def to_dict(self) -> Dict[str, Any]:
        return {"candidates": [c.to_dict() for c in self.candidates]}


def _collect(completion: Completion, store: TypeStore, prefix: str) -> None:
    """Add every property of `store` that extends `prefix`."""
    for display, child in store.items():
        # The candidate must match and have something to add!
        if display.startswith(prefix) and len(display) > len(prefix):
            completion.insert(Candidate(display, display[len(prefix):], child.weight))


def static_analysis(context: CompletionContext, store: Optional[TypeStore]) -> Optional[Completion]:
    """
    Find the candidates for a completion request.

    Args:
        context: What is being completed.
        store: Root of the symbol tree, usually the cached one.

    Returns:
        A Completion, possibly empty, or None when the path in the request
        does not exist in the store.
    """
    if store is None:
        return None

    completion = Completion()
    data = context.data
    if not data:
        return completion

    if context.completing is Completing.IDENTIFIER and len(data) == 1:
        _collect(completion, store, data[0])
        return completion

    root = store
    for symbol in data[:-1]:
        store = store.get(symbol)
        if store is None:
            return None

    prefix = data[-1]
    if context.completing is Completing.PROPERTY:
        store = store.get(prefix)
        if store is None:
            return None
        prefix = ""  # Any property matches.
    _collect(completion, store, prefix)

    # Seek data from its type.
    if store.type:
        constructor = root.get(store.type)
        prototype = constructor.get(PROTOTYPE_PROPERTY) if constructor is not None else None
        if prototype is not None:
            _collect(completion, prototype, prefix)
    return completion
