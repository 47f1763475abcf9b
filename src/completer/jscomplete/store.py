"""
JSCOMPLETE - Symbol Store Module

Contains: TypeStore

A TypeStore maps symbol names to what we know about them: how relevant they
are, which constructor produced them, and their own properties (again a
TypeStore). The root store stands for the global scope.

Copyright (c) 2026 Provimedia GmbH
Licensed under the Polyform Noncommercial License 1.0.0
See LICENSE file in the project root for full license information.
"""

from typing import Any, Dict, Iterator, Optional

from .config import DEFAULT_TYPE_NAME


class TypeStore:
    """
    Node of the symbol tree.

    Attributes:
        weight: Relevance of the symbol. Starts at the lexical depth where it
            was first seen and grows by one each time it is seen again.
        type: Name of the constructor the value was built with.
        func: If true, `type` names the function whose call returned the
            value rather than a constructor.
        properties: Child stores keyed by property name.
    """

    __slots__ = ("weight", "type", "func", "properties")

    def __init__(
        self,
        type: Optional[str] = None,
        weight: Optional[int] = None,
        func: bool = False,
    ):
        self.properties: Dict[str, "TypeStore"] = {}
        self.type = type or DEFAULT_TYPE_NAME
        self.weight = weight or 0
        self.func = bool(func)

    def add_property(
        self,
        symbol: str,
        type: Optional[str] = None,
        weight: Optional[int] = None,
        func: bool = False,
    ) -> None:
        """
        Record that `symbol` exists in this store.

        A new symbol gets the given type and weight. A known symbol only gets
        its weight bumped: the first writer decides the type.
        """
        existing = self.properties.get(symbol)
        if existing is None:
            self.properties[symbol] = TypeStore(type, weight, func)
        else:
            # The weight is proportional to the frequency.
            existing.weight += 1

    def get(self, symbol: str) -> Optional["TypeStore"]:
        """Return the child store for `symbol`, or None."""
        return self.properties.get(symbol)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self.properties

    def __len__(self) -> int:
        return len(self.properties)

    def __iter__(self) -> Iterator[str]:
        return iter(self.properties)

    def items(self):
        return self.properties.items()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weight": self.weight,
            "type": self.type,
            "func": self.func,
            "properties": {
                name: child.to_dict() for name, child in self.properties.items()
            },
        }

    def __repr__(self) -> str:
        return (
            f"TypeStore(type={self.type!r}, weight={self.weight}, "
            f"func={self.func}, properties={list(self.properties)})"
        )
