"""Simple name -> object registry used for engine tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable


@dataclass
class Registry:
    _items: Dict[str, Any] = field(default_factory=dict)
    _frozen: bool = False

    def register(self, name: str, obj: Any) -> None:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen, cannot register '{name}'")
        if name in self._items:
            raise KeyError(f"Registry already contains '{name}'")
        self._items[name] = obj

    def get(self, name: str) -> Any:
        if name not in self._items:
            raise KeyError(f"Registry missing '{name}'")
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def freeze(self) -> "Registry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def list(self) -> Iterable[str]:
        return tuple(self._items.keys())

    def items(self) -> Dict[str, Any]:
        return dict(self._items)
