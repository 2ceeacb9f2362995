from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, Iterable, Iterator, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class OrderedCollection(Generic[T]):
    """Immutable sequence of items keyed by their ``id``.

    Display order is the ``sort_order`` stamped on each item, which always
    equals its position. Every operation returns a new collection.
    """

    items: Tuple[T, ...] = ()

    @classmethod
    def from_items(cls, items: Iterable[T]) -> "OrderedCollection[T]":
        stamped = []
        seen: set[str] = set()
        for item in items:
            if item.id in seen:
                raise ValueError(f"Duplicate identifier in collection: {item.id}")
            seen.add(item.id)
            stamped.append(replace(item, sort_order=len(stamped)))
        return cls(tuple(stamped))

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    def get(self, item_id: str) -> T | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def appended(self, item: T) -> "OrderedCollection[T]":
        return OrderedCollection.from_items([*self.items, item])

    def without(self, item_id: str) -> "OrderedCollection[T]":
        if self.get(item_id) is None:
            return self
        return OrderedCollection.from_items(item for item in self.items if item.id != item_id)
