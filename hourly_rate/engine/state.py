# engine/state.py
from __future__ import annotations

import datetime as dt
from dataclasses import replace
from threading import RLock
from types import MappingProxyType
from typing import Generic, Iterable, List, Mapping, Optional, TypeVar

from loguru import logger

from ..data_model import (
    CalculationResult,
    EquipmentItem,
    FixedCost,
    HistoryEntry,
    IncomeTarget,
    MarketRate,
    OrderedCollection,
    RateInputs,
    ScenarioRecord,
    SocialNet,
    TimeBudget,
)
from ..utils import as_utc, utcnow

T = TypeVar("T")


class SingletonState(Generic[T]):
    """Holds one configuration entity; writes replace it whole."""

    def __init__(self, name: str, initial: Optional[T] = None):
        self.name = name
        self._lock = RLock()
        self._value: Optional[T] = initial

    def get(self) -> Optional[T]:
        return self._value

    def replace(self, value: T) -> None:
        with self._lock:
            self._value = value
        logger.debug(f"Replaced {self.name}: {value}")

    def clear(self) -> None:
        with self._lock:
            self._value = None


class CollectionState(Generic[T]):
    """Ordered collection of identified items (equipment, fixed costs, market rates)."""

    def __init__(self, name: str):
        self.name = name
        self._lock = RLock()
        self._items: OrderedCollection[T] = OrderedCollection()

    def items(self) -> OrderedCollection[T]:
        return self._items

    def get(self, item_id: str) -> Optional[T]:
        return self._items.get(item_id)

    def replace_all(self, items: Iterable[T]) -> OrderedCollection[T]:
        collection = OrderedCollection.from_items(items)
        with self._lock:
            self._items = collection
        logger.debug(f"Replaced {self.name} with {len(collection)} item(s)")
        return collection

    def add(self, item: T) -> T:
        with self._lock:
            self._items = self._items.appended(item)
            stored = self._items.items[-1]
        return stored

    def delete(self, item_id: str) -> bool:
        with self._lock:
            remaining = self._items.without(item_id)
            removed = remaining is not self._items
            self._items = remaining
        if removed:
            logger.debug(f"Deleted {item_id} from {self.name}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._items = OrderedCollection()


class SnapshotState(Generic[T]):
    """Append-only store of immutable snapshots, deletable by id, never updated."""

    def __init__(self, name: str, timestamp_field: str, newest_first: bool = False):
        self.name = name
        self._lock = RLock()
        self._entries: Mapping[str, T] = MappingProxyType({})
        self._timestamp_field = timestamp_field
        self._newest_first = newest_first

    def _sort_key(self, entry: T) -> dt.datetime:
        return getattr(entry, self._timestamp_field)

    def add(self, entry: T) -> T:
        """Store ``entry`` with its timestamp converted to UTC; naive values are taken as UTC."""
        stamp = getattr(entry, self._timestamp_field)
        entry = replace(entry, **{self._timestamp_field: as_utc(stamp)})
        with self._lock:
            if entry.id in self._entries:
                raise ValueError(f"{self.name} already contains {entry.id}")
            updated = dict(self._entries)
            updated[entry.id] = entry
            self._entries = MappingProxyType(updated)
        logger.debug(f"Appended {entry.id} to {self.name}")
        return entry

    def get(self, entry_id: str) -> Optional[T]:
        return self._entries.get(entry_id)

    def all(self) -> List[T]:
        entries = list(self._entries.values())
        return sorted(entries, key=self._sort_key, reverse=self._newest_first)

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            if entry_id not in self._entries:
                return False
            updated = dict(self._entries)
            del updated[entry_id]
            self._entries = MappingProxyType(updated)
        logger.debug(f"Deleted {entry_id} from {self.name}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries = MappingProxyType({})

    def __len__(self) -> int:
        return len(self._entries)


class ScenarioBook(SnapshotState[ScenarioRecord]):
    def __init__(self) -> None:
        super().__init__("scenarios", timestamp_field="created_at", newest_first=True)


class HistoryLedger(SnapshotState[HistoryEntry]):
    """Rate history, oldest entry first."""

    def __init__(self) -> None:
        super().__init__("history", timestamp_field="date")

    def record(
        self,
        result: CalculationResult,
        date: Optional[dt.datetime] = None,
        notes: str = "",
        currency: str = "USD",
    ) -> HistoryEntry:
        entry = HistoryEntry(
            result=result,
            date=as_utc(date) if date else utcnow(),
            currency=currency,
            notes=notes,
        )
        return self.add(entry)

    def entries(self, start: Optional[dt.date] = None, end: Optional[dt.date] = None) -> List[HistoryEntry]:
        """Entries whose calendar date lies in ``[start, end]``; open ends are unbounded."""
        selected = []
        for entry in self.all():
            day = entry.date.date()
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
            selected.append(entry)
        return selected


class RateRepository:
    """All state the rate engine reads from, constructed once and passed around."""

    def __init__(self) -> None:
        self._lock = RLock()
        self.income_target: SingletonState[IncomeTarget] = SingletonState("income_target")
        self.time_budget: SingletonState[TimeBudget] = SingletonState("time_budget")
        self.social_net: SingletonState[SocialNet] = SingletonState("social_net")
        self.equipment: CollectionState[EquipmentItem] = CollectionState("equipment")
        self.fixed_costs: CollectionState[FixedCost] = CollectionState("fixed_costs")
        self.market_rates: CollectionState[MarketRate] = CollectionState("market_rates")
        self.scenarios = ScenarioBook()
        self.history = HistoryLedger()

    def inputs(self) -> RateInputs:
        with self._lock:
            return RateInputs(
                income_target=self.income_target.get(),
                time_budget=self.time_budget.get(),
                equipment=self.equipment.items().items,
                fixed_costs=self.fixed_costs.items().items,
                social_net=self.social_net.get(),
            )

    def load_inputs(self, inputs: RateInputs) -> None:
        """Replace every input entity in one step."""
        with self._lock:
            if inputs.income_target is not None:
                self.income_target.replace(inputs.income_target)
            if inputs.time_budget is not None:
                self.time_budget.replace(inputs.time_budget)
            if inputs.social_net is not None:
                self.social_net.replace(inputs.social_net)
            self.equipment.replace_all(inputs.equipment)
            self.fixed_costs.replace_all(inputs.fixed_costs)

    def reset(self) -> None:
        with self._lock:
            for store in (
                self.income_target,
                self.time_budget,
                self.social_net,
                self.equipment,
                self.fixed_costs,
                self.market_rates,
                self.scenarios,
                self.history,
            ):
                store.clear()
        logger.info("Repository reset")
