import datetime as dt
import threading

import pytest

from hourly_rate.data_model import EMPTY_RESULT, CalculationResult, FixedCost, HistoryEntry, IncomeTarget, ScenarioRecord
from hourly_rate.engine import CollectionState, HistoryLedger, RateRepository, ScenarioBook, calculate

UTC = dt.timezone.utc


def _result(rate: float) -> CalculationResult:
    return CalculationResult(hourly_rate=rate, annual_billable_hours=1440.0, net_income_component=rate * 100)


def test_repository_inputs_reflect_stored_entities(repository, full_inputs):
    inputs = repository.inputs()

    assert inputs.income_target == full_inputs.income_target
    assert [item.name for item in inputs.equipment] == ["Laptop", "Chair"]
    assert [item.sort_order for item in inputs.fixed_costs] == [0, 1]
    assert calculate(inputs).hourly_rate == pytest.approx(calculate(full_inputs).hourly_rate)


def test_reset_clears_everything(repository):
    repository.history.record(_result(30.0))
    repository.reset()

    assert repository.inputs().income_target is None
    assert len(repository.equipment.items()) == 0
    assert repository.history.all() == []
    assert calculate(repository.inputs()) == EMPTY_RESULT


def test_collection_keeps_ids_and_restamps_order():
    store = CollectionState("fixed_costs")
    rent = FixedCost(name="Rent", amount=250.0, id="rent")
    phone = FixedCost(name="Phone", amount=30.0, id="phone")
    store.replace_all([rent, phone])

    added = store.add(FixedCost(name="Gym", amount=40.0, id="gym", sort_order=99))
    assert added.sort_order == 2

    assert store.delete("rent") is True
    assert store.items().ids() == ["phone", "gym"]
    assert [item.sort_order for item in store.items()] == [0, 1]
    assert store.get("phone").amount == 30.0


def test_collection_rejects_duplicate_ids():
    store = CollectionState("fixed_costs")
    with pytest.raises(ValueError):
        store.replace_all([FixedCost(name="A", amount=1.0, id="x"), FixedCost(name="B", amount=2.0, id="x")])
    assert len(store.items()) == 0


def test_history_delete_is_exact_and_idempotent():
    ledger = HistoryLedger()
    first = ledger.record(_result(25.0), date=dt.datetime(2025, 1, 10, tzinfo=UTC))
    second = ledger.record(_result(27.0), date=dt.datetime(2025, 2, 10, tzinfo=UTC))
    third = ledger.record(_result(29.0), date=dt.datetime(2025, 3, 10, tzinfo=UTC))
    before = {entry.id: entry.to_dict() for entry in ledger.all()}

    assert ledger.delete(second.id) is True
    assert ledger.delete(second.id) is False

    after = {entry.id: entry.to_dict() for entry in ledger.all()}
    assert list(after) == [first.id, third.id]
    assert after[first.id] == before[first.id]
    assert after[third.id] == before[third.id]


def test_history_range_is_inclusive_by_calendar_date():
    ledger = HistoryLedger()
    for day in (1, 15, 28):
        ledger.record(_result(float(day)), date=dt.datetime(2025, 2, day, 18, 0, tzinfo=UTC))

    selected = ledger.entries(start=dt.date(2025, 2, 15), end=dt.date(2025, 2, 28))
    assert [entry.hourly_rate for entry in selected] == [15.0, 28.0]
    assert [entry.hourly_rate for entry in ledger.entries(end=dt.date(2025, 2, 1))] == [1.0]


def test_history_snapshot_survives_input_changes(repository):
    entry = repository.history.record(calculate(repository.inputs()))
    repository.income_target.replace(IncomeTarget(net_income=9000.0))

    stored = repository.history.get(entry.id)
    assert stored.hourly_rate == entry.hourly_rate
    assert calculate(repository.inputs()).hourly_rate > stored.hourly_rate


def test_history_entry_dict_round_trip():
    entry = HistoryEntry(result=_result(31.5), date=dt.datetime(2025, 5, 2, tzinfo=UTC), currency="EUR", notes="Q2")

    assert HistoryEntry.from_dict(entry.to_dict()) == entry


def test_scenarios_are_listed_newest_first():
    book = ScenarioBook()
    older = book.add(ScenarioRecord(name="A", created_at=dt.datetime(2025, 1, 1, tzinfo=UTC)))
    newer = book.add(ScenarioRecord(name="B", created_at=dt.datetime(2025, 6, 1, tzinfo=UTC)))

    assert [record.id for record in book.all()] == [newer.id, older.id]
    with pytest.raises(ValueError):
        book.add(older)
    assert book.delete("missing") is False
    assert len(book) == 2


def test_concurrent_replace_is_atomic_for_readers():
    store = CollectionState("fixed_costs")
    small = [FixedCost(name=f"s{i}", amount=1.0, id=f"s{i}") for i in range(3)]
    large = [FixedCost(name=f"l{i}", amount=2.0, id=f"l{i}") for i in range(50)]
    store.replace_all(small)
    seen = set()
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            snapshot = store.items()
            seen.add((len(snapshot), frozenset(item.amount for item in snapshot)))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for i in range(200):
        store.replace_all(large if i % 2 else small)
    stop.set()
    for thread in threads:
        thread.join()

    assert seen <= {(3, frozenset({1.0})), (50, frozenset({2.0}))}


def test_scenario_delete_is_exact_and_idempotent():
    book = ScenarioBook()
    first = book.add(ScenarioRecord(name="A", hours_per_week=40, created_at=dt.datetime(2025, 1, 1, tzinfo=UTC)))
    second = book.add(ScenarioRecord(name="B", hours_per_week=32, created_at=dt.datetime(2025, 2, 1, tzinfo=UTC)))
    third = book.add(ScenarioRecord(name="C", hours_per_week=24, created_at=dt.datetime(2025, 3, 1, tzinfo=UTC)))
    before = {record.id: record.to_dict() for record in book.all()}

    assert book.delete(second.id) is True
    assert book.delete(second.id) is False

    after = {record.id: record.to_dict() for record in book.all()}
    assert list(after) == [third.id, first.id]
    assert after[first.id] == before[first.id]
    assert after[third.id] == before[third.id]


def test_snapshots_with_naive_timestamps_are_stored_as_utc():
    ledger = HistoryLedger()
    naive = ledger.add(HistoryEntry(result=_result(20.0), date=dt.datetime(2025, 4, 2, 9, 0)))
    ledger.record(_result(18.0), date=dt.datetime(2025, 4, 1, 9, 0, tzinfo=UTC))

    assert naive.date.tzinfo is not None
    assert [entry.hourly_rate for entry in ledger.all()] == [18.0, 20.0]
    assert [e.hourly_rate for e in ledger.entries(start=dt.date(2025, 4, 2))] == [20.0]

    book = ScenarioBook()
    book.add(ScenarioRecord(name="naive", created_at=dt.datetime(2025, 5, 1)))
    book.add(ScenarioRecord(name="aware", created_at=dt.datetime(2025, 4, 1, tzinfo=UTC)))
    assert [record.name for record in book.all()] == ["naive", "aware"]
