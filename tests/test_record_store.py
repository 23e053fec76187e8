"""Tests for the record store."""

import asyncio
import json
from datetime import timedelta

import pytest

from footprints.domain.errors import StorageError, ValidationError
from footprints.domain.records import Coordinates, RecordDraft
from footprints.services.records import RecordStore
from tests.conftest import PARK, PARK_ADDRESS, InMemoryBlobStorage, SteppingClock


def _draft(name: str = "Park", photo_ref: str | None = "file:///a.jpg") -> RecordDraft:
    return RecordDraft(
        coords=PARK, address=PARK_ADDRESS, name=name, photo_ref=photo_ref
    )


def test_load_returns_empty_list_when_nothing_persisted(store: RecordStore) -> None:
    assert asyncio.run(store.load()) == []


def test_create_prepends_newest_first(store: RecordStore) -> None:
    async def scenario() -> list[str]:
        await store.create(_draft("A"))
        await store.create(_draft("B"))
        records = await store.load()
        return [record.name for record in records]

    assert asyncio.run(scenario()) == ["B", "A"]


def test_back_to_back_creates_get_distinct_increasing_ids(
    store: RecordStore,
) -> None:
    async def scenario():
        await store.create(_draft("first"))
        return await store.create(_draft("second"))

    records = asyncio.run(scenario())

    newer, older = records
    assert newer.id != older.id
    assert int(newer.id) > int(older.id)
    assert newer.created_at == older.created_at


def test_ids_stay_above_persisted_ids_after_clock_moves_back(
    storage: InMemoryBlobStorage,
) -> None:
    clock = SteppingClock()
    first = RecordStore(storage, clock=clock)
    created = asyncio.run(first.create(_draft()))

    clock.now = clock.now - timedelta(days=1)
    second = RecordStore(storage, clock=clock)
    records = asyncio.run(second.create(_draft("later")))

    assert int(records[0].id) == int(created[0].id) + 1


def test_reload_round_trip_preserves_fields(storage: InMemoryBlobStorage) -> None:
    asyncio.run(RecordStore(storage).create(_draft()))

    reloaded = asyncio.run(RecordStore(storage).load())

    assert len(reloaded) == 1
    record = reloaded[0]
    assert record.id
    assert record.created_at is not None
    assert record.coords == PARK
    assert record.address == PARK_ADDRESS
    assert record.name == "Park"
    assert record.photo_ref == "file:///a.jpg"


def test_delete_is_idempotent(store: RecordStore, storage) -> None:
    async def scenario():
        records = await store.create(_draft("keep"))
        records = await store.create(_draft("drop"))
        target = records[0].id
        once = await store.delete(target)
        writes = storage.writes
        twice = await store.delete(target)
        return once, twice, writes

    once, twice, writes_after_first = asyncio.run(scenario())

    assert once == twice
    assert [record.name for record in twice] == ["keep"]
    assert storage.writes == writes_after_first


def test_update_name_keeps_photo(store: RecordStore) -> None:
    async def scenario():
        records = await store.create(_draft("Park"))
        await store.update_field(records[0].id, "name", "Picnic")
        return await store.load()

    record = asyncio.run(scenario())[0]

    assert record.name == "Picnic"
    assert record.photo_ref == "file:///a.jpg"


def test_update_photo_keeps_name(store: RecordStore) -> None:
    async def scenario():
        records = await store.create(_draft("Park"))
        return await store.update_photo(records[0].id, "file:///b.jpg")

    record = asyncio.run(scenario())[0]

    assert record.photo_ref == "file:///b.jpg"
    assert record.name == "Park"


def test_update_unknown_id_returns_collection_unchanged(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    async def scenario():
        before = await store.create(_draft())
        after = await store.update_theme("missing", "New name")
        return before, after

    before, after = asyncio.run(scenario())

    assert before == after
    assert storage.writes == 1


def test_empty_theme_is_rejected_without_mutation(store: RecordStore) -> None:
    records = asyncio.run(store.create(_draft("Park")))

    with pytest.raises(ValidationError):
        asyncio.run(store.update_theme(records[0].id, "   "))

    assert asyncio.run(store.load())[0].name == "Park"


def test_create_rejects_empty_name(store: RecordStore) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(store.create(_draft("")))


def test_unknown_field_is_rejected(store: RecordStore) -> None:
    with pytest.raises(ValueError):
        asyncio.run(store.update_field("1", "coords", "x"))  # type: ignore[arg-type]


def test_concurrent_creates_are_all_persisted(store: RecordStore) -> None:
    async def scenario():
        await asyncio.gather(*(store.create(_draft(f"n{i}")) for i in range(10)))
        return await store.load()

    records = asyncio.run(scenario())

    assert len(records) == 10
    assert len({record.id for record in records}) == 10
    ids = [int(record.id) for record in records]
    assert ids == sorted(ids, reverse=True)


def test_concurrent_mixed_mutations_do_not_lose_updates(store: RecordStore) -> None:
    async def scenario():
        seeded = await store.create(_draft("seed"))
        seed_id = seeded[0].id
        await asyncio.gather(
            store.update_theme(seed_id, "renamed"),
            store.create(_draft("other")),
            store.update_photo(seed_id, "file:///new.jpg"),
        )
        return await store.load()

    records = asyncio.run(scenario())

    by_name = {record.name: record for record in records}
    assert set(by_name) == {"renamed", "other"}
    assert by_name["renamed"].photo_ref == "file:///new.jpg"


def test_write_failure_preserves_in_memory_view(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    asyncio.run(store.create(_draft("Park")))
    before = store.records
    storage.fail_writes = True

    with pytest.raises(StorageError):
        asyncio.run(store.create(_draft("Lost")))

    assert store.records == before
    storage.fail_writes = False
    assert [record.name for record in asyncio.run(store.load())] == ["Park"]


def test_read_failure_raises_storage_error(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    storage.fail_reads = True

    with pytest.raises(StorageError):
        asyncio.run(store.load())


def test_corrupt_data_raises_storage_error(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    storage.items["shareListData"] = "{not json"

    with pytest.raises(StorageError):
        asyncio.run(store.load())


def test_records_property_tracks_last_load(store: RecordStore) -> None:
    asyncio.run(store.create(_draft("Park")))

    assert [record.name for record in store.records] == ["Park"]
    assert store.records is not store.records


def test_coordinates_label_uses_six_decimals() -> None:
    assert Coordinates(1.5, -2.25).label() == "1.500000, -2.250000"


def _legacy_entry(record_id: str, name: str) -> dict[str, object]:
    return {
        "id": record_id,
        "coords": {"latitude": 1.0, "longitude": 2.0, "altitude": 12.5, "accuracy": 5},
        "address": {"street": "A", "city": "B", "formattedAddress": "A, B"},
        "timestamp": "2024-05-01T12:00:00.000Z",
        "name": name,
        "photo": "file:///legacy.jpg",
    }


def test_blank_legacy_theme_keeps_store_usable(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    storage.items["shareListData"] = json.dumps(
        [_legacy_entry("2", ""), _legacy_entry("1", "Beach")]
    )

    async def scenario():
        loaded = await store.load()
        await store.create(_draft("Park"))
        await store.update_theme("2", "Named later")
        return loaded, await store.load()

    loaded, reloaded = asyncio.run(scenario())

    assert [record.name for record in loaded] == ["", "Beach"]
    assert [record.name for record in reloaded] == ["Park", "Named later", "Beach"]


def test_legacy_device_fields_survive_update_of_another_record(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    storage.items["shareListData"] = json.dumps(
        [_legacy_entry("2", "Park"), _legacy_entry("1", "Beach")]
    )

    asyncio.run(store.update_theme("2", "Picnic"))

    stored = json.loads(storage.items["shareListData"])
    untouched = stored[1]
    assert untouched["coords"] == {
        "latitude": 1.0,
        "longitude": 2.0,
        "altitude": 12.5,
        "accuracy": 5,
    }
    assert untouched["address"]["formattedAddress"] == "A, B"
    assert stored[0]["name"] == "Picnic"
    assert stored[0]["coords"]["altitude"] == 12.5


def test_non_decimal_stored_id_does_not_break_creation(
    store: RecordStore, storage: InMemoryBlobStorage
) -> None:
    storage.items["shareListData"] = json.dumps([_legacy_entry("²", "Odd")])

    records = asyncio.run(store.create(_draft("Park")))

    assert [record.name for record in records] == ["Park", "Odd"]
    assert records[0].id.isdecimal()
