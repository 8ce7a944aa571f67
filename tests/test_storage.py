from __future__ import annotations

import sqlite3

import pytest

from cmxpush.exceptions import CmxConfigError, CmxStorageError
from cmxpush.models.client import ClientRecord
from cmxpush.storage import MemoryClientStore, SqliteClientStore, open_store


def _record(mac: str = "aa:bb:cc:dd:ee:ff", epoch: int = 1000, **fields) -> ClientRecord:
    return ClientRecord(device_mac=mac, seen_at_epoch=epoch, **fields)


@pytest.fixture(params=["memory", "sqlite-memory", "sqlite-file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryClientStore()
    if request.param == "sqlite-memory":
        return SqliteClientStore(":memory:")
    return SqliteClientStore(str(tmp_path / "clients.db"))


@pytest.mark.asyncio
async def test_get_unknown_returns_none(store) -> None:
    await store.initialize()
    assert await store.get("nope") is None
    await store.close()


@pytest.mark.asyncio
async def test_insert_assigns_id_and_round_trips_fields(store) -> None:
    await store.initialize()
    record = _record(
        seen_at_display="2014-05-15T15:48:14Z",
        latitude=37.77,
        longitude=-122.38,
        uncertainty_radius=11.4,
        manufacturer="Meraki",
        operating_system="Linux",
        network_name="Cisco WiFi",
        floor_labels="5th Floor",
    )

    stored = await store.save_if_newer(record)

    assert stored is not None
    assert stored.id is not None
    assert stored == record.model_copy(update={"id": stored.id})
    assert await store.get(record.device_mac) == stored
    await store.close()


@pytest.mark.asyncio
async def test_conditional_write_rejects_equal_or_older(store) -> None:
    await store.initialize()
    first = await store.save_if_newer(_record(epoch=1000, latitude=1.0))

    assert await store.save_if_newer(_record(epoch=1000, latitude=2.0)) is None
    assert await store.save_if_newer(_record(epoch=999, latitude=3.0)) is None
    assert await store.get("aa:bb:cc:dd:ee:ff") == first

    newer = await store.save_if_newer(_record(epoch=1001, latitude=4.0))
    assert newer is not None and first is not None
    assert newer.id == first.id
    assert newer.latitude == 4.0
    await store.close()


@pytest.mark.asyncio
async def test_one_record_per_mac(store) -> None:
    await store.initialize()
    a = await store.save_if_newer(_record(mac="a", epoch=1))
    b = await store.save_if_newer(_record(mac="b", epoch=1))
    await store.save_if_newer(_record(mac="a", epoch=2))

    assert a is not None and b is not None
    assert a.id != b.id
    assert [r.device_mac for r in await store.seen_since(0)] == ["a", "b"]
    await store.close()


@pytest.mark.asyncio
async def test_seen_since_is_strict(store) -> None:
    await store.initialize()
    await store.save_if_newer(_record(mac="old", epoch=699))
    await store.save_if_newer(_record(mac="edge", epoch=700))
    await store.save_if_newer(_record(mac="new", epoch=701))

    assert [r.device_mac for r in await store.seen_since(700)] == ["new"]
    await store.close()


@pytest.mark.asyncio
async def test_sqlite_initialize_is_idempotent_and_persists(tmp_path) -> None:
    path = str(tmp_path / "clients.db")
    store = SqliteClientStore(path)
    await store.initialize()
    await store.save_if_newer(_record())
    await store.close()

    reopened = SqliteClientStore(path)
    await reopened.initialize()
    record = await reopened.get("aa:bb:cc:dd:ee:ff")
    await reopened.close()

    assert record is not None
    assert record.seen_at_epoch == 1000
    with sqlite3.connect(path) as conn:
        assert conn.execute("SELECT version FROM schema_version").fetchall() == [(1,)]


@pytest.mark.asyncio
async def test_sqlite_errors_are_wrapped(tmp_path) -> None:
    store = SqliteClientStore(str(tmp_path / "missing-dir" / "clients.db"))
    with pytest.raises(CmxStorageError) as excinfo:
        await store.initialize()
    assert excinfo.value.operation == "initialize"
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)


def test_open_store_schemes(tmp_path) -> None:
    assert isinstance(open_store("memory://"), MemoryClientStore)

    in_memory = open_store("sqlite://")
    assert isinstance(in_memory, SqliteClientStore)
    assert in_memory.db_path == ":memory:"
    assert open_store("sqlite:///:memory:").db_path == ":memory:"  # type: ignore[attr-defined]
    assert open_store("sqlite:///clients.db").db_path == "clients.db"  # type: ignore[attr-defined]
    assert open_store(f"sqlite:///{tmp_path}/c.db").db_path == f"{tmp_path}/c.db"  # type: ignore[attr-defined]


def test_open_store_rejects_unknown_scheme() -> None:
    with pytest.raises(CmxConfigError):
        open_store("postgres://localhost/db")


@pytest.mark.asyncio
async def test_sqlite_integer_overflow_is_wrapped() -> None:
    store = SqliteClientStore(":memory:")
    await store.initialize()

    with pytest.raises(CmxStorageError) as excinfo:
        await store.save_if_newer(_record(epoch=2**70))

    assert excinfo.value.operation == "save"
    assert isinstance(excinfo.value.__cause__, OverflowError)
    await store.close()
