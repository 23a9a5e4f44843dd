import pytest
from pathlib import Path

from tagcache.domain.models.common import CacheStorageType
from tagcache.infrastructure.storage import create_storage
from tagcache.infrastructure.storage.local_storage import LocalStorage
from tagcache.infrastructure.storage.memory_storage import MemoryStorage
from tagcache.infrastructure.storage.session_storage import SessionStorage

RECORD = {"value": {"a": [1, 2]}, "options": {"expires": 10, "maxAge": 1}}


@pytest.fixture
def local_storage(tmp_path: Path):
    storage = LocalStorage(tmp_path / "durable")
    yield storage
    storage.close()


@pytest.fixture
def session_storage(tmp_path: Path):
    storage = SessionStorage(base_dir=tmp_path)
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "local", "session"])
def any_storage(request, local_storage, session_storage):
    return {
        "memory": MemoryStorage(),
        "local": local_storage,
        "session": session_storage,
    }[request.param]


def test_set_get_remove(any_storage):
    assert any_storage.set_item("k", RECORD) is True
    assert any_storage.get_item("k") == RECORD
    any_storage.remove_item("k")
    assert any_storage.get_item("k") is None


def test_remove_missing_key_is_ignored(any_storage):
    any_storage.remove_item("missing")
    assert any_storage.length == 0


def test_length_key_and_clear(any_storage):
    any_storage.set_item("a", RECORD)
    any_storage.set_item("b", RECORD)
    assert any_storage.length == 2
    assert len(any_storage) == 2
    assert {any_storage.key(0), any_storage.key(1)} == {"a", "b"}
    assert any_storage.key(2) is None
    assert any_storage.key(-1) is None

    any_storage.clear()
    assert any_storage.length == 0
    assert any_storage.key(0) is None


def test_unserializable_record_is_rejected(any_storage):
    assert any_storage.set_item("k", {"value": object(), "options": {}}) is False
    assert any_storage.get_item("k") is None


@pytest.mark.parametrize("value", [{1: "a"}, ("a", "b")])
def test_record_altered_by_json_is_rejected(any_storage, value):
    record = {"value": value, "options": {"expires": 10, "maxAge": 1}}
    assert any_storage.set_item("k", record) is False
    assert any_storage.get_item("k") is None
    assert any_storage.length == 0


def test_enabled_storages(any_storage):
    assert any_storage.is_enabled() is True
    # The availability check leaves nothing behind
    assert any_storage.length == 0


def test_availability_is_checked_once(local_storage: LocalStorage, mocker):
    assert local_storage.is_enabled() is True
    write = mocker.spy(local_storage.disk_cache, "set")

    assert local_storage.is_enabled() is True
    assert local_storage.is_enabled() is True

    write.assert_not_called()


def test_memory_storage_returns_copies():
    storage = MemoryStorage()
    storage.set_item("k", RECORD)
    storage.get_item("k")["value"]["a"].append(3)
    assert storage.get_item("k") == RECORD
    assert storage.type() is CacheStorageType.MEMORY


def test_local_storage_persists_across_instances(tmp_path: Path):
    first = LocalStorage(tmp_path / "durable")
    first.set_item("k", RECORD)
    first.close()

    second = LocalStorage(tmp_path / "durable")
    try:
        assert second.type() is CacheStorageType.LOCAL_STORAGE
        assert second.get_item("k") == RECORD
    finally:
        second.close()


def test_session_storage_is_discarded_on_close(tmp_path: Path):
    storage = SessionStorage(base_dir=tmp_path)
    directory = storage.directory
    storage.set_item("k", RECORD)
    assert storage.type() is CacheStorageType.SESSION_STORAGE
    assert directory.exists()

    storage.close()

    assert not directory.exists()
    assert directory.parent == tmp_path


def test_sessions_do_not_share_records(tmp_path: Path):
    first = SessionStorage(base_dir=tmp_path)
    second = SessionStorage(base_dir=tmp_path)
    try:
        first.set_item("k", RECORD)
        assert second.get_item("k") is None
    finally:
        first.close()
        second.close()


def test_unopenable_disk_storage_is_disabled(tmp_path: Path, mocker):
    mocker.patch('tagcache.infrastructure.storage.disk_storage.dc.Cache', side_effect=OSError("read-only"))
    storage = LocalStorage(tmp_path / "durable")

    assert storage.is_enabled() is False
    assert storage.set_item("k", RECORD) is False
    assert storage.get_item("k") is None
    assert storage.length == 0
    assert storage.key(0) is None
    storage.remove_item("k")
    storage.clear()


def test_session_storage_without_temp_dir_is_disabled(mocker):
    mocker.patch(
        'tagcache.infrastructure.storage.session_storage.tempfile.mkdtemp',
        side_effect=OSError("no space"),
    )
    storage = SessionStorage()
    assert storage.is_enabled() is False
    storage.close()


def test_undecodable_payload_reads_as_none(local_storage: LocalStorage):
    local_storage.disk_cache.set("k", "{not json")
    assert local_storage.get_item("k") is None


@pytest.mark.parametrize("name, expected", [
    ("memory", MemoryStorage),
    (CacheStorageType.LOCAL_STORAGE, LocalStorage),
    ("session_storage", SessionStorage),
])
def test_create_storage(tmp_path: Path, name, expected):
    storage = create_storage(name, tmp_path)
    assert isinstance(storage, expected)
    if hasattr(storage, "close"):
        storage.close()


def test_create_storage_unknown_type():
    with pytest.raises(ValueError):
        create_storage("cookie")
