import threading
import time
import uuid

import pytest

from hogehoge.plugin import (
    Plugin,
    PluginError,
    PluginPool,
    PluginSystem,
    PluginSystemError,
)
from hogehoge.types import (
    PluginMetadata,
    PluginTrackIdentifier,
    PreparedScan,
    to_msgpack,
)

UID = uuid.UUID("c2940863-8121-447e-ae25-499a809c361e")


class FakeInstance:
    def __init__(self, meta, functions=None):
        self.functions = {"get_metadata": lambda: to_msgpack(meta)}
        self.functions.update(functions or {})

    def function_exists(self, name):
        return name in self.functions

    def call(self, name, *args):
        return self.functions[name](*args)


def make_loader(meta, functions=None, counter=None):
    def loader(path):
        if counter is not None:
            counter.append(path)
        return FakeInstance(meta, functions)

    return loader


def meta(concurrent=True, uid=UID):
    return PluginMetadata(name="p", uuid=uid, allow_concurrency=concurrent)


def test_load_sets_id():
    plugin = Plugin.load("x.wasm", make_loader(meta()))
    assert plugin.id == UID


def test_load_missing_metadata_function():
    def loader(path):
        inst = FakeInstance(meta())
        del inst.functions["get_metadata"]
        return inst

    with pytest.raises(PluginError, match="get_metadata"):
        Plugin.load("x.wasm", loader)


def test_load_loader_failure():
    def loader(path):
        raise OSError("boom")

    with pytest.raises(PluginError, match="Failed to initialize plugin"):
        Plugin.load("x.wasm", loader)


def test_call_error_is_wrapped():
    def bad():
        raise RuntimeError("nope")

    plugin = Plugin.load("x.wasm", make_loader(meta(), {"prepare_scan": bad}))
    with pytest.raises(PluginError, match="prepare_scan"):
        plugin.prepare_scan()


def test_prepare_scan_decodes():
    scan = PreparedScan([PluginTrackIdentifier("/a")])
    plugin = Plugin.load("x.wasm", make_loader(meta(), {"prepare_scan": lambda: to_msgpack(scan)}))
    assert plugin.prepare_scan() == scan


def test_concurrent_pool_loads_new_instances():
    loads = []
    pool = PluginPool.from_path("x.wasm", make_loader(meta(True), counter=loads))
    first = pool.get_free_plugin()
    second = pool.get_free_plugin()
    assert first.plugin is not second.plugin
    assert len(loads) == 2
    first.release()
    second.release()
    with pool.get_free_plugin() as again:
        assert again.plugin is first.plugin
    assert len(loads) == 2


def test_exclusive_pool_waits_for_release():
    loads = []
    pool = PluginPool.from_path("x.wasm", make_loader(meta(False), counter=loads))
    held = pool.get_free_plugin()
    got = []

    def worker():
        with pool.get_free_plugin() as h:
            got.append(h.plugin)

    t = threading.Thread(target=worker)
    t.start()
    time.sleep(0.05)
    assert got == []
    original = held.plugin
    held.release()
    t.join(timeout=2)
    assert got == [original]
    assert len(loads) == 1


def test_handle_forwards_attributes():
    pool = PluginPool.from_path("x.wasm", make_loader(meta()))
    with pool.get_free_plugin() as h:
        assert h.get_metadata().uuid == UID


def test_system_initialize(tmp_path):
    (tmp_path / "a.wasm").write_bytes(b"")
    (tmp_path / "notes.txt").write_bytes(b"")
    (tmp_path / "dir.wasm").mkdir()
    seen = []
    system = PluginSystem.initialize(tmp_path, make_loader(meta(), counter=seen))
    assert list(system.plugins) == [UID]
    assert [p.name for p in seen] == ["a.wasm", "a.wasm"]


def test_system_skips_broken_plugins(tmp_path):
    (tmp_path / "a.wasm").write_bytes(b"")

    def loader(path):
        raise OSError("bad")

    assert PluginSystem.initialize(tmp_path, loader).plugins == {}


def test_system_invalid_directory(tmp_path):
    with pytest.raises(PluginSystemError):
        PluginSystem.initialize(tmp_path / "missing", make_loader(meta()))


def test_system_unknown_uuid(tmp_path):
    system = PluginSystem.initialize(tmp_path, make_loader(meta()))
    with pytest.raises(PluginError, match="Invalid plugin uuid"):
        system.get_free_plugin(uuid.uuid4())