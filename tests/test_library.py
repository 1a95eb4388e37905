import uuid

from hogehoge.library import Library
from hogehoge.plugin import PluginSystem
from hogehoge.types import (
    PluginMetadata,
    PluginTrackIdentifier,
    PreparedScan,
    to_msgpack,
)

GOOD = uuid.UUID("c2940863-8121-447e-ae25-499a809c361e")
BAD = uuid.UUID("00000000-0000-4000-8000-000000000001")


class FakeInstance:
    def __init__(self, uid):
        self.uid = uid

    def function_exists(self, name):
        return True

    def call(self, name, *args):
        if name == "get_metadata":
            return to_msgpack(PluginMetadata(name="p", uuid=self.uid, allow_concurrency=True))
        if self.uid == BAD:
            raise RuntimeError("broken")
        return to_msgpack(PreparedScan([PluginTrackIdentifier("/music/a.flac")]))


def loader(path):
    return FakeInstance(GOOD if path.stem == "good" else BAD)


def test_scan_collects_successful_plugins(tmp_path):
    (tmp_path / "good.wasm").write_bytes(b"")
    (tmp_path / "bad.wasm").write_bytes(b"")
    system = PluginSystem.initialize(tmp_path, loader)
    assert set(system.plugins) == {GOOD, BAD}
    result = Library().scan(system)
    assert result == {GOOD: PreparedScan([PluginTrackIdentifier("/music/a.flac")])}


def test_scan_returns_plugins_to_pool(tmp_path):
    (tmp_path / "good.wasm").write_bytes(b"")
    system = PluginSystem.initialize(tmp_path, loader)
    Library().scan(system)
    Library().scan(system)
    assert len(system.plugins[GOOD]._plugins) >= 1


def test_scan_empty_system():
    assert Library().scan(PluginSystem()) == {}