"""Loading plugins and pooling their instances."""

from __future__ import annotations

import logging
import threading
import uuid as _uuid
from collections import deque
from pathlib import Path
from typing import Any, Callable, Protocol

from .types import PluginMetadata, PreparedScan, from_msgpack

log = logging.getLogger(__name__)


class PluginInstance(Protocol):
    def function_exists(self, name: str) -> bool: ...

    def call(self, name: str, *args: Any) -> bytes: ...


Loader = Callable[[Path], PluginInstance]


class PluginSystemError(Exception):
    """Raised when the plugin system cannot be set up."""


class PluginError(Exception):
    """Raised when a plugin cannot be loaded or called."""


class Plugin:
    """A loaded plugin instance."""

    def __init__(self, instance: PluginInstance) -> None:
        self.instance = instance
        self.id: _uuid.UUID | None = None

    def call(self, function: str, *args: Any) -> Any:
        try:
            return self.instance.call(function, *args)
        except Exception as exc:
            raise PluginError(f"Failed to call function '{function}': {exc}") from exc

    def _call_decoded(self, function: str, kind: type) -> Any:
        data = self.call(function)
        try:
            return from_msgpack(kind, data)
        except (ValueError, TypeError) as exc:
            raise PluginError(f"Failed to call function '{function}': {exc}") from exc

    def get_metadata(self) -> PluginMetadata:
        return self._call_decoded("get_metadata", PluginMetadata)

    def prepare_scan(self) -> PreparedScan:
        return self._call_decoded("prepare_scan", PreparedScan)

    @classmethod
    def load(cls, path: Path, loader: Loader) -> Plugin:
        try:
            instance = loader(Path(path))
        except Exception as exc:
            raise PluginError(f"Failed to initialize plugin: {exc}") from exc
        if not instance.function_exists("get_metadata"):
            raise PluginError("Plugin does not implement required function 'get_metadata'")
        plugin = cls(instance)
        plugin.id = plugin.get_metadata().uuid
        return plugin


class PluginHandle:
    """A plugin borrowed from a pool; returned to it on release."""

    def __init__(self, pool: PluginPool, plugin: Plugin) -> None:
        self._pool = pool
        self._plugin: Plugin | None = plugin

    @property
    def plugin(self) -> Plugin:
        if self._plugin is None:
            raise RuntimeError("plugin handle already released")
        return self._plugin

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.plugin, name)

    def release(self) -> None:
        plugin, self._plugin = self._plugin, None
        if plugin is not None:
            self._pool._give_back(plugin)

    def __enter__(self) -> PluginHandle:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()

    def __del__(self) -> None:
        if self.__dict__.get("_plugin") is not None:
            self.release()


class PluginPool:
    """Instances of one plugin, handed out one caller at a time."""

    def __init__(self, metadata: PluginMetadata, plugin_path: Path, loader: Loader,
                 plugins: list[Plugin]) -> None:
        self.metadata = metadata
        self.plugin_path = Path(plugin_path)
        self._loader = loader
        self._plugins: deque[Plugin] = deque(plugins)
        self._available = threading.Condition()

    @classmethod
    def from_path(cls, path: Path, loader: Loader) -> PluginPool:
        plugin = Plugin.load(path, loader)
        metadata = plugin.get_metadata()
        return cls(metadata, Path(path), loader, [plugin])

    def get_free_plugin(self) -> PluginHandle:
        with self._available:
            if self._plugins:
                return PluginHandle(self, self._plugins.popleft())
            if not self.metadata.allow_concurrency:
                self._available.wait_for(lambda: bool(self._plugins))
                return PluginHandle(self, self._plugins.popleft())
        return PluginHandle(self, Plugin.load(self.plugin_path, self._loader))

    def _give_back(self, plugin: Plugin) -> None:
        with self._available:
            self._plugins.append(plugin)
            self._available.notify()


class PluginSystem:
    """All plugin pools found in a directory, keyed by plugin UUID."""

    def __init__(self, plugins: dict[_uuid.UUID, PluginPool] | None = None) -> None:
        self.plugins: dict[_uuid.UUID, PluginPool] = plugins or {}

    @classmethod
    def initialize(cls, plugin_dir: Path, loader: Loader) -> PluginSystem:
        plugin_dir = Path(plugin_dir)
        log.info("Initializing plugin system with directory: %s", plugin_dir)
        try:
            entries = sorted(plugin_dir.iterdir())
        except OSError:
            raise PluginSystemError(
                f"Specified plugin directory does not exist: {plugin_dir}"
            ) from None

        plugins: dict[_uuid.UUID, PluginPool] = {}
        for path in entries:
            if not path.is_file() or path.suffix != ".wasm":
                log.debug("Skipping non-WASM file: %s", path.name)
                continue
            try:
                pool = PluginPool.from_path(path, loader)
            except PluginError as exc:
                log.warning("Failed to load plugin %s: %s", path.name, exc)
                continue
            plugins[pool.metadata.uuid] = pool
        return cls(plugins)

    def get_free_plugin(self, uuid: _uuid.UUID) -> PluginHandle:
        try:
            pool = self.plugins[uuid]
        except KeyError:
            raise PluginError("Invalid plugin uuid") from None
        return pool.get_free_plugin()