"""The music library and its scans over all plugins."""

from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor

from .plugin import PluginError, PluginPool, PluginSystem
from .types import PreparedScan

log = logging.getLogger(__name__)


def _prepare(item: tuple[uuid.UUID, PluginPool]) -> tuple[uuid.UUID, PreparedScan] | None:
    uid, pool = item
    try:
        handle = pool.get_free_plugin()
    except PluginError:
        log.warning("Failed to get free plugin for UUID: %s", uid)
        return None
    with handle:
        try:
            prepared = handle.prepare_scan()
        except PluginError as exc:
            log.warning("Failed to prepare scan for plugin UUID %s: %s", uid, exc)
            return None
    log.debug("Prepared scan for plugin UUID: %s", uid)
    return uid, prepared


class Library:
    """Collects tracks offered by plugins."""

    def scan(self, plugin_system: PluginSystem) -> dict[uuid.UUID, PreparedScan]:
        """Ask every plugin, in parallel, to prepare a scan; return the successes."""
        items = list(plugin_system.plugins.items())
        if not items:
            results: list = []
        else:
            with ThreadPoolExecutor() as pool:
                results = list(pool.map(_prepare, items))
        prepared = dict(r for r in results if r is not None)
        log.info("Prepared scans: %r", prepared)
        return prepared