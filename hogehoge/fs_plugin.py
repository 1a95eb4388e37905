"""Filesystem plugin: offers every file under a mounted directory as a track."""

from __future__ import annotations

import os
import uuid

from .types import (
    FsMount,
    PluginMetadata,
    PluginTrackIdentifier,
    PreparedScan,
    ScanKind,
    ScanResult,
)

PLUGIN_UUID = uuid.UUID("c2940863-8121-447e-ae25-499a809c361e")
MUSIC_MOUNT = "/music"


def get_metadata() -> PluginMetadata:
    """Describe this plugin."""
    return PluginMetadata(
        name="Filesystem",
        uuid=PLUGIN_UUID,
        description="Load, import and manage tracks from the local filesystem",
        author=None,
        fs_mounts=[FsMount(internal_path=MUSIC_MOUNT, description="Music files")],
        allow_concurrency=True,
    )


def _walk(path: str):
    if os.path.isfile(path):
        yield PluginTrackIdentifier(path)
    elif os.path.isdir(path):
        with os.scandir(path) as entries:
            children = [entry.path for entry in entries]
        for child in children:
            yield from _walk(child)


def prepare_scan(root: str = MUSIC_MOUNT) -> PreparedScan:
    """List every file below ``root``, recursively."""
    return PreparedScan(tracks=list(_walk(os.fspath(root))))


def scan(ident: PluginTrackIdentifier) -> ScanResult:
    """Resolve a track identifier to its file path."""
    return ScanResult(ScanKind.PATH, ident.value)