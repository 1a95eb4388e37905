# hogehoge

This package is the core of a music library application. It is made of these modules:

- `hogehoge.types`: the data types shared between the host and its plugins.
  They are `PluginMetadata`, `FsMount`, `PreparedScan`,
  `PluginTrackIdentifier`, `ScanResult`/`ScanKind`, `Artist`, `Album`,
  `Track`, and the id wrappers. `to_msgpack(value)` encodes one of these values as MessagePack bytes.
  `from_msgpack(kind, data)` decodes bytes back into a value of `kind`. It raises `ValueError` when the data is
  malformed.
- `hogehoge.plugin`: loads plugins and pools their instances.
- `hogehoge.library`: `Library.scan(plugin_system)` asks every plugin, in
  parallel threads, to prepare a scan. It returns a dict that maps each plugin UUID to
  its `PreparedScan`. Plugins that fail are logged and left out.
- `hogehoge.fs_plugin`: a filesystem plugin. `get_metadata()` describes it.
  `prepare_scan(root="/music")` lists every file below `root`, recursively.
  `scan(ident)` returns a `ScanResult` of kind `PATH`.
- `hogehoge.tracks`: maps audio tag items onto a `TaggedTrack` and stores it in SQLite.
- `hogehoge.background`: runs background tasks on worker threads and captures their logs for each task.
- `hogehoge.layout`, `hogehoge.state`, `hogehoge.widget`, `hogehoge.ui`: a small
  immediate-mode widget layout engine.
- `hogehoge.logsetup`: compact coloured log output.
- `hogehoge.builder`: the `hogehoge-build-plugins` command.

## Installation

```
pip install .
pip install ".[test]"   # with pytest
```

## Plugins

`PluginSystem.initialize(plugin_dir, loader)` looks at each `*.wasm` file in
`plugin_dir`, in sorted order. For each one it calls `loader(path)`. The loader must return an object
with `function_exists(name)` and `call(name, *args)`, and `call` returns MessagePack bytes.
A plugin must provide `get_metadata`. A plugin that fails to load is logged and skipped. If the directory
cannot be read, `PluginSystemError` is raised.

Each plugin has a `PluginPool`, keyed by the UUID in the plugin's metadata.
`PluginSystem.get_free_plugin(uuid)` returns a `PluginHandle`. An unknown UUID raises
`PluginError`. The handle forwards `get_metadata()`, `prepare_scan()` and `call()` to the plugin.
It gives the plugin back to the pool when `release()` is called, when a `with` block ends,
or when the handle is collected. When no instance is free:

- if the plugin's `allow_concurrency` is set, a new instance is loaded;
- otherwise the caller waits until another handle is released.

```python
from hogehoge.library import Library
from hogehoge.plugin import PluginSystem

system = PluginSystem.initialize("plugins", my_loader)
scans = Library().scan(system)
```

## Track tags

```python
import sqlite3
from hogehoge.tracks import COLUMNS, ItemKey, ItemValueKind, TagItem, TaggedTrack

track = TaggedTrack.from_tags(
    "/music/song.flac",
    [TagItem(ItemKey.TRACK_TITLE, "Song"), TagItem(ItemKey.BPM, "120")],
)
print(track.title, track.bpm)   # Song 120.0
```

These rules decide what happens to each tag item:

- Keys given as plain strings are ignored.
- Known keys that have no field are logged as unhandled.
- `BPM` and `INTEGER_BPM` are parsed as floats. An invalid float is logged, and the field is left unset.
- A `BINARY` value raises `ValueError`.

`TaggedTrack.insert(connection)` inserts the track into an existing `tracks`
table and commits. The table must have the columns listed in `COLUMNS`. The package
does not create the table itself. `insert_statement(table, columns)` and
`dollar_values(count)` build the SQL, which uses `$1,$2,...` placeholders.

## Background tasks

```python
import logging
from hogehoge.background import (
    BackgroundTaskLogHandler, BackgroundTaskLogs, BackgroundTaskManager,
)

logs = BackgroundTaskLogs()
logging.getLogger().addHandler(BackgroundTaskLogHandler(logs))

with BackgroundTaskManager(logs) as manager:
    manager.spawn("update_library", True, lambda: logging.info("working"))
print(manager.finished_tasks[0].logs)
```

`spawn(name, display, func)` returns a `TaskId`. If `func` raises, the task is marked as failed.
`update()` collects the tasks that have completed. Each completed task with `display` set becomes a
`FinishedTask`, which has `name`, `logs` (INFO and above, as `(level, message)`
pairs), `error` and `succeeded`. `close()` waits for all tasks and collects them.

## Widget layout

`UiContext.set_ui(build)` resets the context, calls `build(ui)`, and lays out what was added.
Inside `build`, use `add(widget)` for a leaf and `add_parent(widget, add_children)` for a widget with children.
Children are placed after their parent's padding, either left to right or top to bottom
(`Direction`), with `child_gap` between them. Sizes are naive: only each axis's
minimum is used (`Size.naive_size()`). The result is recorded in `ui.scene.fills`.
Each entry there is `((x0, y0, x1, y1), (r, g, b))`, in drawing order, and the colour comes from
`WidgetClass.color()`.

`state.ValueProvider` holds a value. Its subscribers (`SubscribedValue`) report
`is_dirty()` until they read the value with `get_and_reset()`. A `WidgetValue` wraps
either a fixed value or a subscriber. `EventAction.fire(kind)` puts an `Event`
on any object that has a `put` method.

## Logging

`logsetup.init()` adds a stderr handler to the root logger and returns that handler. Each line
shows the elapsed seconds, a coloured level marker (`E ! * D T`), the logger name and the message.
The `HOGEHOGE_LOG` environment variable sets the levels, for example
`HOGEHOGE_LOG="debug,hogehoge.plugin=trace"`. The default level is `info`.

## Building plugins

```
hogehoge-build-plugins --in-dir plugins --build-dir target --out-dir out
hogehoge-build-plugins --in-dir plugins --build-dir target --out-dir out --release
```

The command runs `cargo build --target=wasm32-wasip1` in each subdirectory of
`--in-dir`. It then clears `--out-dir` and copies the built `.wasm` files into it. With
`--release`, it builds in release mode and runs each module through `wasm-opt -O3`
instead of copying it. `cargo` and `wasm-opt` must be on `PATH`. On failure, the command
prints an error and exits with status 1.

## What this package does not do

- It has no WebAssembly runtime. Running plugins needs a loader from elsewhere.
- It has no application window. `ui` only computes rectangles; it does not draw them to a screen.
- It does not read tags from audio files. Tag items must be supplied to `TaggedTrack.from_tags`.
- It does not create a database schema.

## Tests

```
pytest
```