"""Build plugin crates to WebAssembly and collect the resulting modules."""

from __future__ import annotations

import argparse
import glob
import os
import shutil
import subprocess
import sys
from pathlib import Path

TARGET = "wasm32-wasip1"
WASM_OPT = "wasm-opt"

_BLUE_BOLD = "1;34"
_GREEN_BOLD = "1;32"


class BuildError(Exception):
    """Raised when a plugin cannot be built or optimized."""


def _paint(style: str, text: str) -> str:
    return f"\x1b[{style}m{text}\x1b[0m"


def _announce(style: str, text: str) -> None:
    print(_paint(style, text))


def _cargo_build(plugin_dir: Path, build_dir: Path, release: bool) -> None:
    command = ["cargo", "build", f"--target={TARGET}", "--target-dir", str(build_dir)]
    if release:
        command.append("--release")
    result = subprocess.run(command, cwd=plugin_dir, stdout=subprocess.DEVNULL)
    if result.returncode != 0:
        raise BuildError(f'Failed to build plugin in "{plugin_dir}"')


def optimize(in_path: Path, out_path: Path) -> None:
    """Optimize a wasm module at level 3 and report the size change."""
    in_path, out_path = Path(in_path), Path(out_path)
    size_before = in_path.stat().st_size
    try:
        result = subprocess.run(
            [WASM_OPT, "-O3", str(in_path), "-o", str(out_path)],
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise BuildError(f'Failed to optimize "{in_path}": {exc}') from exc
    if result.returncode != 0:
        detail = (result.stderr or "").strip()
        raise BuildError(f'Failed to optimize "{in_path}": {detail}')
    size_after = out_path.stat().st_size
    _announce(
        _GREEN_BOLD,
        f'Optimized "{in_path.name}" from {size_before / 1024:.1f} KiB '
        f"to {size_after / 1024:.1f} KiB",
    )


def build_plugins(in_dir: Path, build_dir: Path, out_dir: Path, release: bool = False) -> list[Path]:
    """Build every plugin in ``in_dir`` and place the wasm modules in ``out_dir``.

    Returns the paths of the modules written.
    """
    in_dir, build_dir, out_dir = Path(in_dir), Path(build_dir), Path(out_dir)

    _announce(_BLUE_BOLD, "Building plugins...")
    for entry in sorted(in_dir.iterdir()):
        _announce(_GREEN_BOLD, f'Building plugin "{entry.name}"...')
        _cargo_build(entry, build_dir, release)

    if out_dir.exists():
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True)

    profile = "release" if release else "debug"
    pattern = os.path.join(str(build_dir), TARGET, profile, "*.wasm")

    _announce(_BLUE_BOLD, "Optimizing plugins..." if release else "Copying plugins...")
    written = []
    for in_path in sorted(Path(p) for p in glob.glob(pattern)):
        out_path = out_dir / in_path.name
        if release:
            optimize(in_path, out_path)
        else:
            shutil.copyfile(in_path, out_path)
        written.append(out_path)
    return written


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build plugins to WebAssembly.")
    parser.add_argument("-i", "--in-dir", type=Path, required=True)
    parser.add_argument("-b", "--build-dir", type=Path, required=True)
    parser.add_argument("-o", "--out-dir", type=Path, required=True)
    parser.add_argument("--release", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Command entry point; returns the process exit status."""
    args = _parse_args(argv)
    try:
        build_plugins(args.in_dir, args.build_dir, args.out_dir, args.release)
    except (BuildError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())