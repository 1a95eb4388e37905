import subprocess
from pathlib import Path
from unittest import mock

import pytest

from hogehoge.builder import BuildError, build_plugins, main, optimize


def _ok(args, **kwargs):
    return subprocess.CompletedProcess(args, 0, stdout="", stderr="")


def _fake_wasm_opt(args, **kwargs):
    if args[0] == "wasm-opt":
        Path(args[4]).write_bytes(b"\0asm" + b"x" * 10)
    return subprocess.CompletedProcess(args, 0, stdout="", stderr="")


@pytest.fixture
def layout(tmp_path):
    in_dir = tmp_path / "plugins"
    (in_dir / "alpha").mkdir(parents=True)
    (in_dir / "beta").mkdir()
    build_dir = tmp_path / "build"
    out_dir = tmp_path / "out"
    return in_dir, build_dir, out_dir


def _make_artifacts(build_dir, profile, names):
    target = build_dir / "wasm32-wasip1" / profile
    target.mkdir(parents=True)
    for name in names:
        (target / name).write_bytes(name.encode() * 100)
    return target


def test_cargo_invoked_per_plugin(layout):
    in_dir, build_dir, out_dir = layout
    with mock.patch("subprocess.run", side_effect=_ok) as run:
        build_plugins(in_dir, build_dir, out_dir, release=False)
    cmds = [c.args[0] for c in run.call_args_list]
    assert cmds == [
        ["cargo", "build", "--target=wasm32-wasip1", "--target-dir", str(build_dir)],
        ["cargo", "build", "--target=wasm32-wasip1", "--target-dir", str(build_dir)],
    ]
    assert [c.kwargs["cwd"] for c in run.call_args_list] == [in_dir / "alpha", in_dir / "beta"]


def test_release_flag_passed(layout):
    in_dir, build_dir, out_dir = layout
    with mock.patch("subprocess.run", side_effect=_ok) as run:
        written = build_plugins(in_dir, build_dir, out_dir, release=True)
    assert written == []
    assert out_dir.is_dir()
    assert len(run.call_args_list) == 2
    assert all(c.args[0][-1] == "--release" for c in run.call_args_list)


def test_debug_copies_wasm_only(layout):
    in_dir, build_dir, out_dir = layout
    target = _make_artifacts(build_dir, "debug", ["a.wasm", "b.wasm"])
    (target / "notes.txt").write_text("ignored")
    out_dir.mkdir()
    (out_dir / "stale.wasm").write_bytes(b"old")
    with mock.patch("subprocess.run", side_effect=_ok):
        written = build_plugins(in_dir, build_dir, out_dir)
    assert sorted(p.name for p in out_dir.iterdir()) == ["a.wasm", "b.wasm"]
    assert written == [out_dir / "a.wasm", out_dir / "b.wasm"]
    assert (out_dir / "a.wasm").read_bytes() == (target / "a.wasm").read_bytes()


def test_release_optimizes(layout, capsys):
    in_dir, build_dir, out_dir = layout
    _make_artifacts(build_dir, "release", ["a.wasm"])
    with mock.patch("subprocess.run", side_effect=_fake_wasm_opt) as run:
        build_plugins(in_dir, build_dir, out_dir, release=True)
    opt_calls = [c.args[0] for c in run.call_args_list if c.args[0][0] == "wasm-opt"]
    assert opt_calls == [
        ["wasm-opt", "-O3", str(build_dir / "wasm32-wasip1" / "release" / "a.wasm"),
         "-o", str(out_dir / "a.wasm")]
    ]
    out = capsys.readouterr().out
    assert "Optimizing plugins..." in out
    assert 'Optimized "a.wasm"' in out


def test_build_failure_raises(layout):
    in_dir, build_dir, out_dir = layout

    def failing(args, **kwargs):
        return subprocess.CompletedProcess(args, 101)

    with mock.patch("subprocess.run", side_effect=failing):
        with pytest.raises(BuildError, match="Failed to build plugin"):
            build_plugins(in_dir, build_dir, out_dir)
    assert not out_dir.exists()


def test_optimize_failure_raises(tmp_path):
    src = tmp_path / "a.wasm"
    src.write_bytes(b"\0asm")

    def failing(args, **kwargs):
        return subprocess.CompletedProcess(args, 1, stdout="", stderr="bad module")

    with mock.patch("subprocess.run", side_effect=failing):
        with pytest.raises(BuildError, match="bad module"):
            optimize(src, tmp_path / "out.wasm")


def test_optimize_missing_tool(tmp_path):
    src = tmp_path / "a.wasm"
    src.write_bytes(b"\0asm")
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("wasm-opt")):
        with pytest.raises(BuildError, match="Failed to optimize"):
            optimize(src, tmp_path / "out.wasm")


def test_main_success_and_failure(layout):
    in_dir, build_dir, out_dir = layout
    argv = ["-i", str(in_dir), "-b", str(build_dir), "-o", str(out_dir)]
    with mock.patch("subprocess.run", side_effect=_ok):
        assert main(argv) == 0
    assert out_dir.is_dir()
    with mock.patch("subprocess.run", side_effect=lambda a, **k: subprocess.CompletedProcess(a, 1)):
        assert main(argv + ["--release"]) == 1