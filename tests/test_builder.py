from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any

import pytest

from mvs_prerender.builder import build_mvs_command, run_story_build


def _story(tmp_path: Path, name: str = "binding-site") -> Path:
    story_dir = tmp_path / name
    story_dir.mkdir()
    path = story_dir / "story.yaml"
    path.write_text("title: demo\n", encoding="utf-8")
    return path


def _fake_run(
    executed: list[list[str]],
    *,
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
) -> Any:
    def fake_run(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        assert kwargs["check"] is False
        assert kwargs["capture_output"] is True
        executed.append(command)
        return subprocess.CompletedProcess(
            args=command, returncode=returncode, stdout=stdout, stderr=stderr
        )

    return fake_run


def test_build_mvs_command_uses_expected_arguments(tmp_path: Path) -> None:
    story_dir = tmp_path / "my story"
    command = build_mvs_command(story_dir, story_dir / "story.html")
    assert command == [
        "mvs",
        "build",
        str(story_dir),
        "-f",
        "html",
        "-o",
        str(story_dir / "story.html"),
    ]


def test_build_mvs_command_rejects_output_outside_story_dir(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="must be inside story directory"):
        build_mvs_command(tmp_path / "a", tmp_path / "b" / "story.html")


def test_run_story_build_success_writes_wrapper(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    story_path = _story(tmp_path)
    executed: list[list[str]] = []
    monkeypatch.setattr(
        subprocess, "run", _fake_run(executed, stdout="rendered 3 scenes\n", stderr="noise")
    )

    result = run_story_build(story_path)

    assert result.success is True
    assert result.stage == "done"
    assert result.returncode == 0
    assert result.wrapper_path == story_path.parent / "index.qmd"
    assert (story_path.parent / "index.qmd").exists()
    assert executed == [build_mvs_command(story_path.parent, story_path.parent / "story.html")]
    captured = capsys.readouterr()
    assert "rendered 3 scenes" in captured.out
    assert "noise" not in captured.out
    assert "noise" not in captured.err


def test_run_story_build_failure_skips_wrapper_and_echoes_stderr(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    story_path = _story(tmp_path)
    executed: list[list[str]] = []
    monkeypatch.setattr(
        subprocess,
        "run",
        _fake_run(executed, returncode=2, stdout="partial output", stderr="invalid scene"),
    )

    with caplog.at_level(logging.ERROR, logger="mvs_prerender.builder"):
        result = run_story_build(story_path)

    assert result.success is False
    assert result.stage == "build"
    assert result.returncode == 2
    assert result.error == "invalid scene"
    assert not (story_path.parent / "index.qmd").exists()
    captured = capsys.readouterr()
    assert "partial output" in captured.out
    assert "invalid scene" in captured.err
    assert [record.levelname for record in caplog.records] == ["ERROR"]
    assert "build.failed" in caplog.text
    assert "returncode=2" in caplog.text


def test_run_story_build_failure_leaves_existing_wrapper_untouched(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    story_path = _story(tmp_path)
    wrapper = story_path.parent / "index.qmd"
    wrapper.write_text("previous", encoding="utf-8")
    monkeypatch.setattr(subprocess, "run", _fake_run([], returncode=1))

    result = run_story_build(story_path)

    assert result.success is False
    assert wrapper.read_text(encoding="utf-8") == "previous"


def test_run_story_build_missing_binary_is_a_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    story_path = _story(tmp_path)

    def missing(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(2, "No such file or directory", command[0])

    monkeypatch.setattr(subprocess, "run", missing)

    with caplog.at_level(logging.ERROR, logger="mvs_prerender.builder"):
        result = run_story_build(story_path, builder="mvs-missing")

    assert result.success is False
    assert result.stage == "dispatch"
    assert result.returncode is None
    assert result.error is not None
    assert not (story_path.parent / "index.qmd").exists()
    assert "build.dispatch_error" in caplog.text
    assert caplog.records[-1].levelno == logging.ERROR


def test_run_story_build_timeout_is_a_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    story_path = _story(tmp_path)
    seen_timeouts: list[float | None] = []

    def slow(command: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        seen_timeouts.append(kwargs["timeout"])
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", slow)

    result = run_story_build(story_path, timeout_seconds=5.0)

    assert seen_timeouts == [5.0]
    assert result.success is False
    assert result.stage == "dispatch"


def test_run_story_build_wrapper_write_error_is_a_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    story_path = _story(tmp_path)
    monkeypatch.setattr(subprocess, "run", _fake_run([]))

    def broken_write(story_dir: Path) -> Path:
        raise PermissionError(13, "Permission denied", str(story_dir / "index.qmd"))

    monkeypatch.setattr("mvs_prerender.builder.write_wrapper", broken_write)

    with caplog.at_level(logging.ERROR, logger="mvs_prerender.builder"):
        result = run_story_build(story_path)

    assert result.success is False
    assert result.stage == "wrapper"
    assert result.returncode == 0
    assert "Permission denied" in (result.error or "")
    assert "build.wrapper_error" in caplog.text
    assert caplog.records[-1].levelname == "ERROR"
