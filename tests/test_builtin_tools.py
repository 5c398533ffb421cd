"""Tests for switchboard.tool.builtin (file-system and command tools)."""

from __future__ import annotations

import asyncio
import os
import signal
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from switchboard.tool.builtin import (
    DeleteFileTool,
    ListFilesTool,
    ReadFileTool,
    RunCommandTool,
    WriteFileTool,
)


# ---------------------------------------------------------------------------
# File-system tools
# ---------------------------------------------------------------------------


class TestListFiles:
    async def test_lists_sorted_with_dir_suffix(self, tmp_path: Path) -> None:
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "a").mkdir()
        result = await ListFilesTool(str(tmp_path)).execute({})
        assert result.success
        assert result.output == "a/\nb.txt"

    async def test_missing_directory(self, tmp_path: Path) -> None:
        result = await ListFilesTool(str(tmp_path)).execute({"path": "nope"})
        assert result.is_error
        assert "Not a directory" in result.output


class TestReadFile:
    async def test_numbered_lines(self, tmp_path: Path) -> None:
        (tmp_path / "notes.md").write_text("one\ntwo\nthree\n")
        result = await ReadFileTool(str(tmp_path)).execute({"path": "notes.md"})
        assert result.output == "1: one\n2: two\n3: three"

    async def test_offset_and_limit(self, tmp_path: Path) -> None:
        (tmp_path / "f.txt").write_text("\n".join(str(i) for i in range(10)))
        result = await ReadFileTool(str(tmp_path)).execute(
            {"path": "f.txt", "offset": 2, "limit": 3}
        )
        assert result.output.startswith("3: 2\n4: 3\n5: 4")
        assert "[5 more lines. Use offset=5 to continue.]" in result.output

    async def test_missing_file(self, tmp_path: Path) -> None:
        result = await ReadFileTool(str(tmp_path)).execute({"path": "ghost.txt"})
        assert result.is_error
        assert "File not found" in result.output

    async def test_directory_rejected(self, tmp_path: Path) -> None:
        result = await ReadFileTool(str(tmp_path)).execute({"path": "."})
        assert result.is_error

    async def test_missing_parameter(self, tmp_path: Path) -> None:
        result = await ReadFileTool(str(tmp_path)).execute({})
        assert result.is_error
        assert "Invalid parameters for read_file" in result.output


class TestWriteFile:
    async def test_creates_parents(self, tmp_path: Path) -> None:
        result = await WriteFileTool(str(tmp_path)).execute(
            {"path": "deep/dir/out.txt", "content": "a\nb"}
        )
        assert result.success
        assert "Wrote 2 lines" in result.output
        assert (tmp_path / "deep" / "dir" / "out.txt").read_text() == "a\nb"


class TestDeleteFile:
    async def test_delete_file(self, tmp_path: Path) -> None:
        target = tmp_path / "x.txt"
        target.write_text("x")
        result = await DeleteFileTool(str(tmp_path)).execute({"path": "x.txt"})
        assert result.success
        assert not target.exists()

    async def test_delete_directory(self, tmp_path: Path) -> None:
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "f").write_text("f")
        result = await DeleteFileTool(str(tmp_path)).execute({"path": "d"})
        assert result.success
        assert not (tmp_path / "d").exists()

    async def test_delete_missing(self, tmp_path: Path) -> None:
        result = await DeleteFileTool(str(tmp_path)).execute({"path": "gone"})
        assert result.is_error


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell required")
class TestRunCommand:
    async def test_captures_output(self, tmp_path: Path) -> None:
        result = await RunCommandTool(str(tmp_path)).execute({"command": "echo hello"})
        assert result.success
        assert result.output.strip() == "hello"

    async def test_runs_in_workspace(self, tmp_path: Path) -> None:
        (tmp_path / "marker").write_text("")
        result = await RunCommandTool(str(tmp_path)).execute({"command": "ls"})
        assert "marker" in result.output

    async def test_nonzero_exit_is_error(self, tmp_path: Path) -> None:
        result = await RunCommandTool(str(tmp_path)).execute(
            {"command": "echo oops; exit 3"}
        )
        assert result.is_error
        assert result.output.startswith("[Exit code: 3]")
        assert "oops" in result.output

    async def test_timeout(self, tmp_path: Path) -> None:
        result = await RunCommandTool(str(tmp_path)).execute(
            {"command": "sleep 5", "timeout": 1}
        )
        assert result.is_error
        assert "timed out after 1s" in result.output

    async def test_timeout_kills_group_and_reaps(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def hang() -> tuple[bytes, None]:
            await asyncio.sleep(10)
            return b"", None

        process = MagicMock(pid=4321, returncode=None)
        process.communicate = hang
        process.wait = AsyncMock(return_value=-9)
        killed: list[tuple[int, int]] = []

        async def spawn(*args, **kwargs):
            return process

        monkeypatch.setattr(asyncio, "create_subprocess_shell", spawn)
        monkeypatch.setattr(os, "getpgid", lambda pid: pid)
        monkeypatch.setattr(os, "killpg", lambda pgid, sig: killed.append((pgid, sig)))

        result = await RunCommandTool(str(tmp_path)).execute(
            {"command": "sleep 10", "timeout": 1}
        )

        assert result.is_error
        assert killed == [(4321, signal.SIGKILL)]
        process.wait.assert_awaited_once()

    async def test_missing_workdir(self, tmp_path: Path) -> None:
        result = await RunCommandTool(str(tmp_path)).execute(
            {"command": "ls", "workdir": str(tmp_path / "nope")}
        )
        assert result.is_error
        assert "Directory does not exist" in result.output

    async def test_strips_ansi(self, tmp_path: Path) -> None:
        result = await RunCommandTool(str(tmp_path)).execute(
            {"command": "printf '\\033[31mred\\033[0m'"}
        )
        assert result.output == "red"
