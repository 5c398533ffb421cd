"""Tests for switchboard.tool.truncation."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from switchboard.tool import truncation
from switchboard.tool.truncation import (
    MAX_BYTES,
    MAX_LINES,
    sanitize_binary_output,
    spill,
    strip_ansi,
    truncate_output,
)


# ---------------------------------------------------------------------------
# truncate_output
# ---------------------------------------------------------------------------


class TestTruncateOutput:
    def test_empty_string(self) -> None:
        assert truncate_output("") == ""

    def test_within_limits(self) -> None:
        text = "hello\nworld\n"
        assert truncate_output(text) == text

    def test_exact_line_limit_untouched(self) -> None:
        text = "\n".join(f"line {i}" for i in range(MAX_LINES))
        assert truncate_output(text) == text

    def test_over_line_limit_keeps_tail(self) -> None:
        text = "\n".join(f"line {i}" for i in range(MAX_LINES + 500))
        result = truncate_output(text, save_full=False)
        assert result.startswith("[truncated: 500 lines skipped of 2500 lines")
        assert result.endswith(f"line {MAX_LINES + 499}")
        assert "line 0\n" not in result

    def test_over_byte_limit(self) -> None:
        text = "x" * (MAX_BYTES + 1000)
        result = truncate_output(text, save_full=False)
        assert "1000 bytes skipped" in result
        assert len(result.encode()) <= MAX_BYTES + 200

    def test_custom_limits(self) -> None:
        result = truncate_output("a\nb\nc\nd\ne", max_lines=2, save_full=False)
        assert result.endswith("d\ne")
        assert "3 lines skipped" in result

    def test_save_full_writes_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(truncation, "OUTPUT_DIR", str(tmp_path))
        text = "\n".join(str(i) for i in range(20))
        result = truncate_output(text, max_lines=5, save_full=True)
        marker = "[full output: "
        assert marker in result
        saved = result.split(marker, 1)[1].split("]", 1)[0]
        assert os.path.dirname(saved) == str(tmp_path)
        with open(saved) as f:
            assert f.read() == text

    def test_spill_creates_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "nested" / "out"
        monkeypatch.setattr(truncation, "OUTPUT_DIR", str(target))
        path = spill("caf\u00e9\n")
        assert path.endswith(".log")
        assert Path(path).read_text(encoding="utf-8") == "caf\u00e9\n"


# ---------------------------------------------------------------------------
# strip_ansi
# ---------------------------------------------------------------------------


class TestStripAnsi:
    def test_no_ansi(self) -> None:
        assert strip_ansi("hello world") == "hello world"

    def test_color_codes(self) -> None:
        assert strip_ansi("\x1b[31mred\x1b[0m") == "red"

    def test_multiple_codes(self) -> None:
        text = "\x1b[1;31;40mhello\x1b[0m \x1b[32mworld\x1b[0m"
        assert strip_ansi(text) == "hello world"

    def test_cursor_movement(self) -> None:
        assert strip_ansi("\x1b[2Ahello") == "hello"


# ---------------------------------------------------------------------------
# sanitize_binary_output
# ---------------------------------------------------------------------------


class TestSanitizeBinaryOutput:
    def test_preserves_whitespace_controls(self) -> None:
        assert sanitize_binary_output("a\tb\nc\rd") == "a\tb\nc\rd"

    def test_strips_c0_and_c1_controls(self) -> None:
        assert sanitize_binary_output("a\x00b\x07c\x7fd\x9fe") == "abcde"

    def test_strips_interlinear_annotation_chars(self) -> None:
        assert sanitize_binary_output("a\ufff9b\ufffbc") == "abc"

    def test_keeps_unicode(self) -> None:
        assert sanitize_binary_output("café 日本語") == "café 日本語"
