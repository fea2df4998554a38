from __future__ import annotations

import json
from pathlib import Path

import pytest

from pdf_splitter.config import load_config, parse_config
from pdf_splitter.errors import InvalidConfiguration
from pdf_splitter.progress import ProgressReporter
from pdf_splitter.types import DetectionConfig, RunResult, RunState, SplitConfiguration


# ═══════════════════════════════════════════════════════════════════════════════
# PROGRESS
# ═══════════════════════════════════════════════════════════════════════════════

class TestProgressReporter:
    def test_never_decreases(self):
        progress = ProgressReporter()
        progress.advance(0.4)
        progress.advance(0.2)
        assert progress.value == 0.4

    def test_clamped(self):
        progress = ProgressReporter()
        progress.advance(3.0)
        assert progress.value == 1.0

    def test_reset(self):
        progress = ProgressReporter()
        progress.advance(0.7)
        progress.finish(RunResult(state=RunState.DONE, output_location="out"))
        progress.reset()
        assert progress.value == 0.0
        assert progress.result is None

    def test_subscribers_see_updates_and_result(self):
        seen: list[tuple[float, object]] = []
        progress = ProgressReporter()
        progress.subscribe(lambda v, r: seen.append((v, r)))

        progress.advance(0.5)
        progress.advance(0.5)  # unchanged, no event
        result = RunResult(state=RunState.DONE, output_location="out")
        progress.finish(result)

        assert seen == [(0.5, None), (1.0, result)]

    def test_finish_without_completion_keeps_value(self):
        progress = ProgressReporter()
        progress.advance(0.3)
        progress.finish(RunResult.failed("boom"), complete=False)
        assert progress.value == 0.3
        assert progress.result.failure == "boom"


# ═══════════════════════════════════════════════════════════════════════════════
# RESULT MESSAGE
# ═══════════════════════════════════════════════════════════════════════════════

class TestRunResultMessage:
    def test_success_message(self):
        result = RunResult(state=RunState.DONE, output_location="/tmp/report_split", files_written=3, pages_removed=2)
        assert result.ok
        assert result.message == "Successfully split into 3 files\nRemoved 2 blank pages\nSaved to: report_split"

    def test_no_removed_line_when_nothing_removed(self):
        result = RunResult(state=RunState.DONE, output_location="out", files_written=1)
        assert "Removed" not in result.message

    def test_failure_message(self):
        result = RunResult.failed("Failed to load PDF: broken")
        assert not result.ok
        assert result.state == RunState.FAILED
        assert result.message == "Failed to load PDF: broken"


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

class TestConfig:
    def test_defaults_without_file(self):
        cfg = load_config(None)
        assert cfg.split == SplitConfiguration()
        assert cfg.detection == DetectionConfig()

    def test_shipped_default_matches_builtin(self):
        path = Path(__file__).resolve().parent.parent / "config" / "default.json"
        assert load_config(path) == load_config(None)

    def test_partial_file(self, tmp_path: Path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"split": {"pages_per_chunk": 25}}), encoding="utf-8")

        cfg = load_config(path)
        assert cfg.split.pages_per_chunk == 25
        assert cfg.split.remove_blank_pages is True
        assert cfg.detection.brightness_threshold == 0.99

    def test_invalid_chunk_size(self):
        with pytest.raises(InvalidConfiguration):
            parse_config({"split": {"pages_per_chunk": 0}})

    @pytest.mark.parametrize(
        "data",
        [
            {"detection": {"scale": "big"}},
            {"detection": {"brightness_threshold": None}},
            {"detection": {"scale": True}},
        ],
    )
    def test_non_numeric_detection_values(self, data):
        with pytest.raises(InvalidConfiguration):
            parse_config(data)

    @pytest.mark.parametrize("value", ["false", 0, 1, None])
    def test_remove_blank_pages_must_be_bool(self, value):
        with pytest.raises(InvalidConfiguration):
            parse_config({"split": {"remove_blank_pages": value}})

    def test_remove_blank_pages_false(self):
        assert parse_config({"split": {"remove_blank_pages": False}}).split.remove_blank_pages is False

    def test_bad_section(self):
        with pytest.raises(InvalidConfiguration):
            parse_config({"detection": [1, 2]})

    def test_unreadable_file(self, tmp_path: Path):
        path = tmp_path / "cfg.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_config(path)
