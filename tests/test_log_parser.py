"""Tests for parsing earlier run output."""

import os

import pytest

from mediasync.services.log_parser import CompletedLogEntry, parse_completed_entries, parse_completed_lines
from mediasync.utils.errors import InputError


class TestParseLines:
    """Test cases for parsing completed lines."""

    def test_uploaded_line_with_status_code(self):
        """Test parsing an uploaded line with a status code."""
        entries = parse_completed_lines(["Uploaded: /a/x.jpg -> 201  : 1/1"])
        assert entries == [CompletedLogEntry(path="/a/x.jpg", status_code=201)]

    def test_uploaded_line_without_code(self):
        """Test parsing an uploaded line without a numeric code."""
        entries = parse_completed_lines(["Uploaded: /a/x.jpg -> undefined  : 1/1", "Uploaded: /a/y.jpg"])
        assert entries == [
            CompletedLogEntry(path="/a/x.jpg", status_code=None),
            CompletedLogEntry(path="/a/y.jpg", status_code=None),
        ]

    def test_already_uploaded_line(self):
        """Test parsing an already uploaded line."""
        entries = parse_completed_lines(["Skipping already uploaded file: /b/y.mp4"])
        assert entries == [CompletedLogEntry(path="/b/y.mp4", status_code=None)]

    def test_other_lines_ignored(self):
        """Test that unrelated lines are ignored."""
        lines = [
            "Found 3 media file(s) to upload.",
            "Failed: /a/x.jpg -> Request failed with status code 500  : 1/3",
            "Retrying later (1/5): /a/x.jpg",
            "  ",
            "Uploaded:  -> 201",
        ]
        assert parse_completed_lines(lines) == []

    def test_last_occurrence_wins_first_position_kept(self):
        """Test that the last code wins at the first position."""
        lines = [
            "Uploaded: /a/x.jpg -> 500  : 1/2",
            "Uploaded: /a/y.jpg -> 201  : 2/2",
            "Uploaded: /a/x.jpg -> 200  : 3/3",
        ]
        assert parse_completed_lines(lines) == [
            CompletedLogEntry(path="/a/x.jpg", status_code=200),
            CompletedLogEntry(path="/a/y.jpg", status_code=201),
        ]

    def test_skip_line_keeps_known_code(self):
        """Test that a skip line keeps an earlier code."""
        lines = [
            "Uploaded: /a/x.jpg -> 201  : 1/1",
            "Skipping already uploaded file: /a/x.jpg",
        ]
        assert parse_completed_lines(lines) == [CompletedLogEntry(path="/a/x.jpg", status_code=201)]

    def test_relative_paths_are_resolved(self):
        """Test that relative paths are made absolute."""
        entries = parse_completed_lines(["Uploaded: photos/x.jpg -> 201"])
        assert entries[0].path == os.path.abspath("photos/x.jpg")

    def test_windows_line_endings_and_padding(self):
        """Test CRLF endings and surrounding whitespace."""
        entries = parse_completed_lines(["   Uploaded: /a/x.jpg -> 201  : 1/1\r\n"])
        assert entries == [CompletedLogEntry(path="/a/x.jpg", status_code=201)]

    def test_file_sink_prefix_is_stripped(self):
        """Test that the log file timestamp prefix is stripped."""
        line = (
            "2024-05-01 10:00:00 | INFO     | mediasync.services.synchronizer:run_sync:93 - "
            "Uploaded: /a/x.jpg -> 201  : 1/1"
        )
        assert parse_completed_lines([line]) == [CompletedLogEntry(path="/a/x.jpg", status_code=201)]


class TestParseFile:
    """Test cases for reading a log file."""

    def test_reads_utf8_log(self, tmp_path):
        """Test reading a UTF-8 log file."""
        log = tmp_path / "run.log"
        log.write_text("Uploaded: /fotos/año.jpg -> 201  : 1/1\n", encoding="utf-8")

        assert parse_completed_entries(log) == [CompletedLogEntry(path="/fotos/año.jpg", status_code=201)]

    def test_missing_log_is_input_error(self, tmp_path):
        """Test that a missing log raises InputError."""
        with pytest.raises(InputError):
            parse_completed_entries(tmp_path / "missing.log")
