"""Tests for core types and exceptions."""

import base64

import pytest

from keyframer.core import (
    DEFAULT_DESCRIPTION,
    ConfigurationError,
    ExportDocument,
    ExtractionResult,
    ExtractionRun,
    ExtractionState,
    Frame,
    FrameIndexError,
    KeyframerError,
)


class TestFrame:
    def test_defaults(self):
        frame = Frame(raster=b"abc", timestamp=1.5)
        assert frame.description == DEFAULT_DESCRIPTION
        assert frame.notes == ""
        assert frame.media_type == "image/jpeg"

    def test_data_uri(self):
        frame = Frame(raster=b"\xff\xd8\xff", timestamp=0.0)
        uri = frame.data_uri()
        assert uri.startswith("data:image/jpeg;base64,")
        assert base64.b64decode(uri.split(",", 1)[1]) == b"\xff\xd8\xff"

    def test_copy_is_independent(self):
        frame = Frame(raster=b"abc", timestamp=2.0, notes="original")
        clone = frame.copy()
        clone.notes = "changed"
        assert frame.notes == "original"
        assert clone == Frame(raster=b"abc", timestamp=2.0, notes="changed")


class TestExtractionRun:
    def test_interval(self):
        run = ExtractionRun(run_id=1, target_count=8, duration=16.0)
        assert run.interval == 2.0

    def test_finished_states(self):
        run = ExtractionRun(run_id=1, target_count=8, duration=16.0)
        assert not run.is_finished
        run.state = ExtractionState.SEEKING
        assert not run.is_finished
        for state in (ExtractionState.DONE, ExtractionState.EMPTY,
                      ExtractionState.SUPERSEDED, ExtractionState.FAILED):
            run.state = state
            assert run.is_finished

    def test_result_length(self):
        frames = (Frame(raster=b"a", timestamp=0.0), Frame(raster=b"b", timestamp=1.0))
        result = ExtractionResult(run_id=3, state=ExtractionState.DONE, frames=frames)
        assert len(result) == 2


class TestExportDocument:
    def test_save(self, tmp_path):
        doc = ExportDocument(data=b"<html></html>", filename="report_2024-01-01.html")
        path = doc.save(tmp_path / "out")
        assert path == tmp_path / "out" / "report_2024-01-01.html"
        assert path.read_bytes() == b"<html></html>"


class TestExceptions:
    def test_frame_index_error_is_index_error(self):
        with pytest.raises(IndexError):
            raise FrameIndexError("out of range")

    def test_configuration_error_is_value_error(self):
        err = ConfigurationError("bad")
        assert isinstance(err, ValueError)
        assert isinstance(err, KeyframerError)
