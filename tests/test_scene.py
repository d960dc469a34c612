"""Tests for scene export and import."""

import json
from datetime import datetime, timezone

import pytest

from cubestudio.common.exceptions import EmptySequenceError, ParseError
from cubestudio.config import DelayConfig, StudioConfig
from cubestudio.core.session import EditorSession
from cubestudio.export.scene import SceneDocument, export_scene, import_scene
from cubestudio.model import cube
from cubestudio.model.frames import Frame, FrameSequence, blank_frame

CREATED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestExport:
    """Test scene serialization"""

    def test_document_keys(self, three_frames):
        data = json.loads(export_scene("Sparkle", "Test scene", three_frames, CREATED))
        assert set(data) == {"name", "description", "frames", "createdAt"}
        assert data["name"] == "Sparkle"
        assert [frame["delayMs"] for frame in data["frames"]] == [100, 200, 300]
        assert data["frames"][0]["cube"][0][0][0] == 1

    def test_deterministic(self, three_frames):
        first = export_scene("A", "", three_frames, CREATED)
        second = export_scene("A", "", three_frames, CREATED)
        assert first == second

    def test_empty_name_gets_default(self, three_frames):
        data = json.loads(export_scene("", "", three_frames, CREATED))
        assert data["name"] == "Untitled Scene"


class TestImport:
    """Test scene parsing"""

    def test_round_trip(self, three_frames):
        document = import_scene(export_scene("Loop", "desc", three_frames, CREATED))
        assert document.name == "Loop"
        assert document.description == "desc"
        assert document.created_at == CREATED
        assert document.to_sequence() == three_frames

    def test_empty_frames_yield_blank_frame(self):
        document = import_scene('{"name": "Nothing", "frames": []}')
        seq = document.to_sequence()
        assert len(seq) == 1
        assert seq[0].is_blank()

    def test_empty_frames_strict(self):
        with pytest.raises(EmptySequenceError) as exc_info:
            import_scene('{"frames": []}', strict=True)
        assert len(exc_info.value.document.frames) == 1

    def test_missing_metadata_defaults(self):
        grid = cube.to_nested(cube.full())
        document = import_scene(json.dumps({"frames": [{"cube": grid}]}))
        assert document.name == "Imported Scene"
        assert document.frames[0].delay_ms == 220

    def test_delay_clamped(self):
        grid = cube.to_nested(cube.empty())
        document = import_scene(json.dumps({"frames": [{"cube": grid, "delayMs": 10}]}))
        assert document.to_sequence()[0].delay_ms == 50

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "{}",
            '{"frames": "nope"}',
            '{"frames": [{"cube": [[[0, 1]]]}]}',
            '{"frames": [{"cube": [[[2, 2, 2], [0, 0, 0], [0, 0, 0]], '
            '[[0, 0, 0], [0, 0, 0], [0, 0, 0]], [[0, 0, 0], [0, 0, 0], [0, 0, 0]]]}]}',
        ],
    )
    def test_malformed_raises_parse_error(self, text):
        with pytest.raises(ParseError):
            import_scene(text)

    def test_snake_case_fields_accepted(self):
        grid = cube.to_nested(cube.empty())
        document = SceneDocument(name="x", frames=[{"cube": grid, "delay_ms": 300}])
        assert document.frames[0].delay_ms == 300


class TestConfiguredDelayRange:
    """Test scene delays under a non-default delay range"""

    @pytest.fixture
    def wide_delays(self):
        return DelayConfig(min_delay_ms=10, max_delay_ms=10000, default_delay_ms=220)

    def test_export_keeps_delays(self):
        seq = FrameSequence([blank_frame(8000), blank_frame(20)])
        data = json.loads(export_scene("Slow", "", seq, CREATED))
        assert [frame["delayMs"] for frame in data["frames"]] == [8000, 20]

    def test_round_trip(self, wide_delays):
        seq = FrameSequence([Frame(cube=cube.full(), delay_ms=8000), blank_frame(20)])
        text = export_scene("Slow", "", seq, CREATED)

        document = import_scene(text, delay_config=wide_delays)
        assert [frame.delay_ms for frame in document.frames] == [8000, 20]
        assert document.to_sequence(wide_delays) == seq

    def test_import_clamps_to_callers_range(self):
        seq = FrameSequence([blank_frame(8000), blank_frame(20)])
        document = import_scene(export_scene("Slow", "", seq, CREATED))
        assert [frame.delay_ms for frame in document.frames] == [5000, 50]

    def test_session_round_trip(self, wide_delays):
        config = StudioConfig(delay=wide_delays)
        session = EditorSession(config=config)
        session.set_delay(8000)
        session.add_frame()
        session.set_delay(20)

        other = EditorSession(config=StudioConfig(delay=wide_delays))
        other.import_scene(session.export_scene())
        assert [frame.delay_ms for frame in other.sequence] == [8000, 20]
