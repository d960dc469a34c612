"""Tests for firmware source generation."""

import pytest

from cubestudio.common.exceptions import ValidationError
from cubestudio.config import FirmwareConfig
from cubestudio.export.firmware import emit_firmware_source, render_frame_table
from cubestudio.model.frames import FrameSequence, blank_frame


class TestFirmwareEmitter:
    """Test Arduino source generation"""

    def test_multiplexed_default(self, three_frames):
        source = emit_firmware_source(three_frames)
        assert "const int columnPins[9] = {2, 3, 4, 5, 6, 7, 8, 9, 10};" in source
        assert "const int layerPins[3] = {11, 12, 13};" in source
        assert "const int FRAME_COUNT = 3;" in source
        assert "void displayPattern(int pattern[3][3][3], unsigned long duration)" in source
        assert "delay(3);" in source
        assert "$" not in source

    def test_basic(self, three_frames):
        source = emit_firmware_source(three_frames, "basic")
        assert source.startswith("// LED Cube (3x3x3)")
        assert "// Total frames: 3" in source
        assert "void renderFrame(int frameIndex)" in source
        assert "columnPins" not in source

    def test_frame_table(self, three_frames):
        table = render_frame_table(three_frames)
        assert table.count("{ 1, 0, 0 }") == 1
        assert table.count("{ 1, 1, 1 }") == 9
        assert "    100\n" in table
        assert table.rstrip().endswith("300\n  }")

    def test_custom_pins(self):
        config = FirmwareConfig(
            column_pins=list(range(22, 31)), layer_pins=[40, 41, 42], layer_settle_ms=2
        )
        source = emit_firmware_source(FrameSequence([blank_frame()]), config=config)
        assert "{22, 23, 24, 25, 26, 27, 28, 29, 30}" in source
        assert "delay(2);" in source

    def test_deterministic(self, three_frames):
        assert emit_firmware_source(three_frames) == emit_firmware_source(three_frames)

    def test_unknown_variant(self, three_frames):
        with pytest.raises(ValidationError):
            emit_firmware_source(three_frames, "esp32")

    def test_invalid_pin_config(self):
        config = FirmwareConfig(column_pins=[1, 2, 3])
        with pytest.raises(ValidationError):
            emit_firmware_source(FrameSequence([blank_frame()]), config=config)


class TestReceiverSketch:
    """Test the serial receiver firmware"""

    def test_defaults(self, three_frames):
        source = emit_firmware_source(three_frames, "receiver")
        assert "#define BAUD_RATE 115200" in source
        assert "const int columnPins[9] = {2, 3, 4, 5, 6, 7, 8, 9, 10};" in source
        assert "const int layerPins[3] = {11, 12, 13};" in source
        assert "Serial.readStringUntil('\\n');" in source
        assert 'if (command.startsWith("CUBE:")) {' in source
        assert "updateCubeFromHex(command.substring(5));" in source
        assert "strtol(hexByte.c_str(), NULL, 16)" in source
        assert "cube[i / 9][(i % 9) / 3][i % 3] = state;" in source
        assert 'Serial.println("OK");' in source
        assert 'Serial.println("ERR");' in source
        assert "$" not in source

    def test_independent_of_frames(self, three_frames):
        single = FrameSequence([blank_frame()])
        assert emit_firmware_source(three_frames, "receiver") == emit_firmware_source(
            single, "receiver"
        )

    def test_configured_pins_and_baud(self):
        config = FirmwareConfig(
            column_pins=list(range(22, 31)),
            layer_pins=[40, 41, 42],
            layer_settle_ms=2,
            baud_rate=9600,
        )
        source = emit_firmware_source(FrameSequence([blank_frame()]), "receiver", config)
        assert "#define BAUD_RATE 9600" in source
        assert "{22, 23, 24, 25, 26, 27, 28, 29, 30}" in source
        assert "{40, 41, 42}" in source
        assert "delay(2);" in source

    def test_invalid_baud(self):
        with pytest.raises(ValidationError):
            emit_firmware_source(
                FrameSequence([blank_frame()]), "receiver", FirmwareConfig(baud_rate=0)
            )
