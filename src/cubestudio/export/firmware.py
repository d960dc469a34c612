"""Arduino source generation for a frame sequence.

Three variants are available:

``basic``
    Frame table plus a ``renderFrame`` stub to wire up by hand.
``multiplexed``
    Complete sketch for a common-cathode cube: nine anode column pins,
    three cathode layer pins, and a display routine that strobes one layer
    at a time until the frame's duration has elapsed.
``receiver``
    Live display for the serial link: parses ``CUBE:<hex>`` lines into the
    cube state, replies ``OK`` or ``ERR``, and keeps the layers strobing.

The output is a pure function of the sequence and the firmware configuration.
"""

from string import Template
from typing import List, Optional
import logging

from ..common.exceptions import ValidationError
from ..config import FirmwareConfig, StudioDefaults
from ..model import cube
from ..model.frames import Frame, FrameSequence

logger = logging.getLogger(__name__)

VARIANTS = ("basic", "multiplexed", "receiver")
PAYLOAD_PREFIX = StudioDefaults.PAYLOAD_PREFIX

_BASIC_TEMPLATE = Template(
    """\
// LED Cube (3x3x3)
// Total frames: $frame_count

struct Frame {
  int leds[3][3][3];
  int delayMs;
};

const int FRAME_COUNT = $frame_count;

Frame frames[FRAME_COUNT] = {
$frames
};

void renderFrame(int frameIndex) {
  // Map frames[frameIndex].leds[z][y][x] to your pins
  // z = layer (0-2), y = row (0-2), x = column (0-2)
  for (int z = 0; z < 3; z++) {
    for (int y = 0; y < 3; y++) {
      for (int x = 0; x < 3; x++) {
        // digitalWrite(ledPins[z][y][x], frames[frameIndex].leds[z][y][x]);
      }
    }
  }
}

void playAnimation() {
  for (int i = 0; i < FRAME_COUNT; i++) {
    renderFrame(i);
    delay(frames[i].delayMs);
  }
}
"""
)

_MULTIPLEXED_TEMPLATE = Template(
    """\
/*
 * 3x3x3 LED Cube - Arduino Code
 * Configuration:
 * 9 Column Pins (Anodes): $column_pins
 * 3 Layer Pins (Cathodes): $layer_pins
 * Total frames: $frame_count
 */
#include <Arduino.h>
// Pin Definitions
const int columnPins[9] = {$column_pins};
const int layerPins[3] = {$layer_pins};

struct Frame {
  int leds[3][3][3];
  int delayMs;
};

const int FRAME_COUNT = $frame_count;

Frame frames[FRAME_COUNT] = {
$frames
};

void setup() {
  // Columns (anodes) start LOW: off
  for (int i = 0; i < 9; i++) {
    pinMode(columnPins[i], OUTPUT);
    digitalWrite(columnPins[i], LOW);
  }

  // Layers (cathodes) are active LOW, so HIGH means off
  for (int i = 0; i < 3; i++) {
    pinMode(layerPins[i], OUTPUT);
    digitalWrite(layerPins[i], HIGH);
  }
}

/**
 * Shows one cube state for a duration in milliseconds.
 *
 * @param pattern  Cube state indexed [layer][row][column], 0 or 1.
 * @param duration How long to keep the pattern on display.
 */
void displayPattern(int pattern[3][3][3], unsigned long duration) {
  unsigned long startTime = millis();

  while (millis() - startTime < duration) {
    for (int layer = 0; layer < 3; layer++) {
      // Column data for this layer
      for (int row = 0; row < 3; row++) {
        for (int col = 0; col < 3; col++) {
          digitalWrite(columnPins[row * 3 + col], pattern[layer][row][col] == 1 ? HIGH : LOW);
        }
      }

      // Pull the layer LOW to light it
      digitalWrite(layerPins[layer], LOW);

      // $settle_ms ms x 3 layers, about $refresh_hz Hz refresh
      delay($settle_ms);

      // Release the layer before the columns change
      digitalWrite(layerPins[layer], HIGH);
    }
  }
}

void playAnimation() {
  for (int i = 0; i < FRAME_COUNT; i++) {
    displayPattern(frames[i].leds, frames[i].delayMs);
  }
}

void loop() {
  playAnimation();
}
"""
)

_RECEIVER_TEMPLATE = Template(
    """\
/*
 * 3x3x3 LED Cube - Serial Receiver
 * Accepts live frames as CUBE:<hex> lines and replies OK or ERR.
 * 9 Column Pins (Anodes): $column_pins
 * 3 Layer Pins (Cathodes): $layer_pins
 */
#include <Arduino.h>

#define BAUD_RATE $baud_rate

const int columnPins[9] = {$column_pins};
const int layerPins[3] = {$layer_pins};

// Current cube state indexed [layer][row][column]
int cube[3][3][3];

void setup() {
  Serial.begin(BAUD_RATE);

  for (int i = 0; i < 9; i++) {
    pinMode(columnPins[i], OUTPUT);
    digitalWrite(columnPins[i], LOW);
  }
  for (int i = 0; i < 3; i++) {
    pinMode(layerPins[i], OUTPUT);
    digitalWrite(layerPins[i], HIGH);
  }

  Serial.println("LED Cube Ready!");
}

/**
 * Unpacks 27 bits, least significant bit first in each byte.
 * Bit i maps to layer i / 9, row (i % 9) / 3, column i % 3.
 */
void updateCubeFromHex(String hex) {
  for (int i = 0; i < 27; i++) {
    int byteIndex = i / 8;
    int bitIndex = i % 8;
    int state = 0;

    if (byteIndex * 2 < hex.length()) {
      String hexByte = hex.substring(byteIndex * 2, byteIndex * 2 + 2);
      int value = strtol(hexByte.c_str(), NULL, 16);
      state = (value >> bitIndex) & 1;
    }

    cube[i / 9][(i % 9) / 3][i % 3] = state;
  }
}

void readSerial() {
  if (Serial.available() <= 0) {
    return;
  }

  String command = Serial.readStringUntil('\\n');
  command.trim();

  if (command.startsWith("$prefix")) {
    updateCubeFromHex(command.substring($prefix_length));
    Serial.println("OK");
  } else {
    Serial.println("ERR");
  }
}

void refreshLayers() {
  for (int layer = 0; layer < 3; layer++) {
    for (int row = 0; row < 3; row++) {
      for (int col = 0; col < 3; col++) {
        digitalWrite(columnPins[row * 3 + col], cube[layer][row][col] == 1 ? HIGH : LOW);
      }
    }

    digitalWrite(layerPins[layer], LOW);
    // $settle_ms ms x 3 layers, about $refresh_hz Hz refresh
    delay($settle_ms);
    digitalWrite(layerPins[layer], HIGH);
  }
}

void loop() {
  readSerial();
  refreshLayers();
}
"""
)


def _render_frame(frame: Frame) -> str:
    """Struct initializer for one frame, layers in [z][y][x] order"""
    layers = []
    for layer in cube.to_nested(frame.cube):
        rows = [f"      {{ {', '.join(str(v) for v in row)} }}" for row in layer]
        layers.append("    {\n" + ",\n".join(rows) + "\n    }")
    return "  {\n    {\n" + ",\n".join(layers) + f"\n    }},\n    {frame.delay_ms}\n  }}"


def render_frame_table(sequence: FrameSequence) -> str:
    return ",\n".join(_render_frame(frame) for frame in sequence)


def _pin_list(pins: List[int]) -> str:
    return ", ".join(str(pin) for pin in pins)


def emit_firmware_source(
    sequence: FrameSequence,
    variant: str = "multiplexed",
    config: Optional[FirmwareConfig] = None,
) -> str:
    """Render Arduino source for ``sequence``

    The receiver variant ignores the sequence; it displays whatever frames
    arrive over the serial link.
    """
    if variant not in VARIANTS:
        raise ValidationError(
            f"Unknown firmware variant: {variant} (expected one of {', '.join(VARIANTS)})"
        )

    if variant == "basic":
        source = _BASIC_TEMPLATE.substitute(
            frame_count=len(sequence), frames=render_frame_table(sequence)
        )
    else:
        config = config or FirmwareConfig()
        config.validate()
        pins = dict(
            column_pins=_pin_list(config.column_pins),
            layer_pins=_pin_list(config.layer_pins),
            settle_ms=config.layer_settle_ms,
            refresh_hz=int(round(config.get_refresh_rate_hz())),
        )
        if variant == "receiver":
            source = _RECEIVER_TEMPLATE.substitute(
                baud_rate=config.baud_rate,
                prefix=PAYLOAD_PREFIX,
                prefix_length=len(PAYLOAD_PREFIX),
                **pins,
            )
        else:
            source = _MULTIPLEXED_TEMPLATE.substitute(
                frame_count=len(sequence), frames=render_frame_table(sequence), **pins
            )

    logger.debug(f"Generated {variant} firmware for {len(sequence)} frames")
    return source
