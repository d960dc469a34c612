from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Tuple, Union
import logging

import yaml

from .common.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class StudioDefaults:
    """Constants for the 3x3x3 cube studio"""

    # Cube geometry
    CUBE_SIZE: ClassVar[int] = 3
    CELL_COUNT: ClassVar[int] = 27
    PAYLOAD_BYTES: ClassVar[int] = 4  # ceil(27 / 8)

    # Frame timing
    MIN_DELAY_MS: ClassVar[int] = 50
    MAX_DELAY_MS: ClassVar[int] = 5000
    DEFAULT_DELAY_MS: ClassVar[int] = 220

    # History
    DEFAULT_HISTORY_CAP: ClassVar[int] = 50

    # Example animations
    RAIN_DELAY_MS: ClassVar[int] = 100
    RAIN_DROPS: ClassVar[int] = 5
    SCAN_DELAY_MS: ClassVar[int] = 150

    # Wire format
    PAYLOAD_PREFIX: ClassVar[str] = "CUBE:"

    # Firmware template (common cathode layers, anode columns)
    DEFAULT_COLUMN_PINS: ClassVar[Tuple[int, ...]] = (2, 3, 4, 5, 6, 7, 8, 9, 10)
    DEFAULT_LAYER_PINS: ClassVar[Tuple[int, ...]] = (11, 12, 13)
    DEFAULT_LAYER_SETTLE_MS: ClassVar[int] = 3
    DEFAULT_BAUD_RATE: ClassVar[int] = 115200

    # Transport
    DEFAULT_LINK_HOST: ClassVar[str] = "localhost"
    DEFAULT_LINK_PORT: ClassVar[int] = 8765
    DEFAULT_CONNECT_TIMEOUT_S: ClassVar[float] = 5.0

    @classmethod
    def get_all_defaults(cls) -> Dict[str, Any]:
        """Get all default values as a dictionary"""
        return {
            name: value
            for name, value in vars(cls).items()
            if name.startswith("DEFAULT_") and not callable(value)
        }


@dataclass
class DelayConfig:
    """Per-frame display duration limits"""

    min_delay_ms: int = StudioDefaults.MIN_DELAY_MS
    max_delay_ms: int = StudioDefaults.MAX_DELAY_MS
    default_delay_ms: int = StudioDefaults.DEFAULT_DELAY_MS

    def validate(self) -> None:
        """Validate delay range"""
        if self.min_delay_ms < 1:
            raise ValidationError("Minimum delay must be a positive number of ms")
        if self.max_delay_ms < self.min_delay_ms:
            raise ValidationError(
                f"Maximum delay {self.max_delay_ms}ms is below minimum {self.min_delay_ms}ms"
            )
        if not self.min_delay_ms <= self.default_delay_ms <= self.max_delay_ms:
            raise ValidationError(
                f"Default delay {self.default_delay_ms}ms outside "
                f"[{self.min_delay_ms}, {self.max_delay_ms}]"
            )

    def clamp(self, delay_ms: Any) -> int:
        """Clamp a delay into the configured range"""
        try:
            value = int(delay_ms)
        except (TypeError, ValueError):
            logger.warning(f"Invalid delay {delay_ms!r}, using default")
            return self.default_delay_ms

        if value < self.min_delay_ms:
            logger.debug(f"Clamping delay {value}ms to minimum {self.min_delay_ms}ms")
            return self.min_delay_ms
        if value > self.max_delay_ms:
            logger.debug(f"Clamping delay {value}ms to maximum {self.max_delay_ms}ms")
            return self.max_delay_ms
        return value


@dataclass
class HistoryConfig:
    """Undo/redo history settings"""

    max_entries: int = StudioDefaults.DEFAULT_HISTORY_CAP

    def validate(self) -> None:
        if not 1 <= self.max_entries <= 1000:
            raise ValidationError("History cap must be between 1 and 1000")


@dataclass
class FirmwareConfig:
    """Pin layout for generated firmware"""

    column_pins: List[int] = field(
        default_factory=lambda: list(StudioDefaults.DEFAULT_COLUMN_PINS)
    )
    layer_pins: List[int] = field(
        default_factory=lambda: list(StudioDefaults.DEFAULT_LAYER_PINS)
    )
    layer_settle_ms: int = StudioDefaults.DEFAULT_LAYER_SETTLE_MS
    baud_rate: int = StudioDefaults.DEFAULT_BAUD_RATE

    def validate(self) -> None:
        """Validate pin layout"""
        size = StudioDefaults.CUBE_SIZE
        if len(self.column_pins) != size * size:
            raise ValidationError(f"Expected {size * size} column pins")
        if len(self.layer_pins) != size:
            raise ValidationError(f"Expected {size} layer pins")
        pins = list(self.column_pins) + list(self.layer_pins)
        if len(set(pins)) != len(pins):
            raise ValidationError("Column and layer pins must be distinct")
        if any(pin < 0 for pin in pins):
            raise ValidationError("Pin numbers must be non-negative")
        if not 1 <= self.layer_settle_ms <= 50:
            raise ValidationError("Layer settle time must be between 1 and 50 ms")
        if self.baud_rate <= 0:
            raise ValidationError("Baud rate must be positive")

    def get_refresh_rate_hz(self) -> float:
        """Approximate refresh rate of the multiplexed display loop"""
        return 1000 / (self.layer_settle_ms * len(self.layer_pins))


@dataclass
class TransportConfig:
    """Live link settings"""

    host: str = StudioDefaults.DEFAULT_LINK_HOST
    port: int = StudioDefaults.DEFAULT_LINK_PORT
    connect_timeout_s: float = StudioDefaults.DEFAULT_CONNECT_TIMEOUT_S
    path: str = "/cube"

    def validate(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValidationError("Link port must be between 1 and 65535")
        if self.connect_timeout_s <= 0:
            raise ValidationError("Connect timeout must be positive")
        if not self.path.startswith("/"):
            raise ValidationError("Link path must start with '/'")

    @property
    def uri(self) -> str:
        return f"ws://{self.host}:{self.port}{self.path}"


@dataclass
class StudioConfig:
    """Main studio configuration"""

    delay: DelayConfig = field(default_factory=DelayConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    firmware: FirmwareConfig = field(default_factory=FirmwareConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)

    def __post_init__(self):
        """Validate entire configuration"""
        try:
            self.delay.validate()
            self.history.validate()
            self.firmware.validate()
            self.transport.validate()
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    @classmethod
    def create_default(cls) -> "StudioConfig":
        """Create default configuration"""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudioConfig":
        """Build configuration from a nested dictionary"""
        try:
            return cls(
                delay=DelayConfig(**(data.get("delay") or {})),
                history=HistoryConfig(**(data.get("history") or {})),
                firmware=FirmwareConfig(**(data.get("firmware") or {})),
                transport=TransportConfig(**(data.get("transport") or {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "StudioConfig":
        """Load configuration from a YAML file"""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config {path} must be a mapping")

        config = cls.from_dict(data.get("studio") or data)
        logger.info(f"Loaded configuration from {path}")
        return config

    def update(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values"""
        if "delay" in updates:
            self.delay = DelayConfig(**updates["delay"])
        if "history" in updates:
            self.history = HistoryConfig(**updates["history"])
        if "firmware" in updates:
            self.firmware = FirmwareConfig(**updates["firmware"])
        if "transport" in updates:
            self.transport = TransportConfig(**updates["transport"])

        # Revalidate after updates
        self.__post_init__()
