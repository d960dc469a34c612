import pytest
import yaml

from cubestudio.config import StudioConfig
from cubestudio.core.session import EditorSession
from cubestudio.model import cube
from cubestudio.model.frames import Frame, FrameSequence


@pytest.fixture
def studio_settings():
    """Studio configuration as it would appear in a YAML file"""
    return {
        "studio": {
            "delay": {"min_delay_ms": 50, "max_delay_ms": 5000, "default_delay_ms": 220},
            "history": {"max_entries": 50},
            "transport": {"host": "cube.local", "port": 9000},
        }
    }


@pytest.fixture
def config_file(tmp_path, studio_settings):
    """Create a temporary config file for testing"""
    config_path = tmp_path / "studio.yaml"
    with open(config_path, "w") as f:
        yaml.dump(studio_settings, f)
    return config_path


@pytest.fixture
def studio_config():
    """Test studio configuration"""
    return StudioConfig.create_default()


@pytest.fixture
def session(studio_config):
    """Fresh editing session with a single blank frame"""
    session = EditorSession(config=studio_config)
    yield session
    session.close()


@pytest.fixture
def corner_grid():
    """Grid with only (0, 0, 0) lit"""
    return cube.set_cell(cube.empty(), 0, 0, 0, 1)


@pytest.fixture
def three_frames(corner_grid):
    """Sequence with delays 100, 200 and 300 ms"""
    return FrameSequence(
        [
            Frame(cube=corner_grid, delay_ms=100),
            Frame(cube=cube.full(), delay_ms=200),
            Frame(cube=cube.empty(), delay_ms=300),
        ]
    )
