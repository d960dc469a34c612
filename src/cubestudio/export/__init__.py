"""Scene files and firmware source generation."""

from .firmware import VARIANTS, emit_firmware_source
from .scene import FrameModel, SceneDocument, export_scene, import_scene

__all__ = [
    "VARIANTS",
    "emit_firmware_source",
    "FrameModel",
    "SceneDocument",
    "export_scene",
    "import_scene",
]
