"""UI components for Region Marker."""

from .renderer import Renderer
from .editor_canvas import EditorCanvas
from .main_window import EditorWindow

__all__ = [
    "Renderer",
    "EditorCanvas",
    "EditorWindow",
]
