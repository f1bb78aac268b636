"""Core editing logic for Region Marker."""

from .models import Marking, MarkingKind, MarkingModel, RectMark, Stroke
from .viewport import ViewportState, ViewportTransform
from .config import EditorConfig, ConfigManager
from .errors import ExportFailure, ImageLoadFailure, RegionMarkerError, SessionClosedError
from .exporter import Exporter, encode_png, to_data_url
from .input_controller import InputController, InteractionState

__all__ = [
    "Marking",
    "MarkingKind",
    "MarkingModel",
    "RectMark",
    "Stroke",
    "ViewportState",
    "ViewportTransform",
    "EditorConfig",
    "ConfigManager",
    "ExportFailure",
    "ImageLoadFailure",
    "RegionMarkerError",
    "SessionClosedError",
    "Exporter",
    "encode_png",
    "to_data_url",
    "InputController",
    "InteractionState",
]
