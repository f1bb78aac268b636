"""Configuration management for Region Marker."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

logger = logging.getLogger(__name__)

# Default configuration file path
DEFAULT_CONFIG_PATH = Path("region_marker.yaml")

PAN_MODIFIERS = {
    "alt": Qt.KeyboardModifier.AltModifier,
    "shift": Qt.KeyboardModifier.ShiftModifier,
    "ctrl": Qt.KeyboardModifier.ControlModifier,
    "meta": Qt.KeyboardModifier.MetaModifier,
}


@dataclass
class EditorConfig:
    """
    Editor configuration settings.

    Display colours are cosmetic only; ``marker_color`` is the colour
    written into exported images.
    """

    brush_size: int = 20  # Brush diameter in screen pixels
    min_brush_size: int = 5
    max_brush_size: int = 100
    min_scale: float = 0.1
    max_scale: float = 10.0
    zoom_step: float = 1.1  # Wheel-up factor; wheel-down uses 2 - zoom_step
    fit_margin_x: float = 40.0
    fit_margin_y: float = 100.0
    display_color: str = "#EF4444"
    display_opacity: float = 0.5
    marker_color: str = "#EF4444"
    background_color: str = "#0F172A"
    pan_modifier: str = "alt"  # alt, shift, ctrl or meta
    default_tool: str = "brush"  # brush or rect

    @property
    def zoom_in_factor(self) -> float:
        return self.zoom_step

    @property
    def zoom_out_factor(self) -> float:
        return 2.0 - self.zoom_step

    def display_qcolor(self) -> QColor:
        """Translucent colour used on screen."""
        color = QColor(self.display_color)
        color.setAlphaF(max(0.0, min(self.display_opacity, 1.0)))
        return color

    def marker_qcolor(self) -> QColor:
        """Opaque colour used for export."""
        color = QColor(self.marker_color)
        color.setAlpha(255)
        return color

    def pan_qt_modifier(self) -> Qt.KeyboardModifier:
        modifier = PAN_MODIFIERS.get(self.pan_modifier.lower())
        if modifier is None:
            logger.warning(f"Unknown pan modifier {self.pan_modifier!r}, using alt")
            return Qt.KeyboardModifier.AltModifier
        return modifier

    def clamp_brush_size(self, size: int) -> int:
        return max(self.min_brush_size, min(int(size), self.max_brush_size))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "brushSize": self.brush_size,
            "minBrushSize": self.min_brush_size,
            "maxBrushSize": self.max_brush_size,
            "minScale": self.min_scale,
            "maxScale": self.max_scale,
            "zoomStep": self.zoom_step,
            "fitMarginX": self.fit_margin_x,
            "fitMarginY": self.fit_margin_y,
            "displayColor": self.display_color,
            "displayOpacity": self.display_opacity,
            "markerColor": self.marker_color,
            "backgroundColor": self.background_color,
            "panModifier": self.pan_modifier,
            "defaultTool": self.default_tool,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EditorConfig:
        """Create config from dictionary."""
        return cls(
            brush_size=data.get("brushSize", 20),
            min_brush_size=data.get("minBrushSize", 5),
            max_brush_size=data.get("maxBrushSize", 100),
            min_scale=data.get("minScale", 0.1),
            max_scale=data.get("maxScale", 10.0),
            zoom_step=data.get("zoomStep", 1.1),
            fit_margin_x=data.get("fitMarginX", 40.0),
            fit_margin_y=data.get("fitMarginY", 100.0),
            display_color=data.get("displayColor", "#EF4444"),
            display_opacity=data.get("displayOpacity", 0.5),
            marker_color=data.get("markerColor", "#EF4444"),
            background_color=data.get("backgroundColor", "#0F172A"),
            pan_modifier=data.get("panModifier", "alt"),
            default_tool=data.get("defaultTool", "brush"),
        )


class ConfigManager:
    """
    Manager for loading and saving editor configuration.

    Handles YAML serialization and provides a clean interface
    for configuration access.
    """

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Optional[EditorConfig] = None

    @property
    def config(self) -> EditorConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> EditorConfig:
        """
        Load configuration from file.

        Returns:
            EditorConfig instance with loaded or default values
        """
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return EditorConfig()

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.error(f"Config file {self.config_path} is not a mapping")
                return EditorConfig()
            logger.info(f"Loaded configuration from {self.config_path}")
            return EditorConfig.from_dict(data)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}")
            return EditorConfig()
        except OSError as e:
            logger.error(f"Error loading config: {e}")
            return EditorConfig()

    def save(self, config: Optional[EditorConfig] = None) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration to save, or use current config

        Returns:
            True if save was successful
        """
        if config is not None:
            self._config = config

        if self._config is None:
            logger.warning("No configuration to save")
            return False

        try:
            with open(self.config_path, "w") as f:
                yaml.dump(self._config.to_dict(), f, default_flow_style=False)
            logger.info(f"Saved configuration to {self.config_path}")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def update(self, **kwargs: Any) -> None:
        """
        Update configuration with new values.

        Args:
            **kwargs: Key-value pairs to update
        """
        config = self.config
        known = {f.name for f in fields(config)}
        for key, value in kwargs.items():
            if key in known:
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown config key: {key}")
        self.save()
