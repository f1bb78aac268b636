"""Tests for configuration management."""

import pytest
from pathlib import Path
import tempfile

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

from region_marker.core.config import EditorConfig, ConfigManager


class TestEditorConfig:
    """Tests for EditorConfig."""

    def test_default_config(self):
        """Test creating config with defaults."""
        config = EditorConfig()

        assert config.brush_size == 20
        assert config.min_brush_size == 5
        assert config.max_brush_size == 100
        assert config.min_scale == 0.1
        assert config.max_scale == 10.0
        assert config.default_tool == "brush"

    def test_zoom_factors(self):
        """Test wheel factors derive from the zoom step."""
        config = EditorConfig(zoom_step=1.25)

        assert config.zoom_in_factor == 1.25
        assert config.zoom_out_factor == pytest.approx(0.75)

    def test_colors(self):
        """Test display colour is translucent and marker colour opaque."""
        config = EditorConfig(display_opacity=0.5, marker_color="#123456")

        assert config.display_qcolor().alpha() == 128
        assert config.marker_qcolor() == QColor(0x12, 0x34, 0x56, 255)

    def test_pan_modifier(self):
        """Test pan modifier names map to Qt modifiers."""
        assert EditorConfig().pan_qt_modifier() == Qt.KeyboardModifier.AltModifier
        assert EditorConfig(pan_modifier="Shift").pan_qt_modifier() == Qt.KeyboardModifier.ShiftModifier
        assert EditorConfig(pan_modifier="hyper").pan_qt_modifier() == Qt.KeyboardModifier.AltModifier

    def test_clamp_brush_size(self):
        """Test brush sizes are clamped to the configured range."""
        config = EditorConfig()

        assert config.clamp_brush_size(1) == 5
        assert config.clamp_brush_size(50) == 50
        assert config.clamp_brush_size(500) == 100

    def test_to_dict(self):
        """Test converting config to dictionary."""
        config = EditorConfig(brush_size=33, pan_modifier="ctrl")

        data = config.to_dict()

        assert data["brushSize"] == 33
        assert data["panModifier"] == "ctrl"
        assert "markerColor" in data

    def test_from_dict_with_defaults(self):
        """Test creating config from partial dictionary."""
        config = EditorConfig.from_dict({"maxScale": 4.0})

        assert config.max_scale == 4.0
        assert config.brush_size == 20  # default
        assert config.marker_color == "#EF4444"  # default

    def test_dict_round_trip(self):
        """Test to_dict and from_dict preserve every field."""
        config = EditorConfig(brush_size=12, display_opacity=0.3, default_tool="rect")

        assert EditorConfig.from_dict(config.to_dict()) == config


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_load_nonexistent_file(self):
        """Test loading config when file doesn't exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            manager = ConfigManager(Path(tmpdir) / "nonexistent.yaml")

            config = manager.load()

            assert config == EditorConfig()

    def test_load_sample(self, sample_config_yaml):
        """Test loading values from YAML."""
        config = ConfigManager(sample_config_yaml).load()

        assert config.brush_size == 40
        assert config.max_scale == 8.0
        assert config.marker_color == "#00FF00"
        assert config.pan_modifier == "shift"

    def test_load_malformed_file(self, tmp_path):
        """Test a malformed file falls back to defaults."""
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("brushSize: [unclosed\n")

        assert ConfigManager(config_path).load() == EditorConfig()

    def test_load_non_mapping(self, tmp_path):
        """Test a YAML list falls back to defaults."""
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- 1\n- 2\n")

        assert ConfigManager(config_path).load() == EditorConfig()

    def test_save_and_load(self, tmp_path):
        """Test saving and loading config."""
        config_path = tmp_path / "config.yaml"
        manager = ConfigManager(config_path)

        manager.save(EditorConfig(brush_size=64, default_tool="rect"))
        loaded = manager.load()

        assert loaded.brush_size == 64
        assert loaded.default_tool == "rect"

    def test_update(self, tmp_path):
        """Test updating config values."""
        manager = ConfigManager(tmp_path / "config.yaml")

        manager.update(brush_size=42, not_a_setting=1)

        assert manager.config.brush_size == 42
        assert ConfigManager(tmp_path / "config.yaml").load().brush_size == 42

    def test_config_property(self, tmp_path):
        """Test config property lazy loading."""
        manager = ConfigManager(tmp_path / "config.yaml")

        assert manager.config is manager.config
