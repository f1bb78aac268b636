"""Main editor window for Region Marker."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, QSize, pyqtSignal
from PyQt6.QtGui import QAction, QActionGroup, QFont, QIcon, QImage, QImageReader, QPainter, QPixmap
from PyQt6.QtWidgets import (
    QLabel, QMainWindow, QMessageBox, QSlider, QStatusBar, QToolBar, QWidget
)

from ..core.config import EditorConfig
from ..core.errors import ExportFailure
from ..core.models import MarkingKind
from ..core.session import EditorSession
from ..workers.image_loader import ImageSource
from .editor_canvas import EditorCanvas

logger = logging.getLogger(__name__)


def increase_image_allocation_limit() -> None:
    """Remove image allocation limit for large images."""
    QImageReader.setAllocationLimit(0)


class EditorWindow(QMainWindow):
    """
    Window for marking regions on a single image.

    Provides:
    - Brush and rectangle tools with an adjustable brush size
    - Wheel zoom around the cursor and middle-button / Alt+drag panning
    - Clear, Apply and Cancel actions

    Apply exports the marked image at native resolution and emits
    ``marked``; Cancel emits ``cancelled`` without exporting.
    """

    # Emitted with the exported image after Apply
    marked = pyqtSignal(QImage)

    # Emitted when the operator cancels
    cancelled = pyqtSignal()

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.config = config or EditorConfig()
        self.session = EditorSession(self.config, self)
        self._finished = False

        self._init_ui()
        self._setup_connections()

    def _init_ui(self) -> None:
        """Initialize the user interface."""
        self.setWindowTitle("Region Marker")
        self.setGeometry(100, 100, 1200, 800)

        self.canvas = EditorCanvas(self.session)
        self.setCentralWidget(self.canvas)

        self._create_status_bar()
        self._create_toolbar()

    def _create_status_bar(self) -> None:
        """Create the status bar."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.hint_label = QLabel("Scroll to zoom • Drag to mark • Alt+drag or middle button to pan")
        self.status_bar.addWidget(self.hint_label)

        self.count_label = QLabel()
        self.status_bar.addPermanentWidget(self.count_label)

    def _create_toolbar(self) -> None:
        """Create the editor toolbar."""
        self.toolbar = QToolBar()
        self.toolbar.setObjectName("EditorToolBar")
        self.toolbar.setIconSize(QSize(32, 32))
        self.toolbar.setMovable(False)
        self.addToolBar(self.toolbar)

        cancel_action = QAction(self._create_icon("cancel"), "Cancel", self)
        cancel_action.setShortcut("Escape")
        cancel_action.triggered.connect(self.cancel)
        self.toolbar.addAction(cancel_action)

        self.toolbar.addSeparator()

        # Drawing tools
        drawing_tools = QActionGroup(self)

        self.brush_action = QAction(self._create_icon("brush"), "Brush", self)
        self.brush_action.setCheckable(True)
        self.brush_action.setShortcut("B")
        self.brush_action.triggered.connect(lambda: self._set_tool(MarkingKind.BRUSH))
        drawing_tools.addAction(self.brush_action)

        self.rect_action = QAction(self._create_icon("rect"), "Rectangle", self)
        self.rect_action.setCheckable(True)
        self.rect_action.setShortcut("R")
        self.rect_action.triggered.connect(lambda: self._set_tool(MarkingKind.RECT))
        drawing_tools.addAction(self.rect_action)

        self.toolbar.addActions(drawing_tools.actions())
        self.toolbar.addSeparator()

        # Brush size
        self.toolbar.addWidget(QLabel(" Brush size "))
        self.brush_slider = QSlider(Qt.Orientation.Horizontal)
        self.brush_slider.setRange(self.config.min_brush_size, self.config.max_brush_size)
        self.brush_slider.setValue(self.config.clamp_brush_size(self.config.brush_size))
        self.brush_slider.setFixedWidth(140)
        self.brush_slider.valueChanged.connect(self._on_brush_size_changed)
        self.toolbar.addWidget(self.brush_slider)
        self.brush_size_label = QLabel(str(self.brush_slider.value()))
        self.brush_size_label.setMinimumWidth(32)
        self.toolbar.addWidget(self.brush_size_label)

        self.toolbar.addSeparator()

        # Zoom readout
        self.toolbar.addWidget(QLabel(" Zoom "))
        self.zoom_label = QLabel("100%")
        self.zoom_label.setMinimumWidth(48)
        self.toolbar.addWidget(self.zoom_label)

        self.toolbar.addSeparator()

        clear_action = QAction(self._create_icon("clear"), "Clear Markings", self)
        clear_action.triggered.connect(self.session.clear_markings)
        self.toolbar.addAction(clear_action)

        self.apply_action = QAction(self._create_icon("apply"), "Apply", self)
        self.apply_action.setShortcut("Ctrl+Return")
        self.apply_action.setEnabled(False)
        self.apply_action.triggered.connect(self.apply)
        self.toolbar.addAction(self.apply_action)

        if self.session.controller.tool == MarkingKind.RECT:
            self.rect_action.setChecked(True)
        else:
            self.brush_action.setChecked(True)

    def _setup_connections(self) -> None:
        """Connect session and canvas signals."""
        self.session.ready.connect(self._on_ready)
        self.session.load_failed.connect(self._on_load_failed)
        self.session.changed.connect(self._update_counts)
        self.canvas.zoom_changed.connect(self._on_zoom_changed)

    @staticmethod
    def _create_icon(name: str, size: int = 32) -> QIcon:
        """Create an icon from a Unicode symbol.

        Args:
            name: Icon identifier
            size: Icon size in pixels
        """
        icons = {
            "cancel": "✕",
            "brush": "✎",
            "rect": "▢",
            "clear": "⌫",
            "apply": "✔",
        }

        symbol = icons.get(name, name)

        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.GlobalColor.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        font = QFont()
        font.setPointSize(int(size * 0.55))
        painter.setFont(font)

        painter.drawText(pixmap.rect(), Qt.AlignmentFlag.AlignCenter, symbol)
        painter.end()

        return QIcon(pixmap)

    # === Session control ===

    def open_image(self, source: ImageSource) -> None:
        """Start loading the image to mark."""
        self.session.set_container_size(self.canvas.size())
        self.session.open(source)

    def _set_tool(self, tool: MarkingKind) -> None:
        self.session.set_tool(tool)
        logger.debug(f"Tool set to {tool.value}")

    def _on_brush_size_changed(self, value: int) -> None:
        self.session.set_brush_size(value)
        self.brush_size_label.setText(str(value))

    def _on_ready(self) -> None:
        self.apply_action.setEnabled(True)
        self._on_zoom_changed(self.session.viewport.scale)
        self._update_counts()

    def _on_load_failed(self, message: str) -> None:
        QMessageBox.critical(self, "Image Load Failed", message)

    def _on_zoom_changed(self, scale: float) -> None:
        self.zoom_label.setText(f"{round(scale * 100)}%")

    def _update_counts(self) -> None:
        model = self.session.model
        self.count_label.setText(
            f"{model.brush_count} strokes, {model.rect_count} rectangles"
        )

    def apply(self) -> None:
        """Export the marked image and close the window."""
        try:
            image = self.session.save()
        except ExportFailure as e:
            QMessageBox.critical(self, "Export Failed", str(e))
            return

        self._finished = True
        self.marked.emit(image)
        self.close()

    def cancel(self) -> None:
        """Discard all markings and close the window."""
        self.session.cancel()
        if not self._finished:
            self._finished = True
            self.cancelled.emit()
        self.close()

    def closeEvent(self, event) -> None:
        """Treat closing the window without Apply as Cancel."""
        if not self._finished:
            self._finished = True
            self.session.cancel()
            self.cancelled.emit()
        super().closeEvent(event)
