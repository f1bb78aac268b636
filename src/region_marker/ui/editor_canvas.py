"""Canvas widget hosting an editor session."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt, QEvent, QSizeF, pyqtSignal
from PyQt6.QtGui import QColor, QMouseEvent, QPainter, QResizeEvent, QWheelEvent
from PyQt6.QtWidgets import QWidget

from ..core.input_controller import InteractionState
from ..core.session import EditorSession, SessionState
from .renderer import Renderer

logger = logging.getLogger(__name__)


class EditorCanvas(QWidget):
    """
    Widget that forwards native input to the session's InputController
    and repaints through the Renderer whenever the session changes.
    """

    # Signals
    zoom_changed = pyqtSignal(float)

    def __init__(self, session: EditorSession, parent: Optional[QWidget] = None) -> None:
        """Initialize the canvas for ``session``."""
        super().__init__(parent)
        self.session = session
        self.renderer = Renderer(
            session.viewport,
            session.model,
            display_color=session.config.display_qcolor(),
            background_color=QColor(session.config.background_color)
        )
        self._last_scale = session.viewport.scale

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setCursor(Qt.CursorShape.CrossCursor)
        self.setMinimumSize(320, 240)

        session.changed.connect(self._on_session_changed)
        session.load_failed.connect(lambda _message: self.update())

    def _on_session_changed(self) -> None:
        scale = self.session.viewport.scale
        if scale != self._last_scale:
            self._last_scale = scale
            self.zoom_changed.emit(scale)
        self.update()

    # === Event Handlers ===

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Track the container size used for the initial fit."""
        super().resizeEvent(event)
        self.session.set_container_size(QSizeF(event.size()))

    def paintEvent(self, event) -> None:
        """Paint the current frame."""
        painter = QPainter(self)
        try:
            self.renderer.render(painter, self.size(), self.session.image)

            state = self.session.state
            if state == SessionState.LOADING:
                self._draw_message(painter, "Loading image...")
            elif state == SessionState.FAILED:
                self._draw_message(painter, self.session.error or "Failed to load image")
        finally:
            painter.end()

    def _draw_message(self, painter: QPainter, text: str) -> None:
        painter.setPen(QColor(255, 255, 255, 160))
        painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, text)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Handle mouse press events."""
        self.setFocus()
        controller = self.session.controller
        if controller.pointer_down(event.position(), event.button(), event.modifiers()):
            if controller.state == InteractionState.PANNING:
                self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Handle mouse move events."""
        self.session.controller.pointer_move(event.position())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Handle mouse release events."""
        controller = self.session.controller
        controller.pointer_up(event.button())
        if controller.state == InteractionState.IDLE:
            self.setCursor(Qt.CursorShape.CrossCursor)

    def leaveEvent(self, event: QEvent) -> None:
        """Finish any gesture when the pointer leaves the canvas."""
        self.session.controller.pointer_leave()
        self.setCursor(Qt.CursorShape.CrossCursor)
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Handle mouse wheel for zooming around the cursor."""
        if self.session.image is None:
            super().wheelEvent(event)
            return
        self.session.controller.wheel(event.position(), event.angleDelta().y())
        event.accept()
