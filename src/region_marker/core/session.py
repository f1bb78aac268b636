"""
Editor session management.

An EditorSession ties one source image to its viewport, marking model and
input controller, from image load until the operator saves or cancels.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, QSizeF, pyqtSignal
from PyQt6.QtGui import QImage

from .config import EditorConfig
from .errors import ExportFailure, ImageLoadFailure, SessionClosedError
from .exporter import Exporter
from .input_controller import InputController
from .models import MarkingKind, MarkingModel
from .viewport import ViewportTransform
from ..workers.image_loader import ImageLoader, ImageSource, load_image

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of an editor session."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class EditorSession(QObject):
    """
    Owns the state of one marking session.

    Drawing input is rejected until the source image is ready. Saving
    exports the committed markings at the image's native resolution and
    closes the session; cancelling closes it without exporting.
    """

    # Emitted once the source image is decoded and the viewport fitted
    ready = pyqtSignal()

    # Emitted when the source image cannot be loaded (message)
    load_failed = pyqtSignal(str)

    # Emitted after every viewport or marking change
    changed = pyqtSignal()

    # Emitted with the exported image after a successful save
    saved = pyqtSignal(QImage)

    # Emitted when the session is discarded
    cancelled = pyqtSignal()

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self.config = config or EditorConfig()
        self.state = SessionState.LOADING
        self.image: Optional[QImage] = None
        self.error: Optional[str] = None
        self.container_size = QSizeF(800, 600)
        self._loader: Optional[ImageLoader] = None

        self.viewport = ViewportTransform(
            min_scale=self.config.min_scale,
            max_scale=self.config.max_scale,
            on_change=self._on_state_change
        )
        self.model = MarkingModel(on_change=self._on_state_change)
        self.controller = InputController(
            self.viewport,
            self.model,
            tool=MarkingKind(self.config.default_tool),
            brush_size=self.config.clamp_brush_size(self.config.brush_size),
            pan_modifier=self.config.pan_qt_modifier(),
            is_ready=self.is_ready,
            zoom_in_factor=self.config.zoom_in_factor,
            zoom_out_factor=self.config.zoom_out_factor
        )
        self.exporter = Exporter(self.config.marker_qcolor())

    def _on_state_change(self) -> None:
        self.changed.emit()

    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    # === Image acquisition ===

    def open(self, source: ImageSource) -> None:
        """
        Start loading the source image on a background thread.

        ``ready`` or ``load_failed`` is emitted when loading finishes.
        """
        if self.state != SessionState.LOADING:
            raise SessionClosedError(f"Cannot open image in {self.state.value} session")

        self._release_loader()
        loader = ImageLoader(source)
        loader.loaded.connect(self.attach_image)
        loader.failed.connect(self.fail)
        loader.finished.connect(lambda: self._on_loader_finished(loader))
        self._loader = loader
        loader.start()

    def _on_loader_finished(self, loader: ImageLoader) -> None:
        if loader is self._loader:
            self._release_loader()

    def _release_loader(self) -> None:
        """Stop the loader thread and wait for it to exit."""
        if self._loader is not None:
            self._loader.stop()
            self._loader.wait()
            self._loader = None

    def open_sync(self, source: ImageSource) -> None:
        """
        Load the source image on the calling thread.

        Raises:
            ImageLoadFailure: If the image cannot be loaded
        """
        try:
            image = load_image(source)
        except ImageLoadFailure as e:
            self.fail(str(e))
            raise
        self.attach_image(image)

    def attach_image(self, image: QImage) -> None:
        """Install a decoded source image and fit the viewport to it."""
        if self.state != SessionState.LOADING:
            logger.info(f"Ignoring image for {self.state.value} session")
            return
        if image.isNull():
            self.fail("Decoded image is empty")
            return

        self.image = image
        self.viewport.fit_to_container(
            QSizeF(image.size()),
            self.container_size,
            margin=(self.config.fit_margin_x, self.config.fit_margin_y)
        )
        self.state = SessionState.READY
        logger.info(f"Session ready for {image.width()}x{image.height()} image")
        self.ready.emit()
        self.changed.emit()

    def fail(self, message: str) -> None:
        """Mark the image as unloadable; the session will never accept input."""
        if self.state != SessionState.LOADING:
            return
        self.state = SessionState.FAILED
        self.error = message
        logger.error(f"Session failed: {message}")
        self.load_failed.emit(message)

    def set_container_size(self, size: QSizeF) -> None:
        """Record the display area used when fitting the image."""
        self.container_size = QSizeF(size)

    def fit_to_container(self) -> None:
        """Refit the viewport to the container."""
        if self.image is None:
            return
        self.viewport.fit_to_container(
            QSizeF(self.image.size()),
            self.container_size,
            margin=(self.config.fit_margin_x, self.config.fit_margin_y)
        )

    # === Tool settings ===

    def set_tool(self, tool: MarkingKind) -> None:
        self.controller.set_tool(tool)

    def set_brush_size(self, size: int) -> None:
        self.controller.brush_size = self.config.clamp_brush_size(size)

    def clear_markings(self) -> None:
        self.controller.cancel()
        self.model.clear_all()

    # === Session end ===

    def save(self) -> QImage:
        """
        Export the committed markings and close the session.

        Returns:
            Image at the source's native resolution

        Raises:
            SessionClosedError: If the session is not ready
            ExportFailure: If rasterization fails; the session stays open
        """
        if self.state != SessionState.READY or self.image is None:
            raise SessionClosedError(f"Cannot save {self.state.value} session")

        try:
            result = self.exporter.export(self.image, self.model.committed)
        except ExportFailure as e:
            logger.error(f"Export failed: {e}")
            raise

        self.controller.cancel()
        self.state = SessionState.CLOSED
        logger.info(f"Session saved with {len(self.model)} markings")
        self.saved.emit(result)
        return result

    def cancel(self) -> None:
        """Discard the session without exporting anything."""
        if self.state == SessionState.CLOSED:
            return

        self._release_loader()
        self.state = SessionState.CLOSED
        self.controller.cancel()
        self.model.clear_all()
        self.image = None
        logger.info("Session cancelled")
        self.cancelled.emit()
