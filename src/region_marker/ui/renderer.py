"""Display rendering for the marking editor."""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import QPointF, QSize
from PyQt6.QtGui import QColor, QImage, QPainter

from ..core.exporter import paint_marking
from ..core.models import MarkingModel
from ..core.viewport import ViewportTransform

logger = logging.getLogger(__name__)


class Renderer:
    """
    Draws the source image and all markings through the viewport transform.

    Markings are painted in image coordinates under the viewport's
    QTransform, so brush width and rectangle bounds track zoom and pan
    exactly as the image does. The display colour is translucent and
    cosmetic only.
    """

    def __init__(
        self,
        viewport: ViewportTransform,
        model: MarkingModel,
        display_color: Optional[QColor] = None,
        background_color: Optional[QColor] = None
    ) -> None:
        self.viewport = viewport
        self.model = model
        self.display_color = QColor(display_color or QColor(239, 68, 68, 128))
        self.background_color = QColor(background_color or QColor("#0F172A"))

    def render(
        self,
        painter: QPainter,
        surface_size: QSize,
        image: Optional[QImage]
    ) -> None:
        """
        Paint one frame.

        Args:
            painter: Active painter on the display surface
            surface_size: Size of the surface in screen pixels
            image: Source image, or None while loading
        """
        painter.save()
        try:
            painter.resetTransform()
            painter.fillRect(0, 0, surface_size.width(), surface_size.height(), self.background_color)

            if image is None or image.isNull():
                return

            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.setTransform(self.viewport.qtransform())

            painter.drawImage(QPointF(0, 0), image)

            for marking in self.model.committed:
                paint_marking(painter, marking, self.display_color)

            current = self.model.current
            if current is not None:
                paint_marking(painter, current, self.display_color)
        finally:
            painter.restore()

    def render_to_image(self, surface_size: QSize, image: Optional[QImage]) -> QImage:
        """Render a frame to an offscreen ARGB32 image."""
        surface = QImage(surface_size, QImage.Format.Format_ARGB32)
        surface.fill(self.background_color)
        painter = QPainter(surface)
        try:
            self.render(painter, surface_size, image)
        finally:
            painter.end()
        return surface
