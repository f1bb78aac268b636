"""Full-resolution export of committed markings."""

from __future__ import annotations

import base64
import logging
from typing import Iterable, Optional

from PyQt6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, Qt
from PyQt6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen

from .errors import ExportFailure
from .models import Marking, RectMark, Stroke

logger = logging.getLogger(__name__)

# Largest edge QPainter's raster engine can address
MAX_EXPORT_DIMENSION = 32767

DEFAULT_MARKER_COLOR = QColor(239, 68, 68, 255)


def stroke_path(points: Iterable[QPointF]) -> QPainterPath:
    """Build the polyline path for a stroke's points."""
    path = QPainterPath()
    points = list(points)
    if not points:
        return path
    path.moveTo(points[0])
    for point in points[1:]:
        path.lineTo(point)
    return path


def stroke_pen(color: QColor, radius: float) -> QPen:
    """
    Pen for drawing a stroke of the given image-space radius.

    The pen is never cosmetic, so its width scales with the painter's
    world transform like the image itself.
    """
    pen = QPen(color, 2.0 * radius)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    pen.setCosmetic(False)
    return pen


def paint_marking(painter: QPainter, marking: Marking, color: QColor) -> None:
    """Draw one marking in the painter's current coordinate system."""
    if isinstance(marking, Stroke):
        if marking.is_degenerate():
            return
        painter.setPen(stroke_pen(color, marking.radius))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(stroke_path(marking.points))
    elif isinstance(marking, RectMark):
        painter.fillRect(marking.normalized(), color)
    else:
        raise TypeError(f"Unsupported marking type: {type(marking).__name__}")


class Exporter:
    """
    Rasterizes committed markings onto a copy of the source image.

    The output always has the source image's pixel dimensions and uses a
    single opaque marker colour. Antialiasing is disabled so marked
    regions are solid and repeated exports are byte-identical.
    """

    def __init__(self, marker_color: Optional[QColor] = None) -> None:
        self.marker_color = QColor(marker_color or DEFAULT_MARKER_COLOR)
        self.marker_color.setAlpha(255)

    def export(self, source: QImage, markings: Iterable[Marking]) -> QImage:
        """
        Render markings over the source image at native resolution.

        Args:
            source: The unmodified source image
            markings: Committed markings in image coordinates

        Returns:
            New ARGB32 image the size of ``source``

        Raises:
            ExportFailure: If the source is empty or the surface cannot be allocated
        """
        if source is None or source.isNull():
            raise ExportFailure("Cannot export: source image is empty")

        width, height = source.width(), source.height()
        if width > MAX_EXPORT_DIMENSION or height > MAX_EXPORT_DIMENSION:
            raise ExportFailure(
                f"Cannot export {width}x{height}: "
                f"exceeds {MAX_EXPORT_DIMENSION} pixel limit"
            )

        result = source.convertToFormat(QImage.Format.Format_ARGB32)
        if result.isNull() or result.size() != source.size():
            raise ExportFailure(f"Could not allocate {width}x{height} export surface")

        markings = list(markings)
        painter = QPainter()
        if not painter.begin(result):
            raise ExportFailure("Could not start painting on export surface")
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing, False)
            for marking in markings:
                paint_marking(painter, marking, self.marker_color)
        finally:
            painter.end()

        logger.info(f"Exported {len(markings)} markings at {width}x{height}")
        return result


def encode_png(image: QImage) -> bytes:
    """
    Encode an image as PNG bytes.

    Raises:
        ExportFailure: If encoding fails
    """
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    ok = image.save(buffer, "PNG")
    buffer.close()
    if not ok:
        raise ExportFailure("PNG encoding failed")
    return bytes(data)


def to_data_url(image: QImage) -> str:
    """Encode an image as a ``data:image/png;base64`` URL."""
    encoded = base64.b64encode(encode_png(image)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
