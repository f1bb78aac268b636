"""Viewport transform between image space and screen space."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from PyQt6.QtCore import QPointF, QSizeF
from PyQt6.QtGui import QTransform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportState:
    """
    Immutable image-to-screen mapping.

    A point maps as ``screen = image * scale + offset``.
    """

    scale: float = 1.0
    offset: QPointF = field(default_factory=QPointF)


class ViewportTransform:
    """
    Owner of the current ViewportState.

    Every operation replaces the state with a new value and notifies
    the ``on_change`` callback, which the session wires to a repaint.
    """

    MIN_SCALE = 0.1
    MAX_SCALE = 10.0

    def __init__(
        self,
        state: Optional[ViewportState] = None,
        min_scale: Optional[float] = None,
        max_scale: Optional[float] = None,
        on_change: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Initialize the transform.

        Args:
            state: Initial state, identity if omitted
            min_scale: Lower zoom limit, defaults to MIN_SCALE
            max_scale: Upper zoom limit, defaults to MAX_SCALE
            on_change: Callback invoked after every state change
        """
        self.min_scale = self.MIN_SCALE if min_scale is None else min_scale
        self.max_scale = self.MAX_SCALE if max_scale is None else max_scale
        if self.min_scale <= 0 or self.min_scale > self.max_scale:
            raise ValueError(
                f"Invalid scale limits: [{self.min_scale}, {self.max_scale}]"
            )
        self._on_change = on_change
        initial = state or ViewportState()
        self._state = ViewportState(self._clamp(initial.scale), QPointF(initial.offset))

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def offset(self) -> QPointF:
        return QPointF(self._state.offset)

    def _clamp(self, scale: float) -> float:
        return max(self.min_scale, min(scale, self.max_scale))

    def _set_state(self, state: ViewportState) -> None:
        self._state = state
        if self._on_change:
            self._on_change()

    # === Coordinate mapping ===

    def to_screen(self, image_point: QPointF) -> QPointF:
        """Map an image-space point to screen space."""
        s = self._state
        return QPointF(
            image_point.x() * s.scale + s.offset.x(),
            image_point.y() * s.scale + s.offset.y()
        )

    def to_image(self, screen_point: QPointF) -> QPointF:
        """Map a screen-space point to image space."""
        s = self._state
        return QPointF(
            (screen_point.x() - s.offset.x()) / s.scale,
            (screen_point.y() - s.offset.y()) / s.scale
        )

    def qtransform(self) -> QTransform:
        """Return the current mapping as a QTransform for QPainter."""
        s = self._state
        return QTransform(s.scale, 0.0, 0.0, s.scale, s.offset.x(), s.offset.y())

    # === Mutations ===

    def zoom_at(self, screen_point: QPointF, factor: float) -> None:
        """
        Zoom by ``factor`` keeping the image point under ``screen_point`` fixed.

        The resulting scale is clamped to [min_scale, max_scale].

        Args:
            screen_point: Zoom anchor in screen coordinates
            factor: Multiplicative zoom factor (> 1 zooms in)
        """
        old = self._state
        new_scale = self._clamp(old.scale * factor)
        ratio = new_scale / old.scale
        new_offset = QPointF(
            screen_point.x() - (screen_point.x() - old.offset.x()) * ratio,
            screen_point.y() - (screen_point.y() - old.offset.y()) * ratio
        )
        self._set_state(ViewportState(new_scale, new_offset))

    def pan_by(self, dx: float, dy: float) -> None:
        """Translate the viewport by a screen-space delta."""
        old = self._state
        self._set_state(
            ViewportState(old.scale, QPointF(old.offset.x() + dx, old.offset.y() + dy))
        )

    def fit_to_container(
        self,
        image_size: QSizeF,
        container_size: QSizeF,
        margin: Tuple[float, float] = (0.0, 0.0)
    ) -> None:
        """
        Scale the image down to fit the container and center it.

        The image is never enlarged beyond its native size.

        Args:
            image_size: Source image size in pixels
            container_size: Available display area in screen pixels
            margin: Horizontal and vertical space reserved around the image
        """
        iw, ih = image_size.width(), image_size.height()
        cw, ch = container_size.width(), container_size.height()
        if iw <= 0 or ih <= 0:
            logger.warning(f"Cannot fit empty image size {iw}x{ih}")
            return

        scale = min((cw - margin[0]) / iw, (ch - margin[1]) / ih, 1.0)
        scale = self._clamp(scale)
        offset = QPointF((cw - iw * scale) / 2, (ch - ih * scale) / 2)
        logger.debug(f"Fit {iw}x{ih} into {cw}x{ch}: scale={scale:.4f}")
        self._set_state(ViewportState(scale, offset))
