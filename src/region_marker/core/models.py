"""Data models for Region Marker markings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from PyQt6.QtCore import QPointF, QRectF

logger = logging.getLogger(__name__)


class MarkingKind(str, Enum):
    """Type of marking drawn by the operator."""

    BRUSH = "brush"
    RECT = "rect"


@dataclass(frozen=True)
class Stroke:
    """
    Freehand brush stroke in image space.

    Points are kept in insertion order and form a polyline whose
    thickness is ``2 * radius`` image pixels.
    """

    points: Tuple[QPointF, ...]
    radius: float

    kind = MarkingKind.BRUSH

    def is_degenerate(self) -> bool:
        if len(self.points) < 2:
            return True
        first = self.points[0]
        return all(point == first for point in self.points[1:])

    def extended(self, point: QPointF) -> Stroke:
        return replace(self, points=self.points + (QPointF(point),))


@dataclass(frozen=True)
class RectMark:
    """
    Rectangle anchored at (x, y) in image space.

    Width and height carry the sign of the drag and may be negative;
    use ``normalized()`` when rasterizing.
    """

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    kind = MarkingKind.RECT

    @property
    def anchor(self) -> QPointF:
        return QPointF(self.x, self.y)

    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    def extended(self, point: QPointF) -> RectMark:
        return replace(self, width=point.x() - self.x, height=point.y() - self.y)

    def normalized(self) -> QRectF:
        """Return the rectangle with positive extents."""
        return QRectF(self.x, self.y, self.width, self.height).normalized()


Marking = Union[Stroke, RectMark]


class MarkingModel:
    """
    Append-only log of committed markings plus one in-progress marking.

    Committed entries are frozen and never reordered. Only the
    in-progress marking changes while the operator drags.
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None) -> None:
        self._committed: List[Marking] = []
        self._current: Optional[Marking] = None
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    @property
    def committed(self) -> Tuple[Marking, ...]:
        """Committed markings in the order they were drawn."""
        return tuple(self._committed)

    @property
    def current(self) -> Optional[Marking]:
        """The in-progress marking, if any."""
        return self._current

    @property
    def is_drawing(self) -> bool:
        return self._current is not None

    def __len__(self) -> int:
        return len(self._committed)

    def begin(self, kind: MarkingKind, image_point: QPointF, radius: float = 10.0) -> bool:
        """
        Open a new in-progress marking anchored at ``image_point``.

        Args:
            kind: Brush or rectangle
            image_point: Anchor in image coordinates
            radius: Brush radius in image pixels (brush only)

        Returns:
            True if a marking was opened, False if one was already open
        """
        if self._current is not None:
            logger.debug("begin() ignored: a marking is already in progress")
            return False

        if kind == MarkingKind.BRUSH:
            self._current = Stroke(points=(QPointF(image_point),), radius=radius)
        elif kind == MarkingKind.RECT:
            self._current = RectMark(image_point.x(), image_point.y())
        else:
            raise ValueError(f"Unknown marking kind: {kind!r}")

        self._changed()
        return True

    def extend(self, image_point: QPointF) -> None:
        """Add a point to the in-progress stroke or resize the in-progress rectangle."""
        if self._current is None:
            return
        self._current = self._current.extended(image_point)
        self._changed()

    def commit(self) -> Optional[Marking]:
        """
        Finalize the in-progress marking.

        Degenerate markings (a stroke with fewer than two points or a
        zero-area rectangle) are dropped without error.

        Returns:
            The committed marking, or None if nothing was committed
        """
        marking = self._current
        if marking is None:
            return None

        self._current = None
        if marking.is_degenerate():
            logger.debug(f"Discarding degenerate {marking.kind.value} marking")
            self._changed()
            return None

        self._committed.append(marking)
        self._changed()
        return marking

    def discard(self) -> None:
        """Drop the in-progress marking without committing it."""
        if self._current is not None:
            self._current = None
            self._changed()

    def clear_all(self) -> None:
        """Remove all committed markings and any in-progress marking."""
        self._committed.clear()
        self._current = None
        self._changed()

    @property
    def brush_count(self) -> int:
        """Count of committed brush strokes."""
        return sum(1 for m in self._committed if m.kind == MarkingKind.BRUSH)

    @property
    def rect_count(self) -> int:
        """Count of committed rectangles."""
        return sum(1 for m in self._committed if m.kind == MarkingKind.RECT)
