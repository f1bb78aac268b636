"""Pointer and wheel gesture handling for the marking editor."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QPointF, Qt

from .models import MarkingKind, MarkingModel
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)


class InteractionState(str, Enum):
    """State of the gesture state machine."""

    IDLE = "idle"
    DRAWING = "drawing"
    PANNING = "panning"


class InputController:
    """
    Translates pointer and wheel gestures into viewport and marking changes.

    Screen positions are always converted through the viewport before they
    reach the marking model, so stored markings never depend on zoom or pan.

    Panning uses the middle button or the left button with the pan
    modifier held. Wheel events zoom around the cursor in any state.
    """

    ZOOM_IN_FACTOR = 1.1
    ZOOM_OUT_FACTOR = 0.9

    def __init__(
        self,
        viewport: ViewportTransform,
        model: MarkingModel,
        tool: MarkingKind = MarkingKind.BRUSH,
        brush_size: float = 20.0,
        pan_modifier: Qt.KeyboardModifier = Qt.KeyboardModifier.AltModifier,
        is_ready: Optional[Callable[[], bool]] = None,
        zoom_in_factor: Optional[float] = None,
        zoom_out_factor: Optional[float] = None
    ) -> None:
        """
        Initialize the controller.

        Args:
            viewport: Transform used for coordinate conversion and zoom/pan
            model: Marking model receiving image-space points
            tool: Initial drawing tool
            brush_size: Brush diameter in screen pixels
            pan_modifier: Modifier that turns a left drag into a pan
            is_ready: Returns False while drawing input must be rejected
            zoom_in_factor: Factor applied on wheel up
            zoom_out_factor: Factor applied on wheel down
        """
        self.viewport = viewport
        self.model = model
        self.tool = tool
        self.brush_size = brush_size
        self.pan_modifier = pan_modifier
        self._is_ready = is_ready or (lambda: True)
        self.zoom_in_factor = zoom_in_factor or self.ZOOM_IN_FACTOR
        self.zoom_out_factor = zoom_out_factor or self.ZOOM_OUT_FACTOR

        self.state = InteractionState.IDLE
        self._pan_last: Optional[QPointF] = None
        self._gesture_button: Optional[Qt.MouseButton] = None

    def set_tool(self, tool: MarkingKind) -> None:
        """Select the drawing tool; takes effect on the next pointer-down."""
        self.tool = MarkingKind(tool)

    def brush_radius(self) -> float:
        """Current brush size expressed as an image-space radius."""
        return self.brush_size / (2.0 * self.viewport.scale)

    def _is_pan_gesture(self, button: Qt.MouseButton, modifiers: Qt.KeyboardModifier) -> bool:
        if button == Qt.MouseButton.MiddleButton:
            return True
        return button == Qt.MouseButton.LeftButton and bool(modifiers & self.pan_modifier)

    # === Pointer events ===

    def pointer_down(
        self,
        screen_pos: QPointF,
        button: Qt.MouseButton = Qt.MouseButton.LeftButton,
        modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier
    ) -> bool:
        """
        Handle a button press.

        Returns:
            True if the press started a drawing or pan gesture
        """
        if not self._is_ready():
            logger.debug("Pointer input rejected: image not ready")
            return False

        if self.state != InteractionState.IDLE:
            # A second button while drawing or panning is not a new gesture
            return False

        if self._is_pan_gesture(button, modifiers):
            self.state = InteractionState.PANNING
            self._pan_last = QPointF(screen_pos)
            self._gesture_button = button
            return True

        if button != Qt.MouseButton.LeftButton:
            return False

        image_pos = self.viewport.to_image(screen_pos)
        if self.model.begin(self.tool, image_pos, radius=self.brush_radius()):
            self.state = InteractionState.DRAWING
            self._gesture_button = button
            return True
        return False

    def pointer_move(self, screen_pos: QPointF) -> None:
        """Handle pointer motion."""
        if self.state == InteractionState.DRAWING:
            self.model.extend(self.viewport.to_image(screen_pos))
        elif self.state == InteractionState.PANNING and self._pan_last is not None:
            dx = screen_pos.x() - self._pan_last.x()
            dy = screen_pos.y() - self._pan_last.y()
            self._pan_last = QPointF(screen_pos)
            if dx or dy:
                self.viewport.pan_by(dx, dy)

    def pointer_up(self, button: Optional[Qt.MouseButton] = None) -> None:
        """
        Handle a button release, committing any marking in progress.

        Releasing a button other than the one that started the gesture
        is ignored. Without ``button`` the gesture always ends.
        """
        if button is not None and self._gesture_button is not None and button != self._gesture_button:
            return
        if self.state == InteractionState.DRAWING:
            self.model.commit()
        self._reset()

    def pointer_leave(self) -> None:
        """The pointer left the surface; finish the gesture as a release."""
        self.pointer_up()

    def cancel(self) -> None:
        """Abort any gesture without committing."""
        if self.state == InteractionState.DRAWING:
            self.model.discard()
        self._reset()

    def _reset(self) -> None:
        self.state = InteractionState.IDLE
        self._pan_last = None
        self._gesture_button = None

    # === Wheel events ===

    def wheel(self, screen_pos: QPointF, delta_y: float) -> None:
        """
        Zoom around ``screen_pos``.

        Positive ``delta_y`` (wheel away from the user) zooms in. The
        drawing state is left untouched.
        """
        if delta_y == 0:
            return
        factor = self.zoom_in_factor if delta_y > 0 else self.zoom_out_factor
        self.viewport.zoom_at(screen_pos, factor)
