"""Tests for the gesture state machine."""

import pytest
from PyQt6.QtCore import QPointF, Qt

from region_marker.core.input_controller import InputController, InteractionState
from region_marker.core.models import MarkingKind, MarkingModel, RectMark, Stroke
from region_marker.core.viewport import ViewportState, ViewportTransform

LEFT = Qt.MouseButton.LeftButton
MIDDLE = Qt.MouseButton.MiddleButton
RIGHT = Qt.MouseButton.RightButton
ALT = Qt.KeyboardModifier.AltModifier


@pytest.fixture
def viewport():
    return ViewportTransform(ViewportState(2.0, QPointF(10, 20)))


@pytest.fixture
def model():
    return MarkingModel()


@pytest.fixture
def controller(viewport, model):
    return InputController(viewport, model, brush_size=20)


class TestDrawing:
    """Tests for drawing gestures."""

    def test_brush_points_are_image_space(self, controller, model):
        """Test screen positions are converted before reaching the model."""
        assert controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(50, 60))
        controller.pointer_up()

        stroke = model.committed[0]
        assert isinstance(stroke, Stroke)
        assert stroke.points == (QPointF(10, 10), QPointF(20, 20))
        assert controller.state == InteractionState.IDLE

    def test_brush_radius_compensates_scale(self, controller, model, viewport):
        """Test the screen brush size is stored as an image-space radius."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(31, 41))
        controller.pointer_up()

        viewport.zoom_at(QPointF(0, 0), 2.0)
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(31, 41))
        controller.pointer_up()

        assert model.committed[0].radius == pytest.approx(5.0)
        assert model.committed[1].radius == pytest.approx(2.5)

    def test_rect_gesture(self, controller, model):
        """Test a rectangle drag records a signed extent."""
        controller.set_tool(MarkingKind.RECT)

        controller.pointer_down(QPointF(110, 100), LEFT)
        controller.pointer_move(QPointF(70, 80))
        controller.pointer_move(QPointF(30, 40))
        controller.pointer_up()

        assert model.committed == (RectMark(50, 40, -40, -30),)

    def test_click_without_move_commits_nothing(self, controller, model):
        """Test a click leaves the committed sequence unchanged."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_up()

        controller.set_tool(MarkingKind.RECT)
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_up()

        assert len(model) == 0

    def test_move_at_press_position_commits_nothing(self, controller, model):
        """Test a motion event at the press position still counts as a click."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(30, 40))
        controller.pointer_up()

        assert len(model) == 0
        assert controller.state == InteractionState.IDLE

    def test_other_button_release_keeps_stroke_open(self, controller, model):
        """Test releasing a button that did not start the gesture is ignored."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(40, 40))

        controller.pointer_up(RIGHT)

        assert controller.state == InteractionState.DRAWING
        assert len(model) == 0

        controller.pointer_move(QPointF(50, 40))
        controller.pointer_up(LEFT)

        assert len(model) == 1
        assert len(model.committed[0].points) == 3

    def test_move_while_idle_does_nothing(self, controller, model):
        """Test hovering does not create markings."""
        controller.pointer_move(QPointF(10, 10))

        assert model.current is None
        assert controller.state == InteractionState.IDLE

    def test_pointer_leave_commits(self, controller, model):
        """Test leaving the surface ends the stroke like a release."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(40, 40))
        controller.pointer_leave()

        assert len(model) == 1
        assert controller.state == InteractionState.IDLE

    def test_cancel_discards(self, controller, model):
        """Test cancel drops the in-progress marking."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.pointer_move(QPointF(40, 40))
        controller.cancel()

        assert len(model) == 0
        assert model.current is None

    def test_right_button_is_ignored(self, controller, model):
        """Test only the left button draws."""
        assert controller.pointer_down(QPointF(30, 40), RIGHT) is False
        assert model.current is None

    def test_not_ready_rejects_input(self, viewport, model):
        """Test pointer input is rejected before the image is ready."""
        controller = InputController(viewport, model, is_ready=lambda: False)

        assert controller.pointer_down(QPointF(30, 40), LEFT) is False
        controller.pointer_move(QPointF(50, 50))
        controller.pointer_up()

        assert model.current is None
        assert len(model) == 0


class TestPanning:
    """Tests for pan gestures."""

    def test_middle_button_pans(self, controller, model, viewport):
        """Test a middle-button drag moves the viewport only."""
        controller.pointer_down(QPointF(100, 100), MIDDLE)
        assert controller.state == InteractionState.PANNING

        controller.pointer_move(QPointF(110, 95))
        controller.pointer_move(QPointF(130, 95))
        controller.pointer_up()

        assert viewport.offset == QPointF(40, 15)
        assert viewport.scale == 2.0
        assert model.current is None
        assert len(model) == 0

    def test_modifier_left_drag_pans(self, controller, viewport):
        """Test Alt+left drag pans instead of drawing."""
        controller.pointer_down(QPointF(0, 0), LEFT, ALT)
        controller.pointer_move(QPointF(-5, 5))
        controller.pointer_up()

        assert viewport.offset == QPointF(5, 25)

    def test_custom_pan_modifier(self, viewport, model):
        """Test the pan modifier is configurable."""
        controller = InputController(
            viewport, model, pan_modifier=Qt.KeyboardModifier.ShiftModifier
        )

        controller.pointer_down(QPointF(30, 40), LEFT, ALT)

        assert controller.state == InteractionState.DRAWING

    def test_pan_gesture_ignored_while_drawing(self, controller, model, viewport):
        """Test a pan press during a stroke neither pans nor ends the stroke."""
        controller.pointer_down(QPointF(30, 40), LEFT)

        assert controller.pointer_down(QPointF(30, 40), MIDDLE) is False
        controller.pointer_move(QPointF(50, 60))

        assert controller.state == InteractionState.DRAWING
        assert viewport.offset == QPointF(10, 20)
        assert model.current.points[-1] == QPointF(20, 20)


class TestWheel:
    """Tests for wheel zoom."""

    def test_wheel_zooms_in_and_out(self, controller, viewport):
        """Test wheel direction selects the zoom factor."""
        controller.wheel(QPointF(0, 0), 120)
        assert viewport.scale == pytest.approx(2.2)

        controller.wheel(QPointF(0, 0), -120)
        assert viewport.scale == pytest.approx(1.98)

    def test_wheel_zero_delta(self, controller, viewport):
        """Test a zero delta leaves the viewport untouched."""
        controller.wheel(QPointF(0, 0), 0)

        assert viewport.scale == 2.0

    def test_wheel_while_drawing_keeps_state(self, controller, model, viewport):
        """Test zooming mid-stroke keeps drawing and maps later points correctly."""
        controller.pointer_down(QPointF(30, 40), LEFT)
        controller.wheel(QPointF(30, 40), 120)

        assert controller.state == InteractionState.DRAWING

        target = QPointF(25, 25)
        controller.pointer_move(viewport.to_screen(target))
        controller.pointer_up()

        stroke = model.committed[0]
        assert stroke.points[0] == QPointF(10, 10)
        assert stroke.points[1].x() == pytest.approx(25)
        assert stroke.points[1].y() == pytest.approx(25)
