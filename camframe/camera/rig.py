"""
Camera rig: owns the camera pose and moves it toward framing targets.

Two orthogonal state axes:

  Motion:      SETTLED --request_move()--> MOVING --tick() reaches 1--> SETTLED
                                                    (emits FRAMING_ARRIVED)
  Projection:  PERSPECTIVE <--toggle_projection()--> ORTHOGRAPHIC
                                                    (emits FRAMING_ARRIVED)

Repositioning is two-phase. on_focus_updated() only marks a reposition as
pending; post_render() runs once per frame after rendering, computes the
target from the bounds as they are at that point and starts the move.
Visibility is therefore never judged against a projection that was not
actually displayed.

Typical frame::

    rig.tick(dt)        # update phase, before rendering
    render()
    rig.post_render()   # post-render phase
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from camframe.camera.projection import Camera, ProjectionMode
from camframe.events import EventBus, EventType
from camframe.framing.aggregator import BoundsAggregator
from camframe.geometry.bounds import BoundsSet, Vec3Like, as_vec3

logger = logging.getLogger(__name__)

DEFAULT_MOVE_SPEED = 2.0  # progress units per second

# Progress this close to 1 counts as arrived (float accumulation of speed*dt).
PROGRESS_EPSILON = 1e-9


class CameraBindingError(RuntimeError):
    """Raised at startup when the rig has no camera to drive."""
    pass


@dataclass
class MotionState:
    """Interpolation state between two positions.

    progress == 1 means settled (no motion in flight).
    """

    initial_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    target_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    progress: float = 1.0
    speed: float = DEFAULT_MOVE_SPEED

    @property
    def is_settled(self) -> bool:
        return self.progress >= 1.0


class CameraRig:
    """Drives a Camera toward framing targets with linear interpolation.

    Args:
        camera: The camera to move. Required.
        move_speed: Interpolation speed in progress units per second.
        aggregator: Framing target calculator. Defaults to BoundsAggregator().
        bus: Optional event bus; FRAMING_ARRIVED, MOVE_REQUESTED and
            PROJECTION_TOGGLED are published on it.
        on_arrived: Optional callback invoked on every FRAMING_ARRIVED.
            Exceptions raised by it propagate to the caller of tick().
    """

    def __init__(
        self,
        camera: Optional[Camera],
        move_speed: float = DEFAULT_MOVE_SPEED,
        aggregator: Optional[BoundsAggregator] = None,
        bus: Optional[EventBus] = None,
        on_arrived: Optional[Callable[[], None]] = None,
    ):
        if camera is None:
            logger.error("CameraRig has no camera bound")
            raise CameraBindingError("CameraRig requires a camera")
        if move_speed <= 0:
            raise ValueError(f"move_speed must be positive, got {move_speed}")

        self.camera = camera
        self.aggregator = aggregator or BoundsAggregator()
        self.bus = bus
        self.on_arrived = on_arrived
        self.motion = MotionState(
            initial_position=camera.position.copy(),
            target_position=camera.position.copy(),
            progress=1.0,
            speed=float(move_speed),
        )

        self._reposition_pending = False
        self._focused_bounds: Optional[BoundsSet] = None
        self._arrivals = 0

    # -- state ---------------------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        return self.camera.position.copy()

    @property
    def progress(self) -> float:
        return self.motion.progress

    @property
    def is_settled(self) -> bool:
        return self.motion.is_settled

    @property
    def reposition_pending(self) -> bool:
        return self._reposition_pending

    @property
    def arrivals(self) -> int:
        """Number of FRAMING_ARRIVED emissions so far."""
        return self._arrivals

    # -- motion --------------------------------------------------------------

    def request_move(self, target: Vec3Like) -> None:
        """Start moving from the current position toward *target*.

        Supersedes any move in flight.
        """
        target = as_vec3(target, "target")
        self.motion.initial_position = self.camera.position.copy()
        self.motion.target_position = target.copy()
        self.motion.progress = 0.0
        logger.info(
            "Camera move requested: (%.3f, %.3f, %.3f) -> (%.3f, %.3f, %.3f)",
            *self.motion.initial_position, *target,
        )
        self._publish(EventType.MOVE_REQUESTED, {
            "from": self.motion.initial_position.tolist(),
            "to": target.tolist(),
        })

    def tick(self, dt: float) -> bool:
        """Advance the interpolation by *dt* seconds.

        Returns True if the camera arrived on this tick. On arrival the
        position is set to the target before FRAMING_ARRIVED is emitted, so
        listeners see the final pose.
        """
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        m = self.motion
        if m.progress >= 1.0:
            return False

        m.progress += m.speed * dt
        arrived = m.progress >= 1.0 - PROGRESS_EPSILON
        if arrived:
            m.progress = 1.0
            self.camera.position = m.target_position.copy()
        else:
            self.camera.position = m.initial_position + (m.target_position - m.initial_position) * m.progress
        logger.debug("Camera tick: progress=%.4f", m.progress)

        if arrived:
            self._emit_arrived()
        return arrived

    # -- projection ----------------------------------------------------------

    def toggle_projection(self) -> ProjectionMode:
        """Flip between orthographic and perspective.

        A settled camera re-emits FRAMING_ARRIVED right away. A moving
        camera emits it when the move completes.
        """
        if self.camera.mode == ProjectionMode.ORTHOGRAPHIC:
            self.camera.mode = ProjectionMode.PERSPECTIVE
        else:
            self.camera.mode = ProjectionMode.ORTHOGRAPHIC
        logger.info("Projection mode set to %s", self.camera.mode.value)
        self._publish(EventType.PROJECTION_TOGGLED, {"mode": self.camera.mode.value})
        if self.is_settled:
            self._emit_arrived()
        return self.camera.mode

    # -- two-phase reposition --------------------------------------------------

    def on_focus_updated(self, bounds: BoundsSet) -> None:
        """Mark a reposition pending for *bounds*; executed by post_render()."""
        self._focused_bounds = bounds
        self._reposition_pending = True

    def post_render(self) -> Optional[np.ndarray]:
        """Run the pending reposition, if any.

        Returns the new target, or None if nothing was pending or there
        are no bounds to frame.
        """
        if not self._reposition_pending:
            return None
        self._reposition_pending = False

        if not self._focused_bounds:
            logger.debug("Reposition skipped: no bounds to frame")
            return None

        target = self.aggregator.compute_framing_target(
            self._focused_bounds.snapshot(),
            self.camera.forward,
            self.camera.viewport,
        )
        self.request_move(target)
        return target

    # -- internals -------------------------------------------------------------

    def _emit_arrived(self) -> None:
        self._arrivals += 1
        if self.on_arrived is not None:
            self.on_arrived()
        self._publish(EventType.FRAMING_ARRIVED, {
            "position": self.camera.position.tolist(),
            "mode": self.camera.mode.value,
        })

    def _publish(self, event_type: EventType, payload: dict) -> None:
        if self.bus is not None:
            self.bus.publish(event_type, payload)
