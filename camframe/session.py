"""
Framing test session.

Ties the bounds set, the camera rig and the visibility checker together
behind the operations an embedding application calls, and drives the
explicit two-phase frame:

    session = FramingSession(camera)
    session.add_bounds(BoundingVolume(center=(0, 0, 0), extents=(1, 1, 1)))

    while running:
        session.update(dt)      # before rendering: advance the camera
        render(session.camera)
        session.post_render()   # after rendering: apply pending reposition

    print(session.report_text())

The session owns the failure count for its lifetime; reset() clears it.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from camframe.camera.projection import Camera, ProjectionMode
from camframe.camera.rig import DEFAULT_MOVE_SPEED, CameraRig
from camframe.config.rig_config import PathLike, merged
from camframe.events import EventBus, EventType
from camframe.framing.aggregator import BoundsAggregator
from camframe.geometry.bounds import BoundingVolume, BoundsSet
from camframe.visibility.checker import TestReport, VisibilityChecker, format_report

logger = logging.getLogger(__name__)


class FramingSession:
    """One framing/visibility test session over a dynamic set of volumes."""

    def __init__(
        self,
        camera: Optional[Camera],
        move_speed: float = DEFAULT_MOVE_SPEED,
        legacy_depth_scan: bool = False,
        inclusive_edges: bool = False,
        bus: Optional[EventBus] = None,
    ):
        self.bus = bus or EventBus()
        self.bounds = BoundsSet()
        self.checker = VisibilityChecker(inclusive_edges=inclusive_edges)
        self.rig = CameraRig(
            camera,
            move_speed=move_speed,
            aggregator=BoundsAggregator(legacy_depth_scan=legacy_depth_scan),
            bus=self.bus,
            on_arrived=self._on_arrived,
        )
        self._frame = 0

    @classmethod
    def from_config(
        cls,
        overlay: Optional[dict[str, Any]] = None,
        bus: Optional[EventBus] = None,
        config_path: Optional[PathLike] = None,
    ) -> FramingSession:
        """Build a session from load_config(config_path) with *overlay* on top."""
        cfg = merged(overlay, config_path)
        return cls(
            Camera.from_config(cfg),
            move_speed=cfg["motion"]["move_speed"],
            legacy_depth_scan=cfg["framing"]["legacy_depth_scan"],
            inclusive_edges=cfg["visibility"]["inclusive_edges"],
            bus=bus,
        )

    @property
    def camera(self) -> Camera:
        return self.rig.camera

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def report(self) -> TestReport:
        return self.checker.report

    @property
    def fail_count(self) -> int:
        return self.checker.fail_count

    @property
    def is_idle(self) -> bool:
        """True when the camera is settled and no reposition is pending."""
        return self.rig.is_settled and not self.rig.reposition_pending

    # -- object source ---------------------------------------------------------

    def add_bounds(self, volume: BoundingVolume) -> None:
        self.bounds.add(volume)
        self.rig.on_focus_updated(self.bounds)

    def add_bounds_many(self, volumes: Iterable[BoundingVolume]) -> None:
        for volume in volumes:
            self.bounds.add(volume)
        self.rig.on_focus_updated(self.bounds)

    def remove_all(self) -> None:
        """Drop every volume and clear the report."""
        self.bounds.clear()
        self.reset()
        self.rig.on_focus_updated(self.bounds)

    # -- controller --------------------------------------------------------------

    def toggle_projection(self) -> ProjectionMode:
        return self.rig.toggle_projection()

    def reset(self) -> None:
        self.checker.reset()
        self.bus.publish(EventType.REPORT_RESET, {})

    # -- frame lifecycle ---------------------------------------------------------

    def update(self, dt: float) -> bool:
        """Update phase. Returns True if the camera arrived this frame."""
        self._frame += 1
        return self.rig.tick(dt)

    def post_render(self) -> None:
        """Post-render phase: run any reposition requested before this point."""
        self.rig.post_render()

    def step(self, dt: float) -> bool:
        arrived = self.update(dt)
        self.post_render()
        return arrived

    def run_until_settled(self, dt: float, max_frames: int = 10_000) -> int:
        """Step frames until idle. Returns the number of frames run.

        Raises RuntimeError if the camera is still moving after *max_frames*.
        """
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        frames = 0
        while not self.is_idle:
            if frames >= max_frames:
                raise RuntimeError(f"camera did not settle within {max_frames} frames")
            self.step(dt)
            frames += 1
        return frames

    # -- reporting -----------------------------------------------------------------

    def report_text(self) -> str:
        return format_report(self.report)

    def _on_arrived(self) -> None:
        # Rig on_arrived callback: runs before FRAMING_ARRIVED is published and
        # its errors propagate out of tick().
        if not self.bounds:
            logger.debug("Visibility check skipped: no bounds")
            return
        report = self.checker.evaluate(self.bounds.snapshot(), self.camera)
        self.bus.publish(EventType.REPORT_UPDATED, {
            "fail_count": report.fail_count,
            "visible": report.visible_count,
            "total": report.total_count,
        })
