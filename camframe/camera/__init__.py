"""
Camera module: projection model and the motion-controlling rig.
"""

from camframe.camera.projection import Camera, ProjectionMode, Viewport

# rig is imported lazily: it depends on camframe.framing, which itself
# imports camframe.camera.projection.


def __getattr__(name):
    if name in ("CameraRig", "CameraBindingError", "MotionState"):
        from camframe.camera import rig
        return getattr(rig, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Camera",
    "ProjectionMode",
    "Viewport",
    "CameraRig",
    "CameraBindingError",
    "MotionState",
]
