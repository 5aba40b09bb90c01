"""camframe: camera framing and visibility verification for 3D scenes.

Frames a set of axis-aligned bounding volumes with a single camera pose,
interpolates the camera toward it frame by frame, and checks per volume
whether it is fully visible once the camera has settled.
"""

__version__ = "0.1.0"
