"""
Handles handed out by the camera SDK boundary.

A handle wraps whatever the binding returned (a capture object, a numpy
buffer, a calibration) and tracks whether it has been released. Releasing
drops the reference to the native object; releasing twice is an error.
"""
from enum import Enum


WAIT_INFINITE = -1
RESULT_FAILED = 1


class WaitResult(Enum):
    SUCCEEDED = 0
    FAILED = 1
    TIMEOUT = 2


class CalibrationType(Enum):
    DEPTH = 0
    COLOR = 1


class Handle:
    kind = "handle"

    def __init__(self, native):
        self._native = native
        self.released = False

    @property
    def native(self):
        if self.released:
            raise RuntimeError(f"{self.kind} handle used after release")
        return self._native

    def release(self):
        if self.released:
            raise RuntimeError(f"{self.kind} handle released twice")
        self._native = None
        self.released = True

    def __repr__(self):
        state = "released" if self.released else "live"
        return f"<{type(self).__name__} {state}>"


class Capture(Handle):
    kind = "capture"


class Image(Handle):
    """A 2-D sensor or SDK-allocated buffer, ``native`` is a numpy array."""
    kind = "image"

    def __init__(self, native, image_format: str):
        super().__init__(native)
        self.format = image_format

    @property
    def width(self) -> int:
        return int(self.native.shape[1])

    @property
    def height(self) -> int:
        return int(self.native.shape[0])


class Transformation(Handle):
    kind = "transformation"
