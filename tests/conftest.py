from unittest.mock import MagicMock

import numpy as np
import pytest

from kinect_cloud.errors import SdkCallError
from kinect_cloud.handles import RESULT_FAILED, Capture, Image, Transformation, WaitResult


WIDTH, HEIGHT = 8, 6
DEPTH_WIDTH, DEPTH_HEIGHT = 4, 3


def make_color(width=WIDTH, height=HEIGHT):
    color = np.zeros((height, width, 4), dtype=np.uint8)
    color[..., 0] = 10   # B
    color[..., 1] = 20   # G
    color[..., 2] = 30   # R
    color[..., 3] = 255
    return color


def make_depth(width=DEPTH_WIDTH, height=DEPTH_HEIGHT, value=1000):
    return np.full((height, width), value, dtype=np.uint16)


class FakeSdk:
    """
    In-memory stand-in for the k4a boundary. Records every call and counts
    handles given out and handed back.
    """

    def __init__(self, device_count=1, captures=None):
        self.device_count = device_count
        # each entry: (color array or None, depth array or None), or a WaitResult
        self.captures = list(captures or [])
        self.calls = []
        self.live = []
        self.acquired = 0
        self.released = 0
        self.device_open = False
        self.cameras_running = False
        self.transformation_alive = False
        self.fail_on = set()

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise SdkCallError(name.replace("_", " "), RESULT_FAILED)

    def _acquire(self, handle):
        self.acquired += 1
        self.live.append(handle)
        return handle

    def _release(self, handle):
        handle.release()
        self.live.remove(handle)
        self.released += 1

    def installed_count(self):
        self.calls.append("installed_count")
        return self.device_count

    def open_device(self, index, configuration):
        self._call("open_device")
        self.device_open = True
        return MagicMock(name="device{}".format(index))

    def start_cameras(self, device):
        self._call("start_cameras")
        self.cameras_running = True

    def stop_cameras(self, device):
        self.calls.append("stop_cameras")
        self.cameras_running = False

    def close_device(self, device):
        self.calls.append("close_device")
        self.device_open = False

    def get_calibration(self, device):
        self._call("get_calibration")
        return MagicMock(name="calibration")

    def create_transformation(self, calibration):
        self._call("create_transformation")
        self.transformation_alive = True
        return Transformation(calibration)

    def destroy_transformation(self, transformation):
        self.calls.append("destroy_transformation")
        transformation.release()
        self.transformation_alive = False

    def get_capture(self, device, timeout_ms):
        self.calls.append("get_capture")
        assert not self.live, "handles leaked from the previous frame: {}".format(self.live)
        if not self.captures:
            return WaitResult.TIMEOUT, None
        entry = self.captures.pop(0)
        if isinstance(entry, WaitResult):
            return entry, None
        return WaitResult.SUCCEEDED, self._acquire(Capture(entry))

    def capture_get_color_image(self, capture):
        color, _ = capture.native
        if color is None:
            return None
        return self._acquire(Image(color, "COLOR_BGRA32"))

    def capture_get_depth_image(self, capture):
        _, depth = capture.native
        if depth is None:
            return None
        return self._acquire(Image(depth, "DEPTH16"))

    def capture_release(self, capture):
        self.calls.append("capture_release")
        self._release(capture)

    def image_get_width(self, image):
        return image.width

    def image_get_height(self, image):
        return image.height

    def depth_image_to_color_camera(self, transformation, depth_image, width, height):
        self._call("depth_image_to_color_camera")
        assert not transformation.released
        value = int(depth_image.native.flat[0])
        return self._acquire(Image(np.full((height, width), value, dtype=np.uint16), "DEPTH16"))

    def depth_image_to_point_cloud(self, transformation, depth_image, calibration_type):
        self._call("depth_image_to_point_cloud")
        depth = depth_image.native.astype(np.int16)
        height, width = depth.shape
        xs, ys = np.meshgrid(np.arange(width, dtype=np.int16), np.arange(height, dtype=np.int16))
        return self._acquire(Image(np.stack((xs, ys, depth), axis=-1), "CUSTOM"))

    def image_to_array(self, image):
        return np.array(image.native, copy=True)

    def image_release(self, image):
        self.calls.append("image_release")
        self._release(image)


class FakeDisplay:
    def __init__(self, keys=None, stop_after=None):
        self.keys = list(keys or [])
        self.stop_after = stop_after
        self.frames = []
        self.color_updates = 0
        self.depth_updates = 0
        self.cloud_updates = 0
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def show(self, frame):
        self.frames.append(frame)
        if frame.color is not None:
            self.color_updates += 1
        if frame.transformed_depth is not None:
            self.depth_updates += 1
        if frame.xyz is not None and frame.color is not None:
            self.cloud_updates += 1

    def poll_key(self, delay_ms=30):
        return self.keys.pop(0) if self.keys else 255

    def was_stopped(self):
        return self.stop_after is not None and len(self.frames) >= self.stop_after

    def close(self):
        self.closed = True


@pytest.fixture
def full_capture():
    return make_color(), make_depth()


@pytest.fixture
def sdk(full_capture):
    return FakeSdk(captures=[full_capture])
