"""
Azure Kinect SDK boundary.

K4ASdk exposes the handle-based calls the viewer needs on top of pyk4a.
Every call that can fail raises SdkCallError with the failing operation,
except get_capture, which reports timeout and failure as a WaitResult.
"""
import logging

import numpy as np
from pyk4a import (
    FPS,
    ColorResolution,
    Config,
    DepthMode,
    ImageFormat,
    K4AException,
    K4ATimeoutException,
    PyK4A,
    WiredSyncMode,
    connected_device_count,
)
from pyk4a.transformation import depth_image_to_color_camera, depth_image_to_point_cloud

from .errors import SdkCallError
from .handles import RESULT_FAILED, CalibrationType, Capture, Image, Transformation, WaitResult
from .settings import DeviceConfiguration


logger = logging.getLogger(__name__)


def to_pyk4a_config(configuration: DeviceConfiguration) -> Config:
    return Config(
        color_format=ImageFormat[configuration.color_format],
        color_resolution=ColorResolution[configuration.color_resolution],
        depth_mode=DepthMode[configuration.depth_mode],
        camera_fps=FPS[configuration.camera_fps],
        synchronized_images_only=configuration.synchronized_images_only,
        wired_sync_mode=WiredSyncMode[configuration.wired_sync_mode],
    )


class K4ASdk:
    def installed_count(self) -> int:
        return connected_device_count()

    # device

    def open_device(self, index: int, configuration: DeviceConfiguration) -> PyK4A:
        device = PyK4A(config=to_pyk4a_config(configuration), device_id=index)
        try:
            device.open()
        except K4AException as e:
            logger.debug("open device %d: %s", index, e)
            raise SdkCallError("open device", RESULT_FAILED) from e
        return device

    def start_cameras(self, device: PyK4A):
        try:
            device.start()
        except K4AException as e:
            raise SdkCallError("start cameras", RESULT_FAILED) from e

    def stop_cameras(self, device: PyK4A):
        # PyK4A.stop() closes the device as well
        if device.is_running:
            device.stop()

    def close_device(self, device: PyK4A):
        if device.opened:
            device.close()

    def get_calibration(self, device: PyK4A):
        try:
            return device.calibration
        except K4AException as e:
            raise SdkCallError("get calibration", RESULT_FAILED) from e

    # transformation

    def create_transformation(self, calibration) -> Transformation:
        try:
            calibration.transformation_handle
        except K4AException as e:
            raise SdkCallError("create transformation", RESULT_FAILED) from e
        return Transformation(calibration)

    def destroy_transformation(self, transformation: Transformation):
        transformation.release()

    def depth_image_to_color_camera(self, transformation: Transformation, depth_image: Image,
                                    width: int, height: int) -> Image:
        calibration = transformation.native
        transformed = depth_image_to_color_camera(depth_image.native, calibration, calibration.thread_safe)
        if transformed is None or transformed.shape[:2] != (height, width):
            raise SdkCallError("transform depth image to color camera", RESULT_FAILED)
        return Image(transformed, "DEPTH16")

    def depth_image_to_point_cloud(self, transformation: Transformation, depth_image: Image,
                                   calibration_type: CalibrationType) -> Image:
        calibration = transformation.native
        xyz = depth_image_to_point_cloud(depth_image.native, calibration, calibration.thread_safe,
                                         calibration_type_depth=calibration_type is CalibrationType.DEPTH)
        if xyz is None:
            raise SdkCallError("transform depth image to point cloud", RESULT_FAILED)
        return Image(xyz, "CUSTOM")

    # capture

    def get_capture(self, device: PyK4A, timeout_ms: int):
        try:
            capture = device.get_capture(timeout=timeout_ms)
        except K4ATimeoutException:
            return WaitResult.TIMEOUT, None
        except K4AException as e:
            logger.debug("get capture: %s", e)
            return WaitResult.FAILED, None
        return WaitResult.SUCCEEDED, Capture(capture)

    def capture_get_color_image(self, capture: Capture):
        color = capture.native.color
        if color is None or color.size == 0:
            return None
        return Image(color, "COLOR_BGRA32")

    def capture_get_depth_image(self, capture: Capture):
        depth = capture.native.depth
        if depth is None or depth.size == 0:
            return None
        return Image(depth, "DEPTH16")

    def capture_release(self, capture: Capture):
        capture.release()

    # image

    def image_get_width(self, image: Image) -> int:
        return image.width

    def image_get_height(self, image: Image) -> int:
        return image.height

    def image_to_array(self, image: Image) -> np.ndarray:
        return np.array(image.native, copy=True)

    def image_release(self, image: Image):
        image.release()
