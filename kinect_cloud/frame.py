import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import SdkCallError
from .handles import RESULT_FAILED, WAIT_INFINITE, CalibrationType, WaitResult


logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """Displayable buffers of one capture; any of them may be missing."""
    color: Optional[np.ndarray] = None
    depth: Optional[np.ndarray] = None
    transformed_depth: Optional[np.ndarray] = None
    xyz: Optional[np.ndarray] = None


class FrameGrabber:
    def __init__(self, session, timeout_ms: int = WAIT_INFINITE):
        self.session = session
        self.sdk = session.sdk
        self.timeout_ms = timeout_ms

    def grab(self) -> Optional[Frame]:
        """
        Pull one capture and run it through registration and projection.

        Returns None when the wait timed out. Every handle obtained here is
        released before returning, whichever way this method exits.
        """
        result, capture = self.sdk.get_capture(self.session.device, self.timeout_ms)
        if result is WaitResult.FAILED:
            raise SdkCallError("get capture from device", RESULT_FAILED)
        if result is WaitResult.TIMEOUT:
            logger.warning("timed out waiting for a capture")
            return None

        with ExitStack() as images:
            with ExitStack() as capture_scope:
                capture_scope.callback(self.sdk.capture_release, capture)
                color_image = self._borrow(images, self.sdk.capture_get_color_image(capture))
                depth_image = self._borrow(images, self.sdk.capture_get_depth_image(capture))
                transformed_depth_image = self._borrow(images, self.register(color_image, depth_image))
                xyz_image = self._borrow(images, self.project(transformed_depth_image))

            return Frame(
                color=self._to_array(color_image),
                depth=self._to_array(depth_image),
                transformed_depth=self._to_array(transformed_depth_image),
                xyz=self._to_array(xyz_image),
            )

    def register(self, color_image, depth_image):
        """Resample depth into the color camera's pixel grid."""
        if depth_image is None:
            return None
        if color_image is None:
            logger.debug("no color image, skipping depth registration")
            return None

        width = self.sdk.image_get_width(color_image)
        height = self.sdk.image_get_height(color_image)
        return self.sdk.depth_image_to_color_camera(self.session.transformation, depth_image, width, height)

    def project(self, transformed_depth_image):
        """One X/Y/Z per color pixel from the registered depth."""
        if transformed_depth_image is None:
            return None
        return self.sdk.depth_image_to_point_cloud(self.session.transformation, transformed_depth_image,
                                                   CalibrationType.COLOR)

    def _borrow(self, stack: ExitStack, image):
        if image is not None:
            stack.callback(self.sdk.image_release, image)
        return image

    def _to_array(self, image):
        if image is None:
            return None
        return self.sdk.image_to_array(image)
