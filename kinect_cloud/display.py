import logging

import cv2
import numpy as np
import open3d as o3d

from . import settings


logger = logging.getLogger(__name__)


def scale_depth(depth: np.ndarray, near: float = settings.MIN_DEPTH, far: float = settings.MAX_DEPTH) -> np.ndarray:
    """Map depth in mm linearly to 8 bits, near -> 255 and far -> 0."""
    alpha = -255.0 / (far - near)
    beta = 255.0 * far / (far - near)
    scaled = depth.astype(np.float32) * alpha + beta
    return np.clip(np.rint(scaled), 0, 255).astype(np.uint8)


def cloud_arrays(xyz: np.ndarray, color: np.ndarray = None):
    """
    Flatten an HxWx3 point image (and the matching BGRA/BGR color image)
    into Nx3 points and Nx3 RGB colors in [0, 1], dropping pixels without depth.
    """
    points = xyz.reshape(-1, 3).astype(np.float64)
    valid = points[:, 2] != 0
    points = points[valid]
    if color is None:
        return points, None
    # BGR(A) -> RGB
    colors = color[..., 2::-1].reshape(-1, 3)[valid].astype(np.float64) / 255.0
    return points, colors


class CloudViewer:
    def __init__(self, window_name: str, origin_scale: float = settings.ORIGIN_SCALE):
        self.window_name = window_name
        self.origin_scale = origin_scale
        self._vis = None
        self._widgets = {}
        self._opened = False
        self._stopped = False

    def open(self):
        self._vis = o3d.visualization.Visualizer()
        self._vis.create_window(window_name=self.window_name)
        self._opened = True
        origin = o3d.geometry.TriangleMesh.create_coordinate_frame(size=self.origin_scale)
        self._vis.add_geometry(origin)
        self._widgets[settings.ORIGIN_WIDGET] = origin

    def show_cloud(self, name: str, points: np.ndarray, colors: np.ndarray = None):
        cloud = self._widgets.get(name)
        created = cloud is None
        if created:
            cloud = o3d.geometry.PointCloud()
        cloud.points = o3d.utility.Vector3dVector(points)
        if colors is not None:
            cloud.colors = o3d.utility.Vector3dVector(colors)

        if created:
            self._vis.add_geometry(cloud)
            self._widgets[name] = cloud
        else:
            self._vis.update_geometry(cloud)

    def widget(self, name: str):
        return self._widgets.get(name)

    def spin_once(self):
        if not self._opened:
            return
        if not self._vis.poll_events():
            self._stopped = True
        self._vis.update_renderer()

    def was_stopped(self) -> bool:
        return self._stopped

    def close(self):
        if self._opened:
            self._opened = False
            vis, self._vis = self._vis, None
            vis.destroy_window()


class Display:
    """Color and registered-depth windows plus the 3-D point cloud viewer of one device."""

    def __init__(self, device_index: int = 0, viewer: CloudViewer = None):
        self.color_window = settings.COLOR_WINDOW.format(device_index)
        self.depth_window = settings.DEPTH_WINDOW.format(device_index)
        self.viewer = viewer or CloudViewer(settings.CLOUD_WINDOW.format(device_index))

    def open(self):
        cv2.namedWindow(self.color_window, cv2.WINDOW_AUTOSIZE)
        cv2.namedWindow(self.depth_window, cv2.WINDOW_AUTOSIZE)
        self.viewer.open()

    def show(self, frame):
        self.show_color(frame.color)
        self.show_transformed_depth(frame.transformed_depth)
        self.show_point_cloud(frame.xyz, frame.color)
        self.viewer.spin_once()

    def show_color(self, color):
        if color is None:
            return
        cv2.imshow(self.color_window, color)

    def show_transformed_depth(self, transformed_depth):
        if transformed_depth is None:
            return
        cv2.imshow(self.depth_window, scale_depth(transformed_depth))

    def show_point_cloud(self, xyz, color):
        if xyz is None or color is None:
            return
        points, colors = cloud_arrays(xyz, color)
        self.viewer.show_cloud(settings.CLOUD_WIDGET, points, colors)

    def poll_key(self, delay_ms: int = settings.KEY_DELAY_MS) -> int:
        return cv2.waitKey(delay_ms) & 0xFF

    def was_stopped(self) -> bool:
        return self.viewer.was_stopped()

    def close(self):
        try:
            cv2.destroyAllWindows()
        finally:
            self.viewer.close()
