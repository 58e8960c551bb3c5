import logging
import os

import numpy as np
from plyfile import PlyData, PlyElement

from .display import cloud_arrays


logger = logging.getLogger(__name__)


def unused_filename(save_points_dir: str, prefix: str, stamp) -> str:
    points_filename = os.path.join(save_points_dir, "{}_{}.ply".format(prefix, stamp))
    n = 1
    while os.path.exists(points_filename):
        points_filename = os.path.join(save_points_dir, "{}_{}_{}.ply".format(prefix, stamp, n))
        n += 1
    return points_filename


def save_points_to_ply(frame, save_points_dir: str, stamp):
    """
    Write the valid points of frame.xyz to an ASCII PLY file named after
    stamp, never replacing an existing file. Points carry red/green/blue
    when the frame has color. Returns the written path, or None when the
    frame has no point cloud.
    """
    if frame is None or frame.xyz is None:
        logger.warning("no point cloud to save")
        return None

    points, colors = cloud_arrays(frame.xyz, frame.color)
    if len(points) == 0:
        logger.warning("no depth points")
        return None

    os.makedirs(save_points_dir, exist_ok=True)
    if colors is None:
        points_array = np.empty(len(points), dtype=[('x', 'f4'), ('y', 'f4'), ('z', 'f4')])
        points_filename = unused_filename(save_points_dir, "points", stamp)
    else:
        points_array = np.empty(len(points), dtype=[('x', 'f4'), ('y', 'f4'), ('z', 'f4'),
                                                    ('red', 'u1'), ('green', 'u1'), ('blue', 'u1')])
        rgb = np.rint(colors * 255.0).astype(np.uint8)
        points_array['red'] = rgb[:, 0]
        points_array['green'] = rgb[:, 1]
        points_array['blue'] = rgb[:, 2]
        points_filename = unused_filename(save_points_dir, "color_points", stamp)
    points_array['x'] = points[:, 0]
    points_array['y'] = points[:, 1]
    points_array['z'] = points[:, 2]

    el = PlyElement.describe(points_array, 'vertex')
    PlyData([el], text=True).write(points_filename)
    logger.info("saved %d points to %s", len(points_array), points_filename)
    return points_filename
