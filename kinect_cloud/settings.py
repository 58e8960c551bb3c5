# settings.py
# Device configuration record and display constants.
from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceConfiguration:
    # names of the matching pyk4a enum members
    color_format: str = "COLOR_BGRA32"
    color_resolution: str = "RES_720P"
    depth_mode: str = "NFOV_UNBINNED"
    camera_fps: str = "FPS_30"
    synchronized_images_only: bool = True
    wired_sync_mode: str = "STANDALONE"


ESC_KEY = 27
EXIT_KEYS = (ord('q'), ESC_KEY)
SNAPSHOT_KEY = ord('s')
KEY_DELAY_MS = 30

MIN_DEPTH = 0  # mm
MAX_DEPTH = 5000  # 5000mm

ORIGIN_SCALE = 100.0  # mm

COLOR_WINDOW = "color (kinect {})"
DEPTH_WINDOW = "transformed depth (kinect {})"
CLOUD_WINDOW = "point cloud (kinect {})"
CLOUD_WIDGET = "cloud"
ORIGIN_WIDGET = "origin"

DEFAULT_OUTPUT_DIR = "./records"
