import logging
from datetime import datetime as dt
from enum import Enum

from . import settings
from .display import Display
from .export import save_points_to_ply
from .frame import FrameGrabber
from .handles import WAIT_INFINITE
from .session import DeviceSession


logger = logging.getLogger(__name__)


class State(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting down"
    STOPPED = "stopped"


class App:
    """
    Main loop: grab a frame, present it, poll the keyboard.

    Leaves RUNNING on an exit key, when the 3-D viewer was closed or when a
    capture wait timed out. Shutdown always closes the display and the
    device session, also when initialization or a frame failed.
    """

    def __init__(self, sdk, device_index: int = 0, display=None, output_dir: str = settings.DEFAULT_OUTPUT_DIR,
                 timeout_ms: int = WAIT_INFINITE):
        self.session = DeviceSession(sdk, device_index)
        self.grabber = FrameGrabber(self.session, timeout_ms)
        self.display = display if display is not None else Display(device_index)
        self.output_dir = output_dir
        self.state = None
        self.frame_count = 0
        self.saved_count = 0
        self.last_frame = None

    def run(self) -> int:
        self.state = State.INITIALIZING
        try:
            self.session.open()
            self.display.open()
            print("q/ESC: quit | s: save point cloud")
            self.state = State.RUNNING
            while self.state is State.RUNNING:
                self.step()
        finally:
            self.state = State.SHUTTING_DOWN
            self.shutdown()
            self.state = State.STOPPED
        return self.frame_count

    def step(self):
        frame = self.grabber.grab()
        if frame is None:
            self.state = State.SHUTTING_DOWN
            return

        self.display.show(frame)
        self.last_frame = frame
        self.frame_count += 1

        key = self.display.poll_key()
        if key in settings.EXIT_KEYS:
            logger.info("exit key pressed")
            self.state = State.SHUTTING_DOWN
        elif key == settings.SNAPSHOT_KEY:
            self.save_snapshot()

        if self.display.was_stopped():
            logger.info("viewer closed")
            self.state = State.SHUTTING_DOWN

    def save_snapshot(self):
        stamp = dt.now().strftime("%Y%m%d%H%M%S")
        path = save_points_to_ply(self.last_frame, self.output_dir, stamp)
        if path is not None:
            self.saved_count += 1
        return path

    def shutdown(self):
        try:
            self.display.close()
        finally:
            self.session.close()
