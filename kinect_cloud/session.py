import logging

from .errors import DeviceNotFoundError
from .settings import DeviceConfiguration


logger = logging.getLogger(__name__)


class DeviceSession:
    """
    Owns the camera connection: the opened device, its running cameras,
    the factory calibration and the depth-to-color transformation built
    from it.

    open() acquires them in that order; close() gives back whatever was
    acquired, in reverse order, each step regardless of whether the
    previous one failed. A failing open() closes the partial session
    before the error propagates.
    """

    def __init__(self, sdk, index: int = 0, configuration: DeviceConfiguration = None):
        self.sdk = sdk
        self.index = index
        self.configuration = configuration or DeviceConfiguration()
        self.device = None
        self.calibration = None
        self.transformation = None
        self.started = False

    def open(self):
        device_count = self.sdk.installed_count()
        if device_count == 0:
            raise DeviceNotFoundError()
        logger.info("found %d device(s), opening device %d", device_count, self.index)

        try:
            self.device = self.sdk.open_device(self.index, self.configuration)
            self.sdk.start_cameras(self.device)
            self.started = True
            self.calibration = self.sdk.get_calibration(self.device)
            self.transformation = self.sdk.create_transformation(self.calibration)
        except Exception:
            self.close()
            raise
        logger.info("device %d started: %s", self.index, self.configuration)
        return self

    def close(self):
        try:
            if self.transformation is not None:
                transformation, self.transformation = self.transformation, None
                self.sdk.destroy_transformation(transformation)
        finally:
            try:
                if self.started:
                    self.started = False
                    self.sdk.stop_cameras(self.device)
            finally:
                if self.device is not None:
                    device, self.device = self.device, None
                    self.calibration = None
                    self.sdk.close_device(device)
                    logger.info("device %d closed", self.index)

    @property
    def is_open(self) -> bool:
        return self.device is not None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
