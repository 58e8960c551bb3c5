from .errors import DeviceNotFoundError, KinectError, SdkCallError
from .frame import Frame, FrameGrabber
from .session import DeviceSession
from .settings import DeviceConfiguration

__version__ = "0.1.0"
