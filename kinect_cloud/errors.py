class KinectError(Exception):
    pass


class DeviceNotFoundError(KinectError):
    def __init__(self):
        super().__init__("Failed to found device!")


class SdkCallError(KinectError):
    def __init__(self, operation: str, code: int):
        self.operation = operation
        self.code = code
        super().__init__(f"Failed to {operation} {code:#x}!")
