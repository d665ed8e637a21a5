from typing import Optional


class DingRobotError(Exception):
    pass


class SerializationError(DingRobotError):
    pass


class TransportError(DingRobotError):
    pass


class DecodeError(DingRobotError):
    """Body is not a JSON object with an integer ``errcode``.

    A body missing ``errcode`` is rejected here rather than read as success.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ServiceError(DingRobotError):
    def __init__(self, errcode: int, errmsg: str) -> None:
        super().__init__(f"dingrobot send failed: {errmsg} (errcode={errcode})")
        self.errcode = errcode
        self.errmsg = errmsg
