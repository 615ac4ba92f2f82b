import inspect
from enum import IntEnum, StrEnum
from uuid import uuid4


class AppErrorCode(StrEnum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_CONFIG = "E_CONFIG"
    E_REMOTE_STORE = "E_REMOTE_STORE"
    E_NOT_AUTHENTICATED = "E_NOT_AUTHENTICATED"
    E_FORBIDDEN = "E_FORBIDDEN"
    E_PAYMENT_REQUIRED = "E_PAYMENT_REQUIRED"
    E_SIGNED_URL_FAILED = "E_SIGNED_URL_FAILED"


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


class AppError(Exception):
    """Error raised by domain and API code, rendered as an ApiFailure envelope.

    The caller location is captured at construction time so the exception
    handler can log where the error originated rather than where it was caught.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: HttpStatusCode | int = HttpStatusCode.INTERNAL_SERVER_ERROR,
    ):
        super().__init__(errmesg)
        self.errcode = str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]
        self.caller_info = self._capture_caller()

    @staticmethod
    def _capture_caller() -> str:
        frame = inspect.currentframe()
        try:
            # Skip _capture_caller and __init__ (plus any subclass __init__ chain)
            caller = frame.f_back.f_back if frame and frame.f_back else None
            while caller is not None and caller.f_code.co_name == "__init__":
                caller = caller.f_back
            if caller is None:
                return "unknown"
            module_name = caller.f_globals.get("__name__", caller.f_code.co_filename)
            return f"{module_name}:{caller.f_code.co_name}:{caller.f_lineno}"
        finally:
            del frame

    def __repr__(self) -> str:
        return f"AppError(errcode={self.errcode!r}, status_code={self.status_code}, errmesg={self.errmesg!r})"
