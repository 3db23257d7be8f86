# ==========================
# Fetch Errors
# ==========================
from typing import Optional


class FetchError(Exception):
    """Base class for failures surfaced through a fetch state"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkFailure(FetchError):
    """The request could not complete (no HTTP status available)"""

    def __init__(self, detail: str):
        super().__init__(f"Network error: {detail}")


class FetchTimeout(NetworkFailure):
    def __init__(self, timeout: float):
        FetchError.__init__(self, f"Request timed out after {timeout:g}s")
        self.timeout = timeout


class HttpError(FetchError):
    """Upstream answered with a non-2xx status"""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP error! status: {status_code}", status_code=status_code)


class ParseFailure(FetchError):
    """The response body did not match the expected shape"""

    def __init__(self, detail: str):
        super().__init__(f"Invalid response: {detail}")
