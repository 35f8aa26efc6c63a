# copycat/errors.py
from typing import Any, Dict, Optional


class LaunchError(Exception):
    """Base for every failure that maps to a JSON error response"""

    status_code: int = 500
    error: str = "Launch failed"

    def __init__(self, error: Optional[str] = None, status_code: Optional[int] = None, **extra: Any):
        self.error = error or self.error
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra
        super().__init__(self.error)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        payload.update(self.extra)
        return payload


class LaunchValidationError(LaunchError):
    status_code = 400
    error = "name, symbol, uri are required"


class PinningError(LaunchError):
    status_code = 502
    error = "IPFS upload failed"


class TradeError(LaunchError):
    """Non-success answer from the trade API; status and body are relayed as-is"""

    error = "Trade failed"

    def __init__(self, status_code: int, response: Any):
        super().__init__(status_code=status_code, response=response)


class UnhandledError(LaunchError):
    status_code = 500
    error = "Unhandled error"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "UnhandledError":
        return cls(message=str(exc) or exc.__class__.__name__)
