# mindcare/errors.py
from typing import Any, Dict, Optional


class MindCareError(Exception):
    """Base class for every error the core reports to its callers.

    Each subclass carries a stable machine-readable ``kind`` and the HTTP
    status the API layer renders it with. Extra keyword details are copied
    into the response body next to the message.
    """

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.kind, "message": self.message, **self.details}


class ValidationError(MindCareError):
    kind = "ValidationError"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.field = field


class NotFound(MindCareError):
    kind = "NotFound"
    status_code = 404


class Forbidden(MindCareError):
    kind = "Forbidden"
    status_code = 403


class InvalidState(MindCareError):
    kind = "InvalidState"
    status_code = 409

    def __init__(self, message: str, current_state: Optional[str] = None):
        super().__init__(message, currentState=current_state)
        self.current_state = current_state


class TooLate(MindCareError):
    kind = "TooLate"
    status_code = 400

    def __init__(self, message: str, policy: str, warning: Optional[str] = None):
        super().__init__(message, policy=policy, warning=warning)
        self.policy = policy


class StoreError(MindCareError):
    """Persistence is unavailable. The whole operation may be retried."""

    kind = "StoreError"
    status_code = 503

    def __init__(self, message: str):
        super().__init__(message, retryable=True)
