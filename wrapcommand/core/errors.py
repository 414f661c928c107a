from typing import Any, Dict, Optional


class WrapCommandError(Exception):
    """Base error carrying the HTTP status and the JSON body returned to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class RequestInvalid(WrapCommandError):
    status_code = 400

    def __init__(self, message: str, details: Optional[list] = None):
        super().__init__(message)
        self.details = details

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ExecutionForbidden(WrapCommandError):
    status_code = 403

    def __init__(self, message: str, reason: Optional[str], convert_to_pending: bool):
        super().__init__(message)
        self.reason = reason
        self.convert_to_pending = convert_to_pending

    def to_body(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.message,
            "reason": self.reason,
            "convert_to_pending": self.convert_to_pending,
        }


class DraftNotFound(WrapCommandError):
    status_code = 404

    def __init__(self, draft_id: str):
        super().__init__("Draft not found")
        self.draft_id = draft_id


class DraftAlreadyProcessed(WrapCommandError):
    status_code = 400

    def __init__(self, status: str):
        super().__init__(f"Draft already processed with status: {status}")
        self.status = status


class PersistenceFailed(WrapCommandError):
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message, "code": self.code}


class SupabaseError(Exception):
    """Raised by the PostgREST client when the database rejects a request."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(f"Supabase error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code


class EmailDeliveryError(Exception):
    """Raised when the transactional mail provider refuses a message."""
