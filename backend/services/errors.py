"""
Exception hierarchy shared by the service layer.

Each error carries a machine code, an English message for logs, and the
translation key routers use to build the localized response message.
"""


class ServiceError(Exception):
    """Base exception for service errors."""
    message_key = "errors.unknown"

    def __init__(self, code: str, message: str, details: dict = None, message_key: str = None):
        self.code = code
        self.message = message
        self.details = details or {}
        if message_key:
            self.message_key = message_key
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised before any write when input is missing or malformed."""
    def __init__(self, message: str, message_key: str = "errors.requiredFields", details: dict = None):
        super().__init__("VALIDATION_ERROR", message, details, message_key)


class NotFoundError(ServiceError):
    """Raised when the addressed document does not exist."""
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} not found: {resource_id}",
            {"resource": resource, "id": resource_id},
            "errors.notFound"
        )


class StoreError(ServiceError):
    """Raised when a write against the document store fails."""
    def __init__(self, message: str, message_key: str = "errors.unknown"):
        super().__init__("STORE_ERROR", message, None, message_key)
