"""
Application exceptions mapped to HTTP status codes.
"""


class ApiError(Exception):
    """Error that the route layer turns into a JSON error body."""

    status = 500

    def __init__(self, message, status=None, details=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.details = details

    def to_dict(self):
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ApiError):
    status = 400


class Unauthorized(ApiError):
    status = 401

    def __init__(self, message="Unauthorized", status=None, details=None):
        super().__init__(message, status, details)


class NotFound(ApiError):
    status = 404


class PayloadTooLarge(ApiError):
    status = 413


class UnsupportedMediaType(ApiError):
    status = 415


class AIServiceNotConfigured(ApiError):
    status = 503

    def __init__(self, message="AI service not configured. Please contact administrator.",
                 status=None, details=None):
        super().__init__(message, status, details)


class AIServiceError(ApiError):
    status = 500


class ResumeImportError(ApiError):
    status = 400
