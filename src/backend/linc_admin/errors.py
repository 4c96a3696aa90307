"""LINC admin console error hierarchy.

All service-layer and form errors inherit from LincAdminError. The global
exception handler in main.py converts these to structured JSON responses with
the correct HTTP status code and a request_id for traceability.
"""


class LincAdminError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "", details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(LincAdminError):
    status_code = 404
    code = "NOT_FOUND"


class UnauthorizedError(LincAdminError):
    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(LincAdminError):
    status_code = 403
    code = "FORBIDDEN"


class ConflictError(LincAdminError):
    status_code = 409
    code = "CONFLICT"


class DuplicateCodeError(ConflictError):
    """The server rejected a generated code or username as already taken.

    details["suggested_code"] carries a fresh suggestion so the console can
    re-prompt instead of failing.
    """

    code = "DUPLICATE_CODE"


class CodeSpaceExhaustedError(ConflictError):
    code = "CODE_SPACE_EXHAUSTED"


class ValidationError(LincAdminError):
    status_code = 422
    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "",
        details: dict | None = None,
        validation_code: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.validation_code = validation_code
        if validation_code:
            self.details.setdefault("validation_code", validation_code)


class NotImplementedFeatureError(LincAdminError):
    status_code = 501
    code = "NOT_IMPLEMENTED"

    def __init__(self, message: str = "", redirect_to: str | None = None) -> None:
        super().__init__(message, {"redirect_to": redirect_to} if redirect_to else None)
        self.redirect_to = redirect_to


class UpstreamError(LincAdminError):
    status_code = 502
    code = "UPSTREAM_ERROR"


class UpstreamUnavailableError(LincAdminError):
    status_code = 503
    code = "UPSTREAM_UNAVAILABLE"
