# app/core/errors.py
"""Errors raised by the core and rendered at the request boundary.

Every subclass carries the HTTP status and the `error` payload that ends up
in the uniform ``{"outcome": "failure", "error": ...}`` response.
"""


class AppError(Exception):
    status_code = 400

    def __init__(self, error):
        super().__init__(error)
        self.error = error

    def to_response(self) -> dict:
        return {"outcome": "failure", "error": self.error}


class ValidationError(AppError):
    """Malformed or out-of-range input. Carries a list of reason codes."""

    status_code = 400

    def __init__(self, reasons):
        if isinstance(reasons, str):
            reasons = [reasons]
        super().__init__(list(reasons))

    @property
    def reasons(self) -> list:
        return self.error


class AuthenticationError(AppError):
    status_code = 401


class PermissionDenied(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    status_code = 409


class StoreError(AppError):
    """Persistence failure. The detail is logged, never sent to the caller."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__("generalError")
        self.detail = detail

    def __str__(self):
        return self.detail
