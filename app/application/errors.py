"""
Application error taxonomy.

Use cases raise these; the API layer renders them into the JSON envelope
(see app.main). Each error carries its HTTP status and an errorType tag the
frontend can switch on.
"""


class AppError(Exception):
    status_code = 500
    error_type = "internal_error"
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, details: list | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    error_type = "validation_error"
    default_message = "Validation Error"


class DuplicateEmailError(ValidationError):
    default_message = "Email already in use"


class AuthError(AppError):
    status_code = 401
    error_type = "auth_error"
    default_message = "Not authorized"


class InvalidCredentialsError(AuthError):
    default_message = "Invalid credentials"


class AccessTokenRequiredError(AuthError):
    default_message = "Access token required"


class MissingTokenError(AuthError):
    default_message = "Refresh token required"


class InvalidTokenError(AuthError):
    default_message = "Invalid or expired token"


class TokenMismatchError(AuthError):
    default_message = "Invalid refresh token"


class AccountInactiveError(AuthError):
    default_message = "Account inactive"


class ForbiddenError(AppError):
    status_code = 403
    error_type = "authorization_error"
    default_message = "Forbidden - admin only"


class SubscriptionRequiredError(AppError):
    status_code = 403
    error_type = "SUBSCRIPTION_REQUIRED"
    default_message = "Account inactive. Subscription required."


class NotFoundError(AppError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


class InternalError(AppError):
    pass
