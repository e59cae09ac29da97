"""Domain layer errors.

Every domain error carries an ``ErrorKind`` (the coarse category the
interface layer maps onto a status code) and a stable machine-readable
``code``. Messages are safe to show to end users.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain failure."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class DomainError(Exception):
    """Base domain error."""

    kind: ErrorKind = ErrorKind.BAD_REQUEST
    code: str = "domain_error"
    default_message: str = "Request could not be processed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============================================================================
# BAD REQUEST
# ============================================================================
class ValidationError(DomainError):
    """Domain validation error."""

    code = "validation_error"
    default_message = "Invalid request."


class InvalidEmailError(ValidationError):
    """Raised when an email address is not well-formed."""

    code = "invalid_email"
    default_message = "Invalid email format."


class InvalidMobileNumberError(ValidationError):
    """Raised when a mobile number is not well-formed."""

    code = "invalid_mobile_number"
    default_message = "Invalid mobile number."


class WeakPasswordError(ValidationError):
    """Raised when a password does not satisfy the password policy."""

    code = "weak_password"
    default_message = (
        "Password must be at least 8 characters long and include upper and "
        "lower case letters, numbers, and symbols."
    )


class CodeExpiredError(DomainError):
    """Raised when a one-time code is used at or after its expiry."""

    code = "code_expired"
    default_message = "Verification code has expired."


class CodeMismatchError(DomainError):
    """Raised when a submitted one-time code differs from the stored one."""

    code = "code_mismatch"
    default_message = "Invalid verification code."


# ============================================================================
# UNAUTHORIZED
# ============================================================================
class UnauthorizedError(DomainError):
    """Raised when a caller cannot be authenticated."""

    kind = ErrorKind.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized access."


class InvalidCredentialsError(UnauthorizedError):
    """Raised on a failed password login.

    Unknown email and wrong password produce this same error.
    """

    code = "invalid_credentials"
    default_message = "Invalid credentials."


class MissingTokenError(UnauthorizedError):
    """Raised when a request carries no access token."""

    code = "token_missing"
    default_message = "Access token is missing."


class TokenExpiredError(UnauthorizedError):
    """Raised when a session token is past its expiry."""

    code = "token_expired"
    default_message = "Token has expired."


class TokenMalformedError(UnauthorizedError):
    """Raised when a session token fails signature or structure checks."""

    code = "token_malformed"
    default_message = "Invalid token."


class InvalidIdentityTokenError(UnauthorizedError):
    """Raised when a third-party identity token cannot be validated."""

    code = "identity_token_invalid"
    default_message = "Invalid identity token."


# ============================================================================
# FORBIDDEN
# ============================================================================
class ForbiddenError(DomainError):
    """Raised when an authenticated caller may not perform an operation."""

    kind = ErrorKind.FORBIDDEN
    code = "forbidden"
    default_message = "Access denied."


class EmailUnverifiedError(ForbiddenError):
    """Raised when the identity provider reports the email as unverified."""

    code = "email_unverified"
    default_message = "Identity provider email is not verified."


class AccountInactiveError(ForbiddenError):
    """Raised when an inactive account attempts to sign in."""

    code = "account_inactive"
    default_message = "Account is inactive."


# ============================================================================
# NOT FOUND
# ============================================================================
class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND
    code = "not_found"

    def __init__(self, resource: str, identifier: str, message: str | None = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(message or f"{resource} not found.")


class AccountNotLinkedError(NotFoundError):
    """Raised when a third-party identity has no matching account."""

    code = "account_not_found"

    def __init__(self, subject_id: str):
        super().__init__(
            "Identity",
            subject_id,
            "No account is linked to this identity. Please sign up first.",
        )


class CodeNotFoundError(NotFoundError):
    """Raised when no one-time code exists for an email address."""

    code = "code_not_found"

    def __init__(self, email: str):
        super().__init__(
            "Verification code",
            email,
            "No verification code found. Please request a new one.",
        )


# ============================================================================
# CONFLICT
# ============================================================================
class ConflictError(DomainError):
    """Raised when creating an account would violate a uniqueness rule.

    The message never names the colliding field.
    """

    kind = ErrorKind.CONFLICT
    code = "conflict"
    default_message = "An account already exists."
